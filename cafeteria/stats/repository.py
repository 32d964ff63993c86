from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from cafeteria.core.errors import StorageUnavailableError
from cafeteria.persistence.models import OrderItemModel, OrderModel
from cafeteria.stats.models import Order, OrderLine, StatsFilter

logger = logging.getLogger(__name__)


def day_bounds_utc(day: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """UTC instants of ``[day 00:00, day+1 00:00)`` on the calendar of ``tz``."""

    def _midnight(value: date) -> datetime:
        naive = datetime.combine(value, time.min)
        local = naive.astimezone() if tz is None else naive.replace(tzinfo=tz)
        return local.astimezone(timezone.utc)

    return _midnight(day), _midnight(day + timedelta(days=1))


def to_domain_order(row: OrderModel) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        status=row.status,
        created_at=row.created_at,
        lines=tuple(
            OrderLine(
                product_id=item.product_id,
                product_name=item.product.name if item.product is not None else "",
                quantity=int(item.quantity),
                unit_price=Decimal(item.price),
            )
            for item in row.items
        ),
    )


class OrderRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_orders(self, stats_filter: StatsFilter | None = None, tz: tzinfo | None = None) -> list[Order]:
        stats_filter = stats_filter or StatsFilter()
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items).selectinload(OrderItemModel.product))
            .order_by(OrderModel.created_at.asc(), OrderModel.id.asc())
        )
        if stats_filter.status:
            stmt = stmt.where(OrderModel.status == stats_filter.status)
        if stats_filter.day is not None:
            start, end = day_bounds_utc(stats_filter.day, tz)
            stmt = stmt.where(OrderModel.created_at >= start).where(OrderModel.created_at < end)
        if stats_filter.product_id is not None:
            stmt = stmt.where(OrderModel.items.any(OrderItemModel.product_id == stats_filter.product_id))

        try:
            rows = list(self.session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception("failed to load orders: filter=%s", stats_filter.as_dict())
            raise StorageUnavailableError("order store unavailable") from exc
        return [to_domain_order(row) for row in rows]
