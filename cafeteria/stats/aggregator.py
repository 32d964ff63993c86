from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable

from cafeteria.stats.models import ORDER_STATUSES, ZERO, DayStats, Order, OrderLine, ProductStats, StatsFilter, StatsSummary

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def order_day(order: Order, tz: tzinfo | None = None) -> date:
    """Calendar day of ``order.created_at`` in ``tz`` (server local time when None)."""
    return _as_utc(order.created_at).astimezone(tz).date()


def _matches(order: Order, stats_filter: StatsFilter, tz: tzinfo | None) -> bool:
    if stats_filter.status and order.status != stats_filter.status:
        return False
    if stats_filter.day is not None and order_day(order, tz) != stats_filter.day:
        return False
    if stats_filter.product_id is not None:
        return any(line.product_id == stats_filter.product_id for line in order.lines)
    return True


def _included_lines(order: Order, stats_filter: StatsFilter) -> list[OrderLine]:
    if stats_filter.product_id is None:
        return list(order.lines)
    return [line for line in order.lines if line.product_id == stats_filter.product_id]


def compute_stats(
    orders: Iterable[Order],
    stats_filter: StatsFilter | None = None,
    tz: tzinfo | None = None,
) -> StatsSummary:
    stats_filter = stats_filter or StatsFilter()
    orders = list(orders)
    selected = [order for order in orders if _matches(order, stats_filter, tz)]

    days: dict[str, DayStats] = {}
    products: dict[int, ProductStats] = {}
    total_revenue = ZERO

    for order in selected:
        lines = _included_lines(order, stats_filter)
        order_total = sum((line.amount for line in lines), ZERO)
        total_revenue += order_total

        key = order_day(order, tz).isoformat()
        day = days.get(key)
        if day is None:
            day = days[key] = DayStats(date=key)
        day.count += 1
        day.revenue += order_total

        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                product = products[line.product_id] = ProductStats(product_id=line.product_id, name=line.product_name)
            product.qty += line.quantity
            product.revenue += line.amount

    statuses = Counter(order.status for order in selected)
    total_orders = len(selected)

    logger.debug(
        "computed stats: filter=%s orders_in=%d orders_selected=%d",
        stats_filter.as_dict(),
        len(orders),
        total_orders,
    )

    return StatsSummary(
        total_orders=total_orders,
        total_revenue=total_revenue,
        avg_order_value=total_revenue / total_orders if total_orders else ZERO,
        **{status: statuses[status] for status in ORDER_STATUSES},
        days=[days[key] for key in sorted(days)],
        # sorted() is stable, so equal quantities keep discovery order.
        top_products=sorted(products.values(), key=lambda product: product.qty, reverse=True),
    )
