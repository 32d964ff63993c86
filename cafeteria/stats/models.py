from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

ORDER_STATUSES = ("pending", "completed", "cancelled", "processing")

ZERO = Decimal("0")


@dataclass(frozen=True)
class OrderLine:
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal

    @property
    def amount(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Order:
    id: int
    user_id: int
    status: str
    created_at: datetime
    lines: tuple[OrderLine, ...] = ()


@dataclass(frozen=True)
class StatsFilter:
    status: str | None = None
    day: date | None = None
    product_id: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "date": self.day.isoformat() if self.day else None,
            "productId": self.product_id,
        }


def _number(value: Decimal | int) -> int | float:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


@dataclass
class DayStats:
    date: str
    count: int = 0
    revenue: Decimal = ZERO

    @property
    def avg(self) -> Decimal:
        return self.revenue / self.count if self.count else ZERO


@dataclass
class ProductStats:
    product_id: int
    name: str
    qty: int = 0
    revenue: Decimal = ZERO

    def as_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "qty": self.qty,
            "revenue": _number(self.revenue),
        }


@dataclass
class StatsSummary:
    total_orders: int = 0
    total_revenue: Decimal = ZERO
    avg_order_value: Decimal = ZERO
    pending: int = 0
    completed: int = 0
    cancelled: int = 0
    processing: int = 0
    days: list[DayStats] = field(default_factory=list)
    top_products: list[ProductStats] = field(default_factory=list)

    @property
    def orders_per_day(self) -> list[dict[str, Any]]:
        return [{"date": day.date, "count": day.count} for day in self.days]

    @property
    def revenue_per_day(self) -> list[dict[str, Any]]:
        return [{"date": day.date, "revenue": _number(day.revenue)} for day in self.days]

    @property
    def avg_per_day(self) -> list[dict[str, Any]]:
        return [{"date": day.date, "avg": _number(day.avg)} for day in self.days]

    def as_dict(self) -> dict[str, Any]:
        return {
            "totalOrders": self.total_orders,
            "totalRevenue": _number(self.total_revenue),
            "avgOrderValue": _number(self.avg_order_value),
            "pending": self.pending,
            "completed": self.completed,
            "cancelled": self.cancelled,
            "processing": self.processing,
            "ordersPerDay": self.orders_per_day,
            "revenuePerDay": self.revenue_per_day,
            "avgPerDay": self.avg_per_day,
            "topProducts": [product.as_dict() for product in self.top_products],
        }
