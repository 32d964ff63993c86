from cafeteria.stats.aggregator import compute_stats, order_day
from cafeteria.stats.models import (
    ORDER_STATUSES,
    DayStats,
    Order,
    OrderLine,
    ProductStats,
    StatsFilter,
    StatsSummary,
)
from cafeteria.stats.repository import OrderRepository

__all__ = [
    "ORDER_STATUSES",
    "DayStats",
    "Order",
    "OrderLine",
    "OrderRepository",
    "ProductStats",
    "StatsFilter",
    "StatsSummary",
    "compute_stats",
    "order_day",
]
