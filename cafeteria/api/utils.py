from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from zoneinfo import ZoneInfo

from cafeteria.core.config import Settings
from cafeteria.stats.models import StatsFilter


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"invalid date: {value!r}, expected YYYY-MM-DD") from exc


def parse_positive_int(value: str | int, field: str) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"invalid {field}: {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"invalid {field}: {value!r}")
    return parsed


def parse_price(value) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            return None
        if not parsed.is_finite() or parsed < 0:
            return None
        return parsed
    return None


def parse_stats_filter(day: str | None, status: str | None, product_id: str | None) -> StatsFilter:
    return StatsFilter(
        status=None if _blank(status) else status,
        day=None if _blank(day) else parse_day(day),
        product_id=None if _blank(product_id) else parse_positive_int(product_id, "productId"),
    )


def stats_timezone(settings: Settings) -> tzinfo | None:
    if not settings.stats_timezone:
        return None
    return ZoneInfo(settings.stats_timezone)


def isoformat_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
