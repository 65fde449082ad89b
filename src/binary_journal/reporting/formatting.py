from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from binary_journal.config.app_config import DEFAULT_TIMEZONE

NOT_AVAILABLE = "n/a"


def to_display_datetime(
    value: datetime,
    source_tz: str = DEFAULT_TIMEZONE,
    display_tz: str = DEFAULT_TIMEZONE,
) -> datetime:
    """Attach ``source_tz`` to a naive export timestamp and convert it to ``display_tz``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(source_tz))
    return value.astimezone(ZoneInfo(display_tz))


def to_display_date(
    value: datetime,
    source_tz: str = DEFAULT_TIMEZONE,
    display_tz: str = DEFAULT_TIMEZONE,
) -> str:
    local = to_display_datetime(value, source_tz, display_tz)
    return f"{local.year}/{local.month}/{local.day}"


def format_japanese_date(value: date | datetime | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value.year}年{value.month}月{value.day}日"


def format_yen(value: float | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    amount = int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if amount < 0 else ""
    return f"{sign}¥{abs(amount):,}"


def format_signed_yen(value: float | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{format_yen(value)}"


def format_percent(value: float | None, digits: int = 2) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.{digits}f}%"
