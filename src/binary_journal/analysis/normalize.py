from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime

from binary_journal.analysis.outcome import classify_outcome, trade_profit
from binary_journal.errors import InvalidDate
from binary_journal.models import NormalizedTrade, RawTrade

_ARTIFACTS = re.compile(r'[="]')
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ParsedTimestamp:
    timestamp: datetime
    canonical: str
    date_key: str
    hour: str


def normalize_trade(trade: RawTrade) -> NormalizedTrade:
    parsed = parse_trade_timestamp(trade.traded_at)
    outcome = classify_outcome(trade.direction, trade.strike_rate, trade.settlement_rate)
    return NormalizedTrade(
        raw=trade,
        timestamp=parsed.timestamp,
        canonical=parsed.canonical,
        date_key=parsed.date_key,
        hour=parsed.hour,
        outcome=outcome,
        profit=trade_profit(trade, outcome),
    )


def parse_trade_timestamp(text: str) -> ParsedTimestamp:
    """Parse export date text written as ``D/M/YYYY[ H:M[:S]]``.

    Spreadsheet artifacts such as ``="15/03/2024 09:05"`` are stripped first.
    Any date or time that does not form a real calendar value raises
    ``InvalidDate`` with the original text.
    """
    cleaned = _ARTIFACTS.sub("", text or "").strip()
    pieces = cleaned.split(" ")
    date_part = pieces[0]
    time_part = pieces[1] if len(pieces) > 1 else ""

    day_date = _parse_day_month_year(date_part, original=text)
    date_key = f"{day_date.year:04d}-{day_date.month:02d}-{day_date.day:02d}"

    if time_part:
        hour, minute, second = _parse_time(time_part, original=text)
    else:
        hour, minute, second = 0, 0, 0

    timestamp = datetime(day_date.year, day_date.month, day_date.day, hour, minute, second)
    return ParsedTimestamp(
        timestamp=timestamp,
        canonical=f"{date_key} {hour:02d}:{minute:02d}:{second:02d}",
        date_key=date_key,
        hour=f"{hour:02d}",
    )


def _parse_day_month_year(value: str, *, original: str) -> date:
    parts = value.split("/")
    if len(parts) < 3:
        raise InvalidDate(original)
    day = _leading_int(parts[0])
    month = _leading_int(parts[1])
    year = _leading_int(parts[2])
    if day is None or month is None or year is None:
        raise InvalidDate(original)
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDate(original) from exc


def _parse_time(value: str, *, original: str) -> tuple[int, int, int]:
    segments = value.split(":")
    numbers: list[int] = []
    for segment in segments[:3]:
        number = _leading_int(segment)
        if number is None:
            raise InvalidDate(original)
        numbers.append(number)
    while len(numbers) < 3:
        numbers.append(0)
    hour, minute, second = numbers
    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        raise InvalidDate(original)
    return hour, minute, second


def _leading_int(value: str) -> int | None:
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))
