from __future__ import annotations

from typing import Iterable

from binary_journal.errors import NoMatchingRecords
from binary_journal.models import RawTrade

DEFAULT_SYMBOL = "BTC"


def filter_instrument(trades: Iterable[RawTrade], symbol: str = DEFAULT_SYMBOL) -> list[RawTrade]:
    matched = [trade for trade in trades if symbol in trade.symbol]
    if not matched:
        raise NoMatchingRecords(symbol)
    return matched


def dedupe_trades(trades: Iterable[RawTrade]) -> list[RawTrade]:
    # A missing trade id is a key of its own, like any other value.
    seen: set[tuple[str, object]] = set()
    unique: list[RawTrade] = []
    for trade in trades:
        key = _id_key(trade.trade_id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(trade)
    return unique


def _id_key(value: object) -> tuple[str, object]:
    return (type(value).__name__, value)
