from __future__ import annotations

import math
import re

from binary_journal.models import (
    DIRECTION_HIGH,
    DIRECTION_LOW,
    OUTCOME_LOSS,
    OUTCOME_UNDETERMINED,
    OUTCOME_WIN,
    Outcome,
    RawTrade,
)

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")


def classify_outcome(direction: str, strike_rate: float | None, settlement_rate: float | None) -> Outcome:
    if direction == DIRECTION_HIGH:
        return OUTCOME_WIN if _greater(settlement_rate, strike_rate) else OUTCOME_LOSS
    if direction == DIRECTION_LOW:
        return OUTCOME_WIN if _greater(strike_rate, settlement_rate) else OUTCOME_LOSS
    return OUTCOME_UNDETERMINED


def _greater(left: float | None, right: float | None) -> bool:
    if left is None or right is None:
        return False
    return left > right


def parse_amount(text: str) -> float:
    """Read a currency cell such as ``"¥1,000"`` or ``"1,950円"``; junk reads as 0."""
    cleaned = _NON_NUMERIC.sub("", text or "")
    if not cleaned:
        return 0.0
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def trade_profit(trade: RawTrade, outcome: Outcome) -> float:
    if outcome == OUTCOME_WIN:
        return parse_amount(trade.payout)
    if outcome == OUTCOME_LOSS:
        return -parse_amount(trade.purchase_amount)
    return 0.0
