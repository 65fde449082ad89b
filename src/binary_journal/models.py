from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

COLUMN_TRADE_ID = "取引番号"
COLUMN_DATE = "日付"
COLUMN_SYMBOL = "取引銘柄"
COLUMN_DIRECTION = "HIGH/LOW"
COLUMN_STRIKE_RATE = "レート"
COLUMN_SETTLEMENT_RATE = "判定レート"
COLUMN_PURCHASE_AMOUNT = "購入金額"
COLUMN_PAYOUT = "ペイアウト"

KNOWN_COLUMNS = (
    COLUMN_TRADE_ID,
    COLUMN_DATE,
    COLUMN_SYMBOL,
    COLUMN_DIRECTION,
    COLUMN_STRIKE_RATE,
    COLUMN_SETTLEMENT_RATE,
    COLUMN_PURCHASE_AMOUNT,
    COLUMN_PAYOUT,
)

DIRECTION_HIGH = "HIGH"
DIRECTION_LOW = "LOW"
DIRECTIONS = (DIRECTION_HIGH, DIRECTION_LOW)

Outcome = str

OUTCOME_WIN: Outcome = "win"
OUTCOME_LOSS: Outcome = "loss"
OUTCOME_UNDETERMINED: Outcome = "undetermined"

TradeId = int | str | None


@dataclass(frozen=True)
class RawTrade:
    trade_id: TradeId
    traded_at: str
    symbol: str
    direction: str
    strike_rate: float | None
    settlement_rate: float | None
    purchase_amount: str
    payout: str
    extras: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizedTrade:
    raw: RawTrade
    timestamp: datetime
    canonical: str
    date_key: str
    hour: str
    outcome: Outcome
    profit: float

    @property
    def trade_id(self) -> TradeId:
        return self.raw.trade_id

    @property
    def direction(self) -> str:
        return self.raw.direction

    @property
    def is_determined(self) -> bool:
        return self.outcome != OUTCOME_UNDETERMINED


@dataclass(frozen=True)
class Bucket:
    label: str
    wins: int
    losses: int
    total: int
    win_rate: float | None


@dataclass(frozen=True)
class MonthlyBucket:
    label: str
    total: int
    wins: int
    losses: int
    win_rate: float | None
    total_profit: float


@dataclass(frozen=True)
class AmountBucket:
    amount: str
    count: int
    wins: int
    losses: int
    win_rate: float | None


@dataclass(frozen=True)
class Summary:
    total: int
    wins: int
    losses: int
    win_rate: float | None
    start: datetime
    end: datetime
    total_profit: float
    average_profit: float | None
    average_loss: float | None
    average_amount: float | None
    expected_value: float | None


@dataclass(frozen=True)
class Strategy:
    top_hours: tuple[Bucket, ...]
    worst_hours: tuple[Bucket, ...]


@dataclass(frozen=True)
class AnalysisDiagnostics:
    input_rows: int
    matched_rows: int
    unique_rows: int
    undetermined_rows: int


@dataclass(frozen=True)
class AnalysisResult:
    summary: Summary
    directions: tuple[Bucket, ...]
    hourly: tuple[Bucket, ...]
    daily: tuple[Bucket, ...]
    date_hourly: tuple[Bucket, ...]
    monthly: tuple[MonthlyBucket, ...]
    amounts: tuple[AmountBucket, ...]
    strategy: Strategy
    diagnostics: AnalysisDiagnostics


def coerce_raw_trade(raw: Mapping[str, Any] | RawTrade) -> RawTrade:
    if isinstance(raw, RawTrade):
        return raw
    extras = {key: value for key, value in raw.items() if key not in KNOWN_COLUMNS}
    return RawTrade(
        trade_id=_trade_id(raw.get(COLUMN_TRADE_ID)),
        traded_at=_text(raw.get(COLUMN_DATE)),
        symbol=_text(raw.get(COLUMN_SYMBOL)),
        direction=_text(raw.get(COLUMN_DIRECTION)).strip(),
        strike_rate=_rate(raw.get(COLUMN_STRIKE_RATE)),
        settlement_rate=_rate(raw.get(COLUMN_SETTLEMENT_RATE)),
        purchase_amount=_text(raw.get(COLUMN_PURCHASE_AMOUNT)),
        payout=_text(raw.get(COLUMN_PAYOUT)),
        extras=extras,
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _trade_id(value: Any) -> TradeId:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, str)):
        return value
    return str(value)


def _rate(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None
