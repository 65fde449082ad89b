from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

from binary_journal.analysis.filtering import dedupe_trades, filter_instrument
from binary_journal.analysis.normalize import normalize_trade
from binary_journal.analysis.outcome import parse_amount
from binary_journal.analysis.ranking import select_strategy
from binary_journal.config.app_config import AnalysisSettings
from binary_journal.errors import NoValidDates
from binary_journal.models import (
    DIRECTIONS,
    OUTCOME_WIN,
    AmountBucket,
    AnalysisDiagnostics,
    AnalysisResult,
    Bucket,
    MonthlyBucket,
    NormalizedTrade,
    RawTrade,
    Summary,
    coerce_raw_trade,
)


@dataclass
class _Tally:
    wins: int = 0
    losses: int = 0
    profit: float = 0.0

    @property
    def total(self) -> int:
        return self.wins + self.losses

    def add(self, trade: NormalizedTrade) -> None:
        if trade.outcome == OUTCOME_WIN:
            self.wins += 1
        else:
            self.losses += 1
        self.profit += trade.profit


def analyze_trades(
    rows: Iterable[Mapping[str, Any] | RawTrade],
    settings: AnalysisSettings | None = None,
) -> AnalysisResult:
    config = settings or AnalysisSettings()
    raw_trades = [coerce_raw_trade(row) for row in rows]
    matched = filter_instrument(raw_trades, config.symbol)
    unique = dedupe_trades(matched)
    normalized = [normalize_trade(trade) for trade in unique]
    determined = [trade for trade in normalized if trade.is_determined]

    hourly = _group(determined, lambda trade: trade.hour)
    hourly_buckets = tuple(_bucket(f"{hour}時台", tally) for hour, tally in hourly.items())

    daily = _group(determined, lambda trade: trade.date_key)
    daily_buckets = tuple(_bucket(day, tally) for day, tally in daily.items())

    date_hourly = _group(determined, lambda trade: f"{trade.date_key} {trade.hour}時台")
    date_hourly_buckets = tuple(
        _bucket(key, tally) for key, tally in date_hourly.items() if tally.total >= config.min_date_hour_trades
    )

    start, end = compute_date_range(normalized)

    return AnalysisResult(
        summary=_summary(determined, start, end),
        directions=_direction_buckets(determined),
        hourly=hourly_buckets,
        daily=daily_buckets,
        date_hourly=date_hourly_buckets,
        monthly=_monthly_buckets(determined),
        amounts=_amount_buckets(determined),
        strategy=select_strategy(hourly_buckets, config),
        diagnostics=AnalysisDiagnostics(
            input_rows=len(raw_trades),
            matched_rows=len(matched),
            unique_rows=len(unique),
            undetermined_rows=len(normalized) - len(determined),
        ),
    )


def compute_date_range(trades: Iterable[NormalizedTrade]) -> tuple[datetime, datetime]:
    timestamps = [trade.timestamp for trade in trades]
    if not timestamps:
        raise NoValidDates()
    return min(timestamps), max(timestamps)


def win_rate(wins: int, total: int) -> float | None:
    if not total:
        return None
    return wins / total * 100


def _group(trades: Iterable[NormalizedTrade], key_fn) -> dict[str, _Tally]:
    groups: dict[str, _Tally] = {}
    for trade in trades:
        groups.setdefault(key_fn(trade), _Tally()).add(trade)
    return groups


def _bucket(label: str, tally: _Tally) -> Bucket:
    return Bucket(
        label=label,
        wins=tally.wins,
        losses=tally.losses,
        total=tally.total,
        win_rate=win_rate(tally.wins, tally.total),
    )


def _summary(trades: list[NormalizedTrade], start: datetime, end: datetime) -> Summary:
    wins = sum(1 for trade in trades if trade.outcome == OUTCOME_WIN)
    losses = len(trades) - wins
    total = wins + losses
    profits = [trade.profit for trade in trades]
    total_profit = sum(profits)
    gains = sum(value for value in profits if value > 0)
    drawdowns = sum(value for value in profits if value < 0)

    average_profit = None
    if wins:
        average_profit = gains / wins

    average_loss = None
    if losses:
        average_loss = drawdowns / losses

    average_amount = None
    expected_value = None
    if total:
        average_amount = sum(parse_amount(trade.raw.purchase_amount) for trade in trades) / total
        expected_value = total_profit / total

    return Summary(
        total=total,
        wins=wins,
        losses=losses,
        win_rate=win_rate(wins, total),
        start=start,
        end=end,
        total_profit=total_profit,
        average_profit=average_profit,
        average_loss=average_loss,
        average_amount=average_amount,
        expected_value=expected_value,
    )


def _direction_buckets(trades: list[NormalizedTrade]) -> tuple[Bucket, ...]:
    buckets = []
    for direction in DIRECTIONS:
        tally = _Tally()
        for trade in trades:
            if trade.direction == direction:
                tally.add(trade)
        buckets.append(_bucket(direction, tally))
    return tuple(buckets)


def _monthly_buckets(trades: list[NormalizedTrade]) -> tuple[MonthlyBucket, ...]:
    months = _group(trades, lambda trade: f"{trade.timestamp.year}年{trade.timestamp.month}月")
    return tuple(
        MonthlyBucket(
            label=label,
            total=tally.total,
            wins=tally.wins,
            losses=tally.losses,
            win_rate=win_rate(tally.wins, tally.total),
            total_profit=tally.profit,
        )
        for label, tally in months.items()
    )


def _amount_buckets(trades: list[NormalizedTrade]) -> tuple[AmountBucket, ...]:
    amounts = _group(trades, lambda trade: _amount_label(parse_amount(trade.raw.purchase_amount)))
    return tuple(
        AmountBucket(
            amount=label,
            count=tally.total,
            wins=tally.wins,
            losses=tally.losses,
            win_rate=win_rate(tally.wins, tally.total),
        )
        for label, tally in amounts.items()
    )


def _amount_label(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return str(value)
