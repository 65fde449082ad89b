from __future__ import annotations

from typing import Iterable

from binary_journal.config.app_config import AnalysisSettings
from binary_journal.models import Bucket, Strategy


def rank_buckets(
    buckets: Iterable[Bucket],
    *,
    min_total: int,
    limit: int,
    best: bool = True,
) -> tuple[Bucket, ...]:
    """Return up to ``limit`` buckets with at least ``min_total`` trades ordered by win rate.

    Ties keep their input order for both directions.
    """
    eligible = [bucket for bucket in buckets if bucket.total >= min_total and bucket.win_rate is not None]
    ordered = sorted(eligible, key=lambda bucket: bucket.win_rate, reverse=best)
    return tuple(ordered[: max(limit, 0)])


def select_strategy(
    hourly: Iterable[Bucket],
    settings: AnalysisSettings | None = None,
    *,
    limit: int | None = None,
) -> Strategy:
    config = settings or AnalysisSettings()
    count = config.strategy_limit if limit is None else limit
    hours = list(hourly)
    return Strategy(
        top_hours=rank_buckets(hours, min_total=config.min_hour_trades, limit=count, best=True),
        worst_hours=rank_buckets(hours, min_total=config.min_hour_trades, limit=count, best=False),
    )


def top_dates(
    daily: Iterable[Bucket],
    settings: AnalysisSettings | None = None,
    *,
    limit: int | None = None,
) -> tuple[Bucket, ...]:
    config = settings or AnalysisSettings()
    count = config.report_limit if limit is None else limit
    return rank_buckets(daily, min_total=config.min_report_date_trades, limit=count, best=True)
