from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any

from binary_journal.config.app_config import AnalysisSettings
from binary_journal.models import AnalysisResult, Bucket
from binary_journal.reporting.formatting import to_display_date

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def result_to_dict(result: AnalysisResult, settings: AnalysisSettings | None = None) -> dict[str, Any]:
    config = settings or AnalysisSettings()
    summary = result.summary
    return {
        "summary": {
            "total": summary.total,
            "wins": summary.wins,
            "losses": summary.losses,
            "win_rate": summary.win_rate,
            "start": _timestamp(summary.start),
            "end": _timestamp(summary.end),
            "start_date": to_display_date(summary.start, config.source_timezone, config.display_timezone),
            "end_date": to_display_date(summary.end, config.source_timezone, config.display_timezone),
            "total_profit": summary.total_profit,
            "average_profit": summary.average_profit,
            "average_loss": summary.average_loss,
            "average_amount": summary.average_amount,
            "expected_value": summary.expected_value,
        },
        "directions": [_bucket(item, "name") for item in result.directions],
        "hourly": [_bucket(item, "hour") for item in result.hourly],
        "daily": [_bucket(item, "date") for item in result.daily],
        "date_hourly": [_bucket(item, "key") for item in result.date_hourly],
        "monthly": [asdict(item) for item in result.monthly],
        "amounts": [asdict(item) for item in result.amounts],
        "strategy": {
            "top_hours": [_bucket(item, "hour") for item in result.strategy.top_hours],
            "worst_hours": [_bucket(item, "hour") for item in result.strategy.worst_hours],
        },
        "diagnostics": asdict(result.diagnostics),
    }


def _bucket(bucket: Bucket, label_key: str) -> dict[str, Any]:
    return {
        label_key: bucket.label,
        "wins": bucket.wins,
        "losses": bucket.losses,
        "total": bucket.total,
        "win_rate": bucket.win_rate,
    }


def _timestamp(value: datetime) -> str:
    return value.strftime(_TIMESTAMP_FORMAT)
