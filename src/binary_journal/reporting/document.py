from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from jinja2 import Environment, FileSystemLoader, select_autoescape

from binary_journal.analysis.ranking import select_strategy, top_dates
from binary_journal.config.app_config import AnalysisSettings
from binary_journal.models import AnalysisResult
from binary_journal.reporting.formatting import (
    format_japanese_date,
    format_percent,
    format_signed_yen,
    format_yen,
    to_display_datetime,
)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
REPORT_FILENAME = "btc_trade_report.html"

_ENV = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)
_ENV.filters.update(
    {
        "yen": format_yen,
        "signed_yen": format_signed_yen,
        "percent": format_percent,
    }
)


def build_report_context(
    result: AnalysisResult,
    settings: AnalysisSettings | None = None,
    *,
    generated_on: date | None = None,
) -> dict[str, Any]:
    config = settings or AnalysisSettings()
    # Rankings come from the shared selector so the document matches the dashboard rules.
    hours = select_strategy(result.hourly, config, limit=config.report_limit)
    summary = result.summary
    start = to_display_datetime(summary.start, config.source_timezone, config.display_timezone)
    end = to_display_datetime(summary.end, config.source_timezone, config.display_timezone)
    if generated_on is None:
        generated_on = datetime.now(ZoneInfo(config.display_timezone)).date()
    return {
        "symbol": config.symbol,
        "summary": summary,
        "period": f"{format_japanese_date(start)} 〜 {format_japanese_date(end)}",
        "directions": result.directions,
        "top_hours": hours.top_hours,
        "worst_hours": hours.worst_hours,
        "top_dates": top_dates(result.daily, config),
        "monthly": result.monthly,
        "report_limit": config.report_limit,
        "generated_on": format_japanese_date(generated_on),
    }


def render_report(
    result: AnalysisResult,
    settings: AnalysisSettings | None = None,
    *,
    generated_on: date | None = None,
) -> str:
    template = _ENV.get_template("report.html")
    return template.render(**build_report_context(result, settings, generated_on=generated_on))


def write_report(
    result: AnalysisResult,
    path: Path,
    settings: AnalysisSettings | None = None,
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(result, settings), encoding="utf-8")
    return path
