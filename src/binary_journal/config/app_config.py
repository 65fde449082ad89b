from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11
    import tomli as tomllib

DEFAULT_CONFIG_PATH = Path("config/app.toml")
DEFAULT_TIMEZONE = "Asia/Tokyo"


@dataclass(frozen=True)
class AppSettings:
    host: str
    port: int
    reload: bool


@dataclass(frozen=True)
class AnalysisSettings:
    symbol: str = "BTC"
    min_date_hour_trades: int = 3
    min_hour_trades: int = 5
    strategy_limit: int = 3
    report_limit: int = 5
    min_report_date_trades: int = 3
    source_timezone: str = DEFAULT_TIMEZONE
    display_timezone: str = DEFAULT_TIMEZONE


@dataclass(frozen=True)
class IngestSettings:
    max_files: int
    parse_concurrency: int
    encodings: tuple[str, ...]


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    analysis: AnalysisSettings
    ingest: IngestSettings


def load_app_config(path: Path | None = None) -> AppConfig:
    config_path = path or DEFAULT_CONFIG_PATH
    raw: Mapping[str, Any] = {}
    if config_path.exists():
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))

    app_raw = _section(raw, "app")
    analysis_raw = _section(raw, "analysis")
    ingest_raw = _section(raw, "ingest")

    app = AppSettings(
        host=str(app_raw.get("host", "127.0.0.1")),
        port=int(app_raw.get("port", 8000)),
        reload=bool(app_raw.get("reload", False)),
    )

    defaults = AnalysisSettings()
    analysis = AnalysisSettings(
        symbol=str(analysis_raw.get("symbol", defaults.symbol)).strip() or defaults.symbol,
        min_date_hour_trades=_positive_int(analysis_raw.get("min_date_hour_trades"), defaults.min_date_hour_trades),
        min_hour_trades=_positive_int(analysis_raw.get("min_hour_trades"), defaults.min_hour_trades),
        strategy_limit=_positive_int(analysis_raw.get("strategy_limit"), defaults.strategy_limit),
        report_limit=_positive_int(analysis_raw.get("report_limit"), defaults.report_limit),
        min_report_date_trades=_positive_int(
            analysis_raw.get("min_report_date_trades"), defaults.min_report_date_trades
        ),
        source_timezone=str(analysis_raw.get("source_timezone", DEFAULT_TIMEZONE)).strip() or DEFAULT_TIMEZONE,
        display_timezone=str(analysis_raw.get("display_timezone", DEFAULT_TIMEZONE)).strip() or DEFAULT_TIMEZONE,
    )

    ingest = IngestSettings(
        max_files=_positive_int(ingest_raw.get("max_files"), 5),
        parse_concurrency=_positive_int(ingest_raw.get("parse_concurrency"), 2),
        encodings=tuple(_str_list(ingest_raw.get("encodings"))) or ("utf-8-sig", "cp932"),
    )

    return AppConfig(app=app, analysis=analysis, ingest=ingest)


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def _positive_int(value: Any, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]
