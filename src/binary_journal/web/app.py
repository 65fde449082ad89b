from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from binary_journal.analysis.engine import analyze_trades
from binary_journal.analysis.ranking import rank_buckets, top_dates
from binary_journal.config.app_config import AppConfig, load_app_config
from binary_journal.errors import AnalysisError, CsvParseError
from binary_journal.ingest.csv_trades import delimiter_for, parse_csv_bytes
from binary_journal.models import AnalysisResult
from binary_journal.reporting.document import REPORT_FILENAME, render_report
from binary_journal.reporting.formatting import (
    format_percent,
    format_signed_yen,
    format_yen,
    to_display_date,
)
from binary_journal.reporting.payload import result_to_dict

logger = logging.getLogger(__name__)

APP_ROOT = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(APP_ROOT / "templates"))

STATUS_DONE = "done"
STATUS_ERROR = "error"

app = FastAPI(title="Binary Journal")


@dataclass
class UploadStatus:
    name: str
    status: str
    error: str | None = None
    rows: list[dict[str, Any]] = field(default_factory=list)


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    return load_app_config()


async def parse_uploads(
    uploads: Sequence[tuple[str, bytes]],
    *,
    concurrency: int,
    encodings: Sequence[str],
) -> list[UploadStatus]:
    semaphore = asyncio.Semaphore(max(concurrency, 1))

    async def _parse(name: str, data: bytes) -> UploadStatus:
        async with semaphore:
            try:
                rows = await asyncio.to_thread(
                    parse_csv_bytes, data, encodings=encodings, delimiter=delimiter_for(name)
                )
            except CsvParseError as exc:
                logger.warning("Failed to parse %s: %s", name, exc)
                return UploadStatus(name=name, status=STATUS_ERROR, error=str(exc))
        return UploadStatus(name=name, status=STATUS_DONE, rows=rows)

    return list(await asyncio.gather(*(_parse(name, data) for name, data in uploads)))


async def _analyze_uploads(files: list[UploadFile]) -> tuple[list[UploadStatus], AnalysisResult]:
    config = get_app_config()
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded.")
    if len(files) > config.ingest.max_files:
        raise HTTPException(
            status_code=400,
            detail=f"At most {config.ingest.max_files} files can be uploaded.",
        )

    uploads = [(upload.filename or "upload.csv", await upload.read()) for upload in files]
    statuses = await parse_uploads(
        uploads,
        concurrency=config.ingest.parse_concurrency,
        encodings=config.ingest.encodings,
    )
    rows = [row for status in statuses if status.status == STATUS_DONE for row in status.rows]
    if not rows:
        raise AnalysisError("分析可能なデータがありません。")

    result = analyze_trades(rows, config.analysis)
    diagnostics = result.diagnostics
    logger.info(
        "Analyzed %d rows: %d %s rows, %d after dedup, %d undetermined",
        diagnostics.input_rows,
        diagnostics.matched_rows,
        config.analysis.symbol,
        diagnostics.unique_rows,
        diagnostics.undetermined_rows,
    )
    return statuses, result


@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request) -> HTMLResponse:
    return TEMPLATES.TemplateResponse(request, "dashboard.html", _dashboard_context())


@app.post("/analyze", response_class=HTMLResponse)
async def analyze_page(request: Request, files: list[UploadFile] = File(...)) -> HTMLResponse:
    try:
        statuses, result = await _analyze_uploads(files)
    except AnalysisError as exc:
        logger.warning("Analysis failed: %s", exc)
        return TEMPLATES.TemplateResponse(
            request,
            "dashboard.html",
            _dashboard_context(error=str(exc)),
            status_code=422,
        )
    return TEMPLATES.TemplateResponse(request, "dashboard.html", _dashboard_context(result=result, statuses=statuses))


@app.post("/api/analyze")
async def analyze_api(files: list[UploadFile] = File(...)) -> dict[str, Any]:
    try:
        statuses, result = await _analyze_uploads(files)
    except AnalysisError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    payload = result_to_dict(result, get_app_config().analysis)
    payload["files"] = [{"name": item.name, "status": item.status, "error": item.error} for item in statuses]
    return payload


@app.post("/report")
async def report(files: list[UploadFile] = File(...)) -> Response:
    try:
        _, result = await _analyze_uploads(files)
    except AnalysisError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    html = render_report(result, get_app_config().analysis)
    return Response(
        content=html,
        media_type="text/html; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{REPORT_FILENAME}"'},
    )


def _dashboard_context(
    *,
    result: AnalysisResult | None = None,
    statuses: list[UploadStatus] | None = None,
    error: str | None = None,
) -> dict[str, Any]:
    config = get_app_config()
    settings = config.analysis
    context: dict[str, Any] = {
        "symbol": settings.symbol,
        "max_files": config.ingest.max_files,
        "min_hour_trades": settings.min_hour_trades,
        "result": result,
        "files": statuses or [],
        "done_files": sum(1 for item in statuses or [] if item.status == STATUS_DONE),
        "error": error,
    }
    if result is not None:
        context["period"] = (
            f"{to_display_date(result.summary.start, settings.source_timezone, settings.display_timezone)} 〜 "
            f"{to_display_date(result.summary.end, settings.source_timezone, settings.display_timezone)}"
        )
        context["eligible_hours"] = rank_buckets(
            result.hourly, min_total=settings.min_hour_trades, limit=len(result.hourly)
        )
        context["date_hourly"] = rank_buckets(
            result.date_hourly, min_total=settings.min_date_hour_trades, limit=len(result.date_hourly)
        )
        context["top_dates"] = top_dates(result.daily, settings)
    return context


TEMPLATES.env.filters.update(
    {
        "yen": format_yen,
        "signed_yen": format_signed_yen,
        "percent": format_percent,
    }
)


def main() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app_config = load_app_config()
    uvicorn.run(
        "binary_journal.web.app:app",
        host=app_config.app.host,
        port=app_config.app.port,
        reload=app_config.app.reload,
    )


if __name__ == "__main__":
    main()
