from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from binary_journal.analysis.engine import analyze_trades
from binary_journal.config.app_config import AnalysisSettings, load_app_config
from binary_journal.errors import AnalysisError, CsvParseError
from binary_journal.ingest.csv_trades import load_trade_files
from binary_journal.models import AnalysisResult
from binary_journal.reporting.document import write_report
from binary_journal.reporting.formatting import format_percent, format_signed_yen, format_yen, to_display_date
from binary_journal.reporting.payload import result_to_dict


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze binary option trade history exports.")
    parser.add_argument("paths", type=Path, nargs="+", help="Trade history exports (csv/tsv).")
    parser.add_argument("--symbol", type=str, default=None, help="Instrument ticker to analyze (default from config).")
    parser.add_argument("--config", type=Path, default=None, help="Path to app.toml.")
    parser.add_argument("--json", action="store_true", help="Print JSON output.")
    parser.add_argument("--out", type=Path, default=None, help="Write output to a file instead of stdout.")
    parser.add_argument("--report", type=Path, default=None, help="Write the HTML report to this path.")
    args = parser.parse_args(argv)

    app_config = load_app_config(args.config)
    settings = app_config.analysis
    if args.symbol:
        settings = replace(settings, symbol=args.symbol)

    try:
        ingest = load_trade_files(
            args.paths,
            max_files=app_config.ingest.max_files,
            encodings=app_config.ingest.encodings,
        )
        result = analyze_trades(ingest.rows, settings)
    except (AnalysisError, CsvParseError, OSError) as exc:
        print(f"Analysis failed: {exc}", file=sys.stderr)
        return 1

    diagnostics = result.diagnostics
    print(
        f"Rows: {diagnostics.input_rows}, {settings.symbol} rows: {diagnostics.matched_rows}, "
        f"after dedup: {diagnostics.unique_rows}.",
        file=sys.stderr,
    )
    if diagnostics.undetermined_rows:
        print(f"Skipped {diagnostics.undetermined_rows} rows with unknown direction.", file=sys.stderr)

    if args.json or (args.out is not None and args.out.suffix.lower() == ".json"):
        text = json.dumps(result_to_dict(result, settings), indent=2, ensure_ascii=False)
    else:
        text = _format_result(result, settings)

    if args.out is None:
        print(text)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text + "\n", encoding="utf-8")

    if args.report is not None:
        write_report(result, args.report, settings)
        print(f"Wrote report to {args.report}.", file=sys.stderr)

    return 0


def _format_result(result: AnalysisResult, settings: AnalysisSettings) -> str:
    summary = result.summary
    start = to_display_date(summary.start, settings.source_timezone, settings.display_timezone)
    end = to_display_date(summary.end, settings.source_timezone, settings.display_timezone)
    lines = [
        f"period {start} - {end}",
        f"total {summary.total}",
        f"wins {summary.wins}",
        f"losses {summary.losses}",
        f"win_rate {format_percent(summary.win_rate)}",
        f"total_profit {format_signed_yen(summary.total_profit)}",
        f"average_profit {format_yen(summary.average_profit)}",
        f"average_loss {format_yen(summary.average_loss)}",
        f"average_amount {format_yen(summary.average_amount)}",
        f"expected_value {format_signed_yen(summary.expected_value)}",
    ]
    for bucket in result.directions:
        lines.append(f"{bucket.label.lower()} {bucket.wins}/{bucket.total} {format_percent(bucket.win_rate)}")
    for bucket in result.strategy.top_hours:
        lines.append(f"top_hour {bucket.label} {bucket.total} {format_percent(bucket.win_rate)}")
    for bucket in result.strategy.worst_hours:
        lines.append(f"worst_hour {bucket.label} {bucket.total} {format_percent(bucket.win_rate)}")
    for month in result.monthly:
        lines.append(f"month {month.label} {month.total} {format_percent(month.win_rate)} {format_signed_yen(month.total_profit)}")
    return "\n".join(lines)


if __name__ == "__main__":
    raise SystemExit(main())
