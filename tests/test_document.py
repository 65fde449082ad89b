from __future__ import annotations

from datetime import date

from binary_journal.analysis.engine import analyze_trades
from binary_journal.config.app_config import AnalysisSettings
from binary_journal.reporting.document import build_report_context, render_report, write_report
from binary_journal.reporting.payload import result_to_dict
from conftest import loss, win


def _rows():
    rows = []
    for hour, wins in ((9, 5), (10, 1), (11, 3), (12, 4), (13, 2), (14, 0)):
        for index in range(5):
            trade_id = hour * 100 + index
            stamp = f"{1 + index:02d}/05/2024 {hour}:{index:02d}"
            rows.append(win(trade_id, stamp) if index < wins else loss(trade_id, stamp))
    return rows


def test_report_rankings_match_shared_selector():
    result = analyze_trades(_rows())
    context = build_report_context(result, generated_on=date(2024, 6, 1))
    assert [bucket.label for bucket in context["top_hours"]] == ["09時台", "12時台", "11時台", "13時台", "10時台"]
    assert [bucket.label for bucket in context["worst_hours"]] == ["14時台", "10時台", "13時台", "11時台", "12時台"]
    # Dashboard list is the prefix of the report list.
    assert list(result.strategy.top_hours) == list(context["top_hours"][:3])
    assert all(bucket.total >= 3 for bucket in context["top_dates"])
    assert len(context["top_dates"]) <= 5


def test_render_report_contains_sections():
    result = analyze_trades(_rows())
    html = render_report(result, generated_on=date(2024, 6, 1))
    assert "BTC取引分析レポート" in html
    assert "総取引数:</dt><dd>30件" in html
    assert "2024年5月1日 〜 2024年5月5日" in html
    assert "09時台" in html
    assert "2024年5月" in html
    assert "作成日時：2024年6月1日" in html


def test_report_shows_missing_averages_as_na():
    result = analyze_trades([win(1, "01/05/2024 09:00")])
    html = render_report(result, generated_on=date(2024, 6, 1))
    assert "平均損失:</dt>\n      <dd class=\"negative\">n/a</dd>" in html


def test_write_report_creates_file(tmp_path):
    result = analyze_trades(_rows())
    path = write_report(result, tmp_path / "out" / "report.html", AnalysisSettings())
    assert path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


def test_result_to_dict_is_json_ready():
    payload = result_to_dict(analyze_trades(_rows()))
    assert payload["summary"]["start"] == "2024-05-01 09:00:00"
    assert payload["summary"]["start_date"] == "2024/5/1"
    assert payload["directions"][1] == {"name": "LOW", "wins": 0, "losses": 0, "total": 0, "win_rate": None}
    assert payload["hourly"][0]["hour"] == "09時台"
    assert payload["monthly"][0]["label"] == "2024年5月"
    assert payload["amounts"][0]["amount"] == "1000"
