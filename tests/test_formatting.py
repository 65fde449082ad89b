from __future__ import annotations

import time
from datetime import date, datetime

import pytest

from binary_journal.reporting.formatting import (
    format_japanese_date,
    format_percent,
    format_signed_yen,
    format_yen,
    to_display_date,
    to_display_datetime,
)


def test_display_date_uses_japanese_locale_layout():
    assert to_display_date(datetime(2024, 3, 5, 9, 0)) == "2024/3/5"


def test_display_date_converts_between_zones():
    # 20:00 UTC is the next morning in Tokyo.
    assert to_display_date(datetime(2024, 3, 5, 20, 0), source_tz="UTC") == "2024/3/6"
    local = to_display_datetime(datetime(2024, 3, 5, 20, 0), source_tz="UTC")
    assert (local.hour, local.utcoffset().total_seconds()) == (5, 9 * 3600)


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="tzset not available")
def test_display_date_ignores_machine_timezone(monkeypatch):
    value = datetime(2024, 3, 5, 23, 30)
    expected = to_display_date(value)
    for zone in ("UTC", "America/New_York", "Asia/Kolkata"):
        monkeypatch.setenv("TZ", zone)
        time.tzset()
        assert to_display_date(value) == expected
    monkeypatch.delenv("TZ")
    time.tzset()


def test_japanese_date():
    assert format_japanese_date(date(2024, 3, 5)) == "2024年3月5日"
    assert format_japanese_date(None) == "n/a"


def test_yen_formatting():
    assert format_yen(1234.6) == "¥1,235"
    assert format_yen(-1000) == "-¥1,000"
    assert format_yen(None) == "n/a"
    assert format_signed_yen(10650) == "+¥10,650"
    assert format_signed_yen(-50) == "-¥50"


def test_yen_rounds_halves_away_from_zero():
    assert format_yen(2.5) == "¥3"
    assert format_yen(3.5) == "¥4"
    assert format_yen(-2.5) == "-¥3"
    assert format_yen(0.49) == "¥0"
    assert format_signed_yen(1949.5) == "+¥1,950"


def test_percent_formatting():
    assert format_percent(70) == "70.00%"
    assert format_percent(66.666, 1) == "66.7%"
    assert format_percent(None) == "n/a"
