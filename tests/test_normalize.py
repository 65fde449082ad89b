from __future__ import annotations

from datetime import datetime

import pytest

from binary_journal.analysis.normalize import normalize_trade, parse_trade_timestamp
from binary_journal.errors import InvalidDate
from binary_journal.models import OUTCOME_LOSS, OUTCOME_WIN, coerce_raw_trade
from conftest import make_row


def test_day_month_year_with_time():
    parsed = parse_trade_timestamp("15/03/2024 09:05:30")
    assert parsed.canonical == "2024-03-15 09:05:30"
    assert parsed.date_key == "2024-03-15"
    assert parsed.hour == "09"
    assert parsed.timestamp == datetime(2024, 3, 15, 9, 5, 30)


def test_unpadded_pieces_are_padded():
    parsed = parse_trade_timestamp("5/3/2024 9:5:7")
    assert parsed.canonical == "2024-03-05 09:05:07"
    assert parsed.hour == "09"


def test_missing_time_defaults_to_midnight():
    parsed = parse_trade_timestamp("15/03/2024")
    assert parsed.canonical == "2024-03-15 00:00:00"
    assert parsed.hour == "00"


def test_missing_seconds_default_to_zero():
    parsed = parse_trade_timestamp("15/03/2024 21:40")
    assert parsed.canonical == "2024-03-15 21:40:00"
    assert parsed.hour == "21"


def test_spreadsheet_artifacts_are_stripped():
    parsed = parse_trade_timestamp('="15/03/2024 09:05:30"')
    assert parsed.canonical == "2024-03-15 09:05:30"


def test_day_comes_before_month():
    parsed = parse_trade_timestamp("03/12/2024 10:00:00")
    assert parsed.date_key == "2024-12-03"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not a date",
        "2024-03-15 09:00:00",
        "31/02/2024 10:00",
        "15/13/2024",
        "15/03/2024 24:00:00",
        "15/03/2024 aa:00",
    ],
)
def test_invalid_dates_raise(text):
    with pytest.raises(InvalidDate) as excinfo:
        parse_trade_timestamp(text)
    assert excinfo.value.text == text


def test_normalize_trade_classifies_and_prices():
    trade = normalize_trade(coerce_raw_trade(make_row(7, "15/03/2024 09:05:30", "HIGH", 100.0, 101.0)))
    assert trade.outcome == OUTCOME_WIN
    assert trade.profit == pytest.approx(1950)
    assert trade.trade_id == 7
    assert trade.hour == "09"


def test_normalize_trade_loss_costs_purchase_amount():
    trade = normalize_trade(coerce_raw_trade(make_row(8, "15/03/2024 09:05:30", "LOW", 100.0, 100.0)))
    assert trade.outcome == OUTCOME_LOSS
    assert trade.profit == pytest.approx(-1000)
