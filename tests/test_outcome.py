from __future__ import annotations

import pytest

from binary_journal.analysis.outcome import classify_outcome, parse_amount
from binary_journal.models import OUTCOME_LOSS, OUTCOME_UNDETERMINED, OUTCOME_WIN


@pytest.mark.parametrize(
    ("direction", "rate", "settlement", "expected"),
    [
        ("HIGH", 100.0, 100.5, OUTCOME_WIN),
        ("HIGH", 100.0, 100.0, OUTCOME_LOSS),
        ("HIGH", 100.0, 99.5, OUTCOME_LOSS),
        ("LOW", 100.0, 99.5, OUTCOME_WIN),
        ("LOW", 100.0, 100.0, OUTCOME_LOSS),
        ("LOW", 100.0, 100.5, OUTCOME_LOSS),
        ("high", 100.0, 100.5, OUTCOME_UNDETERMINED),
        ("", 100.0, 100.5, OUTCOME_UNDETERMINED),
    ],
)
def test_classify_outcome(direction, rate, settlement, expected):
    assert classify_outcome(direction, rate, settlement) == expected


def test_missing_rate_is_a_loss():
    assert classify_outcome("HIGH", None, 101.0) == OUTCOME_LOSS
    assert classify_outcome("LOW", 100.0, None) == OUTCOME_LOSS


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1,000円", 1000.0),
        ("¥1,950", 1950.0),
        ("1950.5", 1950.5),
        ("-500", -500.0),
        ("", 0.0),
        ("---", 0.0),
        ("1.2.3", 0.0),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == pytest.approx(expected)
