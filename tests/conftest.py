from __future__ import annotations

from typing import Any

import pytest

HEADER = "取引番号,日付,取引銘柄,取引オプション,HIGH/LOW,レート,終了時刻,判定レート,購入金額,ペイアウト"


def make_row(
    trade_id: Any,
    traded_at: str,
    direction: str,
    rate: float,
    settlement: float,
    *,
    symbol: str = "BTC/JPY",
    amount: str = "1,000円",
    payout: str = "1,950円",
    **extras: Any,
) -> dict[str, Any]:
    row = {
        "取引番号": trade_id,
        "日付": traded_at,
        "取引銘柄": symbol,
        "HIGH/LOW": direction,
        "レート": rate,
        "判定レート": settlement,
        "購入金額": amount,
        "ペイアウト": payout,
    }
    row.update(extras)
    return row


def win(trade_id: Any, traded_at: str, direction: str = "HIGH", **kwargs: Any) -> dict[str, Any]:
    if direction == "HIGH":
        return make_row(trade_id, traded_at, direction, 100.0, 101.0, **kwargs)
    return make_row(trade_id, traded_at, direction, 100.0, 99.0, **kwargs)


def loss(trade_id: Any, traded_at: str, direction: str = "HIGH", **kwargs: Any) -> dict[str, Any]:
    if direction == "HIGH":
        return make_row(trade_id, traded_at, direction, 100.0, 99.0, **kwargs)
    return make_row(trade_id, traded_at, direction, 100.0, 101.0, **kwargs)


@pytest.fixture
def scenario_rows() -> list[dict[str, Any]]:
    """Ten BTC trades: 6 HIGH wins, 2 HIGH losses, 1 LOW win, 1 LOW loss."""
    rows = [win(index, f"15/03/2024 09:{index:02d}:00") for index in range(1, 7)]
    rows += [loss(7, "15/03/2024 10:00:00"), loss(8, "16/03/2024 10:30:00")]
    rows += [win(9, "16/03/2024 11:00:00", "LOW"), loss(10, "01/04/2024 11:15:00", "LOW")]
    return rows


def csv_text(rows: list[str]) -> str:
    return "\n".join([HEADER, *rows]) + "\n"
