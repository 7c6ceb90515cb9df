from __future__ import annotations

from datetime import date
from itertools import count

import pytest

from portfolio_tracker.csv_import import CsvImportError, parse_transactions
from portfolio_tracker.models import TransactionType

TODAY = date(2024, 6, 1)


def sequential_ids():
    counter = count(1)
    return lambda: f"tx-{next(counter)}"


def test_parses_rows_with_fees_column():
    text = "date,ticker,type,qty,price,fees\n2024-01-02,petr4,BUY,100,37.5,1.2\r\n2024-02-01,PETR4,SELL,50,40.2,1.1\n"
    rows = parse_transactions(text, today=TODAY, id_factory=sequential_ids())
    assert [r.id for r in rows] == ["tx-1", "tx-2"]
    assert rows[0].ticker == "PETR4"
    assert rows[0].date == date(2024, 1, 2)
    assert rows[0].fees == pytest.approx(1.2)
    assert rows[1].type == TransactionType.SELL


def test_missing_fees_column_defaults_to_zero():
    rows = parse_transactions("date,ticker,type,qty,price\n2024-01-02,VALE3,BUY,10,60", today=TODAY)
    assert len(rows) == 1
    assert rows[0].fees == 0.0


def test_header_is_case_insensitive_and_columns_may_be_reordered():
    rows = parse_transactions("TICKER,Qty,Price,Type,Date\nitub4,5,30,sell,2024-03-01", today=TODAY)
    assert rows[0].ticker == "ITUB4"
    assert rows[0].qty == 5
    assert rows[0].type == TransactionType.SELL


def test_blank_ticker_rows_are_skipped_and_blank_lines_ignored():
    text = "date,ticker,type,qty,price\n\n2024-01-02,,BUY,1,1\n   \n2024-01-02,ABC,BUY,1,1\n"
    rows = parse_transactions(text, today=TODAY)
    assert [r.ticker for r in rows] == ["ABC"]


def test_unknown_type_is_buy_and_bad_numbers_are_zero():
    [row] = parse_transactions("date,ticker,type,qty,price\n,ABC,HOLD,abc,", today=TODAY)
    assert row.type == TransactionType.BUY
    assert row.qty == 0
    assert row.price == 0
    assert row.date == TODAY


def test_header_only_or_empty_input_yields_nothing():
    assert parse_transactions("", today=TODAY) == []
    assert parse_transactions("date,ticker,type,qty,price,fees\n", today=TODAY) == []


def test_invalid_date_reports_line_number():
    with pytest.raises(CsvImportError, match="Line 3"):
        parse_transactions("date,ticker,type,qty,price\n2024-01-02,A,BUY,1,1\n02/01/2024,B,BUY,1,1", today=TODAY)


@pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity", "1_000"])
def test_non_finite_and_underscore_numbers_parse_as_zero(raw):
    [row] = parse_transactions(f"date,ticker,type,qty,price,fees\n2024-01-02,ABC,BUY,{raw},{raw},{raw}", today=TODAY)
    assert row.qty == 0
    assert row.price == 0
    assert row.fees == 0
