from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from portfolio_tracker.demo import DEMO_PORTFOLIO_ID, demo_portfolio
from portfolio_tracker.metrics import (
    allocation,
    dividend_ledger,
    history_series,
    recent_transactions,
    summarize,
    top_performers,
    totals,
)
from portfolio_tracker.models import HistoryPoint, Portfolio, Signal

TODAY = date(2024, 6, 1)
NOW = datetime(2024, 6, 1, 12, tzinfo=timezone.utc)


def test_demo_portfolio_summary_totals():
    summary = summarize(demo_portfolio(today=TODAY, now=NOW))
    invested = 100 * 37.5 + 20 * 62.2
    mkt = 100 * 38.1 + 20 * 61.8
    assert summary.totals.invested == pytest.approx(invested)
    assert summary.totals.mkt == pytest.approx(mkt)
    assert summary.totals.pl == pytest.approx(mkt - invested)
    assert summary.totals.pl_pct == pytest.approx((mkt - invested) / invested * 100)
    assert summary.totals.divs == pytest.approx(75.0)


def test_demo_portfolio_ids_are_stable():
    first = demo_portfolio(today=TODAY, now=NOW)
    second = demo_portfolio()
    assert first.id == second.id == DEMO_PORTFOLIO_ID
    assert [t.id for t in first.transactions] == [t.id for t in second.transactions]


def test_totals_of_empty_portfolio_are_zero():
    result = totals([])
    assert result.invested == 0
    assert result.pl_pct == 0


def test_allocation_skips_flat_and_watch_only_positions():
    portfolio = demo_portfolio(today=TODAY, now=NOW)
    slices = allocation(summarize(portfolio).positions)
    assert [s.name for s in slices] == ["PETR4", "VALE3"]
    assert slices[0].value == pytest.approx(3810.0)


def test_top_performers_ordered_by_pl_pct_and_limited():
    positions = summarize(demo_portfolio(today=TODAY, now=NOW)).positions
    ranked = top_performers(positions, limit=1)
    assert [p.ticker for p in ranked] == ["PETR4"]


def test_signals_only_lists_non_hold_positions():
    summary = summarize(demo_portfolio(today=TODAY, now=NOW))
    assert all(p.signal != Signal.HOLD for p in summary.signals)


def test_history_series_sorted_by_date():
    portfolio = Portfolio(
        id="p",
        name="P",
        history=(HistoryPoint(date(2024, 3, 1), 20.0), HistoryPoint(date(2024, 1, 1), 10.0)),
    )
    assert [h.total_value for h in history_series(portfolio)] == [10.0, 20.0]


def test_dividend_ledger_matches_position_dividends():
    portfolio = demo_portfolio(today=TODAY, now=NOW)
    [row] = dividend_ledger(portfolio)
    assert row.shares == 100
    assert row.total == pytest.approx(75.0)
    petr = next(p for p in summarize(portfolio).positions if p.ticker == "PETR4")
    assert petr.divs_total == pytest.approx(row.total)


def test_recent_transactions_newest_first():
    portfolio = demo_portfolio(today=TODAY, now=NOW)
    assert [t.id for t in recent_transactions(portfolio)] == ["demo-tx-2", "demo-tx-1"]
