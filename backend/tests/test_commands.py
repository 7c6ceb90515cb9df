from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from portfolio_tracker import commands
from portfolio_tracker.models import DividendType, Portfolio, PriceQuote, TransactionType, Trigger

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def empty_portfolio() -> Portfolio:
    return Portfolio(id="p1", name="Main")


def test_add_transaction_normalizes_ticker_and_returns_new_portfolio():
    original = empty_portfolio()
    updated, tx = commands.add_transaction(
        original, date=date(2024, 1, 2), ticker=" petr4 ", type=TransactionType.BUY, qty=10, price=30.0, fees=1.0
    )
    assert tx.ticker == "PETR4"
    assert updated.transactions == (tx,)
    assert original.transactions == ()


def test_remove_transaction_unknown_id_raises():
    with pytest.raises(commands.RecordNotFound):
        commands.remove_transaction(empty_portfolio(), "missing")


def test_set_price_upserts_in_place():
    portfolio = Portfolio(
        id="p1",
        name="Main",
        prices=(PriceQuote("AAA", 1.0, NOW), PriceQuote("BBB", 2.0, NOW)),
    )
    updated, q = commands.set_price(portfolio, "aaa", 5.0, updated_at=NOW)
    assert [p.ticker for p in updated.prices] == ["AAA", "BBB"]
    assert updated.prices[0].price == 5.0
    assert q.ticker == "AAA"
    appended, _ = commands.set_price(updated, "CCC", 3.0)
    assert [p.ticker for p in appended.prices] == ["AAA", "BBB", "CCC"]


def test_merge_trigger_keeps_unsent_fields_and_clears_nulls():
    existing = Trigger(ticker="AAA", buy_price=10.0, sell_price=20.0, trailing_stop_pct=5, note="range")
    merged = commands.merge_trigger(existing, "AAA", {"sell_price": 25.0, "note": None})
    assert merged.buy_price == 10.0
    assert merged.sell_price == 25.0
    assert merged.trailing_stop_pct == 5
    assert merged.note is None


def test_merge_trigger_rejects_unknown_fields():
    with pytest.raises(ValueError):
        commands.merge_trigger(None, "AAA", {"stop": 3})


def test_set_trigger_creates_then_updates_single_entry():
    portfolio, created = commands.set_trigger(empty_portfolio(), "aaa", {"buy_price": 9.0})
    assert created == Trigger(ticker="AAA", buy_price=9.0)
    portfolio, updated = commands.set_trigger(portfolio, "AAA", {"trailing_stop_pct": 7})
    assert len(portfolio.triggers) == 1
    assert updated.buy_price == 9.0
    assert updated.trailing_stop_pct == 7


def test_dividend_add_and_remove():
    portfolio, entry = commands.add_dividend(
        empty_portfolio(), date=date(2024, 5, 1), ticker="petr4", type=DividendType.PN, value_per_share=0.5
    )
    assert entry.ticker == "PETR4"
    assert commands.remove_dividend(portfolio, entry.id).dividends == ()
    with pytest.raises(commands.RecordNotFound):
        commands.remove_dividend(portfolio, "nope")


def test_portfolio_collection_commands():
    first = commands.new_portfolio("One")
    second = commands.new_portfolio("Two", "USD")
    collection = [first, second]
    assert commands.find_portfolio(collection, second.id).base_currency == "USD"
    renamed = commands.rename_portfolio(first, "Uno")
    assert commands.replace_portfolio(collection, renamed)[0].name == "Uno"
    assert commands.remove_portfolio(collection, first.id) == [second]
    with pytest.raises(commands.PortfolioNotFound):
        commands.find_portfolio(collection, "missing")


def test_add_history_point_appends():
    portfolio, point = commands.add_history_point(empty_portfolio(), date=date(2024, 1, 1), total_value=100.0)
    assert portfolio.history == (point,)
