"""Fold a portfolio's transactions, quotes, triggers and dividends into positions."""
from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .models import Portfolio, Position, Signal, Transaction, TransactionType, Trigger


def _group_by_ticker(transactions: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    grouped: Dict[str, List[Transaction]] = {}
    for tx in transactions:
        grouped.setdefault(tx.ticker, []).append(tx)
    return grouped


def share_count_at_date(transactions: Iterable[Transaction], ticker: str, on: date) -> float:
    """Return the shares of ``ticker`` held at the end of day ``on``.

    Buys add and sells subtract for every transaction dated on or before
    ``on``. The result is clamped at zero, so a position oversold on paper
    never yields a negative dividend entitlement.
    """

    held = 0.0
    for tx in transactions:
        if tx.ticker != ticker:
            continue
        if tx.date <= on:
            held += tx.signed_qty()
    return max(held, 0.0)


def _fold_cost_basis(transactions: Sequence[Transaction]) -> tuple[float, float]:
    """Walk transactions in storage order keeping a weighted-average cost.

    Sells remove ``avg * qty`` from cost and then add their own fees back to
    the residual cost. Over-selling is not prevented.
    """

    qty = 0.0
    cost = 0.0
    for tx in transactions:
        fees = tx.fees or 0.0
        if tx.type == TransactionType.BUY:
            qty += tx.qty
            cost += tx.qty * tx.price + fees
        else:
            avg = cost / qty if qty > 0 else 0.0
            qty -= tx.qty
            cost -= avg * tx.qty
            cost += fees
    return qty, cost


def _dividends_by_ticker(portfolio: Portfolio) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for entry in portfolio.dividends:
        shares = share_count_at_date(portfolio.transactions, entry.ticker, entry.date)
        totals[entry.ticker] = totals.get(entry.ticker, 0.0) + shares * entry.value_per_share
    return totals


def derive_signal(
    trigger: Optional[Trigger],
    last_price: float,
    pl_pct: float,
) -> Signal:
    """Apply trigger thresholds; later checks override earlier ones (STOP > SELL > BUY)."""

    signal = Signal.HOLD
    if trigger is None or not last_price > 0:
        return signal
    if trigger.buy_price is not None and last_price <= trigger.buy_price:
        signal = Signal.BUY
    if trigger.sell_price is not None and last_price >= trigger.sell_price:
        signal = Signal.SELL
    if (
        trigger.trailing_stop_pct is not None
        and trigger.trailing_stop_pct > 0
        and pl_pct <= -trigger.trailing_stop_pct
    ):
        signal = Signal.STOP
    return signal


def _latest_by_ticker(items: Iterable, attr: str = "ticker") -> dict:
    # Later entries win, matching "latest write wins" for quotes and triggers.
    return {getattr(item, attr): item for item in items}


def _held_position(
    ticker: str,
    transactions: Sequence[Transaction],
    prices: Mapping[str, float],
    triggers: Mapping[str, Trigger],
    dividends: Mapping[str, float],
) -> Position:
    qty, cost = _fold_cost_basis(transactions)
    avg_price = cost / max(qty, 1) if qty > 0 else 0.0
    last_price = prices.get(ticker, 0.0)
    mkt_value = qty * last_price
    pl = mkt_value - cost
    pl_pct = pl / cost * 100 if cost > 0 else 0.0
    divs = dividends.get(ticker, 0.0)
    trigger = triggers.get(ticker)
    return Position(
        ticker=ticker,
        qty=qty,
        invested=cost,
        avg_price=avg_price,
        last_price=last_price,
        mkt_value=mkt_value,
        pl=pl,
        pl_pct=pl_pct,
        divs_total=divs,
        div_yield_on_cost=divs / cost if cost > 0 else 0.0,
        signal=derive_signal(trigger, last_price, pl_pct),
        trigger=trigger,
    )


def _watch_only_signal(trigger: Optional[Trigger], price: float) -> Signal:
    """Buy-first threshold check for tickers that are quoted but not held.

    Unlike ``derive_signal`` there is no positive-price gate and no trailing
    stop; an unset or zero threshold is ignored.
    """

    if trigger is None:
        return Signal.HOLD
    if trigger.buy_price and price <= trigger.buy_price:
        return Signal.BUY
    if trigger.sell_price and price >= trigger.sell_price:
        return Signal.SELL
    return Signal.HOLD


def _watch_only_position(ticker: str, price: float, trigger: Optional[Trigger]) -> Position:
    return Position(
        ticker=ticker,
        qty=0.0,
        invested=0.0,
        avg_price=0.0,
        last_price=price,
        mkt_value=0.0,
        pl=0.0,
        pl_pct=0.0,
        divs_total=0.0,
        div_yield_on_cost=0.0,
        signal=_watch_only_signal(trigger, price),
        trigger=trigger,
    )


def aggregate(portfolio: Portfolio) -> List[Position]:
    """Compute one position per ticker found in transactions or quotes, sorted by ticker."""

    tx_by_ticker = _group_by_ticker(portfolio.transactions)
    prices = {ticker: quote.price for ticker, quote in _latest_by_ticker(portfolio.prices).items()}
    triggers = _latest_by_ticker(portfolio.triggers)
    dividends = _dividends_by_ticker(portfolio)

    positions: Dict[str, Position] = {}
    for ticker, transactions in tx_by_ticker.items():
        positions[ticker] = _held_position(ticker, transactions, prices, triggers, dividends)

    for ticker, price in prices.items():
        if ticker not in positions:
            positions[ticker] = _watch_only_position(ticker, price, triggers.get(ticker))

    return [positions[ticker] for ticker in sorted(positions)]


__all__ = ["aggregate", "derive_signal", "share_count_at_date"]
