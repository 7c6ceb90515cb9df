"""Pure mutation commands over portfolios.

Every function returns new objects and leaves its inputs untouched; callers
persist the result as a whole-document replace.
"""
from __future__ import annotations

from dataclasses import fields, replace
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .models import (
    DividendEntry,
    DividendType,
    HistoryPoint,
    Portfolio,
    PriceQuote,
    Transaction,
    TransactionType,
    Trigger,
    new_id,
)

DEFAULT_BASE_CURRENCY = "BRL"

_TRIGGER_FIELDS = {f.name for f in fields(Trigger)} - {"ticker"}


class PortfolioNotFound(LookupError):
    """Raised when a portfolio id is not present in the collection."""

    def __init__(self, portfolio_id: str):
        super().__init__(f"Portfolio {portfolio_id} not found")
        self.portfolio_id = portfolio_id


class RecordNotFound(LookupError):
    """Raised when a transaction or dividend id is not present in a portfolio."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_portfolio(name: str, base_currency: str = DEFAULT_BASE_CURRENCY) -> Portfolio:
    return Portfolio(id=new_id(), name=name, base_currency=base_currency)


def find_portfolio(portfolios: Sequence[Portfolio], portfolio_id: str) -> Portfolio:
    for portfolio in portfolios:
        if portfolio.id == portfolio_id:
            return portfolio
    raise PortfolioNotFound(portfolio_id)


def replace_portfolio(portfolios: Sequence[Portfolio], updated: Portfolio) -> List[Portfolio]:
    find_portfolio(portfolios, updated.id)
    return [updated if p.id == updated.id else p for p in portfolios]


def remove_portfolio(portfolios: Sequence[Portfolio], portfolio_id: str) -> List[Portfolio]:
    find_portfolio(portfolios, portfolio_id)
    return [p for p in portfolios if p.id != portfolio_id]


def rename_portfolio(portfolio: Portfolio, name: str) -> Portfolio:
    return replace(portfolio, name=name)


def add_transaction(
    portfolio: Portfolio,
    *,
    date: date,
    ticker: str,
    type: TransactionType,
    qty: float,
    price: float,
    fees: float = 0.0,
) -> tuple[Portfolio, Transaction]:
    tx = Transaction(
        id=new_id(),
        date=date,
        ticker=ticker.strip().upper(),
        type=TransactionType(type),
        qty=qty,
        price=price,
        fees=fees,
    )
    return replace(portfolio, transactions=portfolio.transactions + (tx,)), tx


def import_transactions(portfolio: Portfolio, transactions: Iterable[Transaction]) -> Portfolio:
    return replace(portfolio, transactions=portfolio.transactions + tuple(transactions))


def remove_transaction(portfolio: Portfolio, transaction_id: str) -> Portfolio:
    remaining = tuple(t for t in portfolio.transactions if t.id != transaction_id)
    if len(remaining) == len(portfolio.transactions):
        raise RecordNotFound(f"Transaction {transaction_id} not found")
    return replace(portfolio, transactions=remaining)


def set_price(
    portfolio: Portfolio,
    ticker: str,
    price: float,
    *,
    updated_at: Optional[datetime] = None,
) -> tuple[Portfolio, PriceQuote]:
    """Upsert the quote for ``ticker``; an existing quote keeps its list position."""

    quote = PriceQuote(ticker=ticker.strip().upper(), price=price, updated_at=updated_at or _utcnow())
    prices = list(portfolio.prices)
    for i, existing in enumerate(prices):
        if existing.ticker == quote.ticker:
            prices[i] = quote
            break
    else:
        prices.append(quote)
    return replace(portfolio, prices=tuple(prices)), quote


def merge_trigger(existing: Optional[Trigger], ticker: str, update: Mapping[str, Any]) -> Trigger:
    """Overlay the fields present in ``update`` onto ``existing``.

    Keys missing from ``update`` keep their stored value; a key present with
    ``None`` clears the field.
    """

    unknown = set(update) - _TRIGGER_FIELDS
    if unknown:
        raise ValueError(f"Unknown trigger fields: {', '.join(sorted(unknown))}")
    base = existing if existing is not None else Trigger(ticker=ticker)
    return replace(base, ticker=ticker, **dict(update))


def set_trigger(portfolio: Portfolio, ticker: str, update: Mapping[str, Any]) -> tuple[Portfolio, Trigger]:
    ticker = ticker.strip().upper()
    triggers = list(portfolio.triggers)
    for i, existing in enumerate(triggers):
        if existing.ticker == ticker:
            merged = merge_trigger(existing, ticker, update)
            triggers[i] = merged
            break
    else:
        merged = merge_trigger(None, ticker, update)
        triggers.append(merged)
    return replace(portfolio, triggers=tuple(triggers)), merged


def add_dividend(
    portfolio: Portfolio,
    *,
    date: date,
    ticker: str,
    type: DividendType,
    value_per_share: float,
    note: Optional[str] = None,
) -> tuple[Portfolio, DividendEntry]:
    entry = DividendEntry(
        id=new_id(),
        date=date,
        ticker=ticker.strip().upper(),
        type=DividendType(type),
        value_per_share=value_per_share,
        note=note,
    )
    return replace(portfolio, dividends=portfolio.dividends + (entry,)), entry


def remove_dividend(portfolio: Portfolio, dividend_id: str) -> Portfolio:
    remaining = tuple(d for d in portfolio.dividends if d.id != dividend_id)
    if len(remaining) == len(portfolio.dividends):
        raise RecordNotFound(f"Dividend {dividend_id} not found")
    return replace(portfolio, dividends=remaining)


def add_history_point(portfolio: Portfolio, *, date: date, total_value: float) -> tuple[Portfolio, HistoryPoint]:
    point = HistoryPoint(date=date, total_value=total_value)
    return replace(portfolio, history=portfolio.history + (point,)), point


__all__ = [
    "DEFAULT_BASE_CURRENCY",
    "PortfolioNotFound",
    "RecordNotFound",
    "add_dividend",
    "add_history_point",
    "add_transaction",
    "find_portfolio",
    "import_transactions",
    "merge_trigger",
    "new_portfolio",
    "remove_dividend",
    "remove_portfolio",
    "remove_transaction",
    "rename_portfolio",
    "replace_portfolio",
    "set_price",
    "set_trigger",
]
