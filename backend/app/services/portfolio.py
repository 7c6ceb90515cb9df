"""Domain services backing the portfolio API.

Each mutation reads the whole collection from the store, applies one pure
command and writes the whole collection back.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Mapping, TypeVar

from portfolio_tracker import commands
from portfolio_tracker.aggregation import aggregate
from portfolio_tracker.csv_import import parse_transactions
from portfolio_tracker.demo import demo_portfolio
from portfolio_tracker.metrics import (
    DividendLedgerRow,
    PortfolioSummary,
    dividend_ledger,
    recent_transactions,
    summarize,
)
from portfolio_tracker.models import (
    DividendEntry,
    DividendType,
    HistoryPoint,
    Portfolio,
    Position,
    PriceQuote,
    Transaction,
    TransactionType,
    Trigger,
)

from .store import PortfolioStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PortfolioService:
    def __init__(self, store: PortfolioStore, *, seed_demo: bool = False, base_currency: str = "BRL"):
        self.store = store
        self.seed_demo = seed_demo
        self.base_currency = base_currency

    async def list_portfolios(self) -> list[Portfolio]:
        portfolios = await self.store.load()
        if not portfolios and self.seed_demo:
            # Served, not saved; the first mutation persists it.
            return [demo_portfolio()]
        return portfolios

    async def load_document(self) -> list[Portfolio]:
        """Return the stored collection exactly as persisted, never the demo seed."""

        return await self.store.load()

    async def replace_all(self, portfolios: list[Portfolio]) -> None:
        await self.store.save(portfolios)
        logger.info("Replaced portfolio collection (%d portfolios)", len(portfolios))

    async def get_portfolio(self, portfolio_id: str) -> Portfolio:
        return commands.find_portfolio(await self.list_portfolios(), portfolio_id)

    async def _mutate(self, portfolio_id: str, apply: Callable[[Portfolio], tuple[Portfolio, T]]) -> T:
        portfolios = await self.list_portfolios()
        current = commands.find_portfolio(portfolios, portfolio_id)
        updated, result = apply(current)
        await self.store.save(commands.replace_portfolio(portfolios, updated))
        return result

    # Portfolios

    async def create_portfolio(self, name: str, base_currency: str | None = None) -> Portfolio:
        portfolios = await self.list_portfolios()
        portfolio = commands.new_portfolio(name, base_currency or self.base_currency)
        await self.store.save([*portfolios, portfolio])
        logger.info("Created portfolio %s (%s)", portfolio.id, name)
        return portfolio

    async def rename_portfolio(self, portfolio_id: str, name: str) -> Portfolio:
        def apply(p: Portfolio) -> tuple[Portfolio, Portfolio]:
            renamed = commands.rename_portfolio(p, name)
            return renamed, renamed

        return await self._mutate(portfolio_id, apply)

    async def delete_portfolio(self, portfolio_id: str) -> None:
        portfolios = await self.list_portfolios()
        await self.store.save(commands.remove_portfolio(portfolios, portfolio_id))
        logger.info("Deleted portfolio %s", portfolio_id)

    # Transactions

    async def list_transactions(self, portfolio_id: str) -> list[Transaction]:
        return recent_transactions(await self.get_portfolio(portfolio_id))

    async def add_transaction(
        self,
        portfolio_id: str,
        *,
        date: date,
        ticker: str,
        type: TransactionType,
        qty: float,
        price: float,
        fees: float = 0.0,
    ) -> Transaction:
        return await self._mutate(
            portfolio_id,
            lambda p: commands.add_transaction(p, date=date, ticker=ticker, type=type, qty=qty, price=price, fees=fees),
        )

    async def remove_transaction(self, portfolio_id: str, transaction_id: str) -> None:
        await self._mutate(portfolio_id, lambda p: (commands.remove_transaction(p, transaction_id), None))

    async def import_csv(self, portfolio_id: str, text: str) -> list[Transaction]:
        """Append the parsed rows; returns them (possibly empty, in which case nothing is saved)."""

        imported = parse_transactions(text)
        if not imported:
            return []
        await self._mutate(portfolio_id, lambda p: (commands.import_transactions(p, imported), None))
        logger.info("Imported %d transactions into %s", len(imported), portfolio_id)
        return imported

    # Quotes and triggers

    async def set_price(self, portfolio_id: str, ticker: str, price: float) -> PriceQuote:
        return await self._mutate(portfolio_id, lambda p: commands.set_price(p, ticker, price))

    async def set_trigger(self, portfolio_id: str, ticker: str, update: Mapping[str, Any]) -> Trigger:
        return await self._mutate(portfolio_id, lambda p: commands.set_trigger(p, ticker, update))

    # Dividends and history

    async def add_dividend(
        self,
        portfolio_id: str,
        *,
        date: date,
        ticker: str,
        type: DividendType,
        value_per_share: float,
        note: str | None = None,
    ) -> DividendEntry:
        return await self._mutate(
            portfolio_id,
            lambda p: commands.add_dividend(
                p, date=date, ticker=ticker, type=type, value_per_share=value_per_share, note=note
            ),
        )

    async def remove_dividend(self, portfolio_id: str, dividend_id: str) -> None:
        await self._mutate(portfolio_id, lambda p: (commands.remove_dividend(p, dividend_id), None))

    async def dividend_ledger(self, portfolio_id: str) -> list[DividendLedgerRow]:
        return dividend_ledger(await self.get_portfolio(portfolio_id))

    async def add_history_point(self, portfolio_id: str, *, date: date, total_value: float) -> HistoryPoint:
        return await self._mutate(
            portfolio_id, lambda p: commands.add_history_point(p, date=date, total_value=total_value)
        )

    # Derived views

    async def positions(self, portfolio_id: str) -> list[Position]:
        return aggregate(await self.get_portfolio(portfolio_id))

    async def summary(self, portfolio_id: str) -> tuple[Portfolio, PortfolioSummary]:
        portfolio = await self.get_portfolio(portfolio_id)
        return portfolio, summarize(portfolio)


__all__ = ["PortfolioService"]
