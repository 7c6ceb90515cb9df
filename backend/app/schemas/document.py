"""Persisted portfolio document schema (camelCase JSON)."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from portfolio_tracker.models import (
    DividendEntry,
    DividendType,
    HistoryPoint,
    Portfolio,
    PriceQuote,
    Transaction,
    TransactionType,
    Trigger,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionDocument(CamelModel):
    id: str
    date: date
    ticker: str
    type: TransactionType
    qty: float
    price: float
    fees: float | None = 0.0

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            date=self.date,
            ticker=self.ticker,
            type=self.type,
            qty=self.qty,
            price=self.price,
            fees=self.fees or 0.0,
        )

    @classmethod
    def from_domain(cls, tx: Transaction) -> "TransactionDocument":
        return cls(id=tx.id, date=tx.date, ticker=tx.ticker, type=tx.type, qty=tx.qty, price=tx.price, fees=tx.fees)


class PriceQuoteDocument(CamelModel):
    ticker: str
    price: float
    updated_at: datetime

    def to_domain(self) -> PriceQuote:
        return PriceQuote(ticker=self.ticker, price=self.price, updated_at=self.updated_at)

    @classmethod
    def from_domain(cls, quote: PriceQuote) -> "PriceQuoteDocument":
        return cls(ticker=quote.ticker, price=quote.price, updated_at=quote.updated_at)


class TriggerDocument(CamelModel):
    ticker: str
    buy_price: float | None = None
    sell_price: float | None = None
    trailing_stop_pct: float | None = None
    note: str | None = None

    def to_domain(self) -> Trigger:
        return Trigger(
            ticker=self.ticker,
            buy_price=self.buy_price,
            sell_price=self.sell_price,
            trailing_stop_pct=self.trailing_stop_pct,
            note=self.note,
        )

    @classmethod
    def from_domain(cls, trigger: Trigger) -> "TriggerDocument":
        return cls(
            ticker=trigger.ticker,
            buy_price=trigger.buy_price,
            sell_price=trigger.sell_price,
            trailing_stop_pct=trigger.trailing_stop_pct,
            note=trigger.note,
        )


class DividendDocument(CamelModel):
    id: str
    date: date
    ticker: str
    type: DividendType
    value_per_share: float
    note: str | None = None

    def to_domain(self) -> DividendEntry:
        return DividendEntry(
            id=self.id,
            date=self.date,
            ticker=self.ticker,
            type=self.type,
            value_per_share=self.value_per_share,
            note=self.note,
        )

    @classmethod
    def from_domain(cls, entry: DividendEntry) -> "DividendDocument":
        return cls(
            id=entry.id,
            date=entry.date,
            ticker=entry.ticker,
            type=entry.type,
            value_per_share=entry.value_per_share,
            note=entry.note,
        )


class HistoryPointDocument(CamelModel):
    date: date
    total_value: float


class PortfolioDocument(CamelModel):
    id: str
    name: str
    base_currency: str = "BRL"
    transactions: list[TransactionDocument] = Field(default_factory=list)
    prices: list[PriceQuoteDocument] = Field(default_factory=list)
    triggers: list[TriggerDocument] = Field(default_factory=list)
    dividends: list[DividendDocument] = Field(default_factory=list)
    history: list[HistoryPointDocument] = Field(default_factory=list)

    def to_domain(self) -> Portfolio:
        return Portfolio(
            id=self.id,
            name=self.name,
            base_currency=self.base_currency,
            transactions=tuple(t.to_domain() for t in self.transactions),
            prices=tuple(p.to_domain() for p in self.prices),
            triggers=tuple(t.to_domain() for t in self.triggers),
            dividends=tuple(d.to_domain() for d in self.dividends),
            history=tuple(HistoryPoint(date=h.date, total_value=h.total_value) for h in self.history),
        )

    @classmethod
    def from_domain(cls, portfolio: Portfolio) -> "PortfolioDocument":
        return cls(
            id=portfolio.id,
            name=portfolio.name,
            base_currency=portfolio.base_currency,
            transactions=[TransactionDocument.from_domain(t) for t in portfolio.transactions],
            prices=[PriceQuoteDocument.from_domain(p) for p in portfolio.prices],
            triggers=[TriggerDocument.from_domain(t) for t in portfolio.triggers],
            dividends=[DividendDocument.from_domain(d) for d in portfolio.dividends],
            history=[HistoryPointDocument(date=h.date, total_value=h.total_value) for h in portfolio.history],
        )


__all__ = [
    "CamelModel",
    "DividendDocument",
    "HistoryPointDocument",
    "PortfolioDocument",
    "PriceQuoteDocument",
    "TransactionDocument",
    "TriggerDocument",
]
