"""Pydantic schemas for the portfolio API."""

from __future__ import annotations

from datetime import date as date_type
from typing import Any, Literal

from pydantic import Field, field_validator

from portfolio_tracker.metrics import DividendLedgerRow, PortfolioSummary
from portfolio_tracker.models import DividendType, Portfolio, Position, TransactionType

from .document import (
    CamelModel,
    DividendDocument,
    HistoryPointDocument,
    PortfolioDocument,
    TriggerDocument,
)


def _normalize_ticker(value: str) -> str:
    normalized = value.strip().upper()
    if not normalized:
        raise ValueError("ticker must not be empty")
    return normalized


class PortfolioCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, examples=["Main Portfolio"])
    base_currency: str | None = Field(default=None, min_length=3, max_length=3, examples=["BRL"])


class PortfolioRenameRequest(CamelModel):
    name: str = Field(..., min_length=1)


class TransactionCreateRequest(CamelModel):
    date: date_type = Field(default_factory=date_type.today)
    ticker: str = Field(..., examples=["PETR4"])
    type: TransactionType = TransactionType.BUY
    qty: float = Field(..., gt=0)
    price: float = Field(..., gt=0)
    fees: float = Field(default=0.0, ge=0)

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, value: str) -> str:
        return _normalize_ticker(value)


class CsvImportRequest(CamelModel):
    csv: str = Field(..., description="Header date,ticker,type,qty,price[,fees] followed by one row per trade")


class PriceUpdateRequest(CamelModel):
    price: float = Field(..., ge=0)


class TriggerUpdateRequest(CamelModel):
    """Partial trigger update; only the fields sent are applied, ``null`` clears one."""

    buy_price: float | None = Field(default=None, gt=0)
    sell_price: float | None = Field(default=None, gt=0)
    trailing_stop_pct: float | None = Field(default=None, ge=0, le=100)
    note: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class DividendCreateRequest(CamelModel):
    date: date_type = Field(default_factory=date_type.today)
    ticker: str
    type: DividendType = DividendType.OTHER
    value_per_share: float = Field(..., gt=0)
    note: str | None = None

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, value: str) -> str:
        return _normalize_ticker(value)


class HistoryPointCreateRequest(CamelModel):
    date: date_type
    total_value: float


class PositionSchema(CamelModel):
    ticker: str
    qty: float
    invested: float
    avg_price: float
    last_price: float
    mkt_value: float
    pl: float
    pl_pct: float
    divs_total: float
    div_yield_on_cost: float
    signal: Literal["BUY", "SELL", "HOLD", "STOP"]
    trigger: TriggerDocument | None = None

    @classmethod
    def from_domain(cls, position: Position) -> "PositionSchema":
        return cls(
            ticker=position.ticker,
            qty=position.qty,
            invested=position.invested,
            avg_price=position.avg_price,
            last_price=position.last_price,
            mkt_value=position.mkt_value,
            pl=position.pl,
            pl_pct=position.pl_pct,
            divs_total=position.divs_total,
            div_yield_on_cost=position.div_yield_on_cost,
            signal=position.signal.value,
            trigger=TriggerDocument.from_domain(position.trigger) if position.trigger else None,
        )


class TotalsSchema(CamelModel):
    invested: float
    mkt: float
    pl: float
    pl_pct: float
    divs: float


class AllocationSliceSchema(CamelModel):
    name: str
    value: float


class TickerDividendsSchema(CamelModel):
    ticker: str
    divs: float


class PortfolioSummaryResponse(CamelModel):
    portfolio_id: str
    base_currency: str
    totals: TotalsSchema
    formatted_totals: dict[str, str]
    positions: list[PositionSchema]
    allocation: list[AllocationSliceSchema]
    signals: list[PositionSchema]
    top_performers: list[PositionSchema]
    dividends_by_ticker: list[TickerDividendsSchema]
    history: list[HistoryPointDocument]

    @classmethod
    def from_domain(
        cls, portfolio: Portfolio, summary: PortfolioSummary, formatted_totals: dict[str, str]
    ) -> "PortfolioSummaryResponse":
        t = summary.totals
        return cls(
            portfolio_id=portfolio.id,
            base_currency=portfolio.base_currency,
            totals=TotalsSchema(invested=t.invested, mkt=t.mkt, pl=t.pl, pl_pct=t.pl_pct, divs=t.divs),
            formatted_totals=formatted_totals,
            positions=[PositionSchema.from_domain(p) for p in summary.positions],
            allocation=[AllocationSliceSchema(name=a.name, value=a.value) for a in summary.allocation],
            signals=[PositionSchema.from_domain(p) for p in summary.signals],
            top_performers=[PositionSchema.from_domain(p) for p in summary.top_performers],
            dividends_by_ticker=[TickerDividendsSchema(ticker=d.ticker, divs=d.divs) for d in summary.dividends_by_ticker],
            history=[HistoryPointDocument(date=h.date, total_value=h.total_value) for h in summary.history],
        )


class DividendLedgerRowSchema(DividendDocument):
    shares: float
    total: float

    @classmethod
    def from_row(cls, row: DividendLedgerRow) -> "DividendLedgerRowSchema":
        base = DividendDocument.from_domain(row.entry)
        return cls(**base.model_dump(), shares=row.shares, total=row.total)


class DocumentResponse(CamelModel):
    ok: bool = True
    data: list[PortfolioDocument] | None = None


class ErrorResponse(CamelModel):
    ok: bool = False
    error: str


__all__ = [
    "AllocationSliceSchema",
    "CsvImportRequest",
    "DividendCreateRequest",
    "DividendLedgerRowSchema",
    "DocumentResponse",
    "ErrorResponse",
    "HistoryPointCreateRequest",
    "PortfolioCreateRequest",
    "PortfolioRenameRequest",
    "PortfolioSummaryResponse",
    "PositionSchema",
    "PriceUpdateRequest",
    "TickerDividendsSchema",
    "TotalsSchema",
    "TransactionCreateRequest",
    "TriggerUpdateRequest",
]
