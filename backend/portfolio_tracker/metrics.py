"""Portfolio-level totals and chart series derived from aggregated positions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from .aggregation import aggregate, share_count_at_date
from .models import DividendEntry, HistoryPoint, Portfolio, Position, Signal, Transaction


@dataclass(frozen=True)
class Totals:
    invested: float
    mkt: float
    pl: float
    pl_pct: float
    divs: float


@dataclass(frozen=True)
class AllocationSlice:
    name: str
    value: float


@dataclass(frozen=True)
class TickerDividends:
    ticker: str
    divs: float


@dataclass(frozen=True)
class DividendLedgerRow:
    """A dividend entry with the entitlement computed at its payment date."""

    entry: DividendEntry
    shares: float
    total: float


@dataclass(frozen=True)
class PortfolioSummary:
    positions: List[Position]
    totals: Totals
    allocation: List[AllocationSlice] = field(default_factory=list)
    signals: List[Position] = field(default_factory=list)
    top_performers: List[Position] = field(default_factory=list)
    dividends_by_ticker: List[TickerDividends] = field(default_factory=list)
    history: List[HistoryPoint] = field(default_factory=list)


def totals(positions: Sequence[Position]) -> Totals:
    invested = sum(p.invested for p in positions)
    mkt = sum(p.mkt_value for p in positions)
    pl = mkt - invested
    return Totals(
        invested=invested,
        mkt=mkt,
        pl=pl,
        pl_pct=pl / invested * 100 if invested > 0 else 0.0,
        divs=sum(p.divs_total for p in positions),
    )


def allocation(positions: Sequence[Position]) -> List[AllocationSlice]:
    """Market-value slices for held positions, rounded to cents for charting."""

    return [
        AllocationSlice(name=p.ticker, value=round(p.mkt_value, 2))
        for p in positions
        if p.qty > 0 and p.mkt_value > 0
    ]


def signals(positions: Sequence[Position]) -> List[Position]:
    return [p for p in positions if p.signal != Signal.HOLD]


def top_performers(positions: Sequence[Position], limit: int = 8) -> List[Position]:
    return sorted(positions, key=lambda p: p.pl_pct, reverse=True)[:limit]


def dividends_by_ticker(positions: Sequence[Position]) -> List[TickerDividends]:
    return [TickerDividends(ticker=p.ticker, divs=p.divs_total) for p in positions]


def history_series(portfolio: Portfolio) -> List[HistoryPoint]:
    return sorted(portfolio.history, key=lambda h: h.date)


def dividend_ledger(portfolio: Portfolio) -> List[DividendLedgerRow]:
    """Dividend entries by payment date with the share count held on that date.

    Uses the same share-count lookup as :func:`aggregate`, so ledger totals
    always add up to the position table's dividend column.
    """

    rows: List[DividendLedgerRow] = []
    for entry in sorted(portfolio.dividends, key=lambda d: d.date):
        shares = share_count_at_date(portfolio.transactions, entry.ticker, entry.date)
        rows.append(DividendLedgerRow(entry=entry, shares=shares, total=shares * entry.value_per_share))
    return rows


def recent_transactions(portfolio: Portfolio) -> List[Transaction]:
    return list(reversed(portfolio.transactions))


def summarize(portfolio: Portfolio) -> PortfolioSummary:
    positions = aggregate(portfolio)
    return PortfolioSummary(
        positions=positions,
        totals=totals(positions),
        allocation=allocation(positions),
        signals=signals(positions),
        top_performers=top_performers(positions),
        dividends_by_ticker=dividends_by_ticker(positions),
        history=history_series(portfolio),
    )


__all__ = [
    "AllocationSlice",
    "DividendLedgerRow",
    "PortfolioSummary",
    "TickerDividends",
    "Totals",
    "allocation",
    "dividend_ledger",
    "dividends_by_ticker",
    "history_series",
    "recent_transactions",
    "signals",
    "summarize",
    "top_performers",
    "totals",
]
