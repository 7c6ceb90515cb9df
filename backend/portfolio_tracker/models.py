"""Domain models used by the portfolio tracker core."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


def new_id() -> str:
    """Return a short random identifier for transactions, dividends and portfolios."""

    return uuid.uuid4().hex[:12]


class TransactionType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class DividendType(str, Enum):
    ON = "ON"
    PN = "PN"
    UNIT = "UNIT"
    BDR = "BDR"
    ETF = "ETF"
    OTHER = "OTHER"

    @classmethod
    def _missing_(cls, value):
        # Documents written by earlier versions store "OUTRO".
        if isinstance(value, str) and value.upper() == "OUTRO":
            return cls.OTHER
        return None


class Signal(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    STOP = "STOP"


@dataclass(frozen=True)
class Transaction:
    """A recorded trade. Immutable once created, removed by id."""

    id: str
    date: date
    ticker: str
    type: TransactionType
    qty: float
    price: float
    fees: float = 0.0

    def signed_qty(self) -> float:
        """Return ``qty`` for buys and ``-qty`` for sells."""

        return self.qty if self.type == TransactionType.BUY else -self.qty


@dataclass(frozen=True)
class PriceQuote:
    """Manually entered quote; at most one live quote per ticker."""

    ticker: str
    price: float
    updated_at: datetime


@dataclass(frozen=True)
class Trigger:
    """Price thresholds that turn a position into a BUY/SELL/STOP signal."""

    ticker: str
    buy_price: Optional[float] = None
    sell_price: Optional[float] = None
    trailing_stop_pct: Optional[float] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class DividendEntry:
    id: str
    date: date
    ticker: str
    type: DividendType
    value_per_share: float
    note: Optional[str] = None


@dataclass(frozen=True)
class HistoryPoint:
    date: date
    total_value: float


@dataclass(frozen=True)
class Portfolio:
    """The unit of persistence: one named portfolio and everything recorded in it."""

    id: str
    name: str
    base_currency: str = "BRL"
    transactions: Tuple[Transaction, ...] = field(default_factory=tuple)
    prices: Tuple[PriceQuote, ...] = field(default_factory=tuple)
    triggers: Tuple[Trigger, ...] = field(default_factory=tuple)
    dividends: Tuple[DividendEntry, ...] = field(default_factory=tuple)
    history: Tuple[HistoryPoint, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Position:
    """Derived per-ticker snapshot. Recomputed on every read, never persisted."""

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
    signal: Signal
    trigger: Optional[Trigger] = None
