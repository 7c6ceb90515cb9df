"""Seed portfolio shown when a store holds nothing yet."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from .models import (
    DividendEntry,
    DividendType,
    Portfolio,
    PriceQuote,
    Transaction,
    TransactionType,
    Trigger,
)

# Fixed ids so repeated reads of an empty store address the same records.
DEMO_PORTFOLIO_ID = "demo"


def demo_portfolio(today: Optional[date] = None, now: Optional[datetime] = None) -> Portfolio:
    today = today or date.today()
    now = now or datetime.now(timezone.utc)
    return Portfolio(
        id=DEMO_PORTFOLIO_ID,
        name="Main Portfolio",
        base_currency="BRL",
        transactions=(
            Transaction(id="demo-tx-1", date=today, ticker="PETR4", type=TransactionType.BUY, qty=100, price=37.5),
            Transaction(id="demo-tx-2", date=today, ticker="VALE3", type=TransactionType.BUY, qty=20, price=62.2),
        ),
        prices=(
            PriceQuote(ticker="PETR4", price=38.1, updated_at=now),
            PriceQuote(ticker="VALE3", price=61.8, updated_at=now),
        ),
        triggers=(
            Trigger(ticker="PETR4", buy_price=37.0, sell_price=42.0, trailing_stop_pct=8, note="Tactical range"),
            Trigger(ticker="VALE3", buy_price=60.0, sell_price=68.0),
        ),
        dividends=(
            DividendEntry(id="demo-div-1", date=today, ticker="PETR4", type=DividendType.PN, value_per_share=0.75),
        ),
    )


__all__ = ["DEMO_PORTFOLIO_ID", "demo_portfolio"]
