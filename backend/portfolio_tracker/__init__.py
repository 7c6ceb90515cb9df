"""Core package for the portfolio tracker: models, position aggregation and metrics."""

from .aggregation import aggregate, share_count_at_date
from .csv_import import CsvImportError, parse_transactions
from .metrics import summarize
from .models import (
    DividendEntry,
    DividendType,
    HistoryPoint,
    Portfolio,
    Position,
    PriceQuote,
    Signal,
    Transaction,
    TransactionType,
    Trigger,
)

__all__ = [
    "CsvImportError",
    "DividendEntry",
    "DividendType",
    "HistoryPoint",
    "Portfolio",
    "Position",
    "PriceQuote",
    "Signal",
    "Transaction",
    "TransactionType",
    "Trigger",
    "aggregate",
    "parse_transactions",
    "share_count_at_date",
    "summarize",
]
