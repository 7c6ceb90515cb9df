"""Plain comma-separated transaction import.

The expected header is ``date,ticker,type,qty,price,fees`` in any column
order; ``fees`` may be omitted. Fields are split on bare commas, so quoted
values containing commas are not supported.
"""
from __future__ import annotations

import math
import re
from datetime import date
from typing import Callable, List, Optional

from .models import Transaction, TransactionType, new_id

EXPECTED_HEADER = "date,ticker,type,qty,price,fees"

_LINE_SPLIT = re.compile(r"\r?\n")


class CsvImportError(ValueError):
    """Raised when a row carries a value that cannot be interpreted."""


def _number(raw: Optional[str]) -> float:
    if raw is None:
        return 0.0
    text = raw.strip()
    if not text or "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    # nan and inf count as non-numeric
    return value if math.isfinite(value) else 0.0


def _cell(parts: List[str], index: int) -> Optional[str]:
    if index < 0 or index >= len(parts):
        return None
    return parts[index]


def parse_transactions(
    text: str,
    *,
    today: Optional[date] = None,
    id_factory: Callable[[], str] = new_id,
) -> List[Transaction]:
    """Parse CSV text into transactions, skipping rows with an empty ticker."""

    rows = [line.strip() for line in _LINE_SPLIT.split(text)]
    rows = [row for row in rows if row]
    if not rows:
        return []

    header = [name.strip() for name in rows[0].lower().split(",")]

    def idx(name: str) -> int:
        return header.index(name) if name in header else -1

    i_date, i_ticker, i_type = idx("date"), idx("ticker"), idx("type")
    i_qty, i_price, i_fees = idx("qty"), idx("price"), idx("fees")
    default_date = today or date.today()

    out: List[Transaction] = []
    for line_no, row in enumerate(rows[1:], start=2):
        parts = row.split(",")
        ticker = (_cell(parts, i_ticker) or "").strip().upper()
        if not ticker:
            continue
        raw_date = (_cell(parts, i_date) or "").strip()
        try:
            tx_date = date.fromisoformat(raw_date) if raw_date else default_date
        except ValueError as exc:
            raise CsvImportError(f"Line {line_no}: invalid date {raw_date!r}") from exc
        raw_type = (_cell(parts, i_type) or "").strip().upper()
        out.append(
            Transaction(
                id=id_factory(),
                date=tx_date,
                ticker=ticker,
                type=TransactionType.SELL if raw_type == "SELL" else TransactionType.BUY,
                qty=_number(_cell(parts, i_qty)),
                price=_number(_cell(parts, i_price)),
                fees=_number(_cell(parts, i_fees)) if i_fees >= 0 else 0.0,
            )
        )
    return out


__all__ = ["CsvImportError", "EXPECTED_HEADER", "parse_transactions"]
