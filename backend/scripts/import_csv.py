"""Append transactions from a CSV file to a stored portfolio."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from app.config import get_settings
from app.core.logging import setup_logging
from app.services.portfolio import PortfolioService
from app.services.store import get_store
from portfolio_tracker.csv_import import EXPECTED_HEADER

logger = logging.getLogger(__name__)


async def run(portfolio_id: str, csv_path: Path) -> int:
    settings = get_settings()
    service = PortfolioService(
        get_store(),
        seed_demo=settings.seed_demo_portfolio,
        base_currency=settings.base_currency,
    )
    imported = await service.import_csv(portfolio_id, csv_path.read_text(encoding="utf-8"))
    if not imported:
        logger.warning("Nothing imported from %s. Expected header: %s", csv_path, EXPECTED_HEADER)
    return len(imported)


def main() -> None:
    parser = argparse.ArgumentParser(description="Import trades from a CSV file into a portfolio")
    parser.add_argument("portfolio_id", help="Id of the portfolio receiving the rows")
    parser.add_argument("csv_file", type=Path)
    args = parser.parse_args()
    if not args.csv_file.exists():
        raise SystemExit(f"CSV file not found: {args.csv_file}")

    setup_logging()
    count = asyncio.run(run(args.portfolio_id, args.csv_file))
    print(f"Imported {count} transactions into {args.portfolio_id}")


if __name__ == "__main__":
    main()
