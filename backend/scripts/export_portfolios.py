"""Dump the stored portfolios as JSON and print a position table per portfolio."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from app.config import get_settings
from app.services.document import export_json
from app.services.store import get_store
from portfolio_tracker.formatting import MoneyFormatter
from portfolio_tracker.metrics import summarize
from portfolio_tracker.models import Portfolio


def render_summary(portfolio: Portfolio, formatter: MoneyFormatter) -> str:
    summary = summarize(portfolio)
    currency = portfolio.base_currency
    lines = [f"{portfolio.name} ({portfolio.id})"]
    for p in summary.positions:
        lines.append(
            f"  {p.ticker:<8} {formatter.format_number(p.qty, 0):>8}  "
            f"{formatter.format_currency(p.mkt_value, currency):>16}  "
            f"{formatter.format_number(p.pl_pct)}%  {p.signal.value}"
        )
    t = summary.totals
    lines.append(
        f"  invested {formatter.format_currency(t.invested, currency)} | "
        f"market {formatter.format_currency(t.mkt, currency)} | "
        f"P/L {formatter.format_currency(t.pl, currency)} | "
        f"dividends {formatter.format_currency(t.divs, currency)}"
    )
    return "\n".join(lines)


async def run(output: Path | None) -> list[Portfolio]:
    portfolios = await get_store().load()
    if output is not None:
        output.write_text(export_json(portfolios), encoding="utf-8")
    return portfolios


def main() -> None:
    parser = argparse.ArgumentParser(description="Export the portfolio document and print summaries")
    parser.add_argument("--output", type=Path, default=None, help="Write the JSON document to this file")
    parser.add_argument("--locale", default=None, help="Display locale (pt-BR or en-US)")
    args = parser.parse_args()

    settings = get_settings()
    formatter = MoneyFormatter(args.locale or settings.display_locale)
    portfolios = asyncio.run(run(args.output))
    for portfolio in portfolios:
        print(render_summary(portfolio, formatter))
    if args.output is not None:
        print(f"Wrote {len(portfolios)} portfolios to {args.output}")


if __name__ == "__main__":
    main()
