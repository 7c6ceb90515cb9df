"""Money and number formatting helpers.

Formatting is kept out of the aggregation core; callers choose a locale and
pass the portfolio's base currency.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class NumberLocale:
    """Separators and currency symbols for one display locale."""

    decimal_sep: str
    thousands_sep: str
    symbols: Dict[str, str] = field(default_factory=dict)
    symbol_space: bool = True


PT_BR = NumberLocale(
    decimal_sep=",",
    thousands_sep=".",
    symbols={"BRL": "R$", "USD": "US$", "EUR": "€"},
)
EN_US = NumberLocale(
    decimal_sep=".",
    thousands_sep=",",
    symbols={"USD": "$", "BRL": "R$", "EUR": "€"},
    symbol_space=False,
)

LOCALES: Dict[str, NumberLocale] = {"pt-BR": PT_BR, "en-US": EN_US}


class MoneyFormatter:
    """Format numbers and currency amounts for a given locale."""

    def __init__(self, locale: NumberLocale | str = PT_BR):
        if isinstance(locale, str):
            if locale not in LOCALES:
                raise ValueError(f"Unsupported locale {locale!r}")
            locale = LOCALES[locale]
        self.locale = locale

    def format_number(self, value: float, digits: int = 2) -> str:
        if math.isnan(value) or math.isinf(value):
            return str(value)
        raw = f"{abs(value):,.{digits}f}"
        # Swap through a placeholder so "," and "." can trade places.
        localized = (
            raw.replace(",", "\0")
            .replace(".", self.locale.decimal_sep)
            .replace("\0", self.locale.thousands_sep)
        )
        return f"-{localized}" if value < 0 and float(raw.replace(",", "")) != 0 else localized

    def format_currency(self, value: float, currency: str = "BRL") -> str:
        symbol = self.locale.symbols.get(currency.upper(), currency.upper())
        number = self.format_number(abs(value)) if not math.isnan(value) else "NaN"
        sep = " " if self.locale.symbol_space or symbol == currency.upper() else ""
        sign = "-" if value < 0 else ""
        return f"{sign}{symbol}{sep}{number}"


__all__ = ["EN_US", "LOCALES", "MoneyFormatter", "NumberLocale", "PT_BR"]
