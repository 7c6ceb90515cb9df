from __future__ import annotations

import pytest

from portfolio_tracker.formatting import MoneyFormatter


def test_pt_br_currency_and_numbers():
    fmt = MoneyFormatter("pt-BR")
    assert fmt.format_currency(1234.5, "BRL") == "R$ 1.234,50"
    assert fmt.format_number(1234567.891) == "1.234.567,89"
    assert fmt.format_number(-12.5, digits=1) == "-12,5"


def test_en_us_currency_places_sign_before_symbol():
    fmt = MoneyFormatter("en-US")
    assert fmt.format_currency(1234.5, "USD") == "$1,234.50"
    assert fmt.format_currency(-10, "USD") == "-$10.00"


def test_unknown_currency_falls_back_to_code():
    assert MoneyFormatter("en-US").format_currency(5, "chf") == "CHF 5.00"


def test_negative_zero_after_rounding_has_no_sign():
    assert MoneyFormatter("pt-BR").format_number(-0.001) == "0,00"


def test_unsupported_locale_rejected():
    with pytest.raises(ValueError):
        MoneyFormatter("fr-FR")
