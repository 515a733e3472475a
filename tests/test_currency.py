from __future__ import annotations

import math
from decimal import Decimal

import pytest

from hourly_invoice.core.currency import (
    Currency,
    coerce_currency,
    fmt_money,
    format_currency,
    group_thousands,
)
from hourly_invoice.core.items import LineItem, update_item


def test_usd_two_decimals_with_symbol() -> None:
    assert format_currency(100, Currency.USD, 15000) == "$100.00"
    assert format_currency(1234567.891, Currency.USD, 0) == "$1234567.89"
    assert format_currency(-5, "USD") == "$-5.00"


def test_usd_ignores_conversion_rate() -> None:
    assert format_currency(12.5, Currency.USD, 1) == format_currency(12.5, Currency.USD, 99999)


def test_idr_multiplies_and_groups() -> None:
    assert format_currency(100, Currency.IDR, 15000) == "Rp 1.500.000"
    assert format_currency(0.1, "IDR", 15000) == "Rp 1.500"
    assert format_currency(0, Currency.IDR, 15000) == "Rp 0"


def test_idr_rounds_half_even_to_whole_rupiah() -> None:
    assert format_currency(2.5, Currency.IDR, 1) == "Rp 2"
    assert format_currency(3.5, Currency.IDR, 1) == "Rp 4"
    assert format_currency(1.49, Currency.IDR, 1) == "Rp 1"


def test_idr_negative_amount() -> None:
    assert format_currency(-1234.567, Currency.IDR, 1000) == "Rp -1.234.567"


def test_group_thousands() -> None:
    assert group_thousands(999) == "999"
    assert group_thousands(1000) == "1.000"
    assert group_thousands(-12345678, ",") == "-12,345,678"


def test_coerce_currency() -> None:
    assert coerce_currency("idr") is Currency.IDR
    assert coerce_currency(Currency.USD) is Currency.USD
    assert coerce_currency("EUR") is Currency.USD
    assert coerce_currency(None) is Currency.USD


def test_fmt_money_bankers_rounding() -> None:
    assert fmt_money(0.125) == "0.12"
    assert fmt_money(Decimal("0.135")) == "0.14"
    assert fmt_money(2) == "2.00"


@pytest.mark.parametrize(
    "amount, expected",
    [
        (float("inf"), "$Infinity"),
        (float("-inf"), "$-Infinity"),
        (float("nan"), "$NaN"),
    ],
)
def test_usd_non_finite_amounts(amount, expected) -> None:
    assert format_currency(amount, Currency.USD, 15000) == expected


@pytest.mark.parametrize(
    "amount, rate, expected",
    [
        (float("inf"), 15000, "Rp ∞"),
        (float("-inf"), 15000, "Rp -∞"),
        (float("nan"), 15000, "Rp NaN"),
        (100, float("inf"), "Rp ∞"),
        (float("inf"), 0, "Rp NaN"),
    ],
)
def test_idr_non_finite_amounts(amount, rate, expected) -> None:
    assert format_currency(amount, Currency.IDR, rate) == expected


def test_huge_finite_amounts_format_exactly() -> None:
    idr = format_currency(1e300, Currency.IDR, 15000)
    assert idr.startswith("Rp 15.000")
    assert idr.count(".") == 101
    assert format_currency(1e300, Currency.USD) == "$1" + "0" * 300 + ".00"


def test_overlong_duration_renders_infinite_amount() -> None:
    item = LineItem(id="1", rate_per_hour=100.0)
    (out,) = update_item([item], "1", "duration_text", "1" * 400 + ":00")
    assert math.isinf(out.line_total)
    assert format_currency(out.line_total, Currency.USD) == "$Infinity"
    assert format_currency(out.line_total, Currency.IDR, 15000) == "Rp ∞"
