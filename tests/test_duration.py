from __future__ import annotations

import math

import pytest

from hourly_invoice.core.duration import duration_to_decimal_hours


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", 0.0),
        (None, 0.0),
        ("2:30", 2.5),
        ("2", 2.0),
        ("2:", 2.0),
        (":45", 0.75),
        ("abc:30", 0.5),
        ("abc", 0.0),
        ("10:15", 10.25),
        ("1:30:45", 1.5),
        ("3x:2y", 3 + 2 / 60),
    ],
)
def test_duration_to_decimal_hours(text, expected) -> None:
    assert duration_to_decimal_hours(text) == pytest.approx(expected)


def test_minutes_are_not_validated() -> None:
    # 90 minutes is simply 1.5 hours on top of the hour part
    assert duration_to_decimal_hours("1:90") == pytest.approx(2.5)


@pytest.mark.parametrize(
    "text",
    [
        "1" * 400 + ":00",
        "1" * 5000,
        "1:" + "9" * 5000,
    ],
)
def test_huge_digit_runs_overflow_to_infinity(text) -> None:
    assert math.isinf(duration_to_decimal_hours(text))


def test_opposite_infinities_give_nan_without_raising() -> None:
    assert math.isnan(duration_to_decimal_hours("9" * 400 + ":-" + "9" * 400))


@pytest.mark.parametrize("text", ["١:٣٠", "٢", "2:٣٠", "２:３０"])
def test_non_ascii_digits_are_not_digits(text) -> None:
    expected = 2.0 if text == "2:٣٠" else 0.0
    assert duration_to_decimal_hours(text) == expected
