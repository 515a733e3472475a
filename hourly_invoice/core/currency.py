from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation, localcontext
from enum import Enum
from typing import Union


class Currency(str, Enum):
	"""Display currencies. USD is the base unit every amount is stored in."""

	USD = "USD"
	IDR = "IDR"

	@property
	def label(self) -> str:
		return CURRENCY_LABELS[self]


CURRENCY_LABELS = {
	Currency.USD: "$",
	Currency.IDR: "Rp ",
}

# Indonesian convention: "." groups thousands
IDR_GROUP_SEPARATOR = "."


def to_decimal(x: object) -> Decimal:
	"""Best-effort conversion to Decimal via str to avoid binary float artifacts."""
	try:
		d = Decimal(str(x))
		return Decimal("NaN") if d.is_snan() else d
	except (InvalidOperation, ValueError, TypeError):
		return Decimal("0")

def _quantize(d: Decimal, exp: Decimal) -> Decimal:
	"""Half-even quantize with enough precision for any finite float-sized value."""
	with localcontext() as ctx:
		ctx.prec = max(ctx.prec, d.adjusted() + 10)
		return d.quantize(exp, rounding=ROUND_HALF_EVEN)


def round_money_dec(x: float | Decimal) -> Decimal:
	"""Round to 2 decimals using banker's rounding (round-half-to-even).

	Infinity and NaN are returned unchanged.
	"""
	d = to_decimal(x)
	if not d.is_finite():
		return d
	return _quantize(d, Decimal("0.01"))


def fmt_money(x: float | Decimal) -> str:
	"""Format a value with two decimals; non-finite values render as "Infinity" / "NaN"."""
	q = round_money_dec(x)
	if q.is_nan():
		return "NaN"
	if q.is_infinite():
		return "-Infinity" if q < 0 else "Infinity"
	return f"{q:.2f}"


def group_thousands(n: int | Decimal, sep: str = IDR_GROUP_SEPARATOR) -> str:
	s = f"{abs(n):,.0f}".replace(",", sep)
	return f"-{s}" if n < 0 else s


def _non_finite_idr(value: float) -> str:
	if math.isnan(value):
		return "NaN"
	return "-∞" if value < 0 else "∞"


def coerce_currency(value: Union[str, Currency, None]) -> Currency:
	"""Map stored/selected values onto Currency; anything unknown is USD."""
	if isinstance(value, Currency):
		return value
	try:
		return Currency(str(value).upper())
	except ValueError:
		return Currency.USD



def format_currency(amount: float | Decimal, currency: Union[str, Currency], conversion_rate: float | Decimal = 0) -> str:
	"""Render a USD-based amount for display.

	USD: "$" plus the amount at two decimals, no grouping ("$100.00").
	IDR: amount * conversion_rate rounded half-even to a whole rupiah and
	grouped with "." ("Rp 1.500.000"). The conversion rate is ignored for USD.
	Infinite or NaN amounts render as "$Infinity" / "Rp ∞" / "Rp NaN".
	"""
	cur = coerce_currency(currency)
	if cur is Currency.USD:
		return f"{cur.label}{fmt_money(amount)}"
	d_amount = to_decimal(amount)
	d_rate = to_decimal(conversion_rate)
	if not (d_amount.is_finite() and d_rate.is_finite()):
		return f"{cur.label}{_non_finite_idr(float(d_amount) * float(d_rate))}"
	with localcontext() as ctx:
		# exact product
		ctx.prec = max(ctx.prec, len(d_amount.as_tuple().digits) + len(d_rate.as_tuple().digits))
		idr = d_amount * d_rate
	whole = _quantize(idr, Decimal("1"))
	return f"{cur.label}{group_thousands(whole)}"
