from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, TYPE_CHECKING

from hourly_invoice.core.currency import format_currency
from hourly_invoice.core.items import LineItem

if TYPE_CHECKING:
	from hourly_invoice.core.document import InvoiceDocument


def subtotal(items: Iterable[LineItem]) -> float:
	return sum((it.line_total for it in items), 0.0)


def tax_amount(subtotal_value: float, tax_percentage: float) -> float:
	return subtotal_value * tax_percentage / 100


def grand_total(subtotal_value: float, tax_value: float) -> float:
	"""Tax is owed on top of the subtotal."""
	return subtotal_value + tax_value


@dataclass(frozen=True)
class InvoiceTotals:
	subtotal: float
	tax_amount: float
	grand_total: float


def compute_totals(doc: "InvoiceDocument") -> InvoiceTotals:
	"""Recompute subtotal, tax and grand total for a document."""
	sub = subtotal(doc.items)
	tax = tax_amount(sub, doc.tax_percentage)
	return InvoiceTotals(subtotal=sub, tax_amount=tax, grand_total=grand_total(sub, tax))


def formatted_totals(doc: "InvoiceDocument") -> dict[str, str]:
	"""Display strings for the totals block in the document's currency."""
	t = compute_totals(doc)
	fmt = lambda amount: format_currency(amount, doc.currency, doc.conversion_rate)
	return {
		"subtotal": fmt(t.subtotal),
		"tax": fmt(t.tax_amount),
		"total": fmt(t.grand_total),
	}
