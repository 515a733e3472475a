from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, List, Optional

from hourly_invoice.core.currency import Currency, coerce_currency, to_decimal
from hourly_invoice.core.items import LineItem, new_item

DEFAULT_CONVERSION_RATE = 15000.0

# Python attribute -> stored draft key
_ITEM_KEYS = {
	"id": "id",
	"project_name": "projectName",
	"duration_text": "durationText",
	"rate_per_hour": "ratePerHour",
	"line_total": "lineTotal",
}

_DOC_KEYS = {
	"sender_company": "senderCompany",
	"sender_address": "senderAddress",
	"sender_phone": "senderPhone",
	"sender_email": "senderEmail",
	"sender_website": "senderWebsite",
	"sender_logo": "senderLogo",
	"recipient_company": "recipientCompany",
	"recipient_address": "recipientAddress",
	"recipient_phone": "recipientPhone",
	"recipient_email": "recipientEmail",
	"bank_account": "bankAccount",
	"account_name": "accountName",
	"bank_name": "bankName",
	"invoice_number": "invoiceNumber",
	"invoice_date": "invoiceDate",
	"currency": "currency",
	"conversion_rate": "conversionRate",
	"items": "items",
	"tax_percentage": "taxPercentage",
}


def _today() -> str:
	return date.today().isoformat()


def _first_item() -> List[LineItem]:
	return [new_item("1")]


@dataclass
class InvoiceDocument:
	"""The whole invoice as edited in the form.

	Only `items`, `tax_percentage`, `currency` and `conversion_rate` take part in
	computation; every other field is carried through to preview, export and drafts.
	"""

	# Sender
	sender_company: str = ""
	sender_address: str = ""
	sender_phone: str = ""
	sender_email: str = ""
	sender_website: str = ""
	sender_logo: str = ""  # data URL, see core.logo

	# Recipient
	recipient_company: str = ""
	recipient_address: str = ""
	recipient_phone: str = ""
	recipient_email: str = ""

	# Payment details
	bank_account: str = ""
	account_name: str = ""
	bank_name: str = ""

	# Invoice details
	invoice_number: str = ""
	invoice_date: str = field(default_factory=_today)
	currency: Currency = Currency.USD
	conversion_rate: float = DEFAULT_CONVERSION_RATE

	items: List[LineItem] = field(default_factory=_first_item)
	tax_percentage: float = 0.0

	def to_dict(self) -> Dict[str, Any]:
		out: Dict[str, Any] = {}
		for f in fields(self):
			value = getattr(self, f.name)
			if f.name == "items":
				value = [item_to_dict(it) for it in value]
			elif f.name == "currency":
				value = coerce_currency(value).value
			out[_DOC_KEYS[f.name]] = value
		return out

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "InvoiceDocument":
		"""Build a document from a stored draft; missing keys keep their defaults."""
		kwargs: Dict[str, Any] = {}
		for attr, key in _DOC_KEYS.items():
			if key not in data:
				continue
			value = data[key]
			if attr == "items":
				value = [item_from_dict(raw) for raw in (value or []) if isinstance(raw, dict)]
			elif attr == "currency":
				value = coerce_currency(value)
			elif attr in ("conversion_rate", "tax_percentage"):
				value = float(to_decimal(value))
			kwargs[attr] = value
		return cls(**kwargs)


def item_to_dict(item: LineItem) -> Dict[str, Any]:
	return {key: getattr(item, attr) for attr, key in _ITEM_KEYS.items()}


def item_from_dict(raw: Dict[str, Any]) -> LineItem:
	kwargs = {attr: raw[key] for attr, key in _ITEM_KEYS.items() if key in raw}
	kwargs["id"] = str(kwargs.get("id", ""))
	for num in ("rate_per_hour", "line_total"):
		if num in kwargs:
			kwargs[num] = float(to_decimal(kwargs[num]))
	return LineItem(**kwargs)


def new_document(currency: Optional[Currency] = None, conversion_rate: Optional[float] = None) -> InvoiceDocument:
	"""A fresh document with one empty item, optionally seeded from settings."""
	doc = InvoiceDocument()
	if currency is not None:
		doc.currency = coerce_currency(currency)
	if conversion_rate is not None:
		doc.conversion_rate = float(conversion_rate)
	return doc
