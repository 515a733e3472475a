from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root is on sys.path when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hourly_invoice.core.currency import Currency
from hourly_invoice.core.document import InvoiceDocument
from hourly_invoice.core.items import IdAllocator, add_item, update_item
from hourly_invoice.pdf.pdf_draw import build_invoice_pdf

# Generates a sample invoice PDF for README/demo purposes.


def sample_document(currency: Currency = Currency.USD) -> InvoiceDocument:
    doc = InvoiceDocument(
        sender_company="Acme Studio",
        sender_address="Jl. Sudirman 1\nJakarta",
        sender_email="billing@acme.example",
        recipient_company="(Client Name)",
        recipient_address="(Street)\n(City)",
        bank_name="(Bank)",
        account_name="Acme Studio",
        bank_account="(redacted)",
        invoice_number="INV-0001",
        currency=currency,
        tax_percentage=8,
    )
    allocator = IdAllocator.for_items(doc.items)
    rows = [("Website redesign", "12:30", 45.0), ("Code review", "3:15", 60.0), ("Deployment", "1:45", 50.0)]
    for i, (name, hours, rate) in enumerate(rows):
        if i:
            doc.items = add_item(doc.items, allocator)
        item_id = doc.items[-1].id
        doc.items = update_item(doc.items, item_id, "project_name", name)
        doc.items = update_item(doc.items, item_id, "duration_text", hours)
        doc.items = update_item(doc.items, item_id, "rate_per_hour", rate)
    return doc


def main() -> None:
    out_dir = ROOT / "assets" / "samples"
    for cur in Currency:
        out_pdf = build_invoice_pdf(out_dir / f"sample-{cur.value.lower()}.pdf", sample_document(cur))
        print(f"Wrote sample to: {out_pdf}")


if __name__ == "__main__":
    main()
