from __future__ import annotations

import base64
import math
import re
from pathlib import Path

from pypdf import PdfReader

from hourly_invoice.core.currency import Currency
from hourly_invoice.core.document import InvoiceDocument
from hourly_invoice.core.items import LineItem
from hourly_invoice.pdf.pdf_draw import build_invoice_pdf

# 1x1 transparent PNG
TINY_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def _a4_size_points() -> tuple[float, float]:
    # ReportLab A4 in points
    return (595.2755905511812, 841.8897637795277)


def _doc(**overrides) -> InvoiceDocument:
    base = dict(
        sender_company="Acme Studio",
        sender_address="Line 1\nLine 2",
        recipient_company="Client Co",
        bank_name="Test Bank",
        account_name="Acme Studio",
        bank_account="1234567890",
        invoice_number="INV-7",
        invoice_date="2025-08-09",
        items=[
            LineItem(id="1", project_name="Design", duration_text="1:30", rate_per_hour=100.0, line_total=150.0),
            LineItem(id="2", project_name="Build", duration_text="2:00", rate_per_hour=50.0, line_total=100.0),
        ],
        tax_percentage=8,
    )
    base.update(overrides)
    return InvoiceDocument(**base)


def _text(path: Path) -> str:
    reader = PdfReader(str(path))
    return "\n".join((page.extract_text() or "") for page in reader.pages)


def test_invoice_pdf_single_page(tmp_path: Path) -> None:
    out = build_invoice_pdf(tmp_path / "inv.pdf", _doc())

    reader = PdfReader(str(out))
    assert len(reader.pages) == 1
    box = reader.pages[0].mediabox
    a4w, a4h = _a4_size_points()
    assert math.isclose(float(box.right - box.left), a4w, abs_tol=1.0)
    assert math.isclose(float(box.top - box.bottom), a4h, abs_tol=1.0)

    text = _text(out)
    assert "INVOICE" in text
    assert "Invoice No: INV-7" in text
    assert "Date: 09-08-2025" in text
    assert "Client Co" in text
    assert "Project" in text and "Hours" in text and "Amount" in text
    assert "1:30" in text
    assert re.search(r"Subtotal:\s*\$250\.00", text) is not None
    assert re.search(r"Tax \(8%\):\s*\$20\.00", text) is not None
    assert re.search(r"Total:\s*\$270\.00", text) is not None
    assert "Account Number: 1234567890" in text


def test_invoice_pdf_in_idr(tmp_path: Path) -> None:
    out = build_invoice_pdf(tmp_path / "idr.pdf", _doc(currency=Currency.IDR, conversion_rate=15000))
    text = _text(out)
    assert "Rp 4.050.000" in text
    assert "Rp 1.500.000" in text  # rate of the first item


def test_invoice_pdf_paginates_long_item_lists(tmp_path: Path) -> None:
    items = [
        LineItem(id=str(i), project_name=f"Task {i}", duration_text="1:00", rate_per_hour=10.0, line_total=10.0)
        for i in range(1, 81)
    ]
    out = build_invoice_pdf(tmp_path / "long.pdf", _doc(items=items, tax_percentage=0))

    reader = PdfReader(str(out))
    assert len(reader.pages) >= 2
    first = reader.pages[0].extract_text() or ""
    last = reader.pages[-1].extract_text() or ""
    # header row repeats on following pages; totals only at the end
    assert "Project" in last
    assert "Task 80" in _text(out)
    assert re.search(r"Total:\s*\$800\.00", last) is not None
    assert "$800.00" not in first


def test_invoice_pdf_with_logo_and_no_items(tmp_path: Path) -> None:
    logo = "data:image/png;base64," + base64.b64encode(TINY_PNG).decode("ascii")
    out = build_invoice_pdf(tmp_path / "sub" / "logo.pdf", _doc(sender_logo=logo, items=[]))
    assert out.exists()
    assert re.search(r"Total:\s*\$0\.00", _text(out)) is not None


def test_invalid_logo_is_skipped(tmp_path: Path) -> None:
    logo = "data:image/png;base64," + base64.b64encode(b"not an image").decode("ascii")
    out = build_invoice_pdf(tmp_path / "bad-logo.pdf", _doc(sender_logo=logo))
    assert "INVOICE" in _text(out)
