from __future__ import annotations

import io
import logging
from datetime import date
from pathlib import Path
from typing import List

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from hourly_invoice.core.document import InvoiceDocument
from hourly_invoice.core.logo import decode_logo
from hourly_invoice.pdf.table_layout import INK, MUTED, RULE, build_items_table

logger = logging.getLogger(__name__)


# ===== Layout constants =====
PAGE_SIZE = A4
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE

MARGIN_LEFT = 18 * mm
MARGIN_RIGHT = 18 * mm
MARGIN_TOP = 18 * mm
MARGIN_BOTTOM = 18 * mm
CONTENT_WIDTH = PAGE_WIDTH - MARGIN_LEFT - MARGIN_RIGHT

LOGO_MAX_W = 40 * mm
LOGO_MAX_H = 16 * mm

TITLE_FONT_SIZE = 26
LABEL_FONT_SIZE = 9
TEXT_FONT_SIZE = 10
LINE_GAP = 4.6 * mm
BLOCK_GAP = 8 * mm

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


# ===== Helpers =====
def _fmt_date(val: str) -> str:
    """ISO dates render as dd-mm-yyyy; anything else is shown as typed."""
    try:
        return date.fromisoformat(val).strftime("%d-%m-%Y")
    except (TypeError, ValueError):
        return val or ""


def _wrap_text(text: str, max_width: float, font_name: str, font_size: float) -> List[str]:
    """Greedy word wrap that keeps explicit newlines."""
    lines: List[str] = []
    width_fn = pdfmetrics.stringWidth
    for para in (text or "").replace("\r", "").split("\n"):
        line: List[str] = []
        for w in para.split():
            trial = " ".join(line + [w])
            if width_fn(trial, font_name, font_size) <= max_width or not line:
                line.append(w)
            else:
                lines.append(" ".join(line))
                line = [w]
        lines.append(" ".join(line))
    return [ln for ln in lines if ln]


def _draw_lines(c: Canvas, x: float, y: float, lines: List[str], max_width: float) -> float:
    c.setFont(FONT, TEXT_FONT_SIZE)
    for raw in lines:
        for ln in _wrap_text(raw, max_width, FONT, TEXT_FONT_SIZE):
            c.drawString(x, y, ln)
            y -= LINE_GAP
    return y


def _draw_logo(c: Canvas, doc: InvoiceDocument, top_y: float) -> float:
    """Draw the sender logo at the top-left; returns the y below it."""
    decoded = decode_logo(doc.sender_logo)
    if decoded is None:
        return top_y
    _mime, raw = decoded
    try:
        img = ImageReader(io.BytesIO(raw))
        iw, ih = img.getSize()
    except Exception:
        logger.warning("Sender logo could not be decoded; skipping it")
        return top_y
    scale = min(LOGO_MAX_W / iw, LOGO_MAX_H / ih)
    w, h = iw * scale, ih * scale
    c.drawImage(img, MARGIN_LEFT, top_y - h, width=w, height=h, mask="auto")
    return top_y - h - 3 * mm


def _draw_header(c: Canvas, doc: InvoiceDocument) -> float:
    """Logo and sender block on the left, INVOICE title with number/date on the right."""
    top_y = PAGE_HEIGHT - MARGIN_TOP
    right_x = PAGE_WIDTH - MARGIN_RIGHT
    half = CONTENT_WIDTH / 2

    c.setFillColor(INK)
    c.setFont(BOLD_FONT, TITLE_FONT_SIZE)
    c.drawRightString(right_x, top_y - TITLE_FONT_SIZE * 0.8, "INVOICE")

    c.setFont(FONT, TEXT_FONT_SIZE)
    y_info = top_y - TITLE_FONT_SIZE - 4 * mm
    c.drawRightString(right_x, y_info, f"Invoice No: {doc.invoice_number}")
    y_info -= LINE_GAP
    c.drawRightString(right_x, y_info, f"Date: {_fmt_date(doc.invoice_date)}")
    y_info -= LINE_GAP

    y = _draw_logo(c, doc, top_y)
    if doc.sender_company:
        c.setFont(BOLD_FONT, 13)
        y -= 4 * mm
        c.drawString(MARGIN_LEFT, y, doc.sender_company)
        y -= LINE_GAP
    y = _draw_lines(
        c,
        MARGIN_LEFT,
        y,
        [doc.sender_address, doc.sender_phone, doc.sender_email, doc.sender_website],
        half,
    )
    return min(y, y_info) - BLOCK_GAP


def _draw_bill_to(c: Canvas, doc: InvoiceDocument, y_top: float) -> float:
    c.setFillColor(MUTED)
    c.setFont(BOLD_FONT, LABEL_FONT_SIZE)
    c.drawString(MARGIN_LEFT, y_top, "BILL TO")
    c.setFillColor(INK)
    y = y_top - LINE_GAP
    if doc.recipient_company:
        c.setFont(BOLD_FONT, TEXT_FONT_SIZE + 1)
        c.drawString(MARGIN_LEFT, y, doc.recipient_company)
        y -= LINE_GAP
    y = _draw_lines(
        c,
        MARGIN_LEFT,
        y,
        [doc.recipient_address, doc.recipient_phone, doc.recipient_email],
        CONTENT_WIDTH / 2,
    )
    return y - BLOCK_GAP / 2


def _draw_payment(c: Canvas, doc: InvoiceDocument, y_top: float) -> float:
    rows = [
        ("Bank Name", doc.bank_name),
        ("Account Name", doc.account_name),
        ("Account Number", doc.bank_account),
    ]
    rows = [(k, v) for k, v in rows if v]
    if not rows:
        return y_top
    c.setStrokeColor(RULE)
    c.line(MARGIN_LEFT, y_top + LINE_GAP / 2, PAGE_WIDTH - MARGIN_RIGHT, y_top + LINE_GAP / 2)
    c.setFillColor(MUTED)
    c.setFont(BOLD_FONT, LABEL_FONT_SIZE)
    y = y_top - 2 * mm
    c.drawString(MARGIN_LEFT, y, "PAYMENT DETAILS")
    c.setFillColor(INK)
    y -= LINE_GAP
    for label, value in rows:
        c.setFont(FONT, TEXT_FONT_SIZE)
        c.drawString(MARGIN_LEFT, y, f"{label}: {value}")
        y -= LINE_GAP
    return y


# ===== Public API =====
def build_invoice_pdf(out_path: Path | str, doc: InvoiceDocument) -> Path:
    """Draw the invoice as an A4 PDF and return its path.

    The items table is split across pages when it does not fit; the header row
    repeats on each page and the totals rows follow the last item. Payment
    details go below the table on the last page (or on a fresh page if needed).
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    c = Canvas(str(out), pagesize=PAGE_SIZE)
    c.setAuthor(doc.sender_company or "Hourly Invoice")
    c.setTitle(f"Invoice {doc.invoice_number}".strip())
    c.setLineWidth(0.5)

    y = _draw_header(c, doc)
    y = _draw_bill_to(c, doc, y)

    pending = [build_items_table(doc, CONTENT_WIDTH)]
    while pending:
        table = pending.pop(0)
        avail = y - MARGIN_BOTTOM
        _w, h = table.wrapOn(c, CONTENT_WIDTH, avail)
        if h <= avail:
            table.drawOn(c, MARGIN_LEFT, y - h)
            y -= h + BLOCK_GAP
            continue
        parts = table.split(CONTENT_WIDTH, avail)
        if len(parts) < 2:
            if y >= PAGE_HEIGHT - MARGIN_TOP:
                # Already on a fresh page: draw what we have rather than loop
                table.drawOn(c, MARGIN_LEFT, y - h)
                y -= h + BLOCK_GAP
                continue
            # Not even the header plus one row fits here; start over on a new page
            c.showPage()
            y = PAGE_HEIGHT - MARGIN_TOP
            pending.insert(0, table)
            continue
        first, *rest = parts
        _w, h = first.wrapOn(c, CONTENT_WIDTH, avail)
        first.drawOn(c, MARGIN_LEFT, y - h)
        pending[:0] = rest
        c.showPage()
        y = PAGE_HEIGHT - MARGIN_TOP

    payment_h = 4 * LINE_GAP + 2 * mm
    if y - payment_h < MARGIN_BOTTOM:
        c.showPage()
        y = PAGE_HEIGHT - MARGIN_TOP
    _draw_payment(c, doc, y)

    c.save()
    logger.info("Invoice PDF written to %s (%s items)", out, len(doc.items))
    return out
