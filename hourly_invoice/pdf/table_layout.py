# hourly_invoice/pdf/table_layout.py
from __future__ import annotations

from reportlab.platypus import Table, TableStyle
from reportlab.lib import colors
from reportlab.lib.units import mm

from hourly_invoice.core.currency import format_currency
from hourly_invoice.core.document import InvoiceDocument
from hourly_invoice.core.totals import compute_totals

# Column widths; Project absorbs the remainder
COL_W_NO = 10 * mm
COL_W_HOURS = 22 * mm
COL_W_RATE = 30 * mm
COL_W_AMOUNT = 34 * mm

W_GRID = 0.5
W_HEAVY = 0.9

BODY_ROW_H = 7 * mm

PADDING_V = (3, 3)   # top, bottom
PADDING_H = (6, 6)   # left, right

INK = colors.HexColor("#111827")
MUTED = colors.HexColor("#6B7280")
RULE = colors.HexColor("#D1D5DB")
HEADER_BG = colors.HexColor("#F3F4F6")


def _col_widths(content_width: float) -> list[float]:
    fixed = COL_W_NO + COL_W_HOURS + COL_W_RATE + COL_W_AMOUNT
    project = max(120.0, content_width - fixed)
    return [COL_W_NO, project, COL_W_HOURS, COL_W_RATE, COL_W_AMOUNT]


def build_items_table(doc: InvoiceDocument, content_width: float) -> Table:
    """
    Items table followed by Subtotal / Tax / Total rows.

    Amounts are rendered with format_currency in the document's currency so the
    PDF shows exactly what the form shows.
    """
    fmt = lambda amount: format_currency(amount, doc.currency, doc.conversion_rate)
    data = [["No.", "Project", "Hours", "Rate", "Amount"]]
    for i, item in enumerate(doc.items, 1):
        data.append([
            f"{i}.",
            item.project_name,
            item.duration_text,
            fmt(item.rate_per_hour),
            fmt(item.line_total),
        ])
    last_body_i = len(data) - 1

    totals = compute_totals(doc)
    tax_label = f"Tax ({doc.tax_percentage:g}%):"
    data.append(["", "", "", "Subtotal:", fmt(totals.subtotal)])
    data.append(["", "", "", tax_label, fmt(totals.tax_amount)])
    data.append(["", "", "", "Total:", fmt(totals.grand_total)])
    sub_i = last_body_i + 1
    total_i = len(data) - 1

    t = Table(data, colWidths=_col_widths(content_width), rowHeights=[BODY_ROW_H] * len(data), repeatRows=1)

    ts = TableStyle()
    # Header
    ts.add("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold")
    ts.add("FONTSIZE", (0, 0), (-1, 0), 10)
    ts.add("BACKGROUND", (0, 0), (-1, 0), HEADER_BG)
    ts.add("ALIGN", (2, 0), (4, 0), "RIGHT")
    ts.add("LINEBELOW", (0, 0), (-1, 0), W_HEAVY, INK)

    # Body
    if last_body_i >= 1:
        ts.add("FONTNAME", (0, 1), (-1, last_body_i), "Helvetica")
        ts.add("FONTSIZE", (0, 1), (-1, last_body_i), 10)
        ts.add("TEXTCOLOR", (0, 1), (0, last_body_i), MUTED)
        ts.add("ALIGN", (2, 1), (4, last_body_i), "RIGHT")
        ts.add("LINEBELOW", (0, 1), (-1, last_body_i), W_GRID, RULE)

    # Totals block on the right
    ts.add("FONTNAME", (3, sub_i), (4, total_i - 1), "Helvetica")
    ts.add("FONTSIZE", (3, sub_i), (4, total_i), 10)
    ts.add("ALIGN", (3, sub_i), (4, total_i), "RIGHT")
    ts.add("FONTNAME", (3, total_i), (4, total_i), "Helvetica-Bold")
    ts.add("FONTSIZE", (3, total_i), (4, total_i), 12)
    ts.add("LINEABOVE", (3, total_i), (4, total_i), W_HEAVY, INK)

    ts.add("TEXTCOLOR", (1, 0), (-1, -1), INK)
    ts.add("LEFTPADDING",  (0, 0), (-1, -1), PADDING_H[0])
    ts.add("RIGHTPADDING", (0, 0), (-1, -1), PADDING_H[1])
    ts.add("TOPPADDING",   (0, 0), (-1, -1), PADDING_V[0])
    ts.add("BOTTOMPADDING",(0, 0), (-1, -1), PADDING_V[1])
    ts.add("VALIGN", (0, 0), (-1, -1), "MIDDLE")

    t.setStyle(ts)
    return t
