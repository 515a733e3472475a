from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QDialog, QVBoxLayout, QHBoxLayout, QPushButton, QLabel

from hourly_invoice.core.document import InvoiceDocument
from hourly_invoice.core.totals import formatted_totals
from hourly_invoice.pdf.pdf_draw import build_invoice_pdf

logger = logging.getLogger(__name__)

PREVIEW_DIR_NAME = "hourly_invoice_preview"


class PdfPreviewDialog(QDialog):
    """Non-modal invoice preview, rendered from the same PDF the export writes."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Invoice Preview")
        self.resize(900, 700)

        v = QVBoxLayout(self)
        top = QHBoxLayout()
        self.title = QLabel("Preview")
        top.addWidget(self.title)
        top.addStretch(1)
        self.btn_zoom_out = QPushButton("-")
        self.btn_zoom_in = QPushButton("+")
        self.btn_fit_width = QPushButton("Fit Width")
        for b in (self.btn_zoom_out, self.btn_zoom_in, self.btn_fit_width):
            top.addWidget(b)
        v.addLayout(top)

        self._pdf_view = None
        self._pdf_doc = None
        try:
            from PySide6.QtPdfWidgets import QPdfView
            from PySide6.QtPdf import QPdfDocument
        except ImportError:
            logger.info("QtPdf not available; preview shows totals only")
            self.fallback = QLabel("Preview not available on this system. Use Download PDF to view the invoice.")
            self.fallback.setWordWrap(True)
            v.addWidget(self.fallback, 1)
        else:
            self.fallback = None
            self._pdf_view = QPdfView(self)
            self._pdf_doc = QPdfDocument(self)
            self._pdf_view.setDocument(self._pdf_doc)
            self._pdf_view.setPageMode(QPdfView.PageMode.MultiPage)
            v.addWidget(self._pdf_view, 1)
            self.btn_zoom_in.clicked.connect(lambda: self._zoom(1.1))
            self.btn_zoom_out.clicked.connect(lambda: self._zoom(1 / 1.1))
            self.btn_fit_width.clicked.connect(lambda: self._pdf_view.setZoomMode(QPdfView.ZoomMode.FitToWidth))
        for b in (self.btn_zoom_out, self.btn_zoom_in, self.btn_fit_width):
            b.setEnabled(self._pdf_view is not None)

        self._temp_pdf: Optional[Path] = None

    def _zoom(self, factor: float) -> None:
        from PySide6.QtPdfWidgets import QPdfView

        self._pdf_view.setZoomMode(QPdfView.ZoomMode.Custom)
        self._pdf_view.setZoomFactor(self._pdf_view.zoomFactor() * factor)

    def load_document(self, doc: InvoiceDocument) -> bool:
        """Build a temporary PDF from `doc` and show it.

        Returns True when the PDF is shown in the viewer, False when the build
        failed or no viewer is available (the title still shows the total).
        """
        shown = formatted_totals(doc)
        number = doc.invoice_number or "Draft"
        self.title.setText(f"Invoice {number}  ·  Total {shown['total']}")

        tmpdir = Path(tempfile.gettempdir()) / PREVIEW_DIR_NAME
        tmpdir.mkdir(parents=True, exist_ok=True)
        out = tmpdir / "preview.pdf"
        if self._pdf_doc is not None:
            # release the file before overwriting it
            self._pdf_doc.close()
        try:
            build_invoice_pdf(out, doc)
        except (OSError, ValueError):
            logger.exception("Failed to build preview PDF")
            return False
        self._temp_pdf = out
        if self._pdf_doc is None:
            return False
        self._pdf_doc.load(str(out))
        return self._pdf_doc.pageCount() > 0

    def temp_path(self) -> Optional[Path]:
        return self._temp_pdf
