from __future__ import annotations

# Allow running this file directly (python hourly_invoice/main.py) by ensuring the project root is on sys.path
import os
import sys
if __package__ in (None, ""):
    sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import logging
from pathlib import Path

from PySide6.QtWidgets import QApplication, QFileDialog, QMessageBox

from hourly_invoice.core.paths import default_export_dir
from hourly_invoice.core.settings import Settings, load_settings, save_settings
from hourly_invoice.data.db import get_engine
from hourly_invoice.data.repo import DraftStore, SqlDraftStore, load_draft, save_draft
from hourly_invoice.pdf.pdf_draw import build_invoice_pdf
from hourly_invoice.printing.open_file import open_file
from hourly_invoice.ui_main import MainWindow, create_main_window

logger = logging.getLogger(__name__)


def restore_draft(win: MainWindow, store: DraftStore, settings: Settings) -> bool:
    """Load the saved draft into the window, if there is one."""
    doc = load_draft(store, settings.draft_key)
    if doc is None:
        return False
    win.load_document(doc)
    logger.info("Restored draft %r", settings.draft_key)
    return True


def on_save_draft(win: MainWindow, store: DraftStore, settings: Settings) -> None:
    try:
        save_draft(store, win.collect_document(), settings.draft_key)
    except Exception as e:
        logger.exception("Saving draft failed")
        QMessageBox.critical(win, "Save failed", f"Could not save the draft.\n\nDetails: {e}")
        return
    QMessageBox.information(win, "Saved", "Draft saved successfully!")


def export_pdf(win: MainWindow, out_path: Path) -> Path:
    """Build the PDF for the window's current document."""
    doc = win.collect_document()
    logger.info("Building PDF: %s", out_path)
    return build_invoice_pdf(out_path, doc)


def on_download_pdf(win: MainWindow, settings: Settings) -> None:
    start = win.suggested_pdf_path()
    if not start.is_absolute():
        start = default_export_dir() / start
    path, _ = QFileDialog.getSaveFileName(win, "Download PDF", str(start), "PDF Files (*.pdf)")
    if not path:
        return
    out = Path(path)
    if out.suffix.lower() != ".pdf":
        out = out.with_suffix(".pdf")
    try:
        export_pdf(win, out)
    except Exception as e:
        logger.exception("PDF export failed")
        QMessageBox.critical(win, "PDF failed", f"Could not generate the PDF.\n\nDetails: {e}")
        return

    # Remember the folder for next time
    settings.last_pdf_dir = str(out.parent)
    try:
        save_settings(settings)
    except OSError:
        logger.warning("Could not persist last PDF folder")

    if not settings.open_after_export or not open_file(out):
        QMessageBox.information(win, "Saved", f"Invoice saved to:\n{out}")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    settings = load_settings()
    store = SqlDraftStore(get_engine(settings.db_path))

    win = create_main_window(settings)
    restore_draft(win, store, settings)

    win.btn_save_draft.clicked.connect(lambda: on_save_draft(win, store, settings))
    win.btn_save_pdf.clicked.connect(lambda: on_download_pdf(win, settings))

    win.resize(1100, 900)
    win.show()
    app.exec()


if __name__ == "__main__":
    main()
