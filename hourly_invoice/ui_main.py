from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, QDate, QTimer
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QLabel,
    QVBoxLayout,
    QHBoxLayout,
    QFormLayout,
    QFrame,
    QLineEdit,
    QTextEdit,
    QDateEdit,
    QComboBox,
    QDoubleSpinBox,
    QPushButton,
    QFileDialog,
    QScrollArea,
)

from hourly_invoice.core.currency import Currency, coerce_currency
from hourly_invoice.core.document import InvoiceDocument, new_document
from hourly_invoice.core.logo import decode_logo, encode_logo
from hourly_invoice.core.settings import Settings, load_settings
from hourly_invoice.core.totals import formatted_totals
from hourly_invoice.styles.themes import light_qss
from hourly_invoice.widgets.line_items_widget import LineItemsWidget
from hourly_invoice.widgets.preview_dialog import PdfPreviewDialog

logger = logging.getLogger(__name__)

ISO_QDATE = "yyyy-MM-dd"
# Debounce for rebuilding the preview PDF while typing
PREVIEW_DELAY_MS = 250
# Tax percentage bounds of the spin box; the core itself does not clamp
TAX_LIMIT = 1_000_000.0


def _card(title: str) -> tuple[QFrame, QFormLayout]:
    card = QFrame()
    card.setObjectName("Card")
    layout = QVBoxLayout(card)
    layout.setContentsMargins(12, 12, 12, 12)
    layout.setSpacing(10)
    lbl = QLabel(title)
    lbl.setObjectName("SectionTitle")
    layout.addWidget(lbl)
    form = QFormLayout()
    form.setLabelAlignment(Qt.AlignLeft | Qt.AlignVCenter)
    form.setFieldGrowthPolicy(QFormLayout.AllNonFixedFieldsGrow)
    layout.addLayout(form)
    return card, form


def _text_box(height: int = 60) -> QTextEdit:
    box = QTextEdit()
    box.setAcceptRichText(False)
    box.setFixedHeight(height)
    return box


class MainWindow(QMainWindow):
    """The invoice form: sender, recipient, payment, details, items and totals.

    The window keeps no totals of its own; every label is refreshed from
    formatted_totals() on the document collected from the fields.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self.setWindowTitle("Invoice Generator")
        self.settings: Settings = settings or load_settings()
        self._logo_data_url = ""
        self.preview: Optional[PdfPreviewDialog] = None
        self._preview_timer = QTimer(self)
        self._preview_timer.setSingleShot(True)
        self._preview_timer.setInterval(PREVIEW_DELAY_MS)
        self._preview_timer.timeout.connect(lambda: self.refresh_preview())

        content = QWidget()
        root_layout = QVBoxLayout(content)
        root_layout.setContentsMargins(16, 16, 16, 16)
        root_layout.setSpacing(12)

        title = QLabel("Invoice Generator")
        title.setObjectName("SectionTitle")
        root_layout.addWidget(title)

        # Sender / Recipient
        top = QHBoxLayout()
        top.setSpacing(12)

        sender_card, sender_form = _card("From (Sender)")
        self.sender_company = QLineEdit()
        self.sender_address = _text_box()
        self.sender_phone = QLineEdit()
        self.sender_email = QLineEdit()
        self.sender_website = QLineEdit()
        logo_row = QHBoxLayout()
        self.logo_preview = QLabel()
        self.logo_preview.setFixedHeight(40)
        self.btn_logo = QPushButton("Upload Logo")
        self.btn_logo_clear = QPushButton("Remove")
        logo_row.addWidget(self.logo_preview, 1)
        logo_row.addWidget(self.btn_logo)
        logo_row.addWidget(self.btn_logo_clear)
        sender_form.addRow("Company Name", self.sender_company)
        sender_form.addRow("Address", self.sender_address)
        sender_form.addRow("Phone", self.sender_phone)
        sender_form.addRow("Email", self.sender_email)
        sender_form.addRow("Website", self.sender_website)
        sender_form.addRow("Logo", logo_row)

        recipient_card, recipient_form = _card("To (Recipient)")
        self.recipient_company = QLineEdit()
        self.recipient_address = _text_box()
        self.recipient_phone = QLineEdit()
        self.recipient_email = QLineEdit()
        recipient_form.addRow("Company Name", self.recipient_company)
        recipient_form.addRow("Address", self.recipient_address)
        recipient_form.addRow("Phone", self.recipient_phone)
        recipient_form.addRow("Email", self.recipient_email)

        top.addWidget(sender_card, 1)
        top.addWidget(recipient_card, 1)
        root_layout.addLayout(top)

        # Payment / Invoice details
        mid = QHBoxLayout()
        mid.setSpacing(12)

        payment_card, payment_form = _card("Payment Details")
        self.bank_account = QLineEdit()
        self.account_name = QLineEdit()
        self.bank_name = QLineEdit()
        payment_form.addRow("Bank Account", self.bank_account)
        payment_form.addRow("Account Name", self.account_name)
        payment_form.addRow("Bank Name", self.bank_name)

        details_card, details_form = _card("Invoice Details")
        self.invoice_number = QLineEdit()
        self.date_edit = QDateEdit()
        self.date_edit.setDisplayFormat("dd-MM-yyyy")
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDate(QDate.currentDate())
        self.currency_combo = QComboBox()
        for cur in Currency:
            self.currency_combo.addItem(cur.value, cur.value)
        self.rate_spin = QDoubleSpinBox()
        self.rate_spin.setDecimals(2)
        self.rate_spin.setRange(0.0, 1_000_000_000.0)
        self.rate_spin.setGroupSeparatorShown(True)
        details_form.addRow("Invoice Number", self.invoice_number)
        details_form.addRow("Invoice Date", self.date_edit)
        details_form.addRow("Currency", self.currency_combo)
        details_form.addRow("USD to IDR Rate", self.rate_spin)

        mid.addWidget(payment_card, 1)
        mid.addWidget(details_card, 1)
        root_layout.addLayout(mid)

        # Items
        items_card = QFrame()
        items_card.setObjectName("Card")
        items_layout = QVBoxLayout(items_card)
        items_layout.setContentsMargins(12, 12, 12, 12)
        items_layout.setSpacing(10)
        items_title = QLabel("Items")
        items_title.setObjectName("SectionTitle")
        items_layout.addWidget(items_title)
        self.items = LineItemsWidget(self)
        self.items.setMinimumHeight(180)
        items_layout.addWidget(self.items)
        item_btns = QHBoxLayout()
        item_btns.addStretch(1)
        self.btn_add_item = QPushButton("Add Item")
        item_btns.addWidget(self.btn_add_item)
        items_layout.addLayout(item_btns)
        root_layout.addWidget(items_card)

        # Tax + totals
        summary = QHBoxLayout()
        tax_form = QFormLayout()
        self.tax_spin = QDoubleSpinBox()
        self.tax_spin.setDecimals(4)
        self.tax_spin.setRange(-TAX_LIMIT, TAX_LIMIT)
        self.tax_spin.setSuffix(" %")
        tax_form.addRow("Tax Percentage", self.tax_spin)
        summary.addLayout(tax_form)
        summary.addStretch(1)

        totals_form = QFormLayout()
        totals_form.setLabelAlignment(Qt.AlignRight)
        self.subtotal_value = QLabel()
        self.tax_label = QLabel("Tax (0%):")
        self.tax_value = QLabel()
        self.total_value = QLabel()
        self.total_value.setObjectName("TotalValue")
        for lbl in (self.subtotal_value, self.tax_value, self.total_value):
            lbl.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        totals_form.addRow("Subtotal:", self.subtotal_value)
        totals_form.addRow(self.tax_label, self.tax_value)
        totals_form.addRow("Total:", self.total_value)
        summary.addLayout(totals_form)
        root_layout.addLayout(summary)

        # Footer
        self.footer = QWidget()
        footer = QHBoxLayout(self.footer)
        footer.addStretch(1)
        self.btn_new_invoice = QPushButton("New Invoice")
        self.btn_preview = QPushButton("Preview")
        self.btn_save_draft = QPushButton("Save Draft")
        self.btn_save_pdf = QPushButton("Download PDF")
        for b in (self.btn_new_invoice, self.btn_preview, self.btn_save_draft, self.btn_save_pdf):
            footer.addWidget(b)
        root_layout.addWidget(self.footer)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(content)
        self.setCentralWidget(scroll)

        # Signals
        self.btn_add_item.clicked.connect(lambda: self.items.add_row())
        self.btn_logo.clicked.connect(lambda: self._choose_logo())
        self.btn_logo_clear.clicked.connect(lambda: self._set_logo(""))
        self.btn_new_invoice.clicked.connect(lambda: self.new_invoice())
        self.btn_preview.clicked.connect(lambda: self.open_preview())
        self.items.itemsChanged.connect(lambda _items: self._recalc_totals())
        self.tax_spin.valueChanged.connect(lambda _v: self._recalc_totals())
        self.currency_combo.currentIndexChanged.connect(lambda _i: self._on_currency_changed())
        self.rate_spin.valueChanged.connect(lambda _v: self._on_currency_changed())
        for edit in (
            self.sender_company, self.sender_phone, self.sender_email, self.sender_website,
            self.recipient_company, self.recipient_phone, self.recipient_email,
            self.bank_account, self.account_name, self.bank_name, self.invoice_number,
        ):
            edit.textChanged.connect(lambda _t: self._schedule_preview())
        for box in (self.sender_address, self.recipient_address):
            box.textChanged.connect(lambda: self._schedule_preview())
        self.date_edit.dateChanged.connect(lambda _d: self._schedule_preview())

        self.setStyleSheet(light_qss())
        self.load_document(new_document(self.settings.default_currency, self.settings.conversion_rate))

    # --- document binding ---
    def current_currency(self) -> Currency:
        return coerce_currency(self.currency_combo.currentData())

    def collect_document(self) -> InvoiceDocument:
        """Snapshot the form into an InvoiceDocument."""
        return InvoiceDocument(
            sender_company=self.sender_company.text(),
            sender_address=self.sender_address.toPlainText(),
            sender_phone=self.sender_phone.text(),
            sender_email=self.sender_email.text(),
            sender_website=self.sender_website.text(),
            sender_logo=self._logo_data_url,
            recipient_company=self.recipient_company.text(),
            recipient_address=self.recipient_address.toPlainText(),
            recipient_phone=self.recipient_phone.text(),
            recipient_email=self.recipient_email.text(),
            bank_account=self.bank_account.text(),
            account_name=self.account_name.text(),
            bank_name=self.bank_name.text(),
            invoice_number=self.invoice_number.text().strip(),
            invoice_date=self.date_edit.date().toString(ISO_QDATE),
            currency=self.current_currency(),
            conversion_rate=float(self.rate_spin.value()),
            items=self.items.items(),
            tax_percentage=float(self.tax_spin.value()),
        )

    def load_document(self, doc: InvoiceDocument) -> None:
        """Fill every field from `doc` (a new document or a loaded draft)."""
        self.sender_company.setText(doc.sender_company)
        self.sender_address.setPlainText(doc.sender_address)
        self.sender_phone.setText(doc.sender_phone)
        self.sender_email.setText(doc.sender_email)
        self.sender_website.setText(doc.sender_website)
        self._set_logo(doc.sender_logo)
        self.recipient_company.setText(doc.recipient_company)
        self.recipient_address.setPlainText(doc.recipient_address)
        self.recipient_phone.setText(doc.recipient_phone)
        self.recipient_email.setText(doc.recipient_email)
        self.bank_account.setText(doc.bank_account)
        self.account_name.setText(doc.account_name)
        self.bank_name.setText(doc.bank_name)
        self.invoice_number.setText(doc.invoice_number)
        qd = QDate.fromString(doc.invoice_date, ISO_QDATE)
        self.date_edit.setDate(qd if qd.isValid() else QDate.currentDate())
        self.currency_combo.setCurrentIndex(max(0, self.currency_combo.findData(coerce_currency(doc.currency).value)))
        self.rate_spin.setValue(doc.conversion_rate)
        self.tax_spin.setValue(doc.tax_percentage)
        self.items.set_items(doc.items)
        self._on_currency_changed()

    def new_invoice(self) -> None:
        self.load_document(new_document(self.settings.default_currency, self.settings.conversion_rate))

    # --- totals ---
    def _on_currency_changed(self) -> None:
        cur = self.current_currency()
        self.rate_spin.setEnabled(cur is Currency.IDR)
        self.items.set_currency(cur, float(self.rate_spin.value()))
        self._recalc_totals()

    def _recalc_totals(self) -> None:
        doc = self.collect_document()
        shown = formatted_totals(doc)
        self.subtotal_value.setText(shown["subtotal"])
        self.tax_label.setText(f"Tax ({doc.tax_percentage:g}%):")
        self.tax_value.setText(shown["tax"])
        self.total_value.setText(shown["total"])
        self._schedule_preview()

    # --- preview ---
    def open_preview(self) -> PdfPreviewDialog:
        if self.preview is None:
            self.preview = PdfPreviewDialog(self)
        self.refresh_preview()
        self.preview.show()
        self.preview.raise_()
        return self.preview

    def _schedule_preview(self) -> None:
        if self.preview is not None and self.preview.isVisible():
            self._preview_timer.start()

    def refresh_preview(self) -> bool:
        self._preview_timer.stop()
        if self.preview is None:
            return False
        return self.preview.load_document(self.collect_document())

    # --- logo ---
    def _choose_logo(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose Logo", "", "Images (*.png *.jpg *.jpeg *.gif *.bmp)")
        if not path:
            return
        try:
            self._set_logo(encode_logo(path))
        except OSError:
            logger.exception("Could not read logo %s", path)

    def _set_logo(self, data_url: str) -> None:
        self._logo_data_url = data_url or ""
        decoded = decode_logo(self._logo_data_url)
        pm = QPixmap()
        if decoded is not None and pm.loadFromData(decoded[1]):
            self.logo_preview.setPixmap(pm.scaledToHeight(40, Qt.SmoothTransformation))
        else:
            self.logo_preview.clear()
        self.btn_logo_clear.setEnabled(bool(self._logo_data_url))
        self._schedule_preview()

    def suggested_pdf_path(self) -> Path:
        number = self.invoice_number.text().strip() or "invoice"
        base = Path(self.settings.last_pdf_dir) if self.settings.last_pdf_dir else None
        name = f"{number}.pdf"
        return (base / name) if base else Path(name)


def create_main_window(settings: Optional[Settings] = None) -> MainWindow:
    app = QApplication.instance()
    if app is not None:
        QApplication.setStyle("Fusion")
    return MainWindow(settings)
