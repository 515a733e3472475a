from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from PySide6.QtCore import Qt, Signal, QLocale
from PySide6.QtGui import QValidator
from PySide6.QtWidgets import (
    QWidget,
    QHBoxLayout,
    QVBoxLayout,
    QLabel,
    QLineEdit,
    QDoubleSpinBox,
    QScrollArea,
    QPushButton,
    QFrame,
    QAbstractSpinBox,
)

from hourly_invoice.core.currency import Currency, format_currency
from hourly_invoice.core.items import (
    IdAllocator,
    LineItem,
    add_item,
    find_item,
    remove_item,
    update_item,
)


class BlankZeroDoubleSpinBox(QDoubleSpinBox):
    """QDoubleSpinBox that shows blank at zero and accepts plain "123.45" typing.

    Uses the C locale with no group separators so values never reformat mid-typing.
    """

    def __init__(self, decimals: int = 2, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setDecimals(decimals)
        self.setMinimum(0.0)
        self.setMaximum(1_000_000_000)
        self.setSingleStep(1.0)
        self.setSpecialValueText(" ")  # non-empty to take effect
        self.setLocale(QLocale.c())
        self.setGroupSeparatorShown(False)
        self.setButtonSymbols(QAbstractSpinBox.ButtonSymbols.NoButtons)
        self.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)

    def textFromValue(self, value: float) -> str:  # type: ignore[override]
        if value <= self.minimum() + 1e-12:
            # Let specialValueText handle blank-at-zero
            return self.specialValueText()
        return f"{value:.{self.decimals()}f}"

    def valueFromText(self, text: str) -> float:  # type: ignore[override]
        s = text.strip().replace(",", "")
        if not s:
            return self.minimum()
        try:
            return max(self.minimum(), min(self.maximum(), float(s)))
        except ValueError:
            return self.minimum()

    def validate(self, text: str, pos: int):  # type: ignore[override]
        s = text.strip()
        if not s:
            return (QValidator.Intermediate, text, pos)
        if any(ch not in "0123456789." for ch in s) or s.count(".") > 1:
            return (QValidator.Invalid, text, pos)
        if "." in s:
            left, right = s.split(".", 1)
            if len(right) > self.decimals():
                return (QValidator.Invalid, text, pos)
            if left == "":
                # ".5" style while typing
                return (QValidator.Intermediate, text, pos)
        return (QValidator.Acceptable, text, pos)


class LineItemRow(QWidget):
    """One editable line item row.

    Emits:
      - edited(str, str, object): item id, field name, new value
      - removed(str): item id of the row asking to be removed
    """

    edited = Signal(str, str, object)
    removed = Signal(str)

    def __init__(self, item: LineItem, row_number: int, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.item_id = item.id

        self.layout = QHBoxLayout()
        self.layout.setContentsMargins(0, 0, 0, 0)
        self.layout.setSpacing(8)

        self.lbl_no = QLabel(str(row_number))
        self.lbl_no.setFixedWidth(24)
        self.lbl_no.setAlignment(Qt.AlignCenter)
        self.layout.addWidget(self.lbl_no)

        self.project_edit = QLineEdit(item.project_name)
        self.project_edit.setPlaceholderText("Project name")
        self.layout.addWidget(self.project_edit, 1)

        self.hours_edit = QLineEdit(item.duration_text)
        self.hours_edit.setPlaceholderText("HH:MM")
        self.hours_edit.setFixedWidth(80)
        self.layout.addWidget(self.hours_edit)

        self.rate_spin = BlankZeroDoubleSpinBox(decimals=2)
        self.rate_spin.setValue(item.rate_per_hour)
        self.rate_spin.setFixedWidth(110)
        self.layout.addWidget(self.rate_spin)

        self.amount_edit = QLineEdit()
        self.amount_edit.setReadOnly(True)
        self.amount_edit.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self.amount_edit.setFixedWidth(150)
        self.layout.addWidget(self.amount_edit)

        self.remove_btn = QPushButton("X")
        self.remove_btn.setFixedWidth(28)
        self.remove_btn.clicked.connect(lambda: self.removed.emit(self.item_id))
        self.layout.addWidget(self.remove_btn)

        self.project_edit.textChanged.connect(lambda v: self.edited.emit(self.item_id, "project_name", v))
        self.hours_edit.textChanged.connect(lambda v: self.edited.emit(self.item_id, "duration_text", v))
        self.rate_spin.valueChanged.connect(lambda v: self.edited.emit(self.item_id, "rate_per_hour", float(v)))

        frame = QFrame(self)
        frame.setObjectName("CardRow")
        inner = QVBoxLayout(frame)
        inner.setContentsMargins(0, 0, 0, 0)
        inner.addLayout(self.layout)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(frame)

    def show_amount(self, text: str) -> None:
        self.amount_edit.setText(text)


class LineItemsWidget(QWidget):
    """Scrollable rows bound to a list of LineItem values.

    The widget owns the current item list; every edit goes through the
    calculator functions and the replaced list is re-emitted.

    Emits:
      - itemsChanged(list): the full, updated item list
    """

    itemsChanged = Signal(list)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._items: List[LineItem] = []
        self._rows: Dict[str, LineItemRow] = {}
        self.allocator = IdAllocator()
        self.currency: Currency = Currency.USD
        self.conversion_rate: float = 0.0

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(6)

        header = QHBoxLayout()
        header.setSpacing(8)
        no_lbl = QLabel("#")
        no_lbl.setFixedWidth(24)
        header.addWidget(no_lbl, 0)
        header.addWidget(QLabel("Project"), 1)
        for text, width in (("Hours", 80), ("Rate / hour", 110), ("Amount", 150)):
            lbl = QLabel(text)
            lbl.setFixedWidth(width)
            header.addWidget(lbl, 0)
        header.addSpacing(28)  # remove button column
        root.addLayout(header)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.rows_container = QWidget()
        self.vbox = QVBoxLayout(self.rows_container)
        self.vbox.setContentsMargins(0, 0, 0, 0)
        self.vbox.setSpacing(6)
        self.vbox.addStretch(1)
        self.scroll.setWidget(self.rows_container)
        root.addWidget(self.scroll)

    # --- model side ---
    def items(self) -> List[LineItem]:
        return list(self._items)

    def set_items(self, items: Sequence[LineItem]) -> None:
        """Replace all rows, e.g. after loading a draft."""
        for row in list(self._rows.values()):
            self._drop_row(row)
        self._items = list(items)
        self.allocator = IdAllocator.for_items(self._items)
        for item in self._items:
            self._append_row(item)
        self._refresh()

    def set_currency(self, currency: Currency, conversion_rate: float) -> None:
        self.currency = currency
        self.conversion_rate = conversion_rate
        self._refresh_amounts()

    def add_row(self) -> str:
        self._items = add_item(self._items, self.allocator)
        item = self._items[-1]
        self._append_row(item)
        self._refresh()
        return item.id

    def remove_row(self, item_id: str) -> None:
        self._items = remove_item(self._items, item_id)
        row = self._rows.get(item_id)
        if row is not None:
            self._drop_row(row)
        self._refresh()

    def row(self, item_id: str) -> Optional[LineItemRow]:
        return self._rows.get(item_id)

    # --- internals ---
    def _append_row(self, item: LineItem) -> None:
        row = LineItemRow(item, len(self._rows) + 1)
        row.edited.connect(self._on_edited)
        row.removed.connect(self.remove_row)
        self._rows[item.id] = row
        # keep the trailing stretch last
        self.vbox.insertWidget(self.vbox.count() - 1, row)

    def _drop_row(self, row: LineItemRow) -> None:
        self._rows.pop(row.item_id, None)
        self.vbox.removeWidget(row)
        row.setParent(None)
        row.deleteLater()

    def _on_edited(self, item_id: str, field: str, value: object) -> None:
        self._items = update_item(self._items, item_id, field, value)
        item = find_item(self._items, item_id)
        row = self._rows.get(item_id)
        if item is not None and row is not None:
            row.show_amount(self._fmt(item.line_total))
        self.itemsChanged.emit(self.items())

    def _fmt(self, amount: float) -> str:
        return format_currency(amount, self.currency, self.conversion_rate)

    def _refresh_amounts(self) -> None:
        for item in self._items:
            row = self._rows.get(item.id)
            if row is not None:
                row.show_amount(self._fmt(item.line_total))

    def _refresh(self) -> None:
        many = len(self._items) > 1
        for i, item in enumerate(self._items, 1):
            row = self._rows.get(item.id)
            if row is not None:
                row.lbl_no.setText(str(i))
                row.remove_btn.setVisible(many)
        self._refresh_amounts()
        self.itemsChanged.emit(self.items())
