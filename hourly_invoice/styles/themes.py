"""Light stylesheet for the invoice window. Spacing uses 4px multiples."""

from __future__ import annotations


class Colors:
    bg = "#fafafa"
    card = "#ffffff"
    text = "#222"
    subtext = "#444"
    border = "#e0e0e0"
    input_border = "#cfcfcf"
    primary = "#5b8def"


class Radius:
    sm = 6
    md = 10


class Space:
    xs = 4
    sm = 8
    md = 12


def light_qss() -> str:
    c = Colors
    r = Radius
    s = Space
    return f"""
    QWidget {{ font-size: 13px; background: {c.bg}; color: {c.text}; }}
    QFrame#Card {{ border: 1px solid {c.border}; border-radius: {r.md}px; background: {c.card}; }}
    QFrame#CardRow {{ border:1px solid {c.border}; border-radius:{r.md}px; background:{c.card}; padding:{s.xs}px; }}
    QLabel#SectionTitle {{ font-size: 14px; font-weight: 700; color: {c.subtext}; padding: 2px 2px 0 2px; }}
    QLabel#TotalValue {{ font-size: 15px; font-weight: 700; }}
    QLineEdit, QTextEdit, QDateEdit, QDoubleSpinBox, QComboBox {{
        border: 1px solid {c.input_border}; border-radius: {r.sm}px; padding: {s.xs}px; background: {c.card};
    }}
    QLineEdit:focus, QTextEdit:focus, QDateEdit:focus, QDoubleSpinBox:focus {{ border: 1px solid {c.primary}; }}
    QLineEdit[readOnly="true"] {{ background: #f3f4f6; }}
    QPushButton {{ padding: 8px 14px; border-radius: {r.md}px; border: 1px solid {c.border}; background: {c.card}; }}
    QPushButton:hover {{ background: #f3f6ff; border-color: #b8c6ff; }}
    QPushButton:pressed {{ background: #e8eeff; }}
    """
