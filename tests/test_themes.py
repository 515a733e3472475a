from __future__ import annotations

from hourly_invoice.styles import themes


def test_module_docstring_is_set() -> None:
    assert themes.__doc__ and themes.__doc__.startswith("Light stylesheet")


def test_light_qss_styles_window_object_names() -> None:
    qss = themes.light_qss()
    for name in ("QFrame#Card", "QLabel#SectionTitle", "QLabel#TotalValue"):
        assert name in qss
    assert themes.Colors.bg in qss
