from __future__ import annotations

import json
from pathlib import Path

from hourly_invoice.core.currency import Currency
from hourly_invoice.core.settings import DRAFT_KEY, Settings, load_settings, save_settings


def test_missing_file_writes_defaults(tmp_path: Path) -> None:
    p = tmp_path / "settings.json"
    s = load_settings(p)
    assert s == Settings()
    assert p.exists()
    assert json.loads(p.read_text(encoding="utf-8"))["draft_key"] == DRAFT_KEY


def test_round_trip_and_unknown_keys(tmp_path: Path) -> None:
    p = tmp_path / "settings.json"
    save_settings(Settings(currency="IDR", conversion_rate=16000.0, last_pdf_dir="/tmp/x"), p)
    raw = json.loads(p.read_text(encoding="utf-8"))
    raw["legacy"] = True
    p.write_text(json.dumps(raw), encoding="utf-8")

    s = load_settings(p)
    assert s.default_currency is Currency.IDR
    assert s.conversion_rate == 16000.0
    assert s.last_pdf_dir == "/tmp/x"


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    p = tmp_path / "settings.json"
    p.write_text("{broken", encoding="utf-8")
    assert load_settings(p) == Settings()
    # file is left as is
    assert p.read_text(encoding="utf-8") == "{broken"


def test_unknown_currency_becomes_usd() -> None:
    assert Settings.from_dict({"currency": "EUR"}).default_currency is Currency.USD
