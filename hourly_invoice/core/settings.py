from __future__ import annotations

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging

from hourly_invoice.core.currency import Currency, coerce_currency
from hourly_invoice.core.document import DEFAULT_CONVERSION_RATE
from hourly_invoice.core.paths import settings_path

logger = logging.getLogger(__name__)

# Path to the settings.json (runtime-aware)
SETTINGS_PATH = settings_path()

DRAFT_KEY = "invoice-draft"


@dataclass
class Settings:
	# Currency preselected for new documents
	currency: str = Currency.USD.value
	conversion_rate: float = DEFAULT_CONVERSION_RATE
	# Key under which the single draft is stored
	draft_key: str = DRAFT_KEY
	# Optional override of the SQLite file holding drafts
	db_path: Optional[str] = None
	# Remember last used folder for the "Download PDF" dialog
	last_pdf_dir: Optional[str] = None
	# Open the exported PDF in the default viewer
	open_after_export: bool = True

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Settings":
		# Merge provided values over defaults, ignore unknown keys
		defaults = asdict(cls())
		merged: Dict[str, Any] = {**defaults, **{k: v for k, v in data.items() if k in defaults}}
		merged["currency"] = coerce_currency(merged["currency"]).value
		return cls(**merged)

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@property
	def default_currency(self) -> Currency:
		return coerce_currency(self.currency)


def _coerce_path(path: Optional[Union[str, Path]]) -> Path:
	return Path(path) if path is not None else SETTINGS_PATH


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
	"""
	Load settings from JSON (UTF-8). If the file is missing, write defaults and return them.
	"""
	p = _coerce_path(path)
	if not p.exists():
		settings = Settings()
		save_settings(settings, p)
		return settings

	try:
		with p.open("r", encoding="utf-8") as f:
			raw: Dict[str, Any] = json.load(f)
	except (json.JSONDecodeError, OSError):
		# Corrupt file: fall back to defaults without overwriting it
		logger.warning("Could not read settings from %s; using defaults", p)
		return Settings()

	return Settings.from_dict(raw if isinstance(raw, dict) else {})


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> None:
	"""Save settings to JSON (UTF-8), creating parent dirs if needed."""
	p = _coerce_path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	tmp = p.with_suffix(p.suffix + ".tmp")
	with tmp.open("w", encoding="utf-8", newline="\n") as f:
		json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
		f.write("\n")
	tmp.replace(p)
