from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Protocol
import json
import logging

from sqlalchemy.engine import Engine

from hourly_invoice.core.document import InvoiceDocument
from hourly_invoice.core.settings import DRAFT_KEY
from hourly_invoice.data.db import create_db_and_tables, get_session, session_scope
from hourly_invoice.data.models import Draft

logger = logging.getLogger(__name__)


class DraftStore(Protocol):
	"""Key-value blob store for drafts."""

	def get(self, key: str) -> Optional[str]: ...

	def set(self, key: str, blob: str) -> None: ...

	def delete(self, key: str) -> bool: ...


class MemoryDraftStore:
	"""In-process store; nothing survives the process."""

	def __init__(self) -> None:
		self._blobs: Dict[str, str] = {}

	def get(self, key: str) -> Optional[str]:
		return self._blobs.get(key)

	def set(self, key: str, blob: str) -> None:
		self._blobs[key] = blob

	def delete(self, key: str) -> bool:
		return self._blobs.pop(key, None) is not None


class SqlDraftStore:
	"""Drafts kept in the `draft` table of a SQLite database."""

	def __init__(self, engine: Engine) -> None:
		self.engine = engine
		create_db_and_tables(engine)

	def get(self, key: str) -> Optional[str]:
		with get_session(self.engine) as s:
			row = s.get(Draft, key)
			return row.payload if row is not None else None

	def set(self, key: str, blob: str) -> None:
		with session_scope(self.engine) as s:
			row = s.get(Draft, key)
			if row is None:
				row = Draft(key=key, payload=blob)
			else:
				row.payload = blob
			row.updated_at = datetime.now()
			s.add(row)

	def delete(self, key: str) -> bool:
		with session_scope(self.engine) as s:
			row = s.get(Draft, key)
			if row is None:
				return False
			s.delete(row)
			return True


def _check_key(key: str) -> str:
	key = (key or "").strip()
	if not key:
		raise ValueError("Draft key is required")
	return key


def save_draft(store: DraftStore, doc: InvoiceDocument, key: str = DRAFT_KEY) -> None:
	"""Serialize the whole document to JSON and store it under `key`."""
	key = _check_key(key)
	store.set(key, json.dumps(doc.to_dict(), ensure_ascii=False))
	logger.info("Saved draft %r (%s items)", key, len(doc.items))


def load_draft(store: DraftStore, key: str = DRAFT_KEY) -> Optional[InvoiceDocument]:
	"""Return the stored document, or None if there is none or it cannot be read."""
	key = _check_key(key)
	blob = store.get(key)
	if blob is None:
		return None
	try:
		raw = json.loads(blob)
		if not isinstance(raw, dict):
			raise ValueError("draft payload is not an object")
		return InvoiceDocument.from_dict(raw)
	except (ValueError, TypeError):
		logger.exception("Failed to load saved draft %r", key)
		return None


def delete_draft(store: DraftStore, key: str = DRAFT_KEY) -> bool:
	return store.delete(_check_key(key))
