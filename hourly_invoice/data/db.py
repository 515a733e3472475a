from __future__ import annotations

from pathlib import Path
from typing import Generator, Optional, Union
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from hourly_invoice.core.paths import default_db_path

_ENGINES: dict[str, Engine] = {}


def get_engine(db_path: Optional[Union[str, Path]] = None, echo: bool = False) -> Engine:
	"""Return a cached SQLAlchemy engine for the given SQLite file (default: invoices.db)."""
	path = Path(db_path) if db_path is not None else default_db_path()
	# Use posix path for SQLAlchemy URL compatibility on Windows
	url = f"sqlite:///{path.as_posix()}"
	engine = _ENGINES.get(url)
	if engine is None:
		engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
		_ENGINES[url] = engine
	return engine


def create_db_and_tables(engine: Engine) -> None:
	"""Create the SQLite database file and all SQLModel tables."""
	# Ensure models are imported so metadata has all tables
	import hourly_invoice.data.models  # noqa: F401

	database = engine.url.database
	if database and database != ":memory:":
		Path(database).parent.mkdir(parents=True, exist_ok=True)
	SQLModel.metadata.create_all(engine)


def get_session(engine: Engine) -> Session:
	"""Create a new Session; expire_on_commit=False keeps attributes readable after commit."""
	return Session(engine, expire_on_commit=False)


@contextmanager
def session_scope(engine: Engine) -> Generator[Session, None, None]:
	"""Commit on success, roll back on error.

	Usage:
		with session_scope(engine) as s:
			... use s ...
	"""
	session = get_session(engine)
	try:
		yield session
		session.commit()
	except Exception:
		session.rollback()
		raise
	finally:
		session.close()
