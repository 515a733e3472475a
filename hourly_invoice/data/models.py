from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, Text


class Draft(SQLModel, table=True):
	"""A serialized InvoiceDocument stored under a fixed key."""

	key: str = Field(primary_key=True)
	payload: str = Field(sa_column=Column(Text, nullable=False))
	updated_at: Optional[datetime] = None
