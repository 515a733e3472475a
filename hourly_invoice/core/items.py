from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from itertools import count
from typing import Any, Iterable, List, Optional, Sequence

from hourly_invoice.core.duration import duration_to_decimal_hours

logger = logging.getLogger(__name__)

# Fields the form may edit; id and line_total are owned by this module
EDITABLE_FIELDS = ("project_name", "duration_text", "rate_per_hour")
# Changing either of these recomputes line_total
PRICED_FIELDS = ("duration_text", "rate_per_hour")


@dataclass(frozen=True)
class LineItem:
	id: str
	project_name: str = ""
	duration_text: str = ""
	rate_per_hour: float = 0.0
	line_total: float = 0.0


def line_total_for(duration_text: str, rate_per_hour: float) -> float:
	return duration_to_decimal_hours(duration_text) * rate_per_hour


class IdAllocator:
	"""Hands out string ids from a monotonic counter.

	An id is never returned twice, and never collides with ids registered via
	reserve() (e.g. the items of a loaded draft).
	"""

	def __init__(self, start: int = 1, reserved: Iterable[str] = ()) -> None:
		self._counter = count(start)
		self._used: set[str] = set()
		self.reserve(reserved)

	@classmethod
	def for_items(cls, items: Iterable[LineItem]) -> "IdAllocator":
		items = list(items)
		numeric = [int(it.id) for it in items if str(it.id).isdigit()]
		return cls(start=max(numeric, default=0) + 1, reserved=(it.id for it in items))

	def reserve(self, ids: Iterable[str]) -> None:
		self._used.update(str(i) for i in ids)

	def next_id(self) -> str:
		while True:
			candidate = str(next(self._counter))
			if candidate not in self._used:
				self._used.add(candidate)
				return candidate


def update_item(items: Sequence[LineItem], item_id: str, field: str, value: Any) -> List[LineItem]:
	"""Return a new list with `field` of the matching item set to `value`.

	line_total is recomputed from the updated duration and rate whenever either
	changes. Untouched items keep their identity. Unknown ids leave the list as is.
	"""
	if field not in EDITABLE_FIELDS:
		logger.debug("Ignoring update of non-editable field %r", field)
		return list(items)

	out: List[LineItem] = []
	for item in items:
		if item.id != item_id:
			out.append(item)
			continue
		updated = replace(item, **{field: value})
		if field in PRICED_FIELDS:
			updated = replace(updated, line_total=line_total_for(updated.duration_text, updated.rate_per_hour))
		out.append(updated)
	return out


def new_item(item_id: str) -> LineItem:
	return LineItem(id=item_id)


def add_item(items: Sequence[LineItem], allocator: IdAllocator) -> List[LineItem]:
	"""Append an empty item with a fresh id."""
	return [*items, new_item(allocator.next_id())]


def remove_item(items: Sequence[LineItem], item_id: str) -> List[LineItem]:
	"""Drop the item with `item_id`. Removing the last item is allowed."""
	return [it for it in items if it.id != item_id]


def find_item(items: Sequence[LineItem], item_id: str) -> Optional[LineItem]:
	for it in items:
		if it.id == item_id:
			return it
	return None
