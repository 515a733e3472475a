from __future__ import annotations

import re
from typing import Optional

# Leading ASCII integer, like a lenient integer parse: "12abc" -> 12, "abc" -> no match
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def _leading_number(text: str) -> float:
	# float() keeps arbitrarily long digit runs total: they overflow to inf
	m = _LEADING_INT.match(text or "")
	return float(m.group(1)) if m else 0.0


def duration_to_decimal_hours(text: Optional[str]) -> float:
	"""Convert "H:MM" / "HH:MM" text to decimal hours.

	Malformed segments count as zero, so the function never raises:
	"" -> 0, "2:30" -> 2.5, "2" -> 2.0, ":45" -> 0.75, "abc:30" -> 0.5.
	Only ASCII digits count; digit runs too long for a float give inf.
	"""
	if not text:
		return 0.0
	hours_part, _, minutes_part = text.partition(":")
	hours = _leading_number(hours_part)
	minutes = _leading_number(minutes_part)
	return hours + minutes / 60
