from __future__ import annotations

import base64
import mimetypes
from pathlib import Path
from typing import Optional, Tuple, Union

DEFAULT_MIME = "application/octet-stream"


def encode_logo(path: Union[str, Path]) -> str:
	"""Read an image file and return it as a data URL ("data:image/png;base64,...")."""
	p = Path(path)
	mime, _ = mimetypes.guess_type(p.name)
	payload = base64.b64encode(p.read_bytes()).decode("ascii")
	return f"data:{mime or DEFAULT_MIME};base64,{payload}"


def decode_logo(data_url: str) -> Optional[Tuple[str, bytes]]:
	"""Split a data URL into (mime, raw bytes). Returns None for empty or non-base64 URLs."""
	if not data_url or not data_url.startswith("data:"):
		return None
	header, sep, payload = data_url.partition(",")
	if not sep or not header.endswith(";base64"):
		return None
	mime = header[len("data:"):-len(";base64")] or DEFAULT_MIME
	try:
		return mime, base64.b64decode(payload, validate=True)
	except ValueError:
		return None
