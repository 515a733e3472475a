from __future__ import annotations

from pathlib import Path

from hourly_invoice.core.logo import decode_logo, encode_logo


def test_encode_and_decode(tmp_path: Path) -> None:
    p = tmp_path / "logo.png"
    p.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    url = encode_logo(p)
    assert url.startswith("data:image/png;base64,")
    assert decode_logo(url) == ("image/png", b"\x89PNG\r\n\x1a\nfake")


def test_unknown_extension_uses_octet_stream(tmp_path: Path) -> None:
    p = tmp_path / "logo.unknownext"
    p.write_bytes(b"abc")
    assert encode_logo(p).startswith("data:application/octet-stream;base64,")


def test_decode_rejects_non_data_urls() -> None:
    assert decode_logo("") is None
    assert decode_logo("/placeholder.svg") is None
    assert decode_logo("data:image/svg+xml,<svg/>") is None
    assert decode_logo("data:image/png;base64,@@@") is None
