"""Text helpers shared by the extractors."""

from __future__ import annotations

import re
from typing import Iterable

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")

TITLE_MAX_CHARS = 200


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())


def strip_control_chars(text: str) -> str:
    """Drop non-printable control characters, keeping tabs and line breaks."""
    return _CONTROL_CHARS.sub("", text)


def first_line_title(text: str, *, max_chars: int = TITLE_MAX_CHARS) -> str | None:
    """Return the first non-blank line of ``text``, truncated to ``max_chars``."""
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line[:max_chars]
    return None


def decode_text(data: bytes) -> str:
    """Decode file bytes as UTF-8, falling back to cp1252 then latin-1."""
    if data.startswith(b"\xef\xbb\xbf"):
        data = data[3:]
    for encoding in ("utf-8", "cp1252"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")
