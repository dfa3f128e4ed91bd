"""Plain text extractor."""

from __future__ import annotations

from pathlib import Path

from recipefinder.extraction.base import ContentExtractor
from recipefinder.utils.text import decode_text, first_line_title, strip_control_chars


class TextExtractor(ContentExtractor):
    name = "text"
    suffixes = frozenset({".txt", ".text"})

    def read(self, path: Path) -> tuple[str | None, str]:
        body = strip_control_chars(decode_text(path.read_bytes()))
        return first_line_title(body), body
