"""PDF extractor.

Uses PyMuPDF (fitz) for text and metadata extraction.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import fitz  # PyMuPDF

from recipefinder.errors import ExtractionError
from recipefinder.extraction.base import ContentExtractor
from recipefinder.utils.text import normalize_whitespace

LOGGER = logging.getLogger(__name__)


def iter_text_parts(doc: fitz.Document, path: Path) -> Iterator[str]:
    """Yield normalized text page by page, skipping unreadable pages."""
    for index in range(len(doc)):
        try:
            text = doc[index].get_text() or ""
        except Exception as exc:  # pragma: no cover - defensive path
            LOGGER.warning("Failed to read page %s in %s: %s", index, path, exc)
            continue
        normalized = normalize_whitespace(text.splitlines())
        if normalized:
            yield normalized


class PdfExtractor(ContentExtractor):
    name = "pdf"
    suffixes = frozenset({".pdf"})

    def read(self, path: Path) -> tuple[str | None, str]:
        try:
            doc = fitz.open(path)
        except Exception as exc:
            raise ExtractionError(path, f"cannot open PDF: {exc}") from exc

        try:
            metadata = doc.metadata or {}
            body = "\n".join(iter_text_parts(doc, path))
        finally:
            doc.close()
        return metadata.get("title") or None, body
