"""Content extractors and the built-in registry."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from recipefinder.extraction.base import ContentExtractor
from recipefinder.extraction.text import TextExtractor
from recipefinder.extraction.word import WordExtractor

__all__ = [
    "ContentExtractor",
    "TextExtractor",
    "WordExtractor",
    "AVAILABLE_FORMATS",
    "DEFAULT_FORMATS",
    "build_extractors",
    "default_extractors",
]


def _pdf_extractor() -> ContentExtractor:
    # Deferred so that PyMuPDF is only loaded when PDFs are requested.
    from recipefinder.extraction.pdf import PdfExtractor

    return PdfExtractor()


_FACTORIES: Dict[str, Callable[[], ContentExtractor]] = {
    "doc": WordExtractor,
    "txt": TextExtractor,
    "pdf": _pdf_extractor,
}

AVAILABLE_FORMATS = tuple(_FACTORIES)
DEFAULT_FORMATS = ("doc", "txt")


def build_extractors(formats: Iterable[str]) -> List[ContentExtractor]:
    """Instantiate one extractor per format name, preserving order."""
    extractors: List[ContentExtractor] = []
    seen: set[str] = set()
    for fmt in formats:
        key = fmt.lower().lstrip(".")
        if key not in _FACTORIES:
            raise ValueError(
                f"Unknown format {fmt!r}; expected one of {', '.join(AVAILABLE_FORMATS)}"
            )
        if key not in seen:
            seen.add(key)
            extractors.append(_FACTORIES[key]())
    return extractors


def default_extractors() -> List[ContentExtractor]:
    """The Word and plain text extractors."""
    return build_extractors(DEFAULT_FORMATS)
