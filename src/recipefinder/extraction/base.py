"""Base class for content extractors."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, FrozenSet

from recipefinder.errors import ExtractionError
from recipefinder.models import DocumentRecord, Field
from recipefinder.utils.files import has_suffix


class ContentExtractor(ABC):
    """Turns one file into a :class:`DocumentRecord`.

    Subclasses declare the file suffixes they handle and implement
    :meth:`read`, returning ``(title, body)``. ``supports`` only looks at
    the file name. ``extract`` reads the file and wraps any failure in
    :class:`ExtractionError`.

    Several extractors may claim the same file; each one produces its own
    record and the indexer appends all of them.
    """

    name: ClassVar[str] = "base"
    suffixes: ClassVar[FrozenSet[str]] = frozenset()

    def supports(self, path: Path | str) -> bool:
        return has_suffix(path, self.suffixes)

    def extract(self, path: Path | str) -> DocumentRecord:
        path = Path(path)
        try:
            title, body = self.read(path)
            modified = os.stat(path).st_mtime
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(path, f"{type(exc).__name__}: {exc}") from exc

        return DocumentRecord(
            [
                Field.keyword("path", str(path)),
                Field.text("title", title or path.stem, stored=True),
                Field.text("body", body),
                Field.stored_only("extractor", self.name),
                Field.stored_only("modified", repr(modified)),
            ]
        )

    @abstractmethod
    def read(self, path: Path) -> tuple[str | None, str]:
        """Return the document title (or None) and its body text."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
