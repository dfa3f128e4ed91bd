"""Index writer capability used by the accumulator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from recipefinder.models import DocumentRecord


@dataclass(slots=True)
class IndexHandle:
    """Live connection to an index for the duration of one run."""

    path: Path
    native: Any
    closed: bool = False


@runtime_checkable
class IndexWriter(Protocol):
    """Backend able to store document records.

    Every method may raise ``IndexIOError``; other exceptions are wrapped by
    the accumulator.
    """

    def open(self, path: Path) -> IndexHandle:
        ...

    def clear_all(self, handle: IndexHandle) -> None:
        ...

    def append(self, handle: IndexHandle, record: DocumentRecord) -> None:
        ...

    def close(self, handle: IndexHandle) -> None:
        ...
