"""Exception hierarchy for the indexing pipeline.

Fatal errors (configuration, traversal, index open/close) end a run.
``ExtractionError`` and ``IndexAppendError`` are per-document and are
recovered by the indexer.
"""

from __future__ import annotations

from pathlib import Path


class RecipeFinderError(Exception):
    """Base class for all recipefinder errors."""


class ConfigurationError(RecipeFinderError):
    """Bad document or index path supplied at construction."""


class DirectoryTraversalError(RecipeFinderError):
    """A directory could not be walked."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class PathNotDirectoryError(DirectoryTraversalError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "must be a directory")


class EmptyOrUnreadableDirectoryError(DirectoryTraversalError):
    def __init__(self, path: Path | str, reason: str = "could not be listed") -> None:
        super().__init__(path, reason)


class ExtractionError(RecipeFinderError):
    """A file could not be opened, parsed or converted to a record."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class IndexIOError(RecipeFinderError):
    """Failure opening, writing or closing the index."""


class IndexLockedError(IndexIOError):
    """Another run holds the write lock for the index directory."""


class IndexAppendError(IndexIOError, ExtractionError):
    """A single record could not be appended; recoverable like extraction."""

    def __init__(self, path: Path | str, message: str) -> None:
        ExtractionError.__init__(self, path, message)


class EmptyRecordError(IndexAppendError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "record has no indexed field")


class IndexingCancelled(RecipeFinderError):
    """The run was stopped through its cancel token."""
