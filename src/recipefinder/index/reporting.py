"""Run event reporting."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from recipefinder.index.indexer import IndexStats

LOGGER = logging.getLogger(__name__)


class IndexReporter(Protocol):
    """Receives progress and failure events from an indexing run."""

    def run_started(self, docs_dir: Path, index_dir: Path) -> None:
        ...

    def file_skipped(self, path: Path) -> None:
        ...

    def document_indexed(self, path: Path, extractor: str) -> None:
        ...

    def file_failed(self, path: Path, extractor: str, error: Exception) -> None:
        ...

    def run_finished(self, stats: "IndexStats") -> None:
        ...

    def run_aborted(self, error: Exception) -> None:
        ...


class LoggingReporter:
    """Default reporter writing events to the ``logging`` module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or LOGGER

    def run_started(self, docs_dir: Path, index_dir: Path) -> None:
        self.logger.info("Indexing %s into %s", docs_dir, index_dir)

    def file_skipped(self, path: Path) -> None:
        self.logger.debug("No extractor supports %s", path)

    def document_indexed(self, path: Path, extractor: str) -> None:
        self.logger.debug("Indexed %s with %s", path, extractor)

    def file_failed(self, path: Path, extractor: str, error: Exception) -> None:
        self.logger.warning("Could not process file %s with %s: %s", path, extractor, error)

    def run_finished(self, stats: "IndexStats") -> None:
        self.logger.info(
            "Indexed %d documents from %d files (%d skipped, %d failed)",
            stats.indexed,
            stats.files_seen,
            stats.skipped,
            stats.failed,
        )

    def run_aborted(self, error: Exception) -> None:
        self.logger.error("Indexing aborted: %s", error)
