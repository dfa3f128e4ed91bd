"""Document indexing pipeline."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from recipefinder.errors import (
    ConfigurationError,
    ExtractionError,
    IndexingCancelled,
    IndexIOError,
    RecipeFinderError,
)
from recipefinder.extraction import ContentExtractor, default_extractors
from recipefinder.index.accumulator import IndexAccumulator
from recipefinder.index.reporting import IndexReporter, LoggingReporter
from recipefinder.index.walker import CancelToken, DirectoryWalker, check_root
from recipefinder.index.writer import IndexHandle, IndexWriter
from recipefinder.utils.files import is_within

LOGGER = logging.getLogger(__name__)


class IndexerState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    CLOSED = "closed"


@dataclass(slots=True)
class IndexStats:
    indexed: int = 0
    skipped: int = 0
    failed: int = 0
    files_seen: int = 0
    failures: List[Tuple[Path, str]] = field(default_factory=list)

    def increment(self, status: str, path: Path, extractor: str = "") -> None:
        if status == "indexed":
            self.indexed += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
            self.failures.append((path, extractor))


def _validate_paths(docs_dir: Path | str | None, index_dir: Path | str | None) -> tuple[Path, Path]:
    if docs_dir is None or str(docs_dir).strip() == "":
        raise ConfigurationError("A document directory is required")
    if index_dir is None or str(index_dir).strip() == "":
        raise ConfigurationError("An index directory is required")

    docs_path = Path(docs_dir).expanduser().absolute()
    index_path = Path(index_dir).expanduser().absolute()
    if index_path.exists() and not index_path.is_dir():
        raise ConfigurationError(f"Index path {index_path} exists and is not a directory")
    if is_within(index_path, docs_path):
        raise ConfigurationError(
            f"Index directory {index_path} must not be inside the document directory {docs_path}"
        )
    return docs_path, index_path


def _extractor_name(extractor: ContentExtractor) -> str:
    return getattr(extractor, "name", type(extractor).__name__)


class Indexer:
    """Coordinates a run: walk the documents, extract each file, append the records.

    Construction only validates paths. ``open`` acquires and clears the
    index; ``create_index`` opens it if needed, walks the document
    directory and always finalizes the index before returning. A failing
    file is reported and skipped; traversal and index open/close failures
    end the run. ``close`` can be called from any state and repeated calls
    do nothing; closing while a run is in progress finalizes the index and
    the run stops at the next file with :class:`IndexingCancelled`.

    Every extractor that supports a file is run on it, so a file claimed
    by two extractors yields two records.
    """

    def __init__(
        self,
        docs_dir: Path | str,
        index_dir: Path | str,
        extractors: Iterable[ContentExtractor] | None = None,
        *,
        writer: IndexWriter | None = None,
        reporter: IndexReporter | None = None,
        walker: DirectoryWalker | None = None,
    ) -> None:
        self._docs_dir, self._index_dir = _validate_paths(docs_dir, index_dir)
        self._extractors: Tuple[ContentExtractor, ...] = tuple(
            default_extractors() if extractors is None else extractors
        )
        if not self._extractors:
            raise ConfigurationError("At least one extractor is required")

        self.accumulator = IndexAccumulator(self._index_dir, writer)
        self.reporter = reporter if reporter is not None else LoggingReporter()
        self.walker = walker if walker is not None else DirectoryWalker()
        self._handle: IndexHandle | None = None
        self._state = IndexerState.UNINITIALIZED

    @property
    def docs_dir(self) -> Path:
        return self._docs_dir

    @property
    def index_dir(self) -> Path:
        return self._index_dir

    @property
    def extractors(self) -> Sequence[ContentExtractor]:
        return self._extractors

    @property
    def state(self) -> IndexerState:
        return self._state

    def open(self) -> None:
        """Acquire the index writer and clear any previous contents."""
        if self._state is IndexerState.READY:
            return
        if self._state is IndexerState.RUNNING:
            raise RecipeFinderError("An indexing run is already in progress")
        self._handle = self.accumulator.open()
        self._state = IndexerState.READY

    def create_index(self, cancel: CancelToken | None = None) -> IndexStats:
        """Index every supported document under the document directory."""
        if self._state is IndexerState.RUNNING:
            raise RecipeFinderError("An indexing run is already in progress")

        LOGGER.debug("Creating index")
        stats = IndexStats()
        try:
            root = check_root(self._docs_dir)
            self.open()
            self._state = IndexerState.RUNNING
            self.reporter.run_started(root, self._index_dir)
            self.walker.walk(root, partial(self._dispatch, stats=stats), cancel)
        except Exception as exc:
            self.reporter.run_aborted(exc)
            raise
        finally:
            self.close()

        self.reporter.run_finished(stats)
        return stats

    def close(self) -> None:
        """Finalize the index writer if it is open."""
        if self._state is IndexerState.CLOSED:
            return
        handle, self._handle = self._handle, None
        self._state = IndexerState.CLOSED
        if handle is not None:
            self.accumulator.finalize(handle)

    def _dispatch(self, path: Path, stats: IndexStats) -> None:
        self._raise_if_closed()
        stats.files_seen += 1
        claimed = False

        for extractor in self._extractors:
            if not extractor.supports(path):
                continue
            claimed = True
            name = _extractor_name(extractor)
            LOGGER.debug("Scanning file %s", path)
            try:
                record = extractor.extract(path)
                self._raise_if_closed()
                self.accumulator.append(self._handle, record)
            except ExtractionError as exc:
                self._fail(stats, path, name, exc)
            except (IndexIOError, IndexingCancelled):
                raise
            except Exception as exc:
                self._fail(stats, path, name, ExtractionError(path, f"{type(exc).__name__}: {exc}"))
            else:
                stats.increment("indexed", path, name)
                self.reporter.document_indexed(path, name)

        if not claimed:
            stats.increment("skipped", path)
            self.reporter.file_skipped(path)

    def _raise_if_closed(self) -> None:
        if self._state is IndexerState.CLOSED:
            raise IndexingCancelled("Indexer was closed during the run")

    def _fail(self, stats: IndexStats, path: Path, extractor: str, error: Exception) -> None:
        stats.increment("failed", path, extractor)
        self.reporter.file_failed(path, extractor, error)

    def __enter__(self) -> "Indexer":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
