"""Owns the index writer for the duration of a run."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from recipefinder.errors import (
    EmptyRecordError,
    IndexAppendError,
    IndexIOError,
    IndexLockedError,
)
from recipefinder.index.storage import SQLiteIndexWriter
from recipefinder.index.writer import IndexHandle, IndexWriter
from recipefinder.models import DocumentRecord
from recipefinder.utils.files import ensure_dir

LOGGER = logging.getLogger(__name__)

LOCK_FILENAME = "write.lock"


class IndexAccumulator:
    """Appends document records to an index that is cleared at the start of each run.

    ``open`` takes a lock file in the index directory so that a second run
    against the same index fails fast with :class:`IndexLockedError`.
    ``finalize`` releases the writer and the lock and is safe to call more
    than once for the same handle.
    """

    def __init__(self, index_dir: Path, writer: IndexWriter | None = None) -> None:
        self.index_dir = Path(index_dir)
        self.writer = writer if writer is not None else SQLiteIndexWriter()

    @property
    def lock_path(self) -> Path:
        return self.index_dir / LOCK_FILENAME

    def open(self) -> IndexHandle:
        try:
            ensure_dir(self.index_dir)
        except OSError as exc:
            raise IndexIOError(f"Cannot create index directory {self.index_dir}: {exc}") from exc

        self._acquire_lock()
        try:
            with _wrap_io(f"Cannot open index at {self.index_dir}"):
                handle = self.writer.open(self.index_dir)
        except IndexIOError:
            self._release_lock()
            raise

        try:
            with _wrap_io(f"Cannot clear index at {self.index_dir}"):
                self.writer.clear_all(handle)
        except IndexIOError:
            self.finalize(handle)
            raise

        LOGGER.debug("Opened index at %s", self.index_dir)
        return handle

    def append(self, handle: IndexHandle | None, record: DocumentRecord) -> None:
        path = record.get("path") or "<unknown>"
        if not record.has_indexed_field:
            raise EmptyRecordError(path)
        if handle is None:
            raise IndexIOError(f"Index at {self.index_dir} is not open")
        if handle.closed:
            raise IndexIOError(f"Index at {handle.path} is already finalized")
        try:
            self.writer.append(handle, record)
        except Exception as exc:
            raise IndexAppendError(path, str(exc)) from exc

    def finalize(self, handle: IndexHandle) -> None:
        if handle.closed:
            return
        try:
            with _wrap_io(f"Cannot close index at {handle.path}"):
                self.writer.close(handle)
        finally:
            handle.closed = True
            self._release_lock()
        LOGGER.debug("Closed index at %s", handle.path)

    @contextmanager
    def session(self) -> Iterator[IndexHandle]:
        """Open the index and finalize it on every exit path."""
        handle = self.open()
        try:
            yield handle
        finally:
            self.finalize(handle)

    def _acquire_lock(self) -> None:
        try:
            fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError as exc:
            raise IndexLockedError(
                f"Index at {self.index_dir} is locked by another run "
                f"(remove {self.lock_path} if no run is active)"
            ) from exc
        except OSError as exc:
            raise IndexIOError(f"Cannot create lock {self.lock_path}: {exc}") from exc
        with os.fdopen(fd, "w") as lock:
            lock.write(str(os.getpid()))

    def _release_lock(self) -> None:
        try:
            self.lock_path.unlink()
        except FileNotFoundError:
            LOGGER.warning("Lock %s was already removed", self.lock_path)


@contextmanager
def _wrap_io(message: str) -> Iterator[None]:
    """Re-raise writer failures that are not already ``IndexIOError``."""
    try:
        yield
    except IndexIOError:
        raise
    except Exception as exc:
        raise IndexIOError(f"{message}: {exc}") from exc
