"""Directory traversal for the indexing run."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterator, List

from recipefinder.errors import (
    EmptyOrUnreadableDirectoryError,
    IndexingCancelled,
    PathNotDirectoryError,
)
from recipefinder.models import FileSystemEntry

LOGGER = logging.getLogger(__name__)


class CancelToken:
    """Cooperative cancellation flag checked between files and directories."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise IndexingCancelled("Indexing run was cancelled")


def check_root(root: Path) -> Path:
    """Return ``root`` as an absolute path, failing if it is not a directory."""
    root = Path(os.path.abspath(root))
    if not root.is_dir():
        raise PathNotDirectoryError(root)
    return root


class DirectoryWalker:
    """Depth-first walk that handles a directory's files before its subdirectories.

    Entries are listed in name order. Subdirectories found while listing a
    directory are pushed on an explicit stack and visited afterwards, each
    one fully before its next sibling. Symbolic links to directories are
    followed; the tree is assumed to be acyclic.
    """

    def iter_entries(
        self, root: Path | str, cancel: CancelToken | None = None
    ) -> Iterator[FileSystemEntry]:
        root = check_root(Path(root))
        pending: List[Path] = [root]

        while pending:
            if cancel is not None:
                cancel.raise_if_cancelled()
            directory = pending.pop()
            LOGGER.debug("Scanning directory %s", directory)

            subdirs: List[Path] = []
            for entry in self._list(directory):
                if entry.is_dir:
                    subdirs.append(entry.path)
                    continue
                if cancel is not None:
                    cancel.raise_if_cancelled()
                yield entry

            # Reversed so the first subdirectory is popped first.
            pending.extend(reversed(subdirs))

    def walk(
        self,
        root: Path | str,
        on_file: Callable[[Path], None],
        cancel: CancelToken | None = None,
    ) -> int:
        """Invoke ``on_file`` once per non-directory entry; return the file count."""
        count = 0
        for entry in self.iter_entries(root, cancel):
            on_file(entry.path)
            count += 1
        return count

    def _list(self, directory: Path) -> List[FileSystemEntry]:
        try:
            with os.scandir(directory) as it:
                entries = [
                    FileSystemEntry(path=Path(item.path), is_dir=item.is_dir())
                    for item in it
                ]
        except NotADirectoryError as exc:
            raise PathNotDirectoryError(directory) from exc
        except OSError as exc:
            raise EmptyOrUnreadableDirectoryError(
                directory, f"could not be listed: {exc.strerror or exc}"
            ) from exc

        if not entries:
            LOGGER.debug("Directory %s is empty", directory)
        entries.sort(key=lambda entry: entry.path.name)
        return entries
