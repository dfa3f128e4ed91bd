"""SQLite + FTS5 index writer."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from recipefinder.errors import IndexIOError
from recipefinder.index.writer import IndexHandle
from recipefinder.models import DocumentRecord

INDEX_FILENAME = "index.db"


def index_db_path(index_dir: Path) -> Path:
    return Path(index_dir) / INDEX_FILENAME


class SQLiteIndexWriter:
    """Stores document records in a SQLite database inside the index directory.

    Stored fields go to ``stored_fields``; indexed untokenized fields go to
    ``keywords``; tokenized fields go to the ``field_text`` FTS5 table with
    the porter stemmer. A run is one transaction, committed on close.
    """

    def open(self, path: Path) -> IndexHandle:
        db_path = index_db_path(path)
        try:
            conn = sqlite3.connect(db_path, isolation_level=None)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA foreign_keys=ON;")
            self._ensure_schema(conn)
            conn.execute("BEGIN")
        except sqlite3.Error as exc:
            raise IndexIOError(f"Cannot open index at {db_path}: {exc}") from exc
        return IndexHandle(path=Path(path), native=conn)

    def clear_all(self, handle: IndexHandle) -> None:
        conn = self._connection(handle)
        try:
            conn.execute("DELETE FROM field_text")
            conn.execute("DELETE FROM keywords")
            conn.execute("DELETE FROM stored_fields")
            conn.execute("DELETE FROM documents")
        except sqlite3.Error as exc:
            raise IndexIOError(f"Cannot clear index at {handle.path}: {exc}") from exc

    def append(self, handle: IndexHandle, record: DocumentRecord) -> None:
        conn = self._connection(handle)
        try:
            with self._savepoint(conn):
                doc_id = conn.execute(
                    "INSERT INTO documents(path) VALUES (?)", (record.get("path"),)
                ).lastrowid
                for item in record.stored_fields:
                    conn.execute(
                        "INSERT INTO stored_fields(document_id, name, value) VALUES (?, ?, ?)",
                        (doc_id, item.name, item.value),
                    )
                for item in record.indexed_fields:
                    if item.tokenized:
                        conn.execute(
                            "INSERT INTO field_text(document_id, name, value) VALUES (?, ?, ?)",
                            (doc_id, item.name, item.value),
                        )
                    else:
                        conn.execute(
                            "INSERT INTO keywords(document_id, name, value) VALUES (?, ?, ?)",
                            (doc_id, item.name, item.value),
                        )
        except sqlite3.Error as exc:
            raise IndexIOError(f"Cannot append to index at {handle.path}: {exc}") from exc

    def close(self, handle: IndexHandle) -> None:
        conn = self._connection(handle)
        try:
            if conn.in_transaction:
                conn.execute("COMMIT")
        except sqlite3.Error as exc:
            raise IndexIOError(f"Cannot commit index at {handle.path}: {exc}") from exc
        finally:
            conn.close()

    @staticmethod
    def _connection(handle: IndexHandle) -> sqlite3.Connection:
        if handle.closed:
            raise IndexIOError(f"Index handle for {handle.path} is closed")
        return handle.native

    @staticmethod
    @contextmanager
    def _savepoint(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
        conn.execute("SAVEPOINT append_record")
        try:
            yield conn
        except Exception:
            conn.execute("ROLLBACK TO append_record")
            conn.execute("RELEASE append_record")
            raise
        conn.execute("RELEASE append_record")

    @staticmethod
    def _ensure_schema(conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS documents (
                id INTEGER PRIMARY KEY,
                path TEXT,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS stored_fields (
                document_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                value TEXT NOT NULL,
                FOREIGN KEY(document_id) REFERENCES documents(id) ON DELETE CASCADE
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS keywords (
                document_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                value TEXT NOT NULL,
                FOREIGN KEY(document_id) REFERENCES documents(id) ON DELETE CASCADE
            )
            """
        )
        conn.execute(
            """CREATE INDEX IF NOT EXISTS idx_keywords_name_value
                ON keywords(name, value)
            """
        )
        conn.execute(
            """
            CREATE VIRTUAL TABLE IF NOT EXISTS field_text USING fts5(
                document_id UNINDEXED,
                name UNINDEXED,
                value,
                tokenize = 'porter unicode61'
            )
            """
        )


def count_documents(index_dir: Path) -> int:
    """Return the number of documents in the index under ``index_dir``."""
    db_path = index_db_path(index_dir)
    if not db_path.exists():
        raise IndexIOError(f"No index found at {db_path}")
    try:
        conn = sqlite3.connect(db_path)
        try:
            (count,) = conn.execute("SELECT COUNT(*) FROM documents").fetchone()
        finally:
            conn.close()
    except sqlite3.Error as exc:
        raise IndexIOError(f"Cannot read index at {db_path}: {exc}") from exc
    return count
