"""Tests for SQLiteIndexWriter."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from recipefinder.errors import IndexIOError
from recipefinder.index.storage import SQLiteIndexWriter, count_documents, index_db_path
from recipefinder.models import DocumentRecord, Field


def _record(path: str, body: str = "tomato basil soup") -> DocumentRecord:
    return DocumentRecord(
        [
            Field.keyword("path", path),
            Field.text("title", Path(path).stem, stored=True),
            Field.text("body", body),
            Field.stored_only("extractor", "text"),
        ]
    )


@pytest.fixture
def writer() -> SQLiteIndexWriter:
    return SQLiteIndexWriter()


@pytest.fixture
def handle(writer: SQLiteIndexWriter, tmp_path: Path):
    handle = writer.open(tmp_path)
    yield handle
    if not handle.closed:
        writer.close(handle)
        handle.closed = True


class TestSQLiteIndexWriter:
    """Test schema creation and record storage."""

    def test_open_creates_database(self, writer: SQLiteIndexWriter, tmp_path: Path) -> None:
        handle = writer.open(tmp_path)
        writer.close(handle)

        assert index_db_path(tmp_path).exists()
        assert handle.path == tmp_path

    def test_schema_creation(self, handle) -> None:
        conn: sqlite3.Connection = handle.native
        names = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type IN ('table', 'index')")
        }

        assert {"documents", "stored_fields", "keywords", "field_text"} <= names
        assert "idx_keywords_name_value" in names

    def test_append_splits_fields_by_policy(self, writer: SQLiteIndexWriter, handle) -> None:
        """Stored, keyword and tokenized fields land in their own tables."""
        writer.append(handle, _record("/docs/soup.txt"))
        conn: sqlite3.Connection = handle.native

        stored = {
            row["name"]: row["value"] for row in conn.execute("SELECT name, value FROM stored_fields")
        }
        keywords = [tuple(row) for row in conn.execute("SELECT name, value FROM keywords")]
        text_fields = sorted(row["name"] for row in conn.execute("SELECT name FROM field_text"))

        assert stored == {"path": "/docs/soup.txt", "title": "soup", "extractor": "text"}
        assert keywords == [("path", "/docs/soup.txt")]
        assert text_fields == ["body", "title"]

    def test_porter_stemming(self, writer: SQLiteIndexWriter, handle) -> None:
        writer.append(handle, _record("/docs/a.txt", body="Slowly simmering onions"))
        conn: sqlite3.Connection = handle.native

        rows = conn.execute(
            "SELECT document_id FROM field_text WHERE field_text MATCH ?", ("simmer",)
        ).fetchall()

        assert len(rows) == 1

    def test_clear_all(self, writer: SQLiteIndexWriter, tmp_path: Path) -> None:
        """Should remove every document from a previous run."""
        handle = writer.open(tmp_path)
        writer.append(handle, _record("/docs/a.txt"))
        writer.append(handle, _record("/docs/b.txt"))
        writer.close(handle)
        assert count_documents(tmp_path) == 2

        handle = writer.open(tmp_path)
        writer.clear_all(handle)
        writer.close(handle)

        assert count_documents(tmp_path) == 0

    def test_close_commits(self, writer: SQLiteIndexWriter, tmp_path: Path) -> None:
        handle = writer.open(tmp_path)
        writer.append(handle, _record("/docs/a.txt"))
        writer.close(handle)

        assert count_documents(tmp_path) == 1

    def test_failed_append_leaves_no_rows(self, writer: SQLiteIndexWriter, handle) -> None:
        """A record that fails midway is rolled back to its savepoint."""
        writer.append(handle, _record("/docs/good.txt"))
        bad = DocumentRecord(
            [Field.keyword("path", "/docs/bad.txt"), Field.stored_only("extractor", None)]  # type: ignore[arg-type]
        )

        with pytest.raises(IndexIOError):
            writer.append(handle, bad)

        conn: sqlite3.Connection = handle.native
        assert conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0] == 1
        assert conn.execute("SELECT COUNT(*) FROM keywords").fetchone()[0] == 1

    def test_closed_handle_rejected(self, writer: SQLiteIndexWriter, handle) -> None:
        handle.closed = True

        with pytest.raises(IndexIOError, match="closed"):
            writer.append(handle, _record("/docs/a.txt"))
        handle.closed = False

    def test_open_failure(self, writer: SQLiteIndexWriter, tmp_path: Path) -> None:
        with pytest.raises(IndexIOError, match="Cannot open index"):
            writer.open(tmp_path / "missing" / "dir")


class TestCountDocuments:
    def test_missing_index(self, tmp_path: Path) -> None:
        with pytest.raises(IndexIOError, match="No index found"):
            count_documents(tmp_path)
