"""Tests for the extractor base class, text extractor and registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from recipefinder.errors import ExtractionError
from recipefinder.extraction import (
    AVAILABLE_FORMATS,
    ContentExtractor,
    TextExtractor,
    WordExtractor,
    build_extractors,
    default_extractors,
)


class BrokenExtractor(ContentExtractor):
    name = "broken"
    suffixes = frozenset({".bad"})

    def read(self, path: Path) -> tuple[str | None, str]:
        raise RuntimeError("parser exploded")


class TestContentExtractor:
    """Test behaviour shared by all extractors."""

    def test_supports_uses_suffix_only(self, tmp_path: Path) -> None:
        """Should decide on the file name without touching the file."""
        extractor = TextExtractor()

        assert extractor.supports(tmp_path / "missing.txt")
        assert extractor.supports("NOTES.TXT")
        assert not extractor.supports(tmp_path / "notes.md")

    def test_unexpected_failure_becomes_extraction_error(self, tmp_path: Path) -> None:
        path = tmp_path / "file.bad"
        path.write_text("x")

        with pytest.raises(ExtractionError) as excinfo:
            BrokenExtractor().extract(path)

        assert excinfo.value.path == path
        assert "parser exploded" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_missing_file_raises_extraction_error(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError):
            TextExtractor().extract(tmp_path / "gone.txt")


class TestTextExtractor:
    """Test plain text extraction."""

    def test_extract_record_fields(self, tmp_path: Path) -> None:
        """Should produce path, title, body, extractor and modified fields."""
        path = tmp_path / "notes.txt"
        path.write_text("\nPancakes\n2 eggs\nmilk\n", encoding="utf-8")

        record = TextExtractor().extract(path)

        assert record.get("path") == str(path)
        assert record.get("title") == "Pancakes"
        assert "2 eggs" in record.get("body")
        assert record.get("extractor") == "text"
        assert float(record.get("modified")) == path.stat().st_mtime
        assert record.has_indexed_field

    def test_title_falls_back_to_stem(self, tmp_path: Path) -> None:
        path = tmp_path / "blank.txt"
        path.write_text("   \n\n", encoding="utf-8")

        record = TextExtractor().extract(path)

        assert record.get("title") == "blank"

    def test_cp1252_file(self, tmp_path: Path) -> None:
        path = tmp_path / "old.txt"
        path.write_bytes("Crêpes – quick".encode("cp1252"))

        record = TextExtractor().extract(path)

        assert record.get("body") == "Crêpes – quick"

    def test_body_field_not_stored(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")

        record = TextExtractor().extract(path)
        body = next(f for f in record.fields if f.name == "body")

        assert body.indexed and body.tokenized and not body.stored


class TestRegistry:
    """Test extractor construction helpers."""

    def test_default_extractors(self) -> None:
        extractors = default_extractors()

        assert [type(e) for e in extractors] == [WordExtractor, TextExtractor]

    def test_build_extractors_normalizes_names(self) -> None:
        extractors = build_extractors([".TXT", "doc", "txt"])

        assert [e.name for e in extractors] == ["text", "word"]

    def test_build_pdf_extractor(self) -> None:
        extractors = build_extractors(["pdf"])

        assert extractors[0].name == "pdf"
        assert extractors[0].supports("recipe.PDF")

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="Unknown format"):
            build_extractors(["odt"])

    def test_available_formats(self) -> None:
        assert set(AVAILABLE_FORMATS) == {"doc", "txt", "pdf"}
