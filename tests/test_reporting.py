"""Tests for the logging reporter."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from recipefinder.errors import ExtractionError
from recipefinder.index.indexer import IndexStats
from recipefinder.index.reporting import LoggingReporter


class TestLoggingReporter:
    """Events map onto log levels."""

    def test_file_failed_is_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        reporter = LoggingReporter()
        error = ExtractionError(Path("/docs/bad.doc"), "not an OLE2 compound document")

        with caplog.at_level(logging.DEBUG, logger="recipefinder"):
            reporter.file_failed(Path("/docs/bad.doc"), "word", error)

        assert caplog.records[-1].levelno == logging.WARNING
        assert "/docs/bad.doc" in caplog.text
        assert "word" in caplog.text

    def test_skips_are_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="recipefinder"):
            LoggingReporter().file_skipped(Path("/docs/photo.png"))

        assert caplog.records[-1].levelno == logging.DEBUG

    def test_run_finished_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        stats = IndexStats(indexed=2, skipped=1, failed=1, files_seen=4)

        with caplog.at_level(logging.INFO, logger="recipefinder"):
            LoggingReporter().run_finished(stats)

        assert "Indexed 2 documents from 4 files (1 skipped, 1 failed)" in caplog.text

    def test_run_aborted_is_error(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="recipefinder"):
            LoggingReporter().run_aborted(RuntimeError("disk gone"))

        assert caplog.records[-1].levelno == logging.ERROR

    def test_custom_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("recipefinder.custom")

        with caplog.at_level(logging.INFO, logger="recipefinder"):
            LoggingReporter(logger).run_started(Path("/docs"), Path("/index"))

        assert caplog.records[-1].name == "recipefinder.custom"
