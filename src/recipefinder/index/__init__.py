"""Directory walking, index accumulation and the indexer."""

from recipefinder.index.accumulator import IndexAccumulator
from recipefinder.index.indexer import Indexer, IndexerState, IndexStats
from recipefinder.index.reporting import IndexReporter, LoggingReporter
from recipefinder.index.storage import SQLiteIndexWriter, count_documents
from recipefinder.index.walker import CancelToken, DirectoryWalker
from recipefinder.index.writer import IndexHandle, IndexWriter

__all__ = [
    "CancelToken",
    "DirectoryWalker",
    "IndexAccumulator",
    "IndexHandle",
    "IndexReporter",
    "IndexStats",
    "IndexWriter",
    "Indexer",
    "IndexerState",
    "LoggingReporter",
    "SQLiteIndexWriter",
    "count_documents",
]
