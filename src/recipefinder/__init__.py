"""Recipe Finder: full-text indexing of a document directory."""

__version__ = "0.1.0"
