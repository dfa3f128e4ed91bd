"""Utility helpers for working with files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Collection


def has_suffix(path: Path | str, suffixes: Collection[str]) -> bool:
    """Case-insensitive check of the file extension against ``suffixes``."""
    return Path(path).suffix.lower() in suffixes


def is_within(path: Path, parent: Path) -> bool:
    """Return True when ``path`` equals ``parent`` or lives below it."""
    path = Path(os.path.abspath(path))
    parent = Path(os.path.abspath(parent))
    return path == parent or parent in path.parents


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
