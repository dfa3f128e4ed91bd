"""Application configuration defaults."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from recipefinder.extraction import DEFAULT_FORMATS


def _get_default_index_dir() -> Path:
    """Get the default index directory based on platform and execution context."""
    user_index = Path.home() / "Documents" / "RecipeFinder" / "index"

    # Frozen app bundles always use the Documents folder
    if getattr(sys, "frozen", False):
        return user_index

    # When running from source, prefer local data/ if it exists
    local_index = Path("data/index")
    if local_index.exists():
        return local_index

    return user_index


@dataclass(slots=True)
class AppConfig:
    docs_dir: Path | None = None
    index_dir: Path | None = None
    formats: Tuple[str, ...] = DEFAULT_FORMATS

    def __post_init__(self) -> None:
        if self.index_dir is None:
            self.index_dir = _get_default_index_dir()

    def resolve_index_dir(self, base_dir: Path | None = None) -> Path:
        if self.index_dir is None:
            self.index_dir = _get_default_index_dir()
        if Path(self.index_dir).is_absolute() or base_dir is None:
            return Path(self.index_dir)
        return base_dir / self.index_dir
