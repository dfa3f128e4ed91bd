"""Core recipefinder data models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Field:
    """Named value plus the policy describing how the index treats it."""

    name: str
    value: str
    stored: bool = True
    indexed: bool = True
    tokenized: bool = True

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name must not be empty")
        if self.tokenized and not self.indexed:
            raise ValueError(f"Field {self.name!r} cannot be tokenized without being indexed")

    @classmethod
    def keyword(cls, name: str, value: str) -> "Field":
        """Stored and indexed as a single exact-match term."""
        return cls(name, value, stored=True, indexed=True, tokenized=False)

    @classmethod
    def text(cls, name: str, value: str, *, stored: bool = False) -> "Field":
        """Full-text field, tokenized for search."""
        return cls(name, value, stored=stored, indexed=True, tokenized=True)

    @classmethod
    def stored_only(cls, name: str, value: str) -> "Field":
        return cls(name, value, stored=True, indexed=False, tokenized=False)


@dataclass(frozen=True, slots=True)
class DocumentRecord:
    """Immutable set of fields produced by extracting one file."""

    fields: Tuple[Field, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def get(self, name: str) -> str | None:
        for item in self.fields:
            if item.name == name:
                return item.value
        return None

    @property
    def indexed_fields(self) -> Tuple[Field, ...]:
        return tuple(item for item in self.fields if item.indexed)

    @property
    def stored_fields(self) -> Tuple[Field, ...]:
        return tuple(item for item in self.fields if item.stored)

    @property
    def has_indexed_field(self) -> bool:
        return any(item.indexed for item in self.fields)


@dataclass(frozen=True, slots=True)
class FileSystemEntry:
    """Directory listing entry handed from the walker to dispatch."""

    path: Path
    is_dir: bool
