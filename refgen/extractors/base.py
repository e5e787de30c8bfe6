"""Base classes for line-oriented source extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, List, TypeVar

T = TypeVar("T")


class Extractor(ABC, Generic[T]):
    """Contract for extractors that turn one source text into ordered entities."""

    @abstractmethod
    def extract(self, text: str) -> List[T]:
        """Return entities in source declaration order; unmatched lines are dropped."""

    def extract_file(self, path: Path) -> List[T]:
        return self.extract(read_source(path))


def read_source(path: Path) -> str:
    """Read a source file, tolerating stray non-UTF-8 bytes."""
    return path.read_text(encoding="utf-8", errors="replace")


__all__ = ["Extractor", "read_source"]
