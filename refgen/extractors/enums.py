"""Error enum extraction from Rust source.

Scanning stops at the test-module boundary. Column-zero ``///`` comments are
buffered and attached to the next ``pub enum``; brace depth decides where a
multi-line enum body ends.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .base import Extractor
from ..models import EnumEntity, VariantEntity

_DOC_COMMENT = re.compile(r"^///\s?(.*)$")
_ENUM_START = re.compile(r"^pub(?:\([^)]*\))?\s+enum\s+([A-Za-z_]\w*)")
_ATTRIBUTE = re.compile(r"^\s*#")
_ERROR_ATTRIBUTE = re.compile(r"#\[error\(")
_ERROR_MESSAGE = re.compile(r'#\[error\("([^"]+)"')
_VARIANT = re.compile(r"^\s+([A-Za-z_]\w*)")

COMPLEX_FORMAT = "(complex format)"
_NON_VARIANT_WORDS = frozenset({"pub", "fn", "let", "use", "impl", "where", "type", "Self"})


class EnumScanState(Enum):
    SCANNING = "scanning"
    IN_ENUM = "in_enum"


@dataclass
class _OpenEnum:
    name: str
    docs: List[str]
    lines: List[str] = field(default_factory=list)
    depth: int = 0
    opened: bool = False


def extract_variants(body: str) -> List[VariantEntity]:
    """Pair each ``#[error("...")]`` message with the variant identifier after it."""
    variants: List[VariantEntity] = []
    pending: Optional[str] = None
    for line in body.splitlines():
        if _ERROR_ATTRIBUTE.search(line):
            match = _ERROR_MESSAGE.search(line)
            pending = match.group(1) if match else COMPLEX_FORMAT
            continue
        match = _VARIANT.match(line)
        if not match:
            continue
        word = match.group(1)
        if word in _NON_VARIANT_WORDS or not word[0].isupper():
            continue
        if pending is not None:
            variants.append(VariantEntity(name=word, message_template=pending))
            pending = None
    return variants


class EnumExtractor(Extractor[EnumEntity]):
    """Extracts ``pub enum`` blocks, with their doc headers, up to a boundary marker."""

    def __init__(self, boundary: str = "#[cfg(test)]") -> None:
        self.boundary = boundary

    def extract(self, text: str) -> List[EnumEntity]:
        entities: List[EnumEntity] = []
        state = EnumScanState.SCANNING
        docs: List[str] = []
        current: Optional[_OpenEnum] = None

        for line in text.splitlines():
            if self.boundary and line.startswith(self.boundary):
                break

            if state is EnumScanState.IN_ENUM and current is not None:
                current.lines.append(line)
                current.depth += line.count("{") - line.count("}")
                if "{" in line:
                    current.opened = True
                if current.opened and current.depth <= 0:
                    entities.append(self._finish(current))
                    current = None
                    state = EnumScanState.SCANNING
                continue

            doc = _DOC_COMMENT.match(line)
            if doc:
                docs.append(doc.group(1).strip())
                continue

            start = _ENUM_START.match(line)
            if start:
                current = _OpenEnum(name=start.group(1), docs=docs, lines=[line])
                current.depth = line.count("{") - line.count("}")
                current.opened = "{" in line
                docs = []
                if current.opened and current.depth <= 0:
                    entities.append(self._finish(current))
                    current = None
                else:
                    state = EnumScanState.IN_ENUM
                continue

            if line.strip() and not _ATTRIBUTE.match(line):
                docs = []

        if current is not None:
            entities.append(self._finish(current))
        return entities

    @staticmethod
    def _finish(open_enum: _OpenEnum) -> EnumEntity:
        body = "\n".join(open_enum.lines)
        return EnumEntity(
            name=open_enum.name,
            doc_summary=" ".join(part for part in open_enum.docs if part),
            body=body,
            variants=extract_variants("\n".join(open_enum.lines[1:])),
        )


__all__ = ["COMPLEX_FORMAT", "EnumExtractor", "EnumScanState", "extract_variants"]
