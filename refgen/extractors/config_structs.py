"""Configuration struct extraction from a sectioned Rust source file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .base import Extractor, read_source
from ..config import ConfigurationError
from ..models import ConfigSection, ConfigStructEntity

_DOC_COMMENT = re.compile(r"^\s*///\s?(.*)$")
_STRUCT_START = re.compile(r"^pub\s+struct\s+([A-Za-z_]\w*)")
_PUBLIC_FIELD = re.compile(r"^\s*pub\s")
_ATTRIBUTE = re.compile(r"^\s*#")

SENTENCE_LIMIT = 200


class StructScanState(Enum):
    OUTSIDE = "outside"
    IN_STRUCT = "in_struct"


@dataclass
class _StructScan:
    state: StructScanState = StructScanState.OUTSIDE
    docs: List[str] = field(default_factory=list)
    name: Optional[str] = None
    sentence: str = ""
    field_count: int = 0
    structs: List[ConfigStructEntity] = field(default_factory=list)

    def close(self) -> None:
        if self.name is not None:
            self.structs.append(
                ConfigStructEntity(
                    name=self.name,
                    first_doc_sentence=self.sentence,
                    field_count=self.field_count,
                )
            )
        self.name = None
        self.sentence = ""
        self.field_count = 0
        self.state = StructScanState.OUTSIDE


def first_sentence(doc: str, limit: int = SENTENCE_LIMIT) -> str:
    """Cut ``doc`` after its first ``". "`` and cap it at ``limit`` characters."""
    text = doc.strip()
    cut = text.find(". ")
    if cut != -1:
        text = text[: cut + 1]
    if len(text) > limit:
        text = text[: limit - 3] + "..."
    return text


def split_sections(
    text: str,
    markers: Sequence[Tuple[str, str]],
    *,
    source: Path | None = None,
) -> List[ConfigSection]:
    """Split ``text`` into one section per ``(title, marker)`` pair.

    A section runs from its marker line up to the next marker line (or end of
    file). Every marker must be present.
    """
    lines = text.splitlines()
    positions: List[Tuple[int, str, str]] = []
    for title, marker in markers:
        index = next((i for i, line in enumerate(lines) if marker in line), None)
        if index is None:
            where = f" in {source}" if source else ""
            raise ConfigurationError(
                f"Could not find section marker '{marker}'{where}",
                path=source,
            )
        positions.append((index, title, marker))

    ordered = sorted(positions)
    bounds = {title: index for index, title, _ in ordered}
    sections: List[ConfigSection] = []
    for title, _marker in markers:
        start = bounds[title]
        following = [index for index, _, _ in ordered if index > start]
        end = following[0] if following else len(lines)
        sections.append(ConfigSection(title=title, source="\n".join(lines[start:end])))
    return sections


def extract_structs(section_text: str) -> List[ConfigStructEntity]:
    """Return public structs with their first doc sentence and public field count."""
    scan = _StructScan()
    for line in section_text.splitlines():
        doc = _DOC_COMMENT.match(line)
        if doc:
            scan.docs.append(doc.group(1).strip())
            continue

        start = _STRUCT_START.match(line)
        if start:
            if scan.state is StructScanState.IN_STRUCT:
                scan.close()
            scan.name = start.group(1)
            scan.sentence = first_sentence(" ".join(part for part in scan.docs if part))
            scan.docs = []
            if line.rstrip().endswith(";"):
                scan.close()
            else:
                scan.state = StructScanState.IN_STRUCT
            continue

        if scan.state is StructScanState.IN_STRUCT:
            if _PUBLIC_FIELD.match(line):
                scan.field_count += 1
            if line.startswith("}"):
                scan.close()

        if line.strip() and not _ATTRIBUTE.match(line):
            scan.docs = []

    if scan.state is StructScanState.IN_STRUCT:
        scan.close()
    return scan.structs


class ConfigStructExtractor(Extractor[ConfigSection]):
    """Extracts struct summaries per configuration section."""

    def __init__(self, markers: Sequence[Tuple[str, str]]) -> None:
        self.markers = tuple(markers)

    def extract(self, text: str, *, source: Path | None = None) -> List[ConfigSection]:
        sections = split_sections(text, self.markers, source=source)
        for section in sections:
            section.structs = extract_structs(section.source)
        return sections

    def extract_file(self, path: Path) -> List[ConfigSection]:
        return self.extract(read_source(path), source=path)


__all__ = [
    "ConfigStructExtractor",
    "StructScanState",
    "extract_structs",
    "first_sentence",
    "split_sections",
]
