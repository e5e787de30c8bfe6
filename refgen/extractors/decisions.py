"""Architectural decision record (ADR) extraction."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from .base import read_source
from ..models import AdrEntity

_NUMBER = re.compile(r"adr-0*(\d+)")
_HEADING = re.compile(r"^#{1,2}\s+(.*)$")
_TITLE_PREFIX = re.compile(r"^ADR[- ]*\d*:?\s*")
_STATUS = re.compile(r"[Ss]tatus:\s*([A-Za-z]+)")
_DECISION_HEADING = re.compile(r"^##\s+[Dd]ecision")
_EXCERPT_HEADING = re.compile(r"^##\s+(?:Context|Decision)")
_ANY_SUBHEADING = re.compile(r"^##")

DEFAULT_STATUS = "Accepted"


def record_number(stem: str) -> str:
    match = _NUMBER.search(stem)
    return match.group(1) if match else stem


def record_title(lines: List[str], stem: str) -> str:
    """First level-1/level-2 heading without its ``ADR-NNN:`` prefix, else from the filename."""
    for line in lines:
        match = _HEADING.match(line)
        if match:
            title = _TITLE_PREFIX.sub("", match.group(1).strip()).strip()
            if title:
                return title
            break
    fallback = re.sub(r"^adr-\d*-?", "", stem)
    return fallback.replace("-", " ").strip() or stem


def record_status(lines: List[str]) -> str:
    for line in lines:
        match = _STATUS.search(line)
        if match:
            return match.group(1)
    return DEFAULT_STATUS


def decision_line(lines: List[str]) -> str:
    """First non-blank, non-separator line under the ``## Decision`` heading."""
    in_decision = False
    for line in lines:
        if _DECISION_HEADING.match(line):
            in_decision = True
            continue
        if not in_decision:
            continue
        if _ANY_SUBHEADING.match(line):
            break
        stripped = line.strip()
        if stripped and not stripped.startswith("---"):
            return stripped
    return ""


def context_and_decision(lines: List[str]) -> str:
    """Body text of the Context and Decision sections, for AI summarization."""
    collected: List[str] = []
    in_section = False
    for line in lines:
        if _EXCERPT_HEADING.match(line):
            in_section = True
            continue
        if in_section and _ANY_SUBHEADING.match(line):
            in_section = False
            continue
        if in_section:
            collected.append(line)
    return "\n".join(collected).strip()


def parse_record(path: Path) -> AdrEntity:
    lines = read_source(path).splitlines()
    stem = path.stem
    return AdrEntity(
        number=record_number(stem),
        title=record_title(lines, stem),
        status=record_status(lines),
        stem=stem,
        decision_line=decision_line(lines),
        excerpt=context_and_decision(lines),
    )


class DecisionRecordExtractor:
    """Reads every matching record in a directory, ordered by filename."""

    def __init__(self, pattern: str = "adr-*.md") -> None:
        self.pattern = pattern

    def extract(self, directory: Path) -> List[AdrEntity]:
        paths = sorted(path for path in directory.glob(self.pattern) if path.is_file())
        return [parse_record(path) for path in paths]


__all__ = [
    "DEFAULT_STATUS",
    "DecisionRecordExtractor",
    "context_and_decision",
    "decision_line",
    "parse_record",
    "record_number",
    "record_status",
    "record_title",
]
