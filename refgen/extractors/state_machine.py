"""State transition extraction from a Rust ``match`` block.

Only lines between the start and end sentinels are considered. The block is
cleaned, multi-line arms are folded into one logical line, and each arm of
the shape ``(<from>, <event>[(<payload>)]) [if <guard>] => <to>`` becomes a
``StateTransitionEntity``.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from .base import Extractor
from ..models import StateTransitionEntity

_COMMENT = re.compile(r"^\s*//")
_CATCH_ALL = re.compile(r"from_state.*=>")
_ERROR_RETURN = re.compile(r"return\s+Err")
_ARM_OPENS_BLOCK = re.compile(r"=>\s*\{\s*$")
_CLOSING_BRACE = re.compile(r"^\s*\}\s*,?\s*$")
_FROM = re.compile(r"^\(([^,]+),")
_EVENT = re.compile(r"^\([^,]+,\s*([^)]+)\)")
_GUARD = re.compile(r"\sif\s+(.+?)\s*=>")
_TARGET = re.compile(r".*=>\s*(.*)$")


def match_block_lines(text: str, start: str, end: str) -> List[str]:
    """Return the lines strictly between each ``start``/``end`` sentinel pair."""
    collected: List[str] = []
    inside = False
    for line in text.splitlines():
        if not inside:
            if start in line:
                inside = True
            continue
        if end in line:
            inside = False
            continue
        collected.append(line)
    return collected


def clean_block(lines: Sequence[str], qualifiers: Sequence[str]) -> List[str]:
    """Drop blanks, comments, error returns and catch-all arms; strip type qualifiers."""
    prefix = None
    if qualifiers:
        prefix = re.compile(r"\b(?:" + "|".join(re.escape(q) for q in qualifiers) + r")::")
    cleaned: List[str] = []
    for line in lines:
        if not line.strip() or _COMMENT.match(line):
            continue
        if _CATCH_ALL.search(line) or _ERROR_RETURN.search(line):
            continue
        line = line.rstrip()
        if prefix is not None:
            line = prefix.sub("", line)
        cleaned.append(line)
    return cleaned


def join_multiline_arms(lines: Sequence[str]) -> List[str]:
    """Fold ``header => {`` / ``Result`` / ``}`` triples into ``header => { Result``."""
    joined: List[str] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1
        if _ARM_OPENS_BLOCK.search(line) and index < len(lines):
            line = f"{line} {lines[index].strip()}"
            index += 1
            if index < len(lines) and _CLOSING_BRACE.match(lines[index]):
                index += 1
        joined.append(line)
    return joined


def parse_arm(line: str) -> List[StateTransitionEntity]:
    """Parse one logical arm; ``|`` alternatives in the from position fan out."""
    stripped = line.strip()
    if not stripped.startswith("(") or "=>" not in stripped:
        return []

    from_match = _FROM.match(stripped)
    event_match = _EVENT.match(stripped)
    target_match = _TARGET.match(stripped)
    if not (from_match and event_match and target_match):
        return []

    event = re.sub(r"[({].*$", "", event_match.group(1))
    event = "".join(event.split())
    target = re.sub(r"//.*$", "", target_match.group(1))
    target = re.sub(r"[{},]", "", target)
    target = "".join(target.split())

    guard: Optional[str] = None
    guard_match = _GUARD.search(stripped)
    if guard_match:
        guard = guard_match.group(1).strip()

    transitions: List[StateTransitionEntity] = []
    for alternative in from_match.group(1).split("|"):
        source = "".join(alternative.split())
        if not source or not event or not target:
            continue
        transitions.append(
            StateTransitionEntity(from_state=source, event=event, to_state=target, guard=guard)
        )
    return transitions


class StateTransitionExtractor(Extractor[StateTransitionEntity]):
    """Extracts transitions from the sentinel-delimited match block of one file."""

    def __init__(
        self,
        qualifiers: Sequence[str] = (),
        *,
        start_sentinel: str = "let target = match",
        end_sentinel: str = "Ok(target)",
    ) -> None:
        self.qualifiers = tuple(qualifiers)
        self.start_sentinel = start_sentinel
        self.end_sentinel = end_sentinel

    def extract(self, text: str) -> List[StateTransitionEntity]:
        block = match_block_lines(text, self.start_sentinel, self.end_sentinel)
        cleaned = clean_block(block, self.qualifiers)
        transitions: List[StateTransitionEntity] = []
        for line in join_multiline_arms(cleaned):
            transitions.extend(parse_arm(line))
        return transitions


__all__ = [
    "StateTransitionExtractor",
    "clean_block",
    "join_multiline_arms",
    "match_block_lines",
    "parse_arm",
]
