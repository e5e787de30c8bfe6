"""Table and column extraction from a SQL schema definition file.

The file is scanned line by line with two states. ``transition`` is a pure
function from (state, line) to (next state, event); ``SchemaExtractor``
folds the events into ``TableEntity`` records and owns the primary-key rule.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from .base import Extractor
from ..models import ColumnEntity, TableEntity

_TABLE_START = re.compile(
    r"^CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?(?:ONLY\s+)?"
    r"(?:\"?[A-Za-z_]\w*\"?\.)?\"?([A-Za-z_]\w*)\"?"
)
_OTHER_CREATE = re.compile(r"^CREATE\s*(?:VIEW|TYPE|EXTENSION|OR)\b")
_COLUMN_NAME = re.compile(r"^([a-z_][a-z0-9_]*)\s")

# Checked in this order; the first keyword present in the line wins.
_TYPE_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("uuid", "uuid"),
    ("character varying", "varchar"),
    ("integer", "integer"),
    ("boolean", "boolean"),
    ("timestamp", "timestamp"),
    ("jsonb", "jsonb"),
    ("text", "text"),
    ("bigint", "bigint"),
)
_CHARACTER_VARYING = re.compile(r"character\s*varying")


class ScanState(Enum):
    SCANNING = "scanning"
    IN_TABLE_BODY = "in_table_body"


@dataclass(frozen=True)
class TableStart:
    name: str


@dataclass(frozen=True)
class ColumnLine:
    name: str
    simplified_type: str
    has_pk_generator: bool


Event = Union[TableStart, ColumnLine, None]


def classify_column_type(line: str, schema_name: str) -> str:
    """Map a column definition line to a simplified type using fixed keyword priority."""
    for keyword, label in _TYPE_KEYWORDS:
        if keyword == "character varying":
            if _CHARACTER_VARYING.search(line):
                return label
            continue
        if keyword in line:
            return label
    if f"{schema_name}." in line:
        return "enum"
    return "other"


def transition(
    state: ScanState,
    line: str,
    *,
    schema_name: str,
    pk_generators: Sequence[str],
) -> Tuple[ScanState, Event]:
    stripped = line.lstrip()

    table_match = _TABLE_START.match(stripped)
    if table_match:
        return ScanState.IN_TABLE_BODY, TableStart(table_match.group(1))

    if _OTHER_CREATE.match(stripped):
        return ScanState.SCANNING, None

    if state is not ScanState.IN_TABLE_BODY:
        return state, None

    if stripped.startswith(")"):
        return ScanState.SCANNING, None
    if not stripped.strip() or stripped.startswith("CONSTRAINT"):
        return state, None

    name_match = _COLUMN_NAME.match(stripped)
    if not name_match:
        return state, None

    column_type = classify_column_type(stripped, schema_name)
    has_generator = any(marker in stripped for marker in pk_generators)
    return state, ColumnLine(name_match.group(1), column_type, has_generator)


class SchemaExtractor(Extractor[TableEntity]):
    """Extracts ``CREATE TABLE`` bodies into ordered table entities."""

    def __init__(
        self,
        schema_name: str = "tasker",
        pk_generators: Sequence[str] = ("uuid_generate_v7",),
    ) -> None:
        self.schema_name = schema_name
        self.pk_generators = tuple(pk_generators)

    def extract(self, text: str) -> List[TableEntity]:
        tables: List[TableEntity] = []
        state = ScanState.SCANNING
        current: Optional[TableEntity] = None
        pk_flagged = False

        for line in text.splitlines():
            state, event = transition(
                state,
                line,
                schema_name=self.schema_name,
                pk_generators=self.pk_generators,
            )
            if isinstance(event, TableStart):
                current = TableEntity(name=event.name)
                tables.append(current)
                pk_flagged = False
            elif isinstance(event, ColumnLine) and current is not None:
                is_pk = (
                    not pk_flagged
                    and event.simplified_type == "uuid"
                    and event.has_pk_generator
                )
                if is_pk:
                    pk_flagged = True
                current.columns.append(
                    ColumnEntity(
                        name=event.name,
                        simplified_type=event.simplified_type,
                        is_primary_key=is_pk,
                    )
                )
        return tables


__all__ = [
    "ColumnLine",
    "ScanState",
    "SchemaExtractor",
    "TableStart",
    "classify_column_type",
    "transition",
]
