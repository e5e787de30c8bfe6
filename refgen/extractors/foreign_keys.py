"""Foreign key extraction from a SQL constraints file.

Each ``FOREIGN KEY`` clause is attributed to the table named by the most
recent ``ALTER TABLE`` line. Nothing checks that the two belong to the same
statement, so an unrelated ``ALTER TABLE`` in between re-targets later
clauses. Generated docs depend on this exact attribution.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .base import Extractor
from ..models import ForeignKeyEntity

_ALTER_TABLE = re.compile(
    r"ALTER\s+TABLE\s+(?:ONLY\s+)?(?:IF\s+EXISTS\s+)?(?:ONLY\s+)?"
    r"(?:\"?[A-Za-z_]\w*\"?\.)?\"?([A-Za-z_]\w*)\"?"
)
_FOREIGN_KEY = re.compile(r"FOREIGN\s+KEY\s*\(([^)]+)\)")
_REFERENCES = re.compile(
    r"REFERENCES\s+(?:\"?[A-Za-z_]\w*\"?\.)?\"?([A-Za-z_]\w*)\"?\s*\(([^)]+)\)"
)
_COMMENT = re.compile(r"^\s*--")


@dataclass(frozen=True)
class ForeignKeyFold:
    """Accumulator threaded through every line of the constraints file."""

    current_table: Optional[str] = None
    edges: Tuple[ForeignKeyEntity, ...] = ()


def _column_list(raw: str) -> str:
    return ", ".join(part.strip().strip('"') for part in raw.split(",") if part.strip())


def fold_foreign_key_line(acc: ForeignKeyFold, line: str) -> ForeignKeyFold:
    """Return the accumulator after consuming ``line``; never raises."""
    if _COMMENT.match(line):
        return acc

    alter = _ALTER_TABLE.search(line)
    if alter:
        acc = replace(acc, current_table=alter.group(1))

    fk_match = _FOREIGN_KEY.search(line)
    if not fk_match:
        return acc
    ref_match = _REFERENCES.search(line, fk_match.end())
    if not ref_match or not acc.current_table:
        return acc

    edge = ForeignKeyEntity(
        source_table=acc.current_table,
        source_column=_column_list(fk_match.group(1)),
        target_table=ref_match.group(1),
        target_column=_column_list(ref_match.group(2)),
    )
    return replace(acc, edges=acc.edges + (edge,))


class ForeignKeyExtractor(Extractor[ForeignKeyEntity]):
    """Folds constraint lines into foreign key edges in file order."""

    def extract(self, text: str) -> List[ForeignKeyEntity]:
        acc = ForeignKeyFold()
        for line in text.splitlines():
            acc = fold_foreign_key_line(acc, line)
        return list(acc.edges)


__all__ = ["ForeignKeyExtractor", "ForeignKeyFold", "fold_foreign_key_line"]
