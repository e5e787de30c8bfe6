"""Entity records extracted from the collaborating codebase."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

SUMMARY_DETERMINISTIC = "deterministic"
SUMMARY_AI = "ai"

ANY_NON_TERMINAL = "state"
ANY_STATE = "_"


@dataclass
class ColumnEntity:
    """A single column of a table declaration."""

    name: str
    simplified_type: str
    is_primary_key: bool = False


@dataclass
class TableEntity:
    """A table declaration and its columns in declaration order."""

    name: str
    columns: List[ColumnEntity] = field(default_factory=list)

    @property
    def primary_key(self) -> Optional[ColumnEntity]:
        for column in self.columns:
            if column.is_primary_key:
                return column
        return None


@dataclass(frozen=True)
class ForeignKeyEntity:
    """Edge from a referencing column to the referenced table column."""

    source_table: str
    source_column: str
    target_table: str
    target_column: str


@dataclass(frozen=True)
class VariantEntity:
    name: str
    message_template: str


@dataclass
class EnumEntity:
    """An error enum with its doc header, raw body, and annotated variants."""

    name: str
    doc_summary: str
    body: str
    variants: List[VariantEntity] = field(default_factory=list)


@dataclass(frozen=True)
class ConfigStructEntity:
    name: str
    first_doc_sentence: str
    field_count: int


@dataclass
class ConfigSection:
    """One marker-delimited section of the configuration definition file."""

    title: str
    source: str
    structs: List[ConfigStructEntity] = field(default_factory=list)


@dataclass(frozen=True)
class StateTransitionEntity:
    """A state machine edge.

    ``from_state`` may be one of the sentinel wildcards ``ANY_NON_TERMINAL``
    or ``ANY_STATE``; renderers give those special treatment.
    """

    from_state: str
    event: str
    to_state: str
    guard: Optional[str] = None

    @property
    def is_wildcard(self) -> bool:
        return self.from_state in (ANY_NON_TERMINAL, ANY_STATE)


@dataclass
class CrateEntity:
    """A workspace member with its local path dependencies."""

    name: str
    member_path: str
    category: str
    path_dependencies: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class DependencyEdge:
    from_module: str
    to_module: str


@dataclass
class AdrEntity:
    """A decision record row. ``summary`` is filled by the summarizer."""

    number: str
    title: str
    status: str
    stem: str
    decision_line: str
    excerpt: str
    summary: str = ""


@dataclass(frozen=True)
class Summary:
    text: str
    source: str = SUMMARY_DETERMINISTIC


__all__ = [
    "ANY_NON_TERMINAL",
    "ANY_STATE",
    "AdrEntity",
    "ColumnEntity",
    "ConfigSection",
    "ConfigStructEntity",
    "CrateEntity",
    "DependencyEdge",
    "EnumEntity",
    "ForeignKeyEntity",
    "StateTransitionEntity",
    "SUMMARY_AI",
    "SUMMARY_DETERMINISTIC",
    "Summary",
    "TableEntity",
    "VariantEntity",
]
