"""Markdown reference tables for extracted entities."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

from ..models import (
    ANY_NON_TERMINAL,
    ANY_STATE,
    AdrEntity,
    ConfigStructEntity,
    CrateEntity,
    ForeignKeyEntity,
    StateTransitionEntity,
    TableEntity,
    VariantEntity,
)

NONE_MARKER = "*(none)*"


def escape_cell(value: str) -> str:
    """Keep a value inside one table cell."""
    return value.replace("\r", " ").replace("\n", " ").replace("|", "—")


def code(value: str) -> str:
    return f"`{value}`"


def markdown_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    lines: List[str] = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("-" * (len(header) + 2) for header in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def schema_tables(tables: Sequence[TableEntity], descriptions: Mapping[str, str]) -> str:
    headers = ["Table", "Columns", "Primary Key"]
    with_descriptions = bool(descriptions)
    if with_descriptions:
        headers.append("Description")
    rows = []
    for table in tables:
        pk = table.primary_key
        row = [code(table.name), str(len(table.columns)), code(pk.name) if pk else "—"]
        if with_descriptions:
            row.append(escape_cell(descriptions.get(table.name, "")))
        rows.append(row)
    return markdown_table(headers, rows)


def foreign_key_table(foreign_keys: Sequence[ForeignKeyEntity]) -> str:
    return markdown_table(
        ["Source Table", "Column", "Target Table", "Target Column"],
        (
            [code(fk.source_table), code(fk.source_column), code(fk.target_table), code(fk.target_column)]
            for fk in foreign_keys
        ),
    )


def display_from_state(state: str) -> str:
    if state == ANY_NON_TERMINAL:
        return "*(any non-terminal)*"
    if state == ANY_STATE:
        return "*(any state)*"
    return state


def transition_table(transitions: Sequence[StateTransitionEntity]) -> str:
    rows = []
    for transition in transitions:
        notes = f"Guard: `{escape_cell(transition.guard)}`" if transition.guard else ""
        rows.append(
            [
                display_from_state(transition.from_state),
                transition.event,
                transition.to_state,
                notes,
            ]
        )
    return markdown_table(["From State", "Event", "To State", "Notes"], rows)


def variant_table(variants: Sequence[VariantEntity]) -> str:
    return markdown_table(
        ["Variant", "Error Message"],
        ([code(variant.name), escape_cell(variant.message_template)] for variant in variants),
    )


def struct_table(structs: Sequence[ConfigStructEntity]) -> str:
    rows = []
    for struct in structs:
        parameters = str(struct.field_count) if struct.field_count else "—"
        rows.append([f"**{struct.name}**", escape_cell(struct.first_doc_sentence), parameters])
    return markdown_table(["Struct", "Summary", "Parameters"], rows)


def crate_table(crates: Sequence[CrateEntity]) -> str:
    rows = []
    for crate in crates:
        dependencies = ", ".join(code(dep) for dep in crate.path_dependencies) or NONE_MARKER
        rows.append([code(crate.name), crate.category, dependencies])
    return markdown_table(["Crate", "Category", "Dependencies"], rows)


def adr_table(records: Sequence[AdrEntity], link_prefix: str) -> str:
    rows = (
        [
            record.number,
            f"[{escape_cell(record.title)}]({link_prefix}{record.stem}.md)",
            record.status,
            escape_cell(record.summary),
        ]
        for record in records
    )
    return markdown_table(["#", "Title", "Status", "Summary"], rows)


__all__ = [
    "NONE_MARKER",
    "adr_table",
    "code",
    "crate_table",
    "display_from_state",
    "escape_cell",
    "foreign_key_table",
    "markdown_table",
    "schema_tables",
    "struct_table",
    "transition_table",
    "variant_table",
]
