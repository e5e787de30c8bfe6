"""Mermaid diagram rendering for the three diagram grammars.

The emitted syntax is consumed by the documentation site's Mermaid plugin,
so indentation, edge arrows and identifier normalisation are kept exactly.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..models import (
    ANY_NON_TERMINAL,
    ColumnEntity,
    CrateEntity,
    DependencyEdge,
    ForeignKeyEntity,
    StateTransitionEntity,
    TableEntity,
)

INDENT = "    "

CLASS_DEFS = (
    ("coreLib", "fill:#e1f5fe,stroke:#0288d1,stroke-width:2px"),
    ("service", "fill:#f3e5f5,stroke:#7b1fa2,stroke-width:2px"),
    ("worker", "fill:#e8f5e9,stroke:#388e3c,stroke-width:2px"),
)


def node_id(name: str) -> str:
    """Diagram-safe identifier for a module name (``-`` is not allowed)."""
    return name.replace("-", "_")


def fenced(lines: Iterable[str]) -> str:
    return "\n".join(["```mermaid", *lines, "```"])


def column_marker(column: ColumnEntity) -> str:
    if column.is_primary_key:
        return " PK"
    if column.name.endswith("_uuid"):
        return " FK"
    return ""


def er_diagram(tables: Sequence[TableEntity], foreign_keys: Sequence[ForeignKeyEntity]) -> str:
    lines: List[str] = ["erDiagram"]
    for table in tables:
        lines.append(f"{INDENT}{table.name} {{")
        for column in table.columns:
            marker = column_marker(column)
            lines.append(f"{INDENT * 2}{column.simplified_type} {column.name}{marker}")
        lines.append(f"{INDENT}}}")
    lines.append("")
    for fk in foreign_keys:
        if fk.source_table and fk.target_table:
            lines.append(
                f'{INDENT}{fk.target_table} ||--o{{ {fk.source_table} : "{fk.source_column}"'
            )
    return fenced(lines)


def transition_label(transition: StateTransitionEntity) -> str:
    if transition.guard:
        return f"{transition.event} [guard]"
    return transition.event


def state_diagram(
    transitions: Sequence[StateTransitionEntity],
    *,
    initial_state: str,
    terminal_states: Sequence[str],
    key_states: Sequence[str],
) -> str:
    """Render ``stateDiagram-v2`` text.

    ``ANY_NON_TERMINAL`` edges are expanded over ``key_states``; ``ANY_STATE``
    edges become a note on the target instead of explicit edges.
    """
    lines: List[str] = ["stateDiagram-v2", f"{INDENT}[*] --> {initial_state}"]
    lines.extend(f"{INDENT}{state} --> [*]" for state in terminal_states)
    lines.append("")
    for transition in transitions:
        label = transition_label(transition)
        if not transition.is_wildcard:
            lines.append(f"{INDENT}{transition.from_state} --> {transition.to_state} : {label}")
        elif transition.from_state == ANY_NON_TERMINAL:
            for state in key_states:
                lines.append(f"{INDENT}{state} --> {transition.to_state} : {label}")
        else:
            lines.append(
                f"{INDENT}note right of {transition.to_state} : "
                f"From any state via {transition.event}"
            )
    return fenced(lines)


def _subgraph(key: str, title: str, crates: Sequence[CrateEntity]) -> List[str]:
    lines = [f'{INDENT}subgraph {key}["{title}"]']
    lines.extend(f'{INDENT * 2}{node_id(crate.name)}["{crate.name}"]' for crate in crates)
    lines.append(f"{INDENT}end")
    lines.append("")
    return lines


def dependency_graph(
    core: Sequence[CrateEntity],
    services: Sequence[CrateEntity],
    workers: Sequence[CrateEntity],
    edges: Sequence[DependencyEdge],
) -> str:
    """Render ``graph TD``; an edge ``a --> b`` means ``a`` depends on ``b``."""
    lines: List[str] = ["graph TD"]
    lines.extend(_subgraph("core", "Core Libraries", core))
    lines.extend(_subgraph("services", "Services", services))
    if workers:
        lines.extend(_subgraph("workers", "FFI Workers", workers))

    for edge in edges:
        lines.append(f"{INDENT}{node_id(edge.from_module)} --> {node_id(edge.to_module)}")
    lines.append("")

    lines.extend(f"{INDENT}classDef {name} {style}" for name, style in CLASS_DEFS)
    for group, class_name in ((core, "coreLib"), (services, "service"), (workers, "worker")):
        if group:
            members = ",".join(node_id(crate.name) for crate in group)
            lines.append(f"{INDENT}class {members} {class_name}")
    return fenced(lines)


__all__ = [
    "column_marker",
    "dependency_graph",
    "er_diagram",
    "fenced",
    "node_id",
    "state_diagram",
    "transition_label",
]
