"""Tests for the SQL table/column extractor."""

from __future__ import annotations

import textwrap

from refgen.extractors.schema import (
    ColumnLine,
    ScanState,
    SchemaExtractor,
    TableStart,
    classify_column_type,
    transition,
)
from tests._fixtures.source_tree import SCHEMA_SQL


def _extract(sql: str):
    return SchemaExtractor(pk_generators=("uuid_generate_v7",)).extract(textwrap.dedent(sql))


def test_schema_extractor_reads_tables_in_declaration_order() -> None:
    tables = _extract(SCHEMA_SQL)

    assert [table.name for table in tables] == ["task_namespaces", "tasks"]
    namespaces, tasks = tables
    assert [column.name for column in namespaces.columns] == [
        "task_namespace_uuid",
        "name",
        "description",
        "created_at",
    ]
    assert [column.simplified_type for column in tasks.columns] == [
        "uuid",
        "uuid",
        "uuid",
        "boolean",
        "integer",
        "jsonb",
        "enum",
        "bigint",
    ]


def test_first_generated_uuid_column_is_the_only_primary_key() -> None:
    sql = """
    CREATE TABLE tasker.steps (
        step_uuid uuid DEFAULT tasker.uuid_generate_v7() NOT NULL,
        other_uuid uuid DEFAULT tasker.uuid_generate_v7(),
        name text
    );
    """
    (table,) = _extract(sql)

    flagged = [column.name for column in table.columns if column.is_primary_key]
    assert flagged == ["step_uuid"]
    assert table.primary_key is not None
    assert table.primary_key.name == "step_uuid"


def test_uuid_without_generator_is_not_primary_key() -> None:
    sql = """
    CREATE TABLE tasker.edges (
        from_step_uuid uuid NOT NULL,
        to_step_uuid uuid NOT NULL
    );
    """
    (table,) = _extract(sql)

    assert table.primary_key is None


def test_primary_key_flag_resets_per_table() -> None:
    tables = _extract(SCHEMA_SQL)

    assert tables[0].primary_key.name == "task_namespace_uuid"
    assert tables[1].primary_key.name == "task_uuid"


def test_column_count_skips_blank_comment_and_constraint_lines() -> None:
    sql = """
    CREATE TABLE IF NOT EXISTS tasker.named_steps (
        -- note about uuid_generate_v7
        named_step_uuid uuid DEFAULT tasker.uuid_generate_v7() NOT NULL,

        name character varying(128) NOT NULL,
        CONSTRAINT named_steps_pkey PRIMARY KEY (named_step_uuid),
        "Quoted" text,
        description text
    );
    """
    (table,) = _extract(sql)

    assert table.name == "named_steps"
    assert [column.name for column in table.columns] == [
        "named_step_uuid",
        "name",
        "description",
    ]
    assert [column.is_primary_key for column in table.columns] == [True, False, False]


def test_classify_column_type_uses_fixed_priority() -> None:
    # A uuid column whose default mentions text still classifies as uuid.
    assert classify_column_type("owner_uuid uuid DEFAULT 'text'::uuid", "tasker") == "uuid"
    assert classify_column_type("label character varying(32)", "tasker") == "varchar"
    assert classify_column_type("label character  varying", "tasker") == "varchar"
    assert classify_column_type("attempts integer DEFAULT 0", "tasker") == "integer"
    assert classify_column_type("note text DEFAULT 'boolean'", "tasker") == "boolean"
    assert classify_column_type("state tasker.step_state", "tasker") == "enum"
    assert classify_column_type("amount numeric(10, 2)", "tasker") == "other"


def test_transition_is_pure_and_ends_on_closing_paren() -> None:
    state, event = transition(
        ScanState.SCANNING,
        "CREATE TABLE tasker.tasks (",
        schema_name="tasker",
        pk_generators=("uuid_generate_v7",),
    )
    assert state is ScanState.IN_TABLE_BODY
    assert event == TableStart("tasks")

    state, event = transition(
        state,
        "    task_uuid uuid DEFAULT tasker.uuid_generate_v7() NOT NULL,",
        schema_name="tasker",
        pk_generators=("uuid_generate_v7",),
    )
    assert event == ColumnLine("task_uuid", "uuid", True)

    state, event = transition(
        state, ");", schema_name="tasker", pk_generators=("uuid_generate_v7",)
    )
    assert state is ScanState.SCANNING
    assert event is None


def test_columns_outside_a_table_are_ignored() -> None:
    sql = """
    CREATE TYPE tasker.kind AS ENUM (
        'alpha'
    );
    stray_column text
    """
    assert _extract(sql) == []
