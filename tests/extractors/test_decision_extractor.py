"""Tests for decision record extraction."""

from __future__ import annotations

from refgen.extractors.decisions import (
    DecisionRecordExtractor,
    decision_line,
    record_number,
    record_title,
)


def test_records_are_read_in_filename_order(source_tree) -> None:
    records = DecisionRecordExtractor().extract(source_tree.source_root / "docs" / "decisions")

    assert [record.number for record in records] == ["1", "2"]
    first, second = records
    assert first.title == "Actor-Based Orchestration"
    assert first.status == "Accepted"
    assert first.stem == "adr-001-actor-pattern"
    assert first.decision_line == "Adopt lightweight actors for each orchestration concern."
    assert "Orchestration logic was spread" in first.excerpt
    assert "More message types" not in first.excerpt
    assert second.status == "Superseded"


def test_record_without_decision_heading_has_empty_line(source_tree) -> None:
    records = DecisionRecordExtractor().extract(source_tree.source_root / "docs" / "decisions")

    assert records[1].decision_line == ""


def test_title_falls_back_to_filename() -> None:
    assert record_title(["No headings here"], "adr-007-queue-backpressure") == "queue backpressure"
    assert record_title(["## ADR 12: Retry Budgets"], "adr-012-x") == "Retry Budgets"


def test_number_strips_leading_zeros() -> None:
    assert record_number("adr-0042-something") == "42"
    assert record_number("notes") == "notes"


def test_decision_line_stops_at_next_heading() -> None:
    lines = ["## decision", "", "## Consequences", "Later text"]

    assert decision_line(lines) == ""


def test_status_defaults_to_accepted(tmp_path) -> None:
    (tmp_path / "adr-003-x.md").write_text("# Title\n\n## Decision\nDo it.\n", encoding="utf-8")

    (record,) = DecisionRecordExtractor().extract(tmp_path)

    assert record.status == "Accepted"
    assert record.decision_line == "Do it."
