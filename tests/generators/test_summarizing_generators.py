"""End-to-end tests for the generators that can use the local model."""

from __future__ import annotations

import pytest

from refgen.config import ConfigurationError
from refgen.generators import (
    AdrSummaryGenerator,
    ConfigGuideGenerator,
    ErrorGuideGenerator,
    GeneratorContext,
)
from refgen.llm import SummarizationUnavailable
from tests._fixtures.runners import StubRunner


@pytest.fixture
def no_network(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("network access")

    monkeypatch.setattr("refgen.llm.runner.urlopen", fail)


def _context(source_tree, runner=None, **env) -> GeneratorContext:
    return GeneratorContext(source_tree.config(**env), runner=runner)


def _run(generator_cls, context):
    try:
        result = generator_cls(context).run()
    finally:
        context.workspace.cleanup()
    return result, result.path.read_text(encoding="utf-8")


def test_error_guide_deterministic(source_tree, no_network) -> None:
    result, content = _run(ErrorGuideGenerator, _context(source_tree))

    assert result.entity_count == 2
    assert result.path.name == "error-troubleshooting-guide.md"
    assert "### TaskerError\n\nTop-level error for the Tasker system." in content
    assert "| `DatabaseError` | Database error: {0} |" in content
    assert "| `Io` | (complex format) |" in content
    assert "| `Timeout` | Timeout after {0}s — retrying |" in content
    assert "ShouldNotAppear" not in content
    assert "> Error messages extracted deterministically" in content
    assert content.endswith("error definitions (deterministic mode)*\n")


def test_error_guide_ai_with_single_fallback(source_tree) -> None:
    runner = StubRunner(
        [SummarizationUnavailable("status 500"), "Overview of failures.\n\n| Variant | Cause |"]
    )
    context = _context(source_tree, runner, SKIP_LLM="false")

    result, content = _run(ErrorGuideGenerator, context)

    assert runner.probes == 1
    assert len(runner.prompts) == 2
    assert "`TaskerError`" in runner.prompts[0]
    assert "/// Top-level error for the Tasker system." in runner.prompts[0]
    assert runner.timeouts == [120.0, 120.0]
    assert "| `DatabaseError` | Database error: {0} |" in content
    assert "### ExecutionError" in content
    assert "Overview of failures.\n\n| Variant | Cause |" in content
    assert "> Troubleshooting guidance generated with Ollama (`stub-model`)." in content
    assert result.fallbacks == 1
    assert content.endswith("(AI-assisted mode, 1 deterministic fallback)*\n")


def test_config_guide_deterministic(source_tree, no_network) -> None:
    result, content = _run(ConfigGuideGenerator, _context(source_tree))

    assert result.entity_count == 4
    assert "Settings are grouped by context: **Common**, **Orchestration**, **Worker**." in content
    assert "## Common Configuration" in content
    assert "| **DatabaseConfig** | Database connection settings. | 2 |" in content
    assert "| **CommonMarker** | Marker type. | — |" in content
    assert "| **WebConfig** | Orchestration web server settings. | 3 |" in content
    assert "| **WorkerConfig** |  | 1 |" in content
    assert content.index("## Orchestration Configuration") < content.index("## Worker Configuration")
    assert "> Struct summaries extracted deterministically from doc comments." in content


def test_config_guide_ai(source_tree) -> None:
    runner = StubRunner(["Common  advice.", "Orchestration advice.", "Worker advice."])
    context = _context(source_tree, runner, SKIP_LLM="false")

    result, content = _run(ConfigGuideGenerator, context)

    assert "## Common Configuration\n\nCommon advice.\n\n---" in content
    assert "the Worker configuration section" in runner.prompts[2]
    assert "pub struct WorkerConfig" in runner.prompts[2]
    assert "DatabaseConfig" not in runner.prompts[2]
    assert result.mode == "ai"
    assert content.endswith("(AI-assisted mode)*\n")


def test_config_guide_missing_marker_is_an_error(source_tree) -> None:
    source_tree.write({"tasker-shared/src/config/tasker.rs": "// COMMON CONFIGURATION\n"})

    with pytest.raises(ConfigurationError):
        _run(ConfigGuideGenerator, _context(source_tree))


def test_adr_summary_deterministic(source_tree, no_network) -> None:
    result, content = _run(AdrSummaryGenerator, _context(source_tree))

    assert result.entity_count == 2
    assert "| # | Title | Status | Summary |" in content
    assert (
        "| 1 | [Actor-Based Orchestration](../decisions/adr-001-actor-pattern.md) | Accepted "
        "| Adopt lightweight actors for each orchestration concern. |"
    ) in content
    assert "| 2 | [Record Without Decision](../decisions/adr-002-no-decision.md) | Superseded |  |" in content
    assert "> Summaries extracted deterministically from Decision sections." in content


def test_adr_summary_ai_flattens_answers(source_tree) -> None:
    runner = StubRunner(["Adopted actors.\nBecause | isolation.", "Kept as is."])
    context = _context(source_tree, runner, SKIP_LLM="false")

    _, content = _run(AdrSummaryGenerator, context)

    assert "| Accepted | Adopted actors. Because — isolation. |" in content
    assert "| Superseded | Kept as is. |" in content
    assert "Title: Actor-Based Orchestration." in runner.prompts[0]
    assert "> Summaries generated with Ollama (`stub-model`)." in content


def test_adr_summary_empty_directory_skips_probe(source_tree) -> None:
    decisions = source_tree.source_root / "docs" / "decisions"
    for record in decisions.iterdir():
        record.unlink()
    runner = StubRunner([])

    result, content = _run(AdrSummaryGenerator, _context(source_tree, runner, SKIP_LLM="false"))

    assert result.entity_count == 0
    assert runner.probes == 0
    assert "No decision records found in `docs/decisions`." in content


def test_unreachable_model_produces_deterministic_output(source_tree) -> None:
    runner = StubRunner([], available=False)

    result, content = _run(AdrSummaryGenerator, _context(source_tree, runner, SKIP_LLM="false"))

    assert result.mode == "deterministic"
    assert runner.prompts == []
    assert "Adopt lightweight actors for each orchestration concern." in content
