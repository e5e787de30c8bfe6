"""Architectural decision record summary table."""

from __future__ import annotations

from typing import Dict

from ..extractors import DecisionRecordExtractor
from ..logging import log_progress
from ..models import SUMMARY_AI
from ..output import Document
from ..prompting.constants import ADR_AI_LIMIT, ADR_DETERMINISTIC_LIMIT, REQUEST_TIMEOUTS
from ..render import tables
from ..sources import ResolvedSources
from ..summarizer import SummaryRequest
from .base import Generator

AI_NOTE = (
    "> Summaries generated with Ollama (`{model}`). "
    "Set `SKIP_LLM=true` for deterministic summaries."
)
DETERMINISTIC_NOTE = "> Summaries extracted deterministically from Decision sections."


class AdrSummaryGenerator(Generator):
    name = "adr-summary"
    output_filename = "adr-summary.md"
    title = "Architectural Decision Records"
    origin = "architectural decision records"
    request_timeout = REQUEST_TIMEOUTS["adr"]

    def required_directories(self) -> Dict[str, str]:
        return {"decisions": self.config.decisions.directory}

    def build(self, sources: ResolvedSources) -> tuple[Document, int]:
        decisions = self.config.decisions
        directory = sources.directory("decisions")
        records = DecisionRecordExtractor(decisions.pattern).extract(directory)
        self.logger.info("  Found %d decision records", len(records))

        intro = (
            "This page summarizes the Architectural Decision Records (ADRs) from the "
            f"{self.config.project_name} project.\n"
            "Each ADR documents a significant design decision, its context, and consequences."
        )
        document = self.new_document(f"{self.source_label} ADR files", intro)

        if not records:
            document.add(f"No decision records found in `{self.relative_source(directory)}`.")
            return document, 0

        summarizer = self.start_summarizer()
        prompts = self.context.prompts()
        for index, record in enumerate(records, start=1):
            if summarizer.mode == SUMMARY_AI:
                log_progress(self.logger, index, len(records), "Summarizing: %s...", record.title)
            request = SummaryRequest(
                subject=record.title,
                prompt=prompts.adr_summary(record.title, record.excerpt),
                fallback=record.decision_line,
                deterministic_limit=ADR_DETERMINISTIC_LIMIT,
                ai_limit=ADR_AI_LIMIT,
                flatten=True,
            )
            record.summary = summarizer.summarize(request).text

        document.add(tables.adr_table(records, decisions.link_prefix))
        if summarizer.mode == SUMMARY_AI:
            document.mode_note = AI_NOTE.format(model=summarizer.model)
        else:
            document.mode_note = DETERMINISTIC_NOTE
        return document, len(records)


__all__ = ["AdrSummaryGenerator"]
