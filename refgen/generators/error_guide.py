"""Error troubleshooting guide, one section per error enum."""

from __future__ import annotations

from typing import Dict

from ..extractors import EnumExtractor
from ..logging import log_progress
from ..models import SUMMARY_AI, EnumEntity
from ..output import Document
from ..prompting.constants import REQUEST_TIMEOUTS
from ..render import tables
from ..sources import ResolvedSources
from ..summarizer import SummaryRequest
from .base import Generator

AI_NOTE = (
    "> Troubleshooting guidance generated with Ollama (`{model}`). "
    "Set `SKIP_LLM=true` for deterministic output."
)
DETERMINISTIC_NOTE = (
    "> Error messages extracted deterministically from `#[error(...)]` annotations."
)


def enum_definition(entity: EnumEntity) -> str:
    """Source text sent to the model: doc header followed by the enum body."""
    header = f"/// {entity.doc_summary}\n" if entity.doc_summary else ""
    return header + entity.body


def deterministic_section(entity: EnumEntity) -> str:
    if not entity.variants:
        return "No annotated variants found."
    return tables.variant_table(entity.variants)


class ErrorGuideGenerator(Generator):
    name = "error-guide"
    output_filename = "error-troubleshooting-guide.md"
    title = "Error Troubleshooting Guide"
    origin = "Rust error definitions"
    request_timeout = REQUEST_TIMEOUTS["error"]

    def required_files(self) -> Dict[str, str]:
        return {"errors": self.config.errors.file}

    def build(self, sources: ResolvedSources) -> tuple[Document, int]:
        path = sources.file("errors")
        enums = EnumExtractor(boundary=self.config.errors.boundary).extract_file(path)
        self.logger.info("  Found %d error enums", len(enums))

        intro = (
            "This guide lists the errors raised by the "
            f"{self.config.project_name} workflow orchestration system, grouped by the enum "
            "that declares them and ordered as they appear in the source. When "
            "troubleshooting, start with the most specific error type and work outward."
        )
        document = self.new_document(f"{self.source_label} error definitions", intro)
        if not enums:
            document.add(f"No error enums found in `{self.relative_source(path)}`.")
            return document, 0

        summarizer = self.start_summarizer()
        prompts = self.context.prompts()
        for index, entity in enumerate(enums, start=1):
            if summarizer.mode == SUMMARY_AI:
                log_progress(
                    self.logger,
                    index,
                    len(enums),
                    "Generating guide for %s (%d variants)...",
                    entity.name,
                    len(entity.variants),
                )
            request = SummaryRequest(
                subject=entity.name,
                prompt=prompts.error_guide(entity.name, enum_definition(entity)),
                fallback=deterministic_section(entity),
                collapse=True,
            )
            summary = summarizer.summarize(request)
            document.add(f"### {entity.name}")
            if entity.doc_summary:
                document.add(entity.doc_summary)
            document.add(summary.text, "---")

        if summarizer.mode == SUMMARY_AI:
            document.mode_note = AI_NOTE.format(model=summarizer.model)
        else:
            document.mode_note = DETERMINISTIC_NOTE
        return document, len(enums)


__all__ = ["ErrorGuideGenerator", "deterministic_section", "enum_definition"]
