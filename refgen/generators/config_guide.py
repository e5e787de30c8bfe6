"""Configuration operational guide, one section per configuration context."""

from __future__ import annotations

from typing import Dict

from ..extractors import ConfigStructExtractor
from ..logging import log_progress
from ..models import SUMMARY_AI, ConfigSection
from ..output import Document
from ..prompting.constants import REQUEST_TIMEOUTS
from ..render import tables
from ..sources import ResolvedSources
from ..summarizer import SummaryRequest
from .base import Generator

AI_NOTE = (
    "> Operational guidance generated with Ollama (`{model}`). "
    "Set `SKIP_LLM=true` for deterministic output."
)
DETERMINISTIC_NOTE = "> Struct summaries extracted deterministically from doc comments."


def deterministic_section(section: ConfigSection) -> str:
    if not section.structs:
        return "No configuration structs found in this section."
    return tables.struct_table(section.structs)


class ConfigGuideGenerator(Generator):
    name = "config-guide"
    output_filename = "config-operational-guide.md"
    title = "Configuration Operational Guide"
    origin = "Rust configuration source"
    request_timeout = REQUEST_TIMEOUTS["config"]

    def required_files(self) -> Dict[str, str]:
        return {"config": self.config.config_guide.file}

    def build(self, sources: ResolvedSources) -> tuple[Document, int]:
        path = sources.file("config")
        sections = ConfigStructExtractor(self.config.config_guide.sections).extract_file(path)
        counts = ", ".join(f"{len(s.structs)} {s.title.lower()}" for s in sections)
        self.logger.info("  Found structs: %s", counts)

        titles = ", ".join(f"**{section.title}**" for section in sections)
        intro = (
            "This guide provides operational tuning advice for the "
            f"{self.config.project_name} configuration. Settings are grouped by context: "
            f"{titles}."
        )
        document = self.new_document(f"{self.source_label} configuration source", intro)

        summarizer = self.start_summarizer()
        prompts = self.context.prompts()
        total = 0
        for index, section in enumerate(sections, start=1):
            total += len(section.structs)
            if summarizer.mode == SUMMARY_AI:
                log_progress(
                    self.logger,
                    index,
                    len(sections),
                    "Generating %s config guide...",
                    section.title.lower(),
                )
            request = SummaryRequest(
                subject=f"{section.title} configuration",
                prompt=prompts.config_guide(section.title, section.source),
                fallback=deterministic_section(section),
                collapse=True,
            )
            summary = summarizer.summarize(request)
            document.add(f"## {section.title} Configuration", summary.text, "---")

        if summarizer.mode == SUMMARY_AI:
            document.mode_note = AI_NOTE.format(model=summarizer.model)
        else:
            document.mode_note = DETERMINISTIC_NOTE
        return document, total


__all__ = ["ConfigGuideGenerator", "deterministic_section"]
