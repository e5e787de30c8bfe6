"""Common generator flow: resolve sources, build a document, write it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Dict, Optional

from ..config import RefGenConfig
from ..llm import OllamaRunner
from ..logging import get_logger
from ..models import SUMMARY_AI, SUMMARY_DETERMINISTIC
from ..output import Document, OutputWriter
from ..prompting import PromptBuilder
from ..sources import ResolvedSources, SourceResolver
from ..summarizer import FallbackSummarizer, build_summarizer
from ..workspace import ScratchWorkspace


@dataclass
class GeneratorContext:
    """Shared collaborators for every generator in one process."""

    config: RefGenConfig
    workspace: ScratchWorkspace = field(default_factory=ScratchWorkspace)
    runner: Optional[OllamaRunner] = None
    prompt_builder: Optional[PromptBuilder] = None

    def prompts(self) -> PromptBuilder:
        if self.prompt_builder is None:
            self.prompt_builder = PromptBuilder(project_name=self.config.project_name)
        return self.prompt_builder


@dataclass
class GenerationResult:
    name: str
    path: Path
    entity_count: int
    mode: str = SUMMARY_DETERMINISTIC
    fallbacks: int = 0


def mode_label(mode: str, fallbacks: int = 0) -> str:
    if mode != SUMMARY_AI:
        return "deterministic mode"
    if fallbacks:
        noun = "fallback" if fallbacks == 1 else "fallbacks"
        return f"AI-assisted mode, {fallbacks} deterministic {noun}"
    return "AI-assisted mode"


class Generator(ABC):
    """One reference page.

    Subclasses declare the source paths they need and build the document;
    missing sources abort before anything is written.
    """

    name: ClassVar[str]
    output_filename: ClassVar[str]
    title: ClassVar[str]
    origin: ClassVar[str]
    request_timeout: ClassVar[float] = 60.0

    def __init__(self, context: GeneratorContext) -> None:
        self.context = context
        self.config = context.config
        self.logger = get_logger(f"generators.{self.name}")
        self.summarizer: Optional[FallbackSummarizer] = None

    def required_files(self) -> Dict[str, str]:
        return {}

    def required_directories(self) -> Dict[str, str]:
        return {}

    @abstractmethod
    def build(self, sources: ResolvedSources) -> tuple[Document, int]:
        """Return the finished document and the number of entities it covers."""

    def run(self) -> GenerationResult:
        self.logger.info("Generating %s...", self.title.lower())
        resolver = SourceResolver(self.config.source_dir)
        sources = resolver.resolve(self.required_files(), self.required_directories())
        for path in [*sources.files.values(), *sources.directories.values()]:
            self.logger.info("  Source: %s", path)

        document, count = self.build(sources)
        mode = self.summarizer.mode if self.summarizer else SUMMARY_DETERMINISTIC
        fallbacks = self.summarizer.fallbacks if self.summarizer else 0
        document.source_description += f" ({mode_label(mode, fallbacks)})"

        path = OutputWriter(self.config.output_dir).write(self.output_filename, document)
        self.logger.info("%s generated (%d entities).", self.title, count)
        return GenerationResult(
            name=self.name, path=path, entity_count=count, mode=mode, fallbacks=fallbacks
        )

    def new_document(self, source_description: str, intro: str = "") -> Document:
        return Document(
            title=self.title,
            generator=self.name,
            origin=self.origin,
            source_description=source_description,
            intro=intro,
        )

    def start_summarizer(self) -> FallbackSummarizer:
        self.summarizer = build_summarizer(
            self.config.llm,
            timeout=self.request_timeout,
            label=self.name,
            workspace=self.context.workspace,
            runner=self.context.runner,
        )
        return self.summarizer

    def relative_source(self, path: Path) -> str:
        try:
            return path.relative_to(self.config.source_dir).as_posix()
        except ValueError:
            return path.as_posix()

    @property
    def source_label(self) -> str:
        return self.config.source_dir.name or "source"


__all__ = ["GenerationResult", "Generator", "GeneratorContext", "mode_label"]
