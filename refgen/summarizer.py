"""Deterministic and AI-assisted summarization with automatic fallback.

Callers always build the deterministic text themselves and hand it over in
the request, so the fallback never needs to know how a given generator
extracts facts. The AI path is attempted only when it was found reachable at
startup; any failure for a single entity degrades that entity alone.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .config import LLMConfig
from .llm import OllamaRunner, SummarizationUnavailable
from .logging import get_logger
from .models import SUMMARY_AI, SUMMARY_DETERMINISTIC, Summary
from .workspace import ScratchWorkspace

_SPACE_RUNS = re.compile(r" {2,}")


def truncate(text: str, limit: int | None) -> str:
    """Cap ``text`` at ``limit`` characters, keeping ``limit - 3`` plus an ellipsis."""
    if limit is None or len(text) <= limit:
        return text
    return text[: max(limit - 3, 0)] + "..."


def bound_excerpt(text: str, max_bytes: int) -> str:
    """Return at most ``max_bytes`` of UTF-8, never splitting a character."""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


def collapse_spaces(text: str) -> str:
    return _SPACE_RUNS.sub(" ", text)


def flatten_line(text: str) -> str:
    """Fold multi-line model output into one table-safe line."""
    return collapse_spaces(text.strip().replace("\n", " ").replace("|", "—"))


@dataclass
class SummaryRequest:
    """Everything either strategy needs to summarize one entity."""

    subject: str
    prompt: str
    fallback: str
    deterministic_limit: Optional[int] = None
    ai_limit: Optional[int] = None
    flatten: bool = False
    collapse: bool = False


class Summarizer(ABC):
    mode: str = SUMMARY_DETERMINISTIC

    @abstractmethod
    def summarize(self, request: SummaryRequest) -> Summary:
        """Return the summary for ``request``."""


class DeterministicSummarizer(Summarizer):
    """Network-free strategy; always succeeds, possibly with empty text."""

    mode = SUMMARY_DETERMINISTIC

    def summarize(self, request: SummaryRequest) -> Summary:
        return Summary(truncate(request.fallback, request.deterministic_limit), SUMMARY_DETERMINISTIC)


class AISummarizer(Summarizer):
    """Delegates to the local model; raises ``SummarizationUnavailable`` on any failure."""

    mode = SUMMARY_AI

    def __init__(
        self,
        runner: OllamaRunner,
        *,
        timeout: float,
        label: str = "summary",
        workspace: ScratchWorkspace | None = None,
    ) -> None:
        self.runner = runner
        self.timeout = timeout
        self.label = label
        self.workspace = workspace
        self.logger = get_logger("summarizer")

    def summarize(self, request: SummaryRequest) -> Summary:
        index = self._record_request(request)
        try:
            raw = self.runner.run(request.prompt, timeout=self.timeout)
        except SummarizationUnavailable as exc:
            self._record_response(index, {"error": str(exc)})
            raise
        except Exception as exc:
            self._record_response(index, {"error": repr(exc)})
            raise SummarizationUnavailable(f"{type(exc).__name__}: {exc}") from exc
        self._record_response(index, {"response": raw})

        text = raw.strip()
        if request.flatten:
            text = flatten_line(text)
        elif request.collapse:
            text = collapse_spaces(text)
        if not text:
            raise SummarizationUnavailable(f"Empty summary for {request.subject}")
        return Summary(truncate(text, request.ai_limit), SUMMARY_AI)

    def _record_request(self, request: SummaryRequest) -> int | None:
        if self.workspace is None:
            return None
        index = self.workspace.next_index(self.label)
        self.workspace.write_json(
            f"{self.label}-{index}-request.json",
            {"model": self.runner.model, "subject": request.subject, "prompt": request.prompt},
        )
        return index

    def _record_response(self, index: int | None, payload: dict) -> None:
        if self.workspace is None or index is None:
            return
        self.workspace.write_json(f"{self.label}-{index}-response.json", payload)


class FallbackSummarizer(Summarizer):
    """Tries the AI strategy first and substitutes the deterministic one per entity."""

    def __init__(self, primary: Summarizer | None, fallback: Summarizer | None = None) -> None:
        self.primary = primary
        self.fallback = fallback or DeterministicSummarizer()
        self.fallbacks = 0
        self.logger = get_logger("summarizer")

    @property
    def mode(self) -> str:  # type: ignore[override]
        return self.primary.mode if self.primary is not None else self.fallback.mode

    @property
    def model(self) -> str | None:
        runner = getattr(self.primary, "runner", None)
        return getattr(runner, "model", None)

    def summarize(self, request: SummaryRequest) -> Summary:
        if self.primary is None:
            return self.fallback.summarize(request)
        try:
            return self.primary.summarize(request)
        except SummarizationUnavailable as exc:
            self.fallbacks += 1
            self.logger.warning(
                "AI summary failed for %s (%s); using deterministic text", request.subject, exc
            )
            return self.fallback.summarize(request)


def build_summarizer(
    llm: LLMConfig,
    *,
    timeout: float,
    label: str,
    workspace: ScratchWorkspace | None = None,
    runner: OllamaRunner | None = None,
) -> FallbackSummarizer:
    """Choose the strategy for one generator run.

    With ``llm.skip`` set, no runner is built and no network call is made.
    """
    logger = get_logger("summarizer")
    if llm.skip:
        logger.info("Using deterministic summaries (SKIP_LLM is set)")
        return FallbackSummarizer(None)

    if runner is None:
        try:
            runner = OllamaRunner(
                llm.model, base_url=llm.base_url, probe_timeout=llm.probe_timeout
            )
        except SummarizationUnavailable as exc:
            logger.warning("%s; using deterministic summaries", exc)
            return FallbackSummarizer(None)

    if not runner.is_available():
        logger.info(
            "Ollama not reachable at %s; using deterministic summaries", runner.base_url
        )
        return FallbackSummarizer(None)

    logger.info("Ollama detected (model: %s); using AI-assisted summaries", runner.model)
    primary = AISummarizer(
        runner,
        timeout=llm.request_timeout or timeout,
        label=label,
        workspace=workspace,
    )
    return FallbackSummarizer(primary)


__all__ = [
    "AISummarizer",
    "DeterministicSummarizer",
    "FallbackSummarizer",
    "Summarizer",
    "SummaryRequest",
    "bound_excerpt",
    "build_summarizer",
    "collapse_spaces",
    "flatten_line",
    "truncate",
]
