"""Builds summarization prompts from Jinja templates."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..summarizer import bound_excerpt
from .constants import EXCERPT_BYTES, WORD_LIMITS


class PromptBuilder:
    """Renders one prompt per summarized entity with a byte-bounded excerpt."""

    def __init__(self, templates_dir: Path | None = None, *, project_name: str = "Tasker") -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.project_name = project_name
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, **context: object) -> str:
        template = self._env.get_template(template_name)
        return template.render(project_name=self.project_name, **context).strip()

    def adr_summary(self, title: str, excerpt: str) -> str:
        return self.render(
            "adr_summary.j2",
            title=title,
            content=bound_excerpt(excerpt, EXCERPT_BYTES["adr"]),
        )

    def error_guide(self, enum_name: str, definition: str) -> str:
        return self.render(
            "error_guide.j2",
            enum_name=enum_name,
            content=bound_excerpt(definition, EXCERPT_BYTES["error"]),
            word_limit=WORD_LIMITS["error"],
        )

    def config_guide(self, section: str, source: str) -> str:
        return self.render(
            "config_guide.j2",
            section=section,
            content=bound_excerpt(source, EXCERPT_BYTES["config"]),
            word_limit=WORD_LIMITS["config"],
        )


__all__ = ["PromptBuilder"]
