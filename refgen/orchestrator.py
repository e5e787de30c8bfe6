"""Runs one or more generators sequentially against a docs repository."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping

from .config import RefGenConfig, load_config, load_environment
from .generators import DEFAULT_PIPELINE, GENERATORS, GenerationResult, GeneratorContext
from .llm import OllamaRunner
from .logging import get_logger
from .prompting import PromptBuilder
from .workspace import ScratchWorkspace


class Orchestrator:
    """Coordinates generator runs that share one scratch workspace."""

    def __init__(
        self,
        config: RefGenConfig,
        *,
        workspace: ScratchWorkspace | None = None,
        runner: OllamaRunner | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.config = config
        self.context = GeneratorContext(
            config=config,
            workspace=workspace or ScratchWorkspace(),
            runner=runner,
            prompt_builder=prompt_builder,
        )
        self.logger = get_logger("orchestrator")

    @classmethod
    def for_root(
        cls,
        root: Path,
        *,
        environ: Mapping[str, str] | None = None,
        **kwargs: object,
    ) -> "Orchestrator":
        """Load `.env` and `.refgen.yml` for ``root`` and build an orchestrator."""
        root = root.expanduser().resolve()
        if environ is None:
            load_environment(root)
        config = load_config(root, environ)
        return cls(config, **kwargs)  # type: ignore[arg-type]

    def run(self, name: str) -> GenerationResult:
        try:
            generator_cls = GENERATORS[name]
        except KeyError as exc:
            raise ValueError(f"Unknown generator '{name}'") from exc
        self.logger.debug("Running generator %s", name)
        return generator_cls(self.context).run()

    def run_many(self, names: Iterable[str] = DEFAULT_PIPELINE) -> List[GenerationResult]:
        """Run generators in order; the first failure stops the pipeline."""
        results: List[GenerationResult] = []
        for name in names:
            results.append(self.run(name))
        return results

    def close(self) -> None:
        self.context.workspace.cleanup()


__all__ = ["Orchestrator"]
