"""Workspace dependency graph page."""

from __future__ import annotations

from typing import Dict

from ..extractors import WorkspaceDependencyExtractor
from ..extractors.workspace_deps import CATEGORY_CORE, CATEGORY_SERVICE, CATEGORY_WORKER
from ..output import Document
from ..render import mermaid, tables
from ..sources import ResolvedSources
from .base import Generator


class CrateDependencyGenerator(Generator):
    name = "crate-deps"
    output_filename = "crate-dependency-graph.md"
    title = "Crate Dependency Graph"
    origin = "`Cargo.toml` workspace analysis"

    def required_files(self) -> Dict[str, str]:
        return {"manifest": "Cargo.toml"}

    def build(self, sources: ResolvedSources) -> tuple[Document, int]:
        graph = WorkspaceDependencyExtractor(self.config.crates).extract(sources.root)
        self.logger.info(
            "  Found %d crates and %d internal edges", len(graph.crates), len(graph.edges)
        )

        intro = (
            "This diagram shows the inter-crate dependency structure of the "
            f"{self.source_label} workspace.\n"
            'Arrows point from dependent to dependency (A → B means "A depends on B").'
        )
        document = self.new_document(f"{self.source_label} workspace analysis", intro)

        if not graph.crates:
            document.add("No workspace members found in `Cargo.toml`.")
            return document, 0

        document.add(
            mermaid.dependency_graph(
                graph.by_category(CATEGORY_CORE),
                graph.by_category(CATEGORY_SERVICE),
                graph.by_category(CATEGORY_WORKER),
                graph.edges,
            ),
            "## Workspace Crates",
            tables.crate_table(graph.crates),
        )
        return document, len(graph.crates)


__all__ = ["CrateDependencyGenerator"]
