"""State machine page: one diagram and transition table per machine."""

from __future__ import annotations

from typing import Dict

from ..extractors import StateTransitionExtractor
from ..output import Document
from ..render import mermaid, tables
from ..sources import ResolvedSources
from .base import Generator


class StateMachineGenerator(Generator):
    name = "state-machines"
    output_filename = "state-machine-diagrams.md"
    title = "State Machine Diagrams"
    origin = "Rust source analysis"

    def required_files(self) -> Dict[str, str]:
        return {machine.key: machine.file for machine in self.config.state_machines}

    def build(self, sources: ResolvedSources) -> tuple[Document, int]:
        machines = self.config.state_machines
        intro = (
            f"{self.config.project_name} uses {len(machines)} state machines to manage the "
            "lifecycle of its workflow entities. Transitions are read from the `match` "
            "block of each machine's Rust source."
        )
        document = self.new_document(f"{self.source_label} Rust source analysis", intro)

        total = 0
        for machine in machines:
            extractor = StateTransitionExtractor(
                machine.qualifiers,
                start_sentinel=machine.start_sentinel,
                end_sentinel=machine.end_sentinel,
            )
            path = sources.file(machine.key)
            transitions = extractor.extract_file(path)
            self.logger.info("  %s: %d transitions", machine.title, len(transitions))
            total += len(transitions)

            document.add(f"## {machine.title}")
            if machine.description:
                document.add(machine.description)
            if not transitions:
                document.add(f"No transitions found in `{self.relative_source(path)}`.")
                continue
            document.add(
                mermaid.state_diagram(
                    transitions,
                    initial_state=machine.initial_state,
                    terminal_states=machine.terminal_states,
                    key_states=machine.key_states,
                ),
                f"### {machine.title} Transitions",
                tables.transition_table(transitions),
            )
        return document, total


__all__ = ["StateMachineGenerator"]
