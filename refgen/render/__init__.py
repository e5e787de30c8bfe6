"""Pure renderers from entity lists to Mermaid diagrams and markdown tables."""

from . import mermaid, tables

__all__ = ["mermaid", "tables"]
