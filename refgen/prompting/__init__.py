"""Prompt construction for the AI-assisted summaries."""

from .builder import PromptBuilder

__all__ = ["PromptBuilder"]
