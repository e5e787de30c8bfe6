"""Local LLM runner adapter."""

from .runner import GenerateRequest, OllamaRunner, SummarizationUnavailable

__all__ = ["GenerateRequest", "OllamaRunner", "SummarizationUnavailable"]
