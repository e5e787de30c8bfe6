"""Shared constants for AI prompting and deterministic fallbacks."""

from __future__ import annotations

# Upper bounds, in bytes, of source text sent with each prompt.
EXCERPT_BYTES: dict[str, int] = {
    "adr": 2000,
    "error": 3000,
    "config": 4000,
}

REQUEST_TIMEOUTS: dict[str, float] = {
    "adr": 60.0,
    "error": 120.0,
    "config": 120.0,
}

WORD_LIMITS: dict[str, int] = {
    "error": 600,
    "config": 800,
}

ADR_DETERMINISTIC_LIMIT = 120
ADR_AI_LIMIT = 200


__all__ = [
    "ADR_AI_LIMIT",
    "ADR_DETERMINISTIC_LIMIT",
    "EXCERPT_BYTES",
    "REQUEST_TIMEOUTS",
    "WORD_LIMITS",
]
