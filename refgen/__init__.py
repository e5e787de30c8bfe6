"""Reference documentation generators for a collaborating codebase."""

__version__ = "0.1.0"
