"""Locate and validate the external source tree a generator reads from."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping

from .config import SOURCE_DIR_ENV, ConfigurationError
from .logging import get_logger


@dataclass
class ResolvedSources:
    """Validated absolute paths keyed by the names a generator asked for."""

    root: Path
    files: Dict[str, Path] = field(default_factory=dict)
    directories: Dict[str, Path] = field(default_factory=dict)

    def file(self, key: str) -> Path:
        return self.files[key]

    def directory(self, key: str) -> Path:
        return self.directories[key]


class SourceResolver:
    """Checks required files and directories before any parsing starts."""

    def __init__(self, source_dir: Path, *, env_var: str = SOURCE_DIR_ENV) -> None:
        self.source_dir = source_dir
        self.env_var = env_var
        self.logger = get_logger("sources")

    def resolve(
        self,
        files: Mapping[str, str] | None = None,
        directories: Mapping[str, str] | None = None,
    ) -> ResolvedSources:
        """Return absolute paths for every requirement or raise on the first missing one."""
        if not self.source_dir.is_dir():
            raise ConfigurationError(
                f"Source tree not found at {self.source_dir}",
                path=self.source_dir,
                env_var=self.env_var,
            )

        resolved = ResolvedSources(root=self.source_dir)
        for key, relative in (files or {}).items():
            resolved.files[key] = self.require_file(relative)
        for key, relative in (directories or {}).items():
            resolved.directories[key] = self.require_directory(relative)
        self.logger.debug(
            "Resolved %d files and %d directories under %s",
            len(resolved.files),
            len(resolved.directories),
            self.source_dir,
        )
        return resolved

    def require_file(self, relative: str) -> Path:
        path = self.source_dir / relative
        if not path.is_file():
            raise ConfigurationError(
                f"Required source file not found: {path}",
                path=path,
                env_var=self.env_var,
            )
        if not os.access(path, os.R_OK):
            raise ConfigurationError(
                f"Required source file is not readable: {path}",
                path=path,
                env_var=self.env_var,
            )
        return path

    def require_directory(self, relative: str) -> Path:
        path = self.source_dir / relative
        if not path.is_dir():
            raise ConfigurationError(
                f"Required source directory not found: {path}",
                path=path,
                env_var=self.env_var,
            )
        return path


__all__ = ["ResolvedSources", "SourceResolver"]
