"""Per-process scratch directory for AI exchange transcripts."""

from __future__ import annotations

import atexit
import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from .logging import get_logger


class ScratchWorkspace:
    """Temporary directory created on first use and removed at process exit."""

    def __init__(self, prefix: str = "refgen-") -> None:
        self.prefix = prefix
        self._path: Optional[Path] = None
        self._counters: Dict[str, int] = {}
        self.logger = get_logger("workspace")

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = Path(tempfile.mkdtemp(prefix=self.prefix))
            atexit.register(self.cleanup)
            self.logger.debug("Scratch workspace at %s", self._path)
        return self._path

    @property
    def created(self) -> bool:
        return self._path is not None

    def next_index(self, label: str) -> int:
        index = self._counters.get(label, 0) + 1
        self._counters[label] = index
        return index

    def write_json(self, name: str, payload: Any) -> Path:
        target = self.path / name
        target.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        return target

    def cleanup(self) -> None:
        if self._path is None:
            return
        shutil.rmtree(self._path, ignore_errors=True)
        self.logger.debug("Removed scratch workspace %s", self._path)
        self._path = None


__all__ = ["ScratchWorkspace"]
