"""Document assembly and atomic writes for generated reference pages."""

from __future__ import annotations

import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .logging import get_logger

COMMAND = "refgen"


@dataclass
class Document:
    """One generated markdown page: banner, content blocks, mode note, footer."""

    title: str
    generator: str
    origin: str
    source_description: str
    intro: str = ""
    blocks: List[str] = field(default_factory=list)
    mode_note: Optional[str] = None

    def add(self, *blocks: str) -> None:
        self.blocks.extend(block for block in blocks if block is not None)

    def banner(self) -> str:
        return "\n".join(
            [
                f"# {self.title}",
                "",
                f"> Auto-generated from {self.origin}. Do not edit manually.",
                ">",
                f"> Regenerate with: `{COMMAND} {self.generator}`",
            ]
        )

    def footer(self) -> str:
        return f"---\n\n*Generated by `{COMMAND} {self.generator}` from {self.source_description}*"

    def render(self) -> str:
        parts = [self.banner()]
        if self.intro:
            parts.append(self.intro.strip())
        parts.extend(block.strip("\n") for block in self.blocks)
        if self.mode_note:
            parts.append(self.mode_note)
        parts.append(self.footer())
        return normalize_markdown("\n\n".join(parts))


def normalize_markdown(markdown: str) -> str:
    """Unify newlines, strip trailing whitespace, and collapse blank runs outside fences."""
    normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
    cleaned: List[str] = []
    in_code = False
    previous_blank = False

    for line in normalized.split("\n"):
        stripped = line.rstrip()
        if stripped.startswith("```"):
            in_code = not in_code
            cleaned.append(stripped)
            previous_blank = False
            continue

        if not in_code and not stripped:
            if previous_blank:
                continue
            previous_blank = True
            cleaned.append("")
            continue

        cleaned.append(stripped)
        previous_blank = False

    while cleaned and cleaned[-1] == "":
        cleaned.pop()
    return "\n".join(cleaned) + "\n"


class OutputWriter:
    """Writes documents under the output directory, replacing files atomically."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.logger = get_logger("output")

    def write(self, filename: str, document: Document) -> Path:
        return self.write_text(filename, document.render())

    def write_text(self, filename: str, content: str) -> Path:
        target = self.output_dir / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(content)
            os.chmod(tmp_name, _file_mode(target))
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        self.logger.info("Output: %s", target)
        return target


def _file_mode(target: Path) -> int:
    """Keep an existing page's mode; new pages get the umask default like a shell redirect."""
    if target.exists():
        return stat.S_IMODE(target.stat().st_mode)
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


__all__ = ["COMMAND", "Document", "OutputWriter", "normalize_markdown"]
