"""Workspace member and intra-workspace dependency extraction from Cargo manifests."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..config import ConfigurationError, CrateConfig
from ..logging import get_logger
from ..models import CrateEntity, DependencyEdge

CATEGORY_CORE = "Core Library"
CATEGORY_SERVICE = "Service"
CATEGORY_WORKER = "FFI Worker"

CATEGORY_ORDER = (CATEGORY_CORE, CATEGORY_SERVICE, CATEGORY_WORKER)

_logger = get_logger("extractors.workspace")


@dataclass
class WorkspaceGraph:
    """Workspace members in manifest order plus edges between members."""

    crates: List[CrateEntity] = field(default_factory=list)
    edges: List[DependencyEdge] = field(default_factory=list)

    def by_category(self, category: str) -> List[CrateEntity]:
        return [crate for crate in self.crates if crate.category == category]


def classify_member(
    member_path: str,
    crate_name: str,
    *,
    core_members: Sequence[str],
    worker_prefixes: Sequence[str],
) -> str:
    """Group a member for display; the grouping carries no semantic weight."""
    normalized = member_path.replace("\\", "/").strip("/")
    if any(normalized.startswith(prefix) for prefix in worker_prefixes):
        return CATEGORY_WORKER
    if normalized in core_members or crate_name in core_members:
        return CATEGORY_CORE
    return CATEGORY_SERVICE


def read_members(root: Path, manifest: Dict[str, Any]) -> List[str]:
    """Return member paths declared by the root manifest, expanding simple globs."""
    workspace = manifest.get("workspace")
    if not isinstance(workspace, dict):
        return []
    raw_members = workspace.get("members") or []
    members: List[str] = []
    for entry in raw_members:
        if not isinstance(entry, str) or entry in {".", "./"}:
            continue
        if any(char in entry for char in "*?["):
            expanded = sorted(
                path.relative_to(root).as_posix()
                for path in root.glob(entry)
                if (path / "Cargo.toml").is_file()
            )
            members.extend(expanded)
        else:
            members.append(entry.rstrip("/"))
    return members


def local_path_dependencies(manifest: Dict[str, Any]) -> List[str]:
    """Return ``[dependencies]`` keys declared with a ``path`` (registry deps excluded)."""
    dependencies = manifest.get("dependencies")
    if not isinstance(dependencies, dict):
        return []
    return [
        key
        for key, spec in dependencies.items()
        if isinstance(spec, dict) and "path" in spec
    ]


def _load_toml(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


class WorkspaceDependencyExtractor:
    """Builds the member list and member-to-member edges for one workspace root."""

    def __init__(self, crates: CrateConfig | None = None) -> None:
        self.crates_config = crates or CrateConfig()

    def extract(self, root: Path) -> WorkspaceGraph:
        manifest_path = root / "Cargo.toml"
        try:
            root_manifest = _load_toml(manifest_path)
        except FileNotFoundError as exc:
            raise ConfigurationError(
                f"Workspace manifest not found: {manifest_path}", path=manifest_path
            ) from exc
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(
                f"Workspace manifest is unreadable: {manifest_path}: {exc}", path=manifest_path
            ) from exc

        graph = WorkspaceGraph()
        for index, member in enumerate(read_members(root, root_manifest)):
            graph.crates.append(self._load_member(root, member, index))

        known = {crate.name for crate in graph.crates}
        for crate in graph.crates:
            for dependency in crate.path_dependencies:
                if dependency in known:
                    graph.edges.append(DependencyEdge(from_module=crate.name, to_module=dependency))
        return graph

    def _load_member(self, root: Path, member: str, index: int) -> CrateEntity:
        manifest_path = root / member / "Cargo.toml"
        name = f"unknown-{index}"
        dependencies: List[str] = []
        if manifest_path.is_file():
            try:
                data = _load_toml(manifest_path)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                _logger.warning("Skipping unreadable member manifest %s: %s", manifest_path, exc)
            else:
                package = data.get("package")
                declared = package.get("name") if isinstance(package, dict) else None
                name = declared if isinstance(declared, str) and declared else Path(member).name
                dependencies = local_path_dependencies(data)
        else:
            _logger.debug("Member manifest missing: %s", manifest_path)

        category = classify_member(
            member,
            name,
            core_members=self.crates_config.core_members,
            worker_prefixes=self.crates_config.worker_prefixes,
        )
        return CrateEntity(
            name=name,
            member_path=member,
            category=category,
            path_dependencies=dependencies,
        )


__all__ = [
    "CATEGORY_CORE",
    "CATEGORY_ORDER",
    "CATEGORY_SERVICE",
    "CATEGORY_WORKER",
    "WorkspaceDependencyExtractor",
    "WorkspaceGraph",
    "classify_member",
    "local_path_dependencies",
    "read_members",
]
