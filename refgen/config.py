"""Configuration loading for refgen (environment, `.env`, `.refgen.yml`)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml
from dotenv import load_dotenv

CONFIG_FILENAME = ".refgen.yml"
ENV_FILENAME = ".env"

SOURCE_DIR_ENV = "TASKER_CORE_DIR"
MODEL_ENV = "OLLAMA_MODEL"
BASE_URL_ENV = "OLLAMA_HOST"
SKIP_LLM_ENV = "SKIP_LLM"

DEFAULT_SOURCE_DIR = "../tasker-core"
DEFAULT_OUTPUT_DIR = "src/generated"
DEFAULT_PROJECT_NAME = "Tasker"
DEFAULT_MODEL = "qwen2.5:14b"
DEFAULT_BASE_URL = "http://localhost:11434"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class ConfigurationError(RuntimeError):
    """Raised when a required source path is missing or configuration is unusable."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        env_var: str | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.env_var = env_var

    def remediation(self) -> str:
        """Return the message plus the override hint shown to operators."""
        lines = [str(self)]
        if self.env_var:
            lines.append(f"Set {self.env_var} to point to your source checkout.")
        return "\n".join(lines)


@dataclass
class LLMConfig:
    """Local summarization endpoint settings."""

    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    skip: bool = False
    probe_timeout: float = 2.0
    request_timeout: Optional[float] = None


@dataclass
class SchemaConfig:
    """Relational schema sources and classification hints."""

    name: str = "tasker"
    tables_file: str = "migrations/20260110000001_schema_and_tables.sql"
    constraints_file: str = "migrations/20260110000002_constraints_and_indexes.sql"
    pk_generators: Tuple[str, ...] = ("uuid_generate_v7", "uuidv7(")
    table_descriptions: Dict[str, str] = field(default_factory=dict)


@dataclass
class StateMachineConfig:
    """One state machine source file and how to render it."""

    key: str
    title: str
    file: str
    qualifiers: Tuple[str, ...]
    key_states: Tuple[str, ...]
    description: str = ""
    initial_state: str = "Pending"
    terminal_states: Tuple[str, ...] = ("Complete", "Error", "Cancelled", "ResolvedManually")
    start_sentinel: str = "let target = match"
    end_sentinel: str = "Ok(target)"


@dataclass
class CrateConfig:
    """Workspace grouping conventions for the dependency graph."""

    core_members: Tuple[str, ...] = ("tasker-shared", "tasker-pgmq")
    worker_prefixes: Tuple[str, ...] = ("workers/",)


@dataclass
class DecisionConfig:
    directory: str = "docs/decisions"
    pattern: str = "adr-*.md"
    link_prefix: str = "../decisions/"


@dataclass
class ErrorGuideConfig:
    file: str = "tasker-shared/src/errors.rs"
    boundary: str = "#[cfg(test)]"


@dataclass
class ConfigGuideConfig:
    file: str = "tasker-shared/src/config/tasker.rs"
    sections: Tuple[Tuple[str, str], ...] = (
        ("Common", "COMMON CONFIGURATION"),
        ("Orchestration", "ORCHESTRATION CONFIGURATION"),
        ("Worker", "WORKER CONFIGURATION"),
    )


def _default_state_machines() -> List[StateMachineConfig]:
    return [
        StateMachineConfig(
            key="task",
            title="Task State Machine",
            file="tasker-shared/src/state_machine/task_state_machine.rs",
            qualifiers=("TaskState", "TaskEvent"),
            key_states=(
                "Pending",
                "Initializing",
                "EnqueuingSteps",
                "StepsInProcess",
                "EvaluatingResults",
                "WaitingForDependencies",
                "WaitingForRetry",
                "BlockedByFailures",
            ),
            description=(
                "The task state machine manages the overall lifecycle of a task. Tasks progress "
                "from `Pending` through initialization, step enqueuing, processing, and evaluation "
                "phases, with support for dependency waiting, retry, and manual resolution."
            ),
        ),
        StateMachineConfig(
            key="step",
            title="Workflow Step State Machine",
            file="tasker-shared/src/state_machine/step_state_machine.rs",
            qualifiers=("WorkflowStepState", "StepEvent"),
            key_states=(
                "Pending",
                "Enqueued",
                "InProgress",
                "EnqueuedForOrchestration",
                "EnqueuedAsErrorForOrchestration",
                "WaitingForRetry",
            ),
            description=(
                "The workflow step state machine manages individual step execution. Workers "
                "execute steps and enqueue results for orchestration processing."
            ),
        ),
    ]


@dataclass
class RefGenConfig:
    """Effective settings for one refgen invocation."""

    root: Path
    source_dir: Path
    output_dir: Path
    project_name: str = DEFAULT_PROJECT_NAME
    llm: LLMConfig = field(default_factory=LLMConfig)
    schema: SchemaConfig = field(default_factory=SchemaConfig)
    state_machines: List[StateMachineConfig] = field(default_factory=_default_state_machines)
    crates: CrateConfig = field(default_factory=CrateConfig)
    decisions: DecisionConfig = field(default_factory=DecisionConfig)
    errors: ErrorGuideConfig = field(default_factory=ErrorGuideConfig)
    config_guide: ConfigGuideConfig = field(default_factory=ConfigGuideConfig)


def load_environment(root: Path) -> bool:
    """Load `<root>/.env` without overriding variables already exported."""
    env_file = root / ENV_FILENAME
    if not env_file.is_file():
        return False
    return load_dotenv(env_file, override=False)


def load_config(root: Path, environ: Mapping[str, str] | None = None) -> RefGenConfig:
    """Merge defaults, `.refgen.yml`, and environment variables for ``root``."""
    root = root.expanduser().resolve()
    env = os.environ if environ is None else environ
    data = _read_config(root / CONFIG_FILENAME)

    source_value = env.get(SOURCE_DIR_ENV) or _as_str(data.get("source_dir")) or DEFAULT_SOURCE_DIR
    output_value = _as_str(data.get("output_dir")) or DEFAULT_OUTPUT_DIR

    config = RefGenConfig(
        root=root,
        source_dir=_resolve_against(root, source_value),
        output_dir=_resolve_against(root, output_value),
        project_name=_as_str(data.get("project_name")) or DEFAULT_PROJECT_NAME,
    )

    llm_data = _as_dict(data.get("llm"))
    llm = config.llm
    llm.model = env.get(MODEL_ENV) or _as_str(llm_data.get("model")) or DEFAULT_MODEL
    llm.base_url = env.get(BASE_URL_ENV) or _as_str(llm_data.get("base_url")) or DEFAULT_BASE_URL
    if not llm.base_url.startswith(("http://", "https://")):
        llm.base_url = f"http://{llm.base_url}"
    skip = _as_bool(env.get(SKIP_LLM_ENV))
    if skip is None:
        skip = _as_bool(llm_data.get("skip"))
    llm.skip = bool(skip)
    llm.probe_timeout = _as_float(llm_data.get("probe_timeout")) or llm.probe_timeout
    llm.request_timeout = _as_float(llm_data.get("request_timeout"))

    schema_data = _as_dict(data.get("schema"))
    if schema_data:
        schema = config.schema
        schema.name = _as_str(schema_data.get("name")) or schema.name
        schema.tables_file = _as_str(schema_data.get("tables_file")) or schema.tables_file
        schema.constraints_file = (
            _as_str(schema_data.get("constraints_file")) or schema.constraints_file
        )
        generators = _as_str_list(schema_data.get("pk_generators"))
        if generators:
            schema.pk_generators = tuple(generators)
        descriptions = _as_dict(schema_data.get("table_descriptions"))
        schema.table_descriptions = {
            str(key): str(value) for key, value in descriptions.items() if value is not None
        }

    crates_data = _as_dict(data.get("crates"))
    if crates_data:
        core = _as_str_list(crates_data.get("core_members"))
        if core:
            config.crates.core_members = tuple(core)
        prefixes = _as_str_list(crates_data.get("worker_prefixes"))
        if prefixes:
            config.crates.worker_prefixes = tuple(prefixes)

    decisions_data = _as_dict(data.get("decisions"))
    if decisions_data:
        decisions = config.decisions
        decisions.directory = _as_str(decisions_data.get("directory")) or decisions.directory
        decisions.link_prefix = _as_str(decisions_data.get("link_prefix")) or decisions.link_prefix

    errors_data = _as_dict(data.get("errors"))
    if errors_data:
        config.errors.file = _as_str(errors_data.get("file")) or config.errors.file

    guide_data = _as_dict(data.get("config_guide"))
    if guide_data:
        config.config_guide.file = _as_str(guide_data.get("file")) or config.config_guide.file

    return config


def _read_config(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}", path=path) from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping at the root", path=path)
    return loaded


def _resolve_against(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "ConfigGuideConfig",
    "ConfigurationError",
    "CrateConfig",
    "DecisionConfig",
    "ErrorGuideConfig",
    "LLMConfig",
    "RefGenConfig",
    "SchemaConfig",
    "StateMachineConfig",
    "load_config",
    "load_environment",
]
