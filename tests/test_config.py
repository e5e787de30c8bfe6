"""Tests for refgen.config."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from refgen.config import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    ConfigurationError,
    RefGenConfig,
    load_config,
    load_environment,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, {})

    assert isinstance(config, RefGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.source_dir == tmp_path.resolve().parent / "tasker-core"
    assert config.output_dir == tmp_path.resolve() / "src" / "generated"
    assert config.project_name == "Tasker"
    assert config.llm.model == DEFAULT_MODEL
    assert config.llm.base_url == DEFAULT_BASE_URL
    assert config.llm.skip is False
    assert config.llm.request_timeout is None
    assert [machine.key for machine in config.state_machines] == ["task", "step"]
    assert config.schema.table_descriptions == {}


def test_environment_overrides_defaults(tmp_path: Path) -> None:
    source = tmp_path / "checkout"
    config = load_config(
        tmp_path,
        {
            "TASKER_CORE_DIR": str(source),
            "OLLAMA_MODEL": "llama3",
            "OLLAMA_HOST": "127.0.0.1:11434",
            "SKIP_LLM": "1",
        },
    )

    assert config.source_dir == source.resolve()
    assert config.llm.model == "llama3"
    assert config.llm.base_url == "http://127.0.0.1:11434"
    assert config.llm.skip is True


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".refgen.yml").write_text(
        """
source_dir: vendor/tasker-core
output_dir: docs/generated
project_name: Acme
llm:
  model: "mistral:7b"
  skip: true
  probe_timeout: 0.5
  request_timeout: 30
schema:
  name: acme
  pk_generators: gen_random_uuid
  table_descriptions:
    tasks: Units of work
crates:
  core_members: [acme-core]
  worker_prefixes: ["ffi/"]
decisions:
  directory: adr
  link_prefix: "/adr/"
errors:
  file: src/errors.rs
config_guide:
  file: src/config.rs
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path, {})

    assert config.source_dir == tmp_path.resolve() / "vendor" / "tasker-core"
    assert config.output_dir == tmp_path.resolve() / "docs" / "generated"
    assert config.project_name == "Acme"
    assert config.llm.model == "mistral:7b"
    assert config.llm.skip is True
    assert config.llm.probe_timeout == 0.5
    assert config.llm.request_timeout == 30.0
    assert config.schema.name == "acme"
    assert config.schema.pk_generators == ("gen_random_uuid",)
    assert config.schema.table_descriptions == {"tasks": "Units of work"}
    assert config.crates.core_members == ("acme-core",)
    assert config.crates.worker_prefixes == ("ffi/",)
    assert config.decisions.directory == "adr"
    assert config.decisions.link_prefix == "/adr/"
    assert config.errors.file == "src/errors.rs"
    assert config.config_guide.file == "src/config.rs"


def test_environment_wins_over_config_file(tmp_path: Path) -> None:
    (tmp_path / ".refgen.yml").write_text(
        "source_dir: from-file\nllm:\n  skip: true\n", encoding="utf-8"
    )

    config = load_config(tmp_path, {"TASKER_CORE_DIR": "/srv/tasker", "SKIP_LLM": "false"})

    assert config.source_dir == Path("/srv/tasker").resolve()
    assert config.llm.skip is False


def test_invalid_yaml_raises_configuration_error(tmp_path: Path) -> None:
    (tmp_path / ".refgen.yml").write_text("llm: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(tmp_path, {})


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".refgen.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(tmp_path, {})


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".refgen.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path, {}).project_name == "Tasker"


def test_dotenv_does_not_override_exported_variables(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("REFGEN_DOTENV_PROBE", "placeholder")
    monkeypatch.delenv("REFGEN_DOTENV_PROBE")
    monkeypatch.setenv("TASKER_CORE_DIR", "/from/shell")
    (tmp_path / ".env").write_text(
        "REFGEN_DOTENV_PROBE=loaded\nTASKER_CORE_DIR=/from/dotenv\n", encoding="utf-8"
    )

    assert load_environment(tmp_path) is True
    assert os.environ["REFGEN_DOTENV_PROBE"] == "loaded"
    assert os.environ["TASKER_CORE_DIR"] == "/from/shell"


def test_missing_dotenv_is_ignored(tmp_path: Path) -> None:
    assert load_environment(tmp_path) is False


def test_remediation_names_override_variable() -> None:
    error = ConfigurationError("Source tree not found at /x", env_var="TASKER_CORE_DIR")

    assert error.remediation() == (
        "Source tree not found at /x\nSet TASKER_CORE_DIR to point to your source checkout."
    )
