"""Tests for source tree validation."""

from __future__ import annotations

import pytest

from refgen.config import ConfigurationError
from refgen.sources import SourceResolver


def test_resolves_files_and_directories(source_tree) -> None:
    resolved = SourceResolver(source_tree.source_root).resolve(
        {"errors": "tasker-shared/src/errors.rs"},
        {"decisions": "docs/decisions"},
    )

    assert resolved.root == source_tree.source_root
    assert resolved.file("errors") == source_tree.source_root / "tasker-shared/src/errors.rs"
    assert resolved.directory("decisions").is_dir()


def test_missing_source_root_names_the_override(tmp_path) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        SourceResolver(tmp_path / "absent").resolve({"x": "y.rs"})

    assert excinfo.value.env_var == "TASKER_CORE_DIR"
    assert "Set TASKER_CORE_DIR" in excinfo.value.remediation()


def test_missing_file_reports_full_path(source_tree) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        SourceResolver(source_tree.source_root).resolve({"x": "nope/missing.rs"})

    assert excinfo.value.path == source_tree.source_root / "nope/missing.rs"
    assert str(excinfo.value.path) in str(excinfo.value)


def test_file_where_directory_expected_is_rejected(source_tree) -> None:
    with pytest.raises(ConfigurationError):
        SourceResolver(source_tree.source_root).resolve(directories={"d": "Cargo.toml"})
