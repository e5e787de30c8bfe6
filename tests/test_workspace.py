from __future__ import annotations

import json

from refgen.workspace import ScratchWorkspace


def test_workspace_is_created_lazily_and_removed() -> None:
    workspace = ScratchWorkspace()
    assert workspace.created is False

    path = workspace.path
    assert path.is_dir()
    assert path.name.startswith("refgen-")

    workspace.cleanup()
    assert not path.exists()
    assert workspace.created is False
    workspace.cleanup()


def test_indices_are_per_label() -> None:
    workspace = ScratchWorkspace()

    assert [workspace.next_index("adr"), workspace.next_index("adr")] == [1, 2]
    assert workspace.next_index("error") == 1
    assert workspace.created is False


def test_write_json_is_stable() -> None:
    workspace = ScratchWorkspace()
    try:
        target = workspace.write_json("x.json", {"b": 1, "a": 2})
        assert target.read_text(encoding="utf-8") == json.dumps({"a": 2, "b": 1}, indent=2)
    finally:
        workspace.cleanup()
