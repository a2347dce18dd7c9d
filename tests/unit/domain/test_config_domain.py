from __future__ import annotations

"""
Unit tests for Configuration Domain Management.

Verifies persistence round trips, corrupt file recovery and the
per-project settings overlay keyed by the djb2 path hash.
"""

import json
import os
from pathlib import Path

from plantocode.domain.config import (
    get_default_config,
    get_project_settings_path,
    load_config,
    load_project_settings,
    save_config,
)
from plantocode.utils.hashing import hash_string


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    assert load_config(str(tmp_path / "config.json")) == get_default_config()


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = get_default_config()
    config["gemini_model"] = "gemini-2.5-pro"

    assert save_config(config, str(path)) is True

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["version"] == "1.0.0"

    loaded = load_config(str(path))
    assert loaded["gemini_model"] == "gemini-2.5-pro"
    assert "version" not in loaded


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path, caplog) -> None:
    path = tmp_path / "config.json"
    path.write_text("{ not json", encoding="utf-8")

    with caplog.at_level("WARNING"):
        assert load_config(str(path)) == get_default_config()
    assert "unreadable" in caplog.text


def test_non_object_root_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert load_config(str(path)) == get_default_config()


def test_default_config_location(isolated_data_dir: Path) -> None:
    config = get_default_config()
    config["log_level"] = "DEBUG"

    assert save_config(config) is True
    assert (isolated_data_dir / "config.json").is_file()
    assert load_config()["log_level"] == "DEBUG"


def test_project_settings_path_uses_hash(tmp_path: Path) -> None:
    project = str(tmp_path / "repo")
    expected = os.path.join("/settings", f"{hash_string(os.path.abspath(project))}.json")

    assert get_project_settings_path(project, "/settings") == expected


def test_project_settings_overlay(tmp_path: Path) -> None:
    project = str(tmp_path / "repo")
    projects_dir = tmp_path / "projects"
    projects_dir.mkdir()
    settings_file = get_project_settings_path(project, str(projects_dir))
    Path(settings_file).write_text(json.dumps({"max_depth": 3}), encoding="utf-8")

    base = get_default_config()
    effective = load_project_settings(project, base_config=base, projects_dir=str(projects_dir))

    assert effective["max_depth"] == 3
    assert base["max_depth"] is None


def test_project_without_settings_keeps_base(tmp_path: Path) -> None:
    base = {"gemini_model": "x"}

    effective = load_project_settings(str(tmp_path), base_config=base, projects_dir=str(tmp_path))

    assert effective == base
