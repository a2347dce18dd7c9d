from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration and sample projects.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Mirrors the keys produced by 'plantocode.domain.config.get_default_config'.

    Returns:
        Dict[str, Any]: A sample configuration dictionary.
    """
    return {
        # Gemini
        "gemini_model": "gemini-2.0-flash",
        "max_output_tokens": 1024,
        "temperature": 0.2,
        "top_p": 0.9,
        "top_k": 20,
        "request_timeout": 30.0,

        # Directory tree
        "respect_gitignore": False,
        "include_hidden": False,
        "max_depth": None,
        "exclude_patterns": ["node_modules", ".git"],

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create a small project tree on disk.

    Structure:
    /project
      /src
        index.ts
        /utils
          helper.ts
      /node_modules
        /lib
          index.js
      .env.local
      logo.png
      package.json
    """
    root = tmp_path / "project"
    (root / "src" / "utils").mkdir(parents=True)
    (root / "node_modules" / "lib").mkdir(parents=True)

    (root / "src" / "index.ts").write_text("export {}", encoding="utf-8")
    (root / "src" / "utils" / "helper.ts").write_text("export const x = 1", encoding="utf-8")
    (root / "node_modules" / "lib" / "index.js").write_text("module.exports = {}", encoding="utf-8")
    (root / ".env.local").write_text("SECRET=1", encoding="utf-8")
    (root / "logo.png").write_bytes(b"\x89PNG")
    (root / "package.json").write_text("{}", encoding="utf-8")

    return root


@pytest.fixture
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the application data directory into tmp_path."""
    data_dir = tmp_path / "appdata"
    data_dir.mkdir()
    monkeypatch.setattr("plantocode.domain.config.get_user_data_dir", lambda: str(data_dir))
    monkeypatch.setattr(
        "plantocode.domain.config.get_projects_dir", lambda: str(data_dir / "projects")
    )
    return data_dir
