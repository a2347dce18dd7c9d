from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform resolution of the application data directory and
path normalization for user-supplied project locations.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "PlanToCode"
UNIX_APP_DIR_NAME = ".plantocode"
PROJECTS_SUBDIR = "projects"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the OS-specific directory for persistent application data.

    Creates the hierarchy if it does not exist.
    - Windows: %LOCALAPPDATA%/PlanToCode
    - Linux/Mac: ~/.plantocode

    Returns:
        str: Absolute path to the application data directory.
    """
    path = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def get_projects_dir() -> str:
    """Directory holding per-project settings files."""
    return os.path.join(get_user_data_dir(), PROJECTS_SUBDIR)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Expands environment variables and `~`. Reverts to `fallback` if the
    input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use when `path` is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))
