from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences as JSON in the
application data directory, with per-project overrides keyed by a
stable hash of the project path. The Gemini API key is never stored
here; it is read from the environment.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from plantocode.core.services.filters import default_exclude_patterns
from plantocode.domain.gemini_models import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_K,
    DEFAULT_TOP_P,
    MAX_OUTPUT_TOKENS,
)
from plantocode.infra.fs import get_projects_dir, get_user_data_dir
from plantocode.utils.hashing import hash_string

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"


def get_config_path() -> str:
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Gemini
        "gemini_model": DEFAULT_GEMINI_MODEL,
        "max_output_tokens": MAX_OUTPUT_TOKENS,
        "temperature": DEFAULT_TEMPERATURE,
        "top_p": DEFAULT_TOP_P,
        "top_k": DEFAULT_TOP_K,
        "request_timeout": DEFAULT_REQUEST_TIMEOUT,

        # Directory tree
        "respect_gitignore": True,
        "include_hidden": False,
        "max_depth": None,
        "exclude_patterns": default_exclude_patterns(),

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration from disk merged over the defaults.

    A missing file yields the defaults; a corrupt one yields the defaults
    plus a warning.

    Args:
        path: Config file location; the user data dir is used when omitted.

    Returns:
        Dict[str, Any]: Merged configuration.
    """
    config_path = path or get_config_path()
    config = get_default_config()

    data = _read_json(config_path)
    if data is None:
        return config

    data.pop("version", None)
    config.update(data)
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Persist the configuration to disk.

    Args:
        config: Configuration to store.
        path: Destination; the user data dir is used when omitted.

    Returns:
        bool: True if the file was written.
    """
    config_path = path or get_config_path()
    payload = dict(config)
    payload["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_path}")
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False


def get_project_settings_path(project_directory: str, projects_dir: Optional[str] = None) -> str:
    """Location of the settings file for one project."""
    base = projects_dir or get_projects_dir()
    key = hash_string(os.path.abspath(project_directory))
    return os.path.join(base, f"{key}.json")


def load_project_settings(
        project_directory: str,
        base_config: Optional[Dict[str, Any]] = None,
        projects_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Overlay a project's stored settings onto the base configuration.

    Args:
        project_directory: Project whose settings are requested.
        base_config: Configuration to start from; `load_config()` when omitted.
        projects_dir: Override for the per-project settings directory.

    Returns:
        Dict[str, Any]: Effective configuration for the project.
    """
    config = dict(base_config) if base_config is not None else load_config()
    overrides = _read_json(get_project_settings_path(project_directory, projects_dir))
    if overrides:
        logger.debug(f"Applying {len(overrides)} project settings for {project_directory}")
        config.update(overrides)
    return config


def _read_json(path: str) -> Optional[Dict[str, Any]]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable settings file '{path}': {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring settings file '{path}': root is not an object.")
        return None
    return data
