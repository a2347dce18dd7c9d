from __future__ import annotations

"""
File Filtering Rules.

Implements the exclusion logic applied when a project is enumerated
without git: built-in noise directories, simple wildcard name patterns,
.gitignore glob rules and extension-based binary detection.
"""

import fnmatch
import logging
import os
import re
from typing import FrozenSet, Iterable, List

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# NAME AND EXTENSION CONSTANTS
# -----------------------------------------------------------------------------

_DEFAULT_EXCLUDES: List[str] = [
    ".git", "node_modules", "target", "dist", "build", ".vscode", ".idea",
    "__pycache__", ".pytest_cache", ".mypy_cache", "venv", ".venv", "env",
    ".env", ".next", ".nuxt", "coverage", ".coverage", ".tox", ".eggs",
    "*.egg-info", ".DS_Store", "Thumbs.db",
]

BINARY_EXTENSIONS: FrozenSet[str] = frozenset({
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".tiff", ".psd",
    # Audio / video
    ".mp3", ".mp4", ".wav", ".ogg", ".flac", ".avi", ".mov", ".mkv", ".webm",
    # Archives
    ".zip", ".tar", ".gz", ".tgz", ".bz2", ".xz", ".7z", ".rar", ".jar",
    # Documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    # Compiled artifacts
    ".exe", ".dll", ".so", ".dylib", ".o", ".a", ".lib", ".class", ".pyc",
    ".pyo", ".wasm", ".bin", ".dat",
    # Fonts
    ".ttf", ".otf", ".woff", ".woff2", ".eot",
    # Databases
    ".db", ".sqlite", ".sqlite3",
})

# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

def default_exclude_patterns() -> List[str]:
    """
    Get the built-in exclusion patterns for non-git traversal.

    Covers VCS metadata, dependency folders, build outputs, caches and
    virtual environments common to development projects.

    Returns:
        List[str]: Exact names or simple `*` wildcard patterns.
    """
    return list(_DEFAULT_EXCLUDES)

# -----------------------------------------------------------------------------
# PATTERN MATCHING
# -----------------------------------------------------------------------------

def matches_exclude_pattern(name: str, patterns: Iterable[str]) -> bool:
    """
    Check a file or directory name against simple exclusion patterns.

    Supported forms are an exact name, `*suffix` and `prefix*`.

    Args:
        name: Base name of the entry.
        patterns: Exclusion patterns.

    Returns:
        bool: True if any pattern excludes the entry.
    """
    for pattern in patterns:
        if "*" in pattern:
            if pattern.startswith("*"):
                if name.endswith(pattern[1:]):
                    return True
                continue
            if pattern.endswith("*"):
                if name.startswith(pattern[:-1]):
                    return True
                continue
        if name == pattern:
            return True
    return False


def compile_patterns(patterns: Iterable[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed expressions are discarded with a debug log.

    Args:
        patterns: Raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            logger.debug(f"Discarding invalid pattern '{p}': {e}")
    return compiled


def matches_any(candidates: Iterable[str], compiled_patterns: List[re.Pattern]) -> bool:
    """
    Verify if any candidate string fully matches any compiled pattern.

    Args:
        candidates: Strings to test, e.g. the base name and relative path.
        compiled_patterns: Pre-compiled regex objects.

    Returns:
        bool: True if any match is found.
    """
    names = list(candidates)
    return any(rx.match(n) for rx in compiled_patterns for n in names)


def is_binary_path(path: str) -> bool:
    """Classify a path as binary from its extension alone."""
    _, ext = os.path.splitext(path)
    return ext.lower() in BINARY_EXTENSIONS

# -----------------------------------------------------------------------------
# GITIGNORE INTEGRATION
# -----------------------------------------------------------------------------

def load_gitignore_patterns(root_path: str) -> List[str]:
    """
    Parse the root .gitignore file and translate its globs into regexes.

    Comments, blank lines and negated rules ("!pattern") are skipped.

    Args:
        root_path: Directory containing the .gitignore file.

    Returns:
        List[str]: Equivalent regex strings.
    """
    gitignore_path = os.path.join(root_path, ".gitignore")
    if not os.path.isfile(gitignore_path):
        return []

    regex_patterns: List[str] = []
    try:
        with open(gitignore_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("!"):
                    logger.debug(f"Negated .gitignore rule not supported: {line}")
                    continue

                regex = _gitignore_to_regex(line)
                if regex:
                    regex_patterns.append(regex)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read '{gitignore_path}': {e}")

    return regex_patterns


def _gitignore_to_regex(glob_pattern: str) -> str:
    """Translate a single gitignore glob into a Python regex."""
    glob_pattern = glob_pattern.rstrip("/").lstrip("/")
    if not glob_pattern:
        return ""
    return fnmatch.translate(glob_pattern)
