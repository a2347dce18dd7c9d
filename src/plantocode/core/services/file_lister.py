from __future__ import annotations

"""
Non-ignored File Enumeration Service.

Lists the files of a project that are not excluded by ignore rules.
Git repositories are enumerated through `git ls-files`, which honours
every .gitignore, .git/info/exclude and global excludes file. Other
directories fall back to a filesystem walk with built-in exclusions and
the root .gitignore.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from plantocode.core.services.filters import (
    compile_patterns,
    default_exclude_patterns,
    is_binary_path,
    load_gitignore_patterns,
    matches_any,
    matches_exclude_pattern,
)

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

class FileListingError(Exception):
    """Raised when a project's files cannot be enumerated."""


@dataclass(frozen=True)
class DirectoryTreeOptions:
    """
    Enumeration options shared by the file lister and tree generator.

    Attributes:
        max_depth: Deepest directory level to descend into (None for no limit).
        respect_gitignore: Use git (or the root .gitignore) to drop ignored files.
        exclude_patterns: Extra names to skip during non-git traversal.
        include_hidden: Keep dot-files and dot-directories in non-git traversal.
        include_binary: Keep files whose extension marks them as binary.
    """
    max_depth: Optional[int] = None
    respect_gitignore: bool = True
    exclude_patterns: Tuple[str, ...] = ()
    include_hidden: bool = False
    include_binary: bool = False


@dataclass(frozen=True)
class NonIgnoredFiles:
    """
    Result of a project enumeration.

    Attributes:
        files: Project-relative paths with forward slashes, sorted.
        is_git_repo: Whether git produced the listing.
    """
    files: List[str] = field(default_factory=list)
    is_git_repo: bool = False

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def get_all_non_ignored_files(
        root: str,
        options: Optional[DirectoryTreeOptions] = None,
) -> NonIgnoredFiles:
    """
    Enumerate the non-ignored files below `root`.

    Args:
        root: Project directory.
        options: Enumeration options; defaults apply when omitted.

    Returns:
        NonIgnoredFiles: Sorted relative paths and the listing source.

    Raises:
        FileListingError: If `root` is not a directory or git fails.
    """
    opts = options or DirectoryTreeOptions()
    root_abs = os.path.abspath(root)

    if not os.path.isdir(root_abs):
        raise FileListingError(f"Directory not found or inaccessible: {root}")

    if opts.respect_gitignore and is_git_repository(root_abs):
        logger.debug(f"Using git to list files for: {root_abs}")
        files = _list_git_files(root_abs)
        is_git = True
    else:
        logger.debug(f"Using filesystem traversal for: {root_abs}")
        files = _walk_directory(root_abs, opts)
        is_git = False

    if not opts.include_binary:
        files = [f for f in files if not is_binary_path(f)]

    files.sort()
    logger.debug(f"Found {len(files)} non-ignored files in {root_abs}")
    return NonIgnoredFiles(files=files, is_git_repo=is_git)


def is_git_repository(path: str) -> bool:
    """
    Check whether `path` lies inside a git work tree.

    A missing git executable counts as "not a repository".
    """
    try:
        proc = subprocess.run(
            ["git", "rev-parse", "--is-inside-work-tree"],
            cwd=path,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"git unavailable for '{path}': {e}")
        return False
    return proc.returncode == 0 and proc.stdout.strip() == "true"

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _list_git_files(root: str) -> List[str]:
    """Run `git ls-files` for tracked and untracked, non-ignored files."""
    try:
        proc = subprocess.run(
            ["git", "ls-files", "--cached", "--others", "--exclude-standard", "-z"],
            cwd=root,
            capture_output=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise FileListingError(f"Failed to run git in '{root}': {e}") from e

    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise FileListingError(f"git ls-files failed ({proc.returncode}): {stderr}")

    files: List[str] = []
    seen: Set[str] = set()
    for raw in proc.stdout.split(b"\0"):
        if not raw:
            continue
        rel_path = raw.decode("utf-8", errors="replace")
        if rel_path in seen:
            continue
        seen.add(rel_path)

        # Deleted files remain in the index until the next commit
        if not os.path.isfile(os.path.join(root, rel_path)):
            continue
        files.append(rel_path)

    return files


def _walk_directory(root: str, opts: DirectoryTreeOptions) -> List[str]:
    """Walk `root` applying hidden, pattern, .gitignore and depth rules."""
    excludes = default_exclude_patterns() + list(opts.exclude_patterns)
    gitignore_rx = compile_patterns(load_gitignore_patterns(root)) if opts.respect_gitignore else []

    def is_skipped(name: str, rel_path: str) -> bool:
        if not opts.include_hidden and name.startswith("."):
            return True
        if matches_exclude_pattern(name, excludes):
            return True
        return bool(gitignore_rx) and matches_any((name, rel_path), gitignore_rx)

    files: List[str] = []
    visited: Set[str] = set()

    for dirpath, dirs, filenames in os.walk(root, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in visited:
            dirs[:] = []
            continue
        visited.add(real)

        rel_dir = os.path.relpath(dirpath, root)
        rel_dir = "" if rel_dir == "." else rel_dir.replace(os.sep, "/")
        depth = rel_dir.count("/") + 1 if rel_dir else 0

        if opts.max_depth is not None and depth >= opts.max_depth:
            dirs[:] = []
        else:
            dirs[:] = sorted(
                d for d in dirs if not is_skipped(d, _join(rel_dir, d))
            )

        for name in filenames:
            rel_path = _join(rel_dir, name)
            if is_skipped(name, rel_path):
                continue
            files.append(rel_path)

    return files


def _join(rel_dir: str, name: str) -> str:
    return f"{rel_dir}/{name}" if rel_dir else name
