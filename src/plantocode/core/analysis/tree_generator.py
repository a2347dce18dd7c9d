from __future__ import annotations

"""
Directory Tree Generator.

Composes file enumeration, tree construction and rendering into the
prompt-ready directory diagram. Generation never raises: failures are
logged and degrade to an empty tree.
"""

import logging
import os
from typing import List, Optional, Sequence

from plantocode.core.analysis.tree_builder import build_tree
from plantocode.core.analysis.tree_renderer import format_tree
from plantocode.core.services.file_lister import (
    DirectoryTreeOptions,
    get_all_non_ignored_files,
)

logger = logging.getLogger(__name__)

ROOT_HEADER_TEMPLATE = "===== ROOT: {root} ====="

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def generate_directory_tree(
        project_directory: str,
        options: Optional[DirectoryTreeOptions] = None,
) -> str:
    """
    Generate the formatted directory tree of a project.

    Args:
        project_directory: Project root to enumerate.
        options: Enumeration options forwarded to the file lister.

    Returns:
        str: Trimmed tree diagram, or "" when the path is blank or
             enumeration fails.
    """
    if not project_directory or not project_directory.strip():
        return ""

    try:
        listing = get_all_non_ignored_files(project_directory, options)
        root = build_tree(listing.files)
        return format_tree(root).strip()
    except Exception as e:
        logger.error(f"Error generating directory tree for '{project_directory}': {e}")
        return ""


def get_combined_directory_tree(
        roots: Sequence[str],
        options: Optional[DirectoryTreeOptions] = None,
) -> str:
    """
    Generate one tree section per root, each under a ROOT header.

    Args:
        roots: Project directories to include; blank entries are skipped.
        options: Enumeration options applied to every root.

    Returns:
        str: Sections separated by a blank line.
    """
    sections: List[str] = []
    for root in roots:
        if not root or not root.strip():
            continue
        header = ROOT_HEADER_TEMPLATE.format(root=root)
        body = generate_directory_tree(root, options)
        sections.append(f"{header}\n{body}")

    return "\n\n".join(sections)


def save_tree(tree_text: str, save_path: str) -> bool:
    """
    Persist a rendered tree to disk.

    Args:
        tree_text: Diagram produced by `generate_directory_tree`.
        save_path: Destination file path.

    Returns:
        bool: True if the file was written.
    """
    try:
        out_dir = os.path.dirname(os.path.abspath(save_path))
        os.makedirs(out_dir, exist_ok=True)
        with open(save_path, "w", encoding="utf-8") as f:
            f.write(tree_text + "\n")
        logger.info(f"Tree saved to file: {save_path}")
        return True
    except OSError as e:
        logger.error(f"Failed to save tree to '{save_path}': {e}")
        return False
