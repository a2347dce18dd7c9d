from __future__ import annotations

"""
Directory Tree Builder.

Converts a flat list of project-relative paths into a hierarchical
TreeNode structure. Directories are merged by name at every level, so
shared prefixes collapse into one subtree regardless of input order.
"""

from typing import Iterable, Tuple

from plantocode.domain.tree_models import TreeNode

PATH_SEPARATOR = "/"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_tree(paths: Iterable[str]) -> TreeNode:
    """
    Build a directory/file tree from slash-delimited relative paths.

    Every segment except the last one of a path becomes a directory node;
    the last one becomes a file node. Malformed input (empty strings or
    doubled slashes) yields nodes with empty names instead of an error.

    Args:
        paths: Relative paths such as "src/components/Button.tsx".

    Returns:
        TreeNode: The synthetic root of the new tree.
    """
    root = TreeNode.root()

    for path in paths:
        segments = path.split(PATH_SEPARATOR)
        current = root
        last_index = len(segments) - 1

        for index, segment in enumerate(segments):
            child = current.find_child(segment)
            if child is None:
                child = TreeNode(name=segment, is_directory=index < last_index)
                current.children.append(child)
                current.children.sort(key=sort_key)
            current = child

    return root


def sort_key(node: TreeNode) -> Tuple[bool, str, str]:
    """
    Ordering key for siblings: directories first, then names.

    Names compare case-insensitively first, the raw name breaking ties,
    which mirrors a locale-aware comparison for typical file names.
    """
    return (not node.is_directory, node.name.casefold(), node.name)
