from __future__ import annotations

"""
Tree Renderer.

Converts TreeNode structures into the conventional `tree` command diagram
used inside AI prompts (├──, └── and │ connectors).
"""

from typing import List

from plantocode.domain.tree_models import TreeNode

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_INDENT = "│   "
SPACE_INDENT = "    "

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree_lines(
        node: TreeNode,
        lines: List[str],
        prefix: str = "",
        is_last: bool = True,
) -> None:
    """
    Recursively append one line per node to `lines`.

    Traversal is depth-first pre-order, following the child order set by
    the builder. Empty-named nodes produced by malformed paths still get
    their own line, so every child keeps its connector relative to its
    real siblings.

    Args:
        node: Current node to render.
        lines: Accumulator list for output strings.
        prefix: Ancestor indentation for the current recursion level.
        is_last: Whether `node` is the last sibling at its level.
    """
    connector = LAST_BRANCH if is_last else BRANCH
    lines.append(f"{prefix}{connector}{node.name}")

    child_prefix = prefix + (SPACE_INDENT if is_last else PIPE_INDENT)
    _render_children(node, lines, child_prefix)


def format_tree(node: TreeNode, prefix: str = "", is_last: bool = True) -> str:
    """
    Render a tree into a single newline-joined diagram.

    An unnamed top-level node is the builder's synthetic root: it prints
    nothing and its children start at `prefix`.

    Args:
        node: Tree (usually the builder's root) to render.
        prefix: Initial indentation.
        is_last: Whether `node` is the last sibling at its level.

    Returns:
        str: The diagram, or an empty string for an empty tree.
    """
    lines: List[str] = []
    if node.name:
        render_tree_lines(node, lines, prefix=prefix, is_last=is_last)
    else:
        _render_children(node, lines, prefix)
    return "\n".join(lines)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _render_children(node: TreeNode, lines: List[str], prefix: str) -> None:
    total = len(node.children)
    for i, child in enumerate(node.children):
        render_tree_lines(child, lines, prefix=prefix, is_last=(i == total - 1))
