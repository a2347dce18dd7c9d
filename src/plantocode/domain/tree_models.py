from __future__ import annotations

"""
Directory Tree Structure Data Models.

Provides the recursive node type used by the tree builder and renderer
to represent a project's directories and files.
"""

from dataclasses import dataclass, field
from typing import List, Optional

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class TreeNode:
    """
    A directory or file vertex in the project tree.

    Attributes:
        name: Path segment represented by this node ("" for the synthetic root).
        is_directory: True for intermediate segments, False for leaf files.
        children: Ordered child nodes, directories first, then by name.
    """
    name: str
    is_directory: bool = True
    children: List["TreeNode"] = field(default_factory=list)

    @classmethod
    def root(cls) -> "TreeNode":
        """Create the synthetic, unnamed root of a new tree."""
        return cls(name="", is_directory=True)

    def find_child(self, name: str) -> Optional["TreeNode"]:
        """Return the direct child carrying `name`, if any."""
        for child in self.children:
            if child.name == name:
                return child
        return None
