from __future__ import annotations

"""
Sibling Sorter.

Orders the children of one directory: directories before everything else,
then by effective size descending, then by name compared byte-wise.
"""

import os
from typing import List, Tuple

from dutree.domain.tree_models import TreeNode


def sibling_sort_key(node: TreeNode) -> Tuple[bool, int, bytes]:
    """
    Build the total-order key for a single child.

    Negating the size keeps the comparison exact for arbitrarily large
    totals; sizes are never subtracted from each other.
    """
    return (not node.is_dir, -node.effective_size, os.fsencode(node.name))


def sort_children(children: List[TreeNode]) -> None:
    """
    Reorder a directory's complete child list in place.

    Must only be called once every child size is final, i.e. after the
    descent into directory children has finished.

    Args:
        children: Child list of a single directory.
    """
    children.sort(key=sibling_sort_key)
