from __future__ import annotations

"""
Tree Renderer.

Converts a finished TreeNode hierarchy into indented report lines of the
form '<size> <indent><name>[/]'. Directories with well-known uninteresting
names (version control metadata, caches) are collapsed into a single '...'
line; the measured tree itself is left untouched.
"""

import logging
import os
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from dutree.domain.constants import DEFAULT_BORING_DIRS
from dutree.domain.tree_models import TreeNode
from dutree.utils.size_format import format_size

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# RENDERING CONSTANTS
# -----------------------------------------------------------------------------

INDENT_UNIT = "  "
COLLAPSED_MARKER = "..."
SIZE_COLUMN_WIDTH = 10

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree(
        root: TreeNode,
        collapse_names: Optional[Iterable[str]] = None,
        human: bool = True,
) -> List[str]:
    """
    Render a measured tree into report lines.

    Args:
        root: Aggregated and sorted root node.
        collapse_names: Directory names whose contents are replaced by '...'.
                        Defaults to DEFAULT_BORING_DIRS; pass an empty
                        collection to expand everything.
        human: Use binary units instead of raw byte counts.

    Returns:
        List[str]: One line per printed entry, parents before children.
    """
    boring = DEFAULT_BORING_DIRS if collapse_names is None else frozenset(collapse_names)
    size_fmt: Callable[[int], str] = format_size if human else str

    lines: List[str] = []
    render_tree_structure(root, lines, indent="", collapse_names=boring, size_fmt=size_fmt)
    return lines


def render_tree_structure(
        node: TreeNode,
        lines: List[str],
        indent: str,
        collapse_names: FrozenSet[str],
        size_fmt: Callable[[int], str],
) -> None:
    """
    Append the lines of a node and its descendants in pre-order.

    Uses an explicit stack, so arbitrarily deep trees render without
    recursion.

    Args:
        node: Top node to print.
        lines: Accumulator list for output strings.
        indent: Indentation of the top node.
        collapse_names: Directory names printed without their contents.
        size_fmt: Byte count formatter.
    """
    pending: List[Tuple[TreeNode, str]] = [(node, indent)]

    while pending:
        current, current_indent = pending.pop()
        lines.append(_format_line(size_fmt(current.effective_size), current_indent, current.display_name))

        if not current.children:
            continue

        child_indent = current_indent + INDENT_UNIT

        # Boring directory: a single placeholder stands in for every child
        if current.is_dir and current.name in collapse_names:
            lines.append(_format_line("", child_indent, COLLAPSED_MARKER))
            continue

        # Reversed so the first child is popped first
        for child in reversed(current.children):
            pending.append((child, child_indent))


def save_tree_to_disk(save_path: str, lines: List[str]) -> bool:
    """
    Persist rendered report lines to a file.

    Args:
        save_path: Target file path; parent directories are created.
        lines: Rendered report.

    Returns:
        bool: True if the file was written.
    """
    try:
        out_dir = os.path.dirname(os.path.abspath(save_path))
        os.makedirs(out_dir, exist_ok=True)
        # Undecodable entry names are written back as their original bytes
        with open(save_path, "w", encoding="utf-8", errors="surrogateescape") as f:
            f.write("\n".join(lines) + "\n")
        logger.info(f"Report saved to file: {save_path}")
        return True
    except OSError as e:
        logger.error(f"Failed to save report to '{save_path}': {e}")
        return False

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _format_line(size_text: str, indent: str, name: str) -> str:
    return f"{size_text:>{SIZE_COLUMN_WIDTH}} {indent}{name}"
