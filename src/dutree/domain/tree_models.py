from __future__ import annotations

"""
Disk Usage Tree Data Models.

Provides the recursive node type used by the crawler to mirror the scanned
filesystem, together with the entry classification derived from stat modes
and a serializable view for structured output.
"""

import json
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple, Union

# -----------------------------------------------------------------------------
# ENTRY CLASSIFICATION
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    """File-type classification of a directory entry."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> "NodeKind":
        """
        Derive the entry kind from the file-type bits of a stat mode.

        Args:
            mode: Raw st_mode value as returned by lstat.

        Returns:
            NodeKind: Matching classification, OTHER for devices, fifos, sockets.
        """
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISREG(mode):
            return cls.FILE
        return cls.OTHER

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class TreeNode:
    """
    Represents one filesystem entry in the measured tree.

    Attributes:
        name: Base name of the entry, without any path component.
        kind: Entry classification.
        device: Device identifier of the underlying storage object.
        inode: Inode number of the underlying storage object.
        content_size: Size reported by lstat for this directory entry.
        aggregate_size: De-duplicated size of all descendants (directories only).
        children: Child entries, sorted once the directory crawl completes.
    """
    name: str
    kind: NodeKind
    device: int = 0
    inode: int = 0
    content_size: int = 0
    aggregate_size: int = 0
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def effective_size(self) -> int:
        """Own size plus, for directories, the aggregated descendant size."""
        if self.is_dir:
            return self.content_size + self.aggregate_size
        return self.content_size

    @property
    def display_name(self) -> str:
        return f"{self.name}/" if self.is_dir else self.name

# -----------------------------------------------------------------------------
# SERIALIZATION
# -----------------------------------------------------------------------------

def node_to_dict(node: TreeNode) -> Dict[str, Any]:
    """
    Convert a finished tree into nested dictionaries.

    The tree is walked with an explicit stack, so depth is not limited by
    the recursion limit.

    Args:
        node: Root of the (sub)tree to serialize.

    Returns:
        Dict[str, Any]: Nested mapping preserving the sorted child order.
    """
    top = _node_fields(node)
    pending: List[Tuple[TreeNode, Dict[str, Any]]] = [(node, top)]

    while pending:
        current, out = pending.pop()
        out["children"] = []
        for child in current.children:
            child_out = _node_fields(child)
            out["children"].append(child_out)
            pending.append((child, child_out))

    return top


def iter_node_json(node: TreeNode) -> Iterator[str]:
    """
    Encode a finished tree as a JSON document, chunk by chunk.

    Yields the same document json.dumps(node_to_dict(node)) would produce,
    without recursing per level.

    Args:
        node: Root of the (sub)tree to encode.

    Yields:
        str: Consecutive pieces of the document.
    """
    pending: List[Union[TreeNode, str]] = [node]

    while pending:
        item = pending.pop()
        if isinstance(item, str):
            yield item
            continue

        fields = json.dumps(_node_fields(item), ensure_ascii=False)
        yield fields[:-1] + ', "children": ['

        # Pushed in reverse so children come out in sorted order
        pending.append("]}")
        for index in range(len(item.children) - 1, -1, -1):
            pending.append(item.children[index])
            if index:
                pending.append(", ")


def _node_fields(node: TreeNode) -> Dict[str, Any]:
    return {
        "name": node.name,
        "kind": node.kind.value,
        "device": node.device,
        "inode": node.inode,
        "content_size": node.content_size,
        "aggregate_size": node.aggregate_size,
        "effective_size": node.effective_size,
    }
