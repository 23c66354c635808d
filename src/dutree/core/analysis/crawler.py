from __future__ import annotations

"""
Directory Tree Crawler.

Walks a directory depth-first and builds the in-memory TreeNode hierarchy.
Each directory's aggregate size is folded bottom-up from its children,
consulting the identity pool so that hard-linked content is counted only at
its first pre-order encounter. Failures below the root are reported and
skipped; they never abort the scan.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from dutree.core.analysis.sorter import sort_children
from dutree.core.services.inode_pool import IdentityPool
from dutree.domain.scan_errors import (
    DirectoryOpenFailure,
    DirectoryReadFailure,
    EntryStatFailure,
    RootStatFailure,
    ScanFailure,
)
from dutree.domain.scan_models import ScanResult
from dutree.domain.tree_models import NodeKind, TreeNode
from dutree.infra.fs import EntryStat, FileSystem, OsFileSystem, join_entry

logger = logging.getLogger(__name__)

ROOT_NAME = "."

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def scan_tree(path: str = ".", fs: Optional[FileSystem] = None) -> ScanResult:
    """
    Measure the tree rooted at a path.

    Synthesizes the '.' root node, registers it as the first identity of the
    scan and crawls below it when it is a directory.

    Args:
        path: Directory to measure.
        fs: Filesystem backend, the real one by default.

    Returns:
        ScanResult: Aggregated, sorted tree plus the collected failures.

    Raises:
        RootStatFailure: The root path itself could not be stat-ed.
    """
    crawler = Crawler(fs=fs)
    logger.info(f"Scanning disk usage of: {path}")

    try:
        props = crawler.fs.stat_root(path)
    except EntryStatFailure as e:
        raise RootStatFailure(path, e.errno, e.strerror) from e

    root = make_node(ROOT_NAME, props)
    crawler.pool.observe(root.device, root.inode)

    if root.is_dir:
        crawler.crawl(root, path)

    logger.debug(
        f"Scan finished: {root.effective_size} bytes, "
        f"{len(crawler.pool)} unique entries, {len(crawler.failures)} failures"
    )
    return ScanResult(
        root=root,
        root_path=path,
        failures=list(crawler.failures),
        unique_entries=len(crawler.pool),
    )


def make_node(name: str, props: EntryStat) -> TreeNode:
    """Create a node from an entry name and its stat properties."""
    return TreeNode(
        name=name,
        kind=NodeKind.from_mode(props.mode),
        device=props.device,
        inode=props.inode,
        content_size=props.size,
    )

# -----------------------------------------------------------------------------
# CRAWLER
# -----------------------------------------------------------------------------

@dataclass
class _DirectoryFrame:
    """Pending listing of one directory being crawled."""
    node: TreeNode
    path: str
    names: List[str]
    next_index: int = 0


class Crawler:
    """
    Depth-first single-threaded walker.

    The descent keeps an explicit stack of directory frames instead of
    recursing, so tree depth is limited only by the filesystem.

    Attributes:
        fs: Filesystem query backend.
        pool: Identity pool shared by every directory of this crawl.
        failures: Non-fatal failures collected so far.
    """

    def __init__(self, fs: Optional[FileSystem] = None, pool: Optional[IdentityPool] = None) -> None:
        self.fs: FileSystem = fs if fs is not None else OsFileSystem()
        self.pool: IdentityPool = pool if pool is not None else IdentityPool()
        self.failures: List[ScanFailure] = []

    def crawl(self, node: TreeNode, path: str) -> None:
        """
        Populate a directory node from the directory at path.

        Children are appended in listing order, directory children are
        descended into before their contribution is computed, and each child
        list is sorted once every child size is final.

        Args:
            node: Directory node to fill; its aggregate accumulates here.
            path: Filesystem path of that directory.
        """
        stack: List[_DirectoryFrame] = [_DirectoryFrame(node, path, self._list_entries(path))]

        while stack:
            frame = stack[-1]

            if frame.next_index == len(frame.names):
                stack.pop()
                sort_children(frame.node.children)
                if stack:
                    self._fold(stack[-1].node, frame.node, frame.path)
                continue

            name = frame.names[frame.next_index]
            frame.next_index += 1
            child_path = join_entry(frame.path, name)
            try:
                props = self.fs.stat_entry(child_path)
            except EntryStatFailure as e:
                self._report(e)
                continue

            child = make_node(name, props)
            frame.node.children.append(child)

            # Folded into the parent when its own frame completes
            if child.is_dir:
                stack.append(_DirectoryFrame(child, child_path, self._list_entries(child_path)))
                continue

            self._fold(frame.node, child, child_path)

    def _list_entries(self, path: str) -> List[str]:
        try:
            return self.fs.list_directory(path)
        except DirectoryOpenFailure as e:
            self._report(e)
            return []
        except DirectoryReadFailure as e:
            self._report(e)
            return list(e.partial_entries)

    def _fold(self, parent: TreeNode, child: TreeNode, child_path: str) -> None:
        """Add a finished child to its parent's aggregate on first observation."""
        if self.pool.observe(child.device, child.inode):
            parent.aggregate_size += child.effective_size
        else:
            logger.debug(f"Already counted, contributes nothing: {child_path}")

    def _report(self, failure: ScanFailure) -> None:
        self.failures.append(failure)
        logger.warning(failure.describe())
