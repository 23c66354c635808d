from __future__ import annotations

"""
Scan Domain Data Models.

Defines the result object handed from the crawler to the interface layer.
"""

from dataclasses import dataclass, field
from typing import List

from dutree.domain.scan_errors import ScanFailure
from dutree.domain.tree_models import TreeNode

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ScanResult:
    """
    Outcome of one complete crawl.

    Attributes:
        root: Synthesized '.' node, fully aggregated and sorted.
        root_path: Path the scan was started from.
        failures: Non-fatal failures in the order they were encountered.
        unique_entries: Number of distinct (device, inode) identities counted.
    """
    root: TreeNode
    root_path: str
    failures: List[ScanFailure] = field(default_factory=list)
    unique_entries: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total_size(self) -> int:
        return self.root.effective_size
