from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. An in-memory FileSystem double used to simulate permission errors,
   vanished entries and hard links without touching the real disk.
"""

import errno
import os
import stat
import sys
from typing import Dict, List, Optional, Tuple, Type

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from dutree.domain.scan_errors import (  # noqa: E402
    DirectoryOpenFailure,
    DirectoryReadFailure,
    EntryStatFailure,
)
from dutree.infra.fs import EntryStat, FileSystem  # noqa: E402


# -----------------------------------------------------------------------------
# In-Memory FileSystem
# -----------------------------------------------------------------------------
class FakeFileSystem(FileSystem):
    """
    Dictionary-backed FileSystem.

    Entries are registered with their full path; each one is appended to its
    parent's listing in registration order, which becomes the listing order.
    """

    def __init__(self, device: int = 1) -> None:
        self.device = device
        self.stats: Dict[str, EntryStat] = {}
        self.listings: Dict[str, List[str]] = {}
        self.open_errors: Dict[str, int] = {}
        self.read_errors: Dict[str, Tuple[int, int]] = {}
        self.stat_errors: Dict[str, int] = {}
        self.listed_paths: List[str] = []
        self._next_inode = 1000

    # --- Registration helpers ---
    def add_dir(self, path: str, size: int = 4096, inode: Optional[int] = None) -> str:
        self._register(path, stat.S_IFDIR | 0o755, size, inode)
        self.listings.setdefault(path, [])
        return path

    def add_file(self, path: str, size: int, inode: Optional[int] = None) -> str:
        return self._register(path, stat.S_IFREG | 0o644, size, inode)

    def add_symlink(self, path: str, size: int) -> str:
        return self._register(path, stat.S_IFLNK | 0o777, size, None)

    def add_fifo(self, path: str) -> str:
        return self._register(path, stat.S_IFIFO | 0o644, 0, None)

    def list_only(self, path: str) -> str:
        """List a name in its parent without any stat entry behind it."""
        parent, name = os.path.split(path)
        self.listings.setdefault(parent, []).append(name)
        return path

    # --- FileSystem interface ---
    def list_directory(self, path: str) -> List[str]:
        self.listed_paths.append(path)
        if path in self.open_errors:
            code = self.open_errors[path]
            raise DirectoryOpenFailure(path, code, os.strerror(code))
        if path not in self.listings:
            raise DirectoryOpenFailure(path, errno.ENOENT, os.strerror(errno.ENOENT))

        names = list(self.listings[path])
        if path in self.read_errors:
            code, read_before_failure = self.read_errors[path]
            raise DirectoryReadFailure(
                path, code, os.strerror(code), partial_entries=names[:read_before_failure]
            )
        return names

    def stat_entry(self, path: str) -> EntryStat:
        if path in self.stat_errors:
            code = self.stat_errors[path]
            raise EntryStatFailure(path, code, os.strerror(code))
        if path not in self.stats:
            raise EntryStatFailure(path, errno.ENOENT, os.strerror(errno.ENOENT))
        return self.stats[path]

    # --- Internals ---
    def _register(self, path: str, mode: int, size: int, inode: Optional[int]) -> str:
        if inode is None:
            self._next_inode += 1
            inode = self._next_inode
        self.stats[path] = EntryStat(device=self.device, inode=inode, size=size, mode=mode)

        parent, name = os.path.split(path)
        if parent:
            self.listings.setdefault(parent, []).append(name)
        return path


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def fake_fs() -> FakeFileSystem:
    """Return an empty in-memory filesystem with a 'root' directory."""
    fs = FakeFileSystem()
    fs.add_dir("root", size=4096)
    return fs


@pytest.fixture
def fake_fs_class() -> Type[FakeFileSystem]:
    """Expose the FakeFileSystem class for tests that build their own."""
    return FakeFileSystem
