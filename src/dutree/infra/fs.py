from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the filesystem query interface consumed by the crawler. All calls
are non-dereferencing: symbolic links are reported as themselves and never
followed. Failures are translated into the scan failure taxonomy so the
crawler can decide locally whether to skip or continue.
"""

import os
from dataclasses import dataclass
from typing import List

from dutree.domain.scan_errors import (
    DirectoryOpenFailure,
    DirectoryReadFailure,
    EntryStatFailure,
)

_PSEUDO_ENTRIES = frozenset({".", ".."})

# -----------------------------------------------------------------------------
# DATA TRANSFER OBJECTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EntryStat:
    """
    Subset of lstat output needed to measure an entry.

    Attributes:
        device: st_dev of the entry.
        inode: st_ino of the entry.
        size: st_size of the entry itself.
        mode: st_mode including the file-type bits.
    """
    device: int
    inode: int
    size: int
    mode: int

# -----------------------------------------------------------------------------
# QUERY INTERFACE
# -----------------------------------------------------------------------------

class FileSystem:
    """
    Abstract filesystem query interface.

    Implementations must never follow symbolic links in stat_entry.
    """

    def list_directory(self, path: str) -> List[str]:
        """
        Return the entry names of a directory in filesystem order.

        Raises:
            DirectoryOpenFailure: The directory could not be opened.
            DirectoryReadFailure: Enumeration stopped early; partial names attached.
        """
        raise NotImplementedError

    def stat_entry(self, path: str) -> EntryStat:
        """
        Return the non-dereferencing stat of a single path.

        Raises:
            EntryStatFailure: The entry could not be stat-ed.
        """
        raise NotImplementedError

    def stat_root(self, path: str) -> EntryStat:
        """
        Stat the scan root given on the command line.

        The root is the only path allowed to resolve a symbolic link, so a
        link to a directory is measured as that directory.
        """
        return self.stat_entry(path)


class OsFileSystem(FileSystem):
    """FileSystem backed by os.scandir and os.lstat."""

    def list_directory(self, path: str) -> List[str]:
        names: List[str] = []
        try:
            handle = os.scandir(path)
        except OSError as e:
            raise DirectoryOpenFailure.from_os_error(path, e) from e

        # The handle is drained completely and closed before any entry is
        # processed, so recursion never holds more than one open directory.
        with handle:
            try:
                for entry in handle:
                    if entry.name in _PSEUDO_ENTRIES:
                        continue
                    names.append(entry.name)
            except OSError as e:
                raise DirectoryReadFailure.from_os_error(path, e, partial_entries=names) from e
        return names

    def stat_entry(self, path: str) -> EntryStat:
        try:
            st = os.lstat(path)
        except OSError as e:
            raise EntryStatFailure.from_os_error(path, e) from e
        return _to_entry_stat(st)

    def stat_root(self, path: str) -> EntryStat:
        try:
            st = os.stat(path)
        except OSError as e:
            raise EntryStatFailure.from_os_error(path, e) from e
        return _to_entry_stat(st)


def _to_entry_stat(st: os.stat_result) -> EntryStat:
    return EntryStat(device=st.st_dev, inode=st.st_ino, size=st.st_size, mode=st.st_mode)

# -----------------------------------------------------------------------------
# PATH HELPERS
# -----------------------------------------------------------------------------

def join_entry(dirname: str, basename: str) -> str:
    """Join a directory path and an entry name without normalizing either."""
    return os.path.join(dirname, basename)
