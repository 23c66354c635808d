from __future__ import annotations

"""
Inode Identity Pool.

Remembers every (device, inode) pair counted during one scan so that hard
links reachable through several directory entries are measured only once.
"""

from typing import Set, Tuple

InodeKey = Tuple[int, int]


class IdentityPool:
    """
    Set of physical storage identities seen during a scan.

    The pool has no removal operation; its lifetime equals one full crawl.
    A concurrent crawler would have to guard observe() with a lock since the
    membership test and the insertion must happen atomically.
    """

    def __init__(self) -> None:
        self._seen: Set[InodeKey] = set()

    def observe(self, device: int, inode: int) -> bool:
        """
        Record an identity and report whether it was new.

        Args:
            device: st_dev of the entry.
            inode: st_ino of the entry.

        Returns:
            bool: True on first observation, False on every later one.
        """
        key = (device, inode)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def __contains__(self, key: object) -> bool:
        return key in self._seen

    def __len__(self) -> int:
        return len(self._seen)
