from __future__ import annotations

"""
Scan Failure Taxonomy.

Defines the exceptions raised by the filesystem query layer while a tree is
being measured. Every failure carries the failing operation, the path and
the platform error code so diagnostics can be reported without losing the
original cause.
"""

from typing import List, Optional, Sequence

from dutree.infra.errors import describe_errno

# -----------------------------------------------------------------------------
# BASE FAILURE
# -----------------------------------------------------------------------------

class ScanFailure(Exception):
    """
    Base class for all filesystem failures encountered during a scan.

    Attributes:
        operation: Name of the failing low-level call (opendir, readdir, lstat, stat).
        path: Filesystem path the call was applied to.
        errno: Platform error code, None when the cause carried none.
        strerror: Platform description of the cause.
    """
    operation: str = "unknown"

    def __init__(self, path: str, errno: Optional[int] = None, strerror: str = "") -> None:
        self.path = path
        self.errno = errno
        self.strerror = strerror
        super().__init__(self.describe())

    @classmethod
    def from_os_error(cls, path: str, exc: OSError, **kwargs) -> "ScanFailure":
        """Build a failure from the OSError raised by the os module."""
        return cls(path, exc.errno, exc.strerror or str(exc), **kwargs)

    def describe(self) -> str:
        """Render the failure as a single diagnostic line."""
        if self.errno is None:
            return f"{self.operation}() failed for '{self.path}': {self.strerror or 'unknown cause'}"
        symbol, description = describe_errno(self.errno)
        return f"{self.operation}() failed for '{self.path}': {symbol} ({description})"

# -----------------------------------------------------------------------------
# CONCRETE FAILURES
# -----------------------------------------------------------------------------

class DirectoryOpenFailure(ScanFailure):
    """The directory could not be opened; its contents stay unread."""
    operation = "opendir"


class DirectoryReadFailure(ScanFailure):
    """
    Reading the directory stopped part way through.

    Attributes:
        partial_entries: Entry names successfully read before the failure.
    """
    operation = "readdir"

    def __init__(
            self,
            path: str,
            errno: Optional[int] = None,
            strerror: str = "",
            partial_entries: Optional[Sequence[str]] = None,
    ) -> None:
        self.partial_entries: List[str] = list(partial_entries or [])
        super().__init__(path, errno, strerror)


class EntryStatFailure(ScanFailure):
    """A single directory entry could not be stat-ed and is skipped."""
    operation = "lstat"


class RootStatFailure(ScanFailure):
    """The scan root itself could not be stat-ed; the scan is aborted."""
    operation = "stat"
