from __future__ import annotations

"""
Domain Constants.

Provides application-wide constants shared by the configuration layer and
the report renderer.
"""

from typing import FrozenSet

APP_NAME = "dutree"
APP_VERSION = "1.0.0"

DEFAULT_INPUT_PATH = "."

# Directory names whose contents are collapsed in the printed report
DEFAULT_BORING_DIRS: FrozenSet[str] = frozenset({
    ".git", ".svn", ".hg", ".bzr", "CVS",
    "__pycache__", "node_modules",
    ".mypy_cache", ".pytest_cache", ".tox",
})
