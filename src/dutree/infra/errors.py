from __future__ import annotations

"""
Platform Error Code Lookup.

Maps numeric errno values to their symbolic name and human description so
diagnostics can name the exact cause (EACCES, ENOENT, ELOOP, ...).
"""

import errno as _errno
import os
from typing import Tuple

UNKNOWN_SYMBOL = "E?"


def describe_errno(code: int) -> Tuple[str, str]:
    """
    Resolve an error code into a (symbolic-name, description) pair.

    Args:
        code: Platform error number.

    Returns:
        Tuple[str, str]: e.g. ("EACCES", "Permission denied").
    """
    symbol = _errno.errorcode.get(code)
    if symbol is None:
        return UNKNOWN_SYMBOL, f"Unknown error {code}"

    try:
        description = os.strerror(code)
    except ValueError:
        description = f"Unknown error {code}"
    return symbol, description
