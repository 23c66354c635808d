from __future__ import annotations

"""
Human-Readable Byte Size Formatting.
"""

from typing import List

_UNITS: List[str] = ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]


def format_size(num_bytes: int) -> str:
    """
    Convert a byte count into a binary-unit string.

    Plain bytes are printed as integers, larger units with one decimal.

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(1536)
        '1.5 KiB'
    """
    if num_bytes < 0:
        raise ValueError(f"Size cannot be negative: {num_bytes}")

    if num_bytes < 1024:
        return f"{num_bytes} B"

    size = float(num_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(_UNITS) - 1:
        size /= 1024
        unit_index += 1
    return f"{size:.1f} {_UNITS[unit_index]}"
