from __future__ import annotations

"""
Runtime Configuration.

dutree reads no configuration file: every run starts from these defaults
and applies command-line overrides on top.
"""

import logging
from typing import Any, Dict, List, Optional

from dutree.domain.constants import DEFAULT_BORING_DIRS, DEFAULT_INPUT_PATH

logger = logging.getLogger(__name__)

# Keys accepted from override sources; anything else is ignored
CONFIG_KEYS: List[str] = [
    "input_path",
    "human_readable",
    "json_output",
    "collapse_names",
    "output_file",
    "log_level",
    "log_file",
]


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "input_path": DEFAULT_INPUT_PATH,
        "human_readable": True,
        "json_output": False,
        "collapse_names": sorted(DEFAULT_BORING_DIRS),
        "output_file": None,
        "log_level": "WARNING",
        "log_file": None,
    }


def merge_config(base: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Shallow-merge override values into a base configuration.

    Unknown keys and None values are skipped so absent CLI flags never mask
    a default.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k, v in (overrides or {}).items():
        if k not in CONFIG_KEYS:
            logger.debug(f"Ignoring unknown configuration key: {k}")
            continue
        if v is not None:
            out[k] = v
    return out
