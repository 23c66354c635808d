from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from dutree.domain.constants import APP_NAME, APP_VERSION, DEFAULT_BORING_DIRS

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the dutree CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description=(
            "Measure disk usage of a directory tree, counting hard-linked "
            "content once, and print it sorted by size."
        ),
    )

    p.add_argument(
        "input_path",
        nargs="?",
        default=None,
        help="Directory to measure (default: current directory).",
    )

    # --- Report Format ---
    p.add_argument(
        "-b", "--bytes",
        dest="raw_bytes",
        action="store_true",
        help="Print raw byte counts instead of binary units.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the measured tree as JSON.",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_file",
        default=None,
        help="Also write the text report to this file.",
    )

    # --- Collapsed Directories ---
    p.add_argument(
        "--collapse",
        dest="collapse",
        action="append",
        default=None,
        metavar="NAME",
        help=(
            "Directory name to print as '...'; repeatable. Added to the "
            f"defaults: {', '.join(sorted(DEFAULT_BORING_DIRS))}."
        ),
    )
    p.add_argument(
        "--no-collapse",
        action="store_true",
        help="Expand every directory, including the default collapsed ones.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress information to stderr.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Write diagnostics to a rotating log file as well.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["input_path"] = args.input_path
    overrides["output_file"] = args.output_file
    overrides["log_file"] = args.log_file

    if args.raw_bytes:
        overrides["human_readable"] = False
    if args.json_output:
        overrides["json_output"] = True

    overrides["collapse_names"] = _resolve_collapse_names(args.collapse, args.no_collapse)

    if args.debug:
        overrides["log_level"] = "DEBUG"
    elif args.verbose:
        overrides["log_level"] = "INFO"

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _resolve_collapse_names(extra: Optional[List[str]], disabled: bool) -> Optional[List[str]]:
    """
    Combine the default collapse list with user additions.

    Returns None when nothing deviates from the defaults.
    """
    if disabled:
        return []
    if not extra:
        return None
    names = set(DEFAULT_BORING_DIRS)
    names.update(x.strip() for x in extra if x.strip())
    return sorted(names)
