from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging,
the scan itself and rendering of the finished tree. The report goes to
stdout; diagnostics about unreadable entries go to stderr through the
logging subsystem and never change the exit code.
"""

import os
import sys
from typing import Any, Dict, List, Optional

from dutree.core.analysis.crawler import scan_tree
from dutree.core.analysis.tree_renderer import render_tree, save_tree_to_disk
from dutree.domain.config import get_default_config, merge_config
from dutree.domain.scan_errors import RootStatFailure
from dutree.domain.scan_models import ScanResult
from dutree.domain.tree_models import iter_node_json
from dutree.infra.logging import LoggingConfig, configure_logging, get_logger, shutdown_logging
from dutree.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_ROOT_STAT = 2
EXIT_INTERRUPTED = 130
EXIT_BROKEN_PIPE = 141

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code. 0 whenever the root could be stat-ed, even if
             entries below it failed.
    """
    # Entry names that are not valid in the locale encoding are printed as raw bytes
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(errors="surrogateescape")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Configuration resolution (defaults + command line)
    conf = merge_config(get_default_config(), cli_args.args_to_overrides(args))

    # 3. Logging bootstrap (stderr, optional rotating file)
    configure_logging(
        LoggingConfig(level=conf["log_level"], console=True, log_file=conf["log_file"]),
        force=True,
    )
    logger.debug(f"Resolved configuration: {conf}")

    # 4. Scan and output phases; queued log records are flushed on every exit path
    try:
        return _scan_and_report(conf)
    finally:
        shutdown_logging()


def _scan_and_report(conf: Dict[str, Any]) -> int:
    """
    Measure the configured path and print the report.

    Args:
        conf: Resolved configuration.

    Returns:
        int: Process exit code.
    """
    input_path = conf["input_path"]
    try:
        result = scan_tree(input_path)
    except RootStatFailure as e:
        logger.error(e.describe())
        print(f"ERROR: cannot measure '{input_path}': {e.describe()}", file=sys.stderr)
        return EXIT_ROOT_STAT
    except KeyboardInterrupt:
        logger.warning("Scan interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except MemoryError:
        print("ERROR: out of memory while building the tree.", file=sys.stderr)
        return EXIT_FAILURE

    if result.failures:
        logger.info(f"{len(result.failures)} entries could not be read and were skipped.")

    try:
        _render_result(result, conf)
        sys.stdout.flush()
    except BrokenPipeError:
        # Reader went away (e.g. piped into head)
        _discard_stdout()
        logger.debug("Output pipe closed by the reader.")
        return EXIT_BROKEN_PIPE

    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _render_result(result: ScanResult, conf: Dict[str, Any]) -> None:
    """
    Print the scan result in the configured format.

    The report file, when requested, is written before anything is printed
    so it stays complete even if stdout is closed early.

    Args:
        result: Finished scan.
        conf: Resolved configuration.
    """
    if conf["json_output"]:
        for chunk in iter_node_json(result.root):
            sys.stdout.write(chunk)
        sys.stdout.write("\n")
        return

    lines = render_tree(
        result.root,
        collapse_names=conf["collapse_names"],
        human=conf["human_readable"],
    )

    if conf["output_file"]:
        save_tree_to_disk(conf["output_file"], lines)

    for line in lines:
        print(line)


def _discard_stdout() -> None:
    """Point stdout at the null device so the interpreter's final flush succeeds."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())
    os.close(devnull)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
