from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess: exit codes, the report on stdout, and diagnostics on
stderr.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, Iterator, List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "dutree" / "main.py"


def cli_env() -> Dict[str, str]:
    """Inject the 'src' directory into PYTHONPATH so the package resolves uninstalled."""
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    return env


def run_cli(args: List[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    Output is decoded with surrogateescape so raw entry-name bytes survive.
    """
    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=cli_env(),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="surrogateescape",
    )


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create a small tree to measure.

    Structure:
    /input
      /big
        blob.bin    (20000 bytes)
      /.git
        HEAD        (10 bytes)
      note.txt      (5 bytes)
    """
    input_dir = tmp_path / "input"
    input_dir.mkdir()

    big = input_dir / "big"
    big.mkdir()
    (big / "blob.bin").write_bytes(b"0" * 20000)

    git = input_dir / ".git"
    git.mkdir()
    (git / "HEAD").write_text("ref: main", encoding="utf-8")

    (input_dir / "note.txt").write_text("hello", encoding="utf-8")
    return input_dir


def test_cli_happy_path(sample_tree: Path) -> None:
    """TC-01: Report lists entries, root first, directories before files."""
    result = run_cli(["--bytes", str(sample_tree)])

    assert result.returncode == 0, f"CLI failed with stderr: {result.stderr}"
    lines = result.stdout.splitlines()

    assert lines[0].endswith(" ./")
    names = [line.split()[-1] for line in lines]
    assert names.index("big/") < names.index("note.txt")
    assert names.index(".git/") < names.index("note.txt")
    assert "blob.bin" in names


def test_cli_collapses_boring_directories(sample_tree: Path) -> None:
    """TC-02: .git contents are replaced by a placeholder unless disabled."""
    collapsed = run_cli([str(sample_tree)])
    expanded = run_cli(["--no-collapse", str(sample_tree)])

    assert "HEAD" not in collapsed.stdout
    assert "..." in collapsed.stdout
    assert "HEAD" in expanded.stdout


def test_cli_defaults_to_current_directory(sample_tree: Path) -> None:
    """TC-03: Without a path argument the working directory is measured."""
    result = run_cli(["--bytes"], cwd=sample_tree)

    assert result.returncode == 0
    assert "note.txt" in result.stdout


def test_cli_missing_root_fails(tmp_path: Path) -> None:
    """TC-04: A root that cannot be stat-ed yields a non-zero exit and no report."""
    result = run_cli([str(tmp_path / "non_existent_folder")])

    assert result.returncode == 2
    assert result.stdout == ""
    assert "ENOENT" in result.stderr


def test_cli_json_output(sample_tree: Path) -> None:
    """TC-05: JSON mode exposes the measured tree."""
    result = run_cli(["--json", str(sample_tree)])

    assert result.returncode == 0
    data = json.loads(result.stdout)

    assert data["name"] == "."
    assert data["kind"] == "directory"
    assert data["children"][0]["kind"] == "directory"
    big = next(c for c in data["children"] if c["name"] == "big")
    assert big["aggregate_size"] == 20000


def test_cli_writes_report_file(sample_tree: Path, tmp_path: Path) -> None:
    """TC-06: --output persists the same lines that were printed."""
    report = tmp_path / "out" / "report.txt"

    result = run_cli(["-o", str(report), str(sample_tree)])

    assert result.returncode == 0
    assert report.read_text(encoding="utf-8") == result.stdout


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root bypasses permissions")
def test_cli_unreadable_subdirectory_keeps_exit_code(sample_tree: Path) -> None:
    """TC-07: Per-entry failures go to stderr and do not change the exit code."""
    locked = sample_tree / "locked"
    locked.mkdir()
    os.chmod(locked, 0)
    try:
        result = run_cli([str(sample_tree)])
    finally:
        os.chmod(locked, 0o755)

    assert result.returncode == 0
    assert "locked/" in result.stdout
    assert "opendir()" in result.stderr
    assert "EACCES" in result.stderr


DEEP_LEVELS = 1500


@pytest.fixture
def deep_tree(tmp_path: Path) -> Iterator[Path]:
    """
    Create a chain of nested 'a' directories deeper than the recursion limit.

    Removed bottom-up on teardown.
    """
    top = tmp_path / "deep"
    top.mkdir()
    current = top
    for _ in range(DEEP_LEVELS):
        current = current / "a"
        current.mkdir()
    (current / "leaf.bin").write_bytes(b"0" * 1234)

    yield top

    (current / "leaf.bin").unlink()
    while current != top:
        current.rmdir()
        current = current.parent


def test_cli_measures_very_deep_tree(deep_tree: Path) -> None:
    """TC-08: Nesting deeper than the interpreter recursion limit still reports."""
    result = run_cli(["--bytes", "--no-collapse", str(deep_tree)])

    assert result.returncode == 0, result.stderr[-2000:]
    lines = result.stdout.splitlines()
    assert len(lines) == DEEP_LEVELS + 2
    assert lines[-1].endswith("  " * (DEEP_LEVELS + 1) + "leaf.bin")
    assert lines[-1].split()[0] == "1234"


def test_cli_json_for_very_deep_tree(deep_tree: Path) -> None:
    """TC-09: JSON output is produced for the same tree."""
    result = run_cli(["--json", str(deep_tree)])

    assert result.returncode == 0, result.stderr[-2000:]
    assert result.stdout.count('"name": "a"') == DEEP_LEVELS
    assert '"name": "leaf.bin"' in result.stdout


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="filesystem rejects non-UTF-8 names")
def test_cli_handles_undecodable_names(sample_tree: Path, tmp_path: Path) -> None:
    """TC-10: Raw name bytes reach stdout, the report file and JSON."""
    with open(os.path.join(os.fsencode(sample_tree), b"bad\xff"), "wb") as f:
        f.write(b"abc")
    report = tmp_path / "bad_names.txt"

    text = run_cli(["--bytes", "-o", str(report), str(sample_tree)])
    as_json = run_cli(["--json", str(sample_tree)])

    assert text.returncode == 0, text.stderr
    assert "bad\udcff" in text.stdout
    assert report.read_bytes() == text.stdout.encode("utf-8", "surrogateescape")

    assert as_json.returncode == 0, as_json.stderr
    names = [child["name"] for child in json.loads(as_json.stdout)["children"]]
    assert "bad\udcff" in names


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX pipe semantics")
def test_cli_stops_quietly_when_reader_closes_pipe(tmp_path: Path) -> None:
    """TC-11: Piping into a reader that exits early is not a crash."""
    wide = tmp_path / "wide"
    wide.mkdir()
    # Far more output than a pipe buffer holds
    for i in range(6000):
        (wide / f"{i:05d}_{'x' * 40}").touch()

    proc = subprocess.Popen(
        [sys.executable, str(ENTRY_POINT), "--bytes", str(wide)],
        env=cli_env(),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    first_line = proc.stdout.readline()
    proc.stdout.close()
    stderr = proc.stderr.read().decode("utf-8", "replace")
    proc.stderr.close()
    returncode = proc.wait(timeout=120)

    assert first_line.rstrip().endswith(b"./")
    assert returncode == 141
    assert "Traceback" not in stderr
    assert "CRITICAL" not in stderr
