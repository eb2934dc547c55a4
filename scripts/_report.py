"""Report helpers for the portfoliomc check runner.

Every check writes its raw tool output under ``.reports/<check>/`` and a
one-line status into ``.reports/summary.json`` so a run can be inspected
without re-running the tools.
"""

from __future__ import annotations

import json
import subprocess
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parent.parent
REPORTS_DIR = PROJECT_ROOT / ".reports"


def write_text_report(
    check: str,
    content: str,
    filename: str,
    reports_dir: Path = REPORTS_DIR,
) -> Path:
    """Write raw tool output for a check and return the file path."""
    check_dir = reports_dir / check
    check_dir.mkdir(parents=True, exist_ok=True)
    path = check_dir / filename
    path.write_text(content)
    return path


def run_command(
    cmd: list[str],
    timeout: int = 300,
) -> subprocess.CompletedProcess[str]:
    """Run a tool from the project root and capture its output.

    Args:
        cmd: Command and arguments to run.
        timeout: Seconds before the process is killed.

    Returns:
        CompletedProcess with captured stdout/stderr. On timeout, returncode
        is 1 and stderr describes the timeout.
    """
    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=PROJECT_ROOT,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return subprocess.CompletedProcess(
            args=cmd,
            returncode=1,
            stdout="",
            stderr=f"TIMEOUT after {timeout}s: {' '.join(cmd)}\n",
        )


def update_summary(
    check: str,
    passed: bool,
    details: dict[str, Any],
    reports_dir: Path = REPORTS_DIR,
) -> dict[str, Any]:
    """Record a check result in summary.json and return the whole summary."""
    summary_path = reports_dir / "summary.json"
    if summary_path.exists():
        summary = json.loads(summary_path.read_text())
    else:
        reports_dir.mkdir(parents=True, exist_ok=True)
        summary = {"checks": {}}

    now = datetime.now(UTC).isoformat()
    summary["generated_at"] = now
    summary["checks"][check] = {
        "status": "pass" if passed else "fail",
        "timestamp": now,
        **details,
    }
    statuses = [c["status"] for c in summary["checks"].values()]
    summary["overall_status"] = "pass" if all(s == "pass" for s in statuses) else "fail"

    summary_path.write_text(json.dumps(summary, indent=2) + "\n")
    return summary


def format_status(check: str, passed: bool, message: str) -> str:
    """Format the one-line status printed for a check."""
    return f"[{check}] {'PASS' if passed else 'FAIL'}: {message}"


def parse_verbose_flag(argv: list[str] | None = None) -> bool:
    """Check if --verbose or -v was passed on the command line."""
    args = sys.argv if argv is None else argv
    return "--verbose" in args or "-v" in args
