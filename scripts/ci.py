"""Run lint, type checking and tests, stopping at the first failure.

Writes:
    .reports/lint/ruff_output.txt
    .reports/typecheck/mypy_output.txt
    .reports/test/pytest_output.txt, .reports/test/coverage.json
    .reports/summary.json

Stdout::

    [lint] PASS: ruff check and format clean
    [typecheck] PASS: 0 errors
    [test] PASS: 61 passed, 0 failed | coverage: 97.4%
    [ci] OVERALL: PASS

Usage::

    python -m scripts.ci [--verbose] [--continue-on-error]
"""

from __future__ import annotations

import json
import re
import sys
from typing import Any

from scripts._report import (
    REPORTS_DIR,
    format_status,
    parse_verbose_flag,
    run_command,
    update_summary,
    write_text_report,
)


def run_lint() -> tuple[bool, str, dict[str, Any], str]:
    """Run ruff check and ruff format --check."""
    check = run_command(["ruff", "check", "."])
    fmt = run_command(["ruff", "format", "--check", "."])
    output = check.stdout + check.stderr + fmt.stdout + fmt.stderr
    write_text_report("lint", output, "ruff_output.txt")

    passed = check.returncode == 0 and fmt.returncode == 0
    details = {
        "check_clean": check.returncode == 0,
        "format_clean": fmt.returncode == 0,
    }
    message = "ruff check and format clean" if passed else "ruff reported issues"
    return passed, message, details, output


def run_typecheck() -> tuple[bool, str, dict[str, Any], str]:
    """Run mypy over the package."""
    result = run_command(["mypy", "portfoliomc"])
    output = result.stdout + result.stderr
    write_text_report("typecheck", output, "mypy_output.txt")

    match = re.search(r"Found (\d+) errors?", output)
    n_errors = int(match.group(1)) if match else 0
    passed = result.returncode == 0
    return passed, f"{n_errors} errors", {"errors": n_errors}, output


def run_tests() -> tuple[bool, str, dict[str, Any], str]:
    """Run pytest with coverage."""
    coverage_path = REPORTS_DIR / "test" / "coverage.json"
    result = run_command(
        [
            sys.executable,
            "-m",
            "pytest",
            "--cov=portfoliomc",
            f"--cov-report=json:{coverage_path}",
            "-q",
        ],
    )
    output = result.stdout + result.stderr
    write_text_report("test", output, "pytest_output.txt")

    counts = {
        kind: int(m.group(1)) if (m := re.search(rf"(\d+) {kind}", output)) else 0
        for kind in ("passed", "failed")
    }
    coverage_pct = 0.0
    if coverage_path.exists():
        totals = json.loads(coverage_path.read_text()).get("totals", {})
        coverage_pct = float(totals.get("percent_covered", 0.0))

    passed = result.returncode == 0
    message = (
        f"{counts['passed']} passed, {counts['failed']} failed"
        f" | coverage: {coverage_pct:.1f}%"
    )
    details = {**counts, "coverage_percent": round(coverage_pct, 1)}
    return passed, message, details, output


STEPS = (
    ("lint", run_lint),
    ("typecheck", run_typecheck),
    ("test", run_tests),
)


def run(verbose: bool = False, continue_on_error: bool = False) -> int:
    """Run all steps and return the process exit code."""
    all_passed = True
    for name, step in STEPS:
        passed, message, details, output = step()
        update_summary(name, passed, details)
        print(format_status(name, passed, message))
        # Failures always show full tool output
        if verbose or not passed:
            print(output)
        if not passed:
            all_passed = False
            if not continue_on_error:
                break

    print(f"[ci] OVERALL: {'PASS' if all_passed else 'FAIL'}")
    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(
        run(
            verbose=parse_verbose_flag(),
            continue_on_error="--continue-on-error" in sys.argv,
        )
    )
