"""CSV export for simulation summaries.

Generates a CSV table with one row per simulated profile, preceded by
metadata comment lines (title and generation time). Per-run trajectory
files are written by the engine's output sink, not here.

"""

from __future__ import annotations

import csv
import io
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_VALUE_FIELDS = ("median", "p10", "p90", "mean", "min", "max")


def export_summary_csv(
    summaries: dict[str, dict[str, Any]],
    output_path: str | None = None,
) -> str:
    """Export simulation summaries to CSV format.

    Args:
        summaries: Mapping of profile name to the dict returned by
            ``MonteCarloSim.summarize()``.
        output_path: File path to write. If None, returns CSV string.

    Returns:
        The CSV content as a string, or file path if output_path given.

    """
    fieldnames = ["profile", "n_runs", *_VALUE_FIELDS]
    output = io.StringIO()

    _write_metadata_header(
        output,
        "Simulation Summary Export",
        extra=f"Profiles: {len(summaries)}",
    )

    writer = csv.DictWriter(output, fieldnames=fieldnames, lineterminator="\n")
    writer.writeheader()
    for name, summary in summaries.items():
        row: dict[str, Any] = {"profile": name, "n_runs": summary.get("n_runs", 0)}
        for key in _VALUE_FIELDS:
            val = summary.get(key)
            row[key] = "" if val is None else f"{float(val):.2f}"
        writer.writerow(row)

    content = output.getvalue()
    if output_path:
        Path(output_path).write_text(content, encoding="utf-8")
        logger.info("Exported %d profile summaries to %s", len(summaries), output_path)
        return output_path
    return content


def _write_metadata_header(
    output: io.StringIO,
    title: str,
    extra: str = "",
) -> None:
    """Write metadata comment lines at the top of a CSV export.

    Args:
        output: StringIO buffer to write to.
        title: Export title.
        extra: Optional additional metadata line.

    """
    now = datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    output.write(f"# {title}\n")
    output.write(f"# Generated: {now}\n")
    if extra:
        output.write(f"# {extra}\n")
