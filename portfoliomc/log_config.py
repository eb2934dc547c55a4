"""Shared logging configuration for the command-line entry points.

Call ``setup()`` once at the top of ``main()`` to get ISO-8601 timestamps
on every log line. Library modules only create module-level loggers.
"""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def setup(*, verbose: bool = False) -> None:
    """Configure the root logger with timestamped output on stderr.

    Args:
        verbose: If True, set level to DEBUG; otherwise WARNING so that
            report output on stdout stays clean.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        datefmt=_DATE_FORMAT,
    )
