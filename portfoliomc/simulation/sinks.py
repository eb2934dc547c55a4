"""Line sinks for per-run simulation trajectories.

Each completed run is rendered as one CSV line of period balances and
handed to a sink. The line format is consumed by downstream tooling, so it
is fixed: values with exactly two decimals, comma separated, no
whitespace, newline terminated::

    90.91,82.64,75.13

"""

from __future__ import annotations

from pathlib import Path
from typing import IO, TYPE_CHECKING, Protocol

from portfoliomc.simulation.errors import OutputFileError

if TYPE_CHECKING:
    from collections.abc import Iterable


class LineSink(Protocol):
    """Destination for formatted trajectory lines."""

    def write(self, line: str) -> None:
        """Deliver one newline-terminated line."""
        ...

    def close(self) -> None:
        """Release any resources held by the sink."""
        ...


class NullSink:
    """Sink that discards every line."""

    def write(self, line: str) -> None:
        """Discard the line."""

    def close(self) -> None:
        """Nothing to release."""


class StreamSink:
    """Sink that writes lines to a text stream.

    Write errors raised by the stream are not caught, so a failing stream
    aborts the batch that is writing to it.

    Args:
        stream: Any object with a ``write(str)`` method (file, StringIO,
            ``sys.stdout``).
        owns_stream: If True, ``close()`` also closes the stream.

    """

    def __init__(self, stream: IO[str], *, owns_stream: bool = False) -> None:
        self.stream = stream
        self.owns_stream = owns_stream

    def write(self, line: str) -> None:
        """Write the line to the underlying stream."""
        self.stream.write(line)

    def close(self) -> None:
        """Close the stream if this sink opened it, otherwise flush it.

        Borrowed streams without a ``flush`` method are left untouched.
        """
        if self.owns_stream:
            self.stream.close()
            return
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()


def open_csv_sink(path: str | Path) -> StreamSink:
    """Open a file-backed sink, truncating any existing file.

    Args:
        path: Destination CSV path.

    Returns:
        A StreamSink that owns the opened file.

    Raises:
        OutputFileError: If the file cannot be opened for writing.

    """
    try:
        handle = Path(path).open("w", encoding="utf-8", newline="")  # noqa: SIM115
    except OSError as exc:
        msg = f"Unable to open the CSV output file {path}"
        raise OutputFileError(msg) from exc
    return StreamSink(handle, owns_stream=True)


def format_run_line(values: Iterable[float]) -> str:
    """Render a run's period balances as one CSV line.

    Args:
        values: Period balances in period order.

    Returns:
        Comma-joined balances with two decimals and a trailing newline.
        Magnitudes below 1 keep their leading zero (``0.50``, not ``.50``).

    """
    return ",".join(f"{float(v):.2f}" for v in values) + "\n"
