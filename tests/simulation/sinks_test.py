"""Tests for trajectory line sinks and formatting."""

from __future__ import annotations

from io import StringIO

import numpy as np
import pytest
from portfoliomc.simulation.errors import OutputFileError
from portfoliomc.simulation.sinks import (
    NullSink,
    StreamSink,
    format_run_line,
    open_csv_sink,
)


class TestFormatRunLine:
    """Tests for the per-run CSV line format."""

    def test_two_decimals_comma_joined(self) -> None:
        values = [100 / 1.1, 100 / 1.1**2, 100 / 1.1**3]
        assert format_run_line(values) == "90.91,82.64,75.13\n"

    def test_trailing_zeros_kept(self) -> None:
        assert format_run_line([100.0, 99.5, 0.1]) == "100.00,99.50,0.10\n"

    def test_leading_zero_below_one(self) -> None:
        assert format_run_line([0.5, 0.004]) == "0.50,0.00\n"

    def test_single_value(self) -> None:
        assert format_run_line([1234567.891]) == "1234567.89\n"

    def test_accepts_numpy_rows(self) -> None:
        row = np.array([1.005, 2.0])
        line = format_run_line(row)
        assert line.endswith("\n")
        assert " " not in line
        assert line.rstrip("\n").split(",")[1] == "2.00"


class TestSinks:
    """Tests for the built-in sinks."""

    def test_null_sink_discards(self) -> None:
        sink = NullSink()
        sink.write("1.00\n")
        sink.close()

    def test_stream_sink_writes(self) -> None:
        stream = StringIO()
        sink = StreamSink(stream)
        sink.write("1.00,2.00\n")
        sink.write("3.00,4.00\n")
        assert stream.getvalue() == "1.00,2.00\n3.00,4.00\n"

    def test_borrowed_stream_left_open(self) -> None:
        stream = StringIO()
        StreamSink(stream).close()
        assert not stream.closed

    def test_borrowed_stream_without_flush(self) -> None:
        lines: list[str] = []

        class WriteOnly:
            def write(self, line: str) -> None:
                lines.append(line)

        sink = StreamSink(WriteOnly())  # type: ignore[arg-type]
        sink.write("1.00\n")
        sink.close()
        assert lines == ["1.00\n"]

    def test_owned_stream_closed(self) -> None:
        stream = StringIO()
        StreamSink(stream, owns_stream=True).close()
        assert stream.closed

    def test_open_csv_sink_truncates(self, tmp_path) -> None:
        path = tmp_path / "out.csv"
        path.write_text("stale\n")
        sink = open_csv_sink(path)
        sink.write("1.00\n")
        sink.close()
        assert path.read_text() == "1.00\n"

    def test_open_csv_sink_failure(self, tmp_path) -> None:
        with pytest.raises(OutputFileError, match="Unable to open"):
            open_csv_sink(tmp_path / "no" / "such" / "dir.csv")

    def test_output_file_error_is_os_error(self, tmp_path) -> None:
        with pytest.raises(OSError):
            open_csv_sink(tmp_path)
