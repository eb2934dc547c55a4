"""Tests for the command-line entry point."""

from __future__ import annotations

from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest
from portfoliomc.main import _resolve_seed, main, run_profile
from portfoliomc.simulation.engine import FixedSampler, MonteCarloSim
from portfoliomc.simulation.errors import OutputFileError


class TestRunProfile:
    """Tests for a single reported batch."""

    def test_report_lines(self, fixed_sampler: FixedSampler) -> None:
        sim = MonteCarloSim(0.0, 10.0, 0.0, sampler=fixed_sampler)
        out = StringIO()
        summary = run_profile(sim, num_sims=4, periods=1, start=100.0, out=out)

        lines = out.getvalue().splitlines()
        assert lines[0] == "Running 4 simulations for 1 periods"
        assert lines[1] == "Starting Investment: 100.00"
        assert lines[2] == "Median         : 100.50"
        assert lines[3] == "10% Best Case : 100.50"
        assert lines[4] == "10% Worst Case: 100.50"
        assert lines[5].startswith("Runtime: ")
        assert lines[5].endswith("ms")
        assert summary["n_runs"] == 4
        assert summary["runtime_ms"] >= 0

    def test_writes_trajectories(
        self, tmp_path: Path, fixed_sampler: FixedSampler
    ) -> None:
        sim = MonteCarloSim(0.0, 0.0, 10.0, sampler=fixed_sampler)
        out_path = tmp_path / "output.csv"
        run_profile(sim, out_path, num_sims=2, periods=3, start=100.0, out=StringIO())
        assert out_path.read_text() == "90.91,82.64,75.13\n90.91,82.64,75.13\n"

    def test_unopenable_file_raises(
        self, tmp_path: Path, fixed_sampler: FixedSampler
    ) -> None:
        sim = MonteCarloSim(0.0, 0.0, 10.0, sampler=fixed_sampler)
        with pytest.raises(OutputFileError):
            run_profile(sim, tmp_path / "missing" / "out.csv", out=StringIO())


class TestMain:
    """Tests for the CLI."""

    def test_runs_both_profiles(self) -> None:
        stdout = StringIO()
        with patch("sys.stdout", stdout):
            code = main(["--sims", "20", "--periods", "3", "--seed", "1"])

        assert code == 0
        output = stdout.getvalue()
        assert "Running Aggressive Simulation" in output
        assert "Running Very Conservative Simulation" in output
        assert output.count("Running 20 simulations for 3 periods") == 2
        assert output.count("Median         : ") == 2

    def test_output_dir(self, tmp_path: Path) -> None:
        with patch("sys.stdout", StringIO()):
            code = main(
                ["--sims", "15", "--periods", "4", "--output-dir", str(tmp_path)]
            )

        assert code == 0
        for name in ("aggressive", "conservative"):
            lines = (tmp_path / f"output_{name}.csv").read_text().splitlines()
            assert len(lines) == 15
            assert all(len(line.split(",")) == 4 for line in lines)

    def test_summary_csv(self, tmp_path: Path) -> None:
        summary_path = tmp_path / "summary.csv"
        with patch("sys.stdout", StringIO()):
            code = main(["--sims", "10", "--summary-csv", str(summary_path)])

        assert code == 0
        content = summary_path.read_text()
        assert "aggressive,10," in content
        assert "conservative,10," in content

    def test_unopenable_output_exits_1(self, tmp_path: Path) -> None:
        stderr = StringIO()
        missing = tmp_path / "does" / "not" / "exist"
        with patch("sys.stdout", StringIO()), patch("sys.stderr", stderr):
            code = main(["--sims", "5", "--output-dir", str(missing)])

        assert code == 1
        assert "Unable to open the CSV output file" in stderr.getvalue()

    def test_invalid_batch_exits_2(self) -> None:
        stderr = StringIO()
        with patch("sys.stdout", StringIO()), patch("sys.stderr", stderr):
            code = main(["--sims", "0"])

        assert code == 2
        assert "simulation runs must be positive" in stderr.getvalue()

    def test_invalid_seed_env_exits_2(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORTFOLIOMC_SEED", "not-a-seed")
        stdout, stderr = StringIO(), StringIO()
        with patch("sys.stdout", stdout), patch("sys.stderr", stderr):
            code = main(["--sims", "5"])

        assert code == 2
        assert "PORTFOLIOMC_SEED must be an integer" in stderr.getvalue()
        assert stdout.getvalue() == ""

    def test_seeded_runs_are_reproducible(self) -> None:
        outputs = []
        for _ in range(2):
            stdout = StringIO()
            with patch("sys.stdout", stdout):
                main(["--sims", "50", "--seed", "7"])
            lines = stdout.getvalue().splitlines()
            outputs.append([line for line in lines if "Runtime" not in line])
        assert outputs[0] == outputs[1]


class TestResolveSeed:
    """Tests for seed resolution."""

    def test_explicit_seed_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORTFOLIOMC_SEED", "99")
        assert _resolve_seed(3) == 3

    def test_env_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORTFOLIOMC_SEED", "99")
        assert _resolve_seed(None) == 99

    def test_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PORTFOLIOMC_SEED", raising=False)
        assert _resolve_seed(None) is None

    def test_invalid_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORTFOLIOMC_SEED", "abc")
        with pytest.raises(ValueError, match="must be an integer"):
            _resolve_seed(None)
