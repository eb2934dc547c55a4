"""Command-line entry point.

Runs the preset profiles (aggressive and very conservative) through the
engine and prints the median and the 10th/90th percentile final values
together with the wall-clock runtime of each batch.

Usage::

    portfoliomc                                  # discard trajectories
    portfoliomc --output-dir out/                # out/output_<profile>.csv
    portfoliomc --sims 50000 --periods 30 --seed 7 --summary-csv summary.csv

"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import IO, Any

from portfoliomc.export.csv_export import export_summary_csv
from portfoliomc.log_config import setup as setup_logging
from portfoliomc.simulation.engine import GeneratorSampler, MonteCarloSim
from portfoliomc.simulation.errors import InvalidInputError, OutputFileError
from portfoliomc.simulation.profiles import (
    DEFAULT_NUM_SIMS,
    DEFAULT_PERIODS,
    DEFAULT_PROFILES,
    DEFAULT_START,
)

logger = logging.getLogger(__name__)

SEED_ENV_VAR = "PORTFOLIOMC_SEED"


def run_profile(  # noqa: PLR0913
    sim: MonteCarloSim,
    output_file: str | Path | None = None,
    num_sims: int = DEFAULT_NUM_SIMS,
    periods: int = DEFAULT_PERIODS,
    start: float = DEFAULT_START,
    out: IO[str] | None = None,
) -> dict[str, Any]:
    """Run one batch and print its report.

    Args:
        sim: Configured engine.
        output_file: CSV path for per-run trajectories. If None, they are
            discarded.
        num_sims: Number of runs.
        periods: Periods per run.
        start: Starting investment.
        out: Report stream. Defaults to stdout.

    Returns:
        The engine's summary dict, with ``runtime_ms`` added.

    Raises:
        OutputFileError: If output_file cannot be opened.

    """
    out = out if out is not None else sys.stdout
    sim.set_csv_output(output_file)
    try:
        out.write(f"Running {num_sims} simulations for {periods} periods\n")
        out.write(f"Starting Investment: {start:.2f}\n")

        started = time.perf_counter()
        sim.run_simulations(num_sims, periods, start)
        duration_ms = int((time.perf_counter() - started) * 1000)
    finally:
        sim.close()

    out.write(f"Median         : {sim.get_result_median():.2f}\n")
    out.write(f"10% Best Case : {sim.get_result_percentile(90):.2f}\n")
    out.write(f"10% Worst Case: {sim.get_result_percentile(10):.2f}\n")
    out.write(f"Runtime: {duration_ms}ms\n\n")

    return {**sim.summarize(), "runtime_ms": duration_ms}


def _resolve_seed(seed: int | None) -> int | None:
    """Fall back to the PORTFOLIOMC_SEED environment variable."""
    if seed is not None:
        return seed
    raw = os.environ.get(SEED_ENV_VAR, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"{SEED_ENV_VAR} must be an integer, got {raw!r}"
        raise ValueError(msg) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monte Carlo projection of inflation-adjusted portfolio values",
    )
    parser.add_argument(
        "--sims", type=int, default=DEFAULT_NUM_SIMS,
        help="Number of simulation runs per profile",
    )
    parser.add_argument(
        "--periods", type=int, default=DEFAULT_PERIODS,
        help="Number of yearly periods per run",
    )
    parser.add_argument(
        "--start", type=float, default=DEFAULT_START,
        help="Starting investment value",
    )
    parser.add_argument(
        "--output-dir", type=Path, default=None,
        help="Write per-run trajectories to <dir>/output_<profile>.csv",
    )
    parser.add_argument(
        "--summary-csv", type=Path, default=None,
        help="Write a one-row-per-profile summary CSV",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help=f"Random seed (defaults to ${SEED_ENV_VAR}, else unseeded)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Process exit code: 0 on success, 1 if an output file cannot be
        opened, 2 if the batch parameters or the seed are invalid.

    """
    args = _build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)
    try:
        seed = _resolve_seed(args.seed)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    summaries: dict[str, dict[str, Any]] = {}
    for profile in DEFAULT_PROFILES:
        print(f"Running {profile.label} Simulation")
        sim = profile.build(sampler=GeneratorSampler(seed))
        output_file = None
        if args.output_dir is not None:
            output_file = args.output_dir / f"output_{profile.name}.csv"
        try:
            summaries[profile.name] = run_profile(
                sim,
                output_file,
                num_sims=args.sims,
                periods=args.periods,
                start=args.start,
            )
        except OutputFileError as exc:
            print(str(exc), file=sys.stderr)
            if exc.__cause__ is not None:
                print(f"  caused by: {exc.__cause__}", file=sys.stderr)
            return 1
        except InvalidInputError as exc:
            print(f"Invalid batch parameters: {exc}", file=sys.stderr)
            return 2

    if args.summary_csv is not None:
        export_summary_csv(summaries, output_path=str(args.summary_csv))
    logger.info("Completed %d profiles", len(summaries))
    return 0


if __name__ == "__main__":
    sys.exit(main())
