"""Forward-looking Monte Carlo engine for a single Gaussian-return asset.

Each run starts from the same balance and compounds one sampled return per
period, deflating by inflation every period::

    balance[i] = balance[i - 1] * (z_i * sigma + (1 + mean)) / (1 + inflation)

where ``z_i`` is a standard-normal draw. The final balance of every run is
kept; the rest of the trajectory is streamed to the output sink and then
discarded. Runs are evaluated in vectorised chunks, one period at a time
across all runs in the chunk, so draw order and output order are the same
as a strictly sequential evaluation.

Example::

    sim = MonteCarloSim(mean=9.4324, std_dev=15.675, inflation_rate=3.5)
    sim.run_simulations(num_sims=10_000, periods=20, start=100_000.0)
    sim.get_result_median()

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING, Any, Protocol

import numpy as np

from portfoliomc.analysis.statistics import (
    percentile_rank,
    result_median,
    result_percentile,
)
from portfoliomc.simulation.errors import InvalidConfigurationError, InvalidInputError
from portfoliomc.simulation.sinks import (
    LineSink,
    NullSink,
    StreamSink,
    format_run_line,
    open_csv_sink,
)

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1_000


class NormalSampler(Protocol):
    """Source of standard-normal deviates (mean 0, variance 1)."""

    def standard_normal(self, size: int) -> NDArray[np.float64]:
        """Return ``size`` deviates in draw order."""
        ...


class GeneratorSampler:
    """Standard-normal sampler backed by a NumPy ``Generator``.

    Args:
        seed: Random seed for reproducibility. Ignored if ``rng`` is given.
        rng: Pre-built generator to draw from.

    """

    def __init__(
        self,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def standard_normal(self, size: int) -> NDArray[np.float64]:
        """Draw ``size`` deviates from the generator."""
        return self.rng.standard_normal(size)


class FixedSampler:
    """Sampler that returns the same deviate for every draw.

    Used to replay batches deterministically.
    """

    def __init__(self, value: float) -> None:
        self.value = value

    def standard_normal(self, size: int) -> NDArray[np.float64]:
        """Return ``size`` copies of the fixed deviate."""
        return np.full(size, self.value, dtype=np.float64)


@dataclass(frozen=True)
class SimulationConfig:
    """Per-period growth parameters, stored as multipliers.

    Attributes:
        return_multiplier: Expected growth factor per period (1 + mean).
        standard_deviation: Standard deviation of the growth factor.
        inflation_multiplier: Factor each period's balance is divided by.

    """

    return_multiplier: float
    standard_deviation: float
    inflation_multiplier: float

    @classmethod
    def from_percentages(
        cls,
        mean: float,
        std_dev: float,
        inflation_rate: float,
    ) -> SimulationConfig:
        """Build a config from percentage inputs.

        Args:
            mean: Mean annual return as a percentage (e.g., 7.0 for 7%).
            std_dev: Standard deviation of the annual return as a percentage.
            inflation_rate: Annual inflation rate as a percentage.

        Returns:
            The derived configuration.

        Raises:
            InvalidConfigurationError: If std_dev is negative.

        """
        if std_dev < 0:
            msg = f"Standard deviation cannot be negative, got {std_dev}"
            raise InvalidConfigurationError(msg)
        return cls(
            return_multiplier=1.0 + mean / 100,
            standard_deviation=std_dev / 100,
            inflation_multiplier=1.0 + inflation_rate / 100,
        )


class MonteCarloSim:
    """Run batches of Gaussian-return simulations and query their results.

    Args:
        mean: Mean annual return as a percentage.
        std_dev: Standard deviation of the annual return as a percentage.
            Must be non-negative.
        inflation_rate: Annual inflation rate as a percentage.
        sampler: Standard-normal source. Defaults to an unseeded
            GeneratorSampler.
        chunk_size: Maximum number of runs evaluated together.

    Raises:
        InvalidConfigurationError: If std_dev is negative or chunk_size is
            not positive.

    """

    def __init__(
        self,
        mean: float,
        std_dev: float,
        inflation_rate: float,
        sampler: NormalSampler | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.config = SimulationConfig.from_percentages(mean, std_dev, inflation_rate)
        if chunk_size < 1:
            msg = f"chunk_size must be positive, got {chunk_size}"
            raise InvalidConfigurationError(msg)
        if sampler is None:
            sampler = GeneratorSampler()
        self.sampler: NormalSampler = sampler
        self.chunk_size = chunk_size
        self._sink: LineSink = NullSink()
        self._results: tuple[float, ...] = ()

    def __enter__(self) -> MonteCarloSim:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def return_multiplier(self) -> float:
        """Mean growth factor per period."""
        return self.config.return_multiplier

    @property
    def standard_deviation(self) -> float:
        """Standard deviation of the growth factor."""
        return self.config.standard_deviation

    @property
    def inflation_multiplier(self) -> float:
        """Inflation divisor applied every period."""
        return self.config.inflation_multiplier

    # ── Output ──

    def set_output_stream(self, stream: IO[str] | None) -> None:
        """Send trajectory lines to a text stream, or discard them if None.

        The engine does not close a stream passed in here.
        """
        self._replace_sink(NullSink() if stream is None else StreamSink(stream))

    def set_sink(self, sink: LineSink | None) -> None:
        """Install a caller-provided line sink, or discard lines if None.

        The sink's ``close()`` is called when it is replaced or when the
        engine is closed.
        """
        self._replace_sink(NullSink() if sink is None else sink)

    def set_csv_output(self, path: str | Path | None) -> None:
        """Write trajectory lines to a CSV file, or discard them if None.

        The file is truncated and owned by the engine until another sink is
        installed or ``close()`` is called.

        Args:
            path: Destination file path.

        Raises:
            OutputFileError: If the file cannot be opened. The current sink
                is left in place.

        """
        if path is None:
            self._replace_sink(NullSink())
            return
        sink = open_csv_sink(path)
        self._replace_sink(sink)
        logger.info("Writing simulation trajectories to %s", path)

    def close(self) -> None:
        """Close the current sink and stop writing trajectories."""
        self._replace_sink(NullSink())

    def _replace_sink(self, sink: LineSink) -> None:
        previous = self._sink
        self._sink = sink
        previous.close()

    # ── Simulation ──

    def run_simulations(self, num_sims: int, periods: int, start: float) -> None:
        """Run a batch of independent simulations.

        Every run's trajectory is written to the output sink in generation
        order. When the batch completes, the sorted final balances replace
        the previous results.

        Args:
            num_sims: Number of runs. Must be at least 1.
            periods: Number of periods per run. Must be at least 1.
            start: Starting balance of every run. Must be positive.

        Raises:
            InvalidInputError: If any argument is out of range. Nothing is
                drawn or written in that case.

        """
        if start <= 0:
            msg = f"Starting investment must be positive, got {start}"
            raise InvalidInputError(msg)
        if num_sims < 1:
            msg = f"Number of simulation runs must be positive, got {num_sims}"
            raise InvalidInputError(msg)
        if periods < 1:
            msg = f"Number of simulation periods must be positive, got {periods}"
            raise InvalidInputError(msg)

        logger.info(
            "Running %d simulations over %d periods from %.2f",
            num_sims,
            periods,
            start,
        )

        finals = np.empty(num_sims, dtype=np.float64)
        done = 0
        while done < num_sims:
            n_runs = min(self.chunk_size, num_sims - done)
            balances = self._run_chunk(n_runs, periods, start)
            for trajectory in balances:
                self._sink.write(format_run_line(trajectory))
            finals[done : done + n_runs] = balances[:, -1]
            done += n_runs

        finals.sort()
        self._results = tuple(finals.tolist())
        logger.debug(
            "Batch complete, median final value %.2f", self.get_result_median()
        )

    def _run_chunk(
        self,
        n_runs: int,
        periods: int,
        start: float,
    ) -> NDArray[np.float64]:
        """Simulate ``n_runs`` runs and return balances of shape (n_runs, periods)."""
        cfg = self.config
        # Row-major reshape: run k consumes draws k*periods .. (k+1)*periods - 1
        draws = self.sampler.standard_normal(n_runs * periods).reshape(n_runs, periods)
        growth = draws * cfg.standard_deviation + cfg.return_multiplier

        balances = np.empty((n_runs, periods), dtype=np.float64)
        balance = np.full(n_runs, start, dtype=np.float64)
        for period in range(periods):
            balance = balance * growth[:, period] / cfg.inflation_multiplier
            balances[:, period] = balance
        return balances

    # ── Results ──

    def get_results(self) -> tuple[float, ...]:
        """Return the sorted final balances of the last batch."""
        return self._results

    def get_result_median(self) -> float | None:
        """Return the median final balance, or None before any batch."""
        return result_median(self._results)

    def get_result_percentile(self, percentile: float) -> float | None:
        """Return the final balance at a percentile (0-100).

        Returns None before any batch or if the percentile is out of range.
        """
        return result_percentile(self._results, percentile)

    def get_result_rank(self, target: float) -> float | None:
        """Return the percentile rank of ``target`` among the final balances."""
        if not self._results:
            return None
        return percentile_rank(self._results, target)

    def summarize(self) -> dict[str, Any]:
        """Summarize the final-balance distribution of the last batch.

        Returns:
            Dict with n_runs, median, p10, p90, mean, min and max, or an
            empty dict before any batch.

        """
        if not self._results:
            return {}
        return {
            "n_runs": len(self._results),
            "median": self.get_result_median(),
            "p10": self.get_result_percentile(10),
            "p90": self.get_result_percentile(90),
            "mean": float(np.mean(self._results)),
            "min": self._results[0],
            "max": self._results[-1],
        }
