"""Order statistics over simulation results.

All functions take the final balances already sorted ascending, which is
how :class:`~portfoliomc.simulation.engine.MonteCarloSim` stores them.

The percentile rule is nearest-rank with boundary averaging rather than
linear interpolation: when ``n * p / 100`` lands exactly on a rank
boundary the two adjacent samples are averaged, otherwise the sample at
``floor(n * p / 100)`` is reported. ``p = 50`` therefore matches the
median on every set size.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from scipy import stats

if TYPE_CHECKING:
    from collections.abc import Sequence


def result_median(values: Sequence[float]) -> float | None:
    """Return the median of an ascending-sorted sequence.

    Args:
        values: Sorted values.

    Returns:
        Middle element for odd lengths, mean of the two middle elements for
        even lengths, or None if the sequence is empty.

    """
    n = len(values)
    if n == 0:
        return None
    mid = n // 2
    if n % 2 == 0:
        return (values[mid - 1] + values[mid]) / 2
    return values[mid]


def result_percentile(values: Sequence[float], percentile: float) -> float | None:
    """Return the value at a percentile of an ascending-sorted sequence.

    Args:
        values: Sorted values.
        percentile: Percentile between 0 and 100 inclusive.

    Returns:
        The percentile value, or None if the sequence is empty or the
        percentile is out of range.

    """
    n = len(values)
    if n == 0 or percentile < 0 or percentile > 100:  # noqa: PLR2004
        return None

    exact_index = n * (percentile / 100)
    index = math.floor(exact_index)
    if index == n:
        return values[n - 1]
    if index == exact_index:
        # Rank 0 has no lower neighbour
        if index == 0:
            return values[0]
        return (values[index] + values[index - 1]) / 2
    return values[index]


def percentile_rank(
    values: Sequence[float],
    target: float,
) -> float:
    """Calculate the percentile rank of a target value within a distribution.

    Uses scipy.stats.percentileofscore with "rank" interpolation.

    Args:
        values: Array of observed values.
        target: The value to rank.

    Returns:
        Percentile rank as a float between 0 and 100.

    Raises:
        ValueError: If values is empty.

    """
    if len(values) == 0:
        msg = "values must not be empty"
        raise ValueError(msg)
    return float(stats.percentileofscore(values, target, kind="rank"))
