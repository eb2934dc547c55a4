"""Preset simulation profiles and batch defaults.

Two return/volatility assumptions are shipped: an equity-heavy
"aggressive" mix and a bond-heavy "conservative" mix, both deflated by
3.5% annual inflation. Percentages, not decimals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from portfoliomc.simulation.engine import MonteCarloSim

if TYPE_CHECKING:
    from portfoliomc.simulation.engine import NormalSampler

DEFAULT_NUM_SIMS = 10_000
DEFAULT_PERIODS = 20
DEFAULT_START = 100_000.0


@dataclass(frozen=True)
class SimulationProfile:
    """Named set of engine parameters.

    Attributes:
        name: Short identifier, used in output file names.
        label: Human-readable title.
        mean: Mean annual return as a percentage.
        std_dev: Standard deviation of the annual return as a percentage.
        inflation_rate: Annual inflation rate as a percentage.

    """

    name: str
    label: str
    mean: float
    std_dev: float
    inflation_rate: float

    def build(self, sampler: NormalSampler | None = None) -> MonteCarloSim:
        """Create an engine configured with this profile."""
        return MonteCarloSim(
            mean=self.mean,
            std_dev=self.std_dev,
            inflation_rate=self.inflation_rate,
            sampler=sampler,
        )


AGGRESSIVE = SimulationProfile(
    name="aggressive",
    label="Aggressive",
    mean=9.4324,
    std_dev=15.675,
    inflation_rate=3.5,
)

CONSERVATIVE = SimulationProfile(
    name="conservative",
    label="Very Conservative",
    mean=6.189,
    std_dev=6.3438,
    inflation_rate=3.5,
)

DEFAULT_PROFILES: tuple[SimulationProfile, ...] = (AGGRESSIVE, CONSERVATIVE)
