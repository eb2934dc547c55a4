"""Shared pytest fixtures for simulation engine tests."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.typing import NDArray
from portfoliomc.simulation.engine import FixedSampler, GeneratorSampler


class CountingSampler:
    """Sampler returning 0, -1, -2, ... so every draw is distinguishable."""

    def __init__(self) -> None:
        self.drawn = 0

    def standard_normal(self, size: int) -> NDArray[np.float64]:
        values = -np.arange(self.drawn, self.drawn + size, dtype=np.float64)
        self.drawn += size
        return values


@pytest.fixture
def fixed_sampler() -> FixedSampler:
    """Provide a sampler that always returns a deviate of 0.05."""
    return FixedSampler(0.05)


@pytest.fixture
def seeded_sampler() -> GeneratorSampler:
    """Provide a seeded sampler for reproducible batches."""
    return GeneratorSampler(seed=42)


@pytest.fixture
def counting_sampler() -> CountingSampler:
    """Provide a sampler whose draws encode their position in the stream."""
    return CountingSampler()


@pytest.fixture
def sample_start_value() -> float:
    """Provide a standard starting investment for testing."""
    return 100.0
