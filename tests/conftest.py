"""
Shared fixtures: synthetic signals at 44.1 kHz.

All signals are generated in memory; no audio files are needed.
"""

import numpy as np
import pytest

from fluxchart.config import SR, ChartConfig


@pytest.fixture
def config() -> ChartConfig:
    return ChartConfig()


@pytest.fixture
def silence():
    """Factory: all-zero buffer of `seconds` length."""

    def _make(seconds: float) -> np.ndarray:
        return np.zeros(int(seconds * SR))

    return _make


@pytest.fixture
def impulses():
    """Factory: silence with unit impulses at the given sample positions."""

    def _make(n_samples: int, positions, amplitude: float = 1.0) -> np.ndarray:
        y = np.zeros(n_samples)
        y[list(positions)] = amplitude
        return y

    return _make


@pytest.fixture
def noise():
    """Factory: seeded uniform noise in [-0.5, 0.5)."""

    def _make(n_samples: int, seed: int = 7) -> np.ndarray:
        rng = np.random.default_rng(seed)
        return rng.random(n_samples) - 0.5

    return _make


def spike_train(n: int, start: int, period: int, stop: int, height: float = 1.0) -> np.ndarray:
    """Flux-like series: zeros with spikes every `period` frames in [start, stop]."""
    x = np.zeros(n)
    x[start : stop + 1 : period] = height
    return x


@pytest.fixture
def spikes():
    return spike_train
