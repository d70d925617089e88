"""SuperFlux-style onset strength, per-band flux and spectral centroid.

Total flux compares every bin against the maximum of the last few frames
(trajectory tracking), so vibrato and slow bends do not read as new onsets.
Band flux uses the plain previous frame and only feeds lane assignment.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from fluxchart.config import ChartConfig
from fluxchart.spectrum import SpectrumFrame, bin_width, freq_to_bin

LOG_EPS = 1e-10
NEUTRAL_CENTROID_HZ = 500.0
NUM_BANDS = 5


@dataclass(frozen=True)
class FluxSeries:
    total: np.ndarray     # (n_frames,)
    bands: np.ndarray     # (n_frames, 5)
    centroid: np.ndarray  # (n_frames,) Hz

    def __len__(self):
        return len(self.total)


def band_of_bins(n_bins: int, config: ChartConfig) -> np.ndarray:
    """Band index (0-4) for every FFT bin."""
    edges = [freq_to_bin(f, config.sample_rate, config.window_size) for f in config.band_boundaries]
    return np.searchsorted(np.asarray(edges), np.arange(n_bins), side="right")


def compute_flux(spectra: Iterable[SpectrumFrame], num_frames: int, config: ChartConfig) -> FluxSeries:
    total = np.zeros(num_frames)
    bands = np.zeros((num_frames, NUM_BANDS))
    centroid = np.full(num_frames, NEUTRAL_CENTROID_HZ)

    # only the look-back window of log spectra is kept
    history: deque[np.ndarray] = deque(maxlen=config.max_filter_size)
    freqs = band_idx = None

    for index, mags in spectra:
        if freqs is None:
            freqs = np.arange(len(mags)) * bin_width(config.sample_rate, config.window_size)
            band_idx = band_of_bins(len(mags), config)

        log_mags = np.log(mags + LOG_EPS)

        mag_sum = float(np.sum(mags))
        if mag_sum > 0:
            centroid[index] = float(np.dot(freqs, mags)) / mag_sum

        if history:
            trajectory = np.max(np.stack(tuple(history)), axis=0)
            total[index] = float(np.sum(np.maximum(log_mags - trajectory, 0.0)))

            rise = np.maximum(log_mags - history[-1], 0.0)
            bands[index] = np.bincount(band_idx, weights=rise, minlength=NUM_BANDS)

        history.append(log_mags)

    return FluxSeries(total=total, bands=bands, centroid=centroid)
