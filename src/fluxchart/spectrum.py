"""Short-time spectra of a mono sample buffer.

Frames are produced lazily, one window at a time, so a long track never
holds more than a single spectrum in memory here.
"""
from __future__ import annotations

from typing import Iterator, NamedTuple

import numpy as np

from fluxchart.timing import round_half_away


class SpectrumFrame(NamedTuple):
    index: int
    magnitudes: np.ndarray  # window_size // 2 bins


def as_sample_buffer(samples) -> np.ndarray:
    """Return caller samples as a read-only 1-D float64 array."""
    buf = np.array(samples, dtype=np.float64)
    if buf.ndim != 1:
        raise ValueError(f"Expected mono 1-D samples, got shape {buf.shape}")
    buf.flags.writeable = False
    return buf


def frame_count(n_samples: int, window_size: int, hop_size: int) -> int:
    if n_samples < window_size:
        return 0
    return (n_samples - window_size) // hop_size + 1


def hann_window(window_size: int) -> np.ndarray:
    i = np.arange(window_size)
    return 0.5 * (1.0 - np.cos(2.0 * np.pi * i / (window_size - 1)))


def bin_width(sample_rate: int, window_size: int) -> float:
    return sample_rate / window_size


def freq_to_bin(freq_hz: float, sample_rate: int, window_size: int) -> int:
    return round_half_away(freq_hz / bin_width(sample_rate, window_size))


def iter_spectra(samples: np.ndarray, window_size: int, hop_size: int) -> Iterator[SpectrumFrame]:
    """Yield Hann-windowed magnitude spectra, keeping the first W/2 bins."""
    window = hann_window(window_size)
    half = window_size // 2
    for index in range(frame_count(len(samples), window_size, hop_size)):
        start = index * hop_size
        segment = samples[start:start + window_size] * window
        yield SpectrumFrame(index, np.abs(np.fft.rfft(segment))[:half])
