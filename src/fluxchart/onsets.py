"""Peak picking on the total flux series."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from fluxchart.config import ChartConfig
from fluxchart.flux import FluxSeries
from fluxchart.timing import frame_to_ms

logger = logging.getLogger(__name__)

PEAK_TOLERANCE = 1e-6


@dataclass(frozen=True)
class Onset:
    frame: int
    timestamp_ms: int
    flux: float
    band_flux: tuple[float, ...]
    centroid: float


def moving_average(flux: np.ndarray, past: int, future: int) -> np.ndarray:
    """Mean over [t - past, t + future], window clipped at the edges."""
    n = len(flux)
    csum = np.concatenate(([0.0], np.cumsum(flux)))
    idx = np.arange(n)
    start = np.maximum(0, idx - past)
    end = np.minimum(n, idx + future + 1)
    return (csum[end] - csum[start]) / (end - start)


def moving_maximum(flux: np.ndarray, size: int) -> np.ndarray:
    """Max over [t - size, t + size]; flux is non-negative so zero padding is neutral."""
    if len(flux) == 0:
        return np.zeros(0)
    padded = np.pad(np.asarray(flux, dtype=np.float64), size)
    return np.lib.stride_tricks.sliding_window_view(padded, 2 * size + 1).max(axis=1)


def pick_onsets(flux, config: ChartConfig) -> list[int]:
    """Onset frame indices, scanned left to right.

    A frame qualifies when it is the local maximum and clears
    moving_average * threshold. It is accepted only if it lands at least
    min_onset_gap_ms after the last accepted onset.
    """
    flux = np.asarray(flux, dtype=np.float64)
    n = len(flux)
    if n < 3:
        return []

    avg = moving_average(flux, config.avg_filter_past, config.avg_filter_future)
    peak = moving_maximum(flux, config.max_filter_size)

    is_peak = np.abs(flux - peak) < PEAK_TOLERANCE
    above = flux > avg * config.threshold
    candidates = np.flatnonzero(is_peak & above)

    onsets = []
    last_ms = None
    for frame in candidates:
        # first/last frame have no full neighbourhood
        if frame == 0 or frame == n - 1:
            continue
        t_ms = frame_to_ms(int(frame), config.hop_size, config.sample_rate)
        if last_ms is not None and t_ms - last_ms < config.min_onset_gap_ms:
            continue
        onsets.append(int(frame))
        last_ms = t_ms
    return onsets


def detect_onsets(series: FluxSeries, config: ChartConfig) -> list[Onset]:
    frames = pick_onsets(series.total, config)
    logger.debug("Detected %d raw onsets", len(frames))
    return [
        Onset(
            frame=f,
            timestamp_ms=frame_to_ms(f, config.hop_size, config.sample_rate),
            flux=float(series.total[f]),
            band_flux=tuple(float(v) for v in series.bands[f]),
            centroid=float(series.centroid[f]),
        )
        for f in frames
    ]
