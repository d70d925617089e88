import logging

import numpy as np

from fluxchart.config import DEFAULT_BPM, DEFAULT_CONFIG, MAX_BPM, MIN_BPM, ChartConfig
from fluxchart.flux import compute_flux
from fluxchart.spectrum import as_sample_buffer, frame_count, iter_spectra
from fluxchart.timing import round_half_away

logger = logging.getLogger(__name__)

# autocorrelation search range
SEARCH_MIN_BPM = 60.0
SEARCH_MAX_BPM = 200.0


def bpm_to_lag(bpm: float, hop_size: int, sample_rate: int) -> int:
    return round_half_away(60.0 / bpm * sample_rate / hop_size)


def lag_to_bpm(lag: int, hop_size: int, sample_rate: int) -> float:
    lag_ms = lag * hop_size * 1000.0 / sample_rate
    return 60000.0 / lag_ms


def lag_range(sample_rate: int, hop_size: int) -> tuple[int, int]:
    """(shortest, longest) lag in frames, i.e. 200 BPM down to 60 BPM."""
    return (
        bpm_to_lag(SEARCH_MAX_BPM, hop_size, sample_rate),
        bpm_to_lag(SEARCH_MIN_BPM, hop_size, sample_rate),
    )


def estimate_bpm(flux, hop_size: int, sample_rate: int) -> float:
    """Global tempo from the autocorrelation of the onset-strength series.

    Lags are scored by the mean product of the mean-removed series with
    its shifted copy. Nothing scoring above zero keeps the ~120 BPM lag.
    The result is clamped to [MIN_BPM, MAX_BPM].
    """
    x = np.asarray(flux, dtype=np.float64)
    min_lag, max_lag = lag_range(sample_rate, hop_size)
    best_lag = bpm_to_lag(DEFAULT_BPM, hop_size, sample_rate)
    best_corr = 0.0

    if len(x):
        x = x - x.mean()
        for lag in range(min_lag, max_lag + 1):
            count = len(x) - lag
            if count <= 0:
                break
            corr = float(np.dot(x[:count], x[lag:])) / count
            if corr > best_corr:
                best_corr = corr
                best_lag = lag

    bpm = lag_to_bpm(best_lag, hop_size, sample_rate)
    return float(min(max(bpm, MIN_BPM), MAX_BPM))


def estimate_bpm_from_samples(samples, config: ChartConfig = DEFAULT_CONFIG) -> float:
    y = as_sample_buffer(samples)
    if len(y) < config.window_size * 2:
        logger.debug("Input too short for tempo estimation (%d samples)", len(y))
        return DEFAULT_BPM

    n = frame_count(len(y), config.window_size, config.hop_size)
    series = compute_flux(iter_spectra(y, config.window_size, config.hop_size), n, config)
    return estimate_bpm(series.total, config.hop_size, config.sample_rate)
