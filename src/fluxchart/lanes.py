from enum import IntEnum

from fluxchart.onsets import Onset


class FrequencyBand(IntEnum):
    SUB_BASS = 0  # kick drums, sub
    BASS = 1      # bass guitar
    LOW_MID = 2   # vocals low, guitar body
    HIGH_MID = 3  # vocals, leads
    TREBLE = 4    # cymbals, hats


# centroid upper edges (Hz) for lanes 0-3
PITCH_EDGES = (150.0, 350.0, 800.0, 1500.0)

# favour low bands: kicks and bass hits read as the strongest onsets
BAND_WEIGHTS = (3.0, 2.5, 2.0, 1.5, 0.5)
DEFAULT_FLUX_LANE = FrequencyBand.LOW_MID

BASS_RATIO_THRESHOLD = 0.4
RATIO_EPS = 1e-6


def pitch_lane(centroid: float) -> int:
    for lane, edge in enumerate(PITCH_EDGES):
        if centroid < edge:
            return lane
    return FrequencyBand.TREBLE


def flux_lane(band_flux) -> int:
    best, lane = 0.0, int(DEFAULT_FLUX_LANE)
    for i, (value, weight) in enumerate(zip(band_flux, BAND_WEIGHTS)):
        weighted = value * weight
        if weighted > best:
            best, lane = weighted, i
    return lane


def assign_lane(onset: Onset) -> int:
    """Flux lane for bass-heavy hits, pitch lane for melodic content."""
    bands = onset.band_flux
    bass_ratio = (bands[FrequencyBand.SUB_BASS] + bands[FrequencyBand.BASS]) / (onset.flux + RATIO_EPS)
    if bass_ratio > BASS_RATIO_THRESHOLD:
        return flux_lane(bands)
    return int(pitch_lane(onset.centroid))
