"""Chart assembly and the end-to-end generation pipeline.

    samples -> spectra -> flux -> (bpm, onsets) -> lanes -> quantized notes

generate_chart() is a pure function of its input: no shared state, safe to
run in a worker thread or process.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from fluxchart.bpm import estimate_bpm
from fluxchart.config import DEFAULT_BPM, DEFAULT_CONFIG, LANES, MAX_NOTES, ChartConfig
from fluxchart.flux import compute_flux
from fluxchart.lanes import FrequencyBand, assign_lane
from fluxchart.onsets import Onset, detect_onsets
from fluxchart.spectrum import as_sample_buffer, frame_count, iter_spectra
from fluxchart.timing import beat_interval_ms, quantize, sixteenth_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Note:
    timestamp_ms: int
    lane: int

    @property
    def band(self) -> FrequencyBand:
        return FrequencyBand(self.lane)


@dataclass(frozen=True)
class ChartResult:
    notes: tuple[Note, ...]
    bpm: float

    @classmethod
    def empty(cls) -> "ChartResult":
        return cls(notes=(), bpm=DEFAULT_BPM)

    @property
    def is_empty(self) -> bool:
        return not self.notes

    def lane_counts(self) -> list[int]:
        counts = [0] * LANES
        for note in self.notes:
            counts[note.lane] += 1
        return counts


def assemble_notes(onsets: list[Onset], bpm: float) -> list[Note]:
    """Quantize onsets to the 16th grid and drop quantization collisions.

    Stops after MAX_NOTES onsets; duplicates are removed afterwards, keeping
    the first note at each timestamp.
    """
    grid = sixteenth_ms(bpm)
    notes = []
    for onset in onsets:
        notes.append(Note(quantize(onset.timestamp_ms, grid), assign_lane(onset)))
        if len(notes) >= MAX_NOTES:
            break

    unique = []
    seen = set()
    for note in notes:
        if note.timestamp_ms not in seen:
            seen.add(note.timestamp_ms)
            unique.append(note)
    return unique


def generate_chart(samples, config: ChartConfig | None = None) -> ChartResult:
    config = config or DEFAULT_CONFIG
    y = as_sample_buffer(samples)
    if len(y) < config.window_size * 2:
        logger.info("Input too short for analysis (%d samples), no chart", len(y))
        return ChartResult.empty()

    n = frame_count(len(y), config.window_size, config.hop_size)
    series = compute_flux(iter_spectra(y, config.window_size, config.hop_size), n, config)

    bpm = estimate_bpm(series.total, config.hop_size, config.sample_rate)
    logger.debug(
        "Estimated BPM: %d, beat interval: %dms, 16th: %dms",
        round(bpm), beat_interval_ms(bpm), sixteenth_ms(bpm),
    )

    notes = assemble_notes(detect_onsets(series, config), bpm)
    if not notes:
        logger.info("No notes detected")
        return ChartResult.empty()

    result = ChartResult(notes=tuple(notes), bpm=bpm)
    logger.debug("Final: %d notes, lanes: %s", len(notes), result.lane_counts())
    return result
