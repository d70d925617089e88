import json
from dataclasses import dataclass, fields
from pathlib import Path

from fluxchart.timing import round_half_away

SR = 44100

# STFT: ~46ms window, ~10ms hop at 44.1kHz
WINDOW_SIZE = 2048
HOP_SIZE = 441

# peak picking (frames / multiplier / ms)
MAX_FILTER_SIZE = 3
AVG_FILTER_PAST = 15
AVG_FILTER_FUTURE = 5
THRESHOLD = 1.8
MIN_ONSET_GAP_MS = 120

# band edges in Hz, lane 4 takes everything above HIGH_MID_MAX_FREQ
SUB_BASS_MAX_FREQ = 100.0   # kick, sub
BASS_MAX_FREQ = 250.0       # bass guitar, low synth
LOW_MID_MAX_FREQ = 600.0    # low vocals, guitar body
HIGH_MID_MAX_FREQ = 2000.0  # vocals, leads

LANES = 5
MAX_NOTES = 3000

DEFAULT_BPM = 120.0
MIN_BPM = 70.0
MAX_BPM = 180.0

# recognized option names -> attribute
_OPTION_NAMES = {
    "sampleRate": "sample_rate",
    "windowSize": "window_size",
    "hopSize": "hop_size",
    "maxFilterSize": "max_filter_size",
    "avgFilterPast": "avg_filter_past",
    "avgFilterFuture": "avg_filter_future",
    "threshold": "threshold",
    "minOnsetGapMs": "min_onset_gap_ms",
    "subBassMaxFreq": "sub_bass_max_freq",
    "bassMaxFreq": "bass_max_freq",
    "lowMidMaxFreq": "low_mid_max_freq",
    "highMidMaxFreq": "high_mid_max_freq",
}


@dataclass(frozen=True)
class ChartConfig:
    """Fixed analysis parameters for one chart generation run."""

    sample_rate: int = SR
    window_size: int = WINDOW_SIZE
    hop_size: int = HOP_SIZE
    max_filter_size: int = MAX_FILTER_SIZE
    avg_filter_past: int = AVG_FILTER_PAST
    avg_filter_future: int = AVG_FILTER_FUTURE
    threshold: float = THRESHOLD
    min_onset_gap_ms: int = MIN_ONSET_GAP_MS
    sub_bass_max_freq: float = SUB_BASS_MAX_FREQ
    bass_max_freq: float = BASS_MAX_FREQ
    low_mid_max_freq: float = LOW_MID_MAX_FREQ
    high_mid_max_freq: float = HIGH_MID_MAX_FREQ

    def __post_init__(self):
        self.validate()

    @property
    def band_boundaries(self) -> tuple[float, float, float, float]:
        return (
            self.sub_bass_max_freq,
            self.bass_max_freq,
            self.low_mid_max_freq,
            self.high_mid_max_freq,
        )

    def validate(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.window_size < 2 or self.window_size % 2:
            raise ValueError(f"window_size must be an even number >= 2, got {self.window_size}")
        if self.hop_size <= 0:
            raise ValueError(f"hop_size must be positive, got {self.hop_size}")
        if self.hop_size > self.window_size:
            raise ValueError(f"hop_size must not exceed window_size, got {self.hop_size} > {self.window_size}")
        # shortest tempo lag (200 BPM) must span at least one frame
        if round_half_away(60.0 / 200.0 * self.sample_rate / self.hop_size) < 1:
            raise ValueError(f"hop_size {self.hop_size} too large for tempo search at {self.sample_rate} Hz")
        if self.max_filter_size < 1:
            raise ValueError(f"max_filter_size must be >= 1, got {self.max_filter_size}")
        if self.avg_filter_past < 0 or self.avg_filter_future < 0:
            raise ValueError("moving average context must not be negative")
        if self.threshold <= 0:
            raise ValueError(f"threshold must be positive, got {self.threshold}")
        if self.min_onset_gap_ms < 0:
            raise ValueError(f"min_onset_gap_ms must not be negative, got {self.min_onset_gap_ms}")

        edges = self.band_boundaries
        if edges[0] <= 0 or any(lo >= hi for lo, hi in zip(edges, edges[1:])):
            raise ValueError(f"band boundaries must be positive and strictly ascending, got {edges}")

    @classmethod
    def from_mapping(cls, data) -> "ChartConfig":
        """Build a config from camelCase option names or attribute names."""
        attrs = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _OPTION_NAMES.get(key, key)
            if name not in attrs:
                raise ValueError(f"Unknown chart option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path) -> "ChartConfig":
        with open(Path(path), encoding="utf-8") as f:
            return cls.from_mapping(json.load(f))


DEFAULT_CONFIG = ChartConfig()
