import math


def round_half_away(x: float) -> int:
    # 2.5 -> 3, -2.5 -> -3 (python's round() would give 2 / -2)
    r = math.floor(abs(x) + 0.5)
    return int(r if x >= 0 else -r)


def frame_to_ms(frame: int, hop_size: int, sample_rate: int) -> int:
    return round_half_away(frame * hop_size * 1000 / sample_rate)


def beat_interval_ms(bpm: float) -> int:
    return round_half_away(60000.0 / bpm)


def sixteenth_ms(bpm: float) -> int:
    return beat_interval_ms(bpm) // 4


def quantize(raw_ms: int, grid_ms: int) -> int:
    """Snap a timestamp to the nearest grid point (halfway rounds up)."""
    if grid_ms <= 0:
        raise ValueError(f"grid must be positive, got {grid_ms}")
    return ((raw_ms + grid_ms // 2) // grid_ms) * grid_ms
