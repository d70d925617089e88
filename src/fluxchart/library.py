import os
import json

from fluxchart.chart import ChartResult
from fluxchart.config import LANES

CHART_NAME = f"{LANES}_auto.json"
CHART_STYLE = "superflux_pitch_lanes"


# ---------------- Song FS ----------------
def list_songs(base, artist=None):
    """(artist, song) pairs under base/<artist>/<song>/."""
    out = []
    if not os.path.isdir(base):
        return out
    for a in sorted(os.listdir(base)):
        if artist is not None and a != artist:
            continue
        ap = os.path.join(base, a)
        if not os.path.isdir(ap):
            continue
        for song in sorted(os.listdir(ap)):
            if os.path.isdir(os.path.join(ap, song)):
                out.append((a, song))
    return out

def song_base(base, a, s): return os.path.join(base, a, s)
def meta_path(song_dir): return os.path.join(song_dir, "meta.json")
def audio_path(song_dir): return os.path.join(song_dir, "song.wav")
def chart_path(song_dir): return os.path.join(song_dir, "charts", CHART_NAME)

def load_meta(song_dir):
    p = meta_path(song_dir)
    if not os.path.exists(p):
        raise FileNotFoundError(p)
    with open(p, encoding="utf-8") as f:
        return json.load(f)

def save_meta(song_dir, meta):
    with open(meta_path(song_dir), "w", encoding="utf-8") as f:
        json.dump(meta, f, ensure_ascii=False, indent=2)


# ---------------- Chart files ----------------
def chart_to_dict(result: ChartResult, meta, song_dir):
    return {
        "title": meta.get("title", os.path.basename(song_dir)),
        "artist": meta.get("artist", os.path.basename(os.path.dirname(song_dir))),
        "lanes": LANES,
        "difficulty": "auto",
        "offsetMs": int(meta.get("offsetMs", 0)),
        "bpm": round(result.bpm, 2),
        "style": CHART_STYLE,
        "notes": [
            {"tMs": n.timestamp_ms, "lane": n.lane, "band": n.band.name.lower(), "type": "tap"}
            for n in result.notes
        ],
    }

def write_chart(song_dir, result: ChartResult, meta):
    out = chart_path(song_dir)
    os.makedirs(os.path.dirname(out), exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(chart_to_dict(result, meta, song_dir), f, ensure_ascii=False, indent=2)
    return out
