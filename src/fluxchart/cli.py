import json
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Annotated

import typer

from fluxchart import library
from fluxchart.audio import decode_with_ffmpeg, load_audio
from fluxchart.bpm import estimate_bpm_from_samples
from fluxchart.chart import generate_chart
from fluxchart.config import DEFAULT_CONFIG, ChartConfig
from fluxchart.logging_utils import configure_logging

app = typer.Typer()


def _load_config(path):
    return ChartConfig.from_json(path) if path is not None else DEFAULT_CONFIG


def _read_samples(path, config, use_ffmpeg):
    if use_ffmpeg:
        return decode_with_ffmpeg(path, config.sample_rate)
    return load_audio(path, config.sample_rate)


def _songs(song_dir, artist):
    songs = library.list_songs(song_dir, artist)
    if not songs:
        typer.echo(f"No songs found under {song_dir}/<artist>/<song>/")
        raise typer.Exit(1)
    return [library.song_base(song_dir, a, s) for a, s in songs]


def chart_song(song_dir, config=DEFAULT_CONFIG, use_ffmpeg=False):
    """Generate and save one song's chart. Returns (chart path or None, result)."""
    meta = library.load_meta(song_dir)
    wav = library.audio_path(song_dir)
    if not Path(wav).exists():
        raise FileNotFoundError(wav)

    result = generate_chart(_read_samples(wav, config, use_ffmpeg), config)
    if result.is_empty:
        return None, result
    return library.write_chart(song_dir, result, meta), result


def _report(song_dir, out, result):
    if out is None:
        typer.echo(f"No notes detected: {song_dir}")
    else:
        typer.echo(f"Saved {out} notes: {len(result.notes)} bpm: {round(result.bpm)}")


@app.callback()
def main(log_level: Annotated[str, typer.Option()] = "WARNING"):
    configure_logging(log_level)


@app.command('chart')
def gen_chart(
    song_dir: Annotated[Path, typer.Option()] = Path('songs'),
    artist: Annotated[str | None, typer.Option()] = None,
    config: Annotated[Path | None, typer.Option()] = None,
    ffmpeg: Annotated[bool, typer.Option()] = False,
    jobs: Annotated[int, typer.Option(min=1)] = 1,
):
    cfg = _load_config(config)
    dirs = _songs(song_dir, artist)

    if jobs == 1:
        for d in dirs:
            out, result = chart_song(d, cfg, ffmpeg)
            _report(d, out, result)
        return

    typer.echo(f"Using up to {jobs} worker processes...")
    with ProcessPoolExecutor(max_workers=jobs) as executor:
        futures = {executor.submit(chart_song, d, cfg, ffmpeg): d for d in dirs}
        for fut in as_completed(futures):
            out, result = fut.result()
            _report(futures[fut], out, result)


@app.command()
def update_bpm(
    song_dir: Annotated[Path, typer.Option()] = Path('songs'),
    artist: Annotated[str | None, typer.Option()] = None,
    config: Annotated[Path | None, typer.Option()] = None,
    ffmpeg: Annotated[bool, typer.Option()] = False,
):
    cfg = _load_config(config)
    for d in _songs(song_dir, artist):
        meta = library.load_meta(d)
        wav = library.audio_path(d)
        if not Path(wav).exists():
            raise FileNotFoundError(wav)

        bpm = int(round(estimate_bpm_from_samples(_read_samples(wav, cfg, ffmpeg), cfg)))
        old_bpm = meta.get("bpm")
        meta["bpm"] = bpm
        library.save_meta(d, meta)
        typer.echo(f"meta.json updated: bpm {old_bpm} -> {bpm} ({d})")


@app.command()
def analyze(
    audio: Path,
    config: Annotated[Path | None, typer.Option()] = None,
    ffmpeg: Annotated[bool, typer.Option()] = False,
):
    cfg = _load_config(config)
    result = generate_chart(_read_samples(audio, cfg, ffmpeg), cfg)
    typer.echo(json.dumps({
        "bpm": round(result.bpm, 2),
        "notes": len(result.notes),
        "lanes": result.lane_counts(),
    }, indent=2))


if __name__ == "__main__":
    app()
