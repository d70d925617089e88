"""Decoders that turn audio files into normalized mono samples.

These sit in front of the chart pipeline; the pipeline itself only sees
float samples at a fixed rate.
"""
from __future__ import annotations

import logging
import os
import subprocess

import librosa
import numpy as np

from fluxchart.config import SR

logger = logging.getLogger(__name__)


class DecodeError(RuntimeError):
    pass


def load_audio(path, sample_rate: int = SR) -> np.ndarray:
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    y, _ = librosa.load(path, sr=sample_rate, mono=True)
    logger.debug("Decoded %d samples (%.1fs) from %s", len(y), len(y) / sample_rate, path)
    return y


def pcm16_to_samples(data: bytes) -> np.ndarray:
    """Little-endian signed 16-bit PCM -> float64 in [-1, 1)."""
    usable = len(data) - len(data) % 2
    pcm = np.frombuffer(data[:usable], dtype="<i2")
    return pcm.astype(np.float64) / 32768.0


def decode_with_ffmpeg(path, sample_rate: int = SR) -> np.ndarray:
    if not os.path.exists(path):
        raise FileNotFoundError(path)

    cmd = [
        "ffmpeg",
        "-i", str(path),
        "-ac", "1",
        "-ar", str(sample_rate),
        "-f", "s16le",
        "-acodec", "pcm_s16le",
        "-v", "quiet",
        "-",
    ]
    try:
        result = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except FileNotFoundError as e:
        raise DecodeError("ffmpeg not found on PATH") from e

    if result.returncode != 0:
        raise DecodeError(f"ffmpeg failed with exit code {result.returncode}")
    if len(result.stdout) < 2:
        raise DecodeError(f"No audio data decoded from {path}")

    y = pcm16_to_samples(result.stdout)
    logger.debug("ffmpeg decoded %d samples from %s", len(y), path)
    return y
