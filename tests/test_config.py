"""Tests for fluxchart/config.py — ChartConfig defaults, parsing, validation."""

import json

import pytest

from fluxchart.config import DEFAULT_CONFIG, ChartConfig


class TestDefaults:
    def test_reference_values(self):
        cfg = ChartConfig()
        assert (cfg.sample_rate, cfg.window_size, cfg.hop_size) == (44100, 2048, 441)
        assert (cfg.max_filter_size, cfg.avg_filter_past, cfg.avg_filter_future) == (3, 15, 5)
        assert cfg.threshold == 1.8
        assert cfg.min_onset_gap_ms == 120
        assert cfg.band_boundaries == (100.0, 250.0, 600.0, 2000.0)

    def test_default_instance(self):
        assert DEFAULT_CONFIG == ChartConfig()


class TestFromMapping:
    def test_camel_case_options(self):
        cfg = ChartConfig.from_mapping({"hopSize": 512, "minOnsetGapMs": 90, "subBassMaxFreq": 80})
        assert cfg.hop_size == 512
        assert cfg.min_onset_gap_ms == 90
        assert cfg.sub_bass_max_freq == 80

    def test_attribute_names(self):
        assert ChartConfig.from_mapping({"threshold": 2.0}).threshold == 2.0
        assert ChartConfig.from_mapping({"window_size": 1024}).window_size == 1024

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown chart option"):
            ChartConfig.from_mapping({"fftSize": 1024})

    def test_from_json(self, tmp_path):
        path = tmp_path / "chart.json"
        path.write_text(json.dumps({"avgFilterPast": 10, "avgFilterFuture": 2}), encoding="utf-8")
        cfg = ChartConfig.from_json(path)
        assert (cfg.avg_filter_past, cfg.avg_filter_future) == (10, 2)


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"sample_rate": 0},
            {"window_size": 1},
            {"window_size": 1025},
            {"hop_size": 0},
            {"max_filter_size": 0},
            {"avg_filter_past": -1},
            {"threshold": 0.0},
            {"min_onset_gap_ms": -5},
            {"bass_max_freq": 50.0},
            {"sub_bass_max_freq": 0.0},
        ],
    )
    def test_rejects(self, kwargs):
        with pytest.raises(ValueError):
            ChartConfig(**kwargs)

    def test_hop_longer_than_window(self):
        with pytest.raises(ValueError, match="must not exceed window_size"):
            ChartConfig(window_size=2048, hop_size=50000)

    def test_hop_too_coarse_for_tempo_lags(self):
        """200 BPM at 1 kHz / 700 hop rounds to a zero-frame lag."""
        with pytest.raises(ValueError, match="too large for tempo search"):
            ChartConfig(sample_rate=1000, window_size=1024, hop_size=700)

    def test_coarse_hop_accepted(self):
        # 0.3 * 1000 / 200 = 1.5 -> lag 2
        cfg = ChartConfig(sample_rate=1000, window_size=256, hop_size=200)
        assert cfg.hop_size == 200

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.hop_size = 1
