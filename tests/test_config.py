"""Tests for RecognizerConfig validation."""

import pytest

from chordstream.core import RecognizerConfig


def test_defaults():
    config = RecognizerConfig()
    assert config.sample_rate == 44100
    assert config.frame_size == 4096
    assert config.min_signal_strength == 40.0
    assert config.peak_threshold_multiplier == 3.0
    assert config.min_peak_magnitude == 20.0
    assert config.min_pitch_frequency == 60.0
    assert (config.min_frequency, config.max_frequency) == (20.0, 5000.0)
    assert config.max_peaks == 8
    assert config.stability_threshold == 3
    assert config.bin_resolution == pytest.approx(44100 / 4096)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"sample_rate": 0},
        {"frame_size": 4097},
        {"frame_size": 16},
        {"max_peaks": 0},
        {"stability_threshold": 0},
        {"min_pitch_frequency": 10.0},
        {"max_frequency": 50.0},
        {"peak_edge_bins": 1},
        {"reference_pitch": -440.0},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        RecognizerConfig(**kwargs)
