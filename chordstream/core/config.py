"""Recognizer configuration."""

from dataclasses import dataclass

from .constants import (
    CONCERT_A,
    DEFAULT_FRAME_SIZE,
    DEFAULT_MAX_PEAKS,
    DEFAULT_MIN_PEAK_MAGNITUDE,
    DEFAULT_MIN_PITCH_FREQUENCY,
    DEFAULT_MIN_SIGNAL_STRENGTH,
    DEFAULT_PEAK_EDGE_BINS,
    DEFAULT_PEAK_NEIGHBORHOOD,
    DEFAULT_PEAK_THRESHOLD_MULTIPLIER,
    DEFAULT_SIGNAL_SCALE,
    DEFAULT_SR,
    DEFAULT_STABILITY_THRESHOLD,
    MAX_FREQUENCY,
    MIN_FREQUENCY,
)


@dataclass
class RecognizerConfig:
    """Configuration for the chord recognition pipeline.

    Attributes:
        sample_rate: Sample rate of incoming frames in Hz (default: 44100)
        frame_size: Samples per analysis frame (default: 4096)
        signal_scale: Multiplier applied to frame RMS to get signal strength (default: 1000)
        min_signal_strength: Frames weaker than this are treated as silence (default: 40.0)
        peak_threshold_multiplier: Peak threshold as a multiple of mean magnitude (default: 3.0)
        min_peak_magnitude: Absolute floor for the peak threshold (default: 20.0)
        peak_edge_bins: Bins ignored at both ends of the spectrum (default: 5)
        peak_neighborhood: Bins on each side a peak must dominate (default: 2)
        max_peaks: Maximum peaks kept per frame (default: 8)
        min_pitch_frequency: Peaks at or below this frequency are ignored (default: 60.0)
        min_frequency: Hard lower bound for pitch mapping (default: 20.0)
        max_frequency: Hard upper bound for pitch mapping (default: 5000.0)
        stability_threshold: Consecutive identical guesses needed to confirm a chord (default: 3)
        reference_pitch: Frequency of A4 in Hz (default: 440.0)
    """

    sample_rate: int = DEFAULT_SR
    frame_size: int = DEFAULT_FRAME_SIZE
    signal_scale: float = DEFAULT_SIGNAL_SCALE
    min_signal_strength: float = DEFAULT_MIN_SIGNAL_STRENGTH
    peak_threshold_multiplier: float = DEFAULT_PEAK_THRESHOLD_MULTIPLIER
    min_peak_magnitude: float = DEFAULT_MIN_PEAK_MAGNITUDE
    peak_edge_bins: int = DEFAULT_PEAK_EDGE_BINS
    peak_neighborhood: int = DEFAULT_PEAK_NEIGHBORHOOD
    max_peaks: int = DEFAULT_MAX_PEAKS
    min_pitch_frequency: float = DEFAULT_MIN_PITCH_FREQUENCY
    min_frequency: float = MIN_FREQUENCY
    max_frequency: float = MAX_FREQUENCY
    stability_threshold: int = DEFAULT_STABILITY_THRESHOLD
    reference_pitch: float = CONCERT_A

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.frame_size % 2 != 0:
            raise ValueError(f"frame_size must be even, got {self.frame_size}")

        # The scanned bin range must be non-empty
        min_size = 2 * (2 * (self.peak_edge_bins + self.peak_neighborhood) + 1)
        if self.frame_size < min_size:
            raise ValueError(
                f"frame_size must be at least {min_size}, got {self.frame_size}"
            )
        if self.peak_edge_bins < self.peak_neighborhood:
            raise ValueError("peak_edge_bins must cover peak_neighborhood")
        if self.max_peaks < 1:
            raise ValueError(f"max_peaks must be >= 1, got {self.max_peaks}")
        if self.stability_threshold < 1:
            raise ValueError(
                f"stability_threshold must be >= 1, got {self.stability_threshold}"
            )
        if not 0 < self.min_frequency <= self.min_pitch_frequency < self.max_frequency:
            raise ValueError(
                "Expected 0 < min_frequency <= min_pitch_frequency < max_frequency, got "
                f"{self.min_frequency}, {self.min_pitch_frequency}, {self.max_frequency}"
            )
        if self.reference_pitch <= 0:
            raise ValueError(f"reference_pitch must be positive, got {self.reference_pitch}")

    @property
    def frame_duration(self) -> float:
        """Duration of one frame in seconds (upper bound on stop latency)."""
        return self.frame_size / self.sample_rate

    @property
    def bin_resolution(self) -> float:
        """Width of one spectrum bin in Hz."""
        return self.sample_rate / self.frame_size
