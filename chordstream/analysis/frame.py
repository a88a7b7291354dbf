"""Frame analysis - Detect pitch classes in a single audio frame.

Each frame goes through four stages:
1. Signal gate (RMS strength against a floor)
2. Magnitude spectrum via FFT
3. Peak picking against a dynamic threshold
4. Mapping peak frequencies to octave-invariant pitch classes
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

import numpy as np
from scipy.fft import rfft

from ..core import PITCH_NAMES, RecognizerConfig

logger = logging.getLogger(__name__)


@dataclass
class Peak:
    """A local maximum in the magnitude spectrum."""

    bin: int
    frequency: float  # Hz
    magnitude: float


@dataclass
class FrameAnalysis:
    """Result of analyzing one frame."""

    signal_strength: float
    peaks: List[Peak] = field(default_factory=list)
    pitch_classes: FrozenSet[str] = frozenset()
    is_silent: bool = False  # Rejected by the signal gate


class FrameAnalyzer:
    """Turns raw sample frames into sets of detected pitch classes."""

    def __init__(self, config: Optional[RecognizerConfig] = None, **kwargs):
        """
        Initialize FrameAnalyzer.

        Args:
            config: Optional RecognizerConfig. Keyword arguments build one
                    when no config is given (e.g. sample_rate=22050).
        """
        self.config = config if config is not None else RecognizerConfig(**kwargs)

    def signal_strength(self, frame: np.ndarray) -> float:
        """Scaled RMS of the frame."""
        if len(frame) == 0:
            return 0.0
        rms = np.sqrt(np.mean(np.square(frame, dtype=np.float64)))
        return float(rms * self.config.signal_scale)

    def magnitude_spectrum(self, frame: np.ndarray) -> np.ndarray:
        """
        Compute magnitudes of the first N/2 DFT bins.

        Returns:
            Array of N/2 magnitudes, bin k at k * sample_rate / N Hz
        """
        n = len(frame)
        spectrum = rfft(np.asarray(frame, dtype=np.float64))
        return np.abs(spectrum[: n // 2])

    def find_peaks(
        self,
        magnitudes: np.ndarray,
        sample_rate: Optional[int] = None,
    ) -> List[Peak]:
        """
        Pick spectral peaks above a dynamic threshold.

        A bin qualifies when it exceeds max(mean * multiplier, floor) and is
        not smaller than any neighbor within peak_neighborhood bins. Only the
        max_peaks strongest are kept; equal magnitudes favour lower bins.

        Args:
            magnitudes: N/2 magnitude bins
            sample_rate: Sample rate in Hz (defaults to config)

        Returns:
            Peaks ordered by bin index
        """
        cfg = self.config
        sr = sample_rate or cfg.sample_rate
        half = len(magnitudes)
        if half == 0:
            return []

        avg_mag = float(np.mean(magnitudes))
        threshold = max(avg_mag * cfg.peak_threshold_multiplier, cfg.min_peak_magnitude)
        logger.debug("Avg mag: %.1f, threshold: %.1f", avg_mag, threshold)

        edge = cfg.peak_edge_bins
        bins = np.arange(edge, half - edge)
        if len(bins) == 0:
            return []

        centre = magnitudes[bins]
        is_peak = centre > threshold
        for offset in range(-cfg.peak_neighborhood, cfg.peak_neighborhood + 1):
            if offset == 0:
                continue
            is_peak &= centre >= magnitudes[bins + offset]

        peak_bins = bins[is_peak]

        if len(peak_bins) > cfg.max_peaks:
            # Stable sort keeps the lower bin first among equal magnitudes
            order = np.argsort(-magnitudes[peak_bins], kind="stable")
            peak_bins = np.sort(peak_bins[order[: cfg.max_peaks]])

        n = 2 * half
        return [
            Peak(
                bin=int(b),
                frequency=float(b) * sr / n,
                magnitude=float(magnitudes[b]),
            )
            for b in peak_bins
        ]

    def frequency_to_pitch_class(self, frequency: float) -> Optional[str]:
        """
        Map a frequency to its pitch class.

        Returns:
            Pitch class label, or None outside [min_frequency, max_frequency]
        """
        cfg = self.config
        if frequency < cfg.min_frequency or frequency > cfg.max_frequency:
            return None

        semitones = 12 * np.log2(frequency / cfg.reference_pitch)
        # Round half up so quarter-tones resolve upward
        rounded = int(np.floor(semitones + 0.5))
        return PITCH_NAMES[rounded % 12]

    def analyze_frame(
        self,
        frame: np.ndarray,
        sample_rate: Optional[int] = None,
    ) -> FrameAnalysis:
        """
        Run the full analysis for one frame.

        Args:
            frame: 1-D array of normalized samples in [-1, 1]
            sample_rate: Sample rate in Hz (defaults to config)

        Returns:
            FrameAnalysis with strength, peaks and detected pitch classes
        """
        strength = self.signal_strength(frame)
        if strength < self.config.min_signal_strength:
            logger.debug("Signal: %d -> too weak", strength)
            return FrameAnalysis(signal_strength=strength, is_silent=True)

        magnitudes = self.magnitude_spectrum(frame)
        peaks = self.find_peaks(magnitudes, sample_rate)

        notes = set()
        for peak in peaks:
            if peak.frequency <= self.config.min_pitch_frequency:
                continue
            name = self.frequency_to_pitch_class(peak.frequency)
            if name is not None:
                notes.add(name)

        logger.debug(
            "Signal: %d, peaks: %s Hz, notes: %s",
            strength,
            [int(p.frequency) for p in peaks],
            sorted(notes),
        )

        return FrameAnalysis(
            signal_strength=strength,
            peaks=peaks,
            pitch_classes=frozenset(notes),
        )

    def analyze(
        self,
        frame: np.ndarray,
        sample_rate: Optional[int] = None,
    ) -> FrozenSet[str]:
        """Detect the pitch classes present in a frame."""
        return self.analyze_frame(frame, sample_rate).pitch_classes
