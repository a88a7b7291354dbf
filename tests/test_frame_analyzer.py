"""Tests for per-frame analysis (signal gate, spectrum, peaks, pitch mapping)."""

import numpy as np
import pytest

from chordstream.analysis import FrameAnalyzer, Peak
from chordstream.core import RecognizerConfig

from synth import SR, FRAME_SIZE, bin_frequency, generate_chord, generate_silence, generate_tones


@pytest.fixture
def analyzer():
    return FrameAnalyzer()


class TestSignalGate:
    """Frames below the strength floor are rejected before any FFT."""

    def test_silence_is_gated(self, analyzer):
        result = analyzer.analyze_frame(generate_silence())
        assert result.is_silent
        assert result.signal_strength == 0.0
        assert result.pitch_classes == frozenset()
        assert result.peaks == []

    def test_quiet_tone_is_gated(self, analyzer):
        # RMS of a 0.01 sine is ~0.007 -> strength ~7
        frame = generate_tones([440.0], amplitude=0.01)
        assert analyzer.signal_strength(frame) < 40.0
        assert analyzer.analyze(frame) == frozenset()

    def test_gate_skips_spectrum(self, analyzer, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("spectrum computed for a silent frame")

        monkeypatch.setattr(analyzer, "magnitude_spectrum", fail)
        assert analyzer.analyze(generate_silence()) == frozenset()

    def test_signal_strength_scale(self, analyzer):
        frame = np.full(FRAME_SIZE, 0.5)
        assert analyzer.signal_strength(frame) == pytest.approx(500.0)

    def test_custom_floor(self):
        analyzer = FrameAnalyzer(min_signal_strength=1.0)
        frame = generate_tones([440.0], amplitude=0.02)
        assert analyzer.analyze(frame) == {"A"}


class TestMagnitudeSpectrum:
    """FFT magnitudes match the direct DFT definition."""

    def test_matches_direct_dft(self, analyzer):
        rng = np.random.default_rng(0)
        frame = rng.uniform(-1, 1, 256)
        n = len(frame)

        t = np.arange(n)
        k = np.arange(n // 2).reshape(-1, 1)
        direct = np.abs(np.sum(frame * np.exp(-2j * np.pi * k * t / n), axis=1))

        fast = analyzer.magnitude_spectrum(frame)
        assert fast.shape == (n // 2,)
        np.testing.assert_allclose(fast, direct, rtol=1e-9, atol=1e-9)

    def test_bin_centred_tone(self, analyzer):
        frame = generate_tones([440.0], amplitude=0.5)
        mags = analyzer.magnitude_spectrum(frame)
        k = round(440.0 * FRAME_SIZE / SR)
        assert int(np.argmax(mags)) == k
        assert mags[k] == pytest.approx(0.5 * FRAME_SIZE / 2, rel=1e-3)


class TestFindPeaks:
    """Peak picking: threshold, neighborhood, edges and the peak cap."""

    def spikes(self, bins, magnitude=100.0, size=FRAME_SIZE // 2, base=0.0):
        mags = np.full(size, base)
        for b in bins:
            mags[b] = magnitude
        return mags

    def test_single_spike(self, analyzer):
        peaks = analyzer.find_peaks(self.spikes([100]))
        assert len(peaks) == 1
        assert peaks[0].bin == 100
        assert peaks[0].frequency == pytest.approx(100 * SR / FRAME_SIZE)
        assert peaks[0].magnitude == 100.0

    def test_absolute_floor(self, analyzer):
        # Mean is tiny, so the 20.0 floor applies
        assert analyzer.find_peaks(self.spikes([100], magnitude=15.0)) == []
        assert len(analyzer.find_peaks(self.spikes([100], magnitude=25.0))) == 1

    def test_relative_threshold(self, analyzer):
        # Mean ~10 -> threshold ~30
        assert len(analyzer.find_peaks(self.spikes([100], magnitude=40.0, base=10.0))) == 1
        assert analyzer.find_peaks(self.spikes([100], magnitude=25.0, base=10.0)) == []

    def test_must_dominate_neighbors(self, analyzer):
        mags = self.spikes([100])
        mags[102] = 150.0  # Within two bins, bigger
        bins = [p.bin for p in analyzer.find_peaks(mags)]
        assert bins == [102]

    def test_plateau_bins_both_qualify(self, analyzer):
        bins = [p.bin for p in analyzer.find_peaks(self.spikes([100, 101]))]
        assert bins == [100, 101]

    def test_edges_excluded(self, analyzer):
        half = FRAME_SIZE // 2
        mags = self.spikes([4, half - 5, half - 6])
        bins = [p.bin for p in analyzer.find_peaks(mags)]
        assert bins == [half - 6]

    def test_peak_cap_keeps_strongest(self, analyzer):
        bins = list(range(20, 120, 10))  # 10 peaks
        mags = self.spikes(bins)
        for i, b in enumerate(bins):
            mags[b] = 100.0 + i
        kept = [p.bin for p in analyzer.find_peaks(mags)]
        assert kept == bins[2:]

    def test_peak_cap_tie_prefers_lower_bins(self, analyzer):
        bins = list(range(20, 120, 10))
        kept = [p.bin for p in analyzer.find_peaks(self.spikes(bins))]
        assert kept == bins[:8]

    def test_empty_spectrum(self, analyzer):
        assert analyzer.find_peaks(np.zeros(0)) == []


class TestPitchMapping:
    """Frequency to pitch-class conversion."""

    @pytest.mark.parametrize(
        "freq,expected",
        [
            (440.0, "A"),
            (261.63, "C"),
            (329.63, "E"),
            (392.0, "G"),
            (466.16, "A#"),
            (277.18, "C#"),
            (415.30, "G#"),
        ],
    )
    def test_known_notes(self, analyzer, freq, expected):
        assert analyzer.frequency_to_pitch_class(freq) == expected

    @pytest.mark.parametrize("freq", [110.0, 220.0, 261.63, 330.0, 1000.0])
    def test_octave_invariance(self, analyzer, freq):
        assert analyzer.frequency_to_pitch_class(freq) == analyzer.frequency_to_pitch_class(2 * freq)

    def test_out_of_range(self, analyzer):
        assert analyzer.frequency_to_pitch_class(10.0) is None
        assert analyzer.frequency_to_pitch_class(6000.0) is None
        assert analyzer.frequency_to_pitch_class(5000.0) is not None

    def test_below_pitch_floor_ignored(self, analyzer):
        # 55 Hz is a valid A but below the 60 Hz detection floor
        assert analyzer.frequency_to_pitch_class(55.0) == "A"
        frame = generate_tones([55.0], amplitude=0.5)
        assert analyzer.analyze(frame) == frozenset()


class TestAnalyze:
    """End-to-end frame analysis on synthetic triads."""

    @pytest.mark.parametrize(
        "symbol,expected",
        [
            ("C", {"C", "E", "G"}),
            ("G", {"G", "B", "D"}),
            ("Am", {"A", "C", "E"}),
            ("F", {"F", "A", "C"}),
            ("Dm", {"D", "F", "A"}),
        ],
    )
    def test_triads(self, analyzer, symbol, expected):
        assert analyzer.analyze(generate_chord(symbol)) == expected

    def test_octave_pair_collapses(self, analyzer):
        frame = generate_tones([220.0, 440.0], amplitude=0.4)
        assert analyzer.analyze(frame) == {"A"}

    def test_peaks_are_reported(self, analyzer):
        result = analyzer.analyze_frame(generate_chord("C"))
        assert not result.is_silent
        assert [p.frequency for p in result.peaks] == [
            pytest.approx(bin_frequency(f)) for f in (261.63, 329.63, 392.0)
        ]
        assert all(isinstance(p, Peak) for p in result.peaks)

    def test_at_most_eight_pitch_classes(self, analyzer):
        freqs = [261.63 * 2 ** (i / 12) for i in range(12)]
        frame = generate_tones(freqs, amplitude=0.1)
        result = analyzer.analyze_frame(frame)
        assert len(result.peaks) <= 8
        assert len(result.pitch_classes) <= 8

    def test_explicit_sample_rate(self):
        analyzer = FrameAnalyzer(RecognizerConfig(sample_rate=22050, frame_size=2048))
        frame = generate_tones([440.0], amplitude=0.5, sr=22050, n=2048)
        assert analyzer.analyze(frame, sample_rate=22050) == {"A"}
