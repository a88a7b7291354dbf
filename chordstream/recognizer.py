"""Real-time chord recognition - Wires a frame source through the pipeline.

Threading model:
    start() runs the analysis loop and blocks; stop(), clear_progression()
    and get_progression() are called from another thread. The running flag
    is checked once per frame, so stopping takes at most one frame's
    processing time. Progression and debounce state are owned by the
    ProgressionTracker, which serializes access with its own lock.
"""

import logging
import threading
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .analysis import FrameAnalyzer
from .core import FrameReadError, RecognizerConfig, UNKNOWN_CHORD
from .inference import ChordMatcher, ProgressionTracker
from .input import FrameSource

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """Counters for one run of the analysis loop."""

    frames_read: int = 0
    frames_skipped: int = 0
    frames_silent: int = 0
    frames_unknown: int = 0
    chords_confirmed: int = 0
    chords_appended: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return asdict(self)


class ChordRecognizer:
    """Streams frames through FrameAnalyzer, ChordMatcher and ProgressionTracker."""

    def __init__(self, config: Optional[RecognizerConfig] = None):
        self.config = config or RecognizerConfig()
        self.analyzer = FrameAnalyzer(self.config)
        self.matcher = ChordMatcher()
        self.tracker = ProgressionTracker(threshold=self.config.stability_threshold)
        self._running = threading.Event()
        self._start_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._running.is_set()

    def start(self, frame_source: FrameSource) -> SessionStats:
        """
        Run the analysis loop until stop() or end of stream.

        The running flag is raised before the source is opened, so a stop()
        that arrives while open() is still blocking ends the run.

        Args:
            frame_source: Source to pull frames from

        Returns:
            SessionStats for this run

        Raises:
            SourceUnavailableError: If the source cannot be opened
            RuntimeError: If the loop is already running
        """
        self._claim()
        return self._serve(frame_source)

    def _claim(self) -> None:
        if not self._start_lock.acquire(blocking=False):
            raise RuntimeError("Recognizer is already running")
        self._running.set()

    def _serve(self, frame_source: FrameSource) -> SessionStats:
        # Caller holds _start_lock with the running flag raised
        try:
            if frame_source.sample_rate != self.config.sample_rate:
                logger.warning(
                    "Frame source runs at %d Hz but recognizer expects %d Hz",
                    frame_source.sample_rate,
                    self.config.sample_rate,
                )

            frame_source.open()
            try:
                if not self._running.is_set():
                    logger.info("Stopped while opening the frame source")
                    return SessionStats()
                return self._run(frame_source)
            finally:
                frame_source.close()
        finally:
            self._running.clear()
            self._start_lock.release()

    def _run(self, frame_source: FrameSource) -> SessionStats:
        stats = SessionStats()

        while self._running.is_set():
            try:
                frame = frame_source.read_frame()
            except (FrameReadError, OSError) as e:
                logger.error("Frame acquisition failed, stopping: %s", e)
                break

            if frame is None:
                logger.info("End of stream")
                break

            stats.frames_read += 1
            self._process(frame, frame_source.sample_rate, stats)

        logger.info(
            "Stopped after %d frames, %d chords in progression",
            stats.frames_read,
            len(self.tracker),
        )
        return stats

    def process_frame(self, frame: np.ndarray, sample_rate: Optional[int] = None) -> Optional[str]:
        """
        Run one frame through the pipeline.

        Returns:
            The chord confirmed by this frame, or None
        """
        return self._process(frame, sample_rate or self.config.sample_rate, SessionStats())

    def _process(
        self,
        frame: np.ndarray,
        sample_rate: int,
        stats: SessionStats,
    ) -> Optional[str]:
        frame = self._prepare_frame(frame)
        if frame is None:
            stats.frames_skipped += 1
            return None

        analysis = self.analyzer.analyze_frame(frame, sample_rate)
        if analysis.is_silent:
            stats.frames_silent += 1

        chord = self.matcher.identify(analysis.pitch_classes)
        if chord == UNKNOWN_CHORD:
            stats.frames_unknown += 1

        confirmed, appended = self.tracker.record(chord)
        if confirmed is not None:
            stats.chords_confirmed += 1
        if appended:
            stats.chords_appended += 1
        return confirmed

    def _prepare_frame(self, frame: np.ndarray) -> Optional[np.ndarray]:
        """Zero-pad short frames; reject malformed ones."""
        frame = np.asarray(frame, dtype=np.float64)
        size = self.config.frame_size

        if frame.ndim != 1 or len(frame) == 0:
            logger.warning("Skipping malformed frame with shape %s", frame.shape)
            return None
        if not np.all(np.isfinite(frame)):
            logger.warning("Skipping frame with non-finite samples")
            return None
        if len(frame) < size:
            frame = np.pad(frame, (0, size - len(frame)))
        elif len(frame) > size:
            logger.warning("Truncating %d-sample frame to %d", len(frame), size)
            frame = frame[:size]
        return frame

    def stop(self) -> None:
        """Ask the loop to exit after the current frame."""
        self._running.clear()

    def get_progression(self) -> Tuple[str, ...]:
        """Snapshot of the confirmed chord progression."""
        return self.tracker.progression

    def clear_progression(self) -> None:
        """Clear the progression and the debounce state."""
        self.tracker.clear()

    @property
    def current_chord(self) -> Optional[str]:
        """Most recently confirmed chord in the progression."""
        return self.tracker.last_chord

    def start_in_background(self, frame_source: FrameSource) -> threading.Thread:
        """
        Run the analysis loop on a daemon thread.

        The recognizer is marked running before this returns, so an
        immediate stop() is never lost. Setup failures are logged rather
        than raised; check is_running or join the thread to observe them.

        Raises:
            RuntimeError: If the loop is already running
        """
        self._claim()

        def target():
            try:
                self._serve(frame_source)
            except Exception:
                logger.exception("Recognition thread failed to start")

        thread = threading.Thread(target=target, name="chordstream-analysis", daemon=True)
        try:
            thread.start()
        except RuntimeError:
            self._running.clear()
            self._start_lock.release()
            raise
        return thread
