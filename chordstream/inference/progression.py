"""Progression tracking - Debounce per-frame chord guesses.

A chord is confirmed only after it is guessed on `threshold` consecutive
frames. Confirmed chords are appended to the progression unless they
repeat the last entry. All state lives behind one lock so the analysis
loop and a control thread can share a tracker.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..core import PROGRESSION_SEPARATOR, UNKNOWN_CHORD
from ..core.constants import DEFAULT_STABILITY_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StabilityState:
    """Snapshot of the debounce state."""

    candidate: Optional[str] = None
    count: int = 0
    threshold: int = DEFAULT_STABILITY_THRESHOLD


def format_progression(progression: Iterable[str]) -> str:
    """Render a progression as 'C → G → Am'."""
    return PROGRESSION_SEPARATOR.join(progression)


class ProgressionTracker:
    """Debounce state machine producing a deduplicated chord progression."""

    def __init__(self, threshold: int = DEFAULT_STABILITY_THRESHOLD):
        if threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {threshold}")
        self.threshold = threshold
        self._lock = threading.Lock()
        self._candidate: Optional[str] = None
        self._count = 0
        self._progression: List[str] = []

    def update(self, chord: str) -> Optional[str]:
        """
        Feed one per-frame chord guess.

        Args:
            chord: Chord symbol or "Unknown"

        Returns:
            The chord if this frame confirmed it, else None. A confirmed
            chord equal to the last progression entry is not appended.
        """
        return self.record(chord)[0]

    def record(self, chord: str) -> Tuple[Optional[str], bool]:
        """
        Feed one per-frame chord guess and report what it changed.

        Returns:
            (confirmed, appended): the chord confirmed by this frame or
            None, and whether it was appended to the progression. Both are
            decided under one lock hold, so a concurrent clear() cannot
            skew them.
        """
        with self._lock:
            if chord == UNKNOWN_CHORD:
                self._candidate = None
                self._count = 0
                return None, False

            if chord != self._candidate:
                self._candidate = chord
                self._count = 1
                # A threshold of one confirms on the first frame
                if self._count < self.threshold:
                    return None, False
            else:
                self._count += 1
                if self._count < self.threshold:
                    return None, False

            self._count = 0
            if self._progression and self._progression[-1] == chord:
                return chord, False

            self._progression.append(chord)
            logger.info("Detected: %s", chord)
            return chord, True

    def clear(self) -> None:
        """Empty the progression and reset the debounce state."""
        with self._lock:
            self._progression.clear()
            self._candidate = None
            self._count = 0

    @property
    def progression(self) -> Tuple[str, ...]:
        """Snapshot of the confirmed progression."""
        with self._lock:
            return tuple(self._progression)

    @property
    def state(self) -> StabilityState:
        """Snapshot of the debounce state."""
        with self._lock:
            return StabilityState(self._candidate, self._count, self.threshold)

    @property
    def last_chord(self) -> Optional[str]:
        """Most recent progression entry, if any."""
        with self._lock:
            return self._progression[-1] if self._progression else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._progression)
