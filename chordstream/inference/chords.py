"""Chord matching - Identify triads from detected pitch classes.

Template matching counts how many detected pitch classes each triad
shares. Templates are scanned in a fixed order and only a strictly
better overlap replaces the current best, so ties always resolve to the
template declared first.
"""

from typing import FrozenSet, Iterable, List, Tuple

from ..core import UNKNOWN_CHORD


class ChordMatcher:
    """Identify major and minor triads from pitch-class sets."""

    # Chord templates in match order (ties go to the earlier entry)
    CHORD_TEMPLATES: Tuple[Tuple[str, FrozenSet[str]], ...] = (
        # Major triads
        ("C", frozenset({"C", "E", "G"})),
        ("D", frozenset({"D", "F#", "A"})),
        ("E", frozenset({"E", "G#", "B"})),
        ("F", frozenset({"F", "A", "C"})),
        ("G", frozenset({"G", "B", "D"})),
        ("A", frozenset({"A", "C#", "E"})),
        ("B", frozenset({"B", "D#", "F#"})),
        # Minor triads
        ("Cm", frozenset({"C", "D#", "G"})),
        ("Dm", frozenset({"D", "F", "A"})),
        ("Em", frozenset({"E", "G", "B"})),
        ("Fm", frozenset({"F", "G#", "C"})),
        ("Gm", frozenset({"G", "A#", "D"})),
        ("Am", frozenset({"A", "C", "E"})),
        ("Bm", frozenset({"B", "D", "F#"})),
    )

    def __init__(self, min_matching_notes: int = 2):
        """
        Initialize ChordMatcher.

        Args:
            min_matching_notes: Minimum shared pitch classes for a match
        """
        self.min_matching_notes = min_matching_notes
        self._templates = dict(self.CHORD_TEMPLATES)

    @property
    def symbols(self) -> List[str]:
        """Chord symbols in match order."""
        return [symbol for symbol, _ in self.CHORD_TEMPLATES]

    def identify(self, detected: Iterable[str]) -> str:
        """
        Identify the chord best matching a set of pitch classes.

        Args:
            detected: Detected pitch classes (e.g. {"C", "E", "G"})

        Returns:
            Chord symbol (e.g. "C", "Am") or "Unknown"
        """
        notes = frozenset(detected)
        if len(notes) < self.min_matching_notes:
            return UNKNOWN_CHORD

        best_match = UNKNOWN_CHORD
        max_matches = 0

        for symbol, template in self.CHORD_TEMPLATES:
            matches = len(notes & template)
            if matches >= self.min_matching_notes and matches > max_matches:
                max_matches = matches
                best_match = symbol

        return best_match

    def get_chord_notes(self, symbol: str) -> FrozenSet[str]:
        """Get the pitch classes of a chord (empty if unknown)."""
        return self._templates.get(symbol, frozenset())
