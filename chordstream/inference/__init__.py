"""Inference layer - Musical understanding of detected pitch content.

This layer turns per-frame pitch classes into harmony:
- Chord identification (triad template matching)
- Progression tracking (debounced, deduplicated chord sequence)

Pipeline: Pitch classes → ChordMatcher → ProgressionTracker → Progression
"""

from .chords import ChordMatcher
from .progression import ProgressionTracker, StabilityState, format_progression

__all__ = [
    # Chord identification
    "ChordMatcher",
    # Progression tracking
    "ProgressionTracker",
    "StabilityState",
    "format_progression",
]
