"""Core types and constants for chordstream."""

from .config import RecognizerConfig
from .errors import SourceUnavailableError, FrameReadError
from .constants import (
    PITCH_NAMES,
    UNKNOWN_CHORD,
    DEFAULT_SR,
    DEFAULT_FRAME_SIZE,
    PROGRESSION_SEPARATOR,
)

__all__ = [
    "RecognizerConfig",
    "SourceUnavailableError",
    "FrameReadError",
    "PITCH_NAMES",
    "UNKNOWN_CHORD",
    "DEFAULT_SR",
    "DEFAULT_FRAME_SIZE",
    "PROGRESSION_SEPARATOR",
]
