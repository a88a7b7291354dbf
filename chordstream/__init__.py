"""chordstream - Real-time chord recognition from streaming audio.

Architecture Layers:
    1. input/     - Frame sources (arrays, files, microphone)
    2. analysis/  - Per-frame signal analysis (gate, spectrum, peaks, pitch classes)
    3. inference/ - Musical understanding (chord matching, progression tracking)
    4. recognizer - Orchestration of the above behind start/stop/query/clear
"""

__version__ = "0.1.0"

# Core types
from .core import RecognizerConfig, SourceUnavailableError, FrameReadError

# Input layer
from .input import (
    AudioLoader,
    FrameSource,
    ArrayFrameSource,
    FileFrameSource,
    MicrophoneFrameSource,
)

# Analysis layer
from .analysis import FrameAnalyzer

# Inference layer
from .inference import ChordMatcher, ProgressionTracker, format_progression

# Orchestration
from .recognizer import ChordRecognizer, SessionStats

__all__ = [
    # Core
    "RecognizerConfig",
    "SourceUnavailableError",
    "FrameReadError",
    # Input
    "AudioLoader",
    "FrameSource",
    "ArrayFrameSource",
    "FileFrameSource",
    "MicrophoneFrameSource",
    # Analysis
    "FrameAnalyzer",
    # Inference
    "ChordMatcher",
    "ProgressionTracker",
    "format_progression",
    # Orchestration
    "ChordRecognizer",
    "SessionStats",
]
