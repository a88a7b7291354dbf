"""Input layer - Audio loading and frame delivery."""

from .loader import AudioLoader
from .sources import (
    FrameSource,
    ArrayFrameSource,
    FileFrameSource,
    MicrophoneFrameSource,
    pcm16_to_float,
)

__all__ = [
    "AudioLoader",
    "FrameSource",
    "ArrayFrameSource",
    "FileFrameSource",
    "MicrophoneFrameSource",
    "pcm16_to_float",
]
