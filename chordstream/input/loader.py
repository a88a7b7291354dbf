"""Audio file decoding for frame sources.

Files are decoded once, downmixed to mono and resampled to the recognizer's
rate. An optional excerpt (offset and duration in seconds) limits decoding
to the part of the recording that should be analysed.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import librosa
import numpy as np

from ..core import DEFAULT_SR, SourceUnavailableError

logger = logging.getLogger(__name__)


class AudioLoader:
    """Decodes audio files into mono float32 sample arrays."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".mp4"}

    def __init__(
        self,
        sample_rate: int = DEFAULT_SR,
        normalize: bool = True,
        offset: float = 0.0,
        duration: Optional[float] = None,
    ):
        """
        Initialize AudioLoader.

        Args:
            sample_rate: Rate the decoded samples are resampled to
            normalize: Peak-normalize so quiet recordings clear the signal gate
            offset: Seconds to skip at the start of the file
            duration: Seconds to decode after offset (None decodes to the end)
        """
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        if duration is not None and duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        self.sample_rate = sample_rate
        self.normalize = normalize
        self.offset = offset
        self.duration = duration

    def load(self, path: Union[str, Path]) -> Tuple[np.ndarray, int]:
        """
        Decode a file.

        Returns:
            Tuple of (mono float32 samples, sample rate)

        Raises:
            SourceUnavailableError: If the file is missing, has an unsupported
                extension or cannot be decoded
        """
        path = Path(path)
        self._check(path)

        try:
            audio, sr = librosa.load(
                str(path),
                sr=self.sample_rate,
                mono=True,
                offset=self.offset,
                duration=self.duration,
            )
        except Exception as e:
            raise SourceUnavailableError(f"Could not decode {path}: {e}") from e

        if len(audio) == 0:
            logger.warning("No audio decoded from %s at offset %.2fs", path.name, self.offset)
        if self.normalize:
            audio = self._normalize(audio)
        return audio.astype(np.float32, copy=False), sr

    def _check(self, path: Path) -> None:
        if not path.exists():
            raise SourceUnavailableError(f"Audio file not found: {path}")
        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise SourceUnavailableError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.SUPPORTED_FORMATS)}"
            )

    @staticmethod
    def _normalize(audio: np.ndarray) -> np.ndarray:
        peak = np.abs(audio).max() if len(audio) else 0.0
        if peak > 0:
            audio = audio / peak
        return audio

    def get_duration(self, audio: np.ndarray, sr: Optional[int] = None) -> float:
        """Get duration in seconds."""
        return len(audio) / (sr or self.sample_rate)
