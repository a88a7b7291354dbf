"""Frame sources - Pull-based suppliers of fixed-size mono frames.

A source is opened once, then polled with read_frame() until it returns
None (end of stream). Opening fails with SourceUnavailableError; failures
while reading raise FrameReadError.
"""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import numpy as np

from ..core import DEFAULT_FRAME_SIZE, DEFAULT_SR, FrameReadError, SourceUnavailableError
from .loader import AudioLoader

logger = logging.getLogger(__name__)

PCM16_SCALE = 32768.0


def pcm16_to_float(buffer: bytes, byteorder: str = "big") -> np.ndarray:
    """
    Convert signed 16-bit PCM bytes to float samples in [-1, 1).

    Args:
        buffer: Raw PCM bytes (a trailing odd byte is ignored)
        byteorder: "big" or "little"

    Returns:
        float32 sample array
    """
    if byteorder not in ("big", "little"):
        raise ValueError(f"byteorder must be 'big' or 'little', got {byteorder!r}")
    usable = len(buffer) - (len(buffer) % 2)
    dtype = ">i2" if byteorder == "big" else "<i2"
    samples = np.frombuffer(buffer[:usable], dtype=dtype)
    return samples.astype(np.float32) / PCM16_SCALE


class FrameSource(ABC):
    """Abstract base class for frame sources."""

    def __init__(self, sample_rate: int = DEFAULT_SR, frame_size: int = DEFAULT_FRAME_SIZE):
        self.sample_rate = sample_rate
        self.frame_size = frame_size

    @abstractmethod
    def open(self) -> None:
        """
        Acquire the underlying resource.

        Raises:
            SourceUnavailableError: If the source cannot be used
        """
        pass

    @abstractmethod
    def read_frame(self) -> Optional[np.ndarray]:
        """
        Block until the next frame is available.

        Returns:
            1-D array of frame_size samples, or None at end of stream

        Raises:
            FrameReadError: If acquisition fails mid-stream
        """
        pass

    def close(self) -> None:
        """Release the underlying resource."""

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ArrayFrameSource(FrameSource):
    """Slices an in-memory mono signal into consecutive frames."""

    def __init__(
        self,
        audio: np.ndarray,
        sample_rate: int = DEFAULT_SR,
        frame_size: int = DEFAULT_FRAME_SIZE,
        loop: bool = False,
    ):
        """
        Initialize ArrayFrameSource.

        Args:
            audio: Mono samples in [-1, 1]
            sample_rate: Sample rate of audio
            frame_size: Samples per frame; the last partial frame is zero-padded
            loop: Restart from the beginning instead of ending the stream
        """
        super().__init__(sample_rate, frame_size)
        self.audio = np.asarray(audio)
        self.loop = loop
        self._position = 0

    def open(self) -> None:
        if self.audio.ndim != 1:
            raise SourceUnavailableError(
                f"Only mono audio is supported, got shape {self.audio.shape}"
            )
        self._position = 0

    def read_frame(self) -> Optional[np.ndarray]:
        total = len(self.audio)
        if self._position >= total:
            if not self.loop or total == 0:
                return None
            self._position = 0

        chunk = self.audio[self._position:self._position + self.frame_size]
        self._position += self.frame_size

        if len(chunk) < self.frame_size:
            chunk = np.pad(chunk, (0, self.frame_size - len(chunk)))
        return chunk.astype(np.float32, copy=False)

    @property
    def frame_count(self) -> int:
        """Number of frames in one pass over the audio."""
        return -(-len(self.audio) // self.frame_size)


class FileFrameSource(ArrayFrameSource):
    """Frames decoded from an audio file."""

    def __init__(
        self,
        path: Union[str, Path],
        sample_rate: int = DEFAULT_SR,
        frame_size: int = DEFAULT_FRAME_SIZE,
        normalize: bool = True,
        offset: float = 0.0,
        duration: Optional[float] = None,
    ):
        """
        Initialize FileFrameSource.

        Args:
            path: Audio file to decode at open()
            sample_rate: Rate the file is resampled to
            frame_size: Samples per frame
            normalize: Peak-normalize the decoded samples
            offset: Seconds to skip at the start of the file
            duration: Seconds to analyse after offset (None reads to the end)
        """
        super().__init__(np.zeros(0, dtype=np.float32), sample_rate, frame_size)
        self.path = Path(path)
        self.loader = AudioLoader(
            sample_rate=sample_rate,
            normalize=normalize,
            offset=offset,
            duration=duration,
        )

    def open(self) -> None:
        audio, sr = self.loader.load(self.path)
        self.audio = audio
        self.sample_rate = sr
        logger.info(
            "Loaded %s: %.2fs at %d Hz, %d frames",
            self.path.name,
            self.loader.get_duration(audio, sr),
            sr,
            self.frame_count,
        )
        super().open()


class MicrophoneFrameSource(FrameSource):
    """Frames captured from an input device as 16-bit mono PCM."""

    def __init__(
        self,
        sample_rate: int = DEFAULT_SR,
        frame_size: int = DEFAULT_FRAME_SIZE,
        device: Optional[Union[int, str]] = None,
    ):
        super().__init__(sample_rate, frame_size)
        self.device = device
        self._stream = None

    def open(self) -> None:
        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            raise SourceUnavailableError(f"Audio capture unavailable: {e}") from e

        try:
            sd.check_input_settings(
                device=self.device,
                channels=1,
                dtype="int16",
                samplerate=self.sample_rate,
            )
            stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                blocksize=self.frame_size,
                device=self.device,
                channels=1,
                dtype="int16",
            )
        except (sd.PortAudioError, ValueError) as e:
            raise SourceUnavailableError(f"Line not supported: {e}") from e

        try:
            stream.start()
        except (sd.PortAudioError, ValueError) as e:
            stream.close()
            raise SourceUnavailableError(f"Could not start recording: {e}") from e

        self._stream = stream
        logger.info("Recording started on device %s", self.device or "default")

    def read_frame(self) -> Optional[np.ndarray]:
        if self._stream is None:
            raise FrameReadError("Microphone source is not open")
        try:
            data, overflowed = self._stream.read(self.frame_size)
        except Exception as e:
            raise FrameReadError(f"Audio capture failed: {e}") from e

        if overflowed:
            logger.warning("Input overflow: frames were dropped")
        return pcm16_to_float(bytes(data), byteorder=sys.byteorder)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
