"""In-memory stand-in for the sounddevice module.

Installed into sys.modules by test fixtures so microphone sources can be
exercised without PortAudio or an input device. Blocks are int16 arrays
handed out by RawInputStream.read(); when they run out the stream fails
the way a lost device does.
"""

import sys
import types

import numpy as np


class PortAudioError(Exception):
    pass


def to_pcm(frame: np.ndarray) -> np.ndarray:
    """Quantize float samples in [-1, 1] to int16."""
    return np.round(np.clip(frame, -1.0, 1.0) * 32767).astype(np.int16)


class FakeRawInputStream:
    def __init__(self, device, /, **settings):
        self.device = device
        self.settings = settings
        self.active = False
        self.closed = False
        device.streams.append(self)

    def start(self):
        if self.device.start_error is not None:
            raise self.device.start_error
        self.active = True

    def read(self, frames):
        if self.device.read_error is not None:
            raise self.device.read_error
        if not self.device.blocks:
            raise PortAudioError("Input stream lost")
        if self.device.loop:
            block = self.device.blocks[self.device.position % len(self.device.blocks)]
            self.device.position += 1
        else:
            block = self.device.blocks.pop(0)
        return block.tobytes(), self.device.overflowed

    def stop(self):
        self.active = False

    def close(self):
        self.active = False
        self.closed = True


class FakeSoundDevice(types.ModuleType):
    PortAudioError = PortAudioError

    def __init__(self):
        super().__init__("sounddevice")
        self.streams = []
        self.checked = []
        self.blocks = []
        self.loop = False
        self.position = 0
        self.overflowed = False
        self.settings_error = None
        self.start_error = None
        self.read_error = None

    def check_input_settings(self, **settings):
        self.checked.append(settings)
        if self.settings_error is not None:
            raise self.settings_error

    def RawInputStream(self, **settings):
        return FakeRawInputStream(self, **settings)

    def feed(self, *frames):
        self.blocks.extend(to_pcm(frame) for frame in frames)


def install(monkeypatch) -> FakeSoundDevice:
    """Replace sounddevice for the duration of one test."""
    device = FakeSoundDevice()
    monkeypatch.setitem(sys.modules, "sounddevice", device)
    return device
