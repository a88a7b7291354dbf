"""Exceptions raised by frame sources."""


class SourceUnavailableError(RuntimeError):
    """A frame source could not be opened (missing device, unsupported format)."""


class FrameReadError(IOError):
    """A frame source failed while delivering frames."""
