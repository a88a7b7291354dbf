"""Analysis layer - Low-level signal analysis.

This layer turns raw sample frames into pitch content:
- Signal gating (RMS strength)
- Magnitude spectrum (FFT)
- Spectral peak picking
- Pitch-class mapping
"""

from .frame import FrameAnalyzer, FrameAnalysis, Peak

__all__ = [
    "FrameAnalyzer",
    "FrameAnalysis",
    "Peak",
]
