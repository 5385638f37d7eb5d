"""
PySineModel Analysis Module - Sinusoidal Peak Tracking.

Architecture:
├── constants.py   - Default parameters and policy names
├── config.py      - Validated analysis configuration
├── peaks.py       - Polar conversion and spectral peak picking
├── phase.py       - Sub-bin peak phase estimation
├── tracking.py    - Frame-to-frame sinusoidal track continuation
└── main.py        - Per-frame analyzer and per-stream tracker
"""

# Configuration
from pysinemodel.analysis.config import SineModelConfig

# Peak picking
from pysinemodel.analysis.peaks import (
    cartesian_to_polar,
    detect_peaks,
)

# Phase estimation
from pysinemodel.analysis.phase import phase_interpolation

# Track continuation
from pysinemodel.analysis.tracking import (
    Peaks,
    TrackArray,
    sine_tracking,
)

# Main entry points
from pysinemodel.analysis.main import (
    SineModelAnalyzer,
    SineTracker,
)

__all__ = [
    "SineModelConfig",
    "cartesian_to_polar",
    "detect_peaks",
    "phase_interpolation",
    "Peaks",
    "TrackArray",
    "sine_tracking",
    "SineModelAnalyzer",
    "SineTracker",
]
