"""PySineModel - sinusoidal track continuation and peak phase estimation."""

__version__ = "0.3.0"

from pysinemodel.analysis import (
    Peaks,
    SineModelAnalyzer,
    SineModelConfig,
    SineTracker,
    TrackArray,
    phase_interpolation,
    sine_tracking,
)
from pysinemodel.exceptions import ConfigurationError, ContractViolationError

__all__ = [
    "ConfigurationError",
    "ContractViolationError",
    "Peaks",
    "SineModelAnalyzer",
    "SineModelConfig",
    "SineTracker",
    "TrackArray",
    "phase_interpolation",
    "sine_tracking",
]
