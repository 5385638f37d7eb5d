"""
Sine Model Configuration Module.

Validates analysis parameters once, at construction, so that per-frame
processing never has to.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from pysinemodel.analysis.constants import (
    DEFAULT_FREQ_DEV_OFFSET,
    DEFAULT_FREQ_DEV_SLOPE,
    DEFAULT_MAGNITUDE_THRESHOLD,
    DEFAULT_MAX_FREQUENCY,
    DEFAULT_MAX_PEAKS,
    DEFAULT_MIN_FREQUENCY,
    DEFAULT_ORDER_BY,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_STREAM_UNMATCHED,
    ORDER_BY_CHOICES,
    UNMATCHED_CHOICES,
)
from pysinemodel.exceptions import ConfigurationError


@dataclass
class SineModelConfig:
    """Sinusoidal analysis configuration.

    Attributes:
        sample_rate: Sampling rate of the audio signal (Hz).
        max_peaks: Maximum number of peaks per frame.
        max_frequency: Upper bound of the peak search range (Hz).
        min_frequency: Lower bound of the peak search range (Hz).
        magnitude_threshold: Peaks at or below this are not reported.
        order_by: Peak ordering, "frequency" (ascending) or "magnitude" (descending).
        freq_dev_offset: Track matching tolerance at 0 Hz.
        freq_dev_slope: Growth of the matching tolerance per Hz.
        unmatched: Policy for active tracks no peak continues. Defaults to
            "release" so a stream reuses the slots of vanished partials.
    """
    sample_rate: float = DEFAULT_SAMPLE_RATE
    max_peaks: int = DEFAULT_MAX_PEAKS
    max_frequency: float = DEFAULT_MAX_FREQUENCY
    min_frequency: float = DEFAULT_MIN_FREQUENCY
    magnitude_threshold: float = DEFAULT_MAGNITUDE_THRESHOLD
    order_by: str = DEFAULT_ORDER_BY
    freq_dev_offset: float = DEFAULT_FREQ_DEV_OFFSET
    freq_dev_slope: float = DEFAULT_FREQ_DEV_SLOPE
    unmatched: str = DEFAULT_STREAM_UNMATCHED

    def __post_init__(self):
        self.order_by = str(self.order_by).lower()
        if self.order_by not in ORDER_BY_CHOICES:
            raise ConfigurationError(f"Unsupported ordering type: '{self.order_by}'")

        self.unmatched = str(self.unmatched).lower()
        if self.unmatched not in UNMATCHED_CHOICES:
            raise ConfigurationError(f"Unsupported unmatched track policy: '{self.unmatched}'")

        if not self.sample_rate > 0:
            raise ConfigurationError(f"sample_rate must be positive, got {self.sample_rate}")
        try:
            whole = int(self.max_peaks) == self.max_peaks
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"max_peaks must be an integer >= 1, got {self.max_peaks!r}") from e
        if not whole or self.max_peaks < 1:
            raise ConfigurationError(f"max_peaks must be an integer >= 1, got {self.max_peaks}")
        self.max_peaks = int(self.max_peaks)
        if not self.max_frequency > 0:
            raise ConfigurationError(f"max_frequency must be positive, got {self.max_frequency}")
        if self.min_frequency < 0:
            raise ConfigurationError(f"min_frequency must be non-negative, got {self.min_frequency}")
        if self.min_frequency >= self.max_frequency:
            raise ConfigurationError(
                f"min_frequency ({self.min_frequency}) must be below max_frequency ({self.max_frequency})"
            )
        if self.freq_dev_offset < 0 or self.freq_dev_slope < 0:
            raise ConfigurationError(
                f"Frequency deviation parameters must be non-negative, got "
                f"offset={self.freq_dev_offset}, slope={self.freq_dev_slope}"
            )

    @property
    def nyquist(self) -> float:
        return self.sample_rate / 2.0

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> SineModelConfig:
        """Build a configuration from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**values)
