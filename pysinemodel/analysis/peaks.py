"""
Spectral Peak Picking Module.

Default front end of the sinusoidal analysis:
- Cartesian to polar conversion of a complex spectrum
- Local maximum picking with parabolic sub-bin interpolation
"""

from __future__ import annotations

import librosa
import numpy as np

from pysinemodel.analysis.constants import ORDER_BY_CHOICES, ORDER_BY_FREQUENCY
from pysinemodel.exceptions import ConfigurationError, ContractViolationError


def cartesian_to_polar(fft: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Split a complex spectrum into magnitude and phase arrays."""
    fft = np.asarray(fft).ravel()
    return np.abs(fft).astype(np.float64), np.angle(fft).astype(np.float64)


def detect_peaks(
    magnitudes: np.ndarray,
    sample_rate: float,
    max_peaks: int,
    min_frequency: float,
    max_frequency: float,
    threshold: float,
    order_by: str = ORDER_BY_FREQUENCY,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Find the peaks of a magnitude spectrum spanning 0 Hz to Nyquist.

    Each local maximum above ``threshold`` is refined by fitting a parabola
    through it and its two neighbours. The ``max_peaks`` loudest peaks in
    [min_frequency, max_frequency] are kept.

    Args:
        magnitudes: Magnitude spectrum (bins 0..N/2).
        sample_rate: Sampling rate in Hz; the last bin is at sample_rate / 2.
        max_peaks: Maximum number of peaks returned.
        min_frequency: Lower frequency bound in Hz (inclusive).
        max_frequency: Upper frequency bound in Hz (inclusive).
        threshold: Peaks whose interpolated height is not above this are dropped.
        order_by: "frequency" (ascending) or "magnitude" (descending).

    Returns:
        (frequencies, magnitudes) of the detected peaks.
    """
    if order_by not in ORDER_BY_CHOICES:
        raise ConfigurationError(f"Unsupported ordering type: '{order_by}'")

    mag = np.asarray(magnitudes, dtype=np.float64).ravel()
    if not np.all(np.isfinite(mag)):
        raise ContractViolationError("Magnitude spectrum must be finite")
    if mag.shape[0] < 3:
        return np.zeros(0), np.zeros(0)

    # Interior maxima only: the parabola needs both neighbours
    maxima = np.flatnonzero(librosa.util.localmax(mag))
    maxima = maxima[(maxima > 0) & (maxima < mag.shape[0] - 1)]

    left, center, right = mag[maxima - 1], mag[maxima], mag[maxima + 1]
    curvature = left - 2.0 * center + right
    offset = np.zeros_like(center)
    np.divide(0.5 * (left - right), curvature, out=offset, where=curvature != 0)
    heights = center - 0.25 * (left - right) * offset

    bin_hz = (sample_rate / 2.0) / (mag.shape[0] - 1)
    freqs = (maxima + offset) * bin_hz

    keep = (heights > threshold) & (freqs >= min_frequency) & (freqs <= max_frequency)
    freqs, heights = freqs[keep], heights[keep]

    loudest = np.argsort(-heights, kind="stable")[:max_peaks]
    freqs, heights = freqs[loudest], heights[loudest]

    if order_by == ORDER_BY_FREQUENCY:
        ascending = np.argsort(freqs, kind="stable")
        freqs, heights = freqs[ascending], heights[ascending]

    return freqs, heights
