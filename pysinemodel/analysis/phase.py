"""
Peak Phase Estimation Module.

Reads the phase of each spectral peak at its sub-bin position by linear
interpolation between the nearest bin and its neighbour on the peak's
side. Interpolation is skipped when the two bins straddle a phase wrap.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from pysinemodel.analysis.constants import PHASE_WRAP_GAP
from pysinemodel.exceptions import ContractViolationError


def phase_interpolation(
    fftphase: np.ndarray,
    peak_frequencies: np.ndarray,
    nyquist_frequency: float,
) -> np.ndarray:
    """
    Estimate the phase of each peak from a discrete phase spectrum.

    Bin ``k`` of ``fftphase`` sits at ``k * nyquist / (len(fftphase) - 1)``
    Hz, so 0 Hz reads bin 0 and the Nyquist frequency reads the last bin.

    Args:
        fftphase: Phase spectrum in radians, bins from 0 Hz to Nyquist.
        peak_frequencies: Peak frequencies in Hz, within [0, nyquist].
        nyquist_frequency: Half the sampling rate in Hz.

    Returns:
        Array of phases, one per peak.

    Raises:
        ContractViolationError: Frequencies outside [0, nyquist], empty
            spectrum with peaks, or a non-positive Nyquist frequency.
    """
    fftphase = np.asarray(fftphase, dtype=np.float64).ravel()
    peak_frequencies = np.asarray(peak_frequencies, dtype=np.float64).ravel()

    if peak_frequencies.shape[0] == 0:
        return np.zeros(0)
    if not nyquist_frequency > 0:
        raise ContractViolationError(f"Nyquist frequency must be positive, got {nyquist_frequency}")
    if fftphase.shape[0] == 0:
        raise ContractViolationError("Cannot estimate peak phases from an empty phase spectrum")
    if not np.all(np.isfinite(peak_frequencies)) or np.any(
        (peak_frequencies < 0) | (peak_frequencies > nyquist_frequency)
    ):
        raise ContractViolationError(
            f"Peak frequencies must lie within [0, {nyquist_frequency}] Hz"
        )

    positions = (fftphase.shape[0] - 1) * (peak_frequencies / nyquist_frequency)
    return _interpolate_phases(fftphase, positions, PHASE_WRAP_GAP)


@njit(cache=True)
def _interpolate_phases(fftphase: np.ndarray, positions: np.ndarray, wrap_gap: float) -> np.ndarray:
    size = fftphase.shape[0]
    phases = np.empty(positions.shape[0])

    for i in range(positions.shape[0]):
        pos = positions[i]
        idx = min(int(np.floor(pos + 0.5)), size - 1)
        a = pos - idx

        if a == 0.0:
            phases[i] = fftphase[idx]
            continue

        if a < 0 and idx > 0:
            neighbour = fftphase[idx - 1]
        elif idx < size - 1:
            neighbour = fftphase[idx + 1]
        else:
            phases[i] = fftphase[idx]
            continue

        # Neighbours across a wrap would interpolate to garbage
        if abs(neighbour - fftphase[idx]) > wrap_gap:
            phases[i] = fftphase[idx]
        else:
            w = abs(a)
            phases[i] = w * neighbour + (1.0 - w) * fftphase[idx]

    return phases
