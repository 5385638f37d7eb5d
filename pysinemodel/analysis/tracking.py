"""
Sinusoidal Track Continuation Module.

Connects the spectral peaks of the current frame to the sinusoidal tracks
of the previous frame:
- Peaks are visited loudest first, each claiming the nearest free track
- A match is accepted within an adaptive tolerance that widens with frequency
- Peaks left over fill empty track slots, or append new slots when full

Track identity is the slot index. A track array only ever grows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numba import njit

from pysinemodel.analysis.constants import (
    DEFAULT_FREQ_DEV_OFFSET,
    DEFAULT_FREQ_DEV_SLOPE,
    DEFAULT_UNMATCHED,
    UNMATCHED_CHOICES,
    UNMATCHED_RELEASE,
)
from pysinemodel.exceptions import ConfigurationError, ContractViolationError


@dataclass(slots=True)
class Peaks:
    """Spectral peaks of one frame as parallel arrays."""

    frequencies: np.ndarray  # Hz, sub-bin interpolated
    magnitudes: np.ndarray   # Linear or dB, as produced by the detector
    phases: np.ndarray | None = None  # Radians, zeros until estimated

    def __post_init__(self):
        self.frequencies = np.asarray(self.frequencies, dtype=np.float64).ravel()
        self.magnitudes = np.asarray(self.magnitudes, dtype=np.float64).ravel()
        if self.phases is None:
            self.phases = np.zeros_like(self.frequencies)
        else:
            self.phases = np.asarray(self.phases, dtype=np.float64).ravel()

    def __len__(self) -> int:
        return self.frequencies.shape[0]


@dataclass(slots=True)
class TrackArray:
    """
    Fixed-slot track state of a single audio stream.

    A slot with frequency 0 is empty. The owner passes the same instance to
    every frame; ``continue_tracks`` reassigns its contents in place.

    Only the instance is stable: each frame binds ``frequencies``,
    ``magnitudes`` and ``phases`` to new arrays, so read them from the
    instance after the call rather than keeping references across frames.
    """

    frequencies: np.ndarray = field(default_factory=lambda: np.zeros(0))
    magnitudes: np.ndarray = field(default_factory=lambda: np.zeros(0))
    phases: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self):
        self.frequencies = np.asarray(self.frequencies, dtype=np.float64).ravel()
        self.magnitudes = np.asarray(self.magnitudes, dtype=np.float64).ravel()
        self.phases = np.asarray(self.phases, dtype=np.float64).ravel()
        n = self.frequencies.shape[0]
        if self.magnitudes.shape[0] != n or self.phases.shape[0] != n:
            raise ContractViolationError(
                f"Track arrays must have equal length, got {n}, "
                f"{self.magnitudes.shape[0]} and {self.phases.shape[0]}"
            )

    @classmethod
    def empty(cls, n_slots: int = 0) -> TrackArray:
        if n_slots < 0:
            raise ContractViolationError(f"Slot count must be non-negative, got {n_slots}")
        return cls(np.zeros(n_slots), np.zeros(n_slots), np.zeros(n_slots))

    def __len__(self) -> int:
        return self.frequencies.shape[0]

    @property
    def active(self) -> np.ndarray:
        """Indices of occupied slots."""
        return np.flatnonzero(self.frequencies)

    def copy(self) -> TrackArray:
        return TrackArray(self.frequencies.copy(), self.magnitudes.copy(), self.phases.copy())

    def continue_tracks(
        self,
        peaks: Peaks,
        freq_dev_offset: float = DEFAULT_FREQ_DEV_OFFSET,
        freq_dev_slope: float = DEFAULT_FREQ_DEV_SLOPE,
        unmatched: str = DEFAULT_UNMATCHED,
    ) -> TrackArray:
        """Continue this frame's tracks with ``peaks`` and store the result in place."""
        self.frequencies, self.magnitudes, self.phases = sine_tracking(
            peaks.frequencies,
            peaks.magnitudes,
            peaks.phases,
            self.frequencies,
            freq_dev_offset,
            freq_dev_slope,
            tmag=self.magnitudes,
            tphase=self.phases,
            unmatched=unmatched,
        )
        return self


def sine_tracking(
    pfreq: np.ndarray,
    pmag: np.ndarray,
    pphase: np.ndarray | None,
    tfreq: np.ndarray,
    freq_dev_offset: float = DEFAULT_FREQ_DEV_OFFSET,
    freq_dev_slope: float = DEFAULT_FREQ_DEV_SLOPE,
    *,
    tmag: np.ndarray | None = None,
    tphase: np.ndarray | None = None,
    unmatched: str = DEFAULT_UNMATCHED,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Continue sinusoidal tracks from one frame to the next.

    Peaks are visited by descending magnitude. Each one takes the closest
    still unmatched incoming track if the distance is below
    ``freq_dev_offset + freq_dev_slope * peak_frequency``. Remaining peaks
    go, loudest first, into empty slots and then into appended slots.

    Args:
        pfreq, pmag, pphase: Frequencies, magnitudes and phases of the
            current frame's peaks. ``pphase`` may be None (zeros).
        tfreq: Frequencies of the incoming tracks (0 marks an empty slot).
        freq_dev_offset: Minimum frequency deviation at 0 Hz.
        freq_dev_slope: Increase of the allowed deviation per Hz.
        tmag, tphase: Magnitudes and phases of the incoming tracks, carried
            over for tracks held by the "hold" policy.
        unmatched: "hold" keeps an unmatched active track as it was;
            "release" empties it so that new peaks can take its slot.

    Returns:
        (tfreqn, tmagn, tphasen), new arrays at least as long as ``tfreq``.

    Raises:
        ConfigurationError: Unknown policy or negative tolerance.
        ContractViolationError: Malformed peak or track arrays.
    """
    if unmatched not in UNMATCHED_CHOICES:
        raise ConfigurationError(
            f"Unsupported unmatched track policy: '{unmatched}' (expected one of {UNMATCHED_CHOICES})"
        )
    if freq_dev_offset < 0 or freq_dev_slope < 0:
        raise ConfigurationError(
            f"Frequency deviation parameters must be non-negative, got "
            f"offset={freq_dev_offset}, slope={freq_dev_slope}"
        )

    pfreq = np.asarray(pfreq, dtype=np.float64).ravel()
    pmag = np.asarray(pmag, dtype=np.float64).ravel()
    pphase = np.zeros_like(pfreq) if pphase is None else np.asarray(pphase, dtype=np.float64).ravel()
    tfreq = np.asarray(tfreq, dtype=np.float64).ravel()
    n_tracks = tfreq.shape[0]
    tmag = np.zeros(n_tracks) if tmag is None else np.asarray(tmag, dtype=np.float64).ravel()
    tphase = np.zeros(n_tracks) if tphase is None else np.asarray(tphase, dtype=np.float64).ravel()

    _check_frame(pfreq, pmag, pphase, tfreq, tmag, tphase)

    pindexes = np.flatnonzero(pfreq)  # candidate peaks
    incoming = np.flatnonzero(tfreq)  # active incoming tracks

    # Loudest first; equal magnitudes keep their input order
    mag_order = pindexes[np.argsort(-pmag[pindexes], kind="stable")]

    new_tracks = _greedy_match(
        pfreq, mag_order, tfreq, incoming, float(freq_dev_offset), float(freq_dev_slope)
    )

    tfreqn = np.zeros(n_tracks)
    tmagn = np.zeros(n_tracks)
    tphasen = np.zeros(n_tracks)

    # Continued tracks
    indext = np.flatnonzero(new_tracks != -1)
    indexp = new_tracks[indext]
    tfreqn[indext] = pfreq[indexp]
    tmagn[indext] = pmag[indexp]
    tphasen[indext] = pphase[indexp]

    held = np.setdiff1d(incoming, indext, assume_unique=True)
    if unmatched == UNMATCHED_RELEASE:
        emptyt = np.flatnonzero(new_tracks == -1)
    else:
        tfreqn[held] = tfreq[held]
        tmagn[held] = tmag[held]
        tphasen[held] = tphase[held]
        emptyt = np.flatnonzero(tfreq == 0)

    # Peaks that continued no track, still in magnitude order
    peaksleft = mag_order[~np.isin(mag_order, indexp)]
    n_fill = min(emptyt.shape[0], peaksleft.shape[0])
    fill_slots = emptyt[:n_fill]
    fill_peaks = peaksleft[:n_fill]
    tfreqn[fill_slots] = pfreq[fill_peaks]
    tmagn[fill_slots] = pmag[fill_peaks]
    tphasen[fill_slots] = pphase[fill_peaks]

    overflow = peaksleft[n_fill:]
    if overflow.shape[0] > 0:
        tfreqn = np.append(tfreqn, pfreq[overflow])
        tmagn = np.append(tmagn, pmag[overflow])
        tphasen = np.append(tphasen, pphase[overflow])

    logging.debug(
        f"Tracking: {indext.shape[0]} continued, {n_fill} filled, "
        f"{overflow.shape[0]} appended, {held.shape[0]} unmatched ({unmatched}), "
        f"{tfreqn.shape[0]} slots"
    )

    return tfreqn, tmagn, tphasen


@njit(cache=True)
def _greedy_match(
    pfreq: np.ndarray,
    mag_order: np.ndarray,
    tfreq: np.ndarray,
    incoming: np.ndarray,
    freq_dev_offset: float,
    freq_dev_slope: float,
) -> np.ndarray:
    """Assign peaks to incoming tracks; returns the peak index per slot, -1 if none."""
    new_tracks = np.full(tfreq.shape[0], -1, dtype=np.int64)
    remaining = incoming.copy()
    n_remaining = remaining.shape[0]

    for i in mag_order:
        if n_remaining == 0:
            break

        # Closest remaining track; ties go to the lowest slot
        closest = 0
        distance = np.inf
        for k in range(n_remaining):
            d = abs(pfreq[i] - tfreq[remaining[k]])
            if d < distance:
                distance = d
                closest = k

        if distance < freq_dev_offset + freq_dev_slope * pfreq[i]:
            new_tracks[remaining[closest]] = i
            for k in range(closest, n_remaining - 1):
                remaining[k] = remaining[k + 1]
            n_remaining -= 1

    return new_tracks


def _check_frame(pfreq, pmag, pphase, tfreq, tmag, tphase) -> None:
    n_peaks = pfreq.shape[0]
    if pmag.shape[0] != n_peaks or pphase.shape[0] != n_peaks:
        raise ContractViolationError(
            f"Peak arrays must have equal length, got {n_peaks} frequencies, "
            f"{pmag.shape[0]} magnitudes and {pphase.shape[0]} phases"
        )
    n_tracks = tfreq.shape[0]
    if tmag.shape[0] != n_tracks or tphase.shape[0] != n_tracks:
        raise ContractViolationError(
            f"Track arrays must have equal length, got {n_tracks} frequencies, "
            f"{tmag.shape[0]} magnitudes and {tphase.shape[0]} phases"
        )
    if not np.all(np.isfinite(pfreq)) or np.any(pfreq < 0):
        raise ContractViolationError("Peak frequencies must be finite and non-negative")
    if not np.all(np.isfinite(pmag)):
        raise ContractViolationError("Peak magnitudes must be finite")
    if not np.all(np.isfinite(tfreq)) or np.any(tfreq < 0):
        raise ContractViolationError("Track frequencies must be finite and non-negative")
