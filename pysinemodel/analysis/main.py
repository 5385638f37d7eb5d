"""
Sinusoidal Analysis Entry Points.

Per-frame analysis and per-stream tracking:
1. Cartesian to polar conversion of the frame's spectrum
2. Peak detection with sub-bin interpolation
3. Phase estimation at each peak
4. Track continuation against the stream's previous frame
"""

from __future__ import annotations

import logging

import numpy as np

from pysinemodel.analysis.config import SineModelConfig
from pysinemodel.analysis.peaks import cartesian_to_polar, detect_peaks
from pysinemodel.analysis.phase import phase_interpolation
from pysinemodel.analysis.tracking import Peaks, TrackArray


class SineModelAnalyzer:
    """Sine model analysis of single spectral frames, without tracking."""

    def __init__(self, config: SineModelConfig | None = None):
        self.config = config or SineModelConfig()

    def compute(self, fft: np.ndarray) -> Peaks:
        """
        Extract the sinusoidal peaks of one frame.

        Args:
            fft: Complex spectrum of the frame, bins from 0 Hz to Nyquist.

        Returns:
            Peaks with frequencies (Hz), magnitudes and interpolated phases.
        """
        cfg = self.config
        fftmag, fftphase = cartesian_to_polar(fft)
        frequencies, magnitudes = detect_peaks(
            fftmag,
            sample_rate=cfg.sample_rate,
            max_peaks=cfg.max_peaks,
            min_frequency=cfg.min_frequency,
            max_frequency=cfg.max_frequency,
            threshold=cfg.magnitude_threshold,
            order_by=cfg.order_by,
        )
        phases = phase_interpolation(fftphase, frequencies, cfg.nyquist)
        return Peaks(frequencies, magnitudes, phases)


class SineTracker:
    """
    Sinusoidal tracking for one audio stream.

    Owns the stream's track array. Frames must be fed in order and an
    instance must not be shared between concurrently processed streams.
    """

    def __init__(self, config: SineModelConfig | None = None, initial_slots: int = 0):
        self.config = config or SineModelConfig()
        self.analyzer = SineModelAnalyzer(self.config)
        self.tracks = TrackArray.empty(initial_slots)
        self.frame_count = 0

    def process(self, fft: np.ndarray) -> TrackArray:
        """Analyze one frame's spectrum and continue the tracks with its peaks."""
        return self.update(self.analyzer.compute(fft))

    def update(self, peaks: Peaks) -> TrackArray:
        """Continue the tracks with already detected peaks."""
        n_before = len(self.tracks)
        self.tracks.continue_tracks(
            peaks,
            freq_dev_offset=self.config.freq_dev_offset,
            freq_dev_slope=self.config.freq_dev_slope,
            unmatched=self.config.unmatched,
        )
        self.frame_count += 1

        if len(self.tracks) > n_before:
            logging.debug(
                f"Frame {self.frame_count}: track array grew from {n_before} to {len(self.tracks)} slots"
            )
        return self.tracks

    def reset(self):
        """Empty every slot, keeping the track array's length."""
        self.tracks.frequencies[:] = 0.0
        self.tracks.magnitudes[:] = 0.0
        self.tracks.phases[:] = 0.0
        self.frame_count = 0
        logging.info(f"Tracker reset: {len(self.tracks)} empty slots")
