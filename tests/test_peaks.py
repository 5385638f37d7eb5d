"""Tests for pysinemodel.analysis.peaks."""

import numpy as np
import pytest

from pysinemodel.analysis.peaks import cartesian_to_polar, detect_peaks
from pysinemodel.exceptions import ConfigurationError

SR = 8000
BIN_HZ = SR / 1024


def peaks_of(fft, **kwargs):
    mag, _ = cartesian_to_polar(fft)
    params = dict(
        sample_rate=SR, max_peaks=100, min_frequency=0.0,
        max_frequency=SR / 2, threshold=20.0, order_by="frequency",
    )
    params.update(kwargs)
    return detect_peaks(mag, **params)


class TestCartesianToPolar:
    def test_magnitude_and_phase(self):
        mag, phase = cartesian_to_polar(np.array([1 + 1j, -2.0, 0.0, 3j]))
        np.testing.assert_allclose(mag, [np.sqrt(2), 2.0, 0.0, 3.0])
        np.testing.assert_allclose(phase, [np.pi / 4, np.pi, 0.0, np.pi / 2])


class TestDetectPeaks:
    def test_bin_centred_tones(self, two_tone_fft):
        freqs, mags = peaks_of(two_tone_fft)
        np.testing.assert_allclose(freqs, [1000.0, 2500.0], atol=0.5)
        assert mags[0] > mags[1]

    def test_sub_bin_tone(self, tone_spectrum):
        freqs, _ = peaks_of(tone_spectrum([(1003.0, 1.0)]))
        assert freqs.size == 1
        assert freqs[0] == pytest.approx(1003.0, abs=BIN_HZ / 4)

    def test_order_by_magnitude(self, tone_spectrum):
        freqs, mags = peaks_of(tone_spectrum([(1000.0, 0.5), (2500.0, 1.0)]), order_by="magnitude")
        np.testing.assert_allclose(freqs, [2500.0, 1000.0], atol=0.5)
        assert mags[0] > mags[1]

    def test_max_peaks_keeps_loudest(self, tone_spectrum):
        freqs, _ = peaks_of(tone_spectrum([(1000.0, 0.5), (2500.0, 1.0)]), max_peaks=1)
        np.testing.assert_allclose(freqs, [2500.0], atol=0.5)

    def test_frequency_range(self, two_tone_fft):
        freqs, _ = peaks_of(two_tone_fft, min_frequency=1500.0, max_frequency=3000.0)
        np.testing.assert_allclose(freqs, [2500.0], atol=0.5)

    def test_threshold(self, two_tone_fft):
        freqs, _ = peaks_of(two_tone_fft, threshold=200.0)
        np.testing.assert_allclose(freqs, [1000.0], atol=0.5)

    def test_silence(self):
        freqs, mags = peaks_of(np.zeros(513, dtype=complex))
        assert freqs.size == mags.size == 0

    def test_tiny_spectrum(self):
        freqs, _ = detect_peaks(np.array([0.0, 1.0]), SR, 10, 0.0, SR / 2, -1.0)
        assert freqs.size == 0

    def test_unsupported_order(self, two_tone_fft):
        with pytest.raises(ConfigurationError):
            peaks_of(two_tone_fft, order_by="position")
