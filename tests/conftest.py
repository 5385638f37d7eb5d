import numpy as np
import pytest

from pysinemodel.analysis import SineModelConfig

SR = 8000
N_FFT = 1024


def _windowed_tones(partials, sr=SR, n_fft=N_FFT):
    t = np.arange(n_fft) / sr
    x = np.zeros(n_fft)
    for freq, amp in partials:
        x += amp * np.cos(2 * np.pi * freq * t)
    return np.fft.rfft(x * np.hanning(n_fft))


@pytest.fixture
def tone_spectrum():
    """Complex spectrum of a Hann-windowed sum of (frequency, amplitude) sinusoids."""
    return _windowed_tones


@pytest.fixture
def config():
    return SineModelConfig(sample_rate=SR, max_frequency=3500.0, magnitude_threshold=20.0)


@pytest.fixture
def two_tone_fft():
    return _windowed_tones([(1000.0, 1.0), (2500.0, 0.5)])
