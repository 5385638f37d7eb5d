"""
Analysis Constants - Default parameters of the sinusoidal model.

Centralized defaults for peak picking, track continuation and phase
estimation so that configuration and tests share one source of truth.
"""

from __future__ import annotations

import numpy as np

# ============================================================================
# PEAK DETECTION
# ============================================================================

DEFAULT_SAMPLE_RATE = 44100.0  # Hz
DEFAULT_MAX_PEAKS = 100  # Maximum number of peaks returned per frame
DEFAULT_MAX_FREQUENCY = 5000.0  # Upper bound of the peak search range (Hz)
DEFAULT_MIN_FREQUENCY = 0.0  # Lower bound of the peak search range (Hz)
DEFAULT_MAGNITUDE_THRESHOLD = 0.0  # Peaks at or below this are discarded

ORDER_BY_FREQUENCY = "frequency"  # Ascending frequency
ORDER_BY_MAGNITUDE = "magnitude"  # Descending magnitude
ORDER_BY_CHOICES = (ORDER_BY_FREQUENCY, ORDER_BY_MAGNITUDE)
DEFAULT_ORDER_BY = ORDER_BY_FREQUENCY

# ============================================================================
# TRACK CONTINUATION
# ============================================================================

# Matching tolerance: FREQ_DEV_OFFSET + FREQ_DEV_SLOPE * peak_frequency
DEFAULT_FREQ_DEV_OFFSET = 20.0  # Minimum frequency deviation at 0 Hz
DEFAULT_FREQ_DEV_SLOPE = 0.01  # Tolerance growth per Hz

# What happens to an active track that no peak continues
UNMATCHED_HOLD = "hold"  # Keep previous values, slot stays occupied
UNMATCHED_RELEASE = "release"  # Zero the slot and let new peaks claim it
UNMATCHED_CHOICES = (UNMATCHED_HOLD, UNMATCHED_RELEASE)
DEFAULT_UNMATCHED = UNMATCHED_HOLD  # Single-frame continuation
DEFAULT_STREAM_UNMATCHED = UNMATCHED_RELEASE  # Streams reuse slots of vanished partials

# ============================================================================
# PHASE ESTIMATION
# ============================================================================

# Neighbouring bins further apart than this are treated as a phase wrap
PHASE_WRAP_GAP = np.pi
