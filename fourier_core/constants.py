"""
fourier_core/constants.py

Numeric thresholds and defaults shared across the core.
"""
import numpy as np

# min-max rescales treat a range below this as degenerate (unit range substituted)
RANGE_EPSILON = 1e-10

# normalize() is a no-op when the peak magnitude is at or below this
MAGNITUDE_EPSILON = float(np.finfo(np.float64).eps)

# low byte of every packed R<<24 | G<<16 | B<<8 | pad pixel
RGB_PAD_BYTE = 0xFF
RGB_CHANNEL_COUNT = 3

# ITU-R BT.601 luma, used when collapsing RGB to grayscale
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# animation: frequency count grows by this many bins per second at speed 1.0
FREQUENCIES_PER_SECOND = 10
DEFAULT_ANIMATION_SPEED = 1.0

# direct DFT is O(n^2); warn past this length
DFT_WARN_LENGTH = 2048
