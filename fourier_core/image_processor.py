"""
fourier_core/image_processor.py

Stateless numeric helpers around ComplexImage and scalar sequences.

Provided functions:
- pad_to_power_of_two(image) / crop_to_original_size(image, width, height)
- normalize_to_uint8(values) / normalize_to_float(values)
- apply_log_scale(values)                 log10(1 + v), in place for float arrays
- apply_color_map(gray, color_map)        grayscale bytes -> interleaved RGB bytes
- apply_gaussian_blur(image, sigma)       separable, out-of-bounds samples skipped
- apply_edge_detection(image)             3x3 Sobel magnitude, border left at zero

Notes:
- Degenerate ranges (< RANGE_EPSILON) in the min-max rescales use a unit range,
  so constant inputs map to 0 instead of NaN.
- The blur skips samples outside the image rather than padding or reflecting,
  so values near the border are attenuated.
"""

import enum
import logging
from typing import Sequence
import numpy as np

from .complex_image import ComplexImage, as_flat_array
from .constants import RANGE_EPSILON

logger = logging.getLogger(__name__)


class ColorMap(enum.Enum):
    GRAYSCALE = "grayscale"
    JET = "jet"


# --- power-of-two padding ---
def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n, found by doubling from 1."""
    p = 1
    while p < n:
        p <<= 1
    return p


def pad_to_power_of_two(image: ComplexImage) -> ComplexImage:
    """
    Copy `image` top-left aligned into a zero canvas whose sides are powers of two.
    Returns a plain copy when both sides already are.
    """
    padded_width = next_power_of_two(image.width)
    padded_height = next_power_of_two(image.height)
    if padded_width == image.width and padded_height == image.height:
        return image.copy()

    padded = ComplexImage(padded_width, padded_height)
    padded.as_array()[: image.height, : image.width] = image.as_array()
    return padded


def crop_to_original_size(image: ComplexImage, original_width: int, original_height: int) -> ComplexImage:
    """Copy the top-left original_width x original_height region out of `image`."""
    cropped = ComplexImage(original_width, original_height)
    cropped.as_array()[:, :] = image.as_array()[:original_height, :original_width]
    return cropped


# --- scalar sequence rescaling ---
def _min_and_range(values: np.ndarray):
    min_val = float(values.min())
    value_range = float(values.max()) - min_val
    if value_range < RANGE_EPSILON:
        value_range = 1.0
    return min_val, value_range


def normalize_to_uint8(values: Sequence[float]) -> np.ndarray:
    """
    Linear min-max rescale to 0..255 (uint8).
    The minimum maps to 0 and the maximum to 255; a constant sequence maps to 0.
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return np.zeros(arr.shape, dtype=np.uint8)
    min_val, value_range = _min_and_range(arr)
    scaled = np.clip((arr - min_val) / value_range * 255.0, 0.0, 255.0)
    return scaled.astype(np.uint8)


def normalize_to_float(values: Sequence[float]) -> np.ndarray:
    """Linear min-max rescale to 0..1 (float64)."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return arr.copy()
    min_val, value_range = _min_and_range(arr)
    return (arr - min_val) / value_range


def apply_log_scale(values) -> np.ndarray:
    """
    Elementwise log10(1 + v). Float64 ndarrays are modified in place;
    anything else is converted and the new array returned.
    """
    if isinstance(values, np.ndarray) and values.dtype == np.float64:
        np.log10(1.0 + values, out=values)
        return values
    return np.log10(1.0 + np.asarray(values, dtype=np.float64))


# --- color mapping ---
def apply_color_map(grayscale: Sequence[int], color_map: ColorMap = ColorMap.GRAYSCALE) -> np.ndarray:
    """
    Map grayscale bytes to interleaved RGB bytes (length 3 * N).

    GRAYSCALE replicates each value into R, G and B. JET is a 4-segment
    blue -> cyan -> green -> yellow -> red ramp with breakpoints at 0.25 / 0.5 / 0.75.
    """
    gray = as_flat_array(grayscale, np.uint8)
    color_map = ColorMap(color_map)

    if color_map is ColorMap.GRAYSCALE:
        return np.repeat(gray, 3)

    t = gray.astype(np.float64) / 255.0
    below_quarter = t < 0.25
    below_half = t < 0.5
    below_three_quarters = t < 0.75

    r = np.where(below_half, 0.0, np.where(below_three_quarters, (t - 0.5) * 4 * 255, 255.0))
    g = np.where(
        below_quarter,
        t * 4 * 255,
        np.where(below_three_quarters, 255.0, (1.0 - (t - 0.75) * 4) * 255),
    )
    b = np.where(below_quarter, 255.0, np.where(below_half, (1.0 - (t - 0.25) * 4) * 255, 0.0))

    rgb = np.stack([r, g, b], axis=1)
    return np.clip(rgb, 0.0, 255.0).astype(np.uint8).reshape(-1)


# --- spatial filters ---
def _gaussian_kernel(sigma: float) -> np.ndarray:
    kernel_size = int(6 * sigma + 1)
    if kernel_size % 2 == 0:
        kernel_size += 1
    half = kernel_size // 2
    offsets = np.arange(kernel_size, dtype=np.float64) - half
    kernel = np.exp(-(offsets ** 2) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def _convolve_rows(a: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """1D convolution along the last axis; taps falling outside the row are skipped."""
    n = a.shape[-1]
    half = kernel.size // 2
    out = np.zeros_like(a)
    for k, weight in enumerate(kernel):
        offset = k - half
        if abs(offset) >= n:
            continue
        if offset >= 0:
            out[..., : n - offset] += a[..., offset:] * weight
        else:
            out[..., -offset:] += a[..., : n + offset] * weight
    return out


def apply_gaussian_blur(image: ComplexImage, sigma: float) -> ComplexImage:
    """Separable Gaussian blur (horizontal pass, then vertical). sigma <= 0 returns a copy."""
    if sigma <= 0.0 or image.size == 0:
        return image.copy()

    kernel = _gaussian_kernel(float(sigma))
    logger.debug("Gaussian blur sigma=%s kernel_size=%d on %dx%d", sigma, kernel.size, image.width, image.height)

    temp = _convolve_rows(image.as_array(), kernel)
    blurred = _convolve_rows(temp.T, kernel).T
    return ComplexImage.from_array(blurred)


_SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
_SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.float64)


def apply_edge_detection(image: ComplexImage) -> ComplexImage:
    """
    Sobel gradient magnitude sqrt(|Gx|^2 + |Gy|^2) over interior pixels.
    Written to the real part; the one-pixel border stays zero.
    """
    result = ComplexImage(image.width, image.height)
    if image.width < 3 or image.height < 3:
        return result

    a = image.as_array()
    H, W = a.shape
    gx = np.zeros((H - 2, W - 2), dtype=np.complex128)
    gy = np.zeros((H - 2, W - 2), dtype=np.complex128)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            window = a[1 + dy : H - 1 + dy, 1 + dx : W - 1 + dx]
            gx += window * _SOBEL_X[dy + 1, dx + 1]
            gy += window * _SOBEL_Y[dy + 1, dx + 1]

    magnitude = np.sqrt(np.abs(gx) ** 2 + np.abs(gy) ** 2)
    result.as_array()[1 : H - 1, 1 : W - 1] = magnitude
    return result
