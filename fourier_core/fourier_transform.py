"""
fourier_core/fourier_transform.py

2D discrete Fourier transform engine plus frequency-domain selection.

Conventions:
- Forward transform is unnormalized, inverse scales by 1/n per 1D pass, so
  inverse(forward(x)) == x. Twiddle sign is -2*pi/len forward, +2*pi/len inverse.
- 2D = every row in place, then every column in place, for both directions.
- 1D dispatch: length <= 1 is a no-op, powers of two use iterative radix-2
  Cooley-Tukey, any other length falls back to an O(n^2) direct DFT.
- transform2d never pads or crops; width and height are preserved.

Frequency layouts:
- apply_frequency_mask expects the natural (unshifted) layout, DC at (0, 0).
- apply_frequency_mask_circular expects a centre-origin layout, i.e. the caller
  has already applied ComplexImage.fft_shift().
"""

import enum
import functools
import logging
import math
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Tuple
import numpy as np

from .complex_image import ComplexImage
from .rgb_complex_image import RGBComplexImage
from .image_processor import is_power_of_two
from .constants import DFT_WARN_LENGTH, RGB_CHANNEL_COUNT

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    FORWARD = -1
    INVERSE = 1


# --- 1D transforms (operate in place along the last axis) ---
@functools.lru_cache(maxsize=32)
def _bit_reverse_indices(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n, dtype=np.intp)
    rev = np.zeros(n, dtype=np.intp)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    rev.setflags(write=False)
    return rev


def cooley_tukey_fft(data: np.ndarray, direction: Direction = Direction.FORWARD) -> None:
    """
    Iterative radix-2 FFT along the last axis of `data` (length must be a power of two).
    Bit-reversal permutation, then butterfly stages with block length 2, 4, ..., n.
    """
    n = data.shape[-1]
    if n <= 1:
        return

    work = np.ascontiguousarray(data[..., _bit_reverse_indices(n)], dtype=np.complex128)
    batch = work.shape[:-1]

    length = 2
    while length <= n:
        half = length >> 1
        angle = direction.value * 2.0 * math.pi / length
        w = np.exp(1j * angle * np.arange(half))
        blocks = work.reshape(batch + (n // length, length))
        u = blocks[..., :half].copy()
        v = blocks[..., half:] * w
        blocks[..., :half] = u + v
        blocks[..., half:] = u - v
        length <<= 1

    if direction is Direction.INVERSE:
        work *= 1.0 / n
    data[...] = work


def dft(data: np.ndarray, direction: Direction = Direction.FORWARD) -> None:
    """Direct O(n^2) DFT along the last axis, same sign/scale convention as cooley_tukey_fft."""
    n = data.shape[-1]
    if n <= 1:
        return
    if n > DFT_WARN_LENGTH:
        warnings.warn(
            f"Direct DFT on non-power-of-two length {n} is O(n^2); "
            "consider image_processor.pad_to_power_of_two for large inputs.",
            RuntimeWarning,
        )

    k = np.arange(n)
    # reduce k*j mod n before scaling so angles stay small
    phase = (np.outer(k, k) % n) * (direction.value * 2.0 * math.pi / n)
    matrix = np.exp(1j * phase)
    result = data @ matrix
    if direction is Direction.INVERSE:
        result *= 1.0 / n
    data[...] = result


def fft1d(data: np.ndarray, direction: Direction = Direction.FORWARD) -> None:
    n = data.shape[-1]
    if n <= 1:
        return
    if is_power_of_two(n):
        cooley_tukey_fft(data, direction)
    else:
        dft(data, direction)


def fft2d(image: ComplexImage, direction: Direction = Direction.FORWARD) -> None:
    """In-place 2D transform: all rows, then all columns."""
    if image.size == 0:
        return
    a = image.as_array()
    fft1d(a, direction)
    fft1d(a.T, direction)


# --- transform object ---
class FourierTransform:
    """
    Stateless transform / selection operations on ComplexImage and RGBComplexImage.

    parallel_channels=True dispatches the three RGB channels to a thread pool;
    channels share no mutable state so the only synchronisation is the final join.
    """

    def __init__(self, parallel_channels: bool = False, max_workers: int = RGB_CHANNEL_COUNT):
        self.parallel_channels = parallel_channels
        self.max_workers = max_workers

    def transform2d(self, image: ComplexImage, direction: Direction = Direction.FORWARD) -> ComplexImage:
        if image.size == 0:
            return ComplexImage(0, 0)
        result = image.copy()
        path = "fft" if is_power_of_two(image.width) and is_power_of_two(image.height) else "dft"
        logger.debug("transform2d %s %dx%d via %s", direction.name, image.width, image.height, path)
        fft2d(result, direction)
        return result

    # --- masking ---
    def apply_frequency_mask(
        self, frequency_domain: ComplexImage, frequency_cutoff: float, low_pass: bool = True
    ) -> ComplexImage:
        """
        Radial mask on the natural (unshifted) layout. Signed frequency per axis is
        x for x < width//2, else x - width. Low-pass zeroes radius > cutoff,
        high-pass zeroes radius < cutoff.
        """
        result = frequency_domain.copy()
        if result.size == 0:
            return result
        W, H = result.width, result.height
        x = np.arange(W)
        y = np.arange(H)
        fx = np.where(x < W // 2, x, x - W)
        fy = np.where(y < H // 2, y, y - H)
        radius = np.hypot(fx[None, :], fy[:, None])

        if low_pass:
            reject = radius > frequency_cutoff
        else:
            reject = radius < frequency_cutoff
        result.as_array()[reject] = 0
        return result

    def apply_frequency_mask_circular(self, frequency_domain: ComplexImage, radius_ratio: float) -> ComplexImage:
        """
        Keep bins within min(W/2, H/2) * radius_ratio of (W/2, H/2).
        Only meaningful on a centre-origin (fft-shifted) spectrum.
        """
        result = frequency_domain.copy()
        if result.size == 0:
            return result
        cx = result.width / 2.0
        cy = result.height / 2.0
        max_radius = min(cx, cy) * radius_ratio
        dx = np.arange(result.width) - cx
        dy = np.arange(result.height) - cy
        dist = np.hypot(dx[None, :], dy[:, None])
        result.as_array()[dist > max_radius] = 0
        return result

    # --- top-K selection ---
    @staticmethod
    def _top_flat_indices(magnitudes: np.ndarray, num_frequencies: int) -> np.ndarray:
        total = magnitudes.size
        k = max(0, min(int(num_frequencies), total))
        if k == 0:
            return np.zeros(0, dtype=np.intp)

        if k < total:
            candidates = np.argpartition(-magnitudes, k - 1)[:k]
        else:
            candidates = np.arange(total)
        # lexsort: last key is primary
        order = np.lexsort((candidates, -magnitudes[candidates]))
        logger.debug("top %d of %d bins selected", k, total)
        return candidates[order]

    def get_top_frequency_indices(self, frequency_domain: ComplexImage, num_frequencies: int) -> List[Tuple[int, int]]:
        """
        (x, y) of the min(k, W*H) largest-magnitude bins, in descending magnitude.

        Among the selected bins equal magnitudes are ordered by row-major index;
        which of several tied bins survives at the k boundary is unspecified.
        """
        selected = self._top_flat_indices(frequency_domain.get_magnitude_image(), num_frequencies)
        width = frequency_domain.width
        return [(int(i % width), int(i // width)) for i in selected]

    def keep_top_frequencies(self, frequency_domain: ComplexImage, num_frequencies: int) -> ComplexImage:
        result = ComplexImage(frequency_domain.width, frequency_domain.height)
        selected = self._top_flat_indices(frequency_domain.get_magnitude_image(), num_frequencies)
        result.data[selected] = frequency_domain.data[selected]
        return result

    # --- RGB orchestration ---
    def _map_channels(self, fn: Callable[[ComplexImage], ComplexImage], image: RGBComplexImage) -> RGBComplexImage:
        if self.parallel_channels:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outputs = list(pool.map(fn, image.channels))
        else:
            outputs = [fn(ch) for ch in image.channels]

        result = RGBComplexImage(outputs[0].width, outputs[0].height)
        result.channels = outputs
        return result

    def transform_rgb2d(self, image: RGBComplexImage, direction: Direction = Direction.FORWARD) -> RGBComplexImage:
        return self._map_channels(lambda ch: self.transform2d(ch, direction), image)

    def keep_top_frequencies_rgb(self, frequency_domain: RGBComplexImage, num_frequencies: int) -> RGBComplexImage:
        return self._map_channels(lambda ch: self.keep_top_frequencies(ch, num_frequencies), frequency_domain)
