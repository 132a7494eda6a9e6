"""
fourier_core/complex_image.py

Row-major complex sample buffer used for both spatial images and spectra.

Layout: `data` is a flat complex128 array of length width*height, sample (x, y)
lives at index y*width + x. `as_array()` exposes the same memory as an
(height, width) view for vectorised work.

Known limitation: fft_shift / ifft_shift swap quadrants using half = dim // 2.
For even dimensions the two are exact inverses of each other; for odd
dimensions the middle row/column is not moved and the operation is not a
true centring.
"""

from typing import Optional, Sequence, Tuple
import numpy as np

from .constants import RANGE_EPSILON, MAGNITUDE_EPSILON


def as_flat_array(values, dtype, buffer_dtype=None) -> np.ndarray:
    """
    Flatten a sequence into a 1D array of `dtype`.
    Raw buffers (bytes, bytearray, memoryview) are read as `buffer_dtype` items
    (default `dtype`) instead of being treated as a single scalar.
    """
    if isinstance(values, (bytes, bytearray, memoryview)):
        return np.frombuffer(values, dtype=buffer_dtype or dtype).astype(dtype)
    return np.asarray(values, dtype=dtype).reshape(-1)


class ComplexImage:
    """Flat row-major buffer of complex samples plus width/height."""

    def __init__(self, width: int = 0, height: int = 0, data: Optional[Sequence[complex]] = None):
        width, height = int(width), int(height)
        if width < 0 or height < 0:
            raise ValueError("ComplexImage dimensions must be non-negative.")
        self.width = width
        self.height = height
        if data is None:
            self.data = np.zeros(width * height, dtype=np.complex128)
        else:
            arr = np.array(data, dtype=np.complex128).reshape(-1)
            if arr.size != width * height:
                raise ValueError(
                    f"ComplexImage expects {width * height} samples for {width}x{height}, got {arr.size}."
                )
            self.data = arr

    # --- construction helpers ---
    @classmethod
    def from_grayscale(cls, grayscale: Sequence[int], width: int, height: int) -> "ComplexImage":
        """Build from 8-bit grayscale bytes: value = byte / 255, imaginary part 0."""
        image = cls()
        image.set_from_grayscale(grayscale, width, height)
        return image

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "ComplexImage":
        """Build from an (H, W) array of real or complex values."""
        arr = np.asarray(arr)
        if arr.ndim != 2:
            raise ValueError("ComplexImage.from_array expects a 2D array.")
        height, width = arr.shape
        return cls(width, height, arr)

    def resize(self, width: int, height: int) -> None:
        """Reallocate to width x height, zero-filled. Old contents are discarded."""
        width, height = int(width), int(height)
        if width < 0 or height < 0:
            raise ValueError("ComplexImage dimensions must be non-negative.")
        self.width = width
        self.height = height
        self.data = np.zeros(width * height, dtype=np.complex128)

    def set_from_grayscale(self, grayscale: Sequence[int], width: int, height: int) -> None:
        self.resize(width, height)
        gray = as_flat_array(grayscale, np.float64, buffer_dtype=np.uint8)
        if gray.size != self.data.size:
            raise ValueError(
                f"set_from_grayscale expects {self.data.size} bytes for {width}x{height}, got {gray.size}."
            )
        self.data.real = gray / 255.0

    def copy(self) -> "ComplexImage":
        return ComplexImage(self.width, self.height, self.data.copy())

    # --- element access (unchecked) ---
    def at(self, x: int, y: int) -> complex:
        return complex(self.data[y * self.width + x])

    def set_at(self, x: int, y: int, value: complex) -> None:
        self.data[y * self.width + x] = value

    def __getitem__(self, xy: Tuple[int, int]) -> complex:
        x, y = xy
        return self.at(x, y)

    def __setitem__(self, xy: Tuple[int, int], value: complex) -> None:
        x, y = xy
        self.set_at(x, y, value)

    def try_at(self, x: int, y: int) -> Optional[complex]:
        """Checked read: None when (x, y) is outside the image."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.at(x, y)
        return None

    # --- shape helpers ---
    @property
    def size(self) -> int:
        return self.width * self.height

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width), numpy order."""
        return (self.height, self.width)

    def as_array(self) -> np.ndarray:
        """(H, W) view sharing memory with `data`."""
        return self.data.reshape(self.height, self.width)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ComplexImage):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.data, other.data)
        )

    def __repr__(self) -> str:
        return f"ComplexImage(width={self.width}, height={self.height})"

    # --- derived scalar images ---
    def get_magnitude_image(self) -> np.ndarray:
        return np.abs(self.data)

    def get_phase_image(self) -> np.ndarray:
        return np.angle(self.data)

    def get_grayscale_from_real(self) -> np.ndarray:
        """
        Min-max rescale of the real parts into 0..255 (uint8, truncated).
        A real-part range below RANGE_EPSILON is replaced by 1.0.
        """
        if self.data.size == 0:
            return np.zeros(0, dtype=np.uint8)
        real = self.data.real
        min_val = float(real.min())
        value_range = float(real.max()) - min_val
        if value_range < RANGE_EPSILON:
            value_range = 1.0
        scaled = np.clip((real - min_val) / value_range * 255.0, 0.0, 255.0)
        return scaled.astype(np.uint8)

    # --- in-place transforms ---
    def normalize(self) -> None:
        """Divide every sample by the peak magnitude (no-op if peak <= machine epsilon)."""
        if self.data.size == 0:
            return
        peak = float(np.max(np.abs(self.data)))
        if peak <= MAGNITUDE_EPSILON:
            return
        self.data *= 1.0 / peak

    def fft_shift(self) -> None:
        """Swap quadrants so the zero-frequency bin moves to (width//2, height//2)."""
        hw = self.width // 2
        hh = self.height // 2
        if hw == 0 or hh == 0:
            return
        a = self.as_array()
        # top-left <-> bottom-right
        tmp = a[:hh, :hw].copy()
        a[:hh, :hw] = a[hh:2 * hh, hw:2 * hw]
        a[hh:2 * hh, hw:2 * hw] = tmp
        # top-right <-> bottom-left
        tmp = a[:hh, hw:2 * hw].copy()
        a[:hh, hw:2 * hw] = a[hh:2 * hh, :hw]
        a[hh:2 * hh, :hw] = tmp

    def ifft_shift(self) -> None:
        # quadrant swap is its own inverse for even sizes
        self.fft_shift()
