# io_utils/image_handler.py
"""
Image read/write helpers using Pillow, and conversion to/from the core types.

Functions:
- read_image(path) -> (array, meta), (H x W) grayscale or (H x W x 3) RGB, uint8
- save_image(path, array) -> writes image
- detect_is_color(array) -> bool
- pack_rgb(array) / unpack_rgb(packed, width, height): R<<24 | G<<16 | B<<8 | 0xFF pixels
- rgb_to_luma(array) -> float64 luma (0.299 R + 0.587 G + 0.114 B), rgb_to_grayscale(array) -> uint8
- load_grayscale_image(path) -> ComplexImage
- load_rgb_image(path) -> RGBComplexImage (gray files replicate into all channels)
- save_complex_image(path, image) / save_rgb_image(path, image)
"""

from PIL import Image
import pillow_avif  # noqa: F401  registers the AVIF codec with Pillow
import numpy as np
from typing import Tuple

from fourier_core.complex_image import ComplexImage
from fourier_core.rgb_complex_image import RGBComplexImage
from fourier_core.constants import LUMA_WEIGHTS, RGB_PAD_BYTE


def read_image(path: str) -> Tuple[np.ndarray, dict]:
    """
    Read an image from `path` and return (array, meta).
    - Returns RGB arrays of shape (H,W,3) or grayscale (H,W), uint8.
    - Meta contains mode and size. If image has alpha, meta includes 'has_alpha' and meta['alpha'] as a separate array.
    """
    img = Image.open(path)
    mode = img.mode
    if mode in ("RGBA", "LA") or ("transparency" in img.info):
        img = img.convert("RGBA")
        arr = np.asarray(img)
        meta = {"mode": "RGBA", "size": img.size, "has_alpha": True, "alpha": arr[..., 3]}
        return arr[..., :3], meta
    if mode.startswith("RGB") or mode in ("P", "CMYK", "YCbCr") or path.lower().endswith(".avif"):
        img = img.convert("RGB")
        meta = {"mode": "RGB", "size": img.size, "has_alpha": False}
        return np.asarray(img), meta
    img = img.convert("L")
    meta = {"mode": "L", "size": img.size, "has_alpha": False}
    return np.asarray(img), meta


def save_image(path: str, array: np.ndarray):
    """
    Save an image array to `path`. Accepts HxW (grayscale) or HxWx3 (RGB).
    Casts floats to uint8 by clipping to 0..255.
    """
    if not (array.ndim == 2 or detect_is_color(array)):
        raise ValueError("save_image expects HxW or HxWx3 array.")

    if np.issubdtype(array.dtype, np.floating):
        arr = np.clip(array, 0.0, 255.0).astype(np.uint8)
    else:
        arr = array.astype(np.uint8)

    # uint8 HxW -> "L", HxWx3 -> "RGB"
    Image.fromarray(arr).save(path)
    return path


def detect_is_color(array: np.ndarray) -> bool:
    return array.ndim == 3 and array.shape[2] == 3


# --- packed pixel helpers ---
def pack_rgb(array: np.ndarray) -> np.ndarray:
    """(H,W,3) or (H,W) uint8 -> flat uint32 R<<24 | G<<16 | B<<8 | pad. Gray is replicated."""
    arr = np.asarray(array, dtype=np.uint8)
    if arr.ndim == 2:
        arr = np.repeat(arr[..., None], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] < 3:
        raise ValueError("pack_rgb expects an HxW or HxWx3 array.")
    rgb = arr[..., :3].astype(np.uint32).reshape(-1, 3)
    return (rgb[:, 0] << 24) | (rgb[:, 1] << 16) | (rgb[:, 2] << 8) | np.uint32(RGB_PAD_BYTE)


def unpack_rgb(packed: np.ndarray, width: int, height: int) -> np.ndarray:
    """Flat uint32 packed pixels -> (H,W,3) uint8; the pad byte is dropped."""
    pixels = np.asarray(packed, dtype=np.uint32).reshape(int(height), int(width))
    channels = [((pixels >> np.uint32(shift)) & np.uint32(0xFF)).astype(np.uint8) for shift in (24, 16, 8)]
    return np.stack(channels, axis=2)


def rgb_to_luma(array: np.ndarray) -> np.ndarray:
    """Unquantized luma in 0..255 as float64; 2D input is passed through."""
    arr = np.asarray(array)
    if arr.ndim == 2:
        return arr.astype(np.float64)
    if not detect_is_color(arr):
        raise ValueError("rgb_to_luma expects an HxW or HxWx3 array.")
    wr, wg, wb = LUMA_WEIGHTS
    return wr * arr[..., 0].astype(np.float64) + wg * arr[..., 1] + wb * arr[..., 2]


def rgb_to_grayscale(array: np.ndarray) -> np.ndarray:
    """Luma-weighted gray bytes (truncated)."""
    return np.clip(rgb_to_luma(array), 0.0, 255.0).astype(np.uint8)


# --- core type adapters ---
def load_grayscale_image(path: str) -> ComplexImage:
    """Grayscale file -> byte / 255; colour file -> luma / 255 without rounding to a byte first."""
    arr, _meta = read_image(path)
    luma = rgb_to_luma(arr)
    height, width = luma.shape
    return ComplexImage.from_grayscale(luma.reshape(-1), width, height)


def load_rgb_image(path: str) -> RGBComplexImage:
    arr, _meta = read_image(path)
    height, width = arr.shape[:2]
    return RGBComplexImage.from_rgb(pack_rgb(arr), width, height)


def save_complex_image(path: str, image: ComplexImage):
    """Write the min-max rescaled real part as an 8-bit grayscale image."""
    gray = image.get_grayscale_from_real().reshape(image.height, image.width)
    return save_image(path, gray)


def save_rgb_image(path: str, image: RGBComplexImage):
    """Write the clamped real parts of the three channels as an 8-bit RGB image."""
    return save_image(path, unpack_rgb(image.to_rgb(), image.width, image.height))
