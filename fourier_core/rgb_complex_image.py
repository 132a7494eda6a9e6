"""
fourier_core/rgb_complex_image.py

Three independent ComplexImage channels (R, G, B) with packed-pixel import/export.

Packed pixel layout (uint32): R<<24 | G<<16 | B<<8 | pad, pad fixed to RGB_PAD_BYTE on export.
"""

from typing import List, Sequence
import numpy as np

from .complex_image import ComplexImage, as_flat_array
from .constants import RGB_CHANNEL_COUNT, RGB_PAD_BYTE

CHANNEL_NAMES = ("R", "G", "B")
_CHANNEL_SHIFTS = (24, 16, 8)


class RGBComplexImage:
    """Three ComplexImage channels kept at identical width/height."""

    def __init__(self, width: int = 0, height: int = 0):
        self.width = int(width)
        self.height = int(height)
        self.channels: List[ComplexImage] = [
            ComplexImage(self.width, self.height) for _ in range(RGB_CHANNEL_COUNT)
        ]

    @classmethod
    def from_rgb(cls, packed: Sequence[int], width: int, height: int) -> "RGBComplexImage":
        image = cls()
        image.set_from_rgb(packed, width, height)
        return image

    @classmethod
    def from_channels(cls, channels: Sequence[ComplexImage]) -> "RGBComplexImage":
        """Assemble from three equally sized channels (copied)."""
        if len(channels) != RGB_CHANNEL_COUNT:
            raise ValueError("RGBComplexImage.from_channels expects exactly 3 channels.")
        width, height = channels[0].width, channels[0].height
        image = cls(width, height)
        for idx, ch in enumerate(channels):
            image.set_channel(idx, ch)
        return image

    def copy(self) -> "RGBComplexImage":
        return RGBComplexImage.from_channels(self.channels)

    def resize(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        for ch in self.channels:
            ch.resize(width, height)

    # --- channel access ---
    def get_channel(self, index: int) -> ComplexImage:
        if not 0 <= index < RGB_CHANNEL_COUNT:
            raise ValueError(f"Channel index must be 0..2, got {index}.")
        return self.channels[index]

    def set_channel(self, index: int, image: ComplexImage) -> None:
        if not 0 <= index < RGB_CHANNEL_COUNT:
            raise ValueError(f"Channel index must be 0..2, got {index}.")
        if image.width != self.width or image.height != self.height:
            raise ValueError(
                f"Channel size {image.width}x{image.height} does not match {self.width}x{self.height}."
            )
        self.channels[index] = image.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, RGBComplexImage):
            return NotImplemented
        return all(a == b for a, b in zip(self.channels, other.channels))

    def __repr__(self) -> str:
        return f"RGBComplexImage(width={self.width}, height={self.height})"

    # --- packed pixel conversion ---
    def set_from_rgb(self, packed: Sequence[int], width: int, height: int) -> None:
        """Unpack R/G/B bytes into normalized real values in [0, 1]; the pad byte is ignored."""
        pixels = as_flat_array(packed, np.uint32)
        if pixels.size != int(width) * int(height):
            raise ValueError(
                f"set_from_rgb expects {int(width) * int(height)} pixels for {width}x{height}, got {pixels.size}."
            )
        self.resize(width, height)
        for ch, shift in zip(self.channels, _CHANNEL_SHIFTS):
            byte = (pixels >> np.uint32(shift)) & np.uint32(0xFF)
            ch.data.real = byte.astype(np.float64) / 255.0

    def to_rgb(self) -> np.ndarray:
        """Pack clamped real parts back into uint32 pixels (nearest byte, pad = RGB_PAD_BYTE)."""
        packed = np.full(self.width * self.height, RGB_PAD_BYTE, dtype=np.uint32)
        for ch, shift in zip(self.channels, _CHANNEL_SHIFTS):
            value = np.clip(ch.data.real, 0.0, 1.0)
            byte = np.rint(value * 255.0).astype(np.uint32)
            packed |= byte << np.uint32(shift)
        return packed

    def get_magnitude_images(self) -> List[np.ndarray]:
        return [ch.get_magnitude_image() for ch in self.channels]
