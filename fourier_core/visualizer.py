"""
fourier_core/visualizer.py

Progressive top-K reconstruction of a retained spectrum.

States:
  empty        no spectrum set (a 0x0 grayscale source)
  loaded       set_image / set_rgb_image stored a spectrum, count = 0, zero reconstruction
  reconstructed
               set_frequency_count(n) kept the n strongest bins, inverse-transformed
               them and ranked them into active_frequencies
  animating    update_animation(dt) drives the count from elapsed time

Setting a new spectrum resets all derived state (count, time, active bins,
reconstructions). is_animating and animation_speed are caller settings and survive.
"""

import logging
import math
import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import numpy as np

from .complex_image import ComplexImage
from .rgb_complex_image import RGBComplexImage
from .fourier_transform import Direction, FourierTransform
from .constants import DEFAULT_ANIMATION_SPEED, FREQUENCIES_PER_SECOND

logger = logging.getLogger(__name__)


@dataclass
class AnimationState:
    active_frequencies: List[Tuple[int, int]] = field(default_factory=list)
    reconstructed_image: ComplexImage = field(default_factory=ComplexImage)
    reconstructed_rgb_image: RGBComplexImage = field(default_factory=RGBComplexImage)
    current_frequency_count: int = 0
    is_animating: bool = False
    animation_speed: float = DEFAULT_ANIMATION_SPEED
    time_accumulator: float = 0.0
    is_rgb: bool = False


class FourierVisualizer:
    """Maps a frequency count to a reconstructed spatial image and animates that count."""

    def __init__(self, transform: Optional[FourierTransform] = None):
        self.transform = transform if transform is not None else FourierTransform()
        self._frequency_domain = ComplexImage()
        self._rgb_frequency_domain = RGBComplexImage()
        self._state = AnimationState()

    @property
    def animation_state(self) -> AnimationState:
        return self._state

    @property
    def total_frequencies(self) -> int:
        """Number of bins in the active source (upper bound of the frequency count)."""
        if self._state.is_rgb:
            return self._rgb_frequency_domain.width * self._rgb_frequency_domain.height
        return self._frequency_domain.size

    # --- loading ---
    def _reset_derived_state(self, is_rgb: bool) -> None:
        state = self._state
        state.active_frequencies = []
        state.current_frequency_count = 0
        state.time_accumulator = 0.0
        state.is_rgb = is_rgb

    def set_image(self, frequency_domain: ComplexImage) -> None:
        self._frequency_domain = frequency_domain.copy()
        self._rgb_frequency_domain = RGBComplexImage()
        self._reset_derived_state(is_rgb=False)
        self._state.reconstructed_image = ComplexImage(frequency_domain.width, frequency_domain.height)
        self._state.reconstructed_rgb_image = RGBComplexImage()
        logger.debug("Loaded grayscale spectrum %dx%d", frequency_domain.width, frequency_domain.height)

    def set_rgb_image(self, frequency_domain: RGBComplexImage) -> None:
        self._rgb_frequency_domain = frequency_domain.copy()
        self._frequency_domain = ComplexImage()
        self._reset_derived_state(is_rgb=True)
        self._state.reconstructed_rgb_image = RGBComplexImage(frequency_domain.width, frequency_domain.height)
        self._state.reconstructed_image = ComplexImage()
        logger.debug("Loaded RGB spectrum %dx%d", frequency_domain.width, frequency_domain.height)

    # --- reconstruction ---
    def set_frequency_count(self, count: int) -> None:
        """Reconstruct from the `count` strongest bins. No-op if the count is unchanged."""
        count = max(0, int(count))
        if count == self._state.current_frequency_count:
            return
        self._state.current_frequency_count = count
        if self._state.is_rgb:
            self._reconstruct_rgb()
        else:
            self._reconstruct()

    def _reconstruct(self) -> None:
        count = self._state.current_frequency_count
        filtered = self.transform.keep_top_frequencies(self._frequency_domain, count)
        self._state.reconstructed_image = self.transform.transform2d(filtered, Direction.INVERSE)
        self._state.active_frequencies = self.transform.get_top_frequency_indices(self._frequency_domain, count)
        logger.debug("Reconstructed grayscale image from %d frequencies", count)

    def _reconstruct_rgb(self) -> None:
        count = self._state.current_frequency_count
        filtered = self.transform.keep_top_frequencies_rgb(self._rgb_frequency_domain, count)
        self._state.reconstructed_rgb_image = self.transform.transform_rgb2d(filtered, Direction.INVERSE)
        self._state.active_frequencies = self.transform.get_top_frequency_indices(
            self._combined_rgb_magnitude(), count
        )
        logger.debug("Reconstructed RGB image from %d frequencies per channel", count)

    def _combined_rgb_magnitude(self) -> ComplexImage:
        # sqrt(|R|^2 + |G|^2 + |B|^2) per bin, as a real-valued image for ranking
        mags = self._rgb_frequency_domain.get_magnitude_images()
        combined = np.sqrt(sum(m ** 2 for m in mags))
        return ComplexImage(self._rgb_frequency_domain.width, self._rgb_frequency_domain.height, combined)

    # --- animation ---
    def start_animation(self) -> None:
        self._state.is_animating = True

    def stop_animation(self) -> None:
        self._state.is_animating = False

    def set_animation_speed(self, speed: float) -> None:
        self._state.animation_speed = float(speed)

    def reset_animation(self) -> None:
        """Rewind time and count to zero without dropping the loaded spectrum."""
        self._state.time_accumulator = 0.0
        self.set_frequency_count(0)

    def update_animation(self, delta_time: float) -> None:
        state = self._state
        if not state.is_animating:
            return
        state.time_accumulator += delta_time * state.animation_speed
        target = int(math.floor(state.time_accumulator * FREQUENCIES_PER_SECOND))
        target = max(0, min(target, self.total_frequencies))
        if target != state.current_frequency_count:
            self.set_frequency_count(target)

    # --- read accessors ---
    def get_reconstructed_image(self) -> ComplexImage:
        return self._state.reconstructed_image.copy()

    def get_reconstructed_rgb_image(self) -> RGBComplexImage:
        return self._state.reconstructed_rgb_image.copy()

    def _display_spectrum(self) -> ComplexImage:
        if not self._state.is_rgb:
            return self._frequency_domain
        # channel mean: by linearity, the spectrum of the unweighted gray image
        channels = self._rgb_frequency_domain.channels
        mean = sum(ch.data for ch in channels) / len(channels)
        return ComplexImage(self._rgb_frequency_domain.width, self._rgb_frequency_domain.height, mean)

    def get_magnitude_spectrum(self) -> np.ndarray:
        return self._display_spectrum().get_magnitude_image()

    def get_phase_spectrum(self) -> np.ndarray:
        return self._display_spectrum().get_phase_image()

    def get_rgb_magnitude_spectra(self) -> List[np.ndarray]:
        return self._rgb_frequency_domain.get_magnitude_images()

    def get_frequency_path(self) -> List[Tuple[float, float]]:
        """Ranked active bins as float (x, y) pairs, for drawing a path through them."""
        return [(float(x), float(y)) for x, y in self._state.active_frequencies]

    def max_imaginary_residue(self, imag_tol: float = 1e-9, suppress_warning: bool = True) -> float:
        """
        Largest |imag| in the current reconstruction. Top-K truncation can drop one
        half of a conjugate pair, which leaves an imaginary component behind.
        """
        if self._state.is_rgb:
            parts = [ch.data.imag for ch in self._state.reconstructed_rgb_image.channels]
            values = np.concatenate(parts) if parts else np.zeros(0)
        else:
            values = self._state.reconstructed_image.data.imag
        imag_max = float(np.max(np.abs(values))) if values.size else 0.0
        if not suppress_warning and imag_max > imag_tol:
            warnings.warn(
                f"Reconstruction has non-negligible imaginary component (max abs = {imag_max}) "
                f"at {self._state.current_frequency_count} frequencies.",
                RuntimeWarning,
            )
        return imag_max
