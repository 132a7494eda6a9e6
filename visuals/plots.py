"""
visuals/plots.py

Export utilities for spectra and progressive reconstructions.

APIs:
- spectrum_to_uint8(spectrum, shift=True, log=True) -> (H,W) uint8 display image
- plot_magnitude_spectrum(spectrum, out_path=None, shift=True, log=True, color_map=GRAYSCALE)
- plot_phase_spectrum(spectrum, out_path=None, shift=True)
- plot_reconstruction_sweep(visualizer, counts, out_path=None, title=None)
- compare_and_save(original, reconstructed, out_path=None, titles=None)
- plot_channel_spectra(rgb_spectrum, out_dir=None, base_name='channel', ext='png')

Notes:
- This module uses matplotlib and Pillow. It does not modify core state other than
  driving the visualizer's frequency count in plot_reconstruction_sweep.
- If out_path is None, functions return the Figure (or the display array) instead of saving.
"""

from typing import Optional, Sequence, Tuple, Union
import os
import numpy as np
import matplotlib.pyplot as plt
from PIL import Image

from fourier_core.complex_image import ComplexImage
from fourier_core.rgb_complex_image import RGBComplexImage
from fourier_core.visualizer import FourierVisualizer
from fourier_core.image_processor import ColorMap, apply_color_map, apply_log_scale, normalize_to_uint8
from io_utils.image_handler import unpack_rgb

ImageLike = Union[ComplexImage, RGBComplexImage, np.ndarray]


# Helper to ensure outdir exists
def _ensure_outdir(out_path: Optional[str]):
    if out_path is None:
        return None
    d = os.path.dirname(out_path)
    if d:
        os.makedirs(d, exist_ok=True)
    return out_path


def _save_raw_array_image(out_path: str, arr: np.ndarray) -> str:
    """Save a uint8 (H,W) or (H,W,3) array as a raw PNG. No Matplotlib involved."""
    _ensure_outdir(out_path)
    Image.fromarray(np.ascontiguousarray(arr, dtype=np.uint8)).save(out_path)
    return out_path


def _save_or_return(fig: plt.Figure, out_path: Optional[str], dpi: int = 100):
    if out_path is not None:
        _ensure_outdir(out_path)
        fig.savefig(out_path, dpi=dpi, bbox_inches="tight")
        plt.close(fig)
        return out_path
    return fig


def _to_display(image: ImageLike) -> np.ndarray:
    """ComplexImage -> (H,W) uint8, RGBComplexImage -> (H,W,3) uint8, arrays pass through."""
    if isinstance(image, ComplexImage):
        return image.get_grayscale_from_real().reshape(image.height, image.width)
    if isinstance(image, RGBComplexImage):
        return unpack_rgb(image.to_rgb(), image.width, image.height)
    return np.asarray(image)


# --- spectra ---
def spectrum_to_uint8(spectrum: ComplexImage, shift: bool = True, log: bool = True) -> np.ndarray:
    """
    Display image of |F|: optionally fft-shifted (DC centred) and log10(1+|F|) compressed,
    then min-max rescaled to 0..255.
    """
    disp = spectrum.copy()
    if shift:
        disp.fft_shift()
    mag = disp.get_magnitude_image()
    if log:
        apply_log_scale(mag)
    return normalize_to_uint8(mag).reshape(spectrum.height, spectrum.width)


def plot_magnitude_spectrum(
    spectrum: ComplexImage,
    out_path: Optional[str] = None,
    shift: bool = True,
    log: bool = True,
    color_map: ColorMap = ColorMap.GRAYSCALE,
) -> Union[str, np.ndarray]:
    """
    Save the magnitude spectrum as a raw PNG when out_path is given,
    otherwise return the display array ((H,W) gray or (H,W,3) for JET).
    """
    gray = spectrum_to_uint8(spectrum, shift=shift, log=log)
    if ColorMap(color_map) is ColorMap.JET:
        disp = apply_color_map(gray.reshape(-1), ColorMap.JET).reshape(spectrum.height, spectrum.width, 3)
    else:
        disp = gray
    if out_path is not None:
        return _save_raw_array_image(out_path, disp)
    return disp


def plot_phase_spectrum(
    spectrum: ComplexImage,
    out_path: Optional[str] = None,
    shift: bool = True,
) -> Union[str, np.ndarray]:
    """
    Phase mapped linearly from -pi..pi to 0..255.
    If out_path provided -> raw PNG, otherwise the uint8 array.
    """
    disp = spectrum.copy()
    if shift:
        disp.fft_shift()
    phase = disp.get_phase_image()
    phase_norm = (phase + np.pi) / (2.0 * np.pi)
    arr = np.clip(phase_norm * 255.0, 0.0, 255.0).astype(np.uint8).reshape(spectrum.height, spectrum.width)
    if out_path is not None:
        return _save_raw_array_image(out_path, arr)
    return arr


def plot_channel_spectra(
    rgb_spectrum: RGBComplexImage,
    out_dir: Optional[str] = None,
    base_name: str = "channel",
    ext: str = "png",
) -> Tuple[Optional[str], list]:
    """
    Save each channel's log magnitude spectrum to out_dir with deterministic names.
    Returns (last_saved_path_or_None, list_of_paths); without out_dir the list holds arrays.
    """
    arrays = [spectrum_to_uint8(ch) for ch in rgb_spectrum.channels]
    if out_dir is None:
        return None, arrays

    os.makedirs(out_dir, exist_ok=True)
    paths = []
    for name, arr in zip("RGB", arrays):
        p = os.path.join(out_dir, f"{base_name}_{name}.{ext}")
        paths.append(_save_raw_array_image(p, arr))
    return paths[-1] if paths else None, paths


# --- reconstructions ---
def plot_reconstruction_sweep(
    visualizer: FourierVisualizer,
    counts: Sequence[int],
    out_path: Optional[str] = None,
    title: Optional[str] = None,
):
    """
    Contact sheet of reconstructions, one panel per frequency count.
    Leaves the visualizer at the last count in `counts`.
    """
    counts = list(counts)
    if not counts:
        raise ValueError("plot_reconstruction_sweep needs at least one frequency count.")

    fig, axs = plt.subplots(1, len(counts), figsize=(3 * len(counts), 3.4), squeeze=False)
    for ax, k in zip(axs[0], counts):
        visualizer.set_frequency_count(k)
        if visualizer.animation_state.is_rgb:
            disp = _to_display(visualizer.get_reconstructed_rgb_image())
            ax.imshow(disp)
        else:
            disp = _to_display(visualizer.get_reconstructed_image())
            ax.imshow(disp, cmap="gray", interpolation="nearest")
        ax.set_title(f"k = {k}")
        ax.axis("off")
    if title:
        fig.suptitle(title)
    return _save_or_return(fig, out_path, dpi=150)


def compare_and_save(
    original: ImageLike,
    reconstructed: ImageLike,
    out_path: Optional[str] = None,
    titles: Optional[Sequence[str]] = None,
):
    """
    Original (left) | Reconstruction (right).
    """
    titles = list(titles) if titles else ["Original", "Reconstruction"]
    fig, axs = plt.subplots(1, 2, figsize=(12, 6))

    for ax, image, label in zip(axs, (original, reconstructed), titles):
        disp = _to_display(image)
        if disp.ndim == 2:
            ax.imshow(disp, cmap="gray", interpolation="nearest")
        else:
            ax.imshow(disp.astype(np.uint8))
        ax.set_title(label)
        ax.axis("off")

    if out_path:
        _ensure_outdir(out_path)
        fig.savefig(out_path, dpi=200, bbox_inches="tight", pad_inches=0.05)
        plt.close(fig)
        return out_path
    return fig
