# visuals/__init__.py
"""
Visual helpers for the Fourier reconstruction project.
Provides spectrum and reconstruction export used by scripts.
"""
from .plots import (
    spectrum_to_uint8,
    plot_magnitude_spectrum,
    plot_phase_spectrum,
    plot_channel_spectra,
    plot_reconstruction_sweep,
    compare_and_save,
)
__all__ = [
    "spectrum_to_uint8",
    "plot_magnitude_spectrum",
    "plot_phase_spectrum",
    "plot_channel_spectra",
    "plot_reconstruction_sweep",
    "compare_and_save",
]
