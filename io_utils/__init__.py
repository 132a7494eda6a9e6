# io_utils/__init__.py
"""
I/O helpers package for the Fourier reconstruction project.
"""
from .image_handler import (
    read_image,
    save_image,
    detect_is_color,
    pack_rgb,
    unpack_rgb,
    rgb_to_luma,
    rgb_to_grayscale,
    load_grayscale_image,
    load_rgb_image,
    save_complex_image,
    save_rgb_image,
)
from .file_utils import make_result_filename, save_parameters_txt

__all__ = [
    "read_image",
    "save_image",
    "detect_is_color",
    "pack_rgb",
    "unpack_rgb",
    "rgb_to_luma",
    "rgb_to_grayscale",
    "load_grayscale_image",
    "load_rgb_image",
    "save_complex_image",
    "save_rgb_image",
    "make_result_filename",
    "save_parameters_txt",
]
