"""
Core package init for the Fourier reconstruction project.
Exposes the numeric core for import in tests and scripts.
"""
from .complex_image import ComplexImage
from .rgb_complex_image import RGBComplexImage
from .fourier_transform import Direction, FourierTransform
from .visualizer import AnimationState, FourierVisualizer

__all__ = [
    "ComplexImage",
    "RGBComplexImage",
    "Direction",
    "FourierTransform",
    "AnimationState",
    "FourierVisualizer",
    "constants",
    "image_processor",
]
