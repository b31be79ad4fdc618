"""
Utility modules for geometry and image handling.
"""

from .geometry import Rectangle, Matrix, IM
from .image import ImageUtils

__all__ = [
    "Rectangle",
    "Matrix",
    "IM",
    "ImageUtils",
]
