"""
Sources whose pixels are already decoded in memory.
"""

from typing import Union
from PIL import Image
import numpy as np

from .base import ImageSource
from ..utils.image import ImageUtils


class InlineSource(ImageSource):
    """Pixels handed to the atlas directly, copied at registration."""

    def __init__(self, image: Union[Image.Image, np.ndarray]):
        self.image = ImageUtils.load_image(image).copy()

    @property
    def size(self):
        return self.image.size

    def load(self) -> Image.Image:
        return self.image

    def describe(self) -> str:
        width, height = self.image.size
        return f"inline {width}x{height}"
