"""
Image helpers for the atlas: decoding, RGBA normalisation and pixel copies.
"""

from typing import Tuple, Union
from pathlib import Path
from PIL import Image
import numpy as np
import io


class ImageUtils:
    """Utility class for common image operations used by the atlas."""

    @staticmethod
    def load_image(data: Union[bytes, str, Path, Image.Image, np.ndarray]) -> Image.Image:
        """
        Load image from various sources.

        Args:
            data: Encoded image bytes, file path, PIL Image or (H, W, 4) uint8 array

        Returns:
            RGBA PIL Image with its pixels fully decoded

        Raises:
            OSError: If the file cannot be read or decoded
            ValueError: If data has an unsupported type or shape
        """
        if isinstance(data, Image.Image):
            return ImageUtils.ensure_rgba(data)
        elif isinstance(data, np.ndarray):
            return ImageUtils.from_array(data)
        elif isinstance(data, bytes):
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return ImageUtils.ensure_rgba(img)
        elif isinstance(data, (str, Path)):
            with Image.open(data) as img:
                img.load()
                return ImageUtils.ensure_rgba(img)
        else:
            raise ValueError(f"Unsupported image data type: {type(data)}")

    @staticmethod
    def probe_size(data: Union[bytes, str, Path]) -> Tuple[int, int]:
        """Read only the image header and return (width, height)."""
        if isinstance(data, bytes):
            with Image.open(io.BytesIO(data)) as img:
                return img.size
        with Image.open(data) as img:
            return img.size

    @staticmethod
    def save_image(image: Image.Image, path: Union[str, Path], format: str = 'PNG', **kwargs) -> None:
        """
        Save image to file.

        Args:
            image: Image to save
            path: Output file path
            format: Image format
            **kwargs: Additional save parameters
        """
        save_kwargs = {}

        if format.upper() == 'PNG':
            save_kwargs['compress_level'] = kwargs.pop('compress_level', 6)

        save_kwargs.update(kwargs)

        image.save(path, format=format, **save_kwargs)

    @staticmethod
    def ensure_rgba(image: Image.Image) -> Image.Image:
        """Convert image to RGBA mode if not already."""
        if image.mode != 'RGBA':
            return image.convert('RGBA')
        return image

    @staticmethod
    def from_rgba(width: int, height: int, data: bytes) -> Image.Image:
        """Build an RGBA image from a raw row-major RGBA8 buffer."""
        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(f"Expected {expected} bytes for {width}x{height} RGBA, got {len(data)}")
        return Image.frombytes('RGBA', (width, height), bytes(data))

    @staticmethod
    def from_array(array: np.ndarray) -> Image.Image:
        """Build an RGBA image from an (H, W, 4) uint8 array."""
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError(f"Expected an (H, W, 4) array, got shape {array.shape}")
        return Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8))

    @staticmethod
    def copy_region(image: Image.Image, box: Tuple[int, int, int, int]) -> Image.Image:
        """Return a detached RGBA copy of the given (left, upper, right, lower) box."""
        region = image.crop(box)
        region.load()
        return ImageUtils.ensure_rgba(region)

    @staticmethod
    def blank_sheet(size: Tuple[int, int]) -> Image.Image:
        """Create a fully transparent RGBA canvas."""
        return Image.new('RGBA', size, (0, 0, 0, 0))
