"""
Abstract image sources and the pending-entry record the atlas packs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple
from PIL import Image

from ..errors import InvalidDimensionsError, OversizedEntryError
from ..utils.geometry import Rectangle


class ImageSource(ABC):
    """Abstract base class for the places an entry's pixels come from."""

    @abstractmethod
    def load(self) -> Image.Image:
        """
        Materialize the source pixels.

        Returns:
            RGBA image

        Raises:
            AtlasIOError: If the pixels cannot be read
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Short human readable description used in logs and errors."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.describe()})"


@dataclass
class Entry:
    """A registered image waiting to be packed."""
    id: int
    width: int
    height: int
    source: ImageSource
    frame: Optional[Tuple[int, int]] = None

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def cell_count(self) -> int:
        """Number of ids this entry owns."""
        if self.frame is None:
            return 1
        return (self.width // self.frame[0]) * (self.height // self.frame[1])

    @property
    def ids(self) -> range:
        return range(self.id, self.id + self.cell_count)

    def cells(self) -> Iterator[Tuple[int, Rectangle]]:
        """
        Yield (id, rectangle) for every cell, relative to the entry origin.

        Cells are numbered row-major starting at the entry id. A plain entry
        yields a single cell covering its whole bounds.
        """
        if self.frame is None:
            yield self.id, Rectangle(0, 0, self.width, self.height)
            return

        frame_w, frame_h = self.frame
        cell_id = self.id
        for y in range(0, self.height, frame_h):
            for x in range(0, self.width, frame_w):
                yield cell_id, Rectangle(x, y, frame_w, frame_h)
                cell_id += 1


def check_bounds(width: int, height: int, max_size: int,
                 frame: Optional[Tuple[int, int]] = None) -> None:
    """
    Validate entry bounds before registration.

    Raises:
        OversizedEntryError: If either side exceeds max_size
        InvalidDimensionsError: For empty bounds, empty cells, or bounds that
            are not an exact multiple of the cell size
    """
    if width > max_size or height > max_size:
        raise OversizedEntryError(width, height, max_size)

    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(f"Texture size ({width},{height}) must be positive")

    if frame is None:
        return

    frame_w, frame_h = frame
    if frame_w <= 0 or frame_h <= 0:
        raise InvalidDimensionsError(f"Cell size ({frame_w},{frame_h}) must be positive")

    if width % frame_w != 0 or height % frame_h != 0:
        raise InvalidDimensionsError(
            f"Texture size ({width},{height}) must be multiple of cellSize ({frame_w},{frame_h})"
        )
