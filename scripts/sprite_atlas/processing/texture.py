"""
Handles returned by the atlas and the sprite they draw through.

Handles hold only an id and a weak reference to their atlas. Once the atlas
is gone every resolving call raises DetachedHandleError.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional
import weakref

from PIL import Image
import numpy as np

from ..errors import DetachedHandleError, FrameOutOfRangeError
from ..utils.geometry import IM, Matrix, Rectangle
from .packer import Location


class RenderTarget(ABC):
    """Something that can draw textured triangles, implemented by the renderer."""

    @abstractmethod
    def draw_triangles(self, picture: Image.Image, triangles: np.ndarray, matrix: Matrix) -> None:
        """
        Draw a batch of textured triangles.

        Args:
            picture: Sheet the triangles sample from
            triangles: (N, 4) float array of (x, y, u, v) rows, three rows per
                triangle; (u, v) are pixel coordinates in the picture with a
                bottom-left origin
            matrix: Transform to apply to the (x, y) positions
        """
        pass


class Sprite:
    """A frame of a picture, drawn as a quad centred on the origin."""

    def __init__(self, picture: Image.Image, frame: Rectangle):
        self.picture = picture
        self.frame = frame
        self.triangles = self._build_triangles(frame)

    @staticmethod
    def _build_triangles(frame: Rectangle) -> np.ndarray:
        corners = np.array([
            [frame.x, frame.y],
            [frame.right, frame.y],
            [frame.right, frame.bottom],
            [frame.x, frame.bottom],
        ], dtype=np.float64)
        positions = corners - np.array(frame.center)
        quad = np.hstack([positions, corners])
        return quad[[0, 1, 2, 0, 2, 3]]

    def draw(self, target: RenderTarget, matrix: Matrix = IM) -> None:
        target.draw_triangles(self.picture, self.triangles, matrix)


class TextureId:
    """Reference to one packed texture in an atlas."""

    def __init__(self, texture_id: int, atlas):
        self._id = texture_id
        self._atlas_ref = weakref.ref(atlas)
        self._sprite: Optional[Sprite] = None
        self._sprite_generation = -1

    @property
    def id(self) -> int:
        return self._id

    @property
    def atlas(self):
        atlas = self._atlas_ref()
        if atlas is None:
            raise DetachedHandleError(self._id)
        return atlas

    def location(self) -> Location:
        """Sheet index and rectangle (top-left origin) of this texture."""
        return self.atlas.location(self._id)

    def bounds(self) -> Rectangle:
        """Size of the texture as a rectangle at the origin."""
        rect = self.location().rect
        return Rectangle(0, 0, rect.width, rect.height)

    def frame(self) -> Rectangle:
        """
        Rectangle of the texture in its sheet using a bottom-left origin.

        Sheets are stored top row first; renderers address pictures with Y
        pointing up, so the packed rectangle is mirrored about the sheet's
        horizontal centre line.
        """
        atlas = self.atlas
        location = atlas.location(self._id)
        sheet_w, sheet_h = atlas.sheet_size(location.sheet_index)
        flip = Matrix.identity().scaled_xy((sheet_w / 2, sheet_h / 2), (1, -1))

        rect = location.rect
        corners = flip.project([[rect.x, rect.y], [rect.right, rect.bottom]])
        min_x = int(round(corners[:, 0].min()))
        min_y = int(round(corners[:, 1].min()))
        return Rectangle(min_x, min_y, rect.width, rect.height)

    def draw(self, target: RenderTarget, matrix: Matrix = IM) -> None:
        """Draw the texture to the target with the given matrix."""
        atlas = self.atlas
        location = atlas.location(self._id)

        if self._sprite is None or self._sprite_generation != atlas.generation:
            self._sprite = Sprite(atlas.picture(location.sheet_index), self.frame())
            self._sprite_generation = atlas.generation

        self._sprite.draw(target, matrix)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TextureId):
            return NotImplemented
        return self._id == other._id and self._atlas_ref() is other._atlas_ref()

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"TextureId({self._id})"


class SliceId:
    """
    Reference to a grid-sliced texture.

    Frames are numbered row-major and map to consecutive texture ids.
    """

    def __init__(self, start: TextureId, count: int):
        self.start = start
        self.count = count
        self._frames = {0: start}

    def frame(self, frame: int) -> TextureId:
        """Return the TextureId of the given frame."""
        if not 0 <= frame < self.count:
            raise FrameOutOfRangeError(frame, self.count)
        if frame not in self._frames:
            self._frames[frame] = TextureId(self.start.id + frame, self.start.atlas)
        return self._frames[frame]

    def bounds(self, frame: int) -> Rectangle:
        return self.frame(frame).bounds()

    def draw(self, target: RenderTarget, matrix: Matrix, frame: int) -> None:
        self.frame(frame).draw(target, matrix)

    @property
    def ids(self) -> range:
        return range(self.start.id, self.start.id + self.count)

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[TextureId]:
        for frame in range(self.count):
            yield self.frame(frame)

    def __repr__(self) -> str:
        return f"SliceId(start={self.start.id}, count={self.count})"
