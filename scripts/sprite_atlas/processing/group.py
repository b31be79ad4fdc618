"""
Groups of textures that can be removed from an atlas together.
"""

from pathlib import Path
from typing import Any, List, Tuple, Union
import weakref

from PIL import Image
import numpy as np

from ..errors import DetachedHandleError, InvalidDimensionsError
from ..sources import EmbeddedSource, FileSource, ImageSource, InlineSource
from .texture import SliceId, TextureId


class Group:
    """
    A set of ids registered through the same group.

    The group only remembers handles; pixels live in the atlas. Clearing the
    group removes its ids from the atlas and repacks the rest.
    """

    def __init__(self, atlas):
        self._atlas_ref = weakref.ref(atlas)
        self.textures: List[TextureId] = []
        self.slices: List[SliceId] = []

    @property
    def atlas(self):
        atlas = self._atlas_ref()
        if atlas is None:
            raise DetachedHandleError()
        return atlas

    def ids(self) -> List[int]:
        """All ids owned by this group, slices expanded."""
        owned = [texture.id for texture in self.textures]
        for slice_id in self.slices:
            owned.extend(slice_id.ids)
        return owned

    def forget(self) -> None:
        """Drop the remembered handles without touching the atlas."""
        self.textures = []
        self.slices = []

    def clear(self) -> None:
        """Remove this group's textures from the atlas and repack."""
        self.atlas.clear(self)

    def _add(self, source: ImageSource, size: Tuple[int, int]) -> TextureId:
        atlas = self.atlas
        entry = atlas.register(source, size[0], size[1])
        texture = TextureId(entry.id, atlas)
        self.textures.append(texture)
        return texture

    def _slice(self, source: ImageSource, size: Tuple[int, int],
               cell_size: Tuple[int, int]) -> SliceId:
        atlas = self.atlas
        if any(int(side) != side for side in cell_size):
            raise InvalidDimensionsError(
                f"Cell size ({cell_size[0]},{cell_size[1]}) must be whole pixels"
            )
        frame = (int(cell_size[0]), int(cell_size[1]))
        entry = atlas.register(source, size[0], size[1], frame)
        slice_id = SliceId(TextureId(entry.id, atlas), entry.cell_count)
        self.slices.append(slice_id)
        return slice_id

    def add_image(self, image: Union[Image.Image, np.ndarray]) -> TextureId:
        """Add decoded pixels to the atlas."""
        source = InlineSource(image)
        return self._add(source, source.size)

    def add_file(self, path: Union[str, Path]) -> TextureId:
        """Add an image file to the atlas; the file is read again on every pack."""
        source = FileSource(path)
        return self._add(source, source.probe_size())

    def add_embedded(self, resources: Any, path: str) -> TextureId:
        """Add an image stored in a resource tree."""
        source = EmbeddedSource(resources, path)
        return self._add(source, source.probe_size())

    def slice_image(self, image: Union[Image.Image, np.ndarray],
                    cell_size: Tuple[int, int]) -> SliceId:
        """Evenly divide the given image into cells of the given size."""
        source = InlineSource(image)
        return self._slice(source, source.size, cell_size)

    def slice_file(self, path: Union[str, Path], cell_size: Tuple[int, int]) -> SliceId:
        """Load an image file and evenly divide it into cells of the given size."""
        source = FileSource(path)
        return self._slice(source, source.probe_size(), cell_size)

    def slice_embedded(self, resources: Any, path: str,
                       cell_size: Tuple[int, int]) -> SliceId:
        """Load an embedded image and evenly divide it into cells of the given size."""
        source = EmbeddedSource(resources, path)
        return self._slice(source, source.probe_size(), cell_size)

    def __repr__(self) -> str:
        return f"Group(textures={len(self.textures)}, slices={len(self.slices)})"
