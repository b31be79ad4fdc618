"""
Sprite Atlas

Packs independently sourced images (pixel buffers, files, embedded resources,
sprite-sheet grids) into as few texture sheets as possible and hands back
handles that resolve to each image's rectangle and draw it on a render target.
"""

__version__ = "0.1.0"

from .config import AtlasConfig, MAX_TEXTURE_SIZE
from .errors import (
    AtlasError,
    AtlasIOError,
    DetachedHandleError,
    DirtyAtlasError,
    FrameOutOfRangeError,
    InvalidDimensionsError,
    OversizedEntryError,
    UnknownIdError,
)
from .processing.atlas import Atlas
from .processing.group import Group
from .processing.packer import Location, ShelfPacker
from .processing.texture import RenderTarget, SliceId, Sprite, TextureId
from .processing.validator import AtlasValidator
from .utils.geometry import IM, Matrix, Rectangle

__all__ = [
    "AtlasConfig",
    "MAX_TEXTURE_SIZE",
    "AtlasError",
    "AtlasIOError",
    "DetachedHandleError",
    "DirtyAtlasError",
    "FrameOutOfRangeError",
    "InvalidDimensionsError",
    "OversizedEntryError",
    "UnknownIdError",
    "Atlas",
    "Group",
    "Location",
    "ShelfPacker",
    "RenderTarget",
    "SliceId",
    "Sprite",
    "TextureId",
    "AtlasValidator",
    "IM",
    "Matrix",
    "Rectangle",
]
