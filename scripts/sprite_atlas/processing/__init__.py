"""
Packing, atlas orchestration, groups, handles and layout validation.
"""

from .packer import Location, PackRequest, PackResult, Sheet, ShelfPacker, split
from .atlas import Atlas
from .group import Group
from .texture import RenderTarget, SliceId, Sprite, TextureId
from .validator import AtlasValidator

__all__ = [
    "Location",
    "PackRequest",
    "PackResult",
    "Sheet",
    "ShelfPacker",
    "split",
    "Atlas",
    "Group",
    "RenderTarget",
    "SliceId",
    "Sprite",
    "TextureId",
    "AtlasValidator",
]
