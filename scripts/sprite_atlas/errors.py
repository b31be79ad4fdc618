"""
Exception hierarchy for atlas registration, packing and handle resolution.
"""

from typing import Optional, Union
from pathlib import Path


class AtlasError(Exception):
    """Base exception for atlas errors."""


class OversizedEntryError(AtlasError):
    """Exception raised when an image exceeds the maximum sheet edge."""

    def __init__(self, width: Optional[int], height: Optional[int], max_size: int,
                 message: Optional[str] = None):
        super().__init__(
            message or
            f"Texture is larger ({width}, {height}) than the maximum allowed texture "
            f"({max_size}, {max_size})"
        )
        self.width = width
        self.height = height
        self.max_size = max_size


class InvalidDimensionsError(AtlasError):
    """Exception raised for unusable image or cell dimensions."""


class DirtyAtlasError(AtlasError):
    """Exception raised when resolving against an atlas that needs packing."""

    def __init__(self, message: str = "Atlas is dirty, call atlas.pack() first"):
        super().__init__(message)


class UnknownIdError(AtlasError):
    """Exception raised when an id has no packed location."""

    def __init__(self, texture_id: int, message: Optional[str] = None):
        super().__init__(message or f"id {texture_id} does not exist in atlas")
        self.texture_id = texture_id


class DetachedHandleError(UnknownIdError):
    """Exception raised when a handle or group outlived its atlas."""

    def __init__(self, texture_id: Optional[int] = None):
        super().__init__(texture_id, "atlas referenced by this handle no longer exists")


class FrameOutOfRangeError(AtlasError, IndexError):
    """Exception raised when a slice frame index is out of bounds."""

    def __init__(self, frame: int, count: int):
        super().__init__(f"slice frame {frame} out of bounds (slice has {count} frames)")
        self.frame = frame
        self.count = count


class AtlasIOError(AtlasError):
    """Exception raised when a file or embedded resource cannot be read or written."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        super().__init__(message)
        self.path = path
