"""
Image sources and pending entries: inline pixels, files and embedded resources.
"""

from .base import ImageSource, Entry, check_bounds
from .inline import InlineSource
from .files import FileSource, EmbeddedSource

__all__ = [
    "ImageSource",
    "Entry",
    "check_bounds",
    "InlineSource",
    "FileSource",
    "EmbeddedSource",
]
