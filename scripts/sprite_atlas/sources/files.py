"""
Sources that are read from disk or from a packaged resource tree.

Both kinds are re-read every time the atlas packs, so only the path is kept
between packs.
"""

from pathlib import Path
from typing import Any, Tuple, Union
from PIL import Image

from .base import ImageSource
from ..config import MAX_TEXTURE_SIZE
from ..errors import AtlasIOError, OversizedEntryError
from ..utils.image import ImageUtils


def _oversized(path: Union[str, Path], error: Exception) -> OversizedEntryError:
    # Pillow refuses to open it, so the exact bounds are unknown
    return OversizedEntryError(
        None, None, MAX_TEXTURE_SIZE,
        f"Texture {path} is larger than the maximum allowed texture "
        f"({MAX_TEXTURE_SIZE}, {MAX_TEXTURE_SIZE}): {error}"
    )


class FileSource(ImageSource):
    """Image file on the local filesystem."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def probe_size(self) -> Tuple[int, int]:
        """Read the image header and return (width, height)."""
        try:
            return ImageUtils.probe_size(self.path)
        except Image.DecompressionBombError as e:
            raise _oversized(self.path, e) from e
        except OSError as e:
            raise AtlasIOError(f"failed to load sprite file: {self.path}: {e}", self.path) from e

    def load(self) -> Image.Image:
        try:
            return ImageUtils.load_image(self.path)
        except Image.DecompressionBombError as e:
            raise _oversized(self.path, e) from e
        except OSError as e:
            raise AtlasIOError(f"failed to load sprite file: {self.path}: {e}", self.path) from e

    def describe(self) -> str:
        return str(self.path)


class EmbeddedSource(ImageSource):
    """
    Image stored inside a resource tree.

    ``resources`` is any traversable root exposing
    ``joinpath(path).read_bytes()``: ``importlib.resources.files(package)``,
    ``zipfile.Path`` or a plain ``pathlib.Path``.
    """

    def __init__(self, resources: Any, path: str):
        self.resources = resources
        self.path = path

    def _read(self) -> bytes:
        try:
            return self.resources.joinpath(self.path).read_bytes()
        except (OSError, KeyError) as e:
            raise AtlasIOError(f"failed to load embed sprite: {self.path}: {e}", self.path) from e

    def probe_size(self) -> Tuple[int, int]:
        data = self._read()
        try:
            return ImageUtils.probe_size(data)
        except Image.DecompressionBombError as e:
            raise _oversized(self.path, e) from e
        except OSError as e:
            raise AtlasIOError(f"failed to load embed sprite: {self.path}: {e}", self.path) from e

    def load(self) -> Image.Image:
        data = self._read()
        try:
            return ImageUtils.load_image(data)
        except Image.DecompressionBombError as e:
            raise _oversized(self.path, e) from e
        except OSError as e:
            raise AtlasIOError(f"failed to load embed sprite: {self.path}: {e}", self.path) from e

    def describe(self) -> str:
        return f"embedded:{self.path}"
