"""
Texture atlas: collects images, packs them into sheets and resolves handles.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import logging

from PIL import Image
import numpy as np

from ..config import AtlasConfig
from ..errors import AtlasIOError, DirtyAtlasError, InvalidDimensionsError, UnknownIdError
from ..sources import Entry, ImageSource, InlineSource, check_bounds
from ..utils.image import ImageUtils
from .group import Group
from .packer import Location, PackRequest, ShelfPacker
from .texture import SliceId, TextureId

logger = logging.getLogger(__name__)


class Atlas:
    """
    Packs registered images into one or more RGBA sheets.

    Registration (``add_*`` / ``slice_*``) only records entries and marks the
    atlas dirty. ``pack()`` lays everything out again from scratch, including
    textures that were packed before, and replaces sheets and locations in one
    step. Handles resolve only while the atlas is clean.
    """

    def __init__(self, config: Optional[AtlasConfig] = None):
        self.config = config or AtlasConfig()
        self._pending: List[Entry] = []
        self._sheets: List[Image.Image] = []
        self._locations: Dict[int, Location] = {}
        self._clean = False
        self._next_id = 0
        self._generation = 0
        self._default_group = Group(self)

    @property
    def is_clean(self) -> bool:
        return self._clean

    @property
    def generation(self) -> int:
        """Number of successful packs; handles use it to refresh cached sprites."""
        return self._generation

    @property
    def default_group(self) -> Group:
        return self._default_group

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def sheet_count(self) -> int:
        self._require_clean()
        return len(self._sheets)

    def make_group(self) -> Group:
        """Create a new, empty group of textures."""
        return Group(self)

    def register(self, source: ImageSource, width: int, height: int,
                 frame: Optional[Tuple[int, int]] = None) -> Entry:
        """
        Record a pending entry and assign its id range.

        Raises:
            OversizedEntryError: If the bounds exceed the maximum sheet edge
            InvalidDimensionsError: If bounds or cell size are unusable
        """
        check_bounds(width, height, self.config.max_texture_size, frame)

        entry = Entry(self._next_id, width, height, source, frame)
        self._next_id += entry.cell_count
        self._pending.append(entry)
        self._clean = False

        logger.debug(f"Registered id {entry.id} ({width}x{height}, {source.describe()})")
        return entry

    # Registration through the default group

    def add_image(self, image: Union[Image.Image, np.ndarray]) -> TextureId:
        """Add decoded pixels to the atlas."""
        return self._default_group.add_image(image)

    def add_file(self, path: Union[str, Path]) -> TextureId:
        """Add an image file to the atlas."""
        return self._default_group.add_file(path)

    def add_embedded(self, resources: Any, path: str) -> TextureId:
        """Add an image stored in a resource tree."""
        return self._default_group.add_embedded(resources, path)

    def slice_image(self, image: Union[Image.Image, np.ndarray],
                    cell_size: Tuple[int, int]) -> SliceId:
        """Evenly divide the given image into cells of the given size."""
        return self._default_group.slice_image(image, cell_size)

    def slice_file(self, path: Union[str, Path], cell_size: Tuple[int, int]) -> SliceId:
        """Load an image file and evenly divide it into cells of the given size."""
        return self._default_group.slice_file(path, cell_size)

    def slice_embedded(self, resources: Any, path: str,
                       cell_size: Tuple[int, int]) -> SliceId:
        """Load an embedded image and evenly divide it into cells of the given size."""
        return self._default_group.slice_embedded(resources, path, cell_size)

    def get(self, texture_id: int) -> TextureId:
        """Return a handle for the given id (resolved lazily)."""
        return TextureId(texture_id, self)

    # Packing

    def pack(self) -> None:
        """
        Pack every surviving and pending texture into fresh sheets.

        Textures packed earlier are cut back out of the current sheets and
        packed again together with the pending entries. Nothing is changed
        unless the whole pack succeeds.

        Raises:
            OversizedEntryError: If an entry exceeds the maximum sheet edge
            AtlasIOError: If a file or embedded source cannot be read
            InvalidDimensionsError: If a source changed size since registration
        """
        if self._clean and not self._pending:
            return

        entries = self._recover_entries() + self._pending
        packer = ShelfPacker(self.config.max_texture_size)
        result = packer.pack([PackRequest(e.id, e.width, e.height) for e in entries])

        sheets = [ImageUtils.blank_sheet(sheet.size.size) for sheet in result.sheets]
        locations: Dict[int, Location] = {}

        for entry in entries:
            placed = result.placements[entry.id]
            image = entry.source.load()

            if image.size != entry.size:
                logger.warning(f"{entry.source.describe()} changed size since it was added")
                raise InvalidDimensionsError(
                    f"{entry.source.describe()} is {image.size[0]}x{image.size[1]}, "
                    f"registered as {entry.width}x{entry.height}"
                )

            # Plain paste copies alpha instead of blending
            sheets[placed.sheet_index].paste(image, (placed.rect.x, placed.rect.y))

            for cell_id, cell in entry.cells():
                locations[cell_id] = Location(
                    placed.sheet_index, cell.offset(placed.rect.x, placed.rect.y)
                )

        self._sheets = sheets
        self._locations = locations
        self._pending = []
        self._clean = True
        self._generation += 1

        logger.info(
            f"Packed {len(entries)} entries ({len(locations)} ids) into {len(sheets)} sheet(s): "
            + ", ".join(f"{w}x{h}" for w, h in result.sheet_sizes)
        )

    def _recover_entries(self) -> List[Entry]:
        """Turn every packed id back into an inline entry cut from its sheet."""
        recovered = []
        for texture_id in sorted(self._locations):
            location = self._locations[texture_id]
            sheet = self._sheets[location.sheet_index]
            pixels = ImageUtils.copy_region(sheet, location.rect.to_box())
            recovered.append(Entry(texture_id, location.rect.width, location.rect.height,
                                   InlineSource(pixels)))

        if recovered:
            logger.debug(f"Recovered {len(recovered)} packed textures for repacking")
        return recovered

    def clear(self, *groups: Group) -> None:
        """
        Remove the given groups' textures from the atlas and repack.

        With no groups every texture, packed or pending, is removed.
        """
        if not groups:
            self._locations = {}
            self._pending = []
            self._default_group.forget()
        else:
            if any(group.atlas is not self for group in groups):
                raise ValueError("group belongs to a different atlas")

            removed = set()
            for group in groups:
                removed.update(group.ids())
                group.forget()

            self._locations = {
                texture_id: location for texture_id, location in self._locations.items()
                if texture_id not in removed
            }
            self._pending = [entry for entry in self._pending if entry.id not in removed]
            logger.debug(f"Cleared {len(removed)} ids from atlas")

        self._clean = False
        self.pack()

    # Resolution

    def _require_clean(self) -> None:
        if not self._clean:
            raise DirtyAtlasError()

    def location(self, texture_id: int) -> Location:
        """Sheet index and rectangle of a packed id."""
        self._require_clean()
        try:
            return self._locations[texture_id]
        except KeyError:
            raise UnknownIdError(texture_id) from None

    def __contains__(self, texture_id: int) -> bool:
        return texture_id in self._locations

    def picture(self, index: int) -> Image.Image:
        """The live sheet image handed to render targets."""
        self._require_clean()
        return self._sheets[index]

    def sheet_size(self, index: int) -> Tuple[int, int]:
        self._require_clean()
        return self._sheets[index].size

    def textures(self) -> List[Image.Image]:
        """Copies of all packed sheets."""
        self._require_clean()
        return [sheet.copy() for sheet in self._sheets]

    def images(self) -> List[np.ndarray]:
        """Copies of all packed sheets as (H, W, 4) uint8 arrays."""
        self._require_clean()
        return [np.array(sheet) for sheet in self._sheets]

    def frame_map(self) -> Dict[int, Dict[str, int]]:
        """Id -> sheet index and rectangle, for export and inspection."""
        self._require_clean()
        return {
            texture_id: {
                "sheet": location.sheet_index,
                "x": location.rect.x,
                "y": location.rect.y,
                "w": location.rect.width,
                "h": location.rect.height,
            }
            for texture_id, location in sorted(self._locations.items())
        }

    def dump(self, directory: Union[str, Path, None] = None) -> List[Path]:
        """
        Write every sheet to ``<directory>/<index>.png``.

        This is a debugging aid: no location data is written, so the files
        cannot be loaded back as an atlas.
        """
        self._require_clean()
        directory = Path(directory if directory is not None else self.config.dump_dir)

        written = []
        try:
            directory.mkdir(parents=True, exist_ok=True)
            for index, sheet in enumerate(self._sheets):
                path = directory / f"{index}.png"
                ImageUtils.save_image(sheet, path, 'PNG',
                                      compress_level=self.config.compression_level)
                written.append(path)
        except OSError as e:
            raise AtlasIOError(f"failed to dump atlas to {directory}: {e}", directory) from e

        logger.info(f"Dumped {len(written)} sheet(s) to {directory}")
        return written

    def __repr__(self) -> str:
        state = "clean" if self._clean else "dirty"
        return (f"Atlas({state}, sheets={len(self._sheets)}, ids={len(self._locations)}, "
                f"pending={len(self._pending)})")
