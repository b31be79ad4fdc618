"""
Shelf/guillotine bin packer that lays rectangles out over one or more sheets.

The packer only computes positions. It keeps no state between calls; the
atlas turns a PackResult into composed pixel sheets.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from ..config import MAX_TEXTURE_SIZE
from ..errors import OversizedEntryError
from ..utils.geometry import Rectangle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackRequest:
    """A rectangle to place, identified by key."""
    key: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class Location:
    """Where a packed rectangle ended up."""
    sheet_index: int
    rect: Rectangle


def split(spaces: List[Rectangle], index: int, width: int,
          height: int) -> Tuple[Optional[Rectangle], List[Rectangle]]:
    """
    Try to carve a width x height rectangle out of ``spaces[index]``.

    Returns the placed rectangle (or None when the space is too small) and
    the updated list of free spaces. The input list is never modified.

    Split rules for a free space F:
      - exact fit: F is consumed
      - same width: the strip below the placement stays free
      - same height: the strip to the right stays free
      - otherwise: the placement takes F's top-left corner and two spaces are
        added, the right strip (F.w - w, h) and the lower strip (F.w, F.h - h)
    """
    space = spaces[index]
    sw, sh = space.width, space.height

    if width > sw or height > sh:
        return None, spaces

    rest = spaces[:index] + spaces[index + 1:]
    found = Rectangle(space.x, space.y, width, height)

    if width == sw and height == sh:
        pass
    elif width == sw:
        rest.append(Rectangle(space.x, space.y + height, sw, sh - height))
    elif height == sh:
        rest.append(Rectangle(space.x + width, space.y, sw - width, sh))
    else:
        rest.append(Rectangle(space.x + width, space.y, sw - width, height))
        rest.append(Rectangle(space.x, space.y + height, sw, sh - height))

    return found, rest


@dataclass
class Sheet:
    """Free-space bookkeeping for one output texture."""
    max_size: int = MAX_TEXTURE_SIZE
    size: Rectangle = Rectangle(0, 0, 0, 0)
    spaces: List[Rectangle] = field(default_factory=list)
    placements: List[Rectangle] = field(default_factory=list)

    def __post_init__(self):
        if not self.spaces and not self.placements:
            self.spaces = [Rectangle(0, 0, self.max_size, self.max_size)]

    def place(self, width: int, height: int) -> Optional[Rectangle]:
        """Place into the first free space that fits (spaces kept sorted by area)."""
        for index in range(len(self.spaces)):
            found, spaces = split(self.spaces, index, width, height)
            if found is None:
                continue
            spaces.sort(key=lambda r: r.area)
            self.spaces = spaces
            self.placements.append(found)
            self.grow(found)
            return found
        return None

    def grow(self, rect: Rectangle) -> None:
        """
        Extend the running bounds for a new placement.

        Placements on the left edge extend the height, placements on the top
        edge extend the width. These bounds are only a running estimate while
        packing; finalize() sets the sheet's final size from the placements.
        """
        width, height = self.size.width, self.size.height
        if rect.x == 0:
            height = max(height, rect.bottom)
        if rect.y == 0:
            width = max(width, rect.right)
        self.size = Rectangle(0, 0, width, height)

    def finalize(self) -> Rectangle:
        """Set the sheet size to the extent of all placements."""
        if self.placements:
            width = max(r.right for r in self.placements)
            height = max(r.bottom for r in self.placements)
            if (width, height) != self.size.size:
                logger.debug(f"Sheet bounds widened from {self.size.size} to {(width, height)}")
            self.size = Rectangle(0, 0, width, height)
        return self.size

    @property
    def used_area(self) -> int:
        return sum(r.area for r in self.placements)

    @property
    def efficiency(self) -> float:
        """Used area / sheet area."""
        total = self.size.area
        return self.used_area / total if total > 0 else 0.0


@dataclass
class PackResult:
    """Output of a packing run."""
    sheets: List[Sheet]
    placements: Dict[int, Location]

    @property
    def sheet_sizes(self) -> List[Tuple[int, int]]:
        return [sheet.size.size for sheet in self.sheets]


class ShelfPacker:
    """Packs rectangles largest first into as few sheets as possible."""

    def __init__(self, max_size: int = MAX_TEXTURE_SIZE):
        self.max_size = max_size

    @staticmethod
    def order(requests: Sequence[PackRequest]) -> List[PackRequest]:
        """Sort by descending area, ties by descending width; stable otherwise."""
        return sorted(requests, key=lambda r: (r.area, r.width), reverse=True)

    def validate(self, requests: Sequence[PackRequest]) -> None:
        for request in requests:
            if request.width > self.max_size or request.height > self.max_size:
                raise OversizedEntryError(request.width, request.height, self.max_size)

    def pack(self, requests: Sequence[PackRequest]) -> PackResult:
        """
        Lay out all requests.

        Args:
            requests: Rectangles to place; keys must be unique

        Returns:
            PackResult with one Sheet per output texture and a Location per key

        Raises:
            OversizedEntryError: If any request exceeds max_size (checked
                before anything is placed)
        """
        self.validate(requests)

        sheets: List[Sheet] = []
        placements: Dict[int, Location] = {}

        for request in self.order(requests):
            found = None
            sheet_index = -1

            for index, sheet in enumerate(sheets):
                found = sheet.place(request.width, request.height)
                if found is not None:
                    sheet_index = index
                    break

            if found is None:
                sheet_index = len(sheets)
                sheet = Sheet(self.max_size)
                sheets.append(sheet)
                found = sheet.place(request.width, request.height)
                logger.debug(f"Opened sheet {sheet_index} for {request.width}x{request.height} request")

            placements[request.key] = Location(sheet_index, found)

        for sheet in sheets:
            sheet.finalize()

        return PackResult(sheets=sheets, placements=placements)
