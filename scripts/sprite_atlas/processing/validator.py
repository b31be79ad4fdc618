"""
Consistency checks for packed atlases.
"""

from collections import defaultdict
from typing import Dict, List, Optional

from ..config import AtlasConfig
from ..utils.geometry import Rectangle


class AtlasValidator:
    """Validator for packed atlas layouts."""

    def __init__(self, config: Optional[AtlasConfig] = None):
        """Initialize atlas validator with configuration."""
        self.config = config or AtlasConfig()

    def validate_sheet_dimensions(self, atlas) -> List[str]:
        """
        Validate that no sheet exceeds the maximum size.

        Args:
            atlas: Packed atlas

        Returns:
            List of validation error messages
        """
        errors = []
        max_size = self.config.max_texture_size

        for index in range(atlas.sheet_count):
            width, height = atlas.sheet_size(index)
            if width <= 0 or height <= 0:
                errors.append(f"Sheet {index} has invalid dimensions: {width}x{height}")
            if width > max_size or height > max_size:
                errors.append(f"Sheet {index} size {width}x{height} exceeds maximum {max_size}")

        return errors

    def validate_containment(self, atlas) -> List[str]:
        """
        Validate that every frame lies within its sheet.

        Returns:
            List of validation error messages
        """
        errors = []

        for texture_id, frame in atlas.frame_map().items():
            sheet_w, sheet_h = atlas.sheet_size(frame["sheet"])
            rect = Rectangle(frame["x"], frame["y"], frame["w"], frame["h"])

            if rect.x < 0 or rect.y < 0:
                errors.append(f"Frame {texture_id} has negative coordinates: ({rect.x}, {rect.y})")
            if rect.right > sheet_w:
                errors.append(f"Frame {texture_id} extends beyond sheet width: {rect.right} > {sheet_w}")
            if rect.bottom > sheet_h:
                errors.append(f"Frame {texture_id} extends beyond sheet height: {rect.bottom} > {sheet_h}")

        return errors

    def validate_no_overlap(self, atlas) -> List[str]:
        """
        Validate that no two frames in the same sheet intersect.

        Returns:
            List of validation error messages
        """
        errors = []
        by_sheet: Dict[int, List] = defaultdict(list)

        for texture_id, frame in atlas.frame_map().items():
            rect = Rectangle(frame["x"], frame["y"], frame["w"], frame["h"])
            by_sheet[frame["sheet"]].append((texture_id, rect))

        for sheet_index, frames in by_sheet.items():
            frames.sort(key=lambda item: (item[1].x, item[1].y))
            for i, (id_a, rect_a) in enumerate(frames):
                for id_b, rect_b in frames[i + 1:]:
                    if rect_b.x >= rect_a.right:
                        break
                    if rect_a.intersects(rect_b):
                        errors.append(f"Frames {id_a} and {id_b} overlap in sheet {sheet_index}")

        return errors

    def validate(self, atlas) -> List[str]:
        """
        Perform all layout checks.

        Raises:
            DirtyAtlasError: If the atlas has not been packed
        """
        all_errors = []
        all_errors.extend(self.validate_sheet_dimensions(atlas))
        all_errors.extend(self.validate_containment(atlas))
        all_errors.extend(self.validate_no_overlap(atlas))
        return all_errors
