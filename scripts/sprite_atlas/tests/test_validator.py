"""
Tests for the atlas layout validator.
"""

import unittest

from PIL import Image

from ..config import AtlasConfig
from ..errors import DirtyAtlasError
from ..processing.atlas import Atlas
from ..processing.packer import Location
from ..processing.validator import AtlasValidator
from ..utils.geometry import Rectangle


class TestAtlasValidator(unittest.TestCase):
    """Test AtlasValidator checks."""

    def setUp(self):
        self.config = AtlasConfig(max_texture_size=64)
        self.atlas = Atlas(self.config)
        self.validator = AtlasValidator(self.config)
        for size in [(30, 30), (20, 40), (64, 10), (5, 5), (33, 17)]:
            self.atlas.add_image(Image.new('RGBA', size, (255, 255, 255, 255)))

    def test_packed_atlas_is_valid(self):
        self.atlas.pack()

        self.assertEqual(self.validator.validate(self.atlas), [])

    def test_requires_clean_atlas(self):
        with self.assertRaises(DirtyAtlasError):
            self.validator.validate(self.atlas)

    def test_detects_overlap(self):
        self.atlas.pack()
        first = self.atlas.location(0)
        self.atlas._locations[1] = Location(first.sheet_index, first.rect.offset(1, 1))

        errors = self.validator.validate_no_overlap(self.atlas)

        self.assertTrue(any("overlap" in error for error in errors))

    def test_detects_frame_outside_sheet(self):
        self.atlas.pack()
        width, height = self.atlas.sheet_size(0)
        self.atlas._locations[3] = Location(0, Rectangle(width - 2, height - 2, 5, 5))

        errors = self.validator.validate_containment(self.atlas)

        self.assertEqual(len(errors), 2)
        self.assertIn("beyond sheet width", errors[0])
        self.assertIn("beyond sheet height", errors[1])

    def test_detects_oversized_sheet(self):
        self.atlas.pack()
        strict = AtlasValidator(AtlasConfig(max_texture_size=16))

        errors = strict.validate_sheet_dimensions(self.atlas)

        self.assertTrue(errors)
        self.assertTrue(all("exceeds maximum 16" in error for error in errors))


if __name__ == '__main__':
    unittest.main()
