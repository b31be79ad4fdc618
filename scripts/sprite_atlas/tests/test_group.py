"""
Tests for texture groups and partial clears.
"""

import gc
import unittest

from PIL import Image

from ..errors import DetachedHandleError, UnknownIdError
from ..processing.atlas import Atlas
from ..processing.group import Group
from ..utils.geometry import Rectangle
from .helpers import generate_grid, generate_image_gradient


class TestGroup(unittest.TestCase):
    """Test group registration and removal."""

    def setUp(self):
        self.atlas = Atlas()
        self.i1 = generate_image_gradient((10, 10), (255, 0, 0, 255), (0, 0, 255, 255))
        self.i2 = generate_image_gradient((10, 10), (0, 255, 0, 255), (255, 255, 255, 0))

    def test_make_group_is_bound_to_atlas(self):
        group = self.atlas.make_group()

        self.assertIsInstance(group, Group)
        self.assertIs(group.atlas, self.atlas)
        self.assertEqual(group.ids(), [])

    def test_group_shares_id_space(self):
        group = self.atlas.make_group()
        first = self.atlas.add_image(self.i1)
        second = group.add_image(self.i2)

        self.assertEqual((first.id, second.id), (0, 1))
        self.assertEqual(group.ids(), [1])
        self.assertEqual(self.atlas.default_group.ids(), [0])

    def test_clear_group_keeps_other_textures(self):
        group = self.atlas.make_group()
        kept = self.atlas.add_image(self.i1)
        removed = group.add_image(self.i2)
        self.atlas.pack()
        self.assertEqual(self.atlas.sheet_size(0), (20, 10))

        self.atlas.clear(group)

        self.assertTrue(self.atlas.is_clean)
        self.assertEqual(self.atlas.sheet_count, 1)
        self.assertEqual(self.atlas.sheet_size(0), (10, 10))
        self.assertEqual(self.atlas.textures()[0].tobytes(), self.i1.tobytes())
        self.assertEqual(kept.bounds(), Rectangle(0, 0, 10, 10))

        with self.assertRaises(UnknownIdError):
            removed.bounds()
        self.assertEqual(group.ids(), [])

    def test_group_clear_method(self):
        group = self.atlas.make_group()
        group.add_image(self.i2)
        self.atlas.add_image(self.i1)
        self.atlas.pack()

        group.clear()

        self.assertEqual(list(self.atlas.frame_map()), [1])

    def test_clear_removes_pending_entries(self):
        group = self.atlas.make_group()
        pending = group.add_image(self.i2)
        kept = self.atlas.add_image(self.i1)

        self.atlas.clear(group)

        self.assertEqual(self.atlas.pending_count, 0)
        self.assertNotIn(pending.id, self.atlas)
        self.assertIn(kept.id, self.atlas)

    def test_clear_everything(self):
        group = self.atlas.make_group()
        self.atlas.add_image(self.i1)
        group.add_image(self.i2)
        self.atlas.pack()
        self.atlas.add_image(self.i1)

        self.atlas.clear()

        self.assertTrue(self.atlas.is_clean)
        self.assertEqual(self.atlas.sheet_count, 0)
        self.assertEqual(self.atlas.pending_count, 0)
        self.assertEqual(self.atlas.default_group.ids(), [])

    def test_clear_several_groups(self):
        g1 = self.atlas.make_group()
        g2 = self.atlas.make_group()
        g1.add_image(self.i1)
        g2.add_image(self.i2)
        survivor = self.atlas.add_image(Image.new('RGBA', (3, 3), (1, 2, 3, 4)))
        self.atlas.pack()

        self.atlas.clear(g1, g2)

        self.assertEqual(list(self.atlas.frame_map()), [survivor.id])

    def test_ids_include_slice_frames(self):
        group = self.atlas.make_group()
        group.add_image(self.i1)
        group.slice_image(generate_grid((32, 16), (16, 16)), (16, 16))
        group.add_image(self.i2)

        self.assertEqual(sorted(group.ids()), [0, 1, 2, 3])

    def test_cleared_slice_frames_are_gone(self):
        group = self.atlas.make_group()
        sliced = group.slice_image(generate_grid((32, 32), (16, 16)), (16, 16))
        self.atlas.add_image(self.i1)
        self.atlas.pack()

        group.clear()

        for frame in sliced.ids:
            self.assertNotIn(frame, self.atlas)
        self.assertEqual(len(self.atlas.frame_map()), 1)

    def test_foreign_group_rejected(self):
        other = Atlas()
        foreign = other.make_group()
        foreign.add_image(self.i1)
        self.atlas.add_image(self.i2)
        self.atlas.pack()

        with self.assertRaises(ValueError):
            self.atlas.clear(foreign)

        self.assertTrue(self.atlas.is_clean)
        self.assertEqual(foreign.ids(), [0])

    def test_detached_group(self):
        atlas = Atlas()
        group = atlas.make_group()
        del atlas
        gc.collect()

        with self.assertRaises(DetachedHandleError):
            group.add_image(self.i1)
        with self.assertRaises(DetachedHandleError):
            group.clear()


if __name__ == '__main__':
    unittest.main()
