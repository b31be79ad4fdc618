"""
Tests for atlas configuration loading and validation.
"""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from ..config import AtlasConfig, MAX_TEXTURE_SIZE


class TestAtlasConfig(unittest.TestCase):
    """Test AtlasConfig loading."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_defaults(self):
        config = AtlasConfig()

        self.assertEqual(config.max_texture_size, MAX_TEXTURE_SIZE)
        self.assertEqual(config.max_texture_size, 8192)
        self.assertEqual(config.compression_level, 6)
        self.assertEqual(config.dump_dir, "atlas_dump")
        self.assertEqual(config.log_level, "INFO")
        self.assertEqual(config.validate(), [])

    def test_from_json(self):
        path = self.temp_dir / "atlas.json"
        with open(path, 'w') as f:
            json.dump({
                "atlas": {"max_texture_size": 1024},
                "output": {"compression_level": 9, "dump_dir": "out"},
                "logging": {"level": "debug"},
            }, f)

        config = AtlasConfig.from_file(path)

        self.assertEqual(config.max_texture_size, 1024)
        self.assertEqual(config.compression_level, 9)
        self.assertEqual(config.dump_dir, "out")
        self.assertEqual(config.log_level, "DEBUG")

    def test_from_toml(self):
        path = self.temp_dir / "atlas.toml"
        path.write_text(
            "[atlas]\n"
            "max_texture_size = 2048\n"
            "\n"
            "[output]\n"
            "dump_dir = \"sheets\"\n"
        )

        config = AtlasConfig.from_file(path)

        self.assertEqual(config.max_texture_size, 2048)
        self.assertEqual(config.dump_dir, "sheets")
        self.assertEqual(config.compression_level, 6)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            AtlasConfig.from_file(self.temp_dir / "missing.toml")

    def test_unsupported_format(self):
        path = self.temp_dir / "atlas.yaml"
        path.write_text("atlas: {}\n")

        with self.assertRaises(ValueError):
            AtlasConfig.from_file(path)

    @patch.dict(os.environ, {
        "SPRITE_ATLAS_MAX_TEXTURE_SIZE": "512",
        "SPRITE_ATLAS_COMPRESSION_LEVEL": "1",
        "SPRITE_ATLAS_DUMP_DIR": "env_dump",
        "SPRITE_ATLAS_LOG_LEVEL": "warning",
    })
    def test_env_overrides(self):
        config = AtlasConfig.from_env()

        self.assertEqual(config.max_texture_size, 512)
        self.assertEqual(config.compression_level, 1)
        self.assertEqual(config.dump_dir, "env_dump")
        self.assertEqual(config.log_level, "WARNING")

    @patch.dict(os.environ, {"SPRITE_ATLAS_DUMP_DIR": "env_dump"})
    def test_env_overrides_file_values(self):
        path = self.temp_dir / "atlas.json"
        path.write_text(json.dumps({"output": {"dump_dir": "file_dump", "compression_level": 3}}))

        config = AtlasConfig._apply_env_overrides(AtlasConfig.from_file(path))

        self.assertEqual(config.dump_dir, "env_dump")
        self.assertEqual(config.compression_level, 3)

    def test_validate(self):
        config = AtlasConfig(max_texture_size=0, compression_level=12, dump_dir="", log_level="LOUD")

        errors = config.validate()

        self.assertEqual(len(errors), 4)
        self.assertIn("max_texture_size", errors[0])
        self.assertIn("compression_level", errors[1])

    def test_validate_rejects_size_above_limit(self):
        errors = AtlasConfig(max_texture_size=MAX_TEXTURE_SIZE + 1).validate()

        self.assertEqual(len(errors), 1)


if __name__ == '__main__':
    unittest.main()
