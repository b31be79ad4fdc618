"""
Configuration management for the sprite atlas.
Supports TOML and JSON configuration files with environment overrides.
"""

import os
import json
from dataclasses import dataclass

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11
from typing import Dict, List, Any, Union
from pathlib import Path


MAX_TEXTURE_SIZE = 8192

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AtlasConfig:
    """Main configuration class for the atlas."""

    # Packing settings
    max_texture_size: int = MAX_TEXTURE_SIZE

    # Output settings
    compression_level: int = 6
    dump_dir: str = "atlas_dump"

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "AtlasConfig":
        """Load configuration from TOML or JSON file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix.lower() == '.toml':
            return cls._from_toml(config_path)
        elif config_path.suffix.lower() == '.json':
            return cls._from_json(config_path)
        else:
            raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

    @classmethod
    def _from_toml(cls, config_path: Path) -> "AtlasConfig":
        with open(config_path, 'rb') as f:
            data = tomllib.load(f)
        return cls._from_dict(data)

    @classmethod
    def _from_json(cls, config_path: Path) -> "AtlasConfig":
        with open(config_path, 'r') as f:
            data = json.load(f)
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "AtlasConfig":
        """Create configuration from dictionary."""
        config_data = {}

        if 'atlas' in data:
            atlas = data['atlas']
            config_data['max_texture_size'] = int(atlas.get('max_texture_size', MAX_TEXTURE_SIZE))

        if 'output' in data:
            output = data['output']
            config_data['compression_level'] = int(output.get('compression_level', 6))
            config_data['dump_dir'] = output.get('dump_dir', 'atlas_dump')

        if 'logging' in data:
            config_data['log_level'] = str(data['logging'].get('level', 'INFO')).upper()

        return cls(**config_data)

    @classmethod
    def default(cls) -> "AtlasConfig":
        """Create default configuration with environment variable overrides."""
        return cls._apply_env_overrides(cls())

    @classmethod
    def from_env(cls) -> "AtlasConfig":
        """Create configuration from environment variables only."""
        return cls._apply_env_overrides(cls())

    @classmethod
    def _apply_env_overrides(cls, config: "AtlasConfig") -> "AtlasConfig":
        """Apply environment variable overrides to configuration."""
        if os.getenv('SPRITE_ATLAS_MAX_TEXTURE_SIZE'):
            config.max_texture_size = int(os.getenv('SPRITE_ATLAS_MAX_TEXTURE_SIZE', str(MAX_TEXTURE_SIZE)))

        if os.getenv('SPRITE_ATLAS_COMPRESSION_LEVEL'):
            config.compression_level = int(os.getenv('SPRITE_ATLAS_COMPRESSION_LEVEL', '6'))

        if os.getenv('SPRITE_ATLAS_DUMP_DIR'):
            config.dump_dir = os.getenv('SPRITE_ATLAS_DUMP_DIR', 'atlas_dump')

        if os.getenv('SPRITE_ATLAS_LOG_LEVEL'):
            config.log_level = os.getenv('SPRITE_ATLAS_LOG_LEVEL', 'INFO').upper()

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not 0 < self.max_texture_size <= MAX_TEXTURE_SIZE:
            errors.append(f"max_texture_size must be between 1 and {MAX_TEXTURE_SIZE}")

        if not 0 <= self.compression_level <= 9:
            errors.append("compression_level must be between 0 and 9")

        if not self.dump_dir:
            errors.append("dump_dir must not be empty")

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        return errors


ENV_VARS = [
    ("SPRITE_ATLAS_MAX_TEXTURE_SIZE", "Maximum sheet edge in pixels", "8192"),
    ("SPRITE_ATLAS_COMPRESSION_LEVEL", "PNG compression level (0-9)", "6"),
    ("SPRITE_ATLAS_DUMP_DIR", "Directory for dumped sheets", "atlas_dump"),
    ("SPRITE_ATLAS_LOG_LEVEL", "Logging level", "DEBUG"),
]
