"""Catacomb: chunked procedural dungeon generation."""

__version__ = "0.1.0"

from .chunk_store import Chunk, ChunkStore  # noqa: E402,F401
from .dungeon import CatacombError, ConfigError, DungeonConfig, DungeonGenerator, Tile, is_valid  # noqa: E402,F401
from .fov import Observer, no_fov, sector_fov  # noqa: E402,F401

__all__ = [
    "__version__",
    "Chunk",
    "ChunkStore",
    "CatacombError",
    "ConfigError",
    "DungeonConfig",
    "DungeonGenerator",
    "Tile",
    "is_valid",
    "Observer",
    "no_fov",
    "sector_fov",
]
