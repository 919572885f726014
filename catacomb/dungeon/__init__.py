"""Public dungeon package interface."""

from .cells import Grid, TileMemory, grid_from_rows, grid_to_rows, new_grid  # noqa: F401
from .config import CatacombError, ConfigError, DungeonConfig  # noqa: F401
from .doors import Door, place_doors  # noqa: F401
from .pipeline import DungeonGenerator, GenerationResult, generate_grid  # noqa: F401
from .pruning import run_all_pruning_passes  # noqa: F401
from .rooms import Room, carve_rooms  # noqa: F401
from .tiles import DOOR, FLOOR_TILES, HALL, ROOM, WALL, Side, Tile  # noqa: F401
from .tunnels import Portal, carve_corridors, edge_portals  # noqa: F401
from .validator import Violation, find_violations, is_valid  # noqa: F401

__all__ = [
    "Grid",
    "TileMemory",
    "grid_from_rows",
    "grid_to_rows",
    "new_grid",
    "CatacombError",
    "ConfigError",
    "DungeonConfig",
    "Door",
    "place_doors",
    "DungeonGenerator",
    "GenerationResult",
    "generate_grid",
    "run_all_pruning_passes",
    "Room",
    "carve_rooms",
    "Tile",
    "Side",
    "WALL",
    "ROOM",
    "HALL",
    "DOOR",
    "FLOOR_TILES",
    "Portal",
    "carve_corridors",
    "edge_portals",
    "Violation",
    "find_violations",
    "is_valid",
]
