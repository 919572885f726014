"""Tile kinds and door sides.

Tiles are a closed enumeration; the single-letter values keep ASCII dumps
and JSON snapshots compact (one character per cell).
"""
from __future__ import annotations

from enum import Enum
from typing import Tuple


class Tile(str, Enum):
    WALL = "W"
    ROOM = "R"
    HALL = "H"
    DOOR = "D"

    @property
    def is_floor(self) -> bool:
        return self in FLOOR_TILES

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    Tile.WALL: "#",
    Tile.ROOM: ".",
    Tile.HALL: ",",
    Tile.DOOR: "+",
}


class Side(str, Enum):
    N = "N"
    S = "S"
    E = "E"
    W = "W"

    @property
    def offset(self) -> Tuple[int, int]:
        return _OFFSETS[self]


_OFFSETS = {Side.N: (0, -1), Side.S: (0, 1), Side.E: (1, 0), Side.W: (-1, 0)}

# Module level aliases used throughout the passes.
WALL = Tile.WALL
ROOM = Tile.ROOM
HALL = Tile.HALL
DOOR = Tile.DOOR
FLOOR_TILES = frozenset({ROOM, HALL, DOOR})

__all__ = ["Tile", "Side", "WALL", "ROOM", "HALL", "DOOR", "FLOOR_TILES"]
