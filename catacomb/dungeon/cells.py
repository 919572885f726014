"""Grid containers and neighborhood helpers.

Grids are column-major (``grid[x][y]``) and square. Cells outside the grid
read as WALL so border cells need no special casing in the passes.
"""
from __future__ import annotations

from collections import Counter
from typing import Iterator, List, Sequence, Tuple

from .tiles import Tile, WALL

Coord2D = Tuple[int, int]
Grid = List[List[Tile]]

ORTHOGONAL = ((1, 0), (-1, 0), (0, 1), (0, -1))


class TileMemory:
    """How strongly the observer remembers a tile once it leaves view."""

    __slots__ = ("memory_alpha", "visited")

    def __init__(self, memory_alpha: float = 0.0, visited: bool = False):
        self.memory_alpha = memory_alpha
        self.visited = visited

    def copy(self) -> "TileMemory":
        return TileMemory(self.memory_alpha, self.visited)


def new_grid(size: int, fill: Tile = WALL) -> Grid:
    return [[fill for _ in range(size)] for _ in range(size)]


def new_memory(size: int) -> List[List[TileMemory]]:
    return [[TileMemory() for _ in range(size)] for _ in range(size)]


def in_bounds(grid: Grid, x: int, y: int) -> bool:
    return 0 <= x < len(grid) and 0 <= y < len(grid[0])


def tile_at(grid: Grid, x: int, y: int) -> Tile:
    if 0 <= x < len(grid) and 0 <= y < len(grid[0]):
        return grid[x][y]
    return WALL


def neighbors(x: int, y: int) -> Iterator[Coord2D]:
    for dx, dy in ORTHOGONAL:
        yield x + dx, y + dy


def neighbor_counts(grid: Grid, x: int, y: int) -> Counter:
    """Count orthogonal neighbor kinds; off-grid neighbors count as WALL."""
    return Counter(tile_at(grid, nx, ny) for nx, ny in neighbors(x, y))


def has_neighbor(grid: Grid, x: int, y: int, kind: Tile) -> bool:
    return any(tile_at(grid, nx, ny) is kind for nx, ny in neighbors(x, y))


def cells_of(grid: Grid, kind: Tile) -> List[Coord2D]:
    size_x, size_y = len(grid), len(grid[0])
    return [(x, y) for x in range(size_x) for y in range(size_y) if grid[x][y] is kind]


def grid_from_rows(rows: Sequence[str]) -> Grid:
    """Build a grid from y-major rows of tile letters (``W R H D``)."""
    height = len(rows)
    width = len(rows[0]) if rows else 0
    return [[Tile(rows[y][x]) for y in range(height)] for x in range(width)]


def grid_to_rows(grid: Grid, glyphs: bool = False) -> List[str]:
    width, height = len(grid), len(grid[0])
    if glyphs:
        return ["".join(grid[x][y].glyph for x in range(width)) for y in range(height)]
    return ["".join(grid[x][y].value for x in range(width)) for y in range(height)]


__all__ = [
    "Coord2D",
    "Grid",
    "ORTHOGONAL",
    "TileMemory",
    "new_grid",
    "new_memory",
    "in_bounds",
    "tile_at",
    "neighbors",
    "neighbor_counts",
    "has_neighbor",
    "cells_of",
    "grid_from_rows",
    "grid_to_rows",
]
