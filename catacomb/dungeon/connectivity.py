"""Flood fills over the tile grid: room regions and hall components."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from .cells import Coord2D, Grid, neighbors, tile_at
from .tiles import DOOR, ROOM, Tile, Side


@dataclass
class RoomRegion:
    """A maximal 4-connected run of ROOM tiles as found on the grid."""

    cells: Set[Coord2D] = field(default_factory=set)
    min_x: int = 0
    max_x: int = 0
    min_y: int = 0
    max_y: int = 0

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def center(self) -> Coord2D:
        return (self.min_x + self.width // 2, self.min_y + self.height // 2)

    @property
    def is_rectangle(self) -> bool:
        return len(self.cells) == self.width * self.height

    def ring(self) -> List[Tuple[int, int, Side]]:
        """Door-capable cells one tile outside each edge, corners excluded."""
        out = []
        for x in range(self.min_x, self.max_x + 1):
            out.append((x, self.min_y - 1, Side.N))
            out.append((x, self.max_y + 1, Side.S))
        for y in range(self.min_y, self.max_y + 1):
            out.append((self.min_x - 1, y, Side.W))
            out.append((self.max_x + 1, y, Side.E))
        return out

    def doors_by_side(self, grid: Grid) -> Dict[Side, List[Coord2D]]:
        found: Dict[Side, List[Coord2D]] = {side: [] for side in Side}
        for x, y, side in self.ring():
            if tile_at(grid, x, y) is DOOR and any((nx, ny) in self.cells for nx, ny in neighbors(x, y)):
                found[side].append((x, y))
        return found


def flood(grid: Grid, start: Coord2D, kind: Tile, seen: Set[Coord2D]) -> Set[Coord2D]:
    width, height = len(grid), len(grid[0])
    region = {start}
    seen.add(start)
    q = deque([start])
    while q:
        x, y = q.popleft()
        for nx, ny in neighbors(x, y):
            if 0 <= nx < width and 0 <= ny < height and (nx, ny) not in seen and grid[nx][ny] is kind:
                seen.add((nx, ny))
                region.add((nx, ny))
                q.append((nx, ny))
    return region


def components(grid: Grid, kind: Tile) -> List[Set[Coord2D]]:
    width, height = len(grid), len(grid[0])
    seen: Set[Coord2D] = set()
    found = []
    for x in range(width):
        for y in range(height):
            if grid[x][y] is kind and (x, y) not in seen:
                found.append(flood(grid, (x, y), kind, seen))
    return found


def find_rooms(grid: Grid) -> List[RoomRegion]:
    rooms = []
    for cells in components(grid, ROOM):
        xs = [c[0] for c in cells]
        ys = [c[1] for c in cells]
        rooms.append(RoomRegion(cells, min(xs), max(xs), min(ys), max(ys)))
    return rooms


__all__ = ["RoomRegion", "flood", "components", "find_rooms"]
