import random
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .cells import Grid
from .config import DungeonConfig
from .tiles import ROOM, WALL


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int

    def cells(self) -> Iterator[Tuple[int, int]]:
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    @property
    def area(self) -> int:
        return self.w * self.h

    @property
    def min_x(self) -> int:
        return self.x

    @property
    def max_x(self) -> int:
        return self.x + self.w - 1

    @property
    def min_y(self) -> int:
        return self.y

    @property
    def max_y(self) -> int:
        return self.y + self.h - 1

    def margin_box(self) -> Tuple[int, int, int, int]:
        """Inclusive (min_x, min_y, max_x, max_y) of the room grown by one tile."""
        return (self.x - 1, self.y - 1, self.x + self.w, self.y + self.h)


def carve_rooms(grid: Grid, config: DungeonConfig, rng=None) -> List[Room]:
    """Scatter up to ``config.max_rooms`` rectangular rooms over WALL.

    Each attempt samples one size and origin; a placement whose margin is not
    solid WALL, or whose margin box touches an earlier room's margin box, is
    dropped rather than nudged, so fewer rooms than attempts is normal.
    """
    if rng is None:
        rng = random
    width, height = len(grid), len(grid[0])
    rooms: List[Room] = []
    for _ in range(config.max_rooms):
        w = rng.randint(config.min_room_size, config.max_room_size)
        h = rng.randint(config.min_room_size, config.max_room_size)
        x = rng.randint(1, width - w - 1)
        y = rng.randint(1, height - h - 1)
        room = Room(x, y, w, h)
        if _margin_blocked(grid, room) or _room_overlaps(room, rooms):
            continue
        for ix, iy in room.cells():
            grid[ix][iy] = ROOM
        rooms.append(room)
    return rooms


def _margin_blocked(grid: Grid, room: Room) -> bool:
    x0, y0, x1, y1 = room.margin_box()
    for ix in range(x0, x1 + 1):
        for iy in range(y0, y1 + 1):
            if grid[ix][iy] is not WALL:
                return True
    return False


def _room_overlaps(room: Room, existing: List[Room]) -> bool:
    ax0, ay0, ax1, ay1 = room.margin_box()
    for r in existing:
        bx0, by0, bx1, by1 = r.margin_box()
        if ax0 <= bx1 and bx0 <= ax1 and ay0 <= by1 and by0 <= ay1:
            return True
    return False


__all__ = ["Room", "carve_rooms"]
