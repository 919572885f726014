"""Door placement and door shape rules.

Doors sit on the one-tile ring around a room (corners excluded). A settled
door has exactly one ROOM neighbor, exactly one HALL neighbor, at most one
DOOR neighbor, and WALL on the remaining sides. Before corridors exist only
the relaxed shape applies: one ROOM neighbor, no HALL yet.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .cells import Grid, in_bounds, neighbor_counts, neighbors, tile_at
from .config import DungeonConfig
from .metrics import bump
from .rooms import Room
from .tiles import DOOR, HALL, ROOM, WALL, Side


@dataclass
class Door:
    x: int
    y: int
    side: Side
    room: int

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def exit(self) -> Tuple[int, int]:
        """Cell directly outside the door, facing away from its room."""
        dx, dy = self.side.offset
        return (self.x + dx, self.y + dy)

    @property
    def is_portal(self) -> bool:
        return self.room < 0


def door_candidates(room: Room) -> List[Tuple[int, int, Side]]:
    cands = []
    for x in range(room.min_x, room.max_x + 1):
        cands.append((x, room.min_y - 1, Side.N))
        cands.append((x, room.max_y + 1, Side.S))
    for y in range(room.min_y, room.max_y + 1):
        cands.append((room.min_x - 1, y, Side.W))
        cands.append((room.max_x + 1, y, Side.E))
    return cands


def desired_door_count(room: Room, config: DungeonConfig, rng) -> int:
    if room.area < config.small_room_area:
        return 1
    return rng.randint(1, config.max_doors)


def place_doors(grid: Grid, rooms: List[Room], config: DungeonConfig, rng=None,
                metrics: Optional[Dict] = None) -> List[Door]:
    if rng is None:
        rng = random
    doors: List[Door] = []
    for index, room in enumerate(rooms):
        count = desired_door_count(room, config, rng)
        cands = [c for c in door_candidates(room) if in_bounds(grid, c[0], c[1])]
        rng.shuffle(cands)
        placed = 0
        for x, y, side in cands:
            if placed >= count:
                break
            if grid[x][y] is not WALL:
                continue
            grid[x][y] = DOOR
            doors.append(Door(x, y, side, index))
            placed += 1
    kept = enforce_local_door_shape(grid, doors)
    bump(metrics, "doors_created", len(doors))
    bump(metrics, "doors_reverted_local", len(doors) - len(kept))
    return kept


def local_shape_ok(grid: Grid, x: int, y: int) -> bool:
    counts = neighbor_counts(grid, x, y)
    return counts[ROOM] == 1 and counts[DOOR] <= 1 and counts[HALL] == 0


def door_shape_ok(grid: Grid, x: int, y: int) -> bool:
    counts = neighbor_counts(grid, x, y)
    return counts[ROOM] == 1 and counts[HALL] == 1 and counts[DOOR] <= 1 and 1 <= counts[WALL] <= 2


def enforce_local_door_shape(grid: Grid, doors: Iterable[Door]) -> List[Door]:
    """Revert freshly placed doors whose neighborhood is not a plain room edge."""
    doors = list(doors)
    bad = [d for d in doors if not local_shape_ok(grid, d.x, d.y)]
    for d in bad:
        grid[d.x][d.y] = WALL
    return [d for d in doors if grid[d.x][d.y] is DOOR]


def enforce_door_invariants(grid: Grid, metrics: Optional[Dict] = None) -> int:
    """Demote every DOOR tile that breaks the settled door shape to WALL.

    Offenders are collected first so one demotion does not mask another.
    """
    width, height = len(grid), len(grid[0])
    bad = [
        (x, y)
        for x in range(width)
        for y in range(height)
        if grid[x][y] is DOOR and not door_shape_ok(grid, x, y)
    ]
    for x, y in bad:
        grid[x][y] = WALL
    bump(metrics, "doors_downgraded", len(bad))
    return len(bad)


def room_side_of_door(grid: Grid, x: int, y: int) -> Optional[Tuple[int, int]]:
    """Offset from the door to its single ROOM neighbor, if it has exactly one."""
    dirs = [(nx - x, ny - y) for nx, ny in neighbors(x, y) if tile_at(grid, nx, ny) is ROOM]
    return dirs[0] if len(dirs) == 1 else None


__all__ = [
    "Door",
    "door_candidates",
    "desired_door_count",
    "place_doors",
    "local_shape_ok",
    "door_shape_ok",
    "enforce_local_door_shape",
    "enforce_door_invariants",
    "room_side_of_door",
]
