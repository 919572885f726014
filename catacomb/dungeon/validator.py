"""Read-only structural oracle for a generated grid.

``is_valid`` is the pass/fail contract a generated chunk must meet;
``find_violations`` reports the same checks as records for diagnostics.
Neither function mutates the grid.
"""
from __future__ import annotations

from typing import List, NamedTuple

from .cells import Grid, has_neighbor
from .connectivity import find_rooms
from .doors import door_shape_ok
from .pruning import MAX_DOORS_PER_SIDE, MIN_DOORS_PER_ROOM
from .tiles import DOOR, HALL, ROOM

MIN_ROOM_SIDE = 4


class Violation(NamedTuple):
    kind: str
    x: int
    y: int
    detail: str = ""

    def to_dict(self):
        return {"kind": self.kind, "x": self.x, "y": self.y, "detail": self.detail}


def find_violations(grid: Grid, *, stop_at_first: bool = False) -> List[Violation]:
    found: List[Violation] = []

    def add(v: Violation) -> bool:
        found.append(v)
        return stop_at_first

    for room in find_rooms(grid):
        x0, y0 = room.min_x, room.min_y
        if room.width < MIN_ROOM_SIDE or room.height < MIN_ROOM_SIDE:
            if add(Violation("room_too_small", x0, y0, f"{room.width}x{room.height}")):
                return found
        if not room.is_rectangle:
            if add(Violation("room_not_rectangular", x0, y0)):
                return found
        by_side = room.doors_by_side(grid)
        for side, coords in by_side.items():
            if len(coords) > MAX_DOORS_PER_SIDE:
                if add(Violation("too_many_doors_on_side", x0, y0, f"{side.value}={len(coords)}")):
                    return found
        total = sum(len(c) for c in by_side.values())
        if total < MIN_DOORS_PER_ROOM:
            if add(Violation("too_few_doors", x0, y0, f"doors={total}")):
                return found

    width, height = len(grid), len(grid[0])
    for x in range(width):
        for y in range(height):
            t = grid[x][y]
            if t is ROOM and has_neighbor(grid, x, y, HALL):
                if add(Violation("room_touches_hall", x, y)):
                    return found
            elif t is HALL and not has_neighbor(grid, x, y, HALL):
                if add(Violation("isolated_hall", x, y)):
                    return found
            elif t is DOOR and not door_shape_ok(grid, x, y):
                if add(Violation("bad_door", x, y)):
                    return found
    return found


def is_valid(grid: Grid) -> bool:
    return not find_violations(grid, stop_at_first=True)


__all__ = ["Violation", "find_violations", "is_valid", "MIN_ROOM_SIDE"]
