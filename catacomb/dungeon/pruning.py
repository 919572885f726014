"""Structural cleanup passes run after corridors are carved.

Every pass mutates the grid in place and returns how many cells it changed.
Apart from door completion, passes only ever turn cells into WALL, so the
settle loop in :func:`run_all_pruning_passes` always reaches a fixed point.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Set

from .cells import Coord2D, Grid, has_neighbor, in_bounds, neighbors
from .connectivity import components, find_rooms
from .doors import enforce_door_invariants, room_side_of_door
from .metrics import bump
from .tiles import DOOR, HALL, ROOM, WALL

MAX_DOORS_PER_SIDE = 2
MIN_DOORS_PER_ROOM = 2


def prune_dangling_halls(grid: Grid, keep: Iterable[Coord2D] = (), metrics=None) -> int:
    """Remove hall runs that lead to no door.

    A hall component survives when any of its cells touches a DOOR. Otherwise
    every cell is walled except the ``keep`` cells (chunk edge portal stubs).
    """
    keep = set(keep)
    pruned = 0
    for comp in components(grid, HALL):
        if any(has_neighbor(grid, x, y, DOOR) for x, y in comp):
            continue
        for x, y in comp - keep:
            grid[x][y] = WALL
            pruned += 1
    bump(metrics, "halls_dangling", pruned)
    return pruned


def prune_room_adjacent_halls(grid: Grid, metrics=None) -> int:
    """Halls may reach a room only through a door; any direct contact is walled."""
    width, height = len(grid), len(grid[0])
    bad = [
        (x, y)
        for x in range(width)
        for y in range(height)
        if grid[x][y] is HALL and has_neighbor(grid, x, y, ROOM)
    ]
    for x, y in bad:
        grid[x][y] = WALL
    bump(metrics, "halls_pruned", len(bad))
    return len(bad)


def complete_doors(grid: Grid, metrics=None) -> int:
    """Give every hall-less door a hall cell on the side facing away from its room."""
    width, height = len(grid), len(grid[0])
    done = 0
    for x in range(width):
        for y in range(height):
            if grid[x][y] is not DOOR or has_neighbor(grid, x, y, HALL):
                continue
            room_dir = room_side_of_door(grid, x, y)
            if room_dir is None:
                continue
            hx, hy = x - room_dir[0], y - room_dir[1]
            if in_bounds(grid, hx, hy) and grid[hx][hy] is WALL:
                grid[hx][hy] = HALL
                done += 1
    bump(metrics, "doors_completed", done)
    return done


def prune_isolated_halls(grid: Grid, metrics=None) -> int:
    width, height = len(grid), len(grid[0])
    bad = [
        (x, y)
        for x in range(width)
        for y in range(height)
        if grid[x][y] is HALL and not has_neighbor(grid, x, y, HALL)
    ]
    for x, y in bad:
        grid[x][y] = WALL
    bump(metrics, "halls_isolated", len(bad))
    return len(bad)


def cap_doors_per_side(grid: Grid, metrics=None) -> int:
    capped = 0
    for room in find_rooms(grid):
        for coords in room.doors_by_side(grid).values():
            for x, y in sorted(coords)[MAX_DOORS_PER_SIDE:]:
                grid[x][y] = WALL
                capped += 1
    bump(metrics, "doors_side_capped", capped)
    return capped


def drop_unfit_rooms(grid: Grid, min_size: int = 4, metrics=None) -> int:
    """Wall over rooms that are too small, not rectangular, or short of doors.

    The dropped room's doors go with it. Returns the number of cells changed.
    """
    changed = 0
    dropped = 0
    for room in find_rooms(grid):
        doors: Set[Coord2D] = set()
        for coords in room.doors_by_side(grid).values():
            doors.update(coords)
        fits = room.width >= min_size and room.height >= min_size and room.is_rectangle
        if fits and len(doors) >= MIN_DOORS_PER_ROOM:
            continue
        for x, y in room.cells:
            grid[x][y] = WALL
        for x, y in doors:
            grid[x][y] = WALL
        changed += len(room.cells) + len(doors)
        dropped += 1
    bump(metrics, "rooms_dropped", dropped)
    return changed


def run_all_pruning_passes(grid: Grid, metrics: Optional[Dict[str, Any]] = None, *,
                           keep: Iterable[Coord2D] = (), max_rounds: int = 32) -> bool:
    """Run the cleanup passes, then settle until no pass changes anything.

    Order: dangling halls, room-adjacent halls, door completion, followed by
    rounds of isolated halls, strict door shape, per-side door cap, unfit
    rooms, dangling halls, room-adjacent halls. Returns True once settled.
    """
    keep = set(keep)
    prune_dangling_halls(grid, keep, metrics)
    prune_room_adjacent_halls(grid, metrics)
    complete_doors(grid, metrics)
    for round_no in range(1, max_rounds + 1):
        changed = prune_isolated_halls(grid, metrics)
        changed += enforce_door_invariants(grid, metrics)
        changed += cap_doors_per_side(grid, metrics)
        changed += drop_unfit_rooms(grid, metrics=metrics)
        changed += prune_dangling_halls(grid, keep, metrics)
        changed += prune_room_adjacent_halls(grid, metrics)
        if metrics is not None:
            metrics["settle_rounds"] = round_no
        if not changed:
            return True
    return False


__all__ = [
    "prune_dangling_halls",
    "prune_room_adjacent_halls",
    "complete_doors",
    "prune_isolated_halls",
    "cap_doors_per_side",
    "drop_unfit_rooms",
    "run_all_pruning_passes",
]
