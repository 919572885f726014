"""Corridor carving: door matching, L-shaped halls, branch stubs, chunk portals.

Corridors only ever turn WALL into HALL. Anything already carved (rooms,
doors, earlier halls) is left alone, so later cleanup passes decide what a
corridor that brushed against a room really becomes.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .cells import Coord2D, Grid, in_bounds
from .config import DungeonConfig
from .doors import Door
from .metrics import bump
from .tiles import HALL, WALL, Side

Path = List[Coord2D]


def carve_corridors(grid: Grid, doors: Sequence[Door], config: DungeonConfig, rng=None,
                    metrics: Optional[Dict] = None) -> List[Path]:
    """Pair doors greedily by distance and carve an L-shaped hall for each pair.

    Doors are visited in their original order; each unconnected door takes the
    closest unconnected door of another room (squared euclidean, first found on
    ties). Two chunk-edge anchors are never paired with each other. Doors left
    without a partner stay unconnected.
    """
    if rng is None:
        rng = random
    connected = set()
    paths: List[Path] = []
    for i, a in enumerate(doors):
        if i in connected:
            continue
        best = None
        best_dist = None
        for j, b in enumerate(doors):
            if j == i or j in connected or b.room == a.room or (a.is_portal and b.is_portal):
                continue
            dx, dy = a.x - b.x, a.y - b.y
            dist = dx * dx + dy * dy
            if best_dist is None or dist < best_dist:
                best, best_dist = j, dist
        if best is None:
            continue
        paths.append(carve_l_path(grid, a.exit, doors[best].exit, rng, config.corridor_widths))
        connected.add(i)
        connected.add(best)
    stubs = carve_branch_stubs(grid, paths, config, rng)
    bump(metrics, "corridors_carved", len(paths))
    bump(metrics, "corridor_cells", sum(len(p) for p in paths))
    bump(metrics, "branch_stubs", stubs)
    return paths


def carve_l_path(grid: Grid, start: Coord2D, end: Coord2D, rng=None,
                 widths: Sequence[int] = (2, 3)) -> Path:
    if rng is None:
        rng = random
    w = rng.choice(tuple(widths))
    (x1, y1), (x2, y2) = start, end
    path: Path = []
    if rng.random() < 0.5:
        _carve_leg(grid, x1, x2, y1, w, True, path)
        _carve_leg(grid, y1, y2, x2, w, False, path)
    else:
        _carve_leg(grid, y1, y2, x1, w, False, path)
        _carve_leg(grid, x1, x2, y2, w, True, path)
    return path


def _carve_leg(grid: Grid, a_from: int, a_to: int, across: int, w: int, horizontal: bool, path: Path):
    step = 1 if a_to >= a_from else -1
    first = across - w // 2
    for a in range(a_from, a_to + step, step):
        for b in range(first, first + w):
            x, y = (a, b) if horizontal else (b, a)
            if in_bounds(grid, x, y) and grid[x][y] is WALL:
                grid[x][y] = HALL
                path.append((x, y))


def carve_branch_stubs(grid: Grid, paths: List[Path], config: DungeonConfig, rng=None) -> int:
    """Grow a short perpendicular dead-end off the middle of every long path.

    The stub starts past the path's own band and stops at the first cell that
    is not WALL or leaves the grid. Stub cells are appended to their path.
    """
    if rng is None:
        rng = random
    grown = 0
    for path in paths:
        if len(path) <= config.branch_min_path:
            continue
        mx, my = path[len(path) // 2]
        (sx, sy), (ex, ey) = path[0], path[-1]
        if abs(ex - sx) >= abs(ey - sy):
            dx, dy = 0, rng.choice((-1, 1))
        else:
            dx, dy = rng.choice((-1, 1)), 0
        length = rng.randint(config.branch_min_length, config.branch_max_length)
        own = set(path)
        x, y = mx + dx, my + dy
        while (x, y) in own:
            x, y = x + dx, y + dy
        stub: Path = []
        while len(stub) < length and in_bounds(grid, x, y) and grid[x][y] is WALL:
            grid[x][y] = HALL
            stub.append((x, y))
            x, y = x + dx, y + dy
        if stub:
            path.extend(stub)
            grown += 1
    return grown


# ---------------------------------------------------------------------------
# Chunk edge portals
# ---------------------------------------------------------------------------


@dataclass
class Portal:
    """Two-wide hall opening on a chunk edge shared with a neighbor chunk."""

    side: Side
    offset: int
    cells: List[Coord2D] = field(default_factory=list)
    anchor: Optional[Door] = None


def portal_offset(world_seed, axis: str, ex: int, ey: int, size: int) -> int:
    # Keyed by the edge itself so both chunks sharing it agree.
    return random.Random(f"{world_seed}:{axis}:{ex}:{ey}").randint(2, size - 4)


def edge_portals(cx: int, cy: int, size: int, world_seed, depth: int = 3) -> List[Portal]:
    west = portal_offset(world_seed, "x", cx, cy, size)
    east = portal_offset(world_seed, "x", cx + 1, cy, size)
    north = portal_offset(world_seed, "y", cx, cy, size)
    south = portal_offset(world_seed, "y", cx, cy + 1, size)
    far = size - 1
    portals = [
        Portal(Side.W, west, [(i, west + j) for i in range(depth) for j in (0, 1)],
               Door(depth - 2, west, Side.E, -1)),
        Portal(Side.E, east, [(far - i, east + j) for i in range(depth) for j in (0, 1)],
               Door(far - depth + 2, east, Side.W, -2)),
        Portal(Side.N, north, [(north + j, i) for i in range(depth) for j in (0, 1)],
               Door(north, depth - 2, Side.S, -3)),
        Portal(Side.S, south, [(south + j, far - i) for i in range(depth) for j in (0, 1)],
               Door(south, far - depth + 2, Side.N, -4)),
    ]
    return portals


def carve_portal_stubs(grid: Grid, portals: Sequence[Portal]) -> int:
    carved = 0
    for portal in portals:
        for x, y in portal.cells:
            if grid[x][y] is WALL:
                grid[x][y] = HALL
                carved += 1
    return carved


__all__ = [
    "Path",
    "Portal",
    "carve_corridors",
    "carve_l_path",
    "carve_branch_stubs",
    "portal_offset",
    "edge_portals",
    "carve_portal_stubs",
]
