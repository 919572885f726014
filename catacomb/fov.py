"""Sector field of view over a ChunkStore.

Rays are cast from the observer's cell across a cone centred on its facing
angle. A ray stops after the first non-floor cell it reaches, so walls bounding
a corridor are visible while anything behind them is not. Cells in chunks that
have not been generated read as walls.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Set, Tuple

Cell = Tuple[int, int]


@dataclass
class Observer:
    x: int
    y: int
    angle: float = 0.0  # radians, 0 faces +x, pi/2 faces +y

    @property
    def pos(self) -> Cell:
        return (self.x, self.y)

    def face(self, dx: int, dy: int) -> None:
        if dx or dy:
            self.angle = math.atan2(dy, dx)


def no_fov(observer) -> Set[Cell]:
    return set()


def sector_fov(store, radius: int = 10, half_angle: float = math.pi / 6,
               step: float = 0.5) -> Callable[[Observer], Set[Cell]]:
    """Return a visibility callable for ``store``.

    The default half angle gives a 60 degree cone. Ray density scales with the
    radius so every cell on the far arc is sampled.
    """
    rays = max(8, int(math.ceil(2 * half_angle * radius * 2)))

    def visibility(observer: Observer) -> Set[Cell]:
        ox, oy = observer.x, observer.y
        seen: Set[Cell] = {(ox, oy)}
        for i in range(rays + 1):
            a = observer.angle - half_angle + (2 * half_angle) * i / rays
            dx, dy = math.cos(a), math.sin(a)
            dist = step
            while dist <= radius:
                cell = (int(math.floor(ox + 0.5 + dx * dist)), int(math.floor(oy + 0.5 + dy * dist)))
                if cell not in seen:
                    seen.add(cell)
                if not store.is_floor(*cell):
                    break
                dist += step
        return seen

    return visibility


__all__ = ["Observer", "no_fov", "sector_fov"]
