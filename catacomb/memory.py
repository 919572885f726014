"""Explored-tile memory: what the observer saw, fading over time."""
from __future__ import annotations

from typing import Iterable, Set, Tuple

# Fully seen tiles drop to zero after four seconds of not being in view.
DEFAULT_FADE_RATE = 0.25


def remember(store, visible: Iterable[Tuple[int, int]]) -> int:
    """Mark visible cells as seen. Cells in unloaded chunks are ignored."""
    n = 0
    for gx, gy in visible:
        mem = store.memory_at(gx, gy)
        if mem is None:
            continue
        mem.memory_alpha = 1.0
        mem.visited = True
        n += 1
    return n


def fade(store, dt: float, rate: float = DEFAULT_FADE_RATE, visible: Iterable[Tuple[int, int]] = ()) -> int:
    """Decay memory alpha on every loaded chunk; returns how many cells hit zero."""
    keep: Set[Tuple[int, int]] = set(visible)
    drop = dt * rate
    cleared = 0
    for chunk in store.chunks():
        bx, by = chunk.origin
        for lx, col in enumerate(chunk.memory):
            for ly, mem in enumerate(col):
                if mem.memory_alpha <= 0 or (bx + lx, by + ly) in keep:
                    continue
                mem.memory_alpha = max(0.0, mem.memory_alpha - drop)
                if mem.memory_alpha == 0.0:
                    cleared += 1
    return cleared


__all__ = ["DEFAULT_FADE_RATE", "remember", "fade"]
