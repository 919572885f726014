"""Pipeline orchestration for dungeon generation.

One attempt runs: portal stubs (chunk mode only), rooms, doors with the
local shape check, corridors with branch stubs, then the structural cleanup
passes. ``DungeonGenerator.generate`` retries a bounded number of attempts and
keeps the first valid one with at least one room, otherwise the best scoring
attempt seen.
"""
from __future__ import annotations

import random
import time
from dataclasses import replace
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from catacomb.logging_utils import get_logger

from .cells import Grid, grid_to_rows, new_grid, tile_at
from .config import DungeonConfig
from .doors import Door, place_doors
from .metrics import init_metrics
from .pruning import run_all_pruning_passes
from .rooms import Room, carve_rooms
from .tiles import DOOR, ROOM, Tile
from .tunnels import Path, Portal, carve_corridors, carve_portal_stubs
from .validator import Violation, find_violations

log = get_logger("catacomb.dungeon")


class GenerationResult(NamedTuple):
    grid: Grid
    rooms: List[Room]
    doors: List[Door]
    paths: List[Path]
    portals: List[Portal]
    violations: List[Violation]
    attempt: int
    metrics: Dict[str, Any]

    @property
    def valid(self) -> bool:
        return not self.violations

    def score(self):
        return (self.valid, len(self.rooms), -len(self.violations))

    def to_ascii(self) -> str:
        return "\n".join(grid_to_rows(self.grid, glyphs=True))


class DungeonGenerator:
    def __init__(self, config: DungeonConfig | None = None, *, seed: int | None = None):
        if config is None:
            config = DungeonConfig()
        if seed is None:
            seed = config.seed
        if seed is None:
            seed = random.randint(0, 2**31 - 1)
        # the caller's config is never mutated
        self.config = replace(config, seed=seed).validate()
        self.seed = seed

    def generate(self, *, rng=None, portals: Optional[Sequence[Portal]] = None,
                 label: str | None = None) -> GenerationResult:
        if rng is None:
            rng = random.Random(self.seed)
        portals = list(portals or [])
        best: Optional[GenerationResult] = None
        attempt = 0
        for attempt in range(1, self.config.max_attempts + 1):
            result = self._attempt(rng, portals, attempt)
            if result.valid and result.rooms:
                best = result
                break
            log.debug(
                event="generation_retry",
                chunk=label,
                attempt=attempt,
                rooms=len(result.rooms),
                violations=len(result.violations),
            )
            if best is None or result.score() > best.score():
                best = result
        if not (best.valid and best.rooms):
            log.warn(
                event="generation_fallback",
                chunk=label,
                attempts=attempt,
                rooms=len(best.rooms),
                violations=len(best.violations),
            )
        if self.config.enable_metrics:
            best.metrics["attempts"] = attempt
        return best

    def _attempt(self, rng, portals: List[Portal], attempt: int) -> GenerationResult:
        cfg = self.config
        metrics = init_metrics() if cfg.enable_metrics else None
        start = time.perf_counter()
        phase_times: Dict[str, int] = {}

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

        grid = new_grid(cfg.size)
        keep = [c for p in portals for c in p.cells]
        carved = _phase("portals", carve_portal_stubs, grid, portals)
        rooms = _phase("rooms", carve_rooms, grid, cfg, rng)
        doors = _phase("doors", place_doors, grid, rooms, cfg, rng, metrics)
        anchors = [p.anchor for p in portals if p.anchor is not None]
        paths = _phase("corridors", carve_corridors, grid, doors + anchors, cfg, rng, metrics)
        _phase("cleanup", run_all_pruning_passes, grid, metrics, keep=keep, max_rounds=cfg.max_settle_rounds)
        violations = _phase("validate", find_violations, grid)

        kept_rooms, kept_doors = surviving(grid, rooms, doors)
        if metrics is not None:
            metrics["rooms_attempted"] = cfg.max_rooms
            metrics["rooms_placed"] = len(rooms)
            metrics["portal_cells"] = carved
            metrics.update(_collect_counts(grid))
            metrics["rooms"] = len(kept_rooms)
            metrics["doors"] = len(kept_doors)
            metrics["valid"] = not violations
            metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
            metrics["phase_ms"] = phase_times
        return GenerationResult(
            grid, kept_rooms, kept_doors, paths, portals, violations, attempt, metrics or {}
        )


def surviving(grid: Grid, rooms: Sequence[Room], doors: Sequence[Door]):
    """Rooms still standing exactly as carved, and doors still opening onto one."""
    kept_rooms = [r for r in rooms if _room_intact(grid, r)]
    kept_doors = []
    for d in doors:
        dx, dy = d.side.offset
        if tile_at(grid, d.x, d.y) is DOOR and tile_at(grid, d.x - dx, d.y - dy) is ROOM:
            kept_doors.append(d)
    return kept_rooms, kept_doors


def _room_intact(grid: Grid, room: Room) -> bool:
    if any(tile_at(grid, x, y) is not ROOM for x, y in room.cells()):
        return False
    x0, y0, x1, y1 = room.margin_box()
    ring = [(x, y0) for x in range(x0, x1 + 1)] + [(x, y1) for x in range(x0, x1 + 1)]
    ring += [(x0, y) for y in range(y0, y1 + 1)] + [(x1, y) for y in range(y0, y1 + 1)]
    return all(tile_at(grid, x, y) is not ROOM for x, y in ring)


def _collect_counts(grid: Grid) -> Dict[str, int]:
    counts = {kind: 0 for kind in Tile}
    for col in grid:
        for t in col:
            counts[t] += 1
    return {f"tiles_{kind.name.lower()}": n for kind, n in counts.items()}


def generate_grid(size: int = 32, seed: int | None = None, **overrides) -> GenerationResult:
    """Convenience wrapper: one standalone grid with no chunk portals."""
    return DungeonGenerator(DungeonConfig(size=size, seed=seed, **overrides)).generate()


__all__ = ["DungeonGenerator", "GenerationResult", "generate_grid", "surviving"]
