"""Sparse chunked world built on the dungeon pipeline.

The world is an unbounded grid of ``size x size`` chunks keyed by integer
chunk coordinates. Chunks are generated lazily on first access and can be
regenerated wholesale later; regeneration writes back every tile the
observer can currently see or still remembers, so churn happens only out of
sight.

A ChunkStore is constructed once per session and handed to whatever needs
map queries (movement, combat, rendering); there is no module level world.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple, Union

from catacomb.dungeon.cells import Grid, TileMemory, grid_to_rows, new_memory
from catacomb.dungeon.config import DungeonConfig
from catacomb.dungeon.doors import Door
from catacomb.dungeon.pipeline import DungeonGenerator, surviving
from catacomb.dungeon.rooms import Room
from catacomb.dungeon.tiles import Tile
from catacomb.dungeon.tunnels import edge_portals
from catacomb.dungeon.validator import is_valid
from catacomb.logging_utils import get_logger

log = get_logger("catacomb.world")

ChunkKey = Tuple[int, int]
Visibility = Callable[[Any], Iterable[Tuple[int, int]]]


@dataclass
class Chunk:
    key: ChunkKey
    size: int
    grid: Grid
    memory: List[List[TileMemory]]
    rooms: List[Room] = field(default_factory=list)
    doors: List[Door] = field(default_factory=list)
    generation: int = 0
    valid: bool = True
    preserved: int = 0
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def origin(self) -> Tuple[int, int]:
        return (self.key[0] * self.size, self.key[1] * self.size)

    def to_ascii(self) -> str:
        return "\n".join(grid_to_rows(self.grid, glyphs=True))

    def to_json(self) -> Dict[str, Any]:
        """Read-only snapshot for renderers (rows are y-major strings)."""
        s = self.size
        return {
            "key": list(self.key),
            "size": s,
            "generation": self.generation,
            "valid": self.valid,
            "grid": grid_to_rows(self.grid),
            "memory": [[round(self.memory[x][y].memory_alpha, 3) for x in range(s)] for y in range(s)],
            "rooms": len(self.rooms),
        }


def parse_chunk_key(key: Union[ChunkKey, str]) -> ChunkKey:
    if isinstance(key, str):
        cx, cy = key.split(",")
        return (int(cx), int(cy))
    return (int(key[0]), int(key[1]))


class ChunkStore:
    def __init__(self, config: DungeonConfig | None = None, *, seed: int | None = None):
        self.generator = DungeonGenerator(config, seed=seed)
        self.config = self.generator.config
        self.seed = self.generator.seed
        self.chunk_size = self.config.size
        self._chunks: Dict[ChunkKey, Chunk] = {}

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._chunks)

    def __contains__(self, key) -> bool:
        return parse_chunk_key(key) in self._chunks

    def keys(self) -> List[ChunkKey]:
        return list(self._chunks)

    def chunks(self) -> Iterator[Chunk]:
        return iter(list(self._chunks.values()))

    def get_chunk(self, cx: int, cy: int) -> Optional[Chunk]:
        return self._chunks.get((cx, cy))

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------
    def chunk_key_for(self, gx: int, gy: int) -> ChunkKey:
        return (gx // self.chunk_size, gy // self.chunk_size)

    def chunk_at(self, gx: int, gy: int) -> Optional[Chunk]:
        return self._chunks.get(self.chunk_key_for(gx, gy))

    def tile_at(self, gx: int, gy: int) -> Optional[Tile]:
        chunk = self.chunk_at(gx, gy)
        if chunk is None:
            return None
        return chunk.grid[gx - chunk.origin[0]][gy - chunk.origin[1]]

    def is_floor(self, gx: int, gy: int) -> bool:
        t = self.tile_at(gx, gy)
        return t is not None and t.is_floor

    def memory_at(self, gx: int, gy: int) -> Optional[TileMemory]:
        chunk = self.chunk_at(gx, gy)
        if chunk is None:
            return None
        return chunk.memory[gx - chunk.origin[0]][gy - chunk.origin[1]]

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def _build_chunk(self, key: ChunkKey, generation: int) -> Chunk:
        cx, cy = key
        rng = random.Random(f"{self.seed}:{cx}:{cy}:{generation}")
        portals = edge_portals(cx, cy, self.chunk_size, self.seed, self.config.portal_depth)
        result = self.generator.generate(rng=rng, portals=portals, label=f"{cx},{cy}")
        return Chunk(
            key=key,
            size=self.chunk_size,
            grid=result.grid,
            memory=new_memory(self.chunk_size),
            rooms=result.rooms,
            doors=result.doors,
            generation=generation,
            valid=result.valid,
            metrics=result.metrics,
        )

    def ensure_chunk(self, cx: int, cy: int) -> Chunk:
        key = (cx, cy)
        chunk = self._chunks.get(key)
        if chunk is None:
            chunk = self._build_chunk(key, 0)
            self._chunks[key] = chunk
            log.debug(event="chunk_generated", cx=cx, cy=cy, rooms=len(chunk.rooms), valid=chunk.valid)
        return chunk

    def ensure_area(self, gx: int, gy: int, radius: int = 2) -> List[Chunk]:
        """Load the (2r+1)^2 block of chunks around a global position."""
        pcx, pcy = self.chunk_key_for(gx, gy)
        return [
            self.ensure_chunk(pcx + dx, pcy + dy)
            for dy in range(-radius, radius + 1)
            for dx in range(-radius, radius + 1)
        ]

    def regenerate_chunks(self, keys: Iterable[Union[ChunkKey, str]], visibility: Visibility,
                          observer: Any) -> List[ChunkKey]:
        """Replace the given chunks with fresh content, keeping what is seen.

        Cells whose global coordinate is in ``visibility(observer)``, or whose
        memory alpha is still above zero, keep their previous tile and memory.
        Keys that were never generated are skipped. Returns the keys replaced.
        """
        visible: Set[Tuple[int, int]] = set(visibility(observer))
        done: List[ChunkKey] = []
        for raw in keys:
            key = parse_chunk_key(raw)
            old = self._chunks.get(key)
            if old is None:
                continue
            bx, by = old.origin
            s = self.chunk_size
            stash = [
                (lx, ly, old.grid[lx][ly], old.memory[lx][ly].copy())
                for lx in range(s)
                for ly in range(s)
                if (bx + lx, by + ly) in visible or old.memory[lx][ly].memory_alpha > 0
            ]
            fresh = self._build_chunk(key, old.generation + 1)
            for lx, ly, tile, mem in stash:
                fresh.grid[lx][ly] = tile
                fresh.memory[lx][ly] = mem
            fresh.preserved = len(stash)
            if stash:
                fresh.rooms, fresh.doors = surviving(fresh.grid, fresh.rooms, fresh.doors)
                fresh.valid = is_valid(fresh.grid)
            self._chunks[key] = fresh
            done.append(key)
            log.info(
                event="chunk_regenerated",
                cx=key[0],
                cy=key[1],
                generation=fresh.generation,
                preserved=len(stash),
                valid=fresh.valid,
            )
        return done

    def regeneration_candidates(self, observer_chunk: ChunkKey, radius: int = 2,
                                active_radius: int = 1) -> List[ChunkKey]:
        """Loaded chunks within ``radius`` of the observer but outside the active ring."""
        ocx, ocy = observer_chunk
        out = []
        for cx, cy in self._chunks:
            d = max(abs(cx - ocx), abs(cy - ocy))
            if active_radius < d <= radius:
                out.append((cx, cy))
        return sorted(out)


__all__ = ["Chunk", "ChunkKey", "ChunkStore", "parse_chunk_key"]
