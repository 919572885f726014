"""Textual explorer for a chunked catacomb world.

Panels:
 - Map (observer-centred window; visible tiles bright, remembered tiles dim)
 - Status (position, chunk, generation counters)
 - Event Log (bottom)

Run with: `python run.py explore`
"""

from __future__ import annotations

import math
from typing import Optional, Set, Tuple

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, Log, Static

from catacomb.chunk_store import ChunkStore
from catacomb.dungeon.config import DungeonConfig
from catacomb.fov import Observer, sector_fov
from catacomb.memory import fade, remember

TICK_SECONDS = 0.25
# Ticks between churn passes over the out-of-view ring of chunks.
REGEN_EVERY_TICKS = 40


def find_spawn(store: ChunkStore) -> Tuple[int, int]:
    """First floor cell of chunk (0, 0), scanning column-major."""
    chunk = store.ensure_chunk(0, 0)
    for x, col in enumerate(chunk.grid):
        for y, t in enumerate(col):
            if t.is_floor:
                return (x, y)
    return (chunk.size // 2, chunk.size // 2)


def render_window(store: ChunkStore, observer: Observer, visible: Set[Tuple[int, int]],
                  width: int = 61, height: int = 25) -> str:
    """Rich markup for a ``width`` x ``height`` window around the observer."""
    x0 = observer.x - width // 2
    y0 = observer.y - height // 2
    lines = []
    for gy in range(y0, y0 + height):
        row = []
        for gx in range(x0, x0 + width):
            if (gx, gy) == observer.pos:
                row.append("[bold yellow]@[/]")
                continue
            tile = store.tile_at(gx, gy)
            if tile is None:
                row.append(" ")
            elif (gx, gy) in visible:
                row.append(f"[bold]{tile.glyph}[/]")
            else:
                mem = store.memory_at(gx, gy)
                if mem is not None and mem.memory_alpha > 0:
                    row.append(f"[dim]{tile.glyph}[/]")
                else:
                    row.append(" ")
        lines.append("".join(row))
    return "\n".join(lines)


class CatacombExplorer(App):
    """Walk an observer through the world and watch out-of-view chunks churn.

    Every tick fades memory, refreshes the field of view and, every few
    seconds, regenerates loaded chunks outside the 3x3 block around the
    observer. Tiles in view or still remembered survive regeneration.
    """

    CSS = """
    Screen { layout: vertical; }
    .top-row { height: 3fr; }
    .bottom-row { height: 1fr; }
    .panel { border: tall $primary; padding: 0 1; }
    .panel-title { content-align: center middle; text-style: bold; }
    #map-panel { width: 3fr; }
    #status-panel { width: 1fr; }
    #log-panel { height: 100%; }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "regenerate", "Regenerate Now"),
        ("w,up", "move(0,-1)", "Up"),
        ("s,down", "move(0,1)", "Down"),
        ("a,left", "move(-1,0)", "Left"),
        ("d,right", "move(1,0)", "Right"),
    ]

    def __init__(self, config: Optional[DungeonConfig] = None, seed: Optional[int] = None,
                 fov_radius: int = 10) -> None:
        super().__init__()
        self.store = ChunkStore(config, seed=seed)
        x, y = find_spawn(self.store)
        self.observer = Observer(x, y)
        self.visibility = sector_fov(self.store, radius=fov_radius)
        self.visible: Set[Tuple[int, int]] = set()
        self._ticks = 0
        self._regenerated = 0

    def compose(self) -> ComposeResult:  # type: ignore[override]
        yield Header(show_clock=True)
        with Vertical(classes="top-row"):
            with Horizontal():
                with Vertical(id="map-panel", classes="panel"):
                    yield Static("Map", classes="panel-title")
                    self.map_body = Static("")
                    yield self.map_body
                with Vertical(id="status-panel", classes="panel"):
                    yield Static("Status", classes="panel-title")
                    self.status_body = Static("")
                    yield self.status_body
        with Vertical(id="log-panel", classes="panel bottom-row"):
            yield Static("Event Log", classes="panel-title")
            self.event_log = Log()
            yield self.event_log
        yield Footer()

    def on_mount(self) -> None:  # type: ignore[override]
        self.event_log.write_line(f"world seed={self.store.seed} spawn={self.observer.pos}")
        self.look()
        self.set_interval(TICK_SECONDS, self.tick)

    def look(self) -> None:
        self.store.ensure_area(self.observer.x, self.observer.y, radius=2)
        self.visible = self.visibility(self.observer)
        remember(self.store, self.visible)
        self.redraw()

    def redraw(self) -> None:
        self.map_body.update(render_window(self.store, self.observer, self.visible))
        ck = self.store.chunk_key_for(*self.observer.pos)
        chunk = self.store.get_chunk(*ck)
        self.status_body.update(
            "\n".join(
                [
                    f"pos      {self.observer.x},{self.observer.y}",
                    f"facing   {math.degrees(self.observer.angle):.0f}",
                    f"chunk    {ck[0]},{ck[1]}",
                    f"gen      {chunk.generation if chunk else '-'}",
                    f"valid    {chunk.valid if chunk else '-'}",
                    f"loaded   {len(self.store)}",
                    f"regen    {self._regenerated}",
                ]
            )
        )

    def tick(self) -> None:
        self._ticks += 1
        fade(self.store, TICK_SECONDS, visible=self.visible)
        if self._ticks % REGEN_EVERY_TICKS == 0:
            self.regenerate_ring()
        self.look()

    def regenerate_ring(self) -> None:
        keys = self.store.regeneration_candidates(self.store.chunk_key_for(*self.observer.pos))
        done = self.store.regenerate_chunks(keys, self.visibility, self.observer)
        self._regenerated += len(done)
        if done:
            self.event_log.write_line(f"regenerated {len(done)} chunk(s)")

    def action_move(self, dx: int, dy: int) -> None:
        self.observer.face(dx, dy)
        nx, ny = self.observer.x + dx, self.observer.y + dy
        if self.store.is_floor(nx, ny):
            self.observer.x, self.observer.y = nx, ny
        self.look()

    def action_regenerate(self) -> None:
        self.regenerate_ring()
        self.look()


def run_explorer(config: Optional[DungeonConfig] = None, seed: Optional[int] = None) -> None:
    CatacombExplorer(config, seed=seed).run()


__all__ = ["CatacombExplorer", "find_spawn", "render_window", "run_explorer"]
