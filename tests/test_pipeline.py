"""End-to-end generation: validity, determinism, metrics."""

import random

import pytest

from catacomb.dungeon.cells import cells_of, neighbor_counts
from catacomb.dungeon.config import DungeonConfig
from catacomb.dungeon.connectivity import find_rooms
from catacomb.dungeon.pipeline import DungeonGenerator, generate_grid
from catacomb.dungeon.tiles import DOOR, HALL, ROOM
from catacomb.dungeon.tunnels import edge_portals
from catacomb.dungeon.validator import find_violations, is_valid


def test_seeded_64_grid_is_valid_with_rooms():
    result = generate_grid(size=64, seed=42)
    assert result.valid, result.violations[:5]
    assert is_valid(result.grid)
    assert len(result.rooms) >= 1


@pytest.mark.structure
@pytest.mark.parametrize("seed", [11, 42, 1337, 2024, 9001])
def test_generated_grids_hold_all_invariants(seed):
    result = generate_grid(size=48, seed=seed)
    grid = result.grid
    assert find_violations(grid) == []
    for region in find_rooms(grid):
        assert region.width >= 4 and region.height >= 4
        assert region.is_rectangle
    for x, y in cells_of(grid, HALL):
        c = neighbor_counts(grid, x, y)
        assert c[ROOM] == 0
        assert c[HALL] >= 1
    for x, y in cells_of(grid, DOOR):
        c = neighbor_counts(grid, x, y)
        assert c[ROOM] == 1 and c[HALL] == 1 and c[DOOR] <= 1


def test_same_seed_same_grid():
    a = generate_grid(size=40, seed=7)
    b = generate_grid(size=40, seed=7)
    assert a.grid == b.grid
    assert a.attempt == b.attempt


def test_explicit_rng_overrides_seed():
    gen = DungeonGenerator(DungeonConfig(size=32, seed=1))
    a = gen.generate(rng=random.Random("abc"))
    b = gen.generate(rng=random.Random("abc"))
    assert a.grid == b.grid


def test_metrics_recorded():
    result = generate_grid(size=32, seed=5)
    m = result.metrics
    for key in ("attempts", "rooms_placed", "doors_created", "corridors_carved", "settle_rounds", "runtime_ms"):
        assert key in m
    assert set(m["phase_ms"]) >= {"rooms", "doors", "corridors", "cleanup", "validate"}
    assert m["tiles_wall"] + m["tiles_room"] + m["tiles_hall"] + m["tiles_door"] == 32 * 32
    assert m["rooms"] == len(result.rooms)


def test_metrics_can_be_disabled():
    result = generate_grid(size=32, seed=5, enable_metrics=False)
    assert result.metrics == {}


def test_surviving_rooms_are_on_grid():
    result = generate_grid(size=48, seed=3)
    for r in result.rooms:
        assert all(result.grid[x][y] is ROOM for x, y in r.cells())
    for d in result.doors:
        assert result.grid[d.x][d.y] is DOOR


def test_portals_survive_generation():
    cfg = DungeonConfig(size=32, seed=8)
    portals = edge_portals(0, 0, 32, 8, cfg.portal_depth)
    result = DungeonGenerator(cfg).generate(portals=portals)
    assert result.valid
    for p in portals:
        assert all(result.grid[x][y] is HALL for x, y in p.cells)


def test_to_ascii_uses_glyphs():
    result = generate_grid(size=32, seed=9)
    lines = result.to_ascii().splitlines()
    assert len(lines) == 32 and all(len(line) == 32 for line in lines)
    assert set("".join(lines)) <= set("#.,+")


def test_score_prefers_valid_then_rooms():
    result = generate_grid(size=32, seed=10)
    valid, rooms, neg_violations = result.score()
    assert valid is result.valid
    assert rooms == len(result.rooms)
    assert neg_violations == -len(result.violations)
