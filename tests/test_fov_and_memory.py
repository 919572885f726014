import math

from catacomb.fov import Observer, no_fov, sector_fov
from catacomb.memory import fade, remember


class CorridorStore:
    """Floor is a single east-west corridor along y == 0."""

    def is_floor(self, gx, gy):
        return gy == 0 and 0 <= gx <= 40


def test_sector_fov_stops_at_walls():
    vis = sector_fov(CorridorStore(), radius=10)(Observer(0, 0, 0.0))
    assert (0, 0) in vis
    assert (5, 0) in vis and (10, 0) in vis
    # first wall row is seen, nothing behind it
    assert any(abs(y) == 1 for _, y in vis)
    assert (3, 2) not in vis and (3, -2) not in vis


def test_sector_fov_respects_facing():
    vis = sector_fov(CorridorStore(), radius=10)(Observer(20, 0, math.pi))
    assert (15, 0) in vis
    assert (25, 0) not in vis


def test_sector_fov_radius_bounds():
    vis = sector_fov(CorridorStore(), radius=6)(Observer(0, 0, 0.0))
    assert all(abs(x) <= 7 and abs(y) <= 7 for x, y in vis)


def test_no_fov_is_empty():
    assert no_fov(Observer(1, 2)) == set()


def test_observer_face():
    o = Observer(0, 0)
    o.face(0, 1)
    assert math.isclose(o.angle, math.pi / 2)
    o.face(0, 0)
    assert math.isclose(o.angle, math.pi / 2)


def test_remember_and_fade(store):
    store.ensure_chunk(0, 0)
    assert remember(store, [(1, 1), (2, 1), (999, 999)]) == 2
    mem = store.memory_at(1, 1)
    assert mem.memory_alpha == 1.0 and mem.visited
    fade(store, 1.0)
    assert math.isclose(store.memory_at(1, 1).memory_alpha, 0.75)
    # cells still in view do not fade
    fade(store, 1.0, visible=[(2, 1)])
    assert math.isclose(store.memory_at(2, 1).memory_alpha, 0.75)
    assert math.isclose(store.memory_at(1, 1).memory_alpha, 0.5)
    cleared = fade(store, 10.0)
    assert cleared == 2
    assert store.memory_at(1, 1).memory_alpha == 0.0
    assert store.memory_at(1, 1).visited is True


def test_seen_then_forgotten_tiles_can_change(store):
    store.ensure_chunk(0, 0)
    view = sector_fov(store, radius=8)
    remember(store, view(Observer(5, 5)))
    fade(store, 4.0)
    assert all(m.memory_alpha == 0.0 for col in store.get_chunk(0, 0).memory for m in col)
    store.regenerate_chunks([(0, 0)], no_fov, None)
    assert store.get_chunk(0, 0).preserved == 0
