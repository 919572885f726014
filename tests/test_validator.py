"""Structural oracle tests on hand-built grids."""

from catacomb.dungeon.validator import find_violations, is_valid

from dungeon_test_utils import VALID_ROOM_ROWS, grid_of, with_cell


def kinds(rows):
    return {v.kind for v in find_violations(grid_of(rows))}


def test_reference_grid_is_valid():
    assert is_valid(grid_of(VALID_ROOM_ROWS))
    assert find_violations(grid_of(VALID_ROOM_ROWS)) == []


def test_room_touching_hall_is_invalid():
    rows = with_cell(with_cell(VALID_ROOM_ROWS, 0, 4, "H"), 1, 4, "H")
    assert not is_valid(grid_of(rows))
    assert "room_touches_hall" in kinds(rows)


def test_isolated_hall_is_invalid():
    rows = with_cell(VALID_ROOM_ROWS, 8, 6, "H")
    assert kinds(rows) == {"isolated_hall"}


def test_door_without_hall_is_bad():
    # East door loses its hall run
    rows = with_cell(with_cell(VALID_ROOM_ROWS, 7, 3, "W"), 8, 3, "W")
    found = kinds(rows)
    assert "bad_door" in found


def test_single_door_room_is_invalid():
    rows = with_cell(with_cell(with_cell(VALID_ROOM_ROWS, 6, 3, "W"), 7, 3, "W"), 8, 3, "W")
    assert kinds(rows) == {"too_few_doors"}


def test_small_room_is_invalid():
    rows = [
        "WWWWWWWW",
        "HWRRRWWW",
        "HDRRRDHH",
        "WWRRRWWW",
        "WWWWWWWW",
    ]
    assert "room_too_small" in kinds(rows)


def test_non_rectangular_room_is_invalid():
    rows = with_cell(VALID_ROOM_ROWS, 5, 5, "W")
    assert "room_not_rectangular" in kinds(rows)


def test_three_doors_on_one_side_is_invalid():
    rows = [
        "WWWWWWWWWWWW",
        "WHHHHHHHWWWW",
        "WDWDWDWWWWWW",
        "WRRRRRRWWWWW",
        "WRRRRRRWWWWW",
        "WRRRRRRWWWWW",
        "WRRRRRRWWWWW",
        "WWWWWWWWWWWW",
    ]
    assert "too_many_doors_on_side" in kinds(rows)


def test_oracle_does_not_mutate():
    grid = grid_of(with_cell(VALID_ROOM_ROWS, 8, 6, "H"))
    before = [list(col) for col in grid]
    is_valid(grid)
    find_violations(grid)
    assert grid == before


def test_violation_to_dict():
    v = find_violations(grid_of(with_cell(VALID_ROOM_ROWS, 8, 6, "H")))[0]
    assert v.to_dict() == {"kind": "isolated_hall", "x": 8, "y": 6, "detail": ""}
