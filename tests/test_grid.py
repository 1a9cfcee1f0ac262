import dataclasses

import pytest

from burrow.terrain.grid import Grid
from burrow.terrain.tiles import TileType

ROWS = [
    "#####",
    "#.~.#",
    "#####",
]


def test_from_rows_round_trip_and_indexing():
    g = Grid.from_rows(ROWS)
    assert (g.width, g.height) == (5, 3)
    assert g.get(2, 1) is TileType.SHALLOW_WATER
    assert g.idx(2, 1) == 7
    assert g.to_rows() == ROWS


def test_rejects_bad_dimensions():
    with pytest.raises(ValueError):
        Grid(0, 5)
    with pytest.raises(ValueError):
        Grid.from_rows(["###", "##"])
    with pytest.raises(ValueError):
        Grid(3, 3, tiles=[TileType.WALL] * 8)


def test_iteration_order_is_row_major():
    g = Grid(4, 3)
    cells = list(g.cells())
    assert cells[:5] == [(0, 0), (1, 0), (2, 0), (3, 0), (0, 1)]
    assert list(g.interior()) == [(1, 1), (2, 1)]


def test_count_neighbours_ignores_out_of_bounds():
    g = Grid(3, 3, fill=TileType.WALL)
    assert g.count_neighbours(0, 0, TileType.WALL) == 3
    assert g.count_neighbours(1, 1, TileType.WALL) == 8
    assert g.count_neighbours(1, 1, frozenset({TileType.FLOOR})) == 0


def test_set_clears_shore_distance():
    g = Grid.from_rows(ROWS)
    g.shore_distance[g.idx(1, 1)] = 4
    g.set(1, 1, TileType.SHORT_GRASS)
    assert g.shore_distance[g.idx(1, 1)] == 0


def test_snapshot_is_immutable_and_thaws_to_equal_grid():
    g = Grid.from_rows(ROWS)
    snap = g.snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.width = 9
    assert isinstance(snap.tiles, tuple)
    g.set(1, 1, TileType.WALL)
    assert snap.tile_at(1, 1) is TileType.FLOOR, "snapshot must not see later edits"
    assert snap.thaw() == Grid.from_rows(ROWS)
    assert snap.to_rows() == ROWS


def test_copy_is_independent():
    g = Grid.from_rows(ROWS)
    c = g.copy()
    c.set(1, 1, TileType.WALL)
    assert g.get(1, 1) is TileType.FLOOR
    assert g != c
