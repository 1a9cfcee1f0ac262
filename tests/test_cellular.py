import random

from burrow.terrain.cellular import random_fill, remove_unseen_walls, seal_edges, smooth, step
from burrow.terrain.grid import Grid
from burrow.terrain.tiles import TileType

from terrain_test_utils import border_coords, room

WALL = TileType.WALL
FLOOR = TileType.FLOOR


def test_random_fill_extremes_and_determinism():
    g = Grid(12, 8)
    random_fill(g, random.Random(1), 0, WALL, FLOOR)
    assert g.count(FLOOR) == 96
    random_fill(g, random.Random(1), 100, WALL, FLOOR)
    assert g.count(WALL) == 96
    a, b = Grid(12, 8), Grid(12, 8)
    random_fill(a, random.Random(5), 45, WALL, FLOOR)
    random_fill(b, random.Random(5), 45, WALL, FLOOR)
    assert a == b


def test_seal_edges():
    g = Grid(6, 5, fill=FLOOR)
    seal_edges(g, WALL)
    assert all(g.get(x, y) is WALL for x, y in border_coords(6, 5))
    assert g.count(FLOOR) == 4 * 3


def test_step_lone_wall_collapses():
    g = Grid(5, 5, fill=FLOOR)
    g.set(2, 2, WALL)
    step(g, WALL, FLOOR)
    assert g.get(2, 2) is FLOOR


def test_step_wall_survives_with_two_or_three_wall_neighbours():
    for border_walls in ([(0, 0), (2, 2)], [(0, 0), (1, 0), (2, 2)]):
        g = Grid(3, 3, fill=FLOOR)
        g.fill_coords([(1, 1), *border_walls], WALL)
        step(g, WALL, FLOOR)
        assert g.get(1, 1) is WALL, border_walls


def test_step_enclosed_floor_fills_and_border_untouched():
    g = Grid(5, 5, fill=WALL)
    g.set(2, 2, FLOOR)
    step(g, WALL, FLOOR)
    assert g.get(2, 2) is WALL
    g = Grid(5, 5, fill=FLOOR)
    step(g, WALL, FLOOR)
    assert all(g.get(x, y) is FLOOR for x, y in border_coords(5, 5))


def test_smooth_thresholds():
    # centre has exactly four wall neighbours: unchanged either way
    for centre in "#.":
        g = Grid.from_rows(["##.", "." + centre + ".", "#.#"])
        smooth(g, WALL, FLOOR)
        assert g.get(1, 1) is TileType(centre)
    g = Grid.from_rows(["###", "#..", "#.#"])
    smooth(g, WALL, FLOOR)
    assert g.get(1, 1) is WALL
    g = Grid.from_rows(["#..", "##.", "..#"])
    smooth(g, WALL, FLOOR)
    assert g.get(1, 1) is FLOOR


def test_remove_unseen_walls():
    g = Grid(7, 7, fill=WALL)
    g.set(3, 3, FLOOR)
    removed = remove_unseen_walls(g, WALL)
    assert removed == 16
    assert g.count(TileType.EMPTY) == 16
    assert all(g.get(x, y) is WALL for x, y in border_coords(7, 7))
    assert all(g.get(x, y) is WALL for x, y in g.neighbours8(3, 3))


def test_remove_unseen_walls_leaves_visible_walls():
    g = Grid.from_rows(room(6, 6))
    assert remove_unseen_walls(g, WALL) == 0
    assert g.count(TileType.EMPTY) == 0


def test_step_updates_in_place_in_scan_order():
    # (2,1) only reaches five wall neighbours because (1,1) already turned
    g = Grid.from_rows(["####.", "#....", "#..#."])
    step(g, WALL, FLOOR)
    assert g.to_rows()[1] == "###.."
