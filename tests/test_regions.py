from burrow.terrain.grid import Grid
from burrow.terrain.regions import (
    Region,
    clean_up_regions,
    flood_fill,
    get_all_regions,
    get_region,
    is_edge_tile,
)
from burrow.terrain.tiles import TileType

from terrain_test_utils import room

FLOOR = TileType.FLOOR
WALL = TileType.WALL

TWO_POCKETS = [
    "#######",
    "#..#..#",
    "#..#..#",
    "#######",
]

CLEANUP = [
    "##########",
    "#....#..##",
    "#....#..##",
    "#....#####",
    "##########",
]


def test_regions_in_raster_order_with_counter_ids():
    regions = get_all_regions(Grid.from_rows(TWO_POCKETS), FLOOR)
    assert [r.id for r in regions] == [0, 1]
    assert (1, 1) in regions[0].tiles and (4, 1) in regions[1].tiles
    assert [r.size for r in regions] == [4, 4]
    # every tile of a 2x2 pocket touches a wall
    assert sorted(regions[0].edge_tiles) == sorted(regions[0].tiles)


def test_flood_fill_is_four_connected():
    g = Grid.from_rows(["####", "#.##", "##.#", "####"])
    assert flood_fill(g, (1, 1), FLOOR) == [(1, 1)]
    assert len(get_all_regions(g, FLOOR)) == 2


def test_region_reaches_row_zero_through_neighbours():
    g = Grid.from_rows(["#.##", "#..#", "####"])
    regions = get_all_regions(g, FLOOR)
    assert len(regions) == 1
    assert (1, 0) in regions[0].tiles


def test_is_edge_tile():
    g = Grid.from_rows(room(5, 5))
    assert is_edge_tile(g, 0, 0), "grid boundary counts as edge"
    assert is_edge_tile(g, 1, 1)
    assert not is_edge_tile(g, 2, 2)
    assert not is_edge_tile(g, 1, 1, frozenset({WALL, FLOOR}))


def test_get_region_from_start_tile():
    g = Grid.from_rows(TWO_POCKETS)
    r = get_region(g, (5, 2))
    assert sorted(r.tiles) == [(4, 1), (4, 2), (5, 1), (5, 2)]
    assert r.contains((4, 1)) and not r.contains((1, 1))


def test_region_connect_is_symmetric():
    a = Region(id=0, tiles=[(1, 1)], edge_tiles=[(1, 1)])
    b = Region(id=1, tiles=[(3, 3)], edge_tiles=[(3, 3)])
    a.connect(b)
    a.connect(b)
    assert a.connected_regions == [1] and b.connected_regions == [0]
    assert a.is_connected(1) and b.is_connected(0)


def test_clean_up_removes_small_regions_only():
    g = Grid.from_rows(CLEANUP)
    removed = clean_up_regions(g, FLOOR, WALL, 4)
    assert removed == 1
    assert g.count(FLOOR) == 12
    assert g.get(6, 1) is WALL


def test_clean_up_is_idempotent():
    g = Grid.from_rows(CLEANUP)
    clean_up_regions(g, FLOOR, WALL, 4)
    before = g.copy()
    assert clean_up_regions(g, FLOOR, WALL, 4) == 0
    assert g == before


def test_clean_up_monotonic_in_threshold():
    counts = []
    for threshold in (0, 4, 11, 12):
        g = Grid.from_rows(CLEANUP)
        clean_up_regions(g, FLOOR, WALL, threshold)
        counts.append(g.count(FLOOR))
    assert counts == sorted(counts, reverse=True), f"floor count grew with threshold: {counts}"
    assert counts == [16, 12, 12, 0]


def test_wall_cleanup_leaves_no_small_wall_region():
    g = Grid.from_rows(room(12, 9))
    g.set(3, 3, WALL)
    for x in range(6, 10):
        for y in range(3, 6):
            g.set(x, y, WALL)
    assert clean_up_regions(g, WALL, FLOOR, 4) == 1
    assert g.get(3, 3) is FLOOR
    assert all(r.size > 4 for r in get_all_regions(g, WALL))
