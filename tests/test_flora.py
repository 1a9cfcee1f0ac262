import random

from burrow.terrain.flora import grow, plant, tag_shore_distance
from burrow.terrain.grid import Grid
from burrow.terrain.tiles import FloraKind, TileType

from terrain_test_utils import room

FLOOR = TileType.FLOOR


def test_plant_density_extremes():
    g = Grid.from_rows(room(8, 6))
    assert plant(g, random.Random(1), FloraKind.GRASS, 0, FLOOR) == 0
    assert plant(g, random.Random(1), FloraKind.GRASS, 100, FLOOR) == 24
    assert g.count(TileType.SHORT_GRASS) == 24


def test_plant_only_on_floor():
    g = Grid.from_rows(["######", "#~..~#", "######"])
    plant(g, random.Random(1), FloraKind.MUSHROOM, 100, FLOOR)
    assert g.to_rows()[1] == "#~mm~#"


def test_grass_next_to_water_grows_tall():
    g = Grid.from_rows(["#####", "#~,.#", "#...#", "#...#", "#####"])
    grow(g, FloraKind.GRASS, FLOOR)
    assert g.get(2, 1) is TileType.TALL_GRASS
    # floor beside tall grass sprouts
    assert g.get(3, 1) is TileType.SHORT_GRASS


def test_lone_grass_dies_back():
    g = Grid.from_rows(room(5, 5))
    g.set(2, 2, TileType.SHORT_GRASS)
    grow(g, FloraKind.GRASS, FLOOR)
    assert g.count(TileType.SHORT_GRASS) == 0
    assert g.count(TileType.TALL_GRASS) == 0


def test_dense_mushrooms_grow_large():
    g = Grid.from_rows(room(7, 7, floor="m"))
    grow(g, FloraKind.MUSHROOM, FLOOR)
    assert g.count(TileType.LARGE_MUSHROOM) > 0


def test_lone_mushroom_withers():
    g = Grid.from_rows(room(5, 5))
    g.set(2, 2, TileType.SMALL_MUSHROOM)
    grow(g, FloraKind.MUSHROOM, FLOOR)
    assert g.count(TileType.SMALL_MUSHROOM) == 0


def test_shore_distance_tags():
    g = Grid.from_rows(["###############", "#~,,,,,,,,,,,,#", "###############"])
    tagged = tag_shore_distance(g, 10)
    assert tagged == 8
    assert g.shore_distance[g.idx(2, 1)] == 2
    assert g.shore_distance[g.idx(9, 1)] == 9
    assert g.shore_distance[g.idx(10, 1)] == 0
    # re-setting a tile drops its tag
    g.set(2, 1, FLOOR)
    assert g.shore_distance[g.idx(2, 1)] == 0


def test_shore_distance_tags_only_grass():
    g = Grid.from_rows(["######", "#~.m,#", "######"])
    tag_shore_distance(g, 10)
    assert g.shore_distance[g.idx(2, 1)] == 0
    assert g.shore_distance[g.idx(3, 1)] == 0
    assert g.shore_distance[g.idx(4, 1)] == 4
