"""Flora planting and growth.

``plant`` scatters the small variant over floor; ``grow`` runs one in-place
neighbourhood pass that thickens dense patches and thins sparse ones. Grass
also favours shorelines and is tagged with its distance to the nearest
shallow water (used for colour gradients by the renderer).
"""
from __future__ import annotations

import math
import random
from typing import Dict

from ..logging_utils import get_logger
from .grid import Grid
from .tiles import FloraKind, LiquidKind, TileType, large_variant

log = get_logger("terrain.flora")

_WATER = frozenset(LiquidKind.WATER.tiles)


def plant(grid: Grid, rng: random.Random, flora: FloraKind, density: int, floor_tile: TileType) -> int:
    """Convert each interior floor cell to small flora with ``density`` percent chance."""
    planted = 0
    for x, y in grid.interior():
        if grid.get(x, y) is floor_tile and rng.randrange(100) < density:
            grid.set(x, y, flora.small)
            planted += 1
    log.debug(event="planting", flora=flora.value, planted=planted)
    return planted


def _grow_grass(grid: Grid, x: int, y: int, floor_tile: TileType) -> None:
    small, large = FloraKind.GRASS.tiles
    n_small = grid.count_neighbours(x, y, small)
    n_large = grid.count_neighbours(x, y, large)
    wet = grid.count_neighbours(x, y, _WATER) > 0
    tile = grid.get(x, y)
    if tile is small:
        if wet or n_small + n_large >= 4:
            grid.set(x, y, large_variant(tile))
        else:
            grid.set(x, y, floor_tile)
        tile = grid.get(x, y)
    if tile is floor_tile:
        if n_large >= 1 or n_small >= 4 or (n_small > 0 and wet):
            grid.set(x, y, small)


def _grow_mushrooms(grid: Grid, x: int, y: int, floor_tile: TileType) -> None:
    small, large = FloraKind.MUSHROOM.tiles
    n_small = grid.count_neighbours(x, y, small)
    n_large = grid.count_neighbours(x, y, large)
    tile = grid.get(x, y)
    if tile is small:
        total = n_small + n_large
        if total > 3:
            grid.set(x, y, large)
        elif total < 3:
            grid.set(x, y, floor_tile)
        tile = grid.get(x, y)
    if tile is floor_tile and n_large >= 1:
        grid.set(x, y, small)


def grow(grid: Grid, flora: FloraKind, floor_tile: TileType) -> None:
    log.debug(event="growing", flora=flora.value)
    rule = _grow_grass if flora is FloraKind.GRASS else _grow_mushrooms
    for x, y in grid.interior():
        rule(grid, x, y, floor_tile)


def tag_shore_distance(grid: Grid, cutoff: int) -> int:
    """Tag grass with ``floor(dist) + 1`` to the nearest shallow water when below ``cutoff``.

    Returns the number of tagged tiles.
    """
    reach = cutoff - 1
    if reach <= 0:
        return 0
    grass = frozenset(FloraKind.GRASS.tiles)
    w, h = grid.width, grid.height
    best: Dict[int, int] = {}
    for sx, sy in grid.coords_of(TileType.SHALLOW_WATER):
        for dy in range(-reach, reach + 1):
            ty = sy + dy
            if not 0 <= ty < h:
                continue
            for dx in range(-reach, reach + 1):
                tx = sx + dx
                d2 = dx * dx + dy * dy
                if not 0 <= tx < w or d2 >= reach * reach:
                    continue
                i = tx + ty * w
                if grid.tiles[i] in grass and (i not in best or d2 < best[i]):
                    best[i] = d2
    for i, d2 in best.items():
        grid.shore_distance[i] = math.isqrt(d2) + 1
    return len(best)


__all__ = ["plant", "grow", "tag_shore_distance"]
