"""Cellular automaton passes that turn noise into cave structure.

All passes mutate the grid in place, visiting interior cells in row-major
order, so a cell sees the already-updated state of cells scanned before it.
The outer ring is never touched except by ``random_fill`` and ``seal_edges``.
"""
from __future__ import annotations

import random

from ..logging_utils import get_logger
from .grid import Grid
from .tiles import TileType

log = get_logger("terrain.cellular")


def random_fill(grid: Grid, rng: random.Random, fill_percent: int, wall_tile: TileType, floor_tile: TileType) -> None:
    """Set every cell to wall with probability ``fill_percent``/100, else floor."""
    log.debug(event="seeding", fill_percent=fill_percent)
    tiles = grid.tiles
    for i in range(len(tiles)):
        tiles[i] = wall_tile if rng.randrange(100) < fill_percent else floor_tile


def seal_edges(grid: Grid, wall_tile: TileType) -> None:
    w, h = grid.width, grid.height
    for x in range(w):
        grid.set(x, 0, wall_tile)
        grid.set(x, h - 1, wall_tile)
    for y in range(h):
        grid.set(0, y, wall_tile)
        grid.set(w - 1, y, wall_tile)


def step(grid: Grid, wall_tile: TileType, floor_tile: TileType) -> None:
    """One generation of the B5678/S45678 rule.

    A wall collapses to floor with fewer than 2 wall neighbours and otherwise
    stays; anything else becomes a wall with 5+ wall neighbours.
    """
    for x, y in grid.interior():
        walls = grid.count_neighbours(x, y, wall_tile)
        if grid.get(x, y) is wall_tile:
            if walls < 2:
                grid.set(x, y, floor_tile)
        elif walls >= 5:
            grid.set(x, y, wall_tile)


def smooth(grid: Grid, wall_tile: TileType, floor_tile: TileType) -> None:
    """Single-threshold pass: wall above 4 wall neighbours, floor below, 4 unchanged."""
    for x, y in grid.interior():
        walls = grid.count_neighbours(x, y, wall_tile)
        if walls > 4:
            grid.set(x, y, wall_tile)
        elif walls < 4:
            grid.set(x, y, floor_tile)


def remove_unseen_walls(grid: Grid, wall_tile: TileType) -> int:
    """Blank out interior walls with no non-wall neighbour; returns how many."""
    solid = frozenset({wall_tile, TileType.EMPTY})
    flagged = [(x, y) for x, y in grid.interior() if grid.get(x, y) is wall_tile and grid.count_neighbours(x, y, solid) == 8]
    grid.fill_coords(flagged, TileType.EMPTY)
    log.debug(event="removing_unseen_walls", count=len(flagged))
    return len(flagged)


__all__ = ["random_fill", "seal_edges", "step", "smooth", "remove_unseen_walls"]
