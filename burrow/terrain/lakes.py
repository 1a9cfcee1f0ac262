"""Lake formation.

Lakes are grown on a scratch copy of the grid with their own automaton, then
filtered by size and by overlap with reserved structure sites before the
survivors are copied onto the real grid.
"""
from __future__ import annotations

import random
from typing import AbstractSet, Dict, List, Optional

from ..logging_utils import get_logger
from .grid import Grid
from .metrics import bump
from .regions import Region, get_all_regions
from .tiles import LiquidKind, TileType

log = get_logger("terrain.lakes")

SEED_PERCENT = 50
ROUNDS = 5


def _grow_lake_map(lake_map: Grid, shallow: TileType, floor_tile: TileType) -> None:
    for _ in range(ROUNDS):
        for x, y in lake_map.interior():
            wet = lake_map.count_neighbours(x, y, shallow)
            tile = lake_map.get(x, y)
            if tile is shallow:
                if wet < 2:
                    lake_map.set(x, y, floor_tile)
            elif tile is floor_tile and wet >= 5:
                lake_map.set(x, y, shallow)


def deepen(grid: Grid, liquid: LiquidKind) -> int:
    """Turn shallow liquid surrounded on all 8 sides by liquid into deep liquid."""
    family = frozenset(liquid.tiles)
    deepened = 0
    for x, y in grid.interior():
        if grid.get(x, y) is liquid.shallow and grid.count_neighbours(x, y, family) == 8:
            grid.set(x, y, liquid.deep)
            deepened += 1
    return deepened


def form_lakes(
    grid: Grid,
    liquid: LiquidKind,
    rng: random.Random,
    floor_tile: TileType,
    min_size: int,
    max_size: int,
    reserved: AbstractSet = frozenset(),
    metrics: Optional[Dict] = None,
) -> List[Region]:
    """Form lakes of ``liquid`` on floor and return the committed lake regions."""
    metrics = metrics if metrics is not None else {}
    shallow = liquid.shallow
    lake_map = grid.copy()
    for x, y in lake_map.interior():
        if lake_map.get(x, y) is floor_tile and rng.randrange(100) < SEED_PERCENT:
            lake_map.set(x, y, shallow)
    _grow_lake_map(lake_map, shallow, floor_tile)

    candidates = get_all_regions(lake_map, shallow)
    log.info(event="lakes_generated", liquid=liquid.value, count=len(candidates))
    lakes: List[Region] = []
    for lake in candidates:
        if not min_size <= lake.size <= max_size:
            bump(metrics, "lakes_rejected")
            log.debug(event="lake_rejected", reason="size", size=lake.size)
            continue
        if reserved and any(t in reserved for t in lake.tiles):
            bump(metrics, "lakes_rejected")
            log.debug(event="lake_rejected", reason="reserved", size=lake.size)
            continue
        lakes.append(lake)
    for lake in lakes:
        grid.fill_coords(lake.tiles, shallow)
    deepened = deepen(grid, liquid)
    bump(metrics, "lakes_formed", len(lakes))
    log.info(event="watering", lakes=len(lakes), rejected=len(candidates) - len(lakes), deep_tiles=deepened)
    return lakes


__all__ = ["form_lakes", "deepen", "SEED_PERCENT", "ROUNDS"]
