"""Discrete structures: bandit camps and spider nests.

Sites are chosen before lakes form so lake placement can steer around them;
the templates are stamped after flora has grown. Candidate regions are the
open chambers of the cave: floor tiles whose eight neighbours are all floor,
grouped into 4-connected regions. Large chambers host camps, small ones
nests. Placement is best effort and a site that does not fit is skipped.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from ..logging_utils import get_logger
from .config import GenerationParameters
from .errors import PlacementFailure
from .grid import Coord, Grid
from .metrics import bump
from .regions import Region, get_all_regions
from .tiles import TileType, is_liquid, is_solid

log = get_logger("terrain.features")

CAMP_RADIUS = 4
NEST_RADIUS = 2
THIN_WEB_PERCENT = 40
THICK_WEB_PERCENT = 20


@dataclass(frozen=True)
class StructureSite:
    kind: str  # "camp" | "nest"
    center: Coord
    footprint: FrozenSet[Coord]
    region: Region


def disk(center: Coord, radius: int) -> List[Coord]:
    cx, cy = center
    out = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if math.isqrt(dx * dx + dy * dy) <= radius:
                out.append((cx + dx, cy + dy))
    return out


def find_candidate_regions(grid: Grid, params: GenerationParameters) -> Tuple[List[Region], List[Region]]:
    """Return (camp candidates, nest candidates) from the grid's open chambers."""
    floor = params.floor_tile
    chambers = Grid(grid.width, grid.height, fill=params.wall_tile)
    for x, y in grid.interior():
        if grid.get(x, y) is floor and grid.count_neighbours(x, y, floor) == 8:
            chambers.set(x, y, floor)
    regions = get_all_regions(chambers, floor)
    large = sorted((r for r in regions if r.size >= params.camp_region_min), key=lambda r: r.size, reverse=True)
    small = [r for r in regions if params.nest_region_min <= r.size <= params.nest_region_max]
    return large, small


def find_clearing(grid: Grid, region: Region, radius: int, taken: Set[Coord]) -> Tuple[Coord, List[Coord]]:
    """First region tile whose radius-``radius`` disk is on the grid, open, and unclaimed."""
    for tile in region.tiles:
        area = disk(tile, radius)
        if all(grid.in_bounds(x, y) and not is_solid(grid.get(x, y)) and (x, y) not in taken for x, y in area):
            return tile, area
    raise PlacementFailure(f"no clearing of radius {radius} in region {region.id}")


def select_sites(grid: Grid, params: GenerationParameters, metrics: Optional[Dict] = None) -> List[StructureSite]:
    metrics = metrics if metrics is not None else {}
    large, small = find_candidate_regions(grid, params)
    sites: List[StructureSite] = []
    taken: Set[Coord] = set()
    plans = []
    if params.features.camps:
        plans.append(("camp", large, CAMP_RADIUS, params.max_camps))
    if params.features.nests:
        plans.append(("nest", small, NEST_RADIUS, params.max_nests))
    for kind, regions, radius, limit in plans:
        placed = 0
        for region in regions:
            if placed >= limit:
                break
            try:
                center, area = find_clearing(grid, region, radius, taken)
            except PlacementFailure as exc:
                bump(metrics, "placements_skipped")
                log.debug(event="placement_skipped", kind=kind, reason=str(exc))
                continue
            footprint = set(area)
            if kind == "nest":
                footprint.update(region.tiles)
                footprint.update(region.edge_tiles)
            taken.update(footprint)
            sites.append(StructureSite(kind, center, frozenset(footprint), region))
            placed += 1
    log.info(event="sites_selected", camps=sum(s.kind == "camp" for s in sites), nests=sum(s.kind == "nest" for s in sites))
    return sites


def reserved_tiles(sites: List[StructureSite]) -> FrozenSet[Coord]:
    out: Set[Coord] = set()
    for s in sites:
        out.update(s.footprint)
    return frozenset(out)


def make_camp(grid: Grid, center: Coord, floor_tile: TileType) -> None:
    cx, cy = center
    grid.fill_coords(disk(center, CAMP_RADIUS), floor_tile)
    grid.set(cx, cy, TileType.FIRE)
    grid.set(cx - 1, cy - 4, TileType.TENT_TOP_LEFT)
    grid.set(cx, cy - 4, TileType.TENT_TOP_CENTER)
    grid.set(cx + 1, cy - 4, TileType.TENT_TOP_RIGHT)
    grid.set(cx - 1, cy - 3, TileType.TENT_BOTTOM_LEFT)
    grid.set(cx, cy - 3, TileType.TENT_BOTTOM_CENTER)
    grid.set(cx + 1, cy - 3, TileType.TENT_BOTTOM_RIGHT)
    grid.set(cx + 2, cy, TileType.CAMP_SEAT)
    grid.set(cx - 2, cy, TileType.CAMP_SEAT)


def _webbable(tile: TileType) -> bool:
    return not is_solid(tile) and not is_liquid(tile)


def make_spider_nest(grid: Grid, site: StructureSite, rng: random.Random, floor_tile: TileType) -> int:
    """Clear the nest and decorate its chamber; returns the number of egg sacs laid."""
    grid.fill_coords(disk(site.center, NEST_RADIUS), floor_tile)
    region = site.region
    for x, y in region.edge_tiles:
        if rng.randrange(100) < THIN_WEB_PERCENT and _webbable(grid.get(x, y)):
            grid.set(x, y, TileType.THIN_WEBS)
    for x, y in region.tiles:
        if rng.randrange(100) < THICK_WEB_PERCENT and _webbable(grid.get(x, y)):
            grid.set(x, y, TileType.THICK_WEBS)
    remaining = rng.randint(1, 4)
    laid = 0
    for x, y in region.tiles:
        if remaining <= 0:
            break
        if grid.get(x, y) is floor_tile:
            grid.set(x, y, TileType.EGG_SAC)
            remaining -= 1
            laid += 1
    return laid


def stamp_structures(
    grid: Grid,
    sites: List[StructureSite],
    rng: random.Random,
    floor_tile: TileType,
    metrics: Optional[Dict] = None,
) -> None:
    metrics = metrics if metrics is not None else {}
    for site in sites:
        if site.kind == "camp":
            make_camp(grid, site.center, floor_tile)
            bump(metrics, "camps_placed")
        else:
            make_spider_nest(grid, site, rng, floor_tile)
            bump(metrics, "nests_placed")
        log.debug(event="structure_placed", kind=site.kind, center=site.center)


__all__ = [
    "CAMP_RADIUS",
    "NEST_RADIUS",
    "StructureSite",
    "disk",
    "find_candidate_regions",
    "find_clearing",
    "select_sites",
    "reserved_tiles",
    "make_camp",
    "make_spider_nest",
    "stamp_structures",
]
