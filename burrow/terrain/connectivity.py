"""Connectivity repair: make every floor region reachable from every other.

Strategy:
  * Sort floor regions by size; the largest is the main region.
  * Repeatedly pick the closest pair of edge tiles (squared distance) between
    the already-connected set and any unconnected region.
  * Rasterise a Bresenham line between them and dig a disk of floor at every
    point. Longer lines get a wider disk so corridors do not look drawn in
    pencil.
  * A line long enough to need a disk of ``MAX_DIG_RADIUS`` or more rejects
    the whole level (``TransientStructural``); the orchestrator regenerates.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from .errors import TransientStructural
from .grid import Coord, Grid
from .metrics import bump
from .regions import Match, Region, get_all_regions, get_regions_matching
from .tiles import TileType

log = get_logger("terrain.connectivity")

MAX_DIG_RADIUS = 4
PATH_LENGTH_PER_RADIUS = 6


def bresenham(a: Coord, b: Coord) -> List[Coord]:
    """Points on the rasterised line from ``a`` to ``b``, both ends included."""
    x0, y0 = a
    x1, y1 = b
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    points = []
    while True:
        points.append((x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return points


def dig_circle(grid: Grid, center: Coord, radius: int, floor_tile: TileType) -> None:
    """Set floor on the disk around ``center``; the outer ring is never dug."""
    cx, cy = center
    w, h = grid.width, grid.height
    for dx in range(-radius, radius):
        for dy in range(-radius, radius):
            if dx * dx + dy * dy <= radius * radius:
                x, y = cx + dx, cy + dy
                if 0 < x < w - 1 and 0 < y < h - 1:
                    grid.set(x, y, floor_tile)


def _closest_pair(connected: List[Region], remaining: List[Region]) -> Tuple[Coord, Coord, Region, Region]:
    best: Optional[Tuple[Coord, Coord, Region, Region]] = None
    best_distance = 0
    for region_a in connected:
        for region_b in remaining:
            if region_a.is_connected(region_b.id):
                continue
            for ax, ay in region_a.edge_tiles:
                for bx, by in region_b.edge_tiles:
                    d = (ax - bx) ** 2 + (ay - by) ** 2
                    if best is None or d < best_distance:
                        best_distance = d
                        best = ((ax, ay), (bx, by), region_a, region_b)
    if best is None:
        raise TransientStructural("no_connection_candidate")
    return best


def dig_path(grid: Grid, a: Coord, b: Coord, floor_tile: TileType) -> int:
    """Dig a corridor from ``a`` to ``b``; returns the radius used.

    Raises ``TransientStructural`` without touching the grid if the required
    radius reaches ``MAX_DIG_RADIUS``.
    """
    path = bresenham(a, b)
    radius = len(path) // PATH_LENGTH_PER_RADIUS
    if radius >= MAX_DIG_RADIUS:
        raise TransientStructural("dig_radius_exceeded", radius=radius, start=a, end=b)
    radius = max(1, radius)
    for point in path:
        dig_circle(grid, point, radius, floor_tile)
    return radius


def connect_floor_regions(grid: Grid, floor_tile: TileType, metrics: Optional[Dict] = None) -> int:
    """Join all ``floor_tile`` regions into one; returns the number of corridors dug."""
    metrics = metrics if metrics is not None else {}
    regions = get_all_regions(grid, floor_tile)
    if not regions:
        raise TransientStructural("no_floor")
    dug = 0
    while len(regions) > 1:
        log.info(event="connecting_regions", regions=len(regions))
        before = len(regions)
        regions.sort(key=lambda r: r.size, reverse=True)
        main = regions[0]
        main.is_main_region = True
        main.is_connected_to_main_region = True
        connected = [main]
        remaining = regions[1:]
        while remaining:
            tile_a, tile_b, region_a, region_b = _closest_pair(connected, remaining)
            radius = dig_path(grid, tile_a, tile_b, floor_tile)
            region_a.connect(region_b)
            region_b.is_connected_to_main_region = True
            connected.append(region_b)
            remaining.remove(region_b)
            dug += 1
            bump(metrics, "corridors_dug")
            if metrics and radius > metrics.get("max_dig_radius", 0):
                metrics["max_dig_radius"] = radius
            log.debug(event="digging", start=tile_a, end=tile_b, radius=radius)
        bump(metrics, "regions_connected", before - 1)
        regions = get_all_regions(grid, floor_tile)
        if len(regions) >= before:
            raise TransientStructural("connection_stalled", regions=len(regions))
    return dug


def count_components(grid: Grid, match: Match) -> int:
    return len(get_regions_matching(grid, match))


def is_connected(grid: Grid, match: Match) -> bool:
    """True if the tiles satisfying ``match`` form at most one 4-connected region."""
    return count_components(grid, match) <= 1


__all__ = [
    "MAX_DIG_RADIUS",
    "bresenham",
    "dig_circle",
    "dig_path",
    "connect_floor_regions",
    "count_components",
    "is_connected",
]
