"""Connected-region analysis.

Regions are maximal 4-connected groups of matching tiles found by breadth
first flood fill. They are throwaway analysis results: every pass that needs
them recomputes them from the current grid. Region ids are a counter within a
single ``get_all_regions`` call, so discovery order (row-major scan, starting
cells taken from row/column 1 onward) fully determines them.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Set, Union

from ..logging_utils import get_logger
from .grid import NEIGHBOURS_4, NEIGHBOURS_8, Coord, Grid
from .tiles import TileType

log = get_logger("terrain.regions")

Match = Union[TileType, FrozenSet[TileType], Set[TileType], Callable[[TileType], bool]]


def _predicate(match: Match) -> Callable[[TileType], bool]:
    if isinstance(match, TileType):
        return lambda t: t is match
    if isinstance(match, (set, frozenset)):
        return lambda t: t in match
    return match


@dataclass
class Region:
    id: int
    tiles: List[Coord]
    edge_tiles: List[Coord]
    connected_regions: List[int] = field(default_factory=list)
    is_main_region: bool = False
    is_connected_to_main_region: bool = False
    _tile_set: Optional[Set[Coord]] = field(default=None, repr=False, compare=False)

    @property
    def size(self) -> int:
        return len(self.tiles)

    def contains(self, tile: Coord) -> bool:
        if self._tile_set is None:
            self._tile_set = set(self.tiles)
        return tile in self._tile_set

    def is_connected(self, other_id: int) -> bool:
        return other_id in self.connected_regions

    def connect(self, other: "Region") -> None:
        """Record a symmetric connection between two regions."""
        if other.id not in self.connected_regions:
            self.connected_regions.append(other.id)
        if self.id not in other.connected_regions:
            other.connected_regions.append(self.id)


def is_edge_tile(grid: Grid, x: int, y: int, match: Match | None = None) -> bool:
    """True if any 8-neighbour is off the grid or does not belong with (x, y).

    Without ``match`` a neighbour belongs when it has the same tile type.
    """
    pred = _predicate(match) if match is not None else None
    own = grid.get(x, y)
    for dx, dy in NEIGHBOURS_8:
        nx, ny = x + dx, y + dy
        if not grid.in_bounds(nx, ny):
            return True
        other = grid.get(nx, ny)
        if pred is None:
            if other is not own:
                return True
        elif not pred(other):
            return True
    return False


def flood_fill(grid: Grid, start: Coord, match: Match, visited: bytearray | None = None) -> List[Coord]:
    """Breadth-first 4-connected fill from ``start`` over tiles satisfying ``match``.

    ``visited`` (one byte per cell) is updated in place when given, letting
    callers share it across several fills.
    """
    pred = _predicate(match)
    w, h = grid.width, grid.height
    if visited is None:
        visited = bytearray(w * h)
    sx, sy = start
    visited[sx + sy * w] = 1
    q = deque([start])
    out: List[Coord] = []
    while q:
        cx, cy = q.popleft()
        out.append((cx, cy))
        for dx, dy in NEIGHBOURS_4:
            nx, ny = cx + dx, cy + dy
            if 0 <= nx < w and 0 <= ny < h:
                i = nx + ny * w
                if not visited[i] and pred(grid.tiles[i]):
                    visited[i] = 1
                    q.append((nx, ny))
    return out


def get_regions_matching(grid: Grid, match: Match) -> List[Region]:
    pred = _predicate(match)
    w, h = grid.width, grid.height
    visited = bytearray(w * h)
    regions: List[Region] = []
    for y in range(1, h):
        for x in range(1, w):
            i = x + y * w
            if visited[i] or not pred(grid.tiles[i]):
                continue
            tiles = flood_fill(grid, (x, y), pred, visited)
            edges = [t for t in tiles if is_edge_tile(grid, t[0], t[1], pred)]
            regions.append(Region(id=len(regions), tiles=tiles, edge_tiles=edges))
    return regions


def get_all_regions(grid: Grid, tile_type: TileType) -> List[Region]:
    """Every maximal region of ``tile_type``, in raster discovery order."""
    return get_regions_matching(grid, tile_type)


def get_region(grid: Grid, start: Coord) -> Region:
    """Region containing ``start``, of the start tile's type."""
    tile_type = grid.get(*start)
    tiles = flood_fill(grid, start, tile_type)
    edges = [t for t in tiles if is_edge_tile(grid, t[0], t[1])]
    return Region(id=0, tiles=tiles, edge_tiles=edges)


def clean_up_regions(grid: Grid, source: TileType, replacement: TileType, size_threshold: int) -> int:
    """Relabel every ``source`` region of at most ``size_threshold`` tiles.

    Returns the number of regions removed.
    """
    removed = 0
    for region in get_all_regions(grid, source):
        if region.size <= size_threshold:
            grid.fill_coords(region.tiles, replacement)
            removed += 1
    log.debug(event="cleaning", source=source.name, replacement=replacement.name, removed=removed)
    return removed


__all__ = [
    "Region",
    "is_edge_tile",
    "flood_fill",
    "get_regions_matching",
    "get_all_regions",
    "get_region",
    "clean_up_regions",
]
