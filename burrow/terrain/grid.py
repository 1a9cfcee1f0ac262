"""Flat row-major tile grid.

``Grid`` is the mutable working surface owned by the generator; callers get a
``GridSnapshot`` (tuples, no setters) once generation is done. Index of
``(x, y)`` is ``x + y * width``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from .tiles import TileType

Coord = Tuple[int, int]
TileMatch = Union[TileType, frozenset, set]

NEIGHBOURS_8: Tuple[Coord, ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)
NEIGHBOURS_4: Tuple[Coord, ...] = ((0, -1), (-1, 0), (1, 0), (0, 1))


def _matches(tile: TileType, match: TileMatch) -> bool:
    if isinstance(match, TileType):
        return tile is match
    return tile in match


class Grid:
    __slots__ = ("width", "height", "tiles", "shore_distance")

    def __init__(self, width: int, height: int, fill: TileType = TileType.EMPTY, tiles: Sequence[TileType] | None = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        if tiles is not None:
            if len(tiles) != width * height:
                raise ValueError("tile sequence does not match grid dimensions")
            self.tiles: List[TileType] = list(tiles)
        else:
            self.tiles = [fill] * (width * height)
        # grass distance-to-water tag per cell, 0 when untagged
        self.shore_distance: List[int] = [0] * (width * height)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Grid":
        """Build a grid from glyph strings (one per row), mostly for tests."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        tiles = []
        for row in rows:
            if len(row) != width:
                raise ValueError("ragged rows")
            tiles.extend(TileType(ch) for ch in row)
        return cls(width, height, tiles=tiles)

    def idx(self, x: int, y: int) -> int:
        return x + y * self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_border(self, x: int, y: int) -> bool:
        return x == 0 or y == 0 or x == self.width - 1 or y == self.height - 1

    def get(self, x: int, y: int) -> TileType:
        return self.tiles[x + y * self.width]

    def set(self, x: int, y: int, tile: TileType) -> None:
        i = x + y * self.width
        self.tiles[i] = tile
        self.shore_distance[i] = 0

    def copy(self) -> "Grid":
        g = Grid(self.width, self.height, tiles=self.tiles)
        g.shore_distance = list(self.shore_distance)
        return g

    def cells(self) -> Iterator[Coord]:
        """Every coordinate in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def interior(self) -> Iterator[Coord]:
        """Row-major coordinates excluding the outer ring."""
        for y in range(1, self.height - 1):
            for x in range(1, self.width - 1):
                yield x, y

    def neighbours8(self, x: int, y: int) -> Iterator[Coord]:
        for dx, dy in NEIGHBOURS_8:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield nx, ny

    def count_neighbours(self, x: int, y: int, match: TileMatch) -> int:
        """Number of the 8 neighbours matching ``match``; out of bounds never counts."""
        w, h, tiles = self.width, self.height, self.tiles
        count = 0
        for dx, dy in NEIGHBOURS_8:
            nx, ny = x + dx, y + dy
            if 0 <= nx < w and 0 <= ny < h and _matches(tiles[nx + ny * w], match):
                count += 1
        return count

    def count(self, match: TileMatch) -> int:
        return sum(1 for t in self.tiles if _matches(t, match))

    def coords_of(self, match: TileMatch) -> List[Coord]:
        return [(x, y) for x, y in self.cells() if _matches(self.get(x, y), match)]

    def fill_coords(self, coords: Iterable[Coord], tile: TileType) -> None:
        for x, y in coords:
            self.set(x, y, tile)

    def to_rows(self) -> List[str]:
        w = self.width
        return ["".join(t.glyph for t in self.tiles[y * w:(y + 1) * w]) for y in range(self.height)]

    def snapshot(self) -> "GridSnapshot":
        return GridSnapshot(self.width, self.height, tuple(self.tiles), tuple(self.shore_distance))

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.width, self.height, self.tiles) == (other.width, other.height, other.tiles)

    def __repr__(self):
        return f"Grid({self.width}x{self.height})"


@dataclass(frozen=True)
class GridSnapshot:
    """Immutable view of a finished grid handed to consumers."""

    width: int
    height: int
    tiles: Tuple[TileType, ...]
    shore_distance: Tuple[int, ...]

    def tile_at(self, x: int, y: int) -> TileType:
        return self.tiles[x + y * self.width]

    def distance_tag(self, x: int, y: int) -> int:
        return self.shore_distance[x + y * self.width]

    def to_rows(self) -> List[str]:
        w = self.width
        return ["".join(t.glyph for t in self.tiles[y * w:(y + 1) * w]) for y in range(self.height)]

    def thaw(self) -> Grid:
        g = Grid(self.width, self.height, tiles=self.tiles)
        g.shore_distance = list(self.shore_distance)
        return g


__all__ = ["Grid", "GridSnapshot", "Coord", "NEIGHBOURS_4", "NEIGHBOURS_8"]
