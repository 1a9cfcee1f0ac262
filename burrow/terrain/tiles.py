"""Tile kinds, tile families and their classification predicates.

Each tile's enum value is the single-character glyph used by the CLI and the
HTTP ``rows`` payload, so ``TileType(ch)`` decodes a glyph.

Liquids and flora are grouped into families (``LiquidKind``, ``FloraKind``)
which carry their shallow/deep or small/large pair. Passes that work on a
family take the kind and read the pair from it, so a mismatched pair cannot be
built. The free variant mappings below exist for code that only holds a tile;
they raise ``InvalidTileOperation`` when handed a tile outside the family.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import InvalidTileOperation


class TileType(Enum):
    EMPTY = " "
    WALL = "#"
    FLOOR = "."
    SHALLOW_WATER = "~"
    DEEP_WATER = "="
    SHALLOW_LAVA = "%"
    DEEP_LAVA = "&"
    SHORT_GRASS = ","
    TALL_GRASS = '"'
    SMALL_MUSHROOM = "m"
    LARGE_MUSHROOM = "M"
    THIN_WEBS = ":"
    THICK_WEBS = ";"
    EGG_SAC = "o"
    FIRE = "*"
    CAMP_SEAT = "h"
    TENT_TOP_LEFT = "/"
    TENT_TOP_CENTER = "^"
    TENT_TOP_RIGHT = "\\"
    TENT_BOTTOM_LEFT = "["
    TENT_BOTTOM_CENTER = "_"
    TENT_BOTTOM_RIGHT = "]"
    HIVE_WALL = "X"
    HIVE_FLOOR = "+"

    @property
    def glyph(self) -> str:
        return self.value


class LiquidKind(Enum):
    WATER = "water"
    LAVA = "lava"

    @property
    def shallow(self) -> TileType:
        return _LIQUID_PAIRS[self][0]

    @property
    def deep(self) -> TileType:
        return _LIQUID_PAIRS[self][1]

    @property
    def tiles(self) -> Tuple[TileType, TileType]:
        return _LIQUID_PAIRS[self]


class FloraKind(Enum):
    GRASS = "grass"
    MUSHROOM = "mushroom"

    @property
    def small(self) -> TileType:
        return _FLORA_PAIRS[self][0]

    @property
    def large(self) -> TileType:
        return _FLORA_PAIRS[self][1]

    @property
    def tiles(self) -> Tuple[TileType, TileType]:
        return _FLORA_PAIRS[self]


_LIQUID_PAIRS: Dict[LiquidKind, Tuple[TileType, TileType]] = {
    LiquidKind.WATER: (TileType.SHALLOW_WATER, TileType.DEEP_WATER),
    LiquidKind.LAVA: (TileType.SHALLOW_LAVA, TileType.DEEP_LAVA),
}
_FLORA_PAIRS: Dict[FloraKind, Tuple[TileType, TileType]] = {
    FloraKind.GRASS: (TileType.SHORT_GRASS, TileType.TALL_GRASS),
    FloraKind.MUSHROOM: (TileType.SMALL_MUSHROOM, TileType.LARGE_MUSHROOM),
}

# wall tile -> matching floor tile for each terrain archetype
STRUCTURAL_PAIRS: Dict[TileType, TileType] = {
    TileType.WALL: TileType.FLOOR,
    TileType.HIVE_WALL: TileType.HIVE_FLOOR,
}

WALLS = frozenset(STRUCTURAL_PAIRS)
FLOORS = frozenset(STRUCTURAL_PAIRS.values())
LIQUIDS = frozenset(t for pair in _LIQUID_PAIRS.values() for t in pair)
FLORA = frozenset(t for pair in _FLORA_PAIRS.values() for t in pair)
TENT = frozenset(
    {
        TileType.TENT_TOP_LEFT,
        TileType.TENT_TOP_CENTER,
        TileType.TENT_TOP_RIGHT,
        TileType.TENT_BOTTOM_LEFT,
        TileType.TENT_BOTTOM_CENTER,
        TileType.TENT_BOTTOM_RIGHT,
    }
)
STRUCTURES = TENT | {TileType.THIN_WEBS, TileType.THICK_WEBS, TileType.EGG_SAC, TileType.FIRE, TileType.CAMP_SEAT}

# 0 = see-through, 1 = fully opaque
_OPACITY: Dict[TileType, float] = {
    TileType.EMPTY: 1.0,
    TileType.WALL: 1.0,
    TileType.HIVE_WALL: 1.0,
    TileType.TALL_GRASS: 0.6,
    TileType.LARGE_MUSHROOM: 0.5,
    TileType.THICK_WEBS: 0.4,
    TileType.THIN_WEBS: 0.1,
    TileType.EGG_SAC: 0.3,
}
for _t in TENT:
    _OPACITY[_t] = 1.0


def deep_variant(tile: TileType) -> TileType:
    for shallow, deep in _LIQUID_PAIRS.values():
        if tile in (shallow, deep):
            return deep
    raise InvalidTileOperation(f"{tile.name} has no deep variant")


def shallow_variant(tile: TileType) -> TileType:
    for shallow, deep in _LIQUID_PAIRS.values():
        if tile in (shallow, deep):
            return shallow
    raise InvalidTileOperation(f"{tile.name} has no shallow variant")


def large_variant(tile: TileType) -> TileType:
    for small, large in _FLORA_PAIRS.values():
        if tile in (small, large):
            return large
    raise InvalidTileOperation(f"{tile.name} has no large variant")


def small_variant(tile: TileType) -> TileType:
    for small, large in _FLORA_PAIRS.values():
        if tile in (small, large):
            return small
    raise InvalidTileOperation(f"{tile.name} has no small variant")


def floor_for_wall(tile: TileType) -> TileType:
    try:
        return STRUCTURAL_PAIRS[tile]
    except KeyError:
        raise InvalidTileOperation(f"{tile.name} is not a wall tile") from None


def liquid_kind_of(tile: TileType) -> Optional[LiquidKind]:
    for kind, pair in _LIQUID_PAIRS.items():
        if tile in pair:
            return kind
    return None


def flora_kind_of(tile: TileType) -> Optional[FloraKind]:
    for kind, pair in _FLORA_PAIRS.items():
        if tile in pair:
            return kind
    return None


def is_liquid(tile: TileType) -> bool:
    return tile in LIQUIDS


def is_flora(tile: TileType) -> bool:
    return tile in FLORA


def is_structure(tile: TileType) -> bool:
    return tile in STRUCTURES


def is_solid(tile: TileType) -> bool:
    """Walls and unset tiles: nothing can stand there."""
    return tile in WALLS or tile is TileType.EMPTY


def is_safe(tile: TileType) -> bool:
    """True if the tile can be traversed by the player without harm."""
    return not is_solid(tile) and liquid_kind_of(tile) is not LiquidKind.LAVA


def opacity(tile: TileType) -> float:
    return _OPACITY.get(tile, 0.0)


def is_opaque(tile: TileType) -> bool:
    return opacity(tile) >= 1.0


__all__ = [
    "TileType",
    "LiquidKind",
    "FloraKind",
    "STRUCTURAL_PAIRS",
    "WALLS",
    "FLOORS",
    "LIQUIDS",
    "FLORA",
    "STRUCTURES",
    "deep_variant",
    "shallow_variant",
    "large_variant",
    "small_variant",
    "floor_for_wall",
    "liquid_kind_of",
    "flora_kind_of",
    "is_liquid",
    "is_flora",
    "is_structure",
    "is_solid",
    "is_safe",
    "opacity",
    "is_opaque",
]
