"""Generation parameters, terrain archetypes and runtime settings.

``GenerationParameters`` describes one level's terrain and is immutable.
``TerrainSettings`` covers process-wide knobs (retry cap, metrics, cache) and
is read from the environment, with Flask ``app.config`` taking precedence when
an application context is active.
"""
from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from flask import current_app, has_app_context

from .tiles import STRUCTURAL_PAIRS, FloraKind, LiquidKind, TileType

DEFAULT_SPAWN_EXIT_DISTANCE_SQ = 1000


class FeatureType(Enum):
    NONE = "none"
    CAVERN = "cavern"  # camps and spider nests
    HIVE = "hive"  # nests only

    @property
    def camps(self) -> bool:
        return self is FeatureType.CAVERN

    @property
    def nests(self) -> bool:
        return self in (FeatureType.CAVERN, FeatureType.HIVE)


@dataclass(frozen=True)
class GenerationParameters:
    fill_percent: int = 35
    cleanup_threshold: int = 11
    generations: int = 5
    smoothing: int = 1
    wall_tile: TileType = TileType.WALL
    floor_tile: TileType = TileType.FLOOR
    liquid: Optional[LiquidKind] = None
    lake_min_size: int = 20
    lake_max_size: int = 600
    flora: Optional[FloraKind] = None
    flora_density: int = 25
    shore_distance_cutoff: int = 10
    features: FeatureType = FeatureType.NONE
    max_camps: int = 1
    max_nests: int = 3
    camp_region_min: int = 40
    nest_region_min: int = 4
    nest_region_max: int = 40
    # None scales with the grid, see spawn_exit_distance_sq()
    min_spawn_exit_distance_sq: Optional[int] = None

    def __post_init__(self):
        for name in ("fill_percent", "flora_density"):
            v = getattr(self, name)
            if not 0 <= v <= 100:
                raise ValueError(f"{name} must be within 0..100, got {v}")
        for name in (
            "cleanup_threshold",
            "generations",
            "smoothing",
            "lake_min_size",
            "shore_distance_cutoff",
            "max_camps",
            "max_nests",
            "camp_region_min",
            "nest_region_min",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.min_spawn_exit_distance_sq is not None and self.min_spawn_exit_distance_sq < 0:
            raise ValueError("min_spawn_exit_distance_sq must be non-negative")
        if self.lake_min_size > self.lake_max_size:
            raise ValueError("lake_min_size must not exceed lake_max_size")
        if self.nest_region_min > self.nest_region_max:
            raise ValueError("nest_region_min must not exceed nest_region_max")
        if STRUCTURAL_PAIRS.get(self.wall_tile) is not self.floor_tile:
            raise ValueError(f"{self.wall_tile.name}/{self.floor_tile.name} is not a wall/floor pair")

    def spawn_exit_distance_sq(self, width: int, height: int) -> int:
        """Squared spawn/exit separation for a grid of this size.

        An explicit value is used as is. The default is 1000, capped at a quarter
        of the largest squared distance between two interior tiles.
        """
        if self.min_spawn_exit_distance_sq is not None:
            return self.min_spawn_exit_distance_sq
        max_sq = (width - 3) ** 2 + (height - 3) ** 2
        return min(DEFAULT_SPAWN_EXIT_DISTANCE_SQ, max_sq // 4)

    def replace(self, **changes) -> "GenerationParameters":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        out = {}
        for f in dataclasses.fields(self):
            v = getattr(self, f.name)
            out[f.name] = v.value if isinstance(v, Enum) else v
        return out


ARCHETYPES: Dict[str, GenerationParameters] = {
    "bare": GenerationParameters(),
    "cavern": GenerationParameters(
        liquid=LiquidKind.WATER,
        flora=FloraKind.GRASS,
        features=FeatureType.CAVERN,
    ),
    "fungal": GenerationParameters(
        flora=FloraKind.MUSHROOM,
        flora_density=30,
        features=FeatureType.CAVERN,
    ),
    "magma": GenerationParameters(
        liquid=LiquidKind.LAVA,
        lake_min_size=30,
        flora=FloraKind.GRASS,
        flora_density=15,
    ),
    "hive": GenerationParameters(
        fill_percent=38,
        wall_tile=TileType.HIVE_WALL,
        floor_tile=TileType.HIVE_FLOOR,
        features=FeatureType.HIVE,
        max_nests=6,
    ),
}


def get_archetype(name: str) -> GenerationParameters:
    try:
        return ARCHETYPES[name.lower()]
    except KeyError:
        raise ValueError(f"unknown archetype {name!r}; expected one of {sorted(ARCHETYPES)}") from None


def _env_bool(val: str) -> bool:
    return val.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass
class TerrainSettings:
    max_attempts: int = 25
    enable_metrics: bool = True
    cache_size: int = 8
    cache_enabled: bool = True

    @classmethod
    def from_env(cls) -> "TerrainSettings":
        s = cls()
        if "TERRAIN_MAX_ATTEMPTS" in os.environ:
            s.max_attempts = int(os.environ["TERRAIN_MAX_ATTEMPTS"])
        if "TERRAIN_ENABLE_METRICS" in os.environ:
            s.enable_metrics = _env_bool(os.environ["TERRAIN_ENABLE_METRICS"])
        if "TERRAIN_CACHE_SIZE" in os.environ:
            s.cache_size = int(os.environ["TERRAIN_CACHE_SIZE"])
        if "TERRAIN_DISABLE_CACHE" in os.environ:
            s.cache_enabled = not _env_bool(os.environ["TERRAIN_DISABLE_CACHE"])
        # Flask app config overrides (highest precedence)
        if has_app_context():
            cfg = current_app.config
            if "TERRAIN_MAX_ATTEMPTS" in cfg:
                s.max_attempts = int(cfg["TERRAIN_MAX_ATTEMPTS"])
            if "TERRAIN_ENABLE_METRICS" in cfg:
                s.enable_metrics = bool(cfg["TERRAIN_ENABLE_METRICS"])
            if "TERRAIN_CACHE_SIZE" in cfg:
                s.cache_size = int(cfg["TERRAIN_CACHE_SIZE"])
            if "TERRAIN_DISABLE_CACHE" in cfg:
                s.cache_enabled = not bool(cfg["TERRAIN_DISABLE_CACHE"])
        if s.max_attempts < 1:
            raise ValueError("TERRAIN_MAX_ATTEMPTS must be at least 1")
        return s


__all__ = [
    "FeatureType",
    "GenerationParameters",
    "ARCHETYPES",
    "get_archetype",
    "TerrainSettings",
]
