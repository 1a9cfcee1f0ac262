"""Public terrain package interface."""

from .config import ARCHETYPES, FeatureType, GenerationParameters, TerrainSettings, get_archetype
from .errors import (
    GenerationFailure,
    InvalidTileOperation,
    PlacementFailure,
    RetryLimitExceeded,
    TransientStructural,
)
from .grid import Grid, GridSnapshot
from .pipeline import Terrain, TerrainGenerator, generate
from .seed import Seed
from .tiles import FloraKind, LiquidKind, TileType

__all__ = [
    "ARCHETYPES",
    "FeatureType",
    "GenerationParameters",
    "TerrainSettings",
    "get_archetype",
    "GenerationFailure",
    "InvalidTileOperation",
    "PlacementFailure",
    "RetryLimitExceeded",
    "TransientStructural",
    "Grid",
    "GridSnapshot",
    "Terrain",
    "TerrainGenerator",
    "generate",
    "Seed",
    "FloraKind",
    "LiquidKind",
    "TileType",
]
