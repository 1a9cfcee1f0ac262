"""Terrain generation orchestrator.

Phase order (each phase completes before the next starts):
    * carve: random fill, seal edges, automaton generations, region cleanup, smoothing
    * connect: join floor regions, settle with one smoothing pass, re-join if needed
    * reserve_features: pick camp/nest sites (before lakes so lakes avoid them)
    * lakes, flora, structures
    * hide_walls: blank out walls nobody can see
    * verify + spawn/exit, then the transparency map

Every random draw comes from the level seed's single stream, in the order
above. A structural rejection (too long a corridor, no floor, spawn/exit too
close) throws the attempt away and starts again from a fresh fill with the
advanced stream, up to ``TerrainSettings.max_attempts`` times.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from ..logging_utils import get_logger
from .cellular import random_fill, remove_unseen_walls, seal_edges, smooth, step
from .config import FeatureType, GenerationParameters, TerrainSettings
from .connectivity import connect_floor_regions, is_connected
from .errors import RetryLimitExceeded, TransientStructural
from .features import reserved_tiles, select_sites, stamp_structures
from .flora import grow, plant, tag_shore_distance
from .grid import Coord, Grid, GridSnapshot
from .lakes import form_lakes
from .metrics import bump, init_metrics
from .regions import clean_up_regions, get_regions_matching
from .seed import Seed
from .tiles import WALLS, FloraKind, LiquidKind, TileType, is_safe, is_solid, opacity

log = get_logger("terrain.pipeline")

MIN_DIMENSION = 10


@dataclass
class Terrain:
    """A finished level: immutable tiles plus the points of interest found on them."""

    seed: Seed
    parameters: GenerationParameters
    grid: GridSnapshot
    transparency: Tuple[float, ...]
    spawn_point: Coord
    exit_point: Coord
    lakes: List[Tuple[Coord, ...]] = field(default_factory=list)
    camps: List[Coord] = field(default_factory=list)
    nests: List[Coord] = field(default_factory=list)
    attempts: int = 1
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def tile_at(self, x: int, y: int) -> TileType:
        return self.grid.tile_at(x, y)

    def opacity_at(self, x: int, y: int) -> float:
        return self.transparency[x + y * self.grid.width]

    def opacity_rows(self) -> List[List[float]]:
        w = self.grid.width
        return [list(self.transparency[y * w:(y + 1) * w]) for y in range(self.grid.height)]


class TerrainGenerator:
    def __init__(
        self,
        width: int,
        height: int,
        seed: Union[Seed, str, int, None] = None,
        parameters: Optional[GenerationParameters] = None,
        settings: Optional[TerrainSettings] = None,
    ):
        if width < MIN_DIMENSION or height < MIN_DIMENSION:
            raise ValueError(f"terrain must be at least {MIN_DIMENSION}x{MIN_DIMENSION}, got {width}x{height}")
        self.width = width
        self.height = height
        self.parameters = parameters or GenerationParameters()
        max_sq = (width - 3) ** 2 + (height - 3) ** 2
        self.min_distance_sq = self.parameters.spawn_exit_distance_sq(width, height)
        if self.min_distance_sq >= max_sq:
            raise ValueError(
                f"min_spawn_exit_distance_sq={self.min_distance_sq} "
                f"cannot be met on a {width}x{height} grid"
            )
        self.seed = Seed.coerce(seed)
        self.rng = self.seed.make_rng()
        self.settings = settings or TerrainSettings.from_env()
        self.metrics: Dict[str, Any] = init_metrics() if self.settings.enable_metrics else {}
        self._phase_times: Dict[str, int] = {}
        self.log = log.bind(seed=self.seed.raw)

    def _phase(self, label, fn, *a, **k):
        if not self.settings.enable_metrics:
            return fn(*a, **k)
        ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
        self._phase_times[label] = self._phase_times.get(label, 0) + int((pe - ps) * 1000)
        return r

    def run(self) -> Terrain:
        start = time.perf_counter()
        last_reason = None
        for attempt in range(1, self.settings.max_attempts + 1):
            bump(self.metrics, "attempts")
            try:
                terrain = self._attempt(attempt)
            except TransientStructural as exc:
                last_reason = exc.reason
                bump(self.metrics, "levels_rejected")
                self.log.warn(event="level_rejected", attempt=attempt, reason=exc.reason)
                continue
            if self.metrics:
                self.metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
                self.metrics["phase_ms"] = dict(self._phase_times)
            self.log.info(event="terrain_generated", attempts=attempt, width=self.width, height=self.height)
            return terrain
        self.log.error(event="generation_failed", attempts=self.settings.max_attempts, reason=last_reason)
        raise RetryLimitExceeded(self.settings.max_attempts, last_reason)

    def _attempt(self, attempt: int) -> Terrain:
        p = self.parameters
        grid = Grid(self.width, self.height, fill=p.wall_tile)
        self._phase("carve", self._carve, grid)
        self._phase("connect", self._connect, grid)

        sites = []
        if p.features is not FeatureType.NONE:
            sites = self._phase("reserve_features", select_sites, grid, p, self.metrics)
        lakes = []
        if p.liquid is not None:
            lakes = self._phase(
                "lakes", form_lakes, grid, p.liquid, self.rng, p.floor_tile,
                p.lake_min_size, p.lake_max_size, reserved_tiles(sites), self.metrics,
            )
        if p.flora is not None:
            self._phase("flora", self._flora, grid)
        if sites:
            self._phase("structures", stamp_structures, grid, sites, self.rng, p.floor_tile, self.metrics)
        hidden = self._phase("hide_walls", remove_unseen_walls, grid, p.wall_tile)
        bump(self.metrics, "walls_hidden", hidden)

        self._verify(grid)
        spawn, exit_ = self._phase("spawn_exit", self._spawn_and_exit, grid)
        transparency = tuple(opacity(t) for t in grid.tiles)
        return Terrain(
            seed=self.seed,
            parameters=p,
            grid=grid.snapshot(),
            transparency=transparency,
            spawn_point=spawn,
            exit_point=exit_,
            lakes=[tuple(lake.tiles) for lake in lakes],
            camps=[s.center for s in sites if s.kind == "camp"],
            nests=[s.center for s in sites if s.kind == "nest"],
            attempts=attempt,
            metrics=self.metrics,
        )

    def _carve(self, grid: Grid) -> None:
        p = self.parameters
        random_fill(grid, self.rng, p.fill_percent, p.wall_tile, p.floor_tile)
        seal_edges(grid, p.wall_tile)
        self.log.debug(event="digging", generations=p.generations)
        for _ in range(p.generations):
            step(grid, p.wall_tile, p.floor_tile)
        walls = clean_up_regions(grid, p.wall_tile, p.floor_tile, p.cleanup_threshold)
        floors = clean_up_regions(grid, p.floor_tile, p.wall_tile, p.cleanup_threshold)
        bump(self.metrics, "wall_regions_removed", walls)
        bump(self.metrics, "floor_regions_removed", floors)
        for _ in range(p.smoothing):
            smooth(grid, p.wall_tile, p.floor_tile)
        # cleanup may have filled a small border ring
        seal_edges(grid, p.wall_tile)

    def _connect(self, grid: Grid) -> None:
        p = self.parameters
        connect_floor_regions(grid, p.floor_tile, self.metrics)
        if p.smoothing:
            smooth(grid, p.wall_tile, p.floor_tile)
            bump(self.metrics, "wall_regions_removed", clean_up_regions(grid, p.wall_tile, p.floor_tile, p.cleanup_threshold))
            seal_edges(grid, p.wall_tile)
            # settling can pinch a fresh corridor shut
            if not is_connected(grid, p.floor_tile):
                connect_floor_regions(grid, p.floor_tile, self.metrics)

    def _flora(self, grid: Grid) -> None:
        p = self.parameters
        plant(grid, self.rng, p.flora, p.flora_density, p.floor_tile)
        grow(grid, p.flora, p.floor_tile)
        if p.flora is FloraKind.GRASS and p.liquid is LiquidKind.WATER:
            tag_shore_distance(grid, p.shore_distance_cutoff)

    def _verify(self, grid: Grid) -> None:
        passable = get_regions_matching(grid, lambda t: not is_solid(t))
        if not passable:
            raise TransientStructural("no_floor")
        if len(passable) > 1:
            raise TransientStructural("disconnected", regions=len(passable))
        if any(grid.get(x, y) not in WALLS for x, y in grid.cells() if grid.is_border(x, y)):
            raise TransientStructural("open_border")

    def _spawn_and_exit(self, grid: Grid) -> Tuple[Coord, Coord]:
        p = self.parameters
        safe = get_regions_matching(grid, is_safe)
        if not safe:
            raise TransientStructural("no_safe_region")
        largest = max(safe, key=lambda r: r.size)
        standable = {p.floor_tile, *FloraKind.GRASS.tiles}
        candidates = [t for t in largest.tiles if grid.get(*t) in standable]
        if not candidates:
            raise TransientStructural("no_spawn_candidate")
        spawn = self.rng.choice(candidates)
        sx, sy = spawn
        far = [t for t in candidates if (t[0] - sx) ** 2 + (t[1] - sy) ** 2 > self.min_distance_sq]
        if not far:
            raise TransientStructural("spawn_exit_too_close")
        return spawn, self.rng.choice(far)


def generate(
    width: int,
    height: int,
    seed: Union[Seed, str, int, None] = None,
    parameters: Optional[GenerationParameters] = None,
    settings: Optional[TerrainSettings] = None,
) -> Terrain:
    """Generate a connected, enclosed terrain or raise ``RetryLimitExceeded``."""
    return TerrainGenerator(width, height, seed, parameters, settings).run()


__all__ = ["Terrain", "TerrainGenerator", "generate", "MIN_DIMENSION"]
