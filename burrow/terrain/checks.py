"""Structural invariant analysis for finished terrain.

Used by the test-suite and ``scripts/diagnose_seeds.py``. ``analyze`` never
raises on a bad level; it reports what is wrong.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .grid import Coord
from .pipeline import Terrain
from .regions import get_regions_matching
from .tiles import WALLS, TileType, is_liquid, is_solid


def open_borders(terrain: Terrain) -> List[Coord]:
    g = terrain.grid
    out = []
    for y in range(g.height):
        for x in range(g.width):
            if (x in (0, g.width - 1) or y in (0, g.height - 1)) and g.tile_at(x, y) not in WALLS:
                out.append((x, y))
    return out


def passable_components(terrain: Terrain) -> int:
    return len(get_regions_matching(terrain.grid.thaw(), lambda t: not is_solid(t)))


def lake_sizes(terrain: Terrain) -> List[int]:
    """Sizes of the liquid bodies actually present on the grid."""
    return [r.size for r in get_regions_matching(terrain.grid.thaw(), is_liquid)]


def exposed_empty(terrain: Terrain) -> List[Coord]:
    """EMPTY tiles with a non-solid 8-neighbour, i.e. visible from the play area."""
    g = terrain.grid.thaw()
    out = []
    for x, y in g.cells():
        if g.get(x, y) is TileType.EMPTY and any(not is_solid(g.get(nx, ny)) for nx, ny in g.neighbours8(x, y)):
            out.append((x, y))
    return out


def analyze(terrain: Terrain) -> Dict[str, Any]:
    p = terrain.parameters
    components = passable_components(terrain)
    bad_lakes = []
    if p.liquid is not None:
        bad_lakes = [s for s in lake_sizes(terrain) if not p.lake_min_size <= s <= p.lake_max_size]
    sx, sy = terrain.spawn_point
    ex, ey = terrain.exit_point
    too_close = (sx - ex) ** 2 + (sy - ey) ** 2 <= p.spawn_exit_distance_sq(terrain.width, terrain.height)
    res = {
        "open_borders": open_borders(terrain),
        "disconnected_regions": max(0, components - 1),
        "lakes_out_of_bounds": bad_lakes,
        "exposed_empty": exposed_empty(terrain),
        "spawn_exit_too_close": too_close,
    }
    res["ok"] = not (
        res["open_borders"] or res["disconnected_regions"] or bad_lakes or res["exposed_empty"] or too_close
    )
    return res


__all__ = ["analyze", "open_borders", "passable_components", "lake_sizes", "exposed_empty"]
