"""
project: Burrow
module: terrain_api.py
License: MIT

Terrain generation HTTP routes.

    GET /api/terrain/archetypes   archetype names and their parameters
    GET /api/terrain              generate (or fetch cached) terrain

Query parameters for ``/api/terrain``: ``seed`` (string, random when omitted),
``archetype`` (default ``cavern``), ``width`` and ``height``.
"""

import threading
from collections import OrderedDict

from flask import Blueprint, current_app, jsonify, request

from burrow.logging_utils import get_logger
from burrow.terrain import ARCHETYPES, RetryLimitExceeded, Seed, TerrainSettings, generate, get_archetype
from burrow.utils.coord_codec import encode_coords, rle_encode

bp_terrain = Blueprint("terrain_api", __name__)
log = get_logger("terrain.api")

# Small in-process cache (seed, archetype, width, height) -> Terrain, oldest evicted first.
_terrain_cache: "OrderedDict[tuple, object]" = OrderedDict()
_terrain_cache_lock = threading.Lock()


def clear_terrain_cache() -> None:
    with _terrain_cache_lock:
        _terrain_cache.clear()


def get_cached_terrain(seed: str, archetype: str, width: int, height: int):
    settings = TerrainSettings.from_env()
    params = get_archetype(archetype)
    if not settings.cache_enabled:
        return generate(width, height, seed, params, settings)
    key = (seed, archetype, width, height)
    with _terrain_cache_lock:
        terrain = _terrain_cache.get(key)
        if terrain is not None:
            _terrain_cache.move_to_end(key)
            return terrain
    # generate outside the lock; a duplicate build for the same key is harmless
    terrain = generate(width, height, seed, params, settings)
    with _terrain_cache_lock:
        _terrain_cache[key] = terrain
        while len(_terrain_cache) > max(1, settings.cache_size):
            _terrain_cache.popitem(last=False)
    return terrain


def terrain_to_dict(terrain, archetype: str) -> dict:
    rows = terrain.grid.to_rows()
    return {
        "seed": terrain.seed.raw,
        "archetype": archetype,
        "width": terrain.width,
        "height": terrain.height,
        "rows": rows,
        "rle": [rle_encode(r) for r in rows],
        "spawn": list(terrain.spawn_point),
        "exit": list(terrain.exit_point),
        "camps": encode_coords(terrain.camps),
        "nests": encode_coords(terrain.nests),
        "lakes": [encode_coords(lake) for lake in terrain.lakes],
        "opacity": terrain.opacity_rows(),
        "attempts": terrain.attempts,
        "metrics": terrain.metrics,
    }


def _dimension(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer") from None
    limit = current_app.config["TERRAIN_MAX_DIMENSION"]
    if value > limit:
        raise ValueError(f"{name} must be at most {limit}")
    return value


@bp_terrain.route("/api/terrain/archetypes", methods=["GET"])
def list_archetypes():
    return jsonify({name: params.to_dict() for name, params in ARCHETYPES.items()})


@bp_terrain.route("/api/terrain", methods=["GET"])
def get_terrain():
    archetype = request.args.get("archetype", "cavern").lower()
    seed = Seed.coerce(request.args.get("seed")).raw
    try:
        width = _dimension("width", current_app.config["TERRAIN_DEFAULT_WIDTH"])
        height = _dimension("height", current_app.config["TERRAIN_DEFAULT_HEIGHT"])
        terrain = get_cached_terrain(seed, archetype, width, height)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except RetryLimitExceeded as exc:
        log.error(event="terrain_request_failed", seed=seed, archetype=archetype, reason=exc.last_reason)
        return jsonify({"error": str(exc), "attempts": exc.attempts}), 503
    return jsonify(terrain_to_dict(terrain, archetype))
