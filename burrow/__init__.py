"""
project: Burrow
module: __init__.py
License: MIT

Flask application factory.

The terrain generator itself (``burrow.terrain``) is a plain library; this
module only wires it to HTTP. Configuration is sourced from environment
variables (a local ``.env`` is loaded when present) with defaults suitable for
development. A local ``instance/`` directory holds the server log.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from flask import Flask

# Load .env if present so TERRAIN_* settings can be supplied without exporting
# shell variables during development.
load_dotenv()

__version__ = "0.4.0"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def create_app(config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # read-only checkouts still serve requests; only file logging needs it
        pass

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        TERRAIN_MAX_ATTEMPTS=int(os.getenv("TERRAIN_MAX_ATTEMPTS", "25")),
        TERRAIN_ENABLE_METRICS=_env_flag("TERRAIN_ENABLE_METRICS", "1"),
        TERRAIN_DISABLE_CACHE=_env_flag("TERRAIN_DISABLE_CACHE"),
        TERRAIN_CACHE_SIZE=int(os.getenv("TERRAIN_CACHE_SIZE", "8")),
        TERRAIN_DEFAULT_WIDTH=int(os.getenv("TERRAIN_DEFAULT_WIDTH", "80")),
        TERRAIN_DEFAULT_HEIGHT=int(os.getenv("TERRAIN_DEFAULT_HEIGHT", "50")),
        TERRAIN_MAX_DIMENSION=int(os.getenv("TERRAIN_MAX_DIMENSION", "256")),
    )
    if config:
        app.config.update(config)

    from burrow.routes.terrain_api import bp_terrain

    app.register_blueprint(bp_terrain)
    return app


__all__ = ["create_app", "__version__"]
