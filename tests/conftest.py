import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from burrow import create_app  # noqa: E402
from burrow.routes.terrain_api import clear_terrain_cache  # noqa: E402
from burrow.terrain import GenerationParameters, TerrainSettings  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app(
        {
            "TESTING": True,
            "TERRAIN_DEFAULT_WIDTH": 60,
            "TERRAIN_DEFAULT_HEIGHT": 40,
            "TERRAIN_MAX_ATTEMPTS": 25,
            "TERRAIN_DISABLE_CACHE": False,
        }
    )
    return app


@pytest.fixture()
def client(test_app):
    clear_terrain_cache()
    return test_app.test_client()


@pytest.fixture
def settings():
    """Explicit settings so tests never depend on TERRAIN_* in the environment."""
    return TerrainSettings(max_attempts=25, enable_metrics=True)


@pytest.fixture
def small_params():
    """Bare cave parameters that fit a 20x20 level."""
    return GenerationParameters(generations=3, smoothing=1)
