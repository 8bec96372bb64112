import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from labyrinth import create_app  # noqa: E402
from labyrinth.routes import maze_api  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app({"TESTING": True, "MAZE_CACHE_SIZE": 4})
    return app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Keep developer .env / shell settings from leaking into generation tests
    for key in list(os.environ):
        if key.startswith("MAZE_") or key.startswith("LABYRINTH_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture()
def clear_maze_cache():
    with maze_api._maze_cache_lock:
        maze_api._maze_cache.clear()
    yield
    with maze_api._maze_cache_lock:
        maze_api._maze_cache.clear()


@pytest.fixture()
def rng():
    return random.Random(1234)
