"""
project: Labyrinth
module: maze_api.py
License: MIT

Maze generation API routes.

Endpoints return the finished grid as tile rows plus the coordinates the
client needs to build and populate a level (start, exit, collectibles).
"""

import hashlib
import random
import threading

from flask import Blueprint, current_app, jsonify, request

from labyrinth.logging_utils import get_logger
from labyrinth.maze import (
    COLLECTIBLE,
    EXIT,
    START,
    MazeConfig,
    find_exit_position,
    generate_backtrack_maze,
    generate_room_maze,
    load_level,
    place_collectibles,
)
from labyrinth.maze.pipeline import MIN_SIDE

log = get_logger("labyrinth.api")

bp_maze = Blueprint("maze", __name__)

SEED_MAX = 2**63 - 1
GENERATORS = {
    "rooms": generate_room_maze,
    "backtrack": generate_backtrack_maze,
}

# Small in-process cache for seeded requests: key -> response payload.
# Guarded by a lock because the dev server handles requests on threads.
_maze_cache = {}
_maze_cache_lock = threading.Lock()


class BadRequest(ValueError):
    pass


def coerce_seed(raw):
    """Convert a query seed (int-like or any string) into a bounded int.

    Missing/blank seeds produce a fresh random seed so the response can
    always report the seed that reproduces it.
    """
    if raw is None or not str(raw).strip():
        return random.randint(1, 1_000_000)
    s = str(raw).strip()
    try:
        return int(s) % SEED_MAX
    except ValueError:
        # any other string hashes to a stable seed
        digest = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big") % SEED_MAX


def _int_arg(name: str, default: int, lo: int, hi: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise BadRequest(f"{name} must be an integer") from None
    if not lo <= value <= hi:
        raise BadRequest(f"{name} must be between {lo} and {hi}")
    return value


def grid_payload(grid, exit_world, seed: int) -> dict:
    start = grid.find(START)
    exit_pos = grid.find(EXIT)
    return {
        "mode": grid.mode,
        "width": grid.width,
        "height": grid.height,
        "seed": seed,
        "rows": grid.to_rows(),
        "start": list(start) if start else None,
        "exit": list(exit_pos) if exit_pos else None,
        "exit_world": list(exit_world),
        "collectibles": [list(p) for p in grid.positions(COLLECTIBLE)],
        "metrics": grid.metrics,
    }


def _cached(key, build):
    limit = current_app.config.get("MAZE_CACHE_SIZE", 8)
    with _maze_cache_lock:
        hit = _maze_cache.get(key)
    if hit is not None:
        return hit
    payload = build()
    with _maze_cache_lock:
        _maze_cache[key] = payload
        while len(_maze_cache) > limit:
            _maze_cache.pop(next(iter(_maze_cache)))
    return payload


@bp_maze.errorhandler(BadRequest)
def _bad_request(e):
    return jsonify({"error": str(e)}), 400


@bp_maze.route("/api/maze/generate")
def generate():
    """
    Generate a maze.
    Query: mode=rooms|backtrack, width, height, collectibles, seed (all optional)
    Response: { rows, start, exit, exit_world, collectibles, metrics, seed, ... }
    """
    mode = request.args.get("mode", "rooms")
    if mode not in GENERATORS:
        raise BadRequest(f"mode must be one of {sorted(GENERATORS)}")
    max_size = current_app.config.get("MAZE_MAX_SIZE", 120)
    width = _int_arg("width", 21, MIN_SIDE, max_size)
    height = _int_arg("height", 21, MIN_SIDE, max_size)
    config = MazeConfig.from_env()
    collectibles = _int_arg("collectibles", config.collectible_max_count, 0, 1000)
    explicit_seed = request.args.get("seed")
    seed = coerce_seed(explicit_seed)
    config = config.with_seed(seed)

    def build():
        rng = config.make_rng()
        grid = GENERATORS[mode](width, height, config, rng)
        exit_world = find_exit_position(grid, config)
        grid = place_collectibles(grid, collectibles, config, rng)
        return grid_payload(grid, exit_world, seed)

    if explicit_seed is None or not explicit_seed.strip():
        payload = build()
    else:
        payload = _cached((mode, width, height, collectibles, config), build)
    log.info(event="maze_served", mode=mode, width=width, height=height, seed=seed)
    return jsonify(payload)


@bp_maze.route("/api/maze/level/<int:index>")
def level(index: int):
    """Return the planned and generated level for zero-based ``index``."""
    explicit_seed = request.args.get("seed")
    seed = coerce_seed(explicit_seed)
    config = MazeConfig.from_env().with_seed(seed)

    def build():
        lvl = load_level(index, config)
        payload = grid_payload(lvl.grid, lvl.exit_world, seed)
        payload["plan"] = lvl.plan._asdict()
        return payload

    if explicit_seed is None or not explicit_seed.strip():
        payload = build()
    else:
        payload = _cached(("level", index, config), build)
    return jsonify(payload)
