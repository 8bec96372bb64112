"""Generation pipelines for both maze modes.

Each call allocates a fresh grid, runs the ordered phases synchronously and
returns it with Start and Exit marked. A usable, solvable grid is always
produced; stages that cannot improve the layout skip or fall back and log.
"""

from __future__ import annotations

import time
from typing import Callable

from ..logging_utils import get_logger
from .carving import carve_passages
from .cells import Position
from .config import MazeConfig, resolve
from .connectivity import repair_connectivity
from .flow import optimize_flow
from .grid import MazeGrid, allocate
from .metrics import init_metrics
from .pathfinding import ensure_solvable
from .rooms import partition_rooms, widen_corridors
from .tiles import EXIT, START

log = get_logger("labyrinth.maze")

MIN_SIDE = 5


def _odd_side(n: int) -> int:
    if n % 2 == 0:
        n -= 1
    return max(MIN_SIDE, n)


class _Phases:
    """Per-phase wall clock timing recorded into ``grid.metrics['phase_ms']``."""

    def __init__(self, grid: MazeGrid, enabled: bool):
        self.grid = grid
        self.enabled = enabled
        self.started = time.perf_counter()

    def run(self, label: str, fn: Callable, *args, **kwargs):
        if not self.enabled:
            return fn(*args, **kwargs)
        ps = time.perf_counter()
        result = fn(*args, **kwargs)
        self.grid.metrics["phase_ms"][label] = int((time.perf_counter() - ps) * 1000)
        return result

    def finish(self) -> None:
        if self.enabled:
            self.grid.metrics["runtime_ms"] = int((time.perf_counter() - self.started) * 1000)


def _finalize(grid: MazeGrid, phases: _Phases, start: Position, goal: Position) -> MazeGrid:
    phases.run("connectivity", repair_connectivity, grid, start)
    phases.run("solvability", ensure_solvable, grid, start, goal)
    phases.finish()
    log.info(
        event="maze_generated",
        mode=grid.mode,
        width=grid.width,
        height=grid.height,
        runtime_ms=grid.metrics.get("runtime_ms"),
    )
    return grid


def generate_backtrack_maze(width: int, height: int, config: MazeConfig | None = None, rng=None) -> MazeGrid:
    """Depth-first carved maze with loops and side branches.

    Width and height are coerced to odd values (even values are decremented)
    so passages sit on odd lattice coordinates; both are at least 5.
    """
    config, rng = resolve(config, rng)
    width, height = _odd_side(width), _odd_side(height)
    grid = allocate(width, height, mode="backtrack")
    if config.enable_metrics:
        grid.metrics = init_metrics()
    phases = _Phases(grid, config.enable_metrics)
    start, goal = Position(1, 1), Position(width - 2, height - 2)

    phases.run("carve", carve_passages, grid, start, rng)
    grid.set(start.x, start.z, START)
    grid.set(goal.x, goal.z, EXIT)
    phases.run("flow", optimize_flow, grid, config, rng)
    return _finalize(grid, phases, start, goal)


def generate_room_maze(width: int, height: int, config: MazeConfig | None = None, rng=None) -> MazeGrid:
    """Rooms from recursive subdivision, stitched together into one region.

    The outer ring is always wall. Start is ``(1, 1)`` and Exit
    ``(width - 2, height - 2)``; both are placed before connectivity repair so
    the repair pass joins them to the rest of the level.
    """
    config, rng = resolve(config, rng)
    width, height = max(MIN_SIDE, width), max(MIN_SIDE, height)
    grid = allocate(width, height, mode="rooms")
    if config.enable_metrics:
        grid.metrics = init_metrics()
    phases = _Phases(grid, config.enable_metrics)
    start, goal = Position(1, 1), Position(width - 2, height - 2)

    phases.run("partition", partition_rooms, grid, config, rng)
    grid.set(start.x, start.z, START)
    grid.set(goal.x, goal.z, EXIT)
    phases.run("widen", widen_corridors, grid, config, rng)
    return _finalize(grid, phases, start, goal)


__all__ = ["generate_backtrack_maze", "generate_room_maze", "MIN_SIDE"]
