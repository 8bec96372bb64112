"""Collectible placement.

Floor cells are scored for how interesting they are to reach (junctions,
corners, open rooms, closeness to the Start->Exit corridor). Collectibles go
to the best scored cells first, then to random cells, always respecting a
minimum spacing. Running out of room is logged, never raised.
"""

from __future__ import annotations

from typing import List, Optional

from ..logging_utils import get_logger
from .cells import CARDINALS, PlacementCandidate, Position, manhattan
from .config import MazeConfig, resolve
from .grid import MazeGrid
from .tiles import COLLECTIBLE, EXIT, FLOOR, START

log = get_logger("labyrinth.maze")

_CORNER_PATTERNS = (
    ((0, 1), (1, 0)),
    ((0, 1), (-1, 0)),
    ((0, -1), (1, 0)),
    ((0, -1), (-1, 0)),
)

STRATEGIC_THRESHOLD = 2
# Random fallback keeps this many cells (per axis) clear of Start and Exit
ENDPOINT_CLEARANCE = 3


def _is_floor(grid: MazeGrid, x: int, z: int) -> bool:
    # Start, Exit and collectibles do not count as open ground when scoring
    return grid.in_bounds(x, z) and grid.get(x, z) is FLOOR


def start_of(grid: MazeGrid) -> Position:
    return grid.find(START) or Position(1, 1)


def exit_of(grid: MazeGrid) -> Position:
    return grid.find(EXIT) or Position(grid.width - 2, grid.height - 2)


def is_corner_position(grid: MazeGrid, x: int, z: int) -> bool:
    return any(all(_is_floor(grid, x + dx, z + dz) for dx, dz in pattern) for pattern in _CORNER_PATTERNS)


def is_room_center(grid: MazeGrid, x: int, z: int) -> bool:
    total = 0
    open_cells = 0
    for dz in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if grid.in_bounds(x + dx, z + dz):
                total += 1
                if _is_floor(grid, x + dx, z + dz):
                    open_cells += 1
    return open_cells >= int(total * 0.7)


def is_on_main_path(pos: Position, start: Position, goal: Position) -> bool:
    """Cheap heuristic: combined distance to both ends stays near the midpoint."""
    total = manhattan(start, goal)
    if total == 0:
        return False
    actual = (manhattan(pos, start) + manhattan(pos, goal)) / 2
    return abs(actual - total / 2) < total * 0.3


def score_position(grid: MazeGrid, x: int, z: int, start: Position, goal: Position) -> int:
    score = 0
    open_sides = sum(1 for dx, dz in CARDINALS if _is_floor(grid, x + dx, z + dz))
    if open_sides >= 3:
        score += 3
    elif open_sides == 2:
        score += 1
    if is_corner_position(grid, x, z):
        score += 2
    if is_room_center(grid, x, z):
        score += 4
    if is_on_main_path(Position(x, z), start, goal):
        score += 1
    return score


def find_strategic_positions(
    grid: MazeGrid, start: Optional[Position] = None, goal: Optional[Position] = None
) -> List[PlacementCandidate]:
    """Interior floor cells scoring at least 2, best first (ties in scan order)."""
    start = start or start_of(grid)
    goal = goal or exit_of(grid)
    found = []
    for z in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if grid.get(x, z) is not FLOOR:
                continue
            score = score_position(grid, x, z, start, goal)
            if score >= STRATEGIC_THRESHOLD:
                found.append(PlacementCandidate(Position(x, z), score))
    found.sort(key=lambda c: c.score, reverse=True)
    return found


def _far_enough(pos: Position, placed: List[Position], min_distance: int) -> bool:
    return all(manhattan(pos, other) >= min_distance for other in placed)


def place_collectibles(
    grid: MazeGrid, requested_count: int, config: MazeConfig | None = None, rng=None
) -> MazeGrid:
    """Return a copy of ``grid`` with up to ``min(requested, max)`` collectibles.

    First pass walks strategic positions best first; if the quota is still
    unmet a bounded number of random floor cells are tried. Collectibles
    already present on the grid count for spacing but not toward the quota.
    """
    config, rng = resolve(config, rng)
    count = max(0, min(requested_count, config.collectible_max_count))
    result = grid.copy()
    w, h = result.width, result.height
    start, goal = start_of(result), exit_of(result)
    min_distance = config.collectible_min_distance
    taken = list(result.positions(COLLECTIBLE))
    placed = 0

    for candidate in find_strategic_positions(result, start, goal):
        if placed >= count:
            break
        pos = candidate.position
        if pos in (start, goal) or result.get(*pos) is not FLOOR:
            continue
        if _far_enough(pos, taken, min_distance):
            result.set(pos.x, pos.z, COLLECTIBLE)
            taken.append(pos)
            placed += 1

    attempts = 0
    if placed < count and w > 4 and h > 4:
        while placed < count and attempts < config.random_placement_attempts:
            attempts += 1
            pos = Position(rng.randrange(2, w - 2), rng.randrange(2, h - 2))
            if result.get(*pos) is not FLOOR:
                continue
            near_start = abs(pos.x - start.x) < ENDPOINT_CLEARANCE and abs(pos.z - start.z) < ENDPOINT_CLEARANCE
            near_exit = abs(pos.x - goal.x) < ENDPOINT_CLEARANCE and abs(pos.z - goal.z) < ENDPOINT_CLEARANCE
            if near_start or near_exit:
                continue
            if _far_enough(pos, taken, min_distance):
                result.set(pos.x, pos.z, COLLECTIBLE)
                taken.append(pos)
                placed += 1

    if "collectibles_placed" in result.metrics:
        result.metrics["collectibles_requested"] = requested_count
        result.metrics["collectibles_placed"] = placed
    log.info(event="collectibles_placed", placed=placed, requested=requested_count, cap=config.collectible_max_count)
    if placed < count:
        log.warn(event="collectibles_short", placed=placed, wanted=count, random_attempts=attempts)
    return result


__all__ = [
    "find_strategic_positions",
    "score_position",
    "is_corner_position",
    "is_room_center",
    "is_on_main_path",
    "place_collectibles",
]
