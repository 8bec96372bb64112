"""Exit selection.

Prefers open cells on the outer edge, far from Start, with a strong bias for
true grid corners and the corner diagonally opposite Start. When the edge is
closed (room mode always walls it) the ring one cell inside is scanned.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional

from ..logging_utils import get_logger
from .cells import Position, WorldPosition
from .config import MazeConfig, DEFAULT_CONFIG
from .grid import MazeGrid, to_world
from .pathfinding import distances_from
from .tiles import EXIT, FLOOR, START

log = get_logger("labyrinth.maze")

CORNER_BONUS = 1000
OPPOSITE_CORNER_BONUS = 2000
_CANDIDATE_KINDS = (FLOOR, EXIT)


def _ring_cells(grid: MazeGrid, inset: int) -> List[Position]:
    """Cells on the rectangle ``inset`` cells in from the edge, edge by edge."""
    lo_x, hi_x = inset, grid.width - 1 - inset
    lo_z, hi_z = inset, grid.height - 1 - inset
    if lo_x > hi_x or lo_z > hi_z:
        return []
    cells: Dict[Position, None] = {}
    for x in range(lo_x, hi_x + 1):
        cells[Position(x, lo_z)] = None
    for x in range(lo_x, hi_x + 1):
        cells[Position(x, hi_z)] = None
    for z in range(lo_z, hi_z + 1):
        cells[Position(lo_x, z)] = None
    for z in range(lo_z, hi_z + 1):
        cells[Position(hi_x, z)] = None
    return list(cells)


def exit_candidates(grid: MazeGrid) -> List[Position]:
    for inset in (0, 1):
        found = [p for p in _ring_cells(grid, inset) if grid.get(*p) in _CANDIDATE_KINDS]
        if found:
            if inset:
                log.debug(event="exit_inner_ring", candidates=len(found))
            return found
    return []


def opposite_corner(grid: MazeGrid, start: Position) -> Position:
    ox = grid.width - 1 if start.x < grid.width / 2 else 0
    oz = grid.height - 1 if start.z < grid.height / 2 else 0
    return Position(ox, oz)


def score_exit(grid: MazeGrid, candidate: Position, start: Position) -> float:
    score = math.hypot(candidate.x - start.x, candidate.z - start.z)
    if candidate.x in (0, grid.width - 1) and candidate.z in (0, grid.height - 1):
        score += CORNER_BONUS
        if candidate == opposite_corner(grid, start):
            score += OPPOSITE_CORNER_BONUS
    return score


def _fallback_exit(grid: MazeGrid, start: Optional[Position]) -> Optional[Position]:
    """Farthest cell reachable from Start, or any floor cell without a Start."""
    if start is not None:
        dist = distances_from(grid, start)
        reachable = [p for p in dist if grid.get(*p) in _CANDIDATE_KINDS]
        if reachable:
            return max(reachable, key=lambda p: dist[p])
    for pos in grid.positions(*_CANDIDATE_KINDS):
        return pos
    return None


def mark_exit(grid: MazeGrid, chosen: Position) -> None:
    """Make ``chosen`` the only Exit cell; any previous exit becomes floor."""
    for pos in list(grid.positions(EXIT)):
        if pos != chosen:
            grid.set(pos.x, pos.z, FLOOR)
    grid.set(chosen.x, chosen.z, EXIT)


def find_exit_position(grid: MazeGrid, config: MazeConfig | None = None) -> WorldPosition:
    """Choose and mark the exit cell, returning its world coordinate."""
    config = config or DEFAULT_CONFIG
    start = grid.find(START)
    candidates = exit_candidates(grid)
    if candidates:
        anchor = start or Position(1, 1)
        chosen = max(candidates, key=lambda p: score_exit(grid, p, anchor))
        log.debug(event="exit_selected", candidates=len(candidates), x=chosen.x, z=chosen.z)
    else:
        chosen = _fallback_exit(grid, start)
        if chosen is None:
            chosen = Position(max(grid.width - 2, 0), max(grid.height - 2, 0))
            log.warn(event="exit_fallback", reason="no_open_cells", x=chosen.x, z=chosen.z)
        else:
            log.warn(event="exit_fallback", reason="no_ring_candidates", x=chosen.x, z=chosen.z)
    mark_exit(grid, chosen)
    return to_world(chosen, config.cell_size)


__all__ = ["find_exit_position", "exit_candidates", "score_exit", "opposite_corner", "mark_exit"]
