"""Breadth-first search between Start and Exit."""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional

from ..logging_utils import get_logger
from .carving import carve_corridor
from .cells import Position
from .grid import MazeGrid
from .metrics import bump
from .tiles import EXIT, START

log = get_logger("labyrinth.maze")


def find_path(grid: MazeGrid, start: Optional[Position] = None, goal: Optional[Position] = None) -> List[Position]:
    """Return the shortest 4-connected walkable path from start to goal.

    ``start``/``goal`` default to the grid's Start and Exit cells. The
    returned list includes both endpoints; it is empty when either endpoint
    is missing or unreachable.
    """
    start = start if start is not None else grid.find(START)
    goal = goal if goal is not None else grid.find(EXIT)
    if start is None or goal is None:
        return []
    start, goal = Position(*start), Position(*goal)
    parent: Dict[Position, Optional[Position]] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for nxt in grid.neighbors4(*current):
            if nxt not in parent and grid.is_walkable(*nxt):
                parent[nxt] = current
                queue.append(nxt)
    if goal not in parent:
        return []
    path = []
    node: Optional[Position] = goal
    while node is not None:
        path.append(node)
        node = parent[node]
    path.reverse()
    return path


def distances_from(grid: MazeGrid, origin: Position) -> Dict[Position, int]:
    """BFS step counts from ``origin`` to every reachable walkable cell."""
    origin = Position(*origin)
    dist = {origin: 0}
    queue = deque([origin])
    while queue:
        current = queue.popleft()
        for nxt in grid.neighbors4(*current):
            if nxt not in dist and grid.is_walkable(*nxt):
                dist[nxt] = dist[current] + 1
                queue.append(nxt)
    return dist


def ensure_solvable(grid: MazeGrid, start: Position, goal: Position) -> bool:
    """Guarantee a path from ``start`` to ``goal``.

    When BFS finds none, a direct L corridor is forced between the two
    coordinates. Returns True if the forced carve was needed.
    """
    if find_path(grid, start, goal):
        return False
    opened = carve_corridor(grid, start, goal)
    bump(grid, "forced_paths")
    log.warn(event="forced_path", start=f"{start[0]},{start[1]}", goal=f"{goal[0]},{goal[1]}", opened=opened)
    return True


__all__ = ["find_path", "distances_from", "ensure_solvable"]
