"""Post-carve flow passes for backtracking mazes.

A perfect maze is a tree; these passes add a few loops and side branches so
the level is less of a single corridor. Each pass only ever turns walls into
floor, so none of them can disconnect anything.
"""

from __future__ import annotations

from typing import List

from ..logging_utils import get_logger
from .carving import LATTICE_STEPS
from .cells import CARDINALS, Position
from .config import MazeConfig
from .grid import MazeGrid
from .metrics import bump
from .pathfinding import find_path
from .tiles import FLOOR, WALL

log = get_logger("labyrinth.maze")

# Offsets of the four 2x2 blocks that contain (0, 0)
_BLOCKS = (
    ((0, 0), (1, 0), (0, 1), (1, 1)),
    ((-1, 0), (0, 0), (-1, 1), (0, 1)),
    ((0, -1), (1, -1), (0, 0), (1, 0)),
    ((-1, -1), (0, -1), (-1, 0), (0, 0)),
)

MIN_PATH_FOR_BRANCHES = 7


def dead_end_score(grid: MazeGrid, x: int, z: int) -> int:
    """Number of orthogonal neighbours that are walls."""
    return sum(1 for nx, nz in grid.neighbors4(x, z) if grid.get(nx, nz) is WALL)


def open_dead_end(grid: MazeGrid, x: int, z: int, rng) -> bool:
    """Knock through one wall whose far side is already open (creates a loop)."""
    openings: List[Position] = []
    for dx, dz in CARDINALS:
        nx, nz = x + dx, z + dz
        if not grid.in_interior(nx, nz) or grid.get(nx, nz) is not WALL:
            continue
        bx, bz = nx + dx, nz + dz
        if grid.in_interior(bx, bz) and grid.is_walkable(bx, bz):
            openings.append(Position(nx, nz))
    if not openings:
        return False
    ox, oz = rng.choice(openings)
    grid.set(ox, oz, FLOOR)
    return True


def relieve_dead_ends(grid: MazeGrid, config: MazeConfig, rng) -> int:
    opened = 0
    for z in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if grid.get(x, z) is not FLOOR or dead_end_score(grid, x, z) < 3:
                continue
            if rng.random() < config.dead_end_open_chance and open_dead_end(grid, x, z, rng):
                opened += 1
    bump(grid, "dead_ends_opened", opened)
    return opened


def would_create_open_block(grid: MazeGrid, x: int, z: int) -> bool:
    """True if opening (x, z) completes any 2x2 block of walkable cells."""
    for block in _BLOCKS:
        complete = True
        for dx, dz in block:
            nx, nz = x + dx, z + dz
            if not grid.in_bounds(nx, nz):
                complete = False
                break
            if (dx, dz) != (0, 0) and not grid.is_walkable(nx, nz):
                complete = False
                break
        if complete:
            return True
    return False


def is_strategic_wall(grid: MazeGrid, x: int, z: int) -> bool:
    open_count = 0
    wall_count = 0
    for nx, nz in grid.neighbors4(x, z):
        if grid.is_walkable(nx, nz):
            open_count += 1
        else:
            wall_count += 1
    return open_count == 2 and wall_count == 2 and not would_create_open_block(grid, x, z)


def add_strategic_openings(grid: MazeGrid, config: MazeConfig, rng) -> int:
    """Open a few connector walls, sampled with a bounded retry budget."""
    w, h = grid.width, grid.height
    if w < 3 or h < 3:
        return 0
    target = int(w * h * config.strategic_opening_ratio)
    opened = 0
    for _ in range(target * 5):
        if opened >= target:
            break
        x = rng.randrange(1, w - 1)
        z = rng.randrange(1, h - 1)
        if grid.get(x, z) is WALL and is_strategic_wall(grid, x, z):
            grid.set(x, z, FLOOR)
            opened += 1
    bump(grid, "strategic_openings", opened)
    if opened < target:
        log.debug(event="strategic_openings_short", opened=opened, target=target)
    return opened


def carve_branches(grid: MazeGrid, origin: Position, depth: int, chance: float, rng) -> int:
    """Grow short side branches from ``origin`` on the two-cell lattice."""
    carved = 0
    stack = [(origin[0], origin[1], depth)]
    while stack:
        x, z, remaining = stack.pop()
        if remaining <= 0:
            continue
        for dx, dz in LATTICE_STEPS:
            nx, nz = x + dx, z + dz
            if not grid.in_interior(nx, nz) or grid.get(nx, nz) is not WALL:
                continue
            if rng.random() < chance:
                grid.set(x + dx // 2, z + dz // 2, FLOOR)
                grid.set(nx, nz, FLOOR)
                carved += 1
                stack.append((nx, nz, remaining - 1))
    return carved


def add_alternative_paths(grid: MazeGrid, config: MazeConfig, rng) -> int:
    path = find_path(grid)
    if len(path) < MIN_PATH_FOR_BRANCHES:
        return 0
    midpoint = path[len(path) // 2]
    carved = carve_branches(grid, midpoint, config.branch_depth, config.branch_chance, rng)
    bump(grid, "branches_carved", carved)
    return carved


def optimize_flow(grid: MazeGrid, config: MazeConfig, rng) -> None:
    relieve_dead_ends(grid, config, rng)
    add_strategic_openings(grid, config, rng)
    add_alternative_paths(grid, config, rng)


__all__ = [
    "dead_end_score",
    "open_dead_end",
    "relieve_dead_ends",
    "would_create_open_block",
    "is_strategic_wall",
    "add_strategic_openings",
    "carve_branches",
    "add_alternative_paths",
    "optimize_flow",
]
