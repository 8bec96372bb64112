"""Passage carving: depth-first backtracking and straight L corridors."""

from __future__ import annotations

from functools import cmp_to_key
from typing import List, Tuple

from .cells import Offset2D, Position
from .grid import MazeGrid
from .tiles import FLOOR, WALL

LATTICE_STEPS: Tuple[Offset2D, ...] = ((2, 0), (-2, 0), (0, 2), (0, -2))

# Comparator threshold for the direction shuffle; 0.5 would be an (almost)
# unbiased coin, 0.45 tilts it so branching looks less uniform.
SHUFFLE_BIAS = 0.45


def biased_directions(rng, steps=LATTICE_STEPS) -> List[Offset2D]:
    return sorted(steps, key=cmp_to_key(lambda _a, _b: rng.random() - SHUFFLE_BIAS))


def carve_passages(grid: MazeGrid, start: Position, rng) -> int:
    """Carve a perfect maze on the odd lattice reachable from ``start``.

    Uses an explicit stack of ``(x, z, direction iterator)`` frames so a
    120x120 grid never approaches the interpreter recursion limit. Returns
    the number of lattice cells visited.
    """
    sx, sz = start
    grid.set(sx, sz, FLOOR)
    stack = [(sx, sz, iter(biased_directions(rng)))]
    visited = 1
    while stack:
        x, z, directions = stack[-1]
        for dx, dz in directions:
            nx, nz = x + dx, z + dz
            if grid.in_interior(nx, nz) and grid.get(nx, nz) is WALL:
                grid.set(x + dx // 2, z + dz // 2, FLOOR)
                grid.set(nx, nz, FLOOR)
                stack.append((nx, nz, iter(biased_directions(rng))))
                visited += 1
                break
        else:
            stack.pop()
    return visited


def carve_corridor(grid: MazeGrid, origin: Position, target: Position) -> int:
    """Open an L-shaped corridor: fully along x first, then along z.

    Only walls are converted; Start/Exit/Collectible cells on the way are
    left untouched. Returns the number of cells opened.
    """
    x, z = origin
    tx, tz = target
    opened = 0
    while x != tx:
        x += 1 if tx > x else -1
        if grid.get(x, z) is WALL:
            grid.set(x, z, FLOOR)
            opened += 1
    while z != tz:
        z += 1 if tz > z else -1
        if grid.get(x, z) is WALL:
            grid.set(x, z, FLOOR)
            opened += 1
    return opened


__all__ = ["carve_passages", "carve_corridor", "biased_directions", "LATTICE_STEPS"]
