import random

import pytest

from labyrinth.maze import START, WALL, Position, allocate, generate_backtrack_maze, label_regions
from labyrinth.maze.carving import LATTICE_STEPS, biased_directions, carve_corridor, carve_passages
from maze_test_utils import assert_playable


@pytest.mark.parametrize(
    "w,h,expected",
    [
        (21, 21, (21, 21)),
        (20, 14, (19, 13)),
        (4, 4, (5, 5)),
        (1, 30, (5, 29)),
        (0, -3, (5, 5)),
    ],
)
def test_dimensions_are_odd_and_clamped(w, h, expected):
    grid = generate_backtrack_maze(w, h, rng=random.Random(3))
    assert (grid.width, grid.height) == expected
    assert grid.width % 2 == 1 and grid.height % 2 == 1


@pytest.mark.parametrize("seed", range(25))
def test_backtrack_mazes_are_playable_across_seeds(seed):
    rnd = random.Random(seed)
    w = rnd.randrange(5, 50)
    h = rnd.randrange(5, 50)
    grid = generate_backtrack_maze(w, h, rng=rnd)
    assert grid.width >= min(w, h) - 1 and grid.height >= min(w, h) - 1
    assert grid.get(1, 1) is START
    assert_playable(grid)


def test_biased_directions_is_a_permutation():
    rng = random.Random(9)
    for _ in range(20):
        assert sorted(biased_directions(rng)) == sorted(LATTICE_STEPS)


def test_carve_passages_builds_a_perfect_maze():
    grid = allocate(11, 9)
    visited = carve_passages(grid, Position(1, 1), random.Random(5))
    # 5 x 4 odd lattice cells, joined by a spanning tree of 19 connectors
    assert visited == 20
    floor = sum(1 for row in grid for kind in row if kind is not WALL)
    assert floor == 2 * visited - 1
    for x in range(1, 11, 2):
        for z in range(1, 9, 2):
            assert grid.get(x, z) is not WALL
    _, regions = label_regions(grid)
    assert len(regions) == 1


def test_carve_passages_handles_large_grid_without_recursion():
    grid = allocate(241, 241)
    visited = carve_passages(grid, Position(1, 1), random.Random(0))
    assert visited == 120 * 120


def test_carve_corridor_goes_x_then_z():
    grid = allocate(7, 7)
    opened = carve_corridor(grid, Position(1, 1), Position(5, 4))
    assert opened == 7
    for x in range(2, 6):
        assert grid.get(x, 1) is not WALL
    for z in range(2, 5):
        assert grid.get(5, z) is not WALL
    # nothing off the L was touched
    assert grid.get(1, 4) is WALL
    assert grid.get(1, 1) is WALL


def test_carve_corridor_leaves_special_cells():
    grid = allocate(7, 3)
    grid.set(3, 1, START)
    opened = carve_corridor(grid, Position(1, 1), Position(5, 1))
    assert opened == 3
    assert grid.get(3, 1) is START
