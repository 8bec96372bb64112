import random

from labyrinth.maze import FLOOR, WALL, MazeConfig, MazeGrid, Position, allocate, find_path, generate_backtrack_maze
from labyrinth.maze.carving import carve_passages
from labyrinth.maze.flow import (
    add_alternative_paths,
    add_strategic_openings,
    carve_branches,
    dead_end_score,
    is_strategic_wall,
    open_dead_end,
    optimize_flow,
    relieve_dead_ends,
    would_create_open_block,
)
from labyrinth.maze.metrics import init_metrics


def test_dead_end_score_counts_walls():
    grid = MazeGrid.from_rows(["#####", "#S..#", "#####"])
    assert dead_end_score(grid, 3, 1) == 3
    assert dead_end_score(grid, 2, 1) == 2


def test_open_dead_end_makes_a_loop():
    grid = MazeGrid.from_rows(["#####", "#.#.#", "#####"])
    assert open_dead_end(grid, 1, 1, random.Random(1)) is True
    assert grid.get(2, 1) is FLOOR


def test_open_dead_end_skips_when_far_side_closed():
    grid = MazeGrid.from_rows(["#####", "#.###", "#####"])
    assert open_dead_end(grid, 1, 1, random.Random(1)) is False
    assert grid.count(FLOOR) == 1


def test_strategic_wall_connects_two_corridors():
    grid = MazeGrid.from_rows(["#####", "#.#.#", "#####"])
    assert is_strategic_wall(grid, 2, 1)
    assert not would_create_open_block(grid, 2, 1)


def test_opening_that_completes_block_is_rejected():
    grid = MazeGrid.from_rows(
        [
            "#####",
            "#.###",
            "#..##",
            "#####",
        ]
    )
    assert would_create_open_block(grid, 2, 1)
    assert not is_strategic_wall(grid, 2, 1)


def test_strategic_openings_never_create_plazas():
    grid = allocate(31, 31)
    carve_passages(grid, Position(1, 1), random.Random(8))
    grid.metrics = init_metrics()
    config = MazeConfig(strategic_opening_ratio=0.05)
    opened = add_strategic_openings(grid, config, random.Random(8))
    assert opened <= int(31 * 31 * 0.05)
    assert grid.metrics["strategic_openings"] == opened
    for z in range(30):
        for x in range(30):
            block = [grid.get(x, z), grid.get(x + 1, z), grid.get(x, z + 1), grid.get(x + 1, z + 1)]
            assert WALL in block, f"open 2x2 block at {x},{z}"


def test_relieve_dead_ends_only_adds_floor():
    grid = allocate(21, 21)
    carve_passages(grid, Position(1, 1), random.Random(2))
    before = grid.count(FLOOR)
    opened = relieve_dead_ends(grid, MazeConfig(dead_end_open_chance=1.0), random.Random(2))
    assert opened > 0
    assert grid.count(FLOOR) == before + opened


def test_carve_branches_respects_depth():
    grid = allocate(21, 21)
    grid.set(9, 9, FLOOR)
    carved = carve_branches(grid, Position(9, 9), depth=1, chance=1.0, rng=random.Random(0))
    assert carved == 4
    assert grid.get(11, 9) is FLOOR and grid.get(13, 9) is WALL


def test_carve_branches_zero_chance_is_noop():
    grid = allocate(11, 11)
    assert carve_branches(grid, Position(5, 5), depth=2, chance=0.0, rng=random.Random(0)) == 0


def test_alternative_paths_need_a_long_enough_path():
    grid = MazeGrid.from_rows(["#####", "#S.E#", "#####"])
    assert add_alternative_paths(grid, MazeConfig(branch_chance=1.0), random.Random(0)) == 0


def test_optimize_flow_keeps_maze_solvable():
    for seed in range(10):
        grid = generate_backtrack_maze(25, 25, rng=random.Random(seed))
        optimize_flow(grid, MazeConfig(), random.Random(seed))
        assert find_path(grid)
