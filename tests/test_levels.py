import random

import pytest

from labyrinth.maze import COLLECTIBLE, EXIT, START, LevelPlan, load_level, plan_level, preset
from labyrinth.maze.levels import LEVEL_TABLE, MAX_LEVEL_SIZE, PRESET_LAYOUTS
from maze_test_utils import assert_playable, bfs_reachable, find_char


def test_fixed_table_levels():
    assert plan_level(0) == LevelPlan("Level 1", 18, 18, 4, 3, 180, 4)
    assert plan_level(9) == LevelPlan("Level 10", 36, 36, 5, 14, 720, 10)
    assert [p.width for p in LEVEL_TABLE] == list(range(18, 38, 2))
    assert [p.time_limit for p in LEVEL_TABLE] == list(range(180, 780, 60))
    assert [p.weapon_count for p in LEVEL_TABLE] == [4, 5, 6, 6, 7, 8, 8, 9, 10, 10]


def test_negative_index_clamps_to_first_level():
    assert plan_level(-5) == plan_level(0)


def test_scaled_levels_follow_curve():
    plan = plan_level(10)
    assert plan == LevelPlan("Level 11", 38, 38, 3, 14, 320, 10)
    plan = plan_level(34)
    # level 35: 36 + int(sqrt(25) * 2) = 46
    assert plan.width == plan.height == 46
    assert plan.collectibles == 5
    assert plan.enemy_count == 26
    assert plan.time_limit == 400
    # 10 + 25 // 3 = 18, capped at 15
    assert plan.weapon_count == 15
    # level 16: 10 + 6 // 3
    assert plan_level(15).weapon_count == 12


def test_scaled_levels_cap_size_and_enemies():
    plan = plan_level(100_000)
    assert plan.width == MAX_LEVEL_SIZE
    assert plan.enemy_count == 30
    assert plan.weapon_count == 15
    assert plan.collectibles == 5


def test_sizes_never_shrink():
    widths = [plan_level(i).width for i in range(200)]
    assert widths == sorted(widths)


@pytest.mark.parametrize("index", [0, 4, 12])
def test_load_level_produces_finished_grid(index):
    lvl = load_level(index, rng=random.Random(index))
    grid = lvl.grid
    assert (grid.width, grid.height) == (lvl.plan.width, lvl.plan.height)
    assert grid.count(COLLECTIBLE) <= lvl.plan.collectibles
    ex = grid.find(EXIT)
    assert lvl.exit_world == (ex.x * 3.0, ex.z * 3.0)
    assert grid.find(START) == (1, 1)
    assert_playable(grid)


def test_tutorial_preset_is_solvable():
    grid = preset("tutorial")
    rows = grid.to_rows()
    assert rows == list(PRESET_LAYOUTS["tutorial"])
    start = find_char(rows, "S")[0]
    goal = find_char(rows, "E")[0]
    assert goal in bfs_reachable(rows, start)
    assert set(rows[0]) == {"#"} and set(rows[-1]) == {"#"}


def test_standard_preset_is_solvable():
    rows = preset("standard").to_rows()
    assert (len(rows[0]), len(rows)) == (24, 19)
    assert all(len(r) == 24 for r in rows)
    start = find_char(rows, "S")[0]
    goal = find_char(rows, "E")[0]
    assert start == (1, 1) and goal == (22, 17)
    assert goal in bfs_reachable(rows, start)


def test_preset_returns_fresh_grid():
    a = preset("tutorial")
    a.set(2, 1, COLLECTIBLE)
    b = preset("tutorial")
    assert b.get(2, 1) is not COLLECTIBLE


def test_unknown_preset_raises():
    with pytest.raises(KeyError):
        preset("no-such-layout")
