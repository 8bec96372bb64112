"""Level progression and the level loader.

The first ten levels come from a fixed table; later levels grow with a
square-root curve up to a 120x120 cap. ``load_level`` produces the finished
grid a level builder consumes: room maze, exit, then collectibles.
"""

from __future__ import annotations

import math
from typing import NamedTuple

from ..logging_utils import get_logger
from .cells import WorldPosition
from .config import MazeConfig, resolve
from .exits import find_exit_position
from .grid import MazeGrid
from .pipeline import generate_room_maze
from .placement import place_collectibles

log = get_logger("labyrinth.maze")

MAX_LEVEL_SIZE = 120
SCALING_BASE_SIZE = 36


class LevelPlan(NamedTuple):
    name: str
    width: int
    height: int
    collectibles: int
    enemy_count: int
    time_limit: int
    weapon_count: int


class Level(NamedTuple):
    plan: LevelPlan
    grid: MazeGrid
    exit_world: WorldPosition


LEVEL_TABLE = (
    LevelPlan("Level 1", 18, 18, 4, 3, 180, 4),
    LevelPlan("Level 2", 20, 20, 5, 4, 240, 5),
    LevelPlan("Level 3", 22, 22, 5, 5, 300, 6),
    LevelPlan("Level 4", 24, 24, 5, 6, 360, 6),
    LevelPlan("Level 5", 26, 26, 5, 7, 420, 7),
    LevelPlan("Level 6", 28, 28, 5, 8, 480, 8),
    LevelPlan("Level 7", 30, 30, 5, 9, 540, 8),
    LevelPlan("Level 8", 32, 32, 5, 10, 600, 9),
    LevelPlan("Level 9", 34, 34, 5, 12, 660, 10),
    LevelPlan("Level 10", 36, 36, 5, 14, 720, 10),
)

PRESET_LAYOUTS = {
    "tutorial": (
        "###############",
        "#S.....#......#",
        "#.####.#.####.#",
        "#.#.........#.#",
        "#.#.#######.#.#",
        "#.#.#.....#...#",
        "#...#.###.#.#.#",
        "#####.#.#.#.#.#",
        "#.....#...#.#.#",
        "#.###.#####.#.#",
        "#...#.......#.#",
        "###.####.####.#",
        "#......#.#....#",
        "#.####.....##E#",
        "###############",
    ),
    "standard": (
        "########################",
        "#S..#....#...#.....#...#",
        "#.#.#.##.#.#.#.###.#.#.#",
        "#.#....#...#.....#...#.#",
        "#.####.#####.###.###.#.#",
        "#..............#.......#",
        "###.###.#.#.##.###.###.#",
        "#.....#.#.#.#......#...#",
        "#.###.#...#.#.####.#.#.#",
        "#...#...###......#...#.#",
        "###.#.#.....###..###.#.#",
        "#.....###.###..........#",
        "#.###.........####.###.#",
        "#.....#.###.#......#...#",
        "#######.....######.#.#.#",
        "#.......#.#..........#.#",
        "#.#####.#.#.########.#.#",
        "#.....................E#",
        "########################",
    ),
}


def preset(name: str) -> MazeGrid:
    """Fresh grid for a hand-authored layout. Raises KeyError for unknown names."""
    return MazeGrid.from_rows(PRESET_LAYOUTS[name], mode=f"preset:{name}")


def plan_level(index: int) -> LevelPlan:
    """Plan for zero-based level ``index``; negative indices clamp to 0."""
    index = max(0, index)
    if index < len(LEVEL_TABLE):
        return LEVEL_TABLE[index]
    level = index + 1
    size = min(MAX_LEVEL_SIZE, SCALING_BASE_SIZE + int(math.sqrt(level - 10) * 2))
    return LevelPlan(
        name=f"Level {level}",
        width=size,
        height=size,
        collectibles=min(5, 3 + (level - 10) // 5),
        enemy_count=min(30, 14 + (level - 10) // 2),
        time_limit=300 + (size - SCALING_BASE_SIZE) * 10,
        weapon_count=min(15, 10 + (level - 10) // 3),
    )


def load_level(index: int, config: MazeConfig | None = None, rng=None) -> Level:
    config, rng = resolve(config, rng)
    plan = plan_level(index)
    grid = generate_room_maze(plan.width, plan.height, config, rng)
    exit_world = find_exit_position(grid, config)
    grid = place_collectibles(grid, plan.collectibles, config, rng)
    log.info(event="level_loaded", level=plan.name, width=plan.width, collectibles=plan.collectibles)
    return Level(plan, grid, exit_world)


__all__ = ["LevelPlan", "Level", "LEVEL_TABLE", "PRESET_LAYOUTS", "preset", "plan_level", "load_level"]
