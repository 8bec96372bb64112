"""Public maze package interface.

Generation entry points plus the grid types consumed by level builders,
entity spawners and player placement.
"""

from .cells import PlacementCandidate, Position, WorldPosition
from .config import MazeConfig
from .connectivity import label_regions, repair_connectivity
from .exits import find_exit_position
from .grid import MazeGrid, allocate, to_world
from .levels import Level, LevelPlan, load_level, plan_level, preset
from .pathfinding import find_path
from .pipeline import generate_backtrack_maze, generate_room_maze
from .placement import find_strategic_positions, place_collectibles
from .tiles import COLLECTIBLE, EXIT, FLOOR, START, WALKABLE, WALL, CellKind

__all__ = [
    "CellKind",
    "WALL",
    "FLOOR",
    "START",
    "EXIT",
    "COLLECTIBLE",
    "WALKABLE",
    "MazeGrid",
    "MazeConfig",
    "Position",
    "WorldPosition",
    "PlacementCandidate",
    "allocate",
    "to_world",
    "generate_backtrack_maze",
    "generate_room_maze",
    "place_collectibles",
    "find_exit_position",
    "find_path",
    "label_regions",
    "repair_connectivity",
    "find_strategic_positions",
    "Level",
    "LevelPlan",
    "load_level",
    "plan_level",
    "preset",
]
