"""Cell kinds for maze grids.

Each kind carries a one character tile code used by ``MazeGrid.render`` and
the JSON API. Start and Collectible are distinct kinds.
"""

from enum import Enum


class CellKind(str, Enum):
    WALL = "#"
    FLOOR = "."
    START = "S"
    EXIT = "E"
    COLLECTIBLE = "C"

    @classmethod
    def from_char(cls, ch: str) -> "CellKind":
        return cls(ch)


# Tile constants centralized for terse imports
WALL = CellKind.WALL
FLOOR = CellKind.FLOOR
START = CellKind.START
EXIT = CellKind.EXIT
COLLECTIBLE = CellKind.COLLECTIBLE

WALKABLE = frozenset({FLOOR, START, EXIT, COLLECTIBLE})

__all__ = ["CellKind", "WALL", "FLOOR", "START", "EXIT", "COLLECTIBLE", "WALKABLE"]
