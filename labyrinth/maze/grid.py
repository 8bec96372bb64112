"""Maze grid container and allocation.

Rows are stored as ``cells[z][x]`` so a rendered grid reads top to bottom the
same way the game client walks it.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence

from .cells import CARDINALS, Position, WorldPosition
from .tiles import WALKABLE, WALL, CellKind


class MazeGrid:
    __slots__ = ("cells", "metrics", "mode")

    def __init__(self, cells: List[List[CellKind]], mode: str = "custom"):
        self.cells = cells
        self.metrics: Dict[str, Any] = {}
        self.mode = mode

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    @property
    def height(self) -> int:
        return len(self.cells)

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= z < self.height

    def in_interior(self, x: int, z: int) -> bool:
        return 0 < x < self.width - 1 and 0 < z < self.height - 1

    def get(self, x: int, z: int) -> CellKind:
        return self.cells[z][x]

    def set(self, x: int, z: int, kind: CellKind) -> None:
        self.cells[z][x] = kind

    def is_walkable(self, x: int, z: int) -> bool:
        return self.in_bounds(x, z) and self.cells[z][x] in WALKABLE

    def neighbors4(self, x: int, z: int) -> Iterator[Position]:
        for dx, dz in CARDINALS:
            nx, nz = x + dx, z + dz
            if self.in_bounds(nx, nz):
                yield Position(nx, nz)

    def positions(self, *kinds: CellKind) -> Iterator[Position]:
        wanted = set(kinds)
        for z, row in enumerate(self.cells):
            for x, kind in enumerate(row):
                if kind in wanted:
                    yield Position(x, z)

    def find(self, kind: CellKind) -> Optional[Position]:
        return next(self.positions(kind), None)

    def count(self, kind: CellKind) -> int:
        return sum(row.count(kind) for row in self.cells)

    def copy(self) -> "MazeGrid":
        clone = MazeGrid([list(row) for row in self.cells], mode=self.mode)
        clone.metrics = dict(self.metrics)
        return clone

    def to_rows(self) -> List[str]:
        return ["".join(kind.value for kind in row) for row in self.cells]

    @classmethod
    def from_rows(cls, rows: Sequence[str], mode: str = "custom") -> "MazeGrid":
        return cls([[CellKind.from_char(ch) for ch in row] for row in rows], mode=mode)

    def render(self) -> str:
        return "\n".join(self.to_rows())

    def __iter__(self) -> Iterator[List[CellKind]]:
        return iter(self.cells)

    def __repr__(self) -> str:
        return f"MazeGrid(mode={self.mode!r}, width={self.width}, height={self.height})"


def allocate(width: int, height: int, mode: str = "custom") -> MazeGrid:
    """Return a ``height x width`` grid filled entirely with walls."""
    return MazeGrid([[WALL for _ in range(width)] for _ in range(height)], mode=mode)


def to_world(position: Position, cell_size: float) -> WorldPosition:
    return WorldPosition(position.x * cell_size, position.z * cell_size)


__all__ = ["MazeGrid", "allocate", "to_world"]
