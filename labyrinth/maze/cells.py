from typing import NamedTuple, Tuple


class Position(NamedTuple):
    """Integer grid coordinate (column ``x``, row ``z``)."""

    x: int
    z: int


class WorldPosition(NamedTuple):
    """Grid coordinate scaled by the configured cell size."""

    x: float
    z: float


class PlacementCandidate(NamedTuple):
    position: Position
    score: int


Offset2D = Tuple[int, int]

CARDINALS: Tuple[Offset2D, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
RING8: Tuple[Offset2D, ...] = tuple(
    (dx, dz) for dz in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dz) != (0, 0)
)


def manhattan(a, b) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])
