"""Room mode: recursive spatial subdivision into rooms and corridor stubs.

Partitions are processed from an explicit work list. Rooms produced here are
not guaranteed to reach each other; ``connectivity.repair_connectivity``
must run afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .cells import CARDINALS, RING8, Position
from .config import MazeConfig
from .grid import MazeGrid
from .metrics import bump
from .tiles import FLOOR, WALL

STUB_LENGTH = 2


@dataclass
class Room:
    x: int
    z: int
    w: int
    h: int

    def cells(self):
        for iz in range(self.z, self.z + self.h):
            for ix in range(self.x, self.x + self.w):
                yield ix, iz

    @property
    def center(self) -> Position:
        return Position(self.x + self.w // 2, self.z + self.h // 2)


def carve_room(grid: MazeGrid, x: int, z: int, w: int, h: int, config: MazeConfig, rng) -> Room:
    """Carve a room centred in the region, sized by ``config.room_ratio``.

    Rooms are at least 3x3 and may overhang a region narrower than that;
    carving is clipped to the grid interior so the outer ring stays wall.
    """
    rw = max(3, int(w * config.room_ratio))
    rh = max(3, int(h * config.room_ratio))
    room = Room(x + (w - rw) // 2, z + (h - rh) // 2, rw, rh)
    for ix, iz in room.cells():
        if grid.in_interior(ix, iz):
            grid.set(ix, iz, FLOOR)
    add_corridor_stubs(grid, room, config, rng)
    return room


def add_corridor_stubs(grid: MazeGrid, room: Room, config: MazeConfig, rng) -> int:
    cx, cz = room.center
    stubs = 0
    for dx, dz in CARDINALS:
        if rng.random() >= config.corridor_stub_chance:
            continue
        stubs += 1
        for step in range(1, STUB_LENGTH + 1):
            nx, nz = cx + dx * step, cz + dz * step
            if grid.in_interior(nx, nz):
                grid.set(nx, nz, FLOOR)
    return stubs


def _split_wall(grid: MazeGrid, cells: List[Tuple[int, int]], passages: int, rng) -> None:
    for ix, iz in cells:
        if grid.in_interior(ix, iz):
            grid.set(ix, iz, WALL)
    for _ in range(passages):
        ix, iz = cells[rng.randrange(len(cells))]
        if grid.in_interior(ix, iz):
            grid.set(ix, iz, FLOOR)


def partition_rooms(grid: MazeGrid, config: MazeConfig, rng) -> List[Room]:
    """Subdivide the interior and carve one room per leaf region."""
    rooms: List[Room] = []
    pending = [(1, 1, grid.width - 2, grid.height - 2, config.partition_depth)]
    threshold = config.min_partition_size
    while pending:
        x, z, w, h, depth = pending.pop()
        if w < threshold or h < threshold or depth <= 0:
            rooms.append(carve_room(grid, x, z, w, h, config, rng))
            continue
        if w == h:
            horizontal = rng.random() < 0.5
        else:
            horizontal = h > w
        if horizontal:
            split_z = z + int(h * (0.4 + rng.random() * 0.2))
            _split_wall(grid, [(x + i, split_z) for i in range(w)], max(1, w // 8), rng)
            # pushed in reverse so the first half is carved first
            pending.append((x, split_z + 1, w, z + h - split_z - 1, depth - 1))
            pending.append((x, z, w, split_z - z, depth - 1))
        else:
            split_x = x + int(w * (0.4 + rng.random() * 0.2))
            _split_wall(grid, [(split_x, z + i) for i in range(h)], max(1, h // 8), rng)
            pending.append((split_x + 1, z, x + w - split_x - 1, h, depth - 1))
            pending.append((x, z, split_x - x, h, depth - 1))
    return rooms


def narrow_score(grid: MazeGrid, x: int, z: int) -> int:
    """Walls among the eight surrounding cells."""
    score = 0
    for dx, dz in RING8:
        nx, nz = x + dx, z + dz
        if grid.in_bounds(nx, nz) and grid.get(nx, nz) is WALL:
            score += 1
    return score


def widen_corridors(grid: MazeGrid, config: MazeConfig, rng) -> int:
    """Knock down one wall next to cramped floor cells, with some probability."""
    widened = 0
    for z in range(2, grid.height - 2):
        for x in range(2, grid.width - 2):
            if grid.get(x, z) is not FLOOR or narrow_score(grid, x, z) < 6:
                continue
            if rng.random() >= config.widen_chance:
                continue
            candidates = [
                (x + dx, z + dz)
                for dx, dz in RING8
                if grid.in_interior(x + dx, z + dz) and grid.get(x + dx, z + dz) is WALL
            ]
            if candidates:
                ox, oz = rng.choice(candidates)
                grid.set(ox, oz, FLOOR)
                widened += 1
    bump(grid, "corridors_widened", widened)
    return widened


__all__ = ["Room", "carve_room", "add_corridor_stubs", "partition_rooms", "narrow_score", "widen_corridors"]
