"""Region labelling and corridor stitching.

Guarantees that every walkable cell belongs to one 4-connected region.
Disconnected regions are joined to the primary region (the one holding the
Start cell, otherwise the largest) through the nearest cell pair, carved as
an L corridor.

The nearest pair is found with a multi-source breadth-first sweep from the
primary region over the whole grid, walls included. On an unobstructed
4-connected lattice the sweep depth equals Manhattan distance, so the first
foreign cell reached is a minimum-distance partner. Cost is O(width*height)
per merge instead of O(|R1|*|Ri|) for an all-pairs scan.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from .carving import carve_corridor
from .cells import CARDINALS, Position
from .grid import MazeGrid
from .metrics import bump
from .tiles import WALKABLE

log = get_logger("labyrinth.maze")

Region = List[Position]


def label_regions(grid: MazeGrid) -> Tuple[List[List[int]], List[Region]]:
    """Flood fill every walkable cell into regions.

    Returns ``(labels, regions)`` where ``labels[z][x]`` is the region index
    or -1 for walls, and ``regions`` lists member cells in scan order.
    """
    w, h = grid.width, grid.height
    labels = [[-1] * w for _ in range(h)]
    regions: List[Region] = []
    for z in range(h):
        for x in range(w):
            if labels[z][x] != -1 or grid.cells[z][x] not in WALKABLE:
                continue
            idx = len(regions)
            region: Region = []
            stack = [(x, z)]
            labels[z][x] = idx
            while stack:
                cx, cz = stack.pop()
                region.append(Position(cx, cz))
                for dx, dz in CARDINALS:
                    nx, nz = cx + dx, cz + dz
                    if 0 <= nx < w and 0 <= nz < h and labels[nz][nx] == -1 and grid.cells[nz][nx] in WALKABLE:
                        labels[nz][nx] = idx
                        stack.append((nx, nz))
            regions.append(region)
    return labels, regions


def _primary_index(labels, regions: List[Region], anchor: Optional[Position]) -> int:
    if anchor is not None and labels[anchor[1]][anchor[0]] != -1:
        return labels[anchor[1]][anchor[0]]
    return max(range(len(regions)), key=lambda i: len(regions[i]))


def nearest_foreign_pair(
    grid: MazeGrid, labels, sources: Region, home: int
) -> Optional[Tuple[Position, Position]]:
    """Return ``(source, target)`` minimising Manhattan distance.

    ``source`` belongs to region ``home`` and ``target`` to any other region.
    """
    w, h = grid.width, grid.height
    origin: Dict[Tuple[int, int], Position] = {}
    queue = deque()
    for cell in sources:
        origin[cell] = cell
        queue.append(cell)
    while queue:
        cx, cz = queue.popleft()
        for dx, dz in CARDINALS:
            nx, nz = cx + dx, cz + dz
            if not (0 <= nx < w and 0 <= nz < h) or (nx, nz) in origin:
                continue
            origin[(nx, nz)] = origin[(cx, cz)]
            label = labels[nz][nx]
            if label != -1 and label != home:
                return origin[(nx, nz)], Position(nx, nz)
            queue.append((nx, nz))
    return None


def repair_connectivity(grid: MazeGrid, anchor: Optional[Position] = None) -> int:
    """Merge all walkable regions into one. Returns the number of merges."""
    labels, regions = label_regions(grid)
    found = len(regions)
    bump(grid, "regions_found", found)
    merges = 0
    # Each merge removes at least one region, so found-1 rounds always suffice.
    while len(regions) > 1 and merges < found - 1:
        home = _primary_index(labels, regions, anchor)
        pair = nearest_foreign_pair(grid, labels, regions[home], home)
        if pair is None:
            break
        source, target = pair
        carve_corridor(grid, source, target)
        merges += 1
        labels, regions = label_regions(grid)
    if merges:
        bump(grid, "regions_merged", merges)
        log.debug(event="regions_merged", found=found, merged=merges, remaining=len(regions))
    if len(regions) > 1:
        log.warn(event="regions_unmerged", remaining=len(regions))
    return merges


__all__ = ["label_regions", "repair_connectivity", "nearest_foreign_pair"]
