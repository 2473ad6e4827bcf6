"""Flood-fill region labelling and single-area enforcement.

Region ids are dense ints handed out in scan order (x outer, y inner). They
are only meaningful for the grid they were computed from; every call makes a
fresh numbering.
"""
from __future__ import annotations

from collections import deque
from typing import Callable, List, NamedTuple, Optional, Set, Tuple

from .cells import CARDINALS, Coord, Grid, grid_size, new_grid
from .tiles import FLOOR, POOL, WALL


def flood_regions(grid: Grid, passable: Callable[[str], bool]) -> Tuple[Grid, List[List[Coord]]]:
    """Label 4-connected components of passable cells.

    Returns (labels, areas): labels[x][y] is the region id or None, and
    areas[id] lists that region's coordinates in discovery order.
    """
    width, height = grid_size(grid)
    labels: Grid = new_grid(width, height, None)
    areas: List[List[Coord]] = []
    for x in range(width):
        for y in range(height):
            if labels[x][y] is not None or not passable(grid[x][y]):
                continue
            rid = len(areas)
            labels[x][y] = rid
            area = []
            q = deque([(x, y)])
            while q:
                cx, cy = q.popleft()
                area.append((cx, cy))
                for dx, dy in CARDINALS:
                    nx, ny = cx + dx, cy + dy
                    if 0 <= nx < width and 0 <= ny < height and labels[nx][ny] is None and passable(grid[nx][ny]):
                        labels[nx][ny] = rid
                        q.append((nx, ny))
            areas.append(area)
    return labels, areas


def classify_by_wall(grid: Grid) -> Grid:
    """Room ids: components of everything that is not WALL (pools included)."""
    return flood_regions(grid, lambda c: c != WALL)[0]


def classify_by_pool(grid: Grid) -> Grid:
    """Pool-body ids: components of everything that is not POOL (walls included)."""
    return flood_regions(grid, lambda c: c != POOL)[0]


class ClassifiedMap(NamedTuple):
    cells: Grid
    by_wall: Grid
    by_pool: Grid

    @property
    def width(self) -> int:
        return len(self.cells)

    @property
    def height(self) -> int:
        return len(self.cells[0])

    def is_floor(self, x: int, y: int) -> bool:
        return self.cells[x][y] == FLOOR

    def room_id(self, x: int, y: int) -> Optional[int]:
        return self.by_wall[x][y] if self.cells[x][y] == FLOOR else None

    def pool_id(self, x: int, y: int) -> Optional[int]:
        return self.by_pool[x][y] if self.cells[x][y] == FLOOR else None


def classify_floor(grid: Grid) -> ClassifiedMap:
    """Attach (room id, pool-body id) to every FLOOR cell of a WALL/FLOOR/POOL grid."""
    return ClassifiedMap([list(col) for col in grid], classify_by_wall(grid), classify_by_pool(grid))


def connected_areas(grid: Grid) -> List[List[Coord]]:
    return flood_regions(grid, lambda c: c != WALL)[1]


def ensure_single_connected_area(grid: Grid) -> int:
    """Wall off every non-wall component except the largest.

    Mutates grid in place and returns the number of cells walled off, or -1
    when the grid has no open cell at all.
    """
    areas = connected_areas(grid)
    if not areas:
        return -1
    largest = max(range(len(areas)), key=lambda i: len(areas[i]))
    walled = 0
    for i, area in enumerate(areas):
        if i == largest:
            continue
        for x, y in area:
            grid[x][y] = WALL
        walled += len(area)
    return walled


def reachable_from(grid: Grid, start: Coord) -> Set[Coord]:
    width, height = grid_size(grid)
    if grid[start[0]][start[1]] == WALL:
        return set()
    visited = {start}
    q = deque([start])
    while q:
        cx, cy = q.popleft()
        for dx, dy in CARDINALS:
            nx, ny = cx + dx, cy + dy
            if 0 <= nx < width and 0 <= ny < height and (nx, ny) not in visited and grid[nx][ny] != WALL:
                visited.add((nx, ny))
                q.append((nx, ny))
    return visited


__all__ = [
    "flood_regions",
    "classify_by_wall",
    "classify_by_pool",
    "ClassifiedMap",
    "classify_floor",
    "connected_areas",
    "ensure_single_connected_area",
    "reachable_from",
]
