from typing import List, Optional, Tuple, TypeVar

T = TypeVar("T")

Coord = Tuple[int, int]
# Column-major: grid[x][y]
Grid = List[List[T]]

CARDINALS: Tuple[Coord, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
DIRECTIONS: Tuple[Coord, ...] = ((0, -1), (1, -1), (1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1))


def new_grid(width: int, height: int, fill: T) -> Grid:
    return [[fill for _ in range(height)] for _ in range(width)]


def copy_grid(grid: Grid) -> Grid:
    return [list(col) for col in grid]


def grid_size(grid: Grid) -> Tuple[int, int]:
    return len(grid), (len(grid[0]) if grid else 0)


def get(grid: Grid, x: int, y: int) -> Optional[T]:
    """Return grid[x][y] or None when (x, y) is off the grid."""
    if 0 <= x < len(grid) and 0 <= y < len(grid[0]):
        return grid[x][y]
    return None


def distance2(a: Coord, b: Coord) -> int:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


__all__ = [
    "Coord",
    "Grid",
    "CARDINALS",
    "DIRECTIONS",
    "new_grid",
    "copy_grid",
    "grid_size",
    "get",
    "distance2",
]
