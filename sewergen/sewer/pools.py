"""Pool carving: turn open regions of the synthesized map into irregular pools.

Every 4-connected OPEN region is a pool candidate. Candidates are eroded from
their boundary inwards, one-cell spurs are trimmed and anything left that is
too small to read as a body of water is dropped. Whatever remains becomes
POOL; the rest of the open space becomes FLOOR.
"""
from __future__ import annotations

from collections import deque
from typing import List, Optional, Tuple

from .cells import CARDINALS, DIRECTIONS, Coord, Grid, get, grid_size, new_grid
from .tiles import CLOSED, FLOOR, OPEN, POOL, WALL


def find_candidates(grid: Grid) -> Tuple[int, Grid]:
    """Label every 4-connected OPEN region; returns (count, labeled grid)."""
    width, height = grid_size(grid)
    labeled: Grid = new_grid(width, height, None)
    count = 0
    seen = set()
    for x in range(width):
        for y in range(height):
            if grid[x][y] != OPEN or (x, y) in seen:
                continue
            seen.add((x, y))
            q = deque([(x, y)])
            while q:
                cx, cy = q.popleft()
                labeled[cx][cy] = count
                for dx, dy in CARDINALS:
                    nx, ny = cx + dx, cy + dy
                    if get(grid, nx, ny) == OPEN and (nx, ny) not in seen:
                        seen.add((nx, ny))
                        q.append((nx, ny))
            count += 1
    return count, labeled


class PoolCandidates:
    def __init__(self, grid: Grid):
        self.num, self.grid = find_candidates(grid)

    def shrink(self, candidate: int) -> int:
        """Drop every cell of `candidate` touching (8-way) a cell outside it."""
        width, height = grid_size(self.grid)
        to_remove: List[Coord] = []
        for x in range(width):
            for y in range(height):
                if self.grid[x][y] != candidate:
                    continue
                for dx, dy in DIRECTIONS:
                    nx, ny = x + dx, y + dy
                    # off-grid neighbours never erode
                    if 0 <= nx < width and 0 <= ny < height and self.grid[nx][ny] != candidate:
                        to_remove.append((x, y))
                        break
        for x, y in to_remove:
            self.grid[x][y] = None
        return len(to_remove)

    def shrink_by(self, candidate: int, by: int) -> int:
        removed = 0
        for _ in range(by):
            removed += self.shrink(candidate)
        return removed

    def remove_sharp_edges(self) -> int:
        """Drop pool cells with both horizontal or both vertical neighbours absent."""
        width, height = grid_size(self.grid)
        to_remove: List[Coord] = []
        for x in range(width):
            for y in range(height):
                if self.grid[x][y] is None:
                    continue
                if get(self.grid, x + 1, y) is None and get(self.grid, x - 1, y) is None:
                    to_remove.append((x, y))
                elif get(self.grid, x, y + 1) is None and get(self.grid, x, y - 1) is None:
                    to_remove.append((x, y))
        for x, y in to_remove:
            self.grid[x][y] = None
        return len(to_remove)

    def remove_small_pools(self, min_size: int) -> int:
        width, height = grid_size(self.grid)
        to_remove: List[Coord] = []
        seen = set()
        for x in range(width):
            for y in range(height):
                if self.grid[x][y] is None or (x, y) in seen:
                    continue
                seen.add((x, y))
                q = deque([(x, y)])
                region = []
                while q:
                    cx, cy = q.popleft()
                    region.append((cx, cy))
                    for dx, dy in CARDINALS:
                        nx, ny = cx + dx, cy + dy
                        if get(self.grid, nx, ny) is not None and (nx, ny) not in seen:
                            seen.add((nx, ny))
                            q.append((nx, ny))
                if len(region) < min_size:
                    to_remove.extend(region)
        for x, y in to_remove:
            self.grid[x][y] = None
        return len(to_remove)

    def pool_cells(self) -> int:
        return sum(1 for col in self.grid for c in col if c is not None)

    def materialize(self, grid: Grid) -> Grid:
        width, height = grid_size(grid)
        out = new_grid(width, height, WALL)
        for x in range(width):
            for y in range(height):
                if grid[x][y] == CLOSED:
                    out[x][y] = WALL
                elif self.grid[x][y] is not None:
                    out[x][y] = POOL
                else:
                    out[x][y] = FLOOR
        return out


def carve_pools(grid: Grid, rng, shrink_min: int = 2, shrink_max: int = 3, sharp_edge_passes: int = 3,
                min_pool_size: int = 8, metrics: Optional[dict] = None) -> Grid:
    """Run the full carving sequence and return a WALL/FLOOR/POOL grid."""
    candidates = PoolCandidates(grid)
    for candidate in range(candidates.num):
        candidates.shrink_by(candidate, rng.randint(shrink_min, shrink_max))
    for _ in range(sharp_edge_passes):
        candidates.remove_sharp_edges()
    candidates.remove_small_pools(min_pool_size)
    if metrics is not None:
        metrics['pools_carved'] = candidates.pool_cells()
    return candidates.materialize(grid)


__all__ = ["find_candidates", "PoolCandidates", "carve_pools"]
