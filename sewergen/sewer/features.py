"""Feature placement on a finished map: spawn/goal cells and pool lights."""
from __future__ import annotations

from typing import List, NamedTuple, Optional, Tuple

from .cells import CARDINALS, DIRECTIONS, Coord, Grid, distance2, get, grid_size
from .tiles import FLOOR, LIGHT_POOL, POOL


class SewerLight(NamedTuple):
    coord: Coord
    typ: str = LIGHT_POOL


def safe_spawn_coords(grid: Grid) -> List[Coord]:
    """FLOOR cells whose eight neighbours are all FLOOR (nothing hazardous next to a spawn)."""
    width, height = grid_size(grid)
    coords = []
    for x in range(width):
        for y in range(height):
            if grid[x][y] != FLOOR:
                continue
            if all(get(grid, x + dx, y + dy) == FLOOR for dx, dy in DIRECTIONS):
                coords.append((x, y))
    return coords


def choose_start_and_goal(grid: Grid, rng, goal_bands: int = 10) -> Tuple[Optional[Coord], Optional[Coord]]:
    """Pick a random start and a goal from the band of candidates farthest from it.

    Returns (None, None) when there is no safe cell at all and (start, None)
    when no second cell is left for the goal.
    """
    candidates = safe_spawn_coords(grid)
    rng.shuffle(candidates)
    if not candidates:
        return None, None
    start = candidates.pop()
    candidates.sort(key=lambda c: distance2(c, start))
    offset = (goal_bands - 1) * (len(candidates) // goal_bands)
    far = candidates[offset:]
    if not far:
        return start, None
    return start, rng.choice(far)


def has_pool(grid: Grid) -> bool:
    return any(cell == POOL for col in grid for cell in col)


def pool_light_coords(grid: Grid, rng, one_in: int = 20) -> List[Coord]:
    """Pool cells that host a light.

    Pool edges (next to floor or the map boundary) are always lit; any other
    pool cell is lit with probability 1/one_in. A random draw is made for
    every pool cell, lit or not.
    """
    width, height = grid_size(grid)
    coords = []
    for x in range(width):
        for y in range(height):
            if grid[x][y] != POOL:
                continue
            lucky = rng.randrange(one_in) == 0
            if lucky or any(get(grid, x + dx, y + dy) in (FLOOR, None) for dx, dy in CARDINALS):
                coords.append((x, y))
    return coords


def place_lights(grid: Grid, rng, one_in: int = 20) -> List[SewerLight]:
    return [SewerLight(coord, LIGHT_POOL) for coord in pool_light_coords(grid, rng, one_in)]


__all__ = ["SewerLight", "safe_spawn_coords", "choose_start_and_goal", "has_pool", "pool_light_coords", "place_lights"]
