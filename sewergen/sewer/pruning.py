"""Boundary finishing passes.

Seals the map edge and removes one-cell-wide slivers of floor that only exist
because of synthesis noise. Each function returns a new grid.
"""
from __future__ import annotations

from typing import List

from .cells import Coord, Grid, copy_grid, get, grid_size
from .tiles import FLOOR, WALL


def add_outer_wall(grid: Grid) -> Grid:
    """Turn FLOOR cells on the four border lines into WALL (POOL is left alone)."""
    grid = copy_grid(grid)
    width, height = grid_size(grid)
    for x in range(width):
        for y in (0, height - 1):
            if grid[x][y] == FLOOR:
                grid[x][y] = WALL
    for y in range(height):
        for x in (0, width - 1):
            if grid[x][y] == FLOOR:
                grid[x][y] = WALL
    return grid


def remove_boring_space_step(grid: Grid) -> int:
    """One pass: FLOOR flanked by WALL on both sides of an axis becomes WALL.

    Candidates are collected before any change is applied. Returns the number
    of cells converted.
    """
    width, height = grid_size(grid)
    to_remove: List[Coord] = []
    for x in range(width):
        for y in range(height):
            if grid[x][y] != FLOOR:
                continue
            if get(grid, x + 1, y) == WALL and get(grid, x - 1, y) == WALL:
                to_remove.append((x, y))
            elif get(grid, x, y + 1) == WALL and get(grid, x, y - 1) == WALL:
                to_remove.append((x, y))
    for x, y in to_remove:
        grid[x][y] = WALL
    return len(to_remove)


def remove_boring_space(grid: Grid, metrics: dict | None = None) -> Grid:
    grid = copy_grid(grid)
    pruned = 0
    while True:
        n = remove_boring_space_step(grid)
        if not n:
            break
        pruned += n
    if metrics is not None:
        metrics['cells_pruned'] = pruned
    return grid


__all__ = ["add_outer_wall", "remove_boring_space_step", "remove_boring_space"]
