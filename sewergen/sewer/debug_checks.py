"""Structural diagnostics for generated sewers.

``analyze`` never raises on a bad level; it reports every violated property so
callers (tests, scripts/diagnose_seeds.py) can print or assert on the lists.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .cells import DIRECTIONS, get
from .connectivity import connected_areas, reachable_from
from .tiles import FLOOR, POOL, WALL


def _unsafe_spawn(grid, coord) -> bool:
    x, y = coord
    if get(grid, x, y) != FLOOR:
        return True
    return any(get(grid, x + dx, y + dy) != FLOOR for dx, dy in DIRECTIONS)


def analyze(sewer) -> Dict[str, Any]:
    grid = sewer.map
    width, height = sewer.width, sewer.height
    areas = connected_areas(grid)
    reachable = reachable_from(grid, sewer.start)
    unreachable: List = [
        (x, y) for x in range(width) for y in range(height) if grid[x][y] != WALL and (x, y) not in reachable
    ]
    unsealed_border: List = []
    for x in range(width):
        for y in range(height):
            on_border = x in (0, width - 1) or y in (0, height - 1)
            if on_border and grid[x][y] not in (WALL, POOL):
                unsealed_border.append((x, y))
    return {
        "areas": len(areas),
        "unreachable_cells": unreachable,
        "goal_unreachable": sewer.goal not in reachable,
        "same_start_goal": sewer.start == sewer.goal,
        "unsafe_spawns": [c for c in (sewer.start, sewer.goal) if _unsafe_spawn(grid, c)],
        "pool_cells": sum(1 for col in grid for c in col if c == POOL),
        "unsealed_border": unsealed_border,
        "lights_off_pool": [light.coord for light in sewer.lights if get(grid, *light.coord) != POOL],
    }


def issues(report: Dict[str, Any]) -> Dict[str, int]:
    """Collapse an analyze() report into violation counts (all zero when healthy)."""
    return {
        "disconnected_areas": max(0, report["areas"] - 1),
        "unreachable_cells": len(report["unreachable_cells"]),
        "goal_unreachable": int(report["goal_unreachable"]),
        "same_start_goal": int(report["same_start_goal"]),
        "unsafe_spawns": len(report["unsafe_spawns"]),
        "missing_pool": int(report["pool_cells"] == 0),
        "unsealed_border": len(report["unsealed_border"]),
        "lights_off_pool": len(report["lights_off_pool"]),
    }
