"""Plain-text rendering helpers shared by the CLI and the HTTP API."""
from __future__ import annotations

import string
from typing import List

from .cells import Grid, grid_size
from .tiles import BRIDGE, DOOR, FLOOR, POOL, WALL

LEGEND = {
    FLOOR: "floor",
    WALL: "wall",
    POOL: "pool",
    BRIDGE: "bridge",
    DOOR: "door",
}


def char_to_type(ch: str) -> str:
    return LEGEND.get(ch, "unknown")


def grid_rows(grid: Grid) -> List[str]:
    """Row-major strings (one per y) of a column-major grid."""
    width, height = grid_size(grid)
    return ["".join(grid[x][y] for x in range(width)) for y in range(height)]


def render_text(grid: Grid, header: bool = True) -> str:
    """Render a map with a lettered column ruler and numbered rows.

    Columns past 'z' wrap around to 'a' again.
    """
    width, _ = grid_size(grid)
    lines = []
    if header:
        letters = string.ascii_lowercase
        lines.append("    " + "".join(letters[x % len(letters)] for x in range(width)))
        for i, row in enumerate(grid_rows(grid)):
            lines.append(f"{i:2}: {row}")
    else:
        lines.extend(grid_rows(grid))
    return "\n".join(lines)


__all__ = ["LEGEND", "char_to_type", "grid_rows", "render_text"]
