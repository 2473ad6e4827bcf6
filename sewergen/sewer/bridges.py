"""Bridge candidates: straight runs of POOL that would join two pool bodies."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .cells import Coord, Grid
from .connectivity import ClassifiedMap
from .tiles import BRIDGE, FLOOR, POOL

AXIS_X = "x"
AXIS_Y = "y"


def axis_coord(along: int, across: int, axis: str) -> Coord:
    return (along, across) if axis == AXIS_X else (across, along)


def axis_extent(cmap: ClassifiedMap, axis: str) -> Tuple[int, int]:
    """(length along axis, length across axis)."""
    if axis == AXIS_X:
        return cmap.width, cmap.height
    return cmap.height, cmap.width


@dataclass
class BridgeCandidate:
    coords: List[Coord] = field(default_factory=list)
    start: int = 0
    end: int = 0

    @property
    def key(self) -> Tuple[int, int]:
        return (self.start, self.end) if self.start < self.end else (self.end, self.start)

    def __len__(self) -> int:
        return len(self.coords)


def bridge_candidates_axis(cmap: ClassifiedMap, axis: str) -> List[BridgeCandidate]:
    candidates: List[BridgeCandidate] = []
    along_len, across_len = axis_extent(cmap, axis)
    for across in range(across_len):
        start = None
        pool_coords: List[Coord] = []
        for along in range(along_len):
            x, y = axis_coord(along, across, axis)
            cell = cmap.cells[x][y]
            if cell == FLOOR:
                end = cmap.by_pool[x][y]
                if start is not None and pool_coords and start != end:
                    candidates.append(BridgeCandidate(list(pool_coords), start, end))
                pool_coords.clear()
                start = end
            elif cell == POOL:
                pool_coords.append((x, y))
            else:
                # a wall breaks the floor-pool-floor sequence
                start = None
                pool_coords.clear()
    return candidates


class BridgeCandidates:
    def __init__(self, cmap: ClassifiedMap):
        candidates = bridge_candidates_axis(cmap, AXIS_X)
        candidates.extend(bridge_candidates_axis(cmap, AXIS_Y))
        self.by_sides: Dict[Tuple[int, int], List[BridgeCandidate]] = {}
        for candidate in candidates:
            self.by_sides.setdefault(candidate.key, []).append(candidate)
        for group in self.by_sides.values():
            group.sort(key=len)
            del group[len(group) - len(group) // 2:]

    def __len__(self) -> int:
        return sum(len(g) for g in self.by_sides.values())

    def choose(self, rng) -> List[BridgeCandidate]:
        """One candidate per pair of pool bodies, uniformly from the short half."""
        return [rng.choice(group) for group in self.by_sides.values()]


def add_bridge(grid: Grid, candidate: BridgeCandidate) -> None:
    for x, y in candidate.coords:
        grid[x][y] = BRIDGE


__all__ = [
    "AXIS_X",
    "AXIS_Y",
    "axis_coord",
    "BridgeCandidate",
    "bridge_candidates_axis",
    "BridgeCandidates",
    "add_bridge",
]
