"""Door candidates and door selection.

A door candidate is a straight run of WALL cells separating two distinct rooms
(components of non-wall space). Rooms form a multigraph whose edges are door
candidates; a random spanning tree over it guarantees every room in a
connected component gets a way in, and a share of the leftover candidates is
added back so the level has loops.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Set

from .bridges import AXIS_X, AXIS_Y, axis_coord, axis_extent
from .cells import Coord, Grid
from .connectivity import ClassifiedMap
from .tiles import DOOR, FLOOR, WALL


@dataclass
class DoorCandidate:
    high: int
    low: int
    coords: List[Coord] = field(default_factory=list)

    def choose(self, rng) -> Coord:
        """Pick a door position away from the ends of the wall run."""
        low_index = len(self.coords) // 4
        high_index = max(len(self.coords) - 1 - low_index, low_index + 1)
        return self.coords[rng.randrange(low_index, high_index)]


def door_candidates_axis(cmap: ClassifiedMap, axis: str) -> List[DoorCandidate]:
    candidates: List[DoorCandidate] = []
    along_len, across_len = axis_extent(cmap, axis)
    ox, oy = axis_coord(0, 1, axis)
    cells = cmap.cells
    for across in range(1, across_len - 1):
        current = None
        for along in range(1, along_len - 1):
            x, y = axis_coord(along, across, axis)
            if cells[x][y] == WALL and cells[x + ox][y + oy] == FLOOR and cells[x - ox][y - oy] == FLOOR:
                high = cmap.by_wall[x + ox][y + oy]
                low = cmap.by_wall[x - ox][y - oy]
                if high != low:
                    if current is None or (current.high, current.low) != (high, low):
                        current = DoorCandidate(high, low)
                        candidates.append(current)
                    current.coords.append((x, y))
                    continue
            current = None
    return candidates


class RoomEdge(NamedTuple):
    to_room: int
    via_door_candidate: int


class DoorCandidates:
    def __init__(self, cmap: Optional[ClassifiedMap] = None, candidates: Optional[List[DoorCandidate]] = None):
        """Scan `cmap` for candidates, or take an explicit `candidates` list."""
        if candidates is not None:
            self.candidates = list(candidates)
        elif cmap is not None:
            self.candidates = door_candidates_axis(cmap, AXIS_X)
            self.candidates.extend(door_candidates_axis(cmap, AXIS_Y))
        else:
            self.candidates = []

    def __len__(self) -> int:
        return len(self.candidates)

    def graph(self) -> Dict[int, List[RoomEdge]]:
        graph: Dict[int, List[RoomEdge]] = {}
        for index, candidate in enumerate(self.candidates):
            graph.setdefault(candidate.low, []).append(RoomEdge(candidate.high, index))
            graph.setdefault(candidate.high, []).append(RoomEdge(candidate.low, index))
        return graph

    def random_spanning_tree(self, rng) -> Set[int]:
        """Door candidate indices forming a random spanning tree over the rooms.

        Edges are admitted in random order from a growing frontier; an edge is
        kept only if it reaches a room not yet visited.
        """
        tree: Set[int] = set()
        if not self.candidates:
            return tree
        graph = self.graph()
        visited: Set[int] = set()
        to_visit = [rng.randrange(len(self.candidates))]
        while to_visit:
            i = rng.randrange(len(to_visit))
            to_visit[i], to_visit[-1] = to_visit[-1], to_visit[i]
            index = to_visit.pop()
            candidate = self.candidates[index]
            new_low = candidate.low not in visited
            new_high = candidate.high not in visited
            if not (new_low or new_high):
                continue
            visited.add(candidate.low)
            visited.add(candidate.high)
            tree.add(index)
            for edge in graph[candidate.low] + graph[candidate.high]:
                if edge.to_room not in visited:
                    to_visit.append(edge.via_door_candidate)
        return tree

    def choose(self, rng, extra_fraction: float = 0.25) -> List[DoorCandidate]:
        tree = self.random_spanning_tree(rng)
        others = [i for i in range(len(self.candidates)) if i not in tree]
        rng.shuffle(others)
        chosen = sorted(tree) + others[:int(len(others) * extra_fraction)]
        chosen.sort()
        return [self.candidates[i] for i in chosen]


def add_doors(grid: Grid, coords: List[Coord]) -> None:
    for x, y in coords:
        grid[x][y] = DOOR


__all__ = ["DoorCandidate", "door_candidates_axis", "RoomEdge", "DoorCandidates", "add_doors"]
