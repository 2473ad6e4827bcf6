"""Door candidate scanning and room-graph selection."""

import random

import pytest

from sewergen.sewer.connectivity import classify_floor
from sewergen.sewer.doors import DoorCandidate, DoorCandidates, add_doors, door_candidates_axis
from sewergen.sewer.bridges import AXIS_X, AXIS_Y

from sewer_test_utils import grid_from_rows

TWO_ROOMS = [
    "#######",
    "#..#..#",
    "#..#..#",
    "#######",
]

THREE_ROOMS = [
    "#######",
    "#..#..#",
    "#..####",
    "#..#..#",
    "#######",
]


def test_run_between_two_rooms():
    cmap = classify_floor(grid_from_rows(TWO_ROOMS))
    assert door_candidates_axis(cmap, AXIS_X) == []
    (candidate,) = door_candidates_axis(cmap, AXIS_Y)
    assert (candidate.high, candidate.low) == (1, 0)
    assert candidate.coords == [(3, 1), (3, 2)]


def test_gap_splits_runs_by_room_pair():
    cmap = classify_floor(grid_from_rows(THREE_ROOMS))
    candidates = DoorCandidates(cmap).candidates
    assert [(c.high, c.low, c.coords) for c in candidates] == [
        (2, 1, [(4, 2), (5, 2)]),
        (1, 0, [(3, 1)]),
        (2, 0, [(3, 3)]),
    ]


def test_same_room_wall_is_not_a_candidate():
    cmap = classify_floor(grid_from_rows([
        "#####",
        "#...#",
        "#.#.#",
        "#...#",
        "#####",
    ]))
    assert len(DoorCandidates(cmap)) == 0


@pytest.mark.parametrize("length,lo,hi", [(1, 0, 1), (2, 0, 1), (4, 1, 2), (8, 2, 5)])
def test_door_position_avoids_run_ends(length, lo, hi):
    candidate = DoorCandidate(1, 0, [(i, 0) for i in range(length)])
    rng = random.Random(42)
    for _ in range(50):
        x, _ = candidate.choose(rng)
        assert lo <= x < hi


def _chain(n_rooms):
    return [DoorCandidate(i + 1, i, [(i, 0)]) for i in range(n_rooms - 1)]


def _rooms(candidates, indices):
    rooms = set()
    for i in indices:
        rooms.update((candidates[i].low, candidates[i].high))
    return rooms


@pytest.mark.parametrize("seed", range(5))
def test_spanning_tree_covers_connected_graph(seed):
    # chain 0-1-2-3-4-5 plus a few parallel and shortcut edges
    cands = _chain(6) + [DoorCandidate(1, 0, [(9, 9)]), DoorCandidate(5, 2, [(8, 8)]), DoorCandidate(3, 0, [(7, 7)])]
    dc = DoorCandidates(candidates=cands)
    tree = dc.random_spanning_tree(random.Random(seed))
    assert len(tree) == 5
    assert _rooms(cands, tree) == set(range(6))


def test_spanning_tree_stays_in_one_component():
    cands = [DoorCandidate(1, 0, [(0, 0)]), DoorCandidate(3, 2, [(1, 1)])]
    tree = DoorCandidates(candidates=cands).random_spanning_tree(random.Random(3))
    assert len(tree) == 1
    assert _rooms(cands, tree) in ({0, 1}, {2, 3})


def test_no_candidates_is_not_an_error():
    assert len(DoorCandidates()) == 0
    dc = DoorCandidates(candidates=[])
    assert dc.random_spanning_tree(random.Random(1)) == set()
    assert dc.choose(random.Random(1)) == []


def test_extra_fraction_controls_loops():
    cmap = classify_floor(grid_from_rows(THREE_ROOMS))
    dc = DoorCandidates(cmap)
    assert len(dc.choose(random.Random(5), extra_fraction=0.25)) == 2
    assert len(dc.choose(random.Random(5), extra_fraction=1.0)) == 3
    chosen = dc.choose(random.Random(5))
    assert _rooms(dc.candidates, [dc.candidates.index(c) for c in chosen]) == {0, 1, 2}


def test_add_doors():
    grid = grid_from_rows(TWO_ROOMS)
    add_doors(grid, [(3, 1)])
    assert grid[3][1] == "+"
    assert grid[3][2] == "#"


def test_explicit_candidates_are_copied():
    cands = _chain(3)
    dc = DoorCandidates(candidates=cands)
    cands.append(DoorCandidate(9, 8, [(5, 5)]))
    assert len(dc) == 2
    assert sorted(dc.graph()) == [0, 1, 2]
