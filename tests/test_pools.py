import random

from sewergen.sewer.pools import PoolCandidates, carve_pools, find_candidates

from sewer_test_utils import grid_from_rows, iter_cells

BOX = [
    "#######",
    "#.....#",
    "#.....#",
    "#.....#",
    "#.....#",
    "#.....#",
    "#######",
]


def test_find_candidates_labels_regions():
    count, labeled = find_candidates(grid_from_rows(["#####", "#.#.#", "#####"]))
    assert count == 2
    assert labeled[1][1] == 0
    assert labeled[3][1] == 1
    assert labeled[0][0] is None


def test_shrink_erodes_one_ring_per_step():
    pools = PoolCandidates(grid_from_rows(BOX))
    assert pools.num == 1
    assert pools.shrink(0) == 16
    assert pools.pool_cells() == 9
    assert pools.shrink(0) == 8
    assert pools.grid[3][3] == 0
    assert pools.pool_cells() == 1


def test_shrink_by_sums_removed():
    pools = PoolCandidates(grid_from_rows(BOX))
    assert pools.shrink_by(0, 2) == 24


def test_shrink_ignores_off_grid_neighbours():
    pools = PoolCandidates(grid_from_rows(["...", "...", "..."]))
    assert pools.shrink(0) == 0
    assert pools.pool_cells() == 9


def test_remove_sharp_edges_drops_thin_lines():
    pools = PoolCandidates(grid_from_rows(["#####", "#...#", "#####"]))
    assert pools.remove_sharp_edges() == 3
    assert pools.pool_cells() == 0


def test_remove_sharp_edges_keeps_blocks():
    pools = PoolCandidates(grid_from_rows(["####", "#..#", "#..#", "####"]))
    assert pools.remove_sharp_edges() == 0
    assert pools.pool_cells() == 4


def test_lone_cell_is_sharp():
    pools = PoolCandidates(grid_from_rows(BOX))
    pools.shrink_by(0, 2)
    assert pools.remove_sharp_edges() == 1


def test_remove_small_pools_threshold():
    pools = PoolCandidates(grid_from_rows(BOX))
    pools.shrink(0)
    assert pools.remove_small_pools(8) == 0
    assert pools.remove_small_pools(10) == 9
    assert pools.pool_cells() == 0


def test_materialize_maps_cells():
    grid = grid_from_rows(BOX)
    pools = PoolCandidates(grid)
    pools.shrink(0)
    out = pools.materialize(grid)
    assert out[0][0] == "#"
    assert out[1][1] == "."
    assert out[3][3] == "~"


def test_carve_pools_output_alphabet():
    grid = grid_from_rows(BOX)
    metrics = {}
    out = carve_pools(grid, random.Random(4), metrics=metrics)
    assert {c for col in out for c in col} <= {"#", ".", "~"}
    # every closed input cell stays a wall
    assert all(out[x][y] == "#" for x, y in iter_cells(grid, "#"))
    assert metrics["pools_carved"] == sum(1 for col in out for c in col if c == "~")
