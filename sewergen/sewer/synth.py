"""Overlapping-pattern texture synthesis (wave function collapse).

Produces an OPEN/CLOSED grid of any size in which every N x N window (with
wrap-around on both axes) is one of the windows of a small example bitmap,
taken in any of its eight orientations.

Phases per run:
    * Start every output cell with the set of viable patterns (bitmask).
    * Repeatedly observe the uncollapsed cell of lowest weighted entropy and
      collapse it to one pattern, drawn by pattern frequency.
    * Propagate: each neighbour keeps only patterns compatible with some
      remaining pattern of the changed cell.
    * A cell left with no pattern is a contradiction; the whole run restarts.

Only cardinal neighbours are constrained. Agreement between overlapping
windows chains along rows and columns, so every output window ends up equal
to the pattern chosen at its top-left cell.
"""
from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence, Tuple

from .cells import CARDINALS, Grid, new_grid
from .errors import Contradiction, GenerationFailed, SewerConfigError
from .tiles import CLOSED, OPEN

SEWER_EXAMPLE: Tuple[str, ...] = (
    "................................",
    "................................",
    "................................",
    "#############################...",
    "#...........................#...",
    "#...........................#...",
    "#...........................#...",
    "#...........................#...",
    "#.............###...........#...",
    "#...........###.####........#...",
    "#.........###......###......#...",
    "#........##..........##.....#...",
    "#.......##............#.....#...",
    "#.......#.............#.....#...",
    "#......##.............#.....#...",
    "##....##.............##.....#...",
    ".#....#..............#......#...",
    ".#....#..............#......#...",
    ".#....#.............##......#...",
    ".#....#.............#.......#...",
    ".#....#.............#.......#...",
    ".#....##...........##.......#...",
    ".#.....#...........#........#...",
    ".#.....##..........#........#...",
    ".#......##.........#........#...",
    ".#.......##........###......#...",
    ".#........###........########...",
    ".#..........###.............#...",
    ".#............##............#...",
    ".#.............##...........#...",
    ".#..............#...........#...",
    ".############################...",
)

Pattern = Tuple[str, ...]


def parse_example(rows: Sequence[str]) -> Grid:
    """Turn text rows ('.' open, '#' closed) into a column-major grid."""
    if not rows or not rows[0]:
        raise SewerConfigError("example bitmap is empty")
    width = len(rows[0])
    grid = new_grid(width, len(rows), OPEN)
    for y, row in enumerate(rows):
        if len(row) != width:
            raise SewerConfigError(f"example row {y} has length {len(row)}, expected {width}")
        for x, ch in enumerate(row):
            if ch not in (OPEN, CLOSED):
                raise SewerConfigError(f"unexpected char in example bitmap: {ch!r}")
            grid[x][y] = ch
    return grid


def _rotate(p: Pattern, n: int) -> Pattern:
    return tuple(p[(n - 1 - x) * n + y] for y in range(n) for x in range(n))


def _reflect(p: Pattern, n: int) -> Pattern:
    return tuple(p[y * n + (n - 1 - x)] for y in range(n) for x in range(n))


def _orientations(p: Pattern, n: int) -> List[Pattern]:
    out = []
    for _ in range(4):
        out.append(p)
        out.append(_reflect(p, n))
        p = _rotate(p, n)
    return out


def _bits(mask: int):
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


class OverlappingPatterns:
    """Pattern catalogue of an example bitmap plus cardinal compatibility masks."""

    def __init__(self, example: Grid, pattern_size: int):
        n = pattern_size
        w = len(example)
        h = len(example[0])
        if w < n or h < n:
            raise SewerConfigError(f"example bitmap {w}x{h} is smaller than the pattern window {n}x{n}")
        counts: Dict[Pattern, int] = {}
        order: List[Pattern] = []
        for y in range(h):
            for x in range(w):
                base = tuple(example[(x + dx) % w][(y + dy) % h] for dy in range(n) for dx in range(n))
                for p in _orientations(base, n):
                    if p not in counts:
                        counts[p] = 0
                        order.append(p)
                    counts[p] += 1
        self.size = n
        self.patterns: List[Pattern] = order
        self.weights: List[int] = [counts[p] for p in order]
        # compat[d][i]: mask of patterns allowed at offset CARDINALS[d] from pattern i
        self.compat: List[List[int]] = [self._compat_for(dx, dy) for dx, dy in CARDINALS]
        self.viable = self._viable_mask()

    def __len__(self) -> int:
        return len(self.patterns)

    def _compat_for(self, dx: int, dy: int) -> List[int]:
        n = self.size
        xs = range(max(0, dx), min(n, n + dx))
        ys = range(max(0, dy), min(n, n + dy))
        by_key: Dict[Pattern, int] = {}
        for j, q in enumerate(self.patterns):
            key = tuple(q[(y - dy) * n + (x - dx)] for y in ys for x in xs)
            by_key[key] = by_key.get(key, 0) | (1 << j)
        return [by_key.get(tuple(p[y * n + x] for y in ys for x in xs), 0) for p in self.patterns]

    def _viable_mask(self) -> int:
        mask = (1 << len(self.patterns)) - 1
        changed = True
        while changed:
            changed = False
            for i in _bits(mask):
                if any(not (compat[i] & mask) for compat in self.compat):
                    mask &= ~(1 << i)
                    changed = True
        if not mask:
            raise SewerConfigError("example bitmap has no pattern that can tile")
        return mask

    def support(self, direction: int, mask: int) -> int:
        """Patterns allowed next to any pattern of `mask` in `direction`."""
        s = 0
        compat = self.compat[direction]
        for i in _bits(mask):
            s |= compat[i]
        return s

    def entropy(self, mask: int) -> float:
        total = 0
        acc = 0.0
        for i in _bits(mask):
            w = self.weights[i]
            total += w
            acc += w * math.log(w)
        return math.log(total) - acc / total

    def choose(self, mask: int, rng) -> int:
        indices = list(_bits(mask))
        r = rng.random() * sum(self.weights[i] for i in indices)
        for i in indices:
            r -= self.weights[i]
            if r < 0:
                return i
        return indices[-1]

    def top_left_value(self, pattern_id: int) -> str:
        return self.patterns[pattern_id][0]


_PATTERN_CACHE: Dict[Tuple[Tuple[str, ...], int], OverlappingPatterns] = {}


def overlapping_patterns(rows: Sequence[str] = SEWER_EXAMPLE, pattern_size: int = 3) -> OverlappingPatterns:
    """Return the (cached) pattern catalogue for an example bitmap."""
    key = (tuple(rows), pattern_size)
    patterns = _PATTERN_CACHE.get(key)
    if patterns is None:
        patterns = OverlappingPatterns(parse_example(rows), pattern_size)
        _PATTERN_CACHE[key] = patterns
    return patterns


class Synthesizer:
    """Collapses outputs from a shared pattern catalogue.

    Support and entropy results are memoised per wave mask for the length of
    one run only; the catalogue itself holds no per-run state.
    """

    def __init__(self, patterns: OverlappingPatterns):
        self.patterns = patterns
        self._support_memo: List[Dict[int, int]] = [{} for _ in CARDINALS]
        self._entropy_memo: Dict[int, float] = {}

    def _reset_memo(self) -> None:
        self._support_memo = [{} for _ in CARDINALS]
        self._entropy_memo = {}

    def _support(self, direction: int, mask: int) -> int:
        memo = self._support_memo[direction]
        s = memo.get(mask)
        if s is None:
            s = memo[mask] = self.patterns.support(direction, mask)
        return s

    def _entropy(self, mask: int) -> float:
        e = self._entropy_memo.get(mask)
        if e is None:
            e = self._entropy_memo[mask] = self.patterns.entropy(mask)
        return e

    def run(self, width: int, height: int, rng, max_retries: Optional[int] = None) -> Tuple[Grid, int]:
        """Collapse a wrapping width x height output, restarting on contradiction.

        Returns (grid, contradictions). With max_retries=None the solver
        retries forever; otherwise GenerationFailed is raised once more than
        max_retries contradictions have occurred.
        """
        neighbours = _torus_neighbours(width, height)
        try:
            return self._run(width, height, neighbours, rng, max_retries)
        finally:
            self._reset_memo()

    def _run(self, width, height, neighbours, rng, max_retries):
        contradictions = 0
        while True:
            try:
                wave = self._collapse(width * height, neighbours, rng)
            except Contradiction:
                contradictions += 1
                if max_retries is not None and contradictions > max_retries:
                    raise GenerationFailed(
                        f"pattern synthesis hit {contradictions} contradictions for {width}x{height}",
                        attempts=contradictions,
                    )
                continue
            grid = new_grid(width, height, OPEN)
            for x in range(width):
                for y in range(height):
                    pattern_id = wave[x * height + y].bit_length() - 1
                    grid[x][y] = self.patterns.top_left_value(pattern_id)
            return grid, contradictions

    def _collapse(self, n_cells: int, neighbours: List[Tuple[int, ...]], rng) -> List[int]:
        patterns = self.patterns
        wave = [patterns.viable] * n_cells
        noise = [rng.random() * 1e-6 for _ in range(n_cells)]
        while True:
            best = -1
            best_e = math.inf
            for i, m in enumerate(wave):
                if m & (m - 1):
                    e = self._entropy(m) + noise[i]
                    if e < best_e:
                        best_e = e
                        best = i
            if best < 0:
                return wave
            wave[best] = 1 << patterns.choose(wave[best], rng)
            self._propagate(wave, best, neighbours)

    def _propagate(self, wave: List[int], start: int, neighbours: List[Tuple[int, ...]]) -> None:
        stack = [start]
        while stack:
            i = stack.pop()
            mask = wave[i]
            for d, j in enumerate(neighbours[i]):
                current = wave[j]
                reduced = current & self._support(d, mask)
                if reduced != current:
                    if not reduced:
                        raise Contradiction(f"cell {j} has no legal pattern")
                    wave[j] = reduced
                    stack.append(j)


def _torus_neighbours(width: int, height: int) -> List[Tuple[int, ...]]:
    out = []
    for x in range(width):
        for y in range(height):
            out.append(tuple(((x + dx) % width) * height + (y + dy) % height for dx, dy in CARDINALS))
    return out


def synthesize(width: int, height: int, rng, pattern_size: int = 3, example: Sequence[str] = SEWER_EXAMPLE,
               max_retries: Optional[int] = None) -> Tuple[Grid, int]:
    """Produce an OPEN/CLOSED grid matching the example's local statistics."""
    return Synthesizer(overlapping_patterns(example, pattern_size)).run(width, height, rng, max_retries=max_retries)


__all__ = ["SEWER_EXAMPLE", "parse_example", "OverlappingPatterns", "overlapping_patterns", "Synthesizer", "synthesize"]
