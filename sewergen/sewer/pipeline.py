"""Pipeline orchestration for sewer generation.

One attempt runs every stage in order, threading a single random stream
through all of them:

    synthesize -> carve_pools -> outer_wall -> remove_boring_space
    -> classify -> bridges -> doors -> single_area -> start_goal -> lights

An attempt that produces an unusable level (no safe spawn cell, no goal,
no pool at all) returns None and ``Sewer.generate`` starts over from the
synthesis step. The random stream is never reset between attempts, so the
number of attempts is part of what a seed determines.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .bridges import BridgeCandidates, add_bridge
from .cells import Coord, Grid
from .config import SewerConfig, SewerSpec
from .connectivity import classify_floor, ensure_single_connected_area
from .doors import DoorCandidates, add_doors
from .errors import GenerationFailed
from .features import SewerLight, choose_start_and_goal, has_pool, place_lights
from .metrics import init_metrics
from .pools import carve_pools
from .pruning import add_outer_wall, remove_boring_space
from .render import LEGEND, grid_rows
from .synth import synthesize
from .tiles import BRIDGE, DOOR, FLOOR, POOL

_log = get_logger("sewer")

WALKABLE = (FLOOR, POOL, BRIDGE, DOOR)


@dataclass
class Sewer:
    start: Coord
    goal: Coord
    map: Grid
    lights: List[SewerLight]
    metrics: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def width(self) -> int:
        return len(self.map)

    @property
    def height(self) -> int:
        return len(self.map[0])

    def cell(self, x: int, y: int) -> str:
        return self.map[x][y]

    def is_walkable(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        return self.map[x][y] in WALKABLE

    def rows(self) -> List[str]:
        return grid_rows(self.map)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "start": list(self.start),
            "goal": list(self.goal),
            "lights": [{"x": light.coord[0], "y": light.coord[1], "type": light.typ} for light in self.lights],
            "rows": self.rows(),
            "legend": dict(LEGEND),
            "attempts": self.metrics.get("attempts", 0),
        }

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    @classmethod
    def generate(cls, spec: SewerSpec, rng, config: SewerConfig | None = None) -> "Sewer":
        """Retry whole-pipeline attempts until one yields a valid level.

        Unbounded unless config.max_attempts is set, in which case
        GenerationFailed is raised once the cap is used up.
        """
        config = config or SewerConfig()
        config.validate(spec.width, spec.height)
        metrics = init_metrics()
        started = time.perf_counter()
        while True:
            metrics['attempts'] += 1
            sewer = cls.try_generate(spec, rng, config, metrics)
            if sewer is not None:
                metrics['runtime_ms'] = int((time.perf_counter() - started) * 1000)
                _log.info(
                    event="sewer_generated",
                    width=spec.width,
                    height=spec.height,
                    attempts=metrics['attempts'],
                    contradictions=metrics['contradictions'],
                    runtime_ms=metrics['runtime_ms'],
                )
                return sewer
            if config.max_attempts is not None and metrics['attempts'] >= config.max_attempts:
                _log.warn(event="sewer_attempts_exhausted", width=spec.width, height=spec.height,
                          attempts=metrics['attempts'])
                raise GenerationFailed(
                    f"no valid {spec.width}x{spec.height} sewer after {metrics['attempts']} attempts",
                    attempts=metrics['attempts'],
                )

    @classmethod
    def try_generate(cls, spec: SewerSpec, rng, config: SewerConfig | None = None,
                     metrics: Dict[str, Any] | None = None) -> Optional["Sewer"]:
        """Run a single attempt; returns None when the result must be discarded."""
        config = config or SewerConfig()
        config.validate(spec.width, spec.height)
        if metrics is None:
            metrics = init_metrics()
        if config.enable_metrics:
            phase_times: Dict[str, int] = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
                phase_times[label] = int((pe - ps) * 1000)
                return r
        else:
            phase_times = None

            def _phase(label, fn, *a, **k):
                return fn(*a, **k)

        def _reject(reason: str):
            metrics['rejected_' + reason] += 1
            _log.debug(event="sewer_attempt_rejected", reason=reason, attempt=metrics['attempts'])
            return None

        # Stage 1: open/closed texture
        grid, contradictions = _phase(
            'synthesize', synthesize, spec.width, spec.height, rng,
            pattern_size=config.pattern_size, max_retries=config.max_synth_retries,
        )
        metrics['contradictions'] += contradictions
        # Stages 2-3: pools, outer wall, boring space
        grid = _phase(
            'carve_pools', carve_pools, grid, rng,
            shrink_min=config.shrink_min, shrink_max=config.shrink_max,
            sharp_edge_passes=config.sharp_edge_passes, min_pool_size=config.min_pool_size, metrics=metrics,
        )
        grid = _phase('outer_wall', add_outer_wall, grid)
        grid = _phase('remove_boring_space', remove_boring_space, grid, metrics)
        # Stage 4: room / pool-body classification
        classified = _phase('classify', classify_floor, grid)
        # Stages 5-7: candidates and selection
        bridge_candidates = BridgeCandidates(classified)
        door_candidates = DoorCandidates(classified)
        metrics['bridge_candidates'] = len(bridge_candidates)
        metrics['door_candidates'] = len(door_candidates)
        grid = [list(col) for col in classified.cells]
        bridges = bridge_candidates.choose(rng)
        for candidate in bridges:
            add_bridge(grid, candidate)
        metrics['bridges_placed'] = len(bridges)
        door_coords = [c.choose(rng) for c in _phase('select_doors', door_candidates.choose, rng,
                                                    config.extra_door_fraction)]
        add_doors(grid, door_coords)
        metrics['doors_placed'] = len(door_coords)
        # Stage 8: validation
        if _phase('single_area', ensure_single_connected_area, grid) < 0:
            return _reject('empty')
        start, goal = _phase('start_goal', choose_start_and_goal, grid, rng, config.goal_bands)
        if start is None:
            return _reject('no_spawn')
        if goal is None:
            return _reject('no_goal')
        if not has_pool(grid):
            return _reject('no_pool')
        lights = _phase('lights', place_lights, grid, rng, config.light_one_in)
        if phase_times is not None:
            metrics['phase_ms'] = phase_times
        return cls(start=start, goal=goal, map=grid, lights=lights, metrics=metrics)


def generate_sewer(seed: int | None = None, width: int = 40, height: int = 20,
                   config: SewerConfig | None = None) -> Sewer:
    """Seeded convenience wrapper; seed None draws a random seed."""
    if seed is None:
        seed = random.randint(0, 2**31 - 1)
    sewer = Sewer.generate(SewerSpec(width, height), random.Random(seed), config)
    sewer.metrics['seed'] = seed
    return sewer


__all__ = ["Sewer", "generate_sewer", "WALKABLE"]
