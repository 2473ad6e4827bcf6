import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from .errors import SewerConfigError


@dataclass(frozen=True)
class SewerSpec:
    width: int = 40
    height: int = 20

    @property
    def size(self):
        return (self.width, self.height)


@dataclass
class SewerConfig:
    pattern_size: int = 3
    shrink_min: int = 2
    shrink_max: int = 3
    sharp_edge_passes: int = 3
    min_pool_size: int = 8
    extra_door_fraction: float = 0.25
    goal_bands: int = 10
    light_one_in: int = 20
    max_attempts: Optional[int] = None
    max_synth_retries: Optional[int] = None
    enable_metrics: bool = True

    def validate(self, width: int, height: int) -> None:
        """Raise SewerConfigError for requests that no amount of retrying can fix."""
        if self.pattern_size < 2:
            raise SewerConfigError(f"pattern_size must be at least 2, got {self.pattern_size}")
        if width <= 0 or height <= 0:
            raise SewerConfigError(f"sewer size must be positive, got {width}x{height}")
        if width < self.pattern_size or height < self.pattern_size:
            raise SewerConfigError(
                f"sewer size {width}x{height} is smaller than the {self.pattern_size}x{self.pattern_size} pattern window"
            )
        # start and goal each need a full ring of floor inside the outer wall
        if width < 5 or height < 5 or (width - 4) * (height - 4) < 2:
            raise SewerConfigError(f"sewer size {width}x{height} leaves no room for two spawn cells")
        if not 0 <= self.shrink_min <= self.shrink_max:
            raise SewerConfigError(f"invalid shrink range [{self.shrink_min}, {self.shrink_max}]")
        if self.sharp_edge_passes < 0 or self.min_pool_size < 0:
            raise SewerConfigError("sharp_edge_passes and min_pool_size must not be negative")
        if not 0.0 <= self.extra_door_fraction <= 1.0:
            raise SewerConfigError(f"extra_door_fraction must be within [0, 1], got {self.extra_door_fraction}")
        if self.goal_bands < 1 or self.light_one_in < 1:
            raise SewerConfigError("goal_bands and light_one_in must be at least 1")
        for name in ("max_attempts", "max_synth_retries"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise SewerConfigError(f"{name} must be at least 1 when set, got {value}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SewerConfig":
        """Build a config from SEWER_<FIELD> environment variables.

        Example: SEWER_MIN_POOL_SIZE=10 SEWER_MAX_ATTEMPTS=50. Empty values
        for the optional caps (or "none") mean unbounded.
        """
        env = os.environ if environ is None else environ
        cfg = cls()
        for f in fields(cls):
            key = 'SEWER_' + f.name.upper()
            if key not in env:
                continue
            raw = env[key].strip()
            try:
                if f.name in ("max_attempts", "max_synth_retries"):
                    value = None if raw.lower() in ("", "none", "0") else int(raw)
                elif f.name == "enable_metrics":
                    value = raw.lower() not in {'0', 'false', 'no', ''}
                elif f.name == "extra_door_fraction":
                    value = float(raw)
                else:
                    value = int(raw)
            except ValueError as exc:
                raise SewerConfigError(f"invalid value for {key}: {raw!r}") from exc
            setattr(cfg, f.name, value)
        return cfg


__all__ = ["SewerSpec", "SewerConfig"]
