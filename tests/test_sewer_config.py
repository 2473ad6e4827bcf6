import random

import pytest

from sewergen.sewer import GenerationFailed, Sewer, SewerConfig, SewerConfigError, SewerSpec


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5), (2, 20), (40, 2)])
def test_bad_sizes_are_config_errors(size):
    with pytest.raises(SewerConfigError):
        Sewer.generate(SewerSpec(*size), random.Random(1))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pattern_size": 1},
        {"shrink_min": 4, "shrink_max": 3},
        {"extra_door_fraction": 1.5},
        {"goal_bands": 0},
        {"light_one_in": 0},
        {"max_attempts": 0},
    ],
)
def test_bad_tuning_rejected(kwargs):
    with pytest.raises(SewerConfigError):
        SewerConfig(**kwargs).validate(40, 20)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        SewerConfig().validate(0, 0)


class _NoDraws:
    def __getattr__(self, name):
        raise AssertionError(f"random stream used: {name}")


@pytest.mark.parametrize("size", [(3, 3), (4, 4), (5, 5), (5, 40), (40, 4)])
def test_sizes_without_two_spawn_cells_fail_fast(size):
    # default config: no attempt cap, so acceptance here would retry forever
    with pytest.raises(SewerConfigError):
        Sewer.generate(SewerSpec(*size), _NoDraws())


@pytest.mark.parametrize("size", [(6, 5), (5, 6), (6, 6)])
def test_smallest_spawnable_sizes_validate(size):
    SewerConfig().validate(*size)


def test_small_size_with_caps_reports_failure_not_hang():
    config = SewerConfig(max_attempts=3, max_synth_retries=5)
    try:
        s = Sewer.generate(SewerSpec(6, 6), random.Random(1), config)
    except GenerationFailed as e:
        assert e.attempts >= 1
    else:
        assert s.start != s.goal


def test_small_map_generates_or_reports_failure():
    config = SewerConfig(max_attempts=25)
    try:
        s = Sewer.generate(SewerSpec(12, 10), random.Random(8), config)
    except GenerationFailed as e:
        assert e.attempts == 25
    else:
        assert (s.width, s.height) == (12, 10)
        assert s.metrics["attempts"] <= 25


def test_from_env_reads_fields():
    cfg = SewerConfig.from_env({
        "SEWER_MIN_POOL_SIZE": "12",
        "SEWER_EXTRA_DOOR_FRACTION": "0.5",
        "SEWER_MAX_ATTEMPTS": "7",
        "SEWER_MAX_SYNTH_RETRIES": "none",
        "SEWER_ENABLE_METRICS": "false",
    })
    assert cfg.min_pool_size == 12
    assert cfg.extra_door_fraction == 0.5
    assert cfg.max_attempts == 7
    assert cfg.max_synth_retries is None
    assert cfg.enable_metrics is False
    assert cfg.shrink_min == 2


def test_from_env_rejects_garbage():
    with pytest.raises(SewerConfigError):
        SewerConfig.from_env({"SEWER_GOAL_BANDS": "ten"})

