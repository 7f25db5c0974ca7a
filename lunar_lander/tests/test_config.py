# lunar_lander/tests/test_config.py
import pytest

from lunar_lander.game.config import (
    GravityTier, RunConfig, MOVEMENT_UNIT, THRUST_COOLDOWN_TICKS, parse_gravity, read_config,
)
from lunar_lander.game.level import build_levels


def test_gravity_tiers():
    assert GravityTier.WEAK.acceleration == pytest.approx(13 * MOVEMENT_UNIT)
    assert GravityTier.NORMAL.acceleration == pytest.approx(25 * MOVEMENT_UNIT)
    assert GravityTier.STRONG.acceleration == pytest.approx(35 * MOVEMENT_UNIT)


def test_parse_gravity_is_case_insensitive():
    assert parse_gravity("strong") is GravityTier.STRONG
    assert parse_gravity(" Weak ") is GravityTier.WEAK
    with pytest.raises(ValueError):
        parse_gravity("Jupiter")


def test_read_config_from_argv():
    cfg = read_config(["--gravity", "Strong", "--timer", "10", "--fuel", "40", "--seed", "3"])
    assert cfg == RunConfig(timer_seconds=10, gravity_tier=GravityTier.STRONG, fuel_capacity=40.0)
    assert read_config([]) == RunConfig()


def test_read_config_skips_game_loop_flags():
    argv = ["--mute", "--level", "2", "--verbose", "--timer", "5", "--seed", "-1"]
    assert read_config(argv) == RunConfig(timer_seconds=5)


@pytest.mark.parametrize("kwargs", [
    {"timer_seconds": 0},
    {"fuel_capacity": -1.0},
    {"gravity_tier": "Normal"},
])
def test_invalid_config_raises(kwargs):
    with pytest.raises(ValueError):
        RunConfig(**kwargs)


def test_thrust_cooldown_rounds_up_to_whole_ticks():
    assert THRUST_COOLDOWN_TICKS == 4


def test_build_levels():
    levels = build_levels(99)
    assert levels.seed == 99
    assert [lv.name for lv in levels] == ["Hills", "Caves", "Terraces"]
    assert [lv.start for lv in levels] == [(100, 100), (20, 300), (410, 20)]
    assert levels.is_last(2) and not levels.is_last(1)
    assert levels[1].has_ceiling and not levels[0].has_ceiling
