# lunar_lander/tests/test_lander.py
import pytest

from lunar_lander.game.config import (
    GravityTier, THRUSTER_ACCELERATION, TERMINAL_VELOCITY_X, TERMINAL_VELOCITY_Y,
    FUEL_DISCHARGE_RATE, THRUST_COOLDOWN_TICKS,
)
from lunar_lander.game.lander import Lander, ThrustDirection, next_thrust_sprite


def fresh(fuel=100.0):
    lander = Lander()
    lander.reset((100, 100), fuel)
    return lander


@pytest.mark.parametrize("tier", list(GravityTier))
def test_gravity_is_monotone_then_clamped(tier):
    lander = fresh()
    prev = lander.dy
    for _ in range(500):
        lander.apply_gravity(tier.acceleration)
        assert lander.dy >= prev
        assert lander.dy <= TERMINAL_VELOCITY_Y
        prev = lander.dy
    assert lander.dy == TERMINAL_VELOCITY_Y


def test_feet_geometry():
    lander = fresh()
    assert lander.left_foot == (107, 148)
    assert lander.right_foot == (173, 148)
    assert lander.bottom_center == (140, 148)


def test_thrust_inside_cooldown_applies_once():
    lander = fresh()
    assert lander.apply_thrust(ThrustDirection.UP)
    assert not lander.apply_thrust(ThrustDirection.UP)
    assert lander.dy == pytest.approx(-THRUSTER_ACCELERATION)
    assert lander.fuel_remaining == pytest.approx(100.0 - FUEL_DISCHARGE_RATE)

    for _ in range(THRUST_COOLDOWN_TICKS - 1):
        lander.advance_cooldowns()
    assert not lander.can_thrust(ThrustDirection.UP)
    lander.advance_cooldowns()
    assert lander.apply_thrust(ThrustDirection.UP)
    assert lander.dy == pytest.approx(-2 * THRUSTER_ACCELERATION)


def test_cooldowns_are_per_direction():
    lander = fresh()
    assert lander.apply_thrust(ThrustDirection.LEFT)
    assert lander.apply_thrust(ThrustDirection.RIGHT)
    assert lander.dx == pytest.approx(0.0)
    assert lander.fuel_remaining == pytest.approx(100.0 - 2 * FUEL_DISCHARGE_RATE)


def test_no_thrust_without_fuel():
    lander = fresh(fuel=0.0)
    for d in ThrustDirection:
        assert not lander.apply_thrust(d)
    assert (lander.dx, lander.dy, lander.fuel_remaining) == (0.0, 0.0, 0.0)


def test_fuel_never_goes_negative():
    lander = fresh(fuel=1.0)
    assert lander.apply_thrust(ThrustDirection.UP)
    assert lander.fuel_remaining == 0.0


def test_lateral_thrust_locked_while_refueling():
    lander = fresh()
    lander.is_refueling = True
    assert not lander.apply_thrust(ThrustDirection.LEFT)
    assert not lander.apply_thrust(ThrustDirection.RIGHT)
    assert lander.apply_thrust(ThrustDirection.UP)


def test_thrust_is_clamped_at_terminal_velocity():
    lander = fresh()
    lander.dy = -TERMINAL_VELOCITY_Y + 0.2
    lander.dx = TERMINAL_VELOCITY_X - 0.1
    assert lander.apply_thrust(ThrustDirection.UP)
    assert lander.apply_thrust(ThrustDirection.RIGHT)
    assert lander.dy == -TERMINAL_VELOCITY_Y
    assert lander.dx == TERMINAL_VELOCITY_X


def test_integrate_and_reset():
    lander = fresh()
    lander.dx, lander.dy = 1.5, -2.0
    lander.integrate()
    assert lander.pose == (101.5, 98.0)
    lander.is_crashed = True
    lander.reset((20, 300), 50.0)
    assert lander.pose == (20.0, 300.0)
    assert (lander.dx, lander.dy) == (0.0, 0.0)
    assert not lander.is_crashed
    assert lander.fuel_remaining == 50.0


def test_thrust_sprites():
    assert next_thrust_sprite(0, ThrustDirection.UP) == 1
    assert next_thrust_sprite(3, ThrustDirection.UP) == 4
    assert next_thrust_sprite(4, ThrustDirection.UP) == 4
    assert next_thrust_sprite(2, ThrustDirection.LEFT) == 5
    assert next_thrust_sprite(7, ThrustDirection.LEFT) == 7
    assert next_thrust_sprite(5, ThrustDirection.RIGHT) == 8
    assert next_thrust_sprite(9, ThrustDirection.RIGHT) == 10
