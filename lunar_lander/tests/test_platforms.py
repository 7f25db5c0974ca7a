# lunar_lander/tests/test_platforms.py
import random

import numpy as np
import pytest

from lunar_lander.game.config import (
    TRICK_DISTANCE, MAX_SPIKE_HEIGHT, SAFE_LANDING_SPEED, SPIKES_PER_PLATFORM,
)
from lunar_lander.game.interaction import (
    RefuelEvent, Resolution, check_platforms, distance_to_platform, resolve,
)
from lunar_lander.game.lander import Lander
from lunar_lander.game.level import Level, LevelSet
from lunar_lander.game.platforms import (
    Platform, PlatformKind, ensure_destination, spike_height, spike_triangles,
)
from lunar_lander.game.terrain import level3_terrain


def one_platform_level(kind, x=405, y=400, width=90):
    # level 3's middle shelf is flat at y=400 over x 400..499
    return Level(level3_terrain(), (Platform(x, y, width, kind),), start=(410, 20))


def lander_at(x, y, dy=0.0):
    lander = Lander()
    lander.reset((x, y), 100.0)
    lander.dy = dy
    return lander


# -------------------- spike function --------------------

def test_spike_height_is_max_up_to_half_trick_distance():
    for d in np.linspace(0.0, TRICK_DISTANCE / 2, 50):
        assert spike_height(d) == MAX_SPIKE_HEIGHT


def test_spike_height_non_increasing_beyond_half():
    prev = MAX_SPIKE_HEIGHT
    for d in np.linspace(TRICK_DISTANCE / 2 + 0.01, TRICK_DISTANCE, 200):
        h = spike_height(d)
        assert 0.0 <= h <= prev + 1e-12
        prev = h
    assert spike_height(TRICK_DISTANCE) == 0.0


@pytest.mark.parametrize("d", [TRICK_DISTANCE, TRICK_DISTANCE + 5, TRICK_DISTANCE + 20, 3 * TRICK_DISTANCE])
def test_spikes_stay_down_at_and_beyond_trick_distance(d):
    assert spike_height(d) == 0.0


def test_spike_triangles_point_up():
    p = Platform(100, 300, 60, PlatformKind.TRICK)
    tris = spike_triangles(p, 10.0)
    assert len(tris) == SPIKES_PER_PLATFORM
    for a, b, c in tris:
        assert a[1] == b[1] == 300
        assert c[1] == 290
        assert a[0] < c[0] < b[0]
    assert tris[0][0][0] == 100 and tris[-1][1][0] == pytest.approx(160)


# -------------------- randomized kinds --------------------

def test_level3_always_has_a_destination():
    for seed in range(200):
        assert LevelSet(seed)[2].destinations(), f"seed {seed} produced no destination"


def test_level_kinds_are_reproducible():
    kinds = lambda s: [p.kind for p in LevelSet(s)[2].platforms]
    assert kinds(7) == kinds(7)
    assert LevelSet(None).seed is not None


def test_ensure_destination_forces_one():
    plats = [Platform(0, 0, 10, PlatformKind.TRICK) for _ in range(3)]
    ensure_destination(plats, random.Random(1))
    assert sum(p.kind is PlatformKind.DESTINATION for p in plats) == 1


def test_level_index_out_of_range():
    with pytest.raises(ValueError):
        LevelSet(1)[3]


# -------------------- handlers --------------------

def test_destination_sets_landed_only_on_surface():
    level = one_platform_level(PlatformKind.DESTINATION)
    on = lander_at(410, 351)            # feet at 399
    check_platforms(on, level, refuel_engaged=False)
    assert on.is_landed

    above = lander_at(410, 340)         # feet at 388
    check_platforms(above, level, refuel_engaged=False)
    assert not above.is_landed


def test_destination_needs_both_feet_over_the_strip():
    level = one_platform_level(PlatformKind.DESTINATION)
    hanging = lander_at(380, 351)       # left foot at 387, outside [405, 495]
    check_platforms(hanging, level, refuel_engaged=False)
    assert not hanging.is_landed


def test_gas_station_engage_and_disengage():
    level = one_platform_level(PlatformKind.GAS_STATION)
    lander = lander_at(410, 351)
    res = check_platforms(lander, level, refuel_engaged=False)
    assert res.refuel_event is RefuelEvent.ENGAGE
    assert res.refuel_engaged and lander.is_refueling

    # already engaged: no new event
    res = check_platforms(lander, level, refuel_engaged=True)
    assert res.refuel_event is None and res.refuel_engaged

    lander.y -= 10
    res = check_platforms(lander, level, refuel_engaged=True)
    assert res.refuel_event is RefuelEvent.DISENGAGE
    assert not res.refuel_engaged and not lander.is_refueling


def test_trick_spikes_crash_on_contact():
    level = one_platform_level(PlatformKind.TRICK)
    lander = lander_at(410, 351)
    res = check_platforms(lander, level, refuel_engaged=False)
    assert res.spike_heights == {0: MAX_SPIKE_HEIGHT}
    assert lander.is_crashed


def test_trick_spikes_rise_but_miss_above_reach():
    level = one_platform_level(PlatformKind.TRICK)
    lander = lander_at(410, 330)        # feet 22 px above the strip
    res = check_platforms(lander, level, refuel_engaged=False)
    assert res.spike_heights[0] == MAX_SPIKE_HEIGHT
    assert not lander.is_crashed


def test_trick_out_of_vertical_range_is_ignored():
    level = one_platform_level(PlatformKind.TRICK)
    lander = lander_at(410, 200)
    res = check_platforms(lander, level, refuel_engaged=False)
    assert res.spike_heights == {}
    assert not lander.is_crashed


def test_trick_reacts_inside_widened_extent():
    level = one_platform_level(PlatformKind.TRICK)
    lander = lander_at(380, 351)        # left foot 387 is off the strip, right foot 453 is on it
    assert distance_to_platform(lander, level.platforms[0]) < TRICK_DISTANCE / 2
    check_platforms(lander, level, refuel_engaged=False)
    assert lander.is_crashed


def test_trick_spikes_down_when_every_point_is_past_reach():
    level = one_platform_level(PlatformKind.TRICK)
    lander = lander_at(348, 307)        # feet 45 px up, right foot 29 px left of centre
    assert distance_to_platform(lander, level.platforms[0]) > TRICK_DISTANCE
    res = check_platforms(lander, level, refuel_engaged=False)
    assert res.spike_heights == {0: 0.0}
    assert not lander.is_crashed


def test_trick_does_not_clear_an_earlier_crash():
    level = one_platform_level(PlatformKind.TRICK)
    lander = lander_at(410, 200)
    lander.is_crashed = True
    check_platforms(lander, level, refuel_engaged=False)
    assert lander.is_crashed


# -------------------- resolution precedence --------------------

def flags(refueling=False, landed=False, crashed=False, dy=0.0):
    lander = lander_at(0, 0, dy)
    lander.is_refueling, lander.is_landed, lander.is_crashed = refueling, landed, crashed
    return lander


@pytest.mark.parametrize("lander, oob, expected", [
    (flags(refueling=True), False, Resolution.REFUELING),
    (flags(refueling=True, crashed=True), False, Resolution.REFUELING),
    (flags(refueling=True, dy=2.0), False, Resolution.CRASHED),
    (flags(landed=True, dy=SAFE_LANDING_SPEED), False, Resolution.LANDED),
    (flags(landed=True, crashed=True), False, Resolution.LANDED),
    (flags(landed=True, dy=2.0), False, Resolution.CRASHED),
    (flags(landed=True, dy=-2.0), False, Resolution.CRASHED),
    (flags(crashed=True), True, Resolution.CRASHED),
    (flags(), True, Resolution.LOST),
    (flags(), False, Resolution.NONE),
])
def test_resolution_precedence(lander, oob, expected):
    assert resolve(lander, oob) is expected
