# lunar_lander/tests/test_collision.py
import math

import numpy as np
import pytest

from lunar_lander.game.config import WIDTH, HEIGHT
from lunar_lander.game.collision import (
    floor_samples, ceiling_samples, is_floor_collision, is_ceiling_collision,
    is_collision, is_out_of_bounds, rollback_position,
)
from lunar_lander.game.lander import Lander
from lunar_lander.game.terrain import Terrain, TerrainProfile


def flat_terrain(floor_y=400.0, ceiling_y=None, ceiling_span=None):
    floor = np.full(WIDTH + 1, floor_y)
    floor[0] = floor[WIDTH] = HEIGHT
    ceiling = None
    if ceiling_y is not None:
        c = np.full(WIDTH + 1, math.nan)
        lo, hi = ceiling_span or (0, WIDTH + 1)
        c[lo:hi] = ceiling_y
        ceiling = TerrainProfile(c)
    return Terrain(floor=TerrainProfile(floor), ceiling=ceiling)


def lander_at(x, y):
    lander = Lander()
    lander.reset((x, y), 100.0)
    return lander


def test_floor_samples_include_feet_and_stay_inside_hull():
    lander = lander_at(300, 100)
    pts = list(floor_samples(lander))
    assert lander.left_foot in pts and lander.right_foot in pts
    for x, y in pts:
        assert 300 <= x <= 380
        assert 100 < y <= 150


def test_ceiling_samples_cover_dome_top():
    lander = lander_at(300, 100)
    pts = list(ceiling_samples(lander))
    assert (340, 100) in pts
    assert min(y for _, y in pts) == 100


def test_feet_strictly_below_floor_collide():
    t = flat_terrain(400.0)
    assert is_floor_collision(lander_at(300, 352.5), t)     # feet at 400.5


def test_feet_on_or_above_floor_do_not_collide():
    t = flat_terrain(400.0)
    assert not is_floor_collision(lander_at(300, 352), t)   # feet exactly at 400
    assert not is_floor_collision(lander_at(300, 300), t)


def test_ceiling_touch_collides():
    t = flat_terrain(400.0, ceiling_y=100.0)
    assert is_ceiling_collision(lander_at(300, 100), t)
    assert not is_ceiling_collision(lander_at(300, 101), t)


def test_absent_ceiling_never_collides():
    assert not is_ceiling_collision(lander_at(300, -50), flat_terrain(400.0))
    sparse = flat_terrain(400.0, ceiling_y=100.0, ceiling_span=(600, 700))
    assert not is_ceiling_collision(lander_at(300, 50), sparse)
    assert is_ceiling_collision(lander_at(600, 50), sparse)


def test_is_collision_combines_both_profiles():
    t = flat_terrain(400.0, ceiling_y=100.0)
    assert not is_collision(lander_at(300, 200), t)
    assert is_collision(lander_at(300, 90), t)
    assert is_collision(lander_at(300, 360), t)


def test_out_of_bounds_edges():
    assert not is_out_of_bounds(lander_at(300, 450))
    assert is_out_of_bounds(lander_at(300, 451))                 # hull bottom below the world
    assert not is_out_of_bounds(lander_at(-WIDTH / 2, 100))
    assert is_out_of_bounds(lander_at(-WIDTH / 2 - 1, 100))
    assert is_out_of_bounds(lander_at(WIDTH * 1.5 + 1, 100))
    assert is_out_of_bounds(lander_at(300, -HEIGHT * 1.5 - 1))
    assert not is_out_of_bounds(lander_at(300, -HEIGHT * 1.5))


def test_rollback_steps_one_pixel_along_travel():
    assert rollback_position((10.0, 20.0), 2.0, -1.0) == (11.0, 19.0)
    assert rollback_position((10.0, 20.0), 0.0, 0.0) == (10.0, 20.0)
    assert rollback_position((10.0, 20.0), -0.1, 3.5) == (9.0, 21.0)


def ridge_terrain(x, top, floor_y=450.0):
    floor = np.full(WIDTH + 1, floor_y)
    floor[0] = floor[WIDTH] = HEIGHT
    floor[x] = top
    return Terrain(floor=TerrainProfile(floor))


# Craft at (300, 300): thruster band y=344 on x 324..356, belly bands y=338
# on x 309..323 and 357..371, feet at x 307 and 373.
@pytest.mark.parametrize("ridge_x, band_y", [
    (340, 344),     # under the bottom thruster
    (315, 338),     # left belly
    (365, 338),     # right belly
])
def test_one_pixel_ridge_under_hull_band(ridge_x, band_y):
    lander = lander_at(300, 300)
    assert not is_floor_collision(lander, ridge_terrain(ridge_x, band_y))
    assert is_floor_collision(lander, ridge_terrain(ridge_x, band_y - 1))
