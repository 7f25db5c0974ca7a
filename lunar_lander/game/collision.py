# lunar_lander/game/collision.py
from __future__ import annotations
import math
from typing import Iterator, Tuple

from .config import WIDTH, HEIGHT, LANDER_W, LANDER_H
from .lander import Lander
from .terrain import Terrain, ProfileId

Point = Tuple[float, float]

# Hull sample offsets (px from the hull's top-left).
THRUSTER_INSET = 24         # bottom thruster spans [x+24, x+W-24]
THRUSTER_LIFT = 6           # bottom thruster sits 6 px above the hull bottom
LEG_INSET = 9               # the belly between leg and thruster starts 9 px in
BELLY_LIFT = 6              # belly sits another 6 px above the thruster
BAND_STEP = 2

SIDE_THRUSTER_INSET = 8
SIDE_THRUSTER_DROP = 20
# Rounded dome on top, left half; the right half mirrors it.
DOME_POINTS = ((15, 15), (20, 10), (27, 4))


def _rint(x: float) -> int:
    return math.floor(x + 0.5)


def floor_samples(lander: Lander) -> Iterator[Point]:
    """Underside points: thruster band, belly either side of it, both feet."""
    x, y = lander.x, lander.y
    bottom_y = y + LANDER_H - THRUSTER_LIFT
    thruster_left = x + THRUSTER_INSET
    thruster_right = x + LANDER_W - THRUSTER_INSET

    for i in range(_rint(thruster_left), _rint(thruster_right) + 1, BAND_STEP):
        yield i, bottom_y

    belly_y = bottom_y - BELLY_LIFT
    i = _rint(x + LEG_INSET)
    while i < thruster_left:
        yield i, belly_y
        i += BAND_STEP

    i = _rint(thruster_right + 1)
    while i <= x + LANDER_W - LEG_INSET:
        yield i, belly_y
        i += BAND_STEP

    yield lander.left_foot
    yield lander.right_foot


def ceiling_samples(lander: Lander) -> Iterator[Point]:
    """Side thrusters and the dome outline."""
    x, y = lander.x, lander.y
    yield x + SIDE_THRUSTER_INSET, y + SIDE_THRUSTER_DROP
    yield x + LANDER_W - SIDE_THRUSTER_INSET, y + SIDE_THRUSTER_DROP
    yield x + LANDER_W / 2, y
    for dx, dy in DOME_POINTS:
        yield x + dx, y + dy
        yield x + LANDER_W - dx, y + dy


def is_floor_collision(lander: Lander, terrain: Terrain) -> bool:
    for sx, sy in floor_samples(lander):
        if sy > terrain.height_at(ProfileId.FLOOR, sx):
            return True
    return False


def is_ceiling_collision(lander: Lander, terrain: Terrain) -> bool:
    if terrain.ceiling is None:
        return False
    for sx, sy in ceiling_samples(lander):
        h = terrain.height_at(ProfileId.CEILING, sx)
        if h is not None and sy <= h:
            return True
    return False


def is_collision(lander: Lander, terrain: Terrain) -> bool:
    return is_ceiling_collision(lander, terrain) or is_floor_collision(lander, terrain)


def is_out_of_bounds(lander: Lander) -> bool:
    above = lander.y < -HEIGHT * 1.5
    past_left = lander.x < -WIDTH / 2
    past_right = lander.x > WIDTH * 1.5
    below = lander.y + LANDER_H > HEIGHT
    return above or past_left or past_right or below


def rollback_position(safe: Point, dx: float, dy: float) -> Point:
    """Last collision-free spot nudged one pixel along the direction of travel."""
    return safe[0] + _sign(dx), safe[1] + _sign(dy)


def _sign(v: float) -> float:
    if v > 0:
        return 1.0
    if v < 0:
        return -1.0
    return 0.0
