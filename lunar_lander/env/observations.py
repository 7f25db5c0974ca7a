# lunar_lander/env/observations.py
from __future__ import annotations
import math
from typing import Optional, Tuple
import numpy as np

from lunar_lander.game.config import (
    WIDTH, HEIGHT, TERMINAL_VELOCITY_X, TERMINAL_VELOCITY_Y, MAX_SPIKE_HEIGHT,
)
from lunar_lander.game.level import Level
from lunar_lander.game.terrain import ProfileId

OBS_SIZE = 12

# [x, y, dx, dy, fuel, refueling,
#  dest_dx, dest_dy, floor_left, floor_right, ceiling, spike]
OBS_LOW = np.array([-0.5, -1.5, -1.0, -1.0, 0.0, 0.0,
                    -2.0, -2.0, -1.0, -1.0, -1.0, 0.0], dtype=np.float32)
OBS_HIGH = np.array([1.5, 1.0, 1.0, 1.0, 1.0, 1.0,
                     2.0, 2.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)


def _nearest_destination(level: Level, foot: Tuple[float, float]) -> Optional[Tuple[float, float]]:
    best = None
    best_d = math.inf
    for p in level.destinations():
        d = math.hypot(p.center_x - foot[0], p.y - foot[1])
        if d < best_d:
            best, best_d = (p.center_x, p.y), d
    return best


def build_observation(session, level: Optional[Level] = None) -> np.ndarray:
    """
    Returns a fixed (12,) float32 vector, clipped to [OBS_LOW, OBS_HIGH]:
      [ x/W, y/H, dx/TVx, dy/TVy, fuel_fraction, is_refueling,
        dest_dx/W, dest_dy/H, floor_clear_left/H, floor_clear_right/H,
        ceiling_clear/H, spike/MAX_SPIKE ]
    - position is the hull's top-left corner
    - dest_* is the vector from the craft's bottom centre to the nearest
      destination surface centre (0,0 if the level has none)
    - floor clearance is floor height minus foot height (positive = airborne)
    - ceiling clearance is 1.0 where no ceiling is overhead
    - spike is the tallest trick spike currently raised
    `level` defaults to the session's current level.
    """
    level = level if level is not None else session.level
    lander = session.lander
    terrain = level.terrain

    (lx, ly), (rx, ry) = lander.left_foot, lander.right_foot
    bottom = lander.bottom_center

    dest = _nearest_destination(level, bottom)
    if dest is None:
        dest_dx = dest_dy = 0.0
    else:
        dest_dx = (dest[0] - bottom[0]) / WIDTH
        dest_dy = (dest[1] - bottom[1]) / HEIGHT

    floor_left = (terrain.height_at(ProfileId.FLOOR, lx) - ly) / HEIGHT
    floor_right = (terrain.height_at(ProfileId.FLOOR, rx) - ry) / HEIGHT

    ceil_h = terrain.height_at(ProfileId.CEILING, bottom[0])
    ceiling = 1.0 if ceil_h is None else (lander.y - ceil_h) / HEIGHT

    spikes = session.state.spike_heights
    spike = max(spikes.values()) / MAX_SPIKE_HEIGHT if spikes else 0.0

    obs = np.array([
        lander.x / WIDTH,
        lander.y / HEIGHT,
        lander.dx / TERMINAL_VELOCITY_X,
        lander.dy / TERMINAL_VELOCITY_Y,
        session.fuel_fraction,
        1.0 if lander.is_refueling else 0.0,
        dest_dx,
        dest_dy,
        floor_left,
        floor_right,
        ceiling,
        spike,
    ], dtype=np.float32)
    return np.clip(obs, OBS_LOW, OBS_HIGH).astype(np.float32)
