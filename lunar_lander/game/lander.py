# lunar_lander/game/lander.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from .config import (
    LANDER_W, LANDER_H, FOOT_INSET_X, FOOT_INSET_Y,
    THRUSTER_ACCELERATION, TERMINAL_VELOCITY_X, TERMINAL_VELOCITY_Y,
    FUEL_DISCHARGE_RATE, THRUST_COOLDOWN_TICKS,
)


class ThrustDirection(Enum):
    UP = "up"
    LEFT = "left"
    RIGHT = "right"


# Sprite numbers: 0 idle, 1-4 up, 5-7 left, 8-10 right, 11-14 explosion, 15 blank.
SPRITE_IDLE = 0
SPRITE_EXPLOSION_FIRST = 11
SPRITE_BLANK = 15
_SPRITE_RANGES = {
    ThrustDirection.UP: (1, 4),
    ThrustDirection.LEFT: (5, 7),
    ThrustDirection.RIGHT: (8, 10),
}


def next_thrust_sprite(current: int, direction: ThrustDirection) -> int:
    """Step through the direction's flame frames, holding on the strongest one."""
    lo, hi = _SPRITE_RANGES[direction]
    if current < lo or current > hi:
        return lo
    return min(current + 1, hi)


def _ready_cooldowns() -> Dict[ThrustDirection, int]:
    return {d: THRUST_COOLDOWN_TICKS for d in ThrustDirection}


@dataclass
class Lander:
    """
    Kinematic state of the craft. (x, y) is the top-left of the hull in screen
    coordinates (y grows downward), velocities are px per physics tick.

    Thrust is rate limited per direction by tick counters instead of wall-clock
    timestamps, so a replay of the same inputs gives the same trajectory.
    """
    x: float = 0.0
    y: float = 0.0
    dx: float = 0.0
    dy: float = 0.0
    fuel_remaining: float = 0.0
    is_landed: bool = False
    is_refueling: bool = False
    is_crashed: bool = False
    active_thrust: bool = False
    _ticks_since_thrust: Dict[ThrustDirection, int] = field(default_factory=_ready_cooldowns)

    # --- geometry ---
    @property
    def left_foot(self) -> Tuple[float, float]:
        return self.x + FOOT_INSET_X, self.y + LANDER_H - FOOT_INSET_Y

    @property
    def right_foot(self) -> Tuple[float, float]:
        return self.x + LANDER_W - FOOT_INSET_X, self.y + LANDER_H - FOOT_INSET_Y

    @property
    def bottom_center(self) -> Tuple[float, float]:
        return self.x + LANDER_W / 2, self.left_foot[1]

    @property
    def pose(self) -> Tuple[float, float]:
        return self.x, self.y

    # --- lifecycle ---
    def reset(self, start: Tuple[float, float], fuel: float) -> None:
        """Put the craft back at a level start; the object itself is reused."""
        self.x, self.y = float(start[0]), float(start[1])
        self.dx = 0.0
        self.dy = 0.0
        self.fuel_remaining = float(fuel)
        self.is_landed = False
        self.is_refueling = False
        self.is_crashed = False
        self.active_thrust = False
        self._ticks_since_thrust = _ready_cooldowns()

    # --- physics ---
    def apply_gravity(self, g: float) -> None:
        """Accelerate downward until terminal velocity, then hold it there."""
        if self.dy < TERMINAL_VELOCITY_Y:
            self.dy = min(self.dy + g, TERMINAL_VELOCITY_Y)
        else:
            self.dy = TERMINAL_VELOCITY_Y

    def can_thrust(self, direction: ThrustDirection) -> bool:
        if self._ticks_since_thrust[direction] < THRUST_COOLDOWN_TICKS:
            return False
        if self.fuel_remaining <= 0:
            return False
        if direction is not ThrustDirection.UP and self.is_refueling:
            return False
        return True

    def apply_thrust(self, direction: ThrustDirection) -> bool:
        """Fire one thruster pulse. Returns False (and changes nothing) if refused."""
        if not self.can_thrust(direction):
            return False

        if direction is ThrustDirection.UP:
            self.dy = max(self.dy - THRUSTER_ACCELERATION, -TERMINAL_VELOCITY_Y)
        elif direction is ThrustDirection.LEFT:
            self.dx = max(self.dx - THRUSTER_ACCELERATION, -TERMINAL_VELOCITY_X)
        else:
            self.dx = min(self.dx + THRUSTER_ACCELERATION, TERMINAL_VELOCITY_X)

        # Each pulse costs a fixed amount, regardless of how long the key is held.
        self.fuel_remaining = max(0.0, self.fuel_remaining - FUEL_DISCHARGE_RATE)
        self._ticks_since_thrust[direction] = 0
        return True

    def advance_cooldowns(self) -> None:
        for d in self._ticks_since_thrust:
            self._ticks_since_thrust[d] += 1

    def integrate(self) -> None:
        self.x += self.dx
        self.y += self.dy

    def stop(self) -> None:
        self.dx = 0.0
        self.dy = 0.0
