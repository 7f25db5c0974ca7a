# lunar_lander/game/interaction.py
"""
Platform interaction: which platform the craft is over, what that platform
does to it, and which single outcome a tick resolves to.

The pass only touches the lander's flags; everything with side effects
(timers, sounds, level changes) is reported back to the session.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from .config import TRICK_DISTANCE, SAFE_LANDING_SPEED
from .lander import Lander
from .level import Level
from .platforms import Platform, PlatformKind, spike_height

# Feet count as "on" a surface from one pixel above it.
SURFACE_TOLERANCE = 1


class RefuelEvent(Enum):
    ENGAGE = "engage"
    DISENGAGE = "disengage"


class Resolution(Enum):
    NONE = "none"
    REFUELING = "refueling"     # parked on a gas station, keep going
    LANDED = "landed"           # soft touchdown on a destination
    CRASHED = "crashed"
    LOST = "lost"               # drifted out of the world


@dataclass
class PlatformPass:
    refuel_engaged: bool
    spike_heights: Dict[int, float] = field(default_factory=dict)
    refuel_event: Optional[RefuelEvent] = None


def feet_on_surface(lander: Lander, surface_y: float, tolerance: float = SURFACE_TOLERANCE) -> bool:
    return (lander.left_foot[1] + tolerance >= surface_y and
            lander.right_foot[1] + tolerance >= surface_y)


def distance_to_platform(lander: Lander, platform: Platform) -> float:
    """Shortest of bottom-centre, left foot, right foot to the platform centre."""
    cx, py = platform.center_x, platform.y
    (lx, ly), (rx, ry) = lander.left_foot, lander.right_foot
    bx = lander.bottom_center[0]
    return min(
        math.hypot(cx - bx, py - ly),
        math.hypot(lx - cx, py - ly),
        math.hypot(cx - rx, py - ry),
    )


def handle_gas_station(lander: Lander, platform: Platform, result: PlatformPass) -> None:
    if feet_on_surface(lander, platform.y):
        if not result.refuel_engaged:
            lander.is_refueling = True
            result.refuel_engaged = True
            result.refuel_event = RefuelEvent.ENGAGE
    elif result.refuel_engaged:
        lander.is_refueling = False
        result.refuel_engaged = False
        result.refuel_event = RefuelEvent.DISENGAGE


def handle_trick(lander: Lander, platform: Platform, index: int, result: PlatformPass) -> None:
    if not feet_on_surface(lander, platform.y, tolerance=TRICK_DISTANCE):
        return

    height = spike_height(distance_to_platform(lander, platform))
    result.spike_heights[index] = height

    (lx, ly), (rx, ry) = lander.left_foot, lander.right_foot
    over = platform.contains_x(lx) or platform.contains_x(rx)
    touching = ly >= platform.y - height and ry >= platform.y - height

    # Accumulates onto the terrain verdict computed earlier in the same tick.
    lander.is_crashed = lander.is_crashed or (over and touching)


def handle_destination(lander: Lander, platform: Platform) -> None:
    lander.is_landed = feet_on_surface(lander, platform.y)


def check_platforms(lander: Lander, level: Level, refuel_engaged: bool) -> PlatformPass:
    result = PlatformPass(refuel_engaged=refuel_engaged)
    left_x, right_x = lander.left_foot[0], lander.right_foot[0]

    for i, platform in enumerate(level.platforms):
        if platform.spans(left_x, right_x):
            if platform.kind is PlatformKind.GAS_STATION:
                handle_gas_station(lander, platform, result)
            elif platform.kind is PlatformKind.TRICK:
                handle_trick(lander, platform, i, result)
            elif platform.kind is PlatformKind.DESTINATION:
                handle_destination(lander, platform)
        elif platform.kind is PlatformKind.TRICK and platform.spans(left_x, right_x, margin=TRICK_DISTANCE):
            # Spikes wake up before the craft is fully over the strip.
            handle_trick(lander, platform, i, result)

    return result


def is_slow(lander: Lander) -> bool:
    return abs(lander.dy) <= SAFE_LANDING_SPEED


def resolve(lander: Lander, out_of_bounds: bool) -> Resolution:
    """One verdict per tick: refuel, land, crash, lost, in that order."""
    if lander.is_refueling and is_slow(lander):
        return Resolution.REFUELING
    if lander.is_landed and is_slow(lander):
        return Resolution.LANDED
    if lander.is_landed or lander.is_refueling or lander.is_crashed:
        return Resolution.CRASHED
    if out_of_bounds:
        return Resolution.LOST
    return Resolution.NONE
