# lunar_lander/game/platforms.py
from __future__ import annotations
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from .config import TRICK_DISTANCE, SPIKES_PER_PLATFORM


class PlatformKind(Enum):
    GAS_STATION = "gas_station"
    TRICK = "trick"
    DESTINATION = "destination"


@dataclass
class Platform:
    """
    A horizontal landing strip. `y` is the surface (screen coords, y down);
    the strip spans [x, x + width]. Only `kind` may change after creation,
    and only while a level is being randomized.
    """
    x: float
    y: float
    width: float
    kind: PlatformKind = PlatformKind.DESTINATION

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def contains_x(self, x: float, margin: float = 0.0) -> bool:
        return self.x - margin <= x <= self.right + margin

    def spans(self, left_x: float, right_x: float, margin: float = 0.0) -> bool:
        """True if both feet x lie inside the (optionally widened) extent."""
        return left_x >= self.x - margin and right_x <= self.right + margin

    def set_kind(self, kind: PlatformKind) -> None:
        self.kind = kind


def randomize_kind(platform: Platform, rng: random.Random) -> None:
    """Trick platforms are a little more likely than the other two kinds."""
    r = rng.random()
    if r < 0.3:
        platform.set_kind(PlatformKind.GAS_STATION)
    elif r < 0.7:
        platform.set_kind(PlatformKind.TRICK)
    else:
        platform.set_kind(PlatformKind.DESTINATION)


def ensure_destination(platforms: Sequence[Platform], rng: random.Random) -> None:
    """A level nobody can win is a bug: force one destination if none was drawn."""
    if any(p.kind is PlatformKind.DESTINATION for p in platforms):
        return
    rng.choice(list(platforms)).set_kind(PlatformKind.DESTINATION)


def spike_height(distance: float, trick_distance: float = TRICK_DISTANCE) -> float:
    """
    Height of a trick platform's spikes for a craft `distance` px away.

    Up to half the trick distance the spikes sit at their maximum. Further out
    the height is `trick_distance mod distance`, which shrinks as the craft
    backs off toward `trick_distance`, always capped at the maximum. At or
    beyond `trick_distance` the spikes are down.
    """
    max_h = trick_distance / 4
    if distance <= trick_distance / 2:
        return max_h
    if distance >= trick_distance:
        return 0.0
    return min(math.fmod(trick_distance, distance), max_h)


def spike_triangles(platform: Platform, height: float,
                    count: int = SPIKES_PER_PLATFORM) -> List[Tuple[Tuple[float, float], ...]]:
    """Return (A, B, C) per spike: base A-B on the surface, tip C above it."""
    w = platform.width / count
    y = platform.y
    tris = []
    for i in range(count):
        left = platform.x + i * w
        A = (left, y)
        B = (left + w, y)
        C = (left + w / 2, y - height)   # tip points up (smaller y)
        tris.append((A, B, C))
    return tris


