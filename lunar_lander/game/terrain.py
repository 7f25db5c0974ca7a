# lunar_lander/game/terrain.py
from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from .config import WIDTH, HEIGHT


class ProfileId(Enum):
    FLOOR = "floor"
    CEILING = "ceiling"


def sample_index(x: float) -> int:
    """Nearest sample index (halves round up), clamped to [0, WIDTH]."""
    i = math.floor(float(x) + 0.5)
    if i < 0:
        return 0
    if i > WIDTH:
        return WIDTH
    return i


class TerrainProfile:
    """
    Elevation per horizontal pixel, WIDTH + 1 samples (0..WIDTH inclusive).
    Screen convention: y grows downward, so a floor "below" the craft has a
    larger value. NaN marks an absent sample (open sky in a ceiling).
    """

    def __init__(self, samples: np.ndarray):
        samples = np.asarray(samples, dtype=np.float64)
        if samples.shape != (WIDTH + 1,):
            raise ValueError(f"profile needs {WIDTH + 1} samples, got {samples.shape}")
        self.samples = samples
        self.samples.setflags(write=False)

    def height_at(self, x: float) -> Optional[float]:
        h = self.samples[sample_index(x)]
        if np.isnan(h):
            return None
        return float(h)

    def has_gaps(self) -> bool:
        return bool(np.isnan(self.samples).any())

    def runs(self):
        """Yield (start, stop) index runs of present samples, for drawing."""
        present = ~np.isnan(self.samples)
        start = None
        for i, ok in enumerate(present):
            if ok and start is None:
                start = i
            elif not ok and start is not None:
                yield start, i
                start = None
        if start is not None:
            yield start, len(present)

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class Terrain:
    """Floor (always complete) plus an optional, possibly sparse ceiling."""
    floor: TerrainProfile
    ceiling: Optional[TerrainProfile] = None

    def __post_init__(self):
        if self.floor.has_gaps():
            raise ValueError("floor profile must not contain absent samples")
        if self.floor.samples[0] != HEIGHT or self.floor.samples[WIDTH] != HEIGHT:
            raise ValueError("floor profile must close at the world baseline on both edges")

    def height_at(self, profile: ProfileId, x: float) -> Optional[float]:
        if profile is ProfileId.FLOOR:
            return self.floor.height_at(x)
        if self.ceiling is None:
            return None
        return self.ceiling.height_at(x)


class ProfileBuilder:
    """
    Piecewise authoring of a profile. Segments write samples at integer x and
    carry a running height, the way the hand-built level maps were drawn:
      - flat: constant run at the running height
      - ramp: write then step the running height by `slope` per pixel
      - arc: sinusoidal bump, one degree per pixel
      - point: a single sample
      - gap: absent samples (ceiling only)
    """

    def __init__(self, height: Optional[float] = HEIGHT, fill: float = math.nan):
        self.samples = np.full(WIDTH + 1, fill, dtype=np.float64)
        self.height = height

    def at(self, height: Optional[float]) -> "ProfileBuilder":
        self.height = height
        return self

    def shift(self, dh: float) -> "ProfileBuilder":
        self.height += dh
        return self

    def point(self, x: int, height: Optional[float] = None) -> "ProfileBuilder":
        h = self.height if height is None else height
        self.samples[x] = math.nan if h is None else h
        return self

    def flat(self, start: int, stop: int) -> "ProfileBuilder":
        return self.ramp(start, stop, 0.0)

    def ramp(self, start: int, stop: int, slope: float) -> "ProfileBuilder":
        for x in range(start, stop):
            self.point(x)
            if self.height is not None:
                self.height += slope
        return self

    def rise(self, start: int, stop: int, slope: float) -> "ProfileBuilder":
        """Like ramp, but steps the height before writing each sample."""
        for x in range(start, stop):
            self.height += slope
            self.point(x)
        return self

    def arc(self, start: int, degrees: range, amplitude: float, offset: float = 0.0) -> "ProfileBuilder":
        for d in degrees:
            self.height = HEIGHT - math.sin(math.radians(d)) * amplitude - offset
            self.samples[start + d] = self.height
        return self

    def gap(self, start: int, stop: int) -> "ProfileBuilder":
        self.samples[start:stop] = math.nan
        return self

    def build(self) -> TerrainProfile:
        return TerrainProfile(self.samples.copy())


# -------------------- Level silhouettes --------------------

def level1_terrain() -> Terrain:
    """Open ground: two hills, a ramp up to the gas station, a jagged ridge."""
    b = ProfileBuilder().point(0, HEIGHT)
    b.arc(0, range(1, 171), amplitude=120)
    b.at(480).flat(171, 240)                    # under the trick platform
    b.arc(240, range(0, 181), amplitude=120, offset=20)
    b.at(480).ramp(420, 500, -2.25)
    b.flat(500, 585)                            # gas station shelf
    b.ramp(585, 600, -12)
    b.ramp(600, 620, -2)
    b.ramp(620, 660, 3)
    b.ramp(660, 680, -1.5)
    b.ramp(680, 720, 1.25)
    b.ramp(720, 740, -2)
    b.ramp(740, 780, 5.5)
    b.flat(780, 870)                            # destination shelf
    b.ramp(870, 900, -5)
    b.point(WIDTH, HEIGHT)
    return Terrain(floor=b.build())


def level2_terrain() -> Terrain:
    """Caves: an overhanging ceiling with open-sky gaps between chambers."""
    floor = ProfileBuilder().point(0, HEIGHT)
    ceil = ProfileBuilder(height=None)

    floor.at(HEIGHT - 100).flat(1, 150)
    ceil.gap(0, 150).point(149, 0)

    floor.shift(-250).flat(150, 180)
    ceil.at(50).flat(150, 180)

    floor.shift(20).flat(180, 270)              # gas station ledge
    ceil.flat(180, 270)

    floor.shift(-20).flat(270, 300)
    ceil.flat(270, 300)

    floor.shift(250).flat(300, 450)
    ceil.gap(300, 450).point(300, 0).point(449, 0)

    floor.shift(-100).flat(450, 600)            # trick chamber
    ceil.at(200).flat(450, 600)

    floor.shift(100).flat(600, 750)
    ceil.gap(600, 750).point(600, 0)

    floor.shift(-275).flat(750, 900)            # destination plateau
    ceil.gap(750, WIDTH + 1)

    floor.point(WIDTH, HEIGHT)
    return Terrain(floor=floor.build(), ceiling=ceil.build())


def level3_terrain() -> Terrain:
    """Terraces: five shelves joined by 1 px/px slopes."""
    b = ProfileBuilder().point(0, HEIGHT)
    b.at(HEIGHT - 300).flat(1, 100)
    b.rise(100, 200, 1)
    b.flat(200, 300)
    b.rise(300, 400, 1)
    b.flat(400, 500)
    b.rise(500, 600, -1)
    b.flat(600, 700)
    b.rise(700, 800, -1)
    b.flat(800, 900)
    b.point(WIDTH, HEIGHT)
    return Terrain(floor=b.build())
