# lunar_lander/game/level.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .platforms import Platform, PlatformKind, randomize_kind, ensure_destination
from .terrain import Terrain, level1_terrain, level2_terrain, level3_terrain


@dataclass(frozen=True)
class Level:
    terrain: Terrain
    platforms: Tuple[Platform, ...]
    start: Tuple[float, float]
    name: str = ""

    @property
    def has_ceiling(self) -> bool:
        return self.terrain.ceiling is not None

    def destinations(self) -> List[Platform]:
        return [p for p in self.platforms if p.kind is PlatformKind.DESTINATION]


class LevelSet:
    """
    The campaign: three hand-authored levels. Level 3 keeps its platform
    layout but draws each platform's kind at random, so it is seeded the same
    way the runner levels were (None -> fresh random seed, recorded on .seed).
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.seed = seed
        self.rng = random.Random(seed)
        self.levels: List[Level] = [
            self._level1(),
            self._level2(),
            self._level3(),
        ]

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self):
        return iter(self.levels)

    def __getitem__(self, index: int) -> Level:
        if not 0 <= index < len(self.levels):
            raise ValueError(f"Level index {index} out of range (0..{len(self.levels) - 1})")
        return self.levels[index]

    def is_last(self, index: int) -> bool:
        return index >= len(self.levels) - 1

    def _level1(self) -> Level:
        platforms = (
            Platform(170, 480, 70, PlatformKind.TRICK),
            Platform(500, 300, 85, PlatformKind.GAS_STATION),
            Platform(780, 400, 90, PlatformKind.DESTINATION),
        )
        return Level(level1_terrain(), platforms, start=(100, 100), name="Hills")

    def _level2(self) -> Level:
        platforms = (
            Platform(475, 300, 100, PlatformKind.TRICK),
            Platform(180, 170, 90, PlatformKind.GAS_STATION),
            Platform(780, 125, 90, PlatformKind.DESTINATION),
        )
        return Level(level2_terrain(), platforms, start=(20, 300), name="Caves")

    def _level3(self) -> Level:
        platforms = [Platform(x, y, 90) for x, y in
                     ((5, 200), (205, 300), (405, 400), (605, 300), (805, 200))]
        for p in platforms:
            randomize_kind(p, self.rng)
        ensure_destination(platforms, self.rng)
        return Level(level3_terrain(), tuple(platforms), start=(410, 20), name="Terraces")


def build_levels(seed: Optional[int] = None) -> LevelSet:
    return LevelSet(seed)
