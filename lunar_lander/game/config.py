# lunar_lander/game/config.py
from __future__ import annotations
import argparse
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

# --- Display / World ---
WIDTH = 900                 # world width (px), one screen
HEIGHT = 500                # world height (px), also the floor baseline
FPS = 60                    # render rate of the pygame window

# --- Clock (ms) ---
TICK_MS = 30                # physics step
COUNTDOWN_PERIOD_MS = 1000  # countdown timer
REFUEL_PERIOD_MS = 100      # refuel cadence while parked on a gas station
CRASH_FRAME_MS = 60         # explosion animation frame
CRASH_ANIMATION_MS = 300    # explosion animation length
NEXT_LEVEL_DELAY_S = 5      # break between levels

# --- Movement ---
# Every acceleration derives from this unit; keep the ratios, tune the unit.
MOVEMENT_UNIT = 0.001
THRUSTER_ACCELERATION = MOVEMENT_UNIT * 500
TERMINAL_VELOCITY_X = THRUSTER_ACCELERATION * 7
TERMINAL_VELOCITY_Y = THRUSTER_ACCELERATION * 7
FUEL_DISCHARGE_RATE = THRUSTER_ACCELERATION * 7    # per accepted thrust
SAFE_LANDING_SPEED = TERMINAL_VELOCITY_Y / 3

THRUST_COOLDOWN_MS = 100
THRUST_COOLDOWN_TICKS = -(-THRUST_COOLDOWN_MS // TICK_MS)   # ceil -> 4 ticks

# --- Lander hull ---
LANDER_W = 80
LANDER_H = 50
FOOT_INSET_X = 7            # from each side of the hull
FOOT_INSET_Y = 2            # from the bottom of the hull

# --- Platforms ---
TRICK_DISTANCE = HEIGHT * 0.10     # spikes start reacting inside this radius
MAX_SPIKE_HEIGHT = TRICK_DISTANCE / 4
SPIKES_PER_PLATFORM = 6
REFUEL_INCREMENT = 2.0
PLATFORM_THICKNESS = 7

# --- Run defaults ---
TIMER_SECONDS_DEFAULT = 60
FUEL_CAPACITY_DEFAULT = 100.0
SEED_DEFAULT = 12345

# --- Colors (RGB) ---
COLOR_BG = (0, 0, 0)
COLOR_FG = (255, 255, 255)
COLOR_TERRAIN = (112, 128, 144)     # slate grey
COLOR_GAS = (255, 255, 0)
COLOR_PLAT = (50, 205, 50)          # lime green
COLOR_SPIKE = (255, 0, 0)
COLOR_SPIKE_EDGE = (255, 255, 0)
COLOR_HULL = (200, 200, 210)
COLOR_FLAME = (255, 150, 40)
COLOR_FUEL_LOW = (255, 0, 0)
COLOR_FUEL_MID = (255, 255, 0)
COLOR_FUEL_OK = (50, 205, 50)
COLOR_GAUGE = (128, 128, 128)


class GravityTier(Enum):
    WEAK = "Weak"
    NORMAL = "Normal"
    STRONG = "Strong"

    @property
    def acceleration(self) -> float:
        return MOVEMENT_UNIT * _GRAVITY_STEPS[self]


_GRAVITY_STEPS = {
    GravityTier.WEAK: 13,
    GravityTier.NORMAL: 25,
    GravityTier.STRONG: 35,
}


@dataclass(frozen=True)
class RunConfig:
    """Player-chosen settings for one run: countdown, gravity, tank size."""
    timer_seconds: int = TIMER_SECONDS_DEFAULT
    gravity_tier: GravityTier = GravityTier.NORMAL
    fuel_capacity: float = FUEL_CAPACITY_DEFAULT

    def __post_init__(self):
        if int(self.timer_seconds) <= 0:
            raise ValueError(f"timer_seconds must be > 0, got {self.timer_seconds}")
        if float(self.fuel_capacity) <= 0.0:
            raise ValueError(f"fuel_capacity must be > 0, got {self.fuel_capacity}")
        if not isinstance(self.gravity_tier, GravityTier):
            raise ValueError(f"Unknown gravity tier {self.gravity_tier!r}")

    @property
    def gravity(self) -> float:
        return self.gravity_tier.acceleration


def parse_gravity(name: str) -> GravityTier:
    for tier in GravityTier:
        if tier.value.lower() == str(name).strip().lower():
            return tier
    raise ValueError(f"Unknown gravity tier '{name}'. Available: {[t.value for t in GravityTier]}")


def add_config_args(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
    p.add_argument("--timer", type=int, default=TIMER_SECONDS_DEFAULT,
                   help="Countdown in seconds; the run ends at zero.")
    p.add_argument("--gravity", type=str, default=GravityTier.NORMAL.value,
                   choices=[t.value for t in GravityTier],
                   help="Gravity strength.")
    p.add_argument("--fuel", type=float, default=FUEL_CAPACITY_DEFAULT,
                   help="Fuel tank size (refilled at every level start).")
    return p


def config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        timer_seconds=int(args.timer),
        gravity_tier=parse_gravity(args.gravity),
        fuel_capacity=float(args.fuel),
    )


def read_config(argv: Optional[Sequence[str]] = None) -> RunConfig:
    """Parse only the run settings out of `argv` (unknown flags are left alone)."""
    p = add_config_args(argparse.ArgumentParser(add_help=False))
    args, _ = p.parse_known_args(argv)
    return config_from_args(args)
