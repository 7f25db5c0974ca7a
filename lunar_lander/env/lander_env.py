# lunar_lander/env/lander_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from lunar_lander.game.config import RunConfig, TICK_MS
from lunar_lander.game.lander import ThrustDirection
from lunar_lander.game.level import Level, LevelSet
from lunar_lander.game.render import PygameRenderer
from lunar_lander.game.session import GameSession, Outcome, SilentAudio
from lunar_lander.env.observations import build_observation, OBS_LOW, OBS_HIGH

ACTION_THRUST = {
    1: ThrustDirection.UP,
    2: ThrustDirection.LEFT,
    3: ThrustDirection.RIGHT,
}
FUEL_COST = 0.001     # reward penalty per unit of fuel burnt


class LanderEnv(gym.Env):
    """
    Lunar Lander Gymnasium environment (vector observations).
    - Physics runs at the game's fixed 30 ms tick.
    - Agent acts every `frame_skip` ticks (default 4, one thrust cooldown).
    - One episode = one level; it terminates on landing, crash, loss or time-out.
    - Observation: shape (12,), float32 (see observations.build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 1000 // TICK_MS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 config: Optional[RunConfig] = None,
                 max_decisions: Optional[int] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = config if config is not None else RunConfig()
        self.max_decisions = max_decisions

        # --- Gym spaces ---
        # Actions: 0 = release, 1 = up, 2 = left, 3 = right
        self.action_space = gym.spaces.Discrete(4)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[GameSession] = None
        self.level: Optional[Level] = None       # this episode's level (the session moves on after a landing)
        self.level_index: int = 0
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.renderer: Optional[PygameRenderer] = None
        self.clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # Level seed follows the episode seed; unseeded resets draw from np_random.
        if seed is not None:
            level_seed = int(seed)
        else:
            level_seed = int(self.np_random.integers(0, 2**31 - 1))
        levels = LevelSet(level_seed)

        self.level_index = int((options or {}).get("level", 0))
        self.level = levels[self.level_index]

        if self.render_mode is not None and self.renderer is None:
            self.renderer = PygameRenderer(display=self.render_mode == "human", caption="Lunar Lander - Gym Env")
            self.clock = pygame.time.Clock()

        self.session = GameSession(self.config, levels=levels, renderer=self.renderer, audio=SilentAudio())
        self.session.start(self.level_index)

        self.timestep = 0
        self.current_seed = levels.seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, "level": self.level_index}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "Call reset() before step()"
        s = self.session
        direction = ACTION_THRUST.get(int(action))

        if direction is None:
            s.on_thrust_release()

        burnt = 0.0
        for _ in range(self.frame_skip):
            if direction is not None:
                before = s.lander.fuel_remaining
                s.on_thrust(direction)
                burnt += max(0.0, before - s.lander.fuel_remaining)
            s.tick()
            if s.outcome is not Outcome.RUNNING:
                break

        outcome = s.outcome
        if outcome in (Outcome.INTERMISSION, Outcome.COMPLETED):
            reward = 1.0
        elif outcome in (Outcome.CRASHED, Outcome.LOST, Outcome.TIMES_UP):
            reward = -1.0
        else:
            reward = 0.0
        reward -= FUEL_COST * burnt

        self.timestep += 1
        terminated = outcome is not Outcome.RUNNING
        truncated = False
        if (self.max_decisions is not None) and (self.timestep >= self.max_decisions) and not terminated:
            truncated = True

        obs = self._get_obs()
        info = {
            "timestep": self.timestep,
            "seed": self.current_seed,
            "level": self.level_index,
            "outcome": outcome.value,
            "fuel": s.lander.fuel_remaining,
            "time_remaining": s.state.time_remaining,
        }

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.session is not None
        return build_observation(self.session, level=self.level)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.renderer is None:
            return

        if self.render_mode == "human":
            # Pump minimal event queue so the OS doesn't think we're hung
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    pass
            self.renderer.present()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", 30))
            return None

        return self.renderer.to_array()

    def close(self):
        if self.renderer is not None:
            self.renderer.close()
            pygame.quit()
            self.renderer = None
            self.clock = None
