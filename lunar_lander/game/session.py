# lunar_lander/game/session.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

from .clock import FixedStepScheduler
from .collision import is_collision, is_out_of_bounds, rollback_position
from .config import (
    RunConfig, TICK_MS, COUNTDOWN_PERIOD_MS, REFUEL_PERIOD_MS, REFUEL_INCREMENT,
    CRASH_FRAME_MS, CRASH_ANIMATION_MS, NEXT_LEVEL_DELAY_S,
)
from .interaction import RefuelEvent, Resolution, check_platforms, resolve
from .lander import (
    Lander, ThrustDirection, next_thrust_sprite,
    SPRITE_IDLE, SPRITE_EXPLOSION_FIRST, SPRITE_BLANK,
)
from .level import Level, LevelSet

logger = logging.getLogger(__name__)


# -------------------- Collaborators --------------------

class Cue(Enum):
    START = "start"
    THRUST = "thrust"
    REFUEL = "refuel"
    LAND = "land"
    CRASH = "crash"
    LOST = "lost"
    TIMES_UP = "times_up"

    @property
    def loops(self) -> bool:
        return self in (Cue.THRUST, Cue.REFUEL)


@runtime_checkable
class Renderer(Protocol):
    def draw_terrain(self, level: Level) -> None: ...
    def clear(self) -> None: ...
    def draw_platforms(self, level: Level, spike_heights: Dict[int, float]) -> None: ...
    def draw_frame(self, pose: Tuple[float, float], sprite: int) -> None: ...
    def draw_hud(self, fuel_fraction: float, time_remaining: int, level_index: int) -> None: ...
    def draw_centered_message(self, text: str) -> None: ...
    def present(self) -> None: ...


@runtime_checkable
class AudioCue(Protocol):
    def play(self, cue: Cue) -> None: ...
    def stop(self) -> None: ...


class HeadlessRenderer:
    """Draws nothing. Used by agents, tests and benchmarks."""

    def draw_terrain(self, level): pass
    def clear(self): pass
    def draw_platforms(self, level, spike_heights): pass
    def draw_frame(self, pose, sprite): pass
    def draw_hud(self, fuel_fraction, time_remaining, level_index): pass
    def draw_centered_message(self, text): pass
    def present(self): pass


class SilentAudio:
    def play(self, cue): pass
    def stop(self): pass


# -------------------- State --------------------

class Outcome(Enum):
    READY = "ready"
    RUNNING = "running"
    INTERMISSION = "intermission"   # landed, next level about to start
    COMPLETED = "completed"         # last level landed
    CRASHED = "crashed"
    LOST = "lost"
    TIMES_UP = "times_up"

    @property
    def is_final(self) -> bool:
        return self in (Outcome.COMPLETED, Outcome.CRASHED, Outcome.LOST, Outcome.TIMES_UP)


@dataclass
class SimulationState:
    lander: Lander = field(default_factory=Lander)
    level_index: int = 0
    time_remaining: int = 0
    sprite: int = SPRITE_IDLE
    safe_position: Tuple[float, float] = (0.0, 0.0)
    spike_heights: Dict[int, float] = field(default_factory=dict)
    refuel_engaged: bool = False
    outcome: Outcome = Outcome.READY
    message: Optional[str] = None
    ticks: int = 0


# -------------------- Timers --------------------

class RefuelTimer:
    """Tops the tank up at its own cadence while parked on a gas station."""
    TASK = "refuel"

    def __init__(self, session: "GameSession"):
        self.session = session

    @property
    def running(self) -> bool:
        return self.session.scheduler.is_scheduled(self.TASK)

    def start(self) -> None:
        self.session.scheduler.schedule(self.TASK, REFUEL_PERIOD_MS, self._on_period)

    def stop(self) -> None:
        self.session.scheduler.cancel(self.TASK)

    def _on_period(self) -> None:
        s = self.session
        lander = s.state.lander
        capacity = s.config.fuel_capacity
        lander.fuel_remaining += REFUEL_INCREMENT
        if lander.fuel_remaining >= capacity:
            lander.fuel_remaining = capacity
            self.stop()
            s.audio.stop()
            logger.debug("Tank full (%.1f)", capacity)


class CrashAnimationTimer:
    """Steps the explosion frames after a crash; physics is already stopped."""
    TASK = "crash_animation"

    def __init__(self, session: "GameSession"):
        self.session = session
        self.elapsed_ms = 0

    @property
    def running(self) -> bool:
        return self.session.scheduler.is_scheduled(self.TASK)

    def start(self) -> None:
        self.elapsed_ms = 0
        self.session.state.sprite = SPRITE_EXPLOSION_FIRST
        self.session.scheduler.schedule(self.TASK, CRASH_FRAME_MS, self._on_frame)

    def stop(self) -> None:
        self.session.scheduler.cancel(self.TASK)

    def _on_frame(self) -> None:
        s = self.session
        s.redraw()
        self.elapsed_ms += CRASH_FRAME_MS
        if self.elapsed_ms > CRASH_ANIMATION_MS:
            self.stop()
        s.state.sprite = min(s.state.sprite + 1, SPRITE_BLANK)


class IntermissionTimer:
    """Counts down the break between two levels, then starts the next one."""
    TASK = "intermission"

    def __init__(self, session: "GameSession"):
        self.session = session
        self.seconds_left = 0

    @property
    def running(self) -> bool:
        return self.session.scheduler.is_scheduled(self.TASK)

    def start(self, seconds: int = NEXT_LEVEL_DELAY_S) -> None:
        self.seconds_left = int(seconds)
        self._announce()
        self.session.scheduler.schedule(self.TASK, COUNTDOWN_PERIOD_MS, self._on_second)

    def stop(self) -> None:
        self.session.scheduler.cancel(self.TASK)

    def _announce(self) -> None:
        self.session.state.message = f"Good job! Next level starting in {self.seconds_left}"
        self.session.redraw()

    def _on_second(self) -> None:
        self.seconds_left -= 1
        self._announce()
        if self.seconds_left <= 0:
            self.stop()
            self.session.start(self.session.state.level_index)


# -------------------- Session --------------------

class GameSession:
    """
    Owns the whole simulation: one SimulationState, the level set, and the
    scheduler whose tasks drive physics, the countdown, refuelling and the
    crash/intermission animations. Call tick() once per TICK_MS of game time.
    """
    PHYSICS = "physics"
    COUNTDOWN = "countdown"

    def __init__(self,
                 config: Optional[RunConfig] = None,
                 levels: Optional[LevelSet] = None,
                 renderer: Optional[Renderer] = None,
                 audio: Optional[AudioCue] = None,
                 seed: Optional[int] = None):
        self.config = config if config is not None else RunConfig()
        self.levels = levels if levels is not None else LevelSet(seed)
        self.renderer = renderer if renderer is not None else HeadlessRenderer()
        self.audio = audio if audio is not None else SilentAudio()

        self.scheduler = FixedStepScheduler()
        self.state = SimulationState()
        self.refuel_timer = RefuelTimer(self)
        self.crash_animation = CrashAnimationTimer(self)
        self.intermission = IntermissionTimer(self)

        self.input_enabled = False
        self._thrust_cue_on = False
        self.sound_on = True
        # Level on screen; lags `level` through the intermission after a landing.
        self.shown_level: Optional[Level] = None

    # --- accessors ---
    @property
    def lander(self) -> Lander:
        return self.state.lander

    @property
    def level(self) -> Level:
        return self.levels[self.state.level_index]

    @property
    def outcome(self) -> Outcome:
        return self.state.outcome

    @property
    def is_running(self) -> bool:
        return self.scheduler.is_scheduled(self.PHYSICS)

    @property
    def fuel_fraction(self) -> float:
        return max(0.0, self.lander.fuel_remaining / self.config.fuel_capacity)

    # --- lifecycle ---
    def start(self, level_index: int = 0) -> None:
        """Begin (or restart) a level: reset the craft and register fresh timers."""
        level = self.levels[level_index]     # raises on a bad index

        self.scheduler.cancel_all()
        st = self.state
        st.level_index = level_index
        st.time_remaining = int(self.config.timer_seconds)
        st.sprite = SPRITE_IDLE
        st.spike_heights = {}
        st.refuel_engaged = False
        st.message = None
        st.outcome = Outcome.RUNNING
        st.ticks = 0
        st.lander.reset(level.start, self.config.fuel_capacity)
        st.safe_position = level.start

        self.shown_level = level
        self.renderer.draw_terrain(level)
        self.input_enabled = True
        self._thrust_cue_on = False
        self._play(Cue.START)

        self.scheduler.schedule(self.PHYSICS, TICK_MS, self._physics_step)
        self.scheduler.schedule(self.COUNTDOWN, COUNTDOWN_PERIOD_MS, self._countdown_step)
        logger.info("Level %d (%s) started: timer=%ds gravity=%s fuel=%.0f",
                    level_index + 1, level.name, st.time_remaining,
                    self.config.gravity_tier.value, self.config.fuel_capacity)
        self.redraw()

    def tick(self) -> None:
        self.scheduler.advance(TICK_MS)

    def run_ticks(self, n: int) -> None:
        for _ in range(int(n)):
            self.tick()

    def finish(self) -> None:
        """Stop physics, countdown and refuelling and detach input."""
        self.lander.active_thrust = False
        self.scheduler.cancel(self.PHYSICS)
        self.scheduler.cancel(self.COUNTDOWN)
        self.refuel_timer.stop()
        self.input_enabled = False

    # --- input ---
    def on_thrust(self, direction: ThrustDirection) -> bool:
        if not self.input_enabled:
            return False
        lander = self.lander
        if not lander.apply_thrust(direction):
            logger.debug("Thrust %s refused (fuel=%.1f)", direction.value, lander.fuel_remaining)
            return False
        lander.active_thrust = True
        if not self._thrust_cue_on:
            self._thrust_cue_on = True
            self._play(Cue.THRUST)
        self.state.sprite = next_thrust_sprite(self.state.sprite, direction)
        return True

    def on_thrust_release(self) -> None:
        if not self.input_enabled:
            return
        self.lander.active_thrust = False
        self.state.sprite = SPRITE_IDLE
        self._thrust_cue_on = False
        if not self.lander.is_refueling:
            self.audio.stop()

    # --- sound ---
    def set_sound(self, on: bool) -> None:
        """Mute or unmute. Unmuting resumes the looping cue the craft is in."""
        self.sound_on = bool(on)
        if not self.sound_on:
            self.audio.stop()
            return
        lander = self.lander
        if not self.is_running:
            return
        if lander.is_refueling and lander.fuel_remaining < self.config.fuel_capacity:
            self.audio.play(Cue.REFUEL)
        elif lander.active_thrust:
            self.audio.play(Cue.THRUST)

    def _play(self, cue: Cue) -> None:
        if self.sound_on:
            self.audio.play(cue)

    # --- drawing ---
    def redraw(self) -> None:
        r = self.renderer
        st = self.state
        r.clear()
        r.draw_platforms(self.shown_level, st.spike_heights)
        r.draw_frame(st.lander.pose, st.sprite)
        r.draw_hud(self.fuel_fraction, st.time_remaining, st.level_index)
        if st.message:
            r.draw_centered_message(st.message)

    # --- periodic tasks ---
    def _physics_step(self) -> None:
        st = self.state
        lander = st.lander
        level = self.level
        st.ticks += 1
        st.message = None

        lander.advance_cooldowns()
        if not lander.is_refueling:
            lander.apply_gravity(self.config.gravity)
        lander.integrate()

        lander.is_crashed = is_collision(lander, level.terrain)
        if lander.is_crashed:
            # Never leave the hull drawn inside the rock.
            lander.x, lander.y = rollback_position(st.safe_position, lander.dx, lander.dy)

        self._apply_platform_pass(check_platforms(lander, level, st.refuel_engaged))
        self._act_on(resolve(lander, is_out_of_bounds(lander)))

        if st.outcome is Outcome.RUNNING:
            self.redraw()
        st.safe_position = (lander.x, lander.y)

    def _apply_platform_pass(self, result) -> None:
        st = self.state
        st.spike_heights = result.spike_heights
        st.refuel_engaged = result.refuel_engaged
        if result.refuel_event is RefuelEvent.ENGAGE:
            logger.debug("Refuelling engaged at x=%.1f", self.lander.x)
            self.refuel_timer.start()
            self._play(Cue.REFUEL)
        elif result.refuel_event is RefuelEvent.DISENGAGE:
            logger.debug("Refuelling disengaged")
            self.refuel_timer.stop()

    def _act_on(self, verdict: Resolution) -> None:
        st = self.state
        lander = st.lander

        if verdict is Resolution.REFUELING:
            # A soft touchdown; the surface contact is not a crash.
            lander.is_crashed = False
            lander.stop()
            st.sprite = SPRITE_IDLE
            full = lander.fuel_remaining >= self.config.fuel_capacity
            st.message = "Full tank!" if full else "Refueling..."

        elif verdict is Resolution.LANDED:
            lander.is_crashed = False
            self.finish()
            st.sprite = SPRITE_IDLE
            self._play(Cue.LAND)
            logger.info("Landed on level %d with %.1f fuel", st.level_index + 1, lander.fuel_remaining)
            if self.levels.is_last(st.level_index):
                st.outcome = Outcome.COMPLETED
                st.message = "All levels complete!"
                self.redraw()
            else:
                st.level_index += 1
                st.outcome = Outcome.INTERMISSION
                self.intermission.start()

        elif verdict is Resolution.CRASHED:
            self._crash()

        elif verdict is Resolution.LOST:
            self.finish()
            st.outcome = Outcome.LOST
            st.message = "You lost the lander!"
            self._play(Cue.LOST)
            logger.info("Lander lost at (%.1f, %.1f)", lander.x, lander.y)
            self.redraw()

    def _crash(self) -> None:
        st = self.state
        self.finish()
        st.outcome = Outcome.CRASHED
        st.message = "Crashed! Game Over."
        self._play(Cue.CRASH)
        self.lander.stop()
        logger.info("Crashed on level %d at (%.1f, %.1f)", st.level_index + 1, self.lander.x, self.lander.y)
        self.crash_animation.start()

    def _countdown_step(self) -> None:
        st = self.state
        st.time_remaining -= 1
        if st.time_remaining <= 0:
            st.time_remaining = 0
            self.finish()
            st.outcome = Outcome.TIMES_UP
            st.message = "Times Up!"
            self._play(Cue.TIMES_UP)
            logger.info("Time ran out on level %d", st.level_index + 1)
            self.redraw()
