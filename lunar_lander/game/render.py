# lunar_lander/game/render.py
from __future__ import annotations
import logging
from typing import Dict, Optional, Tuple

import numpy as np
import pygame

from .config import (
    WIDTH, HEIGHT, LANDER_W, LANDER_H, PLATFORM_THICKNESS,
    COLOR_BG, COLOR_FG, COLOR_TERRAIN, COLOR_GAS, COLOR_PLAT,
    COLOR_SPIKE, COLOR_SPIKE_EDGE, COLOR_HULL, COLOR_FLAME,
    COLOR_FUEL_LOW, COLOR_FUEL_MID, COLOR_FUEL_OK, COLOR_GAUGE,
)
from .lander import SPRITE_EXPLOSION_FIRST, SPRITE_BLANK
from .level import Level
from .platforms import PlatformKind, spike_triangles
from .session import Cue

logger = logging.getLogger(__name__)

GAUGE_RECT = (12, 12, 160, 12)


def fuel_color(fraction: float) -> Tuple[int, int, int]:
    if fraction > 0.40:
        return COLOR_FUEL_OK
    if fraction > 0.15:
        return COLOR_FUEL_MID
    return COLOR_FUEL_LOW


class PygameRenderer:
    """
    Draws the session onto a pygame surface. Terrain is painted once per level
    into a background surface; every frame restores it and layers platforms,
    spikes, the craft, the HUD and an optional message on top.

    Pass `display=True` to own a window, otherwise frames stay off-screen
    (rgb_array rendering).
    """

    def __init__(self, display: bool = False, caption: str = "Lunar Lander"):
        pygame.init()
        if display:
            self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
            pygame.display.set_caption(caption)
        else:
            self.screen = pygame.Surface((WIDTH, HEIGHT))
        self.display = display
        self.background = pygame.Surface((WIDTH, HEIGHT))
        self.background.fill(COLOR_BG)
        self.font = pygame.font.SysFont("jetbrainsmono", 18)
        self.big_font = pygame.font.SysFont("jetbrainsmono", 28)

    # --- layers ---
    def draw_terrain(self, level: Level) -> None:
        bg = self.background
        bg.fill(COLOR_BG)
        floor = level.terrain.floor.samples
        pts = [(x, float(floor[x])) for x in range(WIDTH + 1)]
        pygame.draw.polygon(bg, COLOR_TERRAIN, pts + [(WIDTH, HEIGHT), (0, HEIGHT)])

        ceiling = level.terrain.ceiling
        if ceiling is not None:
            for start, stop in ceiling.runs():
                top = [(x, float(ceiling.samples[x])) for x in range(start, stop)]
                if len(top) < 2:
                    continue
                pygame.draw.polygon(bg, COLOR_TERRAIN, [(start, 0)] + top + [(stop - 1, 0)])

    def clear(self) -> None:
        self.screen.blit(self.background, (0, 0))

    def draw_platforms(self, level: Level, spike_heights: Dict[int, float]) -> None:
        for i, p in enumerate(level.platforms):
            color = COLOR_GAS if p.kind is PlatformKind.GAS_STATION else COLOR_PLAT
            pygame.draw.rect(self.screen, color,
                             pygame.Rect(int(p.x), int(p.y), int(p.width), PLATFORM_THICKNESS))
            h = spike_heights.get(i, 0.0)
            if p.kind is PlatformKind.TRICK and h > 0:
                for tri in spike_triangles(p, h):
                    pygame.draw.polygon(self.screen, COLOR_SPIKE, tri)
                    pygame.draw.polygon(self.screen, COLOR_SPIKE_EDGE, tri, width=1)

    def draw_frame(self, pose: Tuple[float, float], sprite: int) -> None:
        if sprite >= SPRITE_BLANK:
            return
        x, y = pose
        if sprite >= SPRITE_EXPLOSION_FIRST:
            self._draw_explosion(x, y, sprite - SPRITE_EXPLOSION_FIRST + 1)
            return
        self._draw_hull(x, y)
        if 1 <= sprite <= 4:        # main engine, flame grows with the frame
            cx = x + LANDER_W / 2
            tip = y + LANDER_H + 4 + 5 * sprite
            pygame.draw.polygon(self.screen, COLOR_FLAME,
                                [(cx - 8, y + LANDER_H - 6), (cx + 8, y + LANDER_H - 6), (cx, tip)])
        elif 5 <= sprite <= 7:      # pushing left: flame out of the right side
            length = 8 + 5 * (sprite - 4)
            sx, sy = x + LANDER_W - 8, y + 20
            pygame.draw.polygon(self.screen, COLOR_FLAME,
                                [(sx, sy - 4), (sx, sy + 4), (sx + length, sy)])
        elif 8 <= sprite <= 10:     # pushing right: flame out of the left side
            length = 8 + 5 * (sprite - 7)
            sx, sy = x + 8, y + 20
            pygame.draw.polygon(self.screen, COLOR_FLAME,
                                [(sx, sy - 4), (sx, sy + 4), (sx - length, sy)])

    def _draw_hull(self, x: float, y: float) -> None:
        s = self.screen
        # dome
        pygame.draw.polygon(s, COLOR_HULL, [
            (x + 15, y + 15), (x + 20, y + 10), (x + 27, y + 4), (x + 40, y),
            (x + 53, y + 4), (x + 60, y + 10), (x + 65, y + 15),
        ])
        # body with side thrusters
        pygame.draw.rect(s, COLOR_HULL, pygame.Rect(int(x + 8), int(y + 15), LANDER_W - 16, 23))
        # bottom thruster
        pygame.draw.rect(s, COLOR_GAUGE, pygame.Rect(int(x + 24), int(y + 38), LANDER_W - 48, 6))
        # legs
        pygame.draw.line(s, COLOR_HULL, (x + 16, y + 36), (x + 7, y + LANDER_H - 2), 2)
        pygame.draw.line(s, COLOR_HULL, (x + LANDER_W - 16, y + 36), (x + LANDER_W - 7, y + LANDER_H - 2), 2)

    def _draw_explosion(self, x: float, y: float, frame: int) -> None:
        cx, cy = int(x + LANDER_W / 2), int(y + LANDER_H / 2)
        pygame.draw.circle(self.screen, COLOR_FLAME, (cx, cy), 10 * frame)
        pygame.draw.circle(self.screen, COLOR_SPIKE_EDGE, (cx, cy), 5 * frame)

    def draw_hud(self, fuel_fraction: float, time_remaining: int, level_index: int) -> None:
        gx, gy, gw, gh = GAUGE_RECT
        frac = min(max(fuel_fraction, 0.0), 1.0)
        pygame.draw.rect(self.screen, fuel_color(frac), pygame.Rect(gx, gy, int(gw * frac), gh))
        pygame.draw.rect(self.screen, COLOR_GAUGE, pygame.Rect(gx, gy, gw, gh), width=1)
        hud = f"Fuel   Time: {time_remaining:>3}s   Level: {level_index + 1}"
        self.screen.blit(self.font.render(hud, True, COLOR_FG), (gx, gy + gh + 6))

    def draw_centered_message(self, text: str) -> None:
        surf = self.big_font.render(text, True, COLOR_FG)
        self.screen.blit(surf, ((WIDTH - surf.get_width()) // 2, (HEIGHT - surf.get_height()) // 2))

    def present(self) -> None:
        if self.display:
            pygame.display.flip()

    def to_array(self) -> np.ndarray:
        """(H, W, 3) uint8 copy of the current frame."""
        arr = pygame.surfarray.array3d(self.screen)   # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self) -> None:
        if self.display:
            pygame.display.quit()


# -------------------- Audio --------------------

# (frequency Hz, duration s); 0 Hz means a noise burst.
_CUE_TONES = {
    Cue.START: (660.0, 0.35),
    Cue.THRUST: (90.0, 0.50),
    Cue.REFUEL: (440.0, 0.25),
    Cue.LAND: (880.0, 0.60),
    Cue.CRASH: (0.0, 0.80),
    Cue.LOST: (220.0, 0.80),
    Cue.TIMES_UP: (330.0, 0.80),
}


def synth_tone(freq: float, duration: float, sample_rate: int,
               channels: int = 1, seed: int = 0) -> np.ndarray:
    """int16 samples for a tone (or a noise burst when freq is 0) with a short fade."""
    n = max(1, int(sample_rate * duration))
    t = np.arange(n) / sample_rate
    if freq > 0:
        wave = np.sin(2.0 * np.pi * freq * t)
    else:
        wave = np.random.default_rng(seed).uniform(-1.0, 1.0, n) * np.exp(-3.0 * t / duration)
    fade = min(n // 10, int(0.02 * sample_rate))
    if fade > 0:
        ramp = np.linspace(0.0, 1.0, fade)
        wave[:fade] *= ramp
        wave[-fade:] *= ramp[::-1]
    samples = (wave * 0.3 * 32767).astype(np.int16)
    if channels > 1:
        samples = np.repeat(samples[:, None], channels, axis=1)
    return np.ascontiguousarray(samples)


class PygameAudio:
    """
    One sound at a time, like a single <audio> element: playing a cue replaces
    whatever was playing. THRUST and REFUEL loop until stopped.
    Mixer problems are logged and dropped; audio never stops the game.
    """

    def __init__(self, sample_rate: int = 22050):
        self.enabled = False
        self.sounds: Dict[Cue, "pygame.mixer.Sound"] = {}
        self._channel: Optional["pygame.mixer.Channel"] = None
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
            freq, _size, channels = pygame.mixer.get_init()
            for cue, (hz, dur) in _CUE_TONES.items():
                self.sounds[cue] = pygame.sndarray.make_sound(synth_tone(hz, dur, freq, channels))
            self.enabled = True
        except pygame.error as exc:
            logger.warning("Audio disabled: %s", exc)

    def play(self, cue: Cue) -> None:
        if not self.enabled:
            return
        try:
            self.stop()
            self._channel = self.sounds[cue].play(loops=-1 if cue.loops else 0)
        except pygame.error as exc:
            logger.debug("Could not play %s: %s", cue.value, exc)

    def stop(self) -> None:
        if not self.enabled or self._channel is None:
            return
        try:
            self._channel.stop()
        except pygame.error as exc:
            logger.debug("Could not stop audio: %s", exc)
        self._channel = None
