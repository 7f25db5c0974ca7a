# lunar_lander/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_ESCAPE, K_m, K_r, K_UP, K_LEFT, K_RIGHT
from .config import FPS, TICK_MS, SEED_DEFAULT, add_config_args, read_config
from .lander import ThrustDirection
from .level import build_levels
from .render import PygameRenderer, PygameAudio
from .session import GameSession

KEY_THRUST = {
    K_UP: ThrustDirection.UP,
    K_LEFT: ThrustDirection.LEFT,
    K_RIGHT: ThrustDirection.RIGHT,
}
MAX_FRAME_MS = 100   # clamp stalls (window drag, breakpoints)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Lunar Lander: land softly on the green platform.")
    add_config_args(p)
    p.add_argument("--seed", type=int, default=None,
                   help="Level seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--level", type=int, default=1, help="Level to start on (1-based).")
    p.add_argument("--mute", action="store_true", help="Start with sound off (M toggles it).")
    p.add_argument("--verbose", action="store_true", help="Log simulation events.")
    return p.parse_args(argv)


def run(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    # Resolve seed: None -> use SEED_DEFAULT; -1 -> random
    if args.seed is None:
        launch_seed = SEED_DEFAULT
    elif args.seed == -1:
        launch_seed = None
    else:
        launch_seed = args.seed

    try:
        config = read_config(argv)
        levels = build_levels(launch_seed)
        start_index = args.level - 1
        levels[start_index]          # fail before opening a window
    except ValueError as exc:
        print(f"[lunar-lander] {exc}")
        sys.exit(2)

    renderer = PygameRenderer(display=True, caption="Lunar Lander")
    audio = PygameAudio()
    session = GameSession(config, levels=levels, renderer=renderer, audio=audio)
    session.set_sound(not args.mute)
    print(f"[lunar-lander] seed={levels.seed} gravity={config.gravity_tier.value} "
          f"timer={config.timer_seconds}s fuel={config.fuel_capacity:.0f}")
    session.start(start_index)

    clock = pygame.time.Clock()
    pending_ms = 0
    reported = None

    while True:
        pending_ms += min(clock.tick(FPS), MAX_FRAME_MS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key == K_m:
                    session.set_sound(not session.sound_on)
                if event.key == K_r:
                    session.start(0)
                    pending_ms = 0
                    reported = None
            if event.type == pygame.KEYUP and event.key in KEY_THRUST:
                session.on_thrust_release()

        # Whole physics ticks only; the remainder carries to the next frame.
        while pending_ms >= TICK_MS:
            pressed = pygame.key.get_pressed()
            for key, direction in KEY_THRUST.items():
                if pressed[key]:
                    session.on_thrust(direction)
            session.tick()
            pending_ms -= TICK_MS

        if session.outcome.is_final and session.outcome is not reported:
            print(f"[lunar-lander] {session.state.message}  (R restarts, ESC quits)")
            reported = session.outcome

        renderer.present()


if __name__ == "__main__":
    run()
