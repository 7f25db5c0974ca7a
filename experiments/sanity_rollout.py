# /experiments/sanity_rollout.py
"""
Sanity rollouts for LanderEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis

Usage examples (from repo root):
  # Run both policies over 20 default seeds on level 1, frame_skip=4:
  python -m experiments.sanity_rollout --policies both

  # Only heuristic, custom seeds, level 3 (randomized platform kinds):
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333 --level 3

  # Quick random-only smoke with fewer steps:
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple

import numpy as np

from lunar_lander.env.lander_env import LanderEnv
from lunar_lander.game.config import TICK_MS


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.randint(0, 4))  # release / up / left / right
    return act

def tiny_heuristic_policy_init():
    """
    Very small rule, one thruster per decision:
      - brake when falling fast close to the ground
      - otherwise drift toward the nearest destination, capping lateral speed
      - climb if the destination is above the feet
      - else coast
    """
    def act(obs: np.ndarray) -> int:
        dx, dy = obs[2], obs[3]
        dest_dx, dest_dy = obs[6], obs[7]
        clearance = min(obs[8], obs[9])
        if dy > 0.2 and clearance < 0.25:
            return 1
        if dest_dy < -0.02 and dy > -0.3:
            return 1
        if dest_dx > 0.02 and dx < 0.3:
            return 3
        if dest_dx < -0.02 and dx > -0.3:
            return 2
        if dy > 0.3:
            return 1
        return 0
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    level: int,
                    frame_skip: int,
                    steps_limit: int) -> Tuple[int, float, bool, bool, str, float]:
    """
    Returns: (ep_len, ret_sum, terminated, truncated, outcome, fuel_left)
    """
    env = LanderEnv(frame_skip=frame_skip)

    # Policy init
    if policy_name == "random":
        # Make action RNG seed a function of seed for determinism
        policy = random_policy_init(10_000 + seed)
    elif policy_name == "heuristic":
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError("Unknown policy")

    ret_sum = 0.0
    ep_len = 0
    term = trunc = False
    info = {}

    try:
        obs, info = env.reset(seed=seed, options={"level": level})

        for t in range(steps_limit):
            a = policy(obs)
            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            if term or trunc:
                break
    finally:
        env.close()

    return ep_len, ret_sum, bool(term), bool(trunc), str(info.get("outcome", "")), float(info.get("fuel", 0.0))


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--level", type=int, default=1,
                    help="Level to play (1-based)")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Physics ticks per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (the level timer usually ends it earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)

    # Seeds
    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))  # 20 fixed eval seeds by default

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "env_name", "obs_version",
        "policy_name", "seed", "level",
        "frame_skip", "tick_ms", "decision_hz",
        "episode_len_decisions", "return_sum",
        "terminated", "truncated", "outcome", "fuel_left",
    ]
    env_name = "LanderEnv"
    obs_version = "v1"
    decision_hz = 1000.0 / (TICK_MS * max(1, args.frame_skip))

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds, level {args.level} "
          f"(frame_skip={args.frame_skip}, decision_hz≈{decision_hz:.1f})")
    print(f"Writing summaries to {episodes_csv}")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, terminated, truncated, outcome, fuel_left = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                level=args.level - 1,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
            )

            row = [
                env_name, obs_version,
                policy_name, seed, args.level,
                args.frame_skip, TICK_MS, f"{decision_hz:.2f}",
                ep_len, f"{ret_sum:.3f}",
                int(terminated), int(truncated), outcome, f"{fuel_left:.1f}",
            ]
            write_episode_row(episodes_csv, header, row)

            print(f"[{policy_name}] seed={seed}  len={ep_len}  ret={ret_sum:.3f}  "
                  f"term={terminated} trunc={truncated}  outcome={outcome}  fuel={fuel_left:.1f}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
