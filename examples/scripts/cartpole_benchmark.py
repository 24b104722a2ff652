#!/usr/bin/env python3
"""
MouseCartPole Benchmark Example

Runs the environment headless with random actions and reports steps per
second. Uses the mousecartpole.envs registry API.

Usage:
    # State only (no drawing surface)
    python cartpole_benchmark.py --no-render

    # Rasterize every frame
    python cartpole_benchmark.py --steps 500

    # Dump the scene to SVG every N steps
    python cartpole_benchmark.py --save-every 100 --save-dir ./outputs
"""
from __future__ import annotations

import argparse
import time
from pathlib import Path

import torch

import mousecartpole as mcp


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="mousecartpole environment benchmark.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--env", type=str, default="MouseCartPole-v0",
        help="Environment name from mcp.envs.list_envs().",
    )
    parser.add_argument("--steps", type=int, default=1000, help="Number of environment steps.")
    parser.add_argument(
        "--integrator", type=str, default="euler",
        choices=("euler", "semi-implicit-euler"), help="Kinematics integrator.",
    )
    parser.add_argument("--stack-size", type=int, default=3, help="States per observation.")
    parser.add_argument("--seed", type=int, default=0, help="Seed for initial state and actions.")
    parser.add_argument(
        "--no-render", action="store_true",
        help="Disable drawing (state-only mode).",
    )
    parser.add_argument(
        "--save-every", type=int, default=-1,
        help="Save an SVG of the scene every N steps (-1 to disable).",
    )
    parser.add_argument(
        "--save-dir", type=str, default="./outputs",
        help="Output directory for saved scenes.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    torch.manual_seed(args.seed)

    print("=" * 60)
    print(f"{args.env} Benchmark")
    print("=" * 60)

    env = mcp.envs.make(
        args.env,
        kinematics_integrator=args.integrator,
        stack_size=args.stack_size,
        seed=args.seed,
        render=not args.no_render,
    )
    renderer = env.renderer
    td = env.reset()
    print(f"observation shape: {tuple(td['observation'].shape)}")

    save_dir = Path(args.save_dir)
    t_start = time.perf_counter()
    resets = 0
    for i in range(args.steps):
        td = env.step(env.action_spec.rand())
        if renderer is not None:
            env.render(0)
            renderer.grab_pixels()
            if args.save_every > 0 and i % args.save_every == 0:
                renderer.save(save_dir / f"step_{i:05d}.svg")
        if env.check_thresholds()["x_out_of_bounds"]:
            env.reset()
            resets += 1
    elapsed = time.perf_counter() - t_start

    print(f"steps: {args.steps}, resets: {resets}")
    print(f"Time taken: {elapsed:.3f} seconds")
    print(f"Steps/s: {args.steps / max(elapsed, 1e-9):.1f}")
    env.close()


if __name__ == "__main__":
    main()
