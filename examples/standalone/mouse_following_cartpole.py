#!/usr/bin/env python3
"""
Mouse-following CartPole, step by step.

Opens a window, feeds the pointer's horizontal position into the env on every
mouse move and drives the cart with a small hand-tuned controller that keeps
the pole up while drifting towards the pointer.

Usage:
    python mouse_following_cartpole.py
    python mouse_following_cartpole.py --integrator semi-implicit-euler --steps 3000
"""
from __future__ import annotations

import argparse

import matplotlib.pyplot as plt

from mousecartpole import MouseCartPoleConfig, MouseCartPoleEnv, MouseCartPoleRenderer


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Interactive mouse-following CartPole.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--steps", type=int, default=2000, help="Number of control steps.")
    parser.add_argument(
        "--integrator", type=str, default="euler",
        choices=("euler", "semi-implicit-euler"), help="Kinematics integrator.",
    )
    parser.add_argument("--frame-ms", type=float, default=20.0, help="Render transition duration.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the initial state.")
    return parser.parse_args()


def follow_policy(state: list[float]) -> int:
    """Push right when the pole (plus a bias towards the mouse) leans right."""
    x, x_dot, theta, theta_dot, mouse_x = state
    lean = theta + 0.3 * theta_dot + 0.01 * (x - mouse_x) + 0.02 * x_dot
    return 1 if lean > 0.0 else 0


def main() -> None:
    args = parse_args()
    cfg = MouseCartPoleConfig(
        offscreen=False,
        interactive=True,
        kinematics_integrator=args.integrator,
        seed=args.seed,
    )
    renderer = MouseCartPoleRenderer(cfg)
    env = MouseCartPoleEnv(renderer=renderer, cfg=cfg)

    def on_mouse_move(event):
        if event.inaxes is renderer.ax and event.xdata is not None:
            env.update_mouse_position(renderer.x_scale.invert(event.xdata))

    renderer.fig.canvas.mpl_connect("motion_notify_event", on_mouse_move)

    env.reset()
    try:
        for _ in range(args.steps):
            if not plt.fignum_exists(renderer.fig.number):
                break
            state = env.state.tolist()
            env.step(follow_policy(state))
            env.render(args.frame_ms)
            renderer.advance(args.frame_ms)
            plt.pause(args.frame_ms / 1000.0)

            status = env.check_thresholds()
            if status["x_out_of_bounds"]:
                print(f"Cart left the track after {env.elapsed_steps} steps, resetting")
                env.reset()
    except KeyboardInterrupt:
        pass
    finally:
        env.close()


if __name__ == "__main__":
    main()
