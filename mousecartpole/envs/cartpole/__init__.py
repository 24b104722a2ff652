"""
Mouse-following CartPole environment for mousecartpole.

The classic cart-pole balancing task with one extra observation channel: the
horizontal mouse position reported by the host, so a human can steer where
the cart should go while a controller keeps the pole up.
"""
from .config import MouseCartPoleConfig
from .renderer import MouseCartPoleRenderer
from .env import MouseCartPoleEnv

__all__ = ["MouseCartPoleConfig", "MouseCartPoleRenderer", "MouseCartPoleEnv"]
