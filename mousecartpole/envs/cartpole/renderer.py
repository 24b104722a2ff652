"""Mouse-following CartPole renderer."""
import math

import torch
from matplotlib.lines import Line2D
from matplotlib.patches import Circle, FancyBboxPatch, Rectangle

from ...config import MCPConfig
from ...renderer.renderer import LinearScale, MCPRenderer
from .config import MouseCartPoleConfig

GROUND_LEVEL = 1.0


def pole_rotation(theta: float) -> float:
    """Rotation in degrees that draws angle ``theta`` with 0 pointing up."""
    return float(theta) * 180.0 / math.pi + 180.0


class MouseCartPoleRenderer(MCPRenderer):
    """
    Renderer for the mouse-following CartPole environment.

    Draws a ground line across the track, a rounded cart, a pole hinged on
    top of the cart and a small marker at the mouse target. The physical
    track [-x_threshold, x_threshold] spans the full surface width.
    """

    config_cls = MouseCartPoleConfig

    def __init__(self, cfg: MCPConfig | dict | None = None, **cfg_overrides):
        super().__init__(cfg, **cfg_overrides)
        cfg = self.cfg

        self.x_scale = LinearScale((-cfg.x_threshold, cfg.x_threshold), (0.0, float(self.width)))
        self.y_scale = LinearScale((0.0, 3.0), (float(self.height), 0.0))
        self.ground_y = self.y_scale(GROUND_LEVEL)

        self.set_background(cfg.background)

        self.line = Line2D(
            [self.x_scale(-cfg.x_threshold), self.x_scale(cfg.x_threshold)],
            [self.ground_y, self.ground_y],
            color="black",
            linewidth=1.0,
            zorder=1,
        )
        self.ax.add_line(self.line)

        cart_patch = FancyBboxPatch(
            (-cfg.cart_width / 2, -cfg.cart_height / 2),
            cfg.cart_width,
            cfg.cart_height,
            boxstyle=f"round,pad=0,rounding_size={cfg.cart_corner_radius}",
            facecolor=cfg.cart_color,
            edgecolor="none",
            zorder=2,
        )
        self.cart = self.add_node(cart_patch, tx=self.x_scale(0.0), ty=self.ground_y, name="cart")

        # Drawn hanging down from the hinge, rotation turns it upright
        pole_patch = Rectangle(
            (-cfg.pole_width / 2, 0.0),
            cfg.pole_width,
            cfg.pole_height,
            facecolor=cfg.pole_color,
            edgecolor="none",
            zorder=3,
        )
        self.pole = self.add_node(
            pole_patch, tx=self.x_scale(0.0), ty=self.ground_y, rotation=pole_rotation(0.0), name="pole"
        )

        mouse_patch = Circle(
            (0.0, 0.0),
            radius=cfg.mouse_radius,
            facecolor=cfg.mouse_color,
            edgecolor="none",
            alpha=0.8,
            zorder=4,
        )
        self.mouse_target = self.add_node(
            mouse_patch, tx=self.x_scale(0.0), ty=self.ground_y, name="mouse_target"
        )

    def draw_cart(self, x: float) -> None:
        self.cart.set_position(tx=self.x_scale(x), ty=self.ground_y)

    def draw_pole(self, x: float, theta: float) -> None:
        self.pole.set_position(tx=self.x_scale(x), ty=self.ground_y)
        self.pole.set_rotation(pole_rotation(theta))

    def draw_mouse_indicator(self, x: float) -> None:
        self.mouse_target.set_position(tx=self.x_scale(x))
        self._redraw()

    def animate_to(self, x: float, theta: float, duration_ms: float) -> None:
        px = self.x_scale(x)
        self.pole.transition(duration_ms, rotation=pole_rotation(theta), tx=px, ty=self.ground_y)
        self.cart.transition(duration_ms, tx=px)

    def _step(self, state: torch.Tensor) -> None:
        """
        Snap the scene to a state.

        Args:
            state: Tensor of shape [5] (or [..., 5], last row used) where:
                - state[0] = cart x position
                - state[2] = pole angle (theta)
                - state[4] = mouse target
        """
        state_t = torch.as_tensor(state, dtype=torch.float64).detach().cpu().reshape(-1, 5)[-1]
        x, _, theta, _, mouse_x = state_t.tolist()
        self.draw_cart(x)
        self.draw_pole(x, theta)
        self.draw_mouse_indicator(mouse_x)
