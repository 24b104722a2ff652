import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import torch
from matplotlib.artist import Artist
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import Patch

from ..config import MCPConfig
from .node import MCPNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearScale:
    """Affine map from a physical ``domain`` onto a pixel ``range``."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return r0 + (float(value) - d0) * (r1 - r0) / (d1 - d0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return d0 + (float(pixel) - r0) * (d1 - d0) / (r1 - r0)


class MCPRenderer(ABC):
    """Vector drawing surface for a single scene.

    The axes cover the whole figure and use pixel coordinates with y growing
    downwards, so node geometry reads like SVG attributes. Subclasses build
    their scene in ``__init__`` with ``add_node`` and implement the drawing
    contract used by the env.
    """

    config_cls: type[MCPConfig] = MCPConfig

    def __init__(self, cfg: MCPConfig | dict | None = None, **cfg_overrides):
        self.cfg = self.config_cls.from_config(cfg, **cfg_overrides)
        self.width = int(self.cfg.width)
        self.height = int(self.cfg.height)
        dpi = int(self.cfg.dpi)
        figsize = (self.width / dpi, self.height / dpi)

        if self.cfg.offscreen:
            self.fig = Figure(figsize=figsize, dpi=dpi)
            self.canvas = FigureCanvasAgg(self.fig)
        else:
            import matplotlib.pyplot as plt

            self.fig = plt.figure(figsize=figsize, dpi=dpi)
            self.canvas = self.fig.canvas
            if self.cfg.interactive:
                plt.ion()
                plt.show(block=False)

        self.ax = self.fig.add_axes((0.0, 0.0, 1.0, 1.0))
        self.ax.set_xlim(0, self.width)
        self.ax.set_ylim(self.height, 0)
        self.ax.set_axis_off()

        self._nodes: list[MCPNode] = []
        self._closed = False
        logger.debug("Renderer surface %dx%d px (offscreen=%s)", self.width, self.height, self.cfg.offscreen)

    def set_background(self, color: str) -> None:
        self.fig.set_facecolor(color)

    def add_node(
        self,
        artist: Artist,
        tx: float = 0.0,
        ty: float = 0.0,
        rotation: float = 0.0,
        name: str | None = None,
    ) -> MCPNode:
        if isinstance(artist, Patch):
            self.ax.add_patch(artist)
        else:
            self.ax.add_artist(artist)
        node = MCPNode(self.ax, artist, tx=tx, ty=ty, rotation=rotation, name=name)
        self._nodes.append(node)
        return node

    @property
    def nodes(self) -> list[MCPNode]:
        return list(self._nodes)

    # --- Drawing contract ---
    @abstractmethod
    def draw_cart(self, x: float) -> None:
        """Place the cart at physical position ``x`` immediately."""

    @abstractmethod
    def draw_pole(self, x: float, theta: float) -> None:
        """Place the pole on the cart at ``x`` with angle ``theta`` (radians) immediately."""

    @abstractmethod
    def draw_mouse_indicator(self, x: float) -> None:
        """Move the mouse-target marker to physical position ``x``."""

    @abstractmethod
    def animate_to(self, x: float, theta: float, duration_ms: float) -> None:
        """Ease cart and pole towards ``(x, theta)`` over ``duration_ms``."""

    def _step(self, state: torch.Tensor) -> None:
        # Default no-op. Children override this to sync the scene with a state.
        return None

    def step(self, state: torch.Tensor | None = None, return_pixels: bool = False):
        if state is not None:
            self._step(state)
        self._redraw()
        if return_pixels:
            return self.grab_pixels()

    def __call__(self, *args, **kwargs):
        return self.step(*args, **kwargs)

    # --- Transitions ---
    def advance(self, elapsed_ms: float) -> bool:
        """Progress running transitions. Returns True while any is still running."""
        active = False
        for node in self._nodes:
            active = node.advance(elapsed_ms) or active
        self._redraw()
        return active

    def flush(self) -> None:
        for node in self._nodes:
            node.finish()
        self._redraw()

    def _redraw(self) -> None:
        if self.cfg.interactive and not self._closed:
            self.canvas.draw_idle()
            self.canvas.flush_events()

    # --- Output ---
    def grab_pixels(self) -> torch.Tensor:
        """Rasterize the current scene into a uint8 tensor of shape [3, H, W]."""
        self.canvas.draw()
        rgba = np.asarray(self.canvas.buffer_rgba())
        img = torch.from_numpy(rgba[..., :3].copy())
        return img.permute(2, 0, 1).contiguous()

    def save(self, path: str | Path) -> str:
        """Write the scene to ``path``; the format follows the extension (svg, png, pdf)."""
        fpath = Path(path).resolve()
        fpath.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(str(fpath), facecolor=self.fig.get_facecolor())
        return str(fpath)

    def close(self) -> None:
        if self._closed:
            return
        if not self.cfg.offscreen:
            import matplotlib.pyplot as plt

            plt.close(self.fig)
        self._closed = True
