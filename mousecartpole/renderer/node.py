from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable

from matplotlib.artist import Artist
from matplotlib.axes import Axes
from matplotlib.transforms import Affine2D


def ease_cubic_in_out(t: float) -> float:
    t *= 2.0
    if t <= 1.0:
        return t * t * t / 2.0
    t -= 2.0
    return (t * t * t + 2.0) / 2.0


@dataclass
class _Transition:
    start: dict[str, float]
    end: dict[str, float]
    duration: float
    target: dict[str, float]
    ease: Callable[[float], float] = ease_cubic_in_out
    elapsed: float = field(default=0.0)

    def value(self, key: str, k: float) -> float:
        a = self.start[key]
        return a + (self.end[key] - a) * k


class MCPNode:
    """One drawable shape placed in pixel space by a translation and a rotation.

    The artist's own geometry is given in local coordinates; the node applies
    ``rotate(rotation)`` then ``translate(tx, ty)``, which is how an SVG group
    transform wraps a rotated child. Attribute changes can be immediate
    (``set_position``/``set_rotation``) or eased over time (``transition``).
    """

    ATTRS = ("tx", "ty", "rotation")

    def __init__(
        self,
        ax: Axes,
        artist: Artist,
        tx: float = 0.0,
        ty: float = 0.0,
        rotation: float = 0.0,
        name: str | None = None,
    ) -> None:
        self.ax = ax
        self.artist = artist
        self.name = name
        self.tx = float(tx)
        self.ty = float(ty)
        self.rotation = float(rotation)
        self._transition: _Transition | None = None
        self._apply()

    @property
    def in_transition(self) -> bool:
        return self._transition is not None

    def set_position(self, tx: float | None = None, ty: float | None = None) -> None:
        if tx is not None:
            self.tx = float(tx)
        if ty is not None:
            self.ty = float(ty)
        self._drop_from_transition(("tx", "ty"))
        self._apply()

    def set_rotation(self, degrees: float) -> None:
        self.rotation = float(degrees)
        self._drop_from_transition(("rotation",))
        self._apply()

    def transition(
        self,
        duration_ms: float,
        ease: Callable[[float], float] = ease_cubic_in_out,
        **targets: float,
    ) -> None:
        """Start an eased transition towards ``targets``, interrupting any running one."""
        unknown = set(targets) - set(self.ATTRS)
        if unknown:
            raise ValueError(f"Unknown node attributes: {sorted(unknown)}")

        end = {k: float(v) for k, v in targets.items()}
        if duration_ms <= 0:
            self._transition = None
            for k, v in end.items():
                setattr(self, k, v)
            self._apply()
            return

        start = {k: getattr(self, k) for k in end}
        if "rotation" in end:
            # shortest way round, as SVG transform interpolation does
            a = start["rotation"] % 360.0
            b = a + (end["rotation"] - a + 180.0) % 360.0 - 180.0
            start["rotation"], end["rotation"] = a, b
        self._transition = _Transition(
            start=start, end=end, duration=float(duration_ms), target=dict(targets), ease=ease,
        )

    def advance(self, elapsed_ms: float) -> bool:
        """Move the running transition forward. Returns True while still running."""
        tr = self._transition
        if tr is None:
            return False
        tr.elapsed += float(elapsed_ms)
        t = min(1.0, tr.elapsed / tr.duration)
        k = tr.ease(t)
        if t >= 1.0:
            for key in tr.end:
                setattr(self, key, float(tr.target[key]))
            self._transition = None
        else:
            for key in tr.end:
                setattr(self, key, tr.value(key, k))
        self._apply()
        return self._transition is not None

    def finish(self) -> None:
        self.advance(math.inf)

    def _drop_from_transition(self, keys: tuple[str, ...]) -> None:
        tr = self._transition
        if tr is None:
            return
        for key in keys:
            tr.start.pop(key, None)
            tr.end.pop(key, None)
            tr.target.pop(key, None)
        if not tr.end:
            self._transition = None

    def _apply(self) -> None:
        local = Affine2D().rotate_deg(self.rotation).translate(self.tx, self.ty)
        self.artist.set_transform(local + self.ax.transData)
