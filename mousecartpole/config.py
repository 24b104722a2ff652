from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import TypeVar

import torch

T = TypeVar("T", bound="MCPConfig")


@dataclass
class MCPConfig:
    # Drawing surface (pixels)
    width: int = 600
    height: int = 400
    dpi: int = 100
    offscreen: bool = True
    interactive: bool = False

    device: str | None = None
    seed: int | None = None
    # Package logger level, left to the host when None
    log_level: int | None = None

    # Registry builds a renderer alongside the env when set
    render: bool = True

    def process_surface(self) -> None:
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ValueError(f"Surface size must be positive, got {self.width}x{self.height}")
        if int(self.dpi) <= 0:
            raise ValueError(f"dpi must be positive, got {self.dpi}")
        if self.interactive and self.offscreen:
            raise ValueError("interactive mode needs an onscreen window, set offscreen=False")

    def process_device(self) -> None:
        if self.device is not None and self.device not in ['cpu', 'cuda', 'mps']:
            raise ValueError(f"Invalid device: {self.device}")

        # The state is a handful of scalars, accelerators are opt-in
        if self.device is None:
            self.device = 'cpu'

        if self.device == 'cuda' and not torch.cuda.is_available():
            raise RuntimeError("device is set to CUDA but CUDA is not available")
        elif self.device == 'mps' and not torch.backends.mps.is_available():
            raise RuntimeError("device is set to MPS but MPS is not available")

    def __post_init__(self) -> None:
        self.process_surface()
        self.process_device()

    @classmethod
    def from_config(cls: type[T], cfg: T | dict | None = None, **overrides) -> T:
        if cfg is not None and overrides:
            raise ValueError("cfg and additional keyword arguments cannot be used together")

        if isinstance(cfg, cls):
            cfg_dict = asdict(cfg)
            cls = cfg.__class__
        elif isinstance(cfg, MCPConfig):
            cfg_dict = asdict(cfg)
        elif isinstance(cfg, dict):
            cfg_dict = dict(cfg)
        else:
            cfg_dict = {}

        if overrides:
            cfg_dict.update(overrides)

        return cls(**cfg_dict)

    def __repr__(self):
        repr_string = f"{type(self).__name__}(\n"
        for key, value in asdict(self).items():
            repr_string += f"    {key}: {value!r}\n"
        repr_string += ")"
        return repr_string
