import logging
from abc import ABC, abstractmethod

import torch
from tensordict import TensorDict
from torchrl.data.tensor_specs import Composite, Unbounded, Categorical

from .config import MCPConfig
from .renderer.renderer import MCPRenderer


class MCPEnv(ABC):
    """Single-scene environment driven by one host loop.

    Unlike a batched TorchRL ``EnvBase``, caller mistakes (stepping before a
    reset, out-of-range actions) are reported through logging and leave the
    env untouched instead of raising, so a render/input loop keeps running.
    """

    config_cls: type[MCPConfig] = MCPConfig

    def __init__(
        self,
        renderer: MCPRenderer | None = None,
        cfg: MCPConfig | dict | None = None,
        **cfg_overrides,
    ) -> None:
        if cfg is None and not cfg_overrides and renderer is not None:
            cfg = renderer.cfg
        self.cfg = self.config_cls.from_config(cfg, **cfg_overrides)
        self._renderer = renderer
        self.device = torch.device(self.cfg.device)
        if self.cfg.log_level is not None:
            logging.getLogger(__name__.split(".")[0]).setLevel(self.cfg.log_level)

    @property
    def renderer(self) -> MCPRenderer | None:
        return self._renderer

    # Minimal helpers to configure specs
    def set_default_specs(
        self,
        *,
        direct_obs_dim: int | None = None,
        actions: int | None = None,
        discrete_actions: bool = True,
        dtype: torch.dtype = torch.float32,
    ) -> None:
        if direct_obs_dim is None:
            raise ValueError("direct_obs_dim must be provided.")
        self.observation_spec = Composite(
            observation=Unbounded(
                shape=torch.Size([int(direct_obs_dim)]), dtype=dtype, device=self.device
            ),
            shape=torch.Size([]),
        )

        if actions is None:
            raise ValueError("actions must be provided.")
        if discrete_actions:
            self.action_spec = Categorical(
                n=int(actions), shape=torch.Size([]), dtype=torch.long, device=self.device
            )
        else:
            self.action_spec = Unbounded(
                shape=torch.Size([int(actions)]), dtype=torch.float32, device=self.device
            )

    @abstractmethod
    def reset(self, *args, **kwargs) -> TensorDict:
        pass

    @abstractmethod
    def step(self, action) -> TensorDict | None:
        pass

    def render_pixels(self) -> torch.Tensor:
        if self._renderer is None:
            raise RuntimeError("Renderer is not initialized. Construct env with a renderer and pass it to MCPEnv.")
        return self._renderer.grab_pixels()

    def close(self) -> None:
        if self._renderer is not None:
            self._renderer.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
