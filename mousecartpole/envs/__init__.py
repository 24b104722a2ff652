"""
Named environments for mousecartpole.

``make`` turns a name plus config overrides into a ready env. The renderer is
only built when the resolved config asks for one, so ``render=False`` gives a
state-only env that never touches matplotlib:

    import mousecartpole as mcp

    env = mcp.envs.make("MouseCartPole-v0", stack_size=4)
    headless = mcp.envs.make("MouseCartPole-v0", render=False)
"""
from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from ..config import MCPConfig
    from ..env import MCPEnv
    from ..renderer.renderer import MCPRenderer

logger = logging.getLogger(__name__)


class EnvEntry(NamedTuple):
    env_cls: type["MCPEnv"]
    renderer_cls: type["MCPRenderer"]
    config_cls: type["MCPConfig"]

    def build(self, **config_overrides) -> "MCPEnv":
        cfg = self.config_cls(**config_overrides)
        renderer = self.renderer_cls(cfg) if cfg.render else None
        logger.debug("building %s (renderer=%s)", self.env_cls.__name__, renderer is not None)
        return self.env_cls(renderer=renderer, cfg=cfg)


_ENV_REGISTRY: dict[str, EnvEntry] = {}


def register(name: str, env_cls, renderer_cls, config_cls) -> EnvEntry:
    """Make ``name`` available to ``make``. Re-registering a name replaces it with a warning."""
    if name in _ENV_REGISTRY:
        warnings.warn(f"Replacing environment {name!r} in the registry.")
    entry = EnvEntry(env_cls, renderer_cls, config_cls)
    _ENV_REGISTRY[name] = entry
    return entry


def list_envs() -> list[str]:
    return sorted(_ENV_REGISTRY)


def get_env_classes(name: str) -> EnvEntry:
    """Return the ``(env_cls, renderer_cls, config_cls)`` entry behind ``name``."""
    try:
        return _ENV_REGISTRY[name]
    except KeyError:
        raise ValueError(f"No environment named {name!r}, choose one of {list_envs()}") from None


def make(name: str, **config_overrides) -> "MCPEnv":
    return get_env_classes(name).build(**config_overrides)


def _register_builtins() -> None:
    from .cartpole import MouseCartPoleConfig, MouseCartPoleEnv, MouseCartPoleRenderer

    register("MouseCartPole-v0", MouseCartPoleEnv, MouseCartPoleRenderer, MouseCartPoleConfig)


_register_builtins()

__all__ = ["EnvEntry", "register", "list_envs", "get_env_classes", "make"]
