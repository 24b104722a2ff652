from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("mousecartpole")
except PackageNotFoundError:
    __version__ = "0.1.0"

from .config import MCPConfig  # noqa: F401
from .env import MCPEnv  # noqa: F401
from .history import StateHistory  # noqa: F401
from .renderer.node import MCPNode  # noqa: F401
from .renderer.renderer import LinearScale, MCPRenderer  # noqa: F401

# Environment registry subpackage
from . import envs  # noqa: F401
from .envs.cartpole import MouseCartPoleConfig, MouseCartPoleEnv, MouseCartPoleRenderer  # noqa: F401

__all__ = [
    "MCPConfig",
    "MCPEnv",
    "MCPRenderer",
    "MCPNode",
    "LinearScale",
    "StateHistory",
    "MouseCartPoleConfig",
    "MouseCartPoleEnv",
    "MouseCartPoleRenderer",
    # Environment registry
    "envs",
    "__version__",
]
