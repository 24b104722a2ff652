from .node import MCPNode, ease_cubic_in_out
from .renderer import LinearScale, MCPRenderer

__all__ = ["MCPNode", "MCPRenderer", "LinearScale", "ease_cubic_in_out"]
