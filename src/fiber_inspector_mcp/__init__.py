"""Fiber inspector MCP server: live component-tree inspection over MCP."""

from .inspector import FiberInspector
from .session import TargetSession

__version__ = "0.1.0"

__all__ = ["FiberInspector", "TargetSession", "__version__"]
