"""Live component-graph inspection engine."""

from .fiber_tags import FIBER_TAGS, FiberTag, kind_label, resolve_display_name
from .inspector import FiberInspector
from .registry import FiberRegistry
from .serializer import safe_serialize

__all__ = [
    "FIBER_TAGS",
    "FiberInspector",
    "FiberRegistry",
    "FiberTag",
    "kind_label",
    "resolve_display_name",
    "safe_serialize",
]
