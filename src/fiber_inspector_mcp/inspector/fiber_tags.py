"""Fiber kind codes, field access and display-name resolution.

The target runtime owns every node; this module only reads it. Nodes,
hooks, renderers and type metadata may be exposed either as mappings or
as plain objects, so every read goes through ``read_field`` which picks
key lookup or attribute lookup accordingly.

Kind codes (same numbering as the runtime's internal tags):

    0  = FunctionComponent
    1  = ClassComponent
    2  = IndeterminateComponent
    3  = RootContainer
    5  = HostElement (div, span, ...)
    6  = HostText
    7  = Fragment
    8  = Mode
    10 = ForwardRef
    11 = SimpleMemo
    12 = Memo
    13 = Suspense
    14 = Profiler
    15 = ContextConsumer
    16 = ContextProvider
    22 = Offscreen
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from typing import Any


class FiberTag(IntEnum):
    FUNCTION_COMPONENT = 0
    CLASS_COMPONENT = 1
    INDETERMINATE_COMPONENT = 2
    ROOT_CONTAINER = 3
    HOST_ELEMENT = 5
    HOST_TEXT = 6
    FRAGMENT = 7
    MODE = 8
    FORWARD_REF = 10
    SIMPLE_MEMO = 11
    MEMO = 12
    SUSPENSE = 13
    PROFILER = 14
    CONTEXT_CONSUMER = 15
    CONTEXT_PROVIDER = 16
    OFFSCREEN = 22


FIBER_TAGS: dict[int, str] = {
    FiberTag.FUNCTION_COMPONENT: "FunctionComponent",
    FiberTag.CLASS_COMPONENT: "ClassComponent",
    FiberTag.INDETERMINATE_COMPONENT: "IndeterminateComponent",
    FiberTag.ROOT_CONTAINER: "RootContainer",
    FiberTag.HOST_ELEMENT: "HostElement",
    FiberTag.HOST_TEXT: "HostText",
    FiberTag.FRAGMENT: "Fragment",
    FiberTag.MODE: "Mode",
    FiberTag.FORWARD_REF: "ForwardRef",
    FiberTag.SIMPLE_MEMO: "SimpleMemo",
    FiberTag.MEMO: "Memo",
    FiberTag.SUSPENSE: "Suspense",
    FiberTag.PROFILER: "Profiler",
    FiberTag.CONTEXT_CONSUMER: "ContextConsumer",
    FiberTag.CONTEXT_PROVIDER: "ContextProvider",
    FiberTag.OFFSCREEN: "Offscreen",
}

# Components shown by a tree walk regardless of flags
ALWAYS_VISIBLE_TAGS = frozenset({
    FiberTag.FUNCTION_COMPONENT,
    FiberTag.CLASS_COMPONENT,
    FiberTag.FORWARD_REF,
    FiberTag.SIMPLE_MEMO,
    FiberTag.MEMO,
    FiberTag.SUSPENSE,
    FiberTag.PROFILER,
    FiberTag.CONTEXT_PROVIDER,
})

# Nodes that carry a hook chain in memoized_state
FUNCTION_FAMILY_TAGS = frozenset({
    FiberTag.FUNCTION_COMPONENT,
    FiberTag.FORWARD_REF,
    FiberTag.SIMPLE_MEMO,
})

# Nodes counted by the commit profiler
PROFILED_TAGS = frozenset({
    FiberTag.FUNCTION_COMPONENT,
    FiberTag.CLASS_COMPONENT,
})

ANONYMOUS = "Anonymous"


def kind_label(tag: Any) -> str:
    """Human-readable kind for a numeric tag, ``Unknown(n)`` when unrecognized."""
    try:
        return FIBER_TAGS[tag]
    except (KeyError, TypeError):
        return f"Unknown({tag})"


def read_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an object; ``default`` when absent."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def has_field(obj: Any, name: str) -> bool:
    """True when ``name`` is present on ``obj`` (even if its value is None)."""
    if obj is None:
        return False
    if isinstance(obj, Mapping):
        return name in obj
    return hasattr(obj, name)


def assign_field(obj: Any, name: str, value: Any) -> None:
    if isinstance(obj, Mapping):
        obj[name] = value  # type: ignore[index]
    else:
        setattr(obj, name, value)


def delete_field(obj: Any, name: str) -> None:
    if isinstance(obj, Mapping):
        obj.pop(name, None)  # type: ignore[attr-defined]
    elif hasattr(obj, name):
        delattr(obj, name)


def callable_name(obj: Any) -> str | None:
    """``__name__`` of a function or class; None for lambdas and unnamed objects."""
    name = read_field(obj, "__name__")
    if not isinstance(name, str) or not name or name == "<lambda>":
        return None
    return name


def resolve_display_name(fiber: Any) -> str:
    """Resolve the caller-facing name of a node.

    Order: host tag string -> explicit display_name -> function/class name
    -> wrapped render's display_name -> wrapped render's name -> "Anonymous".
    Nodes without type metadata (roots, text, fragments) use their kind label.
    """
    fiber_type = read_field(fiber, "type")
    if fiber_type is None:
        return kind_label(read_field(fiber, "tag"))
    if isinstance(fiber_type, str):
        return fiber_type

    render = read_field(fiber_type, "render")
    candidates = (
        read_field(fiber_type, "display_name"),
        callable_name(fiber_type),
        read_field(render, "display_name"),
        callable_name(render),
    )
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return candidate
    return ANONYMOUS


def identity_key(fiber: Any) -> str | None:
    key = read_field(fiber, "key")
    return None if key is None else str(key)
