"""Bounded conversion of arbitrary live values into plain data.

Live nodes reference closures, host objects, cyclic structures and
whatever else the application keeps in props and state. ``safe_serialize``
never materializes more than a bounded slice of such a graph and never
raises: recursion stops at ``MAX_DEPTH``, sequences keep ``MAX_ITEMS``
elements, keyed structures keep ``MAX_KEYS`` entries, and a field that
fails to convert is replaced by ``UNSERIALIZABLE``.

Rules are applied in order:
    None                 -> None
    callables            -> "[Function: name]" / "[Function: anonymous]"
    enum members         -> str(member)
    host (DOM-like) objs -> "[tag.class]"
    str/int/float/bool   -> unchanged
    list/tuple/set       -> first MAX_ITEMS elements, recursively
    element descriptors  -> "[Element: type]"
    mappings / objects   -> first MAX_KEYS entries, recursively
    field-less objects   -> str(value)
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from itertools import islice
from typing import Any

from .fiber_tags import callable_name, has_field, read_field

MAX_DEPTH = 3
MAX_ITEMS = 10
MAX_KEYS = 20

MAX_DEPTH_MARKER = "[max depth]"
UNSERIALIZABLE = "[unserializable]"

# Field that marks an element descriptor (the output of a render call)
ELEMENT_MARKER_FIELD = "typeof"

_PRIMITIVES = (str, int, float, bool)
_SEQUENCES = (list, tuple, set, frozenset)


def safe_serialize(value: Any, depth: int = 0) -> Any:
    """Convert ``value`` into JSON-representable data. Never raises."""
    try:
        return _serialize(value, depth)
    except Exception:  # noqa: BLE001
        return UNSERIALIZABLE


def is_plain_object(value: Any) -> bool:
    """True for values that can carry fields (not None, primitives or callables)."""
    return value is not None and not isinstance(value, _PRIMITIVES + (bytes,)) and not callable(value)


def _serialize(value: Any, depth: int) -> Any:
    if depth > MAX_DEPTH:
        return MAX_DEPTH_MARKER
    if value is None:
        return None
    if callable(value):
        return f"[Function: {callable_name(value) or 'anonymous'}]"
    if isinstance(value, Enum):
        return str(value)
    if _is_host_object(value):
        tag_name = str(read_field(value, "tag_name")).lower()
        return f"[{tag_name}.{read_field(value, 'class_name') or ''}]"
    if isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, _SEQUENCES):
        return [_serialize(item, depth + 1) for item in islice(value, MAX_ITEMS)]
    if has_field(value, ELEMENT_MARKER_FIELD):
        return f"[Element: {_element_type_name(value)}]"

    names = _field_names(value)
    if not names and not isinstance(value, Mapping):
        # Opaque value objects (datetime, Decimal, ...) have no fields to walk
        return str(value)

    result: dict[str, Any] = {}
    for key in names:
        try:
            result[str(key)] = _serialize(_field_value(value, key), depth + 1)
        except Exception:  # noqa: BLE001
            result[str(key)] = UNSERIALIZABLE
    return result


def _is_host_object(value: Any) -> bool:
    # Mappings are data, never host objects
    if isinstance(value, Mapping) or isinstance(value, _PRIMITIVES):
        return False
    return isinstance(getattr(value, "tag_name", None), str)


def _element_type_name(element: Any) -> str:
    element_type = read_field(element, "type")
    if element_type is None:
        return "unknown"
    if isinstance(element_type, str):
        return element_type
    return read_field(element_type, "display_name") or callable_name(element_type) or str(element_type)


def _field_names(value: Any) -> list[Any]:
    if isinstance(value, Mapping):
        return list(islice(value.keys(), MAX_KEYS))
    names = getattr(value, "__dict__", None)
    if isinstance(names, Mapping):
        return list(islice(names.keys(), MAX_KEYS))
    slots = getattr(type(value), "__slots__", None)
    if isinstance(slots, str):
        return [slots]
    if slots:
        return [name for name in slots if hasattr(value, name)]
    return []


def _field_value(value: Any, key: Any) -> Any:
    if isinstance(value, Mapping):
        return value[key]
    return getattr(value, key)
