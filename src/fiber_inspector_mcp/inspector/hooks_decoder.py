"""Decode a function component's hook chain into typed facts.

A function component keeps one record per hook call in a singly-linked
list hanging off ``memoized_state``. The runtime does not label records,
so each one is classified from its shape, first matching rule wins:

    1. record has an update queue           -> StateOrReducer
    2. stored value has a ``destroy`` field  -> Effect
    3. stored value has a ``current`` field  -> Ref
    4. stored value is a 2-element sequence  -> MemoOrCallback
    5. anything else                         -> Unknown
"""

from __future__ import annotations

from typing import Any

from ..models import AuxiliaryFact
from .fiber_tags import (
    FUNCTION_FAMILY_TAGS,
    FiberTag,
    callable_name,
    has_field,
    read_field,
)
from .serializer import is_plain_object, safe_serialize

# Name of the reducer the runtime installs for plain state hooks
BASIC_STATE_REDUCER = "basic_state_reducer"


def classify_record(record: Any, index: int) -> AuxiliaryFact:
    """Classify one hook record."""
    queue = read_field(record, "queue")
    stored = read_field(record, "memoized_state")

    if queue is not None:
        reducer = read_field(queue, "last_rendered_reducer")
        variant = "state" if callable_name(reducer) == BASIC_STATE_REDUCER else "reducer"
        return AuxiliaryFact(
            index=index,
            classified_kind="StateOrReducer",
            variant=variant,
            value=safe_serialize(stored),
        )

    if is_plain_object(stored) and has_field(stored, "destroy"):
        deps = read_field(stored, "deps")
        return AuxiliaryFact(
            index=index,
            classified_kind="Effect",
            value=safe_serialize(deps) if deps is not None else None,
        )

    if is_plain_object(stored) and has_field(stored, "current"):
        return AuxiliaryFact(
            index=index,
            classified_kind="Ref",
            value=safe_serialize(read_field(stored, "current")),
        )

    if isinstance(stored, (list, tuple)) and len(stored) == 2:
        return AuxiliaryFact(index=index, classified_kind="MemoOrCallback", value=safe_serialize(stored[0]))

    return AuxiliaryFact(index=index, classified_kind="Unknown", value=safe_serialize(stored))


def iter_hook_records(fiber: Any):
    """Yield the records of a node's hook chain in call order."""
    record = read_field(fiber, "memoized_state")
    seen: set[int] = set()
    while record is not None and id(record) not in seen:
        seen.add(id(record))
        yield record
        record = read_field(record, "next")


def decode_hooks(fiber: Any) -> list[AuxiliaryFact]:
    """Classify every hook record of a function-family node ([] for other kinds)."""
    if read_field(fiber, "tag") not in FUNCTION_FAMILY_TAGS:
        return []
    return [classify_record(record, index) for index, record in enumerate(iter_hook_records(fiber))]


def decode_class_state(fiber: Any) -> Any:
    """Serialized ``state`` of a class component's instance, else None."""
    if read_field(fiber, "tag") != FiberTag.CLASS_COMPONENT:
        return None
    instance = read_field(fiber, "state_node")
    if instance is None:
        return None
    return safe_serialize(read_field(instance, "state"))
