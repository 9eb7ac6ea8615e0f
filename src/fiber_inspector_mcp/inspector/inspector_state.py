"""Fiber inspector - deep inspection and state mutation of registered nodes."""

from typing import Any, Callable

from ..models import ComponentInspection, MutationResult, SourceLocation
from .fiber_tags import (
    FUNCTION_FAMILY_TAGS,
    FiberTag,
    identity_key,
    kind_label,
    read_field,
    resolve_display_name,
)
from .hooks_decoder import decode_class_state, decode_hooks, iter_hook_records
from .inspector_core import _EngineLogger
from .inspector_tree import FiberInspectorTree, iter_children
from .serializer import safe_serialize

FIBER_NOT_FOUND = "Fiber not found. Run get_component_tree first."
NOT_A_STATE_HOOK = "Hook does not have a dispatch function (not useState/useReducer)."
NOT_STATEFUL = "Component is not a class or function component."


def hook_not_found(index: int) -> str:
    return f"Hook at index {index} not found."


class FiberInspectorState(FiberInspectorTree):
    """Inspect and mutate nodes referenced by registry handles."""

    def inspect(self, handle: int) -> ComponentInspection | None:
        """Describe the node behind ``handle``.

        Returns None when the handle is stale or unknown; callers should
        re-run get_tree or search first.
        """
        fiber = self.registry.lookup(handle)
        if fiber is None:
            return None

        try:
            return self._describe(handle, fiber)
        except Exception:  # noqa: BLE001
            _EngineLogger("INSPECT").exception(f"inspect {handle}: node could not be described")
            return None

    def _describe(self, handle: int, fiber: Any) -> ComponentInspection:
        tag = read_field(fiber, "tag")

        props = read_field(fiber, "memoized_props")
        if props is None:
            props = read_field(fiber, "pending_props")
        if props is None:
            props = {}

        if tag == FiberTag.CLASS_COMPONENT:
            state = decode_class_state(fiber)
        else:
            state = safe_serialize(read_field(fiber, "memoized_state"))

        owner = read_field(fiber, "debug_owner")
        parent = read_field(fiber, "parent")

        return ComponentInspection(
            handle=handle,
            display_name=resolve_display_name(fiber),
            kind=kind_label(tag),
            identity_key=identity_key(fiber),
            props=safe_serialize(props),
            state=state,
            auxiliary_facts=decode_hooks(fiber),
            context=safe_serialize({"owner": resolve_display_name(owner)} if owner is not None else {}),
            parent_display_name=resolve_display_name(parent) if parent is not None else None,
            child_display_names=[resolve_display_name(child) for child in iter_children(fiber)],
            source_location=self._source_location(fiber),
            rendered_host_tag=self._rendered_host_tag(fiber),
        )

    @staticmethod
    def _source_location(fiber: Any) -> SourceLocation | None:
        source = read_field(fiber, "debug_source")
        if source is None:
            return None
        return SourceLocation(
            file_name=read_field(source, "file_name"),
            line_number=read_field(source, "line_number"),
            column_number=read_field(source, "column_number") or 0,
        )

    @staticmethod
    def _rendered_host_tag(fiber: Any) -> str | None:
        """Tag of the first host element reached by following first children."""
        current = fiber
        seen: set[int] = set()
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            instance = read_field(current, "state_node")
            if read_field(current, "tag") == FiberTag.HOST_ELEMENT and instance is not None:
                tag_name = read_field(instance, "tag_name")
                return tag_name.lower() if isinstance(tag_name, str) else None
            current = read_field(current, "child")
        return None

    def mutate(self, handle: int, aux_index: int = 0, value: Any = None) -> MutationResult:
        """Push ``value`` into a node's own update machinery.

        Class components go through their instance's ``set_state``; function
        components through the dispatch of the hook at ``aux_index``. This
        changes the target's live state and triggers its re-render.

        Returns:
            MutationResult; never raises, target-side errors are reported
        """
        logger = _EngineLogger("MUTATE")

        fiber = self.registry.lookup(handle)
        if fiber is None:
            return MutationResult(success=False, error=FIBER_NOT_FOUND)

        try:
            tag = read_field(fiber, "tag")
            instance = read_field(fiber, "state_node")
            set_state = read_field(instance, "set_state")

            if tag == FiberTag.CLASS_COMPONENT and instance is not None and callable(set_state):
                return self._dispatch(set_state, value, logger)

            if tag in FUNCTION_FAMILY_TAGS:
                record = self._hook_record_at(fiber, aux_index)
                if record is None:
                    return MutationResult(success=False, error=hook_not_found(aux_index))

                dispatch = read_field(read_field(record, "queue"), "dispatch")
                if not callable(dispatch):
                    return MutationResult(success=False, error=NOT_A_STATE_HOOK)
                return self._dispatch(dispatch, value, logger)
        except Exception as e:  # noqa: BLE001
            logger.exception(f"mutate {handle}: node could not be read")
            return MutationResult(success=False, error=str(e) or type(e).__name__)

        return MutationResult(success=False, error=NOT_STATEFUL)

    @staticmethod
    def _hook_record_at(fiber: Any, index: int) -> Any | None:
        if index < 0:
            return None
        for position, record in enumerate(iter_hook_records(fiber)):
            if position == index:
                return record
        return None

    @staticmethod
    def _dispatch(setter: Callable[[Any], Any], value: Any, logger: _EngineLogger) -> MutationResult:
        try:
            setter(value)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Target raised during state update: {type(e).__name__}: {e}")
            return MutationResult(success=False, error=str(e) or type(e).__name__)
        return MutationResult(success=True)
