"""Command implementations behind the MCP tools.

Each command takes the process-wide session and inspector, runs one
engine operation and shapes the result into the plain dict returned to
the MCP caller. Plumbing errors (no target attached, bad hook path) come
back as ``{"success": False, "error": ...}``.
"""

import logging
from typing import Any

from .inspector import FiberInspector
from .models import FiberNotFoundError, InspectorError, SummaryNode
from .session import TargetSession

logger = logging.getLogger(__name__)

NO_COMPONENTS = "No components found. Make sure the target runtime is running with its debug hook installed."


def _failure(error: Exception | str) -> dict[str, Any]:
    return {"success": False, "error": str(error)}


def connect_to_target(session: TargetSession, inspector: FiberInspector, hook_path: str | None) -> dict:
    """Attach to ``hook_path`` and report what the hook exposes."""
    if not hook_path:
        if not session.is_connected():
            return _failure("No hook_path given and no target attached.")
    else:
        try:
            session.connect(hook_path)
        except InspectorError as e:
            logger.warning(f"connect_to_target failed: {e}")
            return _failure(
                f"Failed to connect: {e}\n\n"
                "The hook path must name an importable module and the attribute holding "
                "the runtime's debug hook, e.g. 'myapp.runtime:DEVTOOLS_HOOK'."
            )

    info = inspector.detect()
    return {"success": True, "connected": True, "target": session.label, **info.to_wire()}


def get_page_info(session: TargetSession, inspector: FiberInspector) -> dict:
    try:
        session.require_connected()
    except InspectorError as e:
        return _failure(e)
    return {"success": True, **inspector.detect().to_wire()}


def get_component_tree(
    session: TargetSession,
    inspector: FiberInspector,
    depth: int | None = None,
    include_host_elements: bool = False,
) -> dict:
    try:
        session.require_connected()
    except InspectorError as e:
        return _failure(e)

    tree = inspector.get_tree(depth, include_host_elements)
    if not tree:
        return {"success": True, "tree": [], "message": NO_COMPONENTS}
    return {"success": True, "tree": [node.to_wire() for node in tree]}


def inspect_component(
    session: TargetSession,
    inspector: FiberInspector,
    handle: int | None = None,
    component_name: str | None = None,
    instance_index: int = 0,
) -> dict:
    """Inspect by handle, or by name (searching first and picking the Nth match)."""
    try:
        session.require_connected()
    except InspectorError as e:
        return _failure(e)

    target = handle
    if target is None and component_name:
        matches = inspector.search(component_name, inspector.config.search_instance_limit)
        if not matches:
            return {"success": False, "error": f'No component matching "{component_name}" found.'}
        if instance_index < 0 or instance_index >= len(matches):
            return {
                "success": False,
                "error": (
                    f'Only {len(matches)} instances found for "{component_name}". '
                    f"Use instance_index 0-{len(matches) - 1}."
                ),
            }
        target = matches[instance_index].handle

    if target is None:
        return _failure("Provide either handle or component_name.")

    try:
        info = inspector.inspect(target)
        if info is None:
            raise FiberNotFoundError(target)
    except InspectorError as e:
        return _failure(e)
    return {"success": True, "component": info.to_wire()}


def search_components(
    session: TargetSession,
    inspector: FiberInspector,
    query: str,
    max_results: int | None = None,
) -> dict:
    try:
        session.require_connected()
    except InspectorError as e:
        return _failure(e)

    results = inspector.search(query, max_results)
    if not results:
        return {"success": True, "results": [], "message": f'No components matching "{query}" found.'}
    return {"success": True, "results": [result.to_wire() for result in results]}


def modify_state(
    session: TargetSession,
    inspector: FiberInspector,
    handle: int,
    hook_index: int = 0,
    value: Any = None,
) -> dict:
    """Mutate a node's state, then re-inspect it so the caller sees the update."""
    try:
        session.require_connected()
    except InspectorError as e:
        return _failure(e)

    result = inspector.mutate(handle, hook_index, value)
    if not result.success:
        return _failure(f"Failed to modify state: {result.error}")

    updated = inspector.inspect(handle)
    return {"success": True, "updatedComponent": updated.to_wire() if updated else None}


def start_profiler(session: TargetSession, inspector: FiberInspector) -> dict:
    try:
        session.require_connected()
    except InspectorError as e:
        return _failure(e)

    inspector.start_profiler()
    return {
        "success": True,
        "message": "Profiler started. Interact with the app, then call stop_profiler to see results.",
    }


def stop_profiler(session: TargetSession, inspector: FiberInspector) -> dict:
    entries = inspector.stop_profiler()
    if not entries:
        return {
            "success": True,
            "results": [],
            "message": "No renders captured. Make sure you started the profiler and interacted with the app.",
        }
    return {"success": True, "results": [entry.to_wire() for entry in entries]}


def format_outline(tree: list[SummaryNode]) -> str:
    """Render a forest as an indented text outline."""
    lines: list[str] = []

    def format_node(node: SummaryNode, indent: int) -> None:
        key = f" key={node.identity_key}" if node.identity_key is not None else ""
        lines.append(f"{'  ' * indent}- {node.display_name} [{node.kind}] #{node.handle}{key}")
        for child in node.children:
            format_node(child, indent + 1)

    for node in tree:
        format_node(node, 0)
    return "\n".join(lines)
