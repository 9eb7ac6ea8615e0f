"""Fiber inspector MCP server implementation using FastMCP."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Callable

from fastmcp import FastMCP

from . import commands
from .config import ServerConfig, setup_logging
from .inspector import FiberInspector
from .models import InspectorError
from .session import TargetSession

logger = logging.getLogger(__name__)

# Global session / inspector instances
_config: ServerConfig | None = None
_session: TargetSession | None = None
_inspector: FiberInspector | None = None

# Hook handed over by an embedding application before the server starts
_attached_hook: Any = None


def get_session() -> TargetSession:
    """Get the global target session."""
    if _session is None:
        raise RuntimeError("Target session not initialized. Server not started properly.")
    return _session


def get_inspector() -> FiberInspector:
    """Get the global inspector instance."""
    if _inspector is None:
        raise RuntimeError("Fiber inspector not initialized. Server not started properly.")
    return _inspector


def attach_hook(hook: Any) -> None:
    """Register the runtime's debug hook from inside the inspected application.

    Call before ``run()``; the lifespan attaches it to the session on startup.
    """
    global _attached_hook
    _attached_hook = hook
    if _session is not None:
        _session.attach_hook(hook)


def configure(config: ServerConfig) -> None:
    """Use ``config`` instead of reading settings from the environment."""
    global _config
    _config = config


@asynccontextmanager
async def lifespan(_app: FastMCP):  # type: ignore[no-untyped-def]
    """Manage server lifecycle."""
    global _config, _session, _inspector

    logger.info("Starting fiber inspector MCP server")

    if _config is None:
        _config = ServerConfig()  # type: ignore[call-arg]

    _session = TargetSession()
    _inspector = FiberInspector(_session.get_hook, _config.get_engine_config())

    if _attached_hook is not None:
        _session.attach_hook(_attached_hook)
    elif _config.hook_path:
        try:
            _session.connect(_config.hook_path)
        except InspectorError as e:
            logger.warning(f"Auto-attach failed, call connect_to_target: {e}")

    yield

    logger.info("Shutting down fiber inspector MCP server")

    # Never leave the commit shim installed on the target
    if _inspector is not None and _inspector.profiling:
        _inspector.stop_profiler()
    if _session is not None:
        _session.disconnect()
    _inspector = None
    _session = None


def _run_command(command: Callable[..., dict], *args: Any) -> dict:
    """Run a tool command against the live session, reporting any failure as a dict."""
    try:
        return command(get_session(), get_inspector(), *args)
    except Exception as e:  # noqa: BLE001
        logger.error(f"{command.__name__} failed: {type(e).__name__}: {e}")
        return {"success": False, "error": f"{type(e).__name__}: {e}"}


# Initialize FastMCP server
mcp = FastMCP(
    "Fiber Inspector MCP Server",
    version="0.1.0",
    instructions=(
        "Inspect and mutate the live component tree of a running UI runtime through its debug hook. "
        "Handles returned by get_component_tree/search_components stay valid only until the next "
        "tree-producing call."
    ),
    lifespan=lifespan,
)


# Tool: Connect
@mcp.tool(
    name="connect_to_target",
    description="Attach to the runtime's debug hook ('module:attribute'). Must be called before other tools unless the server was started with a hook.",
)
async def connect_to_target(hook_path: str | None = None) -> dict:
    """Attach to a target runtime.

    Args:
        hook_path: Import path of the debug hook, e.g. 'myapp.runtime:DEVTOOLS_HOOK'
                   (omit to re-detect the currently attached target)

    Returns:
        Detection info: url, title, frameworkDetected, version, rootCount, hookAvailable
    """
    return _run_command(commands.connect_to_target, hook_path)


# Tool: Page Info
@mcp.tool(
    name="get_page_info",
    description="Get target information: URL, title, runtime version, root count and whether the debug hook is available.",
)
async def get_page_info() -> dict:
    return _run_command(commands.get_page_info)


# Tool: Component Tree
@mcp.tool(
    name="get_component_tree",
    description="Get the component tree hierarchy. Returns component names, kinds and handles for further inspection.",
)
async def get_component_tree(depth: int | None = None, include_host_elements: bool = False) -> dict:
    """Get the component tree.

    Args:
        depth: Maximum tree depth to traverse (default: 20)
        include_host_elements: Include host elements like div, span (default: False, components only)

    Returns:
        Dictionary with 'tree' (nested nodes with handle, displayName, kind, identityKey, depth, children)
    """
    return _run_command(commands.get_component_tree, depth, include_host_elements)


# Tool: Inspect
@mcp.tool(
    name="inspect_component",
    description="Inspect a component's props, state, hooks and context. Use a handle from get_component_tree, or a component_name.",
)
async def inspect_component(
    handle: int | None = None,
    component_name: str | None = None,
    instance_index: int = 0,
) -> dict:
    """Inspect one component.

    Args:
        handle: Handle from get_component_tree or search_components
        component_name: Name to search for (used if handle not provided)
        instance_index: If several components match the name, pick the Nth one (0-based)

    Returns:
        Dictionary with 'component' (props, state, auxiliaryFacts, parent/children names, source)
    """
    return _run_command(commands.inspect_component, handle, component_name, instance_index)


# Tool: Search
@mcp.tool(
    name="search_components",
    description="Search components by name (case-insensitive partial match). Returns matches with their handles.",
)
async def search_components(query: str, max_results: int | None = None) -> dict:
    """Search components by name.

    Args:
        query: Component name substring to search for
        max_results: Maximum number of results (default: 20)
    """
    return _run_command(commands.search_components, query, max_results)


# Tool: Modify State
@mcp.tool(
    name="modify_state",
    description="Modify a component's state to trigger a re-render. Works with state/reducer hooks and class component set_state.",
)
async def modify_state(handle: int, value: Any, hook_index: int = 0) -> dict:
    """Modify component state.

    Args:
        handle: Handle from get_component_tree or search_components
        value: New state value to set
        hook_index: Index of the hook to modify (function components, default 0).
                    Use inspect_component to see hook indices.

    Returns:
        Dictionary with success flag and the re-inspected component
    """
    return _run_command(commands.modify_state, handle, hook_index, value)


# Tool: Start Profiler
@mcp.tool(
    name="start_profiler",
    description="Start profiling component renders by wrapping the runtime's commit callback. Call stop_profiler to get results.",
)
async def start_profiler() -> dict:
    return _run_command(commands.start_profiler)


# Tool: Stop Profiler
@mcp.tool(
    name="stop_profiler",
    description="Stop profiling and return render statistics per component (render count, total and average duration).",
)
async def stop_profiler() -> dict:
    return _run_command(commands.stop_profiler)


# Resource: Component Outline
@mcp.resource(
    uri="inspector://tree",
    name="component_outline",
    description="The current component tree as an indented outline",
)
async def get_outline() -> str:
    """Get the component tree as a formatted string.

    Note: this is a tree-producing call and invalidates earlier handles.
    """
    session = get_session()
    if not session.is_connected():
        return "Not connected to a target."
    tree = get_inspector().get_tree()
    return commands.format_outline(tree) or commands.NO_COMPONENTS


def run(config: ServerConfig | None = None) -> None:
    """Run the server with the configured transport (blocks)."""
    cfg = config or _config or ServerConfig()  # type: ignore[call-arg]
    configure(cfg)

    # Logs go to stderr; stdout belongs to the stdio transport
    setup_logging(cfg.log_level)

    if cfg.transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport=cfg.transport, host=cfg.host, port=cfg.port)


if __name__ == "__main__":
    run()
