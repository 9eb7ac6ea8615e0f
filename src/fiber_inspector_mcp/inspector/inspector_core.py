"""Fiber inspector - core: hook discovery, registry ownership and logging."""

import os
import sys
from datetime import datetime
from typing import Any, Callable, Iterator

from ..models import EngineConfiguration
from .fiber_tags import read_field
from .registry import FiberRegistry

HookSource = Callable[[], Any]


def log_event(message: str, component: str = "ENGINE") -> None:
    """Log an event to stderr with timestamp and consistent formatting."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] [{component}] {message}", file=sys.stderr, flush=True)


def _debug_enabled() -> bool:
    return os.environ.get("FIBER_INSPECTOR_DEBUG", "").lower() in ("1", "true", "yes")


class _EngineLogger:
    """Lightweight logger that delegates to log_event.

    FastMCP swallows the stdlib logging module inside tool calls, so the
    engine prints to stderr directly. Methods accept *args/**kwargs for
    compatibility with logging.Logger but only the message is used.
    """

    def __init__(self, component: str = "ENGINE") -> None:
        self._component = component

    def _msg(self, msg: object) -> str:
        try:
            return str(msg)
        except Exception:
            return repr(msg)

    def info(self, msg: object, *args: object, **kwargs: object) -> None:
        log_event(self._msg(msg), self._component)

    def warning(self, msg: object, *args: object, **kwargs: object) -> None:
        log_event(f"WARNING: {self._msg(msg)}", self._component)

    def error(self, msg: object, *args: object, **kwargs: object) -> None:
        log_event(f"ERROR: {self._msg(msg)}", self._component)

    def debug(self, msg: object, *args: object, **kwargs: object) -> None:
        if _debug_enabled():
            log_event(f"DEBUG: {self._msg(msg)}", self._component)

    def exception(self, msg: object, *args: object, **kwargs: object) -> None:
        exc = sys.exc_info()[1]
        suffix = f" ({type(exc).__name__}: {exc})" if exc is not None else ""
        log_event(f"EXCEPTION: {self._msg(msg)}{suffix}", self._component)


class FiberInspectorCore:
    """Core fiber inspector - owns the hook source and the node registry.

    The hook is re-read from ``hook_source`` on every call: the engine only
    ever borrows live references for the duration of one operation.
    """

    def __init__(self, hook_source: HookSource, config: EngineConfiguration | None = None):
        """Initialize the inspector.

        Args:
            hook_source: Zero-argument callable returning the target's debug
                hook, or None when the target is not instrumented.
            config: Engine limits and detection fallbacks.
        """
        self.config = config or EngineConfiguration()
        self._hook_source = hook_source
        self.registry = FiberRegistry()

    def _get_hook(self) -> Any | None:
        """Current debug hook, or None (a missing hook is not an error)."""
        try:
            return self._hook_source()
        except Exception:  # noqa: BLE001
            _EngineLogger().exception("Hook source failed; treating target as not instrumented")
            return None

    @staticmethod
    def _iter_renderer_roots(hook: Any) -> Iterator[tuple[Any, Any]]:
        """Yield (renderer_id, root_container) across every renderer of the hook.

        Roots from all renderers are merged into one stream; the renderer id
        is kept here but not surfaced to callers.
        """
        renderers = read_field(hook, "renderers")
        get_fiber_roots = read_field(hook, "get_fiber_roots")
        if not renderers or not callable(get_fiber_roots):
            return
        for renderer_id in list(renderers):
            roots = get_fiber_roots(renderer_id)
            if not roots:
                continue
            for root in list(roots):
                yield renderer_id, root

    def _iter_root_fibers(self, hook: Any) -> Iterator[Any]:
        """Yield the current top-of-tree node of every root container."""
        for _renderer_id, root in self._iter_renderer_roots(hook):
            current = read_field(root, "current")
            if current is not None:
                yield current
