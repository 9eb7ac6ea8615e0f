"""Fiber inspector facade."""

from typing import Any

from ..models import TargetInfo
from .fiber_tags import read_field
from .inspector_core import _EngineLogger
from .inspector_profiler import FiberInspectorProfiler


class FiberInspector(FiberInspectorProfiler):
    """Live component-graph inspector for one target.

    Operations: detect, get_tree, inspect, search, mutate,
    start_profiler, stop_profiler.
    """

    def detect(self) -> TargetInfo:
        """Report whether the target exposes a debug hook and what it holds."""
        hook = self._get_hook()
        info = TargetInfo(
            url=self._page_field(hook, "url", self.config.target_url),
            title=self._page_field(hook, "title", self.config.target_title),
            hook_available=hook is not None,
        )
        if hook is None:
            return info

        try:
            renderers = read_field(hook, "renderers")
            if renderers:
                info.framework_detected = True
                first = next(iter(renderers.values())) if hasattr(renderers, "values") else None
                info.version = self._renderer_version(first)
            info.root_count = sum(1 for _ in self._iter_renderer_roots(hook))
        except Exception:  # noqa: BLE001
            _EngineLogger("DETECT").exception("detect: hook could not be read")
        return info

    @staticmethod
    def _page_field(hook: Any, name: str, fallback: str | None) -> str | None:
        value = read_field(hook, name)
        return str(value) if value is not None else fallback

    @staticmethod
    def _renderer_version(renderer: Any) -> str | None:
        version = read_field(renderer, "version")
        if version:
            return str(version)
        if read_field(renderer, "current_dispatcher_ref") is not None:
            return "18+"
        return None
