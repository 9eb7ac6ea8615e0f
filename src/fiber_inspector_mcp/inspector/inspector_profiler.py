"""Fiber inspector - commit profiler.

``start_profiler`` wraps the hook's commit callback; the wrapper tallies
re-rendered components of every committed tree and then forwards the call
to the callback it replaced. ``stop_profiler`` puts that callback back and
returns the tallies.
"""

import functools
from dataclasses import dataclass, field
from typing import Any, Callable

from ..models import ProfilerEntry
from .fiber_tags import (
    PROFILED_TAGS,
    assign_field,
    delete_field,
    has_field,
    read_field,
    resolve_display_name,
)
from .inspector_core import _EngineLogger
from .inspector_state import FiberInspectorState

COMMIT_CALLBACK = "on_commit_fiber_root"


@dataclass
class RenderTally:
    render_count: int = 0
    total_duration: float = 0.0


@dataclass
class ProfilerSession:
    """State of one start/stop pair."""

    hook: Any
    original: Any = None
    had_callback: bool = False
    installed: bool = False
    commits: int = 0
    tallies: dict[str, RenderTally] = field(default_factory=dict)


def tally_commit(session: ProfilerSession, fiber: Any) -> None:
    """Count re-rendered function/class components of one committed tree.

    A node counts only when it has a previous-render counterpart
    (``alternate``); first mounts are skipped. Durations come from
    ``actual_duration`` and stay 0 on builds that do not record it.
    """
    session.commits += 1
    stack = [fiber] if fiber is not None else []
    while stack:
        node = stack.pop()
        if read_field(node, "tag") in PROFILED_TAGS and read_field(node, "alternate") is not None:
            tally = session.tallies.setdefault(resolve_display_name(node), RenderTally())
            tally.render_count += 1
            duration = read_field(node, "actual_duration")
            if isinstance(duration, (int, float)) and not isinstance(duration, bool):
                tally.total_duration += duration

        # Reverse so siblings pop left to right
        children = []
        child = read_field(node, "child")
        while child is not None:
            children.append(child)
            child = read_field(child, "sibling")
        stack.extend(reversed(children))


def build_commit_shim(session: ProfilerSession) -> Callable[..., Any]:
    """Wrap the session's original commit callback with render tallying."""
    original = session.original
    logger = _EngineLogger("PROFILER")

    def on_commit_fiber_root(renderer_id: Any, root: Any, *rest: Any) -> Any:
        try:
            tally_commit(session, read_field(root, "current"))
        except Exception:  # noqa: BLE001
            # Counting must never break the target's commit
            logger.exception("commit tally failed")
        if callable(original):
            return original(renderer_id, root, *rest)
        return None

    if callable(original):
        on_commit_fiber_root = functools.wraps(original)(on_commit_fiber_root)
    return on_commit_fiber_root


class FiberInspectorProfiler(FiberInspectorState):
    """Adds the commit-shim profiler (one active session per inspector)."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._profiler: ProfilerSession | None = None

    @property
    def profiling(self) -> bool:
        return self._profiler is not None

    def start_profiler(self) -> None:
        """Install the commit shim on the current hook.

        Calling it again while a session is active restarts the counts but
        keeps the originally captured callback, so the wrapper is never
        stacked on itself.
        """
        logger = _EngineLogger("PROFILER")

        if self._profiler is not None:
            self._profiler.tallies.clear()
            self._profiler.commits = 0
            logger.info("Profiler already running; counts reset")
            return

        hook = self._get_hook()
        session = ProfilerSession(hook=hook)
        self._profiler = session
        if hook is None:
            logger.warning("No debug hook on target; profiler will record nothing")
            return

        try:
            session.had_callback = has_field(hook, COMMIT_CALLBACK)
            session.original = read_field(hook, COMMIT_CALLBACK)
            assign_field(hook, COMMIT_CALLBACK, build_commit_shim(session))
        except Exception:  # noqa: BLE001
            # Hook refused the shim; nothing installed, nothing to restore
            logger.exception("Could not install the commit shim; profiler will record nothing")
            return
        session.installed = True
        logger.info("Profiler started")

    def stop_profiler(self) -> list[ProfilerEntry]:
        """Restore the original commit callback and return per-component stats.

        Results are sorted by render count, highest first. Without a prior
        start_profiler the result is simply empty.
        """
        session = self._profiler
        self._profiler = None
        if session is None:
            return []

        if session.installed:
            try:
                if session.had_callback:
                    assign_field(session.hook, COMMIT_CALLBACK, session.original)
                else:
                    delete_field(session.hook, COMMIT_CALLBACK)
            except Exception:  # noqa: BLE001
                _EngineLogger("PROFILER").exception("Could not restore the commit callback")

        entries = [
            ProfilerEntry(
                name=name,
                render_count=tally.render_count,
                total_duration=round(tally.total_duration, 2),
                avg_duration=round(tally.total_duration / tally.render_count, 2) if tally.render_count else 0.0,
            )
            for name, tally in session.tallies.items()
        ]
        entries.sort(key=lambda entry: entry.render_count, reverse=True)

        _EngineLogger("PROFILER").info(
            f"Profiler stopped after {session.commits} commits, {len(entries)} components"
        )
        return entries
