"""Session-scoped registry of observed nodes.

Handles are plain list positions. The registry is rebuilt wholesale by
every tree walk or search, so a handle is only meaningful until the next
such call. Nodes are borrowed references owned by the target runtime.
"""

from __future__ import annotations

from typing import Any


class FiberRegistry:
    """Append-only handle -> live node table, reset per tree-producing call."""

    def __init__(self) -> None:
        self._fibers: list[Any] = []
        self._generation = 0

    def reset(self) -> None:
        self._fibers = []
        self._generation += 1

    def register(self, fiber: Any) -> int:
        self._fibers.append(fiber)
        return len(self._fibers) - 1

    def lookup(self, handle: Any) -> Any | None:
        """Return the node behind ``handle`` or None for stale/unknown handles."""
        if isinstance(handle, bool) or not isinstance(handle, int):
            return None
        if handle < 0 or handle >= len(self._fibers):
            return None
        return self._fibers[handle]

    @property
    def generation(self) -> int:
        """Number of rebuilds so far (0 before the first walk)."""
        return self._generation

    def __len__(self) -> int:
        return len(self._fibers)
