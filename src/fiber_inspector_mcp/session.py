"""Target session: locating and holding the debug hook of the inspected runtime.

The inspected runtime publishes its hook as a module-level object. A
session either resolves it from a ``module:attribute`` path (re-read on
every access, so a hook installed or replaced later is picked up) or is
handed the hook object directly by an embedding application.
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Any

from .models import HookResolutionError, TargetNotConnectedError

logger = logging.getLogger(__name__)


def split_hook_path(hook_path: str) -> tuple[str, list[str]]:
    """Split ``package.module:attr.sub`` into module name and attribute chain."""
    module_name, sep, attr_path = (hook_path or "").strip().partition(":")
    if not module_name or not sep or not attr_path:
        raise HookResolutionError(hook_path, "expected 'module:attribute'")
    attrs = [part for part in attr_path.split(".") if part]
    if not attrs:
        raise HookResolutionError(hook_path, "empty attribute path")
    return module_name, attrs


class TargetSession:
    """Holds "the current target". One target per server process."""

    def __init__(self) -> None:
        self._module: ModuleType | None = None
        self._attrs: list[str] = []
        self._hook: Any = None
        self._label: str | None = None

    def connect(self, hook_path: str) -> Any:
        """Import the hook's module and attach to ``hook_path``.

        Returns:
            The hook as currently published (may be None if the runtime has
            not installed it yet; the session stays attached regardless).

        Raises:
            HookResolutionError: if the module cannot be imported
        """
        module_name, attrs = split_hook_path(hook_path)
        try:
            module = importlib.import_module(module_name)
        except ImportError as err:
            raise HookResolutionError(hook_path, f"{type(err).__name__}: {err}") from err

        self.disconnect()
        self._module = module
        self._attrs = attrs
        self._label = hook_path
        logger.info(f"Attached to hook path {hook_path}")
        return self.get_hook()

    def attach_hook(self, hook: Any, label: str = "<attached>") -> None:
        """Attach a hook object handed over by an embedding application."""
        self.disconnect()
        self._hook = hook
        self._label = label
        logger.info(f"Attached to hook object {label}")

    def get_hook(self) -> Any | None:
        """Live hook reference, or None when not attached or not published."""
        if self._module is not None:
            value: Any = self._module
            for attr in self._attrs:
                value = getattr(value, attr, None)
                if value is None:
                    return None
            return value
        return self._hook

    def require_connected(self) -> None:
        if not self.is_connected():
            raise TargetNotConnectedError()

    def is_connected(self) -> bool:
        return self._module is not None or self._hook is not None

    @property
    def label(self) -> str | None:
        return self._label

    def disconnect(self) -> None:
        self._module = None
        self._attrs = []
        self._hook = None
        self._label = None
