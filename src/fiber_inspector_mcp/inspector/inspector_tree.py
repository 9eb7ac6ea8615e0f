"""Fiber inspector - component tree walk and name search."""

from typing import Any

from ..models import SearchResult, SummaryNode
from .fiber_tags import (
    ALWAYS_VISIBLE_TAGS,
    FiberTag,
    identity_key,
    kind_label,
    read_field,
    resolve_display_name,
)
from .inspector_core import FiberInspectorCore, _EngineLogger


def iter_children(fiber: Any):
    """Yield a node's children left to right."""
    child = read_field(fiber, "child")
    while child is not None:
        yield child
        child = read_field(child, "sibling")


class FiberInspectorTree(FiberInspectorCore):
    """Tree walker and search engine. Both rebuild the node registry."""

    def get_tree(self, max_depth: int | None = None, include_host_elements: bool = False) -> list[SummaryNode]:
        """Walk every root and return the caller-visible component forest.

        Only components (and host elements when ``include_host_elements``)
        are emitted; roots, text, fragments, modes and the like are
        transparent: their children are spliced in at the same depth.
        Every emitted node is registered in pre-order, its registry slot
        being its handle.

        Args:
            max_depth: Deepest depth to emit (default from config)
            include_host_elements: Also emit host elements (div, span, ...)

        Returns:
            Forest of SummaryNode, [] when the target has no hook or renderers
        """
        logger = _EngineLogger("TREE")
        if max_depth is None:
            max_depth = self.config.default_max_depth

        self.registry.reset()
        hook = self._get_hook()
        if hook is None:
            logger.debug("get_tree: no debug hook on target")
            return []

        forest: list[SummaryNode] = []
        try:
            for root_fiber in self._iter_root_fibers(hook):
                forest.extend(self._walk(root_fiber, max_depth, include_host_elements))
        except Exception:  # noqa: BLE001
            logger.exception("get_tree: walk aborted")
            return []

        logger.debug(
            f"get_tree: {len(forest)} top-level nodes, {len(self.registry)} registered "
            f"(registry generation {self.registry.generation})"
        )
        return forest

    def _walk(self, root_fiber: Any, max_depth: int, include_host_elements: bool) -> list[SummaryNode]:
        """Pre-order walk with an explicit stack; deep trees never hit the recursion limit.

        Each stack entry carries the list its node's summary is appended to:
        the enclosing emitted node's children (or the returned forest).
        """
        forest: list[SummaryNode] = []
        stack: list[tuple[Any, int, list[SummaryNode]]] = [(root_fiber, 0, forest)]
        while stack:
            fiber, depth, siblings = stack.pop()
            if fiber is None or depth > max_depth:
                continue

            if not self._is_included(fiber, include_host_elements):
                # Transparent node: children land at the current depth
                self._push_children(stack, fiber, depth, siblings)
                continue

            node = SummaryNode(
                handle=self.registry.register(fiber),
                display_name=resolve_display_name(fiber),
                kind=kind_label(read_field(fiber, "tag")),
                identity_key=identity_key(fiber),
                depth=depth,
            )
            siblings.append(node)
            self._push_children(stack, fiber, depth + 1, node.children)
        return forest

    @staticmethod
    def _push_children(stack: list, fiber: Any, depth: int, siblings: list[SummaryNode]) -> None:
        # Reversed so children pop left to right
        stack.extend((child, depth, siblings) for child in reversed(list(iter_children(fiber))))

    @staticmethod
    def _is_included(fiber: Any, include_host_elements: bool) -> bool:
        tag = read_field(fiber, "tag")
        if tag in ALWAYS_VISIBLE_TAGS:
            return True
        return include_host_elements and tag == FiberTag.HOST_ELEMENT

    def search(self, query: str, max_results: int | None = None) -> list[SearchResult]:
        """Find nodes whose display name contains ``query`` (case-insensitive).

        Every visited node is registered, whatever its kind. The walk stops
        as soon as ``max_results`` matches are collected, even mid-subtree.

        Args:
            query: Substring to look for
            max_results: Result cap (default from config)

        Returns:
            Matches in depth-first, left-to-right order
        """
        logger = _EngineLogger("SEARCH")
        if max_results is None:
            max_results = self.config.default_max_results

        self.registry.reset()
        hook = self._get_hook()
        if hook is None or max_results <= 0:
            return []

        needle = (query or "").lower()
        results: list[SearchResult] = []

        def visit(root_fiber: Any) -> None:
            stack: list[tuple[Any, int, str | None]] = [(root_fiber, 0, None)]
            while stack and len(results) < max_results:
                fiber, depth, parent_name = stack.pop()
                if fiber is None:
                    continue

                name = resolve_display_name(fiber)
                handle = self.registry.register(fiber)

                if needle in name.lower():
                    results.append(
                        SearchResult(
                            handle=handle,
                            display_name=name,
                            kind=kind_label(read_field(fiber, "tag")),
                            depth=depth,
                            parent_display_name=parent_name,
                            identity_key=identity_key(fiber),
                        )
                    )

                # Reversed so children pop left to right
                stack.extend((child, depth + 1, name) for child in reversed(list(iter_children(fiber))))

        try:
            for root_fiber in self._iter_root_fibers(hook):
                if len(results) >= max_results:
                    break
                visit(root_fiber)
        except Exception:  # noqa: BLE001
            logger.exception(f"search '{query}': walk aborted")
            return results

        logger.debug(f"search '{query}': {len(results)} matches, {len(self.registry)} nodes visited")
        return results
