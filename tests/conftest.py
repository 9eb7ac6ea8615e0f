"""Fake component runtime used across the test suite.

Nodes, hook records and the debug hook are plain Python objects shaped
like the runtime's own structures, so the engine walks them exactly as
it would walk a live tree.
"""

from types import SimpleNamespace

import pytest

from fiber_inspector_mcp.inspector import FiberInspector
from fiber_inspector_mcp.inspector.fiber_tags import FiberTag
from fiber_inspector_mcp.models import EngineConfiguration


class Fiber:
    def __init__(
        self,
        tag,
        type=None,
        key=None,
        memoized_props=None,
        memoized_state=None,
        state_node=None,
        alternate=None,
        actual_duration=None,
        debug_source=None,
        debug_owner=None,
    ):
        self.tag = tag
        self.type = type
        self.key = key
        self.memoized_props = memoized_props
        self.pending_props = None
        self.memoized_state = memoized_state
        self.state_node = state_node
        self.alternate = alternate
        self.actual_duration = actual_duration
        self.debug_source = debug_source
        self.debug_owner = debug_owner
        self.child = None
        self.sibling = None
        self.parent = None


def link(parent, *children):
    """Hang ``children`` under ``parent`` as a left-to-right sibling list."""
    parent.child = children[0] if children else None
    for left, right in zip(children, children[1:]):
        left.sibling = right
    for child in children:
        child.parent = parent
    return parent


class HookRecord:
    def __init__(self, memoized_state=None, queue=None):
        self.memoized_state = memoized_state
        self.queue = queue
        self.next = None


def chain(*records):
    for left, right in zip(records, records[1:]):
        left.next = right
    return records[0] if records else None


def basic_state_reducer(state, action):
    return action(state) if callable(action) else action


def todo_reducer(state, action):
    return state


class Queue:
    """Update queue whose dispatch writes straight into its record."""

    def __init__(self, record, reducer=basic_state_reducer):
        self.record = record
        self.last_rendered_reducer = reducer
        self.dispatched = []

    def dispatch(self, value):
        self.dispatched.append(value)
        self.record.memoized_state = value


def state_hook(value, reducer=basic_state_reducer):
    record = HookRecord(memoized_state=value)
    record.queue = Queue(record, reducer)
    return record


class Root:
    def __init__(self, current):
        self.current = current


class DevtoolsHook:
    """Debug hook published by the fake runtime."""

    def __init__(self, roots_by_renderer=None, url="http://localhost:3000/", title="Todo App"):
        self.renderers = {rid: SimpleNamespace(version="18.2.0") for rid in (roots_by_renderer or {})}
        self._roots = dict(roots_by_renderer or {})
        self.url = url
        self.title = title
        self.commits = []

    def get_fiber_roots(self, renderer_id):
        return self._roots.get(renderer_id, [])

    def on_commit_fiber_root(self, renderer_id, root, priority=None):
        self.commits.append((renderer_id, root, priority))
        return "committed"

    def commit(self, root, renderer_id=1, priority=None):
        """Drive a commit the way the runtime does: through the hook attribute."""
        return self.on_commit_fiber_root(renderer_id, root, priority)


# Components
def App(props):
    return None


def Header(props):
    return None


def TodoList(props):
    return None


def TodoItem(props):
    return None


def build_todo_app():
    """RootContainer -> App -> [Header, TodoList -> div -> [TodoItem, TodoItem]].

    App and TodoList have one state hook each; a Mode wrapper and a host
    div sit in the tree as transparent nodes.
    """
    app_state = state_hook("light")
    todo_state = state_hook(["buy milk", "write tests"])

    host_root = Fiber(FiberTag.ROOT_CONTAINER)
    mode = Fiber(FiberTag.MODE)
    app = Fiber(FiberTag.FUNCTION_COMPONENT, App, memoized_props={"title": "Todos"}, memoized_state=app_state)
    header = Fiber(FiberTag.FUNCTION_COMPONENT, Header, memoized_props={"text": "My todos"})
    todo_list = Fiber(FiberTag.FUNCTION_COMPONENT, TodoList, memoized_state=todo_state)
    div = Fiber(FiberTag.HOST_ELEMENT, "div", state_node=SimpleNamespace(tag_name="DIV", class_name="list"))
    item_a = Fiber(FiberTag.FUNCTION_COMPONENT, TodoItem, key="a", memoized_props={"label": "buy milk"})
    item_b = Fiber(FiberTag.FUNCTION_COMPONENT, TodoItem, key="b", memoized_props={"label": "write tests"})
    text = Fiber(FiberTag.HOST_TEXT)

    link(host_root, mode)
    link(mode, app)
    link(app, header, todo_list)
    link(todo_list, div)
    link(div, item_a, item_b, text)

    root = Root(host_root)
    hook = DevtoolsHook({1: [root]})
    return SimpleNamespace(
        hook=hook,
        root=root,
        host_root=host_root,
        app=app,
        header=header,
        todo_list=todo_list,
        div=div,
        items=[item_a, item_b],
        app_state=app_state,
        todo_state=todo_state,
    )


@pytest.fixture
def todo_app():
    return build_todo_app()


@pytest.fixture
def inspector(todo_app):
    return FiberInspector(lambda: todo_app.hook, EngineConfiguration())


@pytest.fixture
def empty_inspector():
    return FiberInspector(lambda: None)
