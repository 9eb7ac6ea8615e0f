from types import SimpleNamespace

from conftest import Fiber

from fiber_inspector_mcp.inspector.fiber_tags import (
    FIBER_TAGS,
    FiberTag,
    identity_key,
    kind_label,
    read_field,
    resolve_display_name,
)


def test_maps_known_tags_to_kind_labels() -> None:
    assert FIBER_TAGS[0] == "FunctionComponent"
    assert FIBER_TAGS[1] == "ClassComponent"
    assert FIBER_TAGS[3] == "RootContainer"
    assert FIBER_TAGS[5] == "HostElement"
    assert FIBER_TAGS[6] == "HostText"
    assert FIBER_TAGS[7] == "Fragment"
    assert FIBER_TAGS[10] == "ForwardRef"
    assert FIBER_TAGS[11] == "SimpleMemo"
    assert FIBER_TAGS[12] == "Memo"
    assert FIBER_TAGS[13] == "Suspense"
    assert FIBER_TAGS[16] == "ContextProvider"
    assert len(FIBER_TAGS) == 16


def test_unrecognized_tag_falls_back_to_unknown() -> None:
    assert kind_label(99) == "Unknown(99)"
    assert kind_label(None) == "Unknown(None)"


def test_host_element_uses_tag_string() -> None:
    assert resolve_display_name(Fiber(FiberTag.HOST_ELEMENT, "span")) == "span"


def test_explicit_display_name_wins_over_function_name() -> None:
    def Button(props):
        return None

    Button.display_name = "PrimaryButton"
    assert resolve_display_name(Fiber(FiberTag.FUNCTION_COMPONENT, Button)) == "PrimaryButton"


def test_class_components_use_class_name() -> None:
    class Counter:
        def render(self):
            return None

    assert resolve_display_name(Fiber(FiberTag.CLASS_COMPONENT, Counter)) == "Counter"


def test_wrapped_render_name_is_used_for_forward_refs() -> None:
    def FancyInput(props, ref):
        return None

    wrapper = SimpleNamespace(render=FancyInput)
    assert resolve_display_name(Fiber(FiberTag.FORWARD_REF, wrapper)) == "FancyInput"

    wrapper = {"render": {"display_name": "Labelled"}}
    assert resolve_display_name(Fiber(FiberTag.FORWARD_REF, wrapper)) == "Labelled"


def test_lambdas_and_unnamed_types_are_anonymous() -> None:
    assert resolve_display_name(Fiber(FiberTag.FUNCTION_COMPONENT, lambda props: None)) == "Anonymous"
    assert resolve_display_name(Fiber(FiberTag.MEMO, SimpleNamespace())) == "Anonymous"


def test_typeless_nodes_are_named_by_kind() -> None:
    assert resolve_display_name(Fiber(FiberTag.ROOT_CONTAINER)) == "RootContainer"
    assert resolve_display_name(Fiber(42)) == "Unknown(42)"


def test_read_field_accepts_mappings_and_objects() -> None:
    assert read_field({"tag": 5}, "tag") == 5
    assert read_field(SimpleNamespace(tag=5), "tag") == 5
    assert read_field(None, "tag", "fallback") == "fallback"
    assert read_field({}, "tag") is None


def test_identity_key_is_stringified() -> None:
    fiber = Fiber(FiberTag.FUNCTION_COMPONENT, key=7)
    assert identity_key(fiber) == "7"
    assert identity_key(Fiber(FiberTag.FUNCTION_COMPONENT)) is None
