import json
from enum import Enum
from types import SimpleNamespace

from fiber_inspector_mcp.inspector.serializer import (
    MAX_DEPTH_MARKER,
    UNSERIALIZABLE,
    safe_serialize,
)


class Color(Enum):
    RED = "red"


def named_handler(event):
    return None


def test_none_and_primitives_pass_through() -> None:
    assert safe_serialize(None) is None
    assert safe_serialize("text") == "text"
    assert safe_serialize(3) == 3
    assert safe_serialize(2.5) == 2.5
    assert safe_serialize(True) is True


def test_callables_become_placeholders() -> None:
    assert safe_serialize(named_handler) == "[Function: named_handler]"
    assert safe_serialize(lambda: None) == "[Function: anonymous]"


def test_symbolic_values_use_their_text_form() -> None:
    assert safe_serialize(Color.RED) == "Color.RED"


def test_host_objects_are_compacted() -> None:
    button = SimpleNamespace(tag_name="BUTTON", class_name="btn primary", children=[1, 2])
    assert safe_serialize(button) == "[button.btn primary]"


def test_sequences_keep_first_ten_items() -> None:
    assert safe_serialize(list(range(25))) == list(range(10))
    assert safe_serialize((1, "a")) == [1, "a"]


def test_element_descriptors_name_their_type() -> None:
    def Card(props):
        return None

    assert safe_serialize({"typeof": "element", "type": Card, "props": {}}) == "[Element: Card]"
    assert safe_serialize({"typeof": "element", "type": "li"}) == "[Element: li]"


def test_keyed_structures_keep_first_twenty_keys() -> None:
    data = {f"k{i}": i for i in range(30)}
    result = safe_serialize(data)
    assert list(result) == [f"k{i}" for i in range(20)]


def test_objects_are_read_through_their_fields() -> None:
    assert safe_serialize(SimpleNamespace(a=1, b=[2])) == {"a": 1, "b": [2]}


def test_depth_is_bounded() -> None:
    nested = {"a": {"b": {"c": {"d": {"e": 1}}}}}
    assert safe_serialize(nested) == {"a": {"b": {"c": {"d": MAX_DEPTH_MARKER}}}}


def test_self_referential_structures_terminate() -> None:
    node = {"name": "loop"}
    node["self"] = node
    result = safe_serialize(node)
    assert result["self"]["self"]["self"]["self"] == MAX_DEPTH_MARKER
    json.dumps(result)


def test_failing_field_is_marked_without_aborting() -> None:
    class Guarded:
        def __init__(self):
            self.ok = "yes"
            self.secret = "hidden"

        def __getattribute__(self, name):
            if name == "secret":
                raise PermissionError("no access")
            return object.__getattribute__(self, name)

    result = safe_serialize({"holder": Guarded(), "other": 1})
    assert result["other"] == 1
    assert result["holder"] == {"ok": "yes", "secret": UNSERIALIZABLE}


def test_failing_mapping_value_is_marked() -> None:
    class AngryMapping(dict):
        def __getitem__(self, key):
            if key == "bad":
                raise KeyError(key)
            return super().__getitem__(key)

    result = safe_serialize(AngryMapping(good=1, bad=2))
    assert result == {"good": 1, "bad": UNSERIALIZABLE}


def test_fieldless_objects_use_their_text_form() -> None:
    class Version:
        __slots__ = ()

        def __str__(self):
            return "v1.2"

    assert safe_serialize(Version()) == "v1.2"


def test_result_is_json_representable() -> None:
    value = {
        "fn": named_handler,
        "color": Color.RED,
        "items": [SimpleNamespace(tag_name="LI", class_name=""), {1, 2}],
        "deep": [[[[["x"]]]]],
    }
    json.dumps(safe_serialize(value))
