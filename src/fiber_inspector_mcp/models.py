"""Data models and exceptions for the fiber inspector MCP server."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

AuxiliaryKind = Literal["StateOrReducer", "Effect", "Ref", "MemoOrCallback", "Unknown"]


class InspectorModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class SummaryNode(InspectorModel):
    """One caller-visible node of a component tree walk."""

    handle: int = Field(..., description="Registry handle, valid until the next tree-producing call")
    display_name: str
    kind: str
    identity_key: str | None = None
    depth: int
    children: list["SummaryNode"] = Field(default_factory=list)


class AuxiliaryFact(InspectorModel):
    """A classified record of a function component's hook chain."""

    index: int
    classified_kind: AuxiliaryKind
    variant: Literal["state", "reducer"] | None = None
    value: Any = None


class SourceLocation(InspectorModel):
    file_name: str | None = None
    line_number: int | None = None
    column_number: int = 0


class ComponentInspection(InspectorModel):
    """Deep inspection of one registered node."""

    handle: int
    display_name: str
    kind: str
    identity_key: str | None = None
    props: Any = None
    state: Any = None
    auxiliary_facts: list[AuxiliaryFact] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)
    parent_display_name: str | None = None
    child_display_names: list[str] = Field(default_factory=list)
    source_location: SourceLocation | None = None
    rendered_host_tag: str | None = None


class SearchResult(InspectorModel):
    handle: int
    display_name: str
    kind: str
    depth: int
    parent_display_name: str | None = None
    identity_key: str | None = None


class MutationResult(InspectorModel):
    success: bool
    error: str | None = None


class ProfilerEntry(InspectorModel):
    name: str
    render_count: int
    total_duration: float
    avg_duration: float


class TargetInfo(InspectorModel):
    """Result of hook detection on the current target."""

    url: str | None = None
    title: str | None = None
    framework_detected: bool = False
    version: str | None = None
    root_count: int = 0
    hook_available: bool = False


class EngineConfiguration(BaseModel):
    """Limits and fallbacks handed to the inspection engine."""

    default_max_depth: int = Field(20, ge=0)
    default_max_results: int = Field(20, ge=1)
    search_instance_limit: int = Field(10, ge=1)
    target_url: str | None = None
    target_title: str | None = None


# Exceptions
class InspectorError(Exception):
    """Base exception for inspector plumbing errors."""

    pass


class TargetNotConnectedError(InspectorError):
    """Raised when a tool needs a target but none is attached."""

    def __init__(self, message: str = "Not connected to a target. Call connect_to_target first."):
        super().__init__(message)


class HookResolutionError(InspectorError):
    """Raised when a hook path cannot be imported or resolved."""

    def __init__(self, hook_path: str, message: str):
        self.hook_path = hook_path
        super().__init__(f"Cannot resolve hook '{hook_path}': {message}")


class FiberNotFoundError(InspectorError):
    """Raised when a handle does not refer to a registered node."""

    def __init__(self, handle: int, message: str | None = None):
        self.handle = handle
        super().__init__(
            message
            or f"Fiber at index {handle} not found. Run get_component_tree first to populate fiber references."
        )


SummaryNode.model_rebuild()
