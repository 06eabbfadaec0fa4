"""
Core data models for architecture diagrams.

These models define the canonical schema the governance engine reads:
- Nodes with a structural type, framework tags and typed metadata
- Edges connecting nodes (using source/target naming convention)
- The diagram document wrapping both, plus editor-only sections

Field Naming Convention:
- Python attributes are snake_case
- JSON uses the editor's camelCase names (togafPhase, relationshipType, ...)
- Both spellings are accepted on input

Fields governance never reads (geometry, styling, descriptive metadata)
fall back to their defaults when a value has the wrong shape, so a canvas
quirk never blocks validation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator, model_validator


class NodeType(str, Enum):
    """Structural kinds of nodes on the canvas."""
    CAPABILITY = "capability"
    PROCESS = "process"
    APP = "app"
    TECH = "tech"
    DATA = "data"
    GROUP = "group"
    SWIMLANE = "swimlane"
    NOTE = "note"
    PHASE = "phase"
    PROCESS_AREA = "processArea"
    SID = "sid"  # Generic bucket for SID entity ids used as a type


class RelationshipType(str, Enum):
    """Relationship vocabulary carried in edge props."""
    REALIZES = "realizes"
    SERVES = "serves"
    USES = "uses"
    HOSTS = "hosts"
    READS = "reads"
    WRITES = "writes"
    DEPENDS_ON = "depends-on"
    COMPOSES = "composes"
    AGGREGATES = "aggregates"
    FLOWS_TO = "flows-to"


# Types that only annotate or organize the canvas
ANNOTATION_TYPES = frozenset({NodeType.NOTE.value, NodeType.GROUP.value})
SCAFFOLDING_TYPES = ANNOTATION_TYPES | {NodeType.SWIMLANE.value}


def generate_node_id() -> str:
    """Generate a unique node ID."""
    return f"n{uuid.uuid4().hex[:8]}"


def generate_edge_id() -> str:
    """Generate a unique edge ID."""
    return f"e{uuid.uuid4().hex[:8]}"


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


def _or_default(model: type[BaseModel], value: Any, handler: Any, info: ValidationInfo) -> Any:
    """Validate a field the core never reads, using its default when the value does not fit."""
    try:
        return handler(value)
    except ValidationError:
        return model.model_fields[info.field_name].get_default(call_default_factory=True)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Framework(_CamelModel):
    """
    Framework tags declared on a node.

    `etom` and `sid` accept either a single id or a list of ids.
    """
    togaf_phase: Optional[str] = Field(default=None, alias="togafPhase")
    etom: list[str] = Field(default_factory=list)
    sid: list[str] = Field(default_factory=list)

    @field_validator("togaf_phase", mode="before")
    @classmethod
    def strip_phase(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("etom", "sid", mode="before")
    @classmethod
    def wrap_single(cls, value: Any) -> Any:
        return _as_list(value)


class NodeProps(_CamelModel):
    """
    Domain metadata carried by a node. Unknown keys are dropped.

    Only a literal `true` marks a node as holding PII. Retention policy and
    classification count as present when truthy, whatever their JSON type.
    """
    owner: Optional[str] = None
    status: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    contains_pii: bool = Field(default=False, alias="containsPII")
    retention_policy: Any = Field(default=None, alias="retentionPolicy")
    data_classification: Any = Field(default=None, alias="dataClassification")
    notes: Optional[str] = None
    child_canvas_id: Optional[str] = Field(default=None, alias="childCanvasId")

    @field_validator("tags", mode="before")
    @classmethod
    def wrap_tags(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("contains_pii", mode="before")
    @classmethod
    def literal_true(cls, value: Any) -> bool:
        return value is True

    @field_validator("owner", "status", "tags", "description", "notes", "child_canvas_id", mode="wrap")
    @classmethod
    def descriptive_or_default(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        return _or_default(cls, value, handler, info)


class EdgeProps(_CamelModel):
    """Relationship metadata carried by an edge."""
    relationship_type: Optional[str] = Field(default=None, alias="relationshipType")
    latency_ms: Optional[float] = Field(default=None, alias="latencyMs")
    bandwidth: Optional[str] = None
    protocol: Optional[str] = None
    sla: Optional[str] = None
    cardinality: Optional[str] = None

    @field_validator("latency_ms", "bandwidth", "protocol", "sla", "cardinality", mode="wrap")
    @classmethod
    def descriptive_or_default(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        return _or_default(cls, value, handler, info)


class Position(BaseModel):
    x: float = 0
    y: float = 0


class Size(BaseModel):
    w: float = 160
    h: float = 80


class DiagramNode(_CamelModel):
    """A node in the diagram. Geometry is carried but never inspected."""
    id: str = Field(default_factory=generate_node_id)
    type: str
    label: str = ""
    framework: Optional[Framework] = None
    props: NodeProps = Field(default_factory=NodeProps)
    is_container: bool = Field(default=False, alias="isContainer")
    # Canvas-only fields
    position: Position = Field(default_factory=Position)
    size: Size = Field(default_factory=Size)
    style: dict[str, Any] = Field(default_factory=dict)
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    children_ids: list[str] = Field(default_factory=list, alias="childrenIds")
    z_index: int = Field(default=0, alias="zIndex")
    locked: bool = False

    @field_validator("label", mode="before")
    @classmethod
    def label_text(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @field_validator("props", mode="before")
    @classmethod
    def default_props(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator(
        "is_container", "position", "size", "style", "parent_id", "children_ids", "z_index", "locked",
        mode="wrap",
    )
    @classmethod
    def canvas_or_default(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        return _or_default(cls, value, handler, info)

    @property
    def display_name(self) -> str:
        """Label for messages, falling back to the id."""
        return self.label.strip() or self.id


class DiagramEdge(_CamelModel):
    """
    A directed relationship between two nodes.

    Uses `source` and `target` as canonical field names.
    Accepts `from`/`to` on input for backward compatibility.
    """
    id: str = Field(default_factory=generate_edge_id)
    source: str
    target: str
    label: Optional[str] = None
    type: str = "orthogonal"  # Routing style, ignored by governance
    props: EdgeProps = Field(default_factory=EdgeProps)
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")
    style: dict[str, Any] = Field(default_factory=dict)
    animated: bool = False

    @model_validator(mode="before")
    @classmethod
    def convert_legacy_fields(cls, data: Any) -> Any:
        """Convert legacy 'from'/'to' fields to 'source'/'target'."""
        if isinstance(data, dict):
            data = dict(data)
            if "from" in data and "source" not in data:
                data["source"] = data.pop("from")
            if "to" in data and "target" not in data:
                data["target"] = data.pop("to")
            if data.get("props") is None:
                data["props"] = {}
        return data

    @field_validator("label", mode="before")
    @classmethod
    def label_text(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator("type", "source_handle", "target_handle", "style", "animated", mode="wrap")
    @classmethod
    def canvas_or_default(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        return _or_default(cls, value, handler, info)

    @property
    def relationship_type(self) -> Optional[str]:
        return self.props.relationship_type


class DiagramMeta(_CamelModel):
    """Document metadata."""
    title: str = "Untitled Diagram"
    description: Optional[str] = None
    author: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="updatedAt")
    tags: list[str] = Field(default_factory=list)
    version: Optional[str] = None

    @field_validator("title", "description", "author", "created_at", "updated_at", "tags", "version", mode="wrap")
    @classmethod
    def meta_or_default(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        return _or_default(cls, value, handler, info)


class CanvasLayer(_CamelModel):
    """Rendering layer of the editor canvas (not an architecture layer)."""
    id: str
    type: str = "reactflow"
    visible: bool = True
    locked: bool = False


DIAGRAM_SCHEMA_URL = "https://archibuilder.dev/schema/v1"


class Diagram(_CamelModel):
    """
    The complete diagram document.
    This is what the editor imports and exports as JSON.
    """
    schema_url: str = Field(default=DIAGRAM_SCHEMA_URL, alias="$schema")
    version: str = "1.0.0"
    meta: DiagramMeta = Field(default_factory=DiagramMeta)
    layers: list[CanvasLayer] = Field(default_factory=list)
    nodes: list[DiagramNode] = Field(default_factory=list)
    edges: list[DiagramEdge] = Field(default_factory=list)
    annotations: list[dict[str, Any]] = Field(default_factory=list)
    viewport: Optional[dict[str, float]] = None

    @field_validator("layers", "annotations", "viewport", mode="wrap")
    @classmethod
    def canvas_or_default(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        return _or_default(cls, value, handler, info)

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dict with the editor's field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json_dict(cls, data: dict) -> "Diagram":
        """Create a Diagram from a JSON dict."""
        return cls.model_validate(data)

    def get_node(self, node_id: str) -> Optional[DiagramNode]:
        """Get a node by ID (O(n))."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Optional[DiagramEdge]:
        """Get an edge by ID (O(n))."""
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None
