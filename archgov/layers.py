"""
Layer policy - Architecture layers L0..L4 and the node types, containers
and framework elements each one is meant to hold.

A `GovernancePolicy` bundles the layer table with the framework reference
tables. The compiled-in `DEFAULT_POLICY` is used unless a caller passes
another one (see `archgov.config.load_policy`).

Lookups fail open: an unknown level resolves to L0 and a node type no layer
lists is treated as allowed on every layer.
"""

import logging
from functools import cached_property
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .frameworks import (
    ETOM_AREAS,
    SID_ENTITIES,
    SID_GROUPS,
    TOGAF_PHASES,
    EtomArea,
    SidEntity,
    SidGroup,
    TogafPhase,
)
from .models import ANNOTATION_TYPES, NodeType

logger = logging.getLogger(__name__)

LAYER_COUNT = 5

# Structural types listed in layer guidance as "avoid" when not allowed
CORE_NODE_TYPES = ("capability", "process", "app", "tech", "data")


class LayerDefinition(BaseModel):
    """Static description of one architecture layer."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    level: int
    type: str
    label: str
    short_label: str = Field(alias="shortLabel")
    description: str = ""
    allowed_node_types: tuple[str, ...] = Field(alias="allowedNodeTypes")
    allowed_containers: tuple[str, ...] = Field(default=(), alias="allowedContainers")
    recommendations: tuple[str, ...] = ()
    togaf_alignment: tuple[str, ...] = Field(default=(), alias="togafAlignment")
    etom_alignment: tuple[str, ...] = Field(default=(), alias="etomAlignment")


class GovernancePolicy(BaseModel):
    """
    Immutable policy consumed by the validator.

    Holds exactly five layers ordered by level, plus the TOGAF, eTOM and SID
    reference tables used for alignment and type normalization.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    layers: tuple[LayerDefinition, ...]
    togaf_phases: tuple[TogafPhase, ...] = Field(default=TOGAF_PHASES, alias="togafPhases")
    etom_areas: tuple[EtomArea, ...] = Field(default=ETOM_AREAS, alias="etomAreas")
    sid_groups: tuple[SidGroup, ...] = Field(default=SID_GROUPS, alias="sidGroups")
    sid_entities: tuple[SidEntity, ...] = Field(default=SID_ENTITIES, alias="sidEntities")

    @model_validator(mode="after")
    def check_layer_levels(self) -> "GovernancePolicy":
        levels = [layer.level for layer in self.layers]
        if levels != list(range(LAYER_COUNT)):
            raise ValueError(
                f"Policy must define layers 0..{LAYER_COUNT - 1} in order, got {levels}"
            )
        return self

    @cached_property
    def togaf_order(self) -> dict[str, int]:
        """Phase id -> ordinal position in the ADM cycle."""
        return {phase.id: index for index, phase in enumerate(self.togaf_phases)}

    @cached_property
    def etom_ids(self) -> frozenset[str]:
        return frozenset(area.id for area in self.etom_areas)

    @cached_property
    def sid_ids(self) -> frozenset[str]:
        return frozenset(entity.id for entity in self.sid_entities)


DEFAULT_LAYERS: tuple[LayerDefinition, ...] = (
    LayerDefinition(
        level=0,
        type="enterprise",
        label="L0: Enterprise Overview",
        short_label="L0",
        description="Strategic view with TOGAF phases and enterprise domains",
        allowed_node_types=("phase", "swimlane", "capability", "group", "note"),
        allowed_containers=("phase", "swimlane"),
        recommendations=(
            "Use Phase containers for TOGAF ADM phases",
            "Map strategic capabilities and domains",
            "Keep high-level and avoid technical details",
            "Focus on business value and objectives",
        ),
        togaf_alignment=("Preliminary", "A", "B"),
        etom_alignment=("Strategy",),
    ),
    LayerDefinition(
        level=1,
        type="capability",
        label="L1: Capability & Process",
        short_label="L1",
        description="Business capabilities and eTOM process landscape",
        allowed_node_types=("capability", "process", "processArea", "swimlane", "group", "note"),
        allowed_containers=("processArea", "swimlane"),
        recommendations=(
            "Define business capabilities with clear outcomes",
            "Map eTOM Level 1 and Level 2 processes",
            "Link capabilities to supporting processes",
            "Associate with SID Customer, Product, Service entities",
        ),
        togaf_alignment=("B", "C"),
        etom_alignment=("Operations", "Fulfillment", "Assurance", "Billing"),
    ),
    LayerDefinition(
        level=2,
        type="application",
        label="L2: Application & Data",
        short_label="L2",
        description="Application components, services, and data architecture",
        allowed_node_types=("app", "data", "sid", "group", "swimlane", "note"),
        allowed_containers=("swimlane", "group"),
        recommendations=(
            "Map applications that realize capabilities",
            "Define data entities and flows",
            "Show integration patterns and APIs",
            "Use SID entities (Customer/Product/Service/Resource/etc.)",
        ),
        togaf_alignment=("C", "D"),
        etom_alignment=("Operations",),
    ),
    LayerDefinition(
        level=3,
        type="technology",
        label="L3: Technology & Infrastructure",
        short_label="L3",
        description="Technology stack, infrastructure, and deployment",
        allowed_node_types=("tech", "data", "sid", "group", "swimlane", "note"),
        allowed_containers=("swimlane", "group"),
        recommendations=(
            "Detail technology components and platforms",
            "Show deployment topology and hosting",
            "Define infrastructure dependencies",
            "Map to physical and virtual resources",
        ),
        togaf_alignment=("D", "E"),
        etom_alignment=(),
    ),
    LayerDefinition(
        level=4,
        type="runtime",
        label="L4: Runtime & Operations",
        short_label="L4",
        description="Runtime environments, CI/CD, monitoring, and operations",
        allowed_node_types=("tech", "process", "group", "swimlane", "note"),
        allowed_containers=("swimlane", "group"),
        recommendations=(
            "Define CI/CD pipelines and automation",
            "Show monitoring and observability setup",
            "Map operational processes (ITIL/DevOps)",
            "Include disaster recovery and resilience",
        ),
        togaf_alignment=("G", "H"),
        etom_alignment=("Operations",),
    ),
)

DEFAULT_POLICY = GovernancePolicy(layers=DEFAULT_LAYERS)

_STRUCTURAL_TYPES = frozenset(t.value for t in NodeType)


def normalize_node_type(node_type: str, policy: GovernancePolicy = DEFAULT_POLICY) -> str:
    """
    Map a raw framework id used as a node type to its structural bucket.

    SID entity ids become 'sid', TOGAF phase ids 'phase' and eTOM area ids
    'processArea'. Structural and unknown types are returned unchanged.
    """
    if node_type in _STRUCTURAL_TYPES:
        return node_type
    if node_type in policy.sid_ids:
        return NodeType.SID.value
    if node_type in policy.togaf_order:
        return NodeType.PHASE.value
    if node_type in policy.etom_ids:
        return NodeType.PROCESS_AREA.value
    return node_type


def get_layer_definition(level: Optional[int], policy: GovernancePolicy = DEFAULT_POLICY) -> LayerDefinition:
    """Get a layer by level, falling back to L0 for unknown levels."""
    for layer in policy.layers:
        if layer.level == level:
            return layer
    logger.debug("Unknown layer level %r, falling back to L0", level)
    return policy.layers[0]


def is_node_type_allowed_in_layer(
    node_type: str,
    level: Optional[int],
    policy: GovernancePolicy = DEFAULT_POLICY,
) -> bool:
    """Check whether a (normalized) node type is listed for a layer."""
    layer = get_layer_definition(level, policy)
    return normalize_node_type(node_type, policy) in layer.allowed_node_types


def is_container_allowed_in_layer(
    container_type: str,
    level: Optional[int],
    policy: GovernancePolicy = DEFAULT_POLICY,
) -> bool:
    """Check whether a container type is meant to be used on a layer."""
    layer = get_layer_definition(level, policy)
    return normalize_node_type(container_type, policy) in layer.allowed_containers


def get_layers_for_node_type(node_type: str, policy: GovernancePolicy = DEFAULT_POLICY) -> list[int]:
    """
    Every layer level where a node type is allowed.

    A type no layer lists is unrestricted, so all levels are returned.
    """
    normalized = normalize_node_type(node_type, policy)
    levels = [layer.level for layer in policy.layers if normalized in layer.allowed_node_types]
    return levels or [layer.level for layer in policy.layers]


def get_recommended_node_types(level: Optional[int], policy: GovernancePolicy = DEFAULT_POLICY) -> list[str]:
    """Allowed node types of a layer, without the universal note/group."""
    layer = get_layer_definition(level, policy)
    return [t for t in layer.allowed_node_types if t not in ANNOTATION_TYPES]


def layer_guidance(level: Optional[int], policy: GovernancePolicy = DEFAULT_POLICY) -> dict:
    """
    Build the guidance shown when working on a layer.

    Returns:
        Dictionary with the layer's identity, recommended and discouraged
        node types, containers, framework alignment and guidance text
    """
    layer = get_layer_definition(level, policy)
    return {
        "level": layer.level,
        "type": layer.type,
        "label": layer.label,
        "short_label": layer.short_label,
        "description": layer.description,
        "recommended_node_types": get_recommended_node_types(layer.level, policy),
        "avoid_node_types": [t for t in CORE_NODE_TYPES if t not in layer.allowed_node_types],
        "allowed_containers": list(layer.allowed_containers),
        "togaf_alignment": list(layer.togaf_alignment),
        "etom_alignment": list(layer.etom_alignment),
        "recommendations": list(layer.recommendations),
    }
