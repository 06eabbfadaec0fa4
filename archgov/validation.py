"""
Diagram validation - Structural and compliance rules over the node/edge graph.

Each rule is independent and never raises on malformed input: edges that
point at missing nodes are skipped where the rule needs the node.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from .layers import DEFAULT_POLICY, GovernancePolicy, get_layer_definition, is_node_type_allowed_in_layer
from .models import ANNOTATION_TYPES, SCAFFOLDING_TYPES, DiagramEdge, DiagramNode, NodeType, RelationshipType


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Rule violation, must be fixed
    WARNING = "warning"  # Governance concern, should review
    INFO = "info"        # Advisory nudge, may be intentional


class IssueCategory(str, Enum):
    """What kind of rule produced an issue. Extend, never repurpose."""
    ORPHAN = "orphan"
    UNLABELED = "unlabeled"
    PHASE_MISMATCH = "phase-mismatch"
    MISSING_PROPERTY = "missing-property"
    COVERAGE = "coverage"
    FRAMEWORK = "framework"


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation issue found in a diagram."""
    severity: IssueSeverity
    category: IssueCategory
    message: str
    node_id: Optional[str] = None
    edge_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "category": self.category.value,
            "message": self.message,
        }
        if self.node_id:
            result["nodeId"] = self.node_id
        if self.edge_id:
            result["edgeId"] = self.edge_id
        return result


SERVICE_RELATIONSHIPS = frozenset({RelationshipType.SERVES.value, RelationshipType.USES.value})


# --- Connectivity & metadata ---

def find_orphan_nodes(nodes: Sequence[DiagramNode], edges: Iterable[DiagramEdge]) -> list[DiagramNode]:
    """Nodes no edge references, ignoring swimlanes, groups and notes."""
    connected: set[str] = set()
    for edge in edges:
        connected.add(edge.source)
        connected.add(edge.target)

    return [
        node for node in nodes
        if node.id not in connected and node.type not in SCAFFOLDING_TYPES
    ]


def find_unlabeled_edges(edges: Iterable[DiagramEdge]) -> list[DiagramEdge]:
    """Edges whose label is missing or blank."""
    return [edge for edge in edges if not edge.label or not edge.label.strip()]


def find_missing_framework(nodes: Iterable[DiagramNode]) -> list[DiagramNode]:
    """Architecture nodes that declare no framework tags at all."""
    return [
        node for node in nodes
        if node.type not in SCAFFOLDING_TYPES and node.framework is None
    ]


# --- Relationship rules ---

def find_processes_without_service(
    nodes: Iterable[DiagramNode],
    edges: Sequence[DiagramEdge],
) -> list[DiagramNode]:
    """Processes with no 'serves' or 'uses' edge in either direction."""
    offenders = []
    for process in nodes:
        if process.type != NodeType.PROCESS.value:
            continue
        has_service = any(
            process.id in (edge.source, edge.target)
            and edge.relationship_type in SERVICE_RELATIONSHIPS
            for edge in edges
        )
        if not has_service:
            offenders.append(process)
    return offenders


def find_unrealized_capabilities(
    nodes: Sequence[DiagramNode],
    edges: Sequence[DiagramEdge],
) -> list[DiagramNode]:
    """
    Capabilities that are not the source of a 'realizes' edge to an app.

    Direction matters: the edge must point capability -> app. An edge whose
    target does not exist does not count.
    """
    types_by_id = {node.id: node.type for node in nodes}
    offenders = []
    for capability in nodes:
        if capability.type != NodeType.CAPABILITY.value:
            continue
        realized = any(
            edge.source == capability.id
            and edge.relationship_type == RelationshipType.REALIZES.value
            and types_by_id.get(edge.target) == NodeType.APP.value
            for edge in edges
        )
        if not realized:
            offenders.append(capability)
    return offenders


def check_pii_compliance(nodes: Iterable[DiagramNode]) -> list[ValidationIssue]:
    """
    Data nodes holding PII must declare a retention policy and a
    classification. Each missing field is a separate error.
    """
    issues: list[ValidationIssue] = []
    for node in nodes:
        if node.type != NodeType.DATA.value or node.props.contains_pii is not True:
            continue
        if not node.props.retention_policy:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                category=IssueCategory.MISSING_PROPERTY,
                message=f'Data node "{node.display_name}" contains PII but lacks retention policy',
                node_id=node.id,
            ))
        if not node.props.data_classification:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                category=IssueCategory.MISSING_PROPERTY,
                message=f'Data node "{node.display_name}" contains PII but lacks data classification',
                node_id=node.id,
            ))
    return issues


# --- Layer/type allowance ---

def check_layer_compliance(
    nodes: Iterable[DiagramNode],
    level: Optional[int],
    policy: GovernancePolicy = DEFAULT_POLICY,
) -> list[ValidationIssue]:
    """Warn about node types the active layer does not list (notes and groups excepted)."""
    layer = get_layer_definition(level, policy)
    issues: list[ValidationIssue] = []
    for node in nodes:
        if node.type in ANNOTATION_TYPES:
            continue
        if not is_node_type_allowed_in_layer(node.type, layer.level, policy):
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                category=IssueCategory.COVERAGE,
                message=(
                    f'Node "{node.display_name}" of type "{node.type}" is not recommended '
                    f"for Layer L{layer.level}"
                ),
                node_id=node.id,
            ))
    return issues


def validate_structure(
    nodes: Sequence[DiagramNode],
    edges: Sequence[DiagramEdge],
) -> list[ValidationIssue]:
    """
    Run every layer-independent rule and return their issues in order.

    Order: orphans, unlabeled edges, missing framework, process/service,
    capability realization, PII.
    """
    issues: list[ValidationIssue] = []

    for node in find_orphan_nodes(nodes, edges):
        issues.append(ValidationIssue(
            severity=IssueSeverity.WARNING,
            category=IssueCategory.ORPHAN,
            message=f'Node "{node.display_name}" is not connected to any other node',
            node_id=node.id,
        ))

    for edge in find_unlabeled_edges(edges):
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            category=IssueCategory.UNLABELED,
            message=f"Edge {edge.id} from {edge.source} to {edge.target} has no label",
            edge_id=edge.id,
        ))

    for node in find_missing_framework(nodes):
        issues.append(ValidationIssue(
            severity=IssueSeverity.WARNING,
            category=IssueCategory.MISSING_PROPERTY,
            message=f'Node "{node.display_name}" is missing framework properties (TOGAF/eTOM/SID)',
            node_id=node.id,
        ))

    for node in find_processes_without_service(nodes, edges):
        issues.append(ValidationIssue(
            severity=IssueSeverity.ERROR,
            category=IssueCategory.MISSING_PROPERTY,
            message=f'Process "{node.display_name}" must have at least one Service/API connection',
            node_id=node.id,
        ))

    for node in find_unrealized_capabilities(nodes, edges):
        issues.append(ValidationIssue(
            severity=IssueSeverity.ERROR,
            category=IssueCategory.MISSING_PROPERTY,
            message=f'Capability "{node.display_name}" must be realized by at least one Application',
            node_id=node.id,
        ))

    issues.extend(check_pii_compliance(nodes))
    return issues


def validation_summary(issues: Iterable[ValidationIssue]) -> dict:
    """
    Create a summary of validation issues.

    Args:
        issues: List of validation issues

    Returns:
        Dictionary with counts by severity
    """
    issues = list(issues)
    errors = sum(1 for i in issues if i.severity == IssueSeverity.ERROR)
    return {
        "total": len(issues),
        "errors": errors,
        "warnings": sum(1 for i in issues if i.severity == IssueSeverity.WARNING),
        "info": sum(1 for i in issues if i.severity == IssueSeverity.INFO),
        "valid": errors == 0,
    }
