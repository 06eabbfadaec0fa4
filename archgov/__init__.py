"""
Architecture Governance Core - Layer policy, framework alignment and
validation for TOGAF/eTOM/SID architecture diagrams.

This module provides the logic shared by the backend API, the CLI and the
MCP tools, ensuring a single source of truth for governance rules.
"""

from .models import (
    # Enums
    NodeType,
    RelationshipType,
    # Core models
    Framework,
    NodeProps,
    EdgeProps,
    DiagramNode,
    DiagramEdge,
    DiagramMeta,
    Diagram,
)

from .layers import (
    LayerDefinition,
    GovernancePolicy,
    DEFAULT_POLICY,
    get_layer_definition,
    get_layers_for_node_type,
    is_node_type_allowed_in_layer,
    normalize_node_type,
    layer_guidance,
)
from .alignment import Alignment, TagAlignment, check_framework_alignment, score_framework_alignment
from .validation import ValidationIssue, IssueSeverity, IssueCategory
from .scoring import FrameworkCoverage
from .governance import GovernanceReport, GovernanceValidator, validate_diagram
from .analysis import trace_dependencies, relationship_matrix, summarize_diagram
from .serialization import import_diagram_from_json, export_diagram_to_json
from .errors import GovernanceError, MalformedDiagram, PolicyConfigError

__all__ = [
    # Enums
    "NodeType",
    "RelationshipType",
    # Models
    "Framework",
    "NodeProps",
    "EdgeProps",
    "DiagramNode",
    "DiagramEdge",
    "DiagramMeta",
    "Diagram",
    # Layer policy
    "LayerDefinition",
    "GovernancePolicy",
    "DEFAULT_POLICY",
    "get_layer_definition",
    "get_layers_for_node_type",
    "is_node_type_allowed_in_layer",
    "normalize_node_type",
    "layer_guidance",
    # Alignment
    "Alignment",
    "TagAlignment",
    "check_framework_alignment",
    "score_framework_alignment",
    # Validation
    "ValidationIssue",
    "IssueSeverity",
    "IssueCategory",
    "FrameworkCoverage",
    "GovernanceReport",
    "GovernanceValidator",
    "validate_diagram",
    # Analysis
    "trace_dependencies",
    "relationship_matrix",
    "summarize_diagram",
    # Serialization
    "import_diagram_from_json",
    "export_diagram_to_json",
    # Errors
    "GovernanceError",
    "MalformedDiagram",
    "PolicyConfigError",
]
