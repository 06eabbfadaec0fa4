"""
Governance report - Run every rule over a diagram and score the result.

Usage:
    validator = GovernanceValidator()
    report = validator.validate(diagram, current_layer=2)

    print(f"Found {len(report.issues)} issues. Completeness: {report.completeness}%")

The validator is pure: it never mutates the diagram and builds a fresh,
immutable report on every call.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from .alignment import alignment_issues
from .layers import DEFAULT_POLICY, GovernancePolicy
from .models import Diagram
from .scoring import FrameworkCoverage, calculate_completeness, calculate_coverage
from .validation import (
    IssueSeverity,
    ValidationIssue,
    check_layer_compliance,
    validate_structure,
    validation_summary,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GovernanceReport:
    """Result of validating a diagram."""
    issues: tuple[ValidationIssue, ...] = field(default_factory=tuple)
    coverage: FrameworkCoverage = field(default_factory=FrameworkCoverage)
    completeness: int = 0

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == IssueSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == IssueSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == IssueSeverity.INFO)

    def summary(self) -> dict:
        """Counts by severity plus the score."""
        result = validation_summary(self.issues)
        result["completeness"] = self.completeness
        return result

    def get_summary(self) -> str:
        """Get human-readable summary"""
        return f"Found {len(self.issues)} issues. Completeness: {self.completeness}%"

    def to_dict(self) -> dict:
        return {
            "issues": [i.to_dict() for i in self.issues],
            "coverage": self.coverage.to_dict(),
            "completeness": self.completeness,
        }


DiagramInput = Union[Diagram, Mapping[str, Any]]


class GovernanceValidator:
    """
    Validates diagrams against a governance policy.

    The policy is injected so tests and deployments can substitute their own
    layer table; it defaults to the compiled-in one.
    """

    def __init__(self, policy: Optional[GovernancePolicy] = None):
        self.policy = policy or DEFAULT_POLICY

    def validate(self, diagram: DiagramInput, current_layer: Optional[int] = None) -> GovernanceReport:
        """
        Validate a diagram and build its governance report.

        Layer-independent rules always run. Layer/type compliance and
        framework alignment run only when `current_layer` is given.

        Args:
            diagram: The diagram (or its JSON dict) to validate
            current_layer: Active architecture layer (0-4), optional

        Returns:
            GovernanceReport with ordered issues, coverage and score
        """
        if not isinstance(diagram, Diagram):
            diagram = Diagram.model_validate(diagram)

        nodes = diagram.nodes
        edges = diagram.edges

        issues = validate_structure(nodes, edges)

        if current_layer is not None:
            issues.extend(check_layer_compliance(nodes, current_layer, self.policy))
            for node in nodes:
                issues.extend(alignment_issues(node, current_layer, self.policy))

        report = GovernanceReport(
            issues=tuple(issues),
            coverage=calculate_coverage(nodes),
            completeness=calculate_completeness(len(nodes), issues),
        )
        logger.debug(
            "Validated %d nodes / %d edges on layer %s: %d errors, %d warnings, %d info, completeness %d",
            len(nodes), len(edges), current_layer,
            report.error_count, report.warning_count, report.info_count, report.completeness,
        )
        return report


def validate_diagram(
    diagram: DiagramInput,
    current_layer: Optional[int] = None,
    policy: Optional[GovernancePolicy] = None,
) -> GovernanceReport:
    """Validate a diagram with the given (or default) policy."""
    return GovernanceValidator(policy).validate(diagram, current_layer)
