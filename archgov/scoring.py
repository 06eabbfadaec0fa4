"""
Coverage and completeness scoring.

Coverage lists the framework elements a diagram actually uses. Completeness
is a linear penalty score: 100 minus 10 per error and 5 per warning,
floored at 0. Info issues are free and an empty diagram scores 0.
"""

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .models import DiagramNode
from .validation import IssueSeverity, ValidationIssue

MAX_SCORE = 100
ERROR_PENALTY = 10
WARNING_PENALTY = 5


@dataclass(frozen=True)
class FrameworkCoverage:
    """Distinct framework elements used across a diagram, in first-seen order."""
    togaf_phases: tuple[str, ...] = field(default_factory=tuple)
    etom_areas: tuple[str, ...] = field(default_factory=tuple)
    sid_entities: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "togafPhases": list(self.togaf_phases),
            "etomAreas": list(self.etom_areas),
            "sidEntities": list(self.sid_entities),
        }


def calculate_coverage(nodes: Iterable[DiagramNode]) -> FrameworkCoverage:
    """Collect the TOGAF phases, eTOM areas and SID entities tagged on nodes."""
    # dicts keep insertion order
    phases: dict[str, None] = {}
    areas: dict[str, None] = {}
    entities: dict[str, None] = {}

    for node in nodes:
        framework = node.framework
        if framework is None:
            continue
        if framework.togaf_phase:
            phases.setdefault(framework.togaf_phase)
        for area in framework.etom:
            areas.setdefault(area)
        for entity in framework.sid:
            entities.setdefault(entity)

    return FrameworkCoverage(
        togaf_phases=tuple(phases),
        etom_areas=tuple(areas),
        sid_entities=tuple(entities),
    )


def calculate_completeness(node_count: int, issues: Sequence[ValidationIssue]) -> int:
    """Score a diagram 0-100 from its issue severities."""
    if node_count == 0:
        return 0

    errors = sum(1 for i in issues if i.severity == IssueSeverity.ERROR)
    warnings = sum(1 for i in issues if i.severity == IssueSeverity.WARNING)

    score = MAX_SCORE - errors * ERROR_PENALTY - warnings * WARNING_PENALTY
    return round(max(0, score))
