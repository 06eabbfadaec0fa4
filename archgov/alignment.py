"""
Framework alignment - Check a node's TOGAF/eTOM tags against a layer.

TOGAF severity is graded by ordinal distance in the ADM cycle: a phase one
step away from the layer's recommended phases is a soft nudge, anything
further is a warning. eTOM areas are checked one by one.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .layers import DEFAULT_POLICY, GovernancePolicy, get_layer_definition
from .models import DiagramNode, Framework
from .validation import IssueCategory, IssueSeverity, ValidationIssue

# Maximum ordinal distance still treated as a nudge rather than a warning
NEAR_PHASE_DISTANCE = 1


class Alignment(str, Enum):
    """How well a framework tag fits a layer."""
    RECOMMENDED = "recommended"  # Native to the layer
    ALLOWED = "allowed"          # Close to the layer's phases
    OFF_LAYER = "off-layer"      # Belongs elsewhere


@dataclass(frozen=True)
class FrameworkAlignment:
    """Boolean verdict for a node's framework tags on one layer."""
    togaf_ok: bool = True
    etom_ok: bool = True


@dataclass(frozen=True)
class TagAlignment:
    """Scored verdict for one framework tag."""
    framework: str  # "togaf" or "etom"
    tag: str
    alignment: Alignment
    distance: float = 0
    suggested_layers: tuple[int, ...] = field(default_factory=tuple)

    @property
    def severity(self) -> Optional[IssueSeverity]:
        """Issue severity for this verdict, None when aligned."""
        if self.alignment == Alignment.RECOMMENDED:
            return None
        if self.alignment == Alignment.ALLOWED:
            return IssueSeverity.INFO
        return IssueSeverity.WARNING


def togaf_ordinal(phase_id: str, policy: GovernancePolicy = DEFAULT_POLICY) -> Optional[int]:
    """Position of a phase in the ADM cycle (Preliminary=0 ... H=8)."""
    return policy.togaf_order.get(phase_id)


def togaf_distance_to_layer(
    phase_id: str,
    level: Optional[int],
    policy: GovernancePolicy = DEFAULT_POLICY,
) -> float:
    """
    Smallest ordinal distance between a phase and a layer's TOGAF phases.

    Returns 0 for a recommended phase and infinity when the phase is unknown
    or the layer recommends no known phases.
    """
    position = togaf_ordinal(phase_id, policy)
    if position is None:
        return math.inf
    layer = get_layer_definition(level, policy)
    distances = [
        abs(policy.togaf_order[phase] - position)
        for phase in layer.togaf_alignment
        if phase in policy.togaf_order
    ]
    return min(distances) if distances else math.inf


def layers_for_togaf_phase(phase_id: str, policy: GovernancePolicy = DEFAULT_POLICY) -> list[int]:
    """Layers that list a TOGAF phase as native."""
    return [layer.level for layer in policy.layers if phase_id in layer.togaf_alignment]


def layers_for_etom_area(area_id: str, policy: GovernancePolicy = DEFAULT_POLICY) -> list[int]:
    """Layers that list an eTOM area as native."""
    return [layer.level for layer in policy.layers if area_id in layer.etom_alignment]


def format_layers(levels) -> str:
    """Render levels as 'L1, L2' (sorted, without duplicates)."""
    return ", ".join(f"L{level}" for level in sorted(set(levels)))


def check_framework_alignment(
    framework: Optional[Framework],
    level: Optional[int],
    policy: GovernancePolicy = DEFAULT_POLICY,
) -> FrameworkAlignment:
    """
    Decide whether a node's TOGAF phase and eTOM areas suit a layer.

    Missing tags are aligned. eTOM is aligned only when every declared area
    is native to the layer.
    """
    if framework is None:
        return FrameworkAlignment()

    layer = get_layer_definition(level, policy)
    togaf_ok = True
    if framework.togaf_phase:
        togaf_ok = framework.togaf_phase in layer.togaf_alignment

    etom_ok = True
    if framework.etom:
        etom_ok = all(area in layer.etom_alignment for area in framework.etom)

    return FrameworkAlignment(togaf_ok=togaf_ok, etom_ok=etom_ok)


def score_framework_alignment(
    framework: Optional[Framework],
    level: Optional[int],
    policy: GovernancePolicy = DEFAULT_POLICY,
) -> list[TagAlignment]:
    """
    Grade each framework tag of a node against a layer.

    Returns:
        TOGAF verdict first (if a phase is declared), then one verdict per
        eTOM area in declaration order
    """
    if framework is None:
        return []

    layer = get_layer_definition(level, policy)
    verdicts: list[TagAlignment] = []

    phase = framework.togaf_phase
    if phase:
        if phase in layer.togaf_alignment:
            verdicts.append(TagAlignment("togaf", phase, Alignment.RECOMMENDED))
        else:
            distance = togaf_distance_to_layer(phase, layer.level, policy)
            alignment = Alignment.ALLOWED if distance <= NEAR_PHASE_DISTANCE else Alignment.OFF_LAYER
            verdicts.append(TagAlignment(
                "togaf",
                phase,
                alignment,
                distance=distance,
                suggested_layers=tuple(layers_for_togaf_phase(phase, policy)),
            ))

    for area in framework.etom:
        if area in layer.etom_alignment:
            verdicts.append(TagAlignment("etom", area, Alignment.RECOMMENDED))
        else:
            verdicts.append(TagAlignment(
                "etom",
                area,
                Alignment.OFF_LAYER,
                distance=math.inf,
                suggested_layers=tuple(layers_for_etom_area(area, policy)),
            ))

    return verdicts


def _togaf_message(verdict: TagAlignment, node: DiagramNode, level: int) -> str:
    name = node.display_name
    if verdict.alignment == Alignment.ALLOWED:
        return (
            f'TOGAF phase "{verdict.tag}" on "{name}" is close but not the primary '
            f"alignment for L{level}."
        )
    if verdict.suggested_layers:
        return (
            f'TOGAF phase "{verdict.tag}" on "{name}" is not ideal for L{level}. '
            f"Consider moving to {format_layers(verdict.suggested_layers)}."
        )
    return f'TOGAF phase "{verdict.tag}" on "{name}" is not aligned with L{level}.'


def _etom_message(verdict: TagAlignment, node: DiagramNode, level: int) -> str:
    name = node.display_name
    if verdict.suggested_layers:
        return (
            f'eTOM area "{verdict.tag}" on "{name}" is not typical for L{level}. '
            f"Consider moving to {format_layers(verdict.suggested_layers)}."
        )
    return f'eTOM area "{verdict.tag}" on "{name}" is not aligned with L{level}.'


def alignment_issues(
    node: DiagramNode,
    level: Optional[int],
    policy: GovernancePolicy = DEFAULT_POLICY,
) -> list[ValidationIssue]:
    """Turn a node's scored framework alignment into validation issues."""
    layer = get_layer_definition(level, policy)
    issues: list[ValidationIssue] = []

    for verdict in score_framework_alignment(node.framework, layer.level, policy):
        severity = verdict.severity
        if severity is None:
            continue
        if verdict.framework == "togaf":
            message = _togaf_message(verdict, node, layer.level)
        else:
            message = _etom_message(verdict, node, layer.level)
        issues.append(ValidationIssue(
            severity=severity,
            category=IssueCategory.FRAMEWORK,
            message=message,
            node_id=node.id,
        ))

    return issues
