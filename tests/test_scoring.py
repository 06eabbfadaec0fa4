import pytest

from archgov.models import DiagramNode, Framework
from archgov.scoring import FrameworkCoverage, calculate_completeness, calculate_coverage
from archgov.validation import IssueCategory, IssueSeverity, ValidationIssue


def issues(errors=0, warnings=0, info=0):
    return (
        [ValidationIssue(IssueSeverity.ERROR, IssueCategory.MISSING_PROPERTY, "e")] * errors
        + [ValidationIssue(IssueSeverity.WARNING, IssueCategory.ORPHAN, "w")] * warnings
        + [ValidationIssue(IssueSeverity.INFO, IssueCategory.UNLABELED, "i")] * info
    )


def test_empty_diagram_scores_zero():
    assert calculate_completeness(0, []) == 0
    assert calculate_completeness(0, issues(errors=1, warnings=1)) == 0


@pytest.mark.parametrize("found, expected", [
    (issues(), 100),
    (issues(errors=2, warnings=1), 75),
    (issues(info=30), 100),
    (issues(errors=11), 0),
    (issues(warnings=3, info=2), 85),
])
def test_completeness_penalties(found, expected):
    assert calculate_completeness(1, found) == expected


def test_each_issue_lowers_score_by_its_penalty():
    base = issues(errors=1, warnings=2)
    score = calculate_completeness(3, base)

    assert calculate_completeness(3, base + issues(errors=1)) == score - 10
    assert calculate_completeness(3, base + issues(warnings=1)) == score - 5
    assert calculate_completeness(3, base + issues(info=1)) == score


def test_coverage_is_distinct_in_first_seen_order():
    nodes = [
        DiagramNode(id="a", type="app", framework=Framework(togaf_phase="D", etom=["Operations"], sid=["Service"])),
        DiagramNode(id="b", type="app"),
        DiagramNode(id="c", type="app", framework=Framework(togaf_phase="B", etom=["Billing", "Operations"])),
        DiagramNode(id="d", type="data", framework=Framework(togaf_phase="D", sid=["Customer", "Service"])),
    ]
    coverage = calculate_coverage(nodes)

    assert coverage == FrameworkCoverage(
        togaf_phases=("D", "B"),
        etom_areas=("Operations", "Billing"),
        sid_entities=("Service", "Customer"),
    )
    assert coverage.to_dict() == {
        "togafPhases": ["D", "B"],
        "etomAreas": ["Operations", "Billing"],
        "sidEntities": ["Service", "Customer"],
    }


def test_coverage_of_untagged_diagram_is_empty():
    assert calculate_coverage([DiagramNode(id="a", type="app")]) == FrameworkCoverage()
