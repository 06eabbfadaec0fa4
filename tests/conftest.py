import copy

import pytest

from archgov.models import DIAGRAM_SCHEMA_URL, Diagram


DOCUMENT_HEADER = {
    "$schema": DIAGRAM_SCHEMA_URL,
    "version": "1.0.0",
    "meta": {
        "title": "Test Diagram",
        "createdAt": "2024-01-01T00:00:00+00:00",
        "updatedAt": "2024-01-01T00:00:00+00:00",
    },
}


def document(nodes, edges=()):
    """A full diagram document dict as the editor exports it."""
    data = copy.deepcopy(DOCUMENT_HEADER)
    data["layers"] = [{"id": "diagram", "type": "reactflow"}]
    data["nodes"] = list(nodes)
    data["edges"] = list(edges)
    data["annotations"] = []
    return data


@pytest.fixture
def build_diagram():
    """Factory turning node/edge dicts into a Diagram."""
    def _build(nodes, edges=()):
        return Diagram.model_validate(document(nodes, edges))
    return _build


@pytest.fixture
def example_document():
    """Capability realized by an app through a labeled 'realizes' edge."""
    return document(
        nodes=[
            {"id": "c1", "type": "capability", "label": "Billing", "framework": {"togafPhase": "B"}},
            {"id": "a1", "type": "app", "label": "Revenue App"},
        ],
        edges=[
            {"id": "e1", "source": "c1", "target": "a1", "label": "uses",
             "props": {"relationshipType": "realizes"}},
        ],
    )


@pytest.fixture
def mixed_document():
    """
    One diagram tripping every rule family.

    o1 is an isolated tech node tagged phase H; p1 is an untagged process
    with only a 'flows-to' edge; d1 holds PII without retention or
    classification; c1 is a capability tagged B/Strategy that realizes nothing.
    """
    return document(
        nodes=[
            {"id": "o1", "type": "tech", "label": "Legacy Server", "framework": {"togafPhase": "H"}},
            {"id": "p1", "type": "process", "label": "Order Handling"},
            {"id": "d1", "type": "data", "label": "Customer Records",
             "framework": {"sid": ["Customer"]}, "props": {"containsPII": True}},
            {"id": "c1", "type": "capability", "label": "Order Management",
             "framework": {"togafPhase": "B", "etom": ["Strategy"]}},
        ],
        edges=[
            {"id": "e1", "source": "p1", "target": "d1", "label": "",
             "props": {"relationshipType": "flows-to"}},
            {"id": "e2", "source": "c1", "target": "p1", "label": "composed of",
             "props": {"relationshipType": "composes"}},
        ],
    )
