import json

import pytest
from fastapi.testclient import TestClient

from backend.main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "layers": 5}


def test_validate_without_layer(client, mixed_document):
    response = client.post("/api/validate", json=mixed_document)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["report"]["completeness"] == 50
    assert data["summary"]["errors"] == 4
    assert data["report"]["issues"][0] == {
        "type": "warning",
        "category": "orphan",
        "message": 'Node "Legacy Server" is not connected to any other node',
        "nodeId": "o1",
    }


def test_validate_with_layer(client, mixed_document):
    response = client.post("/api/validate", params={"layer": 1}, json=mixed_document)

    data = response.json()
    assert data["report"]["completeness"] == 30
    assert data["report"]["coverage"] == {
        "togafPhases": ["H", "B"],
        "etomAreas": ["Strategy"],
        "sidEntities": ["Customer"],
    }
    assert data["summary"]["valid"] is False


def test_validate_rejects_node_without_type(client, example_document):
    del example_document["nodes"][0]["type"]

    assert client.post("/api/validate", json=example_document).status_code == 422


def test_import_diagram(client, example_document):
    response = client.post("/api/diagram/import", json={"content": json.dumps(example_document)})

    assert response.status_code == 200
    assert response.json()["diagram"]["nodes"][0]["framework"]["togafPhase"] == "B"


def test_import_rejects_malformed_document(client, example_document):
    del example_document["meta"]
    response = client.post("/api/diagram/import", json={"content": json.dumps(example_document)})

    assert response.status_code == 400
    assert "meta" in response.json()["detail"]


def test_import_rejects_invalid_json(client):
    response = client.post("/api/diagram/import", json={"content": "not json"})
    assert response.status_code == 400


def test_alignment(client):
    response = client.post("/api/alignment", params={"layer": 2}, json={"togafPhase": "B", "etom": "Operations"})

    data = response.json()
    assert data["togafOk"] is False
    assert data["etomOk"] is True
    assert data["tags"][0] == {
        "framework": "togaf",
        "tag": "B",
        "alignment": "allowed",
        "distance": 1,
        "suggestedLayers": [0, 1],
    }
    assert data["tags"][1]["alignment"] == "recommended"


def test_alignment_requires_layer(client):
    assert client.post("/api/alignment", json={"togafPhase": "B"}).status_code == 422


def test_list_layers(client):
    layers = client.get("/api/layers").json()["layers"]

    assert [layer["level"] for layer in layers] == [0, 1, 2, 3, 4]
    assert layers[2]["togaf_alignment"] == ["C", "D"]


def test_unknown_layer_returns_l0(client):
    assert client.get("/api/layers/99").json()["layer"]["level"] == 0


def test_node_type_layers(client):
    data = client.get("/api/node-types/Customer/layers").json()

    assert data["normalized"] == "sid"
    assert data["levels"] == [2, 3]


def test_frameworks(client):
    data = client.get("/api/frameworks").json()

    phases = {p["id"]: p["ordinal"] for p in data["togafPhases"]}
    assert phases["Preliminary"] == 0
    assert phases["H"] == 8
    assert "Billing" in [a["id"] for a in data["etomAreas"]]
    assert "realizes" in data["relationshipTypes"]
    assert all(group["entities"] for group in data["sidGroups"])


def test_trace(client, example_document):
    response = client.post("/api/trace/a1", json=example_document)

    assert response.status_code == 200
    assert response.json()["trace"]["upstream"][0]["nodeId"] == "c1"


def test_trace_unknown_node(client, example_document):
    assert client.post("/api/trace/zz", json=example_document).status_code == 404


def test_matrix(client, example_document):
    data = client.post("/api/matrix/capability-app", json=example_document).json()

    assert data["matrix"]["cells"] == [{"row": "c1", "column": "a1", "relationshipType": "realizes"}]


def test_unknown_matrix_kind(client, example_document):
    assert client.post("/api/matrix/app-tech", json=example_document).status_code == 400


def test_summary(client, example_document):
    summary = client.post("/api/summary", json=example_document).json()["summary"]

    assert summary["total_nodes"] == 2
    assert summary["connected_components"] == 1
