import json

import pytest

from archgov.errors import GovernanceError, MalformedDiagram
from archgov.serialization import (
    export_diagram_to_json,
    import_diagram_from_json,
    load_diagram_file,
    parse_diagram,
)


def test_import_accepts_editor_document(example_document):
    diagram = import_diagram_from_json(json.dumps(example_document))

    assert [n.id for n in diagram.nodes] == ["c1", "a1"]
    assert diagram.edges[0].relationship_type == "realizes"


@pytest.mark.parametrize("field", ["$schema", "version", "meta", "nodes"])
def test_missing_required_field_is_rejected(example_document, field):
    del example_document[field]

    with pytest.raises(MalformedDiagram, match=field.replace("$", r"\$")):
        parse_diagram(example_document)


def test_edges_are_optional(example_document):
    del example_document["edges"]
    assert parse_diagram(example_document).edges == []


def test_invalid_json_is_rejected():
    with pytest.raises(MalformedDiagram, match="not valid JSON"):
        import_diagram_from_json("{nodes: [")


def test_non_object_document_is_rejected():
    with pytest.raises(MalformedDiagram):
        import_diagram_from_json("[1, 2, 3]")


def test_node_without_type_is_rejected(example_document):
    del example_document["nodes"][0]["type"]

    with pytest.raises(MalformedDiagram):
        parse_diagram(example_document)


def test_malformed_diagram_is_a_value_error():
    assert issubclass(MalformedDiagram, ValueError)
    assert issubclass(MalformedDiagram, GovernanceError)


def test_export_keeps_editor_field_names(example_document):
    example_document["nodes"][1]["props"] = {"containsPII": True, "retentionPolicy": "1y"}
    text = export_diagram_to_json(parse_diagram(example_document))
    data = json.loads(text)

    assert data["$schema"] == example_document["$schema"]
    assert data["nodes"][1]["props"]["containsPII"] is True
    assert data["nodes"][1]["props"]["retentionPolicy"] == "1y"
    assert import_diagram_from_json(text).nodes[1].props.retention_policy == "1y"


def test_load_diagram_file(tmp_path, example_document):
    path = tmp_path / "diagram.json"
    path.write_text(json.dumps(example_document), encoding="utf-8")

    assert load_diagram_file(path).meta.title == "Test Diagram"


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_diagram_file(tmp_path / "nope.json")
