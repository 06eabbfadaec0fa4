import importlib.util
import json
from pathlib import Path

import pytest

from archgov.config import DEFAULT_API_BASE

SERVER_PATH = Path(__file__).resolve().parent.parent / "mcp-server" / "server.py"


def load_server():
    spec = importlib.util.spec_from_file_location("archgov_mcp_server", SERVER_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def server(monkeypatch):
    """Load the MCP server module with the backend call recorded."""
    module = load_server()

    calls = []

    def fake_request(method, endpoint, **kwargs):
        calls.append((method, endpoint, kwargs))
        return {"success": True}

    monkeypatch.setattr(module, "api_request", fake_request)
    module.calls = calls
    return module


def test_api_base_comes_from_settings(monkeypatch):
    monkeypatch.delenv("ARCHGOV_API_BASE", raising=False)
    assert load_server().API_BASE == DEFAULT_API_BASE

    monkeypatch.setenv("ARCHGOV_API_BASE", "http://governance:9000/api")
    assert load_server().API_BASE == "http://governance:9000/api"


def test_validate_forwards_diagram_and_layer(server, example_document):
    result = server.governance_validate(json.dumps(example_document), layer=2)

    assert json.loads(result) == {"success": True}
    method, endpoint, kwargs = server.calls[0]
    assert (method, endpoint) == ("POST", "/validate")
    assert kwargs["json"]["nodes"][0]["id"] == "c1"
    assert kwargs["params"] == {"layer": 2}


def test_validate_without_layer_sends_no_params(server, example_document):
    server.governance_validate(json.dumps(example_document))

    assert server.calls[0][2]["params"] is None


def test_validate_rejects_invalid_json(server):
    with pytest.raises(ValueError, match="not valid JSON"):
        server.governance_validate("{oops")
    assert server.calls == []


def test_layer_guidance(server):
    server.governance_layer_guidance(3)

    assert server.calls == [("GET", "/layers/3", {})]


def test_trace(server, example_document):
    server.governance_trace(json.dumps(example_document), "a1")

    method, endpoint, kwargs = server.calls[0]
    assert (method, endpoint) == ("POST", "/trace/a1")
    assert kwargs["json"]["edges"][0]["id"] == "e1"
