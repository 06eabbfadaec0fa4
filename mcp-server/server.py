#!/usr/bin/env python3
"""
Architecture Governance MCP Server

Provides MCP tools for AI agents to validate architecture diagrams and
look up layer guidance. Every tool forwards to the governance backend.
"""

import json
from typing import Optional

import httpx
from mcp.server.fastmcp import FastMCP

from archgov.config import load_settings

# Backend API URL
API_BASE = load_settings().api_base

# Create MCP server
mcp = FastMCP("architecture-governance")


# --- HTTP Client Helper ---

def api_request(method: str, endpoint: str, **kwargs) -> dict:
    """Make a request to the governance backend."""
    url = f"{API_BASE}{endpoint}"
    with httpx.Client(timeout=30.0) as client:
        if method == "GET":
            response = client.get(url, params=kwargs.get("params"))
        elif method == "POST":
            response = client.post(url, json=kwargs.get("json"), params=kwargs.get("params"))
        else:
            raise ValueError(f"Unknown method: {method}")

        if response.status_code >= 400:
            error = response.json().get("detail", "Unknown error")
            raise RuntimeError(f"API error: {error}")

        return response.json()


def _load_diagram(diagram_json: str) -> dict:
    try:
        return json.loads(diagram_json)
    except json.JSONDecodeError as e:
        raise ValueError(f"diagram_json is not valid JSON: {e}") from e


# ============================================================================
# GOVERNANCE TOOLS
# ============================================================================

@mcp.tool()
def governance_validate(diagram_json: str, layer: Optional[int] = None) -> str:
    """
    Validate an architecture diagram against the governance rules.

    Args:
        diagram_json: The diagram document as JSON (nodes and edges)
        layer: Active architecture layer 0-4; enables layer/type and
               TOGAF/eTOM alignment checks when given

    Returns the ordered issues, framework coverage and completeness score.
    """
    params = {"layer": layer} if layer is not None else None
    result = api_request("POST", "/validate", json=_load_diagram(diagram_json), params=params)
    return json.dumps(result, indent=2)


@mcp.tool()
def governance_layer_guidance(level: int) -> str:
    """
    Get guidance for an architecture layer.

    Args:
        level: Layer level (0 Enterprise, 1 Capability & Process,
               2 Application & Data, 3 Technology, 4 Runtime)

    Returns recommended and discouraged node types, containers and the
    TOGAF/eTOM elements native to the layer.
    """
    result = api_request("GET", f"/layers/{level}")
    return json.dumps(result, indent=2)


@mcp.tool()
def governance_trace(diagram_json: str, node_id: str) -> str:
    """
    List what a node depends on and what depends on it.

    Args:
        diagram_json: The diagram document as JSON
        node_id: ID of the node to trace
    """
    result = api_request("POST", f"/trace/{node_id}", json=_load_diagram(diagram_json))
    return json.dumps(result, indent=2)


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    mcp.run()
