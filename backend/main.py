"""
Architecture Governance Backend - FastAPI Application

This is the HTTP entry point for the governance core.
It provides:
- Diagram validation producing a governance report
- Layer policy and framework reference lookups
- Traceability, relationship matrix and summary analysis
- CORS configuration for local frontend development
"""
import json
import logging
import math
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from archgov import Diagram, Framework, GovernanceValidator
from archgov.alignment import check_framework_alignment, score_framework_alignment
from archgov.analysis import relationship_matrix, summarize_diagram, trace_dependencies
from archgov.config import configure_logging, get_policy, load_settings
from archgov.errors import MalformedDiagram
from archgov.frameworks import sid_entities_in_group
from archgov.layers import get_layers_for_node_type, layer_guidance, normalize_node_type
from archgov.models import RelationshipType
from archgov.serialization import import_diagram_from_json

logger = logging.getLogger(__name__)

settings = load_settings()
policy = get_policy(settings)
validator = GovernanceValidator(policy)


# --- FastAPI App ---

app = FastAPI(
    title="Architecture Governance API",
    description="Governance and validation backend for the architecture diagram editor",
    version="1.0.0",
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Health Check ---

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "layers": len(policy.layers)}


# --- Validation ---

@app.post("/api/validate")
async def validate(diagram: Diagram, layer: Optional[int] = Query(default=None)):
    """
    Validate a diagram against the governance policy.

    Returns the ordered issues, framework coverage, completeness score
    and a summary by severity.
    """
    report = validator.validate(diagram, current_layer=layer)
    logger.info(
        "Validated diagram %r on layer %s: %s",
        diagram.meta.title, layer, report.get_summary(),
    )
    logger.debug("Governance report: %s", json.dumps(report.to_dict()))
    return {
        "success": True,
        "report": report.to_dict(),
        "summary": report.summary(),
    }


class ImportDiagramRequest(BaseModel):
    content: str


@app.post("/api/diagram/import")
async def import_diagram(request: ImportDiagramRequest):
    """Parse an exported diagram document, rejecting malformed ones."""
    try:
        diagram = import_diagram_from_json(request.content)
    except MalformedDiagram as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "diagram": diagram.to_json_dict()}


@app.post("/api/alignment")
async def framework_alignment(framework: Framework, layer: int = Query(...)):
    """Check framework tags against a layer."""
    verdict = check_framework_alignment(framework, layer, policy)
    tags = score_framework_alignment(framework, layer, policy)
    return {
        "success": True,
        "togafOk": verdict.togaf_ok,
        "etomOk": verdict.etom_ok,
        "tags": [
            {
                "framework": t.framework,
                "tag": t.tag,
                "alignment": t.alignment.value,
                "distance": None if math.isinf(t.distance) else t.distance,
                "suggestedLayers": list(t.suggested_layers),
            }
            for t in tags
        ],
    }


# --- Layer Policy ---

@app.get("/api/layers")
async def list_layers():
    """Guidance for every architecture layer."""
    return {"success": True, "layers": [layer_guidance(l.level, policy) for l in policy.layers]}


@app.get("/api/layers/{level}")
async def get_layer(level: int):
    """Guidance for one layer (unknown levels fall back to L0)."""
    return {"success": True, "layer": layer_guidance(level, policy)}


@app.get("/api/node-types/{node_type}/layers")
async def node_type_layers(node_type: str):
    """Layers where a node type may be placed."""
    return {
        "success": True,
        "type": node_type,
        "normalized": normalize_node_type(node_type, policy),
        "levels": get_layers_for_node_type(node_type, policy),
    }


@app.get("/api/frameworks")
async def list_frameworks():
    """TOGAF phases (in ADM order), eTOM areas, SID entities and relationship types."""
    return {
        "success": True,
        "togafPhases": [
            {"id": p.id, "label": p.label, "ordinal": policy.togaf_order[p.id]}
            for p in policy.togaf_phases
        ],
        "etomAreas": [{"id": a.id, "label": a.label} for a in policy.etom_areas],
        "sidGroups": [
            {
                "id": g.id,
                "label": g.label,
                "entities": [e.id for e in sid_entities_in_group(g.id, policy.sid_entities)],
            }
            for g in policy.sid_groups
        ],
        "relationshipTypes": [r.value for r in RelationshipType],
    }


# --- Analysis ---

@app.post("/api/trace/{node_id}")
async def trace(node_id: str, diagram: Diagram):
    """Upstream and downstream dependencies of a node."""
    if diagram.get_node(node_id) is None:
        raise HTTPException(status_code=404, detail="Node not found")
    return {"success": True, "trace": trace_dependencies(diagram, node_id).to_dict()}


@app.post("/api/matrix/{kind}")
async def matrix(kind: str, diagram: Diagram):
    """Relationship matrix (capability-app, etom-service or app-data)."""
    try:
        result = relationship_matrix(diagram, kind)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown matrix kind: {kind}")
    return {"success": True, "matrix": result.to_dict()}


@app.post("/api/summary")
async def summarize(diagram: Diagram):
    """
    Get a structural summary of a diagram.

    Returns node counts by type, framework tagging, connected components
    and orphan/dangling counts.
    """
    return {"success": True, "summary": summarize_diagram(diagram).to_dict()}


# --- Run with uvicorn ---

def run():
    import uvicorn
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
