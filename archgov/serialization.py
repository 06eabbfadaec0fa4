"""
Diagram JSON import/export.

The editor saves diagrams as a JSON document with `$schema`, `version`,
`meta` and `nodes` at the top level. Documents missing any of them, or that
are not valid JSON, are rejected with `MalformedDiagram`.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import MalformedDiagram
from .models import Diagram

REQUIRED_FIELDS = ("$schema", "version", "meta", "nodes")


def parse_diagram(data: Any) -> Diagram:
    """Build a Diagram from an already-decoded JSON document."""
    if not isinstance(data, dict):
        raise MalformedDiagram("Diagram document must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise MalformedDiagram(f"Diagram document is missing required fields: {', '.join(missing)}")

    try:
        return Diagram.from_json_dict(data)
    except ValidationError as e:
        raise MalformedDiagram(f"Invalid diagram document: {e}") from e


def import_diagram_from_json(text: str) -> Diagram:
    """Parse a diagram from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDiagram(f"Diagram is not valid JSON: {e}") from e
    return parse_diagram(data)


def export_diagram_to_json(diagram: Diagram) -> str:
    """Serialize a diagram with the editor's field names."""
    return json.dumps(diagram.to_json_dict(), indent=2)


def load_diagram_file(file_path: str | Path) -> Diagram:
    """Read and parse a diagram JSON file."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Diagram file not found: {path}")
    return import_diagram_from_json(path.read_text(encoding="utf-8"))
