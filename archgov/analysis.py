"""
Diagram analysis - Traceability, relationship matrices and summaries.

These helpers back the editor's side panels. Like the validator they are
read-only and skip edges whose endpoints do not exist.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .models import Diagram, DiagramEdge, DiagramNode, NodeType
from .validation import find_orphan_nodes


class MatrixKind(str, Enum):
    """Cross-reference matrices the editor can display."""
    CAPABILITY_APP = "capability-app"
    ETOM_SERVICE = "etom-service"
    APP_DATA = "app-data"


UNTYPED_RELATIONSHIP = "linked"


@dataclass
class TraceLink:
    """A neighbouring node reached through one edge."""
    node_id: str
    label: str
    node_type: str
    edge_id: str
    relationship_type: Optional[str] = None
    owner: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "label": self.label,
            "type": self.node_type,
            "edgeId": self.edge_id,
            "relationshipType": self.relationship_type,
            "owner": self.owner,
        }


@dataclass
class Traceability:
    """Upstream and downstream dependencies of one node."""
    node_id: str
    upstream: list[TraceLink] = field(default_factory=list)
    downstream: list[TraceLink] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "upstream": [link.to_dict() for link in self.upstream],
            "downstream": [link.to_dict() for link in self.downstream],
        }


@dataclass
class RelationshipMatrix:
    """Rows x columns of nodes with the relationship type linking each pair."""
    kind: MatrixKind
    rows: list[str] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    cells: dict[tuple[str, str], str] = field(default_factory=dict)

    def get(self, row_id: str, column_id: str) -> Optional[str]:
        return self.cells.get((row_id, column_id))

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "rows": self.rows,
            "columns": self.columns,
            "cells": [
                {"row": row, "column": column, "relationshipType": rel}
                for (row, column), rel in self.cells.items()
            ],
        }


@dataclass
class ConnectedComponent:
    """A connected component in the diagram graph."""
    node_ids: list[str] = field(default_factory=list)
    edge_count: int = 0

    @property
    def size(self) -> int:
        return len(self.node_ids)


@dataclass
class DiagramSummary:
    """Structural overview of a diagram."""
    title: str
    total_nodes: int
    total_edges: int
    nodes_by_type: dict[str, int]
    framework_tagged: int
    untagged: int
    connected_components: int
    orphan_count: int
    dangling_edges: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "total_nodes": self.total_nodes,
            "total_edges": self.total_edges,
            "nodes_by_type": self.nodes_by_type,
            "framework_tagged": self.framework_tagged,
            "untagged": self.untagged,
            "connected_components": self.connected_components,
            "orphan_count": self.orphan_count,
            "dangling_edges": self.dangling_edges,
        }


def _link(node: DiagramNode, edge: DiagramEdge) -> TraceLink:
    return TraceLink(
        node_id=node.id,
        label=node.label,
        node_type=node.type,
        edge_id=edge.id,
        relationship_type=edge.relationship_type,
        owner=node.props.owner,
    )


def trace_dependencies(diagram: Diagram, node_id: str) -> Traceability:
    """
    Collect the nodes feeding into and depending on a node.

    Upstream links come from edges targeting the node, downstream links
    from edges leaving it.
    """
    nodes_by_id = {node.id: node for node in diagram.nodes}
    trace = Traceability(node_id=node_id)

    for edge in diagram.edges:
        if edge.target == node_id and edge.source in nodes_by_id:
            trace.upstream.append(_link(nodes_by_id[edge.source], edge))
        if edge.source == node_id and edge.target in nodes_by_id:
            trace.downstream.append(_link(nodes_by_id[edge.target], edge))

    return trace


def _matrix_axes(diagram: Diagram, kind: MatrixKind) -> tuple[list[DiagramNode], list[DiagramNode]]:
    nodes = diagram.nodes
    if kind == MatrixKind.CAPABILITY_APP:
        return (
            [n for n in nodes if n.type == NodeType.CAPABILITY.value],
            [n for n in nodes if n.type == NodeType.APP.value],
        )
    if kind == MatrixKind.ETOM_SERVICE:
        return (
            [n for n in nodes if n.type == NodeType.PROCESS.value],
            [n for n in nodes if n.framework is not None and "Service" in n.framework.sid],
        )
    return (
        [n for n in nodes if n.type == NodeType.APP.value],
        [n for n in nodes if n.type == NodeType.DATA.value],
    )


def relationship_matrix(diagram: Diagram, kind: MatrixKind | str) -> RelationshipMatrix:
    """
    Cross-reference two node populations.

    A cell holds the relationship type of the first edge linking the pair in
    either direction, or 'linked' when that edge is untyped.
    """
    kind = MatrixKind(kind)
    rows, columns = _matrix_axes(diagram, kind)
    matrix = RelationshipMatrix(
        kind=kind,
        rows=[n.id for n in rows],
        columns=[n.id for n in columns],
    )

    row_ids = set(matrix.rows)
    column_ids = set(matrix.columns)
    for edge in diagram.edges:
        for row_id, column_id in ((edge.source, edge.target), (edge.target, edge.source)):
            if row_id in row_ids and column_id in column_ids:
                matrix.cells.setdefault(
                    (row_id, column_id),
                    edge.relationship_type or UNTYPED_RELATIONSHIP,
                )

    return matrix


def find_connected_components(diagram: Diagram) -> list[ConnectedComponent]:
    """
    Find all connected components in the diagram using BFS.

    Edges are treated as undirected; dangling edges are ignored. Every
    edge between two members counts toward the component, parallel edges
    and self-loops included.
    """
    if not diagram.nodes:
        return []

    node_ids = [n.id for n in diagram.nodes]

    # Build adjacency list (undirected)
    adjacency: dict[str, set[str]] = {nid: set() for nid in node_ids}
    internal_edges: list[DiagramEdge] = []
    for edge in diagram.edges:
        if edge.source in adjacency and edge.target in adjacency:
            adjacency[edge.source].add(edge.target)
            adjacency[edge.target].add(edge.source)
            internal_edges.append(edge)

    visited: set[str] = set()
    components: list[ConnectedComponent] = []

    for start_node in node_ids:
        if start_node in visited:
            continue

        component_nodes: list[str] = []
        queue = [start_node]

        while queue:
            current = queue.pop(0)
            if current in visited:
                continue

            visited.add(current)
            component_nodes.append(current)

            for neighbor in adjacency[current]:
                if neighbor not in visited:
                    queue.append(neighbor)

        # Both ends of an internal edge share a component
        members = set(component_nodes)
        components.append(ConnectedComponent(
            node_ids=component_nodes,
            edge_count=sum(1 for e in internal_edges if e.source in members),
        ))

    return components


def summarize_diagram(diagram: Diagram) -> DiagramSummary:
    """
    Generate a structural summary of a diagram.

    Args:
        diagram: The diagram to summarize

    Returns:
        DiagramSummary object with counts and connectivity figures
    """
    nodes = diagram.nodes
    edges = diagram.edges
    node_ids = {n.id for n in nodes}

    type_counts: dict[str, int] = defaultdict(int)
    for node in nodes:
        type_counts[node.type] += 1

    tagged = sum(1 for n in nodes if n.framework is not None)
    dangling = sum(1 for e in edges if e.source not in node_ids or e.target not in node_ids)

    return DiagramSummary(
        title=diagram.meta.title,
        total_nodes=len(nodes),
        total_edges=len(edges),
        nodes_by_type=dict(type_counts),
        framework_tagged=tagged,
        untagged=len(nodes) - tagged,
        connected_components=len(find_connected_components(diagram)),
        orphan_count=len(find_orphan_nodes(nodes, edges)),
        dangling_edges=dangling,
    )
