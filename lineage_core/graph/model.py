"""
Lineage data model.

Vertices and edges as handed over by a graph store, plus the immutable
LineageSubgraph returned by every query.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


CONDENSED_SOURCE_ID = "condensed-source"
CONDENSED_DESTINATION_ID = "condensed-destination"
RESERVED_NODE_IDS = frozenset({CONDENSED_SOURCE_ID, CONDENSED_DESTINATION_ID})

CONDENSED_LABEL = "condensed"
CONDENSED_DISPLAY_NAME = "condensed"


@dataclass(frozen=True)
class Vertex:
    """A single vertex; identity is (node_id, synthetic)"""
    node_id: str
    label: str
    display_name: str = ""
    guid: Optional[str] = None
    properties: Mapping[str, Any] = field(default_factory=dict, compare=False)
    synthetic: bool = False

    @property
    def key(self) -> Tuple[str, bool]:
        return (self.node_id, self.synthetic)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'nodeId': self.node_id,
            'guid': self.guid,
            'label': self.label,
            'displayName': self.display_name,
            'properties': dict(self.properties),
            'synthetic': self.synthetic
        }


@dataclass(frozen=True)
class Edge:
    """A directed, labeled edge; identity is (label, from_id, to_id)"""
    label: str
    from_id: str
    to_id: str
    properties: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.label, self.from_id, self.to_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'from': self.from_id,
            'to': self.to_id,
            'properties': dict(self.properties)
        }


@dataclass(frozen=True)
class LineageSubgraph:
    """Result of one lineage query. Built once by the assembler, never mutated."""
    vertices: Tuple[Vertex, ...] = ()
    edges: Tuple[Edge, ...] = ()
    truncated: bool = False

    @classmethod
    def empty(cls) -> "LineageSubgraph":
        return cls()

    def is_empty(self) -> bool:
        return not self.vertices

    def node_ids(self) -> List[str]:
        """Node ids of every vertex, synthetic ones included"""
        return [v.node_id for v in self.vertices]

    def real_node_ids(self) -> List[str]:
        return [v.node_id for v in self.vertices if not v.synthetic]

    def get_vertex(self, node_id: str) -> Optional[Vertex]:
        for vertex in self.vertices:
            if vertex.node_id == node_id:
                return vertex
        return None

    def edge_keys(self) -> List[Tuple[str, str, str]]:
        return [e.key for e in self.edges]

    def to_dict(self) -> Dict[str, Any]:
        """Response shape handed to the service layer"""
        return {
            'vertices': [v.to_dict() for v in self.vertices],
            'edges': [e.to_dict() for e in self.edges],
            'truncated': self.truncated
        }
