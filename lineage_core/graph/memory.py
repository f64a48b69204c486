"""In-memory graph store backed by a networkx MultiDiGraph."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import networkx as nx
import yaml

from ..errors import DataValidationError, ReservedNodeId
from .model import RESERVED_NODE_IDS, Edge, Vertex
from .store import GraphStore

logger = logging.getLogger(__name__)


class InMemoryGraphStore(GraphStore):
    """
    Lineage graph held in process memory.

    Each edge is stored under its label as the multigraph key, so a pair of
    vertices carries at most one edge per label. Iteration order follows
    insertion order, which keeps walks deterministic.

    Reads take no locks; build the graph first, then share it between queries.
    """

    def __init__(self, graph: Optional[nx.MultiDiGraph] = None):
        if graph is not None:
            reserved = sorted(RESERVED_NODE_IDS.intersection(graph.nodes))
            if reserved:
                raise ReservedNodeId(f"Node ids {reserved} are reserved for condensed vertices")
        self.graph = graph if graph is not None else nx.MultiDiGraph()

    # ---- building ----

    def add_vertex(
        self,
        node_id: str,
        label: str,
        display_name: Optional[str] = None,
        guid: Optional[str] = None,
        properties: Optional[Dict[str, Any]] = None
    ) -> Vertex:
        if node_id in RESERVED_NODE_IDS:
            raise ReservedNodeId(f"Node id {node_id!r} is reserved for condensed vertices")
        if node_id in self.graph:
            raise DataValidationError(f"Duplicate vertex id: {node_id}")

        self.graph.add_node(
            node_id,
            label=label,
            display_name=display_name if display_name is not None else node_id,
            guid=guid,
            properties=dict(properties or {})
        )
        return self._vertex(node_id)

    def add_edge(
        self,
        label: str,
        from_id: str,
        to_id: str,
        properties: Optional[Dict[str, Any]] = None
    ) -> Edge:
        for endpoint in (from_id, to_id):
            if endpoint not in self.graph:
                raise DataValidationError(f"Edge {label} references unknown vertex {endpoint!r}")
        if self.graph.has_edge(from_id, to_id, key=label):
            raise DataValidationError(f"Duplicate edge: {from_id}-[{label}]->{to_id}")

        self.graph.add_edge(from_id, to_id, key=label, properties=dict(properties or {}))
        return Edge(label=label, from_id=from_id, to_id=to_id, properties=dict(properties or {}))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryGraphStore":
        """
        Build a store from fixture data.

        Expected shape:
            assets:
              GlossaryTerm:
                - {id: g1, name: Customer, guid: ...}
            relationships:
              - {type: RelatedTerm, from: g1, to: g2}
        """
        assets = data.get("assets") or {}
        if not isinstance(assets, dict):
            raise DataValidationError("Fixture data must contain 'assets' as a mapping of label -> list[objects].")

        store = cls()
        for label, items in assets.items():
            if not isinstance(items, list):
                raise DataValidationError(f"assets.{label} must be a list")
            for obj in items:
                if not isinstance(obj, dict) or not obj.get("id"):
                    raise DataValidationError(f"assets.{label} contains an object without id: {obj!r}")
                props = {k: v for k, v in obj.items() if k not in ("id", "guid", "name", "displayName")}
                store.add_vertex(
                    node_id=str(obj["id"]),
                    label=label,
                    display_name=obj.get("displayName") or obj.get("name"),
                    guid=obj.get("guid"),
                    properties=props
                )

        rels = data.get("relationships") or []
        if not isinstance(rels, list):
            raise DataValidationError("Fixture data must contain 'relationships' as a list.")
        for r in rels:
            if not isinstance(r, dict) or not r.get("type") or r.get("from") is None or r.get("to") is None:
                raise DataValidationError(f"Relationship missing fields (type/from/to): {r!r}")
            store.add_edge(r["type"], str(r["from"]), str(r["to"]), r.get("properties"))

        logger.debug(
            "Built in-memory lineage graph with %d vertices and %d edges",
            store.graph.number_of_nodes(), store.graph.number_of_edges()
        )
        return store

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "InMemoryGraphStore":
        with open(path, "r") as f:
            return cls.from_dict(yaml.safe_load(f) or {})

    # ---- GraphStore ----

    def find_vertex(self, node_id: str) -> Optional[Vertex]:
        if node_id not in self.graph:
            return None
        return self._vertex(node_id)

    def out_edges(self, vertex: Vertex, label: str) -> List[Edge]:
        if vertex.node_id not in self.graph:
            return []
        return [
            Edge(label=key, from_id=src, to_id=dst, properties=data.get('properties', {}))
            for src, dst, key, data in self.graph.out_edges(vertex.node_id, keys=True, data=True)
            if key == label
        ]

    def in_edges(self, vertex: Vertex, label: str) -> List[Edge]:
        if vertex.node_id not in self.graph:
            return []
        return [
            Edge(label=key, from_id=src, to_id=dst, properties=data.get('properties', {}))
            for src, dst, key, data in self.graph.in_edges(vertex.node_id, keys=True, data=True)
            if key == label
        ]

    def _vertex(self, node_id: str) -> Vertex:
        attrs = self.graph.nodes[node_id]
        return Vertex(
            node_id=node_id,
            label=attrs['label'],
            display_name=attrs['display_name'],
            guid=attrs.get('guid'),
            properties=attrs.get('properties', {})
        )
