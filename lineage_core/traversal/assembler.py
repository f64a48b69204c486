"""
Result Assembly

Collects what the walks discovered, deduplicates it and freezes it into a
LineageSubgraph.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Set, Tuple

from ..graph.model import Edge, LineageSubgraph, Vertex


def flatten_properties(properties: Optional[Mapping[str, Any]], prefix: str = "") -> Dict[str, str]:
    """
    Flatten a property map into string key/value pairs.

    Nested mappings become dotted keys, sequences are joined with ', ' and
    None values are dropped.
    """
    flat: Dict[str, str] = {}
    for key, value in (properties or {}).items():
        name = f"{prefix}{key}"
        if value is None:
            continue
        if isinstance(value, Mapping):
            flat.update(flatten_properties(value, prefix=f"{name}."))
        elif isinstance(value, (list, tuple, set, frozenset)):
            flat[name] = ", ".join(str(item) for item in value)
        else:
            flat[name] = str(value)
    return flat


class ResultAssembler:
    """
    Accumulates vertices and edges for a single query.

    Vertices are keyed on (node_id, synthetic) and edges on
    (label, from, to); the first sighting wins. Pinned vertices survive
    display-name filtering. One assembler per query, never shared.
    """

    def __init__(self):
        self._vertices: Dict[Tuple[str, bool], Vertex] = {}
        self._edges: Dict[Tuple[str, str, str], Edge] = {}
        self._pinned: Set[Tuple[str, bool]] = set()

    def __len__(self):
        return len(self._vertices)

    def add_vertex(self, vertex: Vertex, pinned: bool = False):
        if vertex.key not in self._vertices:
            self._vertices[vertex.key] = vertex
        if pinned:
            self._pinned.add(vertex.key)

    def add_vertices(self, vertices: Iterable[Vertex]):
        for vertex in vertices:
            self.add_vertex(vertex)

    def add_edge(self, edge: Edge):
        if edge.key not in self._edges:
            self._edges[edge.key] = edge

    def add_edges(self, edges: Iterable[Edge]):
        for edge in edges:
            self.add_edge(edge)

    def vertices(self) -> Iterable[Vertex]:
        return list(self._vertices.values())

    def edges(self) -> Iterable[Edge]:
        return list(self._edges.values())

    def replace(self, vertices: Iterable[Vertex], edges: Iterable[Edge]):
        """Swap in a rewritten vertex/edge set, e.g. after process collapsing"""
        self._vertices = {v.key: v for v in vertices}
        self._edges = {e.key: e for e in edges}

    def filter_display_name(self, must_contain: str):
        """
        Drop every vertex whose display name does not contain `must_contain`,
        together with every edge touching it. Pinned vertices stay; a condensed
        vertex stays only while at least one of its leaves does.
        """
        removed_ids = set()
        for key, vertex in list(self._vertices.items()):
            if key in self._pinned or vertex.synthetic:
                continue
            if must_contain not in (vertex.display_name or ""):
                removed_ids.add(vertex.node_id)
                del self._vertices[key]
        self._drop_edges_touching(removed_ids)

        pinned_ids = {node_id for node_id, _ in self._pinned}
        orphaned = set()
        for key, vertex in list(self._vertices.items()):
            if not vertex.synthetic:
                continue
            has_leaf = any(
                vertex.node_id in (e.from_id, e.to_id)
                and ({e.from_id, e.to_id} - {vertex.node_id} - pinned_ids)
                for e in self._edges.values()
            )
            if not has_leaf:
                orphaned.add(vertex.node_id)
                del self._vertices[key]
        self._drop_edges_touching(orphaned)

    def _drop_edges_touching(self, node_ids):
        if not node_ids:
            return
        self._edges = {
            key: edge for key, edge in self._edges.items()
            if edge.from_id not in node_ids and edge.to_id not in node_ids
        }

    def build(self, truncated: bool = False) -> LineageSubgraph:
        vertices = tuple(
            Vertex(
                node_id=v.node_id,
                label=v.label,
                display_name=v.display_name,
                guid=v.guid,
                properties=MappingProxyType(flatten_properties(v.properties)),
                synthetic=v.synthetic
            )
            for v in sorted(self._vertices.values(), key=lambda v: (v.synthetic, v.node_id))
        )
        edges = tuple(
            Edge(
                label=e.label,
                from_id=e.from_id,
                to_id=e.to_id,
                properties=MappingProxyType(flatten_properties(e.properties))
            )
            for e in sorted(self._edges.values(), key=lambda e: e.key)
        )
        return LineageSubgraph(vertices=vertices, edges=edges, truncated=truncated)
