"""
Graph store contract consumed by the traversal engine.

The engine only ever reads: a vertex lookup and labeled edge lookups in
either direction. Implementations must be deterministic for an unchanged
graph and safe for concurrent reads; any backend failure is raised as
StoreUnavailable.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .model import Edge, Vertex


class GraphStore(ABC):
    """Read-only view over a lineage graph."""

    @abstractmethod
    def find_vertex(self, node_id: str) -> Optional[Vertex]:
        """Return the vertex with this node id, or None when it does not exist."""

    @abstractmethod
    def out_edges(self, vertex: Vertex, label: str) -> List[Edge]:
        """Edges with the given label whose source is `vertex`."""

    @abstractmethod
    def in_edges(self, vertex: Vertex, label: str) -> List[Edge]:
        """Edges with the given label whose target is `vertex`."""

    def close(self):
        """Release backend resources. No-op by default."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
