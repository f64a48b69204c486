"""
Graph model and store adapters.

This package provides:
- Vertex / Edge / LineageSubgraph data model
- The GraphStore read contract
- In-memory (networkx) and Neo4j store implementations
"""

from .model import (
    CONDENSED_DESTINATION_ID,
    CONDENSED_SOURCE_ID,
    Edge,
    LineageSubgraph,
    Vertex,
)
from .store import GraphStore
from .memory import InMemoryGraphStore

__all__ = [
    'CONDENSED_DESTINATION_ID',
    'CONDENSED_SOURCE_ID',
    'Edge',
    'GraphStore',
    'InMemoryGraphStore',
    'LineageSubgraph',
    'Vertex',
]
