"""Provenance and impact lineage queries over a directed property graph."""

from .errors import (
    DataValidationError,
    InvalidScope,
    InvalidView,
    LineageError,
    ReservedNodeId,
    StoreUnavailable,
)
from .graph import Edge, GraphStore, InMemoryGraphStore, LineageSubgraph, Vertex
from .traversal import LineageEngine, Scope, ViewResolver

__version__ = "0.1.0"

__all__ = [
    'DataValidationError',
    'Edge',
    'GraphStore',
    'InMemoryGraphStore',
    'InvalidScope',
    'InvalidView',
    'LineageEngine',
    'LineageError',
    'LineageSubgraph',
    'ReservedNodeId',
    'Scope',
    'StoreUnavailable',
    'Vertex',
    'ViewResolver',
]
