"""
Lineage traversal engine package.

This package provides:
- View resolution and the closed set of lineage scopes
- Cycle-safe traversal for the five lineage scopes
- Condensed boundary vertices for partial results
- Result assembly and process collapsing
"""

from .views import ResolvedView, Scope, ViewResolver
from .engine import LineageEngine

__all__ = ['LineageEngine', 'ResolvedView', 'Scope', 'ViewResolver']
