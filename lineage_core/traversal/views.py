"""
View and Scope Configuration

Loads views.yaml and resolves a requested view to the edge labels a lineage
scope walks. Also defines the closed set of supported scopes.
"""

import yaml
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from ..errors import InvalidScope, InvalidView
from ..utils import Config


class Scope(str, Enum):
    """Lineage traversal scopes"""
    ULTIMATE_SOURCE = "ultimate-source"
    ULTIMATE_DESTINATION = "ultimate-destination"
    SOURCE_AND_DESTINATION = "source-and-destination"
    END_TO_END = "end-to-end"
    GLOSSARY = "glossary"

    @classmethod
    def parse(cls, value: Union[str, "Scope"]) -> "Scope":
        """
        Accept a Scope, its value ('end-to-end') or its name ('END_TO_END').

        Raises:
            InvalidScope: for anything else
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip()
            for scope in cls:
                if normalized == scope.value or normalized.upper().replace('-', '_') == scope.name:
                    return scope
        raise InvalidScope(value, known=[s.value for s in cls])


@dataclass(frozen=True)
class ResolvedView:
    """
    Edge and vertex labels a single view resolves to.

    `flow_edges` are tried in order; a flow scope uses the first label that
    yields any lineage for the queried vertex.
    """
    name: str
    flow_edges: Tuple[str, ...]
    term_relation_edge: str
    semantic_assignment_edge: str
    process_labels: FrozenSet[str]
    description: str = ""


class ViewResolver:
    """
    Maps view names to ResolvedView entries.

    The mapping is read once at construction and never changes afterwards,
    so a resolver can be shared between concurrent queries.
    """

    def __init__(self, config_path: Optional[Path] = None, config: Optional[Mapping[str, Any]] = None):
        """
        Initialize views from a config file or an already loaded mapping.

        Args:
            config_path: Path to views.yaml. If None, uses Config.VIEWS_PATH.
            config: Parsed configuration; takes precedence over config_path.
        """
        if config is None:
            self.config_path = Path(config_path or Config.VIEWS_PATH)
            config = self._load_config()
        else:
            self.config_path = None

        self.views: Dict[str, ResolvedView] = self._parse_views(config)

    def _load_config(self) -> dict:
        """Load YAML configuration file"""
        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def _parse_views(self, config: Mapping[str, Any]) -> Dict[str, ResolvedView]:
        defaults = config.get('defaults') or {}
        views = {}
        for view_name, view_config in (config.get('views') or {}).items():
            view_config = view_config or {}
            merged = dict(defaults)
            merged.update(view_config)

            flow_edges = merged.get('flow_edges') or merged.get('flow_edge')
            if isinstance(flow_edges, str):
                flow_edges = [flow_edges]

            missing = [
                key for key in ('term_relation_edge', 'semantic_assignment_edge')
                if not merged.get(key)
            ]
            if not flow_edges:
                missing.insert(0, 'flow_edges')
            if missing:
                raise ValueError(f"View {view_name!r} is missing {missing}")

            views[view_name] = ResolvedView(
                name=view_name,
                flow_edges=tuple(flow_edges),
                term_relation_edge=merged['term_relation_edge'],
                semantic_assignment_edge=merged['semantic_assignment_edge'],
                process_labels=frozenset(merged.get('process_labels') or []),
                description=view_config.get('description', '')
            )
        return views

    def resolve(self, view: str) -> ResolvedView:
        """
        Resolve a view name.

        Raises:
            InvalidView: if the view is not configured
        """
        resolved = self.views.get(view) if isinstance(view, str) else None
        if resolved is None:
            raise InvalidView(view, known=self.views.keys())
        return resolved

    def view_names(self) -> List[str]:
        return sorted(self.views)
