"""
Lineage Traversal Engine

Answers provenance and impact questions over a lineage graph using five
fixed scopes. Every walk uses an explicit stack and a request-local visited
set, so cycles are absorbed instead of looping.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional, Union

from ..graph.model import Edge, LineageSubgraph, Vertex
from ..graph.store import GraphStore
from ..utils import Config
from .assembler import ResultAssembler, flatten_properties
from .condensation import Direction, condense
from .process_collapsing import ProcessCollapser
from .views import ResolvedView, Scope, ViewResolver

logger = logging.getLogger(__name__)


@dataclass
class WalkBudget:
    """Per-query cap on discovered vertices and traversed edges"""
    max_nodes: Optional[int]
    max_edges: Optional[int]
    nodes: int = 0
    edges: int = 0
    exhausted: bool = False

    def charge_node(self) -> bool:
        self.nodes += 1
        if self.max_nodes is not None and self.nodes > self.max_nodes:
            self.exhausted = True
        return not self.exhausted

    def charge_edge(self) -> bool:
        self.edges += 1
        if self.max_edges is not None and self.edges > self.max_edges:
            self.exhausted = True
        return not self.exhausted


@dataclass
class WalkResult:
    """What one directional walk discovered"""
    visited: Dict[str, Vertex] = field(default_factory=dict)
    edges: Dict[tuple, Edge] = field(default_factory=dict)
    leaves: List[Vertex] = field(default_factory=list)


class LineageEngine:
    """
    Lineage query engine over a read-only GraphStore.

    The engine keeps no per-query state on itself: visited sets, budgets and
    assemblers are created inside each call, so one engine may serve
    concurrent queries from several threads.
    """

    def __init__(
        self,
        store: GraphStore,
        resolver: Optional[ViewResolver] = None,
        max_nodes: Optional[int] = Config.MAX_NODES,
        max_edges: Optional[int] = Config.MAX_EDGES
    ):
        """
        Initialize the engine.

        Args:
            store: Graph store to read from
            resolver: View resolver; defaults to the bundled views.yaml
            max_nodes: Vertex budget per query (None = unbounded)
            max_edges: Edge budget per query (None = unbounded)
        """
        self.store = store
        self.resolver = resolver or ViewResolver()
        self.max_nodes = max_nodes
        self.max_edges = max_edges

    def close(self):
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ---- public API ----

    def query(
        self,
        scope: Union[str, Scope],
        view: str,
        node_id: str,
        include_processes: bool = True,
        display_name_contains: Optional[str] = None
    ) -> LineageSubgraph:
        """
        Run one lineage query.

        Args:
            scope: One of the Scope values (or its name)
            view: Name of a configured view
            node_id: Node id of the queried vertex
            include_processes: END_TO_END only; False collapses process steps
                into direct `condensed` edges
            display_name_contains: Optional substring every returned vertex's
                display name must contain (queried and condensed vertices are kept)

        Returns:
            LineageSubgraph; empty when the node id does not exist

        Raises:
            InvalidScope / InvalidView: before the store is touched
            StoreUnavailable: if the store fails during the query
        """
        scope = Scope.parse(scope)
        resolved = self.resolver.resolve(view)

        queried = self.store.find_vertex(node_id)
        if queried is None:
            logger.info("Vertex %s not found; returning empty %s lineage", node_id, scope.value)
            return LineageSubgraph.empty()

        budget = WalkBudget(self.max_nodes, self.max_edges)
        budget.charge_node()
        assembler = ResultAssembler()
        assembler.add_vertex(queried, pinned=True)

        if scope == Scope.ULTIMATE_SOURCE:
            self._ultimate(queried, resolved, Direction.SOURCE, budget, assembler)
        elif scope == Scope.ULTIMATE_DESTINATION:
            self._ultimate(queried, resolved, Direction.DESTINATION, budget, assembler)
        elif scope == Scope.SOURCE_AND_DESTINATION:
            self._ultimate(queried, resolved, Direction.SOURCE, budget, assembler)
            self._ultimate(queried, resolved, Direction.DESTINATION, budget, assembler)
        elif scope == Scope.END_TO_END:
            self._end_to_end(queried, resolved, budget, assembler)
            if not include_processes:
                collapser = ProcessCollapser(resolved.process_labels)
                assembler.replace(*collapser.collapse(
                    assembler.vertices(), assembler.edges(), keep=frozenset({queried.node_id})
                ))
        elif scope == Scope.GLOSSARY:
            self._glossary(queried, resolved, budget, assembler)

        if display_name_contains:
            assembler.filter_display_name(display_name_contains)

        if budget.exhausted:
            logger.warning(
                "%s lineage of %s truncated after %d vertices / %d edges",
                scope.value, node_id, budget.nodes, budget.edges
            )

        result = assembler.build(truncated=budget.exhausted)
        logger.debug(
            "%s lineage of %s (%s): %d vertices, %d edges",
            scope.value, node_id, resolved.name, len(result.vertices), len(result.edges)
        )
        return result

    def ultimate_source(self, node_id: str, view: str = Config.DEFAULT_VIEW) -> LineageSubgraph:
        return self.query(Scope.ULTIMATE_SOURCE, view, node_id)

    def ultimate_destination(self, node_id: str, view: str = Config.DEFAULT_VIEW) -> LineageSubgraph:
        return self.query(Scope.ULTIMATE_DESTINATION, view, node_id)

    def source_and_destination(self, node_id: str, view: str = Config.DEFAULT_VIEW) -> LineageSubgraph:
        return self.query(Scope.SOURCE_AND_DESTINATION, view, node_id)

    def end_to_end(self, node_id: str, view: str = Config.DEFAULT_VIEW, include_processes: bool = True) -> LineageSubgraph:
        return self.query(Scope.END_TO_END, view, node_id, include_processes=include_processes)

    def glossary(self, node_id: str, view: str = Config.DEFAULT_VIEW) -> LineageSubgraph:
        return self.query(Scope.GLOSSARY, view, node_id)

    def describe(self, node_id: str) -> Optional[Vertex]:
        """Single vertex with flattened properties, or None if it does not exist"""
        vertex = self.store.find_vertex(node_id)
        if vertex is None:
            return None
        return Vertex(
            node_id=vertex.node_id,
            label=vertex.label,
            display_name=vertex.display_name,
            guid=vertex.guid,
            properties=MappingProxyType(flatten_properties(vertex.properties))
        )

    # ---- scopes ----

    def _ultimate(
        self,
        queried: Vertex,
        resolved: ResolvedView,
        direction: Direction,
        budget: WalkBudget,
        assembler: ResultAssembler
    ):
        """
        Ultimate sources (backward) or destinations (forward) of `queried`.

        Only the queried vertex, the leaves and the condensed vertex are kept;
        intermediate vertices and flow edges are dropped. The view's flow
        labels are tried in order until one of them yields leaves.
        """
        for label in resolved.flow_edges:
            walk = self._walk(queried, label, backward=direction == Direction.SOURCE, budget=budget)
            if walk.leaves:
                condensed, edges = condense(queried, walk.leaves, direction)
                assembler.add_vertices(walk.leaves)
                assembler.add_vertex(condensed)
                assembler.add_edges(edges)
                return
            if budget.exhausted:
                return

    def _end_to_end(self, queried: Vertex, resolved: ResolvedView, budget: WalkBudget, assembler: ResultAssembler):
        """
        Transitive predecessors and successors over the first flow label that
        reaches anything, with every edge touched.
        """
        for label in resolved.flow_edges:
            walks = []
            for backward in (True, False):
                walks.append(self._walk(queried, label, backward=backward, budget=budget))
                if budget.exhausted:
                    break

            if budget.exhausted or any(walk.edges for walk in walks):
                for walk in walks:
                    assembler.add_vertices(walk.visited.values())
                    assembler.add_edges(walk.edges.values())
                return

    def _glossary(self, queried: Vertex, resolved: ResolvedView, budget: WalkBudget, assembler: ResultAssembler):
        """
        Related terms of `queried` plus the data elements assigned to it.

        Only the queried vertex's own semantic assignments are followed; terms
        reached through term relations contribute themselves, not their
        assignments.
        """
        related = self._walk(queried, resolved.term_relation_edge, backward=None, budget=budget)
        assembler.add_vertices(related.visited.values())
        assembler.add_edges(related.edges.values())

        for edge in self.store.in_edges(queried, resolved.semantic_assignment_edge):
            if budget.exhausted or not budget.charge_edge():
                break
            element = self.store.find_vertex(edge.from_id)
            if element is None:
                logger.debug("Skipping dangling %s edge from %s", edge.label, edge.from_id)
                continue
            if not budget.charge_node():
                break
            assembler.add_vertex(element)
            assembler.add_edge(edge)

    # ---- walking ----

    def _walk(self, start: Vertex, label: str, backward: Optional[bool], budget: WalkBudget) -> WalkResult:
        """
        Depth-first walk from `start` over edges with `label`.

        Args:
            start: Starting vertex
            label: Edge label to follow
            backward: True follows in-edges, False out-edges, None both
            budget: Query budget; the walk stops once it is exhausted

        Returns:
            WalkResult. A leaf is a visited vertex other than `start` that
            has no edge to follow in the walk direction, or whose edges all
            point at vertices the store no longer holds.
        """
        result = WalkResult()
        result.visited[start.node_id] = start
        stack = deque([start])

        while stack and not budget.exhausted:
            current = stack.pop()
            step = self._step(current, label, backward)

            if not step:
                if current.node_id != start.node_id:
                    result.leaves.append(current)
                continue

            followed = False
            for edge in step:
                if edge.key in result.edges:
                    followed = True
                    continue
                if not budget.charge_edge():
                    break

                neighbour_id = edge.to_id if edge.from_id == current.node_id else edge.from_id
                if neighbour_id not in result.visited:
                    neighbour = self.store.find_vertex(neighbour_id)
                    if neighbour is None:
                        logger.debug("Skipping dangling %s edge %s -> %s", label, edge.from_id, edge.to_id)
                        continue
                    if not budget.charge_node():
                        break
                    result.visited[neighbour_id] = neighbour
                    stack.append(neighbour)

                result.edges[edge.key] = edge
                followed = True

            # every edge was dangling
            if not followed and not budget.exhausted and current.node_id != start.node_id:
                result.leaves.append(current)

        return result

    def _step(self, vertex: Vertex, label: str, backward: Optional[bool]) -> List[Edge]:
        if backward is None:
            return self.store.in_edges(vertex, label) + self.store.out_edges(vertex, label)
        if backward:
            return self.store.in_edges(vertex, label)
        return self.store.out_edges(vertex, label)
