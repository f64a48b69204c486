"""
Process Collapsing

Removes process-step vertices from an end-to-end result, replacing every
resource -> process -> resource pattern with a single condensed edge.
"""

from collections import deque
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

from ..graph.model import CONDENSED_LABEL, Edge, Vertex


class ProcessCollapser:
    """
    Collapses resource-process-resource patterns into direct edges.

    For example, Column -> Process -> Column becomes Column -> Column with the
    `condensed` label. Chains of processes (Process -> SubProcess) collapse
    as one step.
    """

    def __init__(self, process_labels: FrozenSet[str]):
        """
        Args:
            process_labels: Vertex labels treated as process steps
        """
        self.process_labels = frozenset(label.lower() for label in process_labels)

    def is_process(self, vertex: Vertex) -> bool:
        return not vertex.synthetic and vertex.label.lower() in self.process_labels

    def collapse(
        self,
        vertices: Iterable[Vertex],
        edges: Iterable[Edge],
        keep: FrozenSet[str] = frozenset()
    ) -> Tuple[List[Vertex], List[Edge]]:
        """
        Args:
            vertices: All vertices of a result
            edges: All edges of a result
            keep: Node ids that stay even when they are processes

        Returns:
            (vertices without processes, edges with processes bridged)
        """
        vertices = list(vertices)
        edges = list(edges)
        process_ids = {v.node_id for v in vertices if self.is_process(v) and v.node_id not in keep}
        if not process_ids:
            return vertices, edges

        outgoing: Dict[str, List[Edge]] = {}
        for edge in edges:
            outgoing.setdefault(edge.from_id, []).append(edge)

        kept_edges = [
            e for e in edges
            if e.from_id not in process_ids and e.to_id not in process_ids
        ]

        for edge in edges:
            if edge.from_id in process_ids or edge.to_id not in process_ids:
                continue
            for destination in self._resources_behind(edge.to_id, outgoing, process_ids):
                kept_edges.append(Edge(CONDENSED_LABEL, edge.from_id, destination))

        kept_vertices = [v for v in vertices if v.node_id not in process_ids]
        return kept_vertices, kept_edges

    def _resources_behind(
        self,
        process_id: str,
        outgoing: Dict[str, List[Edge]],
        process_ids: Set[str]
    ) -> List[str]:
        """Non-process vertices reachable from a process through process vertices only"""
        found = []
        seen = {process_id}
        stack = deque([process_id])
        while stack:
            current = stack.pop()
            for edge in outgoing.get(current, []):
                target = edge.to_id
                if target in seen:
                    continue
                seen.add(target)
                if target in process_ids:
                    stack.append(target)
                else:
                    found.append(target)
        return found
