"""
Condensed boundary vertices.

A condensed vertex stands between the queried vertex and the ultimate
sources (or destinations) of a partial lineage query, meaning "there is
more lineage in here that was not expanded".
"""

from enum import Enum
from typing import Iterable, List, Tuple

from ..graph.model import (
    CONDENSED_DESTINATION_ID,
    CONDENSED_DISPLAY_NAME,
    CONDENSED_LABEL,
    CONDENSED_SOURCE_ID,
    Edge,
    Vertex,
)


class Direction(str, Enum):
    SOURCE = "source"
    DESTINATION = "destination"


def condensed_vertex(direction: Direction) -> Vertex:
    node_id = CONDENSED_SOURCE_ID if direction == Direction.SOURCE else CONDENSED_DESTINATION_ID
    return Vertex(
        node_id=node_id,
        label=CONDENSED_LABEL,
        display_name=CONDENSED_DISPLAY_NAME,
        guid=None,
        synthetic=True
    )


def condense(queried: Vertex, leaves: Iterable[Vertex], direction: Direction) -> Tuple[Vertex, List[Edge]]:
    """
    Build the condensed vertex for one direction and wire it up.

    Source condensation:       leaf -> condensed-source -> queried
    Destination condensation:  queried -> condensed-destination -> leaf

    Args:
        queried: The vertex the query started from
        leaves: Ultimate sources or destinations; must not be empty
        direction: Which side of the queried vertex is being condensed

    Returns:
        (condensed vertex, condensed edges)
    """
    leaves = list(leaves)
    if not leaves:
        raise ValueError("Cannot condense an empty leaf set")

    condensed = condensed_vertex(direction)
    edges = []

    if direction == Direction.SOURCE:
        edges.append(Edge(CONDENSED_LABEL, condensed.node_id, queried.node_id))
        for leaf in leaves:
            edges.append(Edge(CONDENSED_LABEL, leaf.node_id, condensed.node_id))
    else:
        edges.append(Edge(CONDENSED_LABEL, queried.node_id, condensed.node_id))
        for leaf in leaves:
            edges.append(Edge(CONDENSED_LABEL, condensed.node_id, leaf.node_id))

    return condensed, edges
