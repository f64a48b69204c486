"""Neo4j-backed graph store."""

import logging
from typing import Dict, List, Optional

from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from ..errors import ReservedNodeId, StoreUnavailable
from .model import RESERVED_NODE_IDS, Edge, Vertex
from .store import GraphStore

logger = logging.getLogger(__name__)


def _safe_ident(name: str) -> str:
    """
    Allow only simple Neo4j identifiers for relationship types.
    Prevents Cypher injection when we interpolate them into queries.
    """
    if not name or not all(c.isalnum() or c == "_" for c in name):
        raise ValueError(f"Unsafe identifier: {name!r}")
    return name


class Neo4jGraphStore(GraphStore):
    """
    Reads lineage vertices and edges from Neo4j.

    Vertices are matched on their `id` property. The first Neo4j label is the
    vertex label; `guid` and `displayName`/`name` properties are lifted onto
    the Vertex, everything else stays in its properties.
    """

    def __init__(self, neo4j_uri: str, neo4j_user: str, neo4j_password: str, database: Optional[str] = None):
        """
        Args:
            neo4j_uri: Neo4j connection URI
            neo4j_user: Neo4j username
            neo4j_password: Neo4j password
            database: Optional database name (server default when None)
        """
        self.driver = GraphDatabase.driver(neo4j_uri, auth=(neo4j_user, neo4j_password))
        self.database = database

    def close(self):
        """Close Neo4j driver"""
        self.driver.close()

    def find_vertex(self, node_id: str) -> Optional[Vertex]:
        records = self._run(
            """
            MATCH (n {id: $node_id})
            RETURN n, labels(n)[0] as label
            LIMIT 1
            """,
            node_id=node_id
        )
        if not records:
            return None
        record = records[0]
        return self._to_vertex(dict(record['n']), record['label'])

    def out_edges(self, vertex: Vertex, label: str) -> List[Edge]:
        rel_type = _safe_ident(label)
        records = self._run(
            f"""
            MATCH (n {{id: $node_id}})-[r:`{rel_type}`]->(m)
            RETURN m.id as other_id, properties(r) as props
            ORDER BY other_id
            """,
            node_id=vertex.node_id
        )
        return [
            Edge(label=label, from_id=vertex.node_id, to_id=record['other_id'], properties=record['props'] or {})
            for record in records
        ]

    def in_edges(self, vertex: Vertex, label: str) -> List[Edge]:
        rel_type = _safe_ident(label)
        records = self._run(
            f"""
            MATCH (m)-[r:`{rel_type}`]->(n {{id: $node_id}})
            RETURN m.id as other_id, properties(r) as props
            ORDER BY other_id
            """,
            node_id=vertex.node_id
        )
        return [
            Edge(label=label, from_id=record['other_id'], to_id=vertex.node_id, properties=record['props'] or {})
            for record in records
        ]

    def _run(self, cypher: str, **params) -> list:
        try:
            with self.driver.session(database=self.database) as session:
                return list(session.run(cypher, **params))
        except (DriverError, Neo4jError) as e:
            logger.error("Neo4j read failed: %s", e)
            raise StoreUnavailable(f"Neo4j read failed: {e}") from e

    @staticmethod
    def _to_vertex(props: Dict, label: Optional[str]) -> Vertex:
        label = label or "unknown"
        node_id = str(props.pop('id'))
        if node_id in RESERVED_NODE_IDS:
            raise ReservedNodeId(f"Stored vertex uses reserved node id {node_id!r}")
        guid = props.pop('guid', None)
        display_name = props.pop('displayName', None)
        name = props.pop('name', None)
        display_name = display_name or name or label
        return Vertex(
            node_id=node_id,
            label=label,
            display_name=str(display_name),
            guid=guid,
            properties=props
        )
