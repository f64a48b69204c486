#!/usr/bin/env python3
"""Run a lineage query against a YAML fixture graph or Neo4j and print the result as JSON."""
import sys
import json
import logging
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from lineage_core.errors import LineageError
from lineage_core.graph.memory import InMemoryGraphStore
from lineage_core.traversal import LineageEngine, Scope, ViewResolver
from lineage_core.utils import Config


def build_store(args):
    """Open the graph store selected on the command line."""
    if args.graph:
        print(f"📖 Loading graph from {args.graph}...", file=sys.stderr)
        return InMemoryGraphStore.from_yaml(args.graph)

    from lineage_core.graph.neo4j_store import Neo4jGraphStore
    print(f"🔌 Connecting to Neo4j at {Config.NEO4J_URI}...", file=sys.stderr)
    return Neo4jGraphStore(Config.NEO4J_URI, Config.NEO4J_USER, Config.NEO4J_PASSWORD)


def main():
    """Parse arguments, run one query, print the response."""
    parser = argparse.ArgumentParser(description='Query provenance or impact lineage for a single vertex')
    parser.add_argument('node_id', help='Node id of the queried vertex')
    parser.add_argument(
        '--scope',
        choices=[s.value for s in Scope],
        default=Scope.END_TO_END.value,
        help='Lineage scope (default: end-to-end)'
    )
    parser.add_argument('--view', default=Config.DEFAULT_VIEW, help=f'Lineage view (default: {Config.DEFAULT_VIEW})')
    parser.add_argument('--graph', type=Path, default=None, help='YAML fixture graph; Neo4j is used when omitted')
    parser.add_argument('--views', type=Path, default=None, help='Alternative views.yaml')
    parser.add_argument('--exclude-processes', action='store_true', help='Collapse process steps (end-to-end only)')
    parser.add_argument('--name-contains', default=None, help='Keep only vertices whose display name contains this text')
    parser.add_argument('--max-nodes', type=int, default=Config.MAX_NODES, help='Vertex budget per query')
    parser.add_argument('--max-edges', type=int, default=Config.MAX_EDGES, help='Edge budget per query')
    args = parser.parse_args()

    logging.basicConfig(level=Config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        resolver = ViewResolver(args.views)
        with LineageEngine(build_store(args), resolver, max_nodes=args.max_nodes, max_edges=args.max_edges) as engine:
            result = engine.query(
                args.scope,
                args.view,
                args.node_id,
                include_processes=not args.exclude_processes,
                display_name_contains=args.name_contains
            )
    except LineageError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    if result.is_empty():
        print(f"⚠️  Nothing found for {args.node_id}", file=sys.stderr)
    elif result.truncated:
        print("⚠️  Result truncated by the query budget", file=sys.stderr)

    print(json.dumps(result.to_dict(), indent=2))


if __name__ == '__main__':
    main()
