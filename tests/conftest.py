"""
Pytest configuration and fixtures for lineage engine tests.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from lineage_core.graph.memory import InMemoryGraphStore
from lineage_core.traversal.engine import LineageEngine
from lineage_core.traversal.views import ViewResolver


FLOW = "ColumnDataFlow"
RELATED = "RelatedTerm"
ASSIGNED = "SemanticAssignment"

SCENARIO_A_COLUMNS = ["c11", "c12", "c21", "c22", "c31", "c32", "c41", "c42"]
SCENARIO_A_PROCESSES = ["p1", "p2", "p3", "p4"]


def build_scenario_a() -> InMemoryGraphStore:
    """
    c11,c12 -> p1 -> c21,c22 -> p2 -> c31,c32
    c31,c32 -> p3 -> c21,c22   (cycle)
    c31,c32 -> p4 -> c41,c42
    """
    store = InMemoryGraphStore()
    for node_id in SCENARIO_A_COLUMNS:
        store.add_vertex(node_id, "RelationalColumn", display_name=f"column {node_id}")
    for node_id in SCENARIO_A_PROCESSES:
        store.add_vertex(node_id, "Process", display_name=f"process {node_id}")

    flows = [
        ("c11", "p1"), ("c12", "p1"), ("p1", "c21"), ("p1", "c22"),
        ("c21", "p2"), ("c22", "p2"), ("p2", "c31"), ("p2", "c32"),
        ("c31", "p3"), ("c32", "p3"), ("p3", "c21"), ("p3", "c22"),
        ("c31", "p4"), ("c32", "p4"), ("p4", "c41"), ("p4", "c42"),
    ]
    for src, dst in flows:
        store.add_edge(FLOW, src, dst)
    return store


def build_scenario_b() -> InMemoryGraphStore:
    """Glossary triangle g1-g2-g3 with c1->g1, c2->g2, c3->g3 assignments"""
    store = InMemoryGraphStore()
    for node_id in ("g1", "g2", "g3"):
        store.add_vertex(node_id, "GlossaryTerm", display_name=f"term {node_id}")
    for node_id in ("c1", "c2", "c3"):
        store.add_vertex(node_id, "RelationalColumn", display_name=f"column {node_id}")

    store.add_edge(RELATED, "g1", "g2")
    store.add_edge(RELATED, "g2", "g3")
    store.add_edge(RELATED, "g3", "g1")
    store.add_edge(ASSIGNED, "c1", "g1")
    store.add_edge(ASSIGNED, "c2", "g2")
    store.add_edge(ASSIGNED, "c3", "g3")
    return store


def build_pure_cycle() -> InMemoryGraphStore:
    """x -> y -> z -> x with nothing feeding in or out"""
    store = InMemoryGraphStore()
    for node_id in ("x", "y", "z"):
        store.add_vertex(node_id, "RelationalColumn")
    store.add_edge(FLOW, "x", "y")
    store.add_edge(FLOW, "y", "z")
    store.add_edge(FLOW, "z", "x")
    return store


@pytest.fixture(scope="session")
def resolver():
    """Views from the bundled views.yaml"""
    return ViewResolver()


@pytest.fixture(scope="session")
def scenario_a():
    return build_scenario_a()


@pytest.fixture(scope="session")
def scenario_b():
    return build_scenario_b()


@pytest.fixture(scope="session")
def pure_cycle():
    return build_pure_cycle()


@pytest.fixture
def engine_a(scenario_a, resolver):
    return LineageEngine(scenario_a, resolver, max_nodes=None, max_edges=None)


@pytest.fixture
def engine_b(scenario_b, resolver):
    return LineageEngine(scenario_b, resolver, max_nodes=None, max_edges=None)


@pytest.fixture
def cycle_engine(pure_cycle, resolver):
    return LineageEngine(pure_cycle, resolver, max_nodes=None, max_edges=None)
