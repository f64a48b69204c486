"""
Tests for the per-query traversal budget and store failure propagation.
"""

import pytest

from lineage_core.errors import StoreUnavailable
from lineage_core.graph.memory import InMemoryGraphStore
from lineage_core.graph.store import GraphStore
from lineage_core.traversal.engine import LineageEngine
from lineage_core.traversal.views import Scope


VIEW = "column-view"


@pytest.fixture(scope="module")
def long_chain():
    """a0 -> a1 -> ... -> a49"""
    store = InMemoryGraphStore()
    for i in range(50):
        store.add_vertex(f"a{i}", "RelationalColumn")
    for i in range(49):
        store.add_edge("ColumnDataFlow", f"a{i}", f"a{i + 1}")
    return store


class FlakyStore(GraphStore):
    """Finds vertices but fails every edge lookup"""

    def __init__(self, inner):
        self.inner = inner

    def find_vertex(self, node_id):
        return self.inner.find_vertex(node_id)

    def out_edges(self, vertex, label):
        raise StoreUnavailable("connection reset")

    def in_edges(self, vertex, label):
        raise StoreUnavailable("connection reset")


class TestWalkBudget:

    def test_end_to_end_truncated_by_node_budget(self, long_chain, resolver):
        engine = LineageEngine(long_chain, resolver, max_nodes=5, max_edges=None)
        result = engine.end_to_end("a0", VIEW)

        assert result.truncated
        assert set(result.node_ids()) == {"a0", "a1", "a2", "a3", "a4"}
        # every returned edge connects returned vertices
        returned = set(result.node_ids())
        for edge in result.edges:
            assert edge.from_id in returned and edge.to_id in returned

    def test_end_to_end_truncated_by_edge_budget(self, long_chain, resolver):
        engine = LineageEngine(long_chain, resolver, max_nodes=None, max_edges=3)
        result = engine.end_to_end("a0", VIEW)

        assert result.truncated
        assert len(result.edges) == 3

    def test_truncated_walk_does_not_condense(self, long_chain, resolver):
        engine = LineageEngine(long_chain, resolver, max_nodes=10, max_edges=None)
        result = engine.ultimate_destination("a0", VIEW)

        assert result.truncated
        assert result.node_ids() == ["a0"]

    def test_budget_large_enough(self, long_chain, resolver):
        engine = LineageEngine(long_chain, resolver, max_nodes=50, max_edges=49)
        result = engine.ultimate_destination("a0", VIEW)

        assert not result.truncated
        assert set(result.node_ids()) == {"a0", "a49", "condensed-destination"}

    def test_budget_is_per_query(self, long_chain, resolver):
        engine = LineageEngine(long_chain, resolver, max_nodes=50, max_edges=None)

        for _ in range(3):
            assert not engine.end_to_end("a25", VIEW).truncated

    def test_truncation_is_logged(self, long_chain, resolver, caplog):
        engine = LineageEngine(long_chain, resolver, max_nodes=2, max_edges=None)
        with caplog.at_level("WARNING", logger="lineage_core.traversal.engine"):
            engine.end_to_end("a0", VIEW)

        assert "truncated" in caplog.text


class TestStoreFailures:

    @pytest.mark.parametrize("scope", list(Scope))
    def test_store_unavailable_propagates(self, long_chain, resolver, scope):
        engine = LineageEngine(FlakyStore(long_chain), resolver)

        with pytest.raises(StoreUnavailable, match="connection reset"):
            engine.query(scope, VIEW, "a10")

    def test_engine_closes_store(self, resolver):
        closed = []

        class ClosingStore(InMemoryGraphStore):
            def close(self):
                closed.append(True)

        with LineageEngine(ClosingStore(), resolver):
            pass

        assert closed == [True]


class TestDanglingEdges:
    """Edges whose far end the store cannot find are skipped"""

    @pytest.fixture
    def hiding_store(self):
        """a -> b -> c, where the store no longer finds a"""

        class HidingStore(InMemoryGraphStore):
            def find_vertex(self, node_id):
                if node_id == "a":
                    return None
                return super().find_vertex(node_id)

        store = HidingStore()
        for node_id in ("a", "b", "c"):
            store.add_vertex(node_id, "RelationalColumn")
        store.add_edge("ColumnDataFlow", "a", "b")
        store.add_edge("ColumnDataFlow", "b", "c")
        return store

    def test_vertex_with_only_dangling_edges_is_a_leaf(self, hiding_store, resolver):
        engine = LineageEngine(hiding_store, resolver)
        result = engine.ultimate_source("c", VIEW)

        assert set(result.node_ids()) == {"b", "c", "condensed-source"}
        assert ("condensed", "b", "condensed-source") in result.edge_keys()

    def test_dangling_edges_are_not_returned(self, hiding_store, resolver):
        engine = LineageEngine(hiding_store, resolver)
        result = engine.end_to_end("c", VIEW)

        assert set(result.node_ids()) == {"b", "c"}
        assert result.edge_keys() == [("ColumnDataFlow", "b", "c")]
