"""
Tests for the connector adjacency index and cycle detection.
"""
import pytest

from diagramflow.features.components.application.component_factory import ComponentFactory
from diagramflow.features.connectors.domain.connector_graph import (
    AdjacencyIndex,
    find_cycle_path,
    would_create_cycle,
)


@pytest.fixture
def edge():
    factory = ComponentFactory()

    def make(from_id, to_id, contexts=("s1",), connector_id=None):
        return factory.create_connector(from_id, to_id, contexts=list(contexts), id=connector_id)

    return make


# =============================================================================
# AdjacencyIndex
# =============================================================================

class TestAdjacencyIndex:
    """Tests for index construction and lookup."""

    def test_successors_per_context(self, edge):
        """Test edges are only visible in their own contexts."""
        index = AdjacencyIndex([edge("A", "B"), edge("A", "C", contexts=("s2",))])
        assert index.successors("A", "s1") == ["B"]
        assert index.successors("A", "s2") == ["C"]
        assert index.successors("A", "s3") == []

    def test_multi_context_connector(self, edge):
        """Test a connector in several contexts is indexed in each."""
        index = AdjacencyIndex([edge("A", "B", contexts=("s1", "s2"))])
        assert index.successors("A", "s1") == ["B"]
        assert index.successors("A", "s2") == ["B"]
        assert len(index) == 1

    def test_contextless_connectors_under_none(self, edge):
        """Test connectors without context are indexed under None."""
        index = AdjacencyIndex([edge("A", "B", contexts=())])
        assert index.successors("A", None) == ["B"]
        assert index.contexts() == [None]

    def test_exclude_id(self, edge):
        """Test an excluded connector is ignored."""
        index = AdjacencyIndex([edge("A", "B", connector_id="e1"), edge("A", "C", connector_id="e2")])
        assert index.successors("A", "s1", exclude_id="e1") == ["C"]

    def test_non_connectors_are_ignored(self):
        """Test node components are not indexed."""
        factory = ComponentFactory()
        index = AdjacencyIndex([factory.create_process()])
        assert len(index) == 0


# =============================================================================
# Cycle detection
# =============================================================================

class TestCycleDetection:
    """Tests for would_create_cycle/find_cycle_path."""

    def test_closing_a_chain(self, edge):
        """Test A->B, B->C plus C->A is a cycle."""
        index = AdjacencyIndex([edge("A", "B"), edge("B", "C")])
        assert would_create_cycle(index, "C", "A", "s1")
        assert find_cycle_path(index, "C", "A", "s1") == ["C", "A", "B", "C"]

    def test_extending_a_chain(self, edge):
        """Test C->D with D unconnected is not a cycle."""
        index = AdjacencyIndex([edge("A", "B"), edge("B", "C")])
        assert not would_create_cycle(index, "C", "D", "s1")

    def test_two_node_cycle(self, edge):
        """Test reversing an existing edge is a cycle."""
        index = AdjacencyIndex([edge("S", "P")])
        assert find_cycle_path(index, "P", "S", "s1") == ["P", "S", "P"]

    def test_self_loop(self):
        """Test a self loop is a cycle even on an empty index."""
        assert find_cycle_path(AdjacencyIndex(), "A", "A") == ["A", "A"]

    def test_other_context_does_not_count(self, edge):
        """Test edges of another context are not followed."""
        index = AdjacencyIndex([edge("A", "B", contexts=("s2",))])
        assert not would_create_cycle(index, "B", "A", "s1")

    def test_excluded_candidate_does_not_count(self, edge):
        """Test the stored copy of the candidate is ignored."""
        index = AdjacencyIndex([edge("B", "A", connector_id="cand")])
        assert not would_create_cycle(index, "A", "B", "s1", exclude_id="cand")
        assert would_create_cycle(index, "A", "B", "s1")

    def test_diamond_is_acyclic(self, edge):
        """Test shared descendants are pruned, not reported as cycles."""
        index = AdjacencyIndex([edge("A", "B"), edge("A", "C"), edge("B", "D"), edge("C", "D")])
        assert not would_create_cycle(index, "D", "E", "s1")
        assert not would_create_cycle(index, "S", "A", "s1")

    def test_long_chain_is_iterative(self, edge):
        """Test deep graphs do not hit the recursion limit."""
        connectors = [edge(f"n{i}", f"n{i + 1}") for i in range(3000)]
        index = AdjacencyIndex(connectors)
        assert would_create_cycle(index, "n3000", "n0", "s1")
        assert not would_create_cycle(index, "n3000", "end", "s1")
