"""Tests for graphwalk.session module."""

from __future__ import annotations

import random

import pytest

from graphwalk.config import GraphwalkConfig
from graphwalk.matrix import MalformedMatrix
from graphwalk.player import NoTraversalToRepeat
from graphwalk.session import SEQUENCE_PLACEHOLDER, EmptyGraph, GraphSession
from graphwalk.store import (
    ConnectMode,
    Edge,
    GraphError,
    GraphStore,
    IdentifierSpaceExhausted,
    InsufficientSelection,
)
from graphwalk.trace import Backtrack, Jump, Visit


@pytest.fixture
def session(rng: random.Random) -> GraphSession:
    """Create an empty session."""
    return GraphSession(rng=rng)


@pytest.fixture
def abcd(session: GraphSession) -> GraphSession:
    """Create a session with vertices A, B, C, D."""
    for _ in range(4):
        session.add_vertex()
    return session


class TestSessionSetup:
    """Tests for session construction."""

    def test_defaults(self, session: GraphSession) -> None:
        """Test the initial state."""
        assert session.connect_mode is ConnectMode.COMPLETE
        assert session.show_colors is True
        assert session.selection == []
        assert session.last_order is None

    def test_config_applied(self) -> None:
        """Test that config values reach the session."""
        config = GraphwalkConfig(connect_mode="chain", show_colors=False, canvas_width=300)
        session = GraphSession(config)
        assert session.connect_mode is ConnectMode.CHAIN
        assert session.show_colors is False
        assert session.store.width == 300

    def test_empty_graph_error(self) -> None:
        """Test that EmptyGraph is a GraphError."""
        assert issubclass(EmptyGraph, GraphError)


class TestAddVertices:
    """Tests for add_vertices."""

    def test_adds_in_letter_order(self, session: GraphSession) -> None:
        added = session.add_vertices(3)
        assert [v.id for v in added] == ["A", "B", "C"]

    def test_not_enough_letters_adds_nothing(self, session: GraphSession) -> None:
        """Test that a request beyond the free letters leaves the graph as it was."""
        session.add_vertices(25)
        with pytest.raises(IdentifierSpaceExhausted, match="Only 1 letters left"):
            session.add_vertices(2)
        assert len(session.store) == 25
        assert [v.id for v in session.add_vertices(1)] == ["Z"]

    def test_count_must_be_positive(self, session: GraphSession) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            session.add_vertices(0)


class TestSelection:
    """Tests for vertex and edge selection."""

    def test_toggle(self, abcd: GraphSession) -> None:
        """Test that selecting twice deselects."""
        assert abcd.toggle_selection("B") is True
        assert abcd.toggle_selection("A") is True
        assert abcd.selection == ["B", "A"]
        assert abcd.toggle_selection("B") is False
        assert abcd.selection == ["A"]

    def test_unknown_vertex(self, abcd: GraphSession) -> None:
        """Test that only existing vertices can be selected."""
        with pytest.raises(ValueError, match="Unknown vertex"):
            abcd.toggle_selection("Z")

    def test_select_edge(self, abcd: GraphSession) -> None:
        """Test edge selection toggling."""
        abcd.store.add_edge("A", "B")
        assert abcd.select_edge("B", "A") is True
        assert abcd.selected_edges == [Edge("A", "B")]
        assert abcd.select_edge("A", "B") is False
        assert abcd.selected_edges == []

    def test_select_missing_edge(self, abcd: GraphSession) -> None:
        """Test that unconnected pairs cannot be selected."""
        with pytest.raises(ValueError, match="No edge"):
            abcd.select_edge("A", "C")

    def test_clear_selection(self, abcd: GraphSession) -> None:
        abcd.store.add_edge("A", "B")
        abcd.toggle_selection("C")
        abcd.select_edge("A", "B")
        abcd.clear_selection()
        assert abcd.selection == []
        assert abcd.selected_edges == []


class TestConnectSelection:
    """Tests for connect_selection."""

    def test_complete(self, abcd: GraphSession) -> None:
        """Test that complete mode joins every selected pair."""
        for vertex_id in "ABC":
            abcd.toggle_selection(vertex_id)
        created = abcd.connect_selection()
        assert {str(e) for e in created} == {"A-B", "A-C", "B-C"}
        assert abcd.selection == []

    def test_chain(self, abcd: GraphSession) -> None:
        """Test that chain mode follows selection order."""
        abcd.toggle_connect_mode()
        for vertex_id in "DBAC":
            abcd.toggle_selection(vertex_id)
        created = abcd.connect_selection()
        assert [str(e) for e in created] == ["D-B", "B-A", "A-C"]

    def test_insufficient(self, abcd: GraphSession) -> None:
        """Test that one selected vertex is not enough."""
        abcd.toggle_selection("A")
        with pytest.raises(InsufficientSelection):
            abcd.connect_selection()
        assert abcd.selection == ["A"]

    def test_toggles(self, session: GraphSession) -> None:
        """Test mode and color toggles."""
        assert session.toggle_connect_mode() is ConnectMode.CHAIN
        assert session.toggle_connect_mode() is ConnectMode.COMPLETE
        assert session.toggle_colors() is False
        assert session.toggle_colors() is True


class TestDeleteSelected:
    """Tests for delete_selected."""

    def test_edges_and_vertices(self, abcd: GraphSession) -> None:
        """Test that selected edges and vertices are removed."""
        abcd.store.connect(["A", "B", "C", "D"], ConnectMode.CHAIN)
        abcd.select_edge("A", "B")
        abcd.toggle_selection("D")

        assert abcd.delete_selected() == (1, 1)
        assert abcd.store.vertex_ids() == ["A", "B", "C"]
        assert abcd.store.edges == [Edge("B", "C")]
        assert abcd.selection == []
        assert abcd.selected_edges == []

    def test_clears_start(self, abcd: GraphSession) -> None:
        """Test that deleting the start vertex clears it."""
        abcd.toggle_selection("B")
        abcd.set_start_from_selection()
        abcd.delete_selected()
        assert abcd.store.start_vertex is None

    def test_nothing_selected(self, abcd: GraphSession) -> None:
        with pytest.raises(InsufficientSelection, match="Select edges or vertices"):
            abcd.delete_selected()

    def test_empty_graph(self, session: GraphSession) -> None:
        with pytest.raises(EmptyGraph):
            session.delete_selected()


class TestTraversal:
    """Tests for run_traversal, repeat and start selection."""

    def test_empty_graph(self, session: GraphSession) -> None:
        """Test that a traversal needs vertices."""
        with pytest.raises(EmptyGraph, match="Create vertices first"):
            session.run_traversal()

    def test_star(self, abcd: GraphSession) -> None:
        """Test the trace of a star plus an isolated vertex."""
        abcd.store.add_edge("A", "B")
        abcd.store.add_edge("A", "C")

        playback = abcd.run_traversal()

        assert playback.trace == [
            Visit("A"),
            Visit("B"),
            Backtrack("B", "A"),
            Visit("C"),
            Backtrack("C", "A"),
            Jump("D"),
            Visit("D"),
        ]
        assert abcd.last_order == ["A", "B", "C", "D"]
        assert abcd.sequence_text() == "A -> B -> C -> D"

    def test_start_precedence(self, abcd: GraphSession) -> None:
        """Test designated start over selection over first vertex."""
        assert abcd.choose_start() == "A"
        abcd.toggle_selection("C")
        assert abcd.choose_start() == "C"
        abcd.store.set_start("D")
        assert abcd.choose_start() == "D"

    def test_uses_designated_start(self, abcd: GraphSession) -> None:
        abcd.toggle_selection("C")
        abcd.set_start_from_selection()
        abcd.run_traversal()
        assert abcd.last_order is not None
        assert abcd.last_order[0] == "C"

    def test_set_start_needs_selection(self, abcd: GraphSession) -> None:
        with pytest.raises(InsufficientSelection):
            abcd.set_start_from_selection()

    def test_new_run_cancels_previous(self, abcd: GraphSession) -> None:
        """Test that a second run supersedes the first playback."""
        first = abcd.run_traversal()
        first.tick()
        second = abcd.run_traversal()
        assert first.cancelled
        assert first.tick() is None
        assert abcd.player.active is second

    def test_repeat(self, abcd: GraphSession) -> None:
        """Test that repeat replays the last trace."""
        abcd.store.add_edge("A", "B")
        first = abcd.run_traversal()
        replay = abcd.repeat()
        assert first.cancelled
        assert replay.trace == first.trace

    def test_repeat_without_run(self, abcd: GraphSession) -> None:
        with pytest.raises(NoTraversalToRepeat):
            abcd.repeat()

    def test_repeat_falls_back_to_order(self, abcd: GraphSession) -> None:
        """Test that a bare visit order is replayed as visits."""
        abcd.last_order = ["B", "A"]
        playback = abcd.repeat()
        assert playback.trace == [Visit("B"), Visit("A")]

    def test_sequence_placeholder(self, session: GraphSession) -> None:
        assert session.sequence_text() == SEQUENCE_PLACEHOLDER


class TestMatrixAndClear:
    """Tests for the matrix view and clear_all."""

    def test_load_matrix(self, abcd: GraphSession) -> None:
        """Test that a matrix replaces the graph."""
        abcd.toggle_selection("A")
        abcd.store.set_start("A")

        abcd.load_matrix("0 1 0\n1 0 1\n0 1 0")

        assert abcd.store.vertex_ids() == ["A", "B", "C"]
        assert {str(e) for e in abcd.store.edges} == {"A-B", "B-C"}
        assert abcd.selection == []
        assert abcd.store.start_vertex is None

    def test_bad_matrix_keeps_graph(self, abcd: GraphSession) -> None:
        """Test that a malformed matrix leaves the graph untouched."""
        abcd.store.add_edge("A", "B")
        with pytest.raises(MalformedMatrix):
            abcd.load_matrix("0 1\n1")
        assert abcd.store.vertex_ids() == ["A", "B", "C", "D"]
        assert len(abcd.store.edges) == 1

    def test_matrix_text(self, abcd: GraphSession) -> None:
        abcd.store.add_edge("A", "D", directed=True)
        assert abcd.matrix_text() == "0 0 0 1\n0 0 0 0\n0 0 0 0\n0 0 0 0"

    def test_replace_graph_keeps_start(self, session: GraphSession, rng: random.Random) -> None:
        """Test that replace_graph copies vertices, edges and start."""
        other = GraphStore(rng)
        other.add_vertex("B", x=1, y=2, color="#000000")
        other.add_vertex("A")
        other.add_edge("A", "B", directed=True)
        other.set_start("B")

        session.replace_graph(other)

        assert session.store.vertex_ids() == ["B", "A"]
        assert session.store.vertices[0].color == "#000000"
        assert session.store.edges == [Edge("A", "B", directed=True)]
        assert session.store.start_vertex == "B"

    def test_clear_all(self, abcd: GraphSession) -> None:
        """Test that clear_all resets everything."""
        abcd.store.add_edge("A", "B")
        playback = abcd.run_traversal()
        abcd.toggle_selection("A")

        abcd.clear_all()

        assert playback.cancelled
        assert len(abcd.store) == 0
        assert abcd.selection == []
        assert abcd.last_order is None
        with pytest.raises(NoTraversalToRepeat):
            abcd.repeat()
