"""Editing session for the graphwalk host application.

GraphSession is the explicit context the host owns: the graph store, the
current selection, the connect mode and the trace player. Every user-level
editor action is a method here; errors are raised as GraphError subclasses
for the host to report.
"""

from __future__ import annotations

import logging
import random

from graphwalk.config import GraphwalkConfig
from graphwalk.graph import build_adjacency, traverse
from graphwalk.matrix import decode, encode, format_matrix
from graphwalk.player import NoTraversalToRepeat, Playback, TracePlayer
from graphwalk.store import (
    ALPHABET,
    ConnectMode,
    Edge,
    GraphError,
    GraphStore,
    IdentifierSpaceExhausted,
    InsufficientSelection,
    Vertex,
)

logger = logging.getLogger(__name__)

SEQUENCE_PLACEHOLDER = "(the traversal sequence will appear here)"


class EmptyGraph(GraphError):
    """Raised when an operation needs graph data and there is none."""


class GraphSession:
    """State of one editor session.

    Attributes:
        config: Settings the session was created with.
        store: Vertices, edges and start vertex.
        player: Trace player for traversal animations.
        selection: Selected vertex ids, in selection order.
        selected_edges: Selected edges.
        connect_mode: How connect_selection() joins the selection.
        show_colors: Whether vertices are rendered in color.
        last_order: Visit order of the last traversal.
    """

    def __init__(self, config: GraphwalkConfig | None = None, rng: random.Random | None = None) -> None:
        self.config = config or GraphwalkConfig()
        self.store = GraphStore(
            rng,
            width=self.config.canvas_width,
            height=self.config.canvas_height,
        )
        self.player = TracePlayer()
        self.selection: list[str] = []
        self.selected_edges: list[Edge] = []
        self.connect_mode = ConnectMode(self.config.connect_mode)
        self.show_colors = self.config.show_colors
        self.last_order: list[str] | None = None

    # Vertices and selection

    def add_vertex(self) -> Vertex:
        return self.store.add_vertex()

    def add_vertices(self, count: int) -> list[Vertex]:
        """Add count vertices, or none if there are not enough free letters.

        Raises:
            ValueError: If count is less than 1.
            IdentifierSpaceExhausted: If fewer than count letters are free.
        """
        if count < 1:
            raise ValueError("Count must be at least 1")
        free = len(ALPHABET) - len(self.store)
        if count > free:
            raise IdentifierSpaceExhausted(f"Only {free} letters left for new vertices")
        return [self.store.add_vertex() for _ in range(count)]

    def toggle_selection(self, vertex_id: str) -> bool:
        """Select or deselect a vertex.

        Returns:
            True if the vertex is now selected.

        Raises:
            ValueError: If the vertex does not exist.
        """
        if not self.store.has_vertex(vertex_id):
            raise ValueError(f"Unknown vertex: {vertex_id}")
        if vertex_id in self.selection:
            self.selection.remove(vertex_id)
            return False
        self.selection.append(vertex_id)
        return True

    def select_edge(self, u: str, v: str) -> bool:
        """Select or deselect the edge joining u and v.

        Returns:
            True if the edge is now selected.

        Raises:
            ValueError: If u and v are not connected.
        """
        edge = self.store.find_edge(u, v)
        if edge is None:
            raise ValueError(f"No edge between {u} and {v}")
        if edge in self.selected_edges:
            self.selected_edges.remove(edge)
            return False
        self.selected_edges.append(edge)
        return True

    def clear_selection(self) -> None:
        self.selection = []
        self.selected_edges = []

    # Editing

    def connect_selection(self) -> list[Edge]:
        """Connect the selected vertices using the current connect mode.

        The selection is cleared afterwards.

        Returns:
            Newly created edges.

        Raises:
            InsufficientSelection: If fewer than 2 vertices are selected.
        """
        created = self.store.connect(self.selection, self.connect_mode)
        self.selection = []
        return created

    def toggle_connect_mode(self) -> ConnectMode:
        if self.connect_mode is ConnectMode.COMPLETE:
            self.connect_mode = ConnectMode.CHAIN
        else:
            self.connect_mode = ConnectMode.COMPLETE
        return self.connect_mode

    def toggle_colors(self) -> bool:
        self.show_colors = not self.show_colors
        return self.show_colors

    def delete_selected(self) -> tuple[int, int]:
        """Delete selected edges, then selected vertices with their edges.

        Returns:
            Tuple of (edges_removed, vertices_removed). Edges removed by the
            vertex cascade are not counted.

        Raises:
            EmptyGraph: If the graph has no vertices.
            InsufficientSelection: If nothing is selected.
        """
        if len(self.store) == 0:
            raise EmptyGraph("The graph is empty; nothing to delete")
        if not self.selected_edges and not self.selection:
            raise InsufficientSelection("Select edges or vertices first")

        edges_removed = 0
        if self.selected_edges:
            edges_removed = self.store.remove_edges(self.selected_edges)
            self.selected_edges = []

        vertices_removed = 0
        if self.selection:
            vertices_removed = self.store.remove_vertices(self.selection)
            self.selection = []

        return edges_removed, vertices_removed

    def set_start_from_selection(self) -> str:
        """Make the first selected vertex the traversal start.

        Raises:
            InsufficientSelection: If no vertex is selected.
        """
        if not self.selection:
            raise InsufficientSelection("Select a vertex to use as the start")
        self.store.set_start(self.selection[0])
        return self.selection[0]

    # Traversal

    def choose_start(self) -> str | None:
        """Pick the traversal start.

        The designated start vertex wins, then the first selected vertex,
        then the first vertex created.
        """
        if self.store.start_vertex is not None:
            return self.store.start_vertex
        if self.selection:
            return self.selection[0]
        ids = self.store.vertex_ids()
        return ids[0] if ids else None

    def run_traversal(self) -> Playback:
        """Traverse the graph and start playing the trace.

        Returns:
            The new playback. Any running playback is cancelled.

        Raises:
            EmptyGraph: If there are no vertices.
        """
        if len(self.store) == 0:
            raise EmptyGraph("Create vertices first")

        adjacency = build_adjacency(self.store.edges, self.store.vertices)
        start = self.choose_start()
        result = traverse(adjacency, start)
        if not result.order:
            raise EmptyGraph("No traversal produced; check the connections")

        logger.debug("DFS order from %s: %s", start, result.order)
        self.last_order = list(result.order)
        return self.player.play(result.trace)

    def repeat(self) -> Playback:
        """Replay the last traversal.

        Falls back to the last visit order when no trace is recorded.

        Raises:
            NoTraversalToRepeat: If nothing ran yet.
        """
        if self.player.last_trace:
            return self.player.repeat()
        if self.last_order:
            return self.player.play(self.last_order)
        raise NoTraversalToRepeat("No animation to repeat")

    def sequence_text(self) -> str:
        if not self.last_order:
            return SEQUENCE_PLACEHOLDER
        return " -> ".join(self.last_order)

    # Matrix view

    def replace_graph(self, other: GraphStore) -> GraphStore:
        """Replace the graph with a copy of another store's graph.

        Selections are cleared and any running playback is cancelled.
        """
        self.player.cancel()
        self.clear_selection()
        self.store.clear()
        for vertex in other.vertices:
            self.store.add_vertex(vertex.id, x=vertex.x, y=vertex.y, color=vertex.color)
        for edge in other.edges:
            self.store.add_edge(edge.source, edge.target, edge.directed)
        if other.start_vertex is not None:
            self.store.set_start(other.start_vertex)
        return self.store

    def load_matrix(self, text: str) -> GraphStore:
        """Replace the graph with one decoded from matrix text.

        Raises:
            MalformedMatrix: If the text is empty or not square.
            IdentifierSpaceExhausted: If the matrix has more than 26 rows.
        """
        # Decode into a scratch store so a bad matrix leaves the graph intact
        scratch = GraphStore(self.store.rng, width=self.store.width, height=self.store.height)
        decode(text, scratch)
        return self.replace_graph(scratch)

    def matrix_text(self, with_labels: bool = False) -> str:
        return format_matrix(encode(self.store), with_labels=with_labels)

    def clear_all(self) -> None:
        """Stop playback and reset the whole session."""
        self.player.reset()
        self.store.clear()
        self.clear_selection()
        self.last_order = None
