"""In-memory graph store for the graphwalk editor.

Provides:
- Vertex and Edge value types
- GraphStore with vertex/edge mutation primitives
- Connect helpers (complete graph or chain over a selection)

Design decisions:
- Vertex identifiers come from a fixed 26-letter alphabet (A-Z)
- At most one edge per unordered vertex pair, checked before insert
- Readers tolerate edges whose endpoints have been removed
"""

from __future__ import annotations

import logging
import random
import string
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase

# Keep new vertices this far away from the canvas border
CANVAS_MARGIN = 30


class GraphError(Exception):
    """Base exception for graph editor errors."""


class IdentifierSpaceExhausted(GraphError):
    """Raised when no free alphabet symbol is left for a new vertex."""


class InsufficientSelection(GraphError):
    """Raised when an operation needs more selected vertices than given."""


class VertexInUseError(GraphError):
    """Raised when a vertex identifier is already taken."""


class ConnectMode(str, Enum):
    """How a selection of vertices is connected."""

    COMPLETE = "complete"
    CHAIN = "chain"


@dataclass
class Vertex:
    """A graph vertex.

    Attributes:
        id: Identifier, one letter of ALPHABET.
        x: Horizontal position on the drawing surface.
        y: Vertical position on the drawing surface.
        color: Display color as #rrggbb.
        label: Display label, the identifier by convention.
    """

    id: str
    x: float
    y: float
    color: str
    label: str


@dataclass(frozen=True)
class Edge:
    """A connection between two vertices.

    Attributes:
        source: Identifier of the first endpoint.
        target: Identifier of the second endpoint.
        directed: Whether the edge only goes from source to target.
    """

    source: str
    target: str
    directed: bool = False

    def joins(self, u: str, v: str) -> bool:
        """Check if this edge connects u and v in either orientation."""
        return (self.source == u and self.target == v) or (self.source == v and self.target == u)

    def touches(self, ids: Iterable[str]) -> bool:
        """Check if either endpoint is in ids."""
        id_set = set(ids)
        return self.source in id_set or self.target in id_set

    def __str__(self) -> str:
        arrow = ">" if self.directed else "-"
        return f"{self.source}{arrow}{self.target}"


def _validate_id(vertex_id: str) -> None:
    """Validate a vertex identifier.

    Raises:
        ValueError: If vertex_id is not a single letter of ALPHABET.
    """
    if not isinstance(vertex_id, str) or len(vertex_id) != 1 or vertex_id not in ALPHABET:
        raise ValueError(f"Vertex id must be one letter A-Z, got {vertex_id!r}")


def random_color(rng: random.Random) -> str:
    """Pick a random #rrggbb color."""
    return f"#{rng.randrange(0x1000000):06x}"


class GraphStore:
    """Vertex and edge collections for one editing session.

    All operations are synchronous. Bulk operations are not transactional:
    each individual add/remove is atomic, and a bulk call applies items in
    order.

    Example usage:
        >>> store = GraphStore()
        >>> a = store.add_vertex()
        >>> b = store.add_vertex()
        >>> store.add_edge(a.id, b.id)
        Edge(source='A', target='B', directed=False)

    Attributes:
        width: Canvas width used to place new vertices.
        height: Canvas height used to place new vertices.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        width: int = 800,
        height: int = 600,
    ) -> None:
        self.width = width
        self.height = height
        self._rng = rng or random.Random()
        self._vertices: dict[str, Vertex] = {}
        self._edges: list[Edge] = []
        self._start_vertex: str | None = None

    # Queries

    @property
    def vertices(self) -> list[Vertex]:
        """Vertices in insertion order."""
        return list(self._vertices.values())

    @property
    def edges(self) -> list[Edge]:
        """Edges in insertion order."""
        return list(self._edges)

    @property
    def start_vertex(self) -> str | None:
        """Designated start vertex for traversals, if any."""
        return self._start_vertex

    @property
    def rng(self) -> random.Random:
        return self._rng

    def vertex_ids(self) -> list[str]:
        return list(self._vertices)

    def has_vertex(self, vertex_id: str) -> bool:
        return vertex_id in self._vertices

    def find_edge(self, u: str, v: str) -> Edge | None:
        """Find the edge joining u and v, ignoring direction.

        Returns:
            The edge, or None if the pair is not connected.
        """
        for edge in self._edges:
            if edge.joins(u, v):
                return edge
        return None

    def has_edge(self, u: str, v: str) -> bool:
        return self.find_edge(u, v) is not None

    def next_free_id(self) -> str | None:
        """Return the first unused letter of the alphabet, or None."""
        for letter in ALPHABET:
            if letter not in self._vertices:
                return letter
        return None

    def __len__(self) -> int:
        return len(self._vertices)

    # Vertex mutations

    def add_vertex(
        self,
        vertex_id: str | None = None,
        *,
        x: float | None = None,
        y: float | None = None,
        color: str | None = None,
    ) -> Vertex:
        """Add a vertex.

        Args:
            vertex_id: Identifier to use. Defaults to the first free letter.
            x: Horizontal position. Random within the canvas if omitted.
            y: Vertical position. Random within the canvas if omitted.
            color: Display color. Random if omitted.

        Returns:
            The created vertex.

        Raises:
            IdentifierSpaceExhausted: If no letter is free.
            VertexInUseError: If vertex_id is already used.
            ValueError: If vertex_id is not a letter A-Z.
        """
        if vertex_id is None:
            vertex_id = self.next_free_id()
            if vertex_id is None:
                raise IdentifierSpaceExhausted(
                    f"No letters left for new vertices ({ALPHABET[0]}-{ALPHABET[-1]})"
                )
        else:
            _validate_id(vertex_id)
            if vertex_id in self._vertices:
                raise VertexInUseError(f"Vertex {vertex_id} already exists")

        if x is None:
            x = self._rng.uniform(CANVAS_MARGIN, max(CANVAS_MARGIN, self.width - CANVAS_MARGIN))
        if y is None:
            y = self._rng.uniform(CANVAS_MARGIN, max(CANVAS_MARGIN, self.height - CANVAS_MARGIN))
        if color is None:
            color = random_color(self._rng)

        vertex = Vertex(id=vertex_id, x=x, y=y, color=color, label=vertex_id)
        self._vertices[vertex_id] = vertex
        logger.debug("Added vertex %s at (%.0f, %.0f)", vertex_id, x, y)
        return vertex

    def remove_vertices(self, ids: Iterable[str]) -> int:
        """Remove vertices and every edge touching them.

        Clears the start vertex if it is among the removed ones.

        Args:
            ids: Identifiers to remove. Unknown ids are ignored.

        Returns:
            Number of vertices removed.
        """
        to_remove = {vertex_id for vertex_id in ids if vertex_id in self._vertices}
        if not to_remove:
            return 0

        for vertex_id in to_remove:
            del self._vertices[vertex_id]
        self._edges = [e for e in self._edges if not e.touches(to_remove)]

        if self._start_vertex in to_remove:
            self._start_vertex = None

        logger.debug("Removed vertices %s", sorted(to_remove))
        return len(to_remove)

    def set_start(self, vertex_id: str | None) -> None:
        """Designate the start vertex for traversals.

        Raises:
            ValueError: If vertex_id is not a vertex of this store.
        """
        if vertex_id is not None and vertex_id not in self._vertices:
            raise ValueError(f"Unknown vertex: {vertex_id}")
        self._start_vertex = vertex_id

    # Edge mutations

    def add_edge(self, source: str, target: str, directed: bool = False) -> Edge | None:
        """Add an edge unless the pair is already connected.

        The existence check ignores direction: A->B blocks B-A and B->A.

        Returns:
            The new edge, or None if the pair was already connected.
        """
        if self.has_edge(source, target):
            return None
        edge = Edge(source, target, directed)
        self._edges.append(edge)
        logger.debug("Added edge %s", edge)
        return edge

    def remove_edges(self, edges: Iterable[Edge]) -> int:
        """Remove the given edges.

        Returns:
            Number of edges removed.
        """
        to_remove = set(edges)
        before = len(self._edges)
        self._edges = [e for e in self._edges if e not in to_remove]
        return before - len(self._edges)

    def connect(self, ids: list[str], mode: ConnectMode = ConnectMode.COMPLETE) -> list[Edge]:
        """Connect a selection of vertices with undirected edges.

        COMPLETE joins every pair, CHAIN joins consecutive ids
        (A-B, B-C, C-D for [A, B, C, D]). Pairs that are already
        connected are left alone.

        Args:
            ids: Selected vertex identifiers, in selection order.
            mode: Connection pattern.

        Returns:
            Newly created edges.

        Raises:
            InsufficientSelection: If fewer than two ids are given.
        """
        if len(ids) < 2:
            raise InsufficientSelection("Select at least 2 vertices to connect")

        if ConnectMode(mode) is ConnectMode.CHAIN:
            pairs = list(zip(ids, ids[1:]))
        else:
            pairs = [(ids[i], ids[j]) for i in range(len(ids)) for j in range(i + 1, len(ids))]

        created: list[Edge] = []
        for u, v in pairs:
            edge = self.add_edge(u, v)
            if edge is not None:
                created.append(edge)
        return created

    def clear(self) -> None:
        """Remove all vertices, edges and the start designation."""
        self._vertices.clear()
        self._edges.clear()
        self._start_vertex = None
