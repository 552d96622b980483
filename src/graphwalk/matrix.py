"""Adjacency matrix text codec.

Matrix text is one row per line, tokens separated by whitespace or commas.
A fully symmetric matrix decodes to undirected edges (upper triangle only),
any other matrix decodes every nonzero entry to a directed edge.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from graphwalk.store import ALPHABET, GraphError, GraphStore, IdentifierSpaceExhausted

_TOKEN_SEPARATOR = re.compile(r"[\s,]+")


class MalformedMatrix(GraphError):
    """Raised when matrix text is empty or not square."""


@dataclass
class MatrixView:
    """Matrix form of a graph.

    Attributes:
        labels: Vertex ids, one per row/column.
        matrix: Square 0/1 rows.
    """

    labels: list[str] = field(default_factory=list)
    matrix: list[list[int]] = field(default_factory=list)


def _parse_token(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        return 0


def parse_matrix(text: str) -> list[list[int]]:
    """Parse matrix text into integer rows.

    Unparsable tokens count as 0.

    Raises:
        MalformedMatrix: If there are no rows or the matrix is not square.
    """
    rows: list[list[int]] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        tokens = [t for t in _TOKEN_SEPARATOR.split(line) if t]
        rows.append([_parse_token(t) for t in tokens])

    if not rows:
        raise MalformedMatrix("Matrix is empty")

    size = len(rows)
    for i, row in enumerate(rows):
        if len(row) != size:
            raise MalformedMatrix(
                f"Matrix must be square: {size} rows but row {i + 1} has {len(row)} values"
            )
    return rows


def is_symmetric(matrix: list[list[int]]) -> bool:
    size = len(matrix)
    return all(matrix[i][j] == matrix[j][i] for i in range(size) for j in range(i + 1, size))


def _circle_position(store: GraphStore, index: int, count: int) -> tuple[float, float]:
    cx = store.width / 2
    cy = store.height / 2
    radius = max(0.0, min(cx, cy) - 60)
    angle = 2 * math.pi * index / count - math.pi / 2
    return cx + radius * math.cos(angle), cy + radius * math.sin(angle)


def decode(text: str, store: GraphStore | None = None) -> GraphStore:
    """Build a graph from matrix text.

    Vertex ids are assigned A, B, C... in row order.

    Args:
        text: Matrix text.
        store: Store to refill. It is cleared first. A new store is created
            if omitted.

    Returns:
        The store holding the decoded graph.

    Raises:
        MalformedMatrix: If the text is empty or not square.
        IdentifierSpaceExhausted: If there are more rows than letters.
    """
    matrix = parse_matrix(text)
    size = len(matrix)
    if size > len(ALPHABET):
        raise IdentifierSpaceExhausted(
            f"Matrix has {size} rows but only {len(ALPHABET)} vertex ids exist"
        )

    if store is None:
        store = GraphStore()
    store.clear()

    labels = list(ALPHABET[:size])
    for index, label in enumerate(labels):
        x, y = _circle_position(store, index, size)
        store.add_vertex(label, x=x, y=y)

    if is_symmetric(matrix):
        for i in range(size):
            for j in range(i + 1, size):
                if matrix[i][j]:
                    store.add_edge(labels[i], labels[j], directed=False)
    else:
        for i in range(size):
            for j in range(size):
                if matrix[i][j]:
                    store.add_edge(labels[i], labels[j], directed=True)

    return store


def encode(store: GraphStore) -> MatrixView:
    """Build the matrix form of a graph, vertices sorted by id."""
    labels = sorted(store.vertex_ids())
    index = {label: i for i, label in enumerate(labels)}
    matrix = [[0] * len(labels) for _ in labels]

    for edge in store.edges:
        i = index.get(edge.source)
        j = index.get(edge.target)
        if i is None or j is None:
            continue
        matrix[i][j] = 1
        if not edge.directed:
            matrix[j][i] = 1

    return MatrixView(labels=labels, matrix=matrix)


def format_matrix(view: MatrixView, with_labels: bool = False) -> str:
    """Render a matrix view as text.

    Args:
        view: Matrix to render.
        with_labels: Add a header row and a label column.

    Returns:
        Rows of space-separated values, newline-joined.
    """
    lines: list[str] = []
    if with_labels:
        lines.append("  " + " ".join(view.labels))
    for label, row in zip(view.labels, view.matrix):
        values = " ".join(str(value) for value in row)
        lines.append(f"{label} {values}" if with_labels else values)
    return "\n".join(lines)
