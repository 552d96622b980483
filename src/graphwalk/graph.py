"""Graph operations for graphwalk traversals.

Provides functions for:
- Adjacency construction from vertex/edge collections
- Full-coverage depth-first traversal with a step trace

Design decisions:
- Uses an iterative algorithm with an explicit stack, no recursion
- Neighbor lists are sorted so traversals are deterministic
- Handles dangling edge endpoints gracefully (skipped, never an error)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from graphwalk.store import Edge, Vertex
from graphwalk.trace import Backtrack, Jump, TraceStep, TraversalResult, Visit

logger = logging.getLogger(__name__)


def build_adjacency(
    edges: Iterable[Edge],
    vertices: Iterable[Vertex | str],
) -> dict[str, list[str]]:
    """Build the neighbor mapping used by traversals.

    Every vertex gets an entry, in the order given, even without edges.
    Undirected edges are listed from both endpoints, directed edges only
    from their source.

    Args:
        edges: Edges of the graph.
        vertices: Vertices (or their ids) defining the key set.

    Returns:
        Dictionary mapping each vertex id to its sorted neighbor ids.
    """
    adjacency: dict[str, list[str]] = {}
    for vertex in vertices:
        vertex_id = vertex if isinstance(vertex, str) else vertex.id
        adjacency[vertex_id] = []

    for edge in edges:
        # Skip edges left over from removed vertices
        if edge.source not in adjacency or edge.target not in adjacency:
            continue
        adjacency[edge.source].append(edge.target)
        if not edge.directed:
            adjacency[edge.target].append(edge.source)

    for neighbors in adjacency.values():
        neighbors.sort()

    return adjacency


def traverse(adjacency: dict[str, list[str]], start: str | None) -> TraversalResult:
    """Depth-first traversal covering every vertex of the mapping.

    Starts at start (skipped if None or not a key), then starts a new
    traversal from each still unvisited key, in mapping order, emitting a
    Jump step before each of those. Within a traversal, each node emits a
    Visit, and every child subtree is followed by a Backtrack to its parent.

    Args:
        adjacency: Neighbor mapping as returned by build_adjacency().
        start: Identifier to start from.

    Returns:
        TraversalResult with the visit order and the full trace. Both are
        empty when the mapping is empty.
    """
    visited: set[str] = set()
    order: list[str] = []
    trace: list[TraceStep] = []

    def visit(node: str) -> Iterator[str]:
        trace.append(Visit(node))
        visited.add(node)
        order.append(node)
        return iter(adjacency.get(node, []))

    def explore(root: str) -> None:
        stack: list[tuple[str, Iterator[str]]] = [(root, visit(root))]
        while stack:
            node, neighbors = stack[-1]
            for neighbor in neighbors:
                if neighbor not in visited:
                    stack.append((neighbor, visit(neighbor)))
                    break
            else:
                stack.pop()
                if stack:
                    trace.append(Backtrack(node, stack[-1][0]))

    if start is not None and start in adjacency:
        explore(start)
    elif start is not None:
        logger.debug("Start vertex %s is not in the graph; covering components in order", start)

    for node in adjacency:
        if node not in visited:
            trace.append(Jump(node))
            explore(node)

    logger.debug("Traversal from %s visited %s", start, order)
    return TraversalResult(order=order, trace=trace)
