"""Graph description files.

Two formats are read:
- YAML documents (.yaml / .yml):

      vertices: [A, B, C]
      edges:
        - {from: A, to: B}
        - {from: B, to: C, directed: true}
        - A-C          # shorthand, "A>C" for a directed edge
      start: A

- Anything else is read as adjacency matrix text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from graphwalk.matrix import decode
from graphwalk.store import Edge, GraphError, GraphStore, VertexInUseError

YAML_SUFFIXES = (".yaml", ".yml")


class GraphFileError(GraphError):
    """Raised when a graph file cannot be interpreted."""


def _parse_edge(entry: Any) -> tuple[str, str, bool]:
    """Read one entry of the edges list.

    Raises:
        GraphFileError: If the entry has neither supported shape.
    """
    if isinstance(entry, str):
        for separator, directed in ((">", True), ("-", False)):
            if separator in entry:
                source, _, target = entry.partition(separator)
                source, target = source.strip(), target.strip()
                if source and target:
                    return source, target, directed
        raise GraphFileError(f"Invalid edge shorthand: {entry!r} (use 'A-B' or 'A>B')")

    if isinstance(entry, dict):
        source = entry.get("from")
        target = entry.get("to")
        if not isinstance(source, str) or not isinstance(target, str):
            raise GraphFileError(f"Edge needs 'from' and 'to' vertex ids: {entry!r}")
        return source, target, bool(entry.get("directed", False))

    raise GraphFileError(f"Invalid edge entry: {entry!r}")


def load_graph_document(data: Any, store: GraphStore | None = None) -> GraphStore:
    """Fill a store from a parsed graph document.

    Vertices mentioned only by edges are created as well.

    Raises:
        GraphFileError: If the document does not describe a graph.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise GraphFileError("Graph document must be a mapping")

    vertices = data.get("vertices") or []
    edges = data.get("edges") or []
    if not isinstance(vertices, list) or not isinstance(edges, list):
        raise GraphFileError("'vertices' and 'edges' must be lists")

    if store is None:
        store = GraphStore()
    store.clear()

    parsed_edges = [_parse_edge(entry) for entry in edges]

    try:
        for vertex_id in vertices:
            store.add_vertex(str(vertex_id))
        for source, target, _ in parsed_edges:
            for vertex_id in (source, target):
                if not store.has_vertex(vertex_id):
                    store.add_vertex(vertex_id)
        for source, target, directed in parsed_edges:
            store.add_edge(source, target, directed)

        start = data.get("start")
        if start is not None:
            store.set_start(str(start))
    except (ValueError, VertexInUseError) as e:
        raise GraphFileError(str(e)) from e

    return store


def load_graph_file(path: Path, store: GraphStore | None = None) -> GraphStore:
    """Load a graph from a YAML document or a matrix text file.

    Args:
        path: File to read.
        store: Store to refill. A new one is created if omitted.

    Returns:
        The filled store.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        GraphFileError: If a YAML file is invalid.
        MalformedMatrix: If a matrix file is empty or not square.
    """
    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise GraphFileError(f"Invalid YAML in {path}: {e}") from e
        return load_graph_document(data, store)

    return decode(text, store)


def graph_to_document(store: GraphStore) -> dict[str, Any]:
    """Build the document form of a graph."""
    document: dict[str, Any] = {
        "vertices": store.vertex_ids(),
        "edges": [_edge_to_dict(edge) for edge in store.edges],
    }
    if store.start_vertex is not None:
        document["start"] = store.start_vertex
    return document


def _edge_to_dict(edge: Edge) -> dict[str, Any]:
    return {"from": edge.source, "to": edge.target, "directed": edge.directed}


def dump_graph(store: GraphStore) -> str:
    """Serialize a graph as a YAML document."""
    return yaml.safe_dump(graph_to_document(store), sort_keys=False, default_flow_style=None)
