"""graphwalk CLI - Main entry point."""

from __future__ import annotations

import json

import typer
from rich.console import Console

from graphwalk import __version__
from graphwalk.cli_utils import (
    connect_mode_option,
    error,
    info,
    interval_option,
    json_option,
    quiet_option,
    read_graph,
    setup_logging,
    warning,
    wire_config,
)
from graphwalk.graph import build_adjacency, traverse
from graphwalk.graph_file import dump_graph, graph_to_document
from graphwalk.matrix import encode, format_matrix
from graphwalk.player import TracePlayer
from graphwalk.render import animate
from graphwalk.session import GraphSession
from graphwalk.shell import GraphShell

app = typer.Typer(
    name="graphwalk",
    help="graphwalk - Graph editor with a step-by-step depth-first traversal visualizer.",
    add_completion=False,
)

# Rich console for output
console = Console()


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _output_info(message: str, quiet: bool = False) -> None:
    """Print an info message."""
    if not quiet:
        console.print(message)


# -----------------------------------------------------------------------------
# Version and Main Callbacks
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"graphwalk version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show debug logging.",
    ),
) -> None:
    """graphwalk - Graph editor with a step-by-step depth-first traversal visualizer."""
    setup_logging(verbose)


# -----------------------------------------------------------------------------
# DFS Command
# -----------------------------------------------------------------------------


@app.command()
def dfs(
    path: str = typer.Argument(
        ...,
        help="Graph file: YAML document (.yaml/.yml) or adjacency matrix text.",
    ),
    start: str | None = typer.Option(
        None,
        "--start",
        "-s",
        help="Start vertex. Defaults to the file's start, then the first vertex.",
    ),
    animate_output: bool = typer.Option(
        False,
        "--animate/--no-animate",
        help="Replay the traversal step by step.",
    ),
    interval: float | None = interval_option(),
    json_output: bool = json_option(),
    quiet: bool = quiet_option(),
) -> None:
    """Run a depth-first traversal over every component of a graph.

    Prints the visit sequence followed by one line per step:
    visits, backtracks and jumps to a new component.
    """
    config = wire_config(interval=interval)
    store = read_graph(path, config)

    if len(store) == 0:
        error("Graph has no vertices")

    if start is not None:
        start = start.upper()
        if not store.has_vertex(start):
            error(f"Unknown start vertex: {start}")
    else:
        ids = store.vertex_ids()
        start = store.start_vertex or ids[0]

    if animate_output and (json_output or quiet):
        warning("--animate has no effect with --json or --quiet")

    result = traverse(build_adjacency(store.edges, store.vertices), start)
    player = TracePlayer()
    playback = player.play(result.trace)

    if json_output:
        log = [frame.log_line for frame in playback.frames()]
        console.print_json(json.dumps({"start": start, **result.to_dict(), "log": log}))
        return

    _output_info(f"Sequence: {' -> '.join(result.order)}", quiet)
    if quiet:
        console.print(" ".join(result.order))
        return

    if animate_output:
        animate(console, store, player, playback, interval=config.interval, show_colors=config.show_colors)
    else:
        for frame in playback.frames():
            console.print(frame.log_line)


# -----------------------------------------------------------------------------
# Matrix Commands
# -----------------------------------------------------------------------------


@app.command("encode")
def encode_cmd(
    path: str = typer.Argument(
        ...,
        help="Graph file: YAML document (.yaml/.yml) or adjacency matrix text.",
    ),
    labels: bool = typer.Option(
        False,
        "--labels",
        "-l",
        help="Print row and column labels.",
    ),
    json_output: bool = json_option(),
) -> None:
    """Print the adjacency matrix of a graph (vertices sorted by id)."""
    config = wire_config()
    store = read_graph(path, config)
    view = encode(store)

    if json_output:
        console.print_json(json.dumps({"labels": view.labels, "matrix": view.matrix}))
        return

    if not view.labels:
        info("(empty graph)")
        return

    typer.echo(format_matrix(view, with_labels=labels))


@app.command("decode")
def decode_cmd(
    path: str = typer.Argument(
        ...,
        help="Adjacency matrix text file.",
    ),
    json_output: bool = json_option(),
) -> None:
    """Convert adjacency matrix text into a YAML graph document.

    A symmetric matrix gives undirected edges, any other matrix gives
    one directed edge per nonzero entry.
    """
    config = wire_config()
    store = read_graph(path, config)

    if json_output:
        console.print_json(json.dumps(graph_to_document(store)))
        return

    typer.echo(dump_graph(store), nl=False)


# -----------------------------------------------------------------------------
# Shell Command
# -----------------------------------------------------------------------------


@app.command()
def shell(
    path: str | None = typer.Argument(
        None,
        help="Optional graph file to start from.",
    ),
    interval: float | None = interval_option(),
    connect_mode: str | None = connect_mode_option(),
    animate_output: bool = typer.Option(
        True,
        "--animate/--no-animate",
        help="Animate traversals in a live view.",
    ),
) -> None:
    """Start an interactive graph editing session.

    Nothing is saved: the graph lives only as long as the session.
    """
    config = wire_config(interval=interval, connect_mode=connect_mode)
    session = GraphSession(config)

    if path is not None:
        session.replace_graph(read_graph(path, config))

    GraphShell(session, console, animate=animate_output).loop()
