"""Rich rendering of graphs and traversal playback."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from graphwalk.player import Frame, Playback, TracePlayer
from graphwalk.store import Edge, GraphStore

HIGHLIGHT_STYLE = "bold black on gold1"
START_STYLE = "bold dodger_blue1"
SELECTED_STYLE = "bold green"


def vertex_table(
    store: GraphStore,
    *,
    highlighted: str | None = None,
    selection: Iterable[str] = (),
    show_colors: bool = True,
    title: str = "Vertices",
) -> Table:
    """Build a table of vertices with their neighbors and markers."""
    selected = set(selection)
    table = Table(title=title)
    table.add_column("Vertex", justify="center")
    table.add_column("Color")
    table.add_column("Edges")
    table.add_column("Marks")

    for vertex in store.vertices:
        label = Text(vertex.label)
        if vertex.id == highlighted:
            label.stylize(HIGHLIGHT_STYLE)
        elif show_colors:
            label.stylize(f"bold {vertex.color}")

        edges = [str(e) for e in store.edges if vertex.id in (e.source, e.target)]
        marks: list[str] = []
        if vertex.id == store.start_vertex:
            marks.append(f"[{START_STYLE}]start[/]")
        if vertex.id in selected:
            marks.append(f"[{SELECTED_STYLE}]selected[/]")

        table.add_row(
            label,
            vertex.color if show_colors else "-",
            ", ".join(edges) or "-",
            " ".join(marks),
        )

    return table


def edge_summary(edges: Iterable[Edge], selected: Iterable[Edge] = ()) -> Text:
    """One line listing all edges, selected ones highlighted."""
    chosen = set(selected)
    text = Text()
    for i, edge in enumerate(edges):
        if i:
            text.append(", ")
        text.append(str(edge), style="bold red" if edge in chosen else "")
    return text


def playback_view(
    store: GraphStore,
    frame: Frame | None,
    log: list[str],
    *,
    show_colors: bool = True,
    log_lines: int = 12,
) -> Group:
    """Renderable for one playback tick: the graph plus the recent log."""
    highlighted = frame.highlighted if frame is not None else None
    table = vertex_table(store, highlighted=highlighted, show_colors=show_colors, title="DFS")
    recent = "\n".join(log[-log_lines:]) or "-"
    return Group(table, Panel(recent, title="Steps", expand=False))


def animate(
    console: Console,
    store: GraphStore,
    player: TracePlayer,
    playback: Playback,
    *,
    interval: float,
    show_colors: bool = True,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Replay a playback in a live-updating view.

    Returns:
        Number of frames shown.
    """
    with Live(
        playback_view(store, None, [], show_colors=show_colors),
        console=console,
        refresh_per_second=max(4, int(1 / interval) + 1),
        transient=False,
    ) as live:

        def show(frame: Frame) -> None:
            live.update(playback_view(store, frame, playback.log, show_colors=show_colors))

        shown = player.run(playback, show, interval=interval, sleep=sleep)
        # Clear the highlight once the trace is done
        live.update(playback_view(store, None, playback.log, show_colors=show_colors))
    return shown
