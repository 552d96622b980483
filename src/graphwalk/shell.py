"""Interactive graph editing shell.

Reads one command per line and applies it to a GraphSession. Errors are
reported and the shell keeps running; the graph stays usable after any
reported error.
"""

from __future__ import annotations

import shlex
import time
from collections.abc import Callable

from rich.console import Console

from graphwalk.player import Playback
from graphwalk.render import animate, edge_summary, vertex_table
from graphwalk.session import GraphSession
from graphwalk.store import GraphError

PROMPT = "graphwalk> "

HELP_TEXT = """\
Commands:
  add [N]            Add N vertices (default 1)
  select ID...       Toggle vertex selection
  select-edge U V    Toggle selection of the edge between U and V
  deselect           Clear the selection
  connect            Connect the selected vertices (see 'mode')
  mode               Toggle connect mode: complete / chain
  colors             Toggle colored rendering
  delete             Delete selected edges and vertices
  start              Use the first selected vertex as DFS start
  run                Run DFS and animate the trace
  repeat             Replay the last traversal
  matrix [--labels]  Print the adjacency matrix
  load-matrix        Replace the graph with a matrix (end with a blank line)
  show               Show the graph
  clear              Remove everything
  help               Show this help
  quit               Leave the shell"""


class GraphShell:
    """Line-oriented front end for a GraphSession.

    Attributes:
        session: The session being edited.
        console: Rich console for output.
        animate: Replay traversals in a live view instead of printing the log.
    """

    def __init__(
        self,
        session: GraphSession,
        console: Console | None = None,
        *,
        input_func: Callable[[str], str] = input,
        animate: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session
        self.console = console or Console()
        self.animate = animate
        self._input = input_func
        self._sleep = sleep
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "add": self._add,
            "select": self._select,
            "select-edge": self._select_edge,
            "deselect": self._deselect,
            "connect": self._connect,
            "mode": self._mode,
            "colors": self._colors,
            "delete": self._delete,
            "start": self._start,
            "run": self._run,
            "repeat": self._repeat,
            "matrix": self._matrix,
            "load-matrix": self._load_matrix,
            "show": self._show,
            "clear": self._clear,
            "help": self._help,
        }

    # -------------------------------------------------------------------------
    # Loop
    # -------------------------------------------------------------------------

    def loop(self) -> None:
        """Read and run commands until quit or end of input."""
        self.console.print("Type 'help' for commands.")
        while True:
            try:
                line = self._input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            if not self.handle(line):
                break
        self.session.player.cancel()

    def handle(self, line: str) -> bool:
        """Run one command line.

        Returns:
            False if the shell should stop, True otherwise.
        """
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self._error(str(e))
            return True
        if not parts:
            return True

        name, args = parts[0].lower(), parts[1:]
        if name in ("quit", "exit", "q"):
            return False

        command = self._commands.get(name)
        if command is None:
            self._error(f"Unknown command: {name}. Type 'help' for commands.")
            return True

        try:
            command(args)
        except (GraphError, ValueError) as e:
            self._error(str(e))
        return True

    def _error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {message}")

    def _ids(self, args: list[str]) -> list[str]:
        return [a.upper() for a in args]

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def _add(self, args: list[str]) -> None:
        count = int(args[0]) if args else 1
        added = [vertex.id for vertex in self.session.add_vertices(count)]
        self.console.print(f"Added {', '.join(added)}")

    def _select(self, args: list[str]) -> None:
        if not args:
            raise ValueError("Usage: select ID...")
        for vertex_id in self._ids(args):
            self.session.toggle_selection(vertex_id)
        self.console.print(f"Selected: {', '.join(self.session.selection) or '-'}")

    def _select_edge(self, args: list[str]) -> None:
        if len(args) != 2:
            raise ValueError("Usage: select-edge U V")
        u, v = self._ids(args)
        self.session.select_edge(u, v)
        chosen = ", ".join(str(e) for e in self.session.selected_edges) or "-"
        self.console.print(f"Selected edges: {chosen}")

    def _deselect(self, args: list[str]) -> None:
        self.session.clear_selection()
        self.console.print("Selection cleared")

    def _connect(self, args: list[str]) -> None:
        created = self.session.connect_selection()
        if created:
            self.console.print(f"Connected: {', '.join(str(e) for e in created)}")
        else:
            self.console.print("Already connected")

    def _mode(self, args: list[str]) -> None:
        mode = self.session.toggle_connect_mode()
        self.console.print(f"Connect mode: {mode.value}")

    def _colors(self, args: list[str]) -> None:
        enabled = self.session.toggle_colors()
        self.console.print(f"Colors: {'on' if enabled else 'off'}")

    def _delete(self, args: list[str]) -> None:
        edges_removed, vertices_removed = self.session.delete_selected()
        self.console.print(f"Deleted {edges_removed} edge(s), {vertices_removed} vertex(es)")

    def _start(self, args: list[str]) -> None:
        start = self.session.set_start_from_selection()
        self.console.print(f"Start vertex: {start}")

    def _run(self, args: list[str]) -> None:
        self._play(self.session.run_traversal())

    def _repeat(self, args: list[str]) -> None:
        self._play(self.session.repeat())

    def _play(self, playback: Playback) -> None:
        self.console.print(f"Sequence: {' -> '.join(playback.sequence)}")
        if self.animate:
            animate(
                self.console,
                self.session.store,
                self.session.player,
                playback,
                interval=self.session.config.interval,
                show_colors=self.session.show_colors,
                sleep=self._sleep,
            )
        else:
            for frame in playback.frames():
                self.console.print(frame.log_line)

    def _matrix(self, args: list[str]) -> None:
        if not len(self.session.store):
            self.console.print("(empty graph)")
            return
        self.console.print(self.session.matrix_text(with_labels="--labels" in args))

    def _load_matrix(self, args: list[str]) -> None:
        self.console.print("Enter matrix rows, blank line to finish:")
        lines: list[str] = []
        while True:
            try:
                line = self._input("")
            except EOFError:
                break
            if not line.strip():
                break
            lines.append(line)
        store = self.session.load_matrix("\n".join(lines))
        self.console.print(f"Loaded {len(store)} vertices, {len(store.edges)} edges")

    def _show(self, args: list[str]) -> None:
        store = self.session.store
        if not len(store):
            self.console.print("(empty graph)")
            return
        self.console.print(
            vertex_table(store, selection=self.session.selection, show_colors=self.session.show_colors)
        )
        if store.edges:
            self.console.print(edge_summary(store.edges, self.session.selected_edges))
        self.console.print(f"Last sequence: {self.session.sequence_text()}")

    def _clear(self, args: list[str]) -> None:
        self.session.clear_all()
        self.console.print("Cleared")

    def _help(self, args: list[str]) -> None:
        self.console.print(HELP_TEXT, markup=False)
