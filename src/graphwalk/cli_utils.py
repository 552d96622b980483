"""CLI utility functions for graphwalk.

Provides helper functions for:
- Config wiring: Extracting Typer CLI options and passing to load_config
- Input files: Resolving and reading graph files given on the command line
- Error formatting: Consistent user-friendly error messages with exit codes
- Logging setup: Rich log handler for --verbose
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.logging import RichHandler

from graphwalk.config import GraphwalkConfig, load_config
from graphwalk.graph_file import load_graph_file
from graphwalk.store import GraphError, GraphStore

# Exit code conventions
EXIT_USER_ERROR = 1  # User error (bad input, missing file, etc.)
EXIT_SYSTEM_ERROR = 2  # System error (permissions, I/O, etc.)


# -----------------------------------------------------------------------------
# Error Formatting Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Args:
        msg: The error message to display.
        exit_code: Exit code to use (default: EXIT_USER_ERROR=1).

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


def warning(msg: str) -> None:
    """Print a warning message to stderr."""
    styled_prefix = typer.style("Warning:", fg=typer.colors.YELLOW, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)


def info(msg: str) -> None:
    """Print an info message to stdout."""
    typer.echo(msg)


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------


def setup_logging(verbose: bool = False) -> None:
    """Route log records through Rich.

    Args:
        verbose: Show debug records. Otherwise only warnings and above.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


# -----------------------------------------------------------------------------
# Input Files
# -----------------------------------------------------------------------------


def resolve_path(
    path: str | Path,
    base_path: Path | None = None,
) -> Path:
    """Resolve a path relative to a base path.

    Args:
        path: The path to resolve.
        base_path: Base path to resolve relative paths from. Defaults to cwd.

    Returns:
        Resolved absolute Path.
    """
    p = Path(path)
    base = base_path or Path.cwd()

    resolved = p.resolve() if p.is_absolute() else (base / p).resolve()

    return resolved


def read_graph(path: str | Path, config: GraphwalkConfig) -> GraphStore:
    """Load the graph file given on the command line.

    Args:
        path: Graph file (YAML or matrix text).
        config: Configuration providing the canvas size.

    Returns:
        The loaded store.

    Raises:
        typer.Exit: If the file is missing, unreadable or invalid.
    """
    resolved = resolve_path(path)
    if not resolved.is_file():
        error(f"Graph file does not exist: {resolved}")

    store = GraphStore(width=config.canvas_width, height=config.canvas_height)
    try:
        return load_graph_file(resolved, store)
    except GraphError as e:
        error(f"{resolved.name}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        error(f"Could not read {resolved}: {e}", exit_code=EXIT_SYSTEM_ERROR)


# -----------------------------------------------------------------------------
# Config Wiring Helper
# -----------------------------------------------------------------------------


def wire_config(
    interval: float | None = None,
    connect_mode: str | None = None,
    show_colors: bool | None = None,
    start_dir: Path | None = None,
) -> GraphwalkConfig:
    """Wire CLI options to load_config with appropriate overrides.

    Args:
        interval: Override for the playback interval.
        connect_mode: Override for the connect mode.
        show_colors: Override for colored rendering.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved GraphwalkConfig instance.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    cli_overrides: dict[str, Any] = {}

    if interval is not None:
        cli_overrides["interval"] = interval
    if connect_mode is not None:
        cli_overrides["connect_mode"] = connect_mode
    if show_colors is not None:
        cli_overrides["show_colors"] = show_colors

    try:
        return load_config(cli_overrides=cli_overrides, start_dir=start_dir)
    except ValueError as e:
        error(f"Invalid configuration: {e}", exit_code=EXIT_USER_ERROR)


# -----------------------------------------------------------------------------
# Typer Option Factory Functions
# -----------------------------------------------------------------------------
# Typer consumes Option objects when decorating commands, so each command
# needs a fresh instance.


def interval_option() -> Any:
    """Create a Typer Option for --interval / -i."""
    return typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between animation steps (default: 0.6).",
    )


def connect_mode_option() -> Any:
    """Create a Typer Option for --connect-mode."""
    return typer.Option(
        None,
        "--connect-mode",
        help="How selections are connected: complete or chain (default: complete).",
    )


def json_option() -> Any:
    """Create a Typer Option for --json."""
    return typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    )


def quiet_option() -> Any:
    """Create a Typer Option for --quiet / -q."""
    return typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output.",
    )
