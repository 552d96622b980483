"""Tests for graphwalk CLI utility functions."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from graphwalk.cli_utils import (
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    error,
    info,
    read_graph,
    resolve_path,
    warning,
    wire_config,
)
from graphwalk.config import GraphwalkConfig
from graphwalk.store import Edge

# Default CliRunner - note that stderr is mixed into stdout by default
runner = CliRunner()


class TestErrorFormatting:
    """Tests for error formatting helpers."""

    def test_error_exits_with_user_error_code_by_default(self) -> None:
        """Test that error() exits with EXIT_USER_ERROR by default."""
        app = typer.Typer()

        @app.command()
        def cmd() -> None:
            error("Test error message")

        result = runner.invoke(app, [])
        assert result.exit_code == EXIT_USER_ERROR
        assert "Error:" in result.output
        assert "Test error message" in result.output

    def test_error_exits_with_custom_exit_code(self) -> None:
        """Test that error() can use a custom exit code."""
        app = typer.Typer()

        @app.command()
        def cmd() -> None:
            error("System error", exit_code=EXIT_SYSTEM_ERROR)

        result = runner.invoke(app, [])
        assert result.exit_code == EXIT_SYSTEM_ERROR

    def test_warning_does_not_exit(self) -> None:
        """Test that warning() does not exit the program."""
        app = typer.Typer()

        @app.command()
        def cmd() -> None:
            warning("This is a warning")
            typer.echo("Continued execution")

        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "Warning:" in result.output
        assert "Continued execution" in result.output

    def test_info_does_not_exit(self) -> None:
        """Test that info() prints plain text and continues."""
        app = typer.Typer()

        @app.command()
        def cmd() -> None:
            info("Some information")
            typer.echo("Continued execution")

        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert result.stdout == "Some information\nContinued execution\n"

    def test_exit_code_constants(self) -> None:
        assert EXIT_USER_ERROR == 1
        assert EXIT_SYSTEM_ERROR == 2


class TestResolvePath:
    """Tests for resolve_path."""

    def test_relative_to_base(self, tmp_path: Path) -> None:
        assert resolve_path("graph.yaml", tmp_path) == (tmp_path / "graph.yaml").resolve()

    def test_absolute_unchanged(self, tmp_path: Path) -> None:
        target = tmp_path / "graph.yaml"
        assert resolve_path(target, Path("/elsewhere")) == target.resolve()

    def test_defaults_to_cwd(self, tmp_path: Path) -> None:
        """Test that relative paths use the working directory."""
        original = os.getcwd()
        try:
            os.chdir(tmp_path)
            assert resolve_path("g.txt") == (tmp_path / "g.txt").resolve()
        finally:
            os.chdir(original)


class TestReadGraph:
    """Tests for read_graph."""

    def test_reads_yaml(self, tmp_path: Path) -> None:
        """Test that the store is sized from the config."""
        path = tmp_path / "graph.yaml"
        path.write_text("edges: [A-B]\n", encoding="utf-8")

        store = read_graph(path, GraphwalkConfig(canvas_width=200, canvas_height=100))

        assert store.edges == [Edge("A", "B")]
        assert (store.width, store.height) == (200, 100)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            read_graph(tmp_path / "missing.yaml", GraphwalkConfig())
        assert exc_info.value.exit_code == EXIT_USER_ERROR

    def test_invalid_graph(self, tmp_path: Path) -> None:
        """Test that graph errors exit with a user error."""
        path = tmp_path / "bad.txt"
        path.write_text("0 1 1\n", encoding="utf-8")
        with pytest.raises(typer.Exit) as exc_info:
            read_graph(path, GraphwalkConfig())
        assert exc_info.value.exit_code == EXIT_USER_ERROR

    def test_undecodable_file(self, tmp_path: Path) -> None:
        """Test that unreadable bytes exit with a system error."""
        path = tmp_path / "bad.txt"
        path.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(typer.Exit) as exc_info:
            read_graph(path, GraphwalkConfig())
        assert exc_info.value.exit_code == EXIT_SYSTEM_ERROR


class TestWireConfig:
    """Tests for wire_config."""

    def test_overrides_applied(self, tmp_path: Path) -> None:
        config = wire_config(interval=0.1, connect_mode="chain", show_colors=False, start_dir=tmp_path)
        assert config.interval == 0.1
        assert config.connect_mode == "chain"
        assert config.show_colors is False

    def test_none_keeps_defaults(self, tmp_path: Path) -> None:
        assert wire_config(start_dir=tmp_path) == GraphwalkConfig()

    def test_invalid_exits(self, tmp_path: Path) -> None:
        """Test that invalid settings exit with a user error."""
        with pytest.raises(typer.Exit) as exc_info:
            wire_config(connect_mode="star", start_dir=tmp_path)
        assert exc_info.value.exit_code == EXIT_USER_ERROR
