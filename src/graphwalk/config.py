"""Configuration management for the graphwalk CLI.

Handles configuration loading from multiple sources with precedence:
CLI args > environment variables > .graphwalkrc > pyproject.toml > defaults
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

CONNECT_MODES = ("complete", "chain")

# Smallest canvas that still leaves room for the placement margin
MIN_CANVAS_SIZE = 60


@dataclass
class GraphwalkConfig:
    """Configuration for the graphwalk CLI.

    Attributes:
        interval: Seconds between playback steps (default: 0.6)
        connect_mode: How selections are connected, "complete" or "chain"
            (default: "complete")
        show_colors: Render vertices in their own colors (default: True)
        canvas_width: Width of the area new vertices are placed in (default: 800)
        canvas_height: Height of the area new vertices are placed in (default: 600)
    """

    interval: float = 0.6
    connect_mode: str = "complete"
    show_colors: bool = True
    canvas_width: int = 800
    canvas_height: int = 600

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if isinstance(self.interval, bool) or not isinstance(self.interval, (int, float)):
            raise ValueError("interval must be a number")
        if self.interval <= 0:
            raise ValueError("interval must be greater than 0")

        if self.connect_mode not in CONNECT_MODES:
            raise ValueError(f"connect_mode must be one of: {', '.join(CONNECT_MODES)}")

        if not isinstance(self.show_colors, bool):
            raise ValueError("show_colors must be a boolean")

        for name in ("canvas_width", "canvas_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer")
            if value < MIN_CANVAS_SIZE:
                raise ValueError(f"{name} must be at least {MIN_CANVAS_SIZE}")


def _get_config_field_names() -> set[str]:
    """Get the set of valid configuration field names.

    Returns:
        Set of field names from GraphwalkConfig.
    """
    return {f.name for f in fields(GraphwalkConfig)}


def find_config_file(filename: str = ".graphwalkrc", start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Searches for the specified file starting from start_dir (or current directory)
    and traversing up to the filesystem root.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = start_dir or Path.cwd()
    current = current.resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _load_from_rc(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from .graphwalkrc file.

    Returns:
        Dictionary containing configuration from .graphwalkrc, or empty dict if not found.
    """
    config_path = find_config_file(".graphwalkrc", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
        valid_fields = _get_config_field_names()
        return {k: v for k, v in data.items() if k in valid_fields}
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from pyproject.toml [tool.graphwalk] section.

    Returns:
        Dictionary containing configuration from pyproject.toml, or empty dict if not found.
    """
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
        tool_section = data.get("tool", {})
        graphwalk_section = tool_section.get("graphwalk", {})

        valid_fields = _get_config_field_names()
        return {k: v for k, v in graphwalk_section.items() if k in valid_fields}
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def _parse_bool(value: str) -> bool:
    """Parse an environment variable value as a boolean.

    Raises:
        ValueError: If the value is not a recognized boolean word.
    """
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _load_from_env() -> dict[str, Any]:
    """Load configuration from environment variables.

    Environment variables are prefixed with GRAPHWALK_ and use uppercase names.
    For example: GRAPHWALK_INTERVAL, GRAPHWALK_CONNECT_MODE, GRAPHWALK_SHOW_COLORS

    Returns:
        Dictionary containing configuration from environment variables.

    Raises:
        ValueError: If a variable cannot be converted to its field type.
    """
    env_mapping: dict[str, tuple[str, Any]] = {
        "GRAPHWALK_INTERVAL": ("interval", float),
        "GRAPHWALK_CONNECT_MODE": ("connect_mode", str),
        "GRAPHWALK_SHOW_COLORS": ("show_colors", _parse_bool),
        "GRAPHWALK_CANVAS_WIDTH": ("canvas_width", int),
        "GRAPHWALK_CANVAS_HEIGHT": ("canvas_height", int),
    }

    result: dict[str, Any] = {}
    for env_var, (config_key, convert) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                result[config_key] = convert(value)
            except ValueError as e:
                raise ValueError(f"{env_var}: {e}") from e

    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge multiple configuration dictionaries.

    Later dictionaries take precedence over earlier ones.
    """
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> GraphwalkConfig:
    """Load configuration with full precedence chain.

    Loads configuration from multiple sources and merges them with the following
    precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (GRAPHWALK_*)
    3. .graphwalkrc file
    4. pyproject.toml [tool.graphwalk] section
    5. Default values

    Args:
        cli_overrides: Configuration overrides from CLI arguments.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved GraphwalkConfig instance.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    pyproject_config = _load_from_pyproject(start_dir)
    rc_config = _load_from_rc(start_dir)
    env_config = _load_from_env()
    cli_config = cli_overrides or {}

    valid_fields = _get_config_field_names()
    cli_config = {k: v for k, v in cli_config.items() if k in valid_fields and v is not None}

    merged = _merge_configs(
        pyproject_config,
        rc_config,
        env_config,
        cli_config,
    )

    return GraphwalkConfig(**merged)
