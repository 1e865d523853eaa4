"""
Configuration management for pod-tree.

Settings are resolved in this order (highest priority first):
1. CLI options
2. POD_TREE_* environment variables (a local .env file is honored)
3. .pod-tree.toml (local config)
4. pyproject.toml (project-level config)
5. Built-in defaults
"""

import os
import tomllib
from pathlib import Path
from typing import Any, NamedTuple

from dotenv import load_dotenv

from pod_tree.exceptions import ConfigError

CONFIG_FILENAME = ".pod-tree.toml"
CONFIG_SECTION = "pod-tree"

DEFAULT_LOCKFILE = "Podfile.lock"
DEFAULT_BULLET = "•"
# 256-color terminal codes, cycled by tree depth
DEFAULT_COLORS = (9, 3, 2, 75, 99)


class TreeSettings(NamedTuple):
    """Resolved settings for a single pod-tree run."""

    lockfile: Path = Path(DEFAULT_LOCKFILE)
    bullet: str = DEFAULT_BULLET
    colors: tuple[int, ...] = DEFAULT_COLORS
    direct_only: bool = False
    max_depth: int | None = None
    show_root: bool = False
    color: bool = True
    verbose: bool = False


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config from {config_path}: {e}") from e


def get_file_config(directory: Path | None = None) -> dict[str, Any]:
    """
    Load the [tool.pod-tree] table from configuration files.

    Priority:
    1. .pod-tree.toml (local config, highest priority)
    2. pyproject.toml (project-level config, fallback)

    Args:
        directory: Directory to look in. Defaults to the working directory.

    Returns:
        The pod-tree config table, empty if none is found.
    """
    directory = directory or Path.cwd()

    local_config_path = directory / CONFIG_FILENAME
    if local_config_path.exists():
        config = load_config_file(local_config_path)
        return config.get("tool", {}).get(CONFIG_SECTION, {})

    pyproject_path = directory / "pyproject.toml"
    if pyproject_path.exists():
        config = load_config_file(pyproject_path)
        return config.get("tool", {}).get(CONFIG_SECTION, {})

    return {}


def parse_colors(value: Any) -> tuple[int, ...]:
    """
    Validate a color palette.

    Accepts a list of ints or a comma separated string of 256-color codes.

    Raises:
        ConfigError: If the palette is empty or holds values outside 0-255.
    """
    if isinstance(value, str):
        value = [item for item in value.split(",") if item.strip()]
    if not isinstance(value, (list, tuple)) or not value:
        raise ConfigError(f"Invalid colors: {value!r}. Expected a list of 0-255.")

    try:
        colors = tuple(int(item) for item in value)
    except (TypeError, ValueError):
        raise ConfigError(
            f"Invalid colors: {value!r}. Expected a list of 0-255."
        ) from None

    if any(color < 0 or color > 255 for color in colors):
        raise ConfigError(f"Invalid colors: {value!r}. Expected a list of 0-255.")
    return colors


def _require_str(config: dict[str, Any], key: str) -> str:
    value = config[key]
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Invalid {key}: {value!r}. Expected a non-empty string.")
    return value


def load_settings(directory: Path | None = None, **overrides: Any) -> TreeSettings:
    """
    Resolve settings from config files, environment and CLI overrides.

    Args:
        directory: Directory holding config files and .env. Defaults to the
            working directory.
        **overrides: CLI values. ``None`` means "not given on the command line".

    Returns:
        Fully resolved TreeSettings.
    """
    directory = directory or Path.cwd()
    load_dotenv(directory / ".env")

    file_config = get_file_config(directory)
    values: dict[str, Any] = {}

    if "lockfile" in file_config:
        values["lockfile"] = Path(_require_str(file_config, "lockfile"))
    if "bullet" in file_config:
        values["bullet"] = _require_str(file_config, "bullet")
    if "colors" in file_config:
        values["colors"] = parse_colors(file_config["colors"])
    if "direct_only" in file_config:
        direct_only = file_config["direct_only"]
        if not isinstance(direct_only, bool):
            raise ConfigError(
                f"Invalid direct_only: {direct_only!r}. Expected true or false."
            )
        values["direct_only"] = direct_only

    env_lockfile = os.getenv("POD_TREE_LOCKFILE")
    if env_lockfile:
        values["lockfile"] = Path(env_lockfile).expanduser()
    env_bullet = os.getenv("POD_TREE_BULLET")
    if env_bullet:
        values["bullet"] = env_bullet
    env_colors = os.getenv("POD_TREE_COLORS")
    if env_colors:
        values["colors"] = parse_colors(env_colors)

    for key, value in overrides.items():
        if value is not None:
            values[key] = value

    return TreeSettings(**values)
