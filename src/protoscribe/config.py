"""Compiler configuration.

Settings are read from a ``[protoscribe]`` table in ``protoscribe.toml`` or a
``[tool.protoscribe]`` table in ``pyproject.toml``, for example::

    [tool.protoscribe]
    output_path = "protos"
    package_structured = true
"""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ProtoscribeError

CONFIG_FILE = "protoscribe.toml"
PYPROJECT_FILE = "pyproject.toml"
DEFAULT_DUMP_FILE = "dump.proto"


class ConfigError(ProtoscribeError):
    """Raised when configuration is missing or invalid."""


class CompilerConfig(BaseModel):
    """Settings of one compiler run.

    Attributes:
        output_path: Root folder of the generated files.
        package_structured: Nest files in one folder per package segment
            instead of writing all of them to the output root.
        dump_mode: Write the whole program to a single inspection file.
        dump_file_name: Name of the dump file inside ``output_path``.
        include_references: Write a comment naming the original source type
            above each enum and message.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    output_path: Path
    package_structured: bool = False
    dump_mode: bool = False
    dump_file_name: str = Field(default=DEFAULT_DUMP_FILE, min_length=1)
    include_references: bool = False


def find_config_file(directory: Path | None = None) -> Path | None:
    """Find a configuration file in a directory.

    ``protoscribe.toml`` takes precedence over ``pyproject.toml``.

    Args:
        directory: Directory to search. Defaults to the current directory.

    Returns:
        Path to the configuration file, or None if there is none.
    """
    directory = directory or Path.cwd()
    for name in (CONFIG_FILE, PYPROJECT_FILE):
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def read_config_table(path: Path) -> dict[str, Any]:
    """Read the protoscribe settings table of a TOML file.

    Args:
        path: ``protoscribe.toml`` or ``pyproject.toml`` file.

    Returns:
        The settings, empty if the file has no protoscribe table.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    if path.name == PYPROJECT_FILE:
        table = data.get("tool", {}).get("protoscribe", {})
    else:
        table = data.get("protoscribe", {})

    if not isinstance(table, dict):
        raise ConfigError(f"protoscribe settings in {path} must be a table")

    settings = dict(table)
    output_path = settings.get("output_path")
    if isinstance(output_path, str) and not Path(output_path).is_absolute():
        settings["output_path"] = path.parent / output_path
    return settings


def load_config(config_path: Path | None = None, **overrides: Any) -> CompilerConfig:
    """Load the compiler configuration.

    Args:
        config_path: Configuration file. When None, the current directory is
            searched and a missing file is not an error.
        **overrides: Settings taking precedence over the file. None values are
            ignored.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If the file is missing or invalid, or no output path is
            configured.
    """
    if config_path is not None and not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    path = config_path or find_config_file()
    settings: dict[str, Any] = read_config_table(path) if path else {}
    settings.update({key: val for key, val in overrides.items() if val is not None})

    if "output_path" not in settings:
        raise ConfigError(
            "No output path configured. Pass --output or set output_path in "
            f"{CONFIG_FILE} or [tool.protoscribe] in {PYPROJECT_FILE}"
        )

    try:
        return CompilerConfig.model_validate(settings)
    except ValidationError as e:
        source = f" in {path}" if path else ""
        raise ConfigError(f"Invalid configuration{source}: {e}") from e
