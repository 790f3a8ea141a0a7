"""
Configuration file support for subcommander programs.

Provides hierarchical configuration loading for a program called <app>:
1. Project config: .<app>.toml or <app>.toml in the project root
2. User config: ~/.config/<app>/config.toml

Project config overrides user config, and flags given on the command line
override both. Per-command sections supply new defaults for that command's
declared flags:

    [defaults]
    verbose = true

    [commands.build]
    jobs = 4
"""

from __future__ import annotations

import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

if TYPE_CHECKING:
    from subcommander.flags import FlagSet

__all__ = [
    "Config",
    "ConfigError",
    "DefaultsConfig",
    "generate_template",
    "get_config_paths",
]

# All known keys of the fixed sections
KNOWN_KEYS = {
    "defaults": {"verbose", "quiet"},
    "commands": None,  # free-form: one table per command
}


@dataclass
class DefaultsConfig:
    """Options that apply to every command."""

    verbose: bool = False
    quiet: bool = False


@dataclass
class Config:
    """
    Merged configuration from all sources.

    Config satisfies the Configuration protocol: its declare_flags() applies
    the ``[commands.<name>]`` table as flag defaults. Programs subclass it,
    declare their flags, then call ``super().declare_flags()``.
    """

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    commands: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Track which file each setting came from
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, app_name: str, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            app_name: Program name used to build the config file names
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        user_path = get_config_paths(app_name)["user"]
        if user_path.exists():
            user_data = _load_toml_file(user_path)
            if user_data:
                _merge_config(config, user_data, str(user_path), sources)

        project_config = _find_project_config(start_dir, app_name)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")

    def command_defaults(self, command_name: str) -> dict[str, Any]:
        """Flag defaults configured for a command."""
        return dict(self.commands.get(command_name, {}))

    def declare_flags(self, command_name: str, flags: FlagSet) -> None:
        """Apply configured defaults to flags already declared for the command."""
        defaults = self.command_defaults(command_name)
        if defaults:
            flags.set_defaults(**defaults)


class ConfigError(Exception):
    """Configuration-related errors."""

    pass


def get_config_paths(app_name: str) -> dict[str, Any]:
    """Return the user config path and the project file names searched for."""
    return {
        "user": Path.home() / ".config" / app_name / "config.toml",
        "project_names": [f".{app_name}.toml", f"{app_name}.toml"],
    }


def _find_project_config(start_dir: Path, app_name: str) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.

    Args:
        start_dir: Directory to start searching from
        app_name: Program name used to build the config file names

    Returns:
        Path to config file if found, None otherwise
    """
    filenames = get_config_paths(app_name)["project_names"]
    current = start_dir.resolve()

    while True:
        for filename in filenames:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file safely.

    Args:
        path: Path to TOML file

    Returns:
        Parsed TOML data or None if no TOML parser is available

    Raises:
        ConfigError: If TOML is invalid or the file cannot be read
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    if "defaults" in data:
        defaults_data = data["defaults"]
        _warn_unknown_keys(defaults_data, KNOWN_KEYS["defaults"], "defaults", source)

        if "verbose" in defaults_data:
            config.defaults.verbose = bool(defaults_data["verbose"])
            sources["defaults.verbose"] = source
        if "quiet" in defaults_data:
            config.defaults.quiet = bool(defaults_data["quiet"])
            sources["defaults.quiet"] = source

    if "commands" in data:
        commands_data = data["commands"]
        if not isinstance(commands_data, dict):
            raise ConfigError(f"'commands' in {source} must be a table")

        for command_name, values in commands_data.items():
            if not isinstance(values, dict):
                raise ConfigError(f"'commands.{command_name}' in {source} must be a table")
            merged = config.commands.setdefault(command_name, {})
            for key, value in values.items():
                merged[key] = value
                sources[f"commands.{command_name}.{key}"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template(app_name: str) -> str:
    """
    Generate a template config file with all options documented.

    Args:
        app_name: Program name used in the file names

    Returns:
        Template TOML string
    """
    return f"""# {app_name} configuration file
# Place as .{app_name}.toml in project root or ~/.config/{app_name}/config.toml for user defaults

[defaults]
# Log dispatch decisions to stderr
# verbose = false

# Do not print error messages
# quiet = false

# Per-command flag defaults, keyed by the flag's destination name
# [commands.<command>]
# flag_name = "value"
"""
