"""Configuration protocol for subcommander.

A configuration is the object handed to every command handler. The
dispatcher never looks inside it; its only duty toward the dispatcher is to
declare, for a given command name, which flags that command accepts.

Usage:
    from subcommander.protocol import Configuration

    class AppConfig:
        verbose = False

        def declare_flags(self, command_name: str, flags: FlagSet) -> None:
            flags.add_argument("-v", "--verbose", action="store_true")
            if command_name == "build":
                flags.add_argument("--jobs", type=int, default=1)

After parsing, the value of every declared flag is set as an attribute on
the configuration, so a handler reads ``config.jobs`` directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from subcommander.flags import FlagSet


@runtime_checkable
class Configuration(Protocol):
    """Anything that can declare the flags of a named command."""

    def declare_flags(self, command_name: str, flags: FlagSet) -> None:
        """Add the flags accepted by ``command_name`` to ``flags``.

        Args:
            command_name: Name of the command being executed.
            flags: The command's fresh flag schema.
        """
        ...
