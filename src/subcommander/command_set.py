"""
Top-level subcommand dispatch.

A CommandSet maps the first argument after the program name to one of its
registered commands. With no subcommand it runs the default command, or
prints the command listing when there is none.

Example::

    from subcommander import Command, CommandSet

    commands = CommandSet(
        "notes",
        default_command_name="list",
        commands=[
            Command("add", "Add a note", add_note, num_args_required=1),
            Command("list", "List notes", list_notes),
        ],
    )
    commands.execute(config, sys.argv)
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, TextIO

from subcommander.command import Command
from subcommander.exceptions import (
    CommandDefinitionError,
    InvalidCommandError,
    NeededHelp,
    NoDefaultDefinedError,
)
from subcommander.protocol import Configuration

logger = logging.getLogger(__name__)

__all__ = ["CommandSet", "HELP_TOKENS"]

HELP_TOKENS = ("-h", "--help")


@dataclass
class CommandSet:
    """
    An ordered collection of commands with an optional default.

    Attributes:
        name: Program name shown in the top-level usage.
        default_command_name: Command run when no subcommand is given.
            Empty means "show the usage instead".
        commands: Registered commands, in match order.
    """

    name: str
    default_command_name: str = ""
    commands: list[Command] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.commands = list(self.commands)

    def find(self, name: str) -> Optional[Command]:
        """Return the first command called ``name``, or None."""
        for command in self.commands:
            if command.name == name:
                return command
        return None

    def validate(self) -> None:
        """Check the registration data without dispatching.

        Raises:
            CommandDefinitionError: If two commands share a name.
            NoDefaultDefinedError: If the default names no registered command.
        """
        seen: set[str] = set()
        for command in self.commands:
            if command.name in seen:
                raise CommandDefinitionError(
                    "Duplicate command name",
                    context={"command_set": self.name, "name": command.name},
                    suggestions=["Give each command a unique name"],
                )
            seen.add(command.name)

        if self.default_command_name and self.default_command_name not in seen:
            raise NoDefaultDefinedError(self.default_command_name)

    def print_usage(self, output: TextIO | None = None) -> None:
        """Write the program usage and the list of commands."""
        out = output if output is not None else sys.stderr
        out.write(f"Usage:\n\t{self.name} <command> [arguments]\n\n")
        out.write("Commands:\n\n")
        for command in self.commands:
            out.write(f"{command.name:>12}    {command.description}\n")

    def execute(
        self,
        config: Configuration,
        argv: Sequence[str],
        *,
        output: TextIO | None = None,
    ) -> Any:
        """Match the arguments to a command, then run that command.

        Args:
            config: Configuration passed through to the command.
            argv: Full argument list, program name first.
            output: Diagnostic stream for usage text (default: stderr).

        Returns:
            The selected command's handler result.

        Raises:
            NeededHelp: If the usage was printed instead of running a command.
            InvalidCommandError: If the subcommand is not registered.
            NoDefaultDefinedError: If no subcommand was given and the
                default is not registered.
        """
        if len(argv) < 2:
            if self.default_command_name:
                return self._run_default_command(config, output)
            self.print_usage(output)
            raise NeededHelp()

        for command in self.commands:
            if command.match(argv):
                logger.debug("Dispatching %s to %s", self.name, command.name)
                return command.execute(config, argv, output=output)

        token = argv[1]
        if token not in HELP_TOKENS:
            raise InvalidCommandError(token, [c.name for c in self.commands])

        self.print_usage(output)
        raise NeededHelp()

    def _run_default_command(self, config: Configuration, output: TextIO | None) -> Any:
        args = [self.name, self.default_command_name]
        for command in self.commands:
            if command.match(args):
                logger.debug("No subcommand given, running default %s", command.name)
                return command.execute(config, args, output=output)
        raise NoDefaultDefinedError(self.default_command_name)
