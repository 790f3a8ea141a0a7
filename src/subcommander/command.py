"""A single CLI subcommand and its handler."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence, TextIO

from subcommander.exceptions import (
    CommandDefinitionError,
    ParseIncompleteError,
    TooFewArgsError,
    WrongCommandError,
)
from subcommander.flags import FlagSet
from subcommander.protocol import Configuration

logger = logging.getLogger(__name__)

__all__ = ["Command", "Handler"]

Handler = Callable[[Configuration, list[str]], Any]


@dataclass(frozen=True)
class Command:
    """
    A CLI subcommand and its handler.

    When the subcommand called ``name`` is requested, ``run`` is called with
    the configuration (whose declared flags have been filled in) and the
    list of non-flag arguments.

    Attributes:
        name: Subcommand token, e.g. "build".
        description: One-line summary shown in the top-level usage.
        run: Handler called as ``run(config, positional_args)``.
        num_args_required: Minimum number of positional arguments.
    """

    name: str
    description: str
    run: Handler
    num_args_required: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            raise CommandDefinitionError(
                "Command name must not be empty",
                context={"description": self.description},
            )
        if self.num_args_required < 0:
            raise CommandDefinitionError(
                "num_args_required must not be negative",
                context={"command": self.name, "num_args_required": self.num_args_required},
            )

    def match(self, args: Sequence[str]) -> bool:
        """Return True if ``args[1]`` names this command.

        ``args[0]`` is the program name and is ignored.
        """
        return len(args) >= 2 and args[1] == self.name

    def execute(
        self,
        config: Configuration,
        args: Sequence[str],
        *,
        output: TextIO | None = None,
    ) -> Any:
        """Parse the arguments, then run the command handler.

        Args:
            config: Configuration that declares this command's flags and
                receives their parsed values.
            args: Full argument list, program name first.
            output: Diagnostic stream for usage text (default: stderr).

        Returns:
            Whatever the handler returns.

        Raises:
            WrongCommandError: If ``args`` does not name this command.
            FlagParseError: If a flag is malformed or unknown.
            NeededHelp: If the command's help flag was given.
            TooFewArgsError: If too few positional arguments were given.
        """
        flags = FlagSet(self.name, target=config, output=output)
        config.declare_flags(self.name, flags)

        def usage() -> None:
            flags.output.write(f"Usage:\n\t {args[0]} {self.name} [arguments]\n")
            flags.print_defaults()

        flags.usage = usage

        if not self.match(args):
            raise WrongCommandError(self.name)

        flags.parse(args[2:])
        if not flags.parsed:
            raise ParseIncompleteError(self.name)

        if flags.nargs < self.num_args_required:
            raise TooFewArgsError(self.name, self.num_args_required, given=flags.nargs)

        logger.debug("Running %s with %d argument(s)", self.name, flags.nargs)
        return self.run(config, flags.args())
