"""
Process-level entry point for programs built on subcommander.

The runner is the one place that reads ``sys.argv`` and the one place that
turns dispatch outcomes into an exit status:

    NeededHelp                     -> 0
    handler returned an int        -> that int
    handler returned anything else -> 0
    any error                      -> 1 (message printed to stderr)
    KeyboardInterrupt              -> 130

Example::

    from subcommander import Command, CommandSet
    from subcommander.cli import main

    commands = CommandSet("notes", commands=[Command("list", "List notes", list_notes)])

    if __name__ == "__main__":
        main(commands, NotesConfig.load("notes"))
"""

from __future__ import annotations

import logging
import sys
from typing import NoReturn, Optional, Sequence

from subcommander.cli.utils import print_error
from subcommander.command_set import CommandSet
from subcommander.exceptions import NeededHelp
from subcommander.logging import enable_verbose
from subcommander.protocol import Configuration

logger = logging.getLogger(__name__)

__all__ = ["main", "run"]


def run(
    command_set: CommandSet,
    config: Configuration,
    argv: Optional[Sequence[str]] = None,
    *,
    verbose: Optional[bool] = None,
) -> int:
    """Dispatch ``argv`` through ``command_set`` and return an exit code.

    Args:
        command_set: Registered commands.
        config: Configuration handed to the selected command.
        argv: Full argument list, program name first (default: sys.argv).
        verbose: Log dispatch decisions and print tracebacks. When None,
            ``config.defaults.verbose`` is used if the config has it.

    Returns:
        Process exit status.
    """
    if argv is None:
        argv = list(sys.argv)

    defaults = getattr(config, "defaults", None)
    if verbose is None:
        verbose = bool(getattr(defaults, "verbose", False))
    quiet = bool(getattr(defaults, "quiet", False))

    if verbose:
        enable_verbose(sys.stderr)

    try:
        command_set.validate()
        result = command_set.execute(config, argv)
    except NeededHelp:
        return 0
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        logger.debug("%s failed: %s", command_set.name, type(e).__name__)
        if not quiet:
            print_error(e, verbose=verbose)
        return 1

    if isinstance(result, bool) or not isinstance(result, int):
        return 0
    return result


def main(
    command_set: CommandSet,
    config: Configuration,
    argv: Optional[Sequence[str]] = None,
) -> NoReturn:
    """Run the command set and exit the process with its status."""
    sys.exit(run(command_set, config, argv))
