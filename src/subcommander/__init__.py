"""
subcommander: CLI subcommands with per-command flags and arguments.

A CommandSet picks one of its registered Commands from the first argument
after the program name, parses that command's flags, checks the number of
positional arguments and calls the command's handler.

Quick Start::

    import sys

    from subcommander import Command, CommandSet, Config
    from subcommander.cli import main

    class NotesConfig(Config):
        def declare_flags(self, command_name, flags):
            if command_name == "add":
                flags.add_argument("--tag", default="misc")
            super().declare_flags(command_name, flags)

    def add_note(config, args):
        print(f"[{config.tag}] {' '.join(args)}")

    commands = CommandSet(
        "notes",
        commands=[Command("add", "Add a note", add_note, num_args_required=1)],
    )
    main(commands, NotesConfig.load("notes"))
"""

__version__ = "0.1.0"

from subcommander.command import Command, Handler
from subcommander.command_set import CommandSet
from subcommander.config import Config, ConfigError
from subcommander.exceptions import (
    CommandDefinitionError,
    FlagParseError,
    InvalidCommandError,
    NeededHelp,
    NoDefaultDefinedError,
    ParseIncompleteError,
    SubcommanderError,
    TooFewArgsError,
    WrongCommandError,
)
from subcommander.flags import FlagSet
from subcommander.protocol import Configuration

__all__ = [
    "__version__",
    "Command",
    "CommandSet",
    "Config",
    "ConfigError",
    "Configuration",
    "FlagSet",
    "Handler",
    "CommandDefinitionError",
    "FlagParseError",
    "InvalidCommandError",
    "NeededHelp",
    "NoDefaultDefinedError",
    "ParseIncompleteError",
    "SubcommanderError",
    "TooFewArgsError",
    "WrongCommandError",
]
