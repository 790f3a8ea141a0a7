"""
Exception hierarchy for subcommander.

Every dispatcher failure is raised as a subclass of SubcommanderError, which
carries context and suggestions for display. Help requests are signalled
separately with NeededHelp, so callers can tell "usage was shown" apart from a
real failure without inspecting messages.

Example::

    from subcommander.exceptions import InvalidCommandError, NeededHelp

    try:
        command_set.execute(config, sys.argv)
    except NeededHelp:
        return 0
    except InvalidCommandError as e:
        print(e, file=sys.stderr)
        return 1
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class SubcommanderError(Exception):
    """
    Base exception for all dispatcher errors.

    Attributes:
        context: Dictionary of contextual information (command, argument, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class NeededHelp(Exception):
    """
    Usage text was written; not a failure.

    Raised when no subcommand was given and there is no default, when the
    subcommand token is ``-h``/``--help``, or when a subcommand's own help
    flag is passed. The message is always empty because the usage has
    already been written to the diagnostic stream. Callers should exit 0.
    """

    def __init__(self) -> None:
        super().__init__("")

    def __str__(self) -> str:
        return ""


class WrongCommandError(SubcommanderError):
    """
    A command was executed with arguments that do not name it.

    Only reachable through a dispatch bug, since CommandSet only executes
    commands whose match() succeeded.
    """

    def __init__(self, command: str):
        self.command = command
        super().__init__(
            f"Attempted to execute the {command} command with the wrong command name",
            context={"command": command},
        )


class ParseIncompleteError(SubcommanderError):
    """The flag parser returned without reaching its parsed state."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Could not parse arguments for the {command!r} command.")


class FlagParseError(SubcommanderError):
    """
    A flag was malformed, unknown, or given an invalid value.

    The parser writes its message and the command usage to the diagnostic
    stream before this is raised.

    Example::

        raise FlagParseError("unrecognized arguments: --bogus", command="build")
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.command = command
        context = {"command": command} if command else None
        super().__init__(message, context, suggestions)


class TooFewArgsError(SubcommanderError):
    """
    Fewer positional arguments were supplied than the command requires.

    Attributes:
        command: Name of the command
        required: Minimum number of positional arguments
        given: Number actually supplied, when known
    """

    def __init__(self, command: str, required: int, given: Optional[int] = None):
        self.command = command
        self.required = required
        self.given = given
        context = {"given": given} if given is not None else None
        super().__init__(
            f"The '{command}' command should have {required} or more arguments",
            context=context,
        )


class InvalidCommandError(SubcommanderError):
    """
    The subcommand token matches no registered command.

    Attributes:
        name: The unrecognized token
        available: Names of the registered commands, if supplied
    """

    def __init__(self, name: str, available: Optional[Sequence[str]] = None):
        self.name = name
        self.available = list(available or [])
        suggestions = []
        if self.available:
            suggestions.append(f"Valid commands: {', '.join(self.available)}")
        suggestions.append("Run with --help to list commands")
        super().__init__(f"{name!r} is not a valid command.", suggestions=suggestions)


class NoDefaultDefinedError(SubcommanderError):
    """The command set names a default command that it does not register."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"This command set does not define its own default command, {name}",
            context={"default_command": name},
        )


class CommandDefinitionError(SubcommanderError):
    """
    A Command or CommandSet was declared with invalid registration data.

    Example::

        raise CommandDefinitionError(
            "Duplicate command name",
            context={"name": "build"},
            suggestions=["Give each command a unique name"],
        )
    """

    pass


__all__ = [
    "SubcommanderError",
    "NeededHelp",
    "WrongCommandError",
    "ParseIncompleteError",
    "FlagParseError",
    "TooFewArgsError",
    "InvalidCommandError",
    "NoDefaultDefinedError",
    "CommandDefinitionError",
]
