"""
Per-command flag schema built on argparse.

A FlagSet holds the flags one subcommand accepts and the values parsed for
them. Parsing follows the conventions of a classic flag package: flags come
first, parsing stops at the first non-flag token (or after a ``--``
terminator), and everything from there on is returned as positional
arguments.

Unlike a stock ArgumentParser, a FlagSet never exits the process. Malformed
flags raise FlagParseError and ``-h``/``--help`` raises NeededHelp, after the
relevant text has been written to the diagnostic stream.

A negative number such as ``-5`` in flag position is reported as an unknown
flag. It is accepted as the value of a flag that takes one (``-j -5``) and as
a positional argument after the first positional or after ``--``.

Usage:
    from subcommander.flags import FlagSet

    flags = FlagSet("build")
    flags.add_argument("-j", "--jobs", type=int, default=1, help="Parallel jobs")
    flags.parse(["-j", "4", "src", "docs"])

    flags.values.jobs   # 4
    flags.args()        # ["src", "docs"]
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
import warnings
from typing import Any, Callable, Iterable, TextIO

from subcommander.exceptions import FlagParseError, NeededHelp

logger = logging.getLogger(__name__)

__all__ = ["FlagSet"]

# Hidden positional that collects everything after the last flag
_POSITIONAL_DEST = "_subcommander_positional"

_HELP_FLAGS = ("-h", "--help")

# Same pattern argparse uses to tell negative numbers from flags
_NEGATIVE_NUMBER = re.compile(r"^-\d+$|^-\d*\.\d+$")


class _HelpAction(argparse.Action):
    """Show the owning FlagSet's usage and signal that help was needed."""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            default=default,
            nargs=0,
            help=help,
        )

    def __call__(self, parser, namespace, values, option_string=None):
        parser.flag_set.show_usage()
        raise NeededHelp()


class _FlagParser(argparse.ArgumentParser):
    """ArgumentParser that reports failures to its FlagSet instead of exiting."""

    def __init__(self, flag_set: FlagSet, **kwargs: Any):
        self.flag_set = flag_set
        super().__init__(**kwargs)

    def error(self, message: str):
        self.flag_set._fail(message)

    def exit(self, status: int = 0, message: str | None = None):
        if message:
            self.flag_set._write(message)
        if status == 0:
            raise NeededHelp()
        raise FlagParseError(
            (message or f"flag parsing stopped with status {status}").strip(),
            command=self.flag_set.name,
        )


class FlagSet:
    """
    The flags accepted by one subcommand, plus storage for their values.

    Args:
        name: Command name, used in messages and the default usage text.
        target: Optional object that receives every declared flag's value
            as an attribute after a successful parse.
        output: Diagnostic stream for usage and parse errors. Defaults to
            whatever ``sys.stderr`` is at write time.
    """

    def __init__(
        self,
        name: str,
        *,
        target: Any = None,
        output: TextIO | None = None,
    ):
        self.name = name
        self.target = target
        self.usage: Callable[[], None] | None = None
        self.values = argparse.Namespace()

        self._output = output
        self._dests: list[str] = []
        self._args: list[str] = []
        self._parsed = False

        self._parser = _FlagParser(
            self,
            prog=name,
            usage=argparse.SUPPRESS,
            add_help=False,
            allow_abbrev=False,
        )
        self._parser.add_argument(*_HELP_FLAGS, action=_HelpAction, help=argparse.SUPPRESS)
        self._parser.add_argument(_POSITIONAL_DEST, nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    @property
    def output(self) -> TextIO:
        """The stream usage and errors are written to."""
        return self._output if self._output is not None else sys.stderr

    @property
    def parsed(self) -> bool:
        """True once parse() has completed successfully."""
        return self._parsed

    @property
    def nargs(self) -> int:
        """Number of positional arguments left after parsing."""
        return len(self._args)

    def args(self) -> list[str]:
        """Return the positional arguments left after parsing."""
        return list(self._args)

    def add_argument(self, *names: str, **kwargs: Any) -> argparse.Action:
        """Declare a flag.

        Accepts the same arguments as ``ArgumentParser.add_argument``, except
        that only option flags may be declared. Positional arguments are
        whatever remains after parsing and are read with args().

        Raises:
            ValueError: If a positional argument is declared.
        """
        prefixes = tuple(self._parser.prefix_chars)
        if not names or not all(n.startswith(prefixes) for n in names):
            raise ValueError(
                f"FlagSet {self.name!r} only accepts flags, got {names!r}; "
                "positional arguments are returned by args()"
            )
        action = self._parser.add_argument(*names, **kwargs)
        self._dests.append(action.dest)
        return action

    def set_defaults(self, **values: Any) -> None:
        """Override the defaults of declared flags.

        Names that match no declared flag are ignored with a warning.
        """
        known = {}
        for key, value in values.items():
            if key in self._dests:
                known[key] = value
            else:
                warnings.warn(f"Unknown flag '{key}' for the {self.name} command", stacklevel=2)
        if known:
            self._parser.set_defaults(**known)

    def print_defaults(self) -> None:
        """Write the default listing of all declared flags."""
        text = self._parser.format_help()
        if text.strip():
            self._write(text)

    def show_usage(self) -> None:
        """Write the usage text, using the installed usage hook if any."""
        if self.usage is not None:
            self.usage()
            return
        self._write(f"Usage of {self.name}:\n")
        self.print_defaults()

    def parse(self, tokens: Iterable[str]) -> None:
        """Parse flags from tokens; the rest become positional arguments.

        Raises:
            FlagParseError: If a flag is unknown, malformed, or invalid.
            NeededHelp: If ``-h`` or ``--help`` was given.
        """
        tokens = list(tokens)
        namespace = self._parser.parse_args(tokens)

        positional = list(vars(namespace).pop(_POSITIONAL_DEST, None) or [])
        if positional and positional[0] == "--":
            positional = positional[1:]
        elif positional and _NEGATIVE_NUMBER.match(positional[0]):
            # argparse treats "-5" as positional; it sits where a flag is expected
            self._fail(f"flag provided but not defined: {positional[0]}")

        self.values = namespace
        self._args = positional
        if self.target is not None:
            for dest in self._dests:
                if hasattr(namespace, dest):
                    setattr(self.target, dest, getattr(namespace, dest))

        self._parsed = True
        logger.debug("%s: parsed flags %s, positional %s", self.name, vars(namespace), positional)

    def _write(self, text: str) -> None:
        self.output.write(text)

    def _fail(self, message: str):
        self._write(f"{message}\n")
        self.show_usage()
        raise FlagParseError(message, command=self.name)
