"""Shared utilities for reporting dispatch errors."""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from subcommander.exceptions import SubcommanderError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_error_console"]

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output.

    Returns a console configured for stderr with appropriate settings.
    The console is created lazily and cached for reuse.
    """
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def print_error(
    e: BaseException,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """
    Print an exception with Rich formatting when available.

    Uses the Rich console on TTY terminals and falls back to plain text
    for pipes and captured output.

    Args:
        e: The exception to print
        verbose: If True, include full stack trace
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if verbose:
        # Always use plain text for stack traces
        print(format_error(e, verbose=True), file=sys.stderr)
        return

    if use_rich:
        from rich.text import Text

        text = Text("Error: ", style="bold red")
        text.append(_describe(e))
        console.print(text)
    else:
        print(format_error(e), file=sys.stderr)


def format_error(e: BaseException, verbose: bool = False) -> str:
    """
    Format an exception for user-friendly display (plain text).

    Args:
        e: The exception to format
        verbose: If True, include full stack trace

    Returns:
        Formatted error message string
    """
    if verbose:
        return "".join(traceback.format_exception(type(e), e, e.__traceback__))

    return f"Error: {_describe(e)}"


def _describe(e: BaseException) -> str:
    if isinstance(e, SubcommanderError):
        return str(e)

    # For other exceptions, show type and message
    return f"{type(e).__name__}: {e}"
