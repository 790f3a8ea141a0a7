"""
Verbose output for subcommander.

Every module logs under the ``subcommander`` logger. Records are dropped
until a program asks for them, normally through ``cli.run(verbose=True)``,
which routes them to the same stream its error messages go to.
"""

from __future__ import annotations

import logging
from typing import TextIO

__all__ = ["enable_verbose", "disable_verbose"]

_logger = logging.getLogger("subcommander")
_logger.addHandler(logging.NullHandler())

# Handler installed by enable_verbose(), if any
_verbose_handler: logging.Handler | None = None


def enable_verbose(stream: TextIO | None = None, level: int = logging.DEBUG) -> logging.Handler:
    """Write subcommander log records at ``level`` and above to ``stream``.

    Calling it again replaces the previous stream. ``stream`` defaults to
    the current ``sys.stderr``.

    Returns:
        The installed handler.
    """
    global _verbose_handler
    disable_verbose()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    _logger.addHandler(handler)
    _logger.setLevel(level)
    _verbose_handler = handler
    return handler


def disable_verbose() -> None:
    """Remove the verbose handler and let the logger inherit its level again."""
    global _verbose_handler
    if _verbose_handler is not None:
        _logger.removeHandler(_verbose_handler)
        _verbose_handler = None
    _logger.setLevel(logging.NOTSET)
