"""Pytest fixtures for subcommander tests."""

import io

import pytest

from subcommander import Command, CommandSet

# Flags declared per command by the test configuration
FLAG_DECLARATIONS = {
    "build": [
        (("-j", "--jobs"), {"type": int, "default": 1, "help": "Parallel jobs"}),
        (("--release",), {"action": "store_true", "help": "Optimized build"}),
    ],
    "init": [
        (("-v", "--verbose"), {"action": "store_true", "help": "Chatty output"}),
    ],
}


class RecordingConfig:
    """Configuration that declares FLAG_DECLARATIONS and records each call."""

    def __init__(self, declarations=None):
        self.declarations = FLAG_DECLARATIONS if declarations is None else declarations
        self.declared = []

    def declare_flags(self, command_name, flags):
        self.declared.append(command_name)
        for names, kwargs in self.declarations.get(command_name, []):
            flags.add_argument(*names, **kwargs)


class RecordingHandler:
    """Command handler that records its calls and returns a fixed result."""

    def __init__(self, result=None):
        self.result = result
        self.calls = []

    def __call__(self, config, args):
        self.calls.append((config, args))
        return self.result


@pytest.fixture
def make_handler():
    """Factory for recording handlers."""
    return RecordingHandler


@pytest.fixture
def config():
    """A configuration declaring the build and init flags."""
    return RecordingConfig()


@pytest.fixture
def output():
    """In-memory diagnostic stream."""
    return io.StringIO()


@pytest.fixture
def handlers():
    """One recording handler per command name."""
    return {
        "init": RecordingHandler(result="init-done"),
        "build": RecordingHandler(result="build-done"),
    }


@pytest.fixture
def make_command_set(handlers):
    """Factory for a CommandSet with init and build registered."""

    def _make(default_command_name=""):
        return CommandSet(
            "prog",
            default_command_name=default_command_name,
            commands=[
                Command("init", "Create a workspace", handlers["init"]),
                Command("build", "Compile sources", handlers["build"]),
            ],
        )

    return _make
