"""Tests for subcommander.command."""

import dataclasses

import pytest

from subcommander import Command
from subcommander.exceptions import (
    CommandDefinitionError,
    FlagParseError,
    NeededHelp,
    TooFewArgsError,
    WrongCommandError,
)


class TestCommandDefinition:
    """Tests for constructing commands."""

    def test_fields(self, make_handler):
        """Fields are stored as given."""
        handler = make_handler()
        cmd = Command("add", "Add an item", handler, num_args_required=2)

        assert cmd.name == "add"
        assert cmd.description == "Add an item"
        assert cmd.run is handler
        assert cmd.num_args_required == 2

    def test_num_args_required_defaults_to_zero(self, make_handler):
        """Commands accept any number of arguments by default."""
        cmd = Command("list", "List items", make_handler())
        assert cmd.num_args_required == 0

    def test_empty_name_rejected(self, make_handler):
        """A command needs a name to be matched."""
        with pytest.raises(CommandDefinitionError, match="must not be empty"):
            Command("", "Nameless", make_handler())

    def test_negative_count_rejected(self, make_handler):
        """The required argument count cannot be negative."""
        with pytest.raises(CommandDefinitionError, match="must not be negative"):
            Command("add", "Add", make_handler(), num_args_required=-1)

    def test_immutable(self, make_handler):
        """Commands cannot be modified after construction."""
        cmd = Command("add", "Add", make_handler())
        with pytest.raises(dataclasses.FrozenInstanceError):
            cmd.name = "remove"


class TestMatch:
    """Tests for Command.match."""

    @pytest.mark.parametrize(
        "args,expected",
        [
            (["prog", "add"], True),
            (["prog", "add", "x", "y"], True),
            (["prog", "remove"], False),
            (["prog"], False),
            ([], False),
            (["add"], False),
            (["add", "prog"], False),
            (["prog", "ADD"], False),
            (["prog", "--add"], False),
        ],
    )
    def test_match(self, args, expected, make_handler):
        """match is true iff the second argument is the command name."""
        cmd = Command("add", "Add", make_handler())
        assert cmd.match(args) is expected

    def test_match_is_repeatable(self, make_handler):
        """Calling match repeatedly gives the same answer and changes nothing."""
        cmd = Command("add", "Add", make_handler())
        args = ["prog", "add", "x"]

        results = {cmd.match(args) for _ in range(5)}

        assert results == {True}
        assert args == ["prog", "add", "x"]


class TestExecute:
    """Tests for Command.execute."""

    def test_too_few_args(self, config, output, make_handler):
        """Too few positionals raise TooFewArgsError without calling the handler."""
        handler = make_handler()
        cmd = Command("add", "Add", handler, num_args_required=2)

        with pytest.raises(TooFewArgsError) as exc_info:
            cmd.execute(config, ["prog", "add", "x"], output=output)

        err = exc_info.value
        assert err.command == "add"
        assert err.required == 2
        assert err.given == 1
        assert "'add' command should have 2 or more arguments" in str(err)
        assert handler.calls == []

    def test_runs_handler_with_positionals(self, config, output, make_handler):
        """The handler receives the config and the positional arguments."""
        handler = make_handler(result=42)
        cmd = Command("add", "Add", handler, num_args_required=1)

        result = cmd.execute(config, ["prog", "add", "x", "y"], output=output)

        assert result == 42
        assert handler.calls == [(config, ["x", "y"])]

    def test_exact_count_is_enough(self, config, output, make_handler):
        """Exactly num_args_required positionals is accepted."""
        handler = make_handler()
        cmd = Command("add", "Add", handler, num_args_required=2)

        cmd.execute(config, ["prog", "add", "x", "y"], output=output)

        assert handler.calls[0][1] == ["x", "y"]

    def test_handler_error_propagates_unchanged(self, config, output):
        """Exceptions raised by the handler are not wrapped."""
        boom = RuntimeError("disk full")

        def handler(conf, args):
            raise boom

        cmd = Command("add", "Add", handler)
        with pytest.raises(RuntimeError) as exc_info:
            cmd.execute(config, ["prog", "add"], output=output)

        assert exc_info.value is boom

    def test_wrong_command(self, config, output, make_handler):
        """Executing with arguments naming another command is an error."""
        handler = make_handler()
        cmd = Command("add", "Add", handler)

        with pytest.raises(WrongCommandError) as exc_info:
            cmd.execute(config, ["prog", "remove"], output=output)

        assert exc_info.value.command == "add"
        assert handler.calls == []

    def test_declares_flags_for_own_name(self, config, output, make_handler):
        """The configuration is asked for this command's flags."""
        cmd = Command("build", "Build", make_handler())
        cmd.execute(config, ["prog", "build"], output=output)
        assert config.declared == ["build"]

    def test_flag_values_reach_config(self, config, output, make_handler):
        """Parsed flag values are set on the configuration."""
        handler = make_handler()
        cmd = Command("build", "Build", handler)

        cmd.execute(config, ["prog", "build", "-j", "4", "--release", "app"], output=output)

        assert config.jobs == 4
        assert config.release is True
        assert handler.calls == [(config, ["app"])]

    def test_fresh_flags_each_execution(self, config, output, make_handler):
        """Each execution starts from the declared defaults."""
        cmd = Command("build", "Build", make_handler())

        cmd.execute(config, ["prog", "build", "-j", "3"], output=output)
        assert config.jobs == 3

        cmd.execute(config, ["prog", "build"], output=output)
        assert config.jobs == 1

    def test_flags_do_not_count_as_arguments(self, config, output, make_handler):
        """Flags and their values are not positional arguments."""
        cmd = Command("build", "Build", make_handler(), num_args_required=1)

        with pytest.raises(TooFewArgsError):
            cmd.execute(config, ["prog", "build", "-j", "3"], output=output)

    def test_help_flag_prints_command_usage(self, config, output, make_handler):
        """-h prints the command usage and raises NeededHelp."""
        handler = make_handler()
        cmd = Command("build", "Build", handler)

        with pytest.raises(NeededHelp):
            cmd.execute(config, ["prog", "build", "-h"], output=output)

        text = output.getvalue()
        assert text.startswith("Usage:\n\t prog build [arguments]\n")
        assert "--jobs" in text
        assert "Parallel jobs" in text
        assert handler.calls == []

    def test_malformed_flag(self, config, output, make_handler):
        """An unknown flag raises FlagParseError after printing the usage."""
        handler = make_handler()
        cmd = Command("build", "Build", handler)

        with pytest.raises(FlagParseError) as exc_info:
            cmd.execute(config, ["prog", "build", "--fast"], output=output)

        assert exc_info.value.command == "build"
        assert "Usage:\n\t prog build [arguments]\n" in output.getvalue()
        assert handler.calls == []

    def test_usage_goes_to_stderr_by_default(self, config, capsys, make_handler):
        """Without an output stream, usage is written to stderr."""
        cmd = Command("init", "Init", make_handler())

        with pytest.raises(NeededHelp):
            cmd.execute(config, ["prog", "init", "--help"])

        captured = capsys.readouterr()
        assert "Usage:\n\t prog init [arguments]\n" in captured.err
        assert "--verbose" in captured.err
