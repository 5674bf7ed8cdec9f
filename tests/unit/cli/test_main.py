"""Unit tests for the top-level CLI application."""

import logging

from mrclean import __version__
from mrclean.cli.main import _setup_logging, app
from rich.logging import RichHandler
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"mrclean version {__version__}" in result.output

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "Usage" in result.output

    def test_commands_registered(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("clean", "list", "init", "config"):
            assert command in result.output


class TestSetupLogging:
    """Tests for log level selection."""

    def test_levels(self) -> None:
        logger = logging.getLogger("mrclean")

        _setup_logging(verbose=False, quiet=False)
        assert logger.level == logging.WARNING
        _setup_logging(verbose=True, quiet=False)
        assert logger.level == logging.INFO
        _setup_logging(verbose=True, quiet=True)
        assert logger.level == logging.ERROR

    def test_single_handler(self) -> None:
        """Repeated setup does not stack handlers."""
        _setup_logging(verbose=False, quiet=False)
        _setup_logging(verbose=False, quiet=False)

        handlers = logging.getLogger("mrclean").handlers
        assert sum(isinstance(h, RichHandler) for h in handlers) == 1
