"""Unit tests for the config command."""

from pathlib import Path

from mrclean.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigCommand:
    """Tests for mrclean config."""

    def test_shows_builtin_defaults(self, isolated_cli: Path) -> None:
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "# Source: built-in defaults" in result.output
        assert "[patterns]" in result.output
        assert "[safety]" in result.output

    def test_shows_project_config_source(self, isolated_cli: Path) -> None:
        (isolated_cli / ".mc.toml").write_text("[safety]\nmax_depth = 4\n")

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert ".mc.toml" in result.output
        assert "max_depth = 4" in result.output

    def test_previews_cli_overrides(self, isolated_cli: Path) -> None:
        result = runner.invoke(app, ["config", "-e", "my_vendor_dir", "--preserve-env"])

        assert result.exit_code == 0
        assert "my_vendor_dir" in result.output
        assert ".env.example" in result.output

    def test_missing_explicit_config(self, isolated_cli: Path) -> None:
        result = runner.invoke(app, ["config", "-c", "nope.toml"])

        assert result.exit_code == 1
        assert "mrclean init" in result.output
