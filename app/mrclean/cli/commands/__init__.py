"""CLI commands for mrclean.

This package contains all subcommand implementations.
"""

from mrclean.cli.commands import clean, config, init, list_cmd

__all__ = ["clean", "config", "init", "list_cmd"]
