"""
Configuration access for CLI commands.
"""

from pathlib import Path

import typer

from agdex.cli.output import print_error
from agdex.config import AgdexConfig, ConfigurationError, load_config
from agdex.config.loader import FALLBACK_OUTPUT


def load_cli_config(cwd: Path) -> AgdexConfig:
    """Load the project configuration, exiting with an error if it is invalid."""
    try:
        return load_config(cwd)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)


def resolve_output(output: str | None, config: AgdexConfig) -> str:
    """Host file from the command line, then the configuration."""
    return output or config.output or FALLBACK_OUTPUT
