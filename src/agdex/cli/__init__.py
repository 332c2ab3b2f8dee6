"""Command line interface for agdex."""

from agdex.cli.app import app

__all__ = ["app"]
