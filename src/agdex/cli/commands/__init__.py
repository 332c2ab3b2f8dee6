"""CLI command modules."""

from agdex.cli.commands import docs, remove, skills

__all__ = ["docs", "remove", "skills"]
