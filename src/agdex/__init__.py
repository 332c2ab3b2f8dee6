"""
agdex - Documentation and skills indexes for AI coding agents.

Builds compact, regenerable indexes of documentation folders and agent
skills and embeds them into AGENTS.md / CLAUDE.md between marker comments.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("agdex")
except PackageNotFoundError:
    __version__ = "0.4.0"

__all__ = [
    "__version__",
]
