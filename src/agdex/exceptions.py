"""
Base exceptions for agdex.

Subsystems define their own errors next to their code and derive them
from AgdexError so the CLI can report them uniformly.
"""


class AgdexError(Exception):
    """Base exception for agdex errors."""

    pass


class CloneError(AgdexError):
    """A sparse clone of a remote repository failed."""

    def __init__(self, message: str, repo: str | None = None, ref: str | None = None):
        super().__init__(message)
        self.repo = repo
        self.ref = ref


class RemoteSearchError(AgdexError):
    """The skills.sh search API could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
