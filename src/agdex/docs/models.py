"""
Documentation index models for agdex.

Defines the doc tree, the options for rendering a docs index and the
results reported by the docs pipeline.
"""

from pydantic import BaseModel, ConfigDict, Field


class DocFile(BaseModel):
    """A documentation file, identified by its posix path relative to the docs root."""

    model_config = ConfigDict(frozen=True)

    relative_path: str = Field(..., description="Forward-slash path relative to the docs root")


class DocSection(BaseModel):
    """One directory level of the doc tree.

    The name is either a path segment or "." for files at the docs root.
    """

    name: str = Field(..., description="Path segment, or '.' for root-level files")
    files: list[DocFile] = Field(default_factory=list)
    subsections: list["DocSection"] = Field(default_factory=list)


class DocsIndexOptions(BaseModel):
    """Everything needed to render a docs index."""

    root_path: str = Field(..., description="Docs location as written into the index")
    sections: list[DocSection] = Field(default_factory=list)
    output_file: str | None = Field(default=None, description="Host file name for the default regen command")
    provider_label: str | None = Field(default=None, description="Display name used in the header")
    instruction: str | None = None
    description: str | None = None
    regenerate_command: str | None = None


class VersionResult(BaseModel):
    """Outcome of a version detection attempt."""

    version: str | None = None
    error: str | None = None


class PullResult(BaseModel):
    """Outcome of downloading a provider's docs."""

    success: bool
    docs_path: str | None = None
    version: str | None = None
    error: str | None = None


class GitignoreStatus(BaseModel):
    """Outcome of ensuring a .gitignore entry."""

    path: str
    updated: bool
    already_present: bool


class EmbedResult(BaseModel):
    """Outcome of embedding a docs index into a host file."""

    success: bool
    target_file: str | None = None
    docs_path: str | None = None
    version: str | None = None
    size_before: int = 0
    size_after: int = 0
    is_new_file: bool = True
    gitignore_updated: bool = False
    error: str | None = None


class RemoveResult(BaseModel):
    """Outcome of removing indexes from a host file."""

    success: bool
    target_file: str | None = None
    docs_removed: list[str] = Field(
        default_factory=list,
        description="Identifiers of removed docs blocks ('' for unidentified blocks)",
    )
    skills_removed: bool = False
    size_before: int = 0
    size_after: int = 0
    error: str | None = None

    @property
    def removed_anything(self) -> bool:
        """Whether any block was removed."""
        return bool(self.docs_removed) or self.skills_removed
