"""
Skill models for agdex.

Defines skill frontmatter, discovered skill entries, the places skills are
discovered from and the options and results of the skills pipeline.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SkillFrontmatter(BaseModel):
    """The two frontmatter fields agdex reads from SKILL.md."""

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class SkillSource(str, Enum):
    """Where a skill was discovered."""

    PLUGIN = "plugin"
    USER = "user"
    PROJECT = "project"
    REMOTE = "remote"

    @property
    def index_tag(self) -> str:
        """Tag written in front of this source's group in the skills index."""
        if self is SkillSource.REMOTE:
            return "skills-sh"
        return self.value


class SkillLayout(str, Enum):
    """Directory shape of a skill source.

    flat: ``<root>/<skill>/SKILL.md``
    nested: ``<root>/plugins/<plugin>/skills/<skill>/SKILL.md``
    """

    FLAT = "flat"
    NESTED = "nested"


class SkillEntry(BaseModel):
    """A discovered skill.

    ``origin_label`` is the plugin name or ``owner/repo`` and is required
    for plugin and remote skills; user and project skills have none.
    """

    name: str
    description: str
    skill_file_path: str = Field(..., description="Path of the SKILL.md file")
    sibling_files: list[str] = Field(
        default_factory=list,
        description="Files next to SKILL.md, relative to the skill directory",
    )
    source: SkillSource
    origin_label: str | None = None

    @model_validator(mode="after")
    def _check_origin_label(self) -> "SkillEntry":
        if self.source in (SkillSource.PLUGIN, SkillSource.REMOTE) and not self.origin_label:
            raise ValueError(f"{self.source.value} skills require an origin_label")
        return self


class SkillSourceConfig(BaseModel):
    """A place to discover skills from."""

    model_config = ConfigDict(frozen=True)

    type: SkillSource
    path: str = Field(..., description="Root directory to scan")
    label: str = Field(..., min_length=1)
    layout: SkillLayout = SkillLayout.FLAT

    @model_validator(mode="after")
    def _check_layout(self) -> "SkillSourceConfig":
        if self.layout is SkillLayout.NESTED and self.type is not SkillSource.PLUGIN:
            raise ValueError("Only plugin sources can use the nested layout")
        return self


class SkillSourceOptions(BaseModel):
    """Which default skill sources to include.

    Attributes:
        include_user: Scan ``<claude_home>/skills``.
        include_project: Scan ``<cwd>/.claude/skills``.
        include_enabled_plugins: Scan plugins enabled in Claude settings.
        plugin_paths: Plugin repositories with the nested layout.
        skills_sh_repos: Cloned skills.sh repositories as (path, owner/repo).
    """

    include_user: bool = True
    include_project: bool = True
    include_enabled_plugins: bool = True
    plugin_paths: list[str] = Field(default_factory=list)
    skills_sh_repos: list[tuple[str, str]] = Field(default_factory=list)


class SkillsEmbedOptions(BaseModel):
    """Options for embedding a skills index."""

    cwd: Path
    sources: list[SkillSourceConfig]
    output: str = "AGENTS.md"
    regenerate_command: str | None = None


class SkillsEmbedResult(BaseModel):
    """Outcome of embedding a skills index."""

    success: bool
    target_file: str | None = None
    skill_count: int = 0
    size_before: int = 0
    size_after: int = 0
    is_new_file: bool = True
    source_breakdown: dict[SkillSource, int] = Field(default_factory=dict)
    error: str | None = None
