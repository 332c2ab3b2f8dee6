"""
Pydantic configuration schema for agdex.
"""

from pydantic import BaseModel, ConfigDict, Field

from agdex.remote.skills_sh import SKILLS_SH_API_BASE

DEFAULT_CONFIG_OUTPUT = "CLAUDE.md"


class SkillsConfig(BaseModel):
    """Which skill sources `agdex skills embed` scans by default."""

    model_config = ConfigDict(extra="forbid")

    include_user: bool = True
    include_project: bool = True
    include_enabled_plugins: bool = True
    plugin_paths: list[str] = Field(default_factory=list)


class AgdexConfig(BaseModel):
    """Project configuration."""

    model_config = ConfigDict(extra="ignore")

    output: str = Field(default=DEFAULT_CONFIG_OUTPUT, description="Host file written by default")
    global_cache: bool = Field(default=False, description="Store docs in the agdex home instead of .agdex/")
    docs_dir: str | None = Field(default=None, description="Custom docs directory")
    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    skills_sh_api: str = SKILLS_SH_API_BASE
