"""
Skills indexing for agdex.

Skills are folders holding a SKILL.md with name/description frontmatter.
They are discovered from plugins, the user's and the project's Claude
directories and cloned skills.sh repositories, then summarized in a
compressed index embedded in a host file.
"""

# Models
from agdex.skills.models import (
    SkillEntry,
    SkillFrontmatter,
    SkillLayout,
    SkillsEmbedOptions,
    SkillsEmbedResult,
    SkillSource,
    SkillSourceConfig,
    SkillSourceOptions,
)

# Parser
from agdex.skills.parser import SKILL_FILE_NAME, parse_skill_frontmatter

# Loader
from agdex.skills.loader import (
    InvalidRepoError,
    add_skills_sh_repo,
    collect_all_skills,
    discover_flat_skills,
    discover_plugin_skills,
    discover_skills_sh_repo,
    get_default_skill_sources,
    get_enabled_plugin_sources,
    list_cached_skills_sh_repos,
)

# Index
from agdex.skills.index import (
    escape_description,
    format_skill_entry,
    generate_skills_index,
    has_existing_skills_index,
    inject_skills_index,
    remove_skills_index,
)

# Pipeline
from agdex.skills.embed import embed_skills

__all__ = [
    # Models
    "SkillEntry",
    "SkillFrontmatter",
    "SkillLayout",
    "SkillsEmbedOptions",
    "SkillsEmbedResult",
    "SkillSource",
    "SkillSourceConfig",
    "SkillSourceOptions",
    # Parser
    "SKILL_FILE_NAME",
    "parse_skill_frontmatter",
    # Loader
    "InvalidRepoError",
    "add_skills_sh_repo",
    "collect_all_skills",
    "discover_flat_skills",
    "discover_plugin_skills",
    "discover_skills_sh_repo",
    "get_default_skill_sources",
    "get_enabled_plugin_sources",
    "list_cached_skills_sh_repos",
    # Index
    "escape_description",
    "format_skill_entry",
    "generate_skills_index",
    "has_existing_skills_index",
    "inject_skills_index",
    "remove_skills_index",
    # Pipeline
    "embed_skills",
]
