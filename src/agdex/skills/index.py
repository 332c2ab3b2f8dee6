"""
Skills index serializer for agdex.

Renders discovered skills as a single pipe-delimited line::

    [Skills Index]|plugin:tools:{fmt:Formats code[run.sh]}|user:{notes:Keeps notes}|Regen: agdex skills embed

and embeds it in host files between AGENTS-MD-SKILLS markers. A host file
holds at most one skills index.
"""

from typing import assert_never

from agdex.markers import SKILLS_MARKERS, has_block, inject_block, remove_block
from agdex.skills.models import SkillEntry, SkillSource

DEFAULT_REGENERATE_COMMAND = "agdex skills embed"

# Applied in order. The backslash itself is never escaped.
_ESCAPES = [
    ("|", "\\|"),
    (";", "\\;"),
    (":", "\\:"),
    ("[", "\\["),
    ("]", "\\]"),
    ("{", "\\{"),
    ("}", "\\}"),
]


def escape_description(description: str) -> str:
    """Escape the index delimiters in a skill description."""
    for char, replacement in _ESCAPES:
        description = description.replace(char, replacement)
    return description


def format_skill_entry(skill: SkillEntry) -> str:
    """Render one skill as ``name:description`` plus ``[files]`` if it has siblings."""
    entry = f"{skill.name}:{escape_description(skill.description)}"
    if skill.sibling_files:
        entry += f"[{','.join(skill.sibling_files)}]"
    return entry


def _format_group(entries: list[SkillEntry]) -> str:
    return "{" + ";".join(format_skill_entry(skill) for skill in entries) + "}"


def generate_skills_index(skills: list[SkillEntry], regenerate_command: str | None = None) -> str:
    """Render the compressed skills index.

    Plugin and remote skills are grouped by origin label in first-seen order;
    user and project skills form one group each. Groups are emitted as
    plugin, remote, user, project.

    Args:
        skills: Discovered skills.
        regenerate_command: Command written in the final ``Regen:`` segment.

    Returns:
        The pipe-delimited index text (without markers).
    """
    plugin_groups: dict[str, list[SkillEntry]] = {}
    remote_groups: dict[str, list[SkillEntry]] = {}
    user_skills: list[SkillEntry] = []
    project_skills: list[SkillEntry] = []

    for skill in skills:
        source = skill.source
        if source is SkillSource.PLUGIN:
            plugin_groups.setdefault(skill.origin_label or "", []).append(skill)
        elif source is SkillSource.REMOTE:
            remote_groups.setdefault(skill.origin_label or "", []).append(skill)
        elif source is SkillSource.USER:
            user_skills.append(skill)
        elif source is SkillSource.PROJECT:
            project_skills.append(skill)
        else:
            assert_never(source)

    parts = ["[Skills Index]"]
    for label, entries in plugin_groups.items():
        parts.append(f"{SkillSource.PLUGIN.index_tag}:{label}:{_format_group(entries)}")
    for label, entries in remote_groups.items():
        parts.append(f"{SkillSource.REMOTE.index_tag}:{label}:{_format_group(entries)}")
    if user_skills:
        parts.append(f"{SkillSource.USER.index_tag}:{_format_group(user_skills)}")
    if project_skills:
        parts.append(f"{SkillSource.PROJECT.index_tag}:{_format_group(project_skills)}")

    parts.append(f"Regen: {regenerate_command or DEFAULT_REGENERATE_COMMAND}")
    return "|".join(parts)


def has_existing_skills_index(content: str) -> bool:
    """Check whether content has a skills index."""
    return has_block(content, SKILLS_MARKERS)


def inject_skills_index(content: str, index: str) -> str:
    """Insert or replace the skills index block."""
    return inject_block(content, index, SKILLS_MARKERS)


def remove_skills_index(content: str) -> str:
    """Remove the skills index block, if any."""
    return remove_block(content, SKILLS_MARKERS)
