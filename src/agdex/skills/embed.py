"""
Skills pipeline for agdex.

Discovers skills from the configured sources and embeds their index into
the host file.
"""

import logging
from collections import Counter

from agdex.skills.index import generate_skills_index, inject_skills_index
from agdex.skills.loader import collect_all_skills
from agdex.skills.models import SkillSource, SkillsEmbedOptions, SkillsEmbedResult
from agdex.storage.fs import FileSystem
from agdex.storage.host import read_host_file, write_host_file

logger = logging.getLogger(__name__)

NO_SKILLS_ERROR = "No skills found in any of the specified sources"


def embed_skills(options: SkillsEmbedOptions, fs: FileSystem | None = None) -> SkillsEmbedResult:
    """Discover skills and embed their index into the host file.

    Args:
        options: Embed options.
        fs: Filesystem used for discovery.

    Returns:
        SkillsEmbedResult; failures are reported, not raised.
    """
    target = options.cwd / options.output

    try:
        host = read_host_file(target)
    except (OSError, UnicodeDecodeError) as e:
        return SkillsEmbedResult(success=False, error=f"Cannot read {options.output}: {e}")

    skills = collect_all_skills(options.sources, fs)
    if not skills:
        return SkillsEmbedResult(success=False, error=NO_SKILLS_ERROR)

    counts = Counter(skill.source for skill in skills)
    breakdown = {source: counts.get(source, 0) for source in SkillSource}

    index = generate_skills_index(skills, options.regenerate_command)
    new_content = inject_skills_index(host.content, index)

    try:
        size_after = write_host_file(target, new_content)
    except OSError as e:
        return SkillsEmbedResult(success=False, error=f"Cannot write {options.output}: {e}")

    logger.info("Embedded %d skills into %s", len(skills), target)
    return SkillsEmbedResult(
        success=True,
        target_file=options.output,
        skill_count=len(skills),
        size_before=host.size,
        size_after=size_after,
        is_new_file=not host.exists,
        source_breakdown=breakdown,
    )
