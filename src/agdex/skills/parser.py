"""
SKILL.md frontmatter parser for agdex.

Only the single-line ``name:`` and ``description:`` keys are read. This is a
narrow line scanner rather than a YAML parser: multi-line values, folded
scalars and nested keys are not supported.
"""

import re

from agdex.skills.models import SkillFrontmatter

SKILL_FILE_NAME = "SKILL.md"

_BLOCK_RE = re.compile(r"\A[ \t]*---[ \t]*\r?\n(.*?)\r?\n[ \t]*---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_NAME_RE = re.compile(r"^name:[ \t]*(.+)$", re.MULTILINE)
_DESCRIPTION_RE = re.compile(r"^description:[ \t]*(.+)$", re.MULTILINE)
_QUOTE_RE = re.compile(r"^[\"']|[\"']$")


def _field(pattern: re.Pattern[str], body: str) -> str:
    match = pattern.search(body)
    if not match:
        return ""
    return _QUOTE_RE.sub("", match.group(1).strip())


def parse_skill_frontmatter(content: str) -> SkillFrontmatter | None:
    """Extract name and description from a SKILL.md file.

    Args:
        content: Raw file content.

    Returns:
        The frontmatter, or None when there is no frontmatter block or
        either field is missing or empty.
    """
    block = _BLOCK_RE.match(content)
    if not block:
        return None

    body = block.group(1)
    name = _field(_NAME_RE, body)
    description = _field(_DESCRIPTION_RE, body)

    if not name or not description:
        return None

    return SkillFrontmatter(name=name, description=description)
