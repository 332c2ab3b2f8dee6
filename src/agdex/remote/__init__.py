"""Remote collaborators: GitHub sparse clones and the skills.sh search API."""

from agdex.remote.git import clone_sparse
from agdex.remote.skills_sh import SKILLS_SH_API_BASE, SkillsShSearchResult, search_skills_sh

__all__ = [
    "SKILLS_SH_API_BASE",
    "SkillsShSearchResult",
    "clone_sparse",
    "search_skills_sh",
]
