"""
Skill discovery for agdex.

Walks the known directory shapes (flat skill folders, plugin repositories
and cloned skills.sh repositories) and turns every folder that holds a
valid SKILL.md into a SkillEntry.
"""

import json
import logging
import re
from pathlib import Path
from typing import assert_never

from agdex.exceptions import AgdexError
from agdex.remote.git import clone_sparse
from agdex.skills.models import (
    SkillEntry,
    SkillLayout,
    SkillSource,
    SkillSourceConfig,
    SkillSourceOptions,
)
from agdex.skills.parser import SKILL_FILE_NAME, parse_skill_frontmatter
from agdex.storage.fs import FileSystem, get_default_fs
from agdex.storage.paths import get_skills_sh_cache_dir, repo_cache_name

logger = logging.getLogger(__name__)

# Locations probed inside a cloned skills.sh repository, in order.
SKILLS_SH_SEARCH_DIRS = [
    "skills",
    ".claude/skills",
    ".agents/skills",
    "skills/.curated",
    "skills/.experimental",
]

_PLUGIN_KEY_RE = re.compile(r"^(.+)@(.+)$")
_REPO_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


class InvalidRepoError(AgdexError):
    """Repository identifier is not in owner/repo form."""

    def __init__(self, repo: str):
        self.repo = repo
        super().__init__(f"Invalid repository '{repo}', expected owner/repo")


def _origin_label(source: SkillSource, label: str) -> str | None:
    if source is SkillSource.PLUGIN or source is SkillSource.REMOTE:
        return label
    elif source is SkillSource.USER or source is SkillSource.PROJECT:
        return None
    else:
        assert_never(source)


def _list_subdirs(root: Path, fs: FileSystem) -> list[str]:
    """Sorted names of the directories directly under root; [] if unreadable."""
    try:
        if not fs.is_dir(root):
            return []
        return sorted(entry.name for entry in fs.list_dir(root) if entry.is_dir)
    except OSError as e:
        logger.debug("Cannot list %s: %s", root, e)
        return []


def _collect_sibling_files(skill_dir: Path, fs: FileSystem) -> list[str]:
    """Files under a skill directory except SKILL.md itself and dot entries.

    Raises:
        OSError: If a directory cannot be listed.
    """
    files: list[str] = []

    def walk(directory: Path, prefix: str) -> None:
        for entry in fs.list_dir(directory):
            if entry.name.startswith("."):
                continue
            relative = f"{prefix}{entry.name}"
            if entry.is_dir:
                walk(directory / entry.name, f"{relative}/")
            elif relative != SKILL_FILE_NAME:
                files.append(relative)

    walk(skill_dir, "")
    return sorted(files)


def _load_candidate(
    skill_dir: Path,
    source: SkillSource,
    origin_label: str | None,
    fs: FileSystem,
) -> SkillEntry | None:
    """Build a SkillEntry if skill_dir directly holds a valid SKILL.md."""
    skill_file = skill_dir / SKILL_FILE_NAME
    try:
        if not fs.exists(skill_file):
            return None
        frontmatter = parse_skill_frontmatter(fs.read_text(skill_file))
        if frontmatter is None:
            logger.debug("Skipping %s: no name/description frontmatter", skill_file)
            return None
        sibling_files = _collect_sibling_files(skill_dir, fs)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Skipping %s: %s", skill_dir, e)
        return None

    return SkillEntry(
        name=frontmatter.name,
        description=frontmatter.description,
        skill_file_path=str(skill_file),
        sibling_files=sibling_files,
        source=source,
        origin_label=origin_label,
    )


def discover_flat_skills(
    root: str | Path,
    source: SkillSource,
    label: str,
    fs: FileSystem | None = None,
) -> list[SkillEntry]:
    """Discover skills laid out as ``<root>/<skill>/SKILL.md``.

    Args:
        root: Directory holding one folder per skill.
        source: Source recorded on every entry.
        label: Origin label for plugin and remote sources.
        fs: Filesystem to read from.

    Returns:
        Skills in directory name order. A missing root yields [].
    """
    fs = fs or get_default_fs()
    root = Path(root)
    origin_label = _origin_label(source, label)

    skills = []
    for name in _list_subdirs(root, fs):
        entry = _load_candidate(root / name, source, origin_label, fs)
        if entry is not None:
            skills.append(entry)

    logger.debug("Found %d %s skills in %s", len(skills), source.value, root)
    return skills


def discover_plugin_skills(
    root: str | Path,
    label: str,
    fs: FileSystem | None = None,
) -> list[SkillEntry]:
    """Discover skills in a plugin repository.

    Layout: ``<root>/plugins/<plugin>/skills/<skill>/SKILL.md``. Each entry's
    origin label is its plugin directory name.
    """
    fs = fs or get_default_fs()
    plugins_dir = Path(root) / "plugins"

    skills = []
    for plugin in _list_subdirs(plugins_dir, fs):
        skills_dir = plugins_dir / plugin / "skills"
        for name in _list_subdirs(skills_dir, fs):
            entry = _load_candidate(skills_dir / name, SkillSource.PLUGIN, plugin, fs)
            if entry is not None:
                skills.append(entry)

    logger.debug("Found %d skills in plugin repository %s (%s)", len(skills), root, label)
    return skills


def discover_skills_sh_repo(
    repo_root: str | Path,
    repo_label: str,
    fs: FileSystem | None = None,
) -> list[SkillEntry]:
    """Discover skills in a cloned skills.sh repository.

    Looks at a root SKILL.md, then each of SKILLS_SH_SEARCH_DIRS. The first
    skill seen with a given name wins.

    Args:
        repo_root: Local checkout.
        repo_label: Repository as owner/repo.
        fs: Filesystem to read from.

    Returns:
        Remote skills labelled with repo_label.
    """
    fs = fs or get_default_fs()
    repo_root = Path(repo_root)

    candidates: list[SkillEntry] = []
    root_skill = _load_candidate(repo_root, SkillSource.REMOTE, repo_label, fs)
    if root_skill is not None:
        candidates.append(root_skill)
    for search_dir in SKILLS_SH_SEARCH_DIRS:
        candidates.extend(discover_flat_skills(repo_root / search_dir, SkillSource.REMOTE, repo_label, fs))

    seen: set[str] = set()
    skills = []
    for entry in candidates:
        if entry.name in seen:
            continue
        seen.add(entry.name)
        skills.append(entry)
    return skills


def collect_all_skills(
    sources: list[SkillSourceConfig],
    fs: FileSystem | None = None,
) -> list[SkillEntry]:
    """Discover skills from every source, in source order."""
    fs = fs or get_default_fs()
    skills: list[SkillEntry] = []

    for config in sources:
        source = config.type
        if source is SkillSource.PLUGIN:
            if config.layout is SkillLayout.NESTED:
                skills.extend(discover_plugin_skills(config.path, config.label, fs))
            else:
                skills.extend(discover_flat_skills(config.path, source, config.label, fs))
        elif source is SkillSource.USER or source is SkillSource.PROJECT:
            skills.extend(discover_flat_skills(config.path, source, config.label, fs))
        elif source is SkillSource.REMOTE:
            skills.extend(discover_skills_sh_repo(config.path, config.label, fs))
        else:
            assert_never(source)

    return skills


def _read_enabled_plugins(settings_path: Path) -> list[tuple[str, str]]:
    """Enabled plugins from a Claude settings.json as ``(skill, repo)`` pairs."""
    if not settings_path.exists():
        return []
    try:
        settings = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", settings_path, e)
        return []

    enabled = settings.get("enabledPlugins") if isinstance(settings, dict) else None
    if not isinstance(enabled, dict):
        return []
    plugins: list[tuple[str, str]] = []
    for key, value in enabled.items():
        match = _PLUGIN_KEY_RE.match(key)
        if value and match:
            plugins.append((match.group(1), match.group(2)))
    return plugins


def _find_plugin_skills_dir(claude_home: Path, plugin_repo: str, skill_name: str) -> Path | None:
    """Locate ``<claude_home>/plugins/cache/<repo>/<skill>/<hash>/skills``."""
    cache_dir = claude_home / "plugins" / "cache" / plugin_repo / skill_name
    if not cache_dir.is_dir():
        return None
    try:
        hashes = sorted(item.name for item in cache_dir.iterdir() if item.is_dir() and not item.name.startswith("."))
    except OSError as e:
        logger.debug("Cannot list %s: %s", cache_dir, e)
        return None

    if not hashes:
        return None
    skills_dir = cache_dir / hashes[0] / "skills"
    return skills_dir if skills_dir.is_dir() else None


def get_enabled_plugin_sources(cwd: Path, claude_home: Path) -> list[SkillSourceConfig]:
    """Plugin sources enabled in the user's and the project's Claude settings.

    Args:
        cwd: Project root (for ``.claude/settings.json``).
        claude_home: Claude home directory.

    Returns:
        Flat-layout plugin sources labelled ``skill@repo``, user settings first.
    """
    sources: list[SkillSourceConfig] = []
    seen: set[str] = set()

    for settings_path in (claude_home / "settings.json", cwd / ".claude" / "settings.json"):
        for skill_name, plugin_repo in _read_enabled_plugins(settings_path):
            key = f"{skill_name}@{plugin_repo}"
            if key in seen:
                continue
            seen.add(key)

            skills_dir = _find_plugin_skills_dir(claude_home, plugin_repo, skill_name)
            if skills_dir is None:
                logger.debug("Enabled plugin %s is not in the plugin cache", key)
                continue
            sources.append(SkillSourceConfig(type=SkillSource.PLUGIN, path=str(skills_dir), label=key))

    return sources


def get_default_skill_sources(
    cwd: Path,
    claude_home: Path,
    options: SkillSourceOptions | None = None,
) -> list[SkillSourceConfig]:
    """Build the standard list of skill sources.

    Order: plugin repositories, enabled plugins, skills.sh repositories,
    user skills, project skills.
    """
    options = options or SkillSourceOptions()
    sources: list[SkillSourceConfig] = []

    for plugin_path in options.plugin_paths:
        sources.append(
            SkillSourceConfig(
                type=SkillSource.PLUGIN,
                path=plugin_path,
                label=Path(plugin_path).name or plugin_path,
                layout=SkillLayout.NESTED,
            )
        )

    if options.include_enabled_plugins:
        sources.extend(get_enabled_plugin_sources(cwd, claude_home))

    for repo_path, repo_label in options.skills_sh_repos:
        sources.append(SkillSourceConfig(type=SkillSource.REMOTE, path=repo_path, label=repo_label))

    if options.include_user:
        sources.append(SkillSourceConfig(type=SkillSource.USER, path=str(claude_home / "skills"), label="user"))

    if options.include_project:
        sources.append(
            SkillSourceConfig(type=SkillSource.PROJECT, path=str(cwd / ".claude" / "skills"), label="project")
        )

    return sources


def add_skills_sh_repo(repo: str, cache_root: Path, ref: str = "main") -> SkillSourceConfig:
    """Clone a skills.sh repository into the cache.

    Args:
        repo: Repository as owner/repo.
        cache_root: agdex home directory.
        ref: Branch or tag to clone.

    Returns:
        A remote source pointing at the clone.

    Raises:
        InvalidRepoError: If repo is not owner/repo.
        CloneError: If cloning fails.
    """
    if not _REPO_RE.match(repo):
        raise InvalidRepoError(repo)

    dest = get_skills_sh_cache_dir(cache_root) / repo_cache_name(repo)
    logger.info("Adding skills.sh repository %s", repo)
    clone_sparse(repo, "", ref, dest)
    return SkillSourceConfig(type=SkillSource.REMOTE, path=str(dest), label=repo)


def list_cached_skills_sh_repos(cache_root: Path) -> list[tuple[str, str]]:
    """Cloned skills.sh repositories as (path, owner/repo), sorted."""
    cache_dir = get_skills_sh_cache_dir(cache_root)
    if not cache_dir.is_dir():
        return []
    return [
        (str(item), item.name.replace("__", "/", 1))
        for item in sorted(cache_dir.iterdir())
        if item.is_dir() and "__" in item.name
    ]
