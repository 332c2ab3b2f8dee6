"""
Path utilities for agdex.

Environment lookups live here and are only called from the CLI layer.
Library functions receive the resolved directories as arguments.
"""

import os
from pathlib import Path

LOCAL_CACHE_DIRNAME = ".agdex"


def get_agdex_home() -> Path:
    """
    Get the agdex home (global cache) directory.

    Resolution order:
    1. AGDEX_HOME environment variable
    2. Default: ~/.cache/agdex

    Returns:
        Path to the agdex home directory.
    """
    env_home = os.environ.get("AGDEX_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".cache" / "agdex"


def get_claude_home() -> Path:
    """
    Get the Claude configuration directory holding user skills and plugins.

    Resolution order:
    1. CLAUDE_HOME environment variable
    2. Default: ~/.claude

    Returns:
        Path to the Claude home directory.
    """
    env_home = os.environ.get("CLAUDE_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".claude"


def get_global_cache_dir(home: Path) -> Path:
    """
    Get the global docs cache directory.

    Args:
        home: The agdex home directory.

    Returns:
        Path to <home>/docs
    """
    return home / "docs"


def get_local_cache_dir(cwd: Path) -> Path:
    """
    Get the project-local docs cache directory.

    Args:
        cwd: Project root.

    Returns:
        Path to <cwd>/.agdex
    """
    return cwd / LOCAL_CACHE_DIRNAME


def get_skills_sh_cache_dir(home: Path) -> Path:
    """
    Get the directory where skills.sh repositories are cloned.

    Args:
        home: The agdex home directory.

    Returns:
        Path to <home>/skills-sh
    """
    return home / "skills-sh"


def repo_cache_name(repo: str) -> str:
    """Turn an ``owner/repo`` identifier into a single directory name."""
    return repo.strip("/").replace("/", "__")

