"""Storage utilities for agdex."""

from agdex.storage.fs import DirEntry, FileSystem, LocalFileSystem, get_default_fs
from agdex.storage.host import HostFile, byte_size, read_host_file, write_host_file
from agdex.storage.paths import (
    LOCAL_CACHE_DIRNAME,
    get_agdex_home,
    get_claude_home,
    get_global_cache_dir,
    get_local_cache_dir,
    get_skills_sh_cache_dir,
    repo_cache_name,
)

__all__ = [
    "DirEntry",
    "FileSystem",
    "HostFile",
    "LOCAL_CACHE_DIRNAME",
    "LocalFileSystem",
    "byte_size",
    "get_agdex_home",
    "get_claude_home",
    "get_default_fs",
    "get_global_cache_dir",
    "get_local_cache_dir",
    "get_skills_sh_cache_dir",
    "read_host_file",
    "repo_cache_name",
    "write_host_file",
]
