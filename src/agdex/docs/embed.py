"""
Docs pipeline for agdex.

Downloads a provider's docs (or reads a local folder), builds the index and
embeds it into the host file.
"""

import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator

from agdex.docs.index import (
    generate_docs_index,
    has_existing_index,
    inject_index,
    list_docs_indexes,
    remove_docs_index,
)
from agdex.docs.models import (
    DocFile,
    DocsIndexOptions,
    EmbedResult,
    GitignoreStatus,
    PullResult,
    RemoveResult,
)
from agdex.docs.providers import DEFAULT_EXTENSIONS, DocProvider, default_instruction
from agdex.docs.tree import build_doc_tree
from agdex.exceptions import CloneError
from agdex.markers import SKILLS_MARKERS, has_block, remove_block
from agdex.remote.git import clone_sparse
from agdex.storage.host import read_host_file, write_host_file
from agdex.storage.paths import LOCAL_CACHE_DIRNAME, get_global_cache_dir, get_local_cache_dir

logger = logging.getLogger(__name__)

GITIGNORE_HEADER = "# agdex"


class EmbedOptions(BaseModel):
    """Options for embedding a provider's docs index.

    Attributes:
        cwd: Project root; output and relative docs_dir resolve against it.
        provider: Documentation provider.
        version: Version override; detected from the project when omitted.
        output: Host file name.
        docs_dir: Custom docs directory instead of the cache.
        global_cache: Store docs under cache_home instead of <cwd>/.agdex.
        cache_home: agdex home directory, required with global_cache.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    cwd: Path
    provider: DocProvider
    version: str | None = None
    output: str = "AGENTS.md"
    docs_dir: str | None = None
    global_cache: bool = False
    cache_home: Path | None = None

    @model_validator(mode="after")
    def _check_cache_home(self) -> "EmbedOptions":
        if self.global_cache and self.docs_dir is None and self.cache_home is None:
            raise ValueError("cache_home is required when global_cache is set")
        return self


def _matches_exclude(path: str, pattern: str) -> bool:
    if pattern.startswith("**/") and pattern.endswith("/**"):
        dir_name = pattern[3:-3]
        return f"/{dir_name}/" in path or path.startswith(f"{dir_name}/")
    if pattern.startswith("**/"):
        suffix = pattern[3:]
        return path.endswith(suffix) or path == suffix
    if pattern.startswith("*"):
        return path.endswith(pattern[1:])
    return path == pattern or path.endswith("/" + pattern)


def _is_index_file(path: str) -> bool:
    return path.endswith("/index.mdx") or path.endswith("/index.md") or path.startswith("index.")


def collect_doc_files(
    root: Path,
    extensions: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
) -> list[DocFile]:
    """Collect documentation files under a directory.

    Supported exclude forms: ``**/dir/**``, ``**/suffix``, ``*suffix`` and
    an exact relative path or file name. Index files are always skipped.

    Args:
        root: Docs directory.
        extensions: File extensions to keep.
        exclude_patterns: Patterns to leave out.

    Returns:
        Doc files sorted by relative path.
    """
    extensions = extensions or list(DEFAULT_EXTENSIONS)
    exclude_patterns = exclude_patterns or []

    paths: list[str] = []
    for item in root.rglob("*"):
        if not item.is_file():
            continue
        rel = item.relative_to(root).as_posix()
        if not any(rel.endswith(ext) for ext in extensions):
            continue
        if any(_matches_exclude(rel, pattern) for pattern in exclude_patterns):
            continue
        if _is_index_file(rel):
            continue
        paths.append(rel)

    return [DocFile(relative_path=path) for path in sorted(paths)]


def pull_docs(
    provider: DocProvider,
    cwd: Path,
    docs_path: Path,
    version: str | None = None,
) -> PullResult:
    """Download a provider's docs folder for the project's version.

    Args:
        provider: Documentation provider.
        cwd: Project root used for version detection.
        docs_path: Destination directory.
        version: Version override.

    Returns:
        PullResult; failures are reported, not raised.
    """
    if not version:
        detected = provider.detect_version(cwd)
        if not detected.version:
            return PullResult(
                success=False,
                error=detected.error or f"Could not detect {provider.display_name} version",
            )
        version = detected.version

    tag = provider.version_to_tag(version)
    logger.info("Pulling %s docs (%s) into %s", provider.display_name, tag, docs_path)

    try:
        clone_sparse(provider.repo, provider.docs_path, tag, docs_path)
    except CloneError as e:
        return PullResult(success=False, error=str(e))

    return PullResult(success=True, docs_path=str(docs_path), version=version)


def ensure_gitignore_entry(cwd: Path, docs_dir: str) -> GitignoreStatus:
    """Make sure .gitignore ignores the docs directory.

    Raises:
        OSError: If .gitignore cannot be read or written.
    """
    gitignore = cwd / ".gitignore"
    name = docs_dir.rstrip("/")
    entry = f"{name}/"
    entry_re = re.compile(rf"^\s*{re.escape(name)}(?:/.*)?$")

    content = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""

    if any(entry_re.match(line) for line in content.splitlines()):
        return GitignoreStatus(path=str(gitignore), updated=False, already_present=True)

    needs_newline = bool(content) and not content.endswith("\n")
    header = "" if GITIGNORE_HEADER in content else f"{GITIGNORE_HEADER}\n"
    new_content = content + ("\n" if needs_newline else "") + header + f"{entry}\n"
    gitignore.write_text(new_content, encoding="utf-8")

    return GitignoreStatus(path=str(gitignore), updated=True, already_present=False)


def _resolve_docs_location(options: EmbedOptions) -> tuple[Path, str, str]:
    """Return (absolute docs path, path written into the index, path reported to the user)."""
    provider = options.provider

    if options.docs_dir:
        custom = Path(options.docs_dir)
        if custom.is_absolute():
            return custom, options.docs_dir, options.docs_dir
        link = options.docs_dir if options.docs_dir.startswith("./") else f"./{options.docs_dir}"
        return options.cwd / custom, link, options.docs_dir

    if options.global_cache:
        assert options.cache_home is not None
        docs_path = get_global_cache_dir(options.cache_home) / provider.name
        return docs_path, str(docs_path), str(docs_path)

    docs_dir = f"{LOCAL_CACHE_DIRNAME}/{provider.name}"
    return get_local_cache_dir(options.cwd) / provider.name, f"./{docs_dir}", docs_dir


def regenerate_command(options: EmbedOptions) -> str:
    """Command that rebuilds this provider's index."""
    command = f"agdex embed --provider {options.provider.name} --output {options.output}"
    if options.global_cache:
        command += " --global"
    return command


def embed_docs(options: EmbedOptions) -> EmbedResult:
    """Download a provider's docs and embed their index into the host file.

    The index block carries the provider name as identifier, so several
    providers can share one host file.

    Args:
        options: Embed options.

    Returns:
        EmbedResult; failures are reported, not raised.
    """
    provider = options.provider
    target = options.cwd / options.output

    try:
        host = read_host_file(target)
    except (OSError, UnicodeDecodeError) as e:
        return EmbedResult(success=False, error=f"Cannot read {options.output}: {e}")

    docs_path, link_path, reported_path = _resolve_docs_location(options)

    version = options.version
    if provider.is_local:
        docs_path = options.cwd / provider.docs_path
        link_path = f"./{provider.docs_path}"
        reported_path = provider.docs_path
    else:
        pull = pull_docs(provider, options.cwd, docs_path, version)
        if not pull.success:
            return EmbedResult(success=False, error=pull.error)
        version = pull.version

    files = collect_doc_files(docs_path, provider.extensions, provider.exclude_patterns)
    index = generate_docs_index(
        DocsIndexOptions(
            root_path=link_path,
            sections=build_doc_tree(files),
            output_file=options.output,
            provider_label=provider.display_name,
            instruction=provider.get_instruction(),
            description=provider.description,
            regenerate_command=regenerate_command(options),
        )
    )
    new_content = inject_index(host.content, index, provider.name)

    try:
        size_after = write_host_file(target, new_content)
    except OSError as e:
        return EmbedResult(success=False, error=f"Cannot write {options.output}: {e}")

    gitignore_updated = False
    if not options.global_cache and not provider.is_local:
        ignore_dir = options.docs_dir or LOCAL_CACHE_DIRNAME
        if not Path(ignore_dir).is_absolute():
            try:
                gitignore_updated = ensure_gitignore_entry(options.cwd, ignore_dir).updated
            except OSError as e:
                logger.warning("Could not update .gitignore: %s", e)

    return EmbedResult(
        success=True,
        target_file=options.output,
        docs_path=reported_path,
        version=version,
        size_before=host.size,
        size_after=size_after,
        is_new_file=not host.exists,
        gitignore_updated=gitignore_updated,
    )


def local_block_id(name: str) -> str:
    """Block identifier for a local docs folder."""
    slug = re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip("-").lower()
    return slug or "local"


def embed_local_docs(
    cwd: Path,
    docs_path: str,
    name: str | None = None,
    output: str = "AGENTS.md",
    extensions: list[str] | None = None,
) -> EmbedResult:
    """Index a local documentation folder into the host file.

    Args:
        cwd: Project root.
        docs_path: Docs folder, absolute or relative to cwd.
        name: Display name (defaults to the folder name).
        output: Host file name.
        extensions: File extensions to include.

    Returns:
        EmbedResult; failures are reported, not raised.
    """
    root = Path(docs_path) if Path(docs_path).is_absolute() else cwd / docs_path
    if not root.is_dir():
        return EmbedResult(success=False, error=f"Documentation directory not found: {docs_path}")

    name = name or Path(docs_path).name
    target = cwd / output

    try:
        host = read_host_file(target)
    except (OSError, UnicodeDecodeError) as e:
        return EmbedResult(success=False, error=f"Cannot read {output}: {e}")

    link_path = docs_path
    if not Path(docs_path).is_absolute() and not docs_path.startswith("./"):
        link_path = f"./{docs_path}"

    files = collect_doc_files(root, extensions or [".md", ".mdx"])
    index = generate_docs_index(
        DocsIndexOptions(
            root_path=link_path,
            sections=build_doc_tree(files),
            output_file=output,
            provider_label=name,
            instruction=default_instruction(name),
            regenerate_command=f'agdex local {docs_path} --name "{name}" --output {output}',
        )
    )
    new_content = inject_index(host.content, index, local_block_id(name))

    try:
        size_after = write_host_file(target, new_content)
    except OSError as e:
        return EmbedResult(success=False, error=f"Cannot write {output}: {e}")

    return EmbedResult(
        success=True,
        target_file=output,
        docs_path=docs_path,
        size_before=host.size,
        size_after=size_after,
        is_new_file=not host.exists,
    )


def remove_indexes(
    cwd: Path,
    output: str = "AGENTS.md",
    docs: bool = True,
    skills: bool = True,
    provider: str | None = None,
) -> RemoveResult:
    """Remove docs and/or skills indexes from the host file.

    Args:
        cwd: Project root.
        output: Host file name.
        docs: Remove docs indexes.
        skills: Remove the skills index.
        provider: Only remove this provider's docs index.

    Returns:
        RemoveResult; the file is left untouched when nothing matched.
    """
    target = cwd / output
    if not target.exists():
        return RemoveResult(success=False, target_file=output, error=f"{output} not found")

    try:
        host = read_host_file(target)
    except (OSError, UnicodeDecodeError) as e:
        return RemoveResult(success=False, target_file=output, error=f"Cannot read {output}: {e}")

    content = host.content
    docs_removed: list[str] = []
    skills_removed = False

    if docs:
        if provider:
            try:
                found = has_existing_index(content, provider)
            except ValueError as e:
                return RemoveResult(success=False, target_file=output, error=str(e))
            if found:
                docs_removed.append(provider)
        else:
            docs_removed = [block_id or "" for block_id in list_docs_indexes(content)]
        if docs_removed:
            content = remove_docs_index(content, provider)

    if skills and has_block(content, SKILLS_MARKERS):
        content = remove_block(content, SKILLS_MARKERS)
        skills_removed = True

    result = RemoveResult(
        success=True,
        target_file=output,
        docs_removed=docs_removed,
        skills_removed=skills_removed,
        size_before=host.size,
        size_after=host.size,
    )
    if not result.removed_anything:
        return result

    try:
        result.size_after = write_host_file(target, content)
    except OSError as e:
        return RemoveResult(success=False, target_file=output, error=f"Cannot write {output}: {e}")

    logger.info("Removed indexes from %s", target)
    return result
