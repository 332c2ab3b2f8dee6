"""
Docs index serializer for agdex.

Renders the doc tree as a single pipe-delimited line::

    [Next.js Docs Index]|root: ./.agdex/nextjs|<instruction>|If docs missing, run: ...|01-app:{a.mdx,b.mdx}

and embeds it in host files between AGENTS-MD-EMBED markers, one block per
provider.
"""

from agdex.docs.models import DocsIndexOptions
from agdex.docs.tree import flatten_doc_tree
from agdex.markers import DOCS_MARKERS, find_block_ids, has_block, inject_block, remove_block

DEFAULT_OUTPUT = "AGENTS.md"


def default_regenerate_command(output_file: str | None = None) -> str:
    """Command written into the index when the caller provides none."""
    return f"agdex embed --output {output_file or DEFAULT_OUTPUT}"


def group_by_directory(paths: list[str]) -> dict[str, list[str]]:
    """Group relative paths by parent directory, keeping first-seen order.

    Root-level files are grouped under ".".
    """
    grouped: dict[str, list[str]] = {}
    for path in paths:
        directory, slash, name = path.rpartition("/")
        if not slash:
            directory = "."
        grouped.setdefault(directory, []).append(name)
    return grouped


def generate_docs_index(options: DocsIndexOptions) -> str:
    """Render the compressed docs index.

    Args:
        options: Tree and header metadata.

    Returns:
        The pipe-delimited index text (without markers).
    """
    header = f"[{options.provider_label} Docs Index]" if options.provider_label else "[Docs Index]"
    parts = [header, f"root: {options.root_path}"]

    if options.instruction:
        parts.append(options.instruction)
    if options.description:
        parts.append(options.description)

    command = options.regenerate_command or default_regenerate_command(options.output_file)
    parts.append(f"If docs missing, run: {command}")

    grouped = group_by_directory(flatten_doc_tree(options.sections))
    for directory, names in grouped.items():
        parts.append(f"{directory}:{{{','.join(names)}}}")

    return "|".join(parts)


def has_existing_index(content: str, provider: str | None = None) -> bool:
    """Check whether content has a docs index for the given provider (or an unnamed one)."""
    return has_block(content, DOCS_MARKERS, provider)


def list_docs_indexes(content: str) -> list[str | None]:
    """Identifiers of all docs indexes in content."""
    return find_block_ids(content, DOCS_MARKERS)


def inject_index(content: str, index: str, provider: str | None = None) -> str:
    """Insert or replace a docs index block."""
    return inject_block(content, index, DOCS_MARKERS, provider)


def remove_docs_index(content: str, provider: str | None = None) -> str:
    """Remove one provider's docs index, or every docs index when no provider is given."""
    return remove_block(content, DOCS_MARKERS, provider)
