"""
Docs indexing for agdex.

Providers describe where a framework's documentation lives; the pipeline
downloads it, builds a compressed index and embeds it in a host file.
"""

# Models
from agdex.docs.models import (
    DocFile,
    DocSection,
    DocsIndexOptions,
    EmbedResult,
    GitignoreStatus,
    PullResult,
    RemoveResult,
    VersionResult,
)

# Tree
from agdex.docs.tree import build_doc_tree, flatten_doc_tree

# Index
from agdex.docs.index import (
    generate_docs_index,
    has_existing_index,
    inject_index,
    list_docs_indexes,
    remove_docs_index,
)

# Providers
from agdex.docs.providers import (
    BUILTIN_PROVIDERS,
    DocProvider,
    auto_detect_provider,
    create_local_provider,
    create_provider,
    get_provider,
    list_providers,
)

# Pipeline
from agdex.docs.embed import (
    EmbedOptions,
    collect_doc_files,
    embed_docs,
    embed_local_docs,
    ensure_gitignore_entry,
    pull_docs,
    remove_indexes,
)

__all__ = [
    # Models
    "DocFile",
    "DocSection",
    "DocsIndexOptions",
    "EmbedResult",
    "GitignoreStatus",
    "PullResult",
    "RemoveResult",
    "VersionResult",
    # Tree
    "build_doc_tree",
    "flatten_doc_tree",
    # Index
    "generate_docs_index",
    "has_existing_index",
    "inject_index",
    "list_docs_indexes",
    "remove_docs_index",
    # Providers
    "BUILTIN_PROVIDERS",
    "DocProvider",
    "auto_detect_provider",
    "create_local_provider",
    "create_provider",
    "get_provider",
    "list_providers",
    # Pipeline
    "EmbedOptions",
    "collect_doc_files",
    "embed_docs",
    "embed_local_docs",
    "ensure_gitignore_entry",
    "pull_docs",
    "remove_indexes",
]
