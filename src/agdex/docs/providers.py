"""
Documentation providers for agdex.

A provider says where a framework's docs live on GitHub, which files to
index, how to find the version a project uses and how to turn that version
into a git ref.
"""

import re
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from agdex.docs.models import VersionResult
from agdex.docs.versions import (
    CommandVersionDetector,
    FirstMatchDetector,
    FixedVersionDetector,
    ManifestJsonDetector,
    NpmPackageDetector,
    PythonPackageDetector,
    VersionDetector,
)

DEFAULT_EXTENSIONS = [".mdx", ".md"]
DEFAULT_EXCLUDES = ["**/index.mdx", "**/index.md"]
ASSET_EXCLUDES = ["**/index.md", "**/assets/**", "**/stylesheets/**", "**/javascripts/**"]


def default_instruction(display_name: str) -> str:
    """Instruction line used when a provider defines none."""
    return (
        "IMPORTANT: Prefer retrieval-led reasoning over pre-training-led reasoning "
        f"for any {display_name} tasks."
    )


class DocProvider(BaseModel):
    """Configuration for a documentation source.

    ``tag_template`` is formatted with ``version`` (as given) and ``bare``
    (leading "v" removed). ``tag_function`` takes precedence when set.
    An empty ``repo`` marks a local-only provider.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., description="Unique identifier, also used as the index block id")
    display_name: str
    repo: str = Field(default="", description="GitHub repository as owner/repo")
    docs_path: str = Field(..., description="Docs folder inside the repository")
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDES))
    instruction: str | None = None
    description: str | None = None
    tag_template: str = "v{bare}"
    tag_function: Callable[[str], str] | None = Field(default=None, exclude=True, repr=False)
    detector: VersionDetector | None = Field(default=None, exclude=True, repr=False)

    @property
    def is_local(self) -> bool:
        """Whether this provider reads docs from disk instead of GitHub."""
        return not self.repo

    @property
    def can_detect_version(self) -> bool:
        return self.detector is not None

    def detect_version(self, cwd: Path) -> VersionResult:
        """Detect the framework version used by the project at cwd."""
        if self.detector is None:
            return VersionResult(
                error=f"No version provided and {self.display_name} does not support auto-detection"
            )
        return self.detector.detect(cwd)

    def version_to_tag(self, version: str) -> str:
        """Map a version to the git ref holding its docs."""
        if self.tag_function is not None:
            return self.tag_function(version)
        bare = version[1:] if version.startswith("v") else version
        return self.tag_template.format(version=version, bare=bare)

    def get_instruction(self) -> str:
        return self.instruction or default_instruction(self.display_name)


def _svelte_tag(version: str) -> str:
    bare = version[1:] if version.startswith("v") else version
    major = bare.split(".")[0]
    if major.isdigit() and int(major) >= 5:
        return f"svelte@{bare}"
    return f"v{bare}"


def _major_branch(version: str) -> str:
    bare = version[1:] if version.startswith("v") else version
    return f"v{bare.split('.')[0]}"


def _python_tool(package: str, display_name: str) -> VersionDetector:
    return FirstMatchDetector(
        [
            PythonPackageDetector(package, display_name),
            CommandVersionDetector(package, display_name),
        ]
    )


BUILTIN_PROVIDERS: dict[str, DocProvider] = {
    provider.name: provider
    for provider in [
        DocProvider(
            name="nextjs",
            display_name="Next.js",
            repo="vercel/next.js",
            docs_path="docs",
            detector=NpmPackageDetector(["next"], "Next.js"),
        ),
        DocProvider(
            name="react",
            display_name="React",
            repo="reactjs/react.dev",
            docs_path="src/content",
            extensions=[".md", ".mdx"],
            exclude_patterns=["**/index.md"],
            detector=NpmPackageDetector(["react"], "React"),
        ),
        DocProvider(
            name="svelte",
            display_name="Svelte",
            repo="sveltejs/svelte",
            docs_path="documentation/docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=["**/index.md"],
            tag_function=_svelte_tag,
            detector=NpmPackageDetector(["svelte"], "Svelte"),
        ),
        DocProvider(
            name="sveltekit",
            display_name="SvelteKit",
            repo="sveltejs/kit",
            docs_path="documentation/docs",
            extensions=[".md"],
            exclude_patterns=["**/index.md"],
            tag_template="@sveltejs/kit@{bare}",
            detector=NpmPackageDetector(["@sveltejs/kit"], "SvelteKit"),
        ),
        DocProvider(
            name="shadcn-svelte",
            display_name="shadcn-svelte",
            repo="huntabyte/shadcn-svelte",
            docs_path="docs/content",
            extensions=[".md"],
            exclude_patterns=["**/index.md"],
            tag_template="shadcn-svelte@{bare}",
            detector=NpmPackageDetector(["shadcn-svelte"], "shadcn-svelte"),
        ),
        DocProvider(
            name="tailwind",
            display_name="Tailwind CSS",
            repo="tailwindlabs/tailwindcss.com",
            docs_path="src/docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=["**/index.md"],
            detector=NpmPackageDetector(["tailwindcss"], "Tailwind CSS"),
        ),
        DocProvider(
            name="bun",
            display_name="Bun",
            repo="oven-sh/bun",
            docs_path="docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=["**/README.md"],
            tag_template="bun-v{bare}",
            detector=CommandVersionDetector("bun", "Bun"),
        ),
        DocProvider(
            name="convex",
            display_name="Convex",
            repo="get-convex/convex-backend",
            docs_path="npm-packages/docs/docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=["**/index.md"],
            tag_template="precompiled-{bare}",
            description="Convex is a backend platform for web applications.",
            detector=NpmPackageDetector(["convex"], "Convex"),
        ),
        DocProvider(
            name="tauri",
            display_name="Tauri",
            repo="tauri-apps/tauri-docs",
            docs_path="src/content/docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=[
                "**/index.mdx",
                "**/index.md",
                "**/_fragments/**",
                "**/_it/**",
                "**/es/**",
                "**/fr/**",
                "**/it/**",
                "**/ja/**",
                "**/ko/**",
                "**/zh-cn/**",
                "**/404.md",
                "**/rss.mdx",
            ],
            tag_function=_major_branch,
            description="Tauri is a framework for building desktop and mobile apps with web frontends.",
            detector=NpmPackageDetector(["@tauri-apps/api", "@tauri-apps/cli"], "Tauri"),
        ),
        DocProvider(
            name="pixi",
            display_name="Pixi",
            repo="prefix-dev/pixi",
            docs_path="docs",
            extensions=[".md"],
            exclude_patterns=[
                "**/index.md",
                "**/__README.md",
                "**/partials/**",
                "**/assets/**",
                "**/stylesheets/**",
                "**/javascripts/**",
                "**/overrides/**",
                "**/layouts/**",
            ],
            description="Pixi is a cross-platform package manager for conda environments.",
            detector=FirstMatchDetector(
                [
                    PythonPackageDetector("requires-pixi", "Pixi", files=("pixi.toml", "pyproject.toml")),
                    CommandVersionDetector("pixi", "Pixi"),
                ]
            ),
        ),
        DocProvider(
            name="rattler-build",
            display_name="rattler-build",
            repo="prefix-dev/rattler-build",
            docs_path="docs",
            extensions=[".md"],
            exclude_patterns=[
                "**/index.md",
                "**/assets/**",
                "**/stylesheets/**",
                "**/layouts/**",
                "**/overrides/**",
                "**/generator/**",
            ],
            description="rattler-build is a tool for building conda packages from recipe.yaml files.",
            detector=FirstMatchDetector(
                [
                    PythonPackageDetector(
                        "rattler-build", "rattler-build", files=("pixi.toml", "pyproject.toml")
                    ),
                    CommandVersionDetector("rattler-build", "rattler-build"),
                ]
            ),
        ),
        DocProvider(
            name="conda-forge",
            display_name="conda-forge",
            repo="conda-forge/conda-forge.github.io",
            docs_path="docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=[
                "**/index.md",
                "**/_sidebar.js",
                "**/_sidebar.json",
                "**/_sidebar_diataxis.json",
            ],
            tag_template="{version}",
            description=(
                "conda-forge is a community-led collection of recipes, build infrastructure, "
                "and packages for conda."
            ),
            detector=FixedVersionDetector("main"),
        ),
        DocProvider(
            name="cuda-feedstock",
            display_name="CUDA Feedstock",
            repo="conda-forge/cuda-feedstock",
            docs_path="recipe",
            extensions=[".md", ".yaml"],
            exclude_patterns=[],
            tag_template="{version}",
            instruction=(
                "This should be used when building and running CUDA packages with "
                "rattler-build, conda-forge, pixi."
            ),
            detector=FixedVersionDetector("main"),
        ),
        DocProvider(
            name="ruff",
            display_name="Ruff",
            repo="astral-sh/ruff",
            docs_path="docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=list(ASSET_EXCLUDES),
            tag_template="{bare}",
            description="Ruff is an extremely fast Python linter and formatter.",
            detector=_python_tool("ruff", "Ruff"),
        ),
        DocProvider(
            name="ty",
            display_name="ty",
            repo="astral-sh/ty",
            docs_path="docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=list(ASSET_EXCLUDES),
            tag_template="{bare}",
            description="ty is an extremely fast Python type checker from Astral.",
            detector=_python_tool("ty", "ty"),
        ),
        DocProvider(
            name="basedpyright",
            display_name="basedpyright",
            repo="DetachHead/basedpyright",
            docs_path="docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=list(ASSET_EXCLUDES),
            description="basedpyright is a fork of pyright with various improvements.",
            detector=_python_tool("basedpyright", "basedpyright"),
        ),
        DocProvider(
            name="polars",
            display_name="Polars",
            repo="pola-rs/polars",
            docs_path="docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=list(ASSET_EXCLUDES),
            tag_template="py-{bare}",
            description="Polars is a blazingly fast DataFrame library.",
            detector=PythonPackageDetector("polars", "Polars"),
        ),
        DocProvider(
            name="delta-rs",
            display_name="delta-rs",
            repo="delta-io/delta-rs",
            docs_path="docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=list(ASSET_EXCLUDES),
            tag_template="python-v{bare}",
            description="delta-rs is a native Rust implementation of Delta Lake.",
            detector=PythonPackageDetector("deltalake", "delta-rs"),
        ),
        DocProvider(
            name="manim",
            display_name="Manim",
            repo="ManimCommunity/manim",
            docs_path="docs",
            extensions=[".md", ".rst", ".py"],
            exclude_patterns=[
                "**/index.md",
                "**/conf.py",
                "**/Makefile",
                "**/_static/**",
                "**/_templates/**",
            ],
            description="Manim is a Python library for mathematical animations.",
            detector=PythonPackageDetector("manim", "Manim"),
        ),
        DocProvider(
            name="obsidian",
            display_name="Obsidian",
            repo="obsidianmd/obsidian-developer-docs",
            docs_path="en",
            extensions=[".md", ".mdx"],
            exclude_patterns=["**/index.md"],
            instruction=(
                "IMPORTANT: Prefer retrieval-led reasoning over pre-training-led reasoning "
                "for any Obsidian plugin development tasks."
            ),
            detector=NpmPackageDetector(["obsidian"], "Obsidian"),
        ),
        DocProvider(
            name="obsidian-excalidraw",
            display_name="Obsidian Excalidraw",
            repo="zsviczian/obsidian-excalidraw-plugin",
            docs_path="docs",
            extensions=[".md", ".mdx"],
            exclude_patterns=["**/index.md"],
            tag_template="{version}",
            detector=ManifestJsonDetector("obsidian-excalidraw-plugin", "Obsidian Excalidraw"),
        ),
        DocProvider(
            name="ffmpeg",
            display_name="FFmpeg",
            repo="FFmpeg/FFmpeg",
            docs_path="doc",
            extensions=[".txt", ".md", ".texi"],
            exclude_patterns=["**/Makefile", "*.mak", "*.sh", "*.pl", "*.py"],
            tag_template="n{bare}",
            description="FFmpeg is a multimedia framework for audio/video processing.",
            detector=CommandVersionDetector(
                "ffmpeg", "FFmpeg", flag="-version", pattern=re.compile(r"ffmpeg version (\d+\.\d+(?:\.\d+)?)")
            ),
        ),
    ]
}

# Providers tried, in order, when the user names none.
AUTO_DETECT_ORDER = ["nextjs", "pixi", "rattler-build", "tauri"]


def get_provider(name: str) -> DocProvider | None:
    """Get a built-in provider by name."""
    return BUILTIN_PROVIDERS.get(name)


def list_providers() -> list[str]:
    """List built-in provider names."""
    return list(BUILTIN_PROVIDERS)


def create_provider(
    name: str,
    display_name: str,
    repo: str,
    docs_path: str,
    extensions: list[str] | None = None,
    npm_package: str | None = None,
    python_package: str | None = None,
    tag_template: str = "v{bare}",
    exclude_patterns: list[str] | None = None,
    instruction: str | None = None,
    description: str | None = None,
) -> DocProvider:
    """Create a provider for any GitHub repository.

    Args:
        name: Unique identifier.
        display_name: Name shown in the index header.
        repo: GitHub repository as owner/repo.
        docs_path: Docs folder inside the repository.
        extensions: File extensions to index.
        npm_package: Detect the version from this package.json dependency.
        python_package: Detect the version from this Python dependency.
        tag_template: Version to git ref template.
        exclude_patterns: Patterns to leave out of the index.
        instruction: Instruction line for the index.
        description: Description line for the index.

    Returns:
        The provider.
    """
    detector: VersionDetector | None = None
    if npm_package:
        detector = NpmPackageDetector([npm_package], display_name)
    elif python_package:
        detector = PythonPackageDetector(python_package, display_name)

    return DocProvider(
        name=name,
        display_name=display_name,
        repo=repo,
        docs_path=docs_path,
        extensions=extensions or list(DEFAULT_EXTENSIONS),
        exclude_patterns=exclude_patterns if exclude_patterns is not None else list(DEFAULT_EXCLUDES),
        tag_template=tag_template,
        instruction=instruction or default_instruction(display_name),
        description=description,
        detector=detector,
    )


def create_local_provider(
    name: str,
    display_name: str,
    local_path: str,
    extensions: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    instruction: str | None = None,
) -> DocProvider:
    """Create a provider that indexes a documentation folder on disk."""
    return DocProvider(
        name=name,
        display_name=display_name,
        docs_path=local_path,
        extensions=extensions or list(DEFAULT_EXTENSIONS),
        exclude_patterns=exclude_patterns if exclude_patterns is not None else list(DEFAULT_EXCLUDES),
        instruction=instruction or default_instruction(display_name),
    )


def auto_detect_provider(cwd: Path) -> tuple[DocProvider, str] | None:
    """Find the first built-in provider whose framework the project uses.

    Returns:
        The provider and detected version, or None.
    """
    for name in AUTO_DETECT_ORDER:
        provider = BUILTIN_PROVIDERS[name]
        result = provider.detect_version(cwd)
        if result.version:
            return provider, result.version
    return None
