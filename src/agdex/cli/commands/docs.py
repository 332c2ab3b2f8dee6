"""
agdex docs commands.

Usage:
    agdex embed --provider nextjs
    agdex embed --repo owner/repo --docs-path docs --fw-version 1.2.0
    agdex local ./docs --name "Internal API"
    agdex list
"""

import sys
from pathlib import Path
from typing import Annotated

import questionary
import typer

from agdex.cli.output import console, print_error, print_file_written, print_success, print_table, print_warning
from agdex.cli.settings import load_cli_config, resolve_output
from agdex.docs import (
    DocProvider,
    EmbedOptions,
    auto_detect_provider,
    create_provider,
    embed_docs,
    embed_local_docs,
    get_provider,
    list_providers,
)
from agdex.storage.paths import LOCAL_CACHE_DIRNAME, get_agdex_home

CUSTOM_CHOICE = "__custom__"


def _ask(question: questionary.Question) -> str:
    """Run a prompt, exiting cleanly when the user cancels."""
    answer = question.ask()
    if answer is None:
        print_warning("Cancelled.")
        raise typer.Exit(0)
    return answer


def _prompt_for_options(cwd: Path, default_output: str) -> tuple[DocProvider, str, str]:
    """Interactively pick provider, version and host file."""
    detected = auto_detect_provider(cwd)
    if detected:
        console.print(f"[dim]Detected {detected[0].display_name} version: {detected[1]}[/dim]")

    choices = [questionary.Choice(title=get_provider(name).display_name, value=name) for name in list_providers()]
    choices.append(questionary.Choice(title="Custom GitHub repo...", value=CUSTOM_CHOICE))

    selected = _ask(
        questionary.select(
            "Documentation provider",
            choices=choices,
            default=detected[0].name if detected else None,
        )
    )

    if selected == CUSTOM_CHOICE:
        repo = _ask(
            questionary.text(
                "GitHub repository (owner/repo)",
                validate=lambda v: "/" in v or "Format: owner/repo",
            )
        )
        docs_path = _ask(questionary.text("Path to docs folder", default="docs"))
        display_name = _ask(questionary.text("Display name", default="Custom"))
        provider = create_provider(name="custom", display_name=display_name, repo=repo, docs_path=docs_path)
    else:
        provider = get_provider(selected)
        assert provider is not None

    initial_version = ""
    if provider.can_detect_version:
        initial_version = provider.detect_version(cwd).version or ""

    version = _ask(
        questionary.text(
            f"{provider.display_name} version",
            default=initial_version,
            validate=lambda v: bool(v.strip()) or "Please enter a version",
        )
    )

    output = _ask(
        questionary.select(
            "Target file",
            choices=["AGENTS.md", "CLAUDE.md", questionary.Choice(title="Custom...", value=CUSTOM_CHOICE)],
            default=default_output if default_output in ("AGENTS.md", "CLAUDE.md") else "AGENTS.md",
        )
    )
    if output == CUSTOM_CHOICE:
        output = _ask(
            questionary.text(
                "Custom file path",
                default="AGENTS.md",
                validate=lambda v: bool(v.strip()) or "Please enter a file path",
            )
        )

    return provider, version.strip(), output


def embed(
    provider_name: Annotated[
        str | None,
        typer.Option(
            "--provider",
            "-p",
            help="Documentation provider (nextjs, react, ...).",
        ),
    ] = None,
    fw_version: Annotated[
        str | None,
        typer.Option(
            "--fw-version",
            help="Framework version (auto-detected if not provided).",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Target file.",
        ),
    ] = None,
    repo: Annotated[
        str | None,
        typer.Option(
            "--repo",
            help="Custom GitHub repository (owner/repo).",
        ),
    ] = None,
    docs_path: Annotated[
        str | None,
        typer.Option(
            "--docs-path",
            help="Path to the docs folder in the repository.",
        ),
    ] = None,
    global_cache: Annotated[
        bool,
        typer.Option(
            "--global",
            "-g",
            help="Store docs in the global cache instead of .agdex/.",
        ),
    ] = False,
    docs_dir: Annotated[
        str | None,
        typer.Option(
            "--docs-dir",
            help="Store docs in this directory instead of the cache.",
        ),
    ] = None,
) -> None:
    """Download framework docs and embed their index into AGENTS.md / CLAUDE.md."""
    cwd = Path.cwd()
    config = load_cli_config(cwd)
    version = fw_version

    if repo or docs_path:
        if not (repo and docs_path):
            print_error("--repo and --docs-path must be used together.")
            raise typer.Exit(1)
        provider = create_provider(name="custom", display_name="Custom", repo=repo, docs_path=docs_path)
        target = resolve_output(output, config)
    elif provider_name:
        builtin = get_provider(provider_name)
        if builtin is None:
            print_error(f"Unknown provider: {provider_name}. Available: {', '.join(list_providers())}")
            raise typer.Exit(1)
        provider = builtin
        target = resolve_output(output, config)
    else:
        detected = auto_detect_provider(cwd) if not fw_version else None
        if detected:
            provider, version = detected
            target = resolve_output(output, config)
        elif sys.stdin.isatty():
            provider, version, target = _prompt_for_options(cwd, resolve_output(output, config))
        else:
            print_error("No provider detected. Use --provider, or --repo with --docs-path.")
            raise typer.Exit(1)

    if not version and not provider.can_detect_version:
        print_error(f"Provider {provider.display_name} requires --fw-version since auto-detection is not supported.")
        raise typer.Exit(1)

    use_global = global_cache or config.global_cache
    options = EmbedOptions(
        cwd=cwd,
        provider=provider,
        version=version,
        output=target,
        docs_dir=docs_dir or config.docs_dir,
        global_cache=use_global,
        cache_home=get_agdex_home() if use_global else None,
    )

    console.print(f"\nDownloading [cyan]{provider.display_name}[/cyan] documentation...")
    result = embed_docs(options)

    if not result.success:
        print_error(f"Failed: {result.error}")
        raise typer.Exit(1)

    print_file_written(result.target_file or target, result.is_new_file, result.size_before, result.size_after)
    console.print(f"[dim]  {provider.display_name} {result.version or ''} docs in {result.docs_path}[/dim]")
    if result.gitignore_updated:
        print_success(f"Added [bold]{options.docs_dir or LOCAL_CACHE_DIRNAME}[/bold] to .gitignore")


def local(
    docs_path: Annotated[
        str,
        typer.Argument(
            help="Local documentation folder.",
        ),
    ],
    name: Annotated[
        str | None,
        typer.Option(
            "--name",
            "-n",
            help="Display name for the documentation.",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Target file.",
        ),
    ] = None,
    extensions: Annotated[
        str,
        typer.Option(
            "--extensions",
            "-e",
            help="File extensions to include (comma-separated).",
        ),
    ] = ".md,.mdx",
) -> None:
    """Embed an index of a local documentation folder."""
    cwd = Path.cwd()
    config = load_cli_config(cwd)
    target = resolve_output(output, config)
    exts = [ext.strip() for ext in extensions.split(",") if ext.strip()]

    console.print(f"\nBuilding index from [cyan]{docs_path}[/cyan]...")
    result = embed_local_docs(cwd, docs_path, name=name, output=target, extensions=exts)

    if not result.success:
        print_error(result.error or "Failed")
        raise typer.Exit(1)

    print_file_written(result.target_file or target, result.is_new_file, result.size_before, result.size_after)


def list_docs_providers() -> None:
    """List available documentation providers."""
    rows = []
    for name in list_providers():
        provider = get_provider(name)
        assert provider is not None
        rows.append([name, provider.display_name, provider.repo or "local"])

    print_table(["Name", "Display name", "Repository"], rows, title="Documentation providers")
    console.print("[dim]Use --provider <name> to select a provider[/dim]")
    console.print("[dim]Use --repo and --docs-path for custom repositories[/dim]")
