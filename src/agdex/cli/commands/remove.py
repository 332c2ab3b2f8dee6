"""
agdex remove - Remove embedded indexes from a host file.

Usage:
    agdex remove
    agdex remove --docs --provider nextjs
    agdex remove --skills -o CLAUDE.md
"""

from pathlib import Path
from typing import Annotated

import typer

from agdex.cli.output import console, format_size, print_error, print_success, print_warning
from agdex.cli.settings import load_cli_config, resolve_output
from agdex.docs import remove_indexes


def remove(
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Target file.",
        ),
    ] = None,
    docs: Annotated[
        bool,
        typer.Option(
            "--docs",
            help="Remove only docs indexes.",
        ),
    ] = False,
    skills: Annotated[
        bool,
        typer.Option(
            "--skills",
            help="Remove only the skills index.",
        ),
    ] = False,
    provider: Annotated[
        str | None,
        typer.Option(
            "--provider",
            "-p",
            help="Remove only this provider's docs index.",
        ),
    ] = None,
) -> None:
    """Remove embedded indexes from AGENTS.md / CLAUDE.md."""
    cwd = Path.cwd()
    target = resolve_output(output, load_cli_config(cwd))

    # Neither flag means both; --provider implies docs only.
    remove_all = not docs and not skills and not provider
    result = remove_indexes(
        cwd,
        output=target,
        docs=remove_all or docs or bool(provider),
        skills=remove_all or skills,
        provider=provider,
    )

    if not result.success:
        print_error(result.error or "Failed")
        raise typer.Exit(1)

    if not result.removed_anything:
        print_warning("No indexes found to remove.")
        return

    for block_id in result.docs_removed:
        label = f"{block_id} docs index" if block_id else "docs index"
        print_success(f"Removed {label} from [bold]{target}[/bold]")
    if result.skills_removed:
        print_success(f"Removed skills index from [bold]{target}[/bold]")
    console.print(f"[dim]  ({format_size(result.size_before)} → {format_size(result.size_after)})[/dim]")
