"""
Main Typer application for the agdex CLI.

This module defines the root CLI application and registers all commands.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from agdex import __version__
from agdex.cli.commands import docs, remove, skills
from agdex.cli.output import console, print_info

app = typer.Typer(
    name="agdex",
    help="Embed compressed documentation and skills indexes into AGENTS.md / CLAUDE.md.",
    no_args_is_help=False,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"agdex version [green]{__version__}[/green]")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# noinspection PyUnusedLocal
@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging.",
        ),
    ] = False,
) -> None:
    """
    [bold blue]agdex[/bold blue] - Documentation indexes for AI coding agents

    Run [bold]agdex[/bold] without a command to embed docs for the framework
    detected in the current project.
    """
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        docs.embed()


app.command("embed")(docs.embed)
app.command("local")(docs.local)
app.command("list")(docs.list_docs_providers)
app.command("remove")(remove.remove)
app.add_typer(skills.app, name="skills")


if __name__ == "__main__":
    app()
