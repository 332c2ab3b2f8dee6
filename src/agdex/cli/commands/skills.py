"""
agdex skills - Skills index commands.

Usage:
    agdex skills embed
    agdex skills list --no-user
    agdex skills local ./my-skills --name team
    agdex skills search pdf
    agdex skills add owner/repo
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from agdex.cli.output import console, print_error, print_file_written, print_success, print_warning
from agdex.cli.settings import load_cli_config, resolve_output
from agdex.config import AgdexConfig
from agdex.exceptions import CloneError, RemoteSearchError
from agdex.remote.skills_sh import search_skills_sh
from agdex.skills import (
    InvalidRepoError,
    SkillLayout,
    SkillsEmbedOptions,
    SkillSource,
    SkillSourceConfig,
    SkillSourceOptions,
    add_skills_sh_repo,
    collect_all_skills,
    discover_skills_sh_repo,
    embed_skills,
    get_default_skill_sources,
    list_cached_skills_sh_repos,
)
from agdex.storage.paths import get_agdex_home, get_claude_home

app = typer.Typer(
    name="skills",
    help="Index Claude Code skills.",
)

PluginOption = Annotated[
    list[str] | None,
    typer.Option(
        "--plugin",
        help="Plugin repository path (plugins/<name>/skills layout). Repeatable.",
    ),
]
UserOption = Annotated[
    bool | None,
    typer.Option(
        "--user/--no-user",
        help="Include ~/.claude/skills.",
    ),
]
ProjectOption = Annotated[
    bool | None,
    typer.Option(
        "--project/--no-project",
        help="Include .claude/skills.",
    ),
]
EnabledPluginsOption = Annotated[
    bool | None,
    typer.Option(
        "--enabled-plugins/--no-enabled-plugins",
        help="Include plugins enabled in Claude settings.",
    ),
]
SkillsShOption = Annotated[
    bool,
    typer.Option(
        "--skills-sh/--no-skills-sh",
        help="Include repositories added with 'agdex skills add'.",
    ),
]


def _build_sources(
    cwd: Path,
    config: AgdexConfig,
    plugin: list[str] | None,
    user: bool | None,
    project: bool | None,
    enabled_plugins: bool | None,
    skills_sh: bool,
) -> list[SkillSourceConfig]:
    """Command line flags override the configured defaults."""
    options = SkillSourceOptions(
        include_user=config.skills.include_user if user is None else user,
        include_project=config.skills.include_project if project is None else project,
        include_enabled_plugins=(
            config.skills.include_enabled_plugins if enabled_plugins is None else enabled_plugins
        ),
        plugin_paths=[*config.skills.plugin_paths, *(plugin or [])],
        skills_sh_repos=list_cached_skills_sh_repos(get_agdex_home()) if skills_sh else [],
    )
    return get_default_skill_sources(cwd, get_claude_home(), options)


def _print_breakdown(breakdown: dict[SkillSource, int]) -> None:
    parts = [f"{count} {source.value}" for source, count in breakdown.items() if count > 0]
    if parts:
        console.print(f"[dim]  ({', '.join(parts)})[/dim]")


@app.command("embed")
def embed(
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Target file.",
        ),
    ] = None,
    plugin: PluginOption = None,
    user: UserOption = None,
    project: ProjectOption = None,
    enabled_plugins: EnabledPluginsOption = None,
    skills_sh: SkillsShOption = True,
) -> None:
    """Embed a skills index into AGENTS.md / CLAUDE.md."""
    cwd = Path.cwd()
    config = load_cli_config(cwd)
    target = resolve_output(output, config)

    sources = _build_sources(cwd, config, plugin, user, project, enabled_plugins, skills_sh)
    if not sources:
        print_error("No skill sources configured. Use --plugin, --user or --project.")
        raise typer.Exit(1)

    console.print(f"\nDiscovering skills from [cyan]{len(sources)}[/cyan] sources...")
    result = embed_skills(SkillsEmbedOptions(cwd=cwd, sources=sources, output=target))

    if not result.success:
        print_error(f"Failed: {result.error}")
        raise typer.Exit(1)

    print_file_written(result.target_file or target, result.is_new_file, result.size_before, result.size_after)
    print_success(f"Indexed [bold]{result.skill_count}[/bold] skills")
    _print_breakdown(result.source_breakdown)


@app.command("list")
def list_skills(
    plugin: PluginOption = None,
    user: UserOption = None,
    project: ProjectOption = None,
    enabled_plugins: EnabledPluginsOption = None,
    skills_sh: SkillsShOption = True,
) -> None:
    """List discovered skills."""
    cwd = Path.cwd()
    config = load_cli_config(cwd)
    skills = collect_all_skills(_build_sources(cwd, config, plugin, user, project, enabled_plugins, skills_sh))

    if not skills:
        print_warning("No skills found in any of the specified sources.")
        return

    table = Table(title=f"Discovered {len(skills)} skills")
    table.add_column("Source", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Files", style="dim")

    for skill in skills:
        source = skill.source.index_tag
        if skill.origin_label:
            source = f"{source}:{skill.origin_label}"
        table.add_row(source, skill.name, skill.description, ", ".join(skill.sibling_files))

    console.print(table)


@app.command("local")
def local(
    skills_path: Annotated[
        str,
        typer.Argument(
            help="Skills folder (flat, or a plugin repository with plugins/).",
        ),
    ],
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Target file.",
        ),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option(
            "--name",
            "-n",
            help="Label for this skill source.",
        ),
    ] = None,
) -> None:
    """Embed a skills index built from a local folder."""
    cwd = Path.cwd()
    root = Path(skills_path) if Path(skills_path).is_absolute() else cwd / skills_path
    if not root.is_dir():
        print_error(f"Skills directory not found: {skills_path}")
        raise typer.Exit(1)

    target = resolve_output(output, load_cli_config(cwd))
    label = name or root.name

    if (root / "plugins").is_dir():
        source = SkillSourceConfig(type=SkillSource.PLUGIN, path=str(root), label=label, layout=SkillLayout.NESTED)
    else:
        source = SkillSourceConfig(type=SkillSource.PROJECT, path=str(root), label=label)

    console.print(f"\nDiscovering skills from [cyan]{skills_path}[/cyan]...")
    result = embed_skills(
        SkillsEmbedOptions(
            cwd=cwd,
            sources=[source],
            output=target,
            regenerate_command=f"agdex skills local {skills_path} --output {target}",
        )
    )

    if not result.success:
        print_error(f"Failed: {result.error}")
        raise typer.Exit(1)

    print_file_written(result.target_file or target, result.is_new_file, result.size_before, result.size_after)
    print_success(f"Indexed [bold]{result.skill_count}[/bold] skills")


@app.command()
def search(
    query: Annotated[
        str,
        typer.Argument(
            help="Search query.",
        ),
    ],
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of results.",
        ),
    ] = 20,
) -> None:
    """Search skills.sh for skills."""
    config = load_cli_config(Path.cwd())

    try:
        results = asyncio.run(search_skills_sh(query, limit, base_url=config.skills_sh_api))
    except RemoteSearchError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not results:
        print_warning(f"No skills found matching '{query}'")
        return

    table = Table(title=f"skills.sh results for '{query}'")
    table.add_column("Name", style="cyan")
    table.add_column("Repository")
    table.add_column("Installs", justify="right", style="dim")

    for result in results:
        table.add_row(result.name, result.source, str(result.installs))

    console.print(table)
    console.print("[dim]Add a repository with: agdex skills add <owner/repo>[/dim]")


@app.command()
def add(
    repo: Annotated[
        str,
        typer.Argument(
            help="skills.sh repository as owner/repo.",
        ),
    ],
    ref: Annotated[
        str,
        typer.Option(
            "--ref",
            help="Branch or tag to clone.",
        ),
    ] = "main",
) -> None:
    """Clone a skills.sh repository so its skills are indexed by 'agdex skills embed'."""
    console.print(f"\nCloning [cyan]{repo}[/cyan]...")

    try:
        source = add_skills_sh_repo(repo, get_agdex_home(), ref)
    except (InvalidRepoError, CloneError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    skills = discover_skills_sh_repo(source.path, source.label)
    if not skills:
        print_warning(f"No skills found in {repo}")
        return

    print_success(f"Added [bold]{repo}[/bold] with {len(skills)} skills: {', '.join(s.name for s in skills)}")
