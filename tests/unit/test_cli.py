"""
Unit tests for the agdex CLI.
"""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from agdex import __version__
from agdex.cli import app
from agdex.cli.commands import docs as docs_commands
from agdex.cli.commands import skills as skills_commands
from agdex.docs import embed as embed_module
from agdex.exceptions import RemoteSearchError
from agdex.markers import DOCS_MARKERS, SKILLS_MARKERS, inject_block
from agdex.remote import SkillsShSearchResult


@pytest.fixture
def fake_clone(monkeypatch: pytest.MonkeyPatch) -> list[tuple]:
    calls: list[tuple] = []

    def _clone(repo: str, sub_path: str, ref: str, dest_dir: Path) -> Path:
        calls.append((repo, sub_path, ref, dest_dir))
        (dest_dir / "01-app").mkdir(parents=True)
        (dest_dir / "01-app" / "intro.mdx").write_text("# Intro\n")
        return dest_dir

    monkeypatch.setattr(embed_module, "clone_sparse", _clone)
    return calls


class TestCLIBasics:
    """Tests for basic CLI functionality."""

    def test_version(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ["embed", "local", "list", "remove", "skills"]:
            assert command in result.stdout

    def test_skills_help(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["skills", "--help"])
        assert result.exit_code == 0
        for command in ["embed", "list", "local", "search", "add"]:
            assert command in result.stdout

    def test_list_providers(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "nextjs" in result.stdout
        assert "polars" in result.stdout

    def test_invalid_config(self, cli_runner: CliRunner, project_dir: Path):
        (project_dir / ".agdexrc.json").write_text(json.dumps({"skills": {"include_user": "maybe"}}))

        result = cli_runner.invoke(app, ["remove"])

        assert result.exit_code == 1
        assert "validation failed" in result.stdout


class TestEmbedCommand:
    """Tests for agdex embed."""

    def test_embed_builtin_provider(self, cli_runner: CliRunner, project_dir: Path, fake_clone: list[tuple]):
        result = cli_runner.invoke(app, ["embed", "--provider", "nextjs", "--fw-version", "15.1.0"])

        assert result.exit_code == 0, result.stdout
        assert "Created" in result.stdout
        assert fake_clone[0][:3] == ("vercel/next.js", "docs", "v15.1.0")

        content = (project_dir / "CLAUDE.md").read_text()
        assert "<!-- AGENTS-MD-EMBED-START:nextjs -->" in content
        assert "01-app:{intro.mdx}" in content
        assert ".agdex/" in (project_dir / ".gitignore").read_text()

    def test_output_option(self, cli_runner: CliRunner, project_dir: Path, fake_clone: list[tuple]):
        result = cli_runner.invoke(app, ["embed", "-p", "react", "--fw-version", "19.0.0", "-o", "AGENTS.md"])

        assert result.exit_code == 0, result.stdout
        assert (project_dir / "AGENTS.md").exists()
        assert not (project_dir / "CLAUDE.md").exists()

    def test_global_cache(
        self,
        cli_runner: CliRunner,
        project_dir: Path,
        mock_homes: dict[str, Path],
        fake_clone: list[tuple],
    ):
        result = cli_runner.invoke(app, ["embed", "-p", "nextjs", "--fw-version", "15.1.0", "--global"])

        assert result.exit_code == 0, result.stdout
        assert fake_clone[0][3] == mock_homes["agdex"] / "docs" / "nextjs"
        assert not (project_dir / ".gitignore").exists()

    def test_custom_repo(self, cli_runner: CliRunner, project_dir: Path, fake_clone: list[tuple]):
        result = cli_runner.invoke(
            app, ["embed", "--repo", "acme/acme", "--docs-path", "website/docs", "--fw-version", "2.0.0"]
        )

        assert result.exit_code == 0, result.stdout
        assert fake_clone[0][:3] == ("acme/acme", "website/docs", "v2.0.0")
        assert "AGENTS-MD-EMBED-START:custom" in (project_dir / "CLAUDE.md").read_text()

    def test_repo_requires_docs_path(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["embed", "--repo", "acme/acme"])

        assert result.exit_code == 1
        assert "--docs-path" in result.stdout

    def test_custom_repo_requires_version(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["embed", "--repo", "acme/acme", "--docs-path", "docs"])

        assert result.exit_code == 1
        assert "--fw-version" in result.stdout

    def test_unknown_provider(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["embed", "--provider", "nope"])

        assert result.exit_code == 1
        assert "Unknown provider" in result.stdout

    def test_no_provider_detected(
        self, cli_runner: CliRunner, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(docs_commands, "auto_detect_provider", lambda cwd: None)

        result = cli_runner.invoke(app, ["embed"])

        assert result.exit_code == 1
        assert "No provider detected" in result.stdout

    def test_default_command_auto_detects(
        self, cli_runner: CliRunner, project_dir: Path, fake_clone: list[tuple]
    ):
        (project_dir / "package.json").write_text(json.dumps({"dependencies": {"next": "^15.0.3"}}))

        result = cli_runner.invoke(app, [])

        assert result.exit_code == 0, result.stdout
        assert fake_clone[0][2] == "v15.0.3"
        assert (project_dir / "CLAUDE.md").exists()

    def test_clone_failure(self, cli_runner: CliRunner, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        from agdex.exceptions import CloneError

        def _fail(*args):
            raise CloneError("Could not find vercel/next.js at v99.0.0")

        monkeypatch.setattr(embed_module, "clone_sparse", _fail)

        result = cli_runner.invoke(app, ["embed", "-p", "nextjs", "--fw-version", "99.0.0"])

        assert result.exit_code == 1
        assert "Failed" in result.stdout
        assert not (project_dir / "CLAUDE.md").exists()


class TestLocalCommand:
    """Tests for agdex local."""

    def test_local_docs(self, cli_runner: CliRunner, project_dir: Path):
        (project_dir / "handbook" / "ops").mkdir(parents=True)
        (project_dir / "handbook" / "ops" / "deploy.md").write_text("# Deploy\n")

        result = cli_runner.invoke(app, ["local", "handbook", "--name", "Handbook", "-o", "AGENTS.md"])

        assert result.exit_code == 0, result.stdout
        content = (project_dir / "AGENTS.md").read_text()
        assert "[Handbook Docs Index]|root: ./handbook|" in content
        assert "ops:{deploy.md}" in content

    def test_missing_folder(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["local", "missing"])
        assert result.exit_code == 1


class TestRemoveCommand:
    """Tests for agdex remove."""

    @pytest.fixture
    def host(self, project_dir: Path) -> Path:
        content = inject_block("# Notes\n", "[Next.js Docs Index]", DOCS_MARKERS, "nextjs")
        content = inject_block(content, "[Skills Index]", SKILLS_MARKERS)
        path = project_dir / "CLAUDE.md"
        path.write_text(content)
        return path

    def test_remove_all(self, cli_runner: CliRunner, host: Path):
        result = cli_runner.invoke(app, ["remove"])

        assert result.exit_code == 0, result.stdout
        assert "Removed nextjs docs index" in result.stdout
        assert "Removed skills index" in result.stdout
        assert host.read_text() == "# Notes\n"

    def test_remove_skills_only(self, cli_runner: CliRunner, host: Path):
        result = cli_runner.invoke(app, ["remove", "--skills"])

        assert result.exit_code == 0, result.stdout
        assert "[Next.js Docs Index]" in host.read_text()
        assert "[Skills Index]" not in host.read_text()

    def test_remove_provider_keeps_skills(self, cli_runner: CliRunner, host: Path):
        result = cli_runner.invoke(app, ["remove", "--provider", "nextjs"])

        assert result.exit_code == 0, result.stdout
        assert "[Next.js Docs Index]" not in host.read_text()
        assert "[Skills Index]" in host.read_text()

    def test_nothing_to_remove(self, cli_runner: CliRunner, project_dir: Path):
        (project_dir / "CLAUDE.md").write_text("# Notes\n")

        result = cli_runner.invoke(app, ["remove"])

        assert result.exit_code == 0
        assert "No indexes found" in result.stdout

    def test_missing_file(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["remove", "-o", "AGENTS.md"])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_invalid_provider_id(self, cli_runner: CliRunner, host: Path):
        before = host.read_text()

        result = cli_runner.invoke(app, ["remove", "--provider", "next js"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, ValueError)
        assert "Invalid block identifier" in result.stdout
        assert host.read_text() == before


class TestSkillsCommands:
    """Tests for agdex skills."""

    def test_embed_user_and_project_skills(
        self,
        cli_runner: CliRunner,
        project_dir: Path,
        mock_homes: dict[str, Path],
        make_skill: Callable[..., Path],
    ):
        make_skill(mock_homes["claude"] / "skills", "notes", description="Keeps notes")
        make_skill(project_dir / ".claude" / "skills", "deploy", description="Ships it")

        result = cli_runner.invoke(app, ["skills", "embed"])

        assert result.exit_code == 0, result.stdout
        assert "Indexed" in result.stdout
        content = (project_dir / "CLAUDE.md").read_text()
        assert "|user:{notes:Keeps notes}|project:{deploy:Ships it}|" in content

    def test_embed_without_user(
        self,
        cli_runner: CliRunner,
        project_dir: Path,
        mock_homes: dict[str, Path],
        make_skill: Callable[..., Path],
    ):
        make_skill(mock_homes["claude"] / "skills", "notes")
        make_skill(project_dir / ".claude" / "skills", "deploy")

        result = cli_runner.invoke(app, ["skills", "embed", "--no-user", "-o", "AGENTS.md"])

        assert result.exit_code == 0, result.stdout
        content = (project_dir / "AGENTS.md").read_text()
        assert "notes" not in content
        assert "deploy" in content

    def test_embed_plugin_repository(
        self, cli_runner: CliRunner, project_dir: Path, make_skill: Callable[..., Path]
    ):
        make_skill(project_dir / "repo" / "plugins" / "writer" / "skills", "draft")

        result = cli_runner.invoke(app, ["skills", "embed", "--plugin", "repo", "--no-project"])

        assert result.exit_code == 0, result.stdout
        assert "plugin:writer:{draft:" in (project_dir / "CLAUDE.md").read_text()

    def test_embed_no_skills(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["skills", "embed"])

        assert result.exit_code == 1
        assert "No skills found" in result.stdout
        assert not (project_dir / "CLAUDE.md").exists()

    def test_embed_includes_added_repositories(
        self,
        cli_runner: CliRunner,
        project_dir: Path,
        mock_homes: dict[str, Path],
        make_skill: Callable[..., Path],
    ):
        make_skill(mock_homes["agdex"] / "skills-sh" / "acme__skills" / "skills", "pdf")

        result = cli_runner.invoke(app, ["skills", "embed"])

        assert result.exit_code == 0, result.stdout
        assert "skills-sh:acme/skills:{pdf:" in (project_dir / "CLAUDE.md").read_text()

        result = cli_runner.invoke(app, ["skills", "embed", "--no-skills-sh"])
        assert result.exit_code == 1

    def test_list(
        self,
        cli_runner: CliRunner,
        project_dir: Path,
        mock_homes: dict[str, Path],
        make_skill: Callable[..., Path],
    ):
        make_skill(mock_homes["claude"] / "skills", "notes")

        result = cli_runner.invoke(app, ["skills", "list"])

        assert result.exit_code == 0, result.stdout
        assert "notes" in result.stdout
        assert not (project_dir / "CLAUDE.md").exists()

    def test_list_empty(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["skills", "list"])

        assert result.exit_code == 0
        assert "No skills found" in result.stdout

    def test_local_flat_folder(self, cli_runner: CliRunner, project_dir: Path, make_skill: Callable[..., Path]):
        make_skill(project_dir / "team-skills", "review", description="Reviews code")

        result = cli_runner.invoke(app, ["skills", "local", "team-skills"])

        assert result.exit_code == 0, result.stdout
        content = (project_dir / "CLAUDE.md").read_text()
        assert "project:{review:Reviews code}" in content
        assert "Regen: agdex skills local team-skills --output CLAUDE.md" in content

    def test_local_missing_folder(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["skills", "local", "missing"])
        assert result.exit_code == 1

    def test_search(self, cli_runner: CliRunner, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        async def _search(query: str, limit: int = 20, **kwargs) -> list[SkillsShSearchResult]:
            return [
                SkillsShSearchResult(id="acme/skills/pdf", skill_id="pdf", name="pdf", installs=7, source="acme/skills")
            ]

        monkeypatch.setattr(skills_commands, "search_skills_sh", _search)

        result = cli_runner.invoke(app, ["skills", "search", "pdf"])

        assert result.exit_code == 0, result.stdout
        assert "acme/skills" in result.stdout

    def test_search_error(self, cli_runner: CliRunner, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        async def _search(*args, **kwargs):
            raise RemoteSearchError("skills.sh API returned 500", status_code=500)

        monkeypatch.setattr(skills_commands, "search_skills_sh", _search)

        result = cli_runner.invoke(app, ["skills", "search", "pdf"])

        assert result.exit_code == 1
        assert "500" in result.stdout

    def test_add_invalid_repo(self, cli_runner: CliRunner, project_dir: Path):
        result = cli_runner.invoke(app, ["skills", "add", "not-a-repo"])

        assert result.exit_code == 1
        assert "owner/repo" in result.stdout

    def test_add_repo(
        self,
        cli_runner: CliRunner,
        project_dir: Path,
        mock_homes: dict[str, Path],
        monkeypatch: pytest.MonkeyPatch,
        make_skill: Callable[..., Path],
    ):
        from agdex.skills import loader as loader_module

        def _clone(repo: str, sub_path: str, ref: str, dest_dir: Path) -> Path:
            make_skill(dest_dir / "skills", "pdf")
            return dest_dir

        monkeypatch.setattr(loader_module, "clone_sparse", _clone)

        result = cli_runner.invoke(app, ["skills", "add", "acme/skills"])

        assert result.exit_code == 0, result.stdout
        assert "pdf" in result.stdout
        assert (mock_homes["agdex"] / "skills-sh" / "acme__skills" / "skills" / "pdf" / "SKILL.md").exists()
