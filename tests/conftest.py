"""
Pytest configuration and fixtures for agdex tests.
"""

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_homes(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """Point AGDEX_HOME and CLAUDE_HOME at temporary directories."""
    agdex_home = temp_dir / "agdex-home"
    claude_home = temp_dir / "claude-home"
    agdex_home.mkdir()
    claude_home.mkdir()
    monkeypatch.setenv("AGDEX_HOME", str(agdex_home))
    monkeypatch.setenv("CLAUDE_HOME", str(claude_home))
    return {"agdex": agdex_home, "claude": claude_home}


@pytest.fixture
def project_dir(temp_dir: Path, mock_homes: dict[str, Path], monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide an empty project directory as the working directory."""
    project = temp_dir / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def sample_skill_md() -> str:
    """Provide sample SKILL.md content."""
    return """---
name: test-skill
description: A test skill for unit tests
---

# Test Skill

This is a test skill for unit testing.
"""


@pytest.fixture
def make_skill() -> Callable[..., Path]:
    """Create a skill folder with a SKILL.md and optional extra files."""

    def _make_skill(
        parent: Path,
        dirname: str,
        name: str | None = None,
        description: str = "Does something useful",
        files: dict[str, str] | None = None,
    ) -> Path:
        skill_dir = parent / dirname
        skill_dir.mkdir(parents=True, exist_ok=True)
        (skill_dir / "SKILL.md").write_text(
            f"---\nname: {name or dirname}\ndescription: {description}\n---\n\n# {name or dirname}\n",
            encoding="utf-8",
        )
        for relative, content in (files or {}).items():
            path = skill_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return skill_dir

    return _make_skill
