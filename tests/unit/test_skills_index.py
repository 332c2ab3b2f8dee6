"""
Unit tests for the skills index serializer.
"""

import pytest

from agdex.skills import (
    SkillEntry,
    SkillSource,
    escape_description,
    format_skill_entry,
    generate_skills_index,
    has_existing_skills_index,
    inject_skills_index,
    remove_skills_index,
)


def _skill(
    name: str,
    source: SkillSource = SkillSource.USER,
    label: str | None = None,
    description: str = "Does things",
    siblings: list[str] | None = None,
) -> SkillEntry:
    return SkillEntry(
        name=name,
        description=description,
        skill_file_path=f"/skills/{name}/SKILL.md",
        sibling_files=siblings or [],
        source=source,
        origin_label=label,
    )


class TestEscapeDescription:
    """Tests for escape_description."""

    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("plain text", "plain text"),
            ("a|b", "a\\|b"),
            ("a;b", "a\\;b"),
            ("key: value", "key\\: value"),
            ("[x]{y}", "\\[x\\]\\{y\\}"),
            ("back\\slash", "back\\slash"),
        ],
    )
    def test_escapes(self, raw: str, escaped: str):
        assert escape_description(raw) == escaped


class TestFormatSkillEntry:
    """Tests for format_skill_entry."""

    def test_without_siblings(self):
        assert format_skill_entry(_skill("notes", description="Keeps notes")) == "notes:Keeps notes"

    def test_with_siblings(self):
        entry = format_skill_entry(_skill("fmt", description="Formats code", siblings=["run.sh", "ref/a.md"]))
        assert entry == "fmt:Formats code[run.sh,ref/a.md]"


class TestGenerateSkillsIndex:
    """Tests for generate_skills_index."""

    def test_escaped_user_skill(self):
        index = generate_skills_index([_skill("skill1", description="Has | pipe and ; semicolon")])

        assert "skill1:Has \\| pipe and \\; semicolon" in index
        assert index == "[Skills Index]|user:{skill1:Has \\| pipe and \\; semicolon}|Regen: agdex skills embed"

    def test_group_order_and_labels(self):
        skills = [
            _skill("proj", SkillSource.PROJECT),
            _skill("mine", SkillSource.USER),
            _skill("pdf", SkillSource.REMOTE, "acme/skills"),
            _skill("lint", SkillSource.PLUGIN, "coder"),
            _skill("draft", SkillSource.PLUGIN, "writer"),
            _skill("format", SkillSource.PLUGIN, "coder"),
        ]

        index = generate_skills_index(skills, regenerate_command="agdex skills embed --plugin ./repo")

        assert index == (
            "[Skills Index]"
            "|plugin:coder:{lint:Does things;format:Does things}"
            "|plugin:writer:{draft:Does things}"
            "|skills-sh:acme/skills:{pdf:Does things}"
            "|user:{mine:Does things}"
            "|project:{proj:Does things}"
            "|Regen: agdex skills embed --plugin ./repo"
        )

    def test_empty_groups_omitted(self):
        index = generate_skills_index([_skill("only", SkillSource.PROJECT)])
        assert index == "[Skills Index]|project:{only:Does things}|Regen: agdex skills embed"

    def test_no_skills(self):
        assert generate_skills_index([]) == "[Skills Index]|Regen: agdex skills embed"


class TestSkillsIndexBlock:
    """Tests for the skills index block helpers."""

    def test_inject_replace_remove(self):
        content = inject_skills_index("# Agents\n", "[Skills Index]|Regen: old")
        assert has_existing_skills_index(content)

        content = inject_skills_index(content, "[Skills Index]|Regen: new")
        assert content.count("AGENTS-MD-SKILLS-START") == 1
        assert "Regen: new" in content

        assert remove_skills_index(content) == "# Agents\n"

    def test_independent_of_docs_blocks(self):
        content = "<!-- AGENTS-MD-EMBED-START:nextjs -->\ndocs\n<!-- AGENTS-MD-EMBED-END:nextjs -->\n"

        assert not has_existing_skills_index(content)
        assert remove_skills_index(content) == content
