"""
Unit tests for marker-delimited block injection and removal.
"""

import pytest

from agdex.markers import (
    DOCS_MARKERS,
    SKILLS_MARKERS,
    MarkerPair,
    find_block_ids,
    has_block,
    inject_block,
    remove_block,
)

START = "<!-- AGENTS-MD-EMBED-START -->"
END = "<!-- AGENTS-MD-EMBED-END -->"


class TestMarkerPair:
    """Tests for marker rendering."""

    def test_unidentified_markers(self):
        assert DOCS_MARKERS.start() == START
        assert DOCS_MARKERS.end() == END

    def test_identified_markers(self):
        assert DOCS_MARKERS.start("nextjs") == "<!-- AGENTS-MD-EMBED-START:nextjs -->"
        assert DOCS_MARKERS.end("nextjs") == "<!-- AGENTS-MD-EMBED-END:nextjs -->"

    def test_skills_markers(self):
        assert SKILLS_MARKERS.start() == "<!-- AGENTS-MD-SKILLS-START -->"
        assert SKILLS_MARKERS.end() == "<!-- AGENTS-MD-SKILLS-END -->"

    def test_wrap(self):
        assert MarkerPair("X").wrap("body") == "<!-- X-START -->\nbody\n<!-- X-END -->"

    @pytest.mark.parametrize("block_id", ["has space", "a:b", "tab\there"])
    def test_invalid_identifier_rejected(self, block_id: str):
        with pytest.raises(ValueError):
            DOCS_MARKERS.start(block_id)


class TestInjectBlock:
    """Tests for inject_block."""

    def test_inject_into_empty_content(self):
        """Empty host content gets no leading separator."""
        assert inject_block("", "X", DOCS_MARKERS) == f"{START}\nX\n{END}\n"

    def test_append_after_trailing_newline(self):
        result = inject_block("# Title\n", "X", DOCS_MARKERS)
        assert result == f"# Title\n\n{START}\nX\n{END}\n"

    def test_append_without_trailing_newline(self):
        result = inject_block("# Title", "X", DOCS_MARKERS)
        assert result == f"# Title\n\n{START}\nX\n{END}\n"

    def test_replace_existing_block(self):
        content = f"# P\n\n{START}\nold\n{END}\nFooter"
        result = inject_block(content, "new", DOCS_MARKERS)

        assert "# P" in result
        assert "new" in result
        assert "Footer" in result
        assert "old" not in result
        assert result == f"# P\n\n{START}\nnew\n{END}\nFooter"

    def test_replace_preserves_surrounding_text_exactly(self):
        prefix = "intro  \n\n\n  spaced\t\n"
        suffix = "\n\n\n\ntrailer without newline"
        content = f"{prefix}{START}\nold\n{END}{suffix}"

        result = inject_block(content, "new", DOCS_MARKERS)

        assert result == f"{prefix}{START}\nnew\n{END}{suffix}"

    @pytest.mark.parametrize(
        "content",
        ["", "# Title", "# Title\n", "text\n\n\n", f"a\n{START}\nold\n{END}\nb\n"],
    )
    def test_idempotent(self, content: str):
        once = inject_block(content, "body|with:chars", DOCS_MARKERS)
        twice = inject_block(once, "body|with:chars", DOCS_MARKERS)
        assert once == twice

    def test_identified_blocks_are_independent(self):
        content = inject_block("", "next", DOCS_MARKERS, "nextjs")
        content = inject_block(content, "react", DOCS_MARKERS, "react")
        content = inject_block(content, "next v2", DOCS_MARKERS, "nextjs")

        assert "next v2" in content
        assert "react" in content
        assert content.count("AGENTS-MD-EMBED-START:nextjs") == 1
        assert content.index("next v2") < content.index("react")

    def test_unidentified_inject_ignores_identified_block(self):
        content = inject_block("", "next", DOCS_MARKERS, "nextjs")
        result = inject_block(content, "plain", DOCS_MARKERS)

        assert "next" in result
        assert result.endswith(f"{START}\nplain\n{END}\n")

    def test_start_without_end_is_replaced(self):
        content = f"head\n{START}\ndangling body"
        result = inject_block(content, "new", DOCS_MARKERS)
        assert result == f"head\n{START}\nnew\n{END}\ndangling body"

    def test_end_marker_before_start_is_ignored(self):
        content = f"{END}\nhead\n{START}\nold\n{END}\n"
        result = inject_block(content, "new", DOCS_MARKERS)
        assert result == f"{END}\nhead\n{START}\nnew\n{END}\n"


class TestRemoveBlock:
    """Tests for remove_block."""

    def test_no_block_returns_content_unchanged(self):
        content = "# Title\n\n\n\nbody   "
        assert remove_block(content, DOCS_MARKERS) is content
        assert remove_block(content, DOCS_MARKERS, "nextjs") is content

    def test_remove_whole_file_block(self):
        content = inject_block("", "X", DOCS_MARKERS)
        assert remove_block(content, DOCS_MARKERS) == ""

    def test_collapses_blank_runs(self):
        content = f"before\n\n\n\n{START}\nX\n{END}\n\n\n\nafter\n"
        result = remove_block(content, DOCS_MARKERS)

        assert result == "before\n\nafter\n"
        assert "\n\n\n" not in result

    def test_round_trip(self):
        prefix = "# Project\n\nSome notes.\n"
        suffix = "\n## Footer\n"
        content = f"{prefix}\n{START}\nold\n{END}\n{suffix}"

        result = remove_block(inject_block(content, "new", DOCS_MARKERS), DOCS_MARKERS)

        assert result == "# Project\n\nSome notes.\n\n## Footer\n"

    def test_remove_appended_block_restores_original(self):
        original = "# Project\n\nSome notes.\n"
        assert remove_block(inject_block(original, "X", DOCS_MARKERS), DOCS_MARKERS) == original

    def test_remove_identified_block_only(self):
        content = inject_block("# Top\n", "next", DOCS_MARKERS, "nextjs")
        content = inject_block(content, "react", DOCS_MARKERS, "react")

        result = remove_block(content, DOCS_MARKERS, "nextjs")

        assert "AGENTS-MD-EMBED-START:nextjs" not in result
        assert "AGENTS-MD-EMBED-START:react" in result
        assert "\nreact\n" in result

    def test_remove_without_id_sweeps_all_blocks(self):
        content = inject_block("# Top\n", "next", DOCS_MARKERS, "nextjs")
        content = inject_block(content, "plain", DOCS_MARKERS)
        content = inject_block(content, "react", DOCS_MARKERS, "react")
        content += "tail\n"

        result = remove_block(content, DOCS_MARKERS)

        assert result == "# Top\n\ntail\n"

    def test_sweep_strips_dangling_start_marker(self):
        content = f"a\n<!-- AGENTS-MD-EMBED-START:broken -->\nkept\n{START}\nX\n{END}\nb\n"
        result = remove_block(content, DOCS_MARKERS)

        assert "AGENTS-MD-EMBED" not in result
        assert "kept" in result
        assert "X" not in result

    def test_sweep_leaves_other_tags_alone(self):
        content = inject_block("", "docs", DOCS_MARKERS, "nextjs")
        content = inject_block(content, "skills", SKILLS_MARKERS)

        result = remove_block(content, DOCS_MARKERS)

        assert "AGENTS-MD-EMBED" not in result
        assert result.endswith(f"{SKILLS_MARKERS.wrap('skills')}\n")


class TestBlockQueries:
    """Tests for has_block and find_block_ids."""

    def test_has_block(self):
        content = inject_block("", "X", DOCS_MARKERS, "nextjs")
        assert has_block(content, DOCS_MARKERS, "nextjs")
        assert not has_block(content, DOCS_MARKERS, "react")
        assert not has_block(content, DOCS_MARKERS)
        assert not has_block(content, SKILLS_MARKERS)

    def test_find_block_ids(self):
        content = inject_block("", "a", DOCS_MARKERS, "nextjs")
        content = inject_block(content, "b", DOCS_MARKERS)
        content = inject_block(content, "c", DOCS_MARKERS, "react")

        assert find_block_ids(content, DOCS_MARKERS) == ["nextjs", None, "react"]
        assert find_block_ids(content, SKILLS_MARKERS) == []
