"""Tests for comment extraction."""

from __future__ import annotations

from acp_lsp.annotations.comments import extract_comments


class TestExtractComments:
    def test_text_without_marker_yields_nothing(self) -> None:
        assert extract_comments("// plain comment\n/* block */\n", "typescript") == []

    def test_only_comments_with_marker_are_kept(self) -> None:
        text = "// plain\nconst x = 1; // @acp:todo tidy up\n/* other */\n"
        spans = extract_comments(text, "typescript")
        assert len(spans) == 1
        assert spans[0].kind == "line"
        assert spans[0].content == " @acp:todo tidy up"
        assert text[spans[0].content_start:].startswith(" @acp:todo")

    def test_line_comment_stops_before_carriage_return(self) -> None:
        spans = extract_comments("# @acp:lock frozen\r\nx = 1\r\n", "python")
        assert spans[0].content == " @acp:lock frozen"

    def test_block_comment(self) -> None:
        text = "/**\n * @acp:purpose Billing\n * @acp:layer service\n */\nexport {}\n"
        spans = extract_comments(text, "typescript")
        assert len(spans) == 1
        assert spans[0].kind == "block"
        assert spans[0].end == text.index("*/") + 2

    def test_line_token_inside_block_belongs_to_block(self) -> None:
        text = "/* see http://example.com @acp:ref docs */"
        spans = extract_comments(text, "javascript")
        assert [s.kind for s in spans] == ["block"]

    def test_unterminated_block_runs_to_end(self) -> None:
        text = "/* @acp:todo finish"
        spans = extract_comments(text, "c")
        assert spans[0].end == len(text)
        assert spans[0].content == " @acp:todo finish"

    def test_python_docstring_block(self) -> None:
        text = 'def f():\n    """\n    @acp:fn Compute totals\n    """\n'
        spans = extract_comments(text, "python")
        assert len(spans) == 1
        assert spans[0].kind == "block"
        assert "@acp:fn Compute totals" in spans[0].content

    def test_unsupported_language(self) -> None:
        assert extract_comments("<!-- @acp:todo x -->", "html") == []
