#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/parsers/test_org_inline.py
"""Unit tests for the inline markup parser."""

from datetime import datetime

import pytest

from orgast.ast.nodes import (
    Emphasis,
    ExplicitLineBreak,
    FootnoteLink,
    InlineBlock,
    LatexFragment,
    LineBreak,
    Macro,
    Paragraph,
    RegularLink,
    StatisticToken,
    Text,
    Timestamp,
)
from orgast.ast.position import Pos
from orgast.options.org import OrgParserOptions
from orgast.parsers.inline import InlineParser


def parse(text: str, **options) -> list:
    return InlineParser(OrgParserOptions(**options)).parse(text, Pos(0, 0))


def types(nodes: list) -> list[str]:
    return [type(node).__name__ for node in nodes]


@pytest.mark.unit
class TestPlainText:
    """Tests for text and line breaks."""

    def test_plain_text(self) -> None:
        """Test that unmarked text is a single node."""
        nodes = parse("just words")
        assert nodes == [Text(Pos(0, 0), "just words", end_pos=Pos(0, 10))]

    def test_line_break(self) -> None:
        """Test that newlines become line break nodes."""
        nodes = parse("a\n\nb")
        assert types(nodes) == ["Text", "LineBreak", "Text"]
        assert nodes[1].count == 2
        assert nodes[2].pos == Pos(2, 0)

    def test_multibyte_line_break(self) -> None:
        """Test the flag for breaks between wide characters."""
        nodes = parse("日本\n語")
        assert nodes[1].between_multibyte_characters

    def test_explicit_line_break(self) -> None:
        """Test a trailing double backslash."""
        nodes = parse("line one \\\\\nline two")
        assert types(nodes) == ["Text", "ExplicitLineBreak", "Text"]
        assert nodes[2].content == "line two"

    def test_double_backslash_at_line_start_is_text(self) -> None:
        """Test that a line starting with two backslashes is not a break."""
        assert types(parse("\\\\\nrest")) == ["Text", "LineBreak", "Text"]


@pytest.mark.unit
class TestEmphasis:
    """Tests for emphasis markers."""

    @pytest.mark.parametrize("marker", ["*", "/", "+", "_"])
    def test_markers(self, marker: str) -> None:
        """Test each parsed emphasis marker."""
        nodes = parse(f"some {marker}word{marker} here")
        assert types(nodes) == ["Text", "Emphasis", "Text"]
        assert nodes[1].kind == marker
        assert nodes[1].content[0].content == "word"

    @pytest.mark.parametrize("marker", ["=", "~"])
    def test_verbatim_markers(self, marker: str) -> None:
        """Test that verbatim content is raw and not re-parsed."""
        nodes = parse(f"{marker}*not bold*{marker}")
        assert types(nodes) == ["Emphasis"]
        assert nodes[0].content == [Text(Pos(0, 1), "*not bold*", is_raw=True, end_pos=Pos(0, 11))]

    def test_nested_emphasis(self) -> None:
        """Test emphasis inside emphasis."""
        nodes = parse("*bold /italic/*")
        inner = nodes[0].content
        assert types(inner) == ["Text", "Emphasis"]
        assert inner[1].kind == "/"

    def test_word_internal_marker(self) -> None:
        """Test that a marker inside a word does not open emphasis."""
        assert types(parse("a*b*c")) == ["Text"]

    def test_marker_followed_by_space(self) -> None:
        """Test that an opening marker must not precede whitespace."""
        assert types(parse("a * b * c")) == ["Text"]

    def test_border_characters(self) -> None:
        """Test punctuation around emphasis."""
        nodes = parse("(*bold*).")
        assert types(nodes) == ["Text", "Emphasis", "Text"]

    def test_newline_budget(self) -> None:
        """Test the maximum number of newlines inside emphasis."""
        assert types(parse("*a\nb*")) == ["Emphasis"]
        assert "Emphasis" not in types(parse("*a\nb\nc*"))
        assert types(parse("*a\nb\nc*", max_emphasis_new_lines=2)) == ["Emphasis"]

    def test_sub_and_superscript(self) -> None:
        """Test the braced script forms."""
        nodes = parse("x^{2} and a_{i}")
        assert nodes[1].kind == "^{}"
        assert nodes[3].kind == "_{}"
        assert nodes[3].content[0].content == "i"

    def test_positions(self) -> None:
        """Test that nodes carry source positions relative to the origin."""
        nodes = InlineParser().parse("a *b*", Pos(2, 4))
        assert nodes[1].pos == Pos(2, 6)
        assert nodes[1].end_pos == Pos(2, 9)


@pytest.mark.unit
class TestLinks:
    """Tests for links and footnote references."""

    def test_regular_link_with_description(self) -> None:
        """Test a bracket link with a description."""
        (link,) = parse("[[https://example.com][Example]]")
        assert isinstance(link, RegularLink)
        assert link.protocol == "https"
        assert link.url == "https://example.com"
        assert link.description[0].content == "Example"
        assert link.kind == "regular"

    def test_relative_image_link(self) -> None:
        """Test a link without protocol pointing at an image."""
        (link,) = parse("[[./img.png]]")
        assert link.protocol == ""
        assert link.description is None
        assert link.kind == "image"

    def test_video_link(self) -> None:
        """Test video detection by extension."""
        assert parse("[[file:clip.mp4]]")[0].kind == "video"

    def test_described_link_is_regular(self) -> None:
        """Test that a textual description keeps an image target a regular link."""
        (link,) = parse("[[file:photo.png][the photo]]")
        assert link.kind == "regular"

    def test_auto_link(self) -> None:
        """Test a bare URL."""
        nodes = parse("see https://example.com/x now")
        assert types(nodes) == ["Text", "RegularLink", "Text"]
        assert nodes[1].auto_link
        assert nodes[1].url == "https://example.com/x"
        assert nodes[0].content == "see "

    def test_auto_link_disabled(self) -> None:
        """Test that auto-links can be switched off."""
        assert types(parse("see https://example.com", auto_link=False)) == ["Text"]

    def test_unknown_protocol_is_text(self) -> None:
        """Test that only known protocols become auto-links."""
        assert types(parse("see gopher://example.com")) == ["Text"]

    def test_footnote_reference(self) -> None:
        """Test a named reference."""
        (link,) = parse("[fn:1]")
        assert isinstance(link, FootnoteLink)
        assert link.name == "1"
        assert not link.is_inline

    def test_anonymous_inline_footnote(self) -> None:
        """Test an inline definition without a name."""
        (link,) = parse("[fn::an *inline* note]")
        assert link.name == ""
        assert link.definition.inline
        paragraph = link.definition.children[0]
        assert isinstance(paragraph, Paragraph)
        assert types(paragraph.children) == ["Text", "Emphasis", "Text"]

    def test_named_inline_footnote(self) -> None:
        """Test a named reference carrying its definition."""
        (link,) = parse("[fn:note:defined here]")
        assert link.name == "note"
        assert link.definition.name == "note"


@pytest.mark.unit
class TestOtherInlineConstructs:
    """Tests for cookies, macros, timestamps, LaTeX and inline blocks."""

    @pytest.mark.parametrize("cookie", ["1/3", "50%"])
    def test_statistic_token(self, cookie: str) -> None:
        """Test progress cookies."""
        (token,) = parse(f"[{cookie}]")
        assert token == StatisticToken(Pos(0, 0), cookie, end_pos=Pos(0, len(cookie) + 2))

    def test_macro(self) -> None:
        """Test macro calls with and without arguments."""
        nodes = parse("{{{title}}} {{{greet(a,b)}}}")
        assert nodes[0] == Macro(Pos(0, 0), "title", [], end_pos=Pos(0, 11))
        assert isinstance(nodes[2], Macro)
        assert nodes[2].parameters == ["a", "b"]

    def test_active_and_inactive_timestamps(self) -> None:
        """Test inline timestamps of both bracket styles."""
        nodes = parse("<2024-01-15 Mon> [2024-01-16 Tue]")
        assert isinstance(nodes[0], Timestamp)
        assert nodes[0].time.active
        assert isinstance(nodes[2], Timestamp)
        assert not nodes[2].time.active
        assert nodes[2].time.start == datetime(2024, 1, 16)

    def test_timestamp_range(self) -> None:
        """Test an inline date range."""
        (stamp,) = parse("<2024-01-15 Mon>--<2024-01-16 Tue>")
        assert stamp.time.end == datetime(2024, 1, 16)

    @pytest.mark.parametrize(
        "text,opening,closing",
        [
            ("\\(x+1\\)", "\\(", "\\)"),
            ("\\[x+1\\]", "\\[", "\\]"),
            ("$x+1$", "$", "$"),
            ("$$x+1$$", "$$", "$$"),
        ],
    )
    def test_latex_fragments(self, text: str, opening: str, closing: str) -> None:
        """Test each fragment delimiter pair."""
        (fragment,) = parse(text)
        assert isinstance(fragment, LatexFragment)
        assert (fragment.opening_pair, fragment.closing_pair) == (opening, closing)
        assert fragment.content[0].content == "x+1"
        assert fragment.content[0].is_raw

    def test_latex_environment(self) -> None:
        """Test a begin/end environment."""
        (fragment,) = parse("\\begin{equation}\na=b\n\\end{equation}")
        assert fragment.opening_pair == "\\begin{equation}"
        assert fragment.closing_pair == "\\end{equation}"
        assert types(fragment.content) == ["LineBreak", "Text", "LineBreak"]

    def test_inline_source_block(self) -> None:
        """Test src_lang[args]{code}."""
        (block,) = parse("src_python[:exports both]{print(1)}")
        assert isinstance(block, InlineBlock)
        assert block.name == "src"
        assert block.parameters == ["python", ":exports", "both"]
        assert block.children[0].content == "print(1)"

    def test_inline_source_block_needs_word_start(self) -> None:
        """Test that src_ inside a word is not a block."""
        assert "InlineBlock" not in types(parse("xsrc_python{1}"))

    def test_export_snippet(self) -> None:
        """Test @@backend:value@@."""
        (snippet,) = parse("@@html:<b>@@")
        assert snippet.name == "export"
        assert snippet.parameters == ["html"]
        assert snippet.children[0].content == "<b>"

    def test_unclosed_constructs_are_text(self) -> None:
        """Test that unterminated markup stays literal."""
        nodes = parse("[[broken {{{nope $open")
        assert types(nodes) == ["Text"]
        assert nodes[0].content == "[[broken {{{nope $open"

    def test_explicit_break_node_position(self) -> None:
        """Test the extent of an explicit line break."""
        nodes = parse("a \\\\\nb")
        assert isinstance(nodes[1], ExplicitLineBreak)
        assert nodes[1].pos == Pos(0, 2)

    def test_parse_raw(self) -> None:
        """Test that raw parsing only splits lines."""
        nodes = InlineParser().parse_raw("*a*\nb", Pos(0, 0))
        assert types(nodes) == ["Text", "LineBreak", "Text"]
        assert all(node.is_raw for node in nodes if isinstance(node, Text))
        assert isinstance(nodes[1], LineBreak)
