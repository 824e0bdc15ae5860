#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/parsers/test_org_blocks.py
"""Unit tests for block-level constructs other than headlines, lists and tables.

Tests cover:
- Paragraphs, blank lines and horizontal rules
- Delimited blocks, results and example lines
- Drawers and property drawers
- Keywords with side effects (NAME, affiliated keywords, LINK, MACRO,
  SETUPFILE, INCLUDE, TBLFM)
- Footnote definitions

"""

import logging

import pytest

from orgast.ast.nodes import (
    Block,
    Comment,
    Drawer,
    Emphasis,
    Example,
    FootnoteDefinition,
    HorizontalRule,
    Include,
    Keyword,
    LineBreak,
    List,
    NodeWithMeta,
    NodeWithName,
    Paragraph,
    PropertyDrawer,
    Result,
    Table,
    Text,
)
from orgast.document import Document
from orgast.options.org import OrgParserOptions
from orgast.parsers.context import ParseContext, is_second_blank_line
from orgast.parsers.delimited import split_parameters
from orgast.parsers.keywords import parse_attributes, resolve_path
from orgast.parsers.org import OrgParser
from orgast.tables.formulas import RowColRef


def parse_with_files(text: str, files: dict, path: str = "./") -> object:
    """Parse ``text`` with a read_file backed by an in-memory mapping."""

    def read_file(name: str) -> str:
        if name not in files:
            raise FileNotFoundError(name)
        return files[name]

    return OrgParser(OrgParserOptions(read_file=read_file)).parse(text, path)


@pytest.mark.unit
class TestParagraphs:
    """Tests for paragraphs and blank lines."""

    def test_consecutive_lines_form_one_paragraph(self, parse_org) -> None:
        """Test that adjacent text lines join into one paragraph."""
        doc = parse_org("one\ntwo\n\nthree")
        assert [type(n) for n in doc.nodes] == [Paragraph, Paragraph, Paragraph]
        first = doc.nodes[0]
        assert [type(n) for n in first.children] == [Text, LineBreak, Text]
        assert doc.nodes[1].children == []
        assert doc.nodes[2].children[0].content == "three"

    def test_blank_lines_are_kept(self, parse_org) -> None:
        """Test that every blank line becomes an empty paragraph."""
        doc = parse_org("a\n\n\nb")
        assert [len(n.children) == 0 for n in doc.nodes] == [False, True, True, False]

    def test_horizontal_rule(self, parse_org) -> None:
        """Test a line of dashes."""
        doc = parse_org("above\n-----\nbelow")
        assert isinstance(doc.nodes[1], HorizontalRule)

    def test_comment(self, parse_org) -> None:
        """Test a comment line."""
        doc = parse_org("# remember this")
        assert doc.nodes == [Comment(doc.nodes[0].pos, "remember this", end_pos=doc.nodes[0].end_pos)]

    def test_empty_input(self, parse_org) -> None:
        """Test that empty input yields an empty node list."""
        doc = parse_org("")
        assert doc.nodes == []
        assert doc.tokens == []


@pytest.mark.unit
class TestDelimitedBlocks:
    """Tests for #+BEGIN/#+END blocks."""

    def test_source_block(self, parse_org) -> None:
        """Test a source block with parameters and comma escaping."""
        doc = parse_org("#+BEGIN_SRC python :results output\nprint(1)\n,* not a headline\n#+END_SRC")
        (block,) = doc.nodes
        assert isinstance(block, Block)
        assert block.name == "SRC"
        assert block.parameters == ["python", ":results", "output"]
        assert block.language == "python"
        assert block.parameter_map() == {":results": "output"}
        texts = [n.content for n in block.children if isinstance(n, Text)]
        assert texts == ["print(1)", "* not a headline"]
        assert all(n.is_raw for n in block.children if isinstance(n, Text))

    def test_block_name_is_case_insensitive(self, parse_org) -> None:
        """Test lower-case block markers."""
        (block,) = parse_org("#+begin_example\nx\n#+end_example").nodes
        assert block.name == "EXAMPLE"

    def test_raw_block_keeps_markup(self, parse_org) -> None:
        """Test that headline-looking lines inside raw blocks stay text."""
        (block,) = parse_org("#+BEGIN_EXAMPLE\n* not a headline\n#+END_EXAMPLE").nodes
        assert block.children[0].content == "* not a headline"
        assert doc_headline_count(parse_org("#+BEGIN_EXAMPLE\n* x\n#+END_EXAMPLE")) == 0

    def test_raw_block_trims_to_begin_indentation(self, parse_org) -> None:
        """Test that indentation up to the begin line is removed."""
        (block,) = parse_org("  #+BEGIN_SRC sh\n    ls\n  #+END_SRC").nodes
        assert block.children[0].content == "  ls"

    def test_parsed_block(self, parse_org) -> None:
        """Test that non-raw blocks hold parsed content."""
        (block,) = parse_org("#+BEGIN_CENTER\n*bold* text\n#+END_CENTER").nodes
        assert block.name == "CENTER"
        assert isinstance(block.children[0], Paragraph)
        assert isinstance(block.children[0].children[0], Emphasis)

    def test_unterminated_block_is_text(self, parse_org, caplog) -> None:
        """Test that a block without an end line degrades to a paragraph."""
        with caplog.at_level(logging.WARNING, logger="orgast"):
            doc = parse_org("#+BEGIN_QUOTE\ntext")
        (paragraph,) = doc.nodes
        assert isinstance(paragraph, Paragraph)
        assert paragraph.children[0].content == "#+BEGIN_QUOTE"
        assert "treating it as plain text" in caplog.text

    def test_source_block_result(self, parse_org) -> None:
        """Test that a results section after blank lines attaches to the block."""
        doc = parse_org("#+BEGIN_SRC python\nprint(1)\n#+END_SRC\n\n#+RESULTS:\n: 1\n")
        (block,) = doc.nodes
        assert isinstance(block.result, Result)
        assert isinstance(block.result.node, Example)
        assert block.result.node.children[0].content == "1"

    def test_standalone_result(self, parse_org) -> None:
        """Test a results marker outside a source block."""
        (result,) = parse_org("#+RESULTS:\n| 1 |").nodes
        assert isinstance(result, Result)
        assert isinstance(result.node, Table)

    def test_example_lines(self, parse_org) -> None:
        """Test consecutive colon lines."""
        (example,) = parse_org(": line one\n: line two\n:").nodes
        assert [t.content for t in example.children] == ["line one", "line two", ""]

    @pytest.mark.parametrize(
        "text,expected",
        [
            (" python :results output :exports both", ["python", ":results", "output", ":exports", "both"]),
            ("", []),
            (" :tangle yes", [":tangle", "yes"]),
            (" emacs-lisp", ["emacs-lisp"]),
        ],
    )
    def test_split_parameters(self, text: str, expected: list) -> None:
        """Test splitting of block header arguments."""
        assert split_parameters(text) == expected


def doc_headline_count(doc) -> int:
    return doc.outline.count


@pytest.mark.unit
class TestDrawers:
    """Tests for drawers."""

    def test_generic_drawer(self, parse_org) -> None:
        """Test a drawer holding parsed content."""
        (drawer,) = parse_org(":LOGBOOK:\n- note\n:END:").nodes
        assert isinstance(drawer, Drawer)
        assert drawer.name == "LOGBOOK"
        assert isinstance(drawer.children[0], List)

    def test_property_drawer(self, parse_org) -> None:
        """Test key/value pairs with upper-cased keys."""
        (drawer,) = parse_org(":PROPERTIES:\n:Foo: bar baz\n:Empty:\n:END:").nodes
        assert isinstance(drawer, PropertyDrawer)
        assert drawer.properties == [("FOO", "bar baz"), ("EMPTY", "")]
        assert drawer.get("FOO") == "bar baz"
        assert drawer.has("EMPTY")
        assert drawer.keys() == ["FOO", "EMPTY"]
        assert drawer.get("MISSING") is None

    def test_bad_property_line_demotes_drawer(self, parse_org) -> None:
        """Test that a non-property line turns the drawer into text."""
        doc = parse_org(":PROPERTIES:\nnot a property\n:END:")
        assert all(isinstance(n, Paragraph) for n in doc.nodes)
        assert doc.nodes[0].children[0].content == ":PROPERTIES:"

    def test_unterminated_property_drawer(self, parse_org) -> None:
        """Test that a property drawer without :END: is text."""
        doc = parse_org(":PROPERTIES:\n:A: 1")
        assert not any(isinstance(n, PropertyDrawer) for n in doc.nodes)

    def test_nested_drawer_start_is_literal(self, parse_org) -> None:
        """Test that a drawer start inside a drawer is kept as text."""
        (drawer,) = parse_org(":NOTES:\ntext\n:INNER:\nmore\n:END:").nodes
        literal = drawer.children[1]
        assert isinstance(literal, Paragraph)
        assert literal.children[0].content == ":INNER:"
        assert drawer.children[2].children[0].content == "more"


@pytest.mark.unit
class TestKeywords:
    """Tests for keyword lines."""

    def test_buffer_settings(self, parse_org) -> None:
        """Test that keywords record settings with upper-cased keys."""
        doc = parse_org("#+title: Hello\n#+AUTHOR:   Me  ")
        assert doc.get("TITLE") == "Hello"
        assert doc.get("AUTHOR") == "Me"
        assert all(isinstance(n, Keyword) for n in doc.nodes)

    def test_repeated_keys_are_joined(self, parse_org) -> None:
        """Test that a repeated key accumulates its values."""
        doc = parse_org("#+FOO: a\n#+FOO: b")
        assert doc.get("FOO") == "a\nb"

    def test_default_settings(self, parse_org) -> None:
        """Test the fallback to default settings."""
        doc = parse_org("")
        assert doc.get("EXCLUDE_TAGS") == "noexport"
        assert doc.get("UNKNOWN") == ""

    def test_named_node(self, parse_org) -> None:
        """Test that #+NAME wraps and registers the next node."""
        doc = parse_org("#+NAME: numbers\n| 1 | 2 |")
        (named,) = doc.nodes
        assert isinstance(named, NodeWithName)
        assert named.name == "numbers"
        assert doc.named_nodes["numbers"] is named.node
        assert isinstance(named.node, Table)

    def test_name_without_node(self, parse_org) -> None:
        """Test that a trailing #+NAME degrades to text."""
        (paragraph,) = parse_org("#+NAME: lonely").nodes
        assert isinstance(paragraph, Paragraph)

    def test_affiliated_keywords(self, parse_org) -> None:
        """Test caption and attributes collected onto the next node."""
        doc = parse_org("#+CAPTION: A *figure*\n#+ATTR_HTML: :class wide\n#+ENV: x\n[[./img.png]]")
        (node,) = doc.nodes
        assert isinstance(node, NodeWithMeta)
        assert isinstance(node.node, Paragraph)
        assert [type(n) for n in node.meta.caption[0]] == [Text, Emphasis]
        assert node.meta.html_attributes == [[":class", "wide"]]
        assert node.meta.env == "x"

    def test_parse_attributes(self) -> None:
        """Test multi-word attribute values."""
        assert parse_attributes(":class wide image :alt A picture") == [":class", "wide image", ":alt", "A picture"]
        assert parse_attributes("") == []

    def test_link_and_macro_registration(self, parse_org) -> None:
        """Test link abbreviations and macro templates."""
        doc = parse_org("#+LINK: gh https://github.com/%s\n#+MACRO: greet Hello $1")
        assert doc.links == {"gh": "https://github.com/%s"}
        assert doc.macros == {"greet": "Hello $1"}

    def test_setup_file_merges_settings(self) -> None:
        """Test that a setup file fills in settings the document lacks."""
        files = {"docs/setup.org": "#+TITLE: From setup\n#+AUTHOR: Setup\n#+LINK: wiki https://w/%s\n"}
        doc = parse_with_files("#+TITLE: Main\n#+SETUPFILE: setup.org\n", files, path="docs/main.org")
        assert doc.error is None
        assert doc.get("TITLE") == "Main"
        assert doc.get("AUTHOR") == "Setup"
        assert doc.links["wiki"] == "https://w/%s"

    def test_missing_setup_file_warns(self, caplog) -> None:
        """Test that an unreadable setup file is reported and ignored."""
        with caplog.at_level(logging.WARNING, logger="orgast"):
            doc = parse_with_files("#+SETUPFILE: missing.org\n", {})
        assert doc.error is None
        assert "Bad setup file" in caplog.text

    def test_include_resolves_lazily(self) -> None:
        """Test that an include reads its file only when resolved."""
        files = {"code.py": "print(1)\n"}
        doc = parse_with_files('#+INCLUDE: "code.py" src python\n', files)
        (include,) = doc.nodes
        assert isinstance(include, Include)
        files["code.py"] = "print(2)\n"
        block = include.resolve()
        assert isinstance(block, Block)
        assert block.name == "SRC"
        assert block.parameters == ["python"]
        assert block.children[0].content == "print(2)"

    def test_bad_include_returns_keyword(self, caplog) -> None:
        """Test that a malformed include resolves to its keyword."""
        doc = parse_with_files("#+INCLUDE: code.py\n", {})
        (include,) = doc.nodes
        with caplog.at_level(logging.WARNING, logger="orgast"):
            assert include.resolve() is include.keyword
        assert "Bad include" in caplog.text

    def test_missing_include_file(self, caplog) -> None:
        """Test that an unreadable include resolves to its keyword."""
        doc = parse_with_files('#+INCLUDE: "nope.txt" example text\n', {})
        with caplog.at_level(logging.WARNING, logger="orgast"):
            assert isinstance(doc.nodes[0].resolve(), Keyword)

    def test_resolve_path(self) -> None:
        """Test resolution relative to the document directory."""
        assert resolve_path("notes/main.org", "setup.org") == "notes/setup.org"
        assert resolve_path("notes/main.org", "/abs/setup.org") == "/abs/setup.org"

    def test_table_formulas(self, parse_org) -> None:
        """Test that #+TBLFM attaches to the preceding table."""
        doc = parse_org("| 1 | 2 |\n#+TBLFM: $2=$1*2::@1$1=3;%.2f")
        table = doc.nodes[0]
        formulas = table.formulas.formulas
        assert [f.formula_str for f in formulas] == ["$2=$1*2", "@1$1=3;%.2f"]
        assert formulas[0].target.start == RowColRef(None, 2)
        assert formulas[0].expression == "$1*2"
        assert formulas[1].format == "%.2f"
        assert isinstance(doc.nodes[1], Keyword)

    def test_table_formulas_without_table(self, parse_org, caplog) -> None:
        """Test that #+TBLFM without a table only warns."""
        with caplog.at_level(logging.WARNING, logger="orgast"):
            doc = parse_org("#+TBLFM: $2=$1")
        assert isinstance(doc.nodes[0], Keyword)
        assert "no table" in caplog.text


@pytest.mark.unit
class TestFootnoteDefinitions:
    """Tests for footnote definitions."""

    def test_definition_is_registered(self, parse_org) -> None:
        """Test a one-line definition."""
        doc = parse_org("Text[fn:1].\n\n[fn:1] The note.")
        definition = doc.footnotes["1"]
        assert isinstance(definition, FootnoteDefinition)
        assert definition is doc.nodes[-1]
        assert definition.children[0].children[0].content == "The note."

    def test_definition_spans_single_blank_line(self, parse_org) -> None:
        """Test that one blank line does not end a definition but two do."""
        doc = parse_org("[fn:1] A note\n\nMore text\n\n\nAfter")
        definition = doc.nodes[0]
        contents = [p.children[0].content for p in definition.children if p.children]
        assert contents == ["A note", "More text"]
        assert doc.nodes[-1].children[0].content == "After"

    def test_definition_ends_at_next_definition(self, parse_org) -> None:
        """Test that each definition is its own node."""
        doc = parse_org("[fn:a] First\n[fn:b] Second")
        assert [n.name for n in doc.nodes] == ["a", "b"]
        assert list(doc.footnotes) == ["a", "b"]

    def test_inline_definition_is_registered(self, parse_org) -> None:
        """Test that named inline definitions land in the registry."""
        doc = parse_org("See[fn:x:inline text].")
        assert doc.footnotes["x"].inline


@pytest.mark.unit
class TestStopPredicates:
    """Tests for the shared stop predicates."""

    def test_second_blank_line(self) -> None:
        """Test blank line pairs, including the pair at the start."""
        parser = OrgParser()
        tokens = parser.lexer.tokenize_lines(["", "", "x", ""])
        ctx = ParseContext(Document(tokens=tokens), tokens, parser.lexer, parser.inline, parser)
        assert [is_second_blank_line(ctx, i) for i in range(5)] == [False, True, False, False, False]
