#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/renderers/test_html_writer.py
"""Unit tests for the HTML renderer."""

import logging

import pytest

from orgast.exceptions import InvalidOptionsError
from orgast.options.html import HtmlRendererOptions
from orgast.options.org import OrgRendererOptions
from orgast.renderers.html import HtmlRenderer

NO_TOC = "#+OPTIONS: toc:nil\n"


@pytest.fixture
def html(parse_org):
    """Parse Org text and render it as HTML."""

    def _html(text: str, options: HtmlRendererOptions | None = None) -> str:
        return HtmlRenderer(options).render_to_string(parse_org(text))

    return _html


@pytest.mark.unit
class TestHtmlRendererOptions:
    """Tests for HTML renderer configuration."""

    def test_rejects_foreign_options(self) -> None:
        """Test that Org options are refused by the HTML renderer."""
        with pytest.raises(InvalidOptionsError):
            HtmlRenderer(OrgRendererOptions())

    @pytest.mark.parametrize("offset", [-1, 6])
    def test_heading_offset_range(self, offset) -> None:
        """Test that heading offsets outside 0..5 are rejected."""
        with pytest.raises(ValueError):
            HtmlRendererOptions(top_level_heading_offset=offset)

    def test_heading_offset(self, html) -> None:
        """Test that the offset shifts heading tags and is capped at h6."""
        out = html(NO_TOC + "* A\n***** E", HtmlRendererOptions(top_level_heading_offset=2))
        assert '<h3 id="headline-1">' in out
        assert '<h6 id="headline-2">' in out

    def test_custom_highlighter(self, html) -> None:
        """Test that source blocks go through the configured highlighter."""
        options = HtmlRendererOptions(highlight_code_block=lambda source, lang, inline, params: f"[{lang}]{source}")
        out = html("#+BEGIN_SRC Python\nprint(1)\n#+END_SRC", options)
        assert out == '<div class="src src-python">\n[python]print(1)\n</div>\n'


@pytest.mark.unit
class TestHeadlineHtml:
    """Tests for headlines, outline and document title."""

    def test_headline_with_section(self, html) -> None:
        """Test the headline container and section wrapper."""
        assert html(NO_TOC + "* A\nText") == (
            '<div id="outline-container-headline-1" class="outline-1">\n'
            '<h1 id="headline-1">\nA\n</h1>\n'
            '<div id="outline-text-headline-1" class="outline-text-1">\n'
            "<p>Text</p>\n"
            "</div>\n"
            "</div>\n"
        )

    def test_custom_id_is_anchor(self, html) -> None:
        """Test that ``CUSTOM_ID`` replaces the numbered anchor."""
        out = html(NO_TOC + "* A\n:PROPERTIES:\n:CUSTOM_ID: intro\n:END:")
        assert '<h1 id="intro">' in out
        assert "CUSTOM_ID" not in out

    def test_todo_priority_and_tags(self, html) -> None:
        """Test the spans written around the title."""
        out = html(NO_TOC + "* TODO [#A] Task :work:home:")
        assert '<span class="todo">TODO</span>\n' in out
        assert '<span class="priority">[A]</span>\n' in out
        assert '&#xa0;&#xa0;&#xa0;<span class="tags"><span>work</span>&#xa0;<span>home</span></span>' in out

    def test_export_options_hide_parts(self, html) -> None:
        """Test ``todo:nil``, ``pri:nil`` and ``tags:nil``."""
        out = html("#+OPTIONS: toc:nil todo:nil pri:nil tags:nil\n* TODO [#A] Task :work:")
        assert "todo" not in out
        assert "priority" not in out
        assert "tags" not in out

    def test_excluded_headline_is_skipped(self, html) -> None:
        """Test that ``noexport`` subtrees are not written."""
        out = html("* Secret :noexport:\nhidden\n* Public")
        assert "Secret" not in out
        assert "hidden" not in out
        assert "Public" in out

    def test_custom_exclude_tags(self, html) -> None:
        """Test ``#+EXCLUDE_TAGS:``."""
        out = html("#+EXCLUDE_TAGS: private\n" + NO_TOC + "* Secret :private:\n* Public :noexport:")
        assert "Secret" not in out
        assert "Public" in out

    def test_table_of_contents(self, html) -> None:
        """Test the default outline navigation."""
        out = html("* A")
        assert out.startswith('<nav>\n<ul>\n<li><a href="#headline-1">A</a>\n</li>\n</ul>\n</nav>\n')

    def test_table_of_contents_depth(self, html) -> None:
        """Test that ``toc:1`` leaves out deeper headlines."""
        out = html("#+OPTIONS: toc:1\n* A\n** B")
        nav = out[: out.index("</nav>")]
        assert 'href="#headline-1"' in nav
        assert 'href="#headline-2"' not in nav

    def test_toc_after_unterminated_block(self, html) -> None:
        """Test that outline links match body ids after an unclosed block."""
        out = html("#+BEGIN_CENTER\n* A\n* B\n")
        nav = out[: out.index("</nav>")]
        assert nav.count("<li>") == 2
        assert 'href="#headline-1"' in nav
        assert '<h1 id="headline-2">' in out
        assert "headline-3" not in out

    def test_toc_keyword(self, html) -> None:
        """Test ``#+TOC: headlines N`` placing the outline."""
        out = html(NO_TOC + "#+TOC: headlines 2\n* A")
        assert out.startswith("<nav>")

    def test_toc_strips_links_from_titles(self, html) -> None:
        """Test that anchors inside titles are dropped in the outline."""
        out = html("* See [[https://example.com][site]]")
        assert '<li><a href="#headline-1">See site</a>' in out

    def test_title(self, html) -> None:
        """Test the ``#+TITLE:`` heading."""
        assert html("#+TITLE: My *Doc*") == '<h1 class="title">My <strong>Doc</strong></h1>\n'

    def test_title_disabled(self, html) -> None:
        """Test ``title:nil``."""
        assert html("#+TITLE: My Doc\n#+OPTIONS: title:nil") == ""

    def test_planning_line(self, html) -> None:
        """Test the planning keywords and their timestamps."""
        out = html(NO_TOC + "* A\nSCHEDULED: <2024-01-15 Mon>")
        assert (
            '<span class="tags">SCHEDULED</span><span class="timestamp">&lt;2024-01-15 Mon&gt;</span>\n' in out
        )
        assert "SCHEDULED" not in html("#+OPTIONS: toc:nil <:nil\n* A\nSCHEDULED: <2024-01-15 Mon>")


@pytest.mark.unit
class TestBlockHtml:
    """Tests for block-level elements."""

    def test_paragraph_is_escaped(self, html) -> None:
        """Test HTML escaping of text."""
        assert html("a < b & c") == "<p>a &lt; b &amp; c</p>\n"

    def test_blank_lines_and_comments_write_nothing(self, html) -> None:
        """Test elements without HTML output."""
        assert html("\n\n# comment\n:PROPERTIES:\n:A: b\n:END:") == ""

    def test_horizontal_rule(self, html) -> None:
        """Test ``-----``."""
        assert html("-----") == "<hr>\n"

    def test_lists(self, html) -> None:
        """Test list containers and items."""
        assert html("- a") == "<ul>\n<li>a</li>\n</ul>\n"
        assert html("1. a") == "<ol>\n<li>a</li>\n</ol>\n"
        assert '<li value="3">' in html("1. [@3] a")

    def test_checkboxes(self, html) -> None:
        """Test checkbox state classes."""
        out = html("- [X] a\n- [ ] b\n- [-] c")
        assert '<li class="checked">a</li>' in out
        assert '<li class="unchecked">b</li>' in out
        assert '<li class="indeterminate">c</li>' in out

    def test_descriptive_list(self, html) -> None:
        """Test ``<dl>`` output."""
        assert html("- t :: d") == "<dl>\n<dt>\nt\n</dt>\n<dd>d</dd>\n</dl>\n"

    def test_nested_list(self, html) -> None:
        """Test that an item with a sub-list writes its content as blocks."""
        out = html("- a\n  - b")
        assert out == "<ul>\n<li>\n<p>a</p>\n<ul>\n<li>b</li>\n</ul>\n</li>\n</ul>\n"

    def test_table_with_header(self, html) -> None:
        """Test header rows, separators and alignment classes."""
        assert html("| a | b |\n|---+---|\n| 1 | x |") == (
            "<table>\n<thead>\n"
            '<tr>\n<th class="align-right">a</th>\n<th>b</th>\n</tr>\n'
            "</thead>\n<tbody>\n"
            '<tr>\n<td class="align-right">1</td>\n<td>x</td>\n</tr>\n'
            "</tbody>\n</table>\n"
        )

    def test_table_without_header(self, html) -> None:
        """Test that a table without separators has only a body."""
        out = html("| x |\n| y |")
        assert "<thead>" not in out
        assert out.startswith("<table>\n<tbody>\n")

    def test_src_block(self, html) -> None:
        """Test the default escaping highlighter."""
        out = html("#+BEGIN_SRC python\nif a < b:\n    pass\n#+END_SRC")
        assert out == (
            '<div class="src src-python">\n<div class="highlight">\n<pre>\n'
            "if a &lt; b:\n    pass\n"
            "</pre>\n</div>\n</div>\n"
        )

    def test_src_exports(self, html) -> None:
        """Test ``:exports`` on source blocks and their results."""
        text = "#+BEGIN_SRC sh :exports {}\necho hi\n#+END_SRC\n\n#+RESULTS:\n: hi"
        results_only = html(text.format("results"))
        assert "src-sh" not in results_only
        assert '<pre class="example">\nhi\n</pre>\n' in results_only
        code_only = html(text.format("code"))
        assert "src-sh" in code_only
        assert "example" not in code_only
        assert html(text.format("none")) == ""

    def test_example_block(self, html) -> None:
        """Test example blocks and example lines."""
        assert html("#+BEGIN_EXAMPLE\na < b\n#+END_EXAMPLE") == '<pre class="example">\na &lt; b\n</pre>\n'
        assert html(": one\n: two") == '<pre class="example">\none\ntwo\n</pre>\n'

    def test_quote_block(self, html) -> None:
        """Test that quote content is escaped verbatim."""
        assert html("#+BEGIN_QUOTE\n*not bold*\n#+END_QUOTE") == "<blockquote>\n*not bold*\n</blockquote>\n"

    def test_center_block(self, html) -> None:
        """Test that center blocks hold parsed content."""
        out = html("#+BEGIN_CENTER\n*hi*\n#+END_CENTER")
        assert out.startswith('<div class="center-block"')
        assert out.endswith("<p><strong>hi</strong></p>\n</div>\n")

    def test_export_blocks(self, html) -> None:
        """Test that only HTML export blocks are written."""
        assert html("#+BEGIN_EXPORT html\n<b>x</b>\n#+END_EXPORT") == "<b>x</b>\n"
        assert html("#+BEGIN_EXPORT latex\n\\textbf{x}\n#+END_EXPORT") == ""

    def test_html_keyword(self, html) -> None:
        """Test ``#+HTML:`` lines written verbatim."""
        assert html("#+HTML: <hr/>") == "<hr/>\n"

    def test_drawer_content(self, html) -> None:
        """Test that drawers write their content only."""
        assert html(":NOTE:\nhi\n:END:") == "<p>hi</p>\n"

    def test_caption(self, html) -> None:
        """Test that a caption wraps the node in a figure."""
        assert html("#+CAPTION: A figure\n[[./img.png]]") == (
            '<figure>\n<img src="./img.png" alt="./img.png" title="./img.png" />'
            "<figcaption>\nA figure\n</figcaption>\n</figure>\n"
        )

    def test_attr_html(self, html) -> None:
        """Test that ``#+ATTR_HTML:`` adds attributes to the element."""
        out = html("#+ATTR_HTML: :class wide :width 50%\n[[./img.png]]")
        assert out.startswith("<img ")
        assert 'class="wide"' in out
        assert 'width="50%"' in out


@pytest.mark.unit
class TestInlineHtml:
    """Tests for inline markup."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("/a/", "<em>a</em>"),
            ("*a*", "<strong>a</strong>"),
            ("+a+", "<del>a</del>"),
            ("~a<b~", "<code>a&lt;b</code>"),
            ("=a<b=", '<code class="verbatim">a&lt;b</code>'),
            ("_a_", '<span style="text-decoration: underline;">a</span>'),
            ("H_{2}O", "H<sub>2</sub>O"),
            ("x^{2}", "x<sup>2</sup>"),
        ],
    )
    def test_emphasis(self, html, text, expected) -> None:
        """Test emphasis tags."""
        assert html(text) == f"<p>{expected}</p>\n"

    def test_entities(self, html) -> None:
        """Test entity and special string replacement."""
        assert html("\\alpha -- b...") == "<p>\u03b1 \u2013 b\u2026</p>\n"
        assert html("#+OPTIONS: e:nil\na -- b") == "<p>a -- b</p>\n"

    def test_verbatim_skips_entities(self, html) -> None:
        """Test that raw text is not entity-replaced."""
        assert html("=a -- b=") == '<p><code class="verbatim">a -- b</code></p>\n'

    def test_line_breaks(self, html) -> None:
        """Test soft and explicit line breaks."""
        assert html("a\nb") == "<p>a\nb</p>\n"
        assert html("a\\\\\nb") == "<p>a<br>\nb</p>\n"

    def test_east_asian_line_break(self, html) -> None:
        """Test ``ealb:t`` joining lines between wide characters."""
        assert html("#+OPTIONS: ealb:t\n\u4e2d\u6587\n\u65e5\u672c") == "<p>\u4e2d\u6587\u65e5\u672c</p>\n"
        assert html("\u4e2d\u6587\n\u65e5\u672c") == "<p>\u4e2d\u6587\n\u65e5\u672c</p>\n"

    def test_links(self, html) -> None:
        """Test regular, bare and org-file links."""
        assert html("[[https://x.org][X]]") == '<p><a href="https://x.org">X</a></p>\n'
        assert html("[[https://x.org]]") == '<p><a href="https://x.org">https://x.org</a></p>\n'
        assert html("[[file:notes.org][Notes]]") == '<p><a href="notes.html">Notes</a></p>\n'
        assert html("see https://x.org") == '<p>see <a href="https://x.org">https://x.org</a></p>\n'

    def test_media_links(self, html) -> None:
        """Test image and video links."""
        assert html("[[./img.png]]") == '<p><img src="./img.png" alt="./img.png" title="./img.png" /></p>\n'
        assert html("[[./clip.mp4]]") == '<p><video src="./clip.mp4" title="./clip.mp4">./clip.mp4</video></p>\n'

    def test_link_abbreviation(self, html) -> None:
        """Test ``#+LINK:`` templates."""
        out = html("#+LINK: gh https://github.com/%s\n[[gh:orgast][repo]]")
        assert out == '<p><a href="https://github.com/orgast">repo</a></p>\n'

    def test_link_abbreviation_without_placeholder(self, html) -> None:
        """Test that a template without ``%s`` gets the tag appended."""
        out = html("#+LINK: wiki https://en.wikipedia.org/wiki/\n[[wiki:Org-mode][wiki]]")
        assert '<a href="https://en.wikipedia.org/wiki/Org-mode">' in out

    def test_macro(self, html) -> None:
        """Test macro expansion with parameters."""
        assert html("#+MACRO: greet Hello $1\n{{{greet(World)}}}") == "<p>Hello World</p>\n"

    def test_undefined_macro_warns(self, html, caplog) -> None:
        """Test that an unknown macro writes nothing and warns."""
        with caplog.at_level(logging.WARNING):
            assert html("a {{{nope}}}") == "<p>a </p>\n"
        assert "Undefined macro {{{nope}}}" in caplog.text

    def test_statistic_and_timestamp(self, html) -> None:
        """Test progress cookies and timestamps."""
        assert html("[1/2]") == '<p><code class="statistic">[1/2]</code></p>\n'
        assert html("<2024-01-15 Mon>") == '<p><span class="timestamp">&lt;2024-01-15 Mon&gt;</span></p>\n'
        assert html("[2024-01-15 Mon]") == '<p><span class="timestamp">&lsqb;2024-01-15 Mon&rsqb;</span></p>\n'

    def test_inline_source_and_snippets(self, html) -> None:
        """Test ``src_lang{}`` and ``@@backend:...@@``."""
        assert html("src_python{x}") == (
            '<p><div class="src src-inline src-python">\n'
            '<div class="highlight-inline">\n<pre>\nx\n</pre>\n</div>\n</div></p>\n'
        )
        assert html("a @@html:<b>@@b") == "<p>a <b>b</p>\n"
        assert html("a @@latex:\\x@@b") == "<p>a b</p>\n"

    def test_latex_fragment(self, html) -> None:
        """Test that math is left for client-side rendering."""
        assert html("$x$") == "<p>$x$</p>\n"


@pytest.mark.unit
class TestFootnotesHtml:
    """Tests for footnote references and the footnotes section."""

    def test_reference_and_section(self, html) -> None:
        """Test a numbered reference and its definition."""
        out = html("Text[fn:1]\n\n[fn:1] The note.")
        assert out.startswith(
            '<p>Text<sup class="footnote-reference"><a id="footnote-reference-1" href="#footnote-1">1</a></sup></p>\n'
        )
        assert (
            '<div class="footnotes">\n<hr class="footnotes-separator">\n'
            '<h2 class="footnotes-title">Footnotes</h2>\n<div class="footnote-definitions">\n'
        ) in out
        assert '<sup id="footnote-1"><a href="#footnote-reference-1">1</a></sup>' in out
        assert '<div class="footnote-body">\n<p>The note.</p>\n</div>' in out

    def test_references_are_numbered_by_first_use(self, html) -> None:
        """Test that repeated references reuse their number."""
        out = html("a[fn:b] c[fn:a] d[fn:b]\n\n[fn:a] A\n[fn:b] B")
        assert out.count('href="#footnote-1"') == 2
        assert out.count('href="#footnote-2"') == 1

    def test_adjacent_references_get_separator(self, html) -> None:
        """Test the separator between back-to-back references."""
        out = html("a[fn:1][fn:2]\n\n[fn:1] one\n[fn:2] two")
        assert '</sup><sup class="footnote-separator">, </sup><sup class="footnote-reference">' in out

    def test_inline_definition(self, html) -> None:
        """Test that inline footnotes are collected into the section."""
        out = html("a[fn:n:inline text]")
        assert '<div class="footnote-body">\n<p>inline text</p>\n</div>' in out

    def test_missing_definition_warns(self, html, caplog) -> None:
        """Test that an undefined reference warns and is left out of the section."""
        with caplog.at_level(logging.WARNING):
            out = html("a[fn:zz]")
        assert 'href="#footnote-1"' in out
        assert "footnote-body" not in out
        assert "Missing footnote definition for [fn:zz]" in caplog.text

    def test_footnotes_disabled(self, html) -> None:
        """Test ``f:nil``."""
        out = html("#+OPTIONS: f:nil\na[fn:1]\n\n[fn:1] one")
        assert "footnote" not in out

    def test_custom_section_title(self, html) -> None:
        """Test the footnotes title option."""
        out = html("a[fn:1]\n\n[fn:1] one", HtmlRendererOptions(footnotes_title="Notes"))
        assert '<h2 class="footnotes-title">Notes</h2>' in out
