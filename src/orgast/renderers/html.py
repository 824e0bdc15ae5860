#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/renderers/html.py
"""HTML rendering from AST.

This module provides the HtmlRenderer class which converts a parsed Org
document into an HTML fragment. The export options of the document
(``#+OPTIONS:`` merged over the default settings) control what is written:

======  ==============================================================
``toc``      table of contents (``nil``, ``t`` or a maximum level)
``<``        timestamps and planning lines
``e``        entity replacement (``\\alpha``, ``--``, ``...``)
``f``        footnote references and the footnotes section
``pri``      headline priorities
``todo``     headline TODO keywords
``tags``     headline tags
``title``    the ``#+TITLE:`` heading
``ealb``     drop line breaks between two East Asian characters
======  ==============================================================

Source blocks go through the ``highlight_code_block`` option; see
:mod:`orgast.utils.highlight`.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Optional
from urllib.parse import quote_plus

from orgast.ast.nodes import (
    Block,
    Comment,
    DescriptiveListItem,
    Drawer,
    Emphasis,
    Example,
    ExplicitLineBreak,
    FootnoteDefinition,
    FootnoteLink,
    Headline,
    HorizontalRule,
    Include,
    InlineBlock,
    Keyword,
    LatexFragment,
    LineBreak,
    List,
    ListItem,
    Macro,
    Node,
    NodeWithMeta,
    NodeWithName,
    Paragraph,
    PropertyDrawer,
    RegularLink,
    Result,
    SchedulingEntry,
    StatisticToken,
    Table,
    TableColumn,
    TableRow,
    Text,
    Timestamp,
)
from orgast.ast.outline import Section
from orgast.constants import RAW_BLOCK_NAMES
from orgast.dates import OrgDate, TimestampType
from orgast.document import Document
from orgast.options.html import HtmlRendererOptions
from orgast.renderers.base import BaseRenderer
from orgast.renderers.org import OrgRenderer
from orgast.utils.highlight import escape_highlighter
from orgast.utils.html_utils import escape_html, replace_entities, strip_anchor_tags, with_html_attributes

logger = logging.getLogger(__name__)

EMPHASIS_TAGS = {
    "/": ("<em>", "</em>"),
    "*": ("<strong>", "</strong>"),
    "+": ("<del>", "</del>"),
    "~": ("<code>", "</code>"),
    "=": ('<code class="verbatim">', "</code>"),
    "_": ('<span style="text-decoration: underline;">', "</span>"),
    "_{}": ("<sub>", "</sub>"),
    "^{}": ("<sup>", "</sup>"),
}

LIST_TAGS = {
    "unordered": ("<ul>", "</ul>"),
    "ordered": ("<ol>", "</ol>"),
    "descriptive": ("<dl>", "</dl>"),
}

LIST_ITEM_STATUSES = {
    " ": "unchecked",
    "-": "indeterminate",
    "X": "checked",
}

TOC_HEADLINES_PATTERN = re.compile(r"headlines\s+(\d+)")

_TIMESTAMP_BRACKETS = {
    TimestampType.ACTIVE: ("&lt;", "&gt;"),
    TimestampType.INACTIVE: ("&lsqb;", "&rsqb;"),
    TimestampType.NO_BRACKET: ("", ""),
}


@dataclass
class _Footnotes:
    """Footnote references in order of first use."""

    mapping: dict[str, int] = field(default_factory=dict)
    definitions: list[Optional[FootnoteDefinition]] = field(default_factory=list)
    names: list[str] = field(default_factory=list)

    def add(self, link: FootnoteLink, known: Optional[FootnoteDefinition]) -> int:
        """Register a reference and return its 0-based number."""
        if link.name and link.name in self.mapping:
            return self.mapping[link.name]
        self.definitions.append(link.definition or known)
        self.names.append(link.name)
        index = len(self.definitions) - 1
        if link.name:
            self.mapping[link.name] = index
        return index

    def update_definition(self, definition: FootnoteDefinition) -> None:
        """Replace the definition of an already referenced footnote."""
        index = self.mapping.get(definition.name)
        if index is not None:
            self.definitions[index] = definition


class HtmlRenderer(BaseRenderer):
    """Render a parsed Org document as an HTML fragment.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML rendering options

    Examples
    --------
    Basic usage:

        >>> doc = OrgParser().parse("#+OPTIONS: toc:nil\\n* Hello /world/")
        >>> print(HtmlRenderer().render_to_string(doc))
        <div id="outline-container-headline-1" class="outline-1">
        <h1 id="headline-1">
        Hello <em>world</em>
        </h1>
        </div>

    With Pygments highlighting:

        >>> from orgast.utils.highlight import pygments_highlighter
        >>> renderer = HtmlRenderer(HtmlRendererOptions(highlight_code_block=pygments_highlighter))

    """

    options_class = HtmlRendererOptions
    options: HtmlRendererOptions

    def __init__(self, options: Optional[HtmlRendererOptions] = None):
        """Initialize the HTML renderer with options."""
        super().__init__(options)
        self.doc: Document = Document()
        self.highlight = self.options.highlight_code_block or escape_highlighter
        self._escape = True
        self._footnotes = _Footnotes()
        self._last_reference: Optional[tuple[int, int]] = None

    @property
    def log(self) -> logging.Logger:
        """Warning sink of the document being rendered."""
        return self.doc.log

    def _option_enabled(self, key: str) -> bool:
        return self.doc.get_option(key) != "nil"

    def _heading_level(self, level: int) -> int:
        return min(6, level + self.options.top_level_heading_offset)

    # ------------------------------------------------------------------
    # Document hooks
    # ------------------------------------------------------------------

    def before(self, doc: Document) -> None:
        """Write the title heading and the table of contents."""
        self._footnotes = _Footnotes()
        self._last_reference = None
        title = doc.get("TITLE")
        if title and self._option_enabled("title"):
            title_doc = doc.parse_sub(title)
            if title_doc.error is None and title_doc.nodes is not None:
                title = self._write_inline_document(title_doc.nodes)
            else:
                title = escape_html(title)
            self.write(f'<h1 class="title">{title}</h1>\n')
        toc = doc.get_option("toc")
        if toc != "nil":
            self.write_outline(int(toc) if toc.isdigit() else 0)

    def after(self, doc: Document) -> None:
        """Write the footnotes section."""
        self.write_footnotes()

    def write_outline(self, max_level: int) -> None:
        """Write a ``<nav>`` table of contents; ``max_level`` 0 means all levels."""
        sections = self.doc.outline.children
        if not sections:
            return
        self.write("<nav>\n<ul>\n")
        for section in sections:
            self._write_section(section, max_level)
        self.write("</ul>\n</nav>\n")

    def _write_section(self, section: Section, max_level: int) -> None:
        headline = section.headline
        if headline is None or (max_level and headline.level > max_level) or headline.is_excluded(self.doc):
            return
        title = strip_anchor_tags(self.write_nodes_as_string(*headline.title))
        self.write(f'<li><a href="#{escape_html(headline.id)}">{title}</a>\n')
        children = [child for child in section.children if not max_level or child.level <= max_level]
        if children:
            self.write("<ul>\n")
            for child in children:
                self._write_section(child, max_level)
            self.write("</ul>\n")
        self.write("</li>\n")

    def write_footnotes(self) -> None:
        """Write the collected footnote definitions."""
        if not self._option_enabled("f") or not self._footnotes.definitions:
            return
        self.write('<div class="footnotes">\n<hr class="footnotes-separator">\n')
        if self.options.footnotes_title:
            self.write(f'<h2 class="footnotes-title">{escape_html(self.options.footnotes_title)}</h2>\n')
        self.write('<div class="footnote-definitions">\n')
        for index, definition in enumerate(self._footnotes.definitions):
            number = index + 1
            if definition is None:
                self.log.warning("Missing footnote definition for [fn:%s] (#%d)", self._footnotes.names[index], number)
                continue
            self.write('<div class="footnote-definition">\n')
            self.write(f'<sup id="footnote-{number}"><a href="#footnote-reference-{number}">{number}</a></sup>\n')
            self.write('<div class="footnote-body">\n')
            self.write_nodes(*definition.children)
            self.write("</div>\n</div>\n")
        self.write("</div>\n</div>\n")

    def _write_inline_document(self, nodes: list[Node]) -> str:
        """Render a sub-document; a lone paragraph is unwrapped to its inline content."""
        if len(nodes) == 1 and isinstance(nodes[0], Paragraph):
            return self.write_nodes_as_string(*nodes[0].children)
        return self.write_nodes_as_string(*nodes)

    # ------------------------------------------------------------------
    # Block-level nodes
    # ------------------------------------------------------------------

    def visit_headline(self, node: Headline) -> None:
        """Render a headline and its section; excluded headlines are skipped."""
        if node.is_excluded(self.doc):
            return
        level = self._heading_level(node.level)
        anchor = escape_html(node.id)
        self.write(f'<div id="outline-container-{anchor}" class="outline-{level}">\n')
        self.write(f'<h{level} id="{anchor}">\n')
        if self._option_enabled("todo") and node.status:
            self.write(f'<span class="todo">{escape_html(node.status)}</span>\n')
        if self._option_enabled("pri") and node.priority:
            self.write(f'<span class="priority">[{node.priority}]</span>\n')
        self.write_nodes(*node.title)
        if self._option_enabled("tags") and node.tags:
            tags = "&#xa0;".join(f"<span>{escape_html(tag)}</span>" for tag in node.tags)
            self.write(f'&#xa0;&#xa0;&#xa0;<span class="tags">{tags}</span>')
        self.write(f"\n</h{level}>\n")
        content = self.write_nodes_as_string(*node.children)
        if content:
            self.write(f'<div id="outline-text-{anchor}" class="outline-text-{level}">\n{content}</div>\n')
        self.write("</div>\n")

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a paragraph; blank-line paragraphs produce nothing."""
        if not node.children:
            return
        self.write("<p>")
        self.write_nodes(*node.children)
        self.write("</p>\n")

    def visit_horizontal_rule(self, node: HorizontalRule) -> None:
        """Render a horizontal rule."""
        self.write("<hr>\n")

    def visit_list(self, node: List) -> None:
        """Render ``<ul>``, ``<ol>`` or ``<dl>``."""
        opening, closing = LIST_TAGS[node.kind]
        self.write(opening + "\n")
        self.write_nodes(*node.items)
        self.write(closing + "\n")

    def visit_list_item(self, node: ListItem) -> None:
        """Render an ``<li>`` with its counter value and checkbox class."""
        attributes = ""
        if node.value:
            attributes += f' value="{node.value}"'
        if node.status:
            attributes += f' class="{LIST_ITEM_STATUSES[node.status]}"'
        self.write(f"<li{attributes}>")
        self._write_item_content(node.children)
        self.write("</li>\n")

    def visit_descriptive_list_item(self, node: DescriptiveListItem) -> None:
        """Render a ``<dt>``/``<dd>`` pair."""
        if node.status:
            self.write(f'<dt class="{LIST_ITEM_STATUSES[node.status]}">\n')
        else:
            self.write("<dt>\n")
        if node.term:
            self.write_nodes(*node.term)
        else:
            self.write("?")
        self.write("\n</dt>\n<dd>")
        self._write_item_content(node.details)
        self.write("</dd>\n")

    def _write_item_content(self, children: list[Node]) -> None:
        # Items holding only paragraphs are written inline, without <p>.
        if all(isinstance(child, Paragraph) for child in children):
            for i, child in enumerate(children):
                out = self.write_nodes_as_string(*child.get_children())
                if i != 0 and out:
                    self.write("\n")
                self.write(out)
        else:
            self.write("\n")
            self.write_nodes(*children)

    def visit_table(self, node: Table) -> None:
        """Render a table; a separator after the first rows makes them the header."""
        rows, separators = node.rows, node.separator_indices
        last = len(rows) - 1
        in_head = (
            bool(separators)
            and separators[0] != last
            and (separators[0] != 0 or (len(separators) > 1 and separators[-1] != last))
        )
        self.write("<table>\n")
        self.write("<thead>\n" if in_head else "<tbody>\n")
        for i, row in enumerate(rows):
            if row.is_separator:
                if i != 0 and i != last:
                    self.write("</thead>\n<tbody>\n" if in_head else "</tbody>\n<tbody>\n")
                    in_head = False
                continue
            if row.is_special:
                continue
            self._write_table_columns(row.columns, "th" if in_head else "td")
        self.write("</tbody>\n</table>\n")

    def _write_table_columns(self, columns: list[TableColumn], tag: str) -> None:
        self.write("<tr>\n")
        for column in columns:
            align = column.info.align if column.info is not None else ""
            self.write(f'<{tag} class="align-{align}">' if align else f"<{tag}>")
            self.write_nodes(*column.children)
            self.write(f"</{tag}>\n")
        self.write("</tr>\n")

    def visit_table_row(self, node: TableRow) -> None:
        """Render a single row as data cells."""
        if not node.is_separator:
            self._write_table_columns(node.columns, "td")

    def visit_table_column(self, node: TableColumn) -> None:
        """Render the content of a single cell."""
        self.write_nodes(*node.children)

    def _block_content(self, name: str, children: list[Node]) -> str:
        if name not in RAW_BLOCK_NAMES:
            return self.write_nodes_as_string(*children)
        self._escape = False
        try:
            return self.write_nodes_as_string(*children).rstrip()
        finally:
            self._escape = True

    def visit_block(self, node: Block) -> None:
        """Render a block according to its name."""
        content, params = self._block_content(node.name, node.children), node.parameter_map()
        exports = params.get(":exports", "")
        if node.name == "SRC":
            if exports not in ("results", "none"):
                lang = node.language.lower() or "text"
                highlighted = self.highlight(content, lang, False, params)
                self.write(f'<div class="src src-{escape_html(lang)}">\n{highlighted}\n</div>\n')
        elif node.name == "EXAMPLE":
            self.write(f'<pre class="example">\n{escape_html(content)}\n</pre>\n')
        elif node.name == "EXPORT":
            if node.language.lower() == "html":
                self.write(content + "\n")
        elif node.name == "QUOTE":
            self.write(f"<blockquote>\n{escape_html(content)}\n</blockquote>\n")
        elif node.name == "CENTER":
            self.write(
                '<div class="center-block" style="text-align: center; margin-left: auto; margin-right: auto;">\n'
            )
            self.write(content + "</div>\n")
        else:
            body = escape_html(content) + "\n" if node.name in RAW_BLOCK_NAMES else content
            self.write(f'<div class="{escape_html(node.name.lower())}-block">\n{body}</div>\n')

        if node.result is not None and exports not in ("code", "none"):
            node.result.accept(self)

    def visit_result(self, node: Result) -> None:
        """Render the result node."""
        node.node.accept(self)

    def visit_example(self, node: Example) -> None:
        """Render ``: text`` lines as a preformatted example."""
        self.write('<pre class="example">\n')
        for child in node.children:
            child.accept(self)
            self.write("\n")
        self.write("</pre>\n")

    def visit_drawer(self, node: Drawer) -> None:
        """Render the drawer content without the drawer itself."""
        self.write_nodes(*node.children)

    def visit_property_drawer(self, node: PropertyDrawer) -> None:
        """Property drawers are not exported."""

    def visit_keyword(self, node: Keyword) -> None:
        """Render ``#+HTML:`` lines verbatim and ``#+TOC: headlines N`` as an outline."""
        if node.key == "HTML":
            self.write(node.value + "\n")
        elif node.key == "TOC":
            m = TOC_HEADLINES_PATTERN.search(node.value)
            if m is not None:
                self.write_outline(int(m.group(1)))

    def visit_comment(self, node: Comment) -> None:
        """Comments are not exported."""

    def visit_include(self, node: Include) -> None:
        """Read the included file and render it."""
        node.resolve().accept(self)

    def visit_footnote_definition(self, node: FootnoteDefinition) -> None:
        """Record the definition; it is written in the footnotes section."""
        self._footnotes.update_definition(node)

    def visit_scheduling_entry(self, node: SchedulingEntry) -> None:
        """Render planning keywords and dates when timestamps are exported."""
        if not self._option_enabled("<"):
            return
        for entry in node.entries:
            self.write(f'<span class="tags">{entry.kind.value}</span>{self._timestamp_span(entry.date)}')
        self.write("\n")

    def visit_node_with_name(self, node: NodeWithName) -> None:
        """Render the named node."""
        node.node.accept(self)

    def visit_node_with_meta(self, node: NodeWithMeta) -> None:
        """Render the node with its ``ATTR_HTML`` attributes and caption."""
        inner = node.node
        if isinstance(inner, Paragraph) and len(inner.children) == 1 and _is_media_link(inner.children[0]):
            out = self.write_nodes_as_string(inner.children[0])
        else:
            out = self.write_nodes_as_string(inner)
        for attributes in node.meta.html_attributes:
            out = with_html_attributes(out, attributes, self.log) + "\n"
        if node.meta.caption:
            caption = " ".join(self.write_nodes_as_string(*nodes) for nodes in node.meta.caption)
            out = f"<figure>\n{out}<figcaption>\n{caption}\n</figcaption>\n</figure>\n"
        self.write(out)

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render escaped text, replacing entities unless ``e:nil``."""
        if not self._escape:
            self.write(node.content)
        elif node.is_raw or not self._option_enabled("e"):
            self.write(escape_html(node.content))
        else:
            self.write(escape_html(replace_entities(node.content)))

    def visit_line_break(self, node: LineBreak) -> None:
        """Render newlines; dropped between wide characters under ``ealb``."""
        if not self._option_enabled("ealb") or not node.between_multibyte_characters:
            self.write("\n" * node.count)

    def visit_explicit_line_break(self, node: ExplicitLineBreak) -> None:
        """Render ``<br>``."""
        self.write("<br>\n")

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render emphasis with the matching tag."""
        opening, closing = EMPHASIS_TAGS[node.kind]
        self.write(opening)
        self.write_nodes(*node.content)
        self.write(closing)

    def visit_latex_fragment(self, node: LatexFragment) -> None:
        """Render a LaTeX fragment as text for client-side math rendering."""
        self.write(node.opening_pair)
        self.write_nodes(*node.content)
        self.write(node.closing_pair)

    def _link_target(self, node: RegularLink) -> str:
        url = node.url
        relative = node.protocol in ("file", "")
        if node.protocol == "file":
            url = url[len("file:") :]
        if relative and url.endswith(".org"):
            url = url[: -len(".org")] + ".html"
        template = self.doc.links.get(node.protocol, "")
        if template:
            tag = node.url.removeprefix(node.protocol + ":")
            if "%s" in template or "%h" in template:
                url = template.replace("%s", tag).replace("%h", quote_plus(tag))
            else:
                url = template + tag
        elif self.doc.links.get(node.url):
            url = self.doc.links[node.url].replace("%s", "").replace("%h", "")
        return escape_html(url)

    def visit_regular_link(self, node: RegularLink) -> None:
        """Render an anchor, image or video depending on the link kind."""
        url = self._link_target(node)
        kind = node.kind
        if kind in ("image", "video") and node.description is not None:
            description = escape_html(_media_description(node.description))
            if kind == "image":
                self.write(f'<a href="{url}"><img src="{description}" alt="{description}" /></a>')
            else:
                self.write(f'<a href="{url}"><video src="{description}" title="{description}"></video></a>')
        elif kind == "image":
            self.write(f'<img src="{url}" alt="{url}" title="{url}" />')
        elif kind == "video":
            self.write(f'<video src="{url}" title="{url}">{url}</video>')
        else:
            description = url if node.description is None else self.write_nodes_as_string(*node.description)
            self.write(f'<a href="{url}">{description}</a>')

    def visit_footnote_link(self, node: FootnoteLink) -> None:
        """Render a numbered footnote reference."""
        if not self._option_enabled("f"):
            return
        if self._last_reference == (id(self._output), len(self._output)):
            self.write(f'<sup class="footnote-separator">{escape_html(self.options.footnote_separator)}</sup>')
        number = self._footnotes.add(node, self.doc.footnotes.get(node.name)) + 1
        self.write(
            f'<sup class="footnote-reference"><a id="footnote-reference-{number}" '
            f'href="#footnote-{number}">{number}</a></sup>'
        )
        self._last_reference = (id(self._output), len(self._output))

    def visit_macro(self, node: Macro) -> None:
        """Expand the macro template and render it; unknown macros render nothing."""
        template = self.doc.macros.get(node.name)
        if not template:
            self.log.warning("Undefined macro {{{%s}}}", node.name)
            return
        for i, parameter in enumerate(node.parameters):
            template = template.replace(f"${i + 1}", parameter)
        expansion = self.doc.parse_sub(template)
        if expansion.error is not None or expansion.nodes is None:
            self.log.warning("Bad macro %s -> %s: %s", node.name, template, expansion.error)
            return
        self.write(self._write_inline_document(expansion.nodes))

    def visit_statistic_token(self, node: StatisticToken) -> None:
        """Render a progress cookie."""
        self.write(f'<code class="statistic">[{escape_html(node.content)}]</code>')

    def _timestamp_span(self, date: OrgDate) -> str:
        opening, closing = _TIMESTAMP_BRACKETS[date.timestamp_type]
        bare = replace(date, timestamp_type=TimestampType.NO_BRACKET)
        return f'<span class="timestamp">{opening}{bare}{closing}</span>'

    def visit_timestamp(self, node: Timestamp) -> None:
        """Render a timestamp unless ``<:nil``."""
        if self._option_enabled("<"):
            self.write(self._timestamp_span(node.time))

    def visit_inline_block(self, node: InlineBlock) -> None:
        """Render an inline source block, or an ``@@html:...@@`` snippet verbatim."""
        content = self._block_content(node.name.upper(), node.children)
        if node.name == "src":
            lang = node.parameters[0].lower()
            highlighted = self.highlight(content, lang, True, {})
            self.write(f'<div class="src src-inline src-{escape_html(lang)}">\n{highlighted}\n</div>')
        elif node.parameters and node.parameters[0].lower() == "html":
            self.write(content)


def _is_media_link(node: Node) -> bool:
    return isinstance(node, RegularLink) and node.kind in ("image", "video")


def _media_description(description: list[Node]) -> str:
    if len(description) == 1 and isinstance(description[0], RegularLink):
        return description[0].url.removeprefix("file:")
    return OrgRenderer().write_nodes_as_string(*description).removeprefix("file:")
