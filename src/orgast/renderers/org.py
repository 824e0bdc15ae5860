#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/renderers/org.py
"""Org-mode rendering from AST.

This module provides the OrgRenderer class which pretty-prints a parsed
document back to Org syntax. The output is normalized rather than a copy of
the input:

- headline tags are right-aligned at ``tags_column``
- table cells are padded to the column width and alignment, separator rows
  are rebuilt from the widths
- raw block content is dedented and indented by ``block_indent``, and lines
  that would read as headlines or keywords are comma-escaped again
- timestamps are written in canonical zero-padded form

Rendering the output of this renderer a second time gives the same text.

"""

from __future__ import annotations

import re
import textwrap
from typing import Optional

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
from orgast.constants import COMMA_ESCAPED_BLOCK_NAMES, RAW_BLOCK_NAMES
from orgast.options.org import OrgRendererOptions
from orgast.renderers.base import BaseRenderer
from orgast.tables.layout import text_width

COMMA_UNESCAPED_PATTERN = re.compile(r"(^|\n)([ \t]*)(\*|,\*|#\+|,#\+)")

EMPHASIS_BORDERS = {
    "_": ("_", "_"),
    "*": ("*", "*"),
    "/": ("/", "/"),
    "+": ("+", "+"),
    "~": ("~", "~"),
    "=": ("=", "="),
    "_{}": ("_{", "}"),
    "^{}": ("^{", "}"),
}


class OrgRenderer(BaseRenderer):
    """Render AST nodes to pretty-printed Org-mode.

    Parameters
    ----------
    options : OrgRendererOptions or None, default = None
        Org formatting options

    Examples
    --------
    Basic usage:

        >>> doc = OrgParser().parse("* TODO Buy milk :errand:\\n| a | bb |\\n|-\\n| 1 | 2 |\\n")
        >>> print(OrgRenderer(OrgRendererOptions(tags_column=30)).render_to_string(doc))
        * TODO Buy milk       :errand:
        | a | bb |
        |---+----|
        | 1 |  2 |

    Notes
    -----
    Block-level nodes write whole lines prefixed with the current
    indentation. List items raise the indentation to the column after their
    bullet for their children; headline sections are not indented.

    """

    options_class = OrgRendererOptions
    options: OrgRendererOptions

    def __init__(self, options: Optional[OrgRendererOptions] = None):
        """Initialize the Org renderer with options."""
        super().__init__(options)
        self.indent = ""

    def _write_line(self, text: str) -> None:
        self._output.append(self.indent + text + "\n")

    def _render_indented(self, nodes: list[Node], extra: str) -> str:
        saved_indent = self.indent
        self.indent = saved_indent + extra
        try:
            return self.write_nodes_as_string(*nodes)
        finally:
            self.indent = saved_indent

    # ------------------------------------------------------------------
    # Block-level nodes
    # ------------------------------------------------------------------

    def visit_headline(self, node: Headline) -> None:
        """Render a headline line, its planning lines, properties and section."""
        line = "*" * node.level
        if node.status:
            line += " " + node.status
        if node.priority:
            line += f" [#{node.priority}]"
        title = self.write_nodes_as_string(*node.title)
        line += " " + title
        if node.check_status is not None:
            line += (" " if title else "") + f"[{node.check_status.content}]"
        if node.tags:
            tags = ":" + ":".join(node.tags) + ":"
            padding = self.options.tags_column - len(tags) - text_width(line)
            line += (" " * padding if padding > 0 else " ") + tags
        self._output.append(line + "\n")

        children = list(node.children)
        while children and isinstance(children[0], SchedulingEntry):
            children.pop(0).accept(self)
        if node.properties is not None:
            node.properties.accept(self)
        self.write_nodes(*children)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a paragraph; an empty paragraph is a blank line."""
        if not node.children:
            self._output.append("\n")
            return
        content = self.write_nodes_as_string(*node.children)
        if content.endswith("\n"):
            content = content[:-1]
        for line in content.split("\n"):
            self._output.append((self.indent + line if line else "") + "\n")

    def visit_horizontal_rule(self, node: HorizontalRule) -> None:
        """Render a horizontal rule."""
        self._write_line("-----")

    def visit_list(self, node: List) -> None:
        """Render a list item by item."""
        self.write_nodes(*node.items)

    def _write_item(self, head: str, content: str, extra: str) -> None:
        content = content.removeprefix(self.indent + extra)
        if not content:
            self._write_line(head)
        elif content.startswith("\n"):
            self._output.append(self.indent + head + content)
        else:
            self._output.append(self.indent + head + " " + content)

    def visit_list_item(self, node: ListItem) -> None:
        """Render a bullet with its counter and checkbox, then the item body."""
        head = node.bullet
        if node.value:
            head += f" [@{node.value}]"
        if node.status:
            head += f" [{node.status}]"
        extra = " " * (len(node.bullet) + 1)
        self._write_item(head, self._render_indented(node.children, extra), extra)

    def visit_descriptive_list_item(self, node: DescriptiveListItem) -> None:
        """Render ``bullet term :: details``; details align after the separator."""
        head = node.bullet
        if node.status:
            head += f" [{node.status}]"
        if node.term:
            head += " " + self.write_nodes_as_string(*node.term) + " ::"
        extra = " " * (len(head) + 1)
        self._write_item(head, self._render_indented(node.details, extra), extra)

    def visit_table(self, node: Table) -> None:
        """Render a table with padded cells and rebuilt separators."""
        rendered: list[Optional[list[str]]] = []
        widths = [max(1, info.width) for info in node.column_infos]
        for row in node.rows:
            if row.is_separator:
                rendered.append(None)
                continue
            cells = [self.write_nodes_as_string(*column.children) for column in row.columns]
            for i, cell in enumerate(cells):
                if i < len(widths):
                    widths[i] = max(widths[i], text_width(cell))
            rendered.append(cells)

        for row, cells in zip(node.rows, rendered):
            if cells is None:
                self._write_line("|" + "+".join("-" * (width + 2) for width in widths) + "|")
                continue
            parts = [
                self._pad_cell(cell, width, column) for cell, width, column in zip(cells, widths, row.columns)
            ]
            self._write_line("| " + " | ".join(parts) + " |")

    @staticmethod
    def _pad_cell(content: str, width: int, column: TableColumn) -> str:
        if not content:
            content = " "
        padding = max(width - text_width(content), 0)
        align = column.info.align if column.info is not None else ""
        if align == "center":
            return " " * (padding % 2) + " " * (padding // 2) + content + " " * (padding // 2)
        if align == "right":
            return " " * padding + content
        return content + " " * padding

    def visit_table_row(self, node: TableRow) -> None:
        """Render a single row without column layout (cells separated by ``|``)."""
        if node.is_separator:
            self._write_line("|-")
            return
        cells = [self.write_nodes_as_string(*column.children) or " " for column in node.columns]
        self._write_line("| " + " | ".join(cells) + " |")

    def visit_table_column(self, node: TableColumn) -> None:
        """Render the content of a single cell."""
        self.write_nodes(*node.children)

    def visit_block(self, node: Block) -> None:
        """Render a ``#+BEGIN_``/``#+END_`` block and its attached result."""
        begin = "#+BEGIN_" + node.name
        if node.parameters:
            begin += " " + " ".join(node.parameters)
        self._write_line(begin)
        if node.name in RAW_BLOCK_NAMES:
            saved_indent = self.indent
            self.indent = ""
            try:
                content = self.write_nodes_as_string(*node.children)
            finally:
                self.indent = saved_indent
            content = textwrap.indent(textwrap.dedent(content), self.indent + self.options.block_indent)
            if node.name in COMMA_ESCAPED_BLOCK_NAMES:
                content = COMMA_UNESCAPED_PATTERN.sub(r"\1\2,\3", content)
            if content and not content.endswith("\n"):
                content += "\n"
            self._output.append(content)
        else:
            self.write_nodes(*node.children)
        self._write_line("#+END_" + node.name)
        if node.result is not None:
            self._output.append("\n")
            node.result.accept(self)

    def visit_result(self, node: Result) -> None:
        """Render ``#+RESULTS:`` followed by the result node."""
        self._write_line("#+RESULTS:")
        node.node.accept(self)

    def visit_example(self, node: Example) -> None:
        """Render ``: text`` lines."""
        for child in node.children:
            content = self.write_nodes_as_string(child)
            self._write_line(": " + content if content else ":")

    def visit_drawer(self, node: Drawer) -> None:
        """Render a drawer and its content."""
        self._write_line(f":{node.name}:")
        self.write_nodes(*node.children)
        self._write_line(":END:")

    def visit_property_drawer(self, node: PropertyDrawer) -> None:
        """Render a ``:PROPERTIES:`` drawer."""
        self._write_line(":PROPERTIES:")
        for key, value in node.properties:
            self._write_line(f":{key}: {value}" if value else f":{key}:")
        self._write_line(":END:")

    def visit_keyword(self, node: Keyword) -> None:
        """Render a ``#+KEY: value`` line."""
        self._write_line(f"#+{node.key}: {node.value}" if node.value else f"#+{node.key}:")

    def visit_comment(self, node: Comment) -> None:
        """Render a ``# comment`` line."""
        self._write_line("# " + node.content)

    def visit_include(self, node: Include) -> None:
        """Render the ``#+INCLUDE:`` keyword; the file is not read."""
        node.keyword.accept(self)

    def visit_footnote_definition(self, node: FootnoteDefinition) -> None:
        """Render ``[fn:name] content``."""
        content = self.write_nodes_as_string(*node.children).removeprefix(self.indent)
        label = f"[fn:{node.name}]"
        if not content:
            self._write_line(label)
        elif content[0].isspace():
            self._output.append(self.indent + label + content)
        else:
            self._output.append(self.indent + label + " " + content)

    def visit_scheduling_entry(self, node: SchedulingEntry) -> None:
        """Render a planning line."""
        self._write_line(" ".join(f"{entry.kind.value}: {entry.date}" for entry in node.entries))

    def visit_node_with_name(self, node: NodeWithName) -> None:
        """Render ``#+NAME:`` followed by the named node."""
        self._write_line(f"#+NAME: {node.name}")
        node.node.accept(self)

    def visit_node_with_meta(self, node: NodeWithMeta) -> None:
        """Render the affiliated keywords, then the decorated node."""
        meta = node.meta
        for caption in meta.caption:
            self._write_line("#+CAPTION: " + self.write_nodes_as_string(*caption))
        for attributes in meta.html_attributes:
            self._write_line("#+ATTR_HTML: " + " ".join(attributes))
        for attributes in meta.latex_attributes:
            self._write_line("#+ATTR_LATEX: " + " ".join(attributes))
        if meta.env:
            self._write_line("#+ENV: " + meta.env)
        node.node.accept(self)

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render text as is."""
        self._output.append(node.content)

    def visit_line_break(self, node: LineBreak) -> None:
        """Render the newlines."""
        self._output.append("\n" * node.count)

    def visit_explicit_line_break(self, node: ExplicitLineBreak) -> None:
        """Render ``\\\\`` and the newline it ends."""
        self._output.append("\\\\\n")

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render emphasis between its markers."""
        opening, closing = EMPHASIS_BORDERS[node.kind]
        self._output.append(opening + self.write_nodes_as_string(*node.content) + closing)

    def visit_latex_fragment(self, node: LatexFragment) -> None:
        """Render a LaTeX fragment between its delimiters."""
        self._output.append(node.opening_pair + self.write_nodes_as_string(*node.content) + node.closing_pair)

    def visit_regular_link(self, node: RegularLink) -> None:
        """Render a bracket link, or the bare URL of an auto-link."""
        if node.auto_link:
            self._output.append(node.url)
        elif node.description is None:
            self._output.append(f"[[{node.url}]]")
        else:
            self._output.append(f"[[{node.url}][{self.write_nodes_as_string(*node.description)}]]")

    def visit_footnote_link(self, node: FootnoteLink) -> None:
        """Render ``[fn:name]`` or ``[fn:name:inline definition]``."""
        text = "[fn:" + node.name
        if node.definition is not None:
            paragraph = node.definition.children[0] if node.definition.children else None
            inline = paragraph.get_children() if paragraph is not None else []
            text += ":" + self.write_nodes_as_string(*inline)
        self._output.append(text + "]")

    def visit_macro(self, node: Macro) -> None:
        """Render a macro call."""
        call = node.name
        if node.parameters:
            call += "(" + ",".join(node.parameters) + ")"
        self._output.append("{{{" + call + "}}}")

    def visit_statistic_token(self, node: StatisticToken) -> None:
        """Render a progress cookie."""
        self._output.append(f"[{node.content}]")

    def visit_timestamp(self, node: Timestamp) -> None:
        """Render a timestamp in canonical form."""
        self._output.append(str(node.time))

    def visit_inline_block(self, node: InlineBlock) -> None:
        """Render ``src_lang[args]{code}`` or ``@@backend:value@@``."""
        content = self.write_nodes_as_string(*node.children)
        if node.name == "src":
            args = f"[{' '.join(node.parameters[1:])}]" if len(node.parameters) > 1 else ""
            self._output.append(f"src_{node.parameters[0]}{args}{{{content}}}")
        else:
            self._output.append(f"@@{node.parameters[0]}:{content}@@")
