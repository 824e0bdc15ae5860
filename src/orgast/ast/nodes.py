#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/ast/nodes.py
"""AST node classes for Org documents.

The node set is closed: :class:`NodeType` enumerates every variant and
:class:`orgast.ast.visitors.NodeVisitor` declares one abstract ``visit_*``
method per variant, so a renderer that forgets a variant cannot be
instantiated.

Every node carries a start position (``pos``) and exposes an ``end``
position. Nodes that know their extent store it in ``end_pos``; containers
additionally take the end of their last child into account, which keeps
``end >= end of last child`` true for every container and makes an empty
container end at its start.

Node Hierarchy
--------------
Block-level nodes:
    - Headline, Paragraph, HorizontalRule, Keyword, Comment, Include
    - List, ListItem, DescriptiveListItem
    - Table, TableRow, TableColumn
    - Block, Result, Example, Drawer, PropertyDrawer
    - FootnoteDefinition, SchedulingEntry, NodeWithName, NodeWithMeta

Inline nodes:
    - Text, LineBreak, ExplicitLineBreak, Emphasis, LatexFragment
    - RegularLink, FootnoteLink, Macro, StatisticToken, Timestamp, InlineBlock

"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional

from orgast.ast.position import Pos
from orgast.dates import DateType, OrgDate
from orgast.tables.layout import ColumnInfo, compute_column_infos

if TYPE_CHECKING:
    from orgast.document import Document
    from orgast.parsers.inline import InlineParser
    from orgast.tables.formulas import Formulas, RowColRef


class NodeType(str, Enum):
    """Variant tag of every node class."""

    HEADLINE = "headline"
    PARAGRAPH = "paragraph"
    HORIZONTAL_RULE = "horizontal-rule"
    LIST = "list"
    LIST_ITEM = "list-item"
    DESCRIPTIVE_LIST_ITEM = "descriptive-list-item"
    TABLE = "table"
    TABLE_ROW = "table-row"
    TABLE_COLUMN = "table-column"
    BLOCK = "block"
    RESULT = "result"
    EXAMPLE = "example"
    DRAWER = "drawer"
    PROPERTY_DRAWER = "property-drawer"
    KEYWORD = "keyword"
    COMMENT = "comment"
    FOOTNOTE_DEFINITION = "footnote-definition"
    FOOTNOTE_LINK = "footnote-link"
    REGULAR_LINK = "regular-link"
    MACRO = "macro"
    EMPHASIS = "emphasis"
    TEXT = "text"
    LINE_BREAK = "line-break"
    EXPLICIT_LINE_BREAK = "explicit-line-break"
    STATISTIC_TOKEN = "statistic-token"
    LATEX_FRAGMENT = "latex-fragment"
    TIMESTAMP = "timestamp"
    SCHEDULING_ENTRY = "scheduling-entry"
    NODE_WITH_NAME = "node-with-name"
    NODE_WITH_META = "node-with-meta"
    INCLUDE = "include"
    INLINE_BLOCK = "inline-block"


IMAGE_EXTENSION_PATTERN = re.compile(r"^[.](png|gif|jpe?g|svg|tiff?)$", re.IGNORECASE)
VIDEO_EXTENSION_PATTERN = re.compile(r"^[.](webm|mp4)$", re.IGNORECASE)


class Node(ABC):
    """Base class for all AST nodes.

    Parameters
    ----------
    pos : Pos
        Start position of the node in the source
    end_pos : Pos or None
        Stored end position, when the node knows its own extent

    """

    node_type: ClassVar[NodeType]
    pos: Pos
    end_pos: Optional[Pos]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Dispatch to the visitor method for this variant.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """

    def get_children(self) -> list[Node]:
        """Return child nodes in source order (empty for leaves)."""
        return []

    @property
    def end(self) -> Pos:
        """End position, never before the start or the last child's end."""
        end = self.pos
        if self.end_pos is not None and self.end_pos > end:
            end = self.end_pos
        children = self.get_children()
        if children:
            child_end = children[-1].end
            if child_end > end:
                end = child_end
        return end


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class PropertyDrawer(Node):
    """A ``:PROPERTIES:`` drawer flattened into key/value pairs.

    Parameters
    ----------
    pos : Pos
        Position of the ``:PROPERTIES:`` line
    properties : list of tuple[str, str]
        Ordered ``(key, value)`` pairs; keys are upper-cased
    end_pos : Pos, optional
        End of the ``:END:`` line

    """

    node_type: ClassVar[NodeType] = NodeType.PROPERTY_DRAWER

    pos: Pos
    properties: list[tuple[str, str]] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get(self, key: str) -> Optional[str]:
        """Return the value of the first property named ``key``."""
        for k, v in self.properties:
            if k == key:
                return v
        return None

    def has(self, key: str) -> bool:
        """Whether a property named ``key`` exists."""
        return any(k == key for k, _ in self.properties)

    def keys(self) -> list[str]:
        """Return the property names in source order."""
        return [k for k, _ in self.properties]

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_property_drawer``."""
        return visitor.visit_property_drawer(self)


@dataclass
class Headline(Node):
    """An outline heading and the section content below it.

    Parameters
    ----------
    pos : Pos
        Position of the headline line
    level : int
        Number of leading stars
    index : int
        1-based position of the headline in document order
    status : str
        TODO keyword, empty when absent
    priority : str
        Priority letter, empty when absent
    check_status : StatisticToken, optional
        Trailing ``[n/m]`` or ``[n%]`` progress cookie
    tags : list of str
        Tags from the trailing ``:tag1:tag2:`` cluster
    title : list of Node
        Inline-parsed title
    children : list of Node
        Section content, including nested headlines
    properties : PropertyDrawer, optional
        The promoted property drawer
    scheduled, deadline, closed : OrgDate, optional
        Planning dates from lines below the headline
    timestamp : OrgDate, optional
        First timestamp found in the section
    hash : str
        Content hash of the ancestor chain plus this headline's title
    end_pos : Pos, optional
        Stored end of the section

    """

    node_type: ClassVar[NodeType] = NodeType.HEADLINE

    pos: Pos
    level: int
    index: int = 0
    status: str = ""
    priority: str = ""
    check_status: Optional[StatisticToken] = None
    tags: list[str] = field(default_factory=list)
    title: list[Node] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    properties: Optional[PropertyDrawer] = None
    scheduled: Optional[OrgDate] = None
    deadline: Optional[OrgDate] = None
    closed: Optional[OrgDate] = None
    timestamp: Optional[OrgDate] = None
    hash: str = ""
    end_pos: Optional[Pos] = None

    def __post_init__(self) -> None:
        """Validate the headline level."""
        if self.level < 1:
            raise ValueError(f"Headline level must be at least 1, got {self.level}")

    @property
    def id(self) -> str:
        """Anchor id: the ``CUSTOM_ID`` property or ``headline-<index>``."""
        if self.properties is not None:
            custom_id = self.properties.get("CUSTOM_ID")
            if custom_id:
                return custom_id
        return f"headline-{self.index}"

    def set_planning(self, kind: DateType, date: OrgDate) -> None:
        """Attach a planning date to the matching slot."""
        if kind is DateType.SCHEDULED:
            self.scheduled = date
        elif kind is DateType.DEADLINE:
            self.deadline = date
        else:
            self.closed = date

    def is_excluded(self, doc: Document) -> bool:
        """Whether one of the tags is listed in ``EXCLUDE_TAGS``."""
        excluded = set(doc.get("EXCLUDE_TAGS").split())
        return any(tag in excluded for tag in self.tags)

    def get_children(self) -> list[Node]:
        """Return title, promoted properties and section content."""
        nodes: list[Node] = list(self.title)
        if self.properties is not None:
            nodes.append(self.properties)
        nodes.extend(self.children)
        return nodes

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_headline``."""
        return visitor.visit_headline(self)


@dataclass
class Paragraph(Node):
    """A run of consecutive text lines; an empty paragraph is a blank line."""

    node_type: ClassVar[NodeType] = NodeType.PARAGRAPH

    pos: Pos
    children: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the inline content."""
        return list(self.children)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class HorizontalRule(Node):
    """A line of five or more dashes."""

    node_type: ClassVar[NodeType] = NodeType.HORIZONTAL_RULE

    pos: Pos
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_horizontal_rule``."""
        return visitor.visit_horizontal_rule(self)


@dataclass
class List(Node):
    """A list of items sharing indentation and bullet family.

    Parameters
    ----------
    pos : Pos
        Position of the first bullet
    kind : str
        ``"unordered"``, ``"ordered"`` or ``"descriptive"``
    items : list of Node
        :class:`ListItem` or :class:`DescriptiveListItem` nodes

    """

    node_type: ClassVar[NodeType] = NodeType.LIST

    pos: Pos
    kind: str
    items: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the items."""
        return list(self.items)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """A list item.

    Parameters
    ----------
    pos : Pos
        Position of the bullet
    bullet : str
        The bullet as written (``-``, ``+``, ``*``, ``1.``, ``a)``, ...)
    status : str
        Checkbox state: ``" "``, ``"X"``, ``"-"`` or empty when there is no checkbox
    value : str
        Counter override from ``[@N]``
    children : list of Node
        Block content of the item

    """

    node_type: ClassVar[NodeType] = NodeType.LIST_ITEM

    pos: Pos
    bullet: str
    status: str = ""
    value: str = ""
    children: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the block content."""
        return list(self.children)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list_item``."""
        return visitor.visit_list_item(self)


@dataclass
class DescriptiveListItem(Node):
    """A ``- term :: details`` list item."""

    node_type: ClassVar[NodeType] = NodeType.DESCRIPTIVE_LIST_ITEM

    pos: Pos
    bullet: str
    status: str = ""
    term: list[Node] = field(default_factory=list)
    details: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the term followed by the details."""
        return list(self.term) + list(self.details)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_descriptive_list_item``."""
        return visitor.visit_descriptive_list_item(self)


@dataclass
class TableColumn(Node):
    """One table cell.

    Parameters
    ----------
    pos : Pos
        Position just after the opening ``|``
    children : list of Node
        Inline-parsed cell content
    info : ColumnInfo, optional
        Layout of the column this cell belongs to (shared with the table)
    end_pos : Pos, optional
        Position of the closing ``|``

    """

    node_type: ClassVar[NodeType] = NodeType.TABLE_COLUMN

    pos: Pos
    children: list[Node] = field(default_factory=list)
    info: Optional[ColumnInfo] = None
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the cell content."""
        return list(self.children)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_column``."""
        return visitor.visit_table_column(self)


@dataclass
class TableRow(Node):
    """A table row; separator rows have no columns and ``is_separator`` set.

    Special rows hold only alignment directives such as ``<l>`` or ``<r10>``.
    """

    node_type: ClassVar[NodeType] = NodeType.TABLE_ROW

    pos: Pos
    columns: list[TableColumn] = field(default_factory=list)
    is_special: bool = False
    is_separator: bool = False
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the cells."""
        return list(self.columns)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_row``."""
        return visitor.visit_table_row(self)


@dataclass
class Table(Node):
    """A table with per-column layout and an optional formula set.

    Rows are addressed with 1-based logical row numbers that skip separator
    rows, as ``@N`` references in table formulas do. Cell content is the only
    part of the tree that may change after parsing, through :meth:`set_value`.

    Parameters
    ----------
    pos : Pos
        Position of the first row
    rows : list of TableRow
        Data, special and separator rows in source order
    column_infos : list of ColumnInfo
        Alignment and width per column
    separator_indices : list of int
        Indices into ``rows`` of the separator rows
    formulas : Formulas, optional
        Formulas attached by ``#+TBLFM:``
    cursor : RowColRef, optional
        Current cell used to resolve relative references

    """

    node_type: ClassVar[NodeType] = NodeType.TABLE

    pos: Pos
    rows: list[TableRow] = field(default_factory=list)
    column_infos: list[ColumnInfo] = field(default_factory=list)
    separator_indices: list[int] = field(default_factory=list)
    formulas: Optional[Formulas] = None
    cursor: Optional[RowColRef] = None
    end_pos: Optional[Pos] = None

    @property
    def width(self) -> int:
        """Number of columns."""
        return len(self.column_infos)

    @property
    def height(self) -> int:
        """Number of data rows (separators excluded)."""
        return len(self.rows) - len(self.separator_indices)

    def logical_row_to_index(self, row: int) -> Optional[int]:
        """Map a 1-based logical row number to an index into ``rows``."""
        if row < 1:
            return None
        seen = 0
        for index, table_row in enumerate(self.rows):
            if table_row.is_separator:
                continue
            seen += 1
            if seen == row:
                return index
        return None

    def data_rows_before(self, index: int) -> int:
        """Number of data rows that precede ``rows[index]``."""
        return sum(1 for table_row in self.rows[:index] if not table_row.is_separator)

    def cell(self, row: int, col: int) -> Optional[TableColumn]:
        """Return the cell at logical ``row`` and 1-based ``col``."""
        index = self.logical_row_to_index(row)
        if index is None or not 1 <= col <= len(self.rows[index].columns):
            return None
        return self.rows[index].columns[col - 1]

    def get_value(self, row: int, col: int) -> Optional[str]:
        """Return the Org text of a cell, or None when out of range."""
        from orgast.renderers.org import OrgRenderer

        target = self.cell(row, col)
        if target is None:
            return None
        return OrgRenderer().write_nodes_as_string(*target.children)

    def set_value(self, row: int, col: int, value: str | list[Node], parser: Optional[InlineParser] = None) -> bool:
        """Replace the content of a cell and refresh the column layout.

        Parameters
        ----------
        row : int
            1-based logical row
        col : int
            1-based column
        value : str or list of Node
            New content; strings are inline-parsed at the cell's position
        parser : InlineParser, optional
            Inline parser for string values; a default one when omitted

        Returns
        -------
        bool
            False when the cell does not exist

        """
        target = self.cell(row, col)
        if target is None:
            return False
        if isinstance(value, str):
            if parser is None:
                from orgast.parsers.inline import InlineParser

                parser = InlineParser()
            text = value.strip()
            target.children = parser.parse(text, target.pos.shifted(cols=1)) if text else []
        else:
            target.children = list(value)
        self.refresh_layout()
        return True

    def refresh_layout(self) -> None:
        """Recompute alignment and widths from the current cell contents."""
        from orgast.renderers.org import OrgRenderer

        renderer = OrgRenderer()
        texts: list[Optional[list[str]]] = []
        for table_row in self.rows:
            if table_row.is_separator:
                texts.append(None)
            else:
                texts.append([renderer.write_nodes_as_string(*column.children) for column in table_row.columns])
        for info, fresh in zip(self.column_infos, compute_column_infos(texts)):
            info.align = fresh.align
            info.width = fresh.width
            info.display_width = fresh.display_width

    def get_children(self) -> list[Node]:
        """Return the rows."""
        return list(self.rows)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table``."""
        return visitor.visit_table(self)


@dataclass
class Result(Node):
    """A ``#+RESULTS:`` marker and the node following it."""

    node_type: ClassVar[NodeType] = NodeType.RESULT

    pos: Pos
    node: Node
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the wrapped result node."""
        return [self.node]

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_result``."""
        return visitor.visit_result(self)


@dataclass
class Block(Node):
    """A ``#+BEGIN_NAME ... #+END_NAME`` block.

    Parameters
    ----------
    pos : Pos
        Position of the ``#+BEGIN_`` line
    name : str
        Upper-cased block name (SRC, EXAMPLE, QUOTE, CENTER, ...)
    parameters : list of str
        Words after the name: the optional language first, then alternating
        ``:key`` and value entries
    children : list of Node
        Raw inline content for raw blocks, parsed blocks otherwise
    result : Result, optional
        An attached ``#+RESULTS:`` section (source blocks only)
    end_pos : Pos, optional
        End of the ``#+END_`` line

    """

    node_type: ClassVar[NodeType] = NodeType.BLOCK

    pos: Pos
    name: str
    parameters: list[str] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    result: Optional[Node] = None
    end_pos: Optional[Pos] = None

    @property
    def language(self) -> str:
        """First parameter (the language of source blocks), or empty."""
        if self.parameters and not self.parameters[0].startswith(":"):
            return self.parameters[0]
        return ""

    def parameter_map(self) -> dict[str, str]:
        """Return the ``:key`` to value mapping of the header arguments."""
        params = self.parameters[1:] if self.language else self.parameters
        mapping: dict[str, str] = {}
        for key, value in zip(params[::2], params[1::2]):
            mapping[key] = value
        if len(params) % 2:
            mapping[params[-1]] = ""
        return mapping

    def get_children(self) -> list[Node]:
        """Return the content and the attached result, if any."""
        nodes = list(self.children)
        if self.result is not None:
            nodes.append(self.result)
        return nodes

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block``."""
        return visitor.visit_block(self)


@dataclass
class Example(Node):
    """Consecutive ``: text`` lines."""

    node_type: ClassVar[NodeType] = NodeType.EXAMPLE

    pos: Pos
    children: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the raw lines."""
        return list(self.children)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_example``."""
        return visitor.visit_example(self)


@dataclass
class Drawer(Node):
    """A named ``:NAME: ... :END:`` drawer other than PROPERTIES."""

    node_type: ClassVar[NodeType] = NodeType.DRAWER

    pos: Pos
    name: str
    children: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the drawer content."""
        return list(self.children)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_drawer``."""
        return visitor.visit_drawer(self)


@dataclass
class Keyword(Node):
    """A ``#+KEY: value`` line."""

    node_type: ClassVar[NodeType] = NodeType.KEYWORD

    pos: Pos
    key: str
    value: str = ""
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_keyword``."""
        return visitor.visit_keyword(self)


@dataclass
class Comment(Node):
    """A ``# comment`` line."""

    node_type: ClassVar[NodeType] = NodeType.COMMENT

    pos: Pos
    content: str = ""
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_comment``."""
        return visitor.visit_comment(self)


@dataclass
class Include(Node):
    """An ``#+INCLUDE:`` keyword whose file is read lazily.

    Parameters
    ----------
    pos : Pos
        Position of the keyword
    keyword : Keyword
        The original keyword, rendered when resolution fails
    resolve : callable
        Zero-argument function reading the file and returning the included node

    """

    node_type: ClassVar[NodeType] = NodeType.INCLUDE

    pos: Pos
    keyword: Keyword
    resolve: Callable[[], Node]
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_include``."""
        return visitor.visit_include(self)


@dataclass
class FootnoteDefinition(Node):
    """A footnote definition, either ``[fn:name] text`` or inline in a link.

    Parameters
    ----------
    pos : Pos
        Position of the definition
    name : str
        Footnote label
    children : list of Node
        Definition content (blocks, or one paragraph for inline definitions)
    inline : bool
        True when defined inside a ``[fn:name:text]`` reference

    """

    node_type: ClassVar[NodeType] = NodeType.FOOTNOTE_DEFINITION

    pos: Pos
    name: str
    children: list[Node] = field(default_factory=list)
    inline: bool = False
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the definition content."""
        return list(self.children)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_footnote_definition``."""
        return visitor.visit_footnote_definition(self)


@dataclass(frozen=True)
class PlanningEntry:
    """One keyword/date pair of a planning line."""

    kind: DateType
    date: OrgDate


@dataclass
class SchedulingEntry(Node):
    """A planning line: one or more SCHEDULED/DEADLINE/CLOSED dates."""

    node_type: ClassVar[NodeType] = NodeType.SCHEDULING_ENTRY

    pos: Pos
    entries: list[PlanningEntry] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    @property
    def kind(self) -> Optional[DateType]:
        """Keyword of the first entry."""
        return self.entries[0].kind if self.entries else None

    @property
    def date(self) -> Optional[OrgDate]:
        """Date of the first entry."""
        return self.entries[0].date if self.entries else None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_scheduling_entry``."""
        return visitor.visit_scheduling_entry(self)


@dataclass
class NodeWithName(Node):
    """A node preceded by ``#+NAME:``."""

    node_type: ClassVar[NodeType] = NodeType.NODE_WITH_NAME

    pos: Pos
    name: str
    node: Node
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the named node."""
        return [self.node]

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_node_with_name``."""
        return visitor.visit_node_with_name(self)


@dataclass
class Metadata:
    """Affiliated keywords collected before a node.

    Parameters
    ----------
    caption : list of list of Node
        One inline-parsed entry per ``#+CAPTION:`` line
    html_attributes : list of list of str
        Flattened ``[key, value, key, value, ...]`` per ``#+ATTR_HTML:`` line
    latex_attributes : list of list of str
        Same as ``html_attributes`` for ``#+ATTR_LATEX:``
    env : str
        Value of ``#+ENV:``

    """

    caption: list[list[Node]] = field(default_factory=list)
    html_attributes: list[list[str]] = field(default_factory=list)
    latex_attributes: list[list[str]] = field(default_factory=list)
    env: str = ""


@dataclass
class NodeWithMeta(Node):
    """A node preceded by affiliated keywords (CAPTION, ATTR_HTML, ...)."""

    node_type: ClassVar[NodeType] = NodeType.NODE_WITH_META

    pos: Pos
    node: Node
    meta: Metadata = field(default_factory=Metadata)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the decorated node."""
        return [self.node]

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_node_with_meta``."""
        return visitor.visit_node_with_meta(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Literal text. Raw text comes from verbatim contexts and is never re-parsed."""

    node_type: ClassVar[NodeType] = NodeType.TEXT

    pos: Pos
    content: str
    is_raw: bool = False
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class LineBreak(Node):
    """One or more consecutive newlines inside inline content.

    ``between_multibyte_characters`` is set when the characters on both sides
    are wide (CJK) characters, which some exporters join without a space.
    """

    node_type: ClassVar[NodeType] = NodeType.LINE_BREAK

    pos: Pos
    count: int = 1
    between_multibyte_characters: bool = False
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


@dataclass
class ExplicitLineBreak(Node):
    """A trailing ``\\\\`` forcing a line break."""

    node_type: ClassVar[NodeType] = NodeType.EXPLICIT_LINE_BREAK

    pos: Pos
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_explicit_line_break``."""
        return visitor.visit_explicit_line_break(self)


@dataclass
class StatisticToken(Node):
    """A ``[n/m]`` or ``[n%]`` progress cookie; ``content`` excludes the brackets."""

    node_type: ClassVar[NodeType] = NodeType.STATISTIC_TOKEN

    pos: Pos
    content: str
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_statistic_token``."""
        return visitor.visit_statistic_token(self)


@dataclass
class Timestamp(Node):
    """An inline active or inactive timestamp."""

    node_type: ClassVar[NodeType] = NodeType.TIMESTAMP

    pos: Pos
    time: OrgDate
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_timestamp``."""
        return visitor.visit_timestamp(self)


@dataclass
class Emphasis(Node):
    """Emphasized content.

    Parameters
    ----------
    pos : Pos
        Position of the opening marker
    kind : str
        The marker: ``*`` ``/`` ``+`` ``=`` ``~`` ``_``, or ``_{}`` / ``^{}``
        for subscript and superscript
    content : list of Node
        Inline content (raw text for ``=`` and ``~``)
    end_pos : Pos, optional
        Position after the closing marker

    """

    node_type: ClassVar[NodeType] = NodeType.EMPHASIS

    pos: Pos
    kind: str
    content: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the emphasized content."""
        return list(self.content)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_emphasis``."""
        return visitor.visit_emphasis(self)


@dataclass
class LatexFragment(Node):
    """A LaTeX fragment such as ``$x$``, ``\\(x\\)`` or ``\\begin{env}...\\end{env}``."""

    node_type: ClassVar[NodeType] = NodeType.LATEX_FRAGMENT

    pos: Pos
    opening_pair: str
    closing_pair: str
    content: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the raw content."""
        return list(self.content)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_latex_fragment``."""
        return visitor.visit_latex_fragment(self)


@dataclass
class FootnoteLink(Node):
    """A footnote reference, optionally with an inline definition."""

    node_type: ClassVar[NodeType] = NodeType.FOOTNOTE_LINK

    pos: Pos
    name: str
    definition: Optional[FootnoteDefinition] = None
    end_pos: Optional[Pos] = None

    @property
    def is_inline(self) -> bool:
        """Whether the reference carries its own definition."""
        return self.definition is not None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_footnote_link``."""
        return visitor.visit_footnote_link(self)


@dataclass
class RegularLink(Node):
    """A bracket link ``[[url][description]]`` or a bare auto-link.

    Parameters
    ----------
    pos : Pos
        Position of the link
    protocol : str
        Text before the first colon of the URL (empty for relative targets)
    description : list of Node, optional
        Inline-parsed description
    url : str
        Link target
    auto_link : bool
        True for bare ``protocol://`` links found in text
    end_pos : Pos, optional
        Position after the link

    """

    node_type: ClassVar[NodeType] = NodeType.REGULAR_LINK

    pos: Pos
    protocol: str
    description: Optional[list[Node]]
    url: str
    auto_link: bool = False
    end_pos: Optional[Pos] = None

    @property
    def kind(self) -> str:
        """Link kind: ``"image"``, ``"video"`` or ``"regular"``.

        A description made of a single image link makes the whole link an
        image (a linked thumbnail). Otherwise the target's extension decides,
        and only for links without a description.
        """
        description = self.description or []
        if len(description) == 1 and isinstance(description[0], RegularLink) and description[0].kind == "image":
            return "image"
        if description and not self.auto_link:
            return "regular"
        _, dot, ext = self.url.rpartition(".")
        if dot:
            ext = "." + ext
            if IMAGE_EXTENSION_PATTERN.match(ext):
                return "image"
            if VIDEO_EXTENSION_PATTERN.match(ext):
                return "video"
        return "regular"

    def get_children(self) -> list[Node]:
        """Return the description."""
        return list(self.description or [])

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_regular_link``."""
        return visitor.visit_regular_link(self)


@dataclass
class Macro(Node):
    """A ``{{{name(arg1,arg2)}}}`` macro call."""

    node_type: ClassVar[NodeType] = NodeType.MACRO

    pos: Pos
    name: str
    parameters: list[str] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_macro``."""
        return visitor.visit_macro(self)


@dataclass
class InlineBlock(Node):
    """An inline source block ``src_lang[args]{code}`` or export snippet ``@@backend:value@@``.

    ``name`` is ``"src"`` or ``"export"``; for source blocks ``parameters``
    holds the language then the optional header arguments, for snippets the
    backend name.
    """

    node_type: ClassVar[NodeType] = NodeType.INLINE_BLOCK

    pos: Pos
    name: str
    parameters: list[str] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    end_pos: Optional[Pos] = None

    def get_children(self) -> list[Node]:
        """Return the raw content."""
        return list(self.children)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_inline_block``."""
        return visitor.visit_inline_block(self)


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes of a node in source order.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Child nodes (empty list for leaves)

    Examples
    --------
    >>> para = Paragraph(Pos(0, 0), [Text(Pos(0, 0), "Hello")])
    >>> len(get_node_children(para))
    1

    """
    return node.get_children()
