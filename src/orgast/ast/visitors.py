#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/ast/visitors.py
"""Visitor base class for Org AST traversal.

Every node variant declares an ``accept`` method that calls the matching
``visit_*`` method. :class:`NodeVisitor` lists all of them as abstract
methods, so a visitor (a renderer, typically) must handle every variant of
:class:`orgast.ast.nodes.NodeType` before it can be instantiated.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Examples
    --------
    Renderers subclass :class:`orgast.renderers.base.BaseRenderer`, which is
    a NodeVisitor; overriding one method changes how one variant is written:

        >>> class NoCommentsOrg(OrgRenderer):
        ...     def visit_comment(self, node):
        ...         pass

    """

    @abstractmethod
    def visit_headline(self, node: Headline) -> Any:
        """Visit a Headline node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_horizontal_rule(self, node: HorizontalRule) -> Any:
        """Visit a HorizontalRule node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""

    @abstractmethod
    def visit_descriptive_list_item(self, node: DescriptiveListItem) -> Any:
        """Visit a DescriptiveListItem node."""

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""

    @abstractmethod
    def visit_table_column(self, node: TableColumn) -> Any:
        """Visit a TableColumn node."""

    @abstractmethod
    def visit_block(self, node: Block) -> Any:
        """Visit a Block node."""

    @abstractmethod
    def visit_result(self, node: Result) -> Any:
        """Visit a Result node."""

    @abstractmethod
    def visit_example(self, node: Example) -> Any:
        """Visit an Example node."""

    @abstractmethod
    def visit_drawer(self, node: Drawer) -> Any:
        """Visit a Drawer node."""

    @abstractmethod
    def visit_property_drawer(self, node: PropertyDrawer) -> Any:
        """Visit a PropertyDrawer node."""

    @abstractmethod
    def visit_keyword(self, node: Keyword) -> Any:
        """Visit a Keyword node."""

    @abstractmethod
    def visit_comment(self, node: Comment) -> Any:
        """Visit a Comment node."""

    @abstractmethod
    def visit_include(self, node: Include) -> Any:
        """Visit an Include node."""

    @abstractmethod
    def visit_footnote_definition(self, node: FootnoteDefinition) -> Any:
        """Visit a FootnoteDefinition node."""

    @abstractmethod
    def visit_scheduling_entry(self, node: SchedulingEntry) -> Any:
        """Visit a SchedulingEntry node."""

    @abstractmethod
    def visit_node_with_name(self, node: NodeWithName) -> Any:
        """Visit a NodeWithName node."""

    @abstractmethod
    def visit_node_with_meta(self, node: NodeWithMeta) -> Any:
        """Visit a NodeWithMeta node."""

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""

    @abstractmethod
    def visit_explicit_line_break(self, node: ExplicitLineBreak) -> Any:
        """Visit an ExplicitLineBreak node."""

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""

    @abstractmethod
    def visit_latex_fragment(self, node: LatexFragment) -> Any:
        """Visit a LatexFragment node."""

    @abstractmethod
    def visit_regular_link(self, node: RegularLink) -> Any:
        """Visit a RegularLink node."""

    @abstractmethod
    def visit_footnote_link(self, node: FootnoteLink) -> Any:
        """Visit a FootnoteLink node."""

    @abstractmethod
    def visit_macro(self, node: Macro) -> Any:
        """Visit a Macro node."""

    @abstractmethod
    def visit_statistic_token(self, node: StatisticToken) -> Any:
        """Visit a StatisticToken node."""

    @abstractmethod
    def visit_timestamp(self, node: Timestamp) -> Any:
        """Visit a Timestamp node."""

    @abstractmethod
    def visit_inline_block(self, node: InlineBlock) -> Any:
        """Visit an InlineBlock node."""
