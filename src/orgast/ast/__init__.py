#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/ast/__init__.py
"""Org AST: node classes, source positions, the outline and the visitor base."""

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
    Metadata,
    Node,
    NodeType,
    NodeWithMeta,
    NodeWithName,
    Paragraph,
    PlanningEntry,
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
    get_node_children,
)
from orgast.ast.outline import Outline, Section
from orgast.ast.position import Pos
from orgast.ast.visitors import NodeVisitor

__all__ = [
    "Block",
    "Comment",
    "DescriptiveListItem",
    "Drawer",
    "Emphasis",
    "Example",
    "ExplicitLineBreak",
    "FootnoteDefinition",
    "FootnoteLink",
    "Headline",
    "HorizontalRule",
    "Include",
    "InlineBlock",
    "Keyword",
    "LatexFragment",
    "LineBreak",
    "List",
    "ListItem",
    "Macro",
    "Metadata",
    "Node",
    "NodeType",
    "NodeVisitor",
    "NodeWithMeta",
    "NodeWithName",
    "Outline",
    "Paragraph",
    "PlanningEntry",
    "Pos",
    "PropertyDrawer",
    "RegularLink",
    "Result",
    "SchedulingEntry",
    "Section",
    "StatisticToken",
    "Table",
    "TableColumn",
    "TableRow",
    "Text",
    "Timestamp",
    "get_node_children",
]
