#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/lists.py
"""Plain, ordered and descriptive lists.

A list is a run of list-item tokens with the same indentation and the same
bullet family (``- + *`` versus ``1. 1) a. a)``). Whether the list is
descriptive is decided by its first item. Each item owns every following
line indented past its bullet, plus blank lines, up to a second consecutive
blank line.
"""

from __future__ import annotations

import re
from typing import Optional

from orgast.ast.nodes import DescriptiveListItem, List, ListItem, Node
from orgast.ast.position import Pos
from orgast.parsers.block import parse_one
from orgast.parsers.context import ParseContext, Scope, StopFn, is_second_blank_line
from orgast.parsers.tokens import Token

DESCRIPTIVE_SEPARATOR_PATTERN = re.compile(r"\s::(\s|$)")
_VALUE_PATTERN = re.compile(r"\[@(\d+)\](\s|$)")
_STATUS_PATTERN = re.compile(r"\[( |X|-)\](\s|$)")

UNORDERED_BULLETS = "*+-"


def list_kind(token: Token) -> tuple[str, str]:
    """Return ``(family, kind)`` of a list-item token.

    The family is ``"unordered"`` or ``"ordered"``; the kind is the family,
    or ``"descriptive"`` when the item contains a `` :: `` separator.
    """
    family = "unordered" if token.matches[2] in UNORDERED_BULLETS else "ordered"
    if DESCRIPTIVE_SEPARATOR_PATTERN.search(token.content):
        return family, "descriptive"
    return family, family


def parse_list(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse consecutive sibling list items."""
    first = ctx.tokens[i]
    lvl = first.lvl
    family, kind = list_kind(first)
    result = List(first.pos, kind)

    def list_stop(ctx: ParseContext, j: int) -> bool:
        if stop(ctx, j):
            return True
        token = ctx.tokens[j]
        if token.lvl != lvl or not token.kind.is_list:
            return True
        return list_kind(token)[0] != family

    j = i
    while not ctx.at_end(j) and (j == i or not list_stop(ctx, j)):
        consumed, item = _parse_item(ctx, j, stop, scope, kind)
        j += consumed
        result.items.append(item)
    result.end_pos = ctx.tokens[j - 1].end_pos
    return j - i, result


def _parse_item(ctx: ParseContext, i: int, stop: StopFn, scope: Scope, kind: str) -> tuple[int, Node]:
    token = ctx.tokens[i]
    bullet = token.matches[2]
    min_indent = token.lvl + len(bullet)
    base_lvl = min_indent + 1
    content, status, value = token.content, "", ""

    if kind == "ordered":
        m = _VALUE_PATTERN.match(content)
        if m is not None:
            value, content = m.group(1), content[m.end() :]
    m = _STATUS_PATTERN.match(content)
    if m is not None:
        status, content = m.group(1), content[m.end() :]

    term: Optional[str] = None
    term_col = token.end_pos.col - len(content)
    if kind == "descriptive":
        m = DESCRIPTIVE_SEPARATOR_PATTERN.search(content)
        if m is not None:
            term, content = content[: m.start()], content[m.end() :]
            base_lvl = token.line.find(" ::") + 4
        else:
            term = ""

    content_col = token.end_pos.col - len(content)
    ctx.tokens[i] = ctx.lexer.tokenize(" " * min_indent + content, token.pos.row, content_col - min_indent)
    item_scope = scope.with_base_lvl(base_lvl)

    def item_stop(ctx: ParseContext, j: int) -> bool:
        if stop(ctx, j):
            return True
        candidate = ctx.tokens[j]
        return candidate.lvl < min_indent and not candidate.is_blank_text

    children: list[Node] = []
    j = i
    while not ctx.at_end(j) and (j == i or not item_stop(ctx, j)) and (j <= i + 1 or not is_second_blank_line(ctx, j)):
        consumed, node = parse_one(ctx, j, item_stop, item_scope)
        j += consumed
        if node is not None:
            children.append(node)

    end_pos = ctx.tokens[j - 1].end_pos
    if term is not None:
        term_nodes = ctx.parse_inline(term, Pos(token.pos.row, term_col))
        return j - i, DescriptiveListItem(token.pos, bullet, status, term_nodes, children, end_pos=end_pos)
    return j - i, ListItem(token.pos, bullet, status, value, children, end_pos=end_pos)
