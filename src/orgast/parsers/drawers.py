#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/drawers.py
"""``:NAME: ... :END:`` drawers and ``:PROPERTIES:`` drawers."""

from __future__ import annotations

import re
from typing import Optional

from orgast.ast.nodes import Drawer, Node, Paragraph, PropertyDrawer, Text
from orgast.parsers.block import parse_many
from orgast.parsers.context import ParseContext, Scope, StopFn
from orgast.parsers.tokens import TokenKind

PROPERTY_PATTERN = re.compile(r"^(\s*):(\S+):(\s+(.*)$|$)")


def parse_drawer(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a drawer.

    A ``:PROPERTIES:`` drawer becomes a :class:`PropertyDrawer`. Any other
    drawer holds parsed content and ends at ``:END:``, at the next drawer
    start or at a headline; a missing ``:END:`` is tolerated.
    """
    token = ctx.tokens[i]
    name = token.content
    if name == "PROPERTIES":
        return parse_property_drawer(ctx, i, stop, scope)

    drawer = Drawer(token.pos, name, end_pos=token.end_pos)

    def drawer_stop(ctx: ParseContext, j: int) -> bool:
        if stop(ctx, j):
            return True
        return ctx.tokens[j].kind in (TokenKind.END_DRAWER, TokenKind.BEGIN_DRAWER, TokenKind.HEADLINE)

    j = i + 1
    while True:
        consumed, nodes = parse_many(ctx, j, drawer_stop, scope)
        j += consumed
        drawer.children.extend(nodes)
        if ctx.at_end(j) or stop(ctx, j) or ctx.tokens[j].kind is not TokenKind.BEGIN_DRAWER:
            break
        # A nested drawer start is kept as literal text.
        nested = ctx.tokens[j]
        literal = Text(nested.pos, f":{nested.content}:", end_pos=nested.end_pos)
        drawer.children.append(Paragraph(nested.pos, [literal], end_pos=nested.end_pos))
        j += 1

    if not ctx.at_end(j) and ctx.tokens[j].kind is TokenKind.END_DRAWER:
        drawer.end_pos = ctx.tokens[j].end_pos
        j += 1
    elif j > i + 1:
        drawer.end_pos = ctx.tokens[j - 1].end_pos
    return j - i, drawer


def parse_property_drawer(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse ``:KEY: value`` lines up to ``:END:``.

    Keys are upper-cased. A line that is not a property, or a missing
    ``:END:``, makes the whole drawer fall back to text.
    """
    drawer = PropertyDrawer(ctx.tokens[i].pos)
    j = i + 1
    while not ctx.at_end(j) and not stop(ctx, j):
        token = ctx.tokens[j]
        if token.kind not in (TokenKind.TEXT, TokenKind.BEGIN_DRAWER):
            break
        m = PROPERTY_PATTERN.match(token.line)
        if m is None:
            return 0, None
        drawer.properties.append((m.group(2).upper(), (m.group(4) or "").strip()))
        j += 1

    if ctx.at_end(j) or ctx.tokens[j].kind is not TokenKind.END_DRAWER:
        return 0, None
    drawer.end_pos = ctx.tokens[j].end_pos
    return j + 1 - i, drawer
