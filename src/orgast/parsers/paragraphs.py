#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/paragraphs.py
"""Paragraphs and horizontal rules."""

from __future__ import annotations

from typing import Optional

from orgast.ast.nodes import HorizontalRule, Node, Paragraph
from orgast.parsers.context import ParseContext, Scope, StopFn
from orgast.parsers.tokens import TokenKind


def parse_paragraph(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse consecutive non-blank text lines into one paragraph.

    A blank first line yields an empty paragraph, which is how blank lines
    are kept in the tree. Continuation lines keep the indentation they have
    beyond ``scope.base_lvl``.
    """
    first = ctx.tokens[i]
    if first.content == "":
        return 1, Paragraph(first.pos, [], end_pos=first.end_pos)

    lines = [first.content]
    line_cols = [first.pos.col]
    last = first
    j = i + 1
    while not ctx.at_end(j) and not stop(ctx, j):
        token = ctx.tokens[j]
        if token.kind is not TokenKind.TEXT or token.content == "":
            break
        pad = max(token.lvl - scope.base_lvl, 0)
        lines.append(" " * pad + token.content)
        line_cols.append(token.pos.col - pad)
        last = token
        j += 1

    children = ctx.parse_inline("\n".join(lines), first.pos, line_cols)
    return j - i, Paragraph(first.pos, children, end_pos=last.end_pos)


def parse_horizontal_rule(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a ``-----`` line."""
    token = ctx.tokens[i]
    return 1, HorizontalRule(token.pos, end_pos=token.end_pos)
