#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/footnotes.py
"""``[fn:name] text`` footnote definitions."""

from __future__ import annotations

from typing import Optional

from orgast.ast.nodes import FootnoteDefinition, Node
from orgast.parsers.block import parse_many
from orgast.parsers.context import ParseContext, Scope, StopFn, is_second_blank_line
from orgast.parsers.tokens import TokenKind


def parse_footnote_definition(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a footnote definition and register it in the document.

    The text after the label is re-lexed as a line of its own. The
    definition runs until the next headline or footnote definition, or a
    second consecutive blank line.
    """
    token = ctx.tokens[i]
    name = token.content
    rest = token.matches[2]
    ctx.tokens[i] = ctx.lexer.tokenize(rest, token.pos.row, token.end_pos.col - len(rest))

    def definition_stop(ctx: ParseContext, j: int) -> bool:
        if j == i:
            return False
        if stop(ctx, j):
            return True
        if j > i + 1 and is_second_blank_line(ctx, j):
            return True
        return ctx.tokens[j].kind in (TokenKind.HEADLINE, TokenKind.FOOTNOTE_DEFINITION)

    consumed, children = parse_many(ctx, i, definition_stop, scope)
    definition = FootnoteDefinition(token.pos, name, children, end_pos=ctx.tokens[i + consumed - 1].end_pos)
    ctx.doc.footnotes[name] = definition
    return consumed, definition
