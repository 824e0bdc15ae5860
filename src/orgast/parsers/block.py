#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/block.py
"""Recursive-descent driver for block-level Org constructs.

Every sub-parser has the signature::

    parse_x(ctx, i, stop, scope) -> (consumed, node)

where ``i`` is the index of the token to start at, ``stop`` is the stop
predicate of the enclosing construct and ``scope`` the immutable per-branch
state. A sub-parser that cannot build its construct returns ``(0, None)``;
:func:`parse_one` then demotes the token to plain text and retries, so every
line always ends up somewhere in the tree.

"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, Optional

from orgast.ast.nodes import Node
from orgast.parsers.context import ParseContext, Scope, StopFn
from orgast.parsers.tokens import TokenKind

logger = logging.getLogger(__name__)

SubParser = Callable[[ParseContext, int, StopFn, Scope], "tuple[int, Optional[Node]]"]


@lru_cache(maxsize=1)
def _sub_parsers() -> dict[TokenKind, SubParser]:
    # Imported lazily: the sub-parsers recurse through this module.
    from orgast.parsers.delimited import parse_block, parse_example, parse_result
    from orgast.parsers.drawers import parse_drawer
    from orgast.parsers.footnotes import parse_footnote_definition
    from orgast.parsers.headline import parse_headline, parse_planning
    from orgast.parsers.keywords import parse_comment, parse_keyword
    from orgast.parsers.lists import parse_list
    from orgast.parsers.paragraphs import parse_horizontal_rule, parse_paragraph
    from orgast.parsers.tables import parse_table

    return {
        TokenKind.HEADLINE: parse_headline,
        TokenKind.BEGIN_BLOCK: parse_block,
        TokenKind.RESULT: parse_result,
        TokenKind.BEGIN_DRAWER: parse_drawer,
        TokenKind.UNORDERED_LIST: parse_list,
        TokenKind.ORDERED_LIST: parse_list,
        TokenKind.TABLE_ROW: parse_table,
        TokenKind.TABLE_SEPARATOR: parse_table,
        TokenKind.HORIZONTAL_RULE: parse_horizontal_rule,
        TokenKind.KEYWORD: parse_keyword,
        TokenKind.COMMENT: parse_comment,
        TokenKind.FOOTNOTE_DEFINITION: parse_footnote_definition,
        TokenKind.EXAMPLE: parse_example,
        TokenKind.SCHEDULED: parse_planning,
        TokenKind.DEADLINE: parse_planning,
        TokenKind.CLOSED: parse_planning,
        TokenKind.TEXT: parse_paragraph,
    }


def parse_one(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse the construct starting at token ``i``.

    Tokens without a parser (a stray ``:END:`` or ``#+END_``) and tokens
    whose parser gave up are re-lexed as plain text; a text token always
    yields at least a paragraph, so this function always consumes.

    Returns
    -------
    tuple of (int, Node or None)
        Number of tokens consumed and the node built

    """
    parsers = _sub_parsers()
    token = ctx.tokens[i]
    parser = parsers.get(token.kind)
    if parser is not None:
        consumed, node = parser(ctx, i, stop, scope)
        if consumed > 0:
            return consumed, node
    ctx.log.warning("Could not parse %s token at %s, treating it as plain text", token.kind.value, token.pos)
    ctx.tokens[i] = ctx.lexer.as_text(token)
    return parsers[TokenKind.TEXT](ctx, i, stop, scope)


def parse_many(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, list[Node]]:
    """Parse constructs until ``stop`` fires or the tokens run out."""
    start = i
    nodes: list[Node] = []
    while not ctx.at_end(i) and not stop(ctx, i):
        consumed, node = parse_one(ctx, i, stop, scope)
        if consumed <= 0:
            break
        i += consumed
        if node is not None:
            nodes.append(node)
    return i - start, nodes
