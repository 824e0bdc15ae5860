#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/delimited.py
"""``#+BEGIN_NAME``/``#+END_NAME`` blocks, ``#+RESULTS:`` and ``: example`` lines.

Raw blocks (see :data:`orgast.constants.RAW_BLOCK_NAMES`) keep their lines
verbatim: indentation up to the level of the ``#+BEGIN_`` line is removed
and the text is split into raw text nodes and line breaks only. Other
blocks (CENTER, custom names) hold parsed block content.

Inside SRC and EXAMPLE blocks a line that would otherwise start a headline
or a keyword is escaped with a comma (``,* not a headline``); the comma is
removed on read and added back by the Org renderer.
"""

from __future__ import annotations

import re
from typing import Optional

from orgast.ast.nodes import Block, Example, Node, Result, Text
from orgast.ast.position import Pos
from orgast.constants import COMMA_ESCAPED_BLOCK_NAMES, RAW_BLOCK_NAMES
from orgast.parsers.block import parse_many, parse_one
from orgast.parsers.context import ParseContext, Scope, StopFn
from orgast.parsers.tokens import TokenKind

COMMA_ESCAPE_PATTERN = re.compile(r"(^|\n)([ \t]*),([ \t]*)(\*|,\*|#\+|,#\+)")


def split_parameters(text: str) -> list[str]:
    """Split the text after ``#+BEGIN_NAME`` into parameters.

    Returns
    -------
    list of str
        The optional language, then alternating ``:key`` and value entries

    Examples
    --------
        >>> split_parameters(" python :results output :exports both")
        ['python', ':results', 'output', ':exports', 'both']

    """
    parts = text.split(" :")
    parameters = []
    lang = parts[0].strip()
    if lang:
        parameters.append(lang)
    for part in parts[1:]:
        key, _, value = part.partition(" ")
        parameters.extend([":" + key, value.strip()])
    return parameters


def _trim_indent(line: str, limit: int) -> str:
    i = 0
    while i < len(line) and i < limit and line[i].isspace():
        i += 1
    return line[i:]


def parse_block(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a delimited block; an unterminated block consumes nothing."""
    token = ctx.tokens[i]
    name = token.content
    block = Block(token.pos, name, split_parameters(token.matches[3]), end_pos=token.end_pos)

    def block_stop(ctx: ParseContext, j: int) -> bool:
        return ctx.at_end(j) or (ctx.tokens[j].kind is TokenKind.END_BLOCK and ctx.tokens[j].content == name)

    end = i + 1
    while not block_stop(ctx, end):
        end += 1
    if ctx.at_end(end):
        return 0, None

    j = i + 1
    if name in RAW_BLOCK_NAMES:
        lines, line_cols = [], []
        while not block_stop(ctx, j):
            line = ctx.tokens[j].line
            trimmed = _trim_indent(line, token.lvl)
            offset = ctx.tokens[j].pos.col - ctx.tokens[j].lvl
            lines.append(trimmed + "\n")
            line_cols.append(offset + len(line) - len(trimmed))
            j += 1
        raw = "".join(lines)
        if name in COMMA_ESCAPED_BLOCK_NAMES:
            raw = COMMA_ESCAPE_PATTERN.sub(r"\1\2\3\4", raw)
        if raw:
            block.children = ctx.inline.parse_raw(raw, Pos(token.pos.row + 1, line_cols[0]), line_cols)
    else:
        consumed, block.children = parse_many(ctx, j, block_stop, scope)
        j += consumed
        if ctx.at_end(j):
            return 0, None
    block.end_pos = ctx.tokens[j].end_pos

    if name == "SRC":
        consumed, block.result = _parse_src_result(ctx, j + 1, stop, scope)
        j += consumed
    return j + 1 - i, block


def _parse_src_result(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    j = i
    while not ctx.at_end(j) and not stop(ctx, j) and ctx.tokens[j].is_blank_text:
        j += 1
    if ctx.at_end(j) or stop(ctx, j) or ctx.tokens[j].kind is not TokenKind.RESULT:
        return 0, None
    consumed, result = parse_result(ctx, j, stop, scope)
    if consumed == 0:
        return 0, None
    return j - i + consumed, result


def parse_result(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a ``#+RESULTS:`` marker and the node right after it."""
    if ctx.at_end(i + 1):
        return 0, None
    token = ctx.tokens[i]
    consumed, node = parse_one(ctx, i + 1, stop, scope)
    if node is None:
        return 0, None
    return consumed + 1, Result(token.pos, node, end_pos=token.end_pos)


def parse_example(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse consecutive ``: text`` lines into raw text nodes."""
    example = Example(ctx.tokens[i].pos)
    j = i
    while not ctx.at_end(j) and (j == i or not stop(ctx, j)) and ctx.tokens[j].kind is TokenKind.EXAMPLE:
        token = ctx.tokens[j]
        content_pos = Pos(token.pos.row, token.content_col)
        example.children.append(Text(content_pos, token.content, is_raw=True, end_pos=token.end_pos))
        example.end_pos = token.end_pos
        j += 1
    return j - i, example
