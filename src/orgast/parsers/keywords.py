#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/keywords.py
"""``#+KEY: value`` lines and ``# comment`` lines.

Most keywords only record a buffer setting. A few have side effects on the
document being built:

==================  ==========================================================
``#+NAME:``         names the next node and registers it in ``named_nodes``
``#+CAPTION:`` etc  affiliated keywords collected onto the next node
``#+INCLUDE:``      deferred file inclusion, read when the node is rendered
``#+SETUPFILE:``    parses another file and merges its settings
``#+LINK:``         registers a link abbreviation
``#+MACRO:``        registers a macro template
``#+TBLFM:``        attaches formulas to the last table of the section
==================  ==========================================================

"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Optional

from orgast.ast.nodes import Block, Comment, Include, Keyword, Metadata, Node, NodeWithMeta, NodeWithName
from orgast.ast.position import Pos
from orgast.constants import AFFILIATED_KEYWORDS
from orgast.exceptions import OrgAstError
from orgast.parsers.block import parse_one
from orgast.parsers.context import ParseContext, Scope, StopFn
from orgast.parsers.inline import InlineParser
from orgast.parsers.tokens import Token, TokenKind
from orgast.tables.formulas import Formulas

INCLUDE_PATTERN = re.compile(r'^"([^"]+)" (src|example|export) (\w+)$', re.IGNORECASE)
ATTRIBUTE_PATTERN = re.compile(r"(?:^|\s+)(:[-\w]+)\s+(.*)$")


def keyword_from_token(token: Token) -> Keyword:
    """Build the :class:`Keyword` node of a keyword token (key upper-cased, value trimmed)."""
    return Keyword(token.pos, token.matches[2].upper(), token.matches[4].strip(), end_pos=token.end_pos)


def parse_attributes(value: str) -> list[str]:
    """Split an ``#+ATTR_HTML:`` value into a flat ``[key, value, ...]`` list.

    Examples
    --------
        >>> parse_attributes(":class wide image :alt A picture")
        [':class', 'wide image', ':alt', 'A picture']

    """
    attributes: list[str] = []
    rest = value
    while True:
        m = ATTRIBUTE_PATTERN.search(rest)
        if m is None:
            break
        attributes.append(m.group(1))
        rest = m.group(2)
        following = ATTRIBUTE_PATTERN.search(rest)
        if following is None:
            attributes.append(rest.strip())
            break
        attributes.append(rest[: following.start()])
        rest = rest[following.start() :]
    return attributes


def resolve_path(document_path: str, path: str) -> str:
    """Resolve ``path`` relative to the directory of the document."""
    if Path(path).is_absolute():
        return path
    return str(Path(document_path).parent / path)


def parse_comment(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a ``# comment`` line."""
    token = ctx.tokens[i]
    return 1, Comment(token.pos, token.content, end_pos=token.end_pos)


def parse_keyword(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a keyword line and apply its side effects."""
    token = ctx.tokens[i]
    keyword = keyword_from_token(token)
    key = keyword.key

    if key == "NAME":
        return _parse_node_with_name(ctx, i, stop, scope, keyword)
    if key == "SETUPFILE":
        _load_setup_file(ctx, keyword)
        return 1, keyword
    if key == "INCLUDE":
        return 1, _build_include(ctx, keyword)
    if key == "LINK":
        parts = keyword.value.split(" ", 1)
        if len(parts) == 2:
            ctx.doc.links[parts[0]] = parts[1].strip()
        return 1, keyword
    if key == "MACRO":
        parts = keyword.value.split(" ", 1)
        if len(parts) == 2:
            ctx.doc.macros[parts[0]] = parts[1].strip()
        return 1, keyword
    if key in AFFILIATED_KEYWORDS:
        consumed, node = _parse_affiliated(ctx, i, stop, scope)
        if consumed:
            return consumed, node
        return 1, keyword
    if key == "TBLFM":
        _attach_formulas(ctx, keyword)
        return 1, keyword

    settings = ctx.doc.buffer_settings
    settings[key] = settings[key] + "\n" + keyword.value if key in settings else keyword.value
    return 1, keyword


def _parse_node_with_name(
    ctx: ParseContext, i: int, stop: StopFn, scope: Scope, keyword: Keyword
) -> tuple[int, Optional[Node]]:
    if ctx.at_end(i + 1) or stop(ctx, i + 1):
        return 0, None
    consumed, node = parse_one(ctx, i + 1, stop, scope)
    if consumed == 0 or node is None:
        return 0, None
    ctx.doc.named_nodes[keyword.value] = node
    return consumed + 1, NodeWithName(keyword.pos, keyword.value, node, end_pos=keyword.end_pos)


def _parse_affiliated(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    meta = Metadata()
    j = i
    while not ctx.at_end(j) and not stop(ctx, j) and ctx.tokens[j].kind is TokenKind.KEYWORD:
        token = ctx.tokens[j]
        keyword = keyword_from_token(token)
        if keyword.key not in AFFILIATED_KEYWORDS:
            break
        if keyword.key == "CAPTION":
            value_col = token.end_pos.col - len(token.matches[4])
            meta.caption.append(ctx.parse_inline(keyword.value, Pos(token.pos.row, value_col)))
        elif keyword.key == "ATTR_HTML":
            meta.html_attributes.append(parse_attributes(keyword.value))
        elif keyword.key == "ATTR_LATEX":
            meta.latex_attributes.append(parse_attributes(keyword.value))
        else:
            meta.env = keyword.value
        j += 1

    if ctx.at_end(j) or stop(ctx, j):
        return 0, None
    consumed, node = parse_one(ctx, j, stop, scope)
    if consumed == 0 or node is None:
        return 0, None
    return j + consumed - i, NodeWithMeta(ctx.tokens[i].pos, node, meta, end_pos=ctx.tokens[i].end_pos)


def _attach_formulas(ctx: ParseContext, keyword: Keyword) -> None:
    tables = ctx.doc.outline.current.tables
    if not tables:
        ctx.log.warning("#+TBLFM at %s has no table to attach to", keyword.pos)
        return
    table = tables[-1]
    if table.formulas is None:
        table.formulas = Formulas()
    table.formulas.append_keyword(keyword)
    table.formulas.process(table)


def _load_setup_file(ctx: ParseContext, keyword: Keyword) -> None:
    doc = ctx.doc
    path = resolve_path(doc.path, keyword.value)
    if Path(path) == Path(doc.path):
        ctx.log.warning("Setup file %s includes itself, ignoring it", path)
        return
    try:
        setup = doc.parse_sub(ctx.options.read_file(path), path)
    except (OSError, UnicodeDecodeError, OrgAstError) as e:
        ctx.log.warning("Bad setup file %r: %s", keyword.value, e)
        return
    if setup.error is not None:
        ctx.log.warning("Bad setup file %r: %s", keyword.value, setup.error)
        return
    for key, value in setup.buffer_settings.items():
        doc.buffer_settings.setdefault(key, value)
    for key, value in setup.links.items():
        doc.links.setdefault(key, value)
    for key, value in setup.macros.items():
        doc.macros.setdefault(key, value)


def _build_include(ctx: ParseContext, keyword: Keyword) -> Include:
    log = ctx.log
    m = INCLUDE_PATTERN.match(keyword.value)
    if m is None:

        def resolve() -> Node:
            log.warning("Bad include %r: expected '\"path\" src|example|export lang'", keyword.value)
            return keyword

        return Include(keyword.pos, keyword, resolve, end_pos=keyword.end_pos)

    path = resolve_path(ctx.doc.path, m.group(1))
    kind, lang = m.group(2).upper(), m.group(3)
    return Include(
        keyword.pos,
        keyword,
        _file_resolver(path, kind, lang, keyword, ctx.options.read_file, ctx.inline, log),
        end_pos=keyword.end_pos,
    )


def _file_resolver(
    path: str,
    kind: str,
    lang: str,
    keyword: Keyword,
    read_file: Callable[[str], str],
    inline: InlineParser,
    log: logging.Logger,
) -> Callable[[], Node]:
    def resolve() -> Node:
        try:
            text = read_file(path)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Bad include %r: %s", keyword.value, e)
            return keyword
        return Block(keyword.pos, kind, [lang], inline.parse_raw(text, Pos(0, 0)), end_pos=keyword.end_pos)

    return resolve
