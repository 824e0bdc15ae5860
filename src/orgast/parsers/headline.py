#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/headline.py
"""Headlines and the planning lines below them.

A headline line is split into its parts from left to right::

    ** TODO [#A] Write the parser [1/3]                          :work:code:
    ^^ ^^^^ ^^^^ ^^^^^^^^^^^^^^^^ ^^^^^                          ^^^^^^^^^^^
    level status priority  title  check_status                      tags

Everything up to the next headline of the same or a lower level belongs to
the headline's section.
"""

from __future__ import annotations

import re
from typing import Optional

from orgast.ast.nodes import Headline, Node, PlanningEntry, PropertyDrawer, SchedulingEntry, StatisticToken
from orgast.ast.position import Pos
from orgast.dates import parse_planning_line
from orgast.parsers.block import parse_many
from orgast.parsers.context import ParseContext, Scope, StopFn
from orgast.parsers.tokens import TokenKind

_PRIORITY_PATTERN = re.compile(r"\[#([A-Z])\]\s*")
_TAGS_PATTERN = re.compile(r"(.*?)\s+(:[A-Za-z0-9_@#%:]+:\s*$)")
_CHECK_STATUS_PATTERN = re.compile(r"\s*\[(\d+/\d+|\d+%)\]\s*$")


def _render_title(title: list[Node]) -> str:
    from orgast.renderers.org import OrgRenderer

    return OrgRenderer().write_nodes_as_string(*title)


def parse_headline(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a headline and its section.

    The headline is registered in the outline before its title and children
    are parsed, so planning lines and timestamps inside the section attach
    to it.
    """
    token = ctx.tokens[i]
    level = len(token.matches[1])
    headline = Headline(token.pos, level)
    ctx.doc.outline.add(headline)

    text, offset = token.content, 0
    for keyword in ctx.doc.todo_keywords:
        if text.startswith(keyword) and len(text) > len(keyword) and text[len(keyword)].isspace():
            headline.status = keyword
            rest = text[len(keyword) :].lstrip()
            offset += len(text) - len(rest)
            text = rest
            break

    priority = _PRIORITY_PATTERN.match(text)
    if priority is not None:
        headline.priority = priority.group(1)
        offset += priority.end()
        text = text[priority.end() :]

    tags = _TAGS_PATTERN.match(text)
    if tags is not None:
        text = tags.group(1)
        headline.tags = [tag for tag in tags.group(2).strip().split(":") if tag]

    title_col = token.content_col + offset
    check = _CHECK_STATUS_PATTERN.search(text)
    if check is not None:
        cookie_start = title_col + check.start(1) - 1
        headline.check_status = StatisticToken(
            Pos(token.pos.row, cookie_start),
            check.group(1),
            end_pos=Pos(token.pos.row, cookie_start + len(check.group(1)) + 2),
        )
        text = text[: check.start()]

    headline.title = ctx.parse_inline(text.rstrip(), Pos(token.pos.row, title_col))
    child_scope, headline.hash = scope.child_hash(_render_title(headline.title))

    def section_stop(ctx: ParseContext, j: int) -> bool:
        if stop(ctx, j):
            return True
        candidate = ctx.tokens[j]
        return candidate.kind is TokenKind.HEADLINE and len(candidate.matches[1]) <= level

    consumed, children = parse_many(ctx, i + 1, section_stop, child_scope)
    for index, child in enumerate(children):
        if isinstance(child, SchedulingEntry):
            continue
        if isinstance(child, PropertyDrawer):
            headline.properties = child
            del children[index]
        break
    headline.children = children
    headline.end_pos = ctx.tokens[i + consumed].end_pos
    return consumed + 1, headline


def parse_planning(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse a SCHEDULED/DEADLINE/CLOSED line and attach its dates to the current headline.

    A line whose keywords carry no valid timestamp, or that holds other text
    besides its entries, is not a planning line; returning zero lets the
    driver demote it to text.
    """
    token = ctx.tokens[i]
    pairs = parse_planning_line(
        token.content, (ctx.inline.active_timestamp, ctx.inline.inactive_timestamp), strict=True
    )
    if not pairs:
        return 0, None
    headline = ctx.doc.outline.current.headline
    entries = []
    for kind, date in pairs:
        if headline is not None:
            headline.set_planning(kind, date)
        entries.append(PlanningEntry(kind, date))
    return 1, SchedulingEntry(token.pos, entries, end_pos=token.end_pos)
