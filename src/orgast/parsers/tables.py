#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/tables.py
"""Tables: a run of ``| a | b |`` rows and ``|---+---|`` separator lines."""

from __future__ import annotations

from typing import Optional

from orgast.ast.nodes import Node, Table, TableColumn, TableRow
from orgast.ast.position import Pos
from orgast.parsers.context import ParseContext, Scope, StopFn
from orgast.parsers.tokens import Token, TokenKind
from orgast.tables.formulas import RowColRef
from orgast.tables.layout import compute_column_infos, is_special_row


def split_cells(content: str) -> list[tuple[int, str]]:
    """Split a row into ``(offset, raw_cell)`` pairs.

    ``offset`` is the index of the cell's first character in ``content``.
    Empty cells are kept; a missing closing ``|`` does not drop the last cell.

    Examples
    --------
        >>> split_cells("| a |  | b |")
        [(1, ' a '), (5, '  '), (8, ' b ')]

    """
    parts = content.split("|")
    cells = parts[1:-1] if content.rstrip().endswith("|") else parts[1:]
    result = []
    offset = len(parts[0]) + 1
    for part in cells:
        result.append((offset, part))
        offset += len(part) + 1
    return result


def parse_table(ctx: ParseContext, i: int, stop: StopFn, scope: Scope) -> tuple[int, Optional[Node]]:
    """Parse consecutive table tokens into a :class:`Table`.

    Cell texts are trimmed and inline-parsed at their own source position.
    Rows shorter than the widest row are padded with empty cells.
    """
    tokens: list[Token] = []
    raw_rows: list[Optional[list[str]]] = []
    j = i
    while not ctx.at_end(j) and (j == i or not stop(ctx, j)):
        token = ctx.tokens[j]
        if token.kind is TokenKind.TABLE_SEPARATOR:
            raw_rows.append(None)
        elif token.kind is TokenKind.TABLE_ROW:
            raw_rows.append([cell.strip() for _, cell in split_cells(token.content)])
        else:
            break
        tokens.append(token)
        j += 1

    infos = compute_column_infos(raw_rows)
    table = Table(tokens[0].pos, column_infos=infos, cursor=RowColRef(1, 1), end_pos=tokens[-1].end_pos)
    for index, (token, cells) in enumerate(zip(tokens, raw_rows)):
        if cells is None:
            table.separator_indices.append(index)
            table.rows.append(TableRow(token.pos, is_separator=True, end_pos=token.end_pos))
            continue
        row = TableRow(token.pos, is_special=is_special_row(cells), end_pos=token.end_pos)
        row.columns = _build_columns(ctx, token, table)
        table.rows.append(row)

    ctx.doc.outline.current.tables.append(table)
    return j - i, table


def _build_columns(ctx: ParseContext, token: Token, table: Table) -> list[TableColumn]:
    row, base = token.pos.row, token.pos.col
    columns = []
    next_col = base + 1
    for (offset, raw), info in zip(split_cells(token.content), table.column_infos):
        start = base + offset
        text = raw.strip()
        origin = Pos(row, start + len(raw) - len(raw.lstrip()))
        column = TableColumn(Pos(row, start), info=info, end_pos=Pos(row, start + len(raw)))
        if text:
            column.children = ctx.parse_inline(text, origin)
        columns.append(column)
        next_col = start + len(raw) + 1
    for info in table.column_infos[len(columns) :]:
        columns.append(TableColumn(Pos(row, next_col), info=info, end_pos=Pos(row, next_col)))
    return columns
