#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/tables/layout.py
"""Column alignment and width computation for Org tables."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional, Sequence

ALIGN_DIRECTIVE_PATTERN = re.compile(r"^<(l|c|r)?(\d+)?>$")
NUMBER_PATTERN = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")

_ALIGN_NAMES = {"l": "left", "c": "center", "r": "right"}


@dataclass
class ColumnInfo:
    """Layout of one table column.

    Parameters
    ----------
    align : str
        ``"left"``, ``"center"``, ``"right"`` or empty (left)
    width : int
        Widest cell content, in terminal columns
    display_width : int
        Width requested by a ``<r10>`` style directive, 0 when absent

    """

    align: str = ""
    width: int = 0
    display_width: int = 0


def text_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies.

    Wide and full-width East Asian characters count as two columns.
    """
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def is_special_row(cells: Optional[Sequence[str]]) -> bool:
    """Whether a row only holds alignment directives (and empty cells)."""
    if not cells:
        return False
    has_directive = False
    for cell in cells:
        if ALIGN_DIRECTIVE_PATTERN.match(cell):
            has_directive = True
        elif cell != "":
            return False
    return has_directive


def compute_column_infos(rows: Sequence[Optional[Sequence[str]]]) -> list[ColumnInfo]:
    """Compute alignment and width for every column.

    Parameters
    ----------
    rows : sequence of (sequence of str or None)
        Trimmed cell texts per row; None marks a separator row

    Returns
    -------
    list of ColumnInfo
        One entry per column; the column count is the longest row

    Notes
    -----
    An explicit directive row decides the alignment of its columns. Other
    columns right-align when they hold at least one number and no more
    non-numeric cells than numeric ones.

    """
    column_count = max((len(cells) for cells in rows if cells), default=0)
    infos = [ColumnInfo() for _ in range(column_count)]
    special = [is_special_row(cells) for cells in rows]

    for i, info in enumerate(infos):
        count_numeric, count_non_numeric = 0, 0
        for cells, is_special in zip(rows, special):
            if not cells or i >= len(cells):
                continue
            cell = cells[i]
            info.width = max(info.width, text_width(cell))
            directive = ALIGN_DIRECTIVE_PATTERN.match(cell) if is_special else None
            if directive is not None:
                if directive.group(1):
                    info.align = _ALIGN_NAMES[directive.group(1)]
                if directive.group(2):
                    info.display_width = int(directive.group(2))
            elif NUMBER_PATTERN.match(cell):
                count_numeric += 1
            elif cell.strip():
                count_non_numeric += 1

        if not info.align and count_numeric and count_numeric >= count_non_numeric:
            info.align = "right"
    return infos
