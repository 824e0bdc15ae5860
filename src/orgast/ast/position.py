#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/ast/position.py
"""Source positions for tokens and AST nodes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Pos:
    """A zero-based (row, column) coordinate into the original input.

    Positions compare row-major, so ``max`` and ``<=`` behave the way a
    reader scanning the file would expect. Node ranges are half-open: the
    end position points just past the last character of the node.

    Parameters
    ----------
    row : int
        Zero-based line number
    col : int
        Zero-based column (in characters) within the line

    """

    row: int = 0
    col: int = 0

    def __str__(self) -> str:
        """Return ``row:col``."""
        return f"{self.row}:{self.col}"

    def shifted(self, rows: int = 0, cols: int = 0) -> Pos:
        """Return a copy moved by the given number of rows and columns."""
        return Pos(self.row + rows, self.col + cols)
