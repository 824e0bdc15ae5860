#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/tables/__init__.py
"""Table layout and the ``#+TBLFM:`` formula reference engine."""

from orgast.tables.formulas import (
    CellRangeIterator,
    Formula,
    Formulas,
    FormulaTarget,
    RangeKind,
    RowColRef,
    parse_formulas,
)
from orgast.tables.layout import ColumnInfo, compute_column_infos, is_special_row, text_width
from orgast.tables.roman import int_to_roman, roman_to_int

__all__ = [
    "CellRangeIterator",
    "ColumnInfo",
    "Formula",
    "FormulaTarget",
    "Formulas",
    "RangeKind",
    "RowColRef",
    "compute_column_infos",
    "int_to_roman",
    "is_special_row",
    "parse_formulas",
    "roman_to_int",
    "text_width",
]
