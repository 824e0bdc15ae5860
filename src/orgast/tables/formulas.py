#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/tables/formulas.py
"""Parsing of ``#+TBLFM:`` formulas and lazy iteration over their targets.

Formulas are parsed, never evaluated. A formula has the shape
``target=expression;format`` and several formulas can share one keyword
separated by ``::``. Targets use Org's spreadsheet references:

===============  ==========================================================
``@3$2``         row 3, column 2
``@3``           the whole of row 3
``$2``           the whole of column 2
``@-1`` ``$+2``  offsets from the table cursor
``@<`` ``$>>``   first row, second-to-last column (counted from either end)
``@II``          first data row below the second separator line
``A..B``         every cell between references A and B
===============  ==========================================================

Rows are logical rows: separator lines are not counted.

Examples
--------
    >>> target = FormulaTarget.parse("@1$2..@3$4")
    >>> (target.start.row, target.start.col, target.end.row, target.end.col)
    (1, 2, 3, 4)
    >>> target.kind
    <RangeKind.RECTANGLE: 'rectangle'>

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional

from orgast.tables.roman import roman_to_int

if TYPE_CHECKING:
    from orgast.ast.nodes import Keyword, Table

logger = logging.getLogger(__name__)

_REFERENCE_PATTERN = re.compile(
    r"\s*(?:@(?P<row>[-+]?\d+|[<>]+|[IVXLCDM]+))?(?:\$(?P<col>[-+]?\d+|[<>]+))?\s*"
)


class RangeKind(str, Enum):
    """Shape of a formula target."""

    ROW = "row"
    COLUMN = "column"
    RECTANGLE = "rectangle"


def clamp(value: int, maximum: int) -> int:
    """Clamp ``value`` into ``1..maximum`` (values below 1 become 1)."""
    if value <= 0:
        return 1
    if value > maximum:
        return max(maximum, 1)
    return value


@dataclass(frozen=True)
class RowColRef:
    """A cell reference.

    Parameters
    ----------
    row : int or None
        1-based logical row, an offset when ``relative_row`` is set, or None
        for a reference spanning every row (``$c``)
    col : int or None
        1-based column, an offset when ``relative_col`` is set, or None for a
        reference spanning every column (``@r``)
    relative_row : bool
        Whether ``row`` is an offset from the table cursor
    relative_col : bool
        Whether ``col`` is an offset from the table cursor

    """

    row: Optional[int]
    col: Optional[int]
    relative_row: bool = False
    relative_col: bool = False

    @property
    def is_entire_row(self) -> bool:
        """Whether the reference covers a whole row (``@r``)."""
        return self.col is None

    @property
    def is_entire_col(self) -> bool:
        """Whether the reference covers a whole column (``$c``)."""
        return self.row is None

    def resolve(self, table: Optional[Table]) -> RowColRef:
        """Return an absolute reference, applying offsets and clamping to the table."""
        if not (self.relative_row or self.relative_col):
            return self
        cursor = _cursor(table)
        height, width = _size(table)
        row, col = self.row, self.col
        if self.relative_row and row is not None:
            row = clamp(cursor.row + row if cursor.row is not None else row, height)
        if self.relative_col and col is not None:
            col = clamp(cursor.col + col if cursor.col is not None else col, width)
        return RowColRef(row, col)

    def __str__(self) -> str:
        """Render the reference in ``@r$c`` syntax."""

        def axis(marker: str, value: Optional[int], relative: bool) -> str:
            if value is None:
                return ""
            if relative:
                return f"{marker}{value:+d}" if value else f"{marker}0"
            return f"{marker}{value}"

        return axis("@", self.row, self.relative_row) + axis("$", self.col, self.relative_col)


def _cursor(table: Optional[Table]) -> RowColRef:
    if table is not None and table.cursor is not None:
        return table.cursor
    return RowColRef(1, 1)


def _size(table: Optional[Table]) -> tuple[int, int]:
    if table is None:
        return 0, 0
    return table.height, table.width


def _parse_row(spec: str, table: Optional[Table]) -> tuple[int, bool]:
    height, _ = _size(table)
    if spec[0] == "<":
        return clamp(len(spec), height) if table is not None else len(spec), False
    if spec[0] == ">":
        return clamp(height - (len(spec) - 1), height), False
    if spec[0] in "IVXLCDM":
        separator = roman_to_int(spec)
        if table is None or separator is None or separator > len(table.separator_indices):
            logger.warning("Separator reference @%s does not exist in table", spec)
            return 1, False
        index = table.separator_indices[separator - 1]
        return clamp(table.data_rows_before(index) + 1, height), False
    return _parse_number(spec)


def _parse_col(spec: str, table: Optional[Table]) -> tuple[int, bool]:
    _, width = _size(table)
    if spec[0] == "<":
        return clamp(len(spec), width) if table is not None else len(spec), False
    if spec[0] == ">":
        return clamp(width - (len(spec) - 1), width), False
    return _parse_number(spec)


def _parse_number(spec: str) -> tuple[int, bool]:
    value = int(spec)
    if spec[0] in "+-" or value == 0:
        return value, True
    return value, False


def parse_reference(text: str, table: Optional[Table] = None) -> Optional[RowColRef]:
    """Parse one ``@r$c``, ``@r`` or ``$c`` reference.

    Parameters
    ----------
    text : str
        The reference text
    table : Table, optional
        Table used to resolve ``<``/``>`` runs and roman numerals

    Returns
    -------
    RowColRef or None
        None when the text is not a reference

    """
    match = _REFERENCE_PATTERN.fullmatch(text)
    if match is None or (match.group("row") is None and match.group("col") is None):
        return None
    row, relative_row, col, relative_col = None, False, None, False
    if match.group("row") is not None:
        row, relative_row = _parse_row(match.group("row"), table)
    if match.group("col") is not None:
        col, relative_col = _parse_col(match.group("col"), table)
    return RowColRef(row, col, relative_row, relative_col)


def range_kind(start: RowColRef, end: RowColRef) -> RangeKind:
    """Classify a reference pair.

    A column range walks along one row (whole rows, or a fixed row with
    different columns). A row range walks down one column. Everything else
    is a rectangle.
    """
    if start.is_entire_row and end.is_entire_row and start.row == end.row:
        return RangeKind.COLUMN
    if start.is_entire_col and end.is_entire_col and start.col == end.col:
        return RangeKind.ROW
    if start.row is not None and start.row == end.row and not start.is_entire_row:
        return RangeKind.COLUMN
    if start.col is not None and start.col == end.col and not start.is_entire_col:
        return RangeKind.ROW
    return RangeKind.RECTANGLE


@dataclass
class FormulaTarget:
    """The left-hand side of a formula: one reference or an ``A..B`` range."""

    raw: str
    start: RowColRef
    end: RowColRef

    @classmethod
    def parse(cls, raw: str, table: Optional[Table] = None) -> Optional[FormulaTarget]:
        """Parse a target string; None when it is not a valid reference."""
        first, sep, second = raw.strip().partition("..")
        start = parse_reference(first, table)
        if start is None:
            return None
        end = parse_reference(second, table) if sep else start
        if end is None:
            return None
        return cls(raw.strip(), start, end)

    @property
    def kind(self) -> RangeKind:
        """Shape of the target."""
        return range_kind(self.start, self.end)

    def iterate(self, table: Table) -> CellRangeIterator:
        """Create a fresh lazy iterator over the target cells of ``table``."""
        return CellRangeIterator(self, table)


class CellRangeIterator:
    """Lazy walk over the cells covered by a :class:`FormulaTarget`.

    :meth:`next` returns one absolute :class:`RowColRef` per call and None
    once the range is exhausted. The iterator also supports Python iteration
    and :meth:`reset` restarts it from the stored target. Ranges walk
    ascending or descending per axis depending on whether the start lies
    before or after the end; rectangles are walked column by column.

    Parameters
    ----------
    target : FormulaTarget
        The target to walk
    table : Table
        Table providing the size and cursor

    """

    def __init__(self, target: FormulaTarget, table: Table):
        """Prepare the walk."""
        self.target = target
        self.table = table
        self._cells = self._walk()

    def reset(self) -> None:
        """Restart the walk from the first cell."""
        self._cells = self._walk()

    def next(self) -> Optional[RowColRef]:
        """Return the next cell reference or None at the end of the range."""
        return next(self._cells, None)

    def __iter__(self) -> Iterator[RowColRef]:
        """Return self."""
        return self

    def __next__(self) -> RowColRef:
        """Return the next cell reference."""
        return next(self._cells)

    def _walk(self) -> Iterator[RowColRef]:
        height, width = _size(self.table)
        if height == 0 or width == 0:
            return
        start = self.target.start.resolve(self.table)
        end = self.target.end.resolve(self.table)
        rows = _axis(start.row, end.row, height)
        cols = _axis(start.col, end.col, width)
        for col in cols:
            for row in rows:
                yield RowColRef(row, col)


def _axis(first: Optional[int], last: Optional[int], maximum: int) -> range:
    low = clamp(first, maximum) if first is not None else 1
    high = clamp(last, maximum) if last is not None else maximum
    if low <= high:
        return range(low, high + 1)
    return range(low, high - 1, -1)


@dataclass
class Formula:
    """One ``target=expression;format`` formula.

    Parameters
    ----------
    keyword : Keyword, optional
        The ``#+TBLFM:`` keyword it came from
    formula_str : str
        The raw formula text
    sub_keyword_index : int
        Position of the formula within its keyword's ``::`` list
    target : FormulaTarget, optional
        Parsed target, None when the target is not a reference
    expression : str
        Right-hand side, unevaluated
    format : str
        Text after the last ``;`` of the expression
    valid : bool
        Whether the formula contains ``=``

    """

    formula_str: str
    keyword: Optional[Keyword] = None
    sub_keyword_index: int = 0
    target: Optional[FormulaTarget] = None
    expression: str = ""
    format: str = ""
    valid: bool = False

    def process(self, table: Optional[Table] = None) -> None:
        """Split the formula into target, expression and format."""
        target, sep, expression = self.formula_str.partition("=")
        if not sep:
            return
        self.valid = True
        self.target = FormulaTarget.parse(target, table)
        if self.target is None:
            logger.warning("Unrecognized formula target %r", target.strip())
        expression, fmt_sep, fmt = expression.rpartition(";")
        if fmt_sep:
            self.expression, self.format = expression, fmt
        else:
            self.expression, self.format = fmt, ""


@dataclass
class Formulas:
    """All formulas attached to a table, grouped by source keyword."""

    keywords: list[Keyword] = field(default_factory=list)
    formulas: list[Formula] = field(default_factory=list)

    def append_keyword(self, keyword: Optional[Keyword]) -> None:
        """Attach another ``#+TBLFM:`` keyword; parsed on the next :meth:`process`."""
        if keyword is not None:
            self.keywords.append(keyword)
            self.formulas = []

    def process(self, table: Optional[Table] = None) -> list[Formula]:
        """Parse every formula of every keyword (once)."""
        if self.formulas:
            return self.formulas
        parsed = []
        for keyword in self.keywords:
            for index, text in enumerate(keyword.value.split("::")):
                text = text.strip()
                if text:
                    formula = Formula(text, keyword=keyword, sub_keyword_index=index)
                    formula.process(table)
                    parsed.append(formula)
        self.formulas = parsed
        return parsed


def parse_formulas(keyword: Keyword, table: Optional[Table] = None) -> Formulas:
    """Build a :class:`Formulas` set from one ``#+TBLFM:`` keyword."""
    formulas = Formulas()
    formulas.append_keyword(keyword)
    formulas.process(table)
    return formulas
