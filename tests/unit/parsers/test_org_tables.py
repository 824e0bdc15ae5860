#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/parsers/test_org_tables.py
"""Unit tests for table parsing, column layout and cell access."""

import pytest

from orgast.ast.nodes import Emphasis, Table
from orgast.ast.position import Pos
from orgast.parsers.tables import split_cells
from orgast.tables.layout import ColumnInfo, compute_column_infos, is_special_row, text_width

TABLE = "| Name | Qty |\n|------+-----|\n| a | 1 |\n| b | 22 |"


@pytest.mark.unit
class TestTableParsing:
    """Tests for building tables from rows."""

    def test_rows_and_separators(self, parse_org) -> None:
        """Test row kinds and the separator index list."""
        (table,) = parse_org(TABLE).nodes
        assert isinstance(table, Table)
        assert len(table.rows) == 4
        assert table.separator_indices == [1]
        assert table.rows[1].is_separator
        assert table.rows[1].columns == []
        assert (table.height, table.width) == (3, 2)

    def test_column_layout(self, parse_org) -> None:
        """Test alignment and widths computed from the cells."""
        (table,) = parse_org(TABLE).nodes
        assert table.column_infos == [ColumnInfo("", 4, 0), ColumnInfo("right", 3, 0)]
        assert table.rows[2].columns[1].info is table.column_infos[1]

    def test_cells_are_trimmed_and_positioned(self, parse_org) -> None:
        """Test cell content and source positions."""
        (table,) = parse_org("|  x | *y* |").nodes
        first, second = table.rows[0].columns
        assert first.pos == Pos(0, 1)
        assert first.children[0].content == "x"
        assert first.children[0].pos == Pos(0, 3)
        assert isinstance(second.children[0], Emphasis)

    def test_short_rows_are_padded(self, parse_org) -> None:
        """Test that every row gets the full column count."""
        (table,) = parse_org("| a | b |\n| c |").nodes
        assert len(table.rows[1].columns) == 2
        assert table.rows[1].columns[1].children == []

    def test_missing_closing_pipe(self, parse_org) -> None:
        """Test that the last cell survives without a closing bar."""
        (table,) = parse_org("| a | b").nodes
        assert table.width == 2
        assert table.get_value(1, 2) == "b"

    def test_special_row(self, parse_org) -> None:
        """Test alignment directives."""
        (table,) = parse_org("| <l> | <r5> |\n| 1 | b |").nodes
        assert table.rows[0].is_special
        assert table.column_infos[0].align == "left"
        assert table.column_infos[1].align == "right"
        assert table.column_infos[1].display_width == 5

    def test_table_registered_in_section(self, parse_org) -> None:
        """Test that tables are recorded on the current outline section."""
        doc = parse_org("* A\n| 1 |")
        assert doc.outline.children[0].tables == [doc.nodes[0].children[0]]

    def test_table_ends_at_text(self, parse_org) -> None:
        """Test that a non-table line ends the table."""
        doc = parse_org("| a |\nafter")
        assert len(doc.nodes) == 2

    def test_split_cells(self) -> None:
        """Test raw cell offsets."""
        assert split_cells("| a |  | b |") == [(1, " a "), (5, "  "), (8, " b ")]
        assert split_cells("|") == []


@pytest.mark.unit
class TestCellAccess:
    """Tests for logical row addressing."""

    def test_get_value(self, parse_org) -> None:
        """Test reading cells by logical row and column."""
        (table,) = parse_org(TABLE).nodes
        assert table.get_value(1, 1) == "Name"
        assert table.get_value(2, 2) == "1"
        assert table.get_value(3, 2) == "22"
        assert table.get_value(4, 1) is None
        assert table.get_value(1, 3) is None
        assert table.get_value(0, 1) is None

    def test_logical_row_to_index(self, parse_org) -> None:
        """Test that separator rows are skipped."""
        (table,) = parse_org(TABLE).nodes
        assert [table.logical_row_to_index(n) for n in (1, 2, 3, 4)] == [0, 2, 3, None]
        assert table.data_rows_before(2) == 1

    def test_set_value_updates_width(self, parse_org) -> None:
        """Test that writing a cell widens its column."""
        (table,) = parse_org(TABLE).nodes
        assert table.set_value(2, 1, "longer text")
        assert table.get_value(2, 1) == "longer text"
        assert table.column_infos[0].width == 11
        assert not table.set_value(9, 1, "x")

    def test_set_value_with_nodes(self, parse_org) -> None:
        """Test writing parsed nodes into a cell."""
        (table,) = parse_org(TABLE).nodes
        (source,) = parse_org("| *hot* |").nodes
        assert table.set_value(3, 1, source.rows[0].columns[0].children)
        assert table.get_value(3, 1) == "*hot*"

    def test_set_value_parses_markup(self, parse_org) -> None:
        """Test that string values are inline-parsed at the cell position."""
        (table,) = parse_org(TABLE).nodes
        assert table.set_value(2, 1, "*bold*")
        (emphasis,) = table.cell(2, 1).children
        assert isinstance(emphasis, Emphasis)
        assert emphasis.pos == Pos(2, 2)
        assert table.get_value(2, 1) == "*bold*"

    def test_set_value_narrows_column(self, parse_org) -> None:
        """Test that shrinking the widest cell narrows the column."""
        (table,) = parse_org(TABLE).nodes
        assert table.column_infos[0].width == 4
        table.set_value(1, 1, "N")
        assert table.column_infos[0].width == 1
        assert table.rows[0].columns[0].info.width == 1

    def test_set_value_refreshes_alignment(self, parse_org) -> None:
        """Test that the numeric vote is taken again after a write."""
        (table,) = parse_org(TABLE).nodes
        assert table.column_infos[1].align == "right"
        table.set_value(2, 2, "x")
        assert table.column_infos[1].align != "right"


@pytest.mark.unit
class TestColumnLayout:
    """Tests for the layout helpers."""

    def test_numeric_majority_right_aligns(self) -> None:
        """Test the numeric/non-numeric vote."""
        infos = compute_column_infos([["a"], ["1"]])
        assert infos[0].align == "right"
        infos = compute_column_infos([["1"], ["2"], ["x"], ["y"], ["z"]])
        assert infos[0].align == ""

    def test_number_formats(self) -> None:
        """Test signed, decimal and exponent numbers."""
        infos = compute_column_infos([["-1.5"], [".5"], ["1e3"]])
        assert infos[0].align == "right"

    def test_empty_cells_do_not_vote(self) -> None:
        """Test that blank cells count for neither side."""
        assert compute_column_infos([["1"], [""], [""]])[0].align == "right"

    def test_separators_ignored(self) -> None:
        """Test that None rows are skipped."""
        infos = compute_column_infos([["ab", "c"], None, ["x"]])
        assert [info.width for info in infos] == [2, 1]

    def test_special_row_detection(self) -> None:
        """Test rows holding only directives."""
        assert is_special_row(["<l>", ""])
        assert is_special_row(["<c10>", "<6>"])
        assert not is_special_row(["", ""])
        assert not is_special_row(["<l>", "text"])
        assert not is_special_row(None)

    def test_text_width(self) -> None:
        """Test that wide characters count double."""
        assert text_width("abc") == 3
        assert text_width("日本") == 4
