"""Test splitting tables into rows and cells."""

from __future__ import annotations

import pytest

from pipealign.core.data_structures import Cell, RowKind, Table
from pipealign.core.errors import MalformedCell
from pipealign.core.scan import find_bars, make_cell, scan_rows, split_cells


def test_find_bars() -> None:
    """Escaped bars are not treated as cell boundaries."""
    assert find_bars("| a | b |") == [0, 4, 8]
    assert find_bars(r"| a \| b |") == [0, 9]
    assert find_bars(r"| a \\| b |") == [0, 6, 10]


def test_make_cell() -> None:
    """Cell content excludes padding, keeping one space where there are several."""
    text = "| a |"
    assert make_cell(text, 1, 4) == Cell(1, 4, 2, 3)

    text = "|   a   |"
    cell = make_cell(text, 1, 8)
    assert cell == Cell(1, 8, 3, 6)
    assert cell.content(text) == " a "

    text = "|a|"
    assert make_cell(text, 1, 2) == Cell(1, 2, 1, 2)


def test_make_empty_cell() -> None:
    """Blank cells have an empty content span."""
    cell = make_cell("|   |", 1, 4)
    assert cell.empty
    assert cell.content("|   |") == ""


def test_split_cells() -> None:
    """Lines are split on bars and the terminal empty cell is discarded."""
    cells, bars = split_cells("  | a | bb |  ")
    assert bars == (2, 6, 11)
    assert [cell.content("  | a | bb |  ") for cell in cells] == ["a", "bb"]


def test_split_cells_unterminated() -> None:
    """A cell without a closing bar is malformed."""
    with pytest.raises(MalformedCell) as info:
        split_cells("| a | b", lineno=3)
    assert info.value.lineno == 3
    assert info.value.column == 5


def test_scan_rows_kinds() -> None:
    """Rows are separators only when every cell is made of rule markers."""
    lines = [
        "| a | b |",
        "|:--|--:|",
        "| --- | abc |",
        "|-----+-----|",
    ]
    rows = list(scan_rows(lines, Table(0, 4)))
    assert [row.kind for row in rows] == [
        RowKind.DATA,
        RowKind.SEPARATOR,
        RowKind.DATA,
        RowKind.SEPARATOR,
    ]
    assert [row.index for row in rows] == [0, 1, 2, 3]
    assert [row.lineno for row in rows] == [0, 1, 2, 3]


def test_scan_rows_joined_segments() -> None:
    """Separator cells are split into one segment per column at joints."""
    lines = ["|-----+-----|"]
    (row,) = scan_rows(lines, Table(0, 1))
    assert row.kind is RowKind.SEPARATOR
    assert row.cells == (Cell(1, 6, 1, 6), Cell(7, 12, 7, 12))


def test_scan_rows_marker_content() -> None:
    """Separator segment content excludes surrounding whitespace."""
    text = "| :---: | ---: |"
    (row,) = scan_rows([text], Table(0, 1))
    assert [cell.content(text) for cell in row.cells] == [":---:", "---:"]


def test_scan_rows_malformed() -> None:
    """An unterminated cell aborts the scan of the table."""
    lines = ["| a | b |", "| c | d"]
    rows = scan_rows(lines, Table(0, 2))
    assert next(rows).kind is RowKind.DATA
    with pytest.raises(MalformedCell):
        next(rows)
