"""Test the calculation of column widths."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pipealign.core.data_structures import Table
from pipealign.core.measure import column_count, column_widths, measure_cells
from pipealign.core.scan import scan_rows

if TYPE_CHECKING:
    from pipealign.core.oracle import WidthOracle


def _widths(lines: list[str], oracle: WidthOracle, pad: float = 2) -> list[float]:
    rows = list(scan_rows(lines, Table(0, len(lines))))
    return column_widths(measure_cells(rows, oracle), column_count(rows), pad)


def test_column_widths(oracle: WidthOracle) -> None:
    """Columns are as wide as their widest cell plus the padding."""
    assert _widths(["| a | bb |", "| ccc | d |"], oracle) == [32, 22]


def test_separator_rows_do_not_count(oracle: WidthOracle) -> None:
    """Separator rows do not contribute to column widths."""
    lines = ["| a | b |", "|-----------|---|"]
    assert _widths(lines, oracle) == [12, 12]


def test_sparse_columns(oracle: WidthOracle) -> None:
    """Columns without any data cells have zero content width."""
    lines = ["| a |", "|---|---|---|"]
    assert _widths(lines, oracle, pad=1) == [11, 1, 1]


def test_measure_cells(oracle: WidthOracle) -> None:
    """Only the content span of each data cell is measured."""
    lines = ["|   a   | |", "|---|---|"]
    rows = list(scan_rows(lines, Table(0, 2)))
    assert measure_cells(rows, oracle) == [(30, 0), ()]


def test_width_monotonic(oracle: WidthOracle) -> None:
    """Adding a wider cell never makes a column narrower."""
    lines = ["| a | bb |", "| ccc | d |"]
    before = _widths(lines, oracle)
    after = _widths([*lines, "| e | ffff |"], oracle)
    assert all(new >= old for old, new in zip(before, after))
    assert after == [32, 42]
