"""Calculate the widths of table columns."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pipealign.core.data_structures import RowKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pipealign.core.data_structures import Row
    from pipealign.core.oracle import WidthOracle


def column_count(rows: Sequence[Row]) -> int:
    """Return the number of columns in a table: the most cells in any row."""
    return max((len(row.cells) for row in rows), default=0)


def measure_cells(
    rows: Sequence[Row], oracle: WidthOracle
) -> list[tuple[float, ...]]:
    """Measure the content of every data cell.

    Returns:
        A tuple of cell widths for each row. Separator rows get an empty tuple.

    """
    return [
        tuple(oracle.measure(cell.content(row.text)) for cell in row.cells)
        if row.kind is RowKind.DATA
        else ()
        for row in rows
    ]


def column_widths(
    measurements: Sequence[Sequence[float]], count: int, pad: float
) -> list[float]:
    """Calculate the width of each column.

    A column's width is the width of its widest data cell plus ``pad``. Columns
    with no data cells are given a content width of zero.

    Args:
        measurements: The cell widths of each row, as returned by
            :py:func:`measure_cells`
        count: The number of columns in the table
        pad: Additional width given to every column

    Returns:
        A list of column widths

    """
    widths = [0.0] * count
    for row in measurements:
        for i, width in enumerate(row):
            if width > widths[i]:
                widths[i] = width
    return [width + pad for width in widths]
