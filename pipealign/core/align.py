"""Determine how the columns of a table are aligned."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pipealign.core.data_structures import Align, RowKind, TableStyle
from pipealign.core.scan import PADDING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pipealign.core.data_structures import Cell, Row

log = logging.getLogger(__name__)


def marker_alignment(marker: str) -> Align:
    """Read a column's alignment from its separator marker.

    ``:---`` and ``:---:`` are left aligned, ``---:`` is right aligned, and a marker
    without colons defaults to left alignment.
    """
    marker = marker.strip()
    if marker.startswith(":"):
        return Align.LEFT
    if marker.endswith(":"):
        return Align.RIGHT
    return Align.LEFT


def cell_alignment(text: str, cell: Cell) -> Align:
    """Guess how a data cell is aligned from its padding.

    A cell opening with a single space followed by content is left aligned. Otherwise
    the cell is right aligned if its content is followed by exactly one space before
    the closing bar, and left aligned if not.
    """
    start, end = cell.start, cell.end
    if text[start : start + 1] == PADDING and text[start + 1 : start + 2] not in (
        "",
        PADDING,
    ):
        return Align.LEFT
    if end >= 2 and text[end - 1] == PADDING and text[end - 2] != PADDING:
        return Align.RIGHT
    return Align.LEFT


def marker_alignments(rows: Sequence[Row], count: int) -> list[Align]:
    """Read column alignments from the markers in a table's separator rows.

    Where there are several separator rows, the last one takes precedence.
    """
    alignments = [Align.LEFT] * count
    for row in rows:
        if row.kind is RowKind.SEPARATOR:
            for i, cell in enumerate(row.cells):
                alignments[i] = marker_alignment(cell.content(row.text))
    return alignments


def majority_alignments(rows: Sequence[Row], count: int) -> list[Align]:
    """Infer column alignments from the padding of their data cells.

    Each non-empty data cell votes for the alignment its padding suggests, and each
    column takes the alignment with the most votes. A tied vote gives right alignment,
    and a column with no votes is left aligned.
    """
    left = [0] * count
    right = [0] * count
    for row in rows:
        if row.kind is not RowKind.DATA:
            continue
        for i, cell in enumerate(row.cells):
            if cell.empty:
                continue
            if cell_alignment(row.text, cell) is Align.LEFT:
                left[i] += 1
            else:
                right[i] += 1
    return [
        Align.LEFT if lefts > rights or not rights else Align.RIGHT
        for lefts, rights in zip(left, right)
    ]


def column_alignments(
    rows: Sequence[Row], count: int, style: TableStyle
) -> list[Align]:
    """Determine the alignment of each column of a table.

    Args:
        rows: The table's rows
        count: The number of columns in the table
        style: The syntax family of the table, which selects the strategy

    Returns:
        A list of column alignments

    """
    if style is TableStyle.MARKDOWN:
        return marker_alignments(rows, count)
    elif style is TableStyle.ORG:
        return majority_alignments(rows, count)
    else:
        raise NotImplementedError(f"Unknown table style {style!r}")
