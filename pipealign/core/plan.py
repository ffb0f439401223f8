"""Build the layout plan for a table.

The plan places the right edge of every column at a fixed offset from the start
of its row. Data cells are padded on the side opposite to their column's alignment,
and separator rows are stretched into rules, either one per column or one spanning
the whole table. Offsets are measured from each row's origin: the point one space
after its opening bar.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from pipealign.core.align import column_alignments
from pipealign.core.data_structures import (
    Align,
    Directive,
    LayoutPlan,
    RowKind,
    RowPlan,
    SeparatorStyle,
    TableStyle,
)
from pipealign.core.locate import BAR
from pipealign.core.measure import column_count, column_widths, measure_cells
from pipealign.core.scan import PADDING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from typing import Any

    from pipealign.core.data_structures import Row, Table
    from pipealign.core.oracle import WidthOracle

log = logging.getLogger(__name__)

SUFFIX_STYLES = {
    ".org": TableStyle.ORG,
}


class LayoutOptions(NamedTuple):
    """The settings used when laying out a table."""

    style: TableStyle = TableStyle.MARKDOWN
    separator_style: SeparatorStyle = SeparatorStyle.MULTI_COLUMN
    # Width added to the widest cell of every column
    pad: float = 1
    # Width of the space after each bar; measured when not given
    space_width: float | None = None
    fancy_bar: bool = False
    # Tables with more characters than this are not aligned; zero for no limit
    max_table_size: int = 0

    @classmethod
    def from_config(cls, config: Any, suffix: str = "") -> LayoutOptions:
        """Read the layout options from a configuration object.

        Args:
            config: The configuration
            suffix: The suffix of the file being displayed, used to select the table
                style when it is set to ``auto``

        Returns:
            The layout options

        """
        if config.table_style == "auto":
            style = SUFFIX_STYLES.get(suffix.lower(), TableStyle.MARKDOWN)
        else:
            style = TableStyle(config.table_style)
        return cls(
            style=style,
            separator_style=SeparatorStyle(config.separator_style),
            pad=config.fixed_pad,
            space_width=config.space_width or None,
            fancy_bar=config.fancy_bar,
            max_table_size=config.max_table_size,
        )


def _data_directives(
    row: Row,
    measured: Sequence[float],
    lefts: Sequence[float],
    widths: Sequence[float],
    alignments: Sequence[Align],
    oracle: WidthOracle,
) -> Iterator[Directive]:
    lineno = row.lineno
    text = row.text
    for cell, cell_width, left, width, align in zip(
        row.cells, measured, lefts, widths, alignments
    ):
        right = left + width
        if cell.empty:
            # Split the blank so the cursor can be placed in the middle of the cell
            if cell.end - cell.start > 1:
                middle = (cell.start + cell.end) // 2
                yield Directive(lineno, cell.start, middle, left + width / 2)
                yield Directive(lineno, middle, cell.end, right)
            elif cell.end > cell.start:
                yield Directive(lineno, cell.start, cell.end, right)
        elif align is Align.LEFT:
            if cell.content_end < cell.end:
                yield Directive(lineno, cell.content_end, cell.end, right)
        elif align is Align.RIGHT:
            if cell.start < cell.content_start:
                # The trailing padding is kept, so the content ends before the edge
                trail = oracle.measure(text[cell.content_end : cell.end])
                yield Directive(
                    lineno, cell.start, cell.content_start, right - cell_width - trail
                )


def _separator_directives(
    row: Row,
    lefts: Sequence[float],
    widths: Sequence[float],
    oracle: WidthOracle,
    options: LayoutOptions,
) -> Iterator[Directive]:
    lineno = row.lineno
    text = row.text
    if not row.cells or not widths:
        return
    if options.separator_style is SeparatorStyle.SINGLE_COLUMN:
        # One rule from the first bar to the last, which stays in place
        yield Directive(
            lineno,
            row.cells[0].start,
            row.cells[-1].end,
            lefts[-1] + widths[-1],
            separator=True,
        )
    elif options.separator_style is SeparatorStyle.MULTI_COLUMN:
        for cell, left, width in zip(row.cells, lefts, widths):
            start, end = cell.start, cell.end
            if options.style is TableStyle.MARKDOWN:
                # Only the dashes are stretched, leaving alignment colons visible
                marker = cell.content(text)
                start = cell.content_start + marker.startswith(":")
                end = cell.content_end - marker.endswith(":")
            if start < end:
                yield Directive(
                    lineno,
                    start,
                    end,
                    left + width - oracle.measure(text[end : cell.end]),
                    separator=True,
                )


def build_plan(
    table: Table,
    rows: Sequence[Row],
    oracle: WidthOracle,
    options: LayoutOptions | None = None,
) -> LayoutPlan:
    """Compute the layout of a table.

    Args:
        table: The table's range of lines
        rows: The scanned rows of the table
        oracle: Used to measure the rendered width of text
        options: The layout settings

    Returns:
        The table's layout plan

    """
    options = options or LayoutOptions()
    count = column_count(rows)
    measurements = measure_cells(rows, oracle)
    widths = column_widths(measurements, count, options.pad)
    alignments = column_alignments(rows, count, options.style)

    bar_width = oracle.measure(BAR)
    space_width = (
        oracle.measure(PADDING) if options.space_width is None else options.space_width
    )
    lefts = []
    offset = 0.0
    for width in widths:
        lefts.append(offset)
        offset += width + bar_width + space_width

    plans = []
    for row, measured in zip(rows, measurements):
        origin = oracle.measure(row.text[: row.bar + 1]) + space_width
        if row.kind is RowKind.DATA:
            directives = _data_directives(
                row, measured, lefts, widths, alignments, oracle
            )
        elif row.kind is RowKind.SEPARATOR:
            directives = _separator_directives(row, lefts, widths, oracle, options)
        plans.append(
            RowPlan(row.lineno, row.text, origin, row.bars, tuple(directives))
        )

    log.debug("Planned layout of table at lines %d-%d", table.start, table.stop)
    return LayoutPlan(table, tuple(widths), tuple(alignments), tuple(plans))
