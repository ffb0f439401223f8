"""Split table lines into rows and cells."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from pipealign.core.data_structures import Cell, Row, RowKind
from pipealign.core.errors import MalformedCell
from pipealign.core.locate import BAR

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from pipealign.core.data_structures import Table

log = logging.getLogger(__name__)

JOINT = "+"
PADDING = " "

_MARKER_RE = re.compile(r"^\s*:?-+:?\s*$")


def find_bars(text: str, start: int = 0) -> list[int]:
    """Return the positions of the unescaped bars in a line."""
    bars = []
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == BAR:
            bars.append(i)
    return bars


def make_cell(text: str, start: int, end: int) -> Cell:
    """Describe the cell occupying ``text[start:end]``."""
    raw = text[start:end]
    content = raw.strip(PADDING)
    if not content:
        return Cell(start, end, start, start)
    lead = len(raw) - len(raw.lstrip(PADDING))
    trail = len(raw) - len(raw.rstrip(PADDING))
    # Where a side is padded by several spaces, the one next to the content is kept
    return Cell(
        start,
        end,
        start + lead - (lead > 1),
        end - trail + (trail > 1),
    )


def split_cells(text: str, lineno: int = 0) -> tuple[tuple[Cell, ...], tuple[int, ...]]:
    """Split a table line into cells.

    Args:
        text: The text of the line, which must contain a bar
        lineno: The line's number, used when reporting errors

    Returns:
        A tuple containing the line's cells and the positions of its bars

    Raises:
        MalformedCell: If text other than whitespace follows the final bar

    """
    bars = find_bars(text, text.index(BAR))
    last = bars[-1]
    if text[last + 1 :].strip():
        raise MalformedCell(lineno, last + 1)
    cells = tuple(
        make_cell(text, start + 1, end) for start, end in zip(bars, bars[1:])
    )
    return cells, tuple(bars)


def _segments(text: str, cell: Cell) -> list[Cell] | None:
    """Split a separator cell on its joints, or return `None` for a data cell."""
    segments = []
    start = cell.start
    for piece in text[cell.start : cell.end].split(JOINT):
        end = start + len(piece)
        if not _MARKER_RE.match(piece):
            return None
        lead = len(piece) - len(piece.lstrip())
        trail = len(piece) - len(piece.rstrip())
        segments.append(Cell(start, end, start + lead, end - trail))
        start = end + len(JOINT)
    return segments


def separator_segments(text: str, cells: Sequence[Cell]) -> list[Cell] | None:
    """Return the rule segments of a separator row.

    A row is a separator only if every one of its cells consists of rule markers
    (dashes, optionally framed by colons). If any cell contains other text, the row
    is a data row and `None` is returned.
    """
    if not cells:
        return None
    segments: list[Cell] = []
    for cell in cells:
        if (parts := _segments(text, cell)) is None:
            return None
        segments += parts
    return segments


def scan_rows(lines: Sequence[str], table: Table) -> Iterator[Row]:
    """Yield the rows of a table, classifying each as a data or a separator row.

    Raises:
        MalformedCell: When a row contains an unterminated cell

    """
    for index, lineno in enumerate(table.lines):
        text = lines[lineno]
        cells, bars = split_cells(text, lineno)
        if (segments := separator_segments(text, cells)) is not None:
            yield Row(index, lineno, text, RowKind.SEPARATOR, tuple(segments), bars)
        else:
            yield Row(index, lineno, text, RowKind.DATA, cells, bars)
