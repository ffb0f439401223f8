"""Contains the data structures describing tables and their layout."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class TableStyle(Enum):
    """The syntax family a table is written in."""

    # Column alignment is given by colons in the separator row
    MARKDOWN = "markdown"
    # Column alignment is inferred from the padding of the data cells
    ORG = "org"


class RowKind(Enum):
    """The kind of a table row."""

    DATA = "data"
    SEPARATOR = "separator"


class Align(Enum):
    """The side of a column its content is placed against."""

    LEFT = "left"
    RIGHT = "right"


class SeparatorStyle(Enum):
    """How separator rows are drawn."""

    # One unbroken rule spanning the whole table
    SINGLE_COLUMN = "single-column"
    # One rule per column, keeping the column breaks visible
    MULTI_COLUMN = "multi-column"


class Table(NamedTuple):
    """A block of consecutive table lines, as a half-open range of line numbers."""

    start: int
    stop: int

    @property
    def lines(self) -> range:
        """Return the line numbers making up the table."""
        return range(self.start, self.stop)

    def overlaps(self, start: int, stop: int) -> bool:
        """Determine if the table shares any lines with the range ``[start, stop)``."""
        return self.start < stop and start < self.stop


class Cell(NamedTuple):
    """The span of a cell within its line.

    ``start`` and ``end`` delimit the raw cell text between its two bars.
    ``content_start`` and ``content_end`` delimit the cell's content: the raw text
    less its padding, where a single space next to the content is kept as content
    whenever that side is padded by more than one space. Empty cells have an empty
    content span.
    """

    start: int
    end: int
    content_start: int
    content_end: int

    @property
    def empty(self) -> bool:
        """Whether the cell has no content."""
        return self.content_start == self.content_end

    def content(self, text: str) -> str:
        """Return the cell's content from its line's text."""
        return text[self.content_start : self.content_end]


class Row(NamedTuple):
    """A single line of a table.

    The cells of separator rows are the individual rule segments, so an Org rule
    such as ``|-----+-----|`` has two cells.
    """

    index: int
    lineno: int
    text: str
    kind: RowKind
    cells: tuple[Cell, ...]
    bars: tuple[int, ...]

    @property
    def bar(self) -> int:
        """The position of the row's opening bar."""
        return self.bars[0]


class Directive(NamedTuple):
    """An instruction to stretch a span of a line when it is displayed.

    The characters ``[start, end)`` of line ``lineno`` are displayed as blank space
    (or as a rule, for separator decorations) extending until their right edge lies
    at ``target``, measured from the row's origin. The stored text is not changed.
    """

    lineno: int
    start: int
    end: int
    target: float
    separator: bool = False


class RowPlan(NamedTuple):
    """The layout directives for a single row.

    ``origin`` is the width of the row's text up to and including its opening bar,
    plus one space: the position from which directive targets are measured.
    """

    lineno: int
    text: str
    origin: float
    bars: tuple[int, ...]
    directives: tuple[Directive, ...]


class LayoutPlan(NamedTuple):
    """The computed layout of a table."""

    table: Table
    widths: tuple[float, ...]
    alignments: tuple[Align, ...]
    rows: tuple[RowPlan, ...]

    @property
    def directives(self) -> list[Directive]:
        """Return the directives of every row of the table in order."""
        return [directive for row in self.rows for directive in row.directives]
