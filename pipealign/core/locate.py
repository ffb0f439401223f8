"""Find the tables in a text."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from pipealign.core.data_structures import Table
from pipealign.core.errors import NotOnTable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    IsVerbatim = Callable[[int], bool]

log = logging.getLogger(__name__)

BAR = "|"

_FENCE_RE = re.compile(r"^\s*(?P<fence>`{3,}|~{3,})")
_BLOCK_BEGIN_RE = re.compile(
    r"^\s*#\+begin_(?P<kind>src|example|export|verse)\b", re.IGNORECASE
)


def never_verbatim(lineno: int) -> bool:
    """Treat no lines as verbatim."""
    return False


def fenced_lines(lines: Sequence[str]) -> set[int]:
    """Find the lines which lie inside literal code blocks.

    Markdown code fences and Org ``#+begin_src`` style blocks are recognised. The
    fence lines themselves are included, as is everything after an unclosed fence.

    Args:
        lines: The lines of the text

    Returns:
        The set of verbatim line numbers

    """
    verbatim: set[int] = set()
    closing: re.Pattern | None = None
    for lineno, line in enumerate(lines):
        if closing is not None:
            verbatim.add(lineno)
            if closing.match(line):
                closing = None
        elif match := _FENCE_RE.match(line):
            verbatim.add(lineno)
            fence = match["fence"]
            closing = re.compile(rf"^\s*{re.escape(fence[0])}{{{len(fence)},}}\s*$")
        elif match := _BLOCK_BEGIN_RE.match(line):
            verbatim.add(lineno)
            closing = re.compile(rf"^\s*#\+end_{match['kind']}\b", re.IGNORECASE)
    return verbatim


def verbatim_classifier(lines: Sequence[str]) -> IsVerbatim:
    """Return a function reporting whether a line is inside a code block."""
    return fenced_lines(lines).__contains__


def is_table_line(line: str) -> bool:
    """Determine if a line begins with a bar, ignoring leading whitespace."""
    return line.lstrip().startswith(BAR)


def _is_row(lines: Sequence[str], lineno: int, is_verbatim: IsVerbatim) -> bool:
    return is_table_line(lines[lineno]) and not is_verbatim(lineno)


def locate_table(
    lines: Sequence[str], lineno: int, is_verbatim: IsVerbatim = never_verbatim
) -> Table:
    """Find the extent of the table containing a line.

    Args:
        lines: The lines of the text
        lineno: The number of a line inside the table
        is_verbatim: A function reporting whether a line is inside a code block

    Returns:
        The table's range of lines

    Raises:
        NotOnTable: If the line is not a table row

    """
    if not 0 <= lineno < len(lines) or not _is_row(lines, lineno, is_verbatim):
        raise NotOnTable(lineno)
    start = lineno
    while start > 0 and _is_row(lines, start - 1, is_verbatim):
        start -= 1
    stop = lineno + 1
    while stop < len(lines) and _is_row(lines, stop, is_verbatim):
        stop += 1
    return Table(start, stop)


def find_tables(
    lines: Sequence[str],
    start: int = 0,
    stop: int | None = None,
    is_verbatim: IsVerbatim = never_verbatim,
) -> Iterator[Table]:
    """Yield every table which overlaps a range of lines.

    Tables are returned in full, even where they extend outside the range.
    """
    stop = len(lines) if stop is None else min(stop, len(lines))
    lineno = max(start, 0)
    while lineno < stop:
        if _is_row(lines, lineno, is_verbatim):
            table = locate_table(lines, lineno, is_verbatim)
            yield table
            lineno = table.stop
        else:
            lineno += 1
