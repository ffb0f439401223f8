"""Test finding tables in text."""

from __future__ import annotations

import pytest

from pipealign.core.data_structures import Table
from pipealign.core.errors import NotOnTable
from pipealign.core.locate import (
    fenced_lines,
    find_tables,
    is_table_line,
    locate_table,
    verbatim_classifier,
)

TEXT = """\
Some text

| a | b |
|---|---|
  | c | d |
More text
| e |

```
| not | a table |
```
""".splitlines()


def test_is_table_line() -> None:
    """Lines are table lines if they start with a bar after any indentation."""
    assert is_table_line("| a |")
    assert is_table_line("   | a |")
    assert not is_table_line("a | b")
    assert not is_table_line("")


def test_locate_table() -> None:
    """The whole run of table lines around a line is found."""
    assert locate_table(TEXT, 2) == Table(2, 5)
    assert locate_table(TEXT, 3) == Table(2, 5)
    assert locate_table(TEXT, 4) == Table(2, 5)
    assert locate_table(TEXT, 6) == Table(6, 7)


def test_locate_table_off_table() -> None:
    """Locating a table from a line which is not a row fails."""
    with pytest.raises(NotOnTable) as info:
        locate_table(TEXT, 0)
    assert info.value.lineno == 0

    with pytest.raises(NotOnTable):
        locate_table(TEXT, 100)


def test_fenced_lines() -> None:
    """Lines inside code fences, including the fences, are verbatim."""
    assert fenced_lines(TEXT) == {8, 9, 10}


def test_fenced_lines_org_blocks() -> None:
    """Org source blocks are verbatim, whatever their case."""
    lines = ["| a |", "#+BEGIN_SRC python", "| b |", "#+end_src", "| c |"]
    assert fenced_lines(lines) == {1, 2, 3}


def test_fenced_lines_needs_matching_fence() -> None:
    """A fence is only closed by a fence of the same character and length."""
    lines = ["````", "```", "| a |", "~~~~", "````", "| b |"]
    assert fenced_lines(lines) == {0, 1, 2, 3, 4}


def test_verbatim_table_is_not_located() -> None:
    """Tables inside code blocks are ignored."""
    is_verbatim = verbatim_classifier(TEXT)
    with pytest.raises(NotOnTable):
        locate_table(TEXT, 9, is_verbatim)
    # Without the classifier the line is treated as a table
    assert locate_table(TEXT, 9) == Table(9, 10)


def test_find_tables() -> None:
    """Every table overlapping a range is found, in full."""
    is_verbatim = verbatim_classifier(TEXT)
    assert list(find_tables(TEXT, is_verbatim=is_verbatim)) == [
        Table(2, 5),
        Table(6, 7),
    ]
    assert list(find_tables(TEXT, 3, 4, is_verbatim)) == [Table(2, 5)]
    assert list(find_tables(TEXT, 0, 2, is_verbatim)) == []
