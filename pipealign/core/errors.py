"""Define the errors which can prevent a table from being aligned.

Every error here is scoped to a single table: when one is raised while laying out a
table, that table is left as it was and the remaining tables are still processed.
"""

from __future__ import annotations


class TableAlignError(Exception):
    """Base class for errors which abort the layout of a single table."""


class NotOnTable(TableAlignError):
    """Raised when a table is requested at a line which is not part of one."""

    def __init__(self, lineno: int) -> None:
        """Create a new error for the given line number."""
        super().__init__(f"Line {lineno} is not part of a table")
        self.lineno = lineno


class MalformedCell(TableAlignError):
    """Raised when a table cell has no closing bar before the end of its line."""

    def __init__(self, lineno: int, column: int) -> None:
        """Create a new error for the cell starting at ``column`` of ``lineno``."""
        super().__init__(
            f"Unterminated cell at line {lineno}, character {column}: "
            "no closing bar before the end of the line"
        )
        self.lineno = lineno
        self.column = column


class OracleUnavailable(TableAlignError):
    """Raised when text is measured outside of a valid rendering context."""

    def __init__(self, text: str = "") -> None:
        """Create a new error for an attempted measurement of ``text``."""
        super().__init__(f"Cannot measure {text!r}: no rendering context available")
        self.text = text


class TableTooLarge(TableAlignError):
    """Raised when a table exceeds the configured maximum size."""

    def __init__(self, size: int, limit: int) -> None:
        """Create a new error for a table of ``size`` characters."""
        super().__init__(f"Table has {size} characters, more than the limit of {limit}")
        self.size = size
        self.limit = limit
