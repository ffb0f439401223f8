"""Run the table layout pipeline and hand its results to a renderer."""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from typing import TYPE_CHECKING

from pipealign.core.errors import OracleUnavailable, TableAlignError, TableTooLarge
from pipealign.core.locate import find_tables, locate_table, verbatim_classifier
from pipealign.core.oracle import CachedOracle
from pipealign.core.plan import LayoutOptions, build_plan
from pipealign.core.scan import scan_rows

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from prompt_toolkit.utils import Event

    from pipealign.core.data_structures import LayoutPlan, Table
    from pipealign.core.locate import IsVerbatim
    from pipealign.core.oracle import WidthOracle

log = logging.getLogger(__name__)


class LayoutApplier(metaclass=ABCMeta):
    """Display layout plans without changing the underlying text."""

    @abstractmethod
    def clear(self, start: int, stop: int) -> None:
        """Remove any directives from the lines ``[start, stop)``."""

    @abstractmethod
    def apply(self, plan: LayoutPlan) -> None:
        """Install the directives of a table's layout plan."""


def changed_lines(old: Sequence[str], new: Sequence[str]) -> tuple[int, int]:
    """Find the range of lines which differ between two versions of a text.

    If the number of lines has changed, every line after the first change has moved,
    so the range extends to the end of the longer text.

    Args:
        old: The previous lines
        new: The current lines

    Returns:
        The half-open range of changed line numbers

    """
    start = 0
    limit = min(len(old), len(new))
    while start < limit and old[start] == new[start]:
        start += 1
    if len(old) != len(new):
        return start, max(len(old), len(new))
    stop = len(new)
    while stop > start and old[stop - 1] == new[stop - 1]:
        stop -= 1
    return start, stop


class TableAligner:
    """Compute table layouts and pass them to a layout applier.

    No state is kept between passes: every table is laid out afresh from the text it
    is given.
    """

    def __init__(
        self,
        oracle: WidthOracle,
        applier: LayoutApplier,
        options: LayoutOptions | Callable[[], LayoutOptions] | None = None,
        classify: Callable[[Sequence[str]], IsVerbatim] = verbatim_classifier,
    ) -> None:
        """Create a new table aligner.

        Args:
            oracle: Used to measure the rendered width of text
            applier: Receives the computed layout plans
            options: The layout settings, or a callable returning them
            classify: Returns a function reporting which lines of a text lie inside
                code blocks

        """
        self.oracle = oracle
        self.applier = applier
        self._options = options or LayoutOptions()
        self.classify = classify

    @property
    def options(self) -> LayoutOptions:
        """Return the current layout settings."""
        if callable(self._options):
            return self._options()
        return self._options

    def _plan(
        self,
        lines: Sequence[str],
        table: Table,
        oracle: WidthOracle,
        options: LayoutOptions,
    ) -> LayoutPlan:
        if limit := options.max_table_size:
            size = sum(len(lines[lineno]) for lineno in table.lines)
            if size > limit:
                raise TableTooLarge(size, limit)
        rows = list(scan_rows(lines, table))
        return build_plan(table, rows, oracle, options)

    def plan_table(self, lines: Sequence[str], lineno: int) -> LayoutPlan:
        """Compute the layout of the table containing a line.

        Raises:
            NotOnTable: If the line is not part of a table
            MalformedCell: If the table contains an unterminated cell
            OracleUnavailable: If text cannot currently be measured
            TableTooLarge: If the table exceeds the maximum table size

        """
        table = locate_table(lines, lineno, self.classify(lines))
        return self._plan(lines, table, CachedOracle(self.oracle), self.options)

    def align_table(self, lines: Sequence[str], lineno: int) -> LayoutPlan:
        """Lay out the table containing a line and apply the result.

        Errors are raised to the caller, and leave the table's display unchanged.
        """
        plan = self.plan_table(lines, lineno)
        self.applier.clear(plan.table.start, plan.table.stop)
        self.applier.apply(plan)
        return plan

    def invalidate(
        self, lines: Sequence[str], start: int = 0, stop: int | None = None
    ) -> list[LayoutPlan]:
        """Re-align every table overlapping a range of lines.

        A table which cannot be aligned is skipped and keeps its previous display
        state; the other tables are still aligned. Lines in the range which are not
        part of any table have their directives removed.

        Args:
            lines: The lines of the text
            start: The first changed line
            stop: The line after the last changed line, or `None` for the end of
                the text

        Returns:
            The layout plans which were applied

        """
        if stop is None:
            stop = len(lines)
        options = self.options
        oracle = CachedOracle(self.oracle)
        is_verbatim = self.classify(lines)

        plans = []
        cleared = start
        for table in find_tables(lines, start, stop, is_verbatim):
            if cleared < table.start:
                self.applier.clear(cleared, table.start)
            cleared = max(cleared, table.stop)
            try:
                plan = self._plan(lines, table, oracle, options)
            except OracleUnavailable as error:
                log.warning("Cannot align table at lines %d-%d: %s", *table, error)
            except TableAlignError as error:
                log.debug("Not aligning table at lines %d-%d: %s", *table, error)
            else:
                self.applier.clear(table.start, table.stop)
                self.applier.apply(plan)
                plans.append(plan)
        if cleared < stop:
            self.applier.clear(cleared, stop)
        return plans

    def connect(
        self, event: Event, get_lines: Callable[[], Sequence[str]]
    ) -> Callable[[object], None]:
        """Re-align the changed tables whenever an event fires.

        Args:
            event: An event fired whenever the text changes
            get_lines: Returns the current lines of the text

        Returns:
            The handler added to the event

        """
        previous = list(get_lines())

        def _handler(sender: object) -> None:
            nonlocal previous
            lines = get_lines()
            start, stop = changed_lines(previous, lines)
            previous = list(lines)
            if start < stop:
                # Include neighbouring lines, as tables either side may have split
                self.invalidate(lines, max(start - 1, 0), stop + 1)

        event += _handler
        return _handler
