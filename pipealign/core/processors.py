"""Display table layout plans in prompt_toolkit buffer controls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prompt_toolkit.filters.utils import to_filter
from prompt_toolkit.layout.processors import Processor, Transformation
from prompt_toolkit.layout.utils import explode_text_fragments
from prompt_toolkit.utils import Event, get_cwidth

from pipealign.core.engine import LayoutApplier

if TYPE_CHECKING:
    from prompt_toolkit.filters.base import FilterOrBool
    from prompt_toolkit.formatted_text.base import StyleAndTextTuples
    from prompt_toolkit.layout.processors import TransformationInput

    from pipealign.core.data_structures import LayoutPlan, RowPlan

log = logging.getLogger(__name__)

FANCY_BAR = "│"
RULE = "-"
FANCY_RULE = "─"


def stretch_fragments(
    fragments: StyleAndTextTuples,
    row: RowPlan,
    fancy_bar: bool = False,
    style: str = "class:table",
) -> tuple[StyleAndTextTuples, dict[int, int]]:
    """Apply a row's layout directives to a line of formatted text.

    Each directive's span is replaced by enough padding for its right edge to reach
    the directive's target. The source text is not modified: the returned mapping
    relates each source character position to a display position.

    Args:
        fragments: The fragments of the line, one character per source position
        row: The layout plan of the row being displayed
        fancy_bar: If set, bars are displayed as full-height box drawing characters
        style: The style to apply to the table's padding and rules

    Returns:
        A tuple of the transformed fragments and the position mapping

    """
    fragments = explode_text_fragments(fragments)
    directives = {directive.start: directive for directive in row.directives}
    bars = set(row.bars) if fancy_bar else set()
    rule = FANCY_RULE if fancy_bar else RULE

    position_mappings: dict[int, int] = {}
    result: StyleAndTextTuples = []
    # The position in the display text, and its width in cells
    pos = 0
    x = 0
    i = 0
    while i < len(fragments):
        frag_style, text, *rest = fragments[i]
        position_mappings[i] = pos
        if (directive := directives.get(i)) is not None:
            count = max(0, round(row.origin + directive.target - x))
            if directive.separator:
                result.append((f"{frag_style} {style}.rule", rule * count))
            else:
                result.append((f"{frag_style} {style}.padding", " " * count))
            for j in range(i + 1, directive.end):
                position_mappings[j] = pos + min(j - i, count)
            pos += count
            x += count
            i = max(directive.end, i + 1)
            continue
        if i in bars:
            text = FANCY_BAR
            frag_style = f"{frag_style} {style}.bar"
        result.append((frag_style, text, *rest))
        pos += len(text)
        x += get_cwidth(text)
        i += 1
    position_mappings[len(fragments)] = pos
    position_mappings[len(fragments) + 1] = pos + 1
    return result, position_mappings


class ProcessorApplier(LayoutApplier):
    """Store layout plans by line for display by a :py:class:`TableAlignProcessor`."""

    def __init__(self) -> None:
        """Create a new empty store."""
        self.rows: dict[int, RowPlan] = {}
        self.on_change = Event(self)

    def clear(self, start: int, stop: int) -> None:
        """Forget the layout of the lines ``[start, stop)``."""
        for lineno in [lineno for lineno in self.rows if start <= lineno < stop]:
            del self.rows[lineno]
        self.on_change.fire()

    def apply(self, plan: LayoutPlan) -> None:
        """Store the layout of each row of a table."""
        for row in plan.rows:
            self.rows[row.lineno] = row
        self.on_change.fire()


class TableAlignProcessor(Processor):
    """Stretch the padding of table cells so that their columns line up."""

    def __init__(
        self,
        applier: ProcessorApplier,
        fancy_bar: FilterOrBool = False,
        style: str = "class:table",
    ) -> None:
        """Create a new processor instance.

        Args:
            applier: The store of layout plans to display
            fancy_bar: Whether to display bars as full-height box drawing characters
            style: The style to apply to table padding, rules and bars

        """
        self.applier = applier
        self.fancy_bar = to_filter(fancy_bar)
        self.style = style

    def apply_transformation(self, ti: TransformationInput) -> Transformation:
        """Replace the padding of a table row with aligned padding."""
        row = self.applier.rows.get(ti.lineno)
        lines = ti.document.lines
        # Ignore layouts computed for text which has since changed
        if row is None or ti.lineno >= len(lines) or lines[ti.lineno] != row.text:
            return Transformation(ti.fragments)

        fragments, position_mappings = stretch_fragments(
            ti.fragments, row, fancy_bar=self.fancy_bar(), style=self.style
        )
        end = len(row.text) + 1

        def source_to_display(from_position: int) -> int:
            """Map a source position to its position in the aligned line."""
            if from_position in position_mappings:
                return position_mappings[from_position]
            return from_position - end + position_mappings[end]

        def display_to_source(display_pos: int) -> int:
            """Map a position in the aligned line to its source position."""
            position_mappings_reversed = {v: k for k, v in position_mappings.items()}
            while display_pos >= 0:
                try:
                    return position_mappings_reversed[display_pos]
                except KeyError:
                    display_pos -= 1
            return 0

        return Transformation(
            fragments,
            source_to_display=source_to_display,
            display_to_source=display_to_source,
        )
