"""Test displaying table layouts in buffer controls."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text.utils import fragment_list_to_text
from prompt_toolkit.layout.controls import BufferControl
from prompt_toolkit.layout.processors import TransformationInput
from prompt_toolkit.utils import get_cwidth

from pipealign.core.data_structures import SeparatorStyle, TableStyle
from pipealign.core.engine import TableAligner
from pipealign.core.oracle import CellWidthOracle
from pipealign.core.plan import LayoutOptions
from pipealign.core.processors import (
    FANCY_BAR,
    ProcessorApplier,
    TableAlignProcessor,
    stretch_fragments,
)

if TYPE_CHECKING:
    from collections.abc import Sequence


def _align(
    lines: Sequence[str], options: LayoutOptions | None = None
) -> ProcessorApplier:
    applier = ProcessorApplier()
    TableAligner(CellWidthOracle(), applier, options).invalidate(lines)
    return applier


def _display(
    lines: Sequence[str],
    fancy_bar: bool = False,
    options: LayoutOptions | None = None,
) -> list[str]:
    applier = _align(lines, options)
    output = []
    for lineno, line in enumerate(lines):
        fragments, _ = stretch_fragments(
            [("", line)], applier.rows[lineno], fancy_bar=fancy_bar
        )
        output.append(fragment_list_to_text(fragments))
    return output


def _bar_columns(line: str, bars: str = "|") -> list[int]:
    return [get_cwidth(line[:i]) for i, char in enumerate(line) if char in bars]


def test_stretch_fragments() -> None:
    """Cell padding is stretched so that the columns line up."""
    assert _display(["| a | bb |", "| ccc | d |"]) == [
        "| a   | bb |",
        "| ccc | d  |",
    ]


def test_stretch_wide_characters() -> None:
    """Bars line up on screen when cells contain wide characters."""
    lines = ["| 中文 | x |", "| abc | yy |", "|---|---|"]
    display = _display(lines)
    columns = [_bar_columns(line) for line in display]
    assert columns[0] == columns[1] == columns[2]
    assert display[2] == "|------|----|"


def test_stretch_fragments_fancy_bar() -> None:
    """Bars and rules are drawn with box drawing characters."""
    display = _display(["| a | b |", "|---+---|"], fancy_bar=True)
    assert display[0] == "│ a │ b │"
    assert display[1] == "│───+───│"


@pytest.mark.parametrize(
    "separator_style", [SeparatorStyle.MULTI_COLUMN, SeparatorStyle.SINGLE_COLUMN]
)
@pytest.mark.parametrize(
    "style, lines",
    [
        (
            TableStyle.MARKDOWN,
            ["| a | b |", "|---|--:|", "| c | ddd |"],
        ),
        (
            TableStyle.ORG,
            ["|   1 | x |", "|-----+---|", "|  22 | y |", "| 333 | z |"],
        ),
    ],
)
def test_stretch_right_aligned(
    style: TableStyle, lines: list[str], separator_style: SeparatorStyle
) -> None:
    """Bars of right aligned columns line up with the separator row."""
    options = LayoutOptions(style=style, separator_style=separator_style)
    display = _display(lines, options=options)
    data = [_bar_columns(line) for i, line in enumerate(display) if i != 1]
    rule = _bar_columns(display[1], bars="|+")
    assert all(columns == data[0] for columns in data)
    if separator_style is SeparatorStyle.MULTI_COLUMN:
        assert rule == data[0]
    else:
        assert rule == [data[0][0], data[0][-1]]


def test_stretch_right_aligned_markdown() -> None:
    """Right aligned content ends one space before the closing bar."""
    assert _display(["| a | b |", "|---|--:|", "| c | ddd |"]) == [
        "| a |   b |",
        "|---|----:|",
        "| c | ddd |",
    ]


def test_stretch_right_aligned_org() -> None:
    """Right aligned Org columns keep the padding of the next column."""
    options = LayoutOptions(style=TableStyle.ORG)
    lines = ["|  1 | x |", "|----+---|", "| 22 | y |"]
    assert _display(lines, options=options) == [
        "|  1 | x |",
        "|----+---|",
        "| 22 | y |",
    ]


def test_stretch_fragments_styles() -> None:
    """Padding and rules are styled."""
    lines = ["| a | bb |", "|-|-|"]
    applier = _align(lines)
    fragments, _ = stretch_fragments([("class:x", lines[1])], applier.rows[1])
    assert ("class:x class:table.rule", "---") in fragments


def test_position_mappings() -> None:
    """Source positions map to the start of their stretched display spans."""
    line = "| a | bb |"
    applier = _align([line, "| ccc | d |"])
    _, mappings = stretch_fragments([("", line)], applier.rows[0])
    # Characters before the first stretched span do not move
    assert [mappings[i] for i in range(4)] == [0, 1, 2, 3]
    # The stretched span takes three cells, so the bar moves two cells right
    assert mappings[4] == 6
    assert mappings[len(line)] == len(line) + 2


@pytest.fixture
def processor_input() -> TransformationInput:
    """Return a transformation input for the first line of a table."""
    document = Document("| a | bb |\n| ccc | d |")
    return TransformationInput(
        buffer_control=BufferControl(),
        document=document,
        lineno=0,
        source_to_display=lambda i: i,
        fragments=[("", document.lines[0])],
        width=80,
        height=24,
    )


def test_processor(processor_input: TransformationInput) -> None:
    """The processor displays the aligned row."""
    applier = _align(processor_input.document.lines)
    transformation = TableAlignProcessor(applier).apply_transformation(
        processor_input
    )
    assert fragment_list_to_text(transformation.fragments) == "| a   | bb |"
    assert transformation.source_to_display(4) == 6
    assert transformation.display_to_source(6) == 4
    # Display positions inside stretched padding map back to its start
    assert transformation.display_to_source(5) == 3


def test_processor_fancy_bar(processor_input: TransformationInput) -> None:
    """The processor uses box drawing bars when the filter is true."""
    applier = _align(processor_input.document.lines)
    transformation = TableAlignProcessor(
        applier, fancy_bar=True
    ).apply_transformation(processor_input)
    assert fragment_list_to_text(transformation.fragments).startswith(FANCY_BAR)


def test_processor_ignores_stale_layout(
    processor_input: TransformationInput,
) -> None:
    """Layouts computed for different text are not displayed."""
    applier = _align(["| a | bbbbbb |", "| ccc | d |"])
    transformation = TableAlignProcessor(applier).apply_transformation(
        processor_input
    )
    assert transformation.fragments == processor_input.fragments


def test_processor_without_layout(processor_input: TransformationInput) -> None:
    """Lines without a layout are displayed unchanged."""
    transformation = TableAlignProcessor(ProcessorApplier()).apply_transformation(
        processor_input
    )
    assert transformation.fragments == processor_input.fragments


def test_applier_clear() -> None:
    """Clearing a range removes the layouts of its lines and fires an event."""
    lines = ["| a |", "", "| b |"]
    applier = _align(lines)
    assert set(applier.rows) == {0, 2}
    fired: list[ProcessorApplier] = []
    applier.on_change += fired.append
    applier.clear(1, 3)
    assert set(applier.rows) == {0}
    assert fired == [applier]


def test_unaligned_lines_untouched() -> None:
    """Lines outside tables are not given layouts."""
    applier = _align(["text", "| a |"])
    assert 0 not in applier.rows
    assert 1 in applier.rows
