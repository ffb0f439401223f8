"""Print files with their tables aligned."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from prompt_toolkit.formatted_text.base import FormattedText
from prompt_toolkit.shortcuts.utils import print_formatted_text

from pipealign.core.engine import TableAligner
from pipealign.core.oracle import CellWidthOracle
from pipealign.core.plan import LayoutOptions
from pipealign.core.processors import ProcessorApplier, stretch_fragments
from pipealign.core.style import build_style

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import Any, TextIO

    from prompt_toolkit.formatted_text.base import StyleAndTextTuples


log = logging.getLogger(__name__)


def format_lines(
    lines: Sequence[str], options: LayoutOptions | None = None
) -> StyleAndTextTuples:
    """Return formatted text displaying the lines with their tables aligned.

    Args:
        lines: The lines of the text
        options: The layout settings

    Returns:
        The aligned text

    """
    options = options or LayoutOptions()
    applier = ProcessorApplier()
    TableAligner(CellWidthOracle(), applier, options).invalidate(lines)

    output: StyleAndTextTuples = []
    for lineno, line in enumerate(lines):
        fragments: StyleAndTextTuples = [("", line)]
        if (row := applier.rows.get(lineno)) is not None:
            fragments, _ = stretch_fragments(
                fragments, row, fancy_bar=options.fancy_bar
            )
        output += fragments
        output.append(("", "\n"))
    return output


class PreviewApp:
    """Preview app.

    Writes each file given in the configuration to the standard output, with its
    tables aligned.
    """

    name = "preview"

    def __init__(self, config: Any, output: TextIO | None = None) -> None:
        """Create a new preview app."""
        self.config = config
        self.output = output

    def run(self) -> None:
        """Print every configured file."""
        style = build_style()
        for path in self.config.files:
            path = Path(path)
            try:
                text = path.read_text()
            except OSError:
                log.exception("Could not read file `%s`", path)
                continue
            options = LayoutOptions.from_config(self.config, path.suffix)
            print_formatted_text(
                FormattedText(format_lines(text.splitlines(), options)),
                end="",
                style=style,
                file=self.output,
                include_default_pygments_style=False,
            )
