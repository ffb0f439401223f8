"""A text editor which displays tables aligned."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from prompt_toolkit.application.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding.key_bindings import KeyBindings
from prompt_toolkit.layout.containers import HSplit, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.lexers.pygments import PygmentsLexer

from pipealign.core.engine import TableAligner
from pipealign.core.oracle import CellWidthOracle
from pipealign.core.plan import LayoutOptions
from pipealign.core.processors import ProcessorApplier, TableAlignProcessor
from pipealign.core.style import build_style

if TYPE_CHECKING:
    from typing import Any

    from prompt_toolkit.formatted_text.base import StyleAndTextTuples
    from prompt_toolkit.key_binding.key_processor import KeyPressEvent


log = logging.getLogger(__name__)

# Settings which change the layout of tables when they are changed
LAYOUT_SETTINGS = (
    "table_style",
    "separator_style",
    "fixed_pad",
    "space_width",
    "fancy_bar",
    "max_table_size",
)


class EditApp:
    """Edit a single file, aligning its tables as it changes."""

    name = "edit"

    def __init__(self, config: Any, path: Path | None = None) -> None:
        """Create a new editor for the file at ``path``."""
        self.config = config
        self.path = Path(path) if path is not None else None
        text = ""
        if self.path is not None and self.path.exists():
            text = self.path.read_text()
        self.buffer = Buffer(document=Document(text, 0), multiline=True)

        self.applier = ProcessorApplier()
        self.oracle = CellWidthOracle()
        self.aligner = TableAligner(self.oracle, self.applier, self.layout_options)
        self.aligner.connect(self.buffer.on_text_changed, self.get_lines)
        self.aligner.invalidate(self.get_lines())
        for name in LAYOUT_SETTINGS:
            getattr(config.events, name).add_handler(self.realign)

        self.app = Application(
            layout=Layout(HSplit([self.load_editor(), self.load_status_bar()])),
            key_bindings=self.load_key_bindings(),
            style=build_style(),
            full_screen=True,
            mouse_support=True,
            include_default_pygments_style=False,
        )
        self.applier.on_change += lambda sender: self.app.invalidate()

    def get_lines(self) -> list[str]:
        """Return the current lines of the buffer."""
        return self.buffer.document.lines

    def layout_options(self) -> LayoutOptions:
        """Return the layout settings for the file being edited."""
        return LayoutOptions.from_config(
            self.config, self.path.suffix if self.path is not None else ""
        )

    def realign(self, sender: object = None) -> None:
        """Re-align every table in the buffer."""
        self.aligner.invalidate(self.get_lines())

    def load_editor(self) -> Window:
        """Create the window displaying the buffer."""
        lexer = (
            PygmentsLexer.from_filename(str(self.path), sync_from_start=False)
            if self.path is not None
            else None
        )
        return Window(
            BufferControl(
                self.buffer,
                lexer=lexer,
                input_processors=[
                    TableAlignProcessor(
                        self.applier,
                        fancy_bar=self.config.filters.fancy_bar,
                    )
                ],
            ),
            wrap_lines=False,
        )

    def status(self) -> StyleAndTextTuples:
        """Describe the file and the available commands."""
        row = self.buffer.document.cursor_position_row
        col = self.buffer.document.cursor_position_col
        return [
            ("class:status", f" {self.path or '[new file]'} "),
            ("class:status", f"{row + 1}:{col + 1}  "),
            ("class:status.key", "^S"),
            ("class:status", " save  "),
            ("class:status.key", "F2"),
            ("class:status", " separators  "),
            ("class:status.key", "F3"),
            ("class:status", " bars  "),
            ("class:status.key", "^Q"),
            ("class:status", " quit "),
        ]

    def load_status_bar(self) -> Window:
        """Create the status bar."""
        return Window(
            FormattedTextControl(self.status), height=1, style="class:status"
        )

    def load_key_bindings(self) -> KeyBindings:
        """Create the editor's key bindings."""
        kb = KeyBindings()

        @kb.add("c-s")
        def _save(event: KeyPressEvent) -> None:
            """Save the buffer."""
            self.save()

        @kb.add("c-q")
        def _quit(event: KeyPressEvent) -> None:
            """Exit the editor."""
            event.app.exit()

        @kb.add("f2")
        def _switch_separator_style(event: KeyPressEvent) -> None:
            """Switch how separator rows are drawn."""
            self.config.toggle("separator_style")

        @kb.add("f3")
        def _toggle_fancy_bar(event: KeyPressEvent) -> None:
            """Toggle full-height table bars."""
            self.config.toggle("fancy_bar")

        return kb

    def save(self) -> None:
        """Write the buffer to its file."""
        if self.path is None:
            log.warning("Cannot save: no file name given")
            return
        self.path.write_text(self.buffer.text)
        log.info("Saved `%s`", self.path)

    def run(self) -> None:
        """Run the editor until it is closed."""
        self.app.run()
