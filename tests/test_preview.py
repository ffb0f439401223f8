"""Test printing files with aligned tables."""

from __future__ import annotations

import io
import logging
from types import SimpleNamespace
from typing import TYPE_CHECKING

from prompt_toolkit.formatted_text.utils import fragment_list_to_text

from pipealign.core.plan import LayoutOptions
from pipealign.preview.app import PreviewApp, format_lines

if TYPE_CHECKING:
    from pathlib import Path

    import pytest

TEXT = """\
Some text

| a | bb |
|---|---|
| ccc | d |
"""


def test_format_lines() -> None:
    """Tables are aligned and other lines are left alone."""
    output = fragment_list_to_text(format_lines(TEXT.splitlines()))
    assert output == (
        "Some text\n"
        "\n"
        "| a   | bb |\n"
        "|-----|----|\n"
        "| ccc | d  |\n"
    )


def test_format_lines_options() -> None:
    """Layout options change how the tables are drawn."""
    options = LayoutOptions(fancy_bar=True, pad=2)
    output = fragment_list_to_text(format_lines(["| a |", "| bb |"], options))
    assert output == "│ a   │\n│ bb  │\n"


def test_format_lines_malformed() -> None:
    """Malformed tables are printed unaligned."""
    lines = ["| a | b", "| ccc | d |"]
    assert fragment_list_to_text(format_lines(lines)) == "| a | b\n| ccc | d |\n"


def _config(*files: Path) -> SimpleNamespace:
    return SimpleNamespace(
        files=list(files),
        table_style="auto",
        separator_style="multi-column",
        fixed_pad=1,
        space_width=0.0,
        fancy_bar=False,
        max_table_size=0,
    )


def test_preview_app(tmp_path: Path) -> None:
    """Each file is printed with its tables aligned."""
    path = tmp_path / "notes.md"
    path.write_text(TEXT)
    output = io.StringIO()
    PreviewApp(_config(path), output=output).run()
    assert "| a   | bb |\n" in output.getvalue()
    assert "| ccc | d  |\n" in output.getvalue()


def test_preview_app_missing_file(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Files which cannot be read are reported and skipped."""
    path = tmp_path / "notes.md"
    path.write_text("| x |\n")
    output = io.StringIO()
    with caplog.at_level(logging.ERROR):
        PreviewApp(_config(tmp_path / "missing.md", path), output=output).run()
    assert "Could not read file" in caplog.text
    assert "| x |" in output.getvalue()
