"""Style related functions."""

from __future__ import annotations

import logging
from functools import cache
from typing import TYPE_CHECKING

from prompt_toolkit.styles.pygments import style_from_pygments_cls
from prompt_toolkit.styles.style import Style, merge_styles
from pygments.styles import get_style_by_name as pyg_get_style_by_name

if TYPE_CHECKING:
    from prompt_toolkit.styles.base import BaseStyle
    from pygments.style import Style as PygmentsStyle


log = logging.getLogger(__name__)


LOG_STYLE = [
    ("log.level.nonset", "fg:ansigray"),
    ("log.level.debug", "fg:ansigreen"),
    ("log.level.info", "fg:ansiblue"),
    ("log.level.warning", "fg:ansiyellow"),
    ("log.level.error", "fg:ansired"),
    ("log.level.critical", "fg:ansiwhite bg:ansired bold"),
    ("log.ref", "fg:grey"),
    ("log.date", "fg:#00875f"),
]


TABLE_STYLE = [
    ("table.bar", "fg:ansigray"),
    ("table.rule", "fg:ansigray"),
    ("status", "reverse"),
    ("status.key", "bold"),
]


@cache
def get_style_by_name(name: str) -> type[PygmentsStyle]:
    """Get Pygments style, caching the result."""
    return pyg_get_style_by_name(name)


def build_style(syntax_theme: str = "default") -> BaseStyle:
    """Combine the syntax highlighting theme with pipealign's own styles."""
    return merge_styles(
        [
            style_from_pygments_cls(get_style_by_name(syntax_theme)),
            Style(LOG_STYLE),
            Style(TABLE_STYLE),
        ]
    )
