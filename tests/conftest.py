"""Shared fixtures for the table layout tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pipealign.core.engine import LayoutApplier
from pipealign.core.oracle import WidthOracle

if TYPE_CHECKING:
    from pipealign.core.data_structures import LayoutPlan


class GlyphOracle(WidthOracle):
    """Measure every character as ten units wide, counting each call."""

    def __init__(self, available: bool = True) -> None:
        """Create a new oracle."""
        super().__init__(available=available)
        self.calls: list[str] = []

    def _measure(self, text: str) -> float:
        self.calls.append(text)
        return len(text) * 10


class RecordingApplier(LayoutApplier):
    """Record the directives passed to an applier."""

    def __init__(self) -> None:
        """Create a new recording applier."""
        self.calls: list[tuple] = []

    def clear(self, start: int, stop: int) -> None:
        """Record the cleared range."""
        self.calls.append(("clear", start, stop))

    def apply(self, plan: LayoutPlan) -> None:
        """Record the applied plan."""
        self.calls.append(("apply", plan))

    @property
    def plans(self) -> list[LayoutPlan]:
        """Return the applied plans."""
        return [call[1] for call in self.calls if call[0] == "apply"]


@pytest.fixture
def oracle() -> GlyphOracle:
    """Return an oracle measuring ten units per character."""
    return GlyphOracle()


@pytest.fixture
def applier() -> RecordingApplier:
    """Return an applier which records what it is asked to do."""
    return RecordingApplier()
