"""Measure the rendered width of text."""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from functools import partial
from typing import TYPE_CHECKING

from prompt_toolkit.cache import SimpleCache
from prompt_toolkit.filters.utils import to_filter
from prompt_toolkit.utils import get_cwidth

from pipealign.core.errors import OracleUnavailable

if TYPE_CHECKING:
    from prompt_toolkit.filters.base import FilterOrBool

log = logging.getLogger(__name__)


class WidthOracle(metaclass=ABCMeta):
    """Report the width text will take up when rendered.

    Measurement may depend on a live rendering surface, so it is only permitted
    while the oracle's ``available`` filter is true.
    """

    def __init__(self, available: FilterOrBool = True) -> None:
        """Create a new oracle.

        Args:
            available: A filter which is true while text can be measured

        """
        self.available = to_filter(available)

    def measure(self, text: str) -> float:
        """Return the rendered width of ``text``.

        Args:
            text: The text to measure

        Returns:
            The width of the text in display units

        Raises:
            OracleUnavailable: If no rendering context is available

        """
        if not self.available():
            raise OracleUnavailable(text)
        return self._measure(text)

    @abstractmethod
    def _measure(self, text: str) -> float:
        """Measure text, assuming a rendering context is available."""


class CellWidthOracle(WidthOracle):
    """Measure text in terminal cells.

    Wide characters, such as CJK ideographs, take up two cells.
    """

    def __init__(self, scale: float = 1, available: FilterOrBool = True) -> None:
        """Create a new oracle which counts each cell as ``scale`` units."""
        super().__init__(available=available)
        self.scale = scale

    def _measure(self, text: str) -> float:
        return get_cwidth(text) * self.scale


class CachedOracle(WidthOracle):
    """Measure each distinct piece of text only once.

    Wraps another oracle for the duration of a single layout pass.
    """

    def __init__(self, oracle: WidthOracle, size: int = 4096) -> None:
        """Create a new caching wrapper around ``oracle``."""
        super().__init__(available=oracle.available)
        self.oracle = oracle
        self._cache: SimpleCache[str, float] = SimpleCache(maxsize=size)

    def _measure(self, text: str) -> float:
        return self._cache.get(text, partial(self.oracle.measure, text))
