from __future__ import annotations

from typing import Iterable

from contracts.geometry import Fragment

from .base import FragmentSource, GeometryProvider


class StaticFragmentSource(FragmentSource, GeometryProvider):
    """In-memory fragments and fixed layout values."""

    def __init__(
        self,
        fragments: Iterable[Fragment],
        *,
        page_width: float,
        total_width: float,
        scroll_offset_x: float = 0.0,
    ) -> None:
        self._fragments = list(fragments)
        self._page_width = page_width
        self._scroll_offset_x = scroll_offset_x
        self._total_width = total_width

    def _produce(self) -> list[Fragment]:
        return list(self._fragments)

    def page_width(self) -> float:
        return self._page_width

    def scroll_offset_x(self) -> float:
        return self._scroll_offset_x

    def total_width(self) -> float:
        return self._total_width
