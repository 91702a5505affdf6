from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable

from contracts.geometry import Fragment, Rect
from contracts.reading import Line

from .errors import PageOrderViolation, require_page_width

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _LineBuilder:
    fragments: tuple[Fragment, ...]
    rect: Rect

    def seal(self) -> Line:
        return Line(rect=self.rect, fragments=self.fragments)


# Sentinel line before any fragment arrives; never emitted.
_NO_LINE = _LineBuilder(fragments=(), rect=Rect.empty())


@dataclass(frozen=True, slots=True)
class _GroupingState:
    # Lookback only: the previous fragment's edges and the running page index.
    last_bottom: float = -math.inf
    last_left: float = -math.inf
    last_page_index: int = 0
    current: _LineBuilder = _NO_LINE


@dataclass(slots=True)
class GroupingStats:
    fragments: int = 0
    new_line_conditions: int = 0
    page_crossings: int = 0
    degenerate_fragment_indexes: list[int] = field(default_factory=list)


def _starts_new_line(state: _GroupingState, rect: Rect, on_next_page: bool) -> bool:
    # A left edge that does not advance means reading order wrapped; a top edge at or
    # below the previous bottom means vertical displacement. Lines never span pages.
    return rect.left <= state.last_left or rect.top >= state.last_bottom or on_next_page


def _step(
    state: _GroupingState,
    index: int,
    frag: Fragment,
    *,
    page_width: float,
    page_offset_x: float,
    sealed: list[Line],
    stats: GroupingStats,
) -> _GroupingState:
    rect = frag.rect
    page_index = rect.page_index(page_width=page_width, page_offset_x=page_offset_x)
    if page_index < state.last_page_index:
        raise PageOrderViolation(
            f"fragment {index} is on page {page_index} after page {state.last_page_index} was reached",
            detail={"fragment_index": index, "page_index": page_index, "last_page_index": state.last_page_index},
        )

    on_next_page = page_index > state.last_page_index
    if rect.is_degenerate():
        stats.degenerate_fragment_indexes.append(index)

    if _starts_new_line(state, rect, on_next_page):
        stats.new_line_conditions += 1
        if state.current.fragments:
            sealed.append(state.current.seal())
        current = _LineBuilder(fragments=(frag,), rect=rect)
    else:
        old = state.current
        current = _LineBuilder(fragments=old.fragments + (frag,), rect=old.rect.union(rect))

    if on_next_page:
        stats.page_crossings += 1

    return _GroupingState(
        last_bottom=rect.bottom,
        last_left=rect.left,
        # Exactly one page per fragment, even if the fragment skipped a vacant page.
        last_page_index=state.last_page_index + 1 if on_next_page else state.last_page_index,
        current=current,
    )


def group_lines_with_stats(
    fragments: Iterable[Fragment],
    page_width: float,
    page_offset_x: float = 0.0,
) -> tuple[list[Line], GroupingStats]:
    """
    Single forward pass over fragments in document traversal order.

    Fragments are never re-sorted. Raises `InvalidPageWidth` for page_width <= 0 and
    `PageOrderViolation` if a fragment lands on an earlier page than one already reached.
    """

    require_page_width(page_width)

    sealed: list[Line] = []
    stats = GroupingStats()
    state = _GroupingState()

    for i, frag in enumerate(fragments):
        state = _step(
            state,
            i,
            frag,
            page_width=page_width,
            page_offset_x=page_offset_x,
            sealed=sealed,
            stats=stats,
        )
        stats.fragments += 1

    # Remaining work-in-progress becomes the final line.
    if state.current.fragments:
        sealed.append(state.current.seal())

    logger.debug(
        "grouped %d fragments into %d lines (%d page crossings)",
        stats.fragments,
        len(sealed),
        stats.page_crossings,
    )
    return sealed, stats


def group_lines(fragments: Iterable[Fragment], page_width: float, page_offset_x: float = 0.0) -> list[Line]:
    lines, _stats = group_lines_with_stats(fragments, page_width, page_offset_x)
    return lines
