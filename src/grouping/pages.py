from __future__ import annotations

import math
from typing import Iterable

from contracts.reading import Line, Page

from .errors import PageOutOfRange, require_page_width


def total_page_count(total_width: float, page_width: float) -> int:
    """
    Pages spanned by the scrollable extent. Rounds up in case pagination
    leaves a fractional last page.
    """

    require_page_width(page_width)
    if total_width < 0:
        raise ValueError("total_width must be >= 0")
    return int(math.ceil(total_width / page_width))


def assign_pages(
    lines: Iterable[Line],
    total_page_count: int,
    *,
    page_width: float,
    page_offset_x: float = 0.0,
) -> list[Page]:
    """
    Bucket lines onto a dense page sequence of exactly `total_page_count` pages.

    Page index comes from each line's absolute rect, with the same formula used
    while grouping. Pages with no lines are still present.
    """

    require_page_width(page_width)
    if total_page_count < 0:
        raise ValueError("total_page_count must be >= 0")

    buckets: list[list[Line]] = [[] for _ in range(total_page_count)]
    for i, line in enumerate(lines):
        idx = line.rect.page_index(page_width=page_width, page_offset_x=page_offset_x)
        if not (0 <= idx < total_page_count):
            raise PageOutOfRange(
                f"line {i} resolves to page {idx}, document has {total_page_count} pages",
                detail={"line_index": i, "page_index": idx, "total_page_count": total_page_count},
            )
        buckets[idx].append(line)

    return [Page(page_index=i, lines=tuple(ls)) for i, ls in enumerate(buckets)]


def to_page_relative(pages: Iterable[Page], page_width: float) -> list[Page]:
    """
    Rewrite line rects with horizontal coordinates modulo page width.

    Only valid after page assignment: the page number is lost in the conversion.
    """

    require_page_width(page_width)
    return [
        Page(
            page_index=p.page_index,
            lines=tuple(l.with_rect(l.rect.to_page_relative(page_width)) for l in p.lines),
        )
        for p in pages
    ]
