from __future__ import annotations

from typing import Any


class ReadingStructureError(Exception):
    """
    Fatal precondition or input-validity violation during analysis.

    There is no recovery inside the pass; callers decide whether to re-run
    after the environment stabilizes.
    """

    code = "READING_STRUCTURE_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.detail = detail


class InvalidPageWidth(ReadingStructureError):
    code = "INVALID_PAGE_WIDTH"


class PageOrderViolation(ReadingStructureError):
    code = "PAGE_ORDER_VIOLATION"


class PageOutOfRange(ReadingStructureError):
    code = "PAGE_OUT_OF_RANGE"


class GeometryChanged(ReadingStructureError):
    code = "GEOMETRY_CHANGED"


def require_page_width(page_width: float) -> None:
    if not page_width > 0:
        raise InvalidPageWidth(f"page width must be > 0, got {page_width!r}", detail={"page_width": page_width})
