from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Axis-aligned rectangle, normalized (left <= right, top <= bottom) when absolute.
    A page-relative rect may end on the next page boundary and then has right == 0.

    Coordinates are either document-absolute or page-relative; the type does not
    record which. Page-relative rects cannot be converted back without the page index.
    """

    left: float
    top: float
    right: float
    bottom: float

    @staticmethod
    def from_edges(left: float, top: float, right: float, bottom: float) -> "Rect":
        # Swapped endpoints are normalized, never rejected.
        x0, x1 = (left, right) if left <= right else (right, left)
        y0, y1 = (top, bottom) if top <= bottom else (bottom, top)
        return Rect(left=float(x0), top=float(y0), right=float(x1), bottom=float(y1))

    @staticmethod
    def empty() -> "Rect":
        return Rect(left=math.inf, top=math.inf, right=-math.inf, bottom=-math.inf)

    def is_empty(self) -> bool:
        return self.left > self.right or self.top > self.bottom

    def width(self) -> float:
        return self.right - self.left

    def height(self) -> float:
        return self.bottom - self.top

    def is_degenerate(self) -> bool:
        return self.width() <= 0 or self.height() <= 0

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            left=min(self.left, other.left),
            top=min(self.top, other.top),
            right=max(self.right, other.right),
            bottom=max(self.bottom, other.bottom),
        )

    def page_index(self, *, page_width: float, page_offset_x: float = 0.0) -> int:
        # Index of the page on which the rect begins, counted from the document start.
        return math.floor((self.left + page_offset_x) / page_width)

    def to_page_relative(self, page_width: float) -> "Rect":
        return Rect(
            left=self.left % page_width,
            top=self.top,
            right=self.right % page_width,
            bottom=self.bottom,
        )

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Rect":
        # Stored as written: a page-relative right edge on a page boundary is 0 and must stay 0.
        return Rect(
            left=float(d["left"]),
            top=float(d["top"]),
            right=float(d["right"]),
            bottom=float(d["bottom"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "width": self.width(),
            "height": self.height(),
        }


@dataclass(frozen=True, slots=True)
class Fragment:
    text: str
    rect: Rect  # document-absolute

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Fragment":
        if "rect" not in d:
            raise KeyError("Fragment requires 'rect'")
        r = Rect.from_dict(d["rect"])
        # Fragment rects are always absolute, so swapped endpoints can be normalized.
        return Fragment(text=str(d.get("text", "")), rect=Rect.from_edges(r.left, r.top, r.right, r.bottom))

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "rect": self.rect.to_dict()}


@dataclass(frozen=True, slots=True)
class LayoutSnapshot:
    """Point-in-time layout values of a horizontally paginated surface."""

    page_width: float
    scroll_offset_x: float
    total_width: float

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "LayoutSnapshot":
        return LayoutSnapshot(
            page_width=float(d["page_width"]),
            scroll_offset_x=float(d.get("scroll_offset_x") or 0.0),
            total_width=float(d["total_width"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "page_width": self.page_width,
            "scroll_offset_x": self.scroll_offset_x,
            "total_width": self.total_width,
        }
