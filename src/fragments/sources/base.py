from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from contracts.geometry import Fragment, LayoutSnapshot


class FragmentSourceConsumed(RuntimeError):
    pass


class GeometryProvider(ABC):
    """
    Point-in-time layout queries for a horizontally paginated surface.

    Values are treated as snapshots; if they change during a pass the pass is invalid.
    """

    @abstractmethod
    def page_width(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def scroll_offset_x(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def total_width(self) -> float:
        raise NotImplementedError

    def snapshot(self) -> LayoutSnapshot:
        return LayoutSnapshot(
            page_width=float(self.page_width()),
            scroll_offset_x=float(self.scroll_offset_x()),
            total_width=float(self.total_width()),
        )


class FragmentSource(ABC):
    """
    One-shot producer of word fragments in document traversal order.

    Implementations provide `_produce()`; `fragments()` enforces the single call.
    Sources must not emit whitespace-only fragments.
    """

    _consumed: bool = False

    def source_id(self) -> str:
        return type(self).__name__

    def fragments(self) -> list[Fragment]:
        if self._consumed:
            raise FragmentSourceConsumed(f"{self.source_id()} has already produced its fragments")
        self._consumed = True
        return list(self._produce())

    @abstractmethod
    def _produce(self) -> list[Fragment]:
        raise NotImplementedError

    def meta(self) -> dict[str, Any]:
        return {"source": self.source_id()}

    def close(self) -> None:
        """Release backend handles; safe to call more than once."""

    def __enter__(self) -> "FragmentSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
