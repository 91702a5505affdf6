from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from contracts.geometry import Fragment, Rect

from ..data_access import resolve_input, sha256_file
from ..segmentation import segment_words
from .base import FragmentSource, GeometryProvider

logger = logging.getLogger(__name__)


class PageSelectionError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class PdfFragmentConfig:
    """
    Explicit inputs for reading word fragments out of a PDF.

    `data_root` must be passed in; no environment variable reads, no implicit paths.
    """

    data_root: Path
    page_selection: str | None = None  # e.g. "1,3-5"; None => all pages
    loose_char_boxes: bool = False
    compute_source_sha256: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.data_root, Path):
            raise TypeError("data_root must be pathlib.Path")


_SELECTION_ITEM = re.compile(r"^(\d+)(?:\s*-\s*(\d+))?$")


def parse_page_selection(selection: str | None, *, page_count: int) -> list[int]:
    """
    "1,3-5" -> [1, 3, 4, 5]. Page numbers are 1-indexed; the result is sorted and
    duplicate-free. None or a blank string selects every page.
    """

    if selection is None or not selection.strip():
        return list(range(1, page_count + 1))

    chosen: set[int] = set()
    for item in filter(None, (s.strip() for s in selection.split(","))):
        m = _SELECTION_ITEM.match(item)
        if m is None:
            raise PageSelectionError(f"not a page number or range: {item!r}")
        first = int(m.group(1))
        last = int(m.group(2)) if m.group(2) is not None else first
        if first < 1 or last < first:
            raise PageSelectionError(f"invalid page range: {item!r}")
        if last > page_count:
            raise PageSelectionError(f"page {last} is out of bounds (1..{page_count})")
        chosen.update(range(first, last + 1))
    return sorted(chosen)


def _require_pdfium():
    try:
        import pypdfium2 as pdfium  # type: ignore

        return pdfium
    except ImportError as e:
        raise RuntimeError("Missing dependency: pypdfium2 is required to read PDF fragments.") from e


def _open_with_pdfium(pdf_file: Path):
    return _require_pdfium().PdfDocument(str(pdf_file))


def _clip(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else hi if v > hi else v


class Pypdfium2FragmentSource(FragmentSource, GeometryProvider):
    """
    Presents selected PDF pages as one horizontally paginated strip.

    Page k of the selection occupies x in [k*W, (k+1)*W), W being the widest selected
    page, so page index arithmetic on word rects recovers k. Word rects are the union
    of their glyph boxes, flipped from PDF bottom-up into top-down coordinates and
    clipped to the page box.

    The document stays open until fragments are produced or `close()` is called;
    use the source as a context manager when the pass may fail early.
    """

    def __init__(
        self,
        config: PdfFragmentConfig,
        pdf_relpath: str,
        *,
        opener: Callable[[Path], Any] | None = None,
    ) -> None:
        self.config = config
        self.pdf_relpath = pdf_relpath
        self._pdf_file = resolve_input(data_root=config.data_root, relpath=pdf_relpath)
        self._doc = (opener or _open_with_pdfium)(self._pdf_file)
        self._closed = False
        try:
            self._page_numbers = parse_page_selection(config.page_selection, page_count=len(self._doc))
            self._page_sizes: list[tuple[float, float]] = []
            for page_num in self._page_numbers:
                page = self._doc[page_num - 1]
                try:
                    w, h = page.get_size()
                finally:
                    page.close()
                self._page_sizes.append((float(w), float(h)))
        except BaseException:
            self.close()
            raise
        self._page_width = max((w for w, _ in self._page_sizes), default=0.0)

    def source_id(self) -> str:
        return "pypdfium2"

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._doc.close()

    def page_width(self) -> float:
        return self._page_width

    def scroll_offset_x(self) -> float:
        return 0.0

    def total_width(self) -> float:
        return self._page_width * len(self._page_numbers)

    def _page_fragments(self, slot: int, page_num: int) -> list[Fragment]:
        width, height = self._page_sizes[slot]
        x_off = slot * self._page_width
        # Horizontal edges stay strictly inside the slot: x_off + width may be the next slot.
        x_max = math.nextafter(width, 0.0)

        page = self._doc[page_num - 1]
        textpage = page.get_textpage()
        try:
            n = textpage.count_chars()
            chars = [textpage.get_text_range(i, 1) for i in range(n)]

            # A char may map to zero or several code points; keep a per-code-point owner.
            owner: list[int] = []
            for i, ch in enumerate(chars):
                owner.extend([i] * len(ch))
            text = "".join(chars)

            out: list[Fragment] = []
            for span in segment_words(text):
                rect = Rect.empty()
                for ci in sorted(set(owner[span.start : span.end])):
                    l, b, r, t = textpage.get_charbox(ci, loose=self.config.loose_char_boxes)
                    rect = rect.union(
                        Rect.from_edges(
                            left=x_off + _clip(l, 0.0, x_max),
                            top=height - _clip(t, 0.0, height),
                            right=x_off + _clip(r, 0.0, x_max),
                            bottom=height - _clip(b, 0.0, height),
                        )
                    )
                out.append(Fragment(text=span.text, rect=rect))
            return out
        finally:
            textpage.close()
            page.close()

    def _produce(self) -> list[Fragment]:
        fragments: list[Fragment] = []
        try:
            for slot, page_num in enumerate(self._page_numbers):
                page_frags = self._page_fragments(slot, page_num)
                logger.debug("pdf page %d: %d word fragments", page_num, len(page_frags))
                fragments.extend(page_frags)
        finally:
            self.close()
        return fragments

    def backend_version(self) -> str | None:
        try:
            return getattr(_require_pdfium(), "__version__", None)
        except RuntimeError:
            return None

    def meta(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "source": self.source_id(),
            "source_relpath": self.pdf_relpath.replace("\\", "/"),
            "page_numbers": list(self._page_numbers),
            "backend_version": self.backend_version(),
        }
        if self.config.compute_source_sha256:
            out["source_sha256"] = sha256_file(self._pdf_file)
        return out
