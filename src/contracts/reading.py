from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .geometry import Fragment, Rect


@dataclass(frozen=True, slots=True)
class Line:
    rect: Rect  # smallest rect containing every fragment rect
    fragments: tuple[Fragment, ...]  # ordered as encountered in traversal order

    @property
    def text(self) -> str:
        return " ".join(f.text for f in self.fragments)

    def with_rect(self, rect: Rect) -> "Line":
        return Line(rect=rect, fragments=self.fragments)

    def to_dict(self, *, include_fragments: bool = False) -> dict[str, Any]:
        out: dict[str, Any] = {"rect": self.rect.to_dict(), "text": self.text}
        if include_fragments:
            out["fragments"] = [f.to_dict() for f in self.fragments]
        return out

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Line":
        frags_raw = d.get("fragments")
        if frags_raw is None:
            # Artifacts written without fragments keep only the joined text.
            frags: tuple[Fragment, ...] = (Fragment(text=str(d.get("text", "")), rect=Rect.from_dict(d["rect"])),)
        else:
            frags = tuple(Fragment.from_dict(x) for x in frags_raw)
        return Line(rect=Rect.from_dict(d["rect"]), fragments=frags)


@dataclass(frozen=True, slots=True)
class Page:
    page_index: int  # 0-indexed
    lines: tuple[Line, ...]

    def to_dict(self, *, include_fragments: bool = False) -> dict[str, Any]:
        return {
            "page_index": self.page_index,
            "lines": [l.to_dict(include_fragments=include_fragments) for l in self.lines],
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Page":
        return Page(
            page_index=int(d["page_index"]),
            lines=tuple(Line.from_dict(x) for x in (d.get("lines") or [])),
        )


@dataclass(frozen=True, slots=True)
class Document:
    """
    Non-sparse page sequence: `len(pages)` is the page count even when some pages
    hold no lines. Valid only for the page width it was analyzed at.
    """

    pages: tuple[Page, ...]
    page_width: float

    def lines(self) -> list[Line]:
        return [l for p in self.pages for l in p.lines]

    def to_dict(self, *, include_fragments: bool = False) -> dict[str, Any]:
        return {
            "page_width": self.page_width,
            "pages": [p.to_dict(include_fragments=include_fragments) for p in self.pages],
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Document":
        pages_raw = d.get("pages") or []
        if not isinstance(pages_raw, list):
            raise TypeError("Document.pages must be a list")
        return Document(
            pages=tuple(Page.from_dict(p) for p in pages_raw),
            page_width=float(d["page_width"]),
        )


@dataclass(frozen=True, slots=True)
class AnalysisError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AnalysisError":
        return AnalysisError(
            code=str(d["code"]),
            message=str(d.get("message", "")),
            detail=(None if d.get("detail") is None else dict(d["detail"])),
        )


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    ok: bool
    errors: list[AnalysisError]
    meta: dict[str, Any]  # config, counts, warnings
    document: Document | None
    source_relpath: str | None = None
    page_relative_rects: bool = False
    include_fragments: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
            "document": (
                None if self.document is None else self.document.to_dict(include_fragments=self.include_fragments)
            ),
            "source_relpath": self.source_relpath,
            "page_relative_rects": self.page_relative_rects,
            "include_fragments": self.include_fragments,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AnalysisResult":
        doc_raw = d.get("document")
        return AnalysisResult(
            ok=bool(d.get("ok", False)),
            errors=[AnalysisError.from_dict(e) for e in (d.get("errors") or [])],
            meta=dict(d.get("meta") or {}),
            document=(None if doc_raw is None else Document.from_dict(doc_raw)),
            source_relpath=(None if d.get("source_relpath") is None else str(d["source_relpath"])),
            page_relative_rects=bool(d.get("page_relative_rects", False)),
            include_fragments=bool(d.get("include_fragments", False)),
        )
