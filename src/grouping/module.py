from __future__ import annotations

import logging
from typing import Any

from contracts.geometry import LayoutSnapshot
from contracts.reading import AnalysisError, AnalysisResult, Document
from fragments.sources.base import FragmentSource, GeometryProvider
from fragments.sources.json_stream import FragmentFormatError

from .config import AnalysisConfig
from .errors import GeometryChanged, ReadingStructureError, require_page_width
from .lines import GroupingStats, group_lines_with_stats
from .pages import assign_pages, to_page_relative, total_page_count

logger = logging.getLogger(__name__)


def _check_snapshot_unchanged(before: LayoutSnapshot, after: LayoutSnapshot) -> None:
    if before.page_width != after.page_width or before.scroll_offset_x != after.scroll_offset_x:
        raise GeometryChanged(
            "layout changed during analysis; the result is invalid and must be recomputed",
            detail={"before": before.to_dict(), "after": after.to_dict()},
        )


def analyze_document(
    source: FragmentSource,
    geometry: GeometryProvider,
    *,
    page_relative_rects: bool = False,
) -> tuple[Document, GroupingStats]:
    """
    fragments -> lines -> pages, as one synchronous snapshot.

    Page assignment always runs on absolute rects; page-relative conversion, if
    requested, happens afterwards. Any ReadingStructureError propagates.
    """

    before = geometry.snapshot()
    require_page_width(before.page_width)

    fragments = source.fragments()
    lines, stats = group_lines_with_stats(fragments, before.page_width, before.scroll_offset_x)
    pages = assign_pages(
        lines,
        total_page_count(before.total_width, before.page_width),
        page_width=before.page_width,
        page_offset_x=before.scroll_offset_x,
    )

    _check_snapshot_unchanged(before, geometry.snapshot())

    if page_relative_rects:
        pages = to_page_relative(pages, before.page_width)

    return Document(pages=tuple(pages), page_width=before.page_width), stats


def _degenerate_warnings(stats: GroupingStats, limit: int) -> list[dict[str, Any]]:
    return [
        {
            "code": "DEGENERATE_FRAGMENT_RECT",
            "message": "Fragment rect has zero width or height; it was unioned into its line unchanged.",
            "detail": {"fragment_index": i},
        }
        for i in stats.degenerate_fragment_indexes[:limit]
    ]


def run_analysis(
    *,
    source: FragmentSource,
    geometry: GeometryProvider,
    config: AnalysisConfig,
    source_relpath: str | None = None,
) -> AnalysisResult:
    """
    Audit boundary around `analyze_document`.

    Fatal analysis errors become `ok=False` results carrying the error code instead of
    propagating; nothing is retried.
    """

    config.validate()

    meta: dict[str, Any] = {
        "version": "reading_structure_v1",
        "analysis_config": {
            "page_relative_rects": config.page_relative_rects,
            "include_fragments": config.include_fragments,
            "warn_degenerate_fragments": config.warn_degenerate_fragments,
        },
        "source": source.meta(),
        "counts": {},
        "warnings": [],
    }

    try:
        document, stats = analyze_document(source, geometry, page_relative_rects=config.page_relative_rects)
    except (ReadingStructureError, FragmentFormatError) as e:
        logger.error("reading structure analysis failed: %s", e)
        if isinstance(e, ReadingStructureError):
            err = AnalysisError(code=e.code, message=str(e), detail=e.detail)
        else:
            err = AnalysisError(code="FRAGMENT_FORMAT_ERROR", message=str(e))
        return AnalysisResult(
            ok=False,
            errors=[err],
            meta=meta,
            document=None,
            source_relpath=source_relpath,
            page_relative_rects=config.page_relative_rects,
            include_fragments=config.include_fragments,
        )

    if config.warn_degenerate_fragments and stats.degenerate_fragment_indexes:
        logger.warning("%d fragments have degenerate rects", len(stats.degenerate_fragment_indexes))
        meta["warnings"].extend(_degenerate_warnings(stats, config.max_degenerate_warnings))

    meta["layout"] = geometry.snapshot().to_dict()
    meta["counts"] = {
        "fragments": stats.fragments,
        "lines": sum(len(p.lines) for p in document.pages),
        "pages": len(document.pages),
        "empty_pages": sum(1 for p in document.pages if not p.lines),
        "page_crossings": stats.page_crossings,
        "degenerate_fragments": len(stats.degenerate_fragment_indexes),
    }

    return AnalysisResult(
        ok=True,
        errors=[],
        meta=meta,
        document=document,
        source_relpath=source_relpath,
        page_relative_rects=config.page_relative_rects,
        include_fragments=config.include_fragments,
    )
