"""
Reading structure from word geometry: fragments -> lines -> pages.

- Lines: single forward pass over fragments in traversal order, lookback-only state.
- Pages: dense sequence sized to the document's page count; vacant pages included.
- Coordinates: absolute rects decide page membership; page-relative rects are derived after.

No layout mutation, no incremental re-analysis.
"""

from .config import AnalysisConfig
from .errors import (
    GeometryChanged,
    InvalidPageWidth,
    PageOrderViolation,
    PageOutOfRange,
    ReadingStructureError,
)
from .lines import group_lines
from .module import analyze_document, run_analysis
from .pages import assign_pages, to_page_relative, total_page_count

__all__ = [
    "AnalysisConfig",
    "GeometryChanged",
    "InvalidPageWidth",
    "PageOrderViolation",
    "PageOutOfRange",
    "ReadingStructureError",
    "group_lines",
    "analyze_document",
    "run_analysis",
    "assign_pages",
    "to_page_relative",
    "total_page_count",
]
