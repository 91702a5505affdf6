"""
Canonical data contracts shared by fragment sources and the reading-structure analysis.

Fragments (word rects) flow in; Lines grouped onto a dense sequence of Pages flow out.
Stage code should consume/produce these contract objects (not ad-hoc dicts).
"""

from .geometry import Fragment, LayoutSnapshot, Rect
from .reading import AnalysisError, AnalysisResult, Document, Line, Page

__all__ = [
    "Rect",
    "Fragment",
    "LayoutSnapshot",
    "Line",
    "Page",
    "Document",
    "AnalysisError",
    "AnalysisResult",
]
