"""
Fragment sources: producers of positioned word fragments in document traversal order.

- Fragments are produced exactly once per source (re-invocation may duplicate them).
- Sources also answer layout queries (page width, scroll offset, total width).
- No line grouping or pagination happens here.
"""

from .segmentation import WordSpan, segment_words
from .sources import (
    FragmentFormatError,
    FragmentSource,
    FragmentSourceConsumed,
    GeometryProvider,
    JsonFragmentSource,
    PageSelectionError,
    PdfFragmentConfig,
    Pypdfium2FragmentSource,
    StaticFragmentSource,
)

__all__ = [
    "WordSpan",
    "segment_words",
    "FragmentFormatError",
    "FragmentSource",
    "FragmentSourceConsumed",
    "GeometryProvider",
    "JsonFragmentSource",
    "PageSelectionError",
    "PdfFragmentConfig",
    "Pypdfium2FragmentSource",
    "StaticFragmentSource",
]
