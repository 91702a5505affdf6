from .base import FragmentSource, FragmentSourceConsumed, GeometryProvider
from .json_stream import FragmentFormatError, JsonFragmentSource
from .pypdfium2_source import PageSelectionError, PdfFragmentConfig, Pypdfium2FragmentSource
from .static import StaticFragmentSource

__all__ = [
    "FragmentSource",
    "FragmentSourceConsumed",
    "GeometryProvider",
    "FragmentFormatError",
    "JsonFragmentSource",
    "PageSelectionError",
    "PdfFragmentConfig",
    "Pypdfium2FragmentSource",
    "StaticFragmentSource",
]
