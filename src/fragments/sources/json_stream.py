from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.geometry import Fragment

from .base import FragmentSource, GeometryProvider


class FragmentFormatError(ValueError):
    pass


def _require_number(d: dict[str, Any], key: str) -> float:
    v = d.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise FragmentFormatError(f"fragment stream field {key!r} must be a number, got {v!r}")
    return float(v)


class JsonFragmentSource(FragmentSource, GeometryProvider):
    """
    Fragment-stream artifact:

        {"page_width": 100, "scroll_offset_x": 0, "total_width": 300,
         "fragments": [{"text": "word", "rect": {"left": 0, "top": 0, "right": 10, "bottom": 10}}]}

    Layout values are read once, at construction, and stay fixed.
    """

    def __init__(self, payload: dict[str, Any], *, source_relpath: str | None = None) -> None:
        if not isinstance(payload, dict):
            raise FragmentFormatError("fragment stream must be a JSON object")
        frags_raw = payload.get("fragments") or []
        if not isinstance(frags_raw, list):
            raise FragmentFormatError("fragment stream 'fragments' must be a list")

        self._page_width = _require_number(payload, "page_width")
        self._total_width = _require_number(payload, "total_width")
        self._scroll_offset_x = _require_number(payload, "scroll_offset_x") if "scroll_offset_x" in payload else 0.0
        self._raw = frags_raw
        self.source_relpath = source_relpath

    @staticmethod
    def from_file(path: Path, *, source_relpath: str | None = None) -> "JsonFragmentSource":
        payload = json.loads(path.read_text(encoding="utf-8"))
        return JsonFragmentSource(payload, source_relpath=source_relpath or str(path))

    def _produce(self) -> list[Fragment]:
        out: list[Fragment] = []
        for i, d in enumerate(self._raw):
            try:
                out.append(Fragment.from_dict(d))
            except (KeyError, TypeError, ValueError) as e:
                raise FragmentFormatError(f"invalid fragment at index {i}: {e}") from e
        return out

    def page_width(self) -> float:
        return self._page_width

    def scroll_offset_x(self) -> float:
        return self._scroll_offset_x

    def total_width(self) -> float:
        return self._total_width

    def meta(self) -> dict[str, Any]:
        return {"source": self.source_id(), "source_relpath": self.source_relpath}
