from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from contracts.geometry import Fragment, LayoutSnapshot


def serialize_fragment_stream(
    *, fragments: Iterable[Fragment], snapshot: LayoutSnapshot, meta: dict[str, Any] | None = None
) -> str:
    """
    Fragment-stream JSON, readable back by `JsonFragmentSource`.

    Fragment order is preserved; only keys are sorted.
    """

    payload: dict[str, Any] = {
        **snapshot.to_dict(),
        "fragments": [f.to_dict() for f in fragments],
        "meta": dict(meta or {}),
    }
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_fragment_stream(
    *, fragments: Iterable[Fragment], snapshot: LayoutSnapshot, out_file: Path, meta: dict[str, Any] | None = None
) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_fragment_stream(fragments=fragments, snapshot=snapshot, meta=meta), encoding="utf-8")
