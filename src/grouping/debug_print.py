from __future__ import annotations

import argparse
from pathlib import Path

from contracts.geometry import Rect

from .artifacts import load_analysis_artifact


def _rect_str(r: Rect) -> str:
    return f"({r.left:g},{r.top:g})-({r.right:g},{r.bottom:g})"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="lbl-debug-print")
    ap.add_argument("--analysis", required=True, type=Path, help="Analysis JSON artifact.")
    ap.add_argument("--max-lines", type=int, default=0, help="If >0, truncate each page after N lines.")
    args = ap.parse_args(argv)

    result = load_analysis_artifact(args.analysis)
    if not result.ok or result.document is None:
        for e in result.errors:
            print(f"ERROR {e.code}: {e.message}")
        return 2

    doc = result.document
    coords = "page-relative" if result.page_relative_rects else "absolute"
    print(f"pages={len(doc.pages)} page_width={doc.page_width:g} rects={coords}")

    for page in doc.pages:
        print(f"\n=== PAGE {page.page_index:03d} === lines={len(page.lines)}")
        for i, ln in enumerate(page.lines):
            if args.max_lines and i >= args.max_lines:
                print(f"... (truncated at {args.max_lines})")
                break
            print(f"l{i:04d} rect={_rect_str(ln.rect)} :: {ln.text}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
