from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .artifacts import write_fragment_stream
from .data_access import DataAccessError
from .sources.pypdfium2_source import PageSelectionError, PdfFragmentConfig, Pypdfium2FragmentSource


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lbl-extract-fragments",
        description="Read word fragments from a PDF laid out as a horizontal page strip.",
    )
    p.add_argument("--data-root", required=True, type=Path, help="Root directory for input documents.")
    p.add_argument("--pdf-relpath", required=True, help="PDF path relative to --data-root.")
    p.add_argument("--output", required=True, type=Path, help="Fragment-stream JSON file to write.")
    p.add_argument("--pages", default=None, help='Optional page selection like "1,3-5". Default: all pages.')
    p.add_argument("--loose-char-boxes", action="store_true", help="Use loose (font-height) glyph boxes.")
    p.add_argument("--compute-source-sha256", action="store_true", help="Include SHA-256 of the PDF in meta.")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = PdfFragmentConfig(
        data_root=args.data_root,
        page_selection=args.pages,
        loose_char_boxes=args.loose_char_boxes,
        compute_source_sha256=args.compute_source_sha256,
    )
    try:
        source = Pypdfium2FragmentSource(config, args.pdf_relpath)
    except (DataAccessError, PageSelectionError) as e:
        logging.getLogger(__name__).error("%s", e)
        return 2

    with source:
        snapshot = source.snapshot()
        meta = source.meta()
        fragments = source.fragments()
    write_fragment_stream(fragments=fragments, snapshot=snapshot, out_file=args.output, meta=meta)

    summary = {
        "fragments": len(fragments),
        "pages": len(meta["page_numbers"]),
        "page_width": snapshot.page_width,
    }
    print(json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
