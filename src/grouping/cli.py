from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from contracts.reading import AnalysisError, AnalysisResult
from fragments.data_access import DataAccessError
from fragments.sources.json_stream import FragmentFormatError, JsonFragmentSource
from fragments.sources.pypdfium2_source import PageSelectionError, PdfFragmentConfig, Pypdfium2FragmentSource

from .artifacts import write_analysis_artifact
from .config import AnalysisConfig
from .module import run_analysis


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lbl-analyze",
        description="Group word fragments into lines and lines onto horizontal pages.",
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", type=Path, help="Fragment-stream JSON artifact.")
    src.add_argument("--pdf-relpath", help="PDF path relative to --data-root, read as a horizontal page strip.")
    p.add_argument("--data-root", type=Path, default=None, help="Root directory for --pdf-relpath.")
    p.add_argument("--pages", default=None, help='PDF page selection like "1,3-5". Default: all pages.')
    p.add_argument("--output", required=True, type=Path, help="Path to write the analysis JSON artifact.")
    p.add_argument("--page-relative", action="store_true", dest="page_relative_rects", default=False)
    p.add_argument("--include-fragments", action="store_true", default=False)
    p.add_argument("--no-degenerate-warnings", action="store_false", dest="warn_degenerate_fragments", default=True)
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def _input_error_result(code: str, message: str, source_relpath: str | None) -> AnalysisResult:
    return AnalysisResult(
        ok=False,
        errors=[AnalysisError(code=code, message=message)],
        meta={"version": "reading_structure_v1"},
        document=None,
        source_relpath=source_relpath,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.pdf_relpath is not None and args.data_root is None:
        parser.error("--pdf-relpath requires --data-root")

    cfg = AnalysisConfig(
        page_relative_rects=args.page_relative_rects,
        include_fragments=args.include_fragments,
        warn_degenerate_fragments=args.warn_degenerate_fragments,
    )

    source_relpath = str(args.input) if args.input is not None else args.pdf_relpath
    try:
        if args.input is not None:
            source = JsonFragmentSource.from_file(args.input)
        else:
            source = Pypdfium2FragmentSource(
                PdfFragmentConfig(data_root=args.data_root, page_selection=args.pages),
                args.pdf_relpath,
            )
    except DataAccessError as e:
        result = _input_error_result("INPUT_DATA_ACCESS_ERROR", str(e), source_relpath)
    except PageSelectionError as e:
        result = _input_error_result("INVALID_PAGE_SELECTION", str(e), source_relpath)
    except (FragmentFormatError, json.JSONDecodeError) as e:
        result = _input_error_result("FRAGMENT_FORMAT_ERROR", str(e), source_relpath)
    else:
        with source:
            result = run_analysis(source=source, geometry=source, config=cfg, source_relpath=source_relpath)

    write_analysis_artifact(result=result, out_file=args.output)

    doc = result.document
    summary = {
        "ok": result.ok,
        "pages": 0 if doc is None else len(doc.pages),
        "lines": 0 if doc is None else len(doc.lines()),
        "errors": [e.code for e in result.errors],
    }
    print(json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False))

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
