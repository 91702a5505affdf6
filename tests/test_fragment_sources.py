from __future__ import annotations

import hashlib
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fragments import cli as extract_cli
from fragments.data_access import DataAccessError, resolve_input, sha256_file
from fragments.segmentation import segment_words
from fragments.sources.pypdfium2_source import (
    PageSelectionError,
    PdfFragmentConfig,
    Pypdfium2FragmentSource,
    parse_page_selection,
)
from grouping import cli as analyze_cli
from grouping.config import AnalysisConfig
from grouping.module import run_analysis


class _FakeTextPage:
    def __init__(self, chars: list[tuple[str, tuple[float, float, float, float]]]) -> None:
        self._chars = chars
        self.closed = False

    def count_chars(self) -> int:
        return len(self._chars)

    def get_text_range(self, index: int, count: int) -> str:
        return "".join(c for c, _ in self._chars[index : index + count])

    def get_charbox(self, index: int, loose: bool = False) -> tuple[float, float, float, float]:
        return self._chars[index][1]

    def close(self) -> None:
        self.closed = True


class _FakePage:
    def __init__(self, size: tuple[float, float], chars) -> None:
        self._size = size
        self._chars = chars

    def get_size(self) -> tuple[float, float]:
        return self._size

    def get_textpage(self) -> _FakeTextPage:
        return _FakeTextPage(self._chars)

    def close(self) -> None:
        pass


class _FakePdf:
    def __init__(self, pages: list[_FakePage]) -> None:
        self._pages = pages
        self.closed = False

    def __len__(self) -> int:
        return len(self._pages)

    def __getitem__(self, i: int) -> _FakePage:
        return self._pages[i]

    def close(self) -> None:
        self.closed = True


def _fake_pdf() -> _FakePdf:
    # PDF boxes are (left, bottom, right, top) with a bottom-up y axis.
    page1 = _FakePage(
        (100, 200),
        [
            ("H", (10, 180, 15, 190)),
            ("i", (15, 180, 18, 190)),
            (" ", (18, 180, 20, 190)),
            ("y", (20, 180, 25, 190)),
            ("o", (25, 180, 30, 190)),
            ("\r", (0, 0, 0, 0)),
            ("\n", (0, 0, 0, 0)),
            ("n", (10, 160, 15, 170)),
            ("o", (15, 160, 20, 170)),
        ],
    )
    page2 = _FakePage((80, 200), [("o", (5, 150, 10, 160)), ("k", (10, 150, 15, 160))])
    return _FakePdf([page1, page2])


class TestSegmentation(unittest.TestCase):
    def test_words_keep_source_offsets(self) -> None:
        text = "  Call me\tIshmael.\n"
        spans = segment_words(text)
        self.assertEqual([s.text for s in spans], ["Call", "me", "Ishmael."])
        for s in spans:
            self.assertEqual(text[s.start : s.end], s.text)

    def test_whitespace_only_text_has_no_words(self) -> None:
        self.assertEqual(segment_words(" \n\t "), [])
        self.assertEqual(segment_words(""), [])


class TestPageSelection(unittest.TestCase):
    def test_ranges_and_singles(self) -> None:
        self.assertEqual(parse_page_selection("3, 1-2,2", page_count=5), [1, 2, 3])
        self.assertEqual(parse_page_selection(None, page_count=3), [1, 2, 3])

    def test_out_of_bounds(self) -> None:
        with self.assertRaises(ValueError):
            parse_page_selection("4", page_count=3)
        with self.assertRaises(ValueError):
            parse_page_selection("3-1", page_count=3)

    def test_malformed_items_are_selection_errors(self) -> None:
        for bad in ("x", "1-", "0", "2-3-4", "-2"):
            with self.subTest(selection=bad):
                with self.assertRaises(PageSelectionError):
                    parse_page_selection(bad, page_count=5)
        self.assertEqual(parse_page_selection(" 2 - 3 ,", page_count=5), [2, 3])


class TestDataAccess(unittest.TestCase):
    def test_rejects_absolute_and_escaping_paths(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            with self.assertRaises(DataAccessError):
                resolve_input(data_root=root, relpath="/etc/passwd")
            with self.assertRaises(DataAccessError):
                resolve_input(data_root=root, relpath="../outside.pdf")
            with self.assertRaises(DataAccessError):
                resolve_input(data_root=root, relpath="missing.pdf")

    def test_sha256_matches_hashlib_across_chunks(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "doc.pdf"
            data = b"%PDF-1.4\n" * 1000
            p.write_bytes(data)
            self.assertEqual(sha256_file(p, chunk_size=7), hashlib.sha256(data).hexdigest())
            self.assertEqual(sha256_file(p), hashlib.sha256(data).hexdigest())


class TestPypdfium2FragmentSource(unittest.TestCase):
    def _source(self, root: Path, fake: _FakePdf, **cfg) -> Pypdfium2FragmentSource:
        (root / "doc.pdf").write_bytes(b"%PDF-1.4\n")
        return Pypdfium2FragmentSource(
            PdfFragmentConfig(data_root=root, **cfg), "doc.pdf", opener=lambda _path: fake
        )

    def test_pages_are_laid_out_side_by_side(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            fake = _fake_pdf()
            src = self._source(Path(td), fake)

            self.assertEqual(src.page_width(), 100)
            self.assertEqual(src.total_width(), 200)

            frags = src.fragments()
            self.assertTrue(fake.closed)
            self.assertEqual([f.text for f in frags], ["Hi", "yo", "no", "ok"])

            hi = frags[0].rect
            self.assertEqual((hi.left, hi.top, hi.right, hi.bottom), (10, 10, 18, 20))
            ok = frags[3].rect
            self.assertEqual((ok.left, ok.top, ok.right, ok.bottom), (105, 40, 115, 50))

    def test_page_selection_limits_strip(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = self._source(Path(td), _fake_pdf(), page_selection="2")
            self.assertEqual(src.page_width(), 80)
            self.assertEqual([f.text for f in src.fragments()], ["ok"])
            self.assertEqual(src.meta()["page_numbers"], [2])

    def test_end_to_end_lines_and_pages(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = self._source(Path(td), _fake_pdf(), compute_source_sha256=True)
            result = run_analysis(source=src, geometry=src, config=AnalysisConfig(), source_relpath="doc.pdf")

            self.assertTrue(result.ok)
            self.assertEqual(len(result.meta["source"]["source_sha256"]), 64)
            pages = result.document.pages
            self.assertEqual([[l.text for l in p.lines] for p in pages], [["Hi yo", "no"], ["ok"]])


    def test_glyph_on_right_page_edge_stays_on_its_page(self) -> None:
        page = _FakePage(
            (100, 200),
            [("a", (10, 180, 15, 190)), (" ", (15, 180, 20, 190)), ("b", (100, 180, 104, 190))],
        )
        with tempfile.TemporaryDirectory() as td:
            src = self._source(Path(td), _FakePdf([page]))
            result = run_analysis(source=src, geometry=src, config=AnalysisConfig())

            self.assertTrue(result.ok, result.errors)
            self.assertEqual(len(result.document.pages), 1)
            (line,) = result.document.pages[0].lines
            self.assertEqual(line.text, "a b")
            b = line.fragments[1].rect
            self.assertLess(b.left, 100)
            self.assertLess(b.right, 100)
            self.assertEqual([w["code"] for w in result.meta["warnings"]], ["DEGENERATE_FRAGMENT_RECT"])

    def test_glyph_on_inner_page_edge_stays_in_its_slot(self) -> None:
        page1 = _FakePage((100, 200), [("a", (95, 180, 100, 190))])
        page2 = _FakePage((100, 200), [("b", (0, 180, 5, 190))])
        with tempfile.TemporaryDirectory() as td:
            src = self._source(Path(td), _FakePdf([page1, page2]))
            result = run_analysis(source=src, geometry=src, config=AnalysisConfig())

            self.assertTrue(result.ok, result.errors)
            self.assertEqual([[l.text for l in p.lines] for p in result.document.pages], [["a"], ["b"]])

    def test_invalid_selection_closes_document(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            fake = _fake_pdf()
            with self.assertRaises(PageSelectionError):
                self._source(Path(td), fake, page_selection="5")
            self.assertTrue(fake.closed)

    def test_context_manager_closes_document_on_failed_pass(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            fake = _FakePdf([])
            with self._source(Path(td), fake) as src:
                result = run_analysis(source=src, geometry=src, config=AnalysisConfig())
            self.assertEqual([e.code for e in result.errors], ["INVALID_PAGE_WIDTH"])
            self.assertTrue(fake.closed)

    def test_close_is_idempotent(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            fake = _fake_pdf()
            src = self._source(Path(td), fake)
            src.fragments()
            src.close()
            self.assertTrue(fake.closed)


class TestPdfCliPageSelection(unittest.TestCase):
    def _root(self, td: str) -> Path:
        root = Path(td)
        (root / "doc.pdf").write_bytes(b"%PDF-1.4\n")
        return root

    def test_analyze_reports_invalid_page_selection(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = self._root(td)
            out = root / "analysis.json"
            fake = _fake_pdf()
            with mock.patch("fragments.sources.pypdfium2_source._open_with_pdfium", return_value=fake):
                rc = analyze_cli.main(
                    ["--pdf-relpath", "doc.pdf", "--data-root", str(root), "--pages", "5", "--output", str(out)]
                )

            self.assertEqual(rc, 2)
            self.assertTrue(fake.closed)
            payload = json.loads(out.read_text(encoding="utf-8"))
            self.assertFalse(payload["ok"])
            self.assertEqual([e["code"] for e in payload["errors"]], ["INVALID_PAGE_SELECTION"])

    def test_analyze_closes_document_after_pass(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = self._root(td)
            out = root / "analysis.json"
            fake = _fake_pdf()
            with mock.patch("fragments.sources.pypdfium2_source._open_with_pdfium", return_value=fake):
                rc = analyze_cli.main(["--pdf-relpath", "doc.pdf", "--data-root", str(root), "--output", str(out)])

            self.assertEqual(rc, 0)
            self.assertTrue(fake.closed)

    def test_extract_rejects_malformed_page_selection(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = self._root(td)
            out = root / "fragments.json"
            fake = _fake_pdf()
            with mock.patch("fragments.sources.pypdfium2_source._open_with_pdfium", return_value=fake):
                rc = extract_cli.main(
                    ["--pdf-relpath", "doc.pdf", "--data-root", str(root), "--pages", "two", "--output", str(out)]
                )

            self.assertEqual(rc, 2)
            self.assertTrue(fake.closed)
            self.assertFalse(out.exists())



if __name__ == "__main__":
    unittest.main()
