"""Tests for warmbench.bench.display — report tables."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from bench_test_helpers import make_report, write_report_file

from warmbench.bench.display import collect_reports, format_report_table, report_table
from warmbench.bench.results import BenchSession, PersistedStateCorrupt


def _rows(text: str) -> dict[str, str]:
    """Parse table text back into name -> mean cell."""
    rows: dict[str, str] = {}
    for line in text.splitlines()[2:]:
        name, mean = line.rsplit(None, 1)
        rows[name.strip()] = mean
    return rows


class TestFormatReportTable(unittest.TestCase):
    def test_headers(self) -> None:
        text = format_report_table({})
        self.assertIn("name", text.splitlines()[0])
        self.assertIn("mean", text.splitlines()[0])

    def test_rows_are_rounded(self) -> None:
        text = format_report_table(
            {
                "tiny": make_report([0.12345]),
                "small": make_report([5.5555]),
                "medium": make_report([55.55]),
                "large": make_report([555.5]),
            }
        )
        self.assertEqual(
            _rows(text),
            {"tiny": "0.123", "small": "5.56", "medium": "55.6", "large": "556"},
        )

    def test_rows_in_mapping_order(self) -> None:
        text = format_report_table({"b": make_report([1.0]), "a": make_report([2.0])})
        self.assertEqual(list(_rows(text)), ["b", "a"])


class TestCollectReports(unittest.TestCase):
    def test_session_only(self) -> None:
        session = BenchSession()
        session.record("a", make_report([1.0]))
        self.assertEqual(list(collect_reports(session=session)), ["a"])

    def test_file_fills_gaps_but_session_wins(self) -> None:
        session = BenchSession()
        in_memory = make_report([1.0])
        session.record("A", in_memory)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "report.json"
            write_report_file(path, {"A": make_report([9.0]), "B": make_report([2.0])})
            combined = collect_reports(path, session=session)
        self.assertIs(combined["A"], in_memory)
        self.assertEqual(combined["B"].mean_time, 2.0)

    def test_missing_file_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(FileNotFoundError):
                collect_reports(Path(tmpdir) / "missing.json", session=BenchSession())

    def test_wrong_shape_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "report.json"
            path.write_text('"not an object"')
            with self.assertRaises(PersistedStateCorrupt):
                collect_reports(path, session=BenchSession())

    def test_non_utf8_is_fatal(self) -> None:
        for raw in (b'{"a": "\xff\xfe"}', b"\xff\xfe"):
            with self.subTest(raw=raw), tempfile.TemporaryDirectory() as tmpdir:
                path = Path(tmpdir) / "report.json"
                path.write_bytes(raw)
                with self.assertRaises(PersistedStateCorrupt):
                    collect_reports(path, session=BenchSession())

    def test_number_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "report.json"
            path.write_text("12")
            with self.assertRaises(PersistedStateCorrupt):
                collect_reports(path, session=BenchSession())


class TestReportTable(unittest.TestCase):
    def test_echoes_and_returns_table(self) -> None:
        session = BenchSession()
        session.record("a", make_report([2.0]))
        with patch("warmbench.bench.display.click.echo") as echo:
            text = report_table(session=session)
        echo.assert_called_once_with(text)
        self.assertEqual(_rows(text), {"a": "2"})

    def test_overlays_file(self) -> None:
        session = BenchSession()
        session.record("a", make_report([2.0]))
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "report.json"
            write_report_file(path, {"a": make_report([7.0]), "b": make_report([3.0])})
            with patch("warmbench.bench.display.click.echo"):
                text = report_table(path, session=session)
        self.assertEqual(_rows(text), {"a": "2", "b": "3"})
