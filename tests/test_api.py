"""Tests for the top-level warmbench API and the default session."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import warmbench
from bench_test_helpers import FakeClock, quick_options


class TestDefaultSession(unittest.TestCase):
    def setUp(self) -> None:
        warmbench.default_session.clear()

    def tearDown(self) -> None:
        warmbench.default_session.clear()

    def test_bench_records_into_default_session(self) -> None:
        clock = FakeClock()
        report = warmbench.bench(quick_options("api"), clock.workload(1), clock=clock)
        self.assertIs(warmbench.reports["api"], report)

    def test_reports_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            warmbench.reports["x"] = None  # type: ignore[index]

    def test_save_and_table_use_default_session(self) -> None:
        clock = FakeClock()
        warmbench.bench_fancy(
            quick_options("fancy"), lambda measure: measure(clock.workload(4)), clock=clock
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "report.json"
            warmbench.save_reports(path)
            self.assertEqual(json.loads(path.read_text())["fancy"]["meanTime"], 4.0)
        with patch("warmbench.bench.display.click.echo"):
            text = warmbench.report_table()
        self.assertIn("fancy", text)

    def test_exports(self) -> None:
        for name in warmbench.__all__:
            self.assertTrue(hasattr(warmbench, name), name)
