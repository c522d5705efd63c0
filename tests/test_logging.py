"""Tests for warmbench.logging — console formatting and handler setup."""

from __future__ import annotations

import io
import logging
import tempfile
import unittest
from pathlib import Path

from warmbench.logging import ProgressFormatter, close_logging, setup_logging


def _record(level: int, msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("warmbench", level, __file__, 1, msg, args, None)


class TestProgressFormatter(unittest.TestCase):
    def setUp(self) -> None:
        self.fmt = ProgressFormatter()

    def test_info_is_bare(self) -> None:
        record = _record(logging.INFO, "Time per iteration: %s ms", 0.04)
        self.assertEqual(self.fmt.format(record), "Time per iteration: 0.04 ms")

    def test_debug_is_indented(self) -> None:
        record = _record(logging.DEBUG, "Sample %d/%d", 1, 10)
        self.assertEqual(self.fmt.format(record), "  Sample 1/10")

    def test_warning_and_error_are_prefixed(self) -> None:
        self.assertEqual(
            self.fmt.format(_record(logging.WARNING, "clock too coarse")),
            "warning: clock too coarse",
        )
        self.assertEqual(
            self.fmt.format(_record(logging.ERROR, "cannot merge")),
            "error: cannot merge",
        )


class TestSetupLogging(unittest.TestCase):
    def tearDown(self) -> None:
        close_logging()

    def test_default_console_level_is_info(self) -> None:
        logger = setup_logging()
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.handlers[0].level, logging.INFO)
        self.assertIsInstance(logger.handlers[0].formatter, ProgressFormatter)

    def test_quiet_and_verbose(self) -> None:
        self.assertEqual(setup_logging(quiet=True).handlers[0].level, logging.WARNING)
        self.assertEqual(
            setup_logging(verbose=True, quiet=True).handlers[0].level, logging.DEBUG
        )

    def test_reconfigure_replaces_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        self.assertEqual(len(logger.handlers), 1)

    def test_console_shows_progress_without_prefix(self) -> None:
        logger = setup_logging()
        stream = io.StringIO()
        logger.handlers[0].setStream(stream)
        logger.info("Running test %s. Warmup for %s seconds...", "noop", 3)
        logger.debug("Sample 1/1: 0.1 ms")
        self.assertEqual(stream.getvalue(), "Running test noop. Warmup for 3 seconds...\n")

    def test_log_file_gets_debug(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "bench.log"
            logger = setup_logging(quiet=True, log_file=log_file)
            logger.debug("sample detail")
            close_logging()
            text = log_file.read_text()
        self.assertIn("DEBUG", text)
        self.assertIn("sample detail", text)


class TestCloseLogging(unittest.TestCase):
    def test_detaches_all_handlers(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            setup_logging(log_file=Path(tmpdir) / "bench.log")
            logger = close_logging()
        self.assertEqual(logger.handlers, [])

    def test_noop_without_handlers(self) -> None:
        close_logging()
        self.assertEqual(close_logging().handlers, [])
