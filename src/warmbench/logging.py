"""Console and file logging for benchmark runs.

Every warmbench module logs to the ``warmbench`` logger.  Progress lines
("Running test ...", "Time per iteration: ...") are INFO records and are
printed bare, the way a benchmark script would print them itself.
Per-sample timings are DEBUG records and only reach the console with
``--verbose``.  Warnings and errors carry a level prefix so they stand
out between progress lines.

Library callers configure logging however they like; the ``run``
command calls :func:`setup_logging` before executing a script and
:func:`close_logging` when it is done.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "warmbench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"


class ProgressFormatter(logging.Formatter):
    """Bare INFO messages, indented DEBUG detail, prefixed warnings."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno == logging.INFO:
            return message
        if record.levelno < logging.INFO:
            return f"  {message}"
        text = f"{record.levelname.lower()}: {message}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the warmbench logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        verbose: Show per-sample timings on the console.
        quiet: Hide progress lines; warnings and errors still show.
            *verbose* wins if both are set.
        log_file: Also write every record, samples included, to this file.
    """
    logger = close_logging()
    logger.setLevel(logging.DEBUG)

    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.WARNING
    else:
        console_level = logging.INFO
    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(ProgressFormatter())
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def close_logging() -> logging.Logger:
    """Flush, close and detach every handler on the warmbench logger."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.flush()
        handler.close()
        logger.removeHandler(handler)
    return logger
