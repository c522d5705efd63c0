"""Shared text formatting helpers for warmbench.

Provides the display rounding used for benchmark times and the aligned
text table used by ``warmbench show`` and :func:`report_table`.
"""

from __future__ import annotations

import math


def _round_digits(n: float, digits: int) -> float:
    """Round half up to *digits* decimal places."""
    m = 10**digits
    return math.floor(n * m + 0.5) / m


def round_for_display(n: float) -> float:
    """Round a time value for display with roughly constant significant digits.

    Values below 1 keep 3 decimals, below 10 keep 2, below 100 keep 1,
    and anything larger is rounded to a whole number.  Halves round up,
    so ``round_for_display(555.5) == 556``.  Never used on stored values.
    """
    if n < 1:
        return _round_digits(n, 3)
    if n < 10:
        return _round_digits(n, 2)
    if n < 100:
        return _round_digits(n, 1)
    return float(math.floor(n + 0.5))


def format_number(value: float) -> str:
    """Format a rounded number without a trailing ``.0``: ``556``, ``5.56``."""
    if math.isnan(value) or math.isinf(value):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    max_col_width: dict[int, int] | None = None,
    indent: int = 2,
) -> str:
    """Format a list of rows as an aligned text table.

    Auto-calculates column widths from content. Truncates columns that
    exceed *max_col_width* (with ``'...'`` suffix). Right-aligns columns
    marked ``'r'`` in *alignments*.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of cell strings.
        alignments: Per-column alignment: ``'l'``, ``'r'``, or ``'c'``.
        max_col_width: Column index to max width mapping.
        indent: Number of leading spaces per line.

    Returns:
        The formatted table as a string, header line first.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments) if alignments is not None else []
    while len(aligns) < ncols:
        aligns.append("l")

    max_widths = max_col_width or {}

    proc_headers = list(headers)
    proc_rows: list[list[str]] = []
    for row in rows:
        padded = list(row) + [""] * (ncols - len(row))
        proc_rows.append(padded[:ncols])

    for ci, max_w in max_widths.items():
        if ci < ncols:
            proc_headers[ci] = truncate(proc_headers[ci], max_w)
            for row in proc_rows:
                row[ci] = truncate(row[ci], max_w)

    widths = [len(h) for h in proc_headers]
    for row in proc_rows:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    prefix = " " * indent

    def _format_cell(text: str, width: int, align: str) -> str:
        if align == "r":
            return text.rjust(width)
        if align == "c":
            return text.center(width)
        return text.ljust(width)

    def _format_row(cells: list[str]) -> str:
        line = "  ".join(_format_cell(cells[i], widths[i], aligns[i]) for i in range(ncols))
        return (prefix + line).rstrip()

    lines = [_format_row(proc_headers)]
    lines.append(prefix + "  ".join("─" * w for w in widths))
    for row in proc_rows:
        lines.append(_format_row(row))

    return "\n".join(lines)


def truncate(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to *max_len*, adding *suffix* if truncated."""
    if len(text) <= max_len:
        return text
    if max_len <= len(suffix):
        return suffix[:max_len]
    return text[: max_len - len(suffix)] + suffix
