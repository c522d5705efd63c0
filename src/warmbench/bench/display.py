"""Terminal display of benchmark reports.

Renders one row per benchmark name with its mean time per iteration,
rounded for display.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import click

from warmbench.bench.results import (
    BenchmarkReport,
    BenchSession,
    default_session,
    load_reports,
)
from warmbench.formatting import format_number, format_table, round_for_display


def format_report_table(reports: Mapping[str, BenchmarkReport]) -> str:
    """Format reports as a ``name | mean`` table, in mapping order.

    Mean times are milliseconds per iteration.
    """
    rows = [
        [name, format_number(round_for_display(report.mean_time))]
        for name, report in reports.items()
    ]
    return format_table(["name", "mean"], rows, alignments=["l", "r"], max_col_width={0: 60})


def collect_reports(
    path: str | Path | None = None,
    *,
    session: BenchSession | None = None,
) -> dict[str, BenchmarkReport]:
    """Combine the session's reports with those in the file at *path*.

    File entries only fill in names the session does not have.

    Raises:
        FileNotFoundError: If *path* is given but does not exist.
        PersistedStateCorrupt: If the file is malformed.
    """
    session = session if session is not None else default_session
    combined = dict(session.reports)
    if path is not None:
        for name, report in load_reports(path).items():
            combined.setdefault(name, report)
    return combined


def report_table(
    path: str | Path | None = None,
    *,
    session: BenchSession | None = None,
) -> str:
    """Print the report table for the session, overlaid with *path* if given.

    Returns:
        The rendered table text.
    """
    text = format_report_table(collect_reports(path, session=session))
    click.echo(text)
    return text
