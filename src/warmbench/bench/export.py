"""Export benchmark reports to CSV and Markdown formats.

CSV format: one row per benchmark per sample (long format for
pandas/R).  This is the raw data, every single measurement.

Markdown format: a summary table suitable for reports, README files,
and GitHub issues.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Mapping

from warmbench.bench.results import BenchmarkReport
from warmbench.formatting import format_number, round_for_display


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(reports: Mapping[str, BenchmarkReport]) -> str:
    """Export reports as CSV (long format), sorted by name.

    Columns:
        name, sample, time_ms, mean_ms, warmup_time_ms, test_time_ms,
        min_samples
    """
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(
        [
            "name",
            "sample",
            "time_ms",
            "mean_ms",
            "warmup_time_ms",
            "test_time_ms",
            "min_samples",
        ]
    )

    for name in sorted(reports):
        report = reports[name]
        opts = report.options
        for i, t in enumerate(report.sample_times, start=1):
            writer.writerow(
                [
                    name,
                    i,
                    f"{t:.6f}",
                    f"{report.mean_time:.6f}",
                    opts.warmup_time,
                    opts.test_time,
                    opts.samples,
                ]
            )

    return output.getvalue()


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def export_markdown(reports: Mapping[str, BenchmarkReport]) -> str:
    """Export reports as a Markdown summary table, sorted by name."""
    lines: list[str] = []
    lines.append("| Benchmark | Mean (ms) | Samples | Total (s) |")
    lines.append("|-----------|----------:|--------:|----------:|")

    for name in sorted(reports):
        report = reports[name]
        mean = format_number(round_for_display(report.mean_time))
        total = format_number(round_for_display(report.total_time / 1000))
        cell = name.replace("|", "\\|")
        lines.append(f"| {cell} | {mean} | {report.sample_count} | {total} |")

    if not reports:
        lines.append("")
        lines.append("_No benchmark reports._")

    return "\n".join(lines) + "\n"
