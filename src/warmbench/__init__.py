"""warmbench: a micro-benchmark harness.

Runs a workload through a warmup phase, derives a sample count from a
target duration, records every sample, and keeps named reports that can
be merged into a JSON file and compared as a table.

Typical use::

    import warmbench

    warmbench.bench("sort 1k", lambda: sorted(data))

    def fancy(measure):
        items = list(data)  # setup, not timed
        measure(items.sort)

    warmbench.bench_fancy({"name": "in-place sort", "samples": 50}, fancy)

    warmbench.save_reports("report.json")
    warmbench.report_table()
"""

from __future__ import annotations

__version__ = "0.1.0"

from warmbench.bench.display import report_table
from warmbench.bench.options import BenchOptions, resolve_options
from warmbench.bench.results import (
    BenchmarkReport,
    BenchSession,
    PersistedStateCorrupt,
    default_session,
    save_reports,
)
from warmbench.bench.runner import bench, bench_fancy
from warmbench.bench.timing import ProtocolViolation
from warmbench.formatting import round_for_display

# Read-only view of the reports recorded in the default session.
reports = default_session.reports

__all__ = [
    "BenchOptions",
    "BenchSession",
    "BenchmarkReport",
    "PersistedStateCorrupt",
    "ProtocolViolation",
    "bench",
    "bench_fancy",
    "default_session",
    "report_table",
    "reports",
    "resolve_options",
    "round_for_display",
    "save_reports",
]
