"""Shared test fixtures for benchmark tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from warmbench.bench.options import BenchOptions
from warmbench.bench.results import BenchmarkReport


class FakeClock:
    """Deterministic millisecond clock that only moves when told to."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now
        self.reads = 0

    def __call__(self) -> float:
        self.reads += 1
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms

    def workload(self, ms: float) -> Any:
        """A plain workload that takes exactly *ms* on this clock."""

        def fn() -> None:
            self.advance(ms)

        return fn


def make_report(
    sample_times: list[float],
    *,
    name: str | None = None,
    **option_fields: Any,
) -> BenchmarkReport:
    """Create a BenchmarkReport whose mean matches its samples."""
    mean = sum(sample_times) / len(sample_times) if sample_times else 0.0
    return BenchmarkReport(
        mean_time=mean,
        sample_times=tuple(sample_times),
        options=BenchOptions(name=name, **option_fields),
    )


def write_report_file(path: Path, data: Any) -> None:
    """Write *data* (reports or raw JSON-compatible data) to *path*."""
    if isinstance(data, dict) and all(isinstance(v, BenchmarkReport) for v in data.values()):
        data = {name: report.to_dict() for name, report in data.items()}
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def quick_options(name: str | None = None, **overrides: Any) -> dict[str, Any]:
    """Options for fast, quiet runs under a fake clock."""
    opts: dict[str, Any] = {"warmup_time": 0, "test_time": 0, "samples": 5, "quiet": True}
    if name is not None:
        opts["name"] = name
    opts.update(overrides)
    return opts
