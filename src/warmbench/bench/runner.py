"""Benchmark execution engine.

Each run has two phases, both built from repeated single trials:

1. Warmup: run trials until at least 4 have been done *and* the
   accumulated time reaches ``warmup_time``.  The mean warmup trial time
   is the per-iteration estimate.
2. Sampling: run ``max(samples, test_time // estimate)`` trials and
   record every trial time in order.

The mean of the sampling phase becomes the report's ``mean_time``.  A
named run stores its report in the session; a failing trial aborts the
run and nothing is stored.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from warmbench.bench.options import BenchOptions, OptionsArg, resolve_options
from warmbench.bench.results import BenchmarkReport, BenchSession, default_session
from warmbench.bench.timing import (
    Clock,
    FancyWorkload,
    Workload,
    as_fancy,
    perf_counter_ms,
    run_once,
)
from warmbench.formatting import round_for_display

log = logging.getLogger("warmbench")

MIN_WARMUP_ITERATIONS = 4


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback."""

    phase: str  # "warmup", "sampling", "done"
    name: str | None
    target_time_ms: float = 0.0  # Warmup target for "warmup", test target otherwise
    warmup_count: int = 0
    warmup_time_ms: float = 0.0
    estimate_ms: float = 0.0  # Per-iteration estimate from warmup
    sample_count: int = 0
    mean_time_ms: float = 0.0


ProgressCallback = Callable[[BenchProgress], None]


def compute_sample_count(options: BenchOptions, estimate_ms: float) -> int:
    """Number of samples needed to satisfy both the floor and the time budget.

    No upper bound is applied.  A zero estimate (workload faster than the
    clock resolution) leaves the time budget undefined, so only the
    ``samples`` floor is used.
    """
    if estimate_ms <= 0:
        log.warning(
            "Warmup estimate is %s ms (clock too coarse?); using %d samples",
            estimate_ms,
            options.samples,
        )
        return options.samples
    return max(options.samples, math.floor(options.test_time / estimate_ms))


# ---------------------------------------------------------------------------
# BenchRunner
# ---------------------------------------------------------------------------


class BenchRunner:
    """Runs one benchmark according to resolved BenchOptions.

    Usage::

        runner = BenchRunner(resolve_options("parse"), session=session)
        report = runner.run(lambda measure: measure(parse_document))
    """

    def __init__(
        self,
        options: BenchOptions,
        *,
        session: BenchSession | None = None,
        clock: Clock | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.options = options
        self.session = session if session is not None else default_session
        self.clock = clock or perf_counter_ms
        self.progress = progress_callback or self._default_progress
        self.warmup_count = 0
        self.warmup_time_ms = 0.0
        self.sample_count = 0

    def run(self, workload: FancyWorkload) -> BenchmarkReport:
        """Execute warmup and sampling, and record the report if named.

        Raises:
            ProtocolViolation: If the workload does not call ``measure``.
        """
        opts = self.options

        self._emit(
            BenchProgress(phase="warmup", name=opts.name, target_time_ms=opts.warmup_time)
        )
        estimate = self._warmup(workload)

        self.sample_count = compute_sample_count(opts, estimate)
        self._emit(
            BenchProgress(
                phase="sampling",
                name=opts.name,
                target_time_ms=opts.test_time,
                warmup_count=self.warmup_count,
                warmup_time_ms=self.warmup_time_ms,
                estimate_ms=estimate,
                sample_count=self.sample_count,
            )
        )

        sample_times = self._sample(workload, self.sample_count)
        total = sum(sample_times)
        mean = total / self.sample_count if self.sample_count else 0.0

        report = BenchmarkReport(
            mean_time=mean,
            sample_times=tuple(sample_times),
            options=opts,
        )
        self._emit(
            BenchProgress(
                phase="done",
                name=opts.name,
                target_time_ms=opts.test_time,
                warmup_count=self.warmup_count,
                warmup_time_ms=self.warmup_time_ms,
                estimate_ms=estimate,
                sample_count=self.sample_count,
                mean_time_ms=mean,
            )
        )

        if opts.name is not None:
            self.session.record(opts.name, report)
        return report

    def _warmup(self, workload: FancyWorkload) -> float:
        """Run warmup trials and return the per-iteration estimate in ms."""
        count = 0
        elapsed = 0.0
        while count < MIN_WARMUP_ITERATIONS or elapsed < self.options.warmup_time:
            elapsed += run_once(workload, clock=self.clock)
            count += 1
        self.warmup_count = count
        self.warmup_time_ms = elapsed
        return elapsed / count

    def _sample(self, workload: FancyWorkload, count: int) -> list[float]:
        times: list[float] = []
        for i in range(count):
            t = run_once(workload, clock=self.clock)
            times.append(t)
            log.debug("Sample %d/%d: %.6f ms", i + 1, count, t)
        return times

    def _emit(self, progress: BenchProgress) -> None:
        if not self.options.quiet:
            self.progress(progress)

    @staticmethod
    def _default_progress(p: BenchProgress) -> None:
        """Log progress at INFO level."""
        name = p.name if p.name is not None else "unknown"
        if p.phase == "warmup":
            log.info(
                "Running test %s. Warmup for %s seconds...",
                name,
                round_for_display(p.target_time_ms / 1000),
            )
        elif p.phase == "sampling":
            log.info(
                "Did %d iterations in %s ms (Estimate: %s ms)",
                p.warmup_count,
                round_for_display(p.warmup_time_ms),
                round_for_display(p.estimate_ms),
            )
            log.info(
                "Running %d samples in an estimated %s seconds",
                p.sample_count,
                round_for_display(p.estimate_ms * p.sample_count / 1000),
            )
        elif p.phase == "done":
            log.info("Time per iteration: %s ms", round_for_display(p.mean_time_ms))


# ---------------------------------------------------------------------------
# Convenience API
# ---------------------------------------------------------------------------


def bench_fancy(
    options: OptionsArg,
    workload: FancyWorkload,
    *,
    session: BenchSession | None = None,
    clock: Clock | None = None,
    progress_callback: ProgressCallback | None = None,
) -> BenchmarkReport:
    """Benchmark a workload that marks its own measured region.

    *workload* receives a ``measure`` function and must call it with the
    code to time; anything outside that call is untimed setup.  *options*
    may be a name, a partial mapping of options, or BenchOptions.
    """
    session = session if session is not None else default_session
    opts = resolve_options(options, defaults=session.defaults)
    runner = BenchRunner(
        opts,
        session=session,
        clock=clock,
        progress_callback=progress_callback,
    )
    return runner.run(workload)


def bench(
    options: OptionsArg,
    fn: Workload,
    *,
    session: BenchSession | None = None,
    clock: Clock | None = None,
    progress_callback: ProgressCallback | None = None,
) -> BenchmarkReport:
    """Benchmark a zero-argument callable; the whole call is measured."""
    return bench_fancy(
        options,
        as_fancy(fn),
        session=session,
        clock=clock,
        progress_callback=progress_callback,
    )
