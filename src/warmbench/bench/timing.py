"""Timing capture for a single benchmark trial.

A trial runs a "fancy" workload: a callable that receives a ``measure``
function, does any setup it needs, and then calls ``measure(f)`` around
exactly the code it wants timed.  Plain zero-argument callables are
adapted with :func:`as_fancy` so the whole call is the measured region.

Times are wall-clock milliseconds from :func:`time.perf_counter`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

log = logging.getLogger("warmbench")

Clock = Callable[[], float]
Measure = Callable[[Callable[[], object]], None]
FancyWorkload = Callable[[Measure], object]
Workload = Callable[[], object]


class ProtocolViolation(RuntimeError):
    """A fancy workload returned without calling ``measure``."""


def perf_counter_ms() -> float:
    """Monotonic clock reading in milliseconds."""
    return time.perf_counter() * 1000.0


def run_once(workload: FancyWorkload, *, clock: Clock = perf_counter_ms) -> float:
    """Run one trial of *workload* and return the measured time in ms.

    If ``measure`` is called more than once, the last call is the one
    that counts.

    Raises:
        ProtocolViolation: If *workload* never called ``measure``.
    """
    start = 0.0
    end = 0.0
    ran = False

    def measure(f: Callable[[], object]) -> None:
        nonlocal start, end, ran
        start = clock()
        f()
        end = clock()
        ran = True

    workload(measure)

    if not ran:
        raise ProtocolViolation("benchmark must run iteration function")
    return end - start


def as_fancy(fn: Workload) -> FancyWorkload:
    """Adapt a zero-argument callable into a fancy workload."""

    def fancy(measure: Measure) -> None:
        measure(fn)

    return fancy
