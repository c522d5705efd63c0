"""Benchmark reports, the in-memory session, and JSON persistence.

A :class:`BenchSession` collects one :class:`BenchmarkReport` per named
benchmark.  :func:`save_reports` merges the session into a JSON file
(session entries win on name collisions) and rewrites it.

File format::

    {
      "sort 1k": {
        "meanTime": 0.0412,
        "sampleTimes": [0.0405, 0.0419, ...],
        "options": {"warmupTime": 3000, "testTime": 10000,
                    "samples": 100, "name": "sort 1k", "quiet": false}
      }
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from warmbench.bench.options import BenchOptions

log = logging.getLogger("warmbench")

DEFAULT_REPORT_PATH = "report.json"


class PersistedStateCorrupt(ValueError):
    """A report file exists but is not a well-formed name -> report mapping."""


# ---------------------------------------------------------------------------
# BenchmarkReport
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkReport:
    """Result of one completed benchmark run."""

    mean_time: float  # ms per iteration over the sampling phase
    sample_times: tuple[float, ...]  # ms, in execution order
    options: BenchOptions

    @property
    def sample_count(self) -> int:
        return len(self.sample_times)

    @property
    def total_time(self) -> float:
        """Total sampling-phase time in ms."""
        return sum(self.sample_times)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "meanTime": self.mean_time,
            "sampleTimes": list(self.sample_times),
            "options": self.options.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BenchmarkReport:
        """Deserialize from a dict.  Assumes the shape was already checked."""
        return cls(
            mean_time=float(data["meanTime"]),
            sample_times=tuple(float(t) for t in data["sampleTimes"]),
            options=BenchOptions.from_dict(data.get("options", {})),
        )


# ---------------------------------------------------------------------------
# Session (report registry)
# ---------------------------------------------------------------------------


class BenchSession:
    """Registry of completed benchmark reports, keyed by name.

    Reports accumulate across benchmark runs until they are saved or
    rendered.  Recording a name that already exists replaces the old
    report.

    Usage::

        session = BenchSession()
        bench("noop", lambda: None, session=session)
        save_reports("report.json", session=session)
    """

    def __init__(self, defaults: BenchOptions | None = None) -> None:
        self.defaults = defaults
        self._reports: dict[str, BenchmarkReport] = {}

    @property
    def reports(self) -> Mapping[str, BenchmarkReport]:
        """Read-only live view of the recorded reports."""
        return MappingProxyType(self._reports)

    def record(self, name: str, report: BenchmarkReport) -> None:
        if name in self._reports:
            log.debug("Replacing existing report '%s'", name)
        self._reports[name] = report

    def get(self, name: str) -> BenchmarkReport | None:
        return self._reports.get(name)

    def clear(self) -> None:
        """Forget all recorded reports and session defaults."""
        self._reports.clear()
        self.defaults = None

    def __contains__(self, name: object) -> bool:
        return name in self._reports

    def __iter__(self) -> Iterator[str]:
        return iter(self._reports)

    def __len__(self) -> int:
        return len(self._reports)

    def __repr__(self) -> str:
        return f"BenchSession({sorted(self._reports)!r})"


default_session = BenchSession()


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_OPTION_CHECKS: dict[str, tuple[str, Any]] = {
    "warmupTime": ("a number", _is_number),
    "testTime": ("a number", _is_number),
    "samples": ("a number", _is_number),
    "name": ("a string", lambda v: isinstance(v, str)),
    "quiet": ("a boolean", lambda v: isinstance(v, bool)),
}


def _check_entry(name: str, entry: Any) -> None:
    """Raise PersistedStateCorrupt if *entry* is not a report dict."""
    if not isinstance(entry, dict):
        raise PersistedStateCorrupt(
            f"Report '{name}' must be an object, got {type(entry).__name__}"
        )
    if not _is_number(entry.get("meanTime")):
        raise PersistedStateCorrupt(f"Report '{name}' has no numeric 'meanTime'")
    samples = entry.get("sampleTimes")
    if not isinstance(samples, list) or not all(_is_number(t) for t in samples):
        raise PersistedStateCorrupt(f"Report '{name}' has no numeric 'sampleTimes' list")
    options = entry.get("options", {})
    if not isinstance(options, dict):
        raise PersistedStateCorrupt(f"Report '{name}' has non-object 'options'")
    for key, (expected, check) in _OPTION_CHECKS.items():
        if key in options and not check(options[key]):
            raise PersistedStateCorrupt(f"Report '{name}' option '{key}' must be {expected}")


def check_report_data(data: Any) -> dict[str, dict[str, Any]]:
    """Check that parsed JSON is a name -> report mapping and return it as-is.

    Never coerces a non-mapping into an empty result.

    Raises:
        PersistedStateCorrupt: If *data* is not a name -> report mapping.
    """
    if not isinstance(data, dict):
        raise PersistedStateCorrupt(
            f"Report file is not an object (got {type(data).__name__})"
        )
    for name, entry in data.items():
        _check_entry(name, entry)
    return data


def decode_reports(data: Any) -> dict[str, BenchmarkReport]:
    """Validate parsed JSON and convert it into reports.

    Raises:
        PersistedStateCorrupt: If *data* is not a name -> report mapping.
    """
    return {
        name: BenchmarkReport.from_dict(entry)
        for name, entry in check_report_data(data).items()
    }


def read_report_data(path: str | Path) -> dict[str, dict[str, Any]]:
    """Read a report file and return its validated, unconverted entries.

    Raises:
        FileNotFoundError: If *path* does not exist.
        PersistedStateCorrupt: If the content is not UTF-8 JSON or has the
            wrong shape.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise PersistedStateCorrupt(f"Report file {path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PersistedStateCorrupt(f"Report file {path} is not valid JSON: {exc}") from exc
    return check_report_data(data)


def load_reports(path: str | Path) -> dict[str, BenchmarkReport]:
    """Load and validate a report file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        PersistedStateCorrupt: If the content is not UTF-8 JSON or has the
            wrong shape.
    """
    return {
        name: BenchmarkReport.from_dict(entry)
        for name, entry in read_report_data(path).items()
    }


# ---------------------------------------------------------------------------
# Saving
# ---------------------------------------------------------------------------


def save_reports(
    path: str | Path = DEFAULT_REPORT_PATH,
    *,
    session: BenchSession | None = None,
) -> dict[str, dict[str, Any]]:
    """Merge the session's reports into the file at *path*.

    Existing file entries are kept byte-for-byte in content (unknown keys
    included) unless the session has a report with the same name, in
    which case the session's report wins.  A missing file counts as
    empty.  The file is rewritten in full; concurrent writers are not
    coordinated.

    Returns:
        The merged JSON-compatible mapping that was written.

    Raises:
        PersistedStateCorrupt: If the existing file is malformed.
        OSError: If the existing file cannot be read (other than missing)
            or the merged file cannot be written.
    """
    session = session if session is not None else default_session
    path = Path(path)

    try:
        existing = read_report_data(path)
    except FileNotFoundError:
        existing = {}
    except (OSError, PersistedStateCorrupt):
        log.error("Cannot merge report with existing file %s", path)
        raise

    merged = {**existing, **{name: r.to_dict() for name, r in session.reports.items()}}
    path.write_text(json.dumps(merged, indent=2) + "\n", encoding="utf-8")
    log.info("Saved benchmarking reports to %s", path)
    return merged
