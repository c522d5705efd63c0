"""Benchmark options: defaults, resolution, validation, and YAML profiles.

Handles:
- Overlaying caller-supplied partial options onto full defaults.
- Validating resolved options before a run.
- Loading option profiles from YAML files for the CLI.
- Merging CLI options with profile values.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger("warmbench")


# ---------------------------------------------------------------------------
# BenchOptions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchOptions:
    """Fully resolved options for one benchmark run."""

    warmup_time: float = 3000  # Minimum warmup duration, ms
    test_time: float = 10000  # Minimum sampling duration, ms
    samples: int = 100  # Minimum number of samples
    name: str | None = None  # None = don't record the report
    quiet: bool = False  # Suppress progress output

    def replace(self, **changes: Any) -> BenchOptions:
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk (camelCase) form.  Omits an absent name."""
        d: dict[str, Any] = {
            "warmupTime": self.warmup_time,
            "testTime": self.test_time,
            "samples": self.samples,
        }
        if self.name is not None:
            d["name"] = self.name
        d["quiet"] = self.quiet
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BenchOptions:
        """Deserialize from the on-disk form, ignoring unknown fields.

        Missing fields take their defaults.
        """
        known = _normalize_keys(data, strict=False)
        return cls(**known)


DEFAULT_OPTIONS = BenchOptions()

# On-disk / JavaScript-style spellings accepted alongside field names.
_KEY_ALIASES: dict[str, str] = {
    "warmupTime": "warmup_time",
    "testTime": "test_time",
}

_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(BenchOptions))


def _normalize_keys(data: Mapping[str, Any], *, strict: bool) -> dict[str, Any]:
    """Map camelCase keys to field names.

    Unknown keys raise ``ValueError`` when *strict*, else are dropped.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        field_name = _KEY_ALIASES.get(key, key)
        if field_name not in _FIELD_NAMES:
            if strict:
                raise ValueError(
                    f"Unknown benchmark option '{key}'. "
                    f"Valid options: {', '.join(sorted(_FIELD_NAMES))}"
                )
            continue
        result[field_name] = value
    return result


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


OptionsArg = BenchOptions | Mapping[str, Any] | str | None


def resolve_options(
    options: OptionsArg,
    *,
    defaults: BenchOptions | None = None,
) -> BenchOptions:
    """Overlay caller-supplied options onto full defaults.

    Accepts:

    - ``None``: the defaults as-is.
    - a string: shorthand for ``{"name": options}``.
    - a mapping: partial options, keyed by field name or on-disk camelCase.
    - a :class:`BenchOptions`: used as-is (it is already complete).

    Args:
        options: The caller's options value.
        defaults: Base options to overlay onto.  Defaults to
            :data:`DEFAULT_OPTIONS`.

    Returns:
        A complete, validated BenchOptions.

    Raises:
        ValueError: On unknown keys, an unsupported type, or invalid values.
    """
    base = defaults or DEFAULT_OPTIONS

    if options is None:
        resolved = base
    elif isinstance(options, BenchOptions):
        resolved = options
    elif isinstance(options, str):
        resolved = base.replace(name=options)
    elif isinstance(options, Mapping):
        resolved = base.replace(**_normalize_keys(options, strict=True))
    else:
        raise ValueError(
            f"Benchmark options must be a name, a mapping or BenchOptions, "
            f"got {type(options).__name__}"
        )

    errors = [e for e in validate_options(resolved) if e.severity == "error"]
    if errors:
        messages = [f"  {e.field}: {e.message}" for e in errors]
        raise ValueError("Invalid benchmark options:\n" + "\n".join(messages))
    return resolved


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single option validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_options(options: BenchOptions) -> list[ValidationError]:
    """Validate benchmark options.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    for field_name in ("warmup_time", "test_time"):
        value = getattr(options, field_name)
        if not _is_number(value):
            errors.append(
                ValidationError(
                    field=field_name,
                    message=f"Must be a number of milliseconds (got {value!r}).",
                )
            )
        elif value < 0:
            errors.append(
                ValidationError(
                    field=field_name,
                    message=f"Cannot be negative (got {value}).",
                )
            )

    if not isinstance(options.samples, int) or isinstance(options.samples, bool):
        errors.append(
            ValidationError(
                field="samples",
                message=f"Must be an integer (got {options.samples!r}).",
            )
        )
    elif options.samples < 0:
        errors.append(
            ValidationError(
                field="samples",
                message=f"Cannot be negative (got {options.samples}).",
            )
        )
    elif options.samples == 0 and _is_number(options.test_time) and options.test_time == 0:
        errors.append(
            ValidationError(
                field="samples",
                message="With samples=0 and test_time=0 the benchmark may take no samples.",
                severity="warning",
            )
        )

    if options.name is not None:
        if not isinstance(options.name, str):
            errors.append(
                ValidationError(
                    field="name",
                    message=f"Must be a string (got {type(options.name).__name__}).",
                )
            )
        elif not options.name.strip():
            errors.append(
                ValidationError(
                    field="name",
                    message="Benchmark names must be non-empty.",
                )
            )

    if not isinstance(options.quiet, bool):
        errors.append(
            ValidationError(
                field="quiet",
                message=f"Must be true or false (got {options.quiet!r}).",
            )
        )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load benchmark option defaults from a YAML file.

    Profile format::

        warmup_time: 500    # ms
        test_time: 2000     # ms
        samples: 20
        quiet: false

    Returns:
        The parsed YAML as a dict.
    """
    import yaml

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    return data


def options_from_profile(
    profile_data: Mapping[str, Any],
    *,
    cli_overrides: Mapping[str, Any] | None = None,
) -> BenchOptions:
    """Build session default options from a profile and CLI values.

    CLI overrides take precedence over profile values; ``None`` CLI values
    mean "not given".  A profile may not set ``name``, since defaults are
    shared by every benchmark in a session.

    Raises:
        ValueError: On unknown keys, a ``name`` key, or invalid values.
    """
    merged = dict(profile_data)
    if "name" in merged:
        raise ValueError("Profiles set defaults for every benchmark and cannot set 'name'")
    for key, value in (cli_overrides or {}).items():
        if value is not None:
            merged[key] = value
    return resolve_options(merged)
