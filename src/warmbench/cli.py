"""Command-line interface for warmbench.

Subcommands:
    warmbench run       Execute a benchmark script and save its reports
    warmbench show      Display report files as a table
    warmbench export    Export a report file to CSV/markdown
"""

from __future__ import annotations

import runpy
import sys
from pathlib import Path

import click

from warmbench import __version__
from warmbench.bench.results import DEFAULT_REPORT_PATH, PersistedStateCorrupt
from warmbench.bench.timing import ProtocolViolation
from warmbench.logging import close_logging, setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """warmbench: micro-benchmarks with warmup, sampling, and mergeable reports."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(DEFAULT_REPORT_PATH),
    show_default=True,
    help="Report file to merge results into.",
)
@click.option("--no-save", is_flag=True, default=False, help="Do not write the report file.")
@click.option("--table", is_flag=True, default=False, help="Print a table of mean times.")
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with default benchmark options.",
)
@click.option("--warmup-time", type=float, default=None, help="Warmup time in ms (default: 3000).")
@click.option("--test-time", type=float, default=None, help="Test time in ms (default: 10000).")
@click.option("--samples", type=int, default=None, help="Minimum samples (default: 100).")
@click.option("-v", "--verbose", is_flag=True, help="Log every sample.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress output.")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None)
def run(  # noqa: PLR0913
    script: Path,
    output: Path,
    no_save: bool,
    table: bool,
    profile_path: Path | None,
    warmup_time: float | None,
    test_time: float | None,
    samples: int | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run the benchmarks defined in SCRIPT and save their reports.

    SCRIPT is a Python file that calls ``warmbench.bench`` or
    ``warmbench.bench_fancy``.  Options given here become the defaults
    for every benchmark in the script.

    \b
    Examples:
        warmbench run benchmarks/sorting.py --table
        warmbench run bench.py --profile quick.yaml -o results/report.json
    """
    from warmbench.bench.display import report_table
    from warmbench.bench.options import load_profile, options_from_profile
    from warmbench.bench.results import default_session, save_reports

    cli_overrides: dict[str, object] = {
        "warmup_time": warmup_time,
        "test_time": test_time,
        "samples": samples,
        "quiet": True if quiet else None,
    }
    try:
        profile_data = load_profile(profile_path) if profile_path else {}
        session_defaults = options_from_profile(profile_data, cli_overrides=cli_overrides)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    saved_defaults = default_session.defaults
    default_session.defaults = session_defaults
    script_dir = str(script.resolve().parent)
    saved_argv = sys.argv
    sys.argv = [str(script)]
    sys.path.insert(0, script_dir)
    try:
        runpy.run_path(str(script), run_name="__main__")

        if not default_session:
            click.echo("No named benchmarks were recorded.", err=True)
        if not no_save:
            save_reports(output)
        if table:
            report_table()
    except (ProtocolViolation, PersistedStateCorrupt, ValueError) as exc:
        # ValueError covers invalid options passed to bench() by the script.
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904
    finally:
        sys.argv = saved_argv
        if script_dir in sys.path:
            sys.path.remove(script_dir)
        default_session.defaults = saved_defaults
        close_logging()


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@main.command("show")
@click.argument(
    "report_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def show(report_files: tuple[Path, ...]) -> None:
    """Display mean times from one or more report files.

    When a name appears in several files, the first file wins.
    """
    from warmbench.bench.display import format_report_table
    from warmbench.bench.results import BenchmarkReport, load_reports

    combined: dict[str, BenchmarkReport] = {}
    for path in report_files:
        try:
            reports = load_reports(path)
        except PersistedStateCorrupt as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(1) from exc
        for name, report in reports.items():
            combined.setdefault(name, report)

    click.echo(format_report_table(combined))


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


@main.command("export")
@click.argument("report_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "markdown"]),
    default="csv",
    help="Export format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout).",
)
def export(report_file: Path, fmt: str, output: Path | None) -> None:
    """Export a report file to CSV or Markdown.

    \b
    Examples:
        warmbench export report.json --format csv > samples.csv
        warmbench export report.json --format markdown -o REPORT.md
    """
    from warmbench.bench.export import export_csv, export_markdown
    from warmbench.bench.results import load_reports

    try:
        reports = load_reports(report_file)
    except PersistedStateCorrupt as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    text = export_csv(reports) if fmt == "csv" else export_markdown(reports)

    if output:
        output.write_text(text, encoding="utf-8")
        click.echo(f"Exported to {output}")
    else:
        click.echo(text, nl=False)
