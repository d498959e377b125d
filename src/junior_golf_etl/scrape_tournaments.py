"""junior_golf_etl.scrape_tournaments

Unified CLI entrypoint for the tournament pipeline.

Modes (--mode):
  scrape     fetch every configured source and write one snapshot per source (default)
  aggregate  read the snapshots back the way the web UI does and print JSON

Usage (scrape):
    python -m junior_golf_etl.scrape_tournaments \\
        --mode scrape \\
        --sources-file config/sources.yml \\
        --output-dir data

Usage (scrape one source, visible browser):
    python -m junior_golf_etl.scrape_tournaments --source UJGA --headed

Usage (aggregate, filtered):
    python -m junior_golf_etl.scrape_tournaments \\
        --mode aggregate --output-dir data --state UT --age-group U14
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import click

from junior_golf_etl.aggregate import (
    DEFAULT_SNAPSHOT_FILES,
    SearchFilters,
    filter_tournaments,
    load_tournaments,
)
from junior_golf_etl.config import (
    SourceConfigValidationError,
    default_catalog,
    load_source_catalog,
)
from junior_golf_etl.models import AGE_GROUPS, GENDERS, STATUSES
from junior_golf_etl.pipeline import run_pipeline
from junior_golf_etl.retrieval import (
    DEFAULT_GRACE_MS,
    DEFAULT_TIMEOUT_MS,
    FetchOptions,
    build_fetcher,
)
from junior_golf_etl.shared import RunCounters, build_run_report, utc_now_iso, write_run_report


def _parse_now(now: str | None, run_id: str) -> datetime:
    if not now:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(now)
    except ValueError:
        click.echo(f"[{run_id}] FATAL: --now must be an ISO-8601 timestamp, got {now!r}", err=True)
        sys.exit(1)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Unified CLI
# ---------------------------------------------------------------------------

@click.command()
@click.option(
    "--mode",
    default="scrape",
    type=click.Choice(["scrape", "aggregate"]),
    show_default=True,
    help="Pipeline mode",
)
@click.option("--output-dir", default="./data", type=click.Path(), show_default=True, help="Snapshot artifact directory")
# scrape flags
@click.option("--sources-file", default=None, type=click.Path(), help="YAML source definitions (defaults to built-in UJGA + USGA); aggregate mode reads their outputs")
@click.option("--source", "source_names", multiple=True, help="Only use these sources (repeatable)")
@click.option("--now", default=None, help="[scrape] Override the time (ISO-8601) used for status inference; scrapedAt stays wall-clock")
@click.option("--headed", is_flag=True, default=False, help="[scrape] Show the browser window")
@click.option("--timeout-ms", default=DEFAULT_TIMEOUT_MS, type=int, show_default=True, help="[scrape] Page/feed timeout in milliseconds")
@click.option("--grace-ms", default=DEFAULT_GRACE_MS, type=int, show_default=True, help="[scrape] Delay after network idle before reading the page")
@click.option(
    "--direct-feed/--no-direct-feed",
    default=False,
    show_default=True,
    help="[scrape] GET known feed URLs directly instead of intercepting them in a browser",
)
@click.option("--fail-on-error", is_flag=True, default=False, help="[scrape] Exit non-zero if any source failed")
@click.option("--run-id", default=None, help="Override UUID for log correlation")
@click.option("--reports-dir", default="./artifacts/reports", type=click.Path(), show_default=True)
# aggregate flags
@click.option("--query", default="", help="[aggregate] Substring over name, location and course")
@click.option("--state", default="", help="[aggregate] Two-letter state code")
@click.option("--age-group", default=None, type=click.Choice(AGE_GROUPS), help="[aggregate] Age group")
@click.option("--gender", default=None, type=click.Choice(GENDERS), help="[aggregate] Gender")
@click.option("--status", default=None, type=click.Choice(STATUSES), help="[aggregate] Status")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    show_default=True,
)
def main(
    mode: str,
    output_dir: str,
    sources_file: str | None,
    source_names: tuple[str, ...],
    now: str | None,
    headed: bool,
    timeout_ms: int,
    grace_ms: int,
    direct_feed: bool,
    fail_on_error: bool,
    run_id: str | None,
    reports_dir: str,
    query: str,
    state: str,
    age_group: str | None,
    gender: str | None,
    status: str | None,
    log_level: str,
) -> None:
    """Junior golf tournament scrape + aggregate CLI."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_id = run_id or str(uuid.uuid4())

    if mode == "aggregate":
        filenames: tuple[str, ...] | list[str] = DEFAULT_SNAPSHOT_FILES
        if sources_file:
            try:
                catalog = load_source_catalog(Path(sources_file))
                filenames = [s.output for s in catalog.select(list(source_names))]
            except (SourceConfigValidationError, FileNotFoundError) as exc:
                click.echo(f"[{run_id}] FATAL: {exc}", err=True)
                sys.exit(1)
        result = load_tournaments(Path(output_dir), filenames)
        result.tournaments = filter_tournaments(
            result.tournaments,
            SearchFilters(
                query=query,
                state=state.upper(),
                age_group=age_group or "",
                gender=gender or "",
                status=status or "",
            ),
        )
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    started_at = utc_now_iso()
    click.echo(f"[{run_id}] Starting {mode} run")

    try:
        catalog = load_source_catalog(Path(sources_file)) if sources_file else default_catalog()
        sources = catalog.select(list(source_names))
    except (SourceConfigValidationError, FileNotFoundError) as exc:
        click.echo(f"[{run_id}] FATAL: {exc}", err=True)
        sys.exit(1)
    if not sources:
        click.echo(f"[{run_id}] FATAL: no enabled sources to run", err=True)
        sys.exit(1)

    current = _parse_now(now, run_id)
    options = FetchOptions(
        headless=not headed,
        timeout_ms=timeout_ms,
        grace_ms=grace_ms,
        direct_feed=direct_feed,
    )
    counters = RunCounters()
    click.echo(f"[{run_id}] Sources: {', '.join(s.name for s in sources)}")

    written = run_pipeline(
        sources,
        lambda source: build_fetcher(source, options),
        Path(output_dir),
        current,
        counters,
    )

    click.echo(build_run_report(counters))
    for name, path in written.items():
        click.echo(f"[{run_id}] {name}: {path}")

    report_path = write_run_report(
        run_id,
        started_at,
        mode,
        {
            "output_dir": output_dir,
            "sources_file": sources_file,
            "sources_yaml_hash": catalog.yaml_hash,
            "now": current.isoformat(),
        },
        counters,
        reports_dir=Path(reports_dir),
    )
    click.echo(f"[{run_id}] Run report: {report_path}")

    if fail_on_error and counters.sources_failed:
        click.echo(
            f"[{run_id}] {counters.sources_failed} source(s) failed; exiting non-zero",
            err=True,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
