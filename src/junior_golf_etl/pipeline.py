"""junior_golf_etl.pipeline

Pipeline driver: run each configured source through its adapter and persist
one snapshot artifact per source.

  - Sources run sequentially and share no mutable state.
  - Each snapshot fully replaces the previous file for that source.
  - A source that fails (FetchError or anything unexpected) is logged,
    counted, and skipped; its previous artifact is left untouched and the
    remaining sources still run.
  - A source that yields zero tournaments (including a bot-challenge page)
    still writes a valid, empty snapshot.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from junior_golf_etl.adapters import adapter_for
from junior_golf_etl.config import SourceConfig
from junior_golf_etl.models import Snapshot
from junior_golf_etl.retrieval import EventFetcher
from junior_golf_etl.shared import FetchError, RunCounters, SourceCounters

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Snapshot persistence
# ---------------------------------------------------------------------------

def write_snapshot(path: Path, snapshot: Snapshot) -> Path:
    """Overwrite ``path`` with the snapshot JSON.

    Written to a sibling temp file first and moved into place, so a reader
    never sees a half-written artifact.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_text(
            json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise
    return path


def _timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


def _wall_clock() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Per-source run
# ---------------------------------------------------------------------------

def run_source(
    source: SourceConfig,
    fetcher: EventFetcher,
    now: datetime,
    counters: SourceCounters,
    clock: Callable[[], datetime] = _wall_clock,
) -> Snapshot:
    """Invoke the adapter for one source and wrap its output.

    ``now`` drives status inference only; scrapedAt is read from ``clock``
    once the adapter has finished.
    """
    adapter = adapter_for(source)
    tournaments = adapter.run(fetcher, now, counters)
    return Snapshot(
        source=source.name,
        scraped_at=_timestamp(clock()),
        tournaments=tournaments,
    )


def run_pipeline(
    sources: list[SourceConfig],
    fetcher_for: Callable[[SourceConfig], EventFetcher],
    output_dir: Path,
    now: datetime,
    counters: RunCounters,
    clock: Callable[[], datetime] = _wall_clock,
) -> dict[str, Path]:
    """Scrape every source and write its snapshot.

    Returns {source name: artifact path} for the sources that succeeded.
    """
    written: dict[str, Path] = {}

    for source in sources:
        sc = counters.for_source(source.name)
        log.info("Scraping %s from %s", source.name, source.url)
        try:
            snapshot = run_source(source, fetcher_for(source), now, sc, clock)
            path = write_snapshot(output_dir / source.output, snapshot)
        except FetchError as exc:
            sc.fetch_errors += 1
            _record_failure(counters, sc, source, exc)
            log.error("Failed to scrape %s: %s", source.name, exc)
            continue
        except Exception as exc:  # noqa: BLE001
            _record_failure(counters, sc, source, exc)
            log.exception("Unexpected failure scraping %s", source.name)
            continue

        sc.snapshot_path = str(path)
        written[source.name] = path
        log.info(
            "Saved %d tournaments for %s to %s",
            len(snapshot.tournaments),
            source.name,
            path,
        )

    return written


def _record_failure(
    counters: RunCounters,
    sc: SourceCounters,
    source: SourceConfig,
    exc: Exception,
) -> None:
    counters.sources_failed += 1
    msg = f"{source.name}: {type(exc).__name__}: {exc}"
    sc.warnings.append(msg)
    counters.warnings.append(msg)
