"""junior_golf_etl.shared

Shared pieces used by the adapters, the pipeline driver and the CLI:
exceptions, per-source run counters, and run-report writing.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class FetchError(Exception):
    """Raised when a source page or feed cannot be retrieved (network, timeout)."""


class BotChallengeDetected(Exception):
    """Raised when the upstream served an anti-automation page instead of data."""

    def __init__(self, source: str, title: str) -> None:
        super().__init__(f"bot challenge for {source}: page title {title!r}")
        self.source = source
        self.title = title


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------

@dataclass
class SourceCounters:
    # Retrieval
    raw_events_read: int = 0
    bot_challenges: int = 0
    fetch_errors: int = 0
    # Normalization
    records_dropped_missing_name: int = 0
    records_dropped_bad_date: int = 0
    records_filtered_irrelevant: int = 0
    records_duplicate: int = 0
    tournaments_kept: int = 0
    # Output
    snapshot_path: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def records_dropped(self) -> int:
        return self.records_dropped_missing_name + self.records_dropped_bad_date

    def to_dict(self) -> dict[str, Any]:
        d = {k: v for k, v in self.__dict__.items() if k != "warnings"}
        d["records_dropped"] = self.records_dropped
        d["warnings"] = self.warnings[:50]
        return d


@dataclass
class RunCounters:
    sources: dict[str, SourceCounters] = field(default_factory=dict)
    sources_failed: int = 0
    warnings: list[str] = field(default_factory=list)

    def for_source(self, name: str) -> SourceCounters:
        if name not in self.sources:
            self.sources[name] = SourceCounters()
        return self.sources[name]

    @property
    def tournaments_kept(self) -> int:
        return sum(c.tournaments_kept for c in self.sources.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "sources": {name: c.to_dict() for name, c in self.sources.items()},
            "sources_failed": self.sources_failed,
            "tournaments_kept": self.tournaments_kept,
            "warnings": self.warnings,
        }


# ---------------------------------------------------------------------------
# Run report
# ---------------------------------------------------------------------------

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_run_report(counters: RunCounters) -> str:
    lines = ["=== Tournament Scrape Run Report ==="]
    for name, c in counters.sources.items():
        lines += [
            "",
            f"--- {name} ---",
            f"raw_events_read        : {c.raw_events_read}",
            f"dropped(missing name)  : {c.records_dropped_missing_name}",
            f"dropped(bad date)      : {c.records_dropped_bad_date}",
            f"filtered(irrelevant)   : {c.records_filtered_irrelevant}",
            f"duplicates             : {c.records_duplicate}",
            f"tournaments_kept       : {c.tournaments_kept}",
            f"bot_challenges         : {c.bot_challenges}",
            f"fetch_errors           : {c.fetch_errors}",
            f"snapshot               : {c.snapshot_path or '-'}",
        ]
    lines += [
        "",
        "--- Totals ---",
        f"tournaments_kept : {counters.tournaments_kept}",
        f"sources_failed   : {counters.sources_failed}",
    ]
    if counters.warnings:
        lines.append("")
        lines.append(f"Warnings ({len(counters.warnings)}):")
        for w in counters.warnings[:20]:
            lines.append(f"  {w}")
    return "\n".join(lines)


def write_run_report(
    run_id: str,
    started_at: str,
    mode: str,
    params: dict[str, Any],
    counters: RunCounters,
    reports_dir: Path = Path("./artifacts/reports"),
) -> Path:
    report = {
        "run_id": run_id,
        "mode": mode,
        "started_at": started_at,
        "finished_at": utc_now_iso(),
        **params,
        "counters": counters.to_dict(),
    }
    report_path = reports_dir / f"{run_id}.json"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(json.dumps(report, indent=2, default=str))
    return report_path
