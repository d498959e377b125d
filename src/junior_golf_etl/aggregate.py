"""junior_golf_etl.aggregate

Read side of the snapshot artifacts: what the web UI consumes.

load_tournaments() reads a fixed list of snapshot files, concatenates their
tournaments and reports per-source metadata. Missing or malformed files
contribute nothing, and records that break the Tournament invariants are
dropped with a warning. When no tournaments load at all, the built-in sample
set is returned with using_mock=True.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from junior_golf_etl.models import AGE_GROUPS, GENDERS, STATUSES, Snapshot, Tournament
from junior_golf_etl.normalize import parse_iso_date
from junior_golf_etl.sample_data import sample_tournaments

log = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_FILES = ("usga.json", "ujga.json")


@dataclass
class SourceMeta:
    source: str
    scraped_at: str | None
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "scrapedAt": self.scraped_at, "count": self.count}


@dataclass
class AggregateResult:
    tournaments: list[Tournament] = field(default_factory=list)
    meta: list[SourceMeta] = field(default_factory=list)
    using_mock: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "tournaments": [t.to_dict() for t in self.tournaments],
            "meta": [m.to_dict() for m in self.meta],
            "usingMock": self.using_mock,
        }


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------

_STATE_RE = re.compile(r"^(?:[A-Z]{2})?$")


def _is_iso_date(value: Any) -> bool:
    return (
        isinstance(value, str)
        and len(value) == 10
        and parse_iso_date(value) is not None
    )


def tournament_problem(data: Any) -> str | None:
    """Return why a serialized tournament is unusable, or None when valid."""
    if not isinstance(data, dict):
        return "record is not an object"
    for key in ("id", "name"):
        if not isinstance(data.get(key), str) or not data[key].strip():
            return f"missing {key}"
    for key in ("date", "registrationDeadline"):
        if not _is_iso_date(data.get(key)):
            return f"invalid {key} {data.get(key)!r}"
    end = data.get("endDate")
    if end is not None and (not _is_iso_date(end) or end < data["date"]):
        return f"invalid endDate {end!r}"
    groups = data.get("ageGroups")
    if not isinstance(groups, list) or not groups or not all(g in AGE_GROUPS for g in groups):
        return f"invalid ageGroups {groups!r}"
    if data.get("gender") not in GENDERS:
        return f"invalid gender {data.get('gender')!r}"
    if data.get("status") not in STATUSES:
        return f"invalid status {data.get('status')!r}"
    state = data.get("state", "")
    if not isinstance(state, str) or not _STATE_RE.match(state):
        return f"invalid state {state!r}"
    return None


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def read_snapshot(path: Path) -> Snapshot | None:
    """Return the parsed snapshot, or None when missing or malformed.

    Individual records that fail validation are dropped with a warning; the
    rest of the snapshot is kept.
    """
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        records = data["tournaments"]
        if not isinstance(records, list):
            raise TypeError("'tournaments' is not a list")
        valid = []
        for index, record in enumerate(records):
            problem = tournament_problem(record)
            if problem:
                log.warning("Dropping record %d of %s: %s", index, path, problem)
                continue
            valid.append(record)
        return Snapshot.from_dict({**data, "tournaments": valid})
    except (OSError, ValueError, KeyError, TypeError) as exc:
        log.warning("Skipping malformed snapshot %s: %s", path, exc)
        return None


def load_tournaments(
    data_dir: Path,
    filenames: tuple[str, ...] | list[str] = DEFAULT_SNAPSHOT_FILES,
) -> AggregateResult:
    result = AggregateResult()
    for name in filenames:
        snapshot = read_snapshot(data_dir / name)
        if snapshot is None:
            continue
        result.tournaments.extend(snapshot.tournaments)
        result.meta.append(SourceMeta(
            source=snapshot.source,
            scraped_at=snapshot.scraped_at,
            count=len(snapshot.tournaments),
        ))

    if not result.tournaments:
        mock = sample_tournaments()
        log.info("No scraped tournaments found in %s; using sample data.", data_dir)
        return AggregateResult(
            tournaments=mock,
            meta=[SourceMeta(source="mock", scraped_at=None, count=len(mock))],
            using_mock=True,
        )
    return result


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

@dataclass
class SearchFilters:
    """Blank criteria match everything."""

    query: str = ""
    state: str = ""
    age_group: str = ""
    gender: str = ""
    status: str = ""


def _matches(t: Tournament, f: SearchFilters) -> bool:
    if f.query:
        q = f.query.lower()
        haystacks = (t.name, t.location, t.course_name)
        if not any(q in h.lower() for h in haystacks):
            return False
    if f.state and t.state != f.state:
        return False
    if f.age_group and f.age_group not in t.age_groups:
        return False
    if f.gender and t.gender != f.gender:
        return False
    if f.status and t.status != f.status:
        return False
    return True


def filter_tournaments(
    tournaments: list[Tournament],
    filters: SearchFilters,
) -> list[Tournament]:
    return [t for t in tournaments if _matches(t, filters)]


def find_tournament(tournaments: list[Tournament], tournament_id: str) -> Tournament | None:
    return next((t for t in tournaments if t.id == tournament_id), None)
