"""Integration test fixtures.

Sources are served from in-memory RawEvent lists through StaticFetcher, so
the full scrape -> snapshot -> aggregate path runs without a browser or
network access.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from junior_golf_etl.config import SourceConfig
from junior_golf_etl.models import RawEvent
from junior_golf_etl.retrieval import StaticFetcher

# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

UJGA = SourceConfig(
    name="UJGA",
    kind="bluegolf",
    url="https://ujga.bluegolf.com/bluegolf/ujga26/schedule/index.htm",
    output="ujga.json",
    default_state="UT",
)

USGA = SourceConfig(
    name="USGA",
    kind="usga",
    url="https://www.usga.org/championships",
    output="usga.json",
    response_match="usga-events",
)

# ---------------------------------------------------------------------------
# Raw events
# ---------------------------------------------------------------------------

UJGA_EVENTS = [
    RawEvent(
        name="Spring Junior Classic",
        date_text="Apr 2-3",
        start_date_iso="2026-04-02",
        location_text="St. George, UT",
        course_name="Southgate GC",
        registration_end="2026-03-20",
        fee_text="$150",
        status_marker="Register",
    ),
    RawEvent(
        name="Boys' 14-Under Championship",
        date_text="Mar 10",
        start_date_iso="2026-03-10",
        location_text="Logan, UT",
        course_name="Logan River GC",
    ),
    RawEvent(name="", date_text="Apr 9", start_date_iso="2026-04-09"),
    RawEvent(name="Summer Series", date_text="TBD"),
]

USGA_EVENTS = [
    RawEvent(
        name="U.S. Junior Amateur",
        date_text="Mon Jul 20 00:00:00 EDT 2026",
        end_date_text="Sat Jul 25 00:00:00 EDT 2026",
        location_text="Charleston, S.C.",
        course_name="Country Club of Charleston",
        event_url="https://www.usga.org/junior-amateur",
    ),
    RawEvent(
        name="U.S. Open",
        date_text="Thu Jun 18 00:00:00 EDT 2026",
        location_text="Shinnecock Hills, N.Y.",
    ),
]


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sources() -> list[SourceConfig]:
    return [UJGA, USGA]


@pytest.fixture
def static_fetcher() -> StaticFetcher:
    return StaticFetcher({"UJGA": list(UJGA_EVENTS), "USGA": list(USGA_EVENTS)})


@pytest.fixture
def ujga() -> SourceConfig:
    return UJGA


@pytest.fixture
def usga() -> SourceConfig:
    return USGA
