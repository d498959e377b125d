"""junior_golf_etl.adapters

Source adapters: one per upstream site, mapping RawEvent bundles into
Tournament records.

Processing order per raw event (index = position in the fetched list):
  1. Drop if the name is blank                     → records_dropped_missing_name
  2. Drop if the source's relevance filter rejects → records_filtered_irrelevant
  3. Drop if no valid start date can be derived    → records_dropped_bad_date
  4. Apply field parsers + inference rules
  5. id = "{id_prefix}-{index}"
  6. Drop repeats of (name, date) within the batch → records_duplicate

Adapters are retrieval-agnostic: run() takes any EventFetcher. A
bot-challenge page short-circuits to an empty list with a warning;
FetchError propagates to the pipeline driver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar

from junior_golf_etl.config import SourceConfig
from junior_golf_etl.inference import (
    infer_age_groups,
    infer_gender,
    infer_status,
    is_junior_event,
)
from junior_golf_etl.models import COURSE_PLACEHOLDER, RawEvent, Tournament
from junior_golf_etl.normalize import (
    LOCATION_SEPARATOR,
    default_registration_deadline,
    extract_state,
    normalize_space,
    parse_date_range,
    parse_entry_fee,
    parse_feed_date,
    parse_iso_date,
    parse_location,
    trailing_state_code,
)
from junior_golf_etl.retrieval import EventFetcher
from junior_golf_etl.shared import BotChallengeDetected, SourceCounters

log = logging.getLogger(__name__)


def _later_end(start_iso: str, end_iso: str | None) -> str | None:
    """Keep an end date only when it falls after the start date."""
    if end_iso and end_iso > start_iso:
        return end_iso
    return None


# ---------------------------------------------------------------------------
# Base adapter
# ---------------------------------------------------------------------------

@dataclass
class SourceAdapter:
    source: SourceConfig

    # Inference switches; subclasses override per upstream.
    clinic_age_groups: ClassVar[bool] = False
    distinguish_boys: ClassVar[bool] = True

    def run(
        self,
        fetcher: EventFetcher,
        now: datetime,
        counters: SourceCounters,
    ) -> list[Tournament]:
        """Fetch raw events for this source and normalize them."""
        try:
            raw_events = fetcher.fetch_raw_events(self.source)
        except BotChallengeDetected as exc:
            log.warning(
                "Bot detection triggered for %s (title=%r); returning no tournaments.",
                self.source.name,
                exc.title,
            )
            counters.bot_challenges += 1
            counters.warnings.append(str(exc))
            return []
        return self.build_tournaments(raw_events, now, counters)

    def build_tournaments(
        self,
        raw_events: list[RawEvent],
        now: datetime,
        counters: SourceCounters,
    ) -> list[Tournament]:
        counters.raw_events_read += len(raw_events)
        tournaments: list[Tournament] = []
        seen: set[tuple[str, str]] = set()

        for index, raw in enumerate(raw_events):
            t = self.map_event(raw, index, now, counters)
            if t is None:
                continue
            key = (t.name.lower(), t.date)
            if key in seen:
                counters.records_duplicate += 1
                continue
            seen.add(key)
            tournaments.append(t)

        counters.tournaments_kept += len(tournaments)
        log.info("Kept %d tournaments for %s", len(tournaments), self.source.name)
        return tournaments

    def map_event(
        self,
        raw: RawEvent,
        index: int,
        now: datetime,
        counters: SourceCounters,
    ) -> Tournament | None:
        raise NotImplementedError

    def is_relevant(self, name: str) -> bool:
        return True

    def make_id(self, index: int) -> str:
        return f"{self.source.id_prefix}-{index}"

    def _checked_name(self, raw: RawEvent, counters: SourceCounters) -> str | None:
        name = normalize_space(raw.name)
        if not name:
            counters.records_dropped_missing_name += 1
            return None
        if not self.is_relevant(name):
            counters.records_filtered_irrelevant += 1
            return None
        return name

    def _build(
        self,
        index: int,
        name: str,
        start_iso: str,
        end_iso: str | None,
        deadline_iso: str,
        location: str,
        state: str,
        course_name: str,
        now: datetime,
        marker: str | None = None,
        entry_fee: int | None = None,
        description: str | None = None,
    ) -> Tournament:
        return Tournament(
            id=self.make_id(index),
            name=name,
            date=start_iso,
            end_date=_later_end(start_iso, end_iso),
            location=location,
            state=state,
            course_name=course_name or COURSE_PLACEHOLDER,
            age_groups=infer_age_groups(name, clinic=self.clinic_age_groups),
            gender=infer_gender(name, distinguish_boys=self.distinguish_boys),
            registration_deadline=deadline_iso,
            status=infer_status(
                date.fromisoformat(start_iso),
                date.fromisoformat(deadline_iso),
                now,
                marker=marker,
            ),
            entry_fee=entry_fee,
            description=description,
        )


# ---------------------------------------------------------------------------
# BlueGolf schedule pages (UJGA, FCG, ...)
# ---------------------------------------------------------------------------

@dataclass
class BlueGolfAdapter(SourceAdapter):
    """Schedule tables with an ISO start attribute and "Mon D-D" text."""

    def _start_date(self, raw: RawEvent) -> date | None:
        start = parse_iso_date(raw.start_date_iso)
        if start is None and self.source.year:
            parsed = parse_date_range(raw.date_text, self.source.year)
            start = parse_iso_date(parsed.date)
        return start

    def map_event(
        self,
        raw: RawEvent,
        index: int,
        now: datetime,
        counters: SourceCounters,
    ) -> Tournament | None:
        name = self._checked_name(raw, counters)
        if name is None:
            return None

        start = self._start_date(raw)
        if start is None:
            counters.records_dropped_bad_date += 1
            return None
        start_iso = start.isoformat()

        # "Apr 2-3" carries the end day; the year comes from the start date.
        end_iso = parse_date_range(raw.date_text, start.year).end_date

        deadline = parse_iso_date(raw.registration_end)
        if deadline is None:
            if raw.registration_end:
                counters.warnings.append(
                    f"{self.make_id(index)}: unparseable registration end "
                    f"{raw.registration_end!r}; using default"
                )
            deadline_iso = default_registration_deadline(start_iso)
        else:
            deadline_iso = deadline.isoformat()

        course_name = raw.course_name
        location_text = normalize_space(raw.location_text) or ""
        if LOCATION_SEPARATOR in location_text:
            parts = parse_location(location_text)
            course_name = course_name or parts.course_name
            location, state = parts.location, parts.state
        else:
            location, state = location_text, trailing_state_code(location_text)

        return self._build(
            index,
            name,
            start_iso,
            end_iso,
            deadline_iso,
            location=location or self.source.default_state,
            state=state or self.source.default_state,
            course_name=course_name,
            now=now,
            marker=raw.status_marker,
            entry_fee=parse_entry_fee(raw.fee_text),
        )


# ---------------------------------------------------------------------------
# USGA championship feed
# ---------------------------------------------------------------------------

@dataclass
class UsgaAdapter(SourceAdapter):
    """National championship feed; only junior events are kept."""

    clinic_age_groups: ClassVar[bool] = True
    distinguish_boys: ClassVar[bool] = False

    def is_relevant(self, name: str) -> bool:
        return is_junior_event(name)

    def map_event(
        self,
        raw: RawEvent,
        index: int,
        now: datetime,
        counters: SourceCounters,
    ) -> Tournament | None:
        name = self._checked_name(raw, counters)
        if name is None:
            return None

        start_iso = parse_feed_date(raw.date_text)
        if not start_iso:
            counters.records_dropped_bad_date += 1
            return None
        end_iso = parse_feed_date(raw.end_date_text) or None

        location = raw.location_text
        return self._build(
            index,
            name,
            start_iso,
            end_iso,
            default_registration_deadline(start_iso),
            location=location,
            state=extract_state(location),
            course_name=raw.course_name or location,
            now=now,
            description=f"More info: {raw.event_url}" if raw.event_url else None,
        )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

ADAPTERS: dict[str, type[SourceAdapter]] = {
    "bluegolf": BlueGolfAdapter,
    "usga": UsgaAdapter,
}


def adapter_for(source: SourceConfig) -> SourceAdapter:
    try:
        return ADAPTERS[source.kind](source)
    except KeyError:
        raise ValueError(f"no adapter for source kind {source.kind!r}") from None
