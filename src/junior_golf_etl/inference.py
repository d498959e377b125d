"""junior_golf_etl.inference

Heuristics that classify a tournament's categorical fields from free text.

Every rule is a pure function over fixed keyword tables. Status inference
takes the current time as an argument; nothing here reads the clock.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

CLINIC_KEYWORDS = ("drive, chip", "drive chip")
JUNIOR_KEYWORDS = ("junior", "girls'") + CLINIC_KEYWORDS

# Checked in order; first match wins.
AGE_GROUP_RULES: tuple[tuple[tuple[str, ...], list[str]], ...] = (
    (("12-under", "12 under", "10-under"), ["U10", "U12"]),
    (("14-under", "14 under"), ["U14"]),
    (("16-under", "16 under"), ["U16"]),
)
CLINIC_AGE_GROUPS = ["U10", "U12", "U14"]
DEFAULT_AGE_GROUPS = ["U18"]

GIRLS_KEYWORDS = ("girls'", "girls", "women's")
BOYS_KEYWORDS = ("boys'", "boys")

OPEN_WINDOW = timedelta(days=14)


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(kw in text for kw in keywords)


# ---------------------------------------------------------------------------
# Age groups
# ---------------------------------------------------------------------------

def infer_age_groups(name: str, clinic: bool = False) -> list[str]:
    """Return the age groups implied by a tournament name. Never empty.

    clinic=True enables the junior skills-clinic category (Drive, Chip &
    Putt), which only some sources list.
    """
    lower = (name or "").lower()
    if clinic and _contains_any(lower, CLINIC_KEYWORDS):
        return list(CLINIC_AGE_GROUPS)
    for keywords, groups in AGE_GROUP_RULES:
        if _contains_any(lower, keywords):
            return list(groups)
    return list(DEFAULT_AGE_GROUPS)


# ---------------------------------------------------------------------------
# Gender
# ---------------------------------------------------------------------------

def infer_gender(name: str, distinguish_boys: bool = True) -> str:
    """Girls / Boys / Mixed from name keywords.

    Sources that do not run separate boys' fields pass
    distinguish_boys=False, so their events are Mixed unless girls-only.
    """
    lower = (name or "").lower()
    if _contains_any(lower, GIRLS_KEYWORDS):
        return "Girls"
    if distinguish_boys and _contains_any(lower, BOYS_KEYWORDS):
        return "Boys"
    return "Mixed"


# ---------------------------------------------------------------------------
# Relevance
# ---------------------------------------------------------------------------

def is_junior_event(name: str) -> bool:
    """True when a name from a mixed-audience feed looks like a junior event."""
    return _contains_any((name or "").lower(), JUNIOR_KEYWORDS)


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

def status_from_marker(marker: str | None) -> str | None:
    """Map an explicit source status cell to a status, or None.

    "Full" → Closed, anything mentioning results → Completed.
    """
    v = (marker or "").strip().lower()
    if not v:
        return None
    if v == "full":
        return "Closed"
    if "result" in v:
        return "Completed"
    return None


def _start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def _as_utc(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def infer_status(
    start: date,
    registration_deadline: date,
    now: datetime,
    marker: str | None = None,
) -> str:
    """Return exactly one of Open / Upcoming / Closed / Completed.

    An explicit marker always wins. Otherwise dates are compared as UTC
    midnight against ``now`` (naive values are taken as UTC):
      start < now                  → Completed
      registration_deadline < now  → Closed
      start - now < 14 days        → Open
      otherwise                    → Upcoming
    """
    explicit = status_from_marker(marker)
    if explicit is not None:
        return explicit

    current = _as_utc(now)
    start_at = _start_of_day(start)
    if start_at < current:
        return "Completed"
    if _start_of_day(registration_deadline) < current:
        return "Closed"
    if start_at - current < OPEN_WINDOW:
        return "Open"
    return "Upcoming"
