"""Field parsers for tournament schedule scraping.

All functions accept str | None and never raise on bad input: an
unparseable value comes back as "" / None and the adapter decides whether
the record survives.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

REGISTRATION_LEAD_DAYS = 14

# Fixed month table. Anything else maps to "01" (see parse_date_range).
MONTHS = {
    "Jan": "01", "Feb": "02", "Mar": "03", "Apr": "04", "May": "05", "Jun": "06",
    "Jul": "07", "Aug": "08", "Sep": "09", "Oct": "10", "Nov": "11", "Dec": "12",
}

# AP-style state abbreviations used by the USGA feed → postal codes.
STATE_MAP = {
    "Ala.": "AL", "Alaska": "AK", "Ariz.": "AZ", "Ark.": "AR", "Calif.": "CA",
    "Colo.": "CO", "Conn.": "CT", "Del.": "DE", "Fla.": "FL", "Ga.": "GA",
    "Hawaii": "HI", "Idaho": "ID", "Ill.": "IL", "Ind.": "IN", "Iowa": "IA",
    "Kan.": "KS", "Ky.": "KY", "La.": "LA", "Maine": "ME", "Md.": "MD",
    "Mass.": "MA", "Mich.": "MI", "Minn.": "MN", "Miss.": "MS", "Mo.": "MO",
    "Mont.": "MT", "Neb.": "NE", "Nev.": "NV", "N.H.": "NH", "N.J.": "NJ",
    "N.M.": "NM", "N.Y.": "NY", "N.C.": "NC", "N.D.": "ND", "Ohio": "OH",
    "Okla.": "OK", "Ore.": "OR", "Pa.": "PA", "R.I.": "RI", "S.C.": "SC",
    "S.D.": "SD", "Tenn.": "TN", "Texas": "TX", "Utah": "UT", "Vt.": "VT",
    "Va.": "VA", "Wash.": "WA", "W.Va.": "WV", "Wis.": "WI", "Wyo.": "WY",
    "D.C.": "DC",
}

LOCATION_SEPARATOR = "·"

_STATE_CODE_RE = re.compile(r"^[A-Z]{2}$")
_DATE_RANGE_RE = re.compile(r"^([A-Za-z]+)\s+(\d+)(?:\s*-\s*(\d+))?$")
_ISO_PREFIX_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})")
# "Thu Jan 15 01:00:00 EST 2026"
_FEED_DATE_RE = re.compile(
    r"^[A-Za-z]{3}\s+([A-Za-z]{3})\s+(\d{1,2})\s+\d{1,2}:\d{2}(?::\d{2})?\s+\S+\s+(\d{4})$"
)
_FEE_RE = re.compile(r"\$\s*(\d[\d,]*)")


# ---------------------------------------------------------------------------
# Rule 1: trim
# ---------------------------------------------------------------------------

def trim(value: str | None) -> str | None:
    """Strip leading/trailing whitespace; treat empty string as None."""
    if value is None:
        return None
    v = value.strip()
    return v if v else None


# ---------------------------------------------------------------------------
# Rule 2: normalize_space
# ---------------------------------------------------------------------------

def normalize_space(value: str | None) -> str | None:
    """Collapse internal runs of whitespace to single spaces, then trim."""
    v = trim(value)
    if v is None:
        return None
    return re.sub(r"\s+", " ", v)


# ---------------------------------------------------------------------------
# Rule 3: parse_date_range  ("Apr 2-3", "Apr 11")
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DateRange:
    date: str
    end_date: str | None = None


def parse_date_range(value: str | None, year: int) -> DateRange:
    """Parse a BlueGolf-style short date range into ISO dates in ``year``.

    "Apr 2-3" → DateRange("YYYY-04-02", "YYYY-04-03")
    "Apr 11"  → DateRange("YYYY-04-11", None)

    An unknown month abbreviation maps to January. Any other unrecognized
    shape, an impossible day, or an end day before the start day yields
    DateRange("") so the caller drops the record.
    """
    v = normalize_space(value)
    if v is None:
        return DateRange("")
    m = _DATE_RANGE_RE.match(v)
    if not m:
        return DateRange("")

    mon, start_day, end_day = m.groups()
    month = int(MONTHS.get(mon.title(), "01"))
    try:
        start = date(year, month, int(start_day))
        end = date(year, month, int(end_day)) if end_day else None
    except ValueError:
        return DateRange("")
    if end is not None and end < start:
        return DateRange("")
    return DateRange(start.isoformat(), end.isoformat() if end else None)


# ---------------------------------------------------------------------------
# Rule 4: parse_iso_date / parse_feed_date
# ---------------------------------------------------------------------------

def parse_iso_date(value: str | None) -> date | None:
    """Parse the leading 'YYYY-MM-DD' of a string, or None."""
    v = trim(value)
    if v is None:
        return None
    m = _ISO_PREFIX_RE.match(v)
    if not m:
        return None
    try:
        return date.fromisoformat(m.group(1))
    except ValueError:
        return None


def parse_feed_date(value: str | None) -> str:
    """Return an ISO date from a JSON-feed date string, or "".

    Accepts the feed's locale format ("Thu Jan 15 01:00:00 EST 2026"), plain
    ISO dates/timestamps, and "Jan 15, 2026". The calendar date is taken as
    written; the time and zone are ignored.
    """
    v = normalize_space(value)
    if v is None:
        return ""
    iso = parse_iso_date(v)
    if iso is not None:
        return iso.isoformat()
    m = _FEED_DATE_RE.match(v)
    if m:
        mon, day, year = m.groups()
        month = MONTHS.get(mon.title())
        if month is None:
            return ""
        try:
            return date(int(year), int(month), int(day)).isoformat()
        except ValueError:
            return ""
    try:
        return datetime.strptime(v, "%b %d, %Y").date().isoformat()
    except ValueError:
        return ""


def default_registration_deadline(start_iso: str) -> str:
    """Deadline assumed when the source publishes none: 14 days before start."""
    start = date.fromisoformat(start_iso)
    return (start - timedelta(days=REGISTRATION_LEAD_DAYS)).isoformat()


# ---------------------------------------------------------------------------
# Rule 5: normalize_region  ("Calif." → "CA")
# ---------------------------------------------------------------------------

def normalize_region(value: str | None) -> str:
    """Map a state name/abbreviation to a 2-letter code.

    Unmapped input falls back to dropping punctuation and whitespace and
    uppercasing the first two characters ("Foo." → "FO"). The fallback is
    best-effort only; it keeps 2-letter codes unchanged.
    """
    v = normalize_space(value)
    if v is None:
        return ""
    if v in STATE_MAP:
        return STATE_MAP[v]
    return re.sub(r"[\W_]", "", v).upper()[:2]


# ---------------------------------------------------------------------------
# Rule 6: extract_state / parse_location
# ---------------------------------------------------------------------------

def extract_state(location: str | None) -> str:
    """Return the state code for a "City, ST" string, or "".

    The trailing comma-delimited token is normalized; anything that does not
    come out as exactly two uppercase letters is discarded.
    """
    v = normalize_space(location)
    if v is None:
        return ""
    state = normalize_region(v.split(",")[-1])
    return state if _STATE_CODE_RE.match(state) else ""


def trailing_state_code(location: str | None) -> str:
    """Return the trailing comma token of "City, ST" when it is two letters, else ""."""
    v = normalize_space(location)
    if v is None:
        return ""
    state_part = v.split(",")[-1].strip()
    return state_part.upper() if re.fullmatch(r"[A-Za-z]{2}", state_part) else ""


@dataclass(frozen=True)
class LocationParts:
    course_name: str
    location: str
    state: str


def parse_location(value: str | None) -> LocationParts:
    """Split "Course · City, ST" into its parts.

    "Southgate GC · St. George, UT" → ("Southgate GC", "St. George, UT", "UT")

    Only a trailing token that is already exactly two letters counts as a
    state here. The region table is not consulted.
    """
    v = normalize_space(value) or ""
    parts = [p.strip() for p in v.split(LOCATION_SEPARATOR)]
    course_name = parts[0]
    location = parts[1] if len(parts) > 1 else ""
    return LocationParts(
        course_name=course_name,
        location=location,
        state=trailing_state_code(location),
    )


# ---------------------------------------------------------------------------
# Rule 7: parse_entry_fee  ("$150-$175" → 150)
# ---------------------------------------------------------------------------

def parse_entry_fee(value: str | None) -> int | None:
    """Return the first dollar amount in the text as an int, or None."""
    v = trim(value)
    if v is None:
        return None
    m = _FEE_RE.search(v)
    if not m:
        return None
    return int(m.group(1).replace(",", ""))
